"""Inbound message formatting for ledconsole.

Turns raw server messages into human-readable text plus a category the
session uses to decide whether to show them.

Public API:
    MessageFormatter -- Abstract base class
    MalformedPayloadError -- Raised when a message cannot be decoded
    StripMessageFormatter -- Formatter for AnimatedLEDStrip messages
"""

from ledconsole.formatting.base import MalformedPayloadError, MessageFormatter
from ledconsole.formatting.strip import StripMessageFormatter

__all__ = ["MalformedPayloadError", "MessageFormatter", "StripMessageFormatter"]
