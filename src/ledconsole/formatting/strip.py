"""Formatter for AnimatedLEDStrip server messages.

Each message starts with a four-character type prefix and a colon,
followed by a JSON payload, e.g. ``DATA:{"animation": "Color", ...}``.
Messages without a known prefix are plain text and pass through as is.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ledconsole.domain.models import Category
from ledconsole.formatting.base import MalformedPayloadError, MessageFormatter

logger = logging.getLogger(__name__)

PREFIX_LENGTH = 4


# ---------------------------------------------------------------------------
# Payload models
# ---------------------------------------------------------------------------


class _Payload(BaseModel):
    """Permissive payload: unknown fields are kept and shown."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    title: str = Field(default="", exclude=True)

    def heading(self) -> str:
        return self.title

    def to_human_readable(self) -> str:
        lines = [self.heading()]
        for name, value in self.model_dump(by_alias=True).items():
            lines.append(f"  {name}: {_format_value(name, value)}")
        return "\n".join(lines)


class AnimationData(_Payload):
    title: str = Field(default="AnimationData", exclude=True)

    animation: str = Field(default="Color")
    colors: list[Any] = Field(default_factory=list)
    center: int = Field(default=-1)
    continuous: bool | None = Field(default=None)
    delay: int = Field(default=-1)
    delay_mod: float = Field(default=1.0, alias="delayMod")
    direction: str = Field(default="FORWARD")
    distance: int = Field(default=-1)
    id: str = Field(default="")
    section: str = Field(default="")
    spacing: int = Field(default=-1)

    def heading(self) -> str:
        return f"{self.title} {self.id}".rstrip()


class StripInfo(_Payload):
    title: str = Field(default="StripInfo", exclude=True)

    num_leds: int = Field(default=0, alias="numLEDs")
    pin: int | None = Field(default=None)
    image_debugging: bool = Field(default=False, alias="imageDebugging")
    file_name: str | None = Field(default=None, alias="fileName")
    renders_before_save: int = Field(default=-1, alias="rendersBeforeSave")
    thread_count: int = Field(default=100, alias="threadCount")


class EndAnimation(_Payload):
    title: str = Field(default="End of animation", exclude=True)

    id: str = Field(default="")

    def to_human_readable(self) -> str:
        return f"{self.title} {self.id}".rstrip()


class Section(_Payload):
    title: str = Field(default="Section", exclude=True)

    name: str = Field(default="")
    start_pixel: int = Field(default=0, alias="startPixel")
    end_pixel: int = Field(default=0, alias="endPixel")
    physical_start: int = Field(default=0, alias="physicalStart")

    def heading(self) -> str:
        return f"{self.title} {self.name}".rstrip()


class AnimationInfo(_Payload):
    title: str = Field(default="Animation", exclude=True)

    name: str = Field(default="")
    abbr: str = Field(default="")
    description: str = Field(default="")
    repetitive: bool = Field(default=False)
    minimum_colors: int = Field(default=0, alias="minimumColors")
    unlimited_colors: bool = Field(default=False, alias="unlimitedColors")

    def heading(self) -> str:
        return f"{self.title} {self.name}".rstrip()


# prefix -> (model, category)
PAYLOAD_TYPES: dict[str, tuple[type[_Payload], Category]] = {
    "DATA": (AnimationData, Category.ANIMATION_DATA),
    "SINF": (StripInfo, Category.STRIP_INFO),
    "END ": (EndAnimation, Category.END_ANIMATION),
    "SECT": (Section, Category.SECTION),
    "AINF": (AnimationInfo, Category.ANIMATION_INFO),
}


def _format_value(name: str, value: Any) -> str:
    if name == "colors" and isinstance(value, list):
        return "[" + ", ".join(_format_color(c) for c in value) + "]"
    return str(value)


def _format_color(color: Any) -> str:
    if isinstance(color, dict) and isinstance(color.get("colors"), list):
        return "[" + ", ".join(_format_color(c) for c in color["colors"]) + "]"
    if isinstance(color, int):
        return f"0x{color:06X}"
    return str(color)


# ---------------------------------------------------------------------------
# Formatter
# ---------------------------------------------------------------------------


class StripMessageFormatter(MessageFormatter):
    """Decodes typed JSON messages into readable multi-line text."""

    def format(self, raw: str) -> tuple[str, Category]:
        prefix = raw[:PREFIX_LENGTH]
        if prefix not in PAYLOAD_TYPES or raw[PREFIX_LENGTH : PREFIX_LENGTH + 1] != ":":
            return raw, Category.MESSAGE

        model, category = PAYLOAD_TYPES[prefix]
        payload = raw[PREFIX_LENGTH + 1 :]
        try:
            decoded = model.model_validate_json(payload)
        except ValueError as e:
            logger.debug("Could not decode %r message: %s", prefix, e)
            raise MalformedPayloadError(f"Malformed {prefix.strip()} payload", raw=raw) from e
        return decoded.to_human_readable(), category
