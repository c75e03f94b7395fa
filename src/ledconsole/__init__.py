"""ledconsole -- Interactive console for an AnimatedLEDStrip server.

The operator types commands into a single-line editor; commands are
either handled locally (connect, disconnect, help, exit) or forwarded to
the remote server, and everything the server sends back is rendered into
a scrolling, paginated output view above the prompt.
"""

__version__ = "0.1.0"
