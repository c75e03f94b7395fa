"""Interactive session engine for ledconsole.

Public API:
    ScrollBuffer -- Paginated output lines
    LineEditor -- Input line with history
    Renderer -- Draws frames on a blessed terminal
    SessionController -- Event loop tying it all together
"""

from ledconsole.session.controller import SessionController
from ledconsole.session.editor import LineEditor
from ledconsole.session.renderer import Renderer
from ledconsole.session.scroll import ScrollBuffer

__all__ = ["LineEditor", "Renderer", "ScrollBuffer", "SessionController"]
