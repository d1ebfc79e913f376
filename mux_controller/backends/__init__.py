"""Attach backends.

- tmux: new tmux window per attach (TmuxAttachBackend)
- iterm: new iTerm2 tab per attach (ItermAttachBackend, ItermConnection)
"""

from mux_controller.backends.iterm import ItermAttachBackend, ItermConnection
from mux_controller.backends.tmux import TmuxAttachBackend

__all__ = [
    "ItermAttachBackend",
    "ItermConnection",
    "TmuxAttachBackend",
]
