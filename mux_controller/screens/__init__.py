"""Textual screens."""

from mux_controller.screens.session_list import SessionListScreen
from mux_controller.screens.session_output import SessionOutputScreen

__all__ = [
    "SessionListScreen",
    "SessionOutputScreen",
]
