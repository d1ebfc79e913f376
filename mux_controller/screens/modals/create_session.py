"""Create session modal.

Collects the command for a new session and an optional working directory.
"""

from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static


class CreateSessionModal(ModalScreen[tuple[str, str | None] | None]):
    """Modal for creating a new session.

    Returns ``(command, cwd)`` on submit (``cwd`` is None when left blank),
    or None if cancelled.
    """

    DEFAULT_CSS = """
    CreateSessionModal {
        align: center middle;
    }

    CreateSessionModal > Container {
        width: 70;
        height: auto;
        border: thick $background 80%;
        background: $surface;
        padding: 1 2;
    }

    CreateSessionModal .modal-title {
        text-style: bold;
        color: $primary;
        text-align: center;
        margin-bottom: 1;
    }

    CreateSessionModal Input {
        margin-bottom: 1;
    }

    CreateSessionModal #button-row {
        height: auto;
        align: center middle;
    }

    CreateSessionModal #button-row Button {
        margin: 0 1;
        min-width: 12;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, default_cwd: str = "", **kwargs: Any) -> None:
        """Initialize the modal.

        Args:
            default_cwd: Pre-filled working directory.
            **kwargs: Additional arguments passed to ModalScreen.
        """
        super().__init__(**kwargs)
        self.default_cwd = default_cwd

    def compose(self) -> ComposeResult:
        """Compose the modal layout."""
        yield Container(
            Static("New Session", classes="modal-title"),
            Input(placeholder="Command to run...", id="command-input"),
            Input(
                value=self.default_cwd,
                placeholder="Working directory (daemon default if empty)",
                id="cwd-input",
            ),
            Horizontal(
                Button("Cancel", variant="default", id="cancel-btn"),
                Button("Create", variant="primary", id="create-btn"),
                id="button-row",
            ),
        )

    def on_mount(self) -> None:
        """Focus the command input."""
        self.query_one("#command-input", Input).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        if event.button.id == "cancel-btn":
            self.dismiss(None)
        elif event.button.id == "create-btn":
            self._submit()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Create on Enter from either input."""
        self._submit()

    def action_cancel(self) -> None:
        """Cancel and close the modal."""
        self.dismiss(None)

    def _submit(self) -> None:
        """Validate and return the command and directory."""
        command_input = self.query_one("#command-input", Input)
        command = command_input.value.strip()
        if not command:
            self.notify("Please enter a command", severity="warning")
            command_input.focus()
            return

        cwd = self.query_one("#cwd-input", Input).value.strip() or None
        self.dismiss((command, cwd))
