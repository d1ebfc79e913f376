"""Send keys modal.

Single-line input for typing text into a session.
"""

from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Checkbox, Input, Static


class SendKeysModal(ModalScreen[tuple[str, bool] | None]):
    """Modal for sending a line of text to a session.

    Returns ``(text, no_newline)`` on submit, or None if cancelled.
    """

    DEFAULT_CSS = """
    SendKeysModal {
        align: center middle;
    }

    SendKeysModal > Container {
        width: 70;
        height: auto;
        border: thick $background 80%;
        background: $surface;
        padding: 1 2;
    }

    SendKeysModal .modal-title {
        text-style: bold;
        color: $primary;
        text-align: center;
        margin-bottom: 1;
    }

    SendKeysModal #button-row {
        height: auto;
        align: center middle;
        margin-top: 1;
    }

    SendKeysModal #button-row Button {
        margin: 0 1;
        min-width: 12;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, session_id: str, **kwargs: Any) -> None:
        """Initialize the modal.

        Args:
            session_id: Session the text goes to, shown in the title.
            **kwargs: Additional arguments passed to ModalScreen.
        """
        super().__init__(**kwargs)
        self.session_id = session_id

    def compose(self) -> ComposeResult:
        """Compose the modal layout."""
        yield Container(
            Static(f"Send to {self.session_id}", classes="modal-title"),
            Input(placeholder="Text to send...", id="keys-input"),
            Checkbox("Don't press Enter", id="no-newline"),
            Horizontal(
                Button("Cancel", variant="default", id="cancel-btn"),
                Button("Send", variant="primary", id="send-btn"),
                id="button-row",
            ),
        )

    def on_mount(self) -> None:
        """Focus the input."""
        self.query_one("#keys-input", Input).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        if event.button.id == "cancel-btn":
            self.dismiss(None)
        elif event.button.id == "send-btn":
            self._submit()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Send on Enter."""
        if event.input.id == "keys-input":
            self._submit()

    def action_cancel(self) -> None:
        """Cancel and close the modal."""
        self.dismiss(None)

    def _submit(self) -> None:
        text = self.query_one("#keys-input", Input).value
        no_newline = self.query_one("#no-newline", Checkbox).value
        self.dismiss((text, no_newline))
