"""Send buffer modal.

A scratch text area for composing multi-line input. The whole buffer is
sent as one payload on commit and thrown away on cancel.
"""

from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Static, TextArea


class SendBufferModal(ModalScreen[str | None]):
    """Modal for composing a multi-line payload.

    Returns the buffer text on commit (Ctrl+S), or None on cancel (Esc).
    """

    DEFAULT_CSS = """
    SendBufferModal {
        align: center middle;
    }

    SendBufferModal > Container {
        width: 90;
        height: 80%;
        border: thick $background 80%;
        background: $surface;
        padding: 1 2;
    }

    SendBufferModal .modal-title {
        text-style: bold;
        color: $primary;
        text-align: center;
    }

    SendBufferModal .hint {
        color: $text-muted;
        text-align: center;
        margin-bottom: 1;
    }

    SendBufferModal #buffer {
        height: 1fr;
    }

    SendBufferModal #button-row {
        height: auto;
        align: center middle;
        margin-top: 1;
    }

    SendBufferModal #button-row Button {
        margin: 0 1;
        min-width: 12;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Discard"),
        Binding("ctrl+s", "commit", "Send"),
    ]

    def __init__(self, session_id: str, initial_text: str = "", **kwargs: Any) -> None:
        """Initialize the modal.

        Args:
            session_id: Session the buffer goes to, shown in the title.
            initial_text: Text to start the buffer with.
            **kwargs: Additional arguments passed to ModalScreen.
        """
        super().__init__(**kwargs)
        self.session_id = session_id
        self.initial_text = initial_text

    def compose(self) -> ComposeResult:
        """Compose the modal layout."""
        yield Container(
            Static(f"Compose input for {self.session_id}", classes="modal-title"),
            Static("Ctrl+S sends the buffer, Esc discards it", classes="hint"),
            TextArea(self.initial_text, id="buffer"),
            Horizontal(
                Button("Discard", variant="default", id="discard-btn"),
                Button("Send", variant="primary", id="send-btn"),
                id="button-row",
            ),
        )

    def on_mount(self) -> None:
        """Focus the buffer."""
        self.query_one("#buffer", TextArea).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        if event.button.id == "discard-btn":
            self.dismiss(None)
        elif event.button.id == "send-btn":
            self.action_commit()

    def action_cancel(self) -> None:
        """Discard the buffer."""
        self.dismiss(None)

    def action_commit(self) -> None:
        """Send the buffer, unless it is empty."""
        text = self.query_one("#buffer", TextArea).text
        if not text.strip():
            self.notify("Buffer is empty", severity="warning")
            return
        self.dismiss(text)
