"""Session picker modal.

Lets the operator pick a session by typing part of its id, command or
directory. Candidates come from one directory snapshot and are annotated
with their command and directory; only an exact id is accepted.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Input, OptionList, Static
from textual.widgets.option_list import Option

from mux_controller.exceptions import NoSuchSessionError
from mux_controller.models import SessionEntry
from mux_controller.resolver import completion_candidates, filter_candidates, resolve

logger = logging.getLogger(__name__)


class SessionPickerModal(ModalScreen[str | None]):
    """Modal for choosing a session.

    Returns the resolved session id, or None if cancelled.
    """

    DEFAULT_CSS = """
    SessionPickerModal {
        align: center middle;
    }

    SessionPickerModal > Container {
        width: 90;
        height: auto;
        max-height: 80%;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }

    SessionPickerModal #title {
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    SessionPickerModal #candidates {
        height: auto;
        max-height: 20;
        margin-top: 1;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(
        self,
        entries: Iterable[SessionEntry],
        title: str = "Select Session",
        **kwargs: Any,
    ) -> None:
        """Initialize the picker.

        Args:
            entries: Directory snapshot to choose from.
            title: Prompt shown above the input.
            **kwargs: Additional arguments passed to ModalScreen.
        """
        super().__init__(**kwargs)
        self.entries = tuple(entries)
        self.prompt = title

    def compose(self) -> ComposeResult:
        """Compose the modal layout."""
        yield Container(
            Static(self.prompt, id="title"),
            Input(placeholder="Session id, command or directory...", id="query"),
            OptionList(*self._options(self.entries), id="candidates"),
        )

    def on_mount(self) -> None:
        """Focus the query input."""
        self.query_one("#query", Input).focus()

    def _options(self, entries: Iterable[SessionEntry]) -> list[Option]:
        return [
            Option(f"{session_id}{annotation}", id=session_id)
            for session_id, annotation in completion_candidates(entries).items()
        ]

    def on_input_changed(self, event: Input.Changed) -> None:
        """Narrow the candidate list as the query changes."""
        candidates = self.query_one("#candidates", OptionList)
        candidates.clear_options()
        candidates.add_options(self._options(filter_candidates(event.value, self.entries)))

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Accept the typed value if it is an exact session id."""
        self._choose(event.value)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        """Accept a candidate chosen from the list."""
        self._choose(event.option.id or "")

    def action_cancel(self) -> None:
        """Cancel and close modal."""
        self.dismiss(None)

    def _choose(self, value: str) -> None:
        try:
            session_id = resolve(value, self.entries)
        except NoSuchSessionError as e:
            logger.debug("Picker rejected %r", value)
            self.notify(str(e), severity="error")
            return
        self.dismiss(session_id)
