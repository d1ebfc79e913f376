"""Main Textual app class.

This module provides the Mux Controller TUI application.
"""

from __future__ import annotations

import logging
from typing import Any

from textual.app import App
from textual.binding import Binding

from mux_controller.api import apply_overrides
from mux_controller.config import load_global_config
from mux_controller.exceptions import MuxControllerError, record_error
from mux_controller.logging_config import log_exception
from mux_controller.models import AppSettings, RowAction
from mux_controller.screens.session_list import SessionListScreen
from mux_controller.screens.session_output import SessionOutputScreen
from mux_controller.services import ServiceContainer

logger = logging.getLogger(__name__)


class MuxControllerApp(App):
    """Terminal UI for browsing and driving daemon sessions."""

    TITLE = "Mux Controller"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("slash", "pick_session", "Find"),
    ]

    def __init__(
        self,
        services: ServiceContainer | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the application.

        Args:
            services: Prebuilt services; built from the config file when None.
            overrides: AppSettings fields overriding the config file.
        """
        super().__init__()
        self._config_error: str | None = None
        self.services = services or ServiceContainer.create(
            self._load_settings(overrides or {})
        )
        self.services.sessions.display = self.show_output

    def _load_settings(self, overrides: dict[str, Any]) -> AppSettings:
        """Load settings, falling back to defaults when the config is unusable."""
        try:
            settings = load_global_config().settings
        except MuxControllerError as e:
            log_exception(logger, e, "Using default settings", include_traceback=False)
            record_error(e)
            self._config_error = str(e)
            settings = AppSettings()
        return apply_overrides(settings, **overrides)

    def on_mount(self) -> None:
        """Show the session list."""
        if self._config_error:
            self.notify(f"Config ignored: {self._config_error}", severity="warning")
        self.push_screen(SessionListScreen())

    def show_output(self, session_id: str, text: str) -> None:
        """Display a session's output snapshot."""
        self.push_screen(
            SessionOutputScreen(
                session_id,
                text,
                interpret_color=self.services.settings.interpret_color,
            )
        )

    async def action_pick_session(self) -> None:
        """Pick any session by reference and show its output."""
        from mux_controller.screens.modals import SessionPickerModal

        try:
            entries = await self.services.sessions.refresh()
        except MuxControllerError as e:
            self.notify(f"Refresh failed: {e}", severity="error")
            return
        if isinstance(self.screen, SessionListScreen):
            self.screen.populate_table()

        async def on_pick(session_id: str | None) -> None:
            if session_id is None:
                return
            try:
                await self.services.sessions.row_action(session_id, RowAction.SHOW)
            except MuxControllerError as e:
                self.notify(str(e), severity="error")

        self.push_screen(SessionPickerModal(entries), on_pick)
