"""Session browser.

Table of every session the daemon listed at the last refresh, with per-row
show, send, close and attach actions.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Header, Static
from textual.widgets.data_table import CellDoesNotExist

from mux_controller.exceptions import MuxControllerError, StaleRowError
from mux_controller.logging_config import log_exception
from mux_controller.models import RowAction

if TYPE_CHECKING:
    from mux_controller.app import MuxControllerApp
    from mux_controller.list_controller import SessionListController

logger = logging.getLogger(__name__)


class SessionListScreen(Screen):
    """Browse and act on sessions.

    Rows keep the daemon's order. Sorting by column is display-only and
    does not touch the underlying rows.
    """

    BINDINGS = [
        Binding("enter", "show_session", "Show"),
        Binding("v", "show_session", "Show", show=False),
        Binding("s", "send_keys", "Send"),
        Binding("b", "send_buffer", "Compose"),
        Binding("k", "close_session", "Close"),
        Binding("a", "attach_session", "Attach"),
        Binding("g", "refresh", "Refresh"),
        Binding("n", "new_session", "New"),
    ]

    COLUMNS = ("ID", "Command", "Directory")

    def compose(self) -> ComposeResult:
        """Compose the screen layout."""
        yield Header()
        yield Container(
            DataTable(id="session-table"),
            Static("", id="empty-message"),
            id="main",
        )
        yield Footer()

    @property
    def controller(self) -> SessionListController:
        app: MuxControllerApp = self.app  # type: ignore[assignment]
        return app.services.sessions

    async def on_mount(self) -> None:
        """Set up the table and load sessions."""
        table = self.query_one("#session-table", DataTable)
        table.cursor_type = "row"
        table.add_columns(*self.COLUMNS)
        await self.action_refresh()

    async def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Show the session when Enter is pressed on a row.

        The DataTable consumes Enter itself and emits RowSelected instead.
        """
        await self.action_show_session()

    def populate_table(self) -> None:
        """Rebuild the table from the controller's rows."""
        table = self.query_one("#session-table", DataTable)
        empty_message = self.query_one("#empty-message", Static)

        table.clear()
        rows = self.controller.rows

        if not rows:
            table.display = False
            empty_message.update(
                "[dim]No sessions.\n\nPress [bold]n[/bold] to create one.[/dim]"
            )
            empty_message.display = True
            return

        table.display = True
        empty_message.display = False
        for entry in rows:
            table.add_row(entry.id, entry.command, entry.cwd or "-", key=entry.id)

    def _get_selected_session_id(self) -> str | None:
        """Return the session id of the highlighted row, if any."""
        table = self.query_one("#session-table", DataTable)
        if table.row_count == 0:
            return None
        try:
            cell_key = table.coordinate_to_cell_key(table.cursor_coordinate)
        except CellDoesNotExist:
            return None
        return str(cell_key.row_key.value)

    async def _run_row_action(
        self, action: RowAction, keys: str | None = None, no_newline: bool = False
    ) -> str | None:
        """Run an action on the selected row and report failures."""
        session_id = self._get_selected_session_id()
        if not session_id:
            self.notify("No session selected", severity="warning")
            return None

        try:
            result = await self.controller.row_action(
                session_id, action, keys, no_newline=no_newline
            )
        except StaleRowError as e:
            self.notify(str(e), severity="warning")
            return None
        except MuxControllerError as e:
            log_exception(
                logger,
                e,
                f"{action.value} on {session_id} failed",
                level=logging.WARNING,
                include_traceback=False,
            )
            self.notify(str(e), severity="error")
            return None

        if action is RowAction.CLOSE:
            self.populate_table()
        return result

    async def action_refresh(self) -> None:
        """Reload sessions from the daemon."""
        try:
            await self.controller.refresh()
        except MuxControllerError as e:
            self.notify(f"Refresh failed: {e}", severity="error")
        self.populate_table()

    async def action_show_session(self) -> None:
        """Show the selected session's output."""
        await self._run_row_action(RowAction.SHOW)

    async def action_close_session(self) -> None:
        """Close the selected session."""
        session_id = self._get_selected_session_id()
        await self._run_row_action(RowAction.CLOSE)
        if session_id and session_id not in self.controller.directory:
            self.notify(f"Closed {session_id}")

    async def action_attach_session(self) -> None:
        """Attach to the selected session's terminal."""
        label = await self._run_row_action(RowAction.ATTACH)
        if label:
            self.notify(f"Attached in {label}")

    def action_send_keys(self) -> None:
        """Prompt for text and send it to the selected session."""
        session_id = self._get_selected_session_id()
        if not session_id:
            self.notify("No session selected", severity="warning")
            return

        from mux_controller.screens.modals import SendKeysModal

        async def on_submit(result: tuple[str, bool] | None) -> None:
            if result is None:
                return
            keys, no_newline = result
            await self._run_row_action(RowAction.SEND, keys, no_newline=no_newline)

        self.app.push_screen(SendKeysModal(session_id), on_submit)

    def action_send_buffer(self) -> None:
        """Compose a multi-line payload and send it to the selected session."""
        session_id = self._get_selected_session_id()
        if not session_id:
            self.notify("No session selected", severity="warning")
            return

        from mux_controller.screens.modals import SendBufferModal

        async def on_commit(text: str | None) -> None:
            if text is None:
                return
            await self._run_row_action(RowAction.SEND, text.rstrip("\n"))

        self.app.push_screen(SendBufferModal(session_id), on_commit)

    def action_new_session(self) -> None:
        """Create a session and refresh the list."""
        from mux_controller.screens.modals import CreateSessionModal

        async def on_submit(result: tuple[str, str | None] | None) -> None:
            if result is None:
                return
            command, cwd = result
            app: MuxControllerApp = self.app  # type: ignore[assignment]
            try:
                session_id = await app.services.client.create(command, cwd)
            except MuxControllerError as e:
                self.notify(f"Create failed: {e}", severity="error")
                return
            self.notify(f"Created {session_id}")
            await self.action_refresh()

        self.app.push_screen(CreateSessionModal(default_cwd=os.getcwd()), on_submit)
