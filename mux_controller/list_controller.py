"""Session list controller.

A row-addressable view over the session directory. Rows mirror the
directory 1:1 in the order the daemon listed them; each row is keyed by its
session id. Per-row actions go to the protocol client or the attach
dispatcher and fail loudly when the row has gone stale.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable

from .attach import AttachDispatcher
from .client import SessionClient
from .directory import SessionDirectory
from .exceptions import StaleRowError
from .models import RowAction, SessionEntry

logger = logging.getLogger(__name__)

DisplayCallback = Callable[[str, str], "Awaitable[None] | None"]


class SessionListController:
    """Refreshable, row-addressable presentation of the session directory.

    Attributes:
        directory: Snapshot cache the rows are built from.
        client: Protocol client used for show/send/close.
        dispatcher: Attach dispatcher used for attach.
        display: Called with ``(session_id, text)`` when a row is shown.
        no_color: Request colour-stripped output for show.
    """

    def __init__(
        self,
        directory: SessionDirectory,
        client: SessionClient,
        dispatcher: AttachDispatcher,
        *,
        display: DisplayCallback | None = None,
        no_color: bool = False,
    ) -> None:
        self.directory = directory
        self.client = client
        self.dispatcher = dispatcher
        self.display = display
        self.no_color = no_color
        self._rows: tuple[SessionEntry, ...] = ()

    @property
    def rows(self) -> tuple[SessionEntry, ...]:
        """Current rows, in daemon order."""
        return self._rows

    async def refresh(self) -> tuple[SessionEntry, ...]:
        """Pull a fresh directory snapshot and rebuild the rows from it."""
        self._rows = await self.directory.refresh()
        return self._rows

    def row(self, row_id: str) -> SessionEntry:
        """Return the row for ``row_id``.

        Raises:
            StaleRowError: If the row is gone from the rows or the directory.
        """
        for entry in self._rows:
            if entry.id == row_id:
                if row_id not in self.directory:
                    break
                return entry
        raise StaleRowError(row_id)

    async def row_action(
        self,
        row_id: str,
        action: RowAction,
        keys: str | None = None,
        *,
        no_newline: bool = False,
    ) -> str | None:
        """Run a per-row action.

        Args:
            row_id: Session id of the row.
            action: What to do with it.
            keys: Text to send, required for ``RowAction.SEND``.
            no_newline: Send ``keys`` without pressing Enter.

        Returns:
            The session output for ``SHOW``, the surface label for ``ATTACH``,
            otherwise None.

        Raises:
            StaleRowError: If the row's session is no longer listed.
            ValueError: If ``SEND`` is requested without keys.
        """
        try:
            entry = self.row(row_id)
        except StaleRowError as e:
            raise StaleRowError(row_id, action=action.value) from e

        if action is RowAction.SHOW:
            text = await self.client.view(entry.id, no_color=self.no_color)
            await self._display(entry.id, text)
            return text

        if action is RowAction.SEND:
            if keys is None:
                raise ValueError("send requires keys")
            await self.client.send(entry.id, keys, no_newline=no_newline)
            return None

        if action is RowAction.CLOSE:
            await self.client.close(entry.id)
            await self.refresh()
            return None

        if action is RowAction.ATTACH:
            return await self.dispatcher.attach(entry.id)

        raise ValueError(f"Unknown row action: {action}")

    async def _display(self, session_id: str, text: str) -> None:
        """Hand session output to the display callback, if any."""
        if self.display is None:
            return
        result = self.display(session_id, text)
        if inspect.isawaitable(result):
            await result
