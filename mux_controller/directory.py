"""Session directory: a pull-refreshed snapshot of the daemon's sessions.

The daemon is the state of record. The directory only remembers what the
last ``list`` call returned and is never updated behind the caller's back.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import datetime

from .client import SessionClient
from .models import SessionEntry

logger = logging.getLogger(__name__)


class SessionDirectory:
    """Cached, point-in-time table of known sessions.

    ``refresh`` builds the new table completely before swapping it in with a
    single assignment, so readers see either the previous or the new
    snapshot. If the daemon call fails the previous snapshot stays in place.
    """

    def __init__(self, client: SessionClient) -> None:
        self.client = client
        self._entries: tuple[SessionEntry, ...] = ()
        self.refreshed_at: datetime | None = None

    async def refresh(self) -> tuple[SessionEntry, ...]:
        """Reload the table from the daemon and return the new snapshot."""
        entries = tuple(await self.client.list())
        self._entries = entries
        self.refreshed_at = datetime.now()
        logger.debug("Directory refreshed: %d sessions", len(entries))
        return entries

    def entries(self) -> tuple[SessionEntry, ...]:
        """Return the current snapshot without contacting the daemon."""
        return self._entries

    def ids(self) -> list[str]:
        """Return the session ids of the current snapshot."""
        return [entry.id for entry in self._entries]

    def get(self, session_id: str) -> SessionEntry | None:
        """Return the cached entry for ``session_id``, if any."""
        for entry in self._entries:
            if entry.id == session_id:
                return entry
        return None

    def __contains__(self, session_id: object) -> bool:
        return any(entry.id == session_id for entry in self._entries)

    def __iter__(self) -> Iterator[SessionEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
