"""Typed client for the session daemon's command protocol.

Each operation encodes its arguments into one daemon invocation and decodes
the textual response:

    create [--cwd DIR] COMMAND     -> new session id
    send [--no-newline] ID TEXT    -> ignored
    list                           -> lines of ID<TAB>COMMAND<TAB>CWD
    view [--no-color] ID           -> full terminal snapshot
    status ID                      -> one status line
    close ID                       -> ignored

Nothing here retries or checks ids against the directory cache.
"""

from __future__ import annotations

import logging

from .exceptions import ProtocolError, UnknownSessionError
from .models import SessionEntry
from .transport import Transport

logger = logging.getLogger(__name__)


class SessionClient:
    """Session daemon operations built on a Transport."""

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    async def create(self, command: str, cwd: str | None = None) -> str:
        """Create a session running ``command`` and return its id.

        Args:
            command: Shell command for the session.
            cwd: Working directory; the daemon default when None or empty.

        Returns:
            The daemon-assigned session id.
        """
        args = ["create"]
        if cwd:
            args += ["--cwd", cwd]
        args.append(command)

        session_id = (await self.transport.invoke(args)).strip()
        logger.info("Created session %s running %r", session_id, command)
        return session_id

    async def send(self, session_id: str, keys: str, no_newline: bool = False) -> None:
        """Send literal text to a session's input.

        Args:
            session_id: Target session.
            keys: Text to send.
            no_newline: When False the daemon presses Enter after the text.
        """
        args = ["send"]
        if no_newline:
            args.append("--no-newline")
        args += [session_id, keys]

        await self.transport.invoke(args)
        logger.debug("Sent %d chars to %s", len(keys), session_id)

    async def list(self) -> list[SessionEntry]:
        """Return the daemon's session table in daemon order.

        An empty response means there are no sessions.

        Raises:
            ProtocolError: If a line does not hold exactly three fields.
        """
        output = await self.transport.invoke(["list"])

        entries = []
        for line in output.splitlines():
            if not line.strip():
                continue
            try:
                entries.append(SessionEntry.from_line(line))
            except ValueError as e:
                raise ProtocolError(
                    f"Unexpected session line: {e}",
                    operation="list",
                    line=line,
                    cause=e,
                ) from e
        return entries

    async def view(self, session_id: str, no_color: bool = False) -> str:
        """Return the session's full current terminal contents, unmodified.

        Args:
            session_id: Session to read.
            no_color: Ask the daemon to strip ANSI sequences.
        """
        args = ["view"]
        if no_color:
            args.append("--no-color")
        args.append(session_id)
        return await self.transport.invoke(args)

    async def status(self, session_id: str) -> str:
        """Return the session's one-line status, whitespace-trimmed.

        Raises:
            UnknownSessionError: If the daemon reports nothing for the id.
        """
        status = (await self.transport.invoke(["status", session_id])).strip()
        if not status:
            raise UnknownSessionError(session_id, operation="status")
        return status

    async def close(self, session_id: str) -> None:
        """Ask the daemon to terminate a session. Safe to repeat."""
        await self.transport.invoke(["close", session_id])
        logger.info("Closed session %s", session_id)
