"""Programmatic API for Mux Controller.

Provides async methods for every user-facing operation so the CLI, scripts
and the TUI drive the daemon the same way. Session references are resolved
against a freshly refreshed directory before anything is sent.

Example:
    api = SessionControllerAPI()
    await api.initialize()
    result = await api.create_session("htop", cwd="/tmp")
    await api.send_keys(result.session_id, "q")
    await api.close_session(result.session_id)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from mux_controller.config import load_global_config
from mux_controller.exceptions import (
    MuxControllerError,
    UnknownSessionError,
    record_error,
)
from mux_controller.logging_config import log_exception
from mux_controller.models import AppSettings, SessionEntry
from mux_controller.resolver import resolve
from mux_controller.services import ServiceContainer

logger = logging.getLogger(__name__)


# =============================================================================
# Result Types
# =============================================================================


@dataclass
class APIResult:
    """Base result type for API operations."""

    success: bool
    error: str | None = None

    @classmethod
    def ok(cls) -> APIResult:
        return cls(success=True)

    @classmethod
    def fail(cls, error: str) -> APIResult:
        return cls(success=False, error=error)


@dataclass
class SessionResult(APIResult):
    """Result of an operation on one session."""

    session_id: str | None = None
    output: str | None = None


@dataclass
class SessionListResult(APIResult):
    """Result of listing sessions."""

    sessions: list[SessionEntry] = field(default_factory=list)


# =============================================================================
# API
# =============================================================================


class SessionControllerAPI:
    """Programmatic access to the session daemon.

    Errors never escape as exceptions; every method returns a result whose
    ``error`` holds the message to show the operator.
    """

    def __init__(self, services: ServiceContainer | None = None) -> None:
        self._services = services

    @property
    def is_initialized(self) -> bool:
        """Check if the API has been initialized."""
        return self._services is not None

    @property
    def services(self) -> ServiceContainer:
        """The service container; requires ``initialize()`` first."""
        if self._services is None:
            raise RuntimeError("SessionControllerAPI.initialize() has not been called")
        return self._services

    async def initialize(self, **overrides: object) -> APIResult:
        """Load configuration and build services.

        Args:
            **overrides: AppSettings fields to override (None values ignored).

        Returns:
            APIResult indicating success or failure.
        """
        if self._services is not None:
            return APIResult.ok()

        try:
            settings = load_global_config().settings
        except MuxControllerError as e:
            logger.error("Failed to load configuration: %s", e)
            return APIResult.fail(f"Failed to load configuration: {e}")

        settings = apply_overrides(settings, **overrides)
        self._services = ServiceContainer.create(settings)
        return APIResult.ok()

    async def resolve(self, reference: str) -> str:
        """Refresh the directory and resolve ``reference`` to a session id.

        Raises:
            NoSuchSessionError: If the reference matches no listed session.
            ExecutionError: If the daemon cannot be run.
        """
        directory = self.services.directory
        await directory.refresh()
        return resolve(reference, directory.entries())

    async def list_sessions(self) -> SessionListResult:
        """List all sessions the daemon knows."""
        try:
            entries = await self.services.directory.refresh()
        except MuxControllerError as e:
            return self._fail(SessionListResult, e)
        return SessionListResult(success=True, sessions=list(entries))

    async def create_session(self, command: str, cwd: str | None = None) -> SessionResult:
        """Create a session running ``command`` in ``cwd``."""
        try:
            session_id = await self.services.client.create(command, cwd)
        except MuxControllerError as e:
            return self._fail(SessionResult, e)
        if not session_id:
            return SessionResult(success=False, error="Daemon returned no session id")
        return SessionResult(success=True, session_id=session_id)

    async def view_session(
        self, reference: str, no_color: bool | None = None
    ) -> SessionResult:
        """Return a session's current terminal contents.

        Args:
            reference: Session reference.
            no_color: Strip colour; defaults to the ``interpret_color`` setting.
        """
        if no_color is None:
            no_color = not self.services.settings.interpret_color
        try:
            session_id = await self.resolve(reference)
            output = await self.services.client.view(session_id, no_color=no_color)
        except MuxControllerError as e:
            return self._fail(SessionResult, e)
        return SessionResult(success=True, session_id=session_id, output=output)

    async def session_status(self, reference: str) -> SessionResult:
        """Return a session's one-line status."""
        try:
            session_id = await self.resolve(reference)
            status = await self.services.client.status(session_id)
        except UnknownSessionError as e:
            await self._refresh_quietly()
            return self._fail(SessionResult, e)
        except MuxControllerError as e:
            return self._fail(SessionResult, e)
        return SessionResult(success=True, session_id=session_id, output=status)

    async def send_keys(
        self, reference: str, text: str, no_newline: bool = False
    ) -> SessionResult:
        """Send ``text`` to a session, pressing Enter unless ``no_newline``."""
        try:
            session_id = await self.resolve(reference)
            await self.services.client.send(session_id, text, no_newline=no_newline)
        except MuxControllerError as e:
            return self._fail(SessionResult, e)
        return SessionResult(success=True, session_id=session_id)

    async def send_buffer(self, reference: str, text: str) -> SessionResult:
        """Send a composed multi-line buffer as one payload.

        Trailing newlines are dropped and Enter is pressed once after the
        payload. An empty buffer sends nothing.
        """
        payload = text.rstrip("\n")
        if not payload.strip():
            return SessionResult(success=False, error="Nothing to send")
        return await self.send_keys(reference, payload)

    async def close_session(self, reference: str) -> SessionResult:
        """Close a session and refresh the directory."""
        try:
            session_id = await self.resolve(reference)
            await self.services.client.close(session_id)
            await self.services.directory.refresh()
        except MuxControllerError as e:
            return self._fail(SessionResult, e)
        return SessionResult(success=True, session_id=session_id)

    async def attach_session(self, reference: str) -> SessionResult:
        """Attach to a session through the configured backend."""
        try:
            session_id = await self.resolve(reference)
            label = await self.services.dispatcher.attach(session_id)
        except MuxControllerError as e:
            return self._fail(SessionResult, e)
        return SessionResult(success=True, session_id=session_id, output=label)

    async def _refresh_quietly(self) -> None:
        """Refresh the directory after the daemon reported an unknown session."""
        try:
            await self.services.directory.refresh()
        except MuxControllerError as e:
            logger.warning("Directory refresh failed: %s", e)

    @staticmethod
    def _fail(result_type: type[APIResult], error: MuxControllerError):  # noqa: ANN205
        log_exception(
            logger, error, "Operation failed", level=logging.WARNING, include_traceback=False
        )
        record_error(error)
        return result_type(success=False, error=str(error))


def apply_overrides(settings: AppSettings, **overrides: object) -> AppSettings:
    """Return a copy of ``settings`` with non-None overrides applied."""
    changes = {key: value for key, value in overrides.items() if value is not None}
    return replace(settings, **changes) if changes else settings
