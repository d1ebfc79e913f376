"""Custom exception hierarchy for Mux Controller.

This module provides a structured exception hierarchy that enables:
- Consistent error handling across the client, the TUI and the CLI
- Rich error context for debugging
- User-friendly error messages

Every error here is local and recoverable by the operator. None of them
should take down the hosting process.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


class MuxControllerError(Exception):
    """Base exception for all Mux Controller errors.

    Attributes:
        message: Human-readable error description.
        context: Additional context for debugging.
        timestamp: When the error occurred.
    """

    def __init__(
        self,
        message: str,
        *,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.message = message
        self.context = context or {}
        self.timestamp = datetime.now()
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message


# =============================================================================
# Daemon Communication Errors
# =============================================================================


class ExecutionError(MuxControllerError):
    """Raised when the daemon executable cannot be run to completion.

    Covers a missing executable, a failure to start, a timeout, and (in
    strict mode only) a non-zero exit status.
    """

    def __init__(
        self,
        message: str = "Failed to run session daemon",
        *,
        command: str | None = None,
        returncode: int | None = None,
        timeout: float | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if command:
            ctx["command"] = command
        if returncode is not None:
            ctx["returncode"] = returncode
        if timeout is not None:
            ctx["timeout"] = timeout
        super().__init__(message, context=ctx, cause=cause)


class ProtocolError(MuxControllerError):
    """Raised when a daemon response does not have the expected shape."""

    def __init__(
        self,
        message: str = "Malformed daemon response",
        *,
        operation: str | None = None,
        line: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if operation:
            ctx["operation"] = operation
        if line is not None:
            ctx["line"] = line[:100]
        super().__init__(message, context=ctx, cause=cause)


# =============================================================================
# Session Errors
# =============================================================================


class SessionError(MuxControllerError):
    """Base class for session-related errors."""

    pass


class UnknownSessionError(SessionError):
    """Raised when the daemon no longer knows a session id.

    Callers acting on a cached entry should refresh the directory.
    """

    def __init__(
        self,
        session_id: str,
        *,
        operation: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        ctx["session_id"] = session_id
        if operation:
            ctx["operation"] = operation
        self.session_id = session_id
        super().__init__(
            f"Daemon does not know session: {session_id}", context=ctx, cause=cause
        )


class NoSuchSessionError(SessionError):
    """Raised when a session reference matches no cached directory entry."""

    def __init__(
        self,
        query: str,
        *,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        ctx["query"] = query
        self.query = query
        super().__init__(f"No such session: {query}", context=ctx, cause=cause)


class StaleRowError(SessionError):
    """Raised when a row action targets a session the directory no longer has."""

    def __init__(
        self,
        row_id: str,
        *,
        action: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        ctx["row_id"] = row_id
        if action:
            ctx["action"] = action
        self.row_id = row_id
        super().__init__(
            f"Session {row_id} is no longer listed; refresh the session list",
            context=ctx,
            cause=cause,
        )


# =============================================================================
# Attach Errors
# =============================================================================


class AttachError(MuxControllerError):
    """Base class for attach-related errors."""

    pass


class UnsupportedBackendError(AttachError):
    """Raised when no attach routine is registered for the configured backend."""

    def __init__(
        self,
        backend: str,
        *,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        ctx["backend"] = backend
        self.backend = backend
        super().__init__(f"Unsupported attach backend: {backend}", context=ctx, cause=cause)


class BackendConnectionError(AttachError):
    """Raised when an attach backend cannot reach its terminal emulator."""

    def __init__(
        self,
        message: str = "Failed to connect to attach backend",
        *,
        backend: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if backend:
            ctx["backend"] = backend
        super().__init__(message, context=ctx, cause=cause)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigError(MuxControllerError):
    """Base class for configuration-related errors."""

    pass


class ConfigLoadError(ConfigError):
    """Raised when configuration file fails to load."""

    def __init__(
        self,
        message: str = "Failed to load configuration",
        *,
        file_path: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if file_path:
            ctx["file_path"] = file_path
        super().__init__(message, context=ctx, cause=cause)


class ConfigValidationError(ConfigError):
    """Raised when configuration validation fails."""

    def __init__(
        self,
        message: str = "Configuration validation failed",
        *,
        field: str | None = None,
        value: Any = None,
        expected: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if field:
            ctx["field"] = field
        if value is not None:
            ctx["value"] = str(value)[:100]
        if expected:
            ctx["expected"] = expected
        super().__init__(message, context=ctx, cause=cause)


class ConfigSaveError(ConfigError):
    """Raised when configuration fails to save."""

    def __init__(
        self,
        message: str = "Failed to save configuration",
        *,
        file_path: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if file_path:
            ctx["file_path"] = file_path
        super().__init__(message, context=ctx, cause=cause)


# =============================================================================
# Error Registry
# =============================================================================


@dataclass
class ErrorStats:
    """Track error statistics for monitoring."""

    total_count: int = 0
    by_type: dict[str, int] = field(default_factory=dict)
    recent_errors: list[tuple[datetime, str, str]] = field(default_factory=list)
    max_recent: int = 100

    def record(self, error: Exception) -> None:
        """Record an error occurrence."""
        self.total_count += 1
        type_name = type(error).__name__
        self.by_type[type_name] = self.by_type.get(type_name, 0) + 1

        self.recent_errors.append((datetime.now(), type_name, str(error)[:200]))
        if len(self.recent_errors) > self.max_recent:
            self.recent_errors.pop(0)


# Global error stats tracker
error_stats = ErrorStats()


def record_error(error: Exception) -> None:
    """Record an error to global stats."""
    error_stats.record(error)
