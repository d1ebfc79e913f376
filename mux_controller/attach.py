"""Attach dispatch.

Attaching means joining a session's live terminal in a terminal emulator.
The dispatcher knows only two things: how to label the surface used for an
attach and which single line to submit to it. Everything else belongs to the
backend registered for the configured backend type.
"""

from __future__ import annotations

import logging
import shlex
from typing import Any, Protocol, runtime_checkable

from .exceptions import UnsupportedBackendError
from .models import AttachBackendType

logger = logging.getLogger(__name__)


@runtime_checkable
class AttachBackend(Protocol):
    """A terminal emulator that can host an attach.

    A backend opens (or finds) a surface by label and submits one line of
    text to it, followed by Enter.
    """

    async def open_surface(self, label: str) -> Any:
        """Open or reuse the surface identified by ``label``."""
        ...

    async def submit_line(self, surface: Any, line: str) -> None:
        """Type ``line`` into ``surface`` and press Enter."""
        ...


class AttachDispatcher:
    """Routes attach requests to the backend selected in configuration.

    Attributes:
        backend_type: The configured backend.
        namespace: Prefix of daemon-side terminal names.
        attach_command: Program that joins a daemon-side terminal.
    """

    def __init__(
        self,
        backend_type: AttachBackendType,
        *,
        namespace: str = "muxd",
        attach_command: str = "tmux attach",
    ) -> None:
        self.backend_type = backend_type
        self.namespace = namespace
        self.attach_command = attach_command
        self._backends: dict[AttachBackendType, AttachBackend] = {}

    def register(self, backend_type: AttachBackendType, backend: AttachBackend) -> None:
        """Register the attach routine for a backend type."""
        self._backends[backend_type] = backend

    @property
    def registered(self) -> list[AttachBackendType]:
        """Backend types with a registered routine."""
        return list(self._backends)

    def surface_label(self, session_id: str) -> str:
        """Return the reproducible label of the attach surface for a session."""
        return f"{self.namespace}-attach-{session_id}"

    def attach_instruction(self, session_id: str) -> str:
        """Return the line that joins the daemon-side terminal of a session."""
        target = shlex.quote(f"{self.namespace}-{session_id}")
        return f"exec {self.attach_command} -t {target}"

    async def attach(self, session_id: str) -> str:
        """Attach to a session through the configured backend.

        Returns:
            The label of the surface used.

        Raises:
            UnsupportedBackendError: If the configured backend is not registered.
        """
        backend = self._backends.get(self.backend_type)
        if backend is None:
            raise UnsupportedBackendError(self.backend_type.value)

        label = self.surface_label(session_id)
        surface = await backend.open_surface(label)
        await backend.submit_line(surface, self.attach_instruction(session_id))
        logger.info("Attached to %s via %s", session_id, self.backend_type.value)
        return label
