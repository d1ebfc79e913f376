"""Service container for dependency injection.

Builds the transport, protocol client, directory, attach dispatcher and list
controller from one AppSettings so the TUI, the CLI and the programmatic
API all share the same wiring.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from mux_controller.attach import AttachDispatcher
from mux_controller.backends import ItermAttachBackend, TmuxAttachBackend
from mux_controller.client import SessionClient
from mux_controller.directory import SessionDirectory
from mux_controller.list_controller import SessionListController
from mux_controller.models import AppSettings, AttachBackendType
from mux_controller.transport import Transport

logger = logging.getLogger(__name__)


def create_dispatcher(settings: AppSettings) -> AttachDispatcher:
    """Create an attach dispatcher with every built-in backend registered."""
    dispatcher = AttachDispatcher(
        settings.attach_backend,
        namespace=settings.session_namespace,
        attach_command=settings.attach_command,
    )
    dispatcher.register(AttachBackendType.TMUX, TmuxAttachBackend())
    dispatcher.register(AttachBackendType.ITERM2, ItermAttachBackend())
    return dispatcher


@dataclass
class ServiceContainer:
    """Container for all injectable services.

    Attributes:
        settings: Settings the services were built from.
        transport: Subprocess transport to the daemon.
        client: Typed daemon protocol client.
        directory: Session snapshot cache.
        dispatcher: Attach dispatcher.
        sessions: Row-addressable session list over the directory.
    """

    settings: AppSettings
    transport: Transport
    client: SessionClient
    directory: SessionDirectory
    dispatcher: AttachDispatcher
    sessions: SessionListController

    @classmethod
    def create(cls, settings: AppSettings | None = None) -> ServiceContainer:
        """Create a service container from settings (defaults when None)."""
        settings = settings or AppSettings()

        transport = Transport(
            settings.executable,
            timeout=settings.command_timeout_seconds,
            strict_exit_status=settings.strict_exit_status,
        )
        client = SessionClient(transport)
        directory = SessionDirectory(client)
        dispatcher = create_dispatcher(settings)
        sessions = SessionListController(
            directory,
            client,
            dispatcher,
            no_color=not settings.interpret_color,
        )
        logger.debug(
            "Services created for %s (attach backend: %s)",
            settings.executable,
            settings.attach_backend.value,
        )

        return cls(
            settings=settings,
            transport=transport,
            client=client,
            directory=directory,
            dispatcher=dispatcher,
            sessions=sessions,
        )
