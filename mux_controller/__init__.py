"""Mux Controller.

Client for a terminal-session multiplexer daemon. It creates, lists, views,
feeds input to, attaches to and closes daemon sessions, keeping a
pull-refreshed directory of them for selection and display.

Public API Usage:
    from mux_controller import SessionControllerAPI

    async def main():
        api = SessionControllerAPI()
        await api.initialize()
        created = await api.create_session("make watch", cwd="~/src/app")
        listing = await api.list_sessions()
        await api.close_session(created.session_id)

    # Lower-level building blocks
    from mux_controller import Transport, SessionClient, SessionDirectory, resolve
"""

__version__ = "0.1.0"

from mux_controller.api import (
    APIResult,
    SessionControllerAPI,
    SessionListResult,
    SessionResult,
)
from mux_controller.attach import AttachBackend, AttachDispatcher
from mux_controller.client import SessionClient
from mux_controller.config import load_global_config, save_global_config
from mux_controller.directory import SessionDirectory
from mux_controller.exceptions import (
    ExecutionError,
    MuxControllerError,
    NoSuchSessionError,
    ProtocolError,
    StaleRowError,
    UnknownSessionError,
    UnsupportedBackendError,
)
from mux_controller.list_controller import SessionListController
from mux_controller.models import (
    AppConfig,
    AppSettings,
    AttachBackendType,
    RowAction,
    SessionEntry,
)
from mux_controller.resolver import completion_candidates, resolve
from mux_controller.services import ServiceContainer
from mux_controller.transport import Transport

__all__ = [
    "__version__",
    # API
    "APIResult",
    "SessionControllerAPI",
    "SessionListResult",
    "SessionResult",
    # Core
    "AttachBackend",
    "AttachDispatcher",
    "ServiceContainer",
    "SessionClient",
    "SessionDirectory",
    "SessionListController",
    "Transport",
    "completion_candidates",
    "resolve",
    # Models
    "AppConfig",
    "AppSettings",
    "AttachBackendType",
    "RowAction",
    "SessionEntry",
    # Config
    "load_global_config",
    "save_global_config",
    # Errors
    "ExecutionError",
    "MuxControllerError",
    "NoSuchSessionError",
    "ProtocolError",
    "StaleRowError",
    "UnknownSessionError",
    "UnsupportedBackendError",
]
