"""iTerm2 attach backend.

Opens a new iTerm2 tab named after the attach label and types the attach
instruction into it through iTerm2's Python API.
"""

from __future__ import annotations

import logging

import iterm2

from mux_controller.exceptions import BackendConnectionError

logger = logging.getLogger(__name__)


class ItermConnection:
    """Manages the iTerm2 API connection used for attaching."""

    def __init__(self) -> None:
        self.connection: iterm2.Connection | None = None
        self.app: iterm2.App | None = None

    @property
    def is_connected(self) -> bool:
        """Check if currently connected to iTerm2."""
        return self.connection is not None and self.app is not None

    async def connect(self) -> None:
        """Establish connection to iTerm2.

        Raises:
            BackendConnectionError: If connection fails.
        """
        try:
            self.connection = await iterm2.Connection.async_create()
            self.app = await iterm2.async_get_app(self.connection)
            logger.info("Connected to iTerm2")
        except ConnectionRefusedError as e:
            self.connection = None
            self.app = None
            raise BackendConnectionError(
                "Connection refused. Is iTerm2 running with Python API enabled?",
                backend="iterm2",
                cause=e,
            ) from e
        except Exception as e:
            self.connection = None
            self.app = None
            raise BackendConnectionError(
                f"Failed to connect to iTerm2: {e}",
                backend="iterm2",
                cause=e,
            ) from e


class ItermAttachBackend:
    """Attach backend that hosts the attach in a new iTerm2 tab."""

    def __init__(self, connection: ItermConnection | None = None) -> None:
        self.connection = connection or ItermConnection()

    async def open_surface(self, label: str) -> iterm2.Session:
        """Create a tab in the current window (or a new window) named ``label``."""
        if not self.connection.is_connected:
            await self.connection.connect()

        app = self.connection.app
        assert app is not None  # connect() guarantees this

        window = app.current_terminal_window
        if window is None:
            window = await iterm2.Window.async_create(self.connection.connection)
            logger.info("Created new iTerm2 window")

        tab = await window.async_create_tab()
        session = tab.current_session
        assert session is not None
        await session.async_set_name(label)
        return session

    async def submit_line(self, surface: iterm2.Session, line: str) -> None:
        """Type ``line`` into the tab's session and press Enter."""
        await surface.async_send_text(line + "\n")
