"""Tests for attach dispatch and the built-in backends."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from mux_controller.attach import AttachBackend, AttachDispatcher
from mux_controller.backends import ItermAttachBackend, ItermConnection, TmuxAttachBackend
from mux_controller.exceptions import BackendConnectionError, UnsupportedBackendError
from mux_controller.models import AttachBackendType


def make_backend(surface: object = "surface") -> MagicMock:
    """Create a mock attach backend."""
    backend = MagicMock()
    backend.open_surface = AsyncMock(return_value=surface)
    backend.submit_line = AsyncMock()
    return backend


class TestAttachDispatcher:
    """Test label and instruction construction."""

    def test_surface_label(self) -> None:
        """Labels are reproducible per session."""
        dispatcher = AttachDispatcher(AttachBackendType.TMUX, namespace="muxd")
        assert dispatcher.surface_label("s1") == "muxd-attach-s1"
        assert dispatcher.surface_label("s1") == dispatcher.surface_label("s1")

    def test_attach_instruction(self) -> None:
        """The instruction execs the attach command on the namespaced target."""
        dispatcher = AttachDispatcher(
            AttachBackendType.TMUX, namespace="muxd", attach_command="tmux attach"
        )
        assert dispatcher.attach_instruction("s1") == "exec tmux attach -t muxd-s1"

    def test_attach_instruction_quotes_target(self) -> None:
        """Targets with shell metacharacters are quoted."""
        dispatcher = AttachDispatcher(AttachBackendType.TMUX, namespace="my ns")
        assert dispatcher.attach_instruction("s1") == "exec tmux attach -t 'my ns-s1'"

    def test_register(self) -> None:
        """Registered backend types are reported."""
        dispatcher = AttachDispatcher(AttachBackendType.TMUX)
        dispatcher.register(AttachBackendType.ITERM2, make_backend())
        assert dispatcher.registered == [AttachBackendType.ITERM2]

    def test_builtin_backends_satisfy_protocol(self) -> None:
        """Built-in backends implement AttachBackend."""
        assert isinstance(TmuxAttachBackend(transport=MagicMock()), AttachBackend)
        assert isinstance(ItermAttachBackend(), AttachBackend)

    def test_tmux_default_transport_is_strict(self) -> None:
        """tmux failures are not silently ignored."""
        backend = TmuxAttachBackend()
        assert backend.transport.executable == "tmux"
        assert backend.transport.strict_exit_status is True


@pytest.mark.asyncio
class TestAttachDispatch:
    """Test dispatching to backends."""

    async def test_attach_uses_configured_backend(self) -> None:
        """Only the configured backend is used."""
        tmux = make_backend("@5")
        iterm = make_backend()
        dispatcher = AttachDispatcher(AttachBackendType.TMUX)
        dispatcher.register(AttachBackendType.TMUX, tmux)
        dispatcher.register(AttachBackendType.ITERM2, iterm)

        label = await dispatcher.attach("s1")

        assert label == "muxd-attach-s1"
        tmux.open_surface.assert_awaited_once_with("muxd-attach-s1")
        tmux.submit_line.assert_awaited_once_with("@5", "exec tmux attach -t muxd-s1")
        iterm.open_surface.assert_not_awaited()

    async def test_unregistered_backend(self) -> None:
        """An unregistered backend raises UnsupportedBackendError."""
        dispatcher = AttachDispatcher(AttachBackendType.ITERM2)
        dispatcher.register(AttachBackendType.TMUX, make_backend())

        with pytest.raises(UnsupportedBackendError) as exc_info:
            await dispatcher.attach("s1")
        assert exc_info.value.backend == "iterm2"

    async def test_attach_twice_opens_two_surfaces(self) -> None:
        """Each attach opens a surface with the same label."""
        backend = make_backend()
        dispatcher = AttachDispatcher(AttachBackendType.TMUX)
        dispatcher.register(AttachBackendType.TMUX, backend)

        await dispatcher.attach("s1")
        await dispatcher.attach("s1")

        assert backend.open_surface.await_count == 2


@pytest.mark.asyncio
class TestTmuxAttachBackend:
    """Test the tmux backend."""

    async def test_open_surface(self) -> None:
        """A named window is created and its id returned."""
        transport = MagicMock()
        transport.invoke = AsyncMock(return_value="@12\n")
        backend = TmuxAttachBackend(transport=transport)

        surface = await backend.open_surface("muxd-attach-s1")

        assert surface == "@12"
        transport.invoke.assert_awaited_once_with(
            ["new-window", "-P", "-F", "#{window_id}", "-n", "muxd-attach-s1"]
        )

    async def test_open_surface_without_id_uses_label(self) -> None:
        """The label is the target when tmux prints nothing."""
        transport = MagicMock()
        transport.invoke = AsyncMock(return_value="")
        backend = TmuxAttachBackend(transport=transport)
        assert await backend.open_surface("muxd-attach-s1") == "muxd-attach-s1"

    async def test_submit_line(self) -> None:
        """The line is typed followed by Enter."""
        transport = MagicMock()
        transport.invoke = AsyncMock(return_value="")
        backend = TmuxAttachBackend(transport=transport)

        await backend.submit_line("@12", "exec tmux attach -t muxd-s1")

        transport.invoke.assert_awaited_once_with(
            ["send-keys", "-t", "@12", "exec tmux attach -t muxd-s1", "Enter"]
        )


@pytest.mark.asyncio
class TestItermConnection:
    """Test the iTerm2 connection wrapper."""

    async def test_connect_success(self) -> None:
        """A successful connection stores the app."""
        connection = ItermConnection()
        mock_conn = MagicMock()
        mock_app = MagicMock()
        with patch("iterm2.Connection.async_create", AsyncMock(return_value=mock_conn)), patch(
            "iterm2.async_get_app", AsyncMock(return_value=mock_app)
        ):
            await connection.connect()

        assert connection.is_connected
        assert connection.app is mock_app

    async def test_connect_refused(self) -> None:
        """A refused connection raises BackendConnectionError."""
        connection = ItermConnection()
        with patch(
            "iterm2.Connection.async_create",
            AsyncMock(side_effect=ConnectionRefusedError()),
        ):
            with pytest.raises(BackendConnectionError) as exc_info:
                await connection.connect()

        assert "Python API" in exc_info.value.message
        assert not connection.is_connected

    async def test_connect_other_failure(self) -> None:
        """Other failures also raise BackendConnectionError."""
        connection = ItermConnection()
        with patch(
            "iterm2.Connection.async_create",
            AsyncMock(side_effect=RuntimeError("no socket")),
        ):
            with pytest.raises(BackendConnectionError):
                await connection.connect()


@pytest.mark.asyncio
class TestItermAttachBackend:
    """Test the iTerm2 backend."""

    def _connected(self, window: MagicMock | None) -> ItermConnection:
        connection = ItermConnection()
        connection.connection = MagicMock()
        connection.app = MagicMock()
        connection.app.current_terminal_window = window
        return connection

    async def test_open_surface_in_current_window(self) -> None:
        """A tab is added to the current window and named."""
        session = MagicMock()
        session.async_set_name = AsyncMock()
        tab = MagicMock()
        tab.current_session = session
        window = MagicMock()
        window.async_create_tab = AsyncMock(return_value=tab)
        backend = ItermAttachBackend(self._connected(window))

        surface = await backend.open_surface("muxd-attach-s1")

        assert surface is session
        session.async_set_name.assert_awaited_once_with("muxd-attach-s1")

    async def test_open_surface_creates_window(self) -> None:
        """A window is created when none is open."""
        session = MagicMock()
        session.async_set_name = AsyncMock()
        tab = MagicMock()
        tab.current_session = session
        window = MagicMock()
        window.async_create_tab = AsyncMock(return_value=tab)
        backend = ItermAttachBackend(self._connected(None))

        with patch("iterm2.Window.async_create", AsyncMock(return_value=window)) as create:
            await backend.open_surface("muxd-attach-s1")

        create.assert_awaited_once()
        window.async_create_tab.assert_awaited_once()

    async def test_open_surface_connects_first(self) -> None:
        """The backend connects on first use."""
        connection = ItermConnection()
        connection.connect = AsyncMock(side_effect=BackendConnectionError("refused"))
        backend = ItermAttachBackend(connection)

        with pytest.raises(BackendConnectionError):
            await backend.open_surface("muxd-attach-s1")
        connection.connect.assert_awaited_once()

    async def test_submit_line(self) -> None:
        """The line is sent with a trailing newline."""
        session = MagicMock()
        session.async_send_text = AsyncMock()
        await ItermAttachBackend().submit_line(session, "exec tmux attach -t muxd-s1")
        session.async_send_text.assert_awaited_once_with("exec tmux attach -t muxd-s1\n")
