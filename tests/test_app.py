"""Tests for the main Textual app."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from textual.widgets import DataTable, Static, TextArea

from mux_controller.app import MuxControllerApp
from mux_controller.exceptions import ConfigValidationError
from mux_controller.models import AppConfig, AppSettings, AttachBackendType
from mux_controller.screens.modals import (
    CreateSessionModal,
    SendBufferModal,
    SendKeysModal,
    SessionPickerModal,
)
from mux_controller.screens.session_list import SessionListScreen
from mux_controller.screens.session_output import SessionOutputScreen
from mux_controller.services import ServiceContainer


class FakeDaemon:
    """Answers transport requests from an in-memory session table."""

    def __init__(self, sessions: dict[str, tuple[str, str]]) -> None:
        self.sessions = dict(sessions)
        self.calls: list[list[str]] = []

    async def invoke(self, args: list[str]) -> str:
        self.calls.append(list(args))
        name, rest = args[0], args[1:]
        if name == "list":
            return "".join(f"{sid}\t{cmd}\t{cwd}\n" for sid, (cmd, cwd) in self.sessions.items())
        if name == "create":
            self.sessions["s9"] = (rest[-1], "")
            return "s9\n"
        if name == "view":
            return f"{rest[-1]} says hello\n"
        if name == "close":
            self.sessions.pop(rest[0], None)
        return ""

    def sent(self) -> list[list[str]]:
        return [call for call in self.calls if call[0] == "send"]


def make_app(
    sessions: dict[str, tuple[str, str]] | None = None,
) -> tuple[MuxControllerApp, FakeDaemon]:
    """Create an app wired to a fake daemon."""
    if sessions is None:
        sessions = {"s1": ("htop", "/a"), "s2": ("vim", "/b")}
    services = ServiceContainer.create(AppSettings())
    daemon = FakeDaemon(sessions)
    services.transport.invoke = daemon.invoke  # type: ignore[method-assign]
    return MuxControllerApp(services=services), daemon


class TestMuxControllerApp:
    """Tests for MuxControllerApp."""

    def test_app_has_bindings(self) -> None:
        """App has quit and find bindings."""
        binding_keys = [b.key for b in MuxControllerApp.BINDINGS]
        assert "q" in binding_keys
        assert "slash" in binding_keys

    def test_app_has_title(self) -> None:
        """Test that app has TITLE configured."""
        assert MuxControllerApp.TITLE == "Mux Controller"

    def test_display_callback_is_wired(self) -> None:
        """Shown rows open the output screen."""
        app, _ = make_app()
        assert app.services.sessions.display == app.show_output

    def test_overrides_apply_to_loaded_config(self) -> None:
        """Command-line overrides win over the config file."""
        with patch("mux_controller.app.load_global_config", return_value=AppConfig()):
            app = MuxControllerApp(overrides={"executable": "muxd-dev", "attach_backend": None})
        assert app.services.settings.executable == "muxd-dev"
        assert app.services.settings.attach_backend is AttachBackendType.TMUX

    def test_bad_config_falls_back_to_defaults(self) -> None:
        """An unusable config file does not stop the app."""
        with patch(
            "mux_controller.app.load_global_config",
            side_effect=ConfigValidationError("bad schema"),
        ):
            app = MuxControllerApp()
        assert app.services.settings == AppSettings()
        assert "bad schema" in app._config_error


@pytest.mark.asyncio
class TestMuxControllerAppAsync:
    """Async tests for MuxControllerApp."""

    async def test_shows_session_list_on_start(self) -> None:
        """The session list is populated from the daemon."""
        app, daemon = make_app()
        async with app.run_test() as pilot:
            await pilot.pause()
            assert isinstance(app.screen, SessionListScreen)
            table = app.screen.query_one("#session-table", DataTable)
            assert table.row_count == 2
            assert ["list"] in daemon.calls

    async def test_empty_list_message(self) -> None:
        """No sessions shows the empty message instead of the table."""
        app, _ = make_app({})
        async with app.run_test() as pilot:
            await pilot.pause()
            table = app.screen.query_one("#session-table", DataTable)
            message = app.screen.query_one("#empty-message", Static)
            assert table.display is False
            assert message.display is True

    async def test_show_session(self) -> None:
        """v shows the highlighted session's output."""
        app, daemon = make_app()
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("v")
            await pilot.pause()
            assert isinstance(app.screen, SessionOutputScreen)
            assert app.screen.session_id == "s1"
            assert app.screen.text == "s1 says hello\n"
            assert ["view", "s1"] in daemon.calls

    async def test_output_reload_and_back(self) -> None:
        """g reloads the output and escape goes back to the list."""
        app, daemon = make_app()
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("v")
            await pilot.pause()
            await pilot.press("g")
            await pilot.pause()
            assert daemon.calls.count(["view", "s1"]) == 2

            await pilot.press("escape")
            await pilot.pause()
            assert isinstance(app.screen, SessionListScreen)

    async def test_close_session(self) -> None:
        """k closes the highlighted session and drops its row."""
        app, daemon = make_app()
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("k")
            await pilot.pause()
            assert ["close", "s1"] in daemon.calls
            table = app.screen.query_one("#session-table", DataTable)
            assert table.row_count == 1
            assert app.services.sessions.rows[0].id == "s2"

    async def test_refresh_picks_up_external_changes(self) -> None:
        """g reloads the table from the daemon."""
        app, daemon = make_app()
        async with app.run_test() as pilot:
            await pilot.pause()
            daemon.sessions.pop("s1")
            await pilot.press("g")
            await pilot.pause()
            table = app.screen.query_one("#session-table", DataTable)
            assert table.row_count == 1

    async def test_attach_session(self) -> None:
        """a attaches through the configured backend."""
        app, _ = make_app()
        backend = MagicMock()
        backend.open_surface = AsyncMock(return_value="@3")
        backend.submit_line = AsyncMock()
        app.services.dispatcher.register(AttachBackendType.TMUX, backend)
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("a")
            await pilot.pause()
            backend.open_surface.assert_awaited_once_with("muxd-attach-s1")

    async def test_send_keys(self) -> None:
        """s prompts for text and sends it."""
        app, daemon = make_app()
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("s")
            await pilot.pause()
            assert isinstance(app.screen, SendKeysModal)

            await pilot.press("l", "s", "enter")
            await pilot.pause()
            assert daemon.sent() == [["send", "s1", "ls"]]
            assert isinstance(app.screen, SessionListScreen)

    async def test_send_keys_cancel(self) -> None:
        """Escape sends nothing."""
        app, daemon = make_app()
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("s")
            await pilot.pause()
            await pilot.press("escape")
            await pilot.pause()
            assert daemon.sent() == []
            assert isinstance(app.screen, SessionListScreen)

    async def test_send_buffer(self) -> None:
        """b composes a buffer and sends it once without trailing newlines."""
        app, daemon = make_app()
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("b")
            await pilot.pause()
            modal = app.screen
            assert isinstance(modal, SendBufferModal)

            modal.query_one("#buffer", TextArea).load_text("for i in 1 2\ndo echo $i\ndone\n")
            modal.action_commit()
            await pilot.pause()
            assert daemon.sent() == [["send", "s1", "for i in 1 2\ndo echo $i\ndone"]]

    async def test_new_session(self) -> None:
        """n creates a session and refreshes the list."""
        app, daemon = make_app()
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("n")
            await pilot.pause()
            assert isinstance(app.screen, CreateSessionModal)

            await pilot.press("t", "o", "p", "enter")
            await pilot.pause()
            create_calls = [call for call in daemon.calls if call[0] == "create"]
            assert create_calls and create_calls[0][-1] == "top"
            assert "s9" in app.services.directory

    async def test_pick_session(self) -> None:
        """/ resolves a typed id and shows that session."""
        app, daemon = make_app()
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("slash")
            await pilot.pause()
            assert isinstance(app.screen, SessionPickerModal)

            await pilot.press("s", "2", "enter")
            await pilot.pause()
            assert isinstance(app.screen, SessionOutputScreen)
            assert app.screen.session_id == "s2"

    async def test_pick_session_lists_once(self) -> None:
        """Opening the picker and choosing a session lists sessions once."""
        app, daemon = make_app()
        async with app.run_test() as pilot:
            await pilot.pause()
            before = daemon.calls.count(["list"])
            await pilot.press("slash")
            await pilot.pause()
            await pilot.press("s", "1", "enter")
            await pilot.pause()
            assert isinstance(app.screen, SessionOutputScreen)
            assert daemon.calls.count(["list"]) == before + 1

    async def test_pick_unknown_session(self) -> None:
        """An unknown id keeps the picker open."""
        app, daemon = make_app()
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("slash")
            await pilot.pause()
            await pilot.press("z", "z", "enter")
            await pilot.pause()
            assert isinstance(app.screen, SessionPickerModal)
            assert not any(call[0] == "view" for call in daemon.calls)
