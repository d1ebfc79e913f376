"""Session output viewer.

Shows a snapshot of a session's terminal contents, rendering ANSI colour
through rich when colour interpretation is on.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.screen import Screen
from textual.widgets import Footer, Header, Static

from mux_controller.exceptions import MuxControllerError

if TYPE_CHECKING:
    from mux_controller.app import MuxControllerApp


def render_output(text: str, interpret_color: bool = True) -> Text:
    """Turn raw session output into displayable rich Text."""
    if interpret_color:
        return Text.from_ansi(text)
    return Text(text)


class SessionOutputScreen(Screen):
    """Snapshot of one session's output.

    Reloading fetches a new snapshot; the daemon never pushes updates.
    """

    BINDINGS = [
        Binding("escape", "app.pop_screen", "Back"),
        Binding("g", "reload", "Reload"),
    ]

    DEFAULT_CSS = """
    SessionOutputScreen #output-scroll {
        height: 1fr;
        padding: 0 1;
    }
    """

    def __init__(self, session_id: str, text: str, interpret_color: bool = True) -> None:
        """Initialize the screen.

        Args:
            session_id: Session the output belongs to.
            text: Output snapshot.
            interpret_color: Render ANSI sequences as colour.
        """
        super().__init__()
        self.session_id = session_id
        self.text = text
        self.interpret_color = interpret_color

    def compose(self) -> ComposeResult:
        """Compose the screen layout."""
        yield Header()
        yield VerticalScroll(
            Static(render_output(self.text, self.interpret_color), id="output"),
            id="output-scroll",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Show the session id and scroll to the latest output."""
        self.sub_title = self.session_id
        self.query_one("#output-scroll", VerticalScroll).scroll_end(animate=False)

    def update_output(self, text: str) -> None:
        """Replace the displayed snapshot."""
        self.text = text
        self.query_one("#output", Static).update(render_output(text, self.interpret_color))
        self.query_one("#output-scroll", VerticalScroll).scroll_end(animate=False)

    async def action_reload(self) -> None:
        """Fetch a fresh snapshot from the daemon."""
        app: MuxControllerApp = self.app  # type: ignore[assignment]
        try:
            text = await app.services.client.view(
                self.session_id, no_color=not self.interpret_color
            )
        except MuxControllerError as e:
            self.notify(str(e), severity="error")
            return
        self.update_output(text)
