"""tmux attach backend.

Opens a tmux window named after the attach label in the running tmux server
and types the attach instruction into it with ``send-keys``.
"""

from __future__ import annotations

import logging

from mux_controller.transport import Transport

logger = logging.getLogger(__name__)


class TmuxAttachBackend:
    """Attach backend that hosts the attach in a new tmux window."""

    def __init__(self, transport: Transport | None = None) -> None:
        self.transport = transport or Transport("tmux", strict_exit_status=True)

    async def open_surface(self, label: str) -> str:
        """Create a window named ``label`` and return its window id."""
        output = await self.transport.invoke(
            ["new-window", "-P", "-F", "#{window_id}", "-n", label]
        )
        window_id = output.strip() or label
        logger.debug("Opened tmux window %s (%s)", window_id, label)
        return window_id

    async def submit_line(self, surface: str, line: str) -> None:
        """Type ``line`` into the window and press Enter."""
        await self.transport.invoke(["send-keys", "-t", surface, line, "Enter"])
