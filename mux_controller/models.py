"""Core dataclasses for sessions, attach backends and configuration.

Configuration models are designed for JSON serialization using dacite.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum

import dacite


# =============================================================================
# Session Models
# =============================================================================


@dataclass(frozen=True)
class SessionEntry:
    """Cached projection of one daemon session, as reported by ``list``.

    Frozen so a directory snapshot can be shared with readers without copying.
    """

    id: str  # Daemon-assigned, unique among live sessions
    command: str  # Shell command the session was created to run
    cwd: str = ""  # Working directory; empty means daemon default

    @classmethod
    def from_line(cls, line: str) -> SessionEntry:
        """Build an entry from one ``id<TAB>command<TAB>cwd`` line.

        Raises:
            ValueError: If the line does not hold exactly three fields.
        """
        fields = line.split("\t")
        if len(fields) != 3:
            raise ValueError(f"expected 3 tab-separated fields, got {len(fields)}")
        session_id, command, cwd = fields
        return cls(id=session_id, command=command, cwd=cwd)


class RowAction(Enum):
    """Per-row actions offered by the session list."""

    SHOW = "show"
    SEND = "send"
    CLOSE = "close"
    ATTACH = "attach"


# =============================================================================
# Attach Models
# =============================================================================


class AttachBackendType(Enum):
    """Terminal emulators able to host an interactive attach."""

    TMUX = "tmux"
    ITERM2 = "iterm2"


# =============================================================================
# App Configuration
# =============================================================================


@dataclass
class AppSettings:
    """Global application settings."""

    executable: str = "muxd"  # Session daemon executable
    attach_backend: AttachBackendType = AttachBackendType.TMUX
    interpret_color: bool = True  # Render ANSI colour in session views
    session_namespace: str = "muxd"  # Prefix of daemon-side terminal names
    attach_command: str = "tmux attach"
    command_timeout_seconds: float = 10.0
    strict_exit_status: bool = False  # Non-zero exit raises ExecutionError


@dataclass
class AppConfig:
    """Complete application configuration."""

    settings: AppSettings = field(default_factory=AppSettings)


# =============================================================================
# Serialization Helpers
# =============================================================================


def _convert_enums(obj: object) -> object:
    """Recursively convert Enum values to their string values."""
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dict):
        return {k: _convert_enums(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_convert_enums(item) for item in obj]
    return obj


def model_to_dict(obj: object) -> dict:
    """Convert a dataclass model to a dictionary for JSON serialization."""
    data = asdict(obj)  # type: ignore[arg-type]
    return _convert_enums(data)  # type: ignore[return-value]


def load_config_from_dict(data: dict) -> AppConfig:
    """Load AppConfig from a dictionary (parsed JSON)."""
    return dacite.from_dict(
        data_class=AppConfig,
        data=data,
        config=dacite.Config(cast=[Enum]),
    )
