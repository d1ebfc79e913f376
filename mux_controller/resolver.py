"""Resolve a free-text session reference against a directory snapshot.

These are plain functions over ``(query, snapshot)`` so they can be used by
the CLI, the TUI picker and tests alike. Fuzzy filtering only narrows what
is shown; resolution itself accepts exact ids only.
"""

from __future__ import annotations

from collections.abc import Iterable

from .exceptions import NoSuchSessionError
from .models import SessionEntry


def annotate(entry: SessionEntry) -> str:
    """Return the completion annotation for an entry: ``"  <command> [<cwd>]"``."""
    return f"  {entry.command} [{entry.cwd}]"


def completion_candidates(entries: Iterable[SessionEntry]) -> dict[str, str]:
    """Map every known session id to its annotation, in snapshot order."""
    return {entry.id: annotate(entry) for entry in entries}


def filter_candidates(query: str, entries: Iterable[SessionEntry]) -> list[SessionEntry]:
    """Narrow the candidates shown for a partially typed query.

    Case-insensitive substring match over id, command and cwd. An exact id
    match is listed first.
    """
    needle = query.strip().lower()
    entries = list(entries)
    if not needle:
        return entries

    matches = [
        entry
        for entry in entries
        if needle in entry.id.lower()
        or needle in entry.command.lower()
        or needle in entry.cwd.lower()
    ]
    matches.sort(key=lambda entry: entry.id != query.strip())
    return matches


def resolve(query: str, entries: Iterable[SessionEntry]) -> str:
    """Return the session id that ``query`` names exactly.

    Args:
        query: Session reference as typed or chosen by the user.
        entries: Directory snapshot the choice was offered from.

    Returns:
        The matching session id.

    Raises:
        NoSuchSessionError: If no entry has that id.
    """
    session_id = query.strip()
    for entry in entries:
        if entry.id == session_id:
            return session_id
    raise NoSuchSessionError(query)
