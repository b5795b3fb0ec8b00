"""Data models used by the UI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from typespeed.core.session import TypingSession


class LineStatus(Enum):
    DONE = "done"
    CURRENT = "current"
    PENDING = "pending"


@dataclass
class LineView:
    """UI state for one target line: what to type, what was typed, and where it stands."""

    index: int
    target: str
    typed: str
    status: LineStatus


def build_line_views(session: TypingSession) -> list[LineView]:
    """Snapshot every target line of *session* for rendering."""
    views: list[LineView] = []
    current = session.current_line_index
    for index, target in enumerate(session.target_lines):
        if index < current:
            views.append(LineView(index, target, session.typed_for_line(index), LineStatus.DONE))
        elif index == current:
            # a line cut off by the timer still shows what was typed
            status = LineStatus.DONE if session.is_finished else LineStatus.CURRENT
            views.append(LineView(index, target, session.current_typed, status))
        else:
            views.append(LineView(index, target, "", LineStatus.PENDING))
    return views
