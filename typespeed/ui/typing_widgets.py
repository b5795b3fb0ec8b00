"""Typing test UI: target lines rendered against the typed text."""

from __future__ import annotations

import html
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QLabel, QWidget

from typespeed.ui.colors import ThemeColors
from typespeed.ui.models import LineStatus, LineView


def render_line_html(target: str, typed: str, status: LineStatus) -> str:
    """Rich text for one line: typed characters green or red, the rest muted.

    The current line also marks the next character to type.  Extra characters
    typed past the end of the target are shown struck through in red.
    """
    if status is LineStatus.PENDING or not typed and status is not LineStatus.CURRENT:
        return f'<span style="color:{ThemeColors.TEXT_MUTED};">{html.escape(target)}</span>'

    parts: list[str] = []
    for i, expected in enumerate(target):
        if i < len(typed):
            color = ThemeColors.SUCCESS if typed[i] == expected else ThemeColors.ERROR
            parts.append(f'<span style="color:{color};">{html.escape(expected)}</span>')
        elif i == len(typed) and status is LineStatus.CURRENT:
            parts.append(
                f'<span style="background:{ThemeColors.HIGHLIGHT_BG}; '
                f'color:{ThemeColors.PRIMARY}; font-weight:600;">{html.escape(expected)}</span>'
            )
        else:
            parts.append(f'<span style="color:{ThemeColors.TEXT_MUTED};">{html.escape(target[i:])}</span>')
            break

    extra = typed[len(target):]
    if extra:
        parts.append(
            f'<span style="color:{ThemeColors.ERROR}; background:{ThemeColors.ERROR_BG}; '
            f'text-decoration:line-through;">{html.escape(extra)}</span>'
        )
    return "".join(parts)


class TargetLineLabel(QLabel):
    """One wrapped line of the phrase, colored by what has been typed so far."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setTextFormat(Qt.RichText)
        self.setAlignment(Qt.AlignLeft | Qt.AlignVCenter)
        self._view: Optional[LineView] = None

    def set_line(self, view: LineView) -> None:
        if view == self._view:
            return
        self._view = view
        weight = 600 if view.status is LineStatus.CURRENT else 400
        self.setStyleSheet(f"QLabel {{ font-size: 22px; font-weight: {weight}; padding: 2px 0; }}")
        self.setText(render_line_html(view.target, view.typed, view.status))
