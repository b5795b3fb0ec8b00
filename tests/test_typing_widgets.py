"""Tests for typespeed.ui.typing_widgets – rich-text rendering of a line."""

from __future__ import annotations

from typespeed.ui.colors import ThemeColors
from typespeed.ui.models import LineStatus
from typespeed.ui.typing_widgets import render_line_html


class TestRenderLineHtml:
    def test_pending_line_is_muted(self):
        html_text = render_line_html("hello", "", LineStatus.PENDING)
        assert html_text == f'<span style="color:{ThemeColors.TEXT_MUTED};">hello</span>'

    def test_untyped_done_line_is_muted(self):
        html_text = render_line_html("hello", "", LineStatus.DONE)
        assert ThemeColors.SUCCESS not in html_text
        assert "hello" in html_text

    def test_correct_and_wrong_characters(self):
        html_text = render_line_html("abc", "axc", LineStatus.DONE)
        assert html_text.count(ThemeColors.SUCCESS) == 2
        assert html_text.count(ThemeColors.ERROR) == 1

    def test_current_line_highlights_next_character(self):
        html_text = render_line_html("abc", "a", LineStatus.CURRENT)
        assert ThemeColors.HIGHLIGHT_BG in html_text
        assert html_text.endswith(f'<span style="color:{ThemeColors.TEXT_MUTED};">c</span>')

    def test_fresh_current_line_highlights_first_character(self):
        html_text = render_line_html("abc", "", LineStatus.CURRENT)
        assert html_text.startswith(f'<span style="background:{ThemeColors.HIGHLIGHT_BG};')

    def test_extra_characters_are_struck_through(self):
        html_text = render_line_html("ab", "abcd", LineStatus.DONE)
        assert "line-through" in html_text
        assert html_text.endswith(">cd</span>")

    def test_escapes_markup(self):
        html_text = render_line_html("<b>", "", LineStatus.PENDING)
        assert "&lt;b&gt;" in html_text
        assert "<b>" not in html_text
