"""Tests for typespeed.app – environment configuration and wiring."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from typespeed.app import (
    LINE_WIDTH_ENV,
    PHRASES_ENV,
    build_session,
    line_width,
    phrase_location,
)
from typespeed.core.phrases import FilePhraseLoader, HttpPhraseLoader
from typespeed.core.session import SessionState
from typespeed.core.wrapping import DEFAULT_LINE_WIDTH


class TestPhraseLocation:
    def test_unset(self):
        assert phrase_location({}) is None

    def test_blank(self):
        assert phrase_location({PHRASES_ENV: "   "}) is None

    def test_value(self):
        assert phrase_location({PHRASES_ENV: " https://example.com/phrases "}) == "https://example.com/phrases"


class TestLineWidth:
    def test_unset_uses_default(self):
        assert line_width({}) == DEFAULT_LINE_WIDTH

    def test_value(self):
        assert line_width({LINE_WIDTH_ENV: "60"}) == 60

    @pytest.mark.parametrize("raw", ["abc", "0", "-3"])
    def test_invalid_falls_back(self, raw: str, caplog: pytest.LogCaptureFixture):
        with caplog.at_level(logging.WARNING):
            assert line_width({LINE_WIDTH_ENV: raw}) == DEFAULT_LINE_WIDTH
        assert LINE_WIDTH_ENV in caplog.text


class TestBuildSession:
    def test_defaults_to_packaged_phrases(self):
        session = build_session({})
        assert session.state is SessionState.SETUP
        assert isinstance(session._phrase_source._loader, FilePhraseLoader)

    def test_url_selects_http_loader(self):
        session = build_session({PHRASES_ENV: "https://example.com/phrases"})
        assert isinstance(session._phrase_source._loader, HttpPhraseLoader)

    def test_directory_and_width(self, tmp_path: Path):
        session = build_session({PHRASES_ENV: str(tmp_path), LINE_WIDTH_ENV: "20"})
        loader = session._phrase_source._loader
        assert isinstance(loader, FilePhraseLoader)
        assert loader.base_dir == tmp_path
        assert session._line_width == 20
