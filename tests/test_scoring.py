"""Tests for typespeed.core.scoring – correctness, accuracy and WPM."""

from __future__ import annotations

import pytest

from typespeed.core.scoring import TestResult, count_correct_chars, score


# ---------------------------------------------------------------------------
# TestResult dataclass
# ---------------------------------------------------------------------------

class TestResultDataclass:
    def test_defaults_are_zero(self):
        assert TestResult() == TestResult(correct_chars=0, total_typed_chars=0, accuracy=0, wpm=0)

    def test_frozen(self):
        result = TestResult(correct_chars=3)
        with pytest.raises(AttributeError):
            result.correct_chars = 4  # type: ignore[misc]


# ---------------------------------------------------------------------------
# count_correct_chars
# ---------------------------------------------------------------------------

class TestCountCorrectChars:
    def test_identical(self):
        assert count_correct_chars("hello", "hello") == 5

    def test_positional_only(self):
        # a dropped character shifts everything after it
        assert count_correct_chars("hllo", "hello") == 1

    def test_typed_longer_than_target(self):
        assert count_correct_chars("abcdef", "abc") == 3

    def test_empty(self):
        assert count_correct_chars("", "abc") == 0


# ---------------------------------------------------------------------------
# score – counts and accuracy
# ---------------------------------------------------------------------------

class TestScoreAccuracy:
    def test_perfect_line(self):
        result = score(["abc"], None, ["abc"], 60)
        assert result.correct_chars == 3
        assert result.total_typed_chars == 3
        assert result.accuracy == 100

    def test_one_wrong_character(self):
        result = score(["abd"], None, ["abc"], 60)
        assert result.correct_chars == 2
        assert result.total_typed_chars == 3
        # 2 / 3 * 100 = 66.67
        assert result.accuracy == 67

    def test_nothing_typed(self):
        result = score([], None, [], 30)
        assert result.accuracy == 0
        assert result.total_typed_chars == 0
        assert result.wpm == 0

    def test_nothing_typed_against_target(self):
        result = score([], None, ["some text"], 30)
        assert result == TestResult()

    def test_lines_joined_with_spaces(self):
        result = score(["hello", "world"], None, ["hello", "world"], 60)
        assert result.total_typed_chars == 11
        assert result.correct_chars == 11

    def test_trailing_text_is_appended(self):
        result = score(["hello"], "wor", ["hello", "world"], 60)
        # "hello wor"
        assert result.total_typed_chars == 9
        assert result.correct_chars == 9
        assert result.accuracy == 100

    def test_empty_trailing_text_is_ignored(self):
        with_empty = score(["hello"], "", ["hello", "world"], 60)
        without = score(["hello"], None, ["hello", "world"], 60)
        assert with_empty == without
        assert with_empty.total_typed_chars == 5

    def test_skipped_line_shifts_comparison(self):
        # an empty committed line still contributes its separator
        result = score(["", "world"], None, ["hello", "world"], 60)
        assert result.total_typed_chars == 6
        assert result.correct_chars == 0

    def test_half_rounds_to_even(self):
        # 1 / 8 * 100 = 12.5 -> 12
        result = score(["abcdefgh"], None, ["axxxxxxx"], 60)
        assert result.correct_chars == 1
        assert result.accuracy == 12


# ---------------------------------------------------------------------------
# score – WPM
# ---------------------------------------------------------------------------

class TestScoreWpm:
    def test_gross_wpm_without_errors(self):
        result = score(["hello world"], None, ["hello world"], 60)
        # (11 / 5) / 1 = 2.2 -> 2
        assert result.total_typed_chars == 11
        assert result.wpm == 2

    def test_short_duration_scales_up(self):
        result = score(["hello world"], None, ["hello world"], 30)
        # (11 / 5) / 0.5 = 4.4 -> 4
        assert result.wpm == 4

    def test_errors_are_penalised(self):
        typed = "a" * 50
        result = score([typed], None, ["a" * 40 + "b" * 10], 60)
        # gross 10, errors 10 -> penalty 2
        assert result.correct_chars == 40
        assert result.wpm == 8

    def test_wpm_floors_at_zero(self):
        result = score(["xyz"], None, ["abc"], 60)
        assert result.correct_chars == 0
        assert result.wpm == 0

    def test_extra_characters_count_as_errors(self):
        result = score(["abcdefghij"], None, ["abcde"], 60)
        # gross 2, errors 5 -> penalty 1
        assert result.correct_chars == 5
        assert result.accuracy == 50
        assert result.wpm == 1


# ---------------------------------------------------------------------------
# score – invalid durations
# ---------------------------------------------------------------------------

class TestScoreDuration:
    @pytest.mark.parametrize("duration", [0, -30])
    def test_non_positive_duration_rejected(self, duration: int):
        with pytest.raises(ValueError, match="positive"):
            score(["abc"], None, ["abc"], duration)
