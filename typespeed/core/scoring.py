from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class TestResult:
    """Outcome of a finished typing test."""

    __test__ = False

    correct_chars: int = 0
    total_typed_chars: int = 0
    accuracy: int = 0
    wpm: int = 0


def count_correct_chars(typed: str, target: str) -> int:
    """Count positions where *typed* and *target* hold the same character."""
    return sum(1 for a, b in zip(typed, target) if a == b)


def score(
    typed_lines: Iterable[str],
    trailing_unsubmitted: Optional[str],
    target_lines: Iterable[str],
    duration_seconds: int,
) -> TestResult:
    """Score a test from the committed lines and the line still being typed.

    Lines are joined with single spaces on both sides and compared strictly
    by position.  WPM is the gross rate minus an error penalty:

      * **Gross WPM** – (typed chars / 5) / minutes.
      * **Penalty** – (errors / 5) / minutes, errors = typed − correct.

    The net figure is floored at 0 and rounded.
    """
    if duration_seconds <= 0:
        raise ValueError(f"duration_seconds must be positive, got {duration_seconds}")

    typed = list(typed_lines)
    if trailing_unsubmitted:
        typed.append(trailing_unsubmitted)
    typed_all = " ".join(typed)
    target_all = " ".join(target_lines)

    total = len(typed_all)
    correct = count_correct_chars(typed_all, target_all)
    accuracy = round(correct / total * 100) if total else 0

    minutes = duration_seconds / 60.0
    gross_wpm = (total / 5.0) / minutes
    errors = max(0, total - correct)
    penalty = (errors / 5.0) / minutes
    wpm = round(max(0.0, gross_wpm - penalty))

    return TestResult(
        correct_chars=correct,
        total_typed_chars=total,
        accuracy=accuracy,
        wpm=wpm,
    )
