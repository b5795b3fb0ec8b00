"""Theme colors and color helpers for the UI."""

from __future__ import annotations


class ThemeColors:
    """Light theme palette shared by every screen."""

    BG_MAIN = "#EEF6F6"
    BG_CARD = "rgba(255, 255, 255, 0.85)"
    BG_INPUT = "rgba(255, 255, 255, 0.38)"

    PRIMARY = "#0F766E"
    PRIMARY_LIGHT = "#4FB3BF"

    TEXT_PRIMARY = "#1F2933"
    TEXT_SECONDARY = "#334155"
    TEXT_MUTED = "#64748B"

    BORDER = "rgba(15, 23, 42, 0.14)"

    SUCCESS = "#2F855A"
    ERROR = "#D64545"
    ERROR_BG = "rgba(214, 69, 69, 0.18)"
    HIGHLIGHT_BG = "rgba(15, 118, 110, 0.18)"


def _parse_hex(value: str) -> tuple[int, int, int] | None:
    value = value.strip()
    if not (value.startswith("#") and len(value) == 7):
        return None
    try:
        return int(value[1:3], 16), int(value[3:5], 16), int(value[5:7], 16)
    except ValueError:
        return None


def blend_hex(a: str, b: str, t: float) -> str:
    """Blend two #RRGGBB colors. t=0 -> a, t=1 -> b.

    Anything that is not a #RRGGBB pair returns *a* unchanged.
    """
    start = _parse_hex(a)
    end = _parse_hex(b)
    if start is None or end is None:
        return a
    t = max(0.0, min(1.0, float(t)))
    r, g, bl = (int(s + (e - s) * t) for s, e in zip(start, end))
    return f"#{r:02X}{g:02X}{bl:02X}"


def countdown_color(seconds_left: int, duration_seconds: int) -> str:
    """Color for the countdown label, drifting toward ERROR as time runs out."""
    if duration_seconds <= 0:
        return ThemeColors.PRIMARY
    used = 1.0 - seconds_left / duration_seconds
    return blend_hex(ThemeColors.PRIMARY, ThemeColors.ERROR, used)
