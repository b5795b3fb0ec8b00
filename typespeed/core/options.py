from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple

import yaml

PACKAGED_OPTIONS_FILE = Path(__file__).resolve().parent.parent / "data" / "options.yaml"


@dataclass(frozen=True)
class SetupOptions:
    """Durations and difficulties offered before a test starts."""

    durations: Tuple[int, ...]
    difficulties: Tuple[str, ...]
    default_duration: int
    default_difficulty: str

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "SetupOptions":
        path = path or PACKAGED_OPTIONS_FILE
        if not path.exists():
            raise FileNotFoundError(f"Options file not found: {path}")
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        if not raw or not isinstance(raw, dict):
            raise ValueError(f"{path.name}: expected YAML with 'durations' and 'difficulties'")
        try:
            return cls.from_mapping(raw)
        except ValueError as e:
            raise ValueError(f"{path.name}: {e}") from e

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "SetupOptions":
        durations = raw.get("durations")
        if not durations or not isinstance(durations, list):
            raise ValueError("missing or invalid 'durations'")
        for value in durations:
            # bool is an int subclass; reject it explicitly
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"duration {value!r} is not a positive number of seconds")

        difficulties = raw.get("difficulties")
        if not difficulties or not isinstance(difficulties, list):
            raise ValueError("missing or invalid 'difficulties'")
        names = tuple(str(item).strip() for item in difficulties)
        if not all(names):
            raise ValueError("'difficulties' contains an empty name")

        default_duration = raw.get("default_duration", durations[0])
        if default_duration not in durations:
            raise ValueError(f"default_duration {default_duration!r} is not one of {durations}")
        default_difficulty = str(raw.get("default_difficulty", names[0])).strip()
        if default_difficulty not in names:
            raise ValueError(f"default_difficulty {default_difficulty!r} is not one of {list(names)}")

        return cls(
            durations=tuple(durations),
            difficulties=names,
            default_duration=default_duration,
            default_difficulty=default_difficulty,
        )
