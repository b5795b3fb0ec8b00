from __future__ import annotations

import asyncio
import logging
import random
from pathlib import Path
from typing import Dict, List, Optional, Protocol

import requests

logger = logging.getLogger(__name__)

PACKAGED_PHRASES_DIR = Path(__file__).resolve().parent.parent / "data" / "phrases"

_FALLBACK_EASY = "The cat jumped over the mouse and the fox which is easy."
_FALLBACK_MEDIUM = (
    "Typing fast requires focus and consistent daily practice so your hands "
    "learn the rhythm of words."
)
_FALLBACK_HARD = (
    "Pack my box with five dozen liquor jugs then quickly judge my vow as the "
    "wizard of quizzical puzzles watches."
)


class PhraseLoadError(Exception):
    """Raised by a phrase loader when the phrase file cannot be retrieved."""


class PhraseLoader(Protocol):
    async def load(self, difficulty: str) -> str:
        """Return the raw content of the phrase file for *difficulty*."""
        ...


def phrase_file_name(difficulty: str) -> str:
    return f"{difficulty}.txt"


def parse_phrases(content: str) -> List[str]:
    """Split newline-separated phrase file content, dropping blank lines."""
    return [line.strip() for line in content.splitlines() if line.strip()]


def fallback_phrases(difficulty: str) -> List[str]:
    """Built-in phrase used when no phrase file is available."""
    if difficulty == "Easy":
        return [_FALLBACK_EASY]
    if difficulty == "Medium":
        return [_FALLBACK_MEDIUM]
    return [_FALLBACK_HARD]


class HttpPhraseLoader:
    """Fetches ``<base_url>/<Difficulty>.txt`` over HTTP."""

    def __init__(self, base_url: str, timeout: float = 10.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    def url_for(self, difficulty: str) -> str:
        return f"{self._base_url}/{phrase_file_name(difficulty)}"

    async def load(self, difficulty: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._get, self.url_for(difficulty))

    def _get(self, url: str) -> str:
        try:
            resp = requests.get(url, timeout=self._timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise PhraseLoadError(f"Could not fetch {url}: {e}") from e
        return resp.text


class FilePhraseLoader:
    """Reads ``<base_dir>/<Difficulty>.txt`` from disk."""

    def __init__(self, base_dir: Path) -> None:
        self._base_dir = Path(base_dir)

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    async def load(self, difficulty: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._read, self._base_dir / phrase_file_name(difficulty))

    @staticmethod
    def _read(path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PhraseLoadError(f"Could not read {path}: {e}") from e


def loader_for_location(location: Optional[str]) -> PhraseLoader:
    """Pick a loader for a phrase base path: a URL, a directory, or the packaged phrases."""
    if not location:
        return FilePhraseLoader(PACKAGED_PHRASES_DIR)
    if location.startswith(("http://", "https://")):
        return HttpPhraseLoader(location)
    return FilePhraseLoader(Path(location).expanduser())


class PhraseSource:
    """Supplies a random phrase per difficulty, loading each phrase file once.

    Loaded (or fallback) phrases are cached per difficulty for the lifetime
    of the instance.  Consecutive calls never return the same phrase twice
    unless only one candidate exists.
    """

    def __init__(self, loader: PhraseLoader, rng: Optional[random.Random] = None) -> None:
        self._loader = loader
        self._rng = rng or random.Random()
        self._cache: Dict[str, List[str]] = {}
        self._last_phrase: Optional[str] = None

    @property
    def last_phrase(self) -> Optional[str]:
        return self._last_phrase

    def cached(self, difficulty: str) -> Optional[List[str]]:
        phrases = self._cache.get(difficulty)
        return list(phrases) if phrases is not None else None

    def clear(self) -> None:
        self._cache.clear()
        self._last_phrase = None

    async def get_phrase(self, difficulty: str) -> str:
        if difficulty not in self._cache:
            self._cache[difficulty] = await self._load_phrases(difficulty)
        candidates = self._cache[difficulty]

        # duplicate lines in a file count as one candidate
        can_vary = len(set(candidates)) > 1
        selected = self._rng.choice(candidates)
        while can_vary and selected == self._last_phrase:
            selected = self._rng.choice(candidates)

        self._last_phrase = selected
        return selected

    async def _load_phrases(self, difficulty: str) -> List[str]:
        try:
            content = await self._loader.load(difficulty)
        except PhraseLoadError as e:
            logger.warning("Using built-in phrase for %s: %s", difficulty, e)
            return fallback_phrases(difficulty)

        phrases = parse_phrases(content)
        if not phrases:
            logger.warning("Phrase file for %s is empty, using built-in phrase", difficulty)
            return fallback_phrases(difficulty)
        logger.info("Loaded %d phrases for %s", len(phrases), difficulty)
        return phrases
