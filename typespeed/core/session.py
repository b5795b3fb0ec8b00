from __future__ import annotations

import asyncio
import logging
import time
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from typespeed.core.phrases import PhraseSource
from typespeed.core.scoring import TestResult, score
from typespeed.core.wrapping import DEFAULT_LINE_WIDTH, wrap_lines

logger = logging.getLogger(__name__)

ENTER_KEY = "Enter"

Listener = Callable[[], None]


class SessionState(Enum):
    SETUP = "setup"
    READY = "ready"
    COUNTING = "counting"
    FINISHED = "finished"


class InvalidTransitionError(RuntimeError):
    """Raised when a transition is requested from a state that does not allow it."""


class TypingSession:
    """State machine for a single timed typing test.

    The test moves from setup to ready once a phrase is loaded, starts
    counting down on the first keystroke and finishes when the time runs out
    or the last line is committed.  Every mutation happens on the event loop
    thread; the countdown is the only background task and at most one exists
    at a time.

    Observers registered with :meth:`subscribe` are called after each change
    the UI should render.
    """

    def __init__(
        self,
        phrase_source: PhraseSource,
        *,
        line_width: int = DEFAULT_LINE_WIDTH,
        tick_seconds: float = 1.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._phrase_source = phrase_source
        self._line_width = line_width
        self._tick_seconds = tick_seconds
        self._clock = clock

        self._is_active = False
        self._is_finished = False
        self._duration_seconds = 0
        self._difficulty = ""
        self._elapsed_seconds = 0
        self._start_time: Optional[float] = None

        self._target_lines: Tuple[str, ...] = ()
        self._typed_by_line: Dict[int, str] = {}
        self._current_line_index = 0
        self._current_typed = ""
        self._result = TestResult()

        self._focus_requested = False
        # bumped whenever a pending phrase load stops belonging to the session
        self._load_generation = 0
        self._listeners: List[Listener] = []
        self._countdown: Optional[asyncio.Task] = None
        self._countdown_cancel: Optional[asyncio.Event] = None

    # -- observable state ---------------------------------------------------

    @property
    def state(self) -> SessionState:
        """Where the test is: setup, ready, counting or finished."""
        if not self._is_active:
            return SessionState.SETUP
        if self._is_finished:
            return SessionState.FINISHED
        if self._start_time is None:
            return SessionState.READY
        return SessionState.COUNTING

    @property
    def is_active(self) -> bool:
        """True from start_test until the user goes back to setup."""
        return self._is_active

    @property
    def is_finished(self) -> bool:
        """True once the test has been scored."""
        return self._is_finished

    @property
    def duration_seconds(self) -> int:
        """Length of the test in seconds."""
        return self._duration_seconds

    @property
    def difficulty(self) -> str:
        """Difficulty the phrase was loaded for."""
        return self._difficulty

    @property
    def elapsed_seconds(self) -> int:
        """Whole seconds counted down so far."""
        return self._elapsed_seconds

    @property
    def seconds_left(self) -> int:
        """Seconds remaining, never below zero."""
        return max(0, self._duration_seconds - self._elapsed_seconds)

    @property
    def start_time(self) -> Optional[float]:
        """Unix timestamp of the first keystroke, or None before typing starts."""
        return self._start_time

    @property
    def target_lines(self) -> Tuple[str, ...]:
        """Wrapped lines of the phrase; empty while it loads."""
        return self._target_lines

    @property
    def current_line_index(self) -> int:
        """Index of the line being typed."""
        return self._current_line_index

    @property
    def current_typed(self) -> str:
        """Text typed so far on the current line."""
        return self._current_typed

    @property
    def result(self) -> TestResult:
        """Score of the last finished test, zeroed until then."""
        return self._result

    @property
    def countdown_running(self) -> bool:
        """True while the countdown task is alive."""
        return self._countdown is not None and not self._countdown.done()

    def typed_for_line(self, index: int) -> str:
        """Text committed for line *index*, or "" if not committed."""
        return self._typed_by_line.get(index, "")

    def current_target(self) -> str:
        """Target text of the line being typed, or "" when no line is left."""
        if self._current_line_index >= len(self._target_lines):
            return ""
        return self._target_lines[self._current_line_index]

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def consume_focus_request(self) -> bool:
        """Return True once after a transition that wants the input focused."""
        if not self._focus_requested or self._is_finished or not self._is_active:
            return False
        self._focus_requested = False
        return True

    # -- transitions --------------------------------------------------------

    async def start_test(self, duration_seconds: int, difficulty: str) -> None:
        """Load a phrase for *difficulty* and get ready to type for *duration_seconds*."""
        if self.state not in (SessionState.SETUP, SessionState.FINISHED):
            raise InvalidTransitionError(f"Cannot start a test while {self.state.value}")
        if duration_seconds <= 0:
            raise ValueError(f"duration_seconds must be positive, got {duration_seconds}")

        self._load_generation += 1
        generation = self._load_generation
        self._is_active = True
        self._duration_seconds = duration_seconds
        self._difficulty = difficulty
        await self._reset_state()
        self._target_lines = ()
        self._notify()

        phrase = await self._phrase_source.get_phrase(difficulty)
        if generation != self._load_generation:
            logger.debug("Dropping phrase loaded for an abandoned %s test", difficulty)
            return
        self._target_lines = tuple(wrap_lines(phrase, self._line_width))
        self._focus_requested = True
        logger.info(
            "Started %ss %s test with %d lines",
            duration_seconds,
            difficulty,
            len(self._target_lines),
        )
        self._notify()

    def on_input(self, text: str) -> None:
        """Record the current value of the input field."""
        if not self._is_active or self._is_finished or not self._target_lines:
            return
        self._current_typed = text
        if self._start_time is None and text:
            self._start_countdown()
        self._notify()

    def on_key_down(self, key: str) -> bool:
        """Handle a key press; returns True when it committed the current line.

        Enter always commits.  Any other key commits once the typed text is as
        long as the target line, whatever its content.
        """
        if not self._is_active or self._is_finished:
            return False
        if self._current_line_index >= len(self._target_lines):
            return False
        target = self._target_lines[self._current_line_index]
        if key == ENTER_KEY or len(self._current_typed) == len(target):
            self.commit_line()
            return True
        return False

    def commit_line(self) -> None:
        if not self._is_active or self._is_finished:
            return
        if self._current_line_index >= len(self._target_lines):
            return

        self._typed_by_line[self._current_line_index] = self._current_typed
        self._current_line_index += 1
        self._current_typed = ""

        if self._current_line_index >= len(self._target_lines):
            self.finish()
            return

        self._focus_requested = True
        self._notify()

    def finish(self) -> None:
        """Stop the test and compute the result.  Calling it again does nothing."""
        if self._is_finished or not self._is_active:
            return

        self._is_finished = True
        self._cancel_countdown()

        typed_lines = [self._typed_by_line[i] for i in sorted(self._typed_by_line)]
        self._result = score(
            typed_lines,
            self._current_typed,
            self._target_lines,
            self._duration_seconds,
        )
        logger.info(
            "Finished test: %d/%d correct, %d%% accuracy, %d WPM",
            self._result.correct_chars,
            self._result.total_typed_chars,
            self._result.accuracy,
            self._result.wpm,
        )
        self._notify()

    async def reset(self) -> None:
        """Clear typing progress and timer, keeping the current lines."""
        await self._reset_state()
        self._focus_requested = True
        self._notify()

    async def back_to_setup(self) -> None:
        """Leave the test; a phrase still loading for it is discarded."""
        self._load_generation += 1
        await self._reset_state()
        self._is_active = False
        self._notify()

    async def close(self) -> None:
        """Stop the countdown, if any.  Used when the host window goes away."""
        await self._stop_countdown()

    # -- internals ----------------------------------------------------------

    async def _reset_state(self) -> None:
        await self._stop_countdown()

        self._start_time = None
        self._elapsed_seconds = 0
        self._is_finished = False

        self._typed_by_line.clear()
        self._current_line_index = 0
        self._current_typed = ""

        self._result = TestResult()

    def _start_countdown(self) -> None:
        if self._start_time is not None or self._is_finished:
            return

        self._start_time = self._clock()
        self._elapsed_seconds = 0

        self._cancel_countdown()
        cancel = asyncio.Event()
        self._countdown_cancel = cancel
        self._countdown = asyncio.get_running_loop().create_task(self._run_countdown(cancel))

    async def _run_countdown(self, cancel: asyncio.Event) -> None:
        while not cancel.is_set():
            try:
                await asyncio.wait_for(cancel.wait(), timeout=self._tick_seconds)
            except asyncio.TimeoutError:
                pass
            else:
                return

            self._elapsed_seconds += 1
            if self._elapsed_seconds >= self._duration_seconds:
                self.finish()
                return
            self._notify()

    def _cancel_countdown(self) -> None:
        if self._countdown_cancel is not None:
            self._countdown_cancel.set()

    async def _stop_countdown(self) -> None:
        self._cancel_countdown()
        task = self._countdown
        self._countdown = None
        self._countdown_cancel = None
        if task is not None and task is not asyncio.current_task():
            await asyncio.wait({task})

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()
