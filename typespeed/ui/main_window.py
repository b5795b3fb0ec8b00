from __future__ import annotations

import asyncio
import logging
from typing import Coroutine, Optional

from PySide6.QtCore import QEvent, QObject, Qt, QTimer
from PySide6.QtGui import QCloseEvent, QKeyEvent
from PySide6.QtWidgets import (
    QComboBox,
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from typespeed.core.options import SetupOptions
from typespeed.core.session import ENTER_KEY, SessionState, TypingSession
from typespeed.ui.colors import ThemeColors, countdown_color
from typespeed.ui.models import build_line_views
from typespeed.ui.typing_widgets import TargetLineLabel

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Main window with three screens: setup, the running test, and results.

    The window owns no test state of its own.  It forwards input to the
    session and re-renders whenever the session reports a change.
    """

    def __init__(self, session: TypingSession, options: SetupOptions) -> None:
        super().__init__()
        self._session = session
        self._options = options
        self._pending: set[asyncio.Future] = set()

        self._stack: Optional[QStackedWidget] = None
        self._setup_screen: Optional[QWidget] = None
        self._test_screen: Optional[QWidget] = None
        self._results_screen: Optional[QWidget] = None

        self._duration_combo: Optional[QComboBox] = None
        self._difficulty_combo: Optional[QComboBox] = None

        self._test_title_label: Optional[QLabel] = None
        self._time_label: Optional[QLabel] = None
        self._hint_label: Optional[QLabel] = None
        self._lines_layout: Optional[QVBoxLayout] = None
        self._line_labels: list[TargetLineLabel] = []
        self._rendered_targets: tuple[str, ...] = ()
        self.input_box: Optional[QLineEdit] = None

        self._result_values: dict[str, QLabel] = {}

        self.setWindowTitle("TypeSpeed")
        self.resize(900, 600)
        self._build_ui()
        self._session.subscribe(self._refresh)
        self._refresh()

    # -- layout -------------------------------------------------------------

    def _build_ui(self) -> None:
        self._stack = QStackedWidget()
        self._stack.setStyleSheet(f"QStackedWidget {{ background: {ThemeColors.BG_MAIN}; }}")
        self._setup_screen = self._build_setup_screen()
        self._test_screen = self._build_test_screen()
        self._results_screen = self._build_results_screen()
        for screen in (self._setup_screen, self._test_screen, self._results_screen):
            self._stack.addWidget(screen)
        self.setCentralWidget(self._stack)

    def _card(self) -> tuple[QFrame, QVBoxLayout]:
        card = QFrame()
        card.setStyleSheet(
            f"""
            QFrame {{
                background: {ThemeColors.BG_CARD};
                border: 1px solid {ThemeColors.BORDER};
                border-radius: 16px;
            }}
            QLabel {{ border: none; background: transparent; color: {ThemeColors.TEXT_PRIMARY}; }}
            """
        )
        layout = QVBoxLayout(card)
        layout.setContentsMargins(32, 28, 32, 28)
        layout.setSpacing(16)
        return card, layout

    def _button(self, text: str, primary: bool = False) -> QPushButton:
        button = QPushButton(text)
        background = ThemeColors.PRIMARY if primary else "white"
        color = "white" if primary else ThemeColors.PRIMARY
        button.setCursor(Qt.PointingHandCursor)
        button.setStyleSheet(
            f"""
            QPushButton {{
                background: {background};
                color: {color};
                border: 1px solid {ThemeColors.PRIMARY};
                border-radius: 10px;
                padding: 10px 22px;
                font-size: 15px;
                font-weight: 600;
            }}
            QPushButton:hover {{ background: {ThemeColors.PRIMARY_LIGHT}; color: white; }}
            """
        )
        return button

    def _build_setup_screen(self) -> QWidget:
        screen = QWidget()
        outer = QVBoxLayout(screen)
        outer.setAlignment(Qt.AlignCenter)
        card, layout = self._card()
        card.setMinimumWidth(420)

        title = QLabel("Typing speed test")
        title.setStyleSheet("font-size: 28px; font-weight: 700;")
        layout.addWidget(title)

        form = QGridLayout()
        form.setHorizontalSpacing(16)
        form.setVerticalSpacing(12)

        self._duration_combo = QComboBox()
        for seconds in self._options.durations:
            self._duration_combo.addItem(f"{seconds} seconds", seconds)
        self._duration_combo.setCurrentIndex(self._options.durations.index(self._options.default_duration))

        self._difficulty_combo = QComboBox()
        for name in self._options.difficulties:
            self._difficulty_combo.addItem(name, name)
        self._difficulty_combo.setCurrentIndex(self._options.difficulties.index(self._options.default_difficulty))

        form.addWidget(QLabel("Duration"), 0, 0)
        form.addWidget(self._duration_combo, 0, 1)
        form.addWidget(QLabel("Difficulty"), 1, 0)
        form.addWidget(self._difficulty_combo, 1, 1)
        layout.addLayout(form)

        start_button = self._button("Start test", primary=True)
        start_button.clicked.connect(self._start_test)
        layout.addWidget(start_button)

        outer.addWidget(card)
        return screen

    def _build_test_screen(self) -> QWidget:
        screen = QWidget()
        outer = QVBoxLayout(screen)
        outer.setContentsMargins(40, 32, 40, 32)
        outer.setSpacing(20)

        header = QHBoxLayout()
        self._test_title_label = QLabel()
        self._test_title_label.setStyleSheet(
            f"font-size: 18px; font-weight: 600; color: {ThemeColors.TEXT_SECONDARY};"
        )
        self._time_label = QLabel()
        self._time_label.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
        header.addWidget(self._test_title_label)
        header.addStretch(1)
        header.addWidget(self._time_label)
        outer.addLayout(header)

        card, layout = self._card()
        self._lines_layout = QVBoxLayout()
        self._lines_layout.setSpacing(6)
        layout.addLayout(self._lines_layout)
        outer.addWidget(card)

        self.input_box = QLineEdit()
        self.input_box.setPlaceholderText("Type the highlighted line, Enter moves to the next one")
        self.input_box.setStyleSheet(
            f"""
            QLineEdit {{
                background: {ThemeColors.BG_INPUT};
                color: {ThemeColors.TEXT_PRIMARY};
                border: 1px solid {ThemeColors.BORDER};
                border-radius: 12px;
                padding: 16px 20px;
                font-size: 22px;
            }}
            QLineEdit:focus {{ border: 2px solid {ThemeColors.PRIMARY}; }}
            """
        )
        self.input_box.textEdited.connect(self._session.on_input)
        self.input_box.installEventFilter(self)
        outer.addWidget(self.input_box)

        self._hint_label = QLabel()
        self._hint_label.setStyleSheet(f"color: {ThemeColors.TEXT_MUTED}; font-size: 14px;")
        outer.addWidget(self._hint_label)

        buttons = QHBoxLayout()
        reset_button = self._button("Reset")
        reset_button.clicked.connect(lambda: self._spawn(self._session.reset()))
        back_button = self._button("Back to setup")
        back_button.clicked.connect(lambda: self._spawn(self._session.back_to_setup()))
        buttons.addStretch(1)
        buttons.addWidget(reset_button)
        buttons.addWidget(back_button)
        outer.addLayout(buttons)
        outer.addStretch(1)
        return screen

    def _build_results_screen(self) -> QWidget:
        screen = QWidget()
        outer = QVBoxLayout(screen)
        outer.setAlignment(Qt.AlignCenter)
        card, layout = self._card()
        card.setMinimumWidth(420)

        title = QLabel("Results")
        title.setStyleSheet("font-size: 28px; font-weight: 700;")
        layout.addWidget(title)

        grid = QGridLayout()
        grid.setHorizontalSpacing(24)
        grid.setVerticalSpacing(10)
        rows = (
            ("wpm", "Words per minute"),
            ("accuracy", "Accuracy"),
            ("correct", "Correct characters"),
            ("typed", "Typed characters"),
        )
        for row, (key, caption) in enumerate(rows):
            caption_label = QLabel(caption)
            caption_label.setStyleSheet(f"color: {ThemeColors.TEXT_MUTED}; font-size: 15px;")
            value_label = QLabel("0")
            value_label.setStyleSheet(f"color: {ThemeColors.PRIMARY}; font-size: 26px; font-weight: 700;")
            value_label.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
            grid.addWidget(caption_label, row, 0)
            grid.addWidget(value_label, row, 1)
            self._result_values[key] = value_label
        layout.addLayout(grid)

        buttons = QHBoxLayout()
        again_button = self._button("Try again", primary=True)
        again_button.clicked.connect(self._start_test)
        back_button = self._button("Back to setup")
        back_button.clicked.connect(lambda: self._spawn(self._session.back_to_setup()))
        buttons.addWidget(again_button)
        buttons.addWidget(back_button)
        layout.addLayout(buttons)

        outer.addWidget(card)
        return screen

    # -- actions ------------------------------------------------------------

    def _start_test(self) -> None:
        duration = int(self._duration_combo.currentData())
        difficulty = str(self._difficulty_combo.currentData())
        self._spawn(self._session.start_test(duration, difficulty))

    def _spawn(self, coro: Coroutine) -> None:
        """Schedule a session coroutine on the running loop and log if it fails."""
        task = asyncio.ensure_future(coro)
        self._pending.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Future) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Session action failed: %s", exc, exc_info=exc)

    def eventFilter(self, obj: QObject, event: QEvent) -> bool:
        if obj is self.input_box and event.type() == QEvent.KeyPress:
            return self._on_key_press(event)
        return super().eventFilter(obj, event)

    def _on_key_press(self, event: QKeyEvent) -> bool:
        """Forward a key press to the session; swallow keys that committed a line."""
        if event.key() in (Qt.Key.Key_Return, Qt.Key.Key_Enter):
            return self._session.on_key_down(ENTER_KEY)
        text = event.text()
        # editing and navigation keys stay with the line edit
        if not text or not text.isprintable():
            return False
        return self._session.on_key_down(text)

    # -- rendering ----------------------------------------------------------

    def _refresh(self) -> None:
        state = self._session.state
        if state is SessionState.SETUP:
            self._stack.setCurrentWidget(self._setup_screen)
        elif state is SessionState.FINISHED:
            self._show_results()
        else:
            self._show_test(state)

    def _show_test(self, state: SessionState) -> None:
        session = self._session
        self._stack.setCurrentWidget(self._test_screen)
        self._test_title_label.setText(f"{session.difficulty} · {session.duration_seconds}s")

        color = countdown_color(session.seconds_left, session.duration_seconds)
        self._time_label.setStyleSheet(f"font-size: 32px; font-weight: 700; color: {color};")
        m, s = divmod(session.seconds_left, 60)
        self._time_label.setText(f"{m}:{s:02d}")

        self._render_lines()

        if not session.target_lines:
            self._hint_label.setText("Loading phrase…")
        elif state is SessionState.READY:
            self._hint_label.setText("The countdown starts with your first keystroke.")
        else:
            self._hint_label.setText(f"Line {session.current_line_index + 1} of {len(session.target_lines)}")

        self.input_box.setEnabled(bool(session.target_lines))
        if self.input_box.text() != session.current_typed:
            self.input_box.setText(session.current_typed)
        if session.consume_focus_request():
            QTimer.singleShot(0, self.input_box.setFocus)

    def _render_lines(self) -> None:
        targets = self._session.target_lines
        if targets != self._rendered_targets:
            for label in self._line_labels:
                self._lines_layout.removeWidget(label)
                label.deleteLater()
            self._line_labels = []
            for _ in targets:
                label = TargetLineLabel()
                self._lines_layout.addWidget(label)
                self._line_labels.append(label)
            self._rendered_targets = targets
        for label, view in zip(self._line_labels, build_line_views(self._session)):
            label.set_line(view)

    def _show_results(self) -> None:
        result = self._session.result
        self._result_values["wpm"].setText(f"{result.wpm}")
        self._result_values["accuracy"].setText(f"{result.accuracy}%")
        self._result_values["correct"].setText(f"{result.correct_chars}")
        self._result_values["typed"].setText(f"{result.total_typed_chars}")
        self._stack.setCurrentWidget(self._results_screen)

    def closeEvent(self, event: QCloseEvent) -> None:
        self._session.unsubscribe(self._refresh)
        self._spawn(self._session.close())
        super().closeEvent(event)
