"""Application entry point and setup for the TypeSpeed typing test."""

import logging
import os
import sys
from typing import Mapping, Optional

from PySide6 import QtAsyncio
from PySide6.QtWidgets import QApplication

from typespeed.core.options import SetupOptions
from typespeed.core.phrases import PhraseSource, loader_for_location
from typespeed.core.session import TypingSession
from typespeed.core.wrapping import DEFAULT_LINE_WIDTH
from typespeed.ui.main_window import MainWindow

PHRASES_ENV = "TYPESPEED_PHRASES"
LINE_WIDTH_ENV = "TYPESPEED_LINE_WIDTH"


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def phrase_location(environ: Mapping[str, str] = os.environ) -> Optional[str]:
    """URL or directory holding the phrase files, None for the packaged ones."""
    value = environ.get(PHRASES_ENV, "").strip()
    return value or None


def line_width(environ: Mapping[str, str] = os.environ) -> int:
    raw = environ.get(LINE_WIDTH_ENV, "").strip()
    if not raw:
        return DEFAULT_LINE_WIDTH
    try:
        width = int(raw)
    except ValueError:
        width = 0
    if width <= 0:
        logging.warning(f"Ignoring {LINE_WIDTH_ENV}={raw!r}, using {DEFAULT_LINE_WIDTH}")
        return DEFAULT_LINE_WIDTH
    return width


def build_session(environ: Mapping[str, str] = os.environ) -> TypingSession:
    """Wire a typing session to the phrase source configured in *environ*."""
    location = phrase_location(environ)
    source = PhraseSource(loader_for_location(location))
    logging.info(f"Loading phrases from {location or 'packaged data'}")
    return TypingSession(source, line_width=line_width(environ))


def run() -> None:
    """Initialize the application and run the Qt event loop with asyncio on top."""
    configure_logging()
    app = QApplication(sys.argv)
    app.setApplicationName("TypeSpeed")
    app.setApplicationDisplayName("TypeSpeed")

    options = SetupOptions.load()
    session = build_session()

    window = MainWindow(session=session, options=options)
    window.show()

    QtAsyncio.run(handle_sigint=True)
