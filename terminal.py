from __future__ import annotations

import curses
import logging
from typing import Any


logger = logging.getLogger(__name__)


class TerminalError(RuntimeError):
    """The terminal could not be put into (or driven in) raw mode."""


class Terminal:
    """Scoped raw-mode handle over curses.

    Use as a context manager; leaving the block restores the cursor and the
    terminal's cooked mode on every exit path.
    """

    def __init__(self) -> None:
        self._screen: Any = None

    def __enter__(self) -> Terminal:
        self.enable_raw_mode()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disable_raw_mode()

    @property
    def active(self) -> bool:
        return self._screen is not None

    def enable_raw_mode(self) -> None:
        if self._screen is not None:
            return
        try:
            self._screen = curses.initscr()
        except curses.error as exc:
            raise TerminalError(f"cannot initialise terminal: {exc}") from exc
        try:
            curses.noecho()
            curses.raw()
            self._screen.keypad(True)
            self._screen.nodelay(True)
        except curses.error as exc:
            self.disable_raw_mode()
            raise TerminalError(f"cannot enter raw mode: {exc}") from exc
        logger.debug("raw mode enabled")

    def disable_raw_mode(self) -> None:
        if self._screen is None:
            return
        screen, self._screen = self._screen, None
        self._set_cursor(1)
        screen.keypad(False)
        curses.noraw()
        curses.echo()
        curses.endwin()
        logger.debug("raw mode disabled")

    def size(self) -> tuple[int, int]:
        rows, columns = self._require().getmaxyx()
        return columns, rows

    def ensure_size(self, columns: int, rows: int) -> None:
        have_columns, have_rows = self.size()
        if have_columns < columns or have_rows < rows:
            raise TerminalError(
                f"terminal too small: need at least {columns}x{rows}, have {have_columns}x{have_rows}"
            )

    def clear_screen(self) -> None:
        self._require().clear()

    def hide_cursor(self) -> None:
        self._set_cursor(0)

    def show_cursor(self) -> None:
        self._set_cursor(1)

    def move_cursor_to(self, x: int, y: int) -> None:
        self._call(self._require().move, y, x)

    def poll_key_event(self, timeout: float = 0.0) -> int | None:
        """Return the next pending key code, or ``None`` if nothing arrives in time."""
        screen = self._require()
        screen.timeout(max(0, int(timeout * 1000)))
        key = screen.getch()
        return None if key == -1 else key

    def write(self, text: str) -> None:
        self._call(self._require().addstr, text)

    def refresh(self) -> None:
        self._call(self._require().refresh)

    def _require(self) -> Any:
        if self._screen is None:
            raise TerminalError("terminal is not in raw mode")
        return self._screen

    def _call(self, fn, *args) -> None:
        try:
            fn(*args)
        except curses.error as exc:
            raise TerminalError(f"terminal output failed: {exc}") from exc

    def _set_cursor(self, visibility: int) -> None:
        try:
            curses.curs_set(visibility)
        except curses.error:
            # Some terminals cannot change cursor visibility; the game still works.
            logger.debug("terminal does not support cursor visibility %d", visibility)
