from __future__ import annotations

import pytest

from snake_core import Cell, Coordinate, SnakeGame
from terminal import TerminalError


class FakeTerminal:
    """In-memory stand-in for ``terminal.Terminal``.

    ``keys`` is consumed by ``poll_key_event``; a ``None`` entry ends the
    current drain, so a script like ``[None, None, ord("q")]`` means two idle
    ticks followed by a quit.
    """

    def __init__(self, keys=None, size=(80, 24)):
        self.keys = list(keys or [])
        self.columns, self.rows = size
        self.writes: list[str] = []
        self.cursor_moves: list[tuple[int, int]] = []
        self.refreshes = 0
        self.clears = 0
        self.hidden = 0
        self.entered = False
        self.exited = False

    def __enter__(self):
        self.entered = True
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exited = True

    def ensure_size(self, columns, rows):
        if self.columns < columns or self.rows < rows:
            raise TerminalError(f"terminal too small: need at least {columns}x{rows}")

    def clear_screen(self):
        self.clears += 1

    def hide_cursor(self):
        self.hidden += 1

    def move_cursor_to(self, x, y):
        self.cursor_moves.append((x, y))

    def poll_key_event(self, timeout=0.0):
        assert timeout == 0
        if not self.keys:
            return None
        return self.keys.pop(0)

    def write(self, text):
        self.writes.append(text)

    def refresh(self):
        self.refreshes += 1

    @property
    def output(self) -> str:
        return "".join(self.writes)


def place_food(game: SnakeGame, pos: Coordinate) -> None:
    game.grid.set(*game.food, Cell.EMPTY)
    game.grid.set(*pos, Cell.FOOD)
    game.food = pos


@pytest.fixture
def fake_terminal():
    return FakeTerminal()
