from __future__ import annotations

import argparse
import curses
import logging
import sys
import time
from typing import Optional, Sequence

from snake_core import (
    DOWN,
    GRID_HEIGHT,
    GRID_WIDTH,
    LEFT,
    RIGHT,
    UP,
    Cell,
    Direction,
    GameState,
    Grid,
    SnakeGame,
    TickResult,
    resolve_direction,
)
from terminal import Terminal, TerminalError


logger = logging.getLogger(__name__)

MOVE_DELAY_MS = 125
CTRL_C = 3

DIRECTIONS = {
    ord("w"): UP,
    ord("W"): UP,
    curses.KEY_UP: UP,
    ord("a"): LEFT,
    ord("A"): LEFT,
    curses.KEY_LEFT: LEFT,
    ord("s"): DOWN,
    ord("S"): DOWN,
    curses.KEY_DOWN: DOWN,
    ord("d"): RIGHT,
    ord("D"): RIGHT,
    curses.KEY_RIGHT: RIGHT,
}
QUIT_KEYS = frozenset({ord("q"), ord("Q"), ord("c"), ord("C"), CTRL_C})

CELL_CHARS = {
    Cell.EMPTY: " ",
    Cell.BODY: "O",
    Cell.FOOD: "X",
}


def cell_char(grid: Grid, x: int, y: int) -> str:
    cell = grid.get(x, y)
    if cell == Cell.WALL:
        return "-" if y in (0, grid.height - 1) else "|"
    return CELL_CHARS[cell]


def grid_lines(grid: Grid) -> list[str]:
    return ["".join(cell_char(grid, x, y) for x in range(grid.width)) for y in range(grid.height)]


def render(terminal: Terminal, grid: Grid, length: int) -> None:
    terminal.move_cursor_to(0, 0)
    for line in grid_lines(grid):
        terminal.write(line + "\n")
    terminal.write(f"Length: {length}")
    terminal.refresh()


def read_input(terminal: Terminal, direction: Direction) -> Optional[Direction]:
    """Drain every pending key and return the direction for this tick.

    Returns ``None`` as soon as a quit key is seen. Of the direction keys in
    the batch only the last one counts, and it is dropped if it would reverse
    the snake onto itself.
    """
    requested = direction
    while True:
        key = terminal.poll_key_event(0)
        if key is None:
            break
        if key in QUIT_KEYS:
            return None
        requested = DIRECTIONS.get(key, requested)
    return resolve_direction(direction, requested)


def run(terminal: Terminal, game: SnakeGame, tick_delay_ms: int = MOVE_DELAY_MS) -> TickResult:
    terminal.clear_screen()
    while True:
        terminal.hide_cursor()
        direction = read_input(terminal, game.direction)
        if direction is None:
            logger.info("player quit at length %d", game.length)
            return TickResult(GameState.QUIT, game.length)

        result = game.step(direction)
        if result.state is GameState.DEAD:
            return result

        render(terminal, game.grid, game.length)
        time.sleep(tick_delay_ms / 1000)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play Snake in the terminal (WASD/arrows to move, Q to quit).")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for food placement.")
    parser.add_argument("--log-file", type=str, default=None, help="Write log records to this file.")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Minimum level written to the log file.",
    )
    return parser.parse_args(argv)


def configure_logging(log_file: Optional[str], level: str) -> None:
    # Nothing may reach stderr while curses owns the screen.
    if log_file:
        logging.basicConfig(
            filename=log_file,
            level=getattr(logging, level),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    else:
        logging.getLogger().addHandler(logging.NullHandler())


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_file, args.log_level)

    game = SnakeGame(seed=args.seed)
    try:
        with Terminal() as terminal:
            terminal.ensure_size(GRID_WIDTH + 1, GRID_HEIGHT + 1)
            result = run(terminal, game)
    except TerminalError as exc:
        logger.exception("terminal failure")
        print(f"snake: {exc}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("Game interrupted.", file=sys.stderr)
        return 130

    if result.state is GameState.DEAD:
        print(f"You died! Final length: {result.length}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
