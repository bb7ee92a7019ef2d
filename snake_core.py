from __future__ import annotations

import enum
import logging
import random
from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterable, Tuple

import numpy as np


logger = logging.getLogger(__name__)

GRID_WIDTH = 40
GRID_HEIGHT = 20

Coordinate = Tuple[int, int]
Direction = Tuple[int, int]

UP: Direction = (0, -1)
DOWN: Direction = (0, 1)
LEFT: Direction = (-1, 0)
RIGHT: Direction = (1, 0)
DIR_VECTORS: Tuple[Direction, ...] = (UP, RIGHT, DOWN, LEFT)


class Cell(enum.IntEnum):
    """Integer codes stored in the grid buffer."""

    EMPTY = 0
    WALL = 1
    FOOD = 2
    BODY = 3


class GameState(enum.Enum):
    ALIVE = "alive"
    DEAD = "dead"
    QUIT = "quit"


@dataclass(frozen=True)
class TickResult:
    state: GameState
    length: int


class Grid:
    """Fixed-size board of cells, indexed as (x, y) with (0, 0) top-left.

    Storage is a ``(height, width)`` NumPy array, so a row of the array is a
    row on screen.
    """

    def __init__(self, width: int, height: int):
        if width < 3 or height < 3:
            raise ValueError("grid must be at least 3x3 to have an interior")
        self.width = width
        self.height = height
        self.cells = np.full((height, width), Cell.EMPTY, dtype=np.int8)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_border(self, x: int, y: int) -> bool:
        return x in (0, self.width - 1) or y in (0, self.height - 1)

    def get(self, x: int, y: int) -> Cell:
        self._check(x, y)
        return Cell(self.cells[y, x])

    def set(self, x: int, y: int, cell: Cell) -> None:
        self._check(x, y)
        self.cells[y, x] = cell

    def draw_border(self) -> None:
        self.cells[0, :] = Cell.WALL
        self.cells[-1, :] = Cell.WALL
        self.cells[:, 0] = Cell.WALL
        self.cells[:, -1] = Cell.WALL

    def count(self, cell: Cell) -> int:
        return int(np.count_nonzero(self.cells == cell))

    def find(self, cell: Cell) -> list[Coordinate]:
        ys, xs = np.nonzero(self.cells == cell)
        return list(zip(xs.tolist(), ys.tolist()))

    def has_empty_interior(self) -> bool:
        return bool(np.any(self.cells[1:-1, 1:-1] == Cell.EMPTY))

    def _check(self, x: int, y: int) -> None:
        # NumPy would happily wrap negative indices.
        if not self.in_bounds(x, y):
            raise IndexError(f"cell ({x}, {y}) outside {self.width}x{self.height} grid")


def spawn_food(grid: Grid, rng: random.Random) -> Coordinate:
    """Place food on a uniformly random empty interior cell and return it."""
    if not grid.has_empty_interior():
        raise ValueError("no empty interior cell left for food")
    while True:
        cell = (rng.randrange(1, grid.width - 1), rng.randrange(1, grid.height - 1))
        if grid.get(*cell) == Cell.EMPTY:
            grid.set(*cell, Cell.FOOD)
            return cell


def resolve_direction(current: Direction, requested: Direction) -> Direction:
    # Only the exact opposite is rejected; perpendicular turns always apply.
    if requested[0] == -current[0] and requested[1] == -current[1]:
        return current
    return requested


class SnakeGame:
    """Board, snake and food for one game, advanced one cell per ``step``."""

    def __init__(
        self,
        width: int = GRID_WIDTH,
        height: int = GRID_HEIGHT,
        body: Iterable[Coordinate] | None = None,
        direction: Direction = UP,
        seed: int | None = None,
    ):
        self.rng = random.Random(seed)
        self.grid = Grid(width, height)
        self.grid.draw_border()
        self.direction = direction

        segments = list(body) if body is not None else [(width // 2, height // 2)]
        if not segments:
            raise ValueError("snake needs at least one segment")
        if len(set(segments)) != len(segments):
            raise ValueError("snake segments must not overlap")
        self.snake: Deque[Coordinate] = deque()
        for segment in segments:
            if not self.grid.in_bounds(*segment) or self.grid.is_border(*segment):
                raise ValueError(f"snake segment {segment} is not an interior cell")
            self.grid.set(*segment, Cell.BODY)
            self.snake.append(segment)

        self.food: Coordinate = spawn_food(self.grid, self.rng)
        logger.debug("new %dx%d game, head at %s, food at %s", width, height, self.head, self.food)

    @property
    def head(self) -> Coordinate:
        return self.snake[0]

    @property
    def length(self) -> int:
        return len(self.snake)

    def step(self, direction: Direction | None = None) -> TickResult:
        if direction is not None:
            self.direction = direction
        head_x, head_y = self.head
        dx, dy = self.direction
        new_head = (head_x + dx, head_y + dy)

        if self._would_collide(new_head):
            logger.info("snake died at %s with length %d", new_head, self.length)
            return TickResult(GameState.DEAD, self.length)

        if self.grid.get(*new_head) == Cell.FOOD:
            self.grid.set(*new_head, Cell.BODY)
            self.snake.appendleft(new_head)
            self.food = spawn_food(self.grid, self.rng)
            logger.debug("ate food at %s, length %d, next food at %s", new_head, self.length, self.food)
        else:
            tail = self.snake.pop()
            self.grid.set(*tail, Cell.EMPTY)
            self.grid.set(*new_head, Cell.BODY)
            self.snake.appendleft(new_head)

        return TickResult(GameState.ALIVE, self.length)

    def _would_collide(self, pos: Coordinate) -> bool:
        if not self.grid.in_bounds(*pos):
            return True
        return self.grid.get(*pos) in (Cell.WALL, Cell.BODY)
