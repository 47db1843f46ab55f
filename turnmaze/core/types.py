# turnmaze/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Optional, Dict, Any, Set

Cell = Tuple[int, int]  # (col, row)

WALL = 1
OPEN = 0


class MazeError(ValueError):
    """Base class for maze problems the caller is expected to handle."""


class MalformedMaze(MazeError):
    """Empty, non-rectangular, or missing a start/goal marker."""


class NoPathFound(MazeError):
    """The goal cannot be reached from the start."""


class Heading(Enum):
    NORTH = (0, -1)
    EAST = (1, 0)
    SOUTH = (0, 1)
    WEST = (-1, 0)

    def turn_left(self) -> "Heading":
        return _LEFT[self]

    def turn_right(self) -> "Heading":
        return _RIGHT[self]

    def opposite(self) -> "Heading":
        return _RIGHT[_RIGHT[self]]

    def step(self, c: Cell) -> Optional[Cell]:
        """Neighbor of c in this heading; None when it would leave the non-negative quadrant."""
        dx, dy = self.value
        x, y = c[0] + dx, c[1] + dy
        if x < 0 or y < 0:
            return None
        return (x, y)

    @classmethod
    def parse(cls, text: str) -> "Heading":
        key = text.strip().upper()
        for h in cls:
            if h.name == key or h.name[0] == key:
                return h
        raise ValueError(f"unknown heading {text!r} (expected N, E, S or W)")


_RIGHT = {
    Heading.NORTH: Heading.EAST,
    Heading.EAST: Heading.SOUTH,
    Heading.SOUTH: Heading.WEST,
    Heading.WEST: Heading.NORTH,
}
_LEFT = {v: k for k, v in _RIGHT.items()}

State = Tuple[Cell, Heading]


@dataclass(frozen=True)
class CostModel:
    move_cost: int = 1
    turn_cost: int = 1000

    def __post_init__(self):
        for label, v in (("move_cost", self.move_cost), ("turn_cost", self.turn_cost)):
            if isinstance(v, bool) or not isinstance(v, int) or v < 0:
                raise ValueError(f"{label} must be a non-negative integer, got {v!r}")

    def transition(self, before: Heading, after: Heading) -> int:
        if before == after:
            return self.move_cost
        return self.move_cost + self.turn_cost


@dataclass(frozen=True)
class Grid:
    width: int
    height: int
    cells: Tuple[Tuple[int, ...], ...]  # [row][col]
    start: Cell
    goal: Cell

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise MalformedMaze("maze is empty")
        if len(self.cells) != self.height or any(len(r) != self.width for r in self.cells):
            raise MalformedMaze("cells size mismatch")
        for label, c in (("start", self.start), ("goal", self.goal)):
            if not self.in_bounds(c):
                raise MalformedMaze(f"{label} out of bounds: {c}")
            if self.is_block(c):
                raise MalformedMaze(f"{label} is on a wall: {c}")

    def in_bounds(self, c: Cell) -> bool:
        x, y = c
        return 0 <= x < self.width and 0 <= y < self.height

    def is_block(self, c: Cell) -> bool:
        x, y = c
        return self.cells[y][x] == WALL

    def is_open(self, c: Cell) -> bool:
        return self.in_bounds(c) and not self.is_block(c)

    def open_cells(self) -> List[Cell]:
        return [(x, y) for y in range(self.height) for x in range(self.width)
                if self.cells[y][x] != WALL]


@dataclass
class SearchResult:
    best_cost: Optional[int]
    scores: Dict[State, int]      # the score table, kept for reconstruction
    costs: CostModel
    start_heading: Heading
    popped: int = 0

    @property
    def found(self) -> bool:
        return self.best_cost is not None

    def require_cost(self) -> int:
        if self.best_cost is None:
            raise NoPathFound("goal is unreachable from start")
        return self.best_cost

    def goal_headings(self, grid: Grid) -> List[Heading]:
        """Headings in which the goal is reached at the minimum cost."""
        if self.best_cost is None:
            return []
        return [h for h in Heading if self.scores.get((grid.goal, h)) == self.best_cost]


@dataclass
class StepResult:
    status: str                   # "idle" | "running" | "done" | "no_path"
    opened: List[Cell] = field(default_factory=list)
    closed: List[Cell] = field(default_factory=list)
    current: Optional[Cell] = None
    heading: Optional[Heading] = None
    path: Optional[List[Cell]] = None
    tiles: Optional[Set[Cell]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)
