# turnmaze/core/loader.py
#!/usr/bin/env python3
"""
Maze loaders.

Two on-disk formats are understood:

- Text: one row per line, `#` wall, `.` open, `S` start, `E` goal.
  Any other character is treated as open floor.
- JSON (workshop map format): {"width", "height", "cells", "start", "goal"}
  with cells[row][col] == 1 for a wall.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from turnmaze.core.types import Grid, Cell, MalformedMaze, WALL, OPEN

WALL_CH = "#"
START_CH = "S"
GOAL_CH = "E"
MARK_CH = "O"


def parse_maze(text: str) -> Grid:
    lines = text.splitlines()
    while lines and not lines[-1].strip():
        lines.pop()
    while lines and not lines[0].strip():
        lines.pop(0)
    if not lines:
        raise MalformedMaze("maze is empty")

    width = len(lines[0])
    if width == 0:
        raise MalformedMaze("maze is empty")

    start: Optional[Cell] = None
    goal: Optional[Cell] = None
    cells: List[tuple] = []
    for y, line in enumerate(lines):
        if len(line) != width:
            raise MalformedMaze(f"row {y} has length {len(line)}, expected {width}")
        row = []
        for x, ch in enumerate(line):
            if ch == START_CH:
                if start is not None:
                    logging.warning("duplicate start marker at %s, overriding %s", (x, y), start)
                start = (x, y)
            elif ch == GOAL_CH:
                if goal is not None:
                    logging.warning("duplicate goal marker at %s, overriding %s", (x, y), goal)
                goal = (x, y)
            row.append(WALL if ch == WALL_CH else OPEN)
        cells.append(tuple(row))

    if start is None:
        raise MalformedMaze("no start marker 'S'")
    if goal is None:
        raise MalformedMaze("no goal marker 'E'")
    return Grid(width, len(cells), tuple(cells), start, goal)


def _pair(raw) -> Cell:
    if len(raw) != 2:
        raise ValueError("start and goal must be [col, row] pairs")
    return (int(raw[0]), int(raw[1]))


def load_maze_json(data: Dict[str, Any]) -> Grid:
    try:
        width = int(data["width"])
        height = int(data["height"])
        start = _pair(data["start"])
        goal = _pair(data["goal"])
        cells = tuple(tuple(WALL if v == WALL else OPEN for v in r) for r in data["cells"])
    except (KeyError, IndexError, TypeError, ValueError) as ex:
        raise MalformedMaze(f"bad map record: {ex}") from ex
    return Grid(width, height, cells, start, goal)


def load_maze(path: Union[str, Path]) -> Grid:
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except UnicodeDecodeError as ex:
        raise MalformedMaze(f"{path.name}: not UTF-8 text ({ex.reason})") from ex
    if path.suffix.lower() == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as ex:
            raise MalformedMaze(f"{path.name}: {ex}") from ex
        return load_maze_json(data)
    return parse_maze(text)


def render_maze(grid: Grid, marks: Iterable[Cell] = ()) -> str:
    """Inverse of parse_maze; cells in `marks` are painted with 'O'."""
    marked = set(marks)
    out = []
    for y in range(grid.height):
        row = []
        for x in range(grid.width):
            c = (x, y)
            if c == grid.start:
                row.append(START_CH)
            elif c == grid.goal:
                row.append(GOAL_CH)
            elif grid.is_block(c):
                row.append(WALL_CH)
            elif c in marked:
                row.append(MARK_CH)
            else:
                row.append(".")
        out.append("".join(row))
    return "\n".join(out)
