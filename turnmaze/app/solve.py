# turnmaze/app/solve.py
#!/usr/bin/env python3
"""Print the lowest score and the number of optimal tiles for a maze file.

Run:
  turnmaze-solve maps/01_sample.txt
  python -m turnmaze.app.solve maps/01_sample.txt --turn-cost=1000 --show
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from turnmaze.app.settings import resolve_costs, resolve_heading
from turnmaze.core.heading_dijkstra import find_lowest_cost
from turnmaze.core.loader import load_maze, render_maze
from turnmaze.core.optimal_tiles import optimal_path_cells
from turnmaze.core.types import CostModel, Heading, MalformedMaze, NoPathFound

EXIT_OK = 0
EXIT_NO_PATH = 1
EXIT_BAD_MAZE = 2


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="turnmaze-solve", description=__doc__.splitlines()[0])
    ap.add_argument("maze", help="Maze file (.txt grid or .json workshop map)")
    ap.add_argument("--move-cost", type=int, default=None, help="Cost of one step (env MAZE_MOVE_COST, default 1)")
    ap.add_argument("--turn-cost", type=int, default=None, help="Extra cost of a quarter turn (env MAZE_TURN_COST, default 1000)")
    ap.add_argument("--heading", default=None, help="Start heading N/E/S/W (env MAZE_START_HEADING, default E)")
    ap.add_argument("--show", action="store_true", help="Print the maze with optimal tiles marked 'O'")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        base = resolve_costs(argv=[])
        costs = CostModel(
            move_cost=base.move_cost if args.move_cost is None else args.move_cost,
            turn_cost=base.turn_cost if args.turn_cost is None else args.turn_cost,
        )
        heading = resolve_heading(argv=[]) if args.heading is None else Heading.parse(args.heading)
    except ValueError as ex:
        print(f"Bad settings: {ex}", file=sys.stderr)
        return EXIT_BAD_MAZE

    try:
        grid = load_maze(args.maze)
    except (OSError, MalformedMaze) as ex:
        print(f"Failed to load maze {args.maze}: {ex}", file=sys.stderr)
        return EXIT_BAD_MAZE

    result = find_lowest_cost(grid, costs, heading)
    try:
        tiles = optimal_path_cells(grid, result)
    except NoPathFound:
        print("No path from start to end")
        return EXIT_NO_PATH

    print(f"Best score to end: {result.best_cost}")
    print(f"Unique tiles in shortest paths: {len(tiles)}")
    if args.show:
        print(render_maze(grid, tiles))
    return EXIT_OK


def main_exit():
    sys.exit(main())


if __name__ == "__main__":
    main_exit()
