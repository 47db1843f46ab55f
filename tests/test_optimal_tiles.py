"""Reconstruction of every tile on some cheapest route.

Run:
  python3 -m pytest tests/test_optimal_tiles.py
"""

from pathlib import Path

import pytest

from turnmaze.core.heading_dijkstra import find_lowest_cost
from turnmaze.core.loader import load_maze, parse_maze
from turnmaze.core.optimal_tiles import best_route, count_optimal_tiles, optimal_path_cells
from turnmaze.core.types import CostModel, Grid, Heading, NoPathFound

MAP_DIR = Path(__file__).resolve().parents[1] / "maps"

# Two mirror-image routes of equal cost; the goal is reached heading north and heading south.
TWIN_LOOP = """\
#######
#.....#
#S###E#
#.....#
#######"""


def _solve(grid, **kw):
    return find_lowest_cost(grid, **kw)


@pytest.mark.parametrize("name, tiles", [("01_sample.txt", 45), ("02_sample.txt", 64)])
def test_sample_tile_counts(name, tiles):
    grid = load_maze(MAP_DIR / name)
    assert count_optimal_tiles(grid, _solve(grid)) == tiles


def test_tiles_contain_endpoints_and_have_scores():
    for name in ("01_sample.txt", "02_sample.txt", "04_open_room.json"):
        grid = load_maze(MAP_DIR / name)
        res = _solve(grid)
        cells = optimal_path_cells(grid, res)
        assert grid.start in cells
        assert grid.goal in cells
        scored = {cell for cell, _ in res.scores}
        assert cells <= scored
        assert all(grid.is_open(c) for c in cells)


def test_tied_routes_are_both_counted():
    grid = parse_maze(TWIN_LOOP)
    res = _solve(grid)
    assert res.best_cost == 3006
    assert set(res.goal_headings(grid)) == {Heading.NORTH, Heading.SOUTH}
    assert optimal_path_cells(grid, res) == set(grid.open_cells())


def test_suboptimal_branches_are_left_out():
    grid = load_maze(MAP_DIR / "04_open_room.json")
    cells = optimal_path_cells(grid, _solve(grid))
    assert cells == {(1, 3), (2, 3), (3, 3), (4, 3), (5, 3), (5, 2), (5, 1)}


def test_free_turns_widen_the_set():
    grid = load_maze(MAP_DIR / "04_open_room.json")
    cells = optimal_path_cells(grid, _solve(grid, costs=CostModel(move_cost=1, turn_cost=0)))
    # every monotone north-east staircase is now optimal
    assert cells == set(grid.open_cells())


def test_start_equals_goal_is_a_single_tile():
    grid = Grid(3, 1, ((1, 0, 1),), (1, 0), (1, 0))
    res = _solve(grid)
    assert optimal_path_cells(grid, res) == {(1, 0)}
    assert best_route(grid, res) == [(1, 0)]


def test_best_route_is_a_cheapest_walk():
    grid = load_maze(MAP_DIR / "01_sample.txt")
    res = _solve(grid)
    route = best_route(grid, res)
    assert route[0] == grid.start
    assert route[-1] == grid.goal
    assert set(route) <= optimal_path_cells(grid, res)

    cost, heading = 0, res.start_heading
    for a, b in zip(route, route[1:]):
        step = next(h for h in Heading if h.step(a) == b)
        assert step != heading.opposite()
        cost += res.costs.transition(heading, step)
        heading = step
    assert cost == res.best_cost


def test_no_path_raises():
    grid = load_maze(MAP_DIR / "03_walled.txt")
    res = _solve(grid)
    with pytest.raises(NoPathFound):
        optimal_path_cells(grid, res)
    with pytest.raises(NoPathFound):
        count_optimal_tiles(grid, res)
    with pytest.raises(NoPathFound):
        best_route(grid, res)
