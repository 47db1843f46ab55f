"""Heading-aware search: costs, idempotence and score-table invariants.

Run:
  python3 -m pytest tests/test_heading_dijkstra.py
"""

from pathlib import Path

from turnmaze.core.heading_dijkstra import HeadingDijkstra, find_lowest_cost
from turnmaze.core.loader import load_maze, parse_maze
from turnmaze.core.types import CostModel, Grid, Heading

MAP_DIR = Path(__file__).resolve().parents[1] / "maps"


def test_first_sample_lowest_score():
    res = find_lowest_cost(load_maze(MAP_DIR / "01_sample.txt"))
    assert res.found
    assert res.best_cost == 7036


def test_second_sample_lowest_score():
    res = find_lowest_cost(load_maze(MAP_DIR / "02_sample.txt"))
    assert res.best_cost == 11048


def test_json_room_prefers_single_turn():
    res = find_lowest_cost(load_maze(MAP_DIR / "04_open_room.json"))
    # four steps east, turn north, two steps
    assert res.best_cost == 4 + 1001 + 1


def test_start_equals_goal_costs_nothing():
    grid = Grid(3, 1, ((1, 0, 1),), (1, 0), (1, 0))
    res = find_lowest_cost(grid)
    assert res.best_cost == 0
    assert res.require_cost() == 0


def test_walled_off_start_has_no_cost():
    res = find_lowest_cost(load_maze(MAP_DIR / "03_walled.txt"))
    assert not res.found
    assert res.best_cost is None
    try:
        res.require_cost()
    except ValueError as ex:
        assert "unreachable" in str(ex)
    else:
        raise AssertionError("require_cost() should raise NoPathFound")


def test_corridor_without_turns():
    res = find_lowest_cost(parse_maze("S....E"))
    assert res.best_cost == 5
    assert res.goal_headings(parse_maze("S....E")) == [Heading.EAST]


def test_start_heading_changes_the_answer():
    grid = parse_maze("S....E")
    assert find_lowest_cost(grid, start_heading=Heading.NORTH).best_cost == 1005
    # reversing is never generated, and there is no room to turn around
    assert find_lowest_cost(grid, start_heading=Heading.WEST).found is False


def test_custom_costs():
    grid = load_maze(MAP_DIR / "04_open_room.json")
    res = find_lowest_cost(grid, CostModel(move_cost=1, turn_cost=0))
    # with free turns this is plain BFS distance
    assert res.best_cost == 6


def test_search_is_idempotent():
    grid = load_maze(MAP_DIR / "01_sample.txt")
    a = find_lowest_cost(grid)
    b = find_lowest_cost(grid)
    assert a.best_cost == b.best_cost
    assert a.scores == b.scores


def test_every_reachable_open_cell_gets_a_score():
    grid = parse_maze("#######\n#S....#\n#.##..#\n#....E#\n#######")
    res = find_lowest_cost(grid)
    scored = {cell for cell, _ in res.scores}
    assert scored == set(grid.open_cells())


def test_finalized_scores_never_change():
    grid = load_maze(MAP_DIR / "02_sample.txt")
    algo = HeadingDijkstra()
    algo.init(grid)
    finalized = {}
    last_pop = 0
    while not (algo.done or algo.no_path):
        res = algo.step()
        for state in algo.closed_set:
            finalized.setdefault(state, algo.scores[state])
        # pops come out in non-decreasing cost order
        if res.closed and res.current is not None:
            g = algo.scores[(res.current, res.heading)]
            assert g >= last_pop
            last_pop = g
    for state, score in finalized.items():
        assert algo.scores[state] == score


def test_step_api_reports_done_and_no_path():
    algo = HeadingDijkstra()
    assert algo.step().status == "idle"

    algo.init(parse_maze("S.E"))
    statuses = []
    while not algo.done:
        statuses.append(algo.step().status)
    assert statuses[-1] == "done"
    final = algo.step()
    assert final.status == "done"
    assert final.path == [(0, 0), (1, 0), (2, 0)]
    assert final.tiles == {(0, 0), (1, 0), (2, 0)}
    assert final.metrics["total_cost"] == 2

    algo.init(load_maze(MAP_DIR / "03_walled.txt"))
    res = algo.step()
    while res.status == "running":
        res = algo.step()
    assert res.status == "no_path"
    assert algo.step().status == "no_path"


def test_reset_restores_seed_state():
    algo = HeadingDijkstra()
    algo.init(load_maze(MAP_DIR / "01_sample.txt"))
    first = algo.run()
    algo.reset()
    assert algo.scores == {(algo.grid.start, Heading.EAST): 0}
    assert algo.run().scores == first.scores
