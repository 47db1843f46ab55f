# turnmaze/core/optimal_tiles.py
#!/usr/bin/env python3
"""
Recover cells on minimum-cost routes from a finished score table.

The walk runs backwards from the goal. A state (c, h) with score s was reached
from the cell behind it, c' = h.opposite().step(c), either

- going straight:  (c', h)  with score s - move_cost, or
- turning:         (c', h2) with score s - move_cost - turn_cost,
                   where h2 is a quarter turn away from h.

Only edges that satisfy this equality are followed, so every state visited
lies on some route that reaches the goal at the minimum cost.
"""

from collections import deque
from typing import Deque, Dict, List, Optional, Set, Tuple

from turnmaze.core.types import Grid, Cell, State, SearchResult


def _predecessors(grid: Grid, result: SearchResult, state: State, score: int) -> List[Tuple[State, int]]:
    cell, h = state
    back = h.opposite().step(cell)
    # the goal is terminal, so it never precedes anything
    if back is None or not grid.is_open(back) or back == grid.goal:
        return []

    out: List[Tuple[State, int]] = []
    for prev_h in (h, h.turn_left(), h.turn_right()):
        prev = (back, prev_h)
        prev_score = result.scores.get(prev)
        if prev_score is None:
            continue
        if prev_score + result.costs.transition(prev_h, h) == score:
            out.append((prev, prev_score))
    return out


def _goal_seeds(grid: Grid, result: SearchResult) -> List[Tuple[State, int]]:
    best = result.require_cost()
    return [((grid.goal, h), best) for h in result.goal_headings(grid)]


def optimal_path_cells(grid: Grid, result: SearchResult) -> Set[Cell]:
    """Every cell on at least one minimum-cost route from start to goal.

    Raises NoPathFound if the search never reached the goal.
    """
    seeds = _goal_seeds(grid, result)
    seen: Set[State] = {s for s, _ in seeds}
    cells: Set[Cell] = {grid.goal}
    queue: Deque[Tuple[State, int]] = deque(seeds)

    while queue:
        state, score = queue.popleft()
        for prev, prev_score in _predecessors(grid, result, state, score):
            cells.add(prev[0])
            if prev not in seen:
                seen.add(prev)
                queue.append((prev, prev_score))
    return cells


def count_optimal_tiles(grid: Grid, result: SearchResult) -> int:
    return len(optimal_path_cells(grid, result))


def best_route(grid: Grid, result: SearchResult) -> List[Cell]:
    """One concrete minimum-cost route, start first, goal last."""
    seeds = _goal_seeds(grid, result)
    origin = (grid.start, result.start_heading)
    came_from: Dict[State, Optional[State]] = {s: None for s, _ in seeds}
    queue: Deque[Tuple[State, int]] = deque(seeds)

    found: Optional[State] = origin if origin in came_from else None
    while queue and found is None:
        state, score = queue.popleft()
        for prev, prev_score in _predecessors(grid, result, state, score):
            if prev in came_from:
                continue
            came_from[prev] = state
            if prev == origin and prev_score == 0:
                found = prev
                break
            queue.append((prev, prev_score))

    route: List[Cell] = []
    cur = found
    while cur is not None:
        route.append(cur[0])
        cur = came_from[cur]
    return route
