# turnmaze/core/heading_dijkstra.py
#!/usr/bin/env python3
"""
Heading-aware Dijkstra — one frontier pop per step() for animation.

Implements the Algorithm API expected by the viewer:
- init(grid) - reset() - step() -> StepResult

Search space:
- A state is (cell, heading). From each state the walker may go straight,
  turn left or turn right; turning and moving one cell is a single transition
  costing move_cost + turn_cost. Reversing is never generated.

Termination:
- The goal is not expanded, but the frontier is drained so every heading that
  reaches the goal gets its final score. The answer is the minimum of those.

Tie-breaking in the PQ:
- (g, seq, state): lower g, then FIFO by seq.
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple, List, Optional, Set
import heapq
import logging
from math import inf

from turnmaze.core.types import (
    StepResult, SearchResult, Grid, Cell, Heading, State, CostModel,
)
from turnmaze.core.optimal_tiles import optimal_path_cells, best_route


@dataclass
class HeadingDijkstra:
    name: str = "Dijkstra (heading)"
    costs: CostModel = field(default_factory=CostModel)
    start_heading: Heading = Heading.EAST

    # Internal state
    grid: Optional[Grid] = None
    open_pq: List[Tuple[int, int, State]] = field(default_factory=list)  # (g, seq, state)
    open_set: Set[State] = field(default_factory=set)
    closed_set: Set[State] = field(default_factory=set)
    scores: Dict[State, int] = field(default_factory=dict)
    goal_costs: Dict[Heading, int] = field(default_factory=dict)
    tiles: Optional[Set[Cell]] = None
    route: Optional[List[Cell]] = None
    popped_count: int = 0
    done: bool = False
    no_path: bool = False
    seq: int = 0

    # -------------------- lifecycle --------------------

    def init(self, grid: Grid) -> None:
        self.grid = grid
        self.reset()

    def reset(self) -> None:
        if self.grid is None:
            return
        self.open_pq.clear()
        self.open_set.clear()
        self.closed_set.clear()
        self.scores.clear()
        self.goal_costs.clear()
        self.tiles = None
        self.route = None
        self.popped_count = 0
        self.done = False
        self.no_path = False
        self.seq = 0

        s0 = (self.grid.start, self.start_heading)
        self.scores[s0] = 0
        heapq.heappush(self.open_pq, (0, self._bump(), s0))
        self.open_set.add(s0)

    # -------------------- helpers --------------------

    def _bump(self) -> int:
        self.seq += 1
        return self.seq

    def _successors(self, state: State) -> List[Tuple[State, int]]:
        """Straight, left and right moves into open cells, with their transition cost."""
        cell, h = state
        out: List[Tuple[State, int]] = []
        for nh in (h, h.turn_left(), h.turn_right()):
            nxt = nh.step(cell)
            if nxt is None or not self.grid.is_open(nxt):
                continue
            out.append(((nxt, nh), self.costs.transition(h, nh)))
        return out

    @property
    def best_cost(self) -> Optional[int]:
        return min(self.goal_costs.values()) if self.goal_costs else None

    # -------------------- main stepping logic --------------------

    def step(self) -> StepResult:
        if self.grid is None:
            return StepResult(status="idle", metrics={"algo": self.name})

        if self.done:
            return StepResult(status="done", path=self.route, tiles=self.tiles,
                              metrics=self._metrics())

        if self.no_path:
            return StepResult(status="no_path", metrics=self._metrics())

        if not self.open_pq:
            return self._finish()

        g_u, _, u = heapq.heappop(self.open_pq)

        # Ignore stale pops
        if g_u != self.scores.get(u, inf):
            return StepResult(status="running", current=u[0], heading=u[1], metrics=self._metrics())

        self.popped_count += 1
        self.open_set.discard(u)
        self.closed_set.add(u)
        cell, h = u

        if cell == self.grid.goal:
            if g_u < self.goal_costs.get(h, inf):
                self.goal_costs[h] = g_u
            return StepResult(status="running", closed=[cell], current=cell, heading=h,
                              metrics=self._metrics())

        opened_now: List[Cell] = []
        for v, step_cost in self._successors(u):
            alt = g_u + step_cost
            if alt < self.scores.get(v, inf):
                self.scores[v] = alt
                heapq.heappush(self.open_pq, (alt, self._bump(), v))
                if v not in self.open_set:
                    self.open_set.add(v)
                    opened_now.append(v[0])

        return StepResult(status="running", opened=opened_now, closed=[cell], current=cell,
                          heading=h, metrics=self._metrics())

    def _finish(self) -> StepResult:
        best = self.best_cost
        logging.debug("%s finished: popped=%d states=%d best=%s",
                      self.name, self.popped_count, len(self.scores), best)
        if best is None:
            self.no_path = True
            return StepResult(status="no_path", metrics=self._metrics())
        self.done = True
        res = self.result()
        self.tiles = optimal_path_cells(self.grid, res)
        self.route = best_route(self.grid, res)
        return StepResult(status="done", path=self.route, tiles=self.tiles,
                          metrics=self._metrics())

    def run(self) -> SearchResult:
        """Step until the frontier is drained."""
        if self.grid is None:
            raise RuntimeError("init(grid) must be called before run()")
        while not (self.done or self.no_path):
            self.step()
        return self.result()

    def result(self) -> SearchResult:
        return SearchResult(best_cost=self.best_cost, scores=dict(self.scores), costs=self.costs,
                            start_heading=self.start_heading, popped=self.popped_count)

    # -------------------- metrics --------------------

    def _metrics(self) -> dict:
        return {
            "algo": self.name,
            "popped": self.popped_count,
            "open_size": len(self.open_set),
            "closed_count": len(self.closed_set),
            "states": len(self.scores),
            "total_cost": self.best_cost,
            "path_len": len(self.route) if self.route else 0,
            "tiles": len(self.tiles) if self.tiles else 0,
        }


def find_lowest_cost(grid: Grid, costs: Optional[CostModel] = None,
                     start_heading: Heading = Heading.EAST) -> SearchResult:
    """Run the whole search on `grid` and return the best goal cost plus the score table."""
    algo = HeadingDijkstra(costs=costs or CostModel(), start_heading=start_heading)
    algo.init(grid)
    return algo.run()
