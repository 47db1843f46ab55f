# turnmaze/app/viewer.py
#!/usr/bin/env python3
"""
Turn-cost Maze Viewer — Minimal Controls + Metrics + Optimal Tiles

- Keyboard:
    [1]-[4]      -> switch map
    [SPACE]      -> run/pause
    [N]          -> single step
    [F]          -> finish (drain the frontier)
    [T]          -> show/hide optimal tiles
    [R]          -> reset
    [+]/[-]      -> steps/sec
    [Q]/[ESC]    -> quit

Settings:
- ENV: MAZE_MOVE_COST, MAZE_TURN_COST, MAZE_START_HEADING
- CLI: --move-cost=N --turn-cost=N --heading=E --map=PATH
"""

# --- bootstrap import path so `from turnmaze...` works when run as a script ---
import sys, time
from pathlib import Path
_REPO_ROOT = Path(__file__).resolve().parents[2]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))
# -------------------------------------------------------------------------

from typing import List, Tuple, Optional, Dict, Set
import pygame

from turnmaze.app.settings import resolve_costs, resolve_heading, resolve_map
from turnmaze.core.heading_dijkstra import HeadingDijkstra
from turnmaze.core.loader import load_maze
from turnmaze.core.types import Grid, StepResult, Cell, Heading, CostModel, MazeError

# -------------------- Assets --------------------
ASSETS_DIR      = _REPO_ROOT / "assets"
FLOOR_IMG       = ASSETS_DIR / "floor.png"
WALL_IMG        = ASSETS_DIR / "wall.png"
REINDEER_IMG    = ASSETS_DIR / "reindeer.png"
FLAG_IMG        = ASSETS_DIR / "checkered_flag.png"
LOGO_IMG        = ASSETS_DIR / "logo.png"      # window icon (optional)

# ---------- Config ----------
MAP_DIR = _REPO_ROOT / "maps"
MAP_FILES = {
    "01_sample":    MAP_DIR / "01_sample.txt",
    "02_sample":    MAP_DIR / "02_sample.txt",
    "03_walled":    MAP_DIR / "03_walled.txt",
    "04_open_room": MAP_DIR / "04_open_room.json",
}
MAP_LABELS = {
    "01_sample":    "Map 1: Sample",
    "02_sample":    "Map 2: Sample II",
    "03_walled":    "Map 3: Walled in",
    "04_open_room": "Map 4: Open room",
}
PANEL_W = 420            # right band: metrics + buttons
GRID_MARGIN = 16
CELL_SIZE_DEFAULT = 32
FONT_NAME = None  # default pygame font

# Colors
WHITE       = (255,255,255)
BLACK       = (  0,  0,  0)
BLUE        = ( 70,130,180)
RED         = (220, 50, 47)
FLOOR_GRAY  = (200,200,200)
WALL_DARK   = ( 52, 56, 64)
NEON_CYAN_A = (0,150,255,110)
NEON_MAG_A  = (255,0,120,90)
GOLD_A      = (255,210,0,150)
NEON_MINT   = (0,255,200)

CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,0)

# ---------- Asset loader ----------
class _Assets:
    def __init__(self):
        self._raw: Dict[str, Optional[pygame.Surface]] = {}
        self._scaled_cache: Dict[Tuple[str, int], pygame.Surface] = {}

    def _load(self, key: str, path: Path):
        if key in self._raw:
            return
        if path.exists():
            img = pygame.image.load(str(path))
            if pygame.display.get_surface():
                img = img.convert_alpha()
            self._raw[key] = img
        else:
            self._raw[key] = None

    def prepare(self):
        self._load("floor",    FLOOR_IMG)
        self._load("wall",     WALL_IMG)
        self._load("reindeer", REINDEER_IMG)
        self._load("flag",     FLAG_IMG)

    def get(self, key: str, cell_size: int, scale_factor: float = 1.0) -> Optional[pygame.Surface]:
        base = self._raw.get(key, None)
        if base is None:
            return None
        target = max(1, int(cell_size * scale_factor))
        cache_key = (key, target)
        if cache_key in self._scaled_cache:
            return self._scaled_cache[cache_key]
        surf = pygame.transform.smoothscale(base, (target, target))
        self._scaled_cache[cache_key] = surf
        return surf

ASSETS = _Assets()

# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback, *, togglable: bool = False):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.togglable = togglable
        self.active = False  # highlight state

    def set_active(self, value: bool):
        self.active = bool(value)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        if self.active and self.togglable:
            bg = (58, 86, 160, 235)
        elif self.hover:
            bg = (46, 50, 60, 230)
        else:
            bg = (36, 40, 48, 220)
        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)

        # subtle highlight top band
        hi = pygame.Surface((self.rect.width, 18), pygame.SRCALPHA)
        pygame.draw.rect(hi, (255,255,255,20), hi.get_rect(), border_radius=10)
        base.blit(hi, (0,0))
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, (120, 170, 255, 255), self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, (235,238,242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event):
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()

# ---------- Viewer ----------
class Viewer:
    def __init__(self, grid: Grid, costs: CostModel, heading: Heading, map_key: str = "custom"):
        pygame.init()

        self.grid = grid
        self.costs = costs
        self.start_heading = heading
        self.cell_size = self._auto_cell_size(grid)
        self.font_small = pygame.font.Font(FONT_NAME, 14)
        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        grid_px_w = GRID_MARGIN*2 + grid.width * self.cell_size
        grid_px_h = GRID_MARGIN*2 + grid.height* self.cell_size
        win_w = grid_px_w + PANEL_W
        win_h = max(grid_px_h, 740)

        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption(f"Turn-cost maze — {map_key}")
        if LOGO_IMG.exists():
            try:
                pygame.display.set_icon(pygame.image.load(str(LOGO_IMG)))
            except pygame.error as ex:
                print(f"Ignoring window icon: {ex}")

        self._buttons: list[UIButton] = []
        self.selected_map_key = map_key
        self.show_tiles = True
        self.running = False
        self.state = "Idle"
        self._layout(win_w, win_h)
        ASSETS.prepare()

        self.open_set: Set[Cell] = set()
        self.closed_set: Set[Cell] = set()
        self.tiles: Set[Cell] = set()
        self.path: List[Cell] = []
        self.current: Optional[Tuple[Cell, Heading]] = None

        self.clock = pygame.time.Clock()
        self.steps_per_sec = 30
        self._last_step_t = 0.0

        self.algo = HeadingDijkstra(costs=self.costs, start_heading=self.start_heading)
        self.algo.init(self.grid)
        self._last_metrics: dict = {}
        self._reset_overlays()

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Compute integer cell_size that fits window and center the grid."""
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        self.cell_size = int(max(8, min(avail_w // self.grid.width, avail_h // self.grid.height)))

        plate_w = self.grid.width  * self.cell_size + 2 * GRID_MARGIN
        plate_h = self.grid.height * self.cell_size + 2 * GRID_MARGIN
        left_x = max(0, (win_w - (plate_w + PANEL_W)) // 2)
        top_y  = max(0, (win_h - plate_h) // 2)

        self.canvas_rect = pygame.Rect(left_x, top_y, plate_w, plate_h)
        self._grid_origin = (self.canvas_rect.x + GRID_MARGIN, self.canvas_rect.y + GRID_MARGIN)
        self._right_band = pygame.Rect(self.canvas_rect.right, 0,
                                       max(PANEL_W, win_w - self.canvas_rect.right), win_h)
        self._build_buttons()

    def _auto_cell_size(self, grid: Grid) -> int:
        target_h = 720 - GRID_MARGIN*2
        return max(14, min(CELL_SIZE_DEFAULT, target_h // grid.height))

    def run(self):
        while True:
            self._handle_events()
            if self.running:
                self._tick_algorithm()
            self._draw()
            self.clock.tick(60)

    def _tick_algorithm(self):
        t0 = time.time()
        if t0 - self._last_step_t >= 1.0 / max(1, self.steps_per_sec):
            self._last_step_t = t0
            self._do_step()

    def _do_step(self):
        self._apply(self.algo.step())

    def _finish(self):
        res = self.algo.step()
        while res.status == "running":
            self._apply(res)
            res = self.algo.step()
        self._apply(res)

    def _apply(self, res: StepResult):
        for c in res.opened: self.open_set.add(c)
        for c in res.closed:
            self.closed_set.add(c)
            self.open_set.discard(c)
        if res.current is not None:
            self.current = (res.current, res.heading)
        if res.path is not None: self.path = res.path
        if res.tiles is not None: self.tiles = res.tiles
        if res.status == "done":
            self.state = "Done"; self.running = False
        elif res.status == "no_path":
            self.state = "No path"; self.running = False
        elif res.status in ("running", "idle"):
            self.state = "Running" if self.running else "Paused"
        if res.metrics:
            self._last_metrics = res.metrics
        self._refresh_active_states()

    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                if e.key in (pygame.K_ESCAPE, pygame.K_q):
                    pygame.quit(); sys.exit(0)
                elif e.key == pygame.K_SPACE:
                    self._toggle_run()
                elif e.key == pygame.K_r:
                    self._reset()
                elif e.key == pygame.K_n:
                    self._do_step()
                elif e.key == pygame.K_f:
                    self._finish()
                elif e.key == pygame.K_t:
                    self._toggle_tiles()
                elif e.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._bump_speed(+5)
                elif e.key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
                    self._bump_speed(-5)
                elif e.key == pygame.K_1:
                    self._switch_map("01_sample")
                elif e.key == pygame.K_2:
                    self._switch_map("02_sample")
                elif e.key == pygame.K_3:
                    self._switch_map("03_walled")
                elif e.key == pygame.K_4:
                    self._switch_map("04_open_room")
            elif e.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((max(640, e.w), max(480, e.h)), pygame.RESIZABLE)
                self._layout(*self.screen.get_size())
            elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
                for b in self._buttons:
                    b.handle_mouse(e)

    def _switch_map(self, key: str):
        if key not in MAP_FILES: return
        try:
            grid = load_maze(MAP_FILES[key])
        except (OSError, MazeError) as ex:
            print(f"Failed to load map {key}: {ex}")
            return
        self.grid = grid
        self.selected_map_key = key
        pygame.display.set_caption(f"Turn-cost maze — {key}")
        self.algo.init(self.grid)
        self.running = False
        self._reset_overlays()
        self._layout(*self.screen.get_size())

    def _reset_overlays(self):
        self.open_set.clear()
        self.closed_set.clear()
        self.tiles = set()
        self.path = []
        self.current = None
        self.state = "Idle"
        self._last_metrics = {
            "algo": self.algo.name,
            "popped": 0,
            "open_size": 0,
            "closed_count": 0,
            "states": 0,
            "total_cost": None,
            "path_len": 0,
            "tiles": 0,
        }
        self._refresh_active_states()

    def _reset(self):
        self.running = False
        self.algo.reset()
        self._reset_overlays()

    # ---------- drawing ----------
    def _draw(self):
        self._draw_backdrop()
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _draw_backdrop(self):
        w, h = self.screen.get_size()
        top = (24, 26, 32); bot = (36, 40, 48)
        for y in range(h):
            t = y / max(1, h-1)
            c = tuple(int(top[i] + (bot[i]-top[i]) * t) for i in range(3))
            pygame.draw.line(self.screen, c, (0, y), (w, y))

    def _cell_rect(self, c: Cell) -> pygame.Rect:
        cs = self.cell_size
        ox, oy = self._grid_origin
        return pygame.Rect(ox + c[0]*cs, oy + c[1]*cs, cs, cs)

    def _fill(self, cells, rgba):
        cs = self.cell_size
        s = pygame.Surface((cs, cs), pygame.SRCALPHA); s.fill(rgba)
        for c in cells:
            self.screen.blit(s, self._cell_rect(c).topleft)

    def _draw_grid(self):
        cs = self.cell_size
        floor = ASSETS.get("floor", cs)
        wall  = ASSETS.get("wall",  cs)

        for row in range(self.grid.height):
            for col in range(self.grid.width):
                rect = self._cell_rect((col, row))
                if self.grid.is_block((col, row)):
                    if wall: self.screen.blit(wall, rect.topleft)
                    else:    pygame.draw.rect(self.screen, WALL_DARK, rect)
                else:
                    if floor: self.screen.blit(floor, rect.topleft)
                    else:     pygame.draw.rect(self.screen, FLOOR_GRAY, rect)
                pygame.draw.rect(self.screen, BLACK, rect, 1)

        # overlays
        self._fill(self.closed_set, NEON_MAG_A)
        self._fill(self.open_set, NEON_CYAN_A)
        if self.show_tiles:
            self._fill(self.tiles, GOLD_A)

        # path
        if len(self.path) >= 2:
            pts = [self._cell_rect(c).center for c in self.path]
            glow = pygame.Surface(self.screen.get_size(), pygame.SRCALPHA)
            pygame.draw.lines(glow, (0, 255, 220, 60), False, pts, 7)
            self.screen.blit(glow, (0,0), special_flags=pygame.BLEND_ADD)
            pygame.draw.lines(self.screen, NEON_MINT, False, pts, 3)

        self._draw_badge_icon(self.grid.start, ASSETS.get("reindeer", cs, 0.85), BLUE, "S")
        self._draw_badge_icon(self.grid.goal,  ASSETS.get("flag", cs, 0.85),     RED,  "E")
        if self.current and self.current[1] is not None and self.state != "Done":
            self._draw_heading(*self.current)

    def _draw_badge_icon(self, cell: Cell, icon: Optional[pygame.Surface],
                         fallback_color: Tuple[int,int,int], letter: str):
        cx, cy = self._cell_rect(cell).center
        if icon is not None:
            self.screen.blit(icon, icon.get_rect(center=(cx, cy)))
        else:
            pygame.draw.circle(self.screen, fallback_color, (cx,cy), max(6, self.cell_size//2 - 2))
            txt = self.font_small.render(letter, True, WHITE)
            self.screen.blit(txt, txt.get_rect(center=(cx,cy)))

    def _draw_heading(self, cell: Cell, heading: Heading):
        """Small arrow on the state being expanded."""
        cx, cy = self._cell_rect(cell).center
        dx, dy = heading.value
        r = max(4, self.cell_size // 3)
        tip = (cx + dx*r, cy + dy*r)
        left = (cx - dx*r//2 + dy*r//2, cy - dy*r//2 - dx*r//2)
        right = (cx - dx*r//2 - dy*r//2, cy - dy*r//2 + dx*r//2)
        pygame.draw.polygon(self.screen, ACCENT_GOLD, [tip, left, right])

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 250  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 34
        gap = 8

        def add(label, cb, *, togglable=False, store_as: str | None = None):
            btn = UIButton(label, pygame.Rect(x, y, w, h), cb, togglable=togglable)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)

        add("Run / Pause", self._toggle_run, togglable=True, store_as="btn_run"); y += h + gap
        add("Step Once", self._do_step); y += h + gap
        add("Finish", self._finish); y += h + gap
        add("Reset", self._reset); y += h + gap

        half = (w-8)//2
        self._buttons.append(UIButton("Speed −", pygame.Rect(x, y, half, h), lambda: self._bump_speed(-5)))
        self._buttons.append(UIButton("Speed +", pygame.Rect(x + half + 8, y, half, h), lambda: self._bump_speed(+5)))
        y += h + gap

        add("Optimal tiles", self._toggle_tiles, togglable=True, store_as="btn_tiles"); y += h + gap

        self._map_buttons: Dict[str, UIButton] = {}
        for key, label in MAP_LABELS.items():
            add(label, lambda k=key: self._switch_map(k), togglable=True)
            self._map_buttons[key] = self._buttons[-1]
            y += h + gap

        self._refresh_active_states()

    def _refresh_active_states(self):
        if hasattr(self, "btn_run"):
            self.btn_run.set_active(self.running)
        if hasattr(self, "btn_tiles"):
            self.btn_tiles.set_active(self.show_tiles)
        for key, btn in getattr(self, "_map_buttons", {}).items():
            btn.set_active(self.selected_map_key == key)

    def _toggle_run(self):
        if self.state in ("Done", "No path"):
            return
        self.running = not self.running
        self.state = "Running" if self.running else "Paused"
        self._refresh_active_states()

    def _toggle_tiles(self):
        self.show_tiles = not self.show_tiles
        self._refresh_active_states()

    def _bump_speed(self, dv: int):
        self.steps_per_sec = int(max(1, min(240, self.steps_per_sec + dv)))

    def _draw_metrics_and_buttons(self):
        rb = self._right_band

        card = pygame.Surface((rb.width - 20, 230), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        hi = pygame.Surface((card.get_width(), 24), pygame.SRCALPHA)
        pygame.draw.rect(hi, CARD_HI, hi.get_rect(), border_radius=14)
        card.blit(hi, (0,0))
        self.screen.blit(card, (rb.x + 10, rb.y + 10))

        x0 = rb.x + 24
        y0 = rb.y + 18

        def line(text, big=False, color=TEXT_LIGHT):
            nonlocal y0
            f = self.font_big if big else self.font
            surf = f.render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 6

        m = self._last_metrics
        line(f"Metrics — {self.state}", big=True, color=ACCENT_GOLD)
        line(f"Popped: {m.get('popped', 0)}   States: {m.get('states', 0)}")
        line(f"Open: {m.get('open_size', 0)}   Closed: {m.get('closed_count', 0)}")
        if m.get("total_cost") is not None:
            line(f"Best score: {m['total_cost']}")
        if m.get("tiles"):
            line(f"Optimal tiles: {m['tiles']}   Route len: {m.get('path_len', 0)}")
        line("-" * 26)
        line(f"Costs: move {self.costs.move_cost} / turn {self.costs.turn_cost}")
        line(f"Start heading: {self.start_heading.name.title()}")
        line(f"Speed: {self.steps_per_sec} steps/s")

        for b in self._buttons:
            b.draw(self.screen, self.font)

# ---------- main ----------
def main():
    try:
        costs = resolve_costs()
        heading = resolve_heading()
    except ValueError as ex:
        print(f"Bad settings: {ex}")
        sys.exit(2)

    custom = resolve_map()
    key = "custom" if custom else "01_sample"
    path = custom or MAP_FILES[key]
    try:
        grid = load_maze(path)
    except (OSError, MazeError) as ex:
        print(f"Failed to load map {path}: {ex}")
        sys.exit(1)
    Viewer(grid, costs, heading, map_key=key).run()

if __name__ == "__main__":
    main()
