# turnmaze/app/settings.py
#!/usr/bin/env python3
"""
Run-time knobs, resolved the same way for the viewer, launcher and CLI.

- ENV: MAZE_MOVE_COST, MAZE_TURN_COST, MAZE_START_HEADING
- CLI: --move-cost=N --turn-cost=N --heading=N|E|S|W --map=PATH

Command-line flags win over the environment.
"""

import os
import sys
from pathlib import Path
from typing import Mapping, Optional, Sequence

from turnmaze.core.types import CostModel, Heading

DEFAULT_MOVE_COST = 1
DEFAULT_TURN_COST = 1000
DEFAULT_HEADING = "E"


def _flag(argv: Sequence[str], name: str) -> Optional[str]:
    value = None
    prefix = f"--{name}="
    for arg in argv:
        if arg.startswith(prefix):
            value = arg.split("=", 1)[1]
    return value


def _resolve(argv, environ, flag: str, env_key: str, default: str) -> str:
    argv = sys.argv[1:] if argv is None else argv
    environ = os.environ if environ is None else environ
    value = environ.get(env_key, default)
    override = _flag(argv, flag)
    return value if override is None else override


def _as_cost(label: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{label} must be an integer, got {raw!r}") from None


def resolve_costs(argv: Optional[Sequence[str]] = None,
                  environ: Optional[Mapping[str, str]] = None) -> CostModel:
    move = _resolve(argv, environ, "move-cost", "MAZE_MOVE_COST", str(DEFAULT_MOVE_COST))
    turn = _resolve(argv, environ, "turn-cost", "MAZE_TURN_COST", str(DEFAULT_TURN_COST))
    return CostModel(move_cost=_as_cost("move cost", move), turn_cost=_as_cost("turn cost", turn))


def resolve_heading(argv: Optional[Sequence[str]] = None,
                    environ: Optional[Mapping[str, str]] = None) -> Heading:
    return Heading.parse(_resolve(argv, environ, "heading", "MAZE_START_HEADING", DEFAULT_HEADING))


def resolve_map(argv: Optional[Sequence[str]] = None) -> Optional[Path]:
    argv = sys.argv[1:] if argv is None else argv
    raw = _flag(argv, "map")
    return Path(raw) if raw else None
