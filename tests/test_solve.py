"""End-to-end checks of the turnmaze-solve command.

Run:
  python3 -m pytest tests/test_solve.py
"""

import json
from pathlib import Path

from turnmaze.app import solve

MAP_DIR = Path(__file__).resolve().parents[1] / "maps"


def test_prints_both_answers(capsys, monkeypatch):
    monkeypatch.delenv("MAZE_MOVE_COST", raising=False)
    monkeypatch.delenv("MAZE_TURN_COST", raising=False)
    monkeypatch.delenv("MAZE_START_HEADING", raising=False)
    assert solve.main([str(MAP_DIR / "01_sample.txt")]) == solve.EXIT_OK
    out = capsys.readouterr().out
    assert "Best score to end: 7036" in out
    assert "Unique tiles in shortest paths: 45" in out


def test_flags_override_environment(capsys, monkeypatch):
    monkeypatch.setenv("MAZE_TURN_COST", "1000")
    assert solve.main([str(MAP_DIR / "04_open_room.json"), "--turn-cost=0", "--show"]) == solve.EXIT_OK
    out = capsys.readouterr().out
    assert "Best score to end: 6" in out
    assert "Unique tiles in shortest paths: 13" in out
    # start and goal keep their letters
    assert "#OOOOE#" in out
    assert "#SOOOO#" in out


def test_no_path_exit_status(capsys):
    assert solve.main([str(MAP_DIR / "03_walled.txt")]) == solve.EXIT_NO_PATH
    assert "No path" in capsys.readouterr().out


def test_bad_input_exit_status(tmp_path, capsys):
    bad = tmp_path / "bad.txt"
    bad.write_text("....\n..")
    assert solve.main([str(bad)]) == solve.EXIT_BAD_MAZE
    assert solve.main([str(tmp_path / "missing.txt")]) == solve.EXIT_BAD_MAZE
    assert solve.main([str(MAP_DIR / "01_sample.txt"), "--heading=up"]) == solve.EXIT_BAD_MAZE
    assert "Failed to load maze" in capsys.readouterr().err

    garbled = tmp_path / "garbled.txt"
    garbled.write_bytes(b"S.\xff.E")
    assert solve.main([str(garbled)]) == solve.EXIT_BAD_MAZE
    bad_start = tmp_path / "bad_start.json"
    bad_start.write_text(json.dumps({"width": 2, "height": 1, "cells": [[0, 0]], "start": ["a", 0], "goal": [1, 0]}))
    assert solve.main([str(bad_start)]) == solve.EXIT_BAD_MAZE
    assert capsys.readouterr().err.count("Failed to load maze") == 2
