"""Tests for the headless CLI commands."""
import sys
import os
import io
import json

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from actionlog.config import Config
from actionlog.main import build_parser, run_command


def make_config(tmp_path):
    config = Config(tmp_path / "config.json")
    config.set("storage_dir", str(tmp_path / "data"))
    return config


def run(config, *argv):
    out = io.StringIO()
    code = run_command(config, build_parser().parse_args(list(argv)), out=out)
    return code, out.getvalue()


def test_add_undo_redo_show(tmp_path):
    config = make_config(tmp_path)
    assert run(config, "add", "open", "file")[0] == 0
    assert run(config, "add", "save")[0] == 0

    code, out = run(config, "undo")
    assert code == 0
    assert "Undid: save" in out

    code, out = run(config, "show")
    assert "Actions (1):" in out
    assert "open file" in out
    assert "Undone (1):" in out
    assert "Last saved:" in out

    code, out = run(config, "redo")
    assert "Redid: save" in out

    stored = json.loads((tmp_path / "data" / "undoRedoState.json").read_text())
    assert stored["actions"] == ["open file", "save"]
    assert stored["redo"] == []


def test_add_blank_fails(tmp_path):
    config = make_config(tmp_path)
    code, _ = run(config, "add", "   ")
    assert code == 1
    assert not (tmp_path / "data" / "undoRedoState.json").exists()


def test_undo_on_empty(tmp_path):
    config = make_config(tmp_path)
    code, out = run(config, "undo")
    assert code == 0
    assert "Nothing to undo" in out


def test_clear(tmp_path):
    config = make_config(tmp_path)
    run(config, "add", "a")
    run(config, "clear")
    _, out = run(config, "show")
    assert "Actions (0):" in out
    assert "Undone (0):" in out


def test_corrupt_state_does_not_crash(tmp_path):
    config = make_config(tmp_path)
    (tmp_path / "data").mkdir()
    (tmp_path / "data" / "undoRedoState.json").write_text("garbage")
    code, out = run(config, "show")
    assert code == 0
    assert "Actions (0):" in out
