import json
import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import main


def write_config(tmp_path, input_dir):
    cfg = tmp_path / "config.json"
    cfg.write_text(json.dumps({"paths": {"input_dir": str(input_dir)}}), encoding="utf-8")
    return str(cfg)


def test_main_converts_requested_kind(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    input_dir = tmp_path / "input"
    input_dir.mkdir()
    (input_dir / "posts.json").write_text(
        json.dumps([{"id": 1, "title": "A", "slug": "a", "content": "<p>a</p>"}]), encoding="utf-8"
    )
    code = main.main(["--kind", "posts", "--config", write_config(tmp_path, input_dir), "--workers", "1"])
    assert code == 0
    assert os.path.exists(input_dir / "posts-tiptap.json")


def test_main_fails_pre_flight_checks(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    input_dir = tmp_path / "empty"
    input_dir.mkdir()
    assert main.main(["--kind", "all", "--config", write_config(tmp_path, input_dir)]) == 1


def test_main_dry_run(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    input_dir = tmp_path / "input"
    input_dir.mkdir()
    (input_dir / "pages.json").write_text(
        json.dumps([{"id": 2, "title": "B", "slug": "b", "content": "x"}]), encoding="utf-8"
    )
    code = main.main(["--kind", "pages", "--dry-run", "--config", write_config(tmp_path, input_dir)])
    assert code == 0
    assert not os.path.exists(input_dir / "pages-tiptap.json")
