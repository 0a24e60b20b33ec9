"""Tests for the content scanning CLI."""

import json
from pathlib import Path

import pytest

from scripts.scan_content import format_tree, main, parse_args
from study_tracker.content.discovery import discover


@pytest.fixture()
def content_root(tmp_path: Path) -> Path:
    lesson = tmp_path / "Phase 2 - Arrays" / "03-two-pointers"
    lesson.mkdir(parents=True)
    (lesson / "main.md").write_text(
        "---\ndifficulty: easy\nestimated_hours: 1.5\n---\n", encoding="utf-8"
    )
    return tmp_path


class TestParseArgs:
    def test_defaults(self) -> None:
        args = parse_args([])
        assert args.root is None
        assert args.json_output is False

    def test_root_and_json(self) -> None:
        args = parse_args(["content", "--json"])
        assert args.root == Path("content")
        assert args.json_output is True


class TestFormatTree:
    def test_empty(self) -> None:
        assert format_tree([]) == "(no lessons found)"

    def test_tree(self, content_root: Path) -> None:
        out = format_tree(discover(content_root))
        lines = out.splitlines()
        assert lines[0] == "phase-2  Arrays  (weeks 5-8, 1 lessons)"
        assert lines[1] == (
            "  [ 3] Two Pointers  easy, 1.5h  "
            "-> Phase 2 - Arrays/03-two-pointers/main.md"
        )


class TestMain:
    def test_json_output(
        self, content_root: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        main([str(content_root), "--json"])
        data = json.loads(capsys.readouterr().out)
        assert data[0]["id"] == "phase-2"
        assert data[0]["lessons"][0]["title"] == "Two Pointers"

    def test_text_output(
        self, content_root: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        main([str(content_root)])
        assert "Two Pointers" in capsys.readouterr().out
