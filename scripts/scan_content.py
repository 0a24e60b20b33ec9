"""Content tree inspection CLI.

Runs discovery against a content directory and prints what the API
would serve, which is handy while authoring lessons.

Usage:
    uv run python scripts/scan_content.py                  # settings.content_dir
    uv run python scripts/scan_content.py path/to/content  # explicit root
    uv run python scripts/scan_content.py --json           # JSON output
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from study_tracker.config import settings
from study_tracker.content.discovery import discover
from study_tracker.logging_config import configure_logging
from study_tracker.models.content import Phase


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(description="Show discovered phases and lessons")
    parser.add_argument(
        "root",
        nargs="?",
        type=Path,
        default=None,
        help="Content root (default: CONTENT_DIR setting)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output as JSON instead of an indented tree",
    )
    return parser.parse_args(argv)


def format_tree(phases: list[Phase]) -> str:
    """Render phases and lessons as an indented text tree."""
    if not phases:
        return "(no lessons found)"

    lines: list[str] = []
    for phase in phases:
        lines.append(
            f"{phase.id}  {phase.name}  "
            f"(weeks {phase.week_start}-{phase.week_end}, {phase.total} lessons)"
        )
        for lesson in phase.lessons:
            lines.append(
                f"  [{lesson.order_index:>2}] {lesson.title}  "
                f"{lesson.difficulty}, {lesson.estimated_hours:g}h  "
                f"-> {lesson.file_path}"
            )
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> None:
    """Entry point."""
    args = parse_args(argv)
    configure_logging(environment="development", log_level="WARNING")

    phases = discover(args.root or settings.content_dir)
    if args.json_output:
        print(json.dumps([p.model_dump() for p in phases], indent=2))
    else:
        print(format_tree(phases))


if __name__ == "__main__":
    main()
