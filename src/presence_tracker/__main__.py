"""Command-line entry point: ``python -m presence_tracker``."""
from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path


def _add_project_root_to_path() -> None:
    """Make sure the project root is present on ``sys.path``."""

    project_root = Path(__file__).resolve().parents[2]
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        sys.path.insert(0, project_root_str)


def _poll_once() -> None:
    """Run one poll cycle per tracked server and print the views as JSON."""

    from presence_tracker.config.settings import get_settings
    from presence_tracker.main import create_app

    settings = get_settings()
    app = create_app(settings)
    now = int(time.time())
    views = [
        app.state.poll_use_case.execute(identity).view.to_dict(now=now)
        for identity in settings.tracked_servers
    ]
    json.dump(views, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def main() -> None:
    """Start the API server, or poll once when ``--once`` is given."""

    parser = argparse.ArgumentParser(prog="presence_tracker")
    parser.add_argument(
        "--once",
        action="store_true",
        help="poll every tracked server once, print the result and exit",
    )
    arguments = parser.parse_args()

    if arguments.once:
        _poll_once()
        return

    _add_project_root_to_path()
    from main import main as run_main

    run_main()


if __name__ == "__main__":
    main()
