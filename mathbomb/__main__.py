from __future__ import annotations

import argparse
import sys
from pathlib import Path


def _ensure_repo_root_on_path() -> None:
    """Ensure the repository root (parent of this package) is on ``sys.path``.

    Lets ``python mathbomb/__main__.py`` work as well as ``python -m mathbomb``.
    """
    repo_root_str = str(Path(__file__).resolve().parent.parent)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


try:
    from .app import run
    from .logging_config import configure_logging
except ImportError:
    _ensure_repo_root_on_path()
    from mathbomb.app import run
    from mathbomb.logging_config import configure_logging


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="mathbomb", description="Timed arithmetic quiz. Keep the bomb from exploding.")
    parser.add_argument("--seed", type=int, default=None, help="seed for a reproducible question stream")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="stderr log level (default: WARNING)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entry point for running the quiz from the command line."""
    args = _parse_args(argv)
    configure_logging(args.log_level)
    return run(seed=args.seed)


if __name__ == "__main__":
    raise SystemExit(main())
