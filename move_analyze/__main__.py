"""Module entry point: python -m move_analyze ..."""

from __future__ import annotations

from move_analyze.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
