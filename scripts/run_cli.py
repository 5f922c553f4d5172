#!/usr/bin/env python3
"""Run ``ipstack`` straight from a checkout, e.g. ``scripts/run_cli.py detect -d ipv4only.arpa``."""

from __future__ import annotations

import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parents[1] / "src"


def main(argv: list[str] | None = None) -> None:
    if str(SRC_DIR) not in sys.path:
        sys.path.insert(0, str(SRC_DIR))

    from ip_stack_probe.cli import app

    app(prog_name="ipstack", args=argv)


if __name__ == "__main__":
    main()
