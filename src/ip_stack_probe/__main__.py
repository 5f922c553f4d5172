"""``python -m ip_stack_probe`` entry point for the ``ipstack`` CLI."""

from __future__ import annotations

import sys
from pathlib import Path


def _ensure_package_on_path() -> None:
    """Put the ``src`` directory on ``sys.path`` for direct script runs.

    Running ``python src/ip_stack_probe/__main__.py`` puts the package
    directory itself first on ``sys.path``, where ``ip_stack_probe`` is not
    importable by its absolute name.
    """

    src_dir = str(Path(__file__).resolve().parent.parent)
    if src_dir not in sys.path:
        sys.path.insert(0, src_dir)


def _load_app():
    _ensure_package_on_path()
    from ip_stack_probe.cli import app as cli_app

    return cli_app


app = _load_app()


def main() -> None:
    """Run detection commands under the ``ipstack`` program name."""

    app(prog_name="ipstack")


if __name__ == "__main__":
    main()
