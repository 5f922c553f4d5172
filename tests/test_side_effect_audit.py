"""Guardrails to detect stray interactive side effects in source files."""

from __future__ import annotations

from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src" / "ip_stack_probe"


def _files_with_pattern(pattern: str) -> set[Path]:
    return {path.relative_to(PROJECT_ROOT) for path in SRC_ROOT.rglob("*.py") if pattern in path.read_text()}


def test_console_output_limited_to_cli_modules() -> None:
    """Ensure terminal output stays inside the CLI and panel modules."""

    expected = {
        Path("src/ip_stack_probe/cli.py"),
    }
    assert _files_with_pattern("typer.echo(") == expected
    assert _files_with_pattern("print(") == {Path("src/ip_stack_probe/interfaces_panel.py")}


def test_detection_package_never_prompts() -> None:
    """Detection runs unattended; interactive input is never requested."""

    assert _files_with_pattern("input(") == set()
