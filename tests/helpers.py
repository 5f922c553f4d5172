"""Reusable test utilities and recording stubs for the test suite."""

from ip_stack_probe.detection.types import CommandResult


class RecordingLogger:
    """In-memory logger capturing log messages and setup calls."""

    def __init__(self):
        self.messages: list[str] = []
        self.setup_calls: list[bool] = []

    def setup(self, verbose: bool) -> None:
        self.setup_calls.append(verbose)

    def log(self, msg: str, *args) -> None:
        self.messages.append(msg % args if args else msg)

    def debug(self, msg: str, *args) -> None:
        self.messages.append(f"DEBUG:{msg % args if args else msg}")

    def warning(self, msg: str, *args) -> None:
        self.messages.append(f"WARNING:{msg % args if args else msg}")


class StubShell:
    """Return a canned CommandResult and record issued commands."""

    def __init__(self, stdout: str = "", returncode: int = 0, stderr: str = ""):
        self._stdout = stdout
        self._returncode = returncode
        self._stderr = stderr
        self.calls: list[list[str]] = []

    def run_cmd(self, cmd: list[str], timeout: float = 5, token=None) -> CommandResult:
        self.calls.append(cmd)
        return CommandResult(cmd=cmd, returncode=self._returncode, stdout=self._stdout, stderr=self._stderr)
