"""Shell helpers used by the interface enumerator."""

from __future__ import annotations

import shlex
import subprocess
import time

from ip_stack_probe.detection.cancel import CancellationToken, DetectionCancelled
from ip_stack_probe.detection.logging_utils import (
    DEFAULT_LOGGER,
    LoggingManager,
)
from ip_stack_probe.detection.types import CommandResult

SPAWN_FAILED_RC = 255
TIMEOUT_RC = 124


class ShellRunner:
    """Execute commands with consistent logging, timeouts and cancellation."""

    def __init__(
        self,
        *,
        logger: LoggingManager = DEFAULT_LOGGER,
        poll_interval: float = 0.05,
    ) -> None:
        self.logger = logger
        self.poll_interval = poll_interval

    def cmd_str(self, cmd: list[str]) -> str:
        """Return a shell-escaped string for display."""
        return " ".join(shlex.quote(part) for part in cmd)

    def run_cmd(
        self,
        cmd: list[str],
        timeout: float = 5,
        token: CancellationToken | None = None,
    ) -> CommandResult:
        """Run command and capture stdout/stderr.

        The child is killed and reaped when ``timeout`` expires or ``token`` is
        cancelled; cancellation raises DetectionCancelled after cleanup.
        """
        self.logger.debug("Running: %s", self.cmd_str(cmd))
        try:
            proc = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                encoding="utf-8",
                errors="replace",
            )
        except (OSError, ValueError) as exc:
            self.logger.debug("Command failed to start: %s", exc)
            return CommandResult(
                cmd=cmd,
                returncode=SPAWN_FAILED_RC,
                stdout="",
                stderr=str(exc),
            )

        deadline = time.monotonic() + timeout
        try:
            while True:
                if token is not None and token.cancelled:
                    self.logger.debug("Command cancelled: %s", self.cmd_str(cmd))
                    raise DetectionCancelled()

                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    self.logger.debug("Command timed out after %ss: %s", timeout, self.cmd_str(cmd))
                    self._kill(proc)
                    return CommandResult(
                        cmd=cmd,
                        returncode=TIMEOUT_RC,
                        stdout="",
                        stderr=f"timed out after {timeout}s",
                    )

                try:
                    stdout, stderr = proc.communicate(timeout=min(self.poll_interval, remaining))
                except subprocess.TimeoutExpired:
                    continue
                break
        finally:
            self._kill(proc)

        self.logger.debug(
            "Command rc=%s stdout=%r stderr=%r",
            proc.returncode,
            stdout,
            stderr,
        )
        return CommandResult(
            cmd=cmd,
            returncode=proc.returncode,
            stdout=stdout,
            stderr=stderr,
        )

    @staticmethod
    def _kill(proc: subprocess.Popen) -> None:
        """Terminate a still-running child and release its pipes."""
        if proc.poll() is None:
            proc.kill()
            proc.wait()
        for stream in (proc.stdout, proc.stderr):
            if stream is not None and not stream.closed:
                stream.close()


DEFAULT_SHELL = ShellRunner()
