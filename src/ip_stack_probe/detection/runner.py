"""Run detections off the caller's thread with cancel-on-resubmit semantics."""

from __future__ import annotations

import concurrent.futures
import threading
from collections.abc import Callable
from typing import Any

from ip_stack_probe.detection.cancel import CancellationToken, DetectionCancelled
from ip_stack_probe.detection.environment import IPEnvironment
from ip_stack_probe.detection.logging_utils import DEFAULT_LOGGER, LoggingManager
from ip_stack_probe.detection.types import NetType, Resolution

DETECT = "detect"
RESOLVE = "resolve"


class DetectionHandle:
    """Track one submitted request: its token, its future and its delivery."""

    def __init__(self, purpose: str) -> None:
        self.purpose = purpose
        self.token = CancellationToken()
        self._lock = threading.RLock()
        self._future: concurrent.futures.Future | None = None

    def cancel(self) -> None:
        """Cancel the request; once this returns, no result will be delivered."""
        with self._lock:
            self.token.cancel()
            if self._future is not None:
                self._future.cancel()

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled

    def done(self) -> bool:
        return self._future is not None and self._future.done()

    def deliver(self, value: Any, callback: Callable[[Any], None] | None) -> bool:
        with self._lock:
            if self.token.cancelled:
                return False
            if callback is not None:
                callback(value)
            return True

    def result(self, timeout: float | None = None) -> Any:
        """Wait for the delivered value; raise DetectionCancelled if it was cancelled."""
        if self._future is None:
            raise RuntimeError(f"{self.purpose} request was never submitted")
        try:
            return self._future.result(timeout=timeout)
        except concurrent.futures.CancelledError as exc:
            raise DetectionCancelled() from exc


class DetectionRunner:
    """Issue detection and resolution requests on a worker pool.

    A new request cancels the in-flight request of the same purpose before it
    is submitted, so stale answers never reach the caller.
    """

    def __init__(
        self,
        environment: IPEnvironment | None = None,
        *,
        max_workers: int = 2,
        logger: LoggingManager = DEFAULT_LOGGER,
    ) -> None:
        self.environment = environment or IPEnvironment(logger=logger)
        self.logger = logger
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="ipstack-detect",
        )
        self._lock = threading.Lock()
        self._inflight: dict[str, DetectionHandle] = {}

    def detect(
        self,
        ipv4_only_domain: str | None = None,
        on_result: Callable[[NetType], None] | None = None,
    ) -> DetectionHandle:
        return self._submit(
            DETECT,
            lambda token: self.environment.local_net_environment(ipv4_only_domain, token),
            on_result,
        )

    def resolve(
        self,
        domain: str,
        on_result: Callable[[Resolution], None] | None = None,
        *,
        with_fail_msg: bool = True,
    ) -> DetectionHandle:
        return self._submit(
            RESOLVE,
            lambda token: self.environment.resolve_domain(domain, token, with_fail_msg=with_fail_msg),
            on_result,
        )

    def _submit(
        self,
        purpose: str,
        work: Callable[[CancellationToken], Any],
        on_result: Callable[[Any], None] | None,
    ) -> DetectionHandle:
        handle = DetectionHandle(purpose)
        with self._lock:
            previous = self._inflight.get(purpose)
            if previous is not None and not previous.done():
                self.logger.debug("Cancelling in-flight %s request", purpose)
                previous.cancel()
            handle._future = self._executor.submit(self._run, handle, work, on_result)
            self._inflight[purpose] = handle
        return handle

    def _run(
        self,
        handle: DetectionHandle,
        work: Callable[[CancellationToken], Any],
        on_result: Callable[[Any], None] | None,
    ) -> Any:
        handle.token.raise_if_cancelled()
        try:
            value = work(handle.token)
        except DetectionCancelled:
            self.logger.debug("%s request cancelled before completion", handle.purpose)
            raise
        if not handle.deliver(value, on_result):
            self.logger.debug("Dropping %s result from cancelled request", handle.purpose)
            raise DetectionCancelled()
        return value

    def cancel_all(self) -> None:
        with self._lock:
            for handle in self._inflight.values():
                handle.cancel()
            self._inflight.clear()

    def shutdown(self, wait: bool = True) -> None:
        """Cancel outstanding requests and stop the worker pool."""
        self.cancel_all()
        self._executor.shutdown(wait=wait, cancel_futures=True)
