"""Domain resolution through the platform resolver."""

from __future__ import annotations

import concurrent.futures
import socket
import threading
import time
from collections.abc import Callable

from ip_stack_probe.detection.cancel import CancellationToken, DetectionCancelled
from ip_stack_probe.detection.logging_utils import DEFAULT_LOGGER, LoggingManager
from ip_stack_probe.detection.types import Resolution

AddrInfoFunc = Callable[..., list]


class DomainResolver:
    """Resolve names with ``socket.getaddrinfo`` on daemon threads.

    ``getaddrinfo`` cannot be interrupted, so cancellation abandons the pending
    lookup: the caller stops waiting and never sees its answer. Each lookup
    runs on its own daemon thread, so an abandoned one never delays exit.
    """

    def __init__(
        self,
        *,
        timeout: float = 5.0,
        poll_interval: float = 0.05,
        getaddrinfo: AddrInfoFunc = socket.getaddrinfo,
        logger: LoggingManager = DEFAULT_LOGGER,
    ) -> None:
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.getaddrinfo = getaddrinfo
        self.logger = logger

    def _lookup(self, domain: str) -> str:
        infos = self.getaddrinfo(domain, None, socket.AF_UNSPEC, socket.SOCK_STREAM)
        if not infos:
            raise socket.gaierror(socket.EAI_NONAME, f"no address found for {domain}")
        return str(infos[0][4][0])

    def _start_lookup(self, domain: str) -> concurrent.futures.Future:
        future: concurrent.futures.Future = concurrent.futures.Future()

        def run() -> None:
            if not future.set_running_or_notify_cancel():
                return
            try:
                address = self._lookup(domain)
            except Exception as exc:  # noqa: BLE001 - re-raised by future.result()
                future.set_exception(exc)
            else:
                future.set_result(address)

        threading.Thread(target=run, name=f"ipstack-dns-{domain}", daemon=True).start()
        return future

    def resolve(
        self,
        domain: str | None,
        token: CancellationToken | None = None,
        *,
        with_fail_msg: bool = True,
    ) -> Resolution:
        """Resolve ``domain`` to its first address literal.

        Failures are returned as a Resolution without an address; the error
        message is kept only when ``with_fail_msg`` is set.
        """
        if not domain:
            return Resolution(domain="", error="empty domain" if with_fail_msg else None)

        future = self._start_lookup(domain)
        deadline = time.monotonic() + self.timeout
        try:
            while True:
                if token is not None and token.cancelled:
                    future.cancel()
                    self.logger.debug("Resolution of %s cancelled", domain)
                    raise DetectionCancelled()

                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    future.cancel()
                    message = f"timed out resolving {domain} after {self.timeout}s"
                    self.logger.debug(message)
                    return Resolution(domain=domain, error=message if with_fail_msg else None)

                try:
                    address = future.result(timeout=min(self.poll_interval, remaining))
                except concurrent.futures.TimeoutError:
                    continue
                break
        except (OSError, UnicodeError) as exc:
            self.logger.debug("Resolution of %s failed: %s", domain, exc)
            return Resolution(domain=domain, error=str(exc) if with_fail_msg else None)

        self.logger.debug("Resolved %s -> %s", domain, address)
        return Resolution(domain=domain, address=address)


DEFAULT_RESOLVER = DomainResolver()
