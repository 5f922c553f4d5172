"""OS-level fallback probes used when interface listing yields nothing."""

from __future__ import annotations

import errno
import ipaddress
import socket

from ip_stack_probe.detection.interfaces import parse_if_inet6
from ip_stack_probe.detection.logging_utils import DEFAULT_LOGGER, LoggingManager
from ip_stack_probe.detection.types import NetInterface, ProbeOutcome

IF_INET6_PATH = "/proc/net/if_inet6"
DEFAULT_ROUTE_TARGET = "8.8.8.8"

_UNREACHABLE_ERRNOS = frozenset(
    {
        errno.ENETUNREACH,
        errno.EHOSTUNREACH,
        errno.EADDRNOTAVAIL,
    }
)


class GlobalIPv4Probe:
    """Capability reporting whether a global IPv4 address is bound."""

    def has_global_ipv4(self) -> ProbeOutcome:  # pragma: no cover - interface contract
        raise NotImplementedError


class RouteProbe(GlobalIPv4Probe):
    """Ask the kernel which local address it would use to reach a public host.

    Connecting a UDP socket only performs route selection; no packet leaves the
    host.
    """

    def __init__(
        self,
        target: str = DEFAULT_ROUTE_TARGET,
        port: int = 53,
        *,
        logger: LoggingManager = DEFAULT_LOGGER,
    ) -> None:
        self.target = target
        self.port = port
        self.logger = logger

    def has_global_ipv4(self) -> ProbeOutcome:
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
                sock.connect((self.target, self.port))
                local = sock.getsockname()[0]
        except OSError as exc:
            if exc.errno in _UNREACHABLE_ERRNOS:
                self.logger.debug("Route probe: no IPv4 route to %s (%s)", self.target, exc)
                return ProbeOutcome.NO
            self.logger.debug("Route probe failed: %s", exc)
            return ProbeOutcome.ERROR

        try:
            addr = ipaddress.IPv4Address(local)
        except ValueError:
            self.logger.debug("Route probe returned unparseable address %r", local)
            return ProbeOutcome.ERROR

        if addr.is_loopback or addr.is_unspecified:
            self.logger.debug("Route probe selected non-global source %s", addr)
            return ProbeOutcome.NO
        self.logger.debug("Route probe selected source %s", addr)
        return ProbeOutcome.YES


def read_if_inet6(
    path: str = IF_INET6_PATH,
    logger: LoggingManager = DEFAULT_LOGGER,
) -> list[NetInterface]:
    """Return IPv6 interfaces from the kernel table, or [] when unreadable."""
    try:
        with open(path, encoding="utf-8", errors="replace") as fh:
            text = fh.read()
    except OSError as exc:
        logger.debug("Cannot read %s: %s", path, exc)
        return []
    return parse_if_inet6(text, logger=logger)
