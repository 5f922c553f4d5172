"""Enumerate network interfaces by parsing interface-listing output."""

from __future__ import annotations

import ipaddress
import re
from collections.abc import Iterable, Sequence

from ip_stack_probe.detection.cancel import CancellationToken
from ip_stack_probe.detection.logging_utils import DEFAULT_LOGGER, LoggingManager
from ip_stack_probe.detection.reserved import (
    is_global_ipv4,
    is_global_ipv6,
    scope_disagrees,
)
from ip_stack_probe.detection.shell import DEFAULT_SHELL, ShellRunner
from ip_stack_probe.detection.types import AddressRecord, NetInterface
from ip_stack_probe.detection.validators import is_valid_ipv4, is_valid_ipv6

DEFAULT_LISTING_COMMAND: tuple[str, ...] = ("ifconfig",)

# Matches both the legacy "inet addr:1.2.3.4" / "inet6 addr: fe80::1/64" layout
# and the net-tools 2.x "inet 1.2.3.4" / "inet6 fe80::1" layout.
_ADDRESS_RE = re.compile(r"\binet(6)?\s+(?:addr:\s*)?(\S+)", re.IGNORECASE)
_SCOPE_RE = re.compile(r"\bscope(?:id)?\s*:?\s*(?:0x[0-9a-f]+<)?([a-z]+)", re.IGNORECASE)

# /proc/net/if_inet6 scope column values.
_PROC_SCOPES = {
    0x00: "global",
    0x10: "host",
    0x20: "link",
    0x40: "site",
    0x80: "compat",
}


class InterfaceBuilder:
    """Accumulate the lines of one interface block into a NetInterface."""

    def __init__(self, logger: LoggingManager = DEFAULT_LOGGER) -> None:
        self.logger = logger
        self.name: str | None = None
        self.ipv4: list[AddressRecord] = []
        self.ipv6: list[AddressRecord] = []

    @property
    def empty(self) -> bool:
        return self.name is None and not self.ipv4 and not self.ipv6

    def append(self, line: str) -> None:
        if self.name is None and line.strip():
            self.name = line.split(None, 1)[0].rstrip(":")

        scope_match = _SCOPE_RE.search(line)
        scope = scope_match.group(1).lower() if scope_match else None

        for match in _ADDRESS_RE.finditer(line):
            literal = match.group(2).lower().split("/", 1)[0]
            if match.group(1):
                self._add_ipv6(literal, scope)
            else:
                self._add_ipv4(literal, scope)

    def _add_ipv4(self, literal: str, scope: str | None) -> None:
        if not is_valid_ipv4(literal):
            self.logger.debug("Ignoring malformed IPv4 literal %r on %s", literal, self.name)
            return
        self.ipv4.append(self._record(literal, is_global_ipv4(literal), scope))

    def _add_ipv6(self, literal: str, scope: str | None) -> None:
        if not is_valid_ipv6(literal):
            self.logger.debug("Ignoring malformed IPv6 literal %r on %s", literal, self.name)
            return
        self.ipv6.append(self._record(literal, is_global_ipv6(literal), scope))

    def _record(self, literal: str, is_global: bool, scope: str | None) -> AddressRecord:
        if scope_disagrees(is_global, scope):
            self.logger.debug(
                "Scope marker %r for %s on %s disagrees with range policy (global=%s)",
                scope,
                literal,
                self.name,
                is_global,
            )
        return AddressRecord(literal=literal, is_global=is_global, scope=scope)

    def build(self) -> NetInterface:
        return NetInterface(
            name=self.name or "",
            ipv4=tuple(self.ipv4),
            ipv6=tuple(self.ipv6),
        )


def _is_block_separator(line: str) -> bool:
    stripped = line.rstrip("\r\n")
    return len(stripped) <= 1 or not stripped.strip()


def parse_interface_listing(
    text: str,
    logger: LoggingManager = DEFAULT_LOGGER,
) -> list[NetInterface]:
    """Split listing output into blocks and parse each into a NetInterface."""

    interfaces: list[NetInterface] = []
    builder = InterfaceBuilder(logger)
    for line in text.splitlines():
        if _is_block_separator(line):
            if not builder.empty:
                interfaces.append(builder.build())
            builder = InterfaceBuilder(logger)
            continue
        builder.append(line)

    if not builder.empty:
        interfaces.append(builder.build())
    return interfaces


def parse_if_inet6(
    text: str,
    logger: LoggingManager = DEFAULT_LOGGER,
) -> list[NetInterface]:
    """Parse ``/proc/net/if_inet6`` into per-device IPv6 records.

    Each line holds the address as 32 hex digits, the interface index, prefix
    length, scope, flags and device name.
    """

    by_device: dict[str, list[AddressRecord]] = {}
    for line in text.splitlines():
        parts = line.split()
        if len(parts) < 6:
            continue
        raw, _, _, scope_hex, _, device = parts[:6]
        try:
            addr = ipaddress.IPv6Address(int(raw, 16))
            scope_value = int(scope_hex, 16)
        except ValueError:
            logger.debug("Ignoring malformed if_inet6 line: %r", line)
            continue

        literal = str(addr)
        record = AddressRecord(
            literal=literal,
            is_global=is_global_ipv6(literal),
            scope=_PROC_SCOPES.get(scope_value, scope_hex),
        )
        by_device.setdefault(device, []).append(record)

    return [NetInterface(name=device, ipv6=tuple(records)) for device, records in by_device.items()]


class InterfaceEnumerator:
    """Run the interface-listing command and parse its output."""

    def __init__(
        self,
        *,
        shell: ShellRunner = DEFAULT_SHELL,
        logger: LoggingManager = DEFAULT_LOGGER,
        command: Sequence[str] = DEFAULT_LISTING_COMMAND,
        timeout: float = 5,
    ) -> None:
        self.shell = shell
        self.logger = logger
        self.command = list(command)
        self.timeout = timeout

    def list_interfaces(self, token: CancellationToken | None = None) -> list[NetInterface]:
        """Return parsed interfaces, or an empty list when the listing fails."""

        res = self.shell.run_cmd(self.command, timeout=self.timeout, token=token)
        if res.returncode != 0 or not res.stdout.strip():
            self.logger.debug(
                "Interface listing unavailable rc=%s: %r",
                res.returncode,
                res.stderr.strip(),
            )
            return []

        interfaces = parse_interface_listing(res.stdout, logger=self.logger)
        log_interfaces(interfaces, self.logger)
        return interfaces


def log_interfaces(interfaces: Iterable[NetInterface], logger: LoggingManager) -> None:
    for iface in interfaces:
        logger.debug(
            "NetInterface: %s v4=%s v6=%s",
            iface.name,
            [(rec.literal, rec.is_global) for rec in iface.ipv4],
            [(rec.literal, rec.is_global) for rec in iface.ipv6],
        )
