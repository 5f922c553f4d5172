"""Shared dataclasses and enums for IP-stack detection."""

from __future__ import annotations

import dataclasses
import enum


@dataclasses.dataclass
class CommandResult:
    cmd: list[str]
    returncode: int
    stdout: str
    stderr: str


@dataclasses.dataclass(frozen=True)
class AddressRecord:
    """One address literal discovered on an interface."""

    literal: str
    is_global: bool
    scope: str | None = None


@dataclasses.dataclass(frozen=True)
class NetInterface:
    """Addresses discovered for a single interface block."""

    name: str
    ipv4: tuple[AddressRecord, ...] = ()
    ipv6: tuple[AddressRecord, ...] = ()

    def has_global_ipv4(self) -> bool:
        return any(record.is_global for record in self.ipv4)

    def has_global_ipv6(self) -> bool:
        return any(record.is_global for record in self.ipv6)


class StackSupport(enum.Enum):
    NONE = "none"
    IPV4 = "ipv4"
    IPV6 = "ipv6"
    IPV6_DUAL = "ipv6_dual"


class NetType(enum.Enum):
    """Externally visible classification of the local network environment."""

    UNKNOWN = "unknown"
    IPV4_ONLY = "ipv4_only"
    IPV6_ONLY = "ipv6_only"
    IPV6_DUAL = "ipv6_dual"
    IPV6_NAT64 = "ipv6_nat64"

    @property
    def supports_ipv4(self) -> bool:
        """Whether IPv4 destinations should be attempted in this environment.

        UNKNOWN is permissive: callers keep trying both families when
        detection could not decide.
        """
        return self is not NetType.IPV6_ONLY

    @property
    def supports_ipv6(self) -> bool:
        return self is not NetType.IPV4_ONLY


class ProbeOutcome(enum.Enum):
    """Result of the native global IPv4 probe."""

    NO = "no"
    YES = "yes"
    ERROR = "error"


@dataclasses.dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a domain through the platform resolver."""

    domain: str
    address: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.address is not None

    def describe(self) -> str:
        """Return the address, or the diagnostic message when resolution failed."""
        if self.address is not None:
            return self.address
        return self.error or f"failed to resolve {self.domain}"


SUPPORT_LABELS: dict[NetType, str] = {
    NetType.UNKNOWN: "Unknown (no usable connectivity detected)",
    NetType.IPV4_ONLY: "IPv4 only",
    NetType.IPV6_ONLY: "IPv6 only",
    NetType.IPV6_DUAL: "Dual stack (IPv4 + IPv6)",
    NetType.IPV6_NAT64: "IPv6 behind NAT64/DNS64",
}
