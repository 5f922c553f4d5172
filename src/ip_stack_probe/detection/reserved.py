"""Reserved address ranges that disqualify an address from being global.

IPv4 follows the interface-listing convention of treating only loopback as
non-global: private RFC 1918 space still reaches the WAN through NAT. IPv6
excludes loopback, unique-local, link-local and multicast.
"""

from __future__ import annotations

import ipaddress

IPV4_RESERVED_NETWORKS: tuple[ipaddress.IPv4Network, ...] = (
    ipaddress.IPv4Network("127.0.0.0/8"),  # loopback
)

IPV6_RESERVED_NETWORKS: tuple[ipaddress.IPv6Network, ...] = (
    ipaddress.IPv6Network("::1/128"),  # loopback
    ipaddress.IPv6Network("fc00::/7"),  # unique local
    ipaddress.IPv6Network("fe80::/10"),  # link-local
    ipaddress.IPv6Network("ff00::/8"),  # multicast
)

# Scope markers printed by ifconfig/ip that denote a non-global address.
NON_GLOBAL_SCOPE_MARKERS = frozenset({"host", "link", "site", "compat"})


def strip_literal(literal: str) -> str:
    """Drop ``/prefixlen`` and ``%zone`` decorations from an address literal."""
    return literal.split("/", 1)[0].split("%", 1)[0]


def is_global_ipv4(literal: str) -> bool:
    try:
        addr = ipaddress.IPv4Address(strip_literal(literal))
    except ValueError:
        return False
    return not any(addr in network for network in IPV4_RESERVED_NETWORKS)


def is_global_ipv6(literal: str) -> bool:
    try:
        addr = ipaddress.IPv6Address(strip_literal(literal))
    except ValueError:
        return False
    return not any(addr in network for network in IPV6_RESERVED_NETWORKS)


def scope_disagrees(is_global: bool, scope: str | None) -> bool:
    """Whether a tool-reported scope marker contradicts the range policy."""
    if scope is None:
        return False
    marker_says_global = scope not in NON_GLOBAL_SCOPE_MARKERS
    return marker_says_global != is_global
