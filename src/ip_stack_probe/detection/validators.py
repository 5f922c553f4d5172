"""Syntactic IPv4/IPv6 validation and host:port formatting."""

from __future__ import annotations

import re

_V4_OCTET = r"(?:25[0-5]|2[0-4]\d|1\d\d|[1-9]?\d)"
_V4_TAIL = rf"{_V4_OCTET}(?:\.{_V4_OCTET}){{3}}"
_H16 = r"[0-9A-Fa-f]{1,4}"

IPV4_PATTERN = re.compile(rf"{_V4_OCTET}(?:\.{_V4_OCTET}){{3}}")

# One alternative per count of leading hextets before the "::" (or none),
# each allowing an embedded IPv4 tail where the grammar permits it.
IPV6_PATTERN = re.compile(
    "(?:"
    rf"(?:(?:{_H16}:){{7}}(?:{_H16}|:))"
    rf"|(?:(?:{_H16}:){{6}}(?::{_H16}|{_V4_TAIL}|:))"
    rf"|(?:(?:{_H16}:){{5}}(?:(?::{_H16}){{1,2}}|:{_V4_TAIL}|:))"
    rf"|(?:(?:{_H16}:){{4}}(?:(?::{_H16}){{1,3}}|(?::{_H16})?:{_V4_TAIL}|:))"
    rf"|(?:(?:{_H16}:){{3}}(?:(?::{_H16}){{1,4}}|(?::{_H16}){{0,2}}:{_V4_TAIL}|:))"
    rf"|(?:(?:{_H16}:){{2}}(?:(?::{_H16}){{1,5}}|(?::{_H16}){{0,3}}:{_V4_TAIL}|:))"
    rf"|(?:(?:{_H16}:){{1}}(?:(?::{_H16}){{1,6}}|(?::{_H16}){{0,4}}:{_V4_TAIL}|:))"
    rf"|(?::(?:(?::{_H16}){{1,7}}|(?::{_H16}){{0,5}}:{_V4_TAIL}|:))"
    ")"
    r"(?:%.+)?"
)


def is_valid_ipv4(ip_expr: str | None) -> bool:
    """Whether ``ip_expr`` is a dotted-quad IPv4 literal, e.g. ``192.168.1.1``.

    Surrounding whitespace is not stripped; callers must trim first.
    """
    if not ip_expr:
        return False
    return IPV4_PATTERN.fullmatch(ip_expr) is not None


def is_valid_ipv6(ip_expr: str | None) -> bool:
    """Whether ``ip_expr`` is an IPv6 literal, e.g. ``240e:1a:e6:200:0:0:0:c``.

    Compressed forms, embedded IPv4 tails and ``%zone`` suffixes are accepted.
    Surrounding whitespace is not, and neither is the optional ``[...]``
    wrapping that some IPv6 validators tolerate: ``"[::1]"`` is False here.
    Strip brackets first (``ip.strip("[]")``) when checking a URL host.
    """
    if not ip_expr:
        return False
    return IPV6_PATTERN.fullmatch(ip_expr) is not None


def is_ip_address(ip_expr: str | None) -> bool:
    return is_valid_ipv4(ip_expr) or is_valid_ipv6(ip_expr)


def to_bracketed_ipv6(ip: str, port: str | int | None = None) -> str:
    """Wrap an IPv6 literal in brackets and optionally append a port.

    A string port that is empty or None is omitted; an integer port is always
    appended. Literals that already contain ``[`` are not wrapped again.
    """
    host = ip if "[" in ip else f"[{ip}]"
    if isinstance(port, int):
        return f"{host}:{port}"
    if not port:
        return host
    return f"{host}:{port}"


def to_ipv4_host_port(ip: str, port: str | int | None = None) -> str:
    """Join an IPv4 literal and port; empty string ports are dropped."""
    if isinstance(port, int):
        return f"{ip}:{port}"
    if not port:
        return ip
    return f"{ip}:{port}"

