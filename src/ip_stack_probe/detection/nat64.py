"""Detect NAT64/DNS64 by resolving a name that only has IPv4 records."""

from __future__ import annotations

from ip_stack_probe.detection.cancel import CancellationToken
from ip_stack_probe.detection.logging_utils import DEFAULT_LOGGER, LoggingManager
from ip_stack_probe.detection.resolver import DEFAULT_RESOLVER, DomainResolver
from ip_stack_probe.detection.validators import is_valid_ipv6

# RFC 7050 reserves this name for NAT64 prefix discovery; it only has A records.
DEFAULT_IPV4_ONLY_DOMAIN = "ipv4only.arpa"


class Nat64Prober:
    """Report NAT64 evidence when an IPv4-only name resolves to an IPv6 literal."""

    def __init__(
        self,
        *,
        resolver: DomainResolver = DEFAULT_RESOLVER,
        logger: LoggingManager = DEFAULT_LOGGER,
    ) -> None:
        self.resolver = resolver
        self.logger = logger

    def probe(self, ipv4_only_domain: str | None, token: CancellationToken | None = None) -> bool:
        if not ipv4_only_domain:
            self.logger.debug("No IPv4-only domain configured; skipping NAT64 probe")
            return False

        resolution = self.resolver.resolve(ipv4_only_domain, token, with_fail_msg=False)
        if not resolution.ok:
            return False

        synthesized = is_valid_ipv6(resolution.address)
        self.logger.debug(
            "NAT64 probe %s -> %s (synthesized IPv6: %s)",
            ipv4_only_domain,
            resolution.address,
            synthesized,
        )
        return synthesized
