"""Compose stack classification and NAT64 probing into a NetType."""

from __future__ import annotations

from ip_stack_probe.detection.cancel import CancellationToken, DetectionCancelled, check
from ip_stack_probe.detection.classifier import StackClassifier
from ip_stack_probe.detection.interfaces import InterfaceEnumerator
from ip_stack_probe.detection.logging_utils import DEFAULT_LOGGER, LoggingManager
from ip_stack_probe.detection.nat64 import Nat64Prober
from ip_stack_probe.detection.native import RouteProbe, read_if_inet6
from ip_stack_probe.detection.resolver import DomainResolver
from ip_stack_probe.detection.settings import DetectionSettings
from ip_stack_probe.detection.shell import DEFAULT_SHELL, ShellRunner
from ip_stack_probe.detection.types import NetType, Resolution, StackSupport

# Classification before the NAT64 probe; NAT64 only ever upgrades these two.
_PROBED_SUPPORT: dict[StackSupport, NetType] = {
    StackSupport.IPV6: NetType.IPV6_ONLY,
    StackSupport.IPV6_DUAL: NetType.IPV6_DUAL,
}


class IPEnvironment:
    """Entry points used by callers: domain resolution and environment detection.

    Each detection re-enumerates interfaces and re-probes; nothing is cached.
    Failures degrade the answer instead of raising. Only DetectionCancelled
    escapes, and only when the caller cancelled the token it passed in.
    """

    def __init__(
        self,
        *,
        settings: DetectionSettings | None = None,
        classifier: StackClassifier | None = None,
        resolver: DomainResolver | None = None,
        prober: Nat64Prober | None = None,
        shell: ShellRunner = DEFAULT_SHELL,
        logger: LoggingManager = DEFAULT_LOGGER,
    ) -> None:
        self.settings = settings or DetectionSettings()
        self.logger = logger
        self.resolver = resolver or DomainResolver(timeout=self.settings.resolve_timeout, logger=logger)
        self.classifier = classifier or self._build_classifier(shell)
        self.prober = prober or Nat64Prober(resolver=self.resolver, logger=logger)

    def _build_classifier(self, shell: ShellRunner) -> StackClassifier:
        settings = self.settings
        return StackClassifier(
            enumerator=InterfaceEnumerator(
                shell=shell,
                logger=self.logger,
                command=settings.listing_command,
                timeout=settings.command_timeout,
            ),
            ipv4_probe=RouteProbe(settings.route_probe_target, logger=self.logger),
            ipv6_source=lambda: read_if_inet6(settings.if_inet6_path, logger=self.logger),
            native_fallback=settings.native_fallback,
            logger=self.logger,
        )

    def resolve_domain(
        self,
        domain: str | None,
        token: CancellationToken | None = None,
        *,
        with_fail_msg: bool = True,
    ) -> Resolution:
        try:
            return self.resolver.resolve(domain, token, with_fail_msg=with_fail_msg)
        except DetectionCancelled:
            raise
        except Exception as exc:  # noqa: BLE001 - resolver failures never escape
            self.logger.warning("Resolving %s failed unexpectedly: %s", domain, exc)
            return Resolution(domain=domain or "", error=str(exc) if with_fail_msg else None)

    def stack_support(self, token: CancellationToken | None = None) -> StackSupport:
        try:
            return self.classifier.support(token)
        except DetectionCancelled:
            raise
        except Exception as exc:  # noqa: BLE001 - degrade to "no signal"
            self.logger.warning("Stack classification failed: %s", exc)
            return StackSupport.NONE

    def local_net_environment(
        self,
        ipv4_only_domain: str | None = None,
        token: CancellationToken | None = None,
    ) -> NetType:
        """Classify the local network, probing for NAT64 on IPv6-capable hosts.

        ``ipv4_only_domain`` defaults to the configured probe domain; pass an
        empty string to skip the NAT64 probe.
        """
        domain = self.settings.probe_domain if ipv4_only_domain is None else ipv4_only_domain

        support = self.stack_support(token)
        check(token)

        if support is StackSupport.NONE:
            result = NetType.UNKNOWN
        elif support is StackSupport.IPV4:
            result = NetType.IPV4_ONLY
        else:
            result = self._lookup_nat64(domain, _PROBED_SUPPORT[support], token)

        self.logger.log("Local net environment: %s (stack support %s)", result.name, support.name)
        return result

    def _lookup_nat64(
        self,
        domain: str,
        inferred: NetType,
        token: CancellationToken | None,
    ) -> NetType:
        try:
            found = self.prober.probe(domain, token)
        except DetectionCancelled:
            raise
        except Exception as exc:  # noqa: BLE001 - probe errors are "no evidence"
            self.logger.warning("NAT64 probe for %s failed: %s", domain, exc)
            found = False
        return NetType.IPV6_NAT64 if found else inferred
