"""Reduce discovered interfaces into a StackSupport value."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from ip_stack_probe.detection.cancel import CancellationToken, check
from ip_stack_probe.detection.interfaces import InterfaceEnumerator
from ip_stack_probe.detection.logging_utils import DEFAULT_LOGGER, LoggingManager
from ip_stack_probe.detection.native import GlobalIPv4Probe, RouteProbe, read_if_inet6
from ip_stack_probe.detection.types import NetInterface, ProbeOutcome, StackSupport


def combine(has_v4: bool, has_v6: bool) -> StackSupport:
    if has_v4 and has_v6:
        return StackSupport.IPV6_DUAL
    if has_v4:
        return StackSupport.IPV4
    if has_v6:
        return StackSupport.IPV6
    return StackSupport.NONE


def classify(interfaces: Iterable[NetInterface]) -> StackSupport:
    """Classify the union of all interfaces.

    Dual stack is reported when one interface carries global IPv4 and another
    carries global IPv6; they need not be the same interface.
    """
    interfaces = list(interfaces)
    support_v4 = any(iface.has_global_ipv4() for iface in interfaces)
    support_v6 = any(iface.has_global_ipv6() for iface in interfaces)
    return combine(support_v4, support_v6)


def ipv4_present(outcome: ProbeOutcome) -> bool:
    """Interpret the native probe, failing open when the probe itself errored."""
    if outcome is ProbeOutcome.ERROR:
        return True
    return outcome is ProbeOutcome.YES


def classify_fallback(v4_outcome: ProbeOutcome, v6_interfaces: Iterable[NetInterface]) -> StackSupport:
    has_v6 = any(iface.has_global_ipv6() for iface in v6_interfaces)
    return combine(ipv4_present(v4_outcome), has_v6)


class StackClassifier:
    """Classify host stack support from interface listing with a native fallback."""

    def __init__(
        self,
        *,
        enumerator: InterfaceEnumerator | None = None,
        ipv4_probe: GlobalIPv4Probe | None = None,
        ipv6_source: Callable[[], list[NetInterface]] | None = None,
        native_fallback: bool = True,
        logger: LoggingManager = DEFAULT_LOGGER,
    ) -> None:
        self.logger = logger
        self.enumerator = enumerator or InterfaceEnumerator(logger=logger)
        self.ipv4_probe = ipv4_probe or RouteProbe(logger=logger)
        self.ipv6_source = ipv6_source or (lambda: read_if_inet6(logger=logger))
        self.native_fallback = native_fallback

    def support(self, token: CancellationToken | None = None) -> StackSupport:
        interfaces = self.enumerator.list_interfaces(token=token)
        result = classify(interfaces)
        self.logger.debug("Interface classification: %s", result.name)
        if result is not StackSupport.NONE or not self.native_fallback:
            return result

        check(token)
        return self.fallback_support()

    def fallback_support(self) -> StackSupport:
        v4_outcome = self.ipv4_probe.has_global_ipv4()
        if v4_outcome is ProbeOutcome.ERROR:
            self.logger.debug("Native IPv4 probe errored; assuming IPv4 is available")
        result = classify_fallback(v4_outcome, self.ipv6_source())
        self.logger.debug("Native fallback classification: %s (v4 probe=%s)", result.name, v4_outcome.name)
        return result
