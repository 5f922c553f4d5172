"""Tests for parsing interface listings into NetInterface records."""

import sys

from ip_stack_probe.detection import interfaces, shell
from ip_stack_probe.detection.logging_utils import LoggingManager
from ip_stack_probe.detection.classifier import classify
from ip_stack_probe.detection.types import StackSupport
from tests.helpers import RecordingLogger, StubShell

LEGACY_IFCONFIG = """eth0      Link encap:Ethernet  HWaddr 00:16:3e:5e:6c:00
          inet addr:192.168.1.5  Bcast:192.168.1.255  Mask:255.255.255.0
          inet6 addr: fe80::216:3eff:fe5e:6c00/64 Scope:Link
          UP BROADCAST RUNNING MULTICAST  MTU:1500  Metric:1

lo        Link encap:Local Loopback
          inet addr:127.0.0.1  Mask:255.0.0.0
          inet6 addr: ::1/128 Scope:Host
          UP LOOPBACK RUNNING  MTU:65536  Metric:1

rmnet0    Link encap:UNSPEC
          inet6 addr: 2409:8900:1e71:3f2a::1/64 Scope:Global
          UP RUNNING  MTU:1500  Metric:1
"""

MODERN_IFCONFIG = """eth0: flags=4163<UP,BROADCAST,RUNNING,MULTICAST>  mtu 1500
        inet 10.0.2.15  netmask 255.255.255.0  broadcast 10.0.2.255
        inet6 fe80::a00:27ff:fe4e:66a1  prefixlen 64  scopeid 0x20<link>
        ether 08:00:27:4e:66:a1  txqueuelen 1000  (Ethernet)

lo: flags=73<UP,LOOPBACK,RUNNING>  mtu 65536
        inet 127.0.0.1  netmask 255.0.0.0
        inet6 ::1  prefixlen 128  scopeid 0x10<host>
"""


def test_parse_legacy_listing_extracts_names_and_addresses():
    parsed = interfaces.parse_interface_listing(LEGACY_IFCONFIG, logger=RecordingLogger())

    assert [iface.name for iface in parsed] == ["eth0", "lo", "rmnet0"]

    eth0, lo, rmnet0 = parsed
    assert [(rec.literal, rec.is_global) for rec in eth0.ipv4] == [("192.168.1.5", True)]
    assert [(rec.literal, rec.is_global, rec.scope) for rec in eth0.ipv6] == [
        ("fe80::216:3eff:fe5e:6c00", False, "link")
    ]
    assert not lo.has_global_ipv4()
    assert not lo.has_global_ipv6()
    assert rmnet0.ipv4 == ()
    assert rmnet0.has_global_ipv6()


def test_parse_modern_listing_strips_colon_from_name():
    parsed = interfaces.parse_interface_listing(MODERN_IFCONFIG, logger=RecordingLogger())

    assert [iface.name for iface in parsed] == ["eth0", "lo"]
    assert parsed[0].ipv4[0].literal == "10.0.2.15"
    assert parsed[0].ipv6[0].scope == "link"
    assert parsed[1].ipv6[0].literal == "::1"
    assert parsed[1].ipv6[0].scope == "host"


def test_markers_are_matched_case_insensitively():
    dump = "wlan0 Link\n  INET ADDR:172.16.0.9  Mask:255.255.0.0\n  Inet6 Addr: 2001:DB8::9/64\n"

    (iface,) = interfaces.parse_interface_listing(dump, logger=RecordingLogger())

    assert iface.ipv4[0].literal == "172.16.0.9"
    assert iface.ipv6[0].literal == "2001:db8::9"


def test_cross_interface_dual_stack_is_recognized():
    """One interface with v4 and another with v6 still means dual stack."""

    dump = "eth0 Link\n  inet addr:192.168.1.5\n\nwlan0 Link\n  inet6 addr: 2001:db8::1\n"

    parsed = interfaces.parse_interface_listing(dump, logger=RecordingLogger())

    assert not any(iface.has_global_ipv4() and iface.has_global_ipv6() for iface in parsed)
    assert classify(parsed) is StackSupport.IPV6_DUAL


def test_reserved_addresses_only_classify_as_none():
    dump = "lo Link\n  inet addr:127.0.0.1\n  inet6 addr: fe80::1\n"

    parsed = interfaces.parse_interface_listing(dump, logger=RecordingLogger())

    assert classify(parsed) is StackSupport.NONE


def test_unique_local_and_multicast_are_not_global():
    dump = "eth0 Link\n  inet6 addr: fd12:3456::1/64\n  inet6 addr: ff02::1\n  inet6 addr: fc00::5\n"

    (iface,) = interfaces.parse_interface_listing(dump, logger=RecordingLogger())

    assert [rec.is_global for rec in iface.ipv6] == [False, False, False]


def test_scope_marker_disagreement_follows_range_policy():
    """A 'Scope:Host' marker on a non-loopback literal does not demote it.

    The range policy is canonical; the marker is kept on the record and the
    disagreement is logged.
    """

    logger = RecordingLogger()
    dump = "tun0 Link\n  inet6 addr: 2001:db8::42/64 Scope:Host\n"

    (iface,) = interfaces.parse_interface_listing(dump, logger=logger)

    record = iface.ipv6[0]
    assert record.is_global is True
    assert record.scope == "host"
    assert any("disagrees with range policy" in msg for msg in logger.messages)


def test_malformed_literals_are_dropped():
    logger = RecordingLogger()
    dump = "eth0 Link\n  inet addr:999.1.1.1\n  inet6 addr:\n"

    (iface,) = interfaces.parse_interface_listing(dump, logger=logger)

    assert iface.ipv4 == ()
    assert iface.ipv6 == ()
    assert any("malformed IPv4" in msg for msg in logger.messages)


def test_near_empty_lines_separate_blocks():
    dump = "eth0 Link\n  inet addr:10.0.0.1\n \nwlan0 Link\n  inet addr:10.0.0.2\n"

    parsed = interfaces.parse_interface_listing(dump, logger=RecordingLogger())

    assert [iface.name for iface in parsed] == ["eth0", "wlan0"]


def test_parse_if_inet6_groups_by_device():
    text = (
        "00000000000000000000000000000001 01 80 10 80       lo\n"
        "fe800000000000000a0027fffe4e66a1 02 40 20 80     eth0\n"
        "20010db8000000000000000000000042 02 40 00 00     eth0\n"
    )

    parsed = interfaces.parse_if_inet6(text, logger=RecordingLogger())

    assert [iface.name for iface in parsed] == ["lo", "eth0"]
    lo, eth0 = parsed
    assert lo.ipv6[0].literal == "::1"
    assert lo.ipv6[0].scope == "host"
    assert not lo.has_global_ipv6()
    assert [(rec.literal, rec.is_global) for rec in eth0.ipv6] == [
        ("fe80::a00:27ff:fe4e:66a1", False),
        ("2001:db8::42", True),
    ]


def test_enumerator_runs_configured_command():
    shell = StubShell(stdout=LEGACY_IFCONFIG)
    enumerator = interfaces.InterfaceEnumerator(
        shell=shell,
        logger=RecordingLogger(),
        command=["ifconfig", "-a"],
    )

    parsed = enumerator.list_interfaces()

    assert shell.calls == [["ifconfig", "-a"]]
    assert len(parsed) == 3


def test_enumerator_tolerates_command_failure():
    logger = RecordingLogger()
    failing = interfaces.InterfaceEnumerator(
        shell=StubShell(stdout="", returncode=255, stderr="No such file or directory"),
        logger=logger,
    )
    empty = interfaces.InterfaceEnumerator(shell=StubShell(stdout="\n\n"), logger=logger)

    assert failing.list_interfaces() == []
    assert empty.list_interfaces() == []
    assert any("Interface listing unavailable" in msg for msg in logger.messages)


def test_enumerator_survives_undecodable_bytes_in_listing():
    listing = b"eth0\xff Link encap:Ethernet\n          inet addr:10.0.0.5  Mask:255.255.255.0\n"
    script = f"import sys; sys.stdout.buffer.write({listing!r})"
    enumerator = interfaces.InterfaceEnumerator(
        shell=shell.ShellRunner(logger=LoggingManager("undecodable_listing")),
        logger=RecordingLogger(),
        command=[sys.executable, "-c", script],
    )

    parsed = enumerator.list_interfaces()

    assert [rec.literal for iface in parsed for rec in iface.ipv4] == ["10.0.0.5"]
    assert parsed[0].name.startswith("eth0")
    assert classify(parsed) is StackSupport.IPV4
