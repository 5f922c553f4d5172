"""Tests for the OS-level fallback probes."""

import errno

from ip_stack_probe.detection import native
from ip_stack_probe.detection.types import ProbeOutcome
from tests.helpers import RecordingLogger


class _FakeSocket:
    def __init__(self, local=None, error=None):
        self.local = local
        self.error = error
        self.connected_to = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def connect(self, address):
        if self.error is not None:
            raise self.error
        self.connected_to = address

    def getsockname(self):
        return (self.local, 40000)


def _patch_socket(monkeypatch, fake):
    monkeypatch.setattr(native.socket, "socket", lambda *args, **kwargs: fake)


def test_route_probe_reports_global_source(monkeypatch):
    fake = _FakeSocket(local="192.168.1.20")
    _patch_socket(monkeypatch, fake)

    outcome = native.RouteProbe("203.0.113.1", logger=RecordingLogger()).has_global_ipv4()

    assert outcome is ProbeOutcome.YES
    assert fake.connected_to == ("203.0.113.1", 53)


def test_route_probe_unreachable_network_is_no(monkeypatch):
    _patch_socket(monkeypatch, _FakeSocket(error=OSError(errno.ENETUNREACH, "Network is unreachable")))

    assert native.RouteProbe(logger=RecordingLogger()).has_global_ipv4() is ProbeOutcome.NO


def test_route_probe_loopback_source_is_no(monkeypatch):
    _patch_socket(monkeypatch, _FakeSocket(local="127.0.0.1"))

    assert native.RouteProbe(logger=RecordingLogger()).has_global_ipv4() is ProbeOutcome.NO


def test_route_probe_other_errors_are_errors(monkeypatch):
    _patch_socket(monkeypatch, _FakeSocket(error=PermissionError(errno.EACCES, "denied")))

    assert native.RouteProbe(logger=RecordingLogger()).has_global_ipv4() is ProbeOutcome.ERROR


def test_read_if_inet6_parses_file(tmp_path):
    path = tmp_path / "if_inet6"
    path.write_text("20010db8000000000000000000000042 02 40 00 00     eth0\n", encoding="utf-8")

    parsed = native.read_if_inet6(str(path), logger=RecordingLogger())

    assert parsed[0].name == "eth0"
    assert parsed[0].has_global_ipv6()


def test_read_if_inet6_missing_file_is_empty(tmp_path):
    logger = RecordingLogger()

    assert native.read_if_inet6(str(tmp_path / "missing"), logger=logger) == []
    assert any("Cannot read" in msg for msg in logger.messages)
