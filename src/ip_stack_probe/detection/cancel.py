"""Cancellation tokens passed into blocking detection calls."""

from __future__ import annotations

import threading


class DetectionCancelled(Exception):
    """Raised inside a detection task once its token has been cancelled."""


class CancellationToken:
    """Thread-safe, one-way cancellation flag shared by a request and its I/O."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise DetectionCancelled()


def check(token: CancellationToken | None) -> None:
    """Raise DetectionCancelled when ``token`` is set; tolerate a missing token."""
    if token is not None:
        token.raise_if_cancelled()
