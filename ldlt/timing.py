"""Named section timers collected in a process-wide registry.

Timings are grouped by an outer and an inner name. Each pair owns a list of
elapsed durations in seconds. Recording can be switched off globally with
:func:`toggle_benchmarks`. Scopes entered while it is off record nothing.
"""

from __future__ import annotations

import threading
import time

__all__ = [
    "ScopedTimer",
    "scope_timer",
    "get_durations",
    "get_map",
    "toggle_benchmarks",
]

_lock = threading.Lock()
_enabled = threading.Event()
_enabled.set()
_timings: dict[str, dict[str, list[float]]] = {}


class ScopedTimer:
    """Context manager that appends the time spent in its block to a list.

    With ``durations`` set to ``None`` the timer is inert and records nothing.
    A block that raises still has its duration recorded.
    """

    __slots__ = ("durations", "_begin")

    def __init__(self, durations: list[float] | None) -> None:
        self.durations = durations
        self._begin: float | None = None

    def __enter__(self) -> ScopedTimer:
        if self.durations is not None:
            self._begin = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self.durations is not None and self._begin is not None:
            self.durations.append(time.perf_counter() - self._begin)
            self._begin = None
        return False


def get_durations(outer: str, inner: str) -> list[float]:
    """The list of durations for a section, registered on first use."""
    with _lock:
        return _timings.setdefault(outer, {}).setdefault(inner, [])


def scope_timer(outer: str, inner: str) -> ScopedTimer:
    """A timer for the named section, inert while benchmarks are disabled."""
    if _enabled.is_set():
        return ScopedTimer(get_durations(outer, inner))
    return ScopedTimer(None)


def get_map() -> dict[str, dict[str, list[float]]]:
    """The live registry: outer name -> inner name -> durations."""
    return _timings


def toggle_benchmarks(enable: bool) -> None:
    """Enable or disable recording by timers created afterwards."""
    if enable:
        _enabled.set()
    else:
        _enabled.clear()