"""Compute-once slots for lazily materialized values.

A Deferred holds either an unresolved zero-argument producer or the value it
produced. ``resolve()`` performs the transition exactly once, even when first
accessed from several threads at the same time. A producer that asks for its
own slot's value fails with RuntimeError.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Unresolved(Generic[T]):
    """Slot state before the producer has run."""

    producer: Callable[[], T]


@dataclass(frozen=True, slots=True)
class Resolved(Generic[T]):
    """Slot state holding the produced value."""

    value: T


class Deferred(Generic[T]):
    """A value that is either ready or produced on first resolve().

    Example:
        slot = Deferred(lambda: expensive())
        slot.resolve()  # runs expensive()
        slot.resolve()  # returns the memoized value
    """

    __slots__ = ("_state", "_lock", "_producing")

    def __init__(self, source: "T | Callable[[], T]", *, lazy: bool | None = None) -> None:
        """Initialize the slot.

        Args:
            source: A ready value or a zero-argument producer
            lazy: Force interpretation of ``source``; by default any callable is
                treated as a producer
        """
        is_producer = callable(source) if lazy is None else lazy
        self._state: Unresolved[T] | Resolved[T]
        if is_producer:
            self._state = Unresolved(source)  # type: ignore[arg-type]
        else:
            self._state = Resolved(source)  # type: ignore[arg-type]
        self._lock = threading.RLock()
        self._producing = False

    @classmethod
    def ready(cls, value: T) -> "Deferred[T]":
        """Create an already-resolved slot."""
        return cls(value, lazy=False)

    @property
    def is_resolved(self) -> bool:
        return isinstance(self._state, Resolved)

    def resolve(self) -> T:
        """Return the value, running the producer on first call only."""
        state = self._state
        if isinstance(state, Resolved):
            return state.value
        with self._lock:
            state = self._state
            if isinstance(state, Unresolved):
                if self._producing:
                    raise RuntimeError("Deferred value requested by its own producer")
                self._producing = True
                try:
                    state = Resolved(state.producer())
                finally:
                    self._producing = False
                self._state = state
            return state.value

    def set(self, value: T) -> None:
        """Replace the slot content with a ready value."""
        with self._lock:
            self._state = Resolved(value)
