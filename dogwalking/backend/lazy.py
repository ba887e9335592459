"""Compute-once cells for responses whose content is only known after a write."""

from __future__ import annotations

import threading
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

_UNSET = object()


class ComputeOnce(Generic[T]):
    """Evaluate a factory at most once and share the result between threads.

    Callers arriving while the first evaluation runs block until it finishes.
    A factory that raises leaves the cell unset, so the next access retries.
    """

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory = factory
        self._lock = threading.Lock()
        self._value: object = _UNSET

    @property
    def is_computed(self) -> bool:
        return self._value is not _UNSET

    @property
    def value(self) -> T:
        value = self._value
        if value is not _UNSET:
            return value  # type: ignore[return-value]
        with self._lock:
            if self._value is _UNSET:
                self._value = self._factory()
            return self._value  # type: ignore[return-value]


class LazyCreationResponse(Generic[T]):
    """A 201 response whose location and body are resolved on first access."""

    def __init__(self, location: Callable[[], str], value: Callable[[], T]) -> None:
        self._location = ComputeOnce(location)
        self._value = ComputeOnce(value)

    @property
    def location(self) -> str:
        return self._location.value

    @property
    def value(self) -> T:
        return self._value.value

    @property
    def is_resolved(self) -> bool:
        return self._location.is_computed and self._value.is_computed
