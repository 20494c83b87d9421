"""Lazily built process-wide singletons."""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class LazySingleton(Generic[T]):
    """Build an instance from factory on first use and keep it until reset."""

    def __init__(self, factory: Callable[[], T]):
        self._factory = factory
        self._instance: T | None = None

    @property
    def is_built(self) -> bool:
        return self._instance is not None

    def get(self) -> T:
        if self._instance is None:
            self._instance = self._factory()
        return self._instance

    def reset(self) -> None:
        self._instance = None
