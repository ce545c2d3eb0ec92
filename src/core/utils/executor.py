"""Builder fluido de `ThreadPoolExecutor`.

Uso típico (p. ej. para repartir lecturas de proyectos entre hilos):

    executor = ExecutorBuilder.create().set_max_pool_size(8).set_thread_name_prefix("gitlab").build()
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable

import structlog

log = structlog.get_logger(__name__)


class ExecutorBuilder:
    def __init__(self) -> None:
        self._max_pool_size: int | None = None
        self._thread_name_prefix = ""
        self._initializer: Callable[..., object] | None = None
        self._initargs: tuple[Any, ...] = ()

    @classmethod
    def create(cls) -> "ExecutorBuilder":
        return cls()

    def set_max_pool_size(self, max_pool_size: int) -> "ExecutorBuilder":
        if max_pool_size < 1:
            raise ValueError("max_pool_size must be >= 1")
        self._max_pool_size = max_pool_size
        return self

    def set_thread_name_prefix(self, prefix: str) -> "ExecutorBuilder":
        self._thread_name_prefix = prefix
        return self

    def set_initializer(self, initializer: Callable[..., object], *initargs: Any) -> "ExecutorBuilder":
        self._initializer = initializer
        self._initargs = initargs
        return self

    def build(self) -> ThreadPoolExecutor:
        """New executor; without a max pool size, the stdlib default applies."""

        log.debug(
            "executor_built",
            max_workers=self._max_pool_size,
            thread_name_prefix=self._thread_name_prefix or None,
        )
        return ThreadPoolExecutor(
            max_workers=self._max_pool_size,
            thread_name_prefix=self._thread_name_prefix,
            initializer=self._initializer,
            initargs=self._initargs,
        )
