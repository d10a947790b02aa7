"""Thread pool that keeps HTML parsing off the event loop."""

import asyncio
import functools
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional, TypeVar

T = TypeVar("T")


class ConcurrencyManager:
    """
    Runs parsing work for the readability and normalizer stages in threads.

    The pool is created on first use, so building an extractor starts no
    threads.

    Example:
        async with ConcurrencyManager(max_workers=4) as manager:
            cleaned = await manager.run_cpu_bound(normalizer.normalize, html)
    """

    def __init__(self, max_workers: int = 4) -> None:
        self.max_workers = max_workers
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(self.max_workers, thread_name_prefix="pagekeep-cpu-")
        return self._executor

    async def run_cpu_bound(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Await ``func(*args, **kwargs)`` evaluated in the pool."""
        call = functools.partial(func, *args, **kwargs)
        return await asyncio.get_running_loop().run_in_executor(self.executor, call)

    def shutdown(self, wait: bool = True) -> None:
        """Stop the pool; pending work is cancelled unless ``wait``."""
        executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait, cancel_futures=not wait)

    async def __aenter__(self) -> "ConcurrencyManager":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.shutdown(wait=exc_type is None)
