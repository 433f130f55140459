import asyncio
import logging
import threading
from collections import OrderedDict
from typing import Awaitable, Callable, Dict, Generic, Hashable, Set, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")


class AccountViewCache(Generic[V]):
    """
    Ограниченный LRU-кэш представлений, ключ - идентификатор аккаунта.

    Одновременные промахи по одному ключу объединяются в одну сборку
    (single-flight): первый вызов запускает build_fn в отдельной задаче,
    все вызовы ждут ее future, поэтому отмена одного из них не затрагивает других.
    Результат сохраняется, только если сборка все еще зарегистрирована
    для ключа, то есть ключ не инвалидировали, пока она шла.
    Замок защищает только словари и никогда не удерживается во время await.
    """

    def __init__(self, max_entries: int = 1024):
        if max_entries < 1:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._entries: "OrderedDict[Hashable, V]" = OrderedDict()
        self._inflight: Dict[Hashable, "asyncio.Future[V]"] = {}
        self._builds: Set["asyncio.Task[None]"] = set()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries

    async def get_or_build(self, key: Hashable, build_fn: Callable[[], Awaitable[V]]) -> V:
        """Значение из кэша или результат единственной сборки"""
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
                return self._entries[key]

            future = self._inflight.get(key)
            owner = future is None
            if owner:
                future = asyncio.get_running_loop().create_future()
                self._inflight[key] = future

        if owner:
            logger.debug(f"View cache miss for {key}")
            build = asyncio.get_running_loop().create_task(self._build(key, future, build_fn))
            self._builds.add(build)
            build.add_done_callback(self._builds.discard)
        else:
            logger.debug(f"Waiting for in-flight view build of {key}")

        # отмена одного читателя не должна прерывать общую сборку
        return await asyncio.shield(future)

    async def _build(
        self,
        key: Hashable,
        future: "asyncio.Future[V]",
        build_fn: Callable[[], Awaitable[V]]
    ) -> None:
        try:
            value = await build_fn()
        except BaseException as e:
            with self._lock:
                if self._inflight.get(key) is future:
                    del self._inflight[key]
            if isinstance(e, Exception):
                future.set_exception(e)
                # ожидающих может не остаться, помечаем ошибку как полученную
                future.exception()
            else:
                future.cancel()
                raise
            return

        with self._lock:
            if self._inflight.get(key) is future:
                del self._inflight[key]
                self._entries[key] = value
                self._entries.move_to_end(key)
                self._evict()
            else:
                logger.debug(f"Discarding view of {key} invalidated during build")

        future.set_result(value)

    def invalidate(self, key: Hashable) -> None:
        """Удаление значения и незавершенной сборки, если они есть"""
        with self._lock:
            self._entries.pop(key, None)
            self._inflight.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._inflight.clear()

    def _evict(self) -> None:
        while len(self._entries) > self.max_entries:
            key, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted view of {key}")
