# src/taskledger/storage/memory_store.py

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from .keys import StoreKey, encode_key

logger = logging.getLogger(__name__)


class InMemoryRecordStore:
    """
    Dict-backed RecordStore.

    Values are deep-copied on the way in and out, so callers can never
    mutate stored state without going through `set`.

    Transactions snapshot the whole dict and restore it if the block raises.
    An RLock serializes transactions across threads; nested transactions
    join the outer one.
    """

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}
        self._lock = threading.RLock()
        self._depth = 0

    def get(self, key: StoreKey) -> Any | None:
        with self._lock:
            val = self._data.get(encode_key(key))
            return copy.deepcopy(val)

    def set(self, key: StoreKey, value: Any) -> None:
        with self._lock:
            self._data[encode_key(key)] = copy.deepcopy(value)

    def has(self, key: StoreKey) -> bool:
        with self._lock:
            return encode_key(key) in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            if self._depth:
                self._depth += 1
                try:
                    yield
                finally:
                    self._depth -= 1
                return

            snapshot = copy.deepcopy(self._data)
            self._depth = 1
            try:
                yield
            except BaseException:
                self._data = snapshot
                logger.debug("InMemoryRecordStore: transaction rolled back")
                raise
            finally:
                self._depth = 0
