"""Per-key exclusive sections.

Все операции над историей одного пула сериализуются; разные пулы не блокируют
друг друга.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator


class KeyedLocks:
    """Реестр lock по ключу (создаются лениво, не удаляются)."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[Hashable, threading.RLock] = {}

    def lock_for(self, key: Hashable) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        """Exclusive section для ключа."""
        lock = self.lock_for(key)
        with lock:
            yield
