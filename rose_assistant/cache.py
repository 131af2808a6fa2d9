import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple


class TTLCache:
    """Small key -> (value, stored_at) cache; entries expire on read.

    Concurrent writers for the same key simply overwrite each other.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl = float(ttl_seconds)
        self.clock = clock
        self._items: Dict[Hashable, Tuple[Any, float]] = {}

    def get(self, key: Hashable) -> Optional[Any]:
        entry = self._items.get(key)
        if entry is None:
            return None
        value, stored_at = entry
        if self.clock() - stored_at >= self.ttl:
            self._items.pop(key, None)
            return None
        return value

    def set(self, key: Hashable, value: Any) -> None:
        self._items[key] = (value, self.clock())

    def clear(self) -> None:
        self._items.clear()

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._items)
