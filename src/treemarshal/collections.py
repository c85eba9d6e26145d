"""
Mapping types with special marshalling treatment.

``FrozenDict`` is an immutable, hashable mapping. All of its subclasses are written under one
canonical name and read back as a plain ``FrozenDict``.

``ConcurrentDict`` is a lock-guarded mutable mapping whose ``setdefault`` is atomic. The engine
uses it for state shared between threads (alias tables, converter caches) and it can be
marshalled like any other mapping.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from collections.abc import Mapping
from collections.abc import MutableMapping
from typing import Any, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class FrozenDict(Mapping[K, V]):
    """
    Immutable mapping.

    Examples:
        >>> fd = FrozenDict({"a": 1})
        >>> fd["a"]
        1
        >>> fd == {"a": 1}
        True
        >>> hash(fd) == hash(FrozenDict(a=1))
        True
    """

    __slots__ = ("_data", "_hash")

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        object.__setattr__(self, "_data", dict(*args, **kwargs))
        object.__setattr__(self, "_hash", None)

    def __getitem__(self, key: K) -> V:
        return self._data[key]

    def __iter__(self) -> Iterator[K]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __hash__(self) -> int:
        if self._hash is None:
            object.__setattr__(self, "_hash", hash(frozenset(self._data.items())))
        return self._hash

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return dict(self._data) == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"


class ConcurrentDict(MutableMapping[K, V]):
    """
    Mutable mapping guarded by a lock.

    Single operations are atomic, ``setdefault`` included, and iteration works on a snapshot
    so that concurrent inserts never invalidate an iterator.

    Examples:
        >>> cd = ConcurrentDict()
        >>> cd.setdefault("a", 1)
        1
        >>> cd.setdefault("a", 2)
        1
        >>> dict(cd)
        {'a': 1}
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._lock = threading.RLock()
        self._data: dict[K, V] = dict(*args, **kwargs)

    def __getitem__(self, key: K) -> V:
        with self._lock:
            return self._data[key]

    def __setitem__(self, key: K, value: V) -> None:
        with self._lock:
            self._data[key] = value

    def __delitem__(self, key: K) -> None:
        with self._lock:
            del self._data[key]

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data

    def __iter__(self) -> Iterator[K]:
        with self._lock:
            return iter(list(self._data))

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def get(self, key: K, default: Any = None) -> Any:
        with self._lock:
            return self._data.get(key, default)

    def setdefault(self, key: K, default: Any = None) -> Any:
        with self._lock:
            return self._data.setdefault(key, default)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def snapshot(self) -> dict[K, V]:
        """Return a shallow copy of the current contents."""
        with self._lock:
            return dict(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return self.snapshot() == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.snapshot()!r})"
