"""Read-only aliases for type names that changed between releases."""

from __future__ import annotations

import logging

from treemarshal.collections import ConcurrentDict

logger = logging.getLogger(__name__)


class AliasTable:
    """
    Maps legacy element names to the types that now stand in for them.

    Entries can be added at any time, from any thread, typically by plugins that renamed or moved
    a class. There is no removal; adding a name twice keeps the last type.

    Examples:
        >>> from collections import OrderedDict
        >>> table = AliasTable()
        >>> table.add("old.module.Ordered", OrderedDict)
        >>> table.get("old.module.Ordered")
        <class 'collections.OrderedDict'>
        >>> table.get("missing") is None
        True
    """

    def __init__(self) -> None:
        self._entries: ConcurrentDict[str, type] = ConcurrentDict()

    def add(self, legacy_name: str, type_: type) -> None:
        previous = self._entries.get(legacy_name)
        self._entries[legacy_name] = type_
        if previous is not None and previous is not type_:
            logger.warning(
                f"Compatibility alias '{legacy_name}' re-registered: {previous!r} -> {type_!r}"
            )

    def get(self, legacy_name: str) -> type | None:
        return self._entries.get(legacy_name)

    def __contains__(self, legacy_name: object) -> bool:
        return legacy_name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def items(self) -> list[tuple[str, type]]:
        return list(self._entries.snapshot().items())
