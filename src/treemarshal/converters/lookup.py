"""Prioritized converter registry."""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from dataclasses import field

from treemarshal.collections import ConcurrentDict
from treemarshal.converters.base import PRIORITY_NORMAL
from treemarshal.converters.base import Converter
from treemarshal.converters.base import SingleValueConverter
from treemarshal.converters.base import SingleValueConverterWrapper
from treemarshal.exceptions import ConverterNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Registration:
    converter: Converter
    priority: int
    sequence: int = field(compare=False)


class ConverterLookup:
    """
    Selects the converter for a type by priority.

    Converters are tried from the highest priority down. Among converters with the same
    priority, the most recently registered is tried first, so a later registration can override
    a built-in without changing priorities. The winner for each type is cached until the next
    registration.

    Examples:
        >>> from treemarshal.converters.basic import ScalarConverter
        >>> lookup = ConverterLookup()
        >>> lookup.register(ScalarConverter(int, str, int))
        >>> isinstance(lookup.lookup(int), SingleValueConverterWrapper)
        True
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counter = itertools.count()
        self._registrations: list[_Registration] = []
        self._generation = 0
        self._cache: ConcurrentDict[type, Converter] = ConcurrentDict()

    def register(
        self, converter: Converter | SingleValueConverter, priority: int = PRIORITY_NORMAL
    ) -> None:
        """
        Register a converter at the given priority.

        Single-value converters are wrapped so that they can be selected like any other converter.
        """
        if isinstance(converter, SingleValueConverter):
            converter = SingleValueConverterWrapper(converter)
        with self._lock:
            registration = _Registration(converter, priority, next(self._counter))
            self._registrations.append(registration)
            self._registrations.sort(key=lambda r: (-r.priority, -r.sequence))
            self._generation += 1
            self._cache.clear()
        logger.debug(f"Registered converter {converter!r} at priority {priority}")

    def lookup(self, type_: type) -> Converter:
        """
        Return the converter for ``type_``.

        Raises:
            ConverterNotFoundError: If no registered converter claims the type.
        """
        cached = self._cache.get(type_)
        if cached is not None:
            return cached

        with self._lock:
            registrations = list(self._registrations)
            generation = self._generation

        for registration in registrations:
            converter = registration.converter
            if converter.can_convert(type_):
                with self._lock:
                    # A registration made meanwhile may have changed the winner
                    if generation == self._generation:
                        self._cache[type_] = converter
                return converter

        raise ConverterNotFoundError(f"No converter registered for {type_!r}")

    def converters(self) -> list[tuple[Converter, int]]:
        """Registered converters with their priorities, in the order they are tried."""
        with self._lock:
            return [(r.converter, r.priority) for r in self._registrations]
