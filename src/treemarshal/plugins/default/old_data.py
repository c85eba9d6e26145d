"""
Plugin keeping track of objects that were read from outdated or partly unreadable documents.

Usage:
    monitor = OldDataMonitor()
    engine = Engine(plugins=[monitor])
    job = engine.from_xml(text)
    if monitor.report_for(job) is not None:
        save(engine.to_xml(job))  # rewrite in the current format
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from dataclasses import field
from typing import Any

from treemarshal.exceptions import ConversionError
from treemarshal.plugins.hooks.markers import hook_impl

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OldDataReport:
    """What was found out about one unmarshalled object."""

    obj: Any
    version: str | None = None
    """Last release that wrote the format the object was read from, if it was a legacy format."""

    errors: tuple[ConversionError, ...] = field(default_factory=tuple)
    """Errors raised by the parts of the document that were skipped."""


class OldDataMonitor:
    """
    Collects ``treemarshal_old_data`` and ``treemarshal_unreadable_data`` reports.

    One report is kept per object (by identity); a later report about the same object is merged
    into the existing one. Safe to share between engines and threads.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._reports: dict[int, OldDataReport] = {}

    @hook_impl
    def treemarshal_old_data(self, obj: Any, version: str) -> None:
        logger.info(f"{type(obj).__qualname__} was read from data written by version {version}")
        with self._lock:
            report = self._reports.get(id(obj), OldDataReport(obj))
            self._reports[id(obj)] = OldDataReport(obj, version, report.errors)

    @hook_impl
    def treemarshal_unreadable_data(self, obj: Any, errors: list[ConversionError]) -> None:
        logger.warning(
            f"{type(obj).__qualname__} was read with {len(errors)} unreadable part(s) skipped"
        )
        with self._lock:
            report = self._reports.get(id(obj), OldDataReport(obj))
            self._reports[id(obj)] = OldDataReport(obj, report.version, (*report.errors, *errors))

    @property
    def reports(self) -> list[OldDataReport]:
        """Reports collected so far, oldest first."""
        with self._lock:
            return list(self._reports.values())

    def report_for(self, obj: Any) -> OldDataReport | None:
        with self._lock:
            return self._reports.get(id(obj))

    def clear(self) -> None:
        with self._lock:
            self._reports.clear()
