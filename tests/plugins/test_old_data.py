"""Tests for the OldDataMonitor plugin."""

from __future__ import annotations

import logging

from tests.examples.models import MODULE
from tests.examples.models import Job
from treemarshal.engine import Engine
from treemarshal.exceptions import ConversionError
from treemarshal.plugins import OldDataMonitor

LEGACY_CONFIG = f"<{MODULE}.Job-Config><timeout>3.0</timeout></{MODULE}.Job-Config>"


class TestOldDataMonitor:
    """Tests for OldDataMonitor."""

    def test_records_legacy_reads(self, caplog) -> None:
        """Objects read from legacy documents are reported with the version."""
        monitor = OldDataMonitor()
        engine = Engine(plugins=[monitor])
        with caplog.at_level(logging.INFO, logger="treemarshal.plugins.default.old_data"):
            config = engine.from_xml(LEGACY_CONFIG)
        report = monitor.report_for(config)
        assert report is not None
        assert report.version == "0.2"
        assert report.errors == ()
        assert "version 0.2" in caplog.text

    def test_ignores_current_documents(self) -> None:
        """Nothing is recorded for current documents."""
        monitor = OldDataMonitor()
        engine = Engine(plugins=[monitor])
        job = engine.from_xml(engine.to_xml(Job("x")))
        assert monitor.report_for(job) is None
        assert monitor.reports == []

    def test_merges_reports_for_one_object(self) -> None:
        """Legacy and unreadable-data reports about one object are merged."""
        monitor = OldDataMonitor()
        obj = object()
        error = ConversionError("bad field")
        monitor.treemarshal_old_data(obj=obj, version="0.2")
        monitor.treemarshal_unreadable_data(obj=obj, errors=[error])
        assert len(monitor.reports) == 1
        report = monitor.reports[0]
        assert report.obj is obj
        assert report.version == "0.2"
        assert report.errors == (error,)

    def test_unreadable_through_engine(self) -> None:
        """Skipped fields are recorded without a version."""
        monitor = OldDataMonitor()
        engine = Engine(plugins=[monitor])
        job = engine.from_xml(f"<{MODULE}.Job><name>x</name><owner>me</owner></{MODULE}.Job>")
        report = monitor.report_for(job)
        assert report.version is None
        assert len(report.errors) == 1

    def test_clear(self) -> None:
        """clear() forgets everything."""
        monitor = OldDataMonitor()
        monitor.treemarshal_old_data(obj=object(), version="0.2")
        monitor.clear()
        assert monitor.reports == []
