"""Tests for the declarative class markers."""

from __future__ import annotations

import pytest

from tests.examples.models import BuildJob
from tests.examples.models import Greeting
from tests.examples.models import NightlyBuild
from tests.examples.models import Shouting
from tests.examples.models import SpecialGreeting
from treemarshal.exceptions import MalformedConverterDefinitionError
from treemarshal.exceptions import TypeResolutionError
from treemarshal.mapper import MarkerMapper
from treemarshal.mapper import alias
from treemarshal.mapper import use_converter
from treemarshal.mapper.markers import TypeBoundConverter


class TestDecorators:
    """The decorators only record markers on the class."""

    def test_markers_are_stored(self) -> None:
        """Each decorator sets its class attribute and returns the class."""
        assert Greeting.__treemarshal_alias__ == "greeting"
        assert Greeting.__treemarshal_converter__[0] is Shouting
        assert BuildJob.__treemarshal_omit__ == frozenset({"cache"})


class TestMarkerMapper:
    """Markers applied by an engine."""

    def test_alias_and_converter_on_write(self, engine) -> None:
        """Writing a marked class uses its alias and its converter."""
        assert engine.to_xml(Greeting("hello")) == '<greeting id="1">HELLO</greeting>'

    def test_read_after_write(self, engine) -> None:
        """Once processed, the alias also resolves on read."""
        text = engine.to_xml(Greeting("hello"))
        assert engine.from_xml(text).text == "hello"

    def test_alias_unknown_before_processing(self, engine) -> None:
        """A fresh engine cannot read an alias it has not processed yet."""
        with pytest.raises(TypeResolutionError):
            engine.from_xml("<greeting>HI</greeting>")

    def test_process_markers_eagerly(self, engine) -> None:
        """process_markers makes aliases readable before anything was written."""
        engine.process_markers(Greeting, BuildJob)
        assert engine.from_xml("<greeting>HI</greeting>").text == "hi"
        build = engine.from_xml("<build-job><target class='str'>all</target></build-job>")
        assert build.target == "all"

    def test_omitted_fields(self, engine) -> None:
        """Omitted fields are not written."""
        text = engine.to_xml(BuildJob("all"))
        assert text.startswith("<build-job")
        assert "target" in text
        assert "cache" not in text
        assert "warm" not in text

    def test_omitted_fields_inherited(self, engine) -> None:
        """Subclasses keep their bases' omitted fields."""

        text = engine.to_xml(NightlyBuild("all"))
        assert "cache" not in text
        assert "NightlyBuild" in text

    def test_alias_not_inherited(self, engine) -> None:
        """Aliases apply to the decorated class only."""

        assert "SpecialGreeting" in engine.to_xml(SpecialGreeting("x"))

    def test_converter_bound_to_class(self, engine) -> None:
        """The marker converter is registered for exactly the decorated class."""
        engine.process_markers(Greeting)
        bound = [c for c, _ in engine.lookup.converters() if isinstance(c, TypeBoundConverter)]
        assert len(bound) == 1
        assert bound[0].can_convert(Greeting)
        assert not bound[0].can_convert(BuildJob)

    def test_processed_once(self, engine) -> None:
        """Processing the same class again registers nothing new."""
        engine.process_markers(Greeting)
        count = len(engine.lookup.converters())
        engine.process_markers(Greeting)
        engine.to_xml(Greeting("x"))
        assert len(engine.lookup.converters()) == count

    def test_malformed_converter_marker(self, engine) -> None:
        """Converter markers follow the same constructor rules as associated converters."""

        class NeedsName(Shouting):
            def __init__(self, name: str) -> None:
                self.name = name

        @alias("broken")
        @use_converter(NeedsName)
        class Broken:
            pass

        with pytest.raises(MalformedConverterDefinitionError):
            engine.process_markers(Broken)

    def test_base_engine_has_no_marker_layer(self, base_engine) -> None:
        """Markers are a feature of the full engine."""
        assert base_engine.mapper.lookup_mapper(MarkerMapper) is None
