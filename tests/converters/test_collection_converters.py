"""Tests for collection and mapping converters."""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections import deque

import pytest

from tests.examples.models import Outer
from treemarshal.collections import ConcurrentDict
from treemarshal.collections import FrozenDict
from treemarshal.exceptions import TypeResolutionError


class TestCollections:
    """Sequences and sets."""

    @pytest.mark.parametrize(
        "value",
        [
            [1, "two", 3.0],
            (1, 2),
            {1, 2, 3},
            frozenset({"a"}),
            deque([1, 2]),
            [],
            [[1], [2, [3]]],
        ],
    )
    def test_round_trip(self, base_engine, value) -> None:
        """Collections come back equal and with the same type."""
        result = base_engine.from_xml(base_engine.to_xml(value))
        assert result == value
        assert type(result) is type(value)

    def test_shared_element(self, base_engine) -> None:
        """An element appearing twice is read back as one object."""
        inner = Outer.Inner(1)
        result = base_engine.from_xml(base_engine.to_xml([inner, inner]))
        assert result[0] is result[1]

    def test_self_containing_list(self, base_engine) -> None:
        """A list containing itself survives the round trip."""
        value: list = [1]
        value.append(value)
        result = base_engine.from_xml(base_engine.to_xml(value))
        assert result[0] == 1
        assert result[1] is result

    def test_strict_collection_fails_on_bad_element(self, base_engine) -> None:
        """Without robust converters an unresolvable element fails the whole read."""
        with pytest.raises(TypeResolutionError):
            base_engine.from_xml("<list><int>1</int><no.such.Type/></list>")

    def test_robust_collection_skips_bad_element(self, engine, caplog) -> None:
        """Robust converters drop unresolvable elements and record them."""
        with caplog.at_level(logging.WARNING):
            result = engine.from_xml("<list><int>1</int><no.such.Type/><int>2</int></list>")
        assert result == [1, 2]
        assert "Skipping unreadable element" in caplog.text


class TestMaps:
    """Mappings."""

    @pytest.mark.parametrize(
        "value",
        [
            {"a": 1, "b": [2]},
            OrderedDict([("z", 1), ("a", 2)]),
            {},
            {(1, 2): "tuple key"},
        ],
    )
    def test_round_trip(self, base_engine, value) -> None:
        """Mappings come back equal and with the same type."""
        result = base_engine.from_xml(base_engine.to_xml(value))
        assert result == value
        assert type(result) is type(value)

    def test_ordered_dict_order(self, base_engine) -> None:
        """Entry order is preserved."""
        value = OrderedDict([("z", 1), ("a", 2)])
        assert list(base_engine.from_xml(base_engine.to_xml(value))) == ["z", "a"]

    def test_entry_layout(self, base_engine) -> None:
        """Each entry holds a key node and a value node."""
        text = base_engine.to_xml({"a": 1})
        assert "<entry>" in text
        assert "<str>a</str>" in text
        assert "<int>1</int>" in text

    def test_robust_map_skips_bad_entry(self, engine) -> None:
        """Entries that cannot be read are dropped."""
        result = engine.from_xml(
            "<dict>"
            "<entry><str>a</str><int>1</int></entry>"
            "<entry><str>b</str><no.such.Type/></entry>"
            "</dict>"
        )
        assert result == {"a": 1}

    def test_frozen_dict(self, engine) -> None:
        """FrozenDicts are written under one name and rebuilt immutable."""
        text = engine.to_xml(FrozenDict({"a": 1}))
        assert text.startswith("<frozen-dict")
        result = engine.from_xml(text)
        assert isinstance(result, FrozenDict)
        assert result == {"a": 1}

    def test_frozen_dict_subclass_canonical_name(self, engine) -> None:
        """FrozenDict subclasses are written as the base and read back as it."""

        class Settings(FrozenDict):
            pass

        text = engine.to_xml(Settings(a=1))
        assert text.startswith("<frozen-dict")
        assert type(engine.from_xml(text)) is FrozenDict

    def test_concurrent_dict(self, engine) -> None:
        """ConcurrentDicts round trip without their lock."""
        text = engine.to_xml(ConcurrentDict(a=1))
        assert "lock" not in text
        result = engine.from_xml(text)
        assert isinstance(result, ConcurrentDict)
        assert result == {"a": 1}
