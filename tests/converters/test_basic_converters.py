"""Tests for the built-in scalar, enum and class converters."""

from __future__ import annotations

import datetime
import uuid
from decimal import Decimal

import pytest

from tests.examples.models import Color
from tests.examples.models import Outer
from treemarshal.converters.basic import ScalarConverter
from treemarshal.exceptions import ConversionError


class TestScalars:
    """Scalars are written as their text value under a short alias."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("text", "<str>text</str>"),
            (42, "<int>42</int>"),
            (True, "<bool>true</bool>"),
            (0.1, "<float>0.1</float>"),
            (b"\x00\xff", "<bytes>AP8=</bytes>"),
            (Decimal("1.10"), "<decimal>1.10</decimal>"),
            (datetime.date(2024, 2, 29), "<date>2024-02-29</date>"),
        ],
    )
    def test_written_form(self, engine, value, expected) -> None:
        """Each scalar has a compact textual form."""
        assert engine.to_xml(value) == expected

    @pytest.mark.parametrize(
        "value",
        [
            "",
            -7,
            False,
            1e300,
            complex(1, -2),
            Decimal("3.14159"),
            uuid.UUID("12345678-1234-5678-1234-567812345678"),
            datetime.datetime(2024, 1, 2, 3, 4, 5, 6),
            datetime.time(23, 59),
            None,
        ],
    )
    def test_round_trip(self, engine, value) -> None:
        """Reading a written scalar gives back an equal value of the same type."""
        result = engine.from_xml(engine.to_xml(value))
        assert result == value
        assert type(result) is type(value)

    def test_bad_value(self, engine) -> None:
        """Unparseable text is a conversion error."""
        with pytest.raises(ConversionError, match="int"):
            engine.from_xml("<int>forty-two</int>")

    def test_bad_bool(self, engine) -> None:
        """Only 'true' and 'false' are booleans."""
        with pytest.raises(ConversionError):
            engine.from_xml("<bool>yes</bool>")

    def test_unwritable_string(self, engine) -> None:
        """Strings XML cannot hold are rejected when written instead of breaking the read."""
        with pytest.raises(ConversionError, match=r"\\x01"):
            engine.to_xml(["a\x01b"])

    def test_exact_type_only(self) -> None:
        """Scalar converters do not claim subclasses."""
        converter = ScalarConverter(int, str, int)
        assert converter.can_convert(int)
        assert not converter.can_convert(bool)


class TestEnumsAndClasses:
    """Enum members and class objects."""

    def test_enum_by_name(self, engine) -> None:
        """Enum members are written by name."""
        text = engine.to_xml(Color.GREEN)
        assert text == "<tests.examples.models.Color>GREEN</tests.examples.models.Color>"
        assert engine.from_xml(text) is Color.GREEN

    def test_unknown_enum_member(self, engine) -> None:
        """Unknown member names are a conversion error."""
        with pytest.raises(ConversionError, match="BLUE"):
            engine.from_xml("<tests.examples.models.Color>BLUE</tests.examples.models.Color>")

    def test_class_object(self, engine) -> None:
        """Classes are written by their type name."""
        text = engine.to_xml(Outer.Inner)
        assert "tests.examples.models.Outer$Inner" in text
        assert engine.from_xml(text) is Outer.Inner
