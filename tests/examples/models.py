"""
Model types shared by the treemarshal tests.

Type names written for these classes start with ``tests.examples.models.``; nested classes are
joined with ``$`` (written ``_-`` in current documents, ``-`` in legacy ones).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from dataclasses import field
from typing import Any

from treemarshal.converters import PassthroughConverter
from treemarshal.converters import SingleValueConverter
from treemarshal.converters import converter_for
from treemarshal.mapper import Mapper
from treemarshal.mapper import alias
from treemarshal.mapper import omit_fields
from treemarshal.mapper import use_converter

MODULE = __name__


class Color(enum.Enum):
    RED = "red"
    GREEN = "green"


class Outer:
    """Plain class with a nested class and no converter of its own."""

    class Inner:
        def __init__(self, value: int = 0) -> None:
            self.value = value

        def __eq__(self, other: object) -> bool:
            return isinstance(other, Outer.Inner) and other.value == self.value


@dataclass
class Job:
    name: str
    retries: int = 3
    tags: list = field(default_factory=list)
    config: Job.Config | None = None

    @dataclass
    class Config:
        timeout: float = 1.0
        color: Color = Color.RED


@dataclass
class Node:
    """Self-referencing structure for cycle tests."""

    label: str
    children: list = field(default_factory=list)
    parent: Node | None = None


class Slotted:
    __slots__ = ("x", "y")

    def __init__(self, x: int, y: int) -> None:
        self.x = x
        self.y = y


# region Associated converters


@dataclass(frozen=True)
class Point:
    x: int
    y: int


@converter_for(Point)
class PointConverter(SingleValueConverter):
    """Registered converter writing points as ``x,y``."""

    def can_convert(self, type_: type) -> bool:
        return type_ is Point

    def to_string(self, obj: Any) -> str:
        return f"{obj.x},{obj.y}"

    def from_string(self, text: str) -> Any:
        x, y = text.split(",")
        return Point(int(x), int(y))


class Temperature:
    """Carries its own single-value converter as a nested class."""

    def __init__(self, celsius: float) -> None:
        self.celsius = celsius

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Temperature) and other.celsius == self.celsius

    class ConverterImpl(SingleValueConverter):
        def can_convert(self, type_: type) -> bool:
            return type_ is Temperature

        def to_string(self, obj: Any) -> str:
            return f"{obj.celsius}C"

        def from_string(self, text: str) -> Any:
            return Temperature(float(text.rstrip("C")))


class Both:
    """Has both a registered and a nested converter; the registered one wins."""

    class ConverterImpl(SingleValueConverter):
        def can_convert(self, type_: type) -> bool:
            return type_ is Both

        def to_string(self, obj: Any) -> str:
            return "nested"

        def from_string(self, text: str) -> Any:
            return Both()


@converter_for(Both)
class BothConverter(SingleValueConverter):
    def can_convert(self, type_: type) -> bool:
        return type_ is Both

    def to_string(self, obj: Any) -> str:
        return "registered"

    def from_string(self, text: str) -> Any:
        return Both()


class WithMapper:
    """Nested converter asking for the mapper by annotation."""

    class ConverterImpl(SingleValueConverter):
        def __init__(self, mapper: Mapper) -> None:
            self.mapper = mapper

        def can_convert(self, type_: type) -> bool:
            return type_ is WithMapper

        def to_string(self, obj: Any) -> str:
            return self.mapper.serialized_class(WithMapper)

        def from_string(self, text: str) -> Any:
            return WithMapper()


class WithEngine:
    """Nested converter asking for the engine and the mapper by parameter name."""

    class ConverterImpl(SingleValueConverter):
        def __init__(self, engine, mapper) -> None:
            self.engine = engine
            self.mapper = mapper

        def can_convert(self, type_: type) -> bool:
            return type_ is WithEngine

        def to_string(self, obj: Any) -> str:
            return "engine"

        def from_string(self, text: str) -> Any:
            return WithEngine()


class Malformed:
    """Nested converter with a constructor parameter the engine cannot supply."""

    class ConverterImpl(SingleValueConverter):
        def __init__(self, name: str) -> None:
            self.name = name

        def can_convert(self, type_: type) -> bool:
            return type_ is Malformed

        def to_string(self, obj: Any) -> str:
            return ""

        def from_string(self, text: str) -> Any:
            return Malformed()


class Exploding:
    """Nested converter whose constructor raises."""

    class ConverterImpl(SingleValueConverter):
        def __init__(self) -> None:
            raise RuntimeError("boom")

        def can_convert(self, type_: type) -> bool:  # pragma: no cover
            return False

        def to_string(self, obj: Any) -> str:  # pragma: no cover
            return ""

        def from_string(self, text: str) -> Any:  # pragma: no cover
            return None


class NotAConverter:
    """Nested ``ConverterImpl`` that builds something other than a converter."""

    class ConverterImpl:
        pass


class Plain:
    """Plain class without any converter; handled structurally."""

    def __init__(self, value: int = 0) -> None:
        self.value = value


class Subclassed(Temperature):
    """Inherits ``ConverterImpl`` from its base, which must not be picked up."""


@dataclass
class Legacy:
    """Upgraded after loading by a passthrough converter."""

    name: str
    upgraded: bool = False

    class ConverterImpl(PassthroughConverter["Legacy"]):
        def callback(self, obj: Legacy, context) -> None:
            obj.upgraded = True


# region Markers


class Shouting(SingleValueConverter):
    def can_convert(self, type_: type) -> bool:
        return type_ is Greeting

    def to_string(self, obj: Any) -> str:
        return obj.text.upper()

    def from_string(self, text: str) -> Any:
        return Greeting(text.lower())


@alias("greeting")
@use_converter(Shouting)
class Greeting:
    def __init__(self, text: str) -> None:
        self.text = text


@alias("build-job")
@omit_fields("cache")
class BuildJob:
    def __init__(self, target: str) -> None:
        self.target = target
        self.cache = {"warm": True}


class NightlyBuild(BuildJob):
    """Inherits the omitted fields of its base, not its alias."""


class SpecialGreeting(Greeting):
    """Inherits neither the alias nor the converter of its base."""
