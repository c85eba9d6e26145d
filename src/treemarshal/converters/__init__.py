"""Converters and the machinery that selects them."""

from treemarshal.converters.associated import AssociatedConverter
from treemarshal.converters.associated import ConverterCache
from treemarshal.converters.associated import converter_for
from treemarshal.converters.associated import register_associated_converter
from treemarshal.converters.base import PRIORITY_LOW
from treemarshal.converters.base import PRIORITY_NORMAL
from treemarshal.converters.base import PRIORITY_ROBUST
from treemarshal.converters.base import PRIORITY_VERY_HIGH
from treemarshal.converters.base import PRIORITY_VERY_LOW
from treemarshal.converters.base import Converter
from treemarshal.converters.base import SingleValueConverter
from treemarshal.converters.base import SingleValueConverterWrapper
from treemarshal.converters.lookup import ConverterLookup
from treemarshal.converters.passthrough import PassthroughConverter

__all__ = [
    "AssociatedConverter",
    "Converter",
    "ConverterCache",
    "ConverterLookup",
    "PassthroughConverter",
    "SingleValueConverter",
    "SingleValueConverterWrapper",
    "converter_for",
    "register_associated_converter",
    "PRIORITY_VERY_HIGH",
    "PRIORITY_ROBUST",
    "PRIORITY_NORMAL",
    "PRIORITY_LOW",
    "PRIORITY_VERY_LOW",
]
