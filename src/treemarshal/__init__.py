"""treemarshal: object/XML marshalling that keeps reading documents written by older releases."""

__version__ = "0.3.0"

from . import settings
from .collections import ConcurrentDict
from .collections import FrozenDict
from .converters import Converter
from .converters import PassthroughConverter
from .converters import SingleValueConverter
from .converters import converter_for
from .converters import register_associated_converter
from .engine import BaseEngine
from .engine import Engine
from .exceptions import ConversionError
from .exceptions import TreeMarshalError
from .exceptions import TypeResolutionError
from .mapper import alias
from .mapper import omit_fields
from .mapper import use_converter
from .plugins.manager import _initialize_plugin_system

# Initialize hooks system on module import
_initialize_plugin_system()

__all__ = [
    "BaseEngine",
    "ConcurrentDict",
    "ConversionError",
    "Converter",
    "Engine",
    "FrozenDict",
    "PassthroughConverter",
    "SingleValueConverter",
    "TreeMarshalError",
    "TypeResolutionError",
    "alias",
    "converter_for",
    "omit_fields",
    "register_associated_converter",
    "settings",
    "use_converter",
]
