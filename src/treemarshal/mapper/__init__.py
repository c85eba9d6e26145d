from treemarshal.mapper.base import DefaultMapper
from treemarshal.mapper.base import Mapper
from treemarshal.mapper.base import MapperWrapper
from treemarshal.mapper.canonical import CanonicalNameMapper
from treemarshal.mapper.loader import ExtensionTypeLoader
from treemarshal.mapper.loader import ImportTypeLoader
from treemarshal.mapper.loader import TypeLoader
from treemarshal.mapper.loader import type_name
from treemarshal.mapper.markers import MarkerMapper
from treemarshal.mapper.markers import alias
from treemarshal.mapper.markers import omit_fields
from treemarshal.mapper.markers import use_converter

__all__ = [
    "CanonicalNameMapper",
    "DefaultMapper",
    "ExtensionTypeLoader",
    "ImportTypeLoader",
    "Mapper",
    "MapperWrapper",
    "MarkerMapper",
    "TypeLoader",
    "alias",
    "omit_fields",
    "type_name",
    "use_converter",
]
