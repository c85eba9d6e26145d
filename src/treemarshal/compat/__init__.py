from treemarshal.compat.aliases import AliasTable
from treemarshal.compat.mapper import CompatibilityMapper

__all__ = [
    "AliasTable",
    "CompatibilityMapper",
]
