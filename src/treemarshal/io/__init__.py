from treemarshal.io.naming import NameCoder
from treemarshal.io.reader import TreeReader
from treemarshal.io.writer import TreeWriter

__all__ = [
    "NameCoder",
    "TreeReader",
    "TreeWriter",
]
