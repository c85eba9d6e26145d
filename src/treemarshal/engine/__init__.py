from treemarshal.engine.base import BaseEngine
from treemarshal.engine.core import Engine

__all__ = [
    "BaseEngine",
    "Engine",
]
