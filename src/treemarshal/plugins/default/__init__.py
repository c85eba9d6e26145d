"""Default plugins shipped with treemarshal."""

from treemarshal.plugins.default.old_data import OldDataMonitor
from treemarshal.plugins.default.old_data import OldDataReport

__all__ = [
    "OldDataMonitor",
    "OldDataReport",
]
