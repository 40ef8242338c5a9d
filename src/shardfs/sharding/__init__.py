"""Path sharding: logical <-> physical mapping and listing."""

from .lister import RecursiveLister
from .sharder import MARKER, PathSharder, to_physical
from .translator import logical_path, to_logical

__all__ = ["MARKER", "PathSharder", "RecursiveLister", "logical_path", "to_logical", "to_physical"]
