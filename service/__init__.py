"""
Timeslot scheduling core: catalog, candidate domains, constraints and search.
"""
from .assignment import UNASSIGNED, Assignment, decode, encode, empty_schedule
from .backtracking_solver import (
    BacktrackingScheduler,
    CancellationToken,
    SearchMode,
    SearchResult,
    SearchStatus
)
from .catalog import Catalog, GroupSpec, TeacherSpec
from .errors import InconsistentCatalogError, SchedulingError, UnassignedSlotRenderError

__all__ = [
    "UNASSIGNED",
    "Assignment",
    "decode",
    "encode",
    "empty_schedule",
    "BacktrackingScheduler",
    "CancellationToken",
    "SearchMode",
    "SearchResult",
    "SearchStatus",
    "Catalog",
    "GroupSpec",
    "TeacherSpec",
    "InconsistentCatalogError",
    "SchedulingError",
    "UnassignedSlotRenderError"
]
