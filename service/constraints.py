"""
Constraint engine.

Two checks gate every candidate:

* pairwise validity: the teacher can teach the subject and the group needs it;
* aggregate validity: no teacher and no group is booked for more timeslots
  than its hour cap, counted over the whole working schedule.

``HourCounter`` keeps the aggregate counts incrementally and always reaches
the same decision as ``constraints_satisfied`` on the same schedule.
"""

from typing import Callable, List

from service.assignment import Assignment, Schedule
from service.catalog import Catalog

ScheduleConstraint = Callable[[Catalog, Schedule], bool]


def is_valid_assignment(catalog: Catalog, assignment: Assignment) -> bool:
    if not catalog.teachers[assignment.teacher_idx].can_teach(assignment.subject_idx):
        return False
    if not catalog.groups[assignment.group_idx].requires(assignment.subject_idx):
        return False
    return True


def no_teacher_overload(catalog: Catalog, schedule: Schedule) -> bool:
    teacher_hours = [0] * catalog.num_teachers
    for slot in schedule:
        if not slot.is_assigned:
            continue
        teacher_hours[slot.teacher_idx] += 1
        if teacher_hours[slot.teacher_idx] > catalog.teachers[slot.teacher_idx].max_hours:
            return False
    return True


def no_group_overload(catalog: Catalog, schedule: Schedule) -> bool:
    group_hours = [0] * catalog.num_groups
    for slot in schedule:
        if not slot.is_assigned:
            continue
        group_hours[slot.group_idx] += 1
        if group_hours[slot.group_idx] > catalog.groups[slot.group_idx].max_hours:
            return False
    return True


SCHEDULE_CONSTRAINTS: List[ScheduleConstraint] = [no_teacher_overload, no_group_overload]


def constraints_satisfied(catalog: Catalog, schedule: Schedule) -> bool:
    """Rescan the whole schedule against every aggregate constraint."""
    return all(constraint(catalog, schedule) for constraint in SCHEDULE_CONSTRAINTS)


class HourCounter:
    """
    Per-teacher and per-group booked hours over the whole working schedule.

    Every write into the working schedule goes through ``replace`` so the
    counts always equal a rescan, leftover slot values included.
    """

    def __init__(self, catalog: Catalog):
        self.catalog = catalog
        self.teacher_hours = [0] * catalog.num_teachers
        self.group_hours = [0] * catalog.num_groups
        self.overloaded = 0  # teachers plus groups currently above their cap

    def replace(self, old: Assignment, new: Assignment):
        if old.is_assigned:
            self._book(old, -1)
        if new.is_assigned:
            self._book(new, 1)

    def within_caps(self) -> bool:
        return self.overloaded == 0

    def _book(self, assignment: Assignment, delta: int):
        teacher_cap = self.catalog.teachers[assignment.teacher_idx].max_hours
        group_cap = self.catalog.groups[assignment.group_idx].max_hours
        self.overloaded -= _over(self.teacher_hours[assignment.teacher_idx], teacher_cap)
        self.overloaded -= _over(self.group_hours[assignment.group_idx], group_cap)
        self.teacher_hours[assignment.teacher_idx] += delta
        self.group_hours[assignment.group_idx] += delta
        self.overloaded += _over(self.teacher_hours[assignment.teacher_idx], teacher_cap)
        self.overloaded += _over(self.group_hours[assignment.group_idx], group_cap)


def _over(hours: int, cap: int) -> int:
    return 1 if hours > cap else 0
