"""Turning a result schedule into response slots and printable text."""

from typing import List

from models.schemas import ScheduleSlot
from service.assignment import Schedule
from service.catalog import Catalog


def to_schedule_slots(catalog: Catalog, schedule: Schedule) -> List[ScheduleSlot]:
    slots = []
    for timeslot, assignment in enumerate(schedule):
        # Unassigned slots carry no indices; names are only resolved for real assignments.
        if not assignment.is_assigned:
            slots.append(ScheduleSlot(timeslot=timeslot, assigned=False))
            continue
        slots.append(ScheduleSlot(
            timeslot=timeslot,
            assigned=True,
            subject_index=assignment.subject_idx,
            teacher_index=assignment.teacher_idx,
            group_index=assignment.group_idx,
            subject_name=catalog.subject_name(assignment.subject_idx),
            teacher_name=catalog.teacher_name(assignment.teacher_idx),
            group_name=catalog.group_name(assignment.group_idx),
        ))
    return slots


def render_schedule_text(catalog: Catalog, schedule: Schedule) -> str:
    """
    Render a schedule as a plain-text listing, one line per timeslot:

        Schedule:
        Timeslot: 1: Subject: Physics, Teacher: Tom, Group: B
        Timeslot: 2: unassigned
    """
    lines = ["Schedule:"]
    for timeslot, assignment in enumerate(schedule, start=1):
        if not assignment.is_assigned:
            lines.append(f"Timeslot: {timeslot}: unassigned")
            continue
        lines.append(
            f"Timeslot: {timeslot}: "
            f"Subject: {catalog.subject_name(assignment.subject_idx)}, "
            f"Teacher: {catalog.teacher_name(assignment.teacher_idx)}, "
            f"Group: {catalog.group_name(assignment.group_idx)}"
        )
    return "\n".join(lines) + "\n"
