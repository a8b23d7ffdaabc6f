"""
Immutable scheduling catalog.

The catalog is built once per solve from a ``SchedulingRequest`` and passed by
reference to the domain generator, the constraint engine and the search.
"""

from typing import List, Tuple
import logging

from pydantic import BaseModel, model_validator

from models.schemas import SchedulingRequest
from service.assignment import UNASSIGNED_INDEX
from service.errors import InconsistentCatalogError, UnassignedSlotRenderError

logger = logging.getLogger(__name__)


class TeacherSpec(BaseModel):
    name: str
    qualifications: Tuple[bool, ...]
    max_hours: int

    class Config:
        frozen = True

    def can_teach(self, subject_idx: int) -> bool:
        return self.qualifications[subject_idx]


class GroupSpec(BaseModel):
    name: str
    requirements: Tuple[bool, ...]
    max_hours: int

    class Config:
        frozen = True

    def requires(self, subject_idx: int) -> bool:
        return self.requirements[subject_idx]


class Catalog(BaseModel):
    """
    Subjects, teachers, groups and the number of timeslots to fill.

    Every teacher qualification sequence and every group requirement sequence
    is indexed by subject, so each must have exactly ``len(subjects)`` entries.
    """
    subjects: Tuple[str, ...]
    teachers: Tuple[TeacherSpec, ...]
    groups: Tuple[GroupSpec, ...]
    num_timeslots: int

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _check_consistency(self):
        problems = _consistency_problems(self)
        if problems:
            for problem in problems:
                logger.warning(f"Inconsistent catalog: {problem}")
            raise InconsistentCatalogError(problems)
        return self

    @classmethod
    def from_request(cls, request: SchedulingRequest) -> "Catalog":
        return cls(
            subjects=tuple(request.subjects),
            teachers=tuple(
                TeacherSpec(name=t.name, qualifications=tuple(t.qualifications), max_hours=t.max_hours)
                for t in request.teachers
            ),
            groups=tuple(
                GroupSpec(name=g.name, requirements=tuple(g.requirements), max_hours=g.max_hours)
                for g in request.groups
            ),
            num_timeslots=request.timeslots,
        )

    @property
    def num_subjects(self) -> int:
        return len(self.subjects)

    @property
    def num_teachers(self) -> int:
        return len(self.teachers)

    @property
    def num_groups(self) -> int:
        return len(self.groups)

    @property
    def domain_size(self) -> int:
        return self.num_subjects * self.num_teachers * self.num_groups

    # Name lookups used by the presentation layer

    def subject_name(self, subject_idx: int) -> str:
        return self.subjects[_checked_index(subject_idx, self.num_subjects, "subject")]

    def teacher_name(self, teacher_idx: int) -> str:
        return self.teachers[_checked_index(teacher_idx, self.num_teachers, "teacher")].name

    def group_name(self, group_idx: int) -> str:
        return self.groups[_checked_index(group_idx, self.num_groups, "group")].name


def _checked_index(idx: int, size: int, kind: str) -> int:
    if idx == UNASSIGNED_INDEX:
        raise UnassignedSlotRenderError(f"Cannot resolve a {kind} name for an unassigned slot")
    if not 0 <= idx < size:
        raise IndexError(f"{kind.capitalize()} index {idx} out of range for {size} entries")
    return idx


def _consistency_problems(catalog: Catalog) -> List[str]:
    problems = []
    num_subjects = len(catalog.subjects)

    if catalog.num_timeslots < 0:
        problems.append(f"Timeslot count must not be negative, got {catalog.num_timeslots}")

    for teacher in catalog.teachers:
        if len(teacher.qualifications) != num_subjects:
            problems.append(
                f"Teacher {teacher.name} has {len(teacher.qualifications)} qualification flags "
                f"for {num_subjects} subjects"
            )
        if teacher.max_hours < 0:
            problems.append(f"Teacher {teacher.name} has a negative hour cap ({teacher.max_hours})")

    for group in catalog.groups:
        if len(group.requirements) != num_subjects:
            problems.append(
                f"Group {group.name} has {len(group.requirements)} requirement flags "
                f"for {num_subjects} subjects"
            )
        if group.max_hours < 0:
            problems.append(f"Group {group.name} has a negative hour cap ({group.max_hours})")

    return problems
