"""Candidate domains and the fail-first value ordering."""

from typing import List, Optional, Sequence

from service.assignment import encode
from service.catalog import Catalog


def generate_domain(catalog: Catalog, timeslot: int) -> List[int]:
    """
    Return every encoded (subject, teacher, group) triple for a timeslot.

    No filtering is done here, so the content is the same for every slot;
    ``timeslot`` is accepted so callers can ask per slot.
    """
    num_subjects, num_teachers = catalog.num_subjects, catalog.num_teachers
    return [
        encode(subject_idx, teacher_idx, group_idx, num_subjects, num_teachers)
        for subject_idx in range(num_subjects)
        for teacher_idx in range(num_teachers)
        for group_idx in range(catalog.num_groups)
    ]


def count_teachers_for_subject(catalog: Catalog, subject_idx: int) -> int:
    return sum(1 for teacher in catalog.teachers if teacher.can_teach(subject_idx))


def qualified_teacher_counts(catalog: Catalog) -> List[int]:
    return [count_teachers_for_subject(catalog, s) for s in range(catalog.num_subjects)]


def order_values(catalog: Catalog, values: Sequence[int], teacher_counts: Optional[Sequence[int]] = None) -> List[int]:
    """
    Sort candidates so subjects with fewer qualified teachers come first.

    ``sorted`` is stable, so ties keep the generation order and the search
    visits candidates in a reproducible order.
    """
    if teacher_counts is None:
        teacher_counts = qualified_teacher_counts(catalog)
    num_subjects = catalog.num_subjects
    return sorted(values, key=lambda code: teacher_counts[code % num_subjects])
