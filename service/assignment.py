"""
Timeslot assignments and their single-integer encoding.

A candidate (subject, teacher, group) triple is packed mixed-radix style:

    code = subject + n_subjects * teacher + n_subjects * n_teachers * group

so the full domain of a slot is the integer range
``[0, n_subjects * n_teachers * n_groups)``.
"""

from typing import List, NamedTuple

UNASSIGNED_INDEX = -1


class Assignment(NamedTuple):
    subject_idx: int = UNASSIGNED_INDEX
    teacher_idx: int = UNASSIGNED_INDEX
    group_idx: int = UNASSIGNED_INDEX

    @property
    def is_assigned(self) -> bool:
        return (
            self.subject_idx != UNASSIGNED_INDEX
            and self.teacher_idx != UNASSIGNED_INDEX
            and self.group_idx != UNASSIGNED_INDEX
        )


UNASSIGNED = Assignment()

# A schedule is one Assignment per timeslot, index = timeslot number.
Schedule = List[Assignment]


def empty_schedule(num_timeslots: int) -> Schedule:
    return [UNASSIGNED] * num_timeslots


def encode(subject_idx: int, teacher_idx: int, group_idx: int,
           num_subjects: int, num_teachers: int) -> int:
    return subject_idx + num_subjects * teacher_idx + num_subjects * num_teachers * group_idx


def decode(code: int, num_subjects: int, num_teachers: int) -> Assignment:
    return Assignment(
        subject_idx=code % num_subjects,
        teacher_idx=(code // num_subjects) % num_teachers,
        group_idx=code // (num_subjects * num_teachers),
    )
