"""Worked example catalog: 6 subjects, 3 teachers, 5 groups, 15 timeslots."""

from models.schemas import Group, SchedulingRequest, Teacher

EXAMPLE_SUBJECTS = ["Discrete Math", "Physics", "Programming", "Chemistry", "Philosophy", "Calculus"]


def _flags(*subjects):
    return [name in subjects for name in EXAMPLE_SUBJECTS]


def get_example_request() -> SchedulingRequest:
    return SchedulingRequest(
        subjects=list(EXAMPLE_SUBJECTS),
        teachers=[
            Teacher(name="Tom", qualifications=_flags("Physics", "Calculus"), max_hours=3),
            Teacher(name="Bob", qualifications=_flags("Programming", "Chemistry", "Philosophy"), max_hours=5),
            Teacher(name="Mary", qualifications=_flags("Discrete Math", "Philosophy", "Calculus"), max_hours=8),
        ],
        groups=[
            Group(name="A", requirements=_flags("Philosophy"), max_hours=5),
            Group(name="B", requirements=_flags("Physics", "Calculus"), max_hours=6),
            Group(name="C", requirements=_flags("Discrete Math"), max_hours=2),
            Group(name="D", requirements=_flags("Programming"), max_hours=2),
            Group(name="E", requirements=_flags("Chemistry"), max_hours=4),
        ],
        timeslots=15,
    )
