"""Exceptions raised by the scheduling core."""


class SchedulingError(Exception):
    """Base class for scheduling core errors."""


class InconsistentCatalogError(SchedulingError):
    """The catalog cannot be searched: bad membership lengths, caps or slot count."""

    def __init__(self, problems):
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))


class UnassignedSlotRenderError(SchedulingError, LookupError):
    """A name was requested for the unassigned sentinel index."""
