from pydantic import BaseModel, Field
from typing import List, Optional


# ===========================
# Catalog Models
# ===========================

class Teacher(BaseModel):
    """A teacher with per-subject qualifications and an hour cap"""
    name: str
    qualifications: List[bool]  # one flag per subject, same order as `subjects`
    max_hours: int              # max timeslots across the whole schedule


class Group(BaseModel):
    """A student group with per-subject requirements and an hour cap"""
    name: str
    requirements: List[bool]    # one flag per subject, same order as `subjects`
    max_hours: int


# ===========================
# Request Schema
# ===========================

class SchedulingRequest(BaseModel):
    """Complete scheduling request: the catalog and the number of timeslots"""
    subjects: List[str]
    teachers: List[Teacher]
    groups: List[Group]
    timeslots: int = Field(ge=0)


# ===========================
# Response Schema
# ===========================

class ScheduleSlot(BaseModel):
    """One timeslot of the result schedule"""
    timeslot: int               # 0-based
    assigned: bool
    subject_index: Optional[int] = None
    teacher_index: Optional[int] = None
    group_index: Optional[int] = None
    subject_name: Optional[str] = None
    teacher_name: Optional[str] = None
    group_name: Optional[str] = None


class ErrorMessage(BaseModel):
    """Error or warning message"""
    code: str
    severity: str = "ERROR"
    title: str
    description: str
    resolution_hint: Optional[str] = None


class Messages(BaseModel):
    """Collection of error/warning messages"""
    error_message: List[ErrorMessage] = []


class SchedulingResponse(BaseModel):
    """Complete scheduling response"""
    timetable: List[ScheduleSlot]
    messages: Messages = Messages()

    status: Optional[str] = None  # "FEASIBLE", "INFEASIBLE", "TIMEOUT", "CANCELLED", "ERROR"
    solve_time_seconds: Optional[float] = None
    nodes_visited: int = 0
    solutions_found: int = 0
