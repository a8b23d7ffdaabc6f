"""
Data models and Pydantic schemas for the scheduling API.
"""
from .schemas import (
    Teacher,
    Group,
    SchedulingRequest,
    ScheduleSlot,
    Messages,
    ErrorMessage,
    SchedulingResponse
)

__all__ = [
    "Teacher",
    "Group",
    "SchedulingRequest",
    "ScheduleSlot",
    "Messages",
    "ErrorMessage",
    "SchedulingResponse"
]
