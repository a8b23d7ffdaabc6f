import logging

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from config import settings
from models.schemas import SchedulingRequest, SchedulingResponse
from service.backtracking_solver import BacktrackingScheduler, SearchMode, SearchStatus
from service.catalog import Catalog
from service.errors import InconsistentCatalogError
from service.example_data import get_example_request
from service.presentation import render_schedule_text

logger = logging.getLogger(__name__)

# Create a router instance
router = APIRouter()


def _make_scheduler(mode: str) -> BacktrackingScheduler:
    return BacktrackingScheduler(
        mode=mode,
        time_limit_seconds=settings.solver_time_limit_seconds,
        max_nodes=settings.solver_max_nodes,
        incremental=settings.solver_incremental_counters,
        clear_on_backtrack=settings.solver_clear_on_backtrack
    )


@router.post("/schedule", response_model=SchedulingResponse)
def solve_schedule(request: SchedulingRequest):
    """
    Fill every timeslot by exhaustive backtracking search.

    The whole space of valid schedules is enumerated and the last complete
    schedule visited is returned. A time or node budget applies only when
    configured in settings.
    """
    scheduler = _make_scheduler(SearchMode.EXHAUSTIVE)
    return scheduler.solve_scheduling(request)


@router.post("/schedule/first", response_model=SchedulingResponse)
def solve_schedule_first(request: SchedulingRequest):
    """
    Fill every timeslot, stopping at the first complete valid schedule.
    """
    scheduler = _make_scheduler(SearchMode.FIRST)
    return scheduler.solve_scheduling(request)


@router.post("/schedule/text", response_class=PlainTextResponse)
def solve_schedule_text(request: SchedulingRequest):
    """
    Exhaustive search, rendered as a plain-text timeslot listing.
    """
    try:
        catalog = Catalog.from_request(request)
    except InconsistentCatalogError as e:
        return PlainTextResponse("Inconsistent catalog: " + "; ".join(e.problems) + "\n", status_code=400)

    try:
        result = _make_scheduler(SearchMode.EXHAUSTIVE).solve(catalog)
    except Exception as e:
        logger.error(f"Scheduling error: {str(e)}", exc_info=True)
        return PlainTextResponse(f"Solver error: {str(e)}\n", status_code=500)

    text = render_schedule_text(catalog, result.schedule)
    if result.status != SearchStatus.FEASIBLE:
        if result.found:
            text += f"Search interrupted ({result.status}); showing the last complete schedule found.\n"
        else:
            text += f"No complete schedule found ({result.status}).\n"
    return PlainTextResponse(text)


@router.get("/schedule/example", response_model=SchedulingRequest)
def example_request():
    """Worked example catalog (6 subjects, 3 teachers, 5 groups, 15 timeslots)."""
    return get_example_request()
