"""
Backtracking timeslot scheduler.

Fills timeslots 0..N-1 depth first. Each slot tries the same candidate domain
(every subject/teacher/group triple), ordered so subjects with fewer qualified
teachers are tried first. A candidate is kept only if it passes the pairwise
check and the aggregate hour-cap check, then the next slot is searched.

By default the search is exhaustive: every complete valid schedule reached
overwrites the result and the enumeration carries on, so the result is the
last complete schedule visited in candidate order. Stopping early (first
solution, time or node budget, cancellation) is opt-in, and so is clearing
a slot when the search backs out of it.
"""

from typing import List, Optional
import logging
import time

from models.schemas import (
    SchedulingRequest, SchedulingResponse, Messages, ErrorMessage
)
from service.assignment import UNASSIGNED, Assignment, Schedule, decode, empty_schedule
from service.catalog import Catalog
from service.constraints import HourCounter, constraints_satisfied, is_valid_assignment
from service.domain import generate_domain, order_values, qualified_teacher_counts
from service.errors import InconsistentCatalogError
from service.presentation import to_schedule_slots

logger = logging.getLogger(__name__)


class SearchMode:
    EXHAUSTIVE = "exhaustive"
    FIRST = "first"


class SearchStatus:
    FEASIBLE = "FEASIBLE"
    INFEASIBLE = "INFEASIBLE"
    TIMEOUT = "TIMEOUT"
    CANCELLED = "CANCELLED"
    ERROR = "ERROR"


class CancellationToken:
    """Caller-owned flag; the search stops at the next node once cancelled."""

    def __init__(self):
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class SearchResult:
    def __init__(self, status: str, schedule: Schedule, nodes_visited: int,
                 solutions_found: int, solve_time_seconds: float):
        self.status = status
        self.schedule = schedule
        self.nodes_visited = nodes_visited
        self.solutions_found = solutions_found
        self.solve_time_seconds = solve_time_seconds

    @property
    def found(self) -> bool:
        return self.solutions_found > 0

    def __repr__(self):
        return (
            f"SearchResult(status={self.status!r}, slots={len(self.schedule)}, "
            f"nodes={self.nodes_visited}, solutions={self.solutions_found})"
        )


class _Search:
    """
    Working state of one search; never shared between solves.

    A slot keeps the last candidate written into it when its depth runs out
    of candidates, and later aggregate checks still count that value. With
    ``clear_on_backtrack`` the slot is reset to unassigned instead, so only
    slots above the current depth are counted.
    """

    def __init__(self, catalog: Catalog, mode: str, incremental: bool, clear_on_backtrack: bool,
                 deadline: Optional[float], max_nodes: Optional[int],
                 token: Optional[CancellationToken]):
        self.catalog = catalog
        self.mode = mode
        self.clear_on_backtrack = clear_on_backtrack
        self.deadline = deadline
        self.max_nodes = max_nodes
        self.token = token

        num_timeslots = catalog.num_timeslots
        self.schedule = empty_schedule(num_timeslots)
        self.best_schedule = empty_schedule(num_timeslots)
        self.domains = [generate_domain(catalog, t) for t in range(num_timeslots)]
        self.teacher_counts = qualified_teacher_counts(catalog)
        self.counter = HourCounter(catalog) if incremental else None

        self.nodes_visited = 0
        self.solutions_found = 0
        self.interrupted: Optional[str] = None

    def run(self):
        self._backtrack(0)

    def _backtrack(self, timeslot: int) -> bool:
        """Search from ``timeslot`` on. Returns True when the whole search must stop."""
        if timeslot == self.catalog.num_timeslots:
            self.best_schedule = list(self.schedule)
            self.solutions_found += 1
            logger.debug(f"Complete schedule #{self.solutions_found} after {self.nodes_visited} nodes")
            return self.mode == SearchMode.FIRST

        for code in self.ordered_candidates(timeslot):
            if self._should_stop():
                return True
            self.nodes_visited += 1

            assignment = decode(code, self.catalog.num_subjects, self.catalog.num_teachers)
            self._write(timeslot, assignment)
            if not self._accepted(assignment):
                continue

            if self._backtrack(timeslot + 1):
                return True

        if self.clear_on_backtrack:
            self._write(timeslot, UNASSIGNED)
        return False

    def ordered_candidates(self, timeslot: int) -> List[int]:
        return order_values(self.catalog, self.domains[timeslot], self.teacher_counts)

    def _write(self, timeslot: int, assignment: Assignment):
        if self.counter is not None:
            self.counter.replace(self.schedule[timeslot], assignment)
        self.schedule[timeslot] = assignment

    def _accepted(self, assignment: Assignment) -> bool:
        if not is_valid_assignment(self.catalog, assignment):
            return False
        if self.counter is not None:
            return self.counter.within_caps()
        return constraints_satisfied(self.catalog, self.schedule)

    def _should_stop(self) -> bool:
        if self.token is not None and self.token.cancelled:
            self.interrupted = SearchStatus.CANCELLED
        elif self.max_nodes is not None and self.nodes_visited >= self.max_nodes:
            self.interrupted = SearchStatus.TIMEOUT
        elif self.deadline is not None and time.monotonic() >= self.deadline:
            self.interrupted = SearchStatus.TIMEOUT
        return self.interrupted is not None


class BacktrackingScheduler:
    """
    Depth-first timeslot scheduler.

    Supports the default exhaustive enumeration and an opt-in first-solution mode.
    """

    def __init__(self, mode: str = SearchMode.EXHAUSTIVE,
                 time_limit_seconds: Optional[float] = None,
                 max_nodes: Optional[int] = None,
                 incremental: bool = False,
                 clear_on_backtrack: bool = False,
                 cancellation_token: Optional[CancellationToken] = None):
        """
        Initialize the scheduler.

        Args:
            mode: "exhaustive" keeps the last complete schedule found, "first" stops at the first one
            time_limit_seconds: Optional wall-clock budget for one search
            max_nodes: Optional cap on candidate trials for one search
            incremental: Use running hour counters instead of rescanning the schedule
            clear_on_backtrack: Reset a slot to unassigned when its depth runs out of candidates
                instead of leaving the last-tried candidate in place
            cancellation_token: Optional token the caller can cancel from elsewhere
        """
        if mode not in (SearchMode.EXHAUSTIVE, SearchMode.FIRST):
            raise ValueError(f"Unknown search mode: {mode}")
        self.mode = mode
        self.time_limit_seconds = time_limit_seconds
        self.max_nodes = max_nodes
        self.incremental = incremental
        self.clear_on_backtrack = clear_on_backtrack
        self.cancellation_token = cancellation_token

    def solve(self, catalog: Catalog) -> SearchResult:
        """
        Run the search over a catalog.

        Returns:
            SearchResult whose schedule is all unassigned when no complete
            valid schedule exists (status INFEASIBLE)
        """
        logger.info(
            f"Starting {self.mode} search: {catalog.num_subjects} subjects, "
            f"{catalog.num_teachers} teachers, {catalog.num_groups} groups, "
            f"{catalog.num_timeslots} timeslots"
        )
        start = time.monotonic()
        deadline = start + self.time_limit_seconds if self.time_limit_seconds is not None else None

        search = _Search(catalog, self.mode, self.incremental, self.clear_on_backtrack,
                         deadline, self.max_nodes, self.cancellation_token)
        if catalog.num_timeslots == 0:
            status = SearchStatus.FEASIBLE
        else:
            search.run()
            if search.interrupted is not None:
                status = search.interrupted
            elif search.solutions_found:
                status = SearchStatus.FEASIBLE
            else:
                status = SearchStatus.INFEASIBLE

        solve_time = time.monotonic() - start
        logger.info(
            f"Search finished with {status}: {search.nodes_visited} nodes, "
            f"{search.solutions_found} complete schedules, {solve_time:.3f}s"
        )
        return SearchResult(
            status=status,
            schedule=search.best_schedule,
            nodes_visited=search.nodes_visited,
            solutions_found=search.solutions_found,
            solve_time_seconds=solve_time,
        )

    def solve_scheduling(self, request: SchedulingRequest) -> SchedulingResponse:
        """
        Main entry point to solve a scheduling request.

        Args:
            request: The catalog and timeslot count

        Returns:
            SchedulingResponse with the result schedule or error messages
        """
        try:
            catalog = Catalog.from_request(request)
        except InconsistentCatalogError as e:
            return self._create_invalid_catalog_response(e.problems)

        try:
            result = self.solve(catalog)
        except Exception as e:
            logger.error(f"Scheduling error: {str(e)}", exc_info=True)
            return self._create_error_response(str(e))

        return self._extract_solution(catalog, result)

    def _extract_solution(self, catalog: Catalog, result: SearchResult) -> SchedulingResponse:
        """Format a search result as an API response."""
        errors = []
        if result.status == SearchStatus.INFEASIBLE:
            errors.append(ErrorMessage(
                code="NO_SOLUTION",
                severity="ERROR",
                title="No Schedule Found",
                description=f"No assignment of all {catalog.num_timeslots} timeslots satisfies "
                            f"the qualification, requirement and hour-cap constraints.",
                resolution_hint="Raise teacher or group hour caps, add qualified teachers, or reduce the timeslot count."
            ))
        elif result.status in (SearchStatus.TIMEOUT, SearchStatus.CANCELLED):
            outcome = "the last complete schedule found is returned" if result.found else "no complete schedule was found"
            errors.append(ErrorMessage(
                code="SEARCH_INTERRUPTED",
                severity="WARNING",
                title="Search Interrupted",
                description=f"The search stopped after {result.nodes_visited} nodes ({result.status.lower()}); {outcome}.",
                resolution_hint="Increase the time or node budget, or use the first-solution endpoint."
            ))

        return SchedulingResponse(
            timetable=to_schedule_slots(catalog, result.schedule),
            messages=Messages(error_message=errors),
            status=result.status,
            solve_time_seconds=result.solve_time_seconds,
            nodes_visited=result.nodes_visited,
            solutions_found=result.solutions_found
        )

    def _create_invalid_catalog_response(self, problems: List[str]) -> SchedulingResponse:
        """Create response for a catalog that cannot be searched."""
        error_messages = [
            ErrorMessage(
                code="INCONSISTENT_CATALOG",
                severity="ERROR",
                title="Inconsistent Catalog",
                description=problem,
                resolution_hint="Give every teacher and group exactly one flag per subject and non-negative hour caps."
            )
            for problem in problems
        ]
        return SchedulingResponse(
            timetable=[],
            messages=Messages(error_message=error_messages),
            status=SearchStatus.ERROR,
            solve_time_seconds=0.0
        )

    def _create_error_response(self, error: str) -> SchedulingResponse:
        """Create response for solver error."""
        return SchedulingResponse(
            timetable=[],
            messages=Messages(error_message=[
                ErrorMessage(
                    code="SOLVER_ERROR",
                    severity="ERROR",
                    title="Solver Error",
                    description=error,
                    resolution_hint="Please check your input data and try again. If the problem persists, contact support."
                )
            ]),
            status=SearchStatus.ERROR,
            solve_time_seconds=0.0
        )
