"""
Tests for the backtracking search, run directly against the service layer.
"""
import random

import pytest

from service.assignment import UNASSIGNED, Assignment
from service.backtracking_solver import (
    BacktrackingScheduler, CancellationToken, SearchMode, SearchStatus
)
from service.catalog import Catalog, GroupSpec, TeacherSpec
from service.example_data import get_example_request


def make_catalog(subjects, teachers, groups, timeslots):
    """Build a catalog from (name, flags, cap) tuples."""
    return Catalog(
        subjects=tuple(subjects),
        teachers=tuple(TeacherSpec(name=n, qualifications=tuple(f), max_hours=c) for n, f, c in teachers),
        groups=tuple(GroupSpec(name=n, requirements=tuple(f), max_hours=c) for n, f, c in groups),
        num_timeslots=timeslots,
    )


def random_catalog(seed):
    rng = random.Random(seed)
    num_subjects = rng.randint(1, 2)
    num_teachers = rng.randint(1, 2)
    num_groups = rng.randint(1, 2)

    def flags():
        return [rng.random() < 0.6 for _ in range(num_subjects)]

    return make_catalog(
        [f"S{i}" for i in range(num_subjects)],
        [(f"T{i}", flags(), rng.randint(0, 3)) for i in range(num_teachers)],
        [(f"G{i}", flags(), rng.randint(0, 3)) for i in range(num_groups)],
        rng.randint(1, 3),
    )


def assert_schedule_valid(catalog, schedule):
    teacher_hours = [0] * catalog.num_teachers
    group_hours = [0] * catalog.num_groups
    for slot in schedule:
        if not slot.is_assigned:
            continue
        assert catalog.teachers[slot.teacher_idx].qualifications[slot.subject_idx]
        assert catalog.groups[slot.group_idx].requirements[slot.subject_idx]
        teacher_hours[slot.teacher_idx] += 1
        group_hours[slot.group_idx] += 1
    for teacher, hours in zip(catalog.teachers, teacher_hours):
        assert hours <= teacher.max_hours
    for group, hours in zip(catalog.groups, group_hours):
        assert hours <= group.max_hours


def single_catalog(teacher_cap=1, group_cap=1):
    return make_catalog(["Math"], [("Ann", [True], teacher_cap)], [("G1", [True], group_cap)], 1)


def test_single_slot_assigns_only_triple():
    result = BacktrackingScheduler().solve(single_catalog())

    assert result.status == SearchStatus.FEASIBLE
    assert result.schedule == [Assignment(0, 0, 0)]
    assert result.solutions_found == 1
    assert result.nodes_visited == 1


def test_teacher_cap_zero_leaves_slot_unassigned():
    result = BacktrackingScheduler().solve(single_catalog(teacher_cap=0))

    assert result.status == SearchStatus.INFEASIBLE
    assert result.schedule == [UNASSIGNED]
    assert not result.found


def test_zero_timeslots_performs_no_search():
    catalog = make_catalog(["Math"], [("Ann", [True], 1)], [("G1", [True], 1)], 0)
    result = BacktrackingScheduler().solve(catalog)

    assert result.status == SearchStatus.FEASIBLE
    assert result.schedule == []
    assert result.nodes_visited == 0


def test_empty_domain_is_infeasible():
    catalog = make_catalog(["Math"], [], [("G1", [True], 1)], 2)
    result = BacktrackingScheduler().solve(catalog)

    assert result.status == SearchStatus.INFEASIBLE
    assert result.schedule == [UNASSIGNED, UNASSIGNED]


def test_exhaustive_search_keeps_last_schedule_visited():
    """Both teachers fit; candidates are tried teacher 0 then teacher 1."""
    catalog = make_catalog(
        ["Math"],
        [("Ann", [True], 5), ("Ben", [True], 5)],
        [("G1", [True], 5)],
        2,
    )
    result = BacktrackingScheduler().solve(catalog)

    assert result.status == SearchStatus.FEASIBLE
    assert result.solutions_found == 4
    assert result.schedule == [Assignment(0, 1, 0), Assignment(0, 1, 0)]


def test_first_mode_stops_at_first_schedule():
    catalog = make_catalog(
        ["Math"],
        [("Ann", [True], 5), ("Ben", [True], 5)],
        [("G1", [True], 5)],
        2,
    )
    result = BacktrackingScheduler(mode=SearchMode.FIRST).solve(catalog)

    assert result.status == SearchStatus.FEASIBLE
    assert result.solutions_found == 1
    assert result.schedule == [Assignment(0, 0, 0), Assignment(0, 0, 0)]


def test_caps_force_backtracking_to_second_teacher():
    catalog = make_catalog(
        ["Math"],
        [("Ann", [True], 1), ("Ben", [True], 1)],
        [("G1", [True], 2)],
        2,
    )
    result = BacktrackingScheduler(mode=SearchMode.FIRST).solve(catalog)

    assert result.schedule == [Assignment(0, 0, 0), Assignment(0, 1, 0)]


def test_subject_without_qualified_teacher_is_never_assigned():
    catalog = make_catalog(
        ["Art", "Math"],
        [("Ann", [False, True], 3)],
        [("G1", [True, True], 3)],
        2,
    )
    result = BacktrackingScheduler().solve(catalog)

    assert result.status == SearchStatus.FEASIBLE
    assert all(slot.subject_idx != 0 for slot in result.schedule)
    assert_schedule_valid(catalog, result.schedule)


def test_fail_first_ordering_prefers_scarce_subject():
    """Art has one qualified teacher, Math two, so Art is tried first."""
    catalog = make_catalog(
        ["Math", "Art"],
        [("Ann", [True, True], 1), ("Ben", [True, False], 1)],
        [("G1", [True, True], 1)],
        1,
    )
    result = BacktrackingScheduler(mode=SearchMode.FIRST).solve(catalog)

    assert result.schedule == [Assignment(1, 0, 0)]


WORKED_EXAMPLE_FIRST_SCHEDULE = (
    [("Discrete Math", "Mary", "C")] * 2
    + [("Physics", "Tom", "B")] * 3
    + [("Programming", "Bob", "D")] * 2
    + [("Chemistry", "Bob", "E")] * 3
    + [("Philosophy", "Mary", "A")] * 5
)


def test_worked_example_first_mode():
    catalog = Catalog.from_request(get_example_request())
    result = BacktrackingScheduler(mode=SearchMode.FIRST).solve(catalog)

    assert result.status == SearchStatus.FEASIBLE
    named = [
        (catalog.subject_name(s.subject_idx), catalog.teacher_name(s.teacher_idx), catalog.group_name(s.group_idx))
        for s in result.schedule
    ]
    assert named == WORKED_EXAMPLE_FIRST_SCHEDULE
    assert_schedule_valid(catalog, result.schedule)


def test_worked_example_is_reproducible():
    catalog = Catalog.from_request(get_example_request())
    first = BacktrackingScheduler(mode=SearchMode.FIRST).solve(catalog)
    second = BacktrackingScheduler(mode=SearchMode.FIRST).solve(catalog)

    assert first.schedule == second.schedule
    assert first.nodes_visited == second.nodes_visited


def test_worked_example_exhaustive_order_is_reproducible():
    catalog = Catalog.from_request(get_example_request())
    first = BacktrackingScheduler(max_nodes=20000).solve(catalog)
    second = BacktrackingScheduler(max_nodes=20000).solve(catalog)

    assert first.status == SearchStatus.TIMEOUT
    assert first.schedule == second.schedule
    assert first.solutions_found == second.solutions_found
    assert_schedule_valid(catalog, first.schedule)


def test_node_budget_interrupts_exhaustive_search():
    catalog = Catalog.from_request(get_example_request())
    result = BacktrackingScheduler(max_nodes=5000).solve(catalog)

    assert result.status == SearchStatus.TIMEOUT
    assert result.nodes_visited == 5000
    assert result.found
    assert all(slot.is_assigned for slot in result.schedule)
    assert_schedule_valid(catalog, result.schedule)


def test_zero_time_limit_stops_before_first_node():
    catalog = Catalog.from_request(get_example_request())
    result = BacktrackingScheduler(time_limit_seconds=0.0).solve(catalog)

    assert result.status == SearchStatus.TIMEOUT
    assert result.nodes_visited == 0
    assert result.schedule == [UNASSIGNED] * 15


def test_cancelled_token_stops_search():
    token = CancellationToken()
    token.cancel()
    catalog = Catalog.from_request(get_example_request())
    result = BacktrackingScheduler(cancellation_token=token).solve(catalog)

    assert result.status == SearchStatus.CANCELLED
    assert result.nodes_visited == 0
    assert not result.found


def test_unknown_mode_rejected():
    with pytest.raises(ValueError):
        BacktrackingScheduler(mode="best")


@pytest.mark.parametrize("seed", range(40))
def test_random_catalogs_produce_valid_schedules(seed):
    catalog = random_catalog(seed)
    result = BacktrackingScheduler().solve(catalog)

    assert result.status in (SearchStatus.FEASIBLE, SearchStatus.INFEASIBLE)
    if result.found:
        assert all(slot.is_assigned for slot in result.schedule)
    else:
        assert result.schedule == [UNASSIGNED] * catalog.num_timeslots
    assert_schedule_valid(catalog, result.schedule)


@pytest.mark.parametrize("seed", range(40))
def test_repeated_searches_are_identical(seed):
    catalog = random_catalog(seed)
    first = BacktrackingScheduler().solve(catalog)
    second = BacktrackingScheduler().solve(catalog)

    assert first.schedule == second.schedule
    assert first.solutions_found == second.solutions_found


@pytest.mark.parametrize("clear_on_backtrack", [False, True])
@pytest.mark.parametrize("seed", range(60))
def test_incremental_counters_match_full_rescan(seed, clear_on_backtrack):
    catalog = random_catalog(seed)
    rescan = BacktrackingScheduler(clear_on_backtrack=clear_on_backtrack).solve(catalog)
    incremental = BacktrackingScheduler(incremental=True, clear_on_backtrack=clear_on_backtrack).solve(catalog)

    assert incremental.status == rescan.status
    assert incremental.schedule == rescan.schedule
    assert incremental.nodes_visited == rescan.nodes_visited
    assert incremental.solutions_found == rescan.solutions_found


def leftover_slot_search(catalog):
    """
    Plain recursive search that never clears a slot: once a depth runs out of
    candidates its slot keeps the last candidate tried, and every hour-cap
    check counts all N slots. Returns (last complete schedule, schedules found).
    """
    n_s, n_t, n_g = catalog.num_subjects, catalog.num_teachers, catalog.num_groups
    counts = [sum(1 for t in catalog.teachers if t.qualifications[s]) for s in range(n_s)]
    domain = [s + n_s * t + n_s * n_t * g for s in range(n_s) for t in range(n_t) for g in range(n_g)]
    ordered = sorted(domain, key=lambda code: counts[code % n_s])

    schedule = [(-1, -1, -1)] * catalog.num_timeslots
    best = list(schedule)
    found = [0]

    def caps_hold():
        teacher_hours = [0] * n_t
        group_hours = [0] * n_g
        for _, t, g in schedule:
            if t != -1:
                teacher_hours[t] += 1
                if teacher_hours[t] > catalog.teachers[t].max_hours:
                    return False
            if g != -1:
                group_hours[g] += 1
                if group_hours[g] > catalog.groups[g].max_hours:
                    return False
        return True

    def backtrack(slot):
        if slot == catalog.num_timeslots:
            best[:] = schedule
            found[0] += 1
            return
        for code in ordered:
            s, t, g = code % n_s, (code // n_s) % n_t, code // (n_s * n_t)
            schedule[slot] = (s, t, g)
            if caps_hold() and catalog.teachers[t].qualifications[s] and catalog.groups[g].requirements[s]:
                backtrack(slot + 1)

    backtrack(0)
    return best, found[0]


@pytest.mark.parametrize("seed", range(300))
def test_default_search_keeps_leftover_slot_values(seed):
    catalog = random_catalog(seed)
    expected_schedule, expected_found = leftover_slot_search(catalog)
    result = BacktrackingScheduler().solve(catalog)

    assert result.schedule == expected_schedule
    assert result.solutions_found == expected_found


def two_teacher_catalog():
    return make_catalog(
        ["Math"],
        [("Ann", [True], 1), ("Ben", [True], 1)],
        [("G1", [True], 2)],
        2,
    )


def test_leftover_slot_blocks_later_branch():
    """After slot 1 is exhausted it still holds Ben, so Ben in slot 0 overloads him."""
    result = BacktrackingScheduler().solve(two_teacher_catalog())

    assert result.schedule == [Assignment(0, 0, 0), Assignment(0, 1, 0)]
    assert result.solutions_found == 1


def test_clear_on_backtrack_visits_every_schedule():
    result = BacktrackingScheduler(clear_on_backtrack=True).solve(two_teacher_catalog())

    assert result.schedule == [Assignment(0, 1, 0), Assignment(0, 0, 0)]
    assert result.solutions_found == 2
