# 📦 tests/test_service.py

import threading

import pytest

from config import settings
from engine import MatchOutcome
from schemas.schemas import MatchRequest
from services import matcher_service
from services.matcher_service import GREEDY, STABLE, resolve_algorithm, run_matching


def make_request():
    return MatchRequest(
        applicants=[
            {"id": 1, "preferences": [10]},
            {"id": 2, "preferences": [10]},
            {"id": 3, "preferences": [10]},
        ],
        slots=[{"id": 10, "capacity": 2, "preferences": [3, 1, 2]}],
    )


@pytest.mark.parametrize("name,expected", [
    ("stable", STABLE),
    ("Gale-Shapley", STABLE),
    ("gale_shapley", STABLE),
    ("deferred-acceptance", STABLE),
    ("greedy", GREEDY),
    ("RANDOM", GREEDY),
    ("hungarian", GREEDY),
    ("", GREEDY),
    (None, GREEDY),
])
def test_resolve_algorithm(name, expected):
    assert resolve_algorithm(name) == expected


@pytest.mark.asyncio
async def test_run_matching_stable():
    outcome, algorithm = await run_matching(make_request(), "gale-shapley")
    assert algorithm == STABLE
    assert outcome.is_stable is True
    assert {a.applicant_id for a in outcome.assignments} == {1, 3}


@pytest.mark.asyncio
async def test_run_matching_greedy_fallback():
    outcome, algorithm = await run_matching(make_request(), "unknown")
    assert algorithm == GREEDY
    assert outcome.is_stable is False
    assert len(outcome.assignments) == 2


@pytest.mark.asyncio
async def test_invocations_are_counted():
    counter = matcher_service.INVOCATION_COUNTER.labels(STABLE)
    before = counter._value.get()
    await run_matching(make_request(), "stable")
    assert counter._value.get() == before + 1


@pytest.mark.asyncio
async def test_faulted_stable_run_counts_failure(monkeypatch):
    monkeypatch.setattr(matcher_service, "solve_stable", lambda applicants, slots: MatchOutcome.empty(is_stable=False))
    before = matcher_service.FAILURE_COUNTER._value.get()

    outcome, _ = await run_matching(make_request(), "stable")

    assert outcome.assignments == []
    assert matcher_service.FAILURE_COUNTER._value.get() == before + 1


@pytest.mark.asyncio
async def test_audit_runs_when_enabled(monkeypatch):
    seen = []
    monkeypatch.setattr(settings, "audit_stability", True)
    monkeypatch.setattr(matcher_service, "_audit", lambda request, outcome: seen.append(outcome) or [])

    await run_matching(make_request(), "stable")

    assert len(seen) == 1


def test_audit_finds_nothing_in_stable_outcome():
    request = make_request()
    outcome = matcher_service.engine.solve_stable(request.applicants, request.slots)
    assert matcher_service._audit(request, outcome) == []


@pytest.mark.asyncio
async def test_audit_runs_off_the_event_loop(monkeypatch):
    loop_thread = threading.get_ident()
    audit_threads = []
    monkeypatch.setattr(settings, "audit_stability", True)
    monkeypatch.setattr(
        matcher_service, "_audit", lambda request, outcome: audit_threads.append(threading.get_ident()) or []
    )

    await run_matching(make_request(), "stable")

    assert len(audit_threads) == 1
    assert audit_threads[0] != loop_thread
