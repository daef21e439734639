# 📦 /services/matcher_service.py

import asyncio
import functools

import structlog
from prometheus_client import Counter, Histogram

from config import settings
from engine import MatchingEngine, find_blocking_pairs

log = structlog.get_logger()

INVOCATION_COUNTER = Counter("slotmatch_invocations", "Matching runs per algorithm", ["algorithm"])
RESPONSE_TIME = Histogram("slotmatch_response_seconds", "Matching run duration per algorithm", ["algorithm"])
ASSIGNMENTS_RETURNED_COUNTER = Counter("slotmatch_assignments_returned", "Assignments returned per algorithm", ["algorithm"])
FAILURE_COUNTER = Counter("slotmatch_failures", "Stable runs that faulted and returned an empty result")

GREEDY = "greedy"
STABLE = "stable"

ALGORITHM_ALIASES = {
    "greedy": GREEDY,
    "random": GREEDY,
    "stable": STABLE,
    "gale-shapley": STABLE,
    "gale_shapley": STABLE,
    "deferred-acceptance": STABLE,
}


def resolve_algorithm(name: str | None) -> str:
    """Map a requested algorithm name onto greedy or stable. Unknown names fall back to greedy."""
    key = (name or "").strip().lower()
    if key not in ALGORITHM_ALIASES:
        log.warning("Unknown matching algorithm, falling back to greedy", requested=name)
        return GREEDY
    return ALGORITHM_ALIASES[key]


def instrumented(algorithm: str):
    """Count invocations, time them and count returned assignments for one engine entry point."""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            INVOCATION_COUNTER.labels(algorithm).inc()
            with RESPONSE_TIME.labels(algorithm).time():
                outcome = func(*args, **kwargs)
            ASSIGNMENTS_RETURNED_COUNTER.labels(algorithm).inc(len(outcome.assignments))
            return outcome
        return wrapper
    return decorator


engine = MatchingEngine()
solve_greedy = instrumented(GREEDY)(engine.solve_greedy)
solve_stable = instrumented(STABLE)(engine.solve_stable)


def _audit(request, outcome):
    blocking = find_blocking_pairs(request.applicants, request.slots, outcome.assignments)
    if blocking:
        log.warning("Blocking pairs found in stable outcome", count=len(blocking), sample=blocking[:5])
    return blocking


async def run_matching(request, algorithm_name: str | None):
    """Run the requested algorithm off the event loop. Returns (outcome, algorithm used)."""
    algorithm = resolve_algorithm(algorithm_name)

    if algorithm == STABLE:
        outcome = await asyncio.to_thread(solve_stable, request.applicants, request.slots)
        if not outcome.is_stable:
            FAILURE_COUNTER.inc()
        elif settings.audit_stability:
            await asyncio.to_thread(_audit, request, outcome)
    else:
        outcome = await asyncio.to_thread(solve_greedy, request.applicants, request.slots)

    return outcome, algorithm
