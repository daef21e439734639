# 📦 engine/matcher.py
# ─────────────────────────────
# Matching engine: greedy first-fit and capacitated deferred acceptance

import random
from collections import deque

import structlog

from engine.models import Assignment, MatchOutcome
from engine.preferences import PreferenceIndex, capacity_of

log = structlog.get_logger()


class MatchingEngine:
    """
    Stateless matcher between applicants and capacity-bounded slots.

    Applicants are any objects with `id` and `preferences` (slot ids, best
    first). Slots expose `id`, `capacity` and an optional `preferences`
    ranking of applicant ids. All working state lives inside a single call,
    so one engine can serve concurrent callers.
    """

    def solve_greedy(self, applicants, slots, rng: random.Random | None = None) -> MatchOutcome:
        """Shuffle applicants and give each the first listed slot with a free seat. Not stable."""
        remaining = {slot.id: capacity_of(slot) for slot in slots}

        order = list(applicants)
        (rng or random).shuffle(order)

        matches = []
        for applicant in order:
            for slot_id in applicant.preferences or []:
                if remaining.get(slot_id, 0) > 0:
                    matches.append(Assignment(applicant.id, slot_id))
                    remaining[slot_id] -= 1
                    break

        log.info("Greedy matching completed", matches=len(matches), applicants=len(order))
        return MatchOutcome(assignments=matches, is_stable=False)

    def solve_stable(self, applicants, slots) -> MatchOutcome:
        """Applicant-proposing deferred acceptance with slot capacities. Always stable."""
        applicants = list(applicants)
        slots = list(slots)

        if not applicants or not slots:
            return MatchOutcome.empty(is_stable=True)

        try:
            outcome = self._deferred_acceptance(PreferenceIndex(applicants, slots), slots)
        except Exception as e:
            log.error("Error in Gale-Shapley algorithm", error=str(e))
            return MatchOutcome.empty(is_stable=False)

        log.info(
            "Gale-Shapley matching completed",
            matches=len(outcome.assignments),
            proposals=outcome.proposals,
        )
        return outcome

    def _deferred_acceptance(self, index: PreferenceIndex, slots) -> MatchOutcome:
        holders = {slot_id: [] for slot_id in index.slots}
        cursors = {applicant_id: 0 for applicant_id in index.applicants}
        free = deque(index.applicants)
        proposals = 0

        while free:
            applicant_id = free.popleft()
            choices = index.choices[applicant_id]
            cursor = cursors[applicant_id]

            if cursor >= len(choices):
                continue  # list exhausted, stays unassigned

            slot_id = choices[cursor]
            cursors[applicant_id] = cursor + 1
            proposals += 1

            if slot_id not in index.slots:
                free.append(applicant_id)
                continue

            held = holders[slot_id]
            if len(held) < index.capacities[slot_id]:
                held.append(applicant_id)
                continue

            worst = index.worst_holder(slot_id, held)
            if worst is None:
                free.append(applicant_id)
                continue

            if index.prefers(slot_id, applicant_id, worst):
                held.remove(worst)
                held.append(applicant_id)
                free.append(worst)
            else:
                free.append(applicant_id)

        matches = [
            Assignment(applicant_id, slot.id)
            for slot in slots
            for applicant_id in holders[slot.id]
        ]
        return MatchOutcome(assignments=matches, is_stable=True, proposals=proposals)
