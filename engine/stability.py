# 📦 engine/stability.py
# ─────────────────────────────
# Post-hoc checks over a finished matching

from collections import Counter, defaultdict
from typing import Dict, List, Tuple

from engine.models import Assignment
from engine.preferences import PreferenceIndex


def capacity_violations(slots, assignments: List[Assignment]) -> List[int]:
    """Slot ids holding more applicants than their capacity (unknown slots have none)."""
    index = PreferenceIndex([], slots)
    counts = Counter(a.slot_id for a in assignments)
    return [slot_id for slot_id, n in counts.items() if n > index.capacities.get(slot_id, 0)]


def duplicate_applicants(assignments: List[Assignment]) -> List[int]:
    counts = Counter(a.applicant_id for a in assignments)
    return [applicant_id for applicant_id, n in counts.items() if n > 1]


def find_blocking_pairs(applicants, slots, assignments: List[Assignment]) -> List[Tuple[int, int]]:
    """
    Return every (applicant_id, slot_id) pair that blocks the matching.

    An applicant blocks with a slot it lists above its current slot (any
    listed slot when unassigned) if that slot has a free seat or would take
    the applicant over its worst holder. A full slot without a ranking is
    indifferent between applicants and never blocks.
    """
    index = PreferenceIndex(applicants, slots)

    placed: Dict[int, int] = {}
    holders: Dict[int, List[int]] = defaultdict(list)
    for a in assignments:
        placed[a.applicant_id] = a.slot_id
        holders[a.slot_id].append(a.applicant_id)

    blocking = []
    for applicant_id, choices in index.choices.items():
        current = placed.get(applicant_id)
        for slot_id in choices:
            if slot_id == current:
                break
            if slot_id not in index.slots:
                continue
            held = holders[slot_id]
            if len(held) < index.capacities[slot_id]:
                blocking.append((applicant_id, slot_id))
                continue
            if not index.is_ranked(slot_id):
                continue
            worst = index.worst_holder(slot_id, held)
            if worst is not None and index.prefers(slot_id, applicant_id, worst):
                blocking.append((applicant_id, slot_id))
    return blocking
