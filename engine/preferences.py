# 📦 engine/preferences.py
# ─────────────────────────────
# Per-call preference index and rank comparison helpers

import sys
from typing import Dict, List, Optional

# Rank given to an applicant missing from a slot's declared preference list
UNLISTED_RANK = sys.maxsize


class DuplicateIdentifierError(ValueError):
    """Raised when two applicants or two slots share an identifier."""


def _index_by_id(entities, kind: str) -> Dict[int, object]:
    index = {}
    for entity in entities:
        if entity.id in index:
            raise DuplicateIdentifierError(f"Duplicate {kind} id {entity.id}")
        index[entity.id] = entity
    return index


def _first_occurrences(ids) -> List[int]:
    seen = set()
    ordered = []
    for i in ids or []:
        if i not in seen:
            seen.add(i)
            ordered.append(i)
    return ordered


def capacity_of(slot) -> int:
    """Declared capacity, with absent or negative values read as zero."""
    return max(getattr(slot, "capacity", 0) or 0, 0)


def has_ranking(slot) -> bool:
    return bool(getattr(slot, "preferences", None))


def rank_map(slot) -> Dict[int, int]:
    """Map applicant id -> position in the slot's list, keeping the first occurrence."""
    ranks = {}
    for position, applicant_id in enumerate(slot.preferences or []):
        ranks.setdefault(applicant_id, position)
    return ranks


class PreferenceIndex:
    """
    Lookup tables for a single matching call.
    Built from the raw applicants and slots, then thrown away with the call.
    """

    def __init__(self, applicants, slots):
        self.applicants = _index_by_id(applicants, "applicant")
        self.slots = _index_by_id(slots, "slot")
        self.capacities = {slot_id: capacity_of(s) for slot_id, s in self.slots.items()}
        self.choices = {a_id: _first_occurrences(a.preferences) for a_id, a in self.applicants.items()}
        self.ranks = {slot_id: rank_map(s) for slot_id, s in self.slots.items() if has_ranking(s)}

    def rank(self, slot_id: int, applicant_id: int) -> int:
        return self.ranks[slot_id].get(applicant_id, UNLISTED_RANK)

    def is_ranked(self, slot_id: int) -> bool:
        return slot_id in self.ranks

    def worst_holder(self, slot_id: int, holders: List[int]) -> Optional[int]:
        """
        Holder the slot would give up first.

        Unranked slots give up the earliest-admitted holder still present,
        i.e. the head of the holder list. Ranked slots give up the holder with
        the largest rank, unlisted holders counting as worst; ties keep the
        first one met while scanning the list.
        """
        if not holders:
            return None
        if not self.is_ranked(slot_id):
            return holders[0]

        worst, worst_rank = None, -1
        for applicant_id in holders:
            r = self.rank(slot_id, applicant_id)
            if r > worst_rank:
                worst, worst_rank = applicant_id, r
        return worst

    def prefers(self, slot_id: int, candidate: int, incumbent: int) -> bool:
        """
        True when the slot would take `candidate` over `incumbent`.

        Unranked slots always take the newcomer. Ranked slots compare
        positions and keep the incumbent on equal rank, which only happens
        when neither applicant is listed.
        """
        if not self.is_ranked(slot_id):
            return True
        return self.rank(slot_id, candidate) < self.rank(slot_id, incumbent)
