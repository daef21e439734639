# engine/__init__.py
# ─────────────────────────────
# Init file for SlotMatch engine package
# Exposes core components

from .matcher import MatchingEngine
from .models import Assignment, MatchOutcome
from .preferences import DuplicateIdentifierError, PreferenceIndex
from .stability import capacity_violations, duplicate_applicants, find_blocking_pairs

__all__ = [
    "MatchingEngine",
    "Assignment",
    "MatchOutcome",
    "DuplicateIdentifierError",
    "PreferenceIndex",
    "capacity_violations",
    "duplicate_applicants",
    "find_blocking_pairs",
]
