# 📦 engine/models.py
# ─────────────────────────────
# Result types returned by the matching engine

from dataclasses import dataclass, field
from typing import List, NamedTuple


class Assignment(NamedTuple):
    """One committed placement of an applicant in a slot."""
    applicant_id: int
    slot_id: int


@dataclass
class MatchOutcome:
    assignments: List[Assignment] = field(default_factory=list)
    is_stable: bool = False
    # Number of proposals made; always 0 for greedy runs
    proposals: int = 0

    @classmethod
    def empty(cls, is_stable: bool) -> "MatchOutcome":
        return cls(assignments=[], is_stable=is_stable)

    def as_dict(self) -> dict:
        """Serializable view without run diagnostics."""
        return {
            "assignments": [a._asdict() for a in self.assignments],
            "is_stable": self.is_stable,
        }
