"""Solution and selection outcome models."""

from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from .candidate import Candidate


class SolverKind(str, Enum):
    """Solver that produced a solution."""

    GREEDY = "greedy"
    EXACT = "exact"
    APPROXIMATE = "approximate"


class Solution(BaseModel):
    """
    A complete slot -> candidate assignment for one formation.

    `assignments` is ordered like the formation's slots and includes pinned
    candidates. `total_cost` and `total_score` are sums over all assignments.
    """

    model_config = ConfigDict(frozen=True)

    formation: str = Field(..., description="Formation name")
    assignments: Dict[str, Candidate] = Field(
        ..., description="Slot id -> assigned candidate, in slot order"
    )
    total_cost: int = Field(..., ge=0, description="Sum of assigned costs")
    total_score: float = Field(..., description="Sum of assigned scores")
    budget: int = Field(..., ge=0, description="Budget the solution was built for")
    solver: SolverKind = Field(..., description="Solver that produced the assignment")
    pinned_slot_ids: List[str] = Field(
        default_factory=list, description="Slots kept from the pinned assignment"
    )

    @property
    def remaining_budget(self) -> int:
        """Unspent budget."""
        return self.budget - self.total_cost

    @property
    def candidate_ids(self) -> List[str]:
        """Assigned candidate ids in slot order."""
        return [candidate.candidate_id for candidate in self.assignments.values()]

    def assignment_ids(self) -> Dict[str, str]:
        """Slot id -> candidate id mapping."""
        return {
            slot_id: candidate.candidate_id
            for slot_id, candidate in self.assignments.items()
        }

    def to_records(self) -> List[Dict]:
        """Flat rows (one per slot) for tabular display or export."""
        return [
            {
                "slot_id": slot_id,
                "candidate_id": candidate.candidate_id,
                "name": candidate.display_name,
                "category": candidate.category.value,
                "team": candidate.team,
                "cost": candidate.cost,
                "score": candidate.score,
                "pinned": slot_id in self.pinned_slot_ids,
            }
            for slot_id, candidate in self.assignments.items()
        ]


class SelectionStats(BaseModel):
    """Statistics about one formation selection run."""

    candidates_considered: int = Field(..., ge=0)
    formations_evaluated: int = Field(..., ge=0)
    formations_feasible: int = Field(..., ge=0)
    generation_time_ms: float = Field(..., ge=0.0)


class SelectionOutcome(BaseModel):
    """Best solution across the evaluated formations plus ranked alternatives."""

    best: Solution
    alternatives: List[Solution] = Field(
        default_factory=list,
        description="All feasible solutions ranked best first (includes best)",
    )
    stats: SelectionStats


class FormationRecommendation(BaseModel):
    """How well the candidate pool supports a formation."""

    formation: str
    suitability_score: int = Field(..., ge=0)
    reasoning: str
