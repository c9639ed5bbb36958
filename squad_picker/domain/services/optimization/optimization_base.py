"""Base utilities and data contracts for squad optimization.

This module contains shared functionality used across all solvers:
- Input validation contract (Pydantic model)
- Pinned-assignment reduction (budget deduction, pool filtering, open slots)
- Category grouping and deterministic ordering
- Slot assignment and solution assembly
- Solution invariant checks
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from loguru import logger
from pydantic import BaseModel, Field, field_validator, model_validator

from squad_picker.config import SquadPickerConfig, config
from squad_picker.domain.common import DomainError, Result
from squad_picker.domain.models import (
    CATEGORY_ORDER,
    Candidate,
    Category,
    Formation,
    Solution,
    SolverKind,
)


class SquadProblem(BaseModel):
    """Data contract for a single-formation optimization call."""

    candidates: List[Candidate] = Field(
        default_factory=list, description="Eligible candidate pool"
    )
    formation: Formation = Field(..., description="Formation to fill")
    budget: int = Field(..., ge=0, description="Ceiling on the total cost")
    pinned: Dict[str, Candidate] = Field(
        default_factory=dict, description="Slot id -> already-owned candidate"
    )
    excluded_ids: List[str] = Field(
        default_factory=list, description="Candidate ids removed before solving"
    )

    @field_validator("excluded_ids", mode="before")
    @classmethod
    def coerce_excluded_ids(cls, v):
        """Ids are opaque strings; accept numeric ids from upstream."""
        return [str(item) for item in (v or [])]

    @field_validator("candidates")
    @classmethod
    def validate_unique_ids(cls, v: List[Candidate]) -> List[Candidate]:
        """Ensure no duplicate candidate ids in the pool."""
        seen = set()
        duplicates = set()
        for candidate in v:
            if candidate.candidate_id in seen:
                duplicates.add(candidate.candidate_id)
            seen.add(candidate.candidate_id)
        if duplicates:
            raise ValueError(
                f"Duplicate candidate ids found in pool: {sorted(duplicates)}"
            )
        return v

    @model_validator(mode="after")
    def validate_pinned(self):
        """Pinned slots must exist, match their category, and be distinct players."""
        pinned_ids = []
        for slot_id, candidate in self.pinned.items():
            if not self.formation.has_slot(slot_id):
                raise ValueError(
                    f"Pinned slot {slot_id!r} does not exist in formation {self.formation.name}"
                )
            slot = self.formation.get_slot(slot_id)
            if slot.category != candidate.category:
                raise ValueError(
                    f"Pinned candidate {candidate.candidate_id} is {candidate.category.value} "
                    f"but slot {slot_id} requires {slot.category.value}"
                )
            pinned_ids.append(candidate.candidate_id)
        if len(pinned_ids) != len(set(pinned_ids)):
            raise ValueError("The same candidate is pinned to more than one slot")
        return self


@dataclass(frozen=True)
class PreparedSquad:
    """A problem reduced by its pinned assignment, ready for a solver."""

    formation: Formation
    budget: int
    pinned: Dict[str, Candidate]
    pinned_cost: int
    remaining_budget: int
    pool: Dict[Category, List[Candidate]]
    open_slots: Dict[Category, List[str]]

    @property
    def quotas(self) -> Dict[Category, int]:
        """Number of slots still to fill per category."""
        return {category: len(slots) for category, slots in self.open_slots.items()}

    @property
    def open_slot_count(self) -> int:
        return sum(self.quotas.values())

    @property
    def pool_size(self) -> int:
        return sum(len(candidates) for candidates in self.pool.values())


def order_by_score(candidates: List[Candidate]) -> List[Candidate]:
    """Descending score, ties broken by candidate id."""
    return sorted(candidates, key=lambda c: (-c.score, c.candidate_id))


class OptimizationBaseMixin:
    """Mixin providing shared optimization utilities.

    This mixin provides core functionality used by all solvers:
    - Problem reduction by pinned assignment
    - Category grouping
    - Slot assignment and solution assembly
    - Invariant validation
    """

    settings: SquadPickerConfig = config

    def _group_by_category(
        self, candidates: List[Candidate]
    ) -> Dict[Category, List[Candidate]]:
        """Group candidates by category, each group ordered by score."""
        by_category = {category: [] for category in CATEGORY_ORDER}
        for candidate in candidates:
            by_category[candidate.category].append(candidate)
        return {
            category: order_by_score(group) for category, group in by_category.items()
        }

    def _prepare_problem(self, problem: SquadProblem) -> PreparedSquad:
        """Deduct pinned costs and remove pinned/excluded candidates from the pool.

        Args:
            problem: Validated squad problem

        Returns:
            PreparedSquad with remaining budget, reduced pool and open slots
        """
        pinned_ids = {c.candidate_id for c in problem.pinned.values()}
        excluded_ids = set(problem.excluded_ids)

        overlap = pinned_ids & excluded_ids
        if overlap:
            logger.debug(
                f"Pinned candidates {sorted(overlap)} are also excluded - keeping them pinned"
            )

        pool_candidates = [
            c
            for c in problem.candidates
            if c.candidate_id not in pinned_ids and c.candidate_id not in excluded_ids
        ]
        pinned_cost = sum(c.cost for c in problem.pinned.values())

        open_slots = {category: [] for category in CATEGORY_ORDER}
        for slot in problem.formation.slots:
            if slot.slot_id not in problem.pinned:
                open_slots[slot.category].append(slot.slot_id)

        return PreparedSquad(
            formation=problem.formation,
            budget=problem.budget,
            pinned=dict(problem.pinned),
            pinned_cost=pinned_cost,
            remaining_budget=problem.budget - pinned_cost,
            pool=self._group_by_category(pool_candidates),
            open_slots=open_slots,
        )

    def _assign_to_slots(
        self,
        prepared: PreparedSquad,
        chosen_by_category: Dict[Category, List[Candidate]],
    ) -> Optional[Dict[str, Candidate]]:
        """Map chosen candidates onto open slots, best score first.

        Returns:
            Slot id -> candidate for every open slot, or None if any slot is left
            unassigned or a category received the wrong number of candidates
        """
        assignments: Dict[str, Candidate] = {}
        for category, slot_ids in prepared.open_slots.items():
            chosen = order_by_score(chosen_by_category.get(category, []))
            if len(chosen) != len(slot_ids):
                logger.debug(
                    f"{category.value}: {len(chosen)} candidates chosen for {len(slot_ids)} open slots"
                )
                return None
            for slot_id, candidate in zip(slot_ids, chosen):
                assignments[slot_id] = candidate
        return assignments

    def _build_solution(
        self,
        prepared: PreparedSquad,
        assignments: Dict[str, Candidate],
        solver: SolverKind,
    ) -> Solution:
        """Merge pinned and solved assignments (formation order) into a Solution."""
        merged = {**prepared.pinned, **assignments}
        ordered = {
            slot.slot_id: merged[slot.slot_id]
            for slot in prepared.formation.slots
            if slot.slot_id in merged
        }
        return Solution(
            formation=prepared.formation.name,
            assignments=ordered,
            total_cost=sum(c.cost for c in ordered.values()),
            total_score=sum(c.score for c in ordered.values()),
            budget=prepared.budget,
            solver=solver,
            pinned_slot_ids=[s for s in ordered if s in prepared.pinned],
        )

    def check_solution_invariants(
        self, solution: Solution, formation: Formation
    ) -> List[str]:
        """Check the five solution invariants.

        Args:
            solution: Solution to check
            formation: Formation the solution claims to fill

        Returns:
            List of violation messages (empty if the solution is valid)
        """
        violations = []

        missing = [s for s in formation.slot_ids if s not in solution.assignments]
        extra = [s for s in solution.assignments if not formation.has_slot(s)]
        if missing:
            violations.append(f"Unfilled slots: {missing}")
        if extra:
            violations.append(f"Unknown slots: {extra}")

        ids = solution.candidate_ids
        if len(ids) != len(set(ids)):
            violations.append("A candidate is assigned to more than one slot")

        for slot_id, candidate in solution.assignments.items():
            if formation.has_slot(slot_id):
                required = formation.get_slot(slot_id).category
                if candidate.category != required:
                    violations.append(
                        f"Slot {slot_id} requires {required.value}, got {candidate.category.value}"
                    )

        actual_cost = sum(c.cost for c in solution.assignments.values())
        if actual_cost != solution.total_cost:
            violations.append(
                f"Reported cost {solution.total_cost} != actual cost {actual_cost}"
            )
        if actual_cost > solution.budget:
            violations.append(f"Cost {actual_cost} exceeds budget {solution.budget}")

        actual_score = sum(c.score for c in solution.assignments.values())
        if abs(actual_score - solution.total_score) > 1e-9 * max(1.0, abs(actual_score)):
            violations.append(
                f"Reported score {solution.total_score} != actual score {actual_score}"
            )

        return violations

    def _finalize(
        self,
        prepared: PreparedSquad,
        assignments: Dict[str, Candidate],
        solver: SolverKind,
    ) -> Result[Solution]:
        """Assemble a Solution and refuse to return one that breaks an invariant."""
        solution = self._build_solution(prepared, assignments, solver)
        violations = self.check_solution_invariants(solution, prepared.formation)
        if violations:
            logger.error(
                f"❌ {solver.value} solver produced an invalid {prepared.formation.name} team: {violations}"
            )
            return Result.failure(
                DomainError.calculation_error(
                    f"{solver.value} solver produced an invalid team",
                    details={"violations": violations},
                )
            )
        return Result.success(solution)

    def _infeasible(
        self, prepared: PreparedSquad, reason: str, code: str
    ) -> Result[Solution]:
        """Typed "no solution" outcome."""
        logger.debug(f"{prepared.formation.name}: infeasible ({reason})")
        return Result.failure(
            DomainError.infeasible(
                reason,
                details={
                    "formation": prepared.formation.name,
                    "remaining_budget": prepared.remaining_budget,
                },
                error_code=code,
            )
        )

    def _check_trivially_infeasible(
        self, prepared: PreparedSquad
    ) -> Optional[Result[Solution]]:
        """Reject problems no solver can satisfy before doing any work."""
        if prepared.remaining_budget < 0:
            return self._infeasible(
                prepared,
                f"Pinned players cost {prepared.pinned_cost}, exceeding budget {prepared.budget}",
                "pinned_over_budget",
            )
        for category, quota in prepared.quotas.items():
            available = len(prepared.pool[category])
            if available < quota:
                return self._infeasible(
                    prepared,
                    f"{category.value} needs {quota} players but only {available} are eligible",
                    "insufficient_candidates",
                )
        return None
