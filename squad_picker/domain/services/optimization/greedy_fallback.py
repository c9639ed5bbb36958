"""Greedy fallback squad filling.

Guarantees a feasible (not necessarily optimal) team when one can be found by
always taking the cheapest affordable candidate:
- Categories are filled scarcest first (fewest eligible candidates)
- Within a category, cheapest affordable candidate first (ties: higher score)

Used standalone and as the exact optimizer's safety net.
"""

from typing import Dict, List, Optional

from loguru import logger

from squad_picker.domain.common import Result
from squad_picker.domain.models import (
    CATEGORY_ORDER,
    Candidate,
    Category,
    Solution,
    SolverKind,
)

from .optimization_base import OptimizationBaseMixin, PreparedSquad, SquadProblem


class GreedyFallbackMixin(OptimizationBaseMixin):
    """Mixin providing the scarcity-ordered cheapest-fill solver."""

    def solve_greedy(self, problem: SquadProblem) -> Result[Solution]:
        """Fill every open slot with the cheapest affordable candidates.

        Args:
            problem: Validated squad problem

        Returns:
            Result with the greedy Solution, or an INFEASIBLE failure
        """
        prepared = self._prepare_problem(problem)
        return self._solve_greedy_prepared(prepared)

    def _solve_greedy_prepared(self, prepared: PreparedSquad) -> Result[Solution]:
        rejected = self._check_trivially_infeasible(prepared)
        if rejected is not None:
            return rejected

        assignments = self._greedy_fill(
            prepared.pool, prepared.open_slots, prepared.remaining_budget
        )
        if assignments is None:
            return self._infeasible(
                prepared,
                f"Greedy fill could not complete {prepared.formation.name} within budget {prepared.budget}",
                "greedy_fill_failed",
            )
        return self._finalize(prepared, assignments, SolverKind.GREEDY)

    def _greedy_fill(
        self,
        pool: Dict[Category, List[Candidate]],
        open_slots: Dict[Category, List[str]],
        budget: int,
    ) -> Optional[Dict[str, Candidate]]:
        """Core greedy loop.

        Args:
            pool: Candidates per category
            open_slots: Slot ids still to fill per category
            budget: Budget available for the open slots

        Returns:
            Slot id -> candidate for every open slot, or None if a slot cannot
            be filled within budget
        """
        remaining = budget
        assignments: Dict[str, Candidate] = {}

        # Scarcest categories first to avoid starving them
        categories = sorted(
            (category for category, slots in open_slots.items() if slots),
            key=lambda category: (
                len(pool.get(category, [])),
                CATEGORY_ORDER.index(category),
            ),
        )

        for category in categories:
            available = sorted(
                pool.get(category, []),
                key=lambda c: (c.cost, -c.score, c.candidate_id),
            )
            for slot_id in open_slots[category]:
                # Sorted by cost, so the first candidate is the cheapest one
                if not available or available[0].cost > remaining:
                    logger.debug(
                        f"Greedy: cannot fill {slot_id} ({category.value}) with {remaining} left"
                    )
                    return None
                pick = available.pop(0)
                assignments[slot_id] = pick
                remaining -= pick.cost

        return assignments
