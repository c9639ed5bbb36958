"""Approximate squad optimization via budget-bucketed frontiers.

Trades a bounded amount of optimality for predictable runtime on large
budgets:
- Costs are discretized into at most `frontier.max_buckets` buckets
- Each category gets its own best-score-per-bucket frontier
- Category frontiers are convolved into a team under the bucket ceiling
- The cheapest fill acts as a floor when rounding hides affordable teams
- A single upgrade pass spends whatever real budget the rounding left over
"""

import time
from typing import Dict

from loguru import logger

from squad_picker.domain.common import Result
from squad_picker.domain.models import CATEGORY_ORDER, Candidate, Solution, SolverKind

from .frontier import build_frontier, combine_frontiers, determine_budget_step
from .greedy_fallback import GreedyFallbackMixin
from .optimization_base import PreparedSquad, SquadProblem


class ApproximateFrontierMixin(GreedyFallbackMixin):
    """Mixin providing the frontier-convolution solver."""

    def solve_approximate(self, problem: SquadProblem) -> Result[Solution]:
        """Select a high-score team for one formation without an IP solver.

        With step 1 (budget within `frontier.max_buckets`) the result is
        optimal. Larger steps can lose at most the value of the budget that
        ceiling rounding hides, roughly open_slots * (step - 1).

        Args:
            problem: Validated squad problem

        Returns:
            Result with the Solution, or an INFEASIBLE failure
        """
        prepared = self._prepare_problem(problem)

        rejected = self._check_trivially_infeasible(prepared)
        if rejected is not None:
            return rejected

        if prepared.open_slot_count == 0:
            return self._finalize(prepared, {}, SolverKind.APPROXIMATE)

        start_time = time.time()
        settings = self.settings.frontier
        step = determine_budget_step(
            prepared.remaining_budget, settings.max_buckets, settings.fixed_step
        )
        max_buckets = prepared.remaining_budget // step

        frontiers = []
        for category in CATEGORY_ORDER:
            quota = prepared.quotas[category]
            if quota == 0:
                continue
            frontier = build_frontier(
                prepared.pool[category], quota, step, max_buckets, category
            )
            logger.debug(
                f"{category.value} frontier: {len(prepared.pool[category])} candidates, "
                f"quota {quota}, feasible={frontier.is_feasible}"
            )
            frontiers.append(frontier)

        combination = combine_frontiers(frontiers, max_buckets)
        assignments = None
        if combination is not None:
            assignments = self._assign_to_slots(
                prepared, combination.chosen(frontiers)
            )

        # Rounding costs up can hide teams that fit the real budget, so the
        # cheapest fill is the floor for the result
        baseline = self._greedy_fill(
            prepared.pool, prepared.open_slots, prepared.remaining_budget
        )
        if baseline is not None and (
            assignments is None or _total_score(baseline) > _total_score(assignments)
        ):
            logger.debug(
                f"{prepared.formation.name}: cheapest fill beats the frontier at step {step}"
            )
            assignments = baseline

        if assignments is None:
            return self._infeasible(
                prepared,
                f"No combination of category picks fits {prepared.formation.name} "
                f"within budget {prepared.remaining_budget}",
                "no_frontier_combination",
            )

        if settings.upgrade_pass_enabled:
            assignments = self._upgrade_pass(prepared, assignments)

        solve_time = time.time() - start_time
        logger.info(
            f"📈 {prepared.formation.name}: frontier solution "
            f"{sum(c.score for c in assignments.values()):.2f} at step {step} "
            f"({max_buckets} buckets, {solve_time:.2f}s)"
        )
        return self._finalize(prepared, assignments, SolverKind.APPROXIMATE)

    def _upgrade_pass(
        self, prepared: PreparedSquad, assignments: Dict[str, Candidate]
    ) -> Dict[str, Candidate]:
        """Spend leftover budget on strictly better candidates.

        One pass over the open slots in formation order; each slot takes the
        best-scoring unused candidate of its category that beats the current
        one and fits in the leftover budget.

        Returns:
            New slot -> candidate mapping (input is not modified)
        """
        upgraded = dict(assignments)
        leftover = prepared.remaining_budget - sum(c.cost for c in upgraded.values())
        if leftover <= 0:
            return upgraded

        used = {c.candidate_id for c in upgraded.values()}
        for slot in prepared.formation.slots:
            if slot.slot_id not in upgraded:
                continue
            current = upgraded[slot.slot_id]
            # Pool is score-ordered, so the first better option is the best one
            for option in prepared.pool[slot.category]:
                if option.score <= current.score:
                    break
                if option.candidate_id in used:
                    continue
                extra = option.cost - current.cost
                if extra <= leftover:
                    logger.debug(
                        f"Upgrade {slot.slot_id}: {current.display_name} -> "
                        f"{option.display_name} (+{option.score - current.score:.2f} "
                        f"for {extra})"
                    )
                    upgraded[slot.slot_id] = option
                    used.discard(current.candidate_id)
                    used.add(option.candidate_id)
                    leftover -= extra
                    break

        return upgraded


def _total_score(assignments: Dict[str, Candidate]) -> float:
    return sum(c.score for c in assignments.values())
