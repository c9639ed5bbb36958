"""Integer programming squad optimization.

This module solves the single-formation selection problem exactly with the
PuLP CBC solver:
- Guaranteed optimal solution (or the best incumbent when the time limit hits)
- Deterministic (same input = same output)
- Transparent greedy fallback when no usable integral solution comes back
"""

import re
import time
from typing import Dict, List, Optional

import pulp
from loguru import logger

from squad_picker.domain.common import Result
from squad_picker.domain.models import Candidate, Category, Solution, SolverKind

from .greedy_fallback import GreedyFallbackMixin
from .optimization_base import PreparedSquad, SquadProblem

ACCEPTED_SOLUTION_STATUSES = (pulp.LpSolutionOptimal, pulp.LpSolutionIntegerFeasible)


class SquadLPMixin(GreedyFallbackMixin):
    """Mixin providing exact 0/1 integer programming optimization.

    Uses PuLP with the CBC solver. Falls back to the greedy fill whenever the
    solver cannot deliver a complete integral team.
    """

    def solve_exact(self, problem: SquadProblem) -> Result[Solution]:
        """Select the maximum-score team for one formation.

        Args:
            problem: Validated squad problem

        Returns:
            Result with the optimal (or greedy fallback) Solution, or an
            INFEASIBLE failure if neither can fill the formation
        """
        prepared = self._prepare_problem(problem)

        rejected = self._check_trivially_infeasible(prepared)
        if rejected is not None:
            return rejected

        if prepared.open_slot_count == 0:
            return self._finalize(prepared, {}, SolverKind.EXACT)

        chosen = self._solve_lp(prepared)
        if chosen is None:
            logger.warning(
                f"⚠️ {prepared.formation.name}: no usable integral LP solution - falling back to greedy fill"
            )
            return self._solve_greedy_prepared(prepared)

        assignments = self._assign_to_slots(prepared, chosen)
        if assignments is None:
            logger.warning(
                f"⚠️ {prepared.formation.name}: LP selection does not match the formation - falling back to greedy fill"
            )
            return self._solve_greedy_prepared(prepared)

        return self._finalize(prepared, assignments, SolverKind.EXACT)

    def _solve_lp(
        self, prepared: PreparedSquad
    ) -> Optional[Dict[Category, List[Candidate]]]:
        """Build and solve the 0/1 program.

        Returns:
            Chosen candidates per category, or None if the solver did not return
            a complete integral solution within budget
        """
        start_time = time.time()
        settings = self.settings.optimization
        safe_name = re.sub(r"[^A-Za-z0-9_]", "_", prepared.formation.name)

        prob = pulp.LpProblem(f"Squad_Selection_{safe_name}", pulp.LpMaximize)

        # Decision variables: x[i] = 1 if candidate i is selected
        candidates: List[Candidate] = []
        candidate_vars = []
        for pool in prepared.pool.values():
            for candidate in pool:
                candidate_vars.append(
                    pulp.LpVariable(f"x_{len(candidates)}", cat="Binary")
                )
                candidates.append(candidate)

        prob += (
            pulp.lpSum(c.score * x for c, x in zip(candidates, candidate_vars)),
            "Total_Score",
        )

        # CONSTRAINT 1: Exact count per category
        quotas = prepared.quotas
        for category, required in quotas.items():
            category_vars = [
                x for c, x in zip(candidates, candidate_vars) if c.category == category
            ]
            if not category_vars:
                continue
            prob += pulp.lpSum(category_vars) == required, f"Count_{category.value}"

        # CONSTRAINT 2: Budget
        prob += (
            pulp.lpSum(c.cost * x for c, x in zip(candidates, candidate_vars))
            <= prepared.remaining_budget,
            "Budget_Limit",
        )

        logger.debug(
            f"Solving {prepared.formation.name} LP: {len(candidates)} variables, "
            f"budget {prepared.remaining_budget}"
        )
        try:
            prob.solve(
                pulp.getSolver(
                    "PULP_CBC_CMD",
                    msg=settings.exact_solver_msg,
                    timeLimit=settings.exact_time_limit_seconds,
                )
            )
        except pulp.PulpSolverError as e:
            logger.warning(f"⚠️ CBC solver error on {prepared.formation.name}: {e}")
            return None

        solve_time = time.time() - start_time
        status = pulp.LpStatus[prob.status]
        logger.debug(
            f"{prepared.formation.name} LP status: {status} "
            f"(solution status {prob.sol_status}) in {solve_time:.2f}s"
        )

        if prob.sol_status not in ACCEPTED_SOLUTION_STATUSES:
            return None

        # Translate variables back, rejecting fractional or missing values
        tolerance = settings.integrality_tolerance
        chosen: Dict[Category, List[Candidate]] = {category: [] for category in quotas}
        for candidate, var in zip(candidates, candidate_vars):
            value = var.varValue
            if value is None:
                logger.debug(f"Variable for {candidate.candidate_id} has no value")
                return None
            rounded = round(value)
            if abs(value - rounded) > tolerance or rounded not in (0, 1):
                logger.debug(
                    f"Variable for {candidate.candidate_id} is fractional ({value})"
                )
                return None
            if rounded == 1:
                chosen[candidate.category].append(candidate)

        selected = [c for group in chosen.values() for c in group]
        if len(selected) != prepared.open_slot_count:
            logger.debug(
                f"LP selected {len(selected)} candidates, expected {prepared.open_slot_count}"
            )
            return None
        if sum(c.cost for c in selected) > prepared.remaining_budget:
            return None

        logger.info(
            f"🎯 {prepared.formation.name}: LP optimum {sum(c.score for c in selected):.2f} "
            f"at cost {sum(c.cost for c in selected)} ({solve_time:.2f}s)"
        )
        return chosen
