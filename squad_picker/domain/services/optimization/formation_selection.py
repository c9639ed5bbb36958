"""Formation selection across the catalog.

Runs one of the single-formation solvers for every candidate formation and
ranks the feasible results:
- Score descending, then cost ascending, then catalog order
- Formations that cannot host the pinned assignment are skipped in auto mode
- Optional thread-pool fan-out (formation attempts share no mutable state)
"""

import time
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Union

from loguru import logger

from squad_picker.config import VALID_SOLVERS
from squad_picker.domain.common import DomainError, ErrorType, Result
from squad_picker.domain.models import (
    AUTO_FORMATION,
    CATEGORY_ORDER,
    FORMATION_CATALOG,
    Candidate,
    Formation,
    FormationRecommendation,
    SelectionOutcome,
    SelectionStats,
    Solution,
    SolverKind,
    get_formation,
)

from .optimization_base import SquadProblem
from .squad_dp import ApproximateFrontierMixin
from .squad_lp import SquadLPMixin


class FormationSelectionMixin(SquadLPMixin, ApproximateFrontierMixin):
    """Mixin providing solver dispatch and catalog-wide formation selection."""

    def solve(
        self, problem: SquadProblem, solver: Union[str, SolverKind, None] = None
    ) -> Result[Solution]:
        """Run the requested solver on a single-formation problem.

        Args:
            problem: Validated squad problem
            solver: 'exact', 'approximate' or 'greedy' (default from config)

        Raises:
            ValueError: If the solver name is unknown
        """
        kind = self._resolve_solver(solver)
        if kind == SolverKind.EXACT:
            return self.solve_exact(problem)
        if kind == SolverKind.APPROXIMATE:
            return self.solve_approximate(problem)
        return self.solve_greedy(problem)

    def select_formation(
        self,
        candidates: List[Candidate],
        budget: int,
        formation: Union[str, Formation] = AUTO_FORMATION,
        solver: Union[str, SolverKind, None] = None,
        pinned: Optional[Dict[str, Candidate]] = None,
        excluded_ids: Optional[List[str]] = None,
    ) -> Result[SelectionOutcome]:
        """Pick the best team across one or all catalog formations.

        Args:
            candidates: Eligible candidate pool
            budget: Ceiling on total cost, pinned candidates included
            formation: 'auto' for the whole catalog, a catalog name, or a
                custom Formation
            solver: 'exact', 'approximate' or 'greedy' (default from config)
            pinned: Slot id -> already-owned candidate
            excluded_ids: Candidate ids that must not be selected

        Returns:
            Result with the best Solution and ranked alternatives, or an
            INFEASIBLE failure when no formation can be filled

        Raises:
            ValueError: On degenerate input (negative budget or cost, duplicate
                ids, unknown formation or solver, invalid pinned assignment)
        """
        start_time = time.time()
        kind = self._resolve_solver(solver)
        pinned = dict(pinned or {})
        excluded = [str(item) for item in (excluded_ids or [])]

        if isinstance(formation, Formation):
            formations = [formation]
        elif formation == AUTO_FORMATION:
            formations = [
                f for f in FORMATION_CATALOG.values() if self._can_host(f, pinned)
            ]
            skipped = len(FORMATION_CATALOG) - len(formations)
            if skipped:
                logger.warning(
                    f"⚠️ Skipping {skipped} formations that cannot host the pinned slots"
                )
            if not formations:
                raise ValueError(
                    f"No catalog formation has slots {sorted(pinned)} with matching categories"
                )
        else:
            formations = [get_formation(formation)]

        # Validate once up front so degenerate input raises before any solving
        problems = [
            SquadProblem(
                candidates=candidates,
                formation=f,
                budget=budget,
                pinned=pinned,
                excluded_ids=excluded,
            )
            for f in formations
        ]

        logger.info(
            f"🔍 Selecting from {len(formations)} formation(s) with {kind.value} solver "
            f"(budget {budget}, {len(candidates)} candidates)"
        )

        selector = self.settings.selector
        if selector.parallel and len(problems) > 1:
            with ThreadPoolExecutor(max_workers=selector.max_workers) as executor:
                results = list(executor.map(lambda p: self.solve(p, kind), problems))
        else:
            results = [self.solve(problem, kind) for problem in problems]

        feasible: List[Solution] = []
        failures: Dict[str, DomainError] = {}
        for problem, result in zip(problems, results):
            if result.is_success:
                feasible.append(result.value)
            else:
                failures[problem.formation.name] = result.error

        order = {f.name: index for index, f in enumerate(formations)}
        ranked = sorted(
            feasible,
            key=lambda s: (-s.total_score, s.total_cost, order[s.formation]),
        )

        elapsed_ms = (time.time() - start_time) * 1000
        excluded_set = set(excluded)
        stats = SelectionStats(
            candidates_considered=sum(
                1 for c in candidates if c.candidate_id not in excluded_set
            ),
            formations_evaluated=len(formations),
            formations_feasible=len(ranked),
            generation_time_ms=elapsed_ms,
        )

        if not ranked:
            return self._selection_failure(failures)

        best = ranked[0]
        logger.info(
            f"✅ Best formation {best.formation}: score {best.total_score:.2f}, "
            f"cost {best.total_cost}/{budget} ({len(ranked)}/{len(formations)} feasible, "
            f"{elapsed_ms:.0f}ms)"
        )
        return Result.success(
            SelectionOutcome(best=best, alternatives=ranked, stats=stats)
        )

    def recommend_formations(
        self, candidates: List[Candidate]
    ) -> List[FormationRecommendation]:
        """Rate every catalog formation by how well the pool covers its shape.

        Each required category scores 10 when at least twice as many candidates
        as slots are available, 7 at 1.5x, 5 at 1x and 0 below that.

        Returns:
            Recommendations sorted by suitability (catalog order on ties)
        """
        available = {category: 0 for category in CATEGORY_ORDER}
        for candidate in candidates:
            available[candidate.category] += 1

        recommendations = []
        for name, formation in FORMATION_CATALOG.items():
            suitability = 0
            reasons = []
            for category, required in formation.shape.items():
                if required == 0:
                    continue
                ratio = available[category] / required
                if ratio >= 2:
                    suitability += 10
                    reasons.append(f"Plenty of {category.value} available")
                elif ratio >= 1.5:
                    suitability += 7
                elif ratio >= 1:
                    suitability += 5
                else:
                    reasons.append(f"Few {category.value} available")
            recommendations.append(
                FormationRecommendation(
                    formation=name,
                    suitability_score=suitability,
                    reasoning=", ".join(reasons) or "Balanced availability",
                )
            )

        return sorted(recommendations, key=lambda r: -r.suitability_score)

    def _resolve_solver(self, solver: Union[str, SolverKind, None]) -> SolverKind:
        if solver is None:
            solver = self.settings.optimization.default_solver
        if isinstance(solver, SolverKind):
            return solver
        if solver not in VALID_SOLVERS:
            raise ValueError(f"Unknown solver {solver!r}. Valid: {VALID_SOLVERS}")
        return SolverKind(solver)

    @staticmethod
    def _can_host(formation: Formation, pinned: Dict[str, Candidate]) -> bool:
        """True if every pinned slot exists in the formation with a matching category."""
        for slot_id, candidate in pinned.items():
            if not formation.has_slot(slot_id):
                return False
            if formation.get_slot(slot_id).category != candidate.category:
                return False
        return True

    def _selection_failure(
        self, failures: Dict[str, DomainError]
    ) -> Result[SelectionOutcome]:
        """Surface a solver error if one occurred, otherwise report infeasibility."""
        for name, error in failures.items():
            if error.error_type != ErrorType.INFEASIBLE:
                logger.error(f"❌ {name}: {error.message}")
                return Result.failure(error)

        logger.warning("⚠️ No formation could be filled within budget")
        return Result.failure(
            DomainError.infeasible(
                "No formation can be filled within budget",
                details={
                    "reasons": {name: error.message for name, error in failures.items()}
                },
                error_code="no_feasible_formation",
            )
        )
