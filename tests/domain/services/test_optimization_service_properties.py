"""Randomized property tests across all solvers.

Seeded pools and formations, checked for:
- Solution invariants (coverage, uniqueness, category match, budget, score sum)
- approximate <= exact, exact >= greedy, approximate >= greedy
- Bounded discretization gap for coarse budget steps
- Idempotence
"""

import itertools
import random

import pytest

from squad_picker.config import load_config
from squad_picker.domain.models import (
    CATEGORY_ORDER,
    FORMATION_CATALOG,
    Candidate,
    build_formation,
)
from squad_picker.domain.services import OptimizationService
from squad_picker.domain.services.optimization import SquadProblem

SEEDS = range(12)
TOLERANCE = 1e-6


def random_problem(seed, max_cost=60, catalog=True):
    """Random pool plus a catalog or small custom formation."""
    rng = random.Random(seed)
    if catalog:
        formation = FORMATION_CATALOG[rng.choice(list(FORMATION_CATALOG))]
    else:
        formation = build_formation(
            f"custom{seed}",
            {category: rng.randint(0, 2) for category in CATEGORY_ORDER}
            | {CATEGORY_ORDER[0]: 1},
        )

    candidates = []
    for category, required in formation.shape.items():
        for i in range(required + rng.randint(0, 4)):
            candidates.append(
                Candidate(
                    candidate_id=f"{category.value}{i}",
                    category=category,
                    cost=rng.randint(1, max_cost),
                    score=round(rng.uniform(-1.0, 12.0), 3),
                )
            )

    cheapest = sum(
        sum(sorted(c.cost for c in candidates if c.category == category)[:required])
        for category, required in formation.shape.items()
    )
    budget = rng.randint(max(cheapest - 20, 0), cheapest + 8 * formation.size)
    return SquadProblem(candidates=candidates, formation=formation, budget=budget)


def brute_force_score(problem):
    """Exhaustive optimum for tiny problems (None if infeasible)."""
    groups = []
    for category, required in problem.formation.shape.items():
        pool = [c for c in problem.candidates if c.category == category]
        groups.append(list(itertools.combinations(pool, required)))
    best = None
    for picks in itertools.product(*groups):
        chosen = [c for group in picks for c in group]
        if sum(c.cost for c in chosen) <= problem.budget:
            score = sum(c.score for c in chosen)
            best = score if best is None else max(best, score)
    return best


@pytest.fixture(scope="module")
def service():
    return OptimizationService()


class TestSolutionInvariants:
    """Every returned solution satisfies the five invariants."""

    @pytest.mark.parametrize("seed", SEEDS)
    @pytest.mark.parametrize("solver", ["exact", "approximate", "greedy"])
    def test_invariants_hold(self, service, seed, solver):
        problem = random_problem(seed)

        result = service.solve(problem, solver)

        if result.is_success:
            solution = result.value
            assert service.check_solution_invariants(solution, problem.formation) == []
            assert solution.total_cost <= problem.budget
            assert list(solution.assignments) == problem.formation.slot_ids


class TestSolverOrdering:
    """Exact is optimal; approximate sits between greedy and exact."""

    @pytest.mark.parametrize("seed", SEEDS)
    def test_exact_matches_brute_force(self, service, seed):
        problem = random_problem(seed, catalog=False)

        result = service.solve_exact(problem)
        expected = brute_force_score(problem)

        if expected is None:
            assert result.is_failure
        else:
            assert result.value.total_score == pytest.approx(expected, abs=TOLERANCE)

    @pytest.mark.parametrize("seed", SEEDS)
    def test_ordering(self, service, seed):
        problem = random_problem(seed)

        exact = service.solve_exact(problem)
        approximate = service.solve_approximate(problem)
        greedy = service.solve_greedy(problem)

        # All three agree on feasibility when the step is 1
        assert exact.is_success == approximate.is_success
        if greedy.is_success:
            assert exact.is_success
        if not exact.is_success:
            return

        exact_score = exact.value.total_score
        approx_score = approximate.value.total_score
        assert approx_score <= exact_score + TOLERANCE
        # Unit step makes the frontier exact
        assert approx_score == pytest.approx(exact_score, abs=TOLERANCE)
        if greedy.is_success:
            assert exact_score >= greedy.value.total_score - TOLERANCE
            assert approx_score >= greedy.value.total_score - TOLERANCE


class TestDiscretizationGap:
    """Coarse steps lose at most what ceiling rounding hides."""

    @pytest.mark.parametrize("seed", SEEDS)
    @pytest.mark.parametrize("step", [3, 10])
    def test_gap_bound(self, service, seed, step):
        problem = random_problem(seed, max_cost=200)
        coarse = OptimizationService(
            settings=load_config(config_data={"frontier": {"fixed_step": step}})
        )

        approximate = coarse.solve_approximate(problem)
        exact = service.solve_exact(problem)
        greedy = service.solve_greedy(problem)

        if approximate.is_success:
            assert approximate.value.total_cost <= problem.budget
            assert exact.is_success
            assert approximate.value.total_score <= exact.value.total_score + TOLERANCE
        if greedy.is_success:
            assert approximate.is_success
            assert approximate.value.total_score >= greedy.value.total_score - TOLERANCE

        # Rounding costs up hides at most (step - 1) per open slot
        shrunk_budget = problem.budget - problem.formation.size * (step - 1)
        if shrunk_budget >= 0:
            shrunk = problem.model_copy(update={"budget": shrunk_budget})
            reference = service.solve_exact(shrunk)
            if reference.is_success:
                assert approximate.is_success
                assert (
                    approximate.value.total_score
                    >= reference.value.total_score - TOLERANCE
                )


class TestIdempotence:
    """Re-running a solver gives the same cost and score."""

    @pytest.mark.parametrize("seed", SEEDS)
    @pytest.mark.parametrize("solver", ["exact", "approximate", "greedy"])
    def test_repeatable(self, service, seed, solver):
        problem = random_problem(seed)

        first = service.solve(problem, solver)
        second = service.solve(problem, solver)

        assert first.is_success == second.is_success
        if first.is_success:
            assert first.value.total_cost == second.value.total_cost
            assert first.value.total_score == pytest.approx(second.value.total_score)
