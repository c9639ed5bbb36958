"""Tests for the greedy fallback solver.

- Cheapest-affordable fill within each category
- Scarcest category filled first
- Infeasible outcomes as typed failures
"""

import pytest

from squad_picker.domain.common import ErrorType
from squad_picker.domain.models import Candidate, Category, SolverKind, build_formation
from squad_picker.domain.services import OptimizationService
from squad_picker.domain.services.optimization import SquadProblem


def make_candidate(candidate_id, category, cost, score):
    return Candidate(candidate_id=candidate_id, category=category, cost=cost, score=score)


@pytest.fixture
def service():
    return OptimizationService()


@pytest.fixture
def mini_formation():
    return build_formation("mini", {Category.GK: 1, Category.DEF: 2})


class TestGreedyFill:
    """Test greedy selection behaviour."""

    def test_picks_cheapest_candidates(self, service, mini_formation):
        candidates = [
            make_candidate("gk_cheap", "GK", 4, 1.0),
            make_candidate("gk_star", "GK", 9, 9.0),
            make_candidate("d1", "DEF", 5, 2.0),
            make_candidate("d2", "DEF", 3, 1.0),
            make_candidate("d3", "DEF", 8, 7.0),
        ]
        problem = SquadProblem(candidates=candidates, formation=mini_formation, budget=30)

        result = service.solve_greedy(problem)

        assert result.is_success
        solution = result.value
        assert solution.solver == SolverKind.GREEDY
        assert set(solution.candidate_ids) == {"gk_cheap", "d1", "d2"}
        assert solution.total_cost == 12

    def test_cost_ties_prefer_higher_score(self, service):
        formation = build_formation("one", {Category.MID: 1})
        candidates = [
            make_candidate("low", "MID", 5, 1.0),
            make_candidate("high", "MID", 5, 3.0),
        ]
        problem = SquadProblem(candidates=candidates, formation=formation, budget=5)

        assert service.solve_greedy(problem).value.candidate_ids == ["high"]

    def test_fills_each_category_with_its_cheapest(self, service):
        formation = build_formation("two", {Category.GK: 1, Category.MID: 1})
        candidates = [
            make_candidate("gk", "GK", 6, 1.0),
            make_candidate("m1", "MID", 4, 1.0),
            make_candidate("m2", "MID", 5, 2.0),
        ]
        problem = SquadProblem(candidates=candidates, formation=formation, budget=10)

        solution = service.solve_greedy(problem).value
        assert solution.assignment_ids() == {"gk1": "gk", "mid1": "m1"}

    def test_over_budget_is_infeasible(self, service, mini_formation):
        candidates = [
            make_candidate("gk", "GK", 10, 1.0),
            make_candidate("d1", "DEF", 10, 1.0),
            make_candidate("d2", "DEF", 10, 1.0),
        ]
        problem = SquadProblem(candidates=candidates, formation=mini_formation, budget=29)

        result = service.solve_greedy(problem)

        assert result.is_failure
        assert result.error.error_type == ErrorType.INFEASIBLE
        assert result.error.error_code == "greedy_fill_failed"

    def test_too_few_candidates_is_infeasible(self, service, mini_formation):
        candidates = [
            make_candidate("gk", "GK", 1, 1.0),
            make_candidate("d1", "DEF", 1, 1.0),
        ]
        problem = SquadProblem(candidates=candidates, formation=mini_formation, budget=100)

        result = service.solve_greedy(problem)

        assert result.is_failure
        assert result.error.error_code == "insufficient_candidates"
