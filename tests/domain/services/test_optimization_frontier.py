"""Tests for the bucketed frontier primitives.

- Adaptive budget step and ceiling bucketing
- Per-category frontier values and monotonicity
- Candidate set reconstruction
- Cross-category convolution
"""

import itertools
import random

import numpy as np
import pytest

from squad_picker.domain.models import Candidate, Category
from squad_picker.domain.services.optimization import (
    bucket_cost,
    build_frontier,
    combine_frontiers,
    determine_budget_step,
)


def make_candidate(candidate_id, cost, score, category="MID"):
    return Candidate(candidate_id=candidate_id, category=category, cost=cost, score=score)


def brute_force_best(candidates, quota, budget):
    """Best score for exactly `quota` candidates with total cost <= budget."""
    best = -np.inf
    for combo in itertools.combinations(candidates, quota):
        if sum(c.cost for c in combo) <= budget:
            best = max(best, sum(c.score for c in combo))
    return best


class TestBudgetStep:
    """Test budget discretization."""

    def test_small_budget_uses_unit_step(self):
        assert determine_budget_step(1000, 1000) == 1
        assert determine_budget_step(0, 1000) == 1

    def test_large_budget_bounds_bucket_count(self):
        step = determine_budget_step(100_000_000, 1000)

        assert step == 100_000
        assert 100_000_000 // step <= 1000

    def test_uneven_budget_rounds_step_up(self):
        step = determine_budget_step(1001, 1000)

        assert step == 2
        assert 1001 // step <= 1000

    def test_fixed_step_overrides(self):
        assert determine_budget_step(10, 1000, fixed_step=7) == 7

    def test_non_positive_fixed_step_rejected(self):
        with pytest.raises(ValueError):
            determine_budget_step(10, 1000, fixed_step=0)

    def test_bucket_cost_rounds_up(self):
        assert bucket_cost(0, 5) == 0
        assert bucket_cost(5, 5) == 1
        assert bucket_cost(6, 5) == 2
        assert bucket_cost(7, 1) == 7


class TestBuildFrontier:
    """Test single-category frontiers."""

    def test_keeper_frontier_values(self):
        candidates = [
            make_candidate("A", 5, 10.0, "GK"),
            make_candidate("B", 3, 6.0, "GK"),
            make_candidate("C", 8, 11.0, "GK"),
        ]

        frontier = build_frontier(candidates, 1, 1, 10, Category.GK)

        assert frontier.scores[2] == -np.inf
        assert frontier.scores[3] == 6.0
        assert frontier.scores[5] == 10.0
        assert frontier.scores[7] == 10.0
        assert frontier.scores[8] == 11.0
        assert [c.candidate_id for c in frontier.members(6)] == ["A"]
        assert frontier.members(2) == []

    def test_no_candidate_used_twice(self):
        candidates = [make_candidate("only", 1, 5.0)]

        frontier = build_frontier(candidates, 2, 1, 10, Category.MID)

        assert not frontier.is_feasible

    def test_quota_is_exact(self):
        # "big" fits alone but cannot be paired within 9
        candidates = [
            make_candidate("big", 9, 10.0),
            make_candidate("s1", 1, 1.0),
            make_candidate("s2", 1, 1.0),
        ]

        frontier = build_frontier(candidates, 2, 1, 9, Category.MID)

        assert frontier.scores[9] == 2.0
        assert len(frontier.members(9)) == 2

    @pytest.mark.parametrize("seed", range(10))
    def test_frontier_matches_brute_force(self, seed):
        rng = random.Random(seed)
        candidates = [
            make_candidate(f"c{i}", rng.randint(0, 12), round(rng.uniform(-2, 10), 2))
            for i in range(8)
        ]
        quota = rng.randint(1, 3)

        frontier = build_frontier(candidates, quota, 1, 30, Category.MID)

        for budget in range(31):
            expected = brute_force_best(candidates, quota, budget)
            if not np.isfinite(expected):
                assert frontier.scores[budget] == -np.inf
            else:
                assert frontier.scores[budget] == pytest.approx(expected)
                members = frontier.members(budget)
                assert len(members) == quota
                assert len({c.candidate_id for c in members}) == quota
                assert sum(c.cost for c in members) <= budget
                assert sum(c.score for c in members) == pytest.approx(expected)

    @pytest.mark.parametrize("seed", range(10))
    def test_frontier_is_monotone(self, seed):
        rng = random.Random(seed)
        candidates = [
            make_candidate(f"c{i}", rng.randint(1, 500), rng.uniform(0, 20))
            for i in range(15)
        ]
        step = rng.choice([1, 7, 25])

        frontier = build_frontier(candidates, 3, step, 2000 // step, Category.MID)

        finite = frontier.scores[np.isfinite(frontier.scores)]
        assert np.all(np.diff(finite) >= 0)
        # Once feasible, always feasible at higher buckets
        first = int(np.argmax(np.isfinite(frontier.scores)))
        assert np.all(np.isfinite(frontier.scores[first:]))


class TestCombineFrontiers:
    """Test cross-category convolution."""

    def test_combination_picks_best_split(self):
        defenders = [make_candidate("d_star", 9, 9.0, "DEF"), make_candidate("d_cheap", 2, 3.0, "DEF")]
        forwards = [make_candidate("f_star", 9, 10.0, "FWD"), make_candidate("f_cheap", 2, 2.0, "FWD")]
        frontiers = [
            build_frontier(defenders, 1, 1, 12, Category.DEF),
            build_frontier(forwards, 1, 1, 12, Category.FWD),
        ]

        combination = combine_frontiers(frontiers, 12)

        assert combination.score == pytest.approx(13.0)
        chosen = combination.chosen(frontiers)
        assert [c.candidate_id for c in chosen[Category.DEF]] == ["d_cheap"]
        assert [c.candidate_id for c in chosen[Category.FWD]] == ["f_star"]

    def test_ties_resolve_to_lowest_bucket(self):
        keepers = [make_candidate("k1", 2, 5.0, "GK"), make_candidate("k2", 6, 5.0, "GK")]
        frontiers = [build_frontier(keepers, 1, 1, 10, Category.GK)]

        combination = combine_frontiers(frontiers, 10)

        assert combination.cost_bucket == 2
        assert [c.candidate_id for c in combination.chosen(frontiers)[Category.GK]] == ["k1"]

    def test_infeasible_category_fails_combination(self):
        frontiers = [
            build_frontier([make_candidate("k", 1, 1.0, "GK")], 1, 1, 10, Category.GK),
            build_frontier([make_candidate("d", 1, 1.0, "DEF")], 2, 1, 10, Category.DEF),
        ]

        assert combine_frontiers(frontiers, 10) is None

    def test_combined_ceiling_fails_combination(self):
        frontiers = [
            build_frontier([make_candidate("k", 6, 1.0, "GK")], 1, 1, 10, Category.GK),
            build_frontier([make_candidate("d", 6, 1.0, "DEF")], 1, 1, 10, Category.DEF),
        ]

        assert combine_frontiers(frontiers, 10) is None

    def test_no_frontiers_is_empty_team(self):
        combination = combine_frontiers([], 10)

        assert combination.score == 0.0
        assert combination.buckets == []
