"""Budget-bucketed score frontiers for the approximate squad optimizer.

Pure numpy functions, no solver state:
- Budget discretization (adaptive bucket size, ceiling-rounded costs)
- Per-category frontier: best score for exactly k picks at each cost bucket
- Convolution of category frontiers into a whole-team optimum

Candidate sets are never copied per bucket. Each frontier keeps a boolean
take-table plus the exact-cost bucket backing every entry, and rebuilds a set
by backtracking when asked.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from squad_picker.domain.models import Candidate, Category

NEG_INF = -np.inf


def determine_budget_step(
    budget: int, max_buckets: int, fixed_step: Optional[int] = None
) -> int:
    """Bucket size for a budget.

    Budgets up to `max_buckets` are solved at full resolution (step 1); larger
    budgets get the smallest step that keeps the bucket count within
    `max_buckets`.

    Args:
        budget: Budget to discretize
        max_buckets: Upper bound on the number of cost buckets
        fixed_step: Explicit step, bypassing the adaptive choice

    Returns:
        Positive bucket size
    """
    if fixed_step is not None:
        if fixed_step < 1:
            raise ValueError(f"Budget step must be positive, got {fixed_step}")
        return fixed_step
    if budget <= max_buckets:
        return 1
    return -(-budget // max_buckets)


def bucket_cost(cost: int, step: int) -> int:
    """Cost in buckets, rounded up so bucketed totals never understate spend."""
    return -(-cost // step)


@dataclass
class CategoryFrontier:
    """Best score for exactly `quota` candidates at every cost bucket.

    `scores[b]` is the best score whose bucketed cost is at most `b` (-inf when
    no such set exists). `sources[b]` is the exact-cost bucket whose candidate
    set achieves it, or -1.
    """

    category: Category
    quota: int
    candidates: List[Candidate]
    bucket_costs: np.ndarray
    scores: np.ndarray
    sources: np.ndarray
    take: np.ndarray

    @property
    def max_buckets(self) -> int:
        return len(self.scores) - 1

    @property
    def is_feasible(self) -> bool:
        """True if at least one bucket holds a complete candidate set."""
        return bool(np.isfinite(self.scores).any())

    def members(self, bucket: int) -> List[Candidate]:
        """Rebuild the candidate set behind a frontier entry.

        Walks the take-table backwards: candidate i was taken at (count, cost)
        exactly when its update improved that cell, so the predecessor cell is
        (count - 1, cost - bucket_costs[i]) in the table before candidate i.
        """
        source = int(self.sources[bucket])
        if source < 0:
            return []

        chosen = []
        count, cost = self.quota, source
        for index in range(len(self.candidates) - 1, -1, -1):
            if count == 0:
                break
            if self.take[index, count, cost]:
                chosen.append(self.candidates[index])
                cost -= int(self.bucket_costs[index])
                count -= 1
        return chosen


def build_frontier(
    candidates: List[Candidate],
    quota: int,
    step: int,
    max_buckets: int,
    category: Category,
) -> CategoryFrontier:
    """Exact-count 0/1 knapsack over one category, projected and monotonized.

    Args:
        candidates: Category candidates (any order; kept for reconstruction)
        quota: Number of candidates the category must supply
        step: Bucket size
        max_buckets: Highest cost bucket to track
        category: Category the frontier belongs to

    Returns:
        CategoryFrontier with a monotone non-decreasing score array
    """
    width = max_buckets + 1
    costs = np.array(
        [bucket_cost(c.cost, step) for c in candidates], dtype=np.int64
    )

    # table[count, bucket] = best score using exactly `count` picks at exactly `bucket`
    table = np.full((quota + 1, width), NEG_INF)
    table[0, 0] = 0.0
    take = np.zeros((len(candidates), quota + 1, width), dtype=bool)

    for index, candidate in enumerate(candidates):
        weight = int(costs[index])
        if weight > max_buckets:
            continue
        previous = table.copy()
        for count in range(1, min(quota, index + 1) + 1):
            with_candidate = previous[count - 1, : width - weight] + candidate.score
            improved = with_candidate > previous[count, weight:]
            if not improved.any():
                continue
            table[count, weight:][improved] = with_candidate[improved]
            take[index, count, weight:][improved] = True

    scores = table[quota].copy()
    sources = np.where(np.isfinite(scores), np.arange(width), -1)

    # Carry the best entry so far forward: budget b can always afford a set
    # whose bucketed cost is below b
    best_score = NEG_INF
    best_source = -1
    for bucket in range(width):
        if scores[bucket] > best_score:
            best_score = scores[bucket]
            best_source = sources[bucket]
        elif scores[bucket] < best_score:
            scores[bucket] = best_score
            sources[bucket] = best_source

    return CategoryFrontier(
        category=category,
        quota=quota,
        candidates=list(candidates),
        bucket_costs=costs,
        scores=scores,
        sources=sources,
        take=take,
    )


@dataclass
class FrontierCombination:
    """Best whole-team combination of category frontiers."""

    score: float
    cost_bucket: int
    buckets: List[int]

    def chosen(
        self, frontiers: List[CategoryFrontier]
    ) -> Dict[Category, List[Candidate]]:
        """Category -> candidate set for the winning combination."""
        return {
            frontier.category: frontier.members(bucket)
            for frontier, bucket in zip(frontiers, self.buckets)
        }


def combine_frontiers(
    frontiers: List[CategoryFrontier], max_buckets: int
) -> Optional[FrontierCombination]:
    """Convolve category frontiers under a shared bucket ceiling.

    Keeps, for every combined bucket, the strictly best cumulative score and a
    back-pointer to the (previous bucket, frontier bucket) that produced it.

    Returns:
        Highest-scoring combination (lowest bucket on ties), or None when any
        category has no feasible entry within the ceiling
    """
    width = max_buckets + 1
    current = np.full(width, NEG_INF)
    current[0] = 0.0
    back_spent: List[np.ndarray] = []
    back_bucket: List[np.ndarray] = []

    for frontier in frontiers:
        if not frontier.is_feasible:
            return None

        valid = np.isfinite(frontier.scores)
        combined = np.full(width, NEG_INF)
        from_spent = np.full(width, -1, dtype=np.int64)
        from_bucket = np.full(width, -1, dtype=np.int64)

        for spent in np.flatnonzero(np.isfinite(current)):
            spent = int(spent)
            span = width - spent
            totals = current[spent] + frontier.scores[:span]
            better = valid[:span] & (totals > combined[spent:])
            if not better.any():
                continue
            combined[spent:][better] = totals[better]
            from_spent[spent:][better] = spent
            from_bucket[spent:][better] = np.flatnonzero(better)

        if not np.isfinite(combined).any():
            return None

        back_spent.append(from_spent)
        back_bucket.append(from_bucket)
        current = combined

    best_cost = int(np.argmax(current))
    buckets = [0] * len(frontiers)
    cost = best_cost
    for stage in range(len(frontiers) - 1, -1, -1):
        buckets[stage] = int(back_bucket[stage][cost])
        cost = int(back_spent[stage][cost])

    return FrontierCombination(
        score=float(current[best_cost]), cost_bucket=best_cost, buckets=buckets
    )
