"""Optimization module for single-formation and catalog-wide squad selection.

This module provides:
- Greedy fallback fill
- Exact integer programming (PuLP/CBC)
- Approximate budget-bucketed frontier convolution
- Formation selection across the catalog

Usage:
    from squad_picker.domain.services import OptimizationService

    service = OptimizationService()
    result = service.select_formation(candidates, budget=1000)
"""

from .optimization_base import (
    OptimizationBaseMixin,
    PreparedSquad,
    SquadProblem,
    order_by_score,
)
from .greedy_fallback import GreedyFallbackMixin
from .squad_lp import SquadLPMixin
from .frontier import (
    CategoryFrontier,
    FrontierCombination,
    bucket_cost,
    build_frontier,
    combine_frontiers,
    determine_budget_step,
)
from .squad_dp import ApproximateFrontierMixin
from .formation_selection import FormationSelectionMixin

__all__ = [
    "OptimizationBaseMixin",
    "PreparedSquad",
    "SquadProblem",
    "order_by_score",
    "GreedyFallbackMixin",
    "SquadLPMixin",
    "CategoryFrontier",
    "FrontierCombination",
    "bucket_cost",
    "build_frontier",
    "combine_frontiers",
    "determine_budget_step",
    "ApproximateFrontierMixin",
    "FormationSelectionMixin",
]
