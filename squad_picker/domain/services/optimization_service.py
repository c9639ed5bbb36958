"""Optimization service for budget-constrained squad selection.

This service exposes the squad optimization algorithms:
- Greedy fill (fast, feasible, not optimal)
- Exact 0/1 integer programming with greedy fallback
- Approximate frontier convolution for large budgets
- Formation selection and formation recommendations

Optimization Methods:
- Integer Programming (exact): Optimal, deterministic (default)
- Frontier DP (approximate): Bounded loss, predictable runtime, no solver binary

This is a thin facade that composes all optimization mixins.
"""

from typing import Optional

from squad_picker.config import SquadPickerConfig, config

from .optimization import FormationSelectionMixin


class OptimizationService(FormationSelectionMixin):
    """Service for squad optimization and formation selection.

    This class composes all optimization functionality through mixins:
    - OptimizationBaseMixin: Shared utilities (inherited via other mixins)
    - GreedyFallbackMixin: Cheapest-fill solver (inherited via SquadLPMixin)
    - SquadLPMixin: Exact integer programming
    - ApproximateFrontierMixin: Bucketed frontier convolution
    - FormationSelectionMixin: Solver dispatch and catalog-wide selection
    """

    def __init__(self, settings: Optional[SquadPickerConfig] = None):
        """Initialize optimization service.

        Args:
            settings: Optional configuration override (defaults to the global config)
        """
        self.settings = settings or config
