"""Domain models with strict data contracts."""

from .candidate import CATEGORY_ALIASES, CATEGORY_ORDER, Candidate, Category
from .formation import (
    AUTO_FORMATION,
    FORMATION_CATALOG,
    FORMATION_SHAPES,
    Formation,
    Slot,
    build_formation,
    get_formation,
)
from .solution import (
    FormationRecommendation,
    SelectionOutcome,
    SelectionStats,
    Solution,
    SolverKind,
)

__all__ = [
    "Candidate",
    "Category",
    "CATEGORY_ALIASES",
    "CATEGORY_ORDER",
    "Formation",
    "Slot",
    "AUTO_FORMATION",
    "FORMATION_CATALOG",
    "FORMATION_SHAPES",
    "build_formation",
    "get_formation",
    "Solution",
    "SolverKind",
    "SelectionOutcome",
    "SelectionStats",
    "FormationRecommendation",
]
