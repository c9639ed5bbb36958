"""Domain services for squad optimization."""

from .candidate_pool_service import CandidatePoolService
from .optimization_service import OptimizationService

__all__ = [
    "CandidatePoolService",
    "OptimizationService",
]
