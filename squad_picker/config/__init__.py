"""
Squad Picker Configuration Module

Provides centralized configuration management for the optimization core.
Import the global config instance to access all configuration values.

Usage:
    from squad_picker.config import config

    # Access solver configuration
    solver = config.optimization.default_solver

    # Access frontier discretization configuration
    max_buckets = config.frontier.max_buckets
"""

from .settings import (
    SquadPickerConfig,
    OptimizationConfig,
    FrontierConfig,
    SelectorConfig,
    PoolConfig,
    VALID_SOLVERS,
    config,
    load_config,
)

__all__ = [
    "SquadPickerConfig",
    "OptimizationConfig",
    "FrontierConfig",
    "SelectorConfig",
    "PoolConfig",
    "VALID_SOLVERS",
    "config",
    "load_config",
]
