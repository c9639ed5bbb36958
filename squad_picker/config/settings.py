"""
Global Configuration System for Squad Picker

Centralized configuration management for solver tuning values.
Provides type-safe configuration with validation and environment variable support.
"""

import os
from typing import Dict, List, Optional
from pathlib import Path
from pydantic import BaseModel, Field, field_validator

VALID_SOLVERS = ["exact", "approximate", "greedy"]


class OptimizationConfig(BaseModel):
    """Solver Selection and Exact Optimizer Configuration"""

    default_solver: str = Field(
        default="exact",
        description="Solver used when the caller does not pick one: 'exact', 'approximate' or 'greedy'",
    )

    @field_validator("default_solver")
    @classmethod
    def validate_default_solver(cls, v):
        if v not in VALID_SOLVERS:
            raise ValueError(f"default_solver must be one of {VALID_SOLVERS}")
        return v

    # Exact (integer programming) solver
    exact_time_limit_seconds: Optional[float] = Field(
        default=30.0,
        description="CBC time limit per formation. None = no limit. A feasible incumbent is accepted when the limit is hit.",
        gt=0.0,
    )
    exact_solver_msg: bool = Field(
        default=False, description="Echo CBC solver output to stdout"
    )
    integrality_tolerance: float = Field(
        default=1e-6,
        description="Maximum distance from 0/1 for a decision variable to count as integral",
        gt=0.0,
        le=0.1,
    )


class FrontierConfig(BaseModel):
    """Approximate Frontier (budget-bucketed DP) Configuration"""

    max_buckets: int = Field(
        default=1000,
        description="Upper bound on cost buckets. Budgets up to this value are solved with step 1 (exact DP).",
        ge=10,
        le=100_000,
    )
    fixed_step: Optional[int] = Field(
        default=None,
        description="Force a bucket size instead of deriving it from the budget",
        ge=1,
    )
    upgrade_pass_enabled: bool = Field(
        default=True,
        description="Spend leftover budget with a single greedy upgrade pass after slot assignment",
    )


class SelectorConfig(BaseModel):
    """Formation Selector Configuration"""

    parallel: bool = Field(
        default=False,
        description="Evaluate formations on a thread pool instead of sequentially",
    )
    max_workers: int = Field(
        default=4, description="Thread pool size for parallel evaluation", ge=1, le=64
    )


class PoolConfig(BaseModel):
    """Candidate Pool Builder Configuration"""

    unavailable_status_codes: List[int] = Field(
        default_factory=lambda: [1, 8, 16],
        description="Status codes that make a player ineligible (1 injured, 8 red card, 16 second yellow)",
    )
    category_aliases: Dict[str, str] = Field(
        default_factory=dict,
        description="Extra position label -> category mappings (e.g. {'Sweeper': 'DEF'})",
    )


class SquadPickerConfig(BaseModel):
    """Master Squad Picker Configuration Container"""

    optimization: OptimizationConfig = Field(
        default_factory=OptimizationConfig, description="Solver Configuration"
    )
    frontier: FrontierConfig = Field(
        default_factory=FrontierConfig,
        description="Approximate Frontier Optimizer Configuration",
    )
    selector: SelectorConfig = Field(
        default_factory=SelectorConfig, description="Formation Selector Configuration"
    )
    pool: PoolConfig = Field(
        default_factory=PoolConfig, description="Candidate Pool Configuration"
    )


def load_config(
    config_path: Optional[Path] = None, config_data: Optional[Dict] = None
) -> SquadPickerConfig:
    """
    Load configuration with environment variable overrides and optional config file

    Args:
        config_path: Optional path to JSON configuration file
        config_data: Optional dictionary of configuration data

    Environment variables can override any config value using the pattern:
    SQUAD_{SECTION}_{FIELD} = value

    Example: SQUAD_FRONTIER_MAX_BUCKETS=500
    """
    config_dict = {}

    # Load from file if provided
    if config_path and config_path.exists():
        import json

        try:
            with open(config_path, "r") as f:
                if config_path.suffix.lower() == ".json":
                    config_dict = json.load(f)
        except Exception as e:
            print(f"⚠️ Warning: Failed to load config file {config_path}: {e}")

    # Override with provided config data
    if config_data:
        for section, fields in config_data.items():
            if isinstance(fields, dict):
                config_dict.setdefault(section, {}).update(fields)
            else:
                config_dict[section] = fields

    # Environment variable overrides
    env_overrides = {}
    for env_var, value in os.environ.items():
        if env_var.startswith("SQUAD_"):
            # Parse SQUAD_SECTION_FIELD pattern
            parts = env_var.split("_")[1:]
            if len(parts) >= 2:
                section = parts[0].lower()
                field = "_".join(parts[1:]).lower()

                if section not in env_overrides:
                    env_overrides[section] = {}

                if value.lower() in ("true", "false"):
                    env_overrides[section][field] = value.lower() == "true"
                elif value.isdigit() or (
                    value.startswith("-") and value[1:].isdigit()
                ):
                    env_overrides[section][field] = int(value)
                elif "." in value:
                    try:
                        env_overrides[section][field] = float(value)
                    except ValueError:
                        env_overrides[section][field] = value
                else:
                    env_overrides[section][field] = value

    # Merge environment overrides into config_dict
    for section, fields in env_overrides.items():
        if section not in config_dict:
            config_dict[section] = {}
        config_dict[section].update(fields)

    # Create and validate the configuration
    try:
        return SquadPickerConfig(**config_dict)
    except Exception as e:
        print(f"⚠️ Warning: Configuration validation failed: {e}")
        print("Using default configuration...")
        return SquadPickerConfig()


# Global configuration instance
config = load_config()
