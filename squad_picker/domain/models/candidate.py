"""Candidate domain model with strict validation."""

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Category(str, Enum):
    """Position categories a slot can require."""

    GK = "GK"
    DEF = "DEF"
    MID = "MID"
    FWD = "FWD"

    @classmethod
    def parse(
        cls, label: str, extra_aliases: Optional[Dict[str, str]] = None
    ) -> "Category":
        """Map a position label (any supported alias) to a Category.

        Args:
            label: Position label such as 'GK', 'GKP', 'Keeper', 'ABW'
            extra_aliases: Additional label -> category name mappings

        Raises:
            ValueError: If the label is not a known category alias
        """
        if isinstance(label, Category):
            return label
        key = str(label).strip().upper()
        aliases = dict(CATEGORY_ALIASES)
        if extra_aliases:
            aliases.update({k.upper(): v.upper() for k, v in extra_aliases.items()})
        if key in aliases:
            return cls(aliases[key])
        raise ValueError(f"Unknown position category: {label!r}")


# Upstream data sources use different labels for the same position
CATEGORY_ALIASES: Dict[str, str] = {
    "GK": "GK",
    "GKP": "GK",
    "KEEPER": "GK",
    "GOALKEEPER": "GK",
    "TW": "GK",
    "DEF": "DEF",
    "DEFENDER": "DEF",
    "ABW": "DEF",
    "MID": "MID",
    "MIDFIELDER": "MID",
    "MF": "MID",
    "FWD": "FWD",
    "FORWARD": "FWD",
    "ANG": "FWD",
}

CATEGORY_ORDER = [Category.GK, Category.DEF, Category.MID, Category.FWD]


class Candidate(BaseModel):
    """
    An eligible player that can be placed in a slot.

    Candidates are immutable inputs: solvers select subsets, never modify them.
    """

    model_config = ConfigDict(frozen=True)

    candidate_id: str = Field(
        ..., min_length=1, description="Opaque identifier, unique within a pool"
    )
    category: Category = Field(..., description="Position category")
    cost: int = Field(..., ge=0, description="Price in the league's monetary unit")
    score: float = Field(
        ..., allow_inf_nan=False, description="Precomputed desirability (may be <= 0)"
    )
    name: Optional[str] = Field(None, max_length=100, description="Display name")
    team: Optional[str] = Field(None, description="Club the player belongs to")

    @field_validator("category", mode="before")
    @classmethod
    def parse_category(cls, v):
        """Accept any known position alias."""
        return Category.parse(v)

    @field_validator("candidate_id", mode="before")
    @classmethod
    def coerce_candidate_id(cls, v):
        """Upstream ids may be numeric; keep them opaque strings."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @property
    def display_name(self) -> str:
        """Name for display, falling back to the id."""
        return self.name or self.candidate_id
