"""Candidate pool service: player tables to validated candidates.

Turns a players DataFrame (one row per player, score precomputed upstream)
into the immutable `Candidate` list the optimizers consume:
- Required columns present and free of missing values (fail fast)
- Position labels mapped through the category aliases
- Injured or suspended players dropped
- Explicit exclusions dropped
"""

from typing import Iterable, List, Optional

import pandas as pd
from loguru import logger

from squad_picker.config import SquadPickerConfig, config
from squad_picker.domain.models import Candidate, Category


class CandidatePoolService:
    """Service for building eligible candidate pools from tabular player data."""

    def __init__(self, settings: Optional[SquadPickerConfig] = None):
        self.settings = settings or config

    def build_pool(
        self,
        players_df: pd.DataFrame,
        score_column: str = "score",
        cost_column: str = "cost",
        id_column: str = "player_id",
        position_column: str = "position",
        excluded_ids: Optional[Iterable] = None,
    ) -> List[Candidate]:
        """Build the eligible candidate pool.

        Optional columns: `name`, `team`, `status` (numeric availability code),
        `is_injured` (bool).

        Args:
            players_df: One row per player
            score_column: Column holding the precomputed score
            cost_column: Column holding the integer cost
            id_column: Column holding the player id
            position_column: Column holding the position label
            excluded_ids: Player ids to drop

        Returns:
            Candidates in input row order

        Raises:
            ValueError: If required columns are missing or contain NaN, a cost
                is not a whole number, a position label is unknown, or an id
                appears twice
        """
        required_cols = [id_column, position_column, cost_column, score_column]
        missing_cols = [col for col in required_cols if col not in players_df.columns]
        if missing_cols:
            raise ValueError(f"Players DataFrame missing required columns: {missing_cols}")

        # Validate no NaN values in critical columns - fail fast
        for col in required_cols:
            nan_count = players_df[col].isna().sum()
            if nan_count > 0:
                raise ValueError(
                    f"Data quality issue: {nan_count} players have missing {col}. "
                    f"Fix upstream data processing - all players must have complete data."
                )

        costs = pd.to_numeric(players_df[cost_column], errors="coerce")
        fractional = costs.isna() | (costs % 1 != 0)
        if fractional.any():
            raise ValueError(
                f"Data quality issue: {int(fractional.sum())} players have a non-integer "
                f"{cost_column}. Costs must be whole numbers in the smallest currency unit."
            )

        duplicated = players_df[id_column].astype(str).duplicated()
        if duplicated.any():
            raise ValueError(
                f"Duplicate player ids: {sorted(players_df.loc[duplicated, id_column].astype(str).unique())}"
            )

        eligible = players_df[self._eligibility_mask(players_df)]
        dropped = len(players_df) - len(eligible)
        if dropped:
            logger.debug(f"Dropped {dropped} injured or suspended players")

        excluded = {str(item) for item in (excluded_ids or [])}
        if excluded:
            before = len(eligible)
            eligible = eligible[~eligible[id_column].astype(str).isin(excluded)]
            logger.debug(f"Excluded {before - len(eligible)} players by id")

        aliases = self.settings.pool.category_aliases
        candidates = []
        for _, row in eligible.iterrows():
            candidates.append(
                Candidate(
                    candidate_id=str(row[id_column]),
                    category=Category.parse(row[position_column], aliases),
                    cost=int(row[cost_column]),
                    score=float(row[score_column]),
                    name=self._optional_text(row, "name"),
                    team=self._optional_text(row, "team"),
                )
            )

        logger.info(
            f"👥 Candidate pool: {len(candidates)} eligible of {len(players_df)} players"
        )
        return candidates

    def _eligibility_mask(self, players_df: pd.DataFrame) -> pd.Series:
        """True for rows whose availability does not rule them out."""
        mask = pd.Series(True, index=players_df.index)
        if "status" in players_df.columns:
            codes = self.settings.pool.unavailable_status_codes
            status = pd.to_numeric(players_df["status"], errors="coerce")
            mask &= ~status.isin(codes)
        if "is_injured" in players_df.columns:
            mask &= ~players_df["is_injured"].fillna(False).astype(bool)
        return mask

    @staticmethod
    def _optional_text(row: pd.Series, column: str) -> Optional[str]:
        if column not in row.index or pd.isna(row[column]):
            return None
        return str(row[column])
