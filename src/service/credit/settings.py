"""
Credit Settings for the Store Credit engine.

This module contains the configurable parameters for credit accrual and
redemption. The tier table is loaded once at process start and is not
mutable at runtime.

Environment variables use the CREDIT_ prefix:
    CREDIT_TIERS_JSON='[{"threshold_minor": 1000000, "rate_basis_points": 200}]'
    CREDIT_REDEMPTION_CAP_BPS=2000
    CREDIT_MIN_REDEMPTION_CENTS=1

Usage:
    from src.service.credit.settings import credit_settings

    # Use default settings (loaded from env)
    tiers = credit_settings.tiers

    # Or create custom settings for testing
    custom = CreditSettings(redemption_cap_bps=1000)
"""

import json
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import BASIS_POINTS_PER_UNIT, Tier


DEFAULT_TIERS_JSON = json.dumps(
    [
        {"threshold_minor": 5_000_000, "rate_basis_points": 400},
        {"threshold_minor": 2_000_000, "rate_basis_points": 350},
        {"threshold_minor": 1_000_000, "rate_basis_points": 200},
        {"threshold_minor": 0, "rate_basis_points": 0},
    ]
)


class CreditSettings(BaseSettings):
    """
    Configurable parameters for credit accrual and redemption.

    All monetary values are in cents.
    All rates are in basis points (10000 = 100%).
    """

    model_config = SettingsConfigDict(
        env_prefix="CREDIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Accrual ===
    tiers_json: str = Field(
        default=DEFAULT_TIERS_JSON,
        description=(
            "Rebate tiers as JSON array of "
            '{"threshold_minor": int, "rate_basis_points": int}, any order'
        ),
    )

    # === Redemption ===
    redemption_cap_bps: int = Field(
        default=2000,
        ge=0,
        le=BASIS_POINTS_PER_UNIT,
        description="Maximum share of the order subtotal payable with credits (20%)",
    )
    min_redemption_cents: int = Field(
        default=1,
        ge=1,
        description="Quotes below this amount are treated as zero",
    )

    @field_validator("tiers_json")
    @classmethod
    def validate_tiers_json(cls, v: str) -> str:
        """Validate that tiers JSON is parseable and well-formed."""
        try:
            tiers = json.loads(v)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {e}")

        if not isinstance(tiers, list) or not tiers:
            raise ValueError("Tiers must be a non-empty list")

        thresholds = set()
        for tier in tiers:
            if not isinstance(tier, dict):
                raise ValueError(
                    "Each tier must be {threshold_minor, rate_basis_points}"
                )
            threshold = tier.get("threshold_minor")
            rate = tier.get("rate_basis_points")
            if not all(isinstance(x, int) and not isinstance(x, bool) for x in (threshold, rate)):
                raise ValueError("All tier values must be integers")
            if threshold < 0:
                raise ValueError(f"threshold_minor cannot be negative: {threshold}")
            if not 0 <= rate <= BASIS_POINTS_PER_UNIT:
                raise ValueError(f"rate_basis_points out of range: {rate}")
            if threshold in thresholds:
                raise ValueError(f"Duplicate threshold_minor: {threshold}")
            thresholds.add(threshold)
        return v

    @property
    def tiers(self) -> List[Tier]:
        """Tiers ordered by threshold, highest first."""
        raw = json.loads(self.tiers_json)
        tiers = [Tier(t["threshold_minor"], t["rate_basis_points"]) for t in raw]
        return sorted(tiers, key=lambda t: t.threshold_cents, reverse=True)


@lru_cache
def get_credit_settings() -> CreditSettings:
    """Get cached credit settings instance."""
    return CreditSettings()


credit_settings = get_credit_settings()
