"""
Unit Tests for tier lookup, credit rounding, money parsing and settings.

Test Categories:
- test_tier_*: Threshold lookup at and around each boundary
- test_credit_*: Half-up rounding of per-order credits
- test_to_cents_* / test_format_*: Major-unit parsing and formatting
- test_settings_*: Tier table validation
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from src.domain.exceptions import InvalidOrderAmountException
from src.service.credit import (
    CreditSettings,
    Tier,
    calculate_credit_cents,
    format_cents,
    rebate_rate_bps,
    tier_for_revenue,
    to_cents,
)
from src.service.credit.tiers import NO_REBATE_TIER


# =============================================================================
# Tier Lookup Tests
# =============================================================================

class TestTierLookup:

    @pytest.mark.parametrize(
        "revenue_cents,expected_bps",
        [
            (0, 0),
            (999_999, 0),
            (1_000_000, 200),
            (1_999_999, 200),
            (2_000_000, 350),
            (4_999_999, 350),
            (5_000_000, 400),
            (50_000_000, 400),
        ],
    )
    def test_tier_boundaries(self, revenue_cents, expected_bps):
        """Thresholds are inclusive: exactly $10,000 earns 2%."""
        assert rebate_rate_bps(revenue_cents) == expected_bps

    def test_tier_unordered_table_is_sorted(self):
        settings = CreditSettings(
            tiers_json='[{"threshold_minor": 0, "rate_basis_points": 0},'
            ' {"threshold_minor": 500, "rate_basis_points": 100},'
            ' {"threshold_minor": 100, "rate_basis_points": 50}]'
        )

        assert [t.threshold_cents for t in settings.tiers] == [500, 100, 0]
        assert tier_for_revenue(300, settings).rate_bps == 50

    def test_tier_below_lowest_threshold_is_zero(self):
        settings = CreditSettings(
            tiers_json='[{"threshold_minor": 1000, "rate_basis_points": 100}]'
        )

        assert tier_for_revenue(999, settings) == NO_REBATE_TIER
        assert tier_for_revenue(1000, settings).rate_bps == 100

    def test_tier_labels(self):
        assert Tier(2_000_000, 350).percent_label == "3.50%"
        assert Tier(1_000_000, 200).percent_label == "2.00%"


# =============================================================================
# Credit Rounding Tests
# =============================================================================

class TestCreditRounding:

    def test_credit_exact(self):
        assert calculate_credit_cents(1_000_000, 200) == 20_000

    def test_credit_rounds_half_up(self):
        # 2% of $0.25 is 0.5 cents
        assert calculate_credit_cents(25, 200) == 1
        # 2% of $0.24 is 0.48 cents
        assert calculate_credit_cents(24, 200) == 0

    def test_credit_zero_order(self):
        assert calculate_credit_cents(0, 400) == 0

    def test_credit_zero_rate(self):
        assert calculate_credit_cents(999_999, 0) == 0


# =============================================================================
# Money Tests
# =============================================================================

class TestMoney:

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("12000.00", 1_200_000),
            ("199.65", 19_965),
            ("0.005", 1),
            ("0.004", 0),
            (10, 1000),
            (Decimal("1.10"), 110),
            ("  5.5 ", 550),
        ],
    )
    def test_to_cents(self, value, expected):
        assert to_cents(value) == expected

    @pytest.mark.parametrize(
        "value",
        ["abc", "", "-1.00", "NaN", "Infinity", None, True, "100000000000000000.00"],
    )
    def test_to_cents_rejects_invalid(self, value):
        with pytest.raises(InvalidOrderAmountException) as exc_info:
            to_cents(value)

        assert exc_info.value.code == "INVALID_ORDER_AMOUNT"

    def test_format_cents(self):
        assert format_cents(1_000_050) == "10000.50"
        assert format_cents(5) == "0.05"


# =============================================================================
# Settings Validation Tests
# =============================================================================

class TestSettingsValidation:

    def test_settings_defaults(self):
        settings = CreditSettings()

        assert settings.redemption_cap_bps == 2000
        assert settings.min_redemption_cents == 1
        assert [(t.threshold_cents, t.rate_bps) for t in settings.tiers] == [
            (5_000_000, 400),
            (2_000_000, 350),
            (1_000_000, 200),
            (0, 0),
        ]

    @pytest.mark.parametrize(
        "tiers_json",
        [
            "not json",
            "[]",
            '{"threshold_minor": 0}',
            '[{"threshold_minor": -1, "rate_basis_points": 100}]',
            '[{"threshold_minor": 0, "rate_basis_points": 10001}]',
            '[{"threshold_minor": 0, "rate_basis_points": 1.5}]',
            '[{"threshold_minor": 0, "rate_basis_points": 1},'
            ' {"threshold_minor": 0, "rate_basis_points": 2}]',
        ],
    )
    def test_settings_rejects_bad_tiers(self, tiers_json):
        with pytest.raises(ValidationError):
            CreditSettings(tiers_json=tiers_json)

    def test_settings_rejects_cap_over_100_percent(self):
        with pytest.raises(ValidationError):
            CreditSettings(redemption_cap_bps=10_001)

    def test_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("CREDIT_REDEMPTION_CAP_BPS", "1000")

        assert CreditSettings().redemption_cap_bps == 1000
