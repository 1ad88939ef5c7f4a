"""
Unit Tests for the Redemption Calculator.

These tests verify:
1. amount = min(matured balance, cap, requested)
2. Zero results carry the right reason, checked in order
3. The cap never exceeds 20% of the subtotal, rounded down
4. Quoting never modifies the ledger
"""

from datetime import datetime, timezone

import pytest

from src.domain.entities import CustomerLedger, LedgerEntry, MonthKey, RedemptionReason
from src.domain.exceptions import InvalidRedemptionRequestException
from src.service.credit import (
    CreditSettings,
    compute_redemption,
    has_customer,
    record_order,
    redemption_cap_cents,
)


NOW = datetime(2025, 1, 15, 12, tzinfo=timezone.utc)


def ledger_with_matured(balance_cents: int, customer_id: str = "cust_1") -> CustomerLedger:
    """Ledger holding ``balance_cents`` of December 2024 credits."""
    month = MonthKey(2024, 12)
    return CustomerLedger(
        customer_id=customer_id,
        entries={month: LedgerEntry(month=month, earned_cents=balance_cents)},
    )


@pytest.fixture
def year_ledger() -> CustomerLedger:
    """$6,700 of matured credits as of January 2025."""
    ledger = CustomerLedger(customer_id="cust_1")
    for month in range(1, 7):
        record_order(ledger, f"a{month}", 1_000_000, datetime(2024, month, 15))
    for month in range(7, 12):
        record_order(ledger, f"b{month}", 2_000_000, datetime(2024, month, 15))
    record_order(ledger, "c12", 5_000_000, datetime(2024, 12, 15))
    return ledger


# =============================================================================
# Amount Tests
# =============================================================================

class TestComputeRedemption:

    def test_cap_limits_amount(self, year_ledger):
        result = compute_redemption("cust_1", year_ledger, 2_000_000, NOW)

        assert result.eligible_balance_cents == 670_000
        assert result.cap_cents == 400_000
        assert result.amount_to_redeem_cents == 400_000
        assert result.reason is None
        assert result.redeemable is True

    def test_balance_limits_amount(self, year_ledger):
        result = compute_redemption("cust_1", year_ledger, 10_000_000, NOW)

        assert result.amount_to_redeem_cents == 670_000

    def test_requested_limits_amount(self, year_ledger):
        result = compute_redemption(
            "cust_1", year_ledger, 2_000_000, NOW, requested_cents=1_500
        )

        assert result.amount_to_redeem_cents == 1_500

    def test_quote_does_not_modify_ledger(self, year_ledger):
        before = {m: e.to_dict() for m, e in year_ledger.entries.items()}
        history_len = len(year_ledger.history)

        for _ in range(3):
            compute_redemption("cust_1", year_ledger, 2_000_000, NOW)

        assert {m: e.to_dict() for m, e in year_ledger.entries.items()} == before
        assert len(year_ledger.history) == history_len

    def test_current_month_credits_excluded(self):
        ledger = CustomerLedger(customer_id="cust_1")
        record_order(ledger, "jan", 5_000_000, datetime(2025, 1, 2))

        result = compute_redemption("cust_1", ledger, 2_000_000, NOW)

        assert result.amount_to_redeem_cents == 0
        assert result.reason == RedemptionReason.NO_MATURED_CREDITS


# =============================================================================
# Zero-Reason Tests
# =============================================================================

class TestZeroReasons:

    @pytest.mark.parametrize("customer_id", [None, "", "   ", "0"])
    def test_no_customer(self, year_ledger, customer_id):
        result = compute_redemption(customer_id, year_ledger, 2_000_000, NOW)

        assert result.amount_to_redeem_cents == 0
        assert result.reason == RedemptionReason.NO_CUSTOMER
        assert result.reason.value == "no customer"

    @pytest.mark.parametrize(
        "customer_id, expected",
        [(None, False), ("", False), (" 0 ", False), (0, False), ("42", True), (42, True)],
    )
    def test_guest_rule_shared_with_order_intake(self, customer_id, expected):
        assert has_customer(customer_id) is expected

    def test_no_ledger(self):
        result = compute_redemption("cust_new", None, 2_000_000, NOW)

        assert result.reason == RedemptionReason.NO_MATURED_CREDITS

    def test_zero_value_order(self, year_ledger):
        result = compute_redemption("cust_1", year_ledger, 0, NOW)

        assert result.amount_to_redeem_cents == 0
        assert result.reason == RedemptionReason.ZERO_VALUE_ORDER
        assert result.eligible_balance_cents == 670_000

    def test_no_credits_requested(self, year_ledger):
        result = compute_redemption("cust_1", year_ledger, 2_000_000, NOW, requested_cents=0)

        assert result.reason == RedemptionReason.NO_CREDITS_REQUESTED

    def test_cap_below_one_cent(self, year_ledger):
        # 20% of 4 cents floors to 0
        result = compute_redemption("cust_1", year_ledger, 4, NOW)

        assert result.amount_to_redeem_cents == 0
        assert result.reason == RedemptionReason.BELOW_MINIMUM

    def test_custom_minimum(self, year_ledger):
        settings = CreditSettings(min_redemption_cents=500)

        result = compute_redemption("cust_1", year_ledger, 2_000, NOW, settings=settings)

        assert result.cap_cents == 400
        assert result.reason == RedemptionReason.BELOW_MINIMUM

    def test_no_customer_checked_before_balance(self):
        result = compute_redemption(None, None, 0, NOW)

        assert result.reason == RedemptionReason.NO_CUSTOMER


# =============================================================================
# Input Validation Tests
# =============================================================================

class TestInputValidation:

    @pytest.mark.parametrize("subtotal", [-1, 10.5, "100", True])
    def test_invalid_subtotal(self, year_ledger, subtotal):
        with pytest.raises(InvalidRedemptionRequestException):
            compute_redemption("cust_1", year_ledger, subtotal, NOW)

    def test_negative_requested(self, year_ledger):
        with pytest.raises(InvalidRedemptionRequestException):
            compute_redemption("cust_1", year_ledger, 1_000, NOW, requested_cents=-1)


# =============================================================================
# Cap Property Tests
# =============================================================================

class TestCapProperty:

    @pytest.mark.parametrize("subtotal", [0, 1, 4, 5, 99, 1_001, 123_457, 2_000_000])
    @pytest.mark.parametrize("balance", [1, 250, 10_000, 1_000_000])
    def test_amount_within_bounds(self, subtotal, balance):
        ledger = ledger_with_matured(balance)

        result = compute_redemption("cust_1", ledger, subtotal, NOW)

        assert 0 <= result.amount_to_redeem_cents <= subtotal
        assert result.amount_to_redeem_cents * 5 <= subtotal
        assert result.amount_to_redeem_cents <= result.eligible_balance_cents

    def test_cap_floors(self):
        assert redemption_cap_cents(99) == 19
        assert redemption_cap_cents(100) == 20

    def test_cap_follows_settings(self):
        assert redemption_cap_cents(10_000, CreditSettings(redemption_cap_bps=1000)) == 1_000
