"""Tests for expiry calculation and coverage status."""

from datetime import date, timedelta

import pytest

from services.warranty.errors import InvalidWarrantyInput
from services.warranty.expiry import (
    ALLOWED_DURATIONS,
    EXPIRING_SOON_DAYS,
    CoverageStatus,
    add_months,
    approximate_months,
    compute_expiry,
    coverage_status,
)
from services.warranty.models import (
    RecordStatus,
    VerificationStatus,
    WarrantyRecord,
    WarrantyType,
)


class TestComputeExpiry:
    """Tests for compute_expiry."""

    def test_fixed_duration(self) -> None:
        terms = compute_expiry(date(2025, 6, 1), duration_months=12)

        assert terms.expiry_date == date(2026, 6, 1)
        assert terms.duration_months == 12
        assert terms.custom is False

    def test_month_end_clamps(self) -> None:
        """Jan 31 + 1 month lands on the last day of February."""
        assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert add_months(date(2025, 8, 31), 6) == date(2026, 2, 28)

    def test_leap_day_plus_year(self) -> None:
        terms = compute_expiry(date(2024, 2, 29), duration_months=12)
        assert terms.expiry_date == date(2025, 2, 28)

    @pytest.mark.parametrize("months", ALLOWED_DURATIONS)
    def test_expiry_never_before_purchase(self, months: int) -> None:
        purchase = date(2025, 1, 31)
        assert compute_expiry(purchase, duration_months=months).expiry_date >= purchase

    def test_custom_date(self) -> None:
        terms = compute_expiry(date(2025, 1, 1), custom_expiry_date=date(2025, 4, 1))

        assert terms.expiry_date == date(2025, 4, 1)
        assert terms.duration_months == 3
        assert terms.custom is True

    def test_custom_date_same_day(self) -> None:
        terms = compute_expiry(date(2025, 1, 1), custom_expiry_date=date(2025, 1, 1))
        assert terms.duration_months == 0

    def test_custom_date_before_purchase(self) -> None:
        with pytest.raises(InvalidWarrantyInput, match="before the purchase date"):
            compute_expiry(date(2025, 5, 1), custom_expiry_date=date(2025, 4, 30))

    def test_missing_inputs(self) -> None:
        with pytest.raises(InvalidWarrantyInput, match="expiration date"):
            compute_expiry(date(2025, 5, 1))

    def test_both_inputs(self) -> None:
        with pytest.raises(InvalidWarrantyInput, match="not both"):
            compute_expiry(
                date(2025, 5, 1),
                duration_months=12,
                custom_expiry_date=date(2026, 5, 1),
            )

    @pytest.mark.parametrize("months", [0, 1, 13, 48, -6])
    def test_unsupported_duration(self, months: int) -> None:
        with pytest.raises(InvalidWarrantyInput, match="must be one of"):
            compute_expiry(date(2025, 5, 1), duration_months=months)


class TestApproximateMonths:
    """Tests for the display-only duration approximation."""

    def test_rounds_to_nearest(self) -> None:
        assert approximate_months(date(2025, 1, 1), date(2025, 1, 15)) == 0
        assert approximate_months(date(2025, 1, 1), date(2025, 1, 16)) == 1
        assert approximate_months(date(2025, 1, 1), date(2026, 1, 1)) == 12

    def test_half_rounds_up(self) -> None:
        # 45 days is exactly 1.5 months
        assert approximate_months(date(2025, 1, 1), date(2025, 2, 15)) == 2


class TestCoverageStatus:
    """Tests for derived coverage status boundaries."""

    today = date(2025, 6, 15)

    def test_expiry_today_is_active(self) -> None:
        assert coverage_status(self.today, self.today) == CoverageStatus.ACTIVE

    def test_expired_yesterday(self) -> None:
        assert coverage_status(self.today - timedelta(days=1), self.today) == CoverageStatus.EXPIRED

    def test_tomorrow_is_expiring_soon(self) -> None:
        expiry = self.today + timedelta(days=1)
        assert coverage_status(expiry, self.today) == CoverageStatus.EXPIRING_SOON

    def test_thirty_days_is_expiring_soon(self) -> None:
        expiry = self.today + timedelta(days=30)
        assert coverage_status(expiry, self.today) == CoverageStatus.EXPIRING_SOON

    def test_thirty_one_days_is_active(self) -> None:
        expiry = self.today + timedelta(days=31)
        assert coverage_status(expiry, self.today) == CoverageStatus.ACTIVE

    def test_custom_window(self) -> None:
        expiry = self.today + timedelta(days=10)
        assert coverage_status(expiry, self.today, window_days=7) == CoverageStatus.ACTIVE

    @pytest.mark.parametrize(
        ("days_left", "expected"),
        [
            (EXPIRING_SOON_DAYS, CoverageStatus.EXPIRING_SOON),
            (EXPIRING_SOON_DAYS + 1, CoverageStatus.ACTIVE),
        ],
    )
    def test_record_uses_default_window(
        self, days_left: int, expected: CoverageStatus
    ) -> None:
        record = WarrantyRecord(
            id="rec-1",
            code="CB-ABCD-EFGH",
            product_model="Galaxy S24",
            brand="Samsung",
            serial_number="SN-1",
            purchase_date=date(2024, 6, 15),
            expiry_date=self.today + timedelta(days=days_left),
            duration_months=12,
            type=WarrantyType.ISSUED,
            status=RecordStatus.ACTIVE,
            verification_status=VerificationStatus.VERIFIED,
        )

        assert record.coverage_status(self.today) == expected
