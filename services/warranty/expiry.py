"""
Expiry calculation and derived coverage status.

Fixed durations use calendar-month arithmetic; month-end overflow clamps
to the last day of the target month (2025-01-31 + 1 month = 2025-02-28).
Custom end dates are taken as-is, with the duration back-computed in
30-day months for display only.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from enum import Enum

from dateutil.relativedelta import relativedelta

from services.warranty.errors import InvalidWarrantyInput

ALLOWED_DURATIONS: tuple[int, ...] = (6, 12, 18, 24, 36, 60)
EXPIRING_SOON_DAYS = 30


class CoverageStatus(str, Enum):
    """Coverage state derived from the expiry date. Never persisted."""

    ACTIVE = "active"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"


@dataclass(frozen=True)
class ExpiryTerms:
    """Resolved coverage end date."""

    expiry_date: date
    duration_months: int
    custom: bool = False


def add_months(start: date, months: int) -> date:
    return start + relativedelta(months=months)


def approximate_months(start: date, end: date) -> int:
    """Whole 30-day months between two dates, rounding halves up."""
    days = abs((end - start).days)
    return math.floor(days / 30 + 0.5)


def compute_expiry(
    purchase_date: date,
    duration_months: int | None = None,
    custom_expiry_date: date | None = None,
) -> ExpiryTerms:
    """
    Resolve the expiry date from a fixed duration or a custom end date.

    Exactly one of ``duration_months`` and ``custom_expiry_date`` must be
    given.

    Raises:
        InvalidWarrantyInput: Missing or conflicting inputs, a duration
            outside ALLOWED_DURATIONS, or a custom date before purchase.
    """
    if duration_months is not None and custom_expiry_date is not None:
        raise InvalidWarrantyInput(
            "Choose either a warranty duration or a custom expiry date, not both"
        )

    if custom_expiry_date is not None:
        if custom_expiry_date < purchase_date:
            raise InvalidWarrantyInput("Expiry date cannot be before the purchase date")
        return ExpiryTerms(
            expiry_date=custom_expiry_date,
            duration_months=approximate_months(purchase_date, custom_expiry_date),
            custom=True,
        )

    if duration_months is None:
        raise InvalidWarrantyInput("Please select an expiration date")

    if duration_months not in ALLOWED_DURATIONS:
        allowed = ", ".join(str(d) for d in ALLOWED_DURATIONS)
        raise InvalidWarrantyInput(
            f"Warranty duration must be one of {allowed} months, got {duration_months}"
        )

    return ExpiryTerms(
        expiry_date=add_months(purchase_date, duration_months),
        duration_months=duration_months,
    )


def coverage_status(
    expiry_date: date,
    today: date,
    window_days: int = EXPIRING_SOON_DAYS,
) -> CoverageStatus:
    """
    Derive coverage status for ``today``.

    The expiry day itself still counts as active. A warranty ending
    1 to ``window_days`` days from today (inclusive) is expiring soon.
    """
    days_left = (expiry_date - today).days
    if days_left < 0:
        return CoverageStatus.EXPIRED
    if 0 < days_left <= window_days:
        return CoverageStatus.EXPIRING_SOON
    return CoverageStatus.ACTIVE
