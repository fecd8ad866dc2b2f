"""Helpers to work with ``YYYY-MM`` billing periods."""

from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class BillingPeriod:
    """A calendar month identified by its ``YYYY-MM`` key."""

    period_key: str
    year: int
    month: int
    starts_on: date
    ends_on: date


class BillingPeriodService:
    """Utility helpers to resolve billing periods."""

    @staticmethod
    def parse_period(period_key: str) -> BillingPeriod:
        """Return the period for ``period_key``.

        The key is normalized to the YYYY-MM format. The period boundaries are
        inferred from the key (first and last day of the month).
        """

        if not period_key:
            raise ValueError("period_key is required")

        try:
            year_str, month_str = period_key.strip().split("-", maxsplit=1)
            year = int(year_str)
            month = int(month_str)
        except ValueError as exc:
            raise ValueError("Invalid period key format, expected YYYY-MM") from exc

        if month < 1 or month > 12 or year < 1:
            raise ValueError("Invalid period key format, expected YYYY-MM")

        _, last_day = monthrange(year, month)
        return BillingPeriod(
            period_key=f"{year:04d}-{month:02d}",
            year=year,
            month=month,
            starts_on=date(year, month, 1),
            ends_on=date(year, month, last_day),
        )
