"""Proration and balance helpers used when a prospect becomes a client."""

from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Union

DAYS_PER_BILLING_MONTH = Decimal("30")
CENT = Decimal("0.01")
DEFAULT_BILLING_DAY = 10
MIN_BILLING_DAY = 1
MAX_BILLING_DAY = 28

MONTH_NAMES = (
    "Enero",
    "Febrero",
    "Marzo",
    "Abril",
    "Mayo",
    "Junio",
    "Julio",
    "Agosto",
    "Septiembre",
    "Octubre",
    "Noviembre",
    "Diciembre",
)

DateInput = Union[date, datetime, str]
AmountInput = Union[Decimal, int, float, str]


@dataclass(frozen=True)
class ProrationResult:
    """Outcome of a proration calculation."""

    prorated_amount: Decimal
    days_charged: int
    first_billing_date: date


def to_decimal(value: AmountInput | None) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    # str() keeps floats such as 0.1 from expanding into binary noise.
    return Decimal(str(value))


def to_civil_date(value: DateInput) -> date:
    """Return the UTC calendar date for ``value``.

    A plain ``date`` is already a civil date. Aware datetimes are converted to
    UTC before reading the calendar fields and naive datetimes are assumed to be
    expressed in UTC, so a date-only value never drifts to the previous day.
    """

    if isinstance(value, str):
        raw = value.strip()
        if len(raw) == 10:
            return date.fromisoformat(raw)
        value = datetime.fromisoformat(raw.replace("Z", "+00:00"))

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def _last_day_of_month(year: int, month: int) -> int:
    return monthrange(year, month)[1]


def _next_month(year: int, month: int) -> tuple[int, int]:
    if month == 12:
        return year + 1, 1
    return year, month + 1


def _cutover_day(year: int, month: int, billing_day: int) -> int:
    # Only relevant outside 1-28; every month has those days.
    return min(max(billing_day, 1), _last_day_of_month(year, month))


def round_currency(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_proration(
    installation_date: DateInput,
    billing_day: int,
    monthly_fee: AmountInput,
) -> ProrationResult:
    """Compute the prorated charge owed before the first full billing cycle.

    The daily rate is always ``monthly_fee / 30`` regardless of the actual
    month length. Days are counted from the installation day (inclusive) up to
    the day before the cutover, which starts the first full cycle:

    * installed before the cutover day: cycle starts on ``billing_day`` of the
      same month;
    * installed on the cutover day: nothing is prorated and the cycle starts
      that same day;
    * installed after the cutover day: the rest of the month plus days 1 to
      ``billing_day - 1`` of the following month are charged.
    """

    installed_on = to_civil_date(installation_date)
    install_day = installed_on.day
    year, month = installed_on.year, installed_on.month
    cutover = _cutover_day(year, month, billing_day)

    if install_day < cutover:
        first_billing_date = date(year, month, cutover)
        days_charged = cutover - install_day
    elif install_day == cutover:
        first_billing_date = date(year, month, cutover)
        days_charged = 0
    else:
        next_year, next_month = _next_month(year, month)
        next_cutover = _cutover_day(next_year, next_month, billing_day)
        first_billing_date = date(next_year, next_month, next_cutover)
        days_until_month_end = _last_day_of_month(year, month) - install_day + 1
        days_charged = days_until_month_end + (next_cutover - 1)

    daily_rate_total = to_decimal(monthly_fee) * days_charged / DAYS_PER_BILLING_MONTH
    return ProrationResult(
        prorated_amount=round_currency(daily_rate_total),
        days_charged=days_charged,
        first_billing_date=first_billing_date,
    )


def calculate_initial_balance(
    prorated_amount: AmountInput,
    installation_cost: AmountInput,
    monthly_fee: AmountInput,
    additional_charges: Iterable[AmountInput] = (),
) -> Decimal:
    """Return the balance a client owes right after finalization.

    The first full month is prepaid, so the monthly fee is added on top of the
    prorated partial period.
    """

    extras = sum((to_decimal(amount) for amount in additional_charges), Decimal("0"))
    total = (
        to_decimal(prorated_amount)
        + to_decimal(installation_cost)
        + to_decimal(monthly_fee)
        + extras
    )
    return round_currency(total)


def month_name(month: int) -> str:
    return MONTH_NAMES[month - 1]


def monthly_charge_description(value: date) -> str:
    return f"Mensualidad {month_name(value.month)} {value.year}"


def format_currency(amount: AmountInput) -> str:
    """Format an amount in Mexican pesos with up to two decimals."""

    value = round_currency(to_decimal(amount))
    sign = "-" if value < 0 else ""
    integer_part, _, fraction = f"{abs(value):,.2f}".partition(".")
    fraction = fraction.rstrip("0")
    if fraction:
        return f"{sign}${integer_part}.{fraction}"
    return f"{sign}${integer_part}"
