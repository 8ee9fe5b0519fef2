"""Operational calendar.

Collection runs in Monday-Saturday cycles. A cycle that straddles two months
belongs to the month holding most of its six working days; on a 3-3 split it
belongs to the month of its Monday.
"""

from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from routefin.domain.errors import ValidationError, invalid_month, invalid_year

WORKING_DAYS_PER_WEEK = 6

MONTH_LABELS = (
    "ENERO",
    "FEBRERO",
    "MARZO",
    "ABRIL",
    "MAYO",
    "JUNIO",
    "JULIO",
    "AGOSTO",
    "SEPTIEMBRE",
    "OCTUBRE",
    "NOVIEMBRE",
    "DICIEMBRE",
)


def _validate_month(month: int) -> None:
    if not 1 <= month <= 12:
        raise ValidationError(invalid_month(month))


def validate_year(year: int) -> None:
    """Raise ValidationError unless the year has four digits."""
    if not 1000 <= year <= 9999:
        raise ValidationError(invalid_year(year))


def month_key(month: int) -> str:
    """Return the zero-padded key ("01".."12") used in reports."""
    _validate_month(month)
    return f"{month:02d}"


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last calendar day of a month.

    Args:
        year: Four-digit year
        month: Month number, 1-indexed

    Returns:
        Tuple of (first_day, last_day), both inclusive

    Raises:
        ValidationError: If month is not between 1 and 12
    """
    _validate_month(month)
    first_day = date(year, month, 1)
    last_day = first_day + relativedelta(months=1) - timedelta(days=1)
    return first_day, last_day


def week_start(day: date) -> date:
    """Return the Monday on or before a date."""
    return day - timedelta(days=day.weekday())


def working_days_in_month(monday: date, month: int) -> int:
    """Count the Monday-Saturday days of a week that fall in a month."""
    return sum(
        1
        for offset in range(WORKING_DAYS_PER_WEEK)
        if (monday + timedelta(days=offset)).month == month
    )


def operational_weeks(year: int, month: int) -> int:
    """Count the operational weeks attributed to a month.

    Args:
        year: Four-digit year
        month: Month number, 1-indexed

    Returns:
        Number of Monday-Saturday cycles that belong to the month

    Raises:
        ValidationError: If month is not between 1 and 12
    """
    first_day, last_day = month_bounds(year, month)

    count = 0
    monday = week_start(first_day)
    while monday <= last_day:
        days_in_month = working_days_in_month(monday, month)
        if days_in_month > 3 or (days_in_month == 3 and monday.month == month):
            count += 1
        monday += timedelta(days=7)

    return count
