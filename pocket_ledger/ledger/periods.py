"""
Calendar Periods

Period membership is decided on the LOCAL calendar: "this month" means
the calendar month the user is living in, not the last 30 days, and not
the UTC month. The same predicate backs the ledger filter and the
statistics totals.
"""

from datetime import date, datetime, timedelta
from typing import Optional, Union

from pocket_ledger.config import get_settings
from pocket_ledger.models.ledger import Period


Moment = Union[datetime, date]


def to_local(moment: Moment) -> datetime:
    """
    Express a moment as a naive local datetime.

    Naive datetimes are taken to be local already. Aware ones are
    converted to the system's local zone.
    """
    if not isinstance(moment, datetime):
        return datetime.combine(moment, datetime.min.time())
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def _first_weekday(first_weekday: Optional[int]) -> int:
    if first_weekday is None:
        return get_settings().ledger.first_weekday
    return first_weekday


def start_of_day(moment: Moment) -> date:
    return to_local(moment).date()


def start_of_week(moment: Moment, first_weekday: Optional[int] = None) -> date:
    """First day of the local week containing `moment` (0=Monday ... 6=Sunday)."""
    day = start_of_day(moment)
    offset = (day.weekday() - _first_weekday(first_weekday)) % 7
    return day - timedelta(days=offset)


def start_of_month(moment: Moment) -> date:
    return start_of_day(moment).replace(day=1)


def period_start(
    moment: Moment,
    period: Period,
    first_weekday: Optional[int] = None,
) -> date:
    """First local day of the period that contains `moment`."""
    if period == Period.DAY:
        return start_of_day(moment)
    if period == Period.WEEK:
        return start_of_week(moment, first_weekday)
    if period == Period.MONTH:
        return start_of_month(moment)
    raise ValueError(f"Unknown period: {period!r}")


def is_in_period(
    moment: Optional[Moment],
    period: Period,
    reference: Moment,
    first_weekday: Optional[int] = None,
) -> bool:
    """
    True when `moment` falls in the same local day / week / month as
    `reference`. A missing moment is in no period.
    """
    if moment is None:
        return False
    first_weekday = _first_weekday(first_weekday)
    return (
        period_start(moment, period, first_weekday)
        == period_start(reference, period, first_weekday)
    )


def shift_month(month: Moment, offset: int) -> date:
    """First day of the month `offset` months away (negative goes back)."""
    first = start_of_month(month)
    index = first.year * 12 + (first.month - 1) + offset
    return date(index // 12, index % 12 + 1, 1)


def recent_months(reference: Moment, count: Optional[int] = None) -> list[date]:
    """
    The `count` months up to and including the reference month,
    oldest first.
    """
    if count is None:
        count = get_settings().ledger.recent_months
    return [shift_month(reference, -offset) for offset in reversed(range(count))]
