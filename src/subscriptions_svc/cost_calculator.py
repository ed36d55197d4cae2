import datetime
import logging
from typing import Any, Iterable, Iterator, NamedTuple, Optional, Tuple

# Open-ended subscriptions are billed up to this many years past "now".
OPEN_ENDED_HORIZON_YEARS = 10

MONTH_FORMAT = "%m-%Y"
_ACCEPTED_FORMATS = (MONTH_FORMAT, "%Y-%m-%d")


class CostTotal(NamedTuple):
    total: int
    skipped: int


def parse_month(value: Any) -> datetime.date:
    """
    Normalize a date-like value to the first day of its month.

    Accepts ``datetime.date`` / ``datetime.datetime`` objects and strings in
    ``MM-YYYY`` or ``YYYY-MM-DD`` form.

    :raises ValueError: if the value cannot be interpreted as a month.
    """
    if isinstance(value, datetime.date):
        return datetime.date(value.year, value.month, 1)
    if isinstance(value, str):
        text = value.strip()
        for fmt in _ACCEPTED_FORMATS:
            try:
                parsed = datetime.datetime.strptime(text, fmt)
            except ValueError:
                continue
            return datetime.date(parsed.year, parsed.month, 1)
        raise ValueError(f"Invalid month value {value!r}, expected MM-YYYY or YYYY-MM-DD")
    raise ValueError(f"Invalid month value {value!r}")


def format_month(value: datetime.date) -> str:
    return value.strftime(MONTH_FORMAT)


# Last month representable by datetime.date.
MAX_MONTH = datetime.date(datetime.MAXYEAR, 12, 1)


def add_months(month: datetime.date, count: int) -> datetime.date:
    index = month.year * 12 + (month.month - 1) + count
    return datetime.date(index // 12, index % 12 + 1, 1)


def iter_months(start: datetime.date, end: datetime.date) -> Iterator[datetime.date]:
    """Yield the first day of every month from start to end, both inclusive."""
    current = parse_month(start)
    last = parse_month(end)
    while current <= last:
        yield current
        if current == last:
            break
        current = add_months(current, 1)


def open_ended_ceiling(now: Optional[datetime.date] = None, horizon_years: int = OPEN_ENDED_HORIZON_YEARS) -> datetime.date:
    """Month up to which open-ended subscriptions are billed, capped at MAX_MONTH."""
    today = parse_month(now or datetime.date.today())
    remaining = (MAX_MONTH.year - today.year) * 12 + (MAX_MONTH.month - today.month)
    return add_months(today, min(horizon_years * 12, remaining))


def active_range(subscription: Any, ceiling: datetime.date) -> Tuple[datetime.date, datetime.date]:
    """
    First and last billed month of a subscription.

    :raises ValueError: if a stored date cannot be parsed.
    """
    start = parse_month(subscription.start_date)
    end = ceiling if subscription.end_date is None else parse_month(subscription.end_date)
    return start, end


def total_cost(
    subscriptions: Iterable[Any],
    now: Optional[datetime.date] = None,
    horizon_years: int = OPEN_ENDED_HORIZON_YEARS,
) -> CostTotal:
    """
    Sum the monthly charges of every subscription over its active months.

    Overlapping subscriptions are not deduplicated. Records whose dates cannot
    be parsed are logged and skipped; their count is returned alongside the
    total.

    :param subscriptions: objects exposing ``price``, ``start_date`` and ``end_date``.
    :param now: reference date for the open-ended ceiling, defaults to today.
    :param horizon_years: how far past ``now`` open-ended subscriptions are billed.
    :return: CostTotal(total, skipped)
    """
    ceiling = open_ended_ceiling(now, horizon_years)
    total = 0
    skipped = 0
    for subscription in subscriptions:
        try:
            start, end = active_range(subscription, ceiling)
        except ValueError as e:
            skipped += 1
            logging.error(f"Skipping subscription {getattr(subscription, 'id', None)} in cost calculation: {e}")
            continue
        for _ in iter_months(start, end):
            total += subscription.price
    if skipped:
        logging.warning(f"Cost calculation skipped {skipped} subscription(s) with unparsable dates")
    return CostTotal(total=total, skipped=skipped)
