import datetime as dt

from django.contrib.humanize.templatetags.humanize import ordinal
from django.utils.dateformat import format

from .exceptions import InvalidDate


def parse_service_date(value: str | dt.date) -> dt.date:
    """Parse a service date key (``M/D/YY``)."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    try:
        return dt.datetime.strptime(str(value).strip(), "%m/%d/%y").date()
    except ValueError:
        raise InvalidDate(value) from None


def service_date_key(value: str | dt.date) -> str:
    """Return the canonical key of a service date (no leading zeros: ``3/2/25``)."""
    date = parse_service_date(value)
    return f"{date.month}/{date.day}/{date:%y}"


def sunday_of_month(date: dt.date) -> int:
    """Return 1 for the first Sunday (or any first seven days) of the month, 2 for the second..."""
    return (date.day - 1) // 7 + 1


def is_sunday(date: dt.date):
    return date.weekday() == 6


def describe_date(value: str | dt.date) -> dict[str, str]:
    """Return the headings shown above the order of worship of a date."""
    date = parse_service_date(value)
    return {
        "formattedDate": f"{format(date, 'F')} {ordinal(date.day)}, {date.year}",
        "sundayInfo": f"{ordinal(sunday_of_month(date))} Sunday of the Month",
    }
