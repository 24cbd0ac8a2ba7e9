"""
Jalali (Persian) calendar helpers.

Production records and invoices carry their date as a Jalali string in the
form ``YYYY/MM/DD``. Zero padding is significant: the dashboard compares these
strings lexicographically to build its day/week/month windows.
"""
from datetime import datetime, timedelta
from typing import Optional
import os

import jdatetime
import pytz
from dotenv import load_dotenv

load_dotenv()

LOCAL_TZ = pytz.timezone(os.getenv("APP_TIMEZONE", "Asia/Tehran"))

PERSIAN_DIGITS = "۰۱۲۳۴۵۶۷۸۹"
_TO_PERSIAN = str.maketrans("0123456789", PERSIAN_DIGITS)
_TO_LATIN = str.maketrans(PERSIAN_DIGITS, "0123456789")


def now_local() -> datetime:
    return datetime.now(LOCAL_TZ)


def format_jalali(value: jdatetime.date) -> str:
    return f"{value.year:04d}/{value.month:02d}/{value.day:02d}"


def to_jalali_string(value: datetime) -> str:
    """Convert a Gregorian date/datetime to a ``YYYY/MM/DD`` Jalali string."""
    if isinstance(value, datetime):
        value = value.date()
    return format_jalali(jdatetime.date.fromgregorian(date=value))


def today_jalali(now: Optional[datetime] = None) -> str:
    return to_jalali_string(now or now_local())


def jalali_days_ago(days: int, now: Optional[datetime] = None) -> str:
    return to_jalali_string((now or now_local()) - timedelta(days=days))


def parse_jalali(value: str) -> jdatetime.date:
    """
    Parse a Jalali date string. Persian digits and ``-`` separators are accepted.

    Raises:
        ValueError: if the string is not a valid Jalali calendar date.
    """
    cleaned = value.strip().translate(_TO_LATIN).replace("-", "/")
    parts = cleaned.split("/")
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid Jalali date '{value}', expected YYYY/MM/DD")
    year, month, day = (int(p) for p in parts)
    try:
        return jdatetime.date(year, month, day)
    except ValueError as e:
        raise ValueError(f"Invalid Jalali date '{value}': {e}") from e


def normalize_jalali(value: str) -> str:
    return format_jalali(parse_jalali(value))


def jalali_to_gregorian(value: str):
    return parse_jalali(value).togregorian()


def to_persian_digits(value) -> str:
    return str(value).translate(_TO_PERSIAN)


def local_time_string(now: Optional[datetime] = None) -> str:
    """Wall-clock time in the farm's time zone, written with Persian digits."""
    return to_persian_digits((now or now_local()).strftime("%H:%M:%S"))
