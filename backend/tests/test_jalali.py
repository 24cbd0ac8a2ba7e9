from datetime import date, datetime

import pytest
import pytz

from utils.formatting import format_toman
from utils.jalali import (
    LOCAL_TZ,
    jalali_days_ago,
    jalali_to_gregorian,
    normalize_jalali,
    parse_jalali,
    to_jalali_string,
    to_persian_digits,
    today_jalali,
)


def test_gregorian_to_jalali():
    assert to_jalali_string(date(2024, 3, 20)) == "1403/01/01"
    assert to_jalali_string(datetime(2024, 3, 20, 23, 59)) == "1403/01/01"
    assert jalali_to_gregorian("1403/01/01") == date(2024, 3, 20)


def test_today_uses_local_time_zone():
    # 22:00 UTC on 19 March is already 20 March in Tehran
    now = datetime(2024, 3, 19, 22, 0, tzinfo=pytz.utc).astimezone(LOCAL_TZ)
    assert today_jalali(now) == "1403/01/01"
    assert jalali_days_ago(1, now) == "1402/12/29"


@pytest.mark.parametrize("raw, expected", [
    ("1403/01/05", "1403/01/05"),
    ("1403/1/5", "1403/01/05"),
    ("1403-01-05", "1403/01/05"),
    ("۱۴۰۳/۰۱/۰۵", "1403/01/05"),
    (" 1403/01/05 ", "1403/01/05"),
])
def test_normalize_jalali(raw, expected):
    assert normalize_jalali(raw) == expected


@pytest.mark.parametrize("raw", ["1403/13/01", "1403/01/32", "1403/01", "abc", ""])
def test_parse_jalali_rejects_garbage(raw):
    with pytest.raises(ValueError):
        parse_jalali(raw)


def test_padded_strings_sort_chronologically():
    dates = ["1403/10/01", "1403/02/15", "1402/12/29", "1403/02/09"]
    assert sorted(dates) == ["1402/12/29", "1403/02/09", "1403/02/15", "1403/10/01"]


def test_persian_digits_and_toman():
    assert to_persian_digits("12:05") == "۱۲:۰۵"
    assert format_toman(1500000) == "۱٬۵۰۰٬۰۰۰ تومان"
    assert format_toman(1500000, persian_digits=False) == "1,500,000 تومان"
    assert format_toman(None, persian_digits=False) == "0 تومان"
