import locale
from datetime import date

import pytest

from app.aggregation.dates import add_months, month_label, month_name


def test_month_names():
    assert [month_name(m) for m in (1, 3, 12)] == ["January", "March", "December"]
    assert month_label(2025, 3) == "March 2025"


def test_month_name_out_of_range():
    with pytest.raises(ValueError):
        month_name(13)


def test_month_labels_ignore_process_locale():
    previous = locale.setlocale(locale.LC_TIME)
    try:
        locale.setlocale(locale.LC_TIME, "de_DE.UTF-8")
    except locale.Error:
        pytest.skip("de_DE.UTF-8 locale not installed")
    try:
        assert month_label(2025, 3) == "March 2025"
    finally:
        locale.setlocale(locale.LC_TIME, previous)


def test_add_months_clamps_day():
    assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
    assert add_months(date(2025, 11, 15), 3) == date(2026, 2, 15)
