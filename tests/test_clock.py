from __future__ import annotations

import datetime as dt

import clock


def test_today_drops_time_of_day():
    assert clock.today(dt.datetime(2026, 1, 5, 23, 59)) == dt.date(2026, 1, 5)
    assert clock.tomorrow(dt.date(2026, 12, 31)) == dt.date(2027, 1, 1)


def test_days_until_exam_rounds_up_and_clamps():
    exam = dt.date(2026, 1, 10)
    assert clock.days_until_exam(exam, dt.datetime(2026, 1, 9, 0, 0)) == 1
    assert clock.days_until_exam(exam, dt.datetime(2026, 1, 8, 12, 0)) == 2
    assert clock.days_until_exam(exam, dt.datetime(2026, 1, 10, 8, 0)) == 0
    assert clock.days_until_exam(exam, dt.datetime(2026, 2, 1)) == 0
