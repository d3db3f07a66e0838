"""Accrual clock tests."""

import pytest

from dlanstake.accrual import accrual_baseline, elapsed_days
from dlanstake.config import SECONDS_PER_DAY

NOW = 1_750_000_000
DAY = SECONDS_PER_DAY


def test_never_claimed_accrues_one_day():
    assert elapsed_days(None, NOW) == 1
    assert elapsed_days(0, NOW) == 1


def test_never_claimed_matches_claim_one_day_ago():
    for now in (DAY, NOW, NOW + 12345):
        assert elapsed_days(None, now) == elapsed_days(now - DAY, now)


@pytest.mark.parametrize(
    "offset, expected",
    [
        (0, 0),
        (1, 0),
        (DAY - 1, 0),
        (DAY, 1),
        (DAY + 1, 1),
        (5 * DAY + 3600, 5),
        (30 * DAY, 30),
    ],
)
def test_whole_days_are_floored(offset, expected):
    assert elapsed_days(NOW - offset, NOW) == expected


def test_future_timestamp_is_zero():
    assert elapsed_days(NOW + DAY, NOW) == 0


def test_non_decreasing_in_now():
    last = NOW - 3 * DAY - 17
    prev = 0
    for now in range(last, last + 10 * DAY, 3607):
        days = elapsed_days(last, now)
        assert days >= 0
        assert days >= prev
        prev = days


def test_baseline():
    assert accrual_baseline(None, NOW) == NOW - DAY
    assert accrual_baseline(NOW - 5, NOW) == NOW - 5
