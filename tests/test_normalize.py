"""Month normalization: fold any integer into 0-11."""

import pytest

from app.services.ledger_store import normalize_month


@pytest.mark.parametrize(
    "raw, expected",
    [
        (0, 0),
        (5, 5),
        (11, 11),
        (12, 0),
        (13, 1),
        (24, 0),
        (-1, 11),
        (-12, 0),
        (-13, 11),
    ],
)
def test_known_values(raw, expected):
    assert normalize_month(raw) == expected


def test_result_in_range_and_congruent():
    for m in range(-500, 500):
        n = normalize_month(m)
        assert 0 <= n <= 11
        assert (n - m) % 12 == 0


def test_idempotent():
    for m in range(-30, 30):
        assert normalize_month(normalize_month(m)) == normalize_month(m)
