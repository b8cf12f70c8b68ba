import pytest

from keyfall.judge import Judgment, classify, windows

RANK = {Judgment.MISS: 0, Judgment.HIT50: 1, Judgment.HIT100: 2, Judgment.HIT300: 3}


def test_windows_at_od5():
    assert windows(5) == (50.0, 100.0, 150.0)


@pytest.mark.parametrize("offset, expected", [
    (0, Judgment.HIT300),
    (49, Judgment.HIT300),
    (50, Judgment.HIT100),
    (99, Judgment.HIT100),
    (100, Judgment.HIT50),
    (149, Judgment.HIT50),
    (150, Judgment.MISS),
    (10_000, Judgment.MISS),
])
def test_band_edges_od5(offset, expected):
    assert classify(5, offset) is expected


def test_lower_difficulty_widens_windows():
    # od 0: 80 / 140 / 200
    assert classify(0, 79) is Judgment.HIT300
    assert classify(0, 139) is Judgment.HIT100
    assert classify(0, 199) is Judgment.HIT50
    assert classify(0, 200) is Judgment.MISS


def test_higher_difficulty_narrows_windows():
    # od 10: 20 / 60 / 100
    assert classify(10, 19) is Judgment.HIT300
    assert classify(10, 20) is Judgment.HIT100
    assert classify(10, 99) is Judgment.HIT50
    assert classify(10, 100) is Judgment.MISS


def test_out_of_range_difficulty_is_not_clamped():
    # od 30 gives a negative 300 window; nothing can reach it
    w300, _, _ = windows(30)
    assert w300 < 0
    assert classify(30, 0) is not Judgment.HIT300


@pytest.mark.parametrize("od", [0, 2.5, 5, 7, 8.5, 10])
def test_quality_never_improves_with_offset(od):
    prev = RANK[Judgment.HIT300]
    for offset in range(0, 400):
        res = classify(od, offset)
        assert res is not Judgment.NO_HIT
        assert RANK[res] <= prev
        prev = RANK[res]


def test_no_hit_is_not_an_event():
    assert not Judgment.NO_HIT.is_event
    assert Judgment.MISS.is_event
    assert Judgment.NO_HIT != Judgment.MISS
