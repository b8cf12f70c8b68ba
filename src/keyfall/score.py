from typing import Iterable

from keyfall.judge import Judgment

POINTS = {
    Judgment.NO_HIT: 0,
    Judgment.MISS: 0,
    Judgment.HIT50: 50,
    Judgment.HIT100: 100,
    Judgment.HIT300: 300,
}


def points_for(judgment: Judgment) -> int:
    return POINTS[judgment]


class ScoreAggregator:
    """Running total, summed once per tick. No combo or multiplier here."""

    def __init__(self):
        self.total = 0

    def reset(self):
        self.total = 0

    def accumulate(self, judgments: Iterable[Judgment]) -> int:
        delta = sum(points_for(j) for j in judgments)
        self.total += delta
        return delta
