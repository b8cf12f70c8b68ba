from enum import Enum


class Judgment(Enum):
    NO_HIT = "NO_HIT"
    MISS = "MISS"
    HIT50 = "HIT50"
    HIT100 = "HIT100"
    HIT300 = "HIT300"

    @property
    def is_event(self) -> bool:
        """True for anything that actually happened (everything but NO_HIT)."""
        return self is not Judgment.NO_HIT


def windows(difficulty: float):
    """(300, 100, 50) upper bounds in ms for an overall difficulty. Not clamped."""
    k = (5.0 - float(difficulty)) / 5.0
    return 50.0 + 30.0 * k, 100.0 + 40.0 * k, 150.0 + 50.0 * k


def classify(difficulty: float, offset_ms: int) -> Judgment:
    w300, w100, w50 = windows(difficulty)
    d = abs(offset_ms)
    if d < w300:
        return Judgment.HIT300
    if d < w100:
        return Judgment.HIT100
    if d < w50:
        return Judgment.HIT50
    return Judgment.MISS
