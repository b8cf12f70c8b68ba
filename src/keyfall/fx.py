from typing import Optional, Tuple

from keyfall.config import ANIMATION_DURATION_MS
from keyfall.judge import Judgment


class JudgmentFeedback:
    """Grow-then-shrink pulse for the latest judgment.

    Only one judgment plays at a time; a new one replaces whatever is on screen.
    """

    def __init__(self, duration_ms: float = ANIMATION_DURATION_MS):
        self.duration_ms = float(duration_ms)
        self.playing = None        # (judgment, remaining_ms)

    def reset(self):
        self.playing = None

    def trigger(self, judgment: Judgment):
        if judgment is Judgment.NO_HIT:
            return
        self.playing = (judgment, self.duration_ms)

    def advance(self, elapsed_ms: Optional[float]):
        # 0 / None means the frame timer had nothing to report yet
        if self.playing is None or not elapsed_ms:
            return
        judgment, remaining = self.playing
        remaining -= float(elapsed_ms)
        if remaining <= 0:
            self.playing = None
        else:
            self.playing = (judgment, remaining)

    def sample_scale(self) -> Optional[Tuple[Judgment, float]]:
        if self.playing is None:
            return None
        judgment, remaining = self.playing
        half = self.duration_ms / 2.0
        return judgment, 1.0 - abs(half - remaining) / half
