"""Per-frame orchestration of lanes, judgment feedback and score.

The session owns the song clock. Each tick it advances the clock by the frame's
elapsed time, updates every lane once in column order, hands the results to the
feedback animator and the score aggregator, and then advances the animator by
the same elapsed time so both clocks move in lockstep.

Nothing here touches pygame: drawing is described as a list of intents that a
renderer (``keyfall.renderers``) turns into actual blits.
"""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from keyfall.chart import Chart
from keyfall.config import (
    BASE_SPEED, HIT_LINE, HIT_LINE_COL, KEY_HEIGHT,
    LANE_STRIDE, LANE_W, NOTE_CULL_MARGIN, SEPARATOR_COL,
)
from keyfall.fx import JudgmentFeedback
from keyfall.judge import Judgment
from keyfall.lane import Lane, NoteKind, TimedObject
from keyfall.score import ScoreAggregator

log = logging.getLogger(__name__)

JUDGMENT_SPRITES = {
    Judgment.MISS: "hit0",
    Judgment.HIT50: "hit50",
    Judgment.HIT100: "hit100",
    Judgment.HIT300: "hit300",
}


# ---------------- Draw intents ----------------
@dataclass(frozen=True)
class RectIntent:
    x: float
    y: float
    w: float
    h: float
    color: tuple
    z: int = 0


@dataclass(frozen=True)
class SpriteIntent:
    name: str
    x: float
    y: float
    w: float
    h: float
    z: int = 0
    skin: str = ""
    flip_y: bool = False


@dataclass(frozen=True)
class ScaledSpriteIntent:
    """Sprite centred on (cx, cy), scaled uniformly."""
    name: str
    cx: float
    cy: float
    scale: float
    judgment: Judgment


@dataclass(frozen=True)
class LineIntent:
    x1: float
    y1: float
    x2: float
    y2: float
    color: tuple


@dataclass(frozen=True)
class NumberIntent:
    x: float
    y: float
    value: int
    digit_scale: float = 5.0


# ---------------- Column glue ----------------
def lane_skins(count: int) -> List[str]:
    """Alternate "1"/"2" outwards-in, mirrored on the right half; odd middle lane is "S"."""
    skins = []
    for i in range(count // 2):
        skins.append("1" if i % 2 == 0 else "2")
    for i in range(count // 2, count):
        skins.append("2" if i % 2 == 0 else "1")
    if count % 2 == 1:
        skins[count // 2] = "S"
    return skins


def lane_x(width: float, count: int, i: int) -> int:
    return int(width // 2) - int(count * 0.5 * LANE_STRIDE) + int(i * LANE_STRIDE)


def scroll_speed(ms_per_beat: float, speed: float = BASE_SPEED) -> float:
    """Pixels per millisecond of song time."""
    return speed * ms_per_beat / 100.0


class Session:
    def __init__(
        self,
        columns: Sequence[Sequence[TimedObject]],
        difficulty: float,
        ms_per_beat: float,
        speed: float = BASE_SPEED,
        bindings: Optional[Sequence[Callable[[], bool]]] = None,
        start_ms: float = 0.0,
    ):
        if bindings is not None and len(bindings) != len(columns):
            raise ValueError(f"{len(bindings)} bindings for {len(columns)} lanes")
        self.lanes = [
            Lane(col, difficulty, bindings[i] if bindings is not None else None)
            for i, col in enumerate(columns)
        ]
        self.skins = lane_skins(len(self.lanes))
        self.difficulty = float(difficulty)
        self.ms_per_beat = float(ms_per_beat)
        self.speed = float(speed)
        self.position = float(start_ms)
        self.feedback = JudgmentFeedback()
        self.score = ScoreAggregator()
        self.ticks = 0

    @classmethod
    def from_chart(cls, chart: Chart, speed: float = BASE_SPEED, bindings=None) -> "Session":
        return cls(
            chart.columns(),
            chart.difficulty,
            chart.ms_per_beat,
            speed=speed,
            bindings=bindings,
            start_ms=chart.offset_ms,
        )

    @property
    def scroll_speed(self) -> float:
        return scroll_speed(self.ms_per_beat, self.speed)

    @property
    def finished(self) -> bool:
        return all(lane.finished for lane in self.lanes) and self.feedback.playing is None

    def tick(self, elapsed_ms: Optional[float], held: Optional[Sequence[bool]] = None) -> List[Judgment]:
        if held is not None and len(held) != len(self.lanes):
            raise ValueError(f"{len(held)} inputs for {len(self.lanes)} lanes")

        if elapsed_ms:
            self.position += float(elapsed_ms)

        results = []
        for i, lane in enumerate(self.lanes):
            down = held[i] if held is not None else None
            results.append(lane.update(self.position, down))

        for i, res in enumerate(results):
            if res.is_event:
                log.debug("lane %d: %s at %.1fms", i, res.name, self.position)
            self.feedback.trigger(res)
        self.score.accumulate(results)
        self.feedback.advance(elapsed_ms)
        self.ticks += 1
        return results

    # ---------------- Drawing ----------------
    def lane_intents(self, i: int, x: float, height: float) -> list:
        lane = self.lanes[i]
        skin = self.skins[i]
        out = []

        key = f"mania-key{skin}D" if lane.pressed else f"mania-key{skin}"
        out.append(SpriteIntent(key, x, height - KEY_HEIGHT, LANE_W, KEY_HEIGHT, z=4, skin=skin))
        out.append(RectIntent(x, height - HIT_LINE, LANE_W, 2, HIT_LINE_COL, z=5))

        s = self.scroll_speed
        note_h = self.speed * self.ms_per_beat / 4.0
        base_y = height - HIT_LINE
        for obj in lane.pending:
            head = (obj.time - self.position) * s
            if head > height + NOTE_CULL_MARGIN:
                break
            if obj.kind is NoteKind.TAP:
                out.append(SpriteIntent(f"mania-note{skin}", x, base_y - head, LANE_W, note_h, z=3, skin=skin))
                continue
            tail = (obj.end_time - self.position) * s
            body_len = (obj.end_time - obj.time) * s
            out.append(SpriteIntent(f"mania-note{skin}L", x, base_y - tail, LANE_W, body_len, z=3, skin=skin, flip_y=True))
            out.append(SpriteIntent(f"mania-note{skin}H", x, base_y - head, LANE_W, note_h, z=3, skin=skin))
            out.append(SpriteIntent(f"mania-note{skin}H", x, base_y - tail, LANE_W, note_h, z=3, skin=skin, flip_y=True))
        return out

    def draw_intents(self, width: float, height: float, fps: Optional[float] = None) -> list:
        """Everything the renderer needs for one frame, back to front by z where it matters."""
        count = len(self.lanes)
        out = []
        for i in range(count):
            out.extend(self.lane_intents(i, lane_x(width, count, i), height))

        for i in range(count + 1):
            x = lane_x(width, count, i)
            out.append(LineIntent(x, 0, x, height - HIT_LINE, SEPARATOR_COL))

        sample = self.feedback.sample_scale()
        if sample is not None:
            judgment, scale = sample
            out.append(ScaledSpriteIntent(JUDGMENT_SPRITES[judgment], width / 2.0, height / 2.0, scale, judgment))

        if fps is not None:
            out.append(NumberIntent(0, 0, int(fps)))
        out.append(NumberIntent(0, 200, self.score.total))
        return out
