import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence

from keyfall.config import MISS_WINDOW_MS
from keyfall.judge import Judgment, classify

log = logging.getLogger(__name__)


class NoteKind(Enum):
    TAP = "tap"
    HOLD = "hold"


class LaneCursorError(RuntimeError):
    """Cursor walked off the end of a lane. Always a bug, never recovered."""


@dataclass(frozen=True)
class TimedObject:
    kind: NoteKind
    column: int
    time: int
    end_time: int

    @classmethod
    def tap(cls, time: int, column: int = 0) -> "TimedObject":
        return cls(NoteKind.TAP, column, int(time), int(time))

    @classmethod
    def hold(cls, time: int, end_time: int, column: int = 0) -> "TimedObject":
        if end_time <= time:
            raise ValueError(f"hold end_time {end_time} must be after time {time}")
        return cls(NoteKind.HOLD, column, int(time), int(end_time))

    @property
    def is_tap(self) -> bool:
        return self.kind is NoteKind.TAP

    @property
    def expires_at(self) -> int:
        # holds stay reachable (and drawn) until their tail has passed
        return self.end_time if self.kind is NoteKind.HOLD else self.time


class Lane:
    """One playable column.

    Notes are sorted once on construction. ``cursor`` points at the oldest note
    that was neither hit nor expired and only ever moves forward. A tap hit
    while a hold still sits at the cursor is remembered in ``resolved`` and
    the cursor steps over it once the hold is gone; ``pending`` is everything
    from the cursor on that is not resolved yet.

    ``update`` reports at most one judgment per call, so it has to be called on
    every tick: a backlog of expired notes drains one per tick instead of
    vanishing in a single frame.
    """

    def __init__(
        self,
        objects: Iterable[TimedObject],
        difficulty: float,
        binding: Optional[Callable[[], bool]] = None,
        miss_window_ms: int = MISS_WINDOW_MS,
    ):
        self._objects = tuple(sorted(objects, key=lambda o: o.time))
        self.difficulty = float(difficulty)
        self.binding = binding
        self.miss_window_ms = miss_window_ms
        self.cursor = 0
        self.resolved = set()
        self.pressed = False

    def __len__(self):
        return len(self._objects)

    @property
    def objects(self) -> Sequence[TimedObject]:
        return self._objects

    @property
    def pending(self) -> Sequence[TimedObject]:
        """Read-only view of the notes still waiting to be resolved, in time order."""
        if not self.resolved:
            return self._objects[self.cursor:]
        return tuple(
            obj for i, obj in enumerate(self._objects[self.cursor:], self.cursor)
            if i not in self.resolved
        )

    @property
    def finished(self) -> bool:
        return self.cursor >= len(self._objects)

    def _advance(self):
        if self.cursor >= len(self._objects):
            raise LaneCursorError(
                f"cursor {self.cursor} cannot advance past {len(self._objects)} objects"
            )
        self.cursor += 1
        while self.cursor in self.resolved:
            self.resolved.discard(self.cursor)
            self.cursor += 1

    def _expire(self, song_position_ms: float) -> bool:
        if self.cursor > len(self._objects):
            raise LaneCursorError(f"cursor {self.cursor} > {len(self._objects)}")
        if self.cursor == len(self._objects):
            return False
        obj = self._objects[self.cursor]
        # sorted by time, so if this one is still reachable the rest are too;
        # a hold here holds back the taps behind it until its tail has passed
        if obj.expires_at < song_position_ms - self.miss_window_ms:
            log.debug("auto-miss %s at %.1f", obj, song_position_ms)
            self._advance()
            return True
        return False

    def _resolve_press(self, song_position_ms: float) -> Judgment:
        pos = int(song_position_ms)
        best = None
        target = None
        for i in range(self.cursor, len(self._objects)):
            obj = self._objects[i]
            if not obj.is_tap or i in self.resolved:
                continue
            offset = abs(obj.time - pos)
            if best is None or offset < best:
                if target is None:
                    target = i
                best = offset
                continue
            # offsets stopped shrinking: best is the first local minimum
            break
        if best is None:
            return Judgment.MISS

        # running out of taps counts as a local minimum too, otherwise the
        # last tap of a lane could never be hit
        result = classify(self.difficulty, best)
        if result is Judgment.MISS:
            # too far from anything; the note stays for a later press or the sweep
            return result

        # the oldest unresolved tap is the one consumed, whichever offset won
        if target == self.cursor:
            self._advance()
        else:
            self.resolved.add(target)
        return result

    def update(self, song_position_ms: float, down_now: Optional[bool] = None) -> Judgment:
        if self._expire(song_position_ms):
            return Judgment.MISS

        if down_now is None:
            down_now = bool(self.binding()) if self.binding is not None else False

        if not down_now:
            self.pressed = False
            return Judgment.NO_HIT
        if self.pressed:
            return Judgment.NO_HIT

        self.pressed = True
        return self._resolve_press(song_position_ms)
