import json
import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from keyfall.config import OSU_PLAYFIELD_W
from keyfall.lane import NoteKind, TimedObject

log = logging.getLogger(__name__)

DIFFICULTY_OD = {"easy": 3.0, "normal": 5.0, "hard": 8.0}
DEFAULT_OD = 5.0
DEFAULT_MS_PER_BEAT = 500.0  # 120 bpm


class ChartError(ValueError):
    pass


@dataclass
class Chart:
    title: str
    artist: str
    lanes: int
    difficulty: float
    ms_per_beat: float
    offset_ms: int = 0
    audio: Optional[Path] = None
    objects: List[TimedObject] = field(default_factory=list)

    def columns(self) -> List[List[TimedObject]]:
        return partition_columns(self.objects, self.lanes)


def x_to_lane(x: float, lanes: int) -> int:
    """osu!mania x (0..512) -> column index, clamped to the playfield."""
    lane = math.floor(float(x) / (OSU_PLAYFIELD_W / lanes))
    return max(0, min(lanes - 1, lane))


def partition_columns(objects: Iterable[TimedObject], lanes: int) -> List[List[TimedObject]]:
    cols = [[] for _ in range(lanes)]
    for obj in objects:
        if not 0 <= obj.column < lanes:
            raise ChartError(f"note at {obj.time}ms is in column {obj.column}, chart has {lanes}")
        cols[obj.column].append(obj)
    for col in cols:
        col.sort(key=lambda o: o.time)
    return cols


def parse_difficulty(raw) -> float:
    if raw is None:
        return DEFAULT_OD
    if isinstance(raw, str):
        key = raw.strip().lower()
        if key in DIFFICULTY_OD:
            return DIFFICULTY_OD[key]
        try:
            return float(key)
        except ValueError:
            raise ChartError(f"unknown difficulty {raw!r}") from None
    return float(raw)


def parse_ms_per_beat(data: dict) -> float:
    if data.get("msPerBeat"):
        return float(data["msPerBeat"])
    bpm = float(data.get("bpm") or 0)
    if bpm > 0:
        return 60000.0 / bpm
    log.warning("chart has no bpm, scrolling at %.0f bpm", 60000.0 / DEFAULT_MS_PER_BEAT)
    return DEFAULT_MS_PER_BEAT


def parse_note(n: dict, lanes: int) -> TimedObject:
    try:
        t = int(n["tMs"])
    except (KeyError, TypeError, ValueError):
        raise ChartError(f"note without a valid tMs: {n!r}") from None

    if "lane" in n:
        try:
            lane = int(n["lane"])
        except (TypeError, ValueError):
            raise ChartError(f"note at {t}ms has a bad lane {n['lane']!r}") from None
    elif "x" in n:
        lane = x_to_lane(n["x"], lanes)
    else:
        raise ChartError(f"note at {t}ms has neither lane nor x")

    kind = str(n.get("type", "tap")).lower()
    if kind == NoteKind.TAP.value:
        return TimedObject.tap(t, lane)
    if kind == NoteKind.HOLD.value:
        try:
            if "endMs" in n:
                end = int(n["endMs"])
            else:
                end = t + int(n.get("durMs", 500))
            return TimedObject.hold(t, end, lane)
        except (TypeError, ValueError) as e:
            raise ChartError(str(e)) from None
    raise ChartError(f"note at {t}ms has unknown type {kind!r}")


def parse_chart(data: dict, meta: Optional[dict] = None, base_dir: Optional[Path] = None) -> Chart:
    """Build a Chart from the decoded JSON. ``meta`` fills in bpm/offset/audio the chart lacks."""
    merged = dict(meta or {})
    merged.update({k: v for k, v in data.items() if v is not None})

    try:
        lanes = int(merged.get("lanes", 0))
    except (TypeError, ValueError):
        raise ChartError(f"bad lane count {merged.get('lanes')!r}") from None
    if lanes <= 0:
        raise ChartError("chart must declare a positive lane count")

    objects = [parse_note(n, lanes) for n in merged.get("notes", [])]
    objects.sort(key=lambda o: o.time)

    audio = merged.get("audio")
    audio_path = None
    if audio:
        audio_path = Path(audio)
        if base_dir is not None and not audio_path.is_absolute():
            audio_path = Path(base_dir, audio_path)

    return Chart(
        title=str(merged.get("title", "")),
        artist=str(merged.get("artist", "")),
        lanes=lanes,
        difficulty=parse_difficulty(merged.get("od", merged.get("difficulty"))),
        ms_per_beat=parse_ms_per_beat(merged),
        offset_ms=int(merged.get("offsetMs", 0)),
        audio=audio_path,
        objects=objects,
    )


def load_chart(path: os.PathLike) -> Chart:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)
    try:
        data = json.load(open(path, encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ChartError(f"{path}: {e}") from None

    # songs/<artist>/<song>/charts/<n>_<diff>.json keeps meta.json one level up
    song_dir = path.parent.parent if path.parent.name == "charts" else path.parent
    meta = None
    meta_path = Path(song_dir, "meta.json")
    if meta_path.exists():
        try:
            meta = json.load(open(meta_path, encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ChartError(f"{meta_path}: {e}") from None
        if "audio" not in meta and Path(song_dir, "song.wav").exists():
            meta["audio"] = "song.wav"

    chart = parse_chart(data, meta, base_dir=song_dir)
    log.info(
        "loaded %s: %d notes in %d lanes, od=%.1f, %.1f ms/beat",
        path, len(chart.objects), chart.lanes, chart.difficulty, chart.ms_per_beat,
    )
    return chart
