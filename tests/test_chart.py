import json

import pytest

from keyfall.chart import (
    ChartError, load_chart, parse_chart, parse_difficulty, partition_columns, x_to_lane,
)
from keyfall.lane import NoteKind, TimedObject


# ── column assignment ────────────────────────────────────────


@pytest.mark.parametrize("x, lanes, expected", [
    (0, 4, 0),
    (127, 4, 0),
    (128, 4, 1),
    (383, 4, 2),
    (511, 4, 3),
    (512, 4, 3),
    (-20, 4, 0),
    (36, 7, 0),
    (256, 7, 3),
    (475, 7, 6),
])
def test_x_to_lane(x, lanes, expected):
    assert x_to_lane(x, lanes) == expected


def test_partition_columns_sorts_each_column():
    objs = [
        TimedObject.tap(300, 1),
        TimedObject.tap(100, 0),
        TimedObject.tap(200, 1),
        TimedObject.hold(50, 400, 2),
    ]
    cols = partition_columns(objs, 3)
    assert [[o.time for o in c] for c in cols] == [[100], [200, 300], [50]]


def test_partition_rejects_out_of_range_column():
    with pytest.raises(ChartError):
        partition_columns([TimedObject.tap(100, 4)], 4)


# ── parsing ──────────────────────────────────────────────────


def test_parse_chart_lanes_and_x():
    chart = parse_chart({
        "title": "t",
        "lanes": 4,
        "od": 7.5,
        "bpm": 150,
        "notes": [
            {"tMs": 900, "x": 448},
            {"tMs": 500, "lane": 1},
            {"tMs": 700, "lane": 2, "type": "hold", "durMs": 300},
            {"tMs": 800, "lane": 0, "type": "hold", "endMs": 1200},
        ],
    })
    assert chart.lanes == 4
    assert chart.difficulty == 7.5
    assert chart.ms_per_beat == pytest.approx(400.0)
    assert [o.time for o in chart.objects] == [500, 700, 800, 900]
    assert chart.objects[1].kind is NoteKind.HOLD
    assert chart.objects[1].end_time == 1000
    assert chart.objects[2].end_time == 1200
    assert chart.objects[3].column == 3


def test_ms_per_beat_wins_over_bpm():
    chart = parse_chart({"lanes": 4, "msPerBeat": 333.0, "bpm": 999, "notes": []})
    assert chart.ms_per_beat == 333.0


def test_missing_bpm_falls_back():
    chart = parse_chart({"lanes": 4, "notes": []})
    assert chart.ms_per_beat == 500.0


def test_meta_fills_gaps():
    chart = parse_chart({"lanes": 7, "notes": []}, meta={"bpm": 120, "offsetMs": -40, "title": "m"})
    assert chart.ms_per_beat == 500.0
    assert chart.offset_ms == -40
    assert chart.title == "m"


@pytest.mark.parametrize("raw, expected", [
    (None, 5.0), ("easy", 3.0), ("Normal", 5.0), ("hard", 8.0), ("6.5", 6.5), (9, 9.0),
])
def test_parse_difficulty(raw, expected):
    assert parse_difficulty(raw) == expected


@pytest.mark.parametrize("data", [
    {"lanes": 0, "notes": []},
    {"lanes": 4, "notes": [{"lane": 0}]},
    {"lanes": 4, "notes": [{"tMs": 10}]},
    {"lanes": 4, "notes": [{"tMs": 10, "lane": 0, "type": "slider"}]},
    {"lanes": 4, "notes": [{"tMs": 10, "lane": 0, "type": "hold", "durMs": 0}]},
    {"lanes": 4, "difficulty": "insane", "notes": []},
])
def test_bad_charts_raise(data):
    with pytest.raises(ChartError):
        parse_chart(data)


# ── files ────────────────────────────────────────────────────


def test_load_chart_reads_meta_from_song_dir(tmp_path):
    song = tmp_path / "artist" / "song"
    (song / "charts").mkdir(parents=True)
    (song / "meta.json").write_text(json.dumps({"bpm": 100, "offsetMs": 25}), encoding="utf-8")
    (song / "song.wav").write_bytes(b"")
    path = song / "charts" / "4_normal.json"
    path.write_text(json.dumps({
        "lanes": 4, "difficulty": "normal", "notes": [{"tMs": 100, "lane": 3}],
    }), encoding="utf-8")

    chart = load_chart(path)
    assert chart.ms_per_beat == 600.0
    assert chart.offset_ms == 25
    assert chart.audio == song / "song.wav"
    assert chart.columns()[3][0].time == 100


def test_load_chart_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_chart(tmp_path / "nope.json")


def test_load_chart_bad_json(tmp_path):
    p = tmp_path / "bad.json"
    p.write_text("{not json", encoding="utf-8")
    with pytest.raises(ChartError):
        load_chart(p)


def test_demo_chart_loads():
    from pathlib import Path

    path = Path(__file__).resolve().parent.parent / "songs" / "demo" / "steps" / "charts" / "4_normal.json"
    chart = load_chart(path)
    assert chart.lanes == 4
    assert chart.ms_per_beat == 500.0
    assert len(chart.objects) == 64
    assert sum(1 for o in chart.objects if o.kind is NoteKind.HOLD) == 4


@pytest.mark.parametrize("data", [
    {"lanes": "four", "notes": []},
    {"lanes": 4, "notes": [{"tMs": 10, "lane": "left"}]},
    {"lanes": 4, "notes": [{"tMs": 10, "lane": 0, "type": "hold", "endMs": "soon"}]},
])
def test_non_numeric_fields_raise_chart_error(data):
    with pytest.raises(ChartError):
        parse_chart(data)


def test_load_chart_bad_meta(tmp_path):
    (tmp_path / "charts").mkdir()
    (tmp_path / "meta.json").write_text("{not json", encoding="utf-8")
    path = tmp_path / "charts" / "4_easy.json"
    path.write_text(json.dumps({"lanes": 4, "notes": []}), encoding="utf-8")
    with pytest.raises(ChartError, match="meta.json"):
        load_chart(path)
