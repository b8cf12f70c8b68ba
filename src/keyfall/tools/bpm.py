import json
import logging
from pathlib import Path
from typing import Optional

import librosa
import numpy as np

log = logging.getLogger(__name__)

SR = 44100


def estimate_bpm(y, sr) -> Optional[int]:
    onset_env = librosa.onset.onset_strength(y=y, sr=sr)

    # per-frame tempo candidates instead of one global guess
    tempos = librosa.feature.tempo(onset_envelope=onset_env, sr=sr, aggregate=None)
    if len(tempos) == 0:
        return None

    # pick the candidate nearest the median so a spike can't win
    median = np.median(tempos)
    bpm = tempos[np.argmin(np.abs(tempos - median))]
    if not np.isfinite(bpm) or bpm <= 0:
        return None
    return int(round(float(bpm)))


def update_meta(song_dir: Path, bpm: int) -> Optional[int]:
    """Write bpm into song_dir/meta.json, returning the previous value."""
    meta_path = Path(song_dir, "meta.json")
    meta = json.load(open(meta_path, encoding="utf-8")) if meta_path.exists() else {}
    old_bpm = meta.get("bpm")
    meta["bpm"] = bpm
    with open(meta_path, "w", encoding="utf-8") as f:
        json.dump(meta, f, ensure_ascii=False, indent=2)
    return old_bpm


def main(song_dir: Path, audio_name: str = "song.wav") -> Optional[int]:
    audio = Path(song_dir, audio_name)
    if not audio.exists():
        raise FileNotFoundError(audio)

    log.info("loading %s", audio)
    y, sr = librosa.load(audio, sr=SR, mono=True)

    bpm = estimate_bpm(y, sr)
    if bpm is None:
        log.error("cannot detect bpm for %s", audio)
        return None

    old_bpm = update_meta(song_dir, bpm)
    log.info("meta.json updated: bpm %s -> %s", old_bpm, bpm)
    return bpm
