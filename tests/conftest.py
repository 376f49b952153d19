"""Shared fixtures: small MIDI files written with mido."""

from pathlib import Path
from typing import List, Tuple

import mido
import pytest


def write_midi(
    path: Path,
    notes: List[Tuple[int, int]],
    ticks_per_beat: int = 500,
    tempo: int = 500000,
    note_ticks: int = 120,
) -> Path:
    """Write a type-0 MIDI file.

    Args:
        path: Destination
        notes: (onset tick, pitch) pairs
        ticks_per_beat: File resolution
        tempo: Microseconds per beat (defaults give 1 tick = 1 ms)
        note_ticks: Length of every note in ticks
    """
    timeline = []
    for tick, pitch in notes:
        timeline.append((tick, 1, mido.Message("note_on", note=pitch, velocity=80)))
        timeline.append((tick + note_ticks, 0, mido.Message("note_off", note=pitch, velocity=0)))
    timeline.sort(key=lambda item: (item[0], item[1]))

    track = mido.MidiTrack()
    track.append(mido.MetaMessage("set_tempo", tempo=tempo, time=0))
    last = 0
    for tick, _, msg in timeline:
        track.append(msg.copy(time=tick - last))
        last = tick

    midi = mido.MidiFile(type=0, ticks_per_beat=ticks_per_beat)
    midi.tracks.append(track)
    path.parent.mkdir(parents=True, exist_ok=True)
    midi.save(str(path))
    return path


@pytest.fixture
def midi_dir(tmp_path):
    """Directory with a centered song, a low song, an empty file, and a broken file."""
    directory = tmp_path / "midi"
    # Spans more than an octave inside the window, so it stays unshifted
    write_midi(directory / "centered.mid", [(0, 45), (0, 50), (500, 62), (1000, 76)])
    # Everything far below the window
    write_midi(directory / "low.mid", [(0, 20), (500, 22), (1000, 24)])
    write_midi(directory / "empty.mid", [])
    (directory / "broken.mid").write_bytes(b"this is not a midi file")
    return directory
