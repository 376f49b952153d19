"""Tests for MIDI decoding and file discovery."""

import struct

import mido
import pytest

from conftest import write_midi
from miditxt.core import DecodeError, NoteEvent
from miditxt.core.constants import EXTENDED_MIDI_PATTERNS
from miditxt.input import MidiDecoder, discover_midi_files


def raw_midi(track_data: bytes, ticks_per_beat: int = 480) -> bytes:
    """Build a type-0 file around raw track bytes."""
    header = b"MThd" + struct.pack(">IHHH", 6, 0, 1, ticks_per_beat)
    track = b"MTrk" + struct.pack(">I", len(track_data)) + track_data
    return header + track


END_OF_TRACK = b"\x00\xff\x2f\x00"


class TestMidiDecoder:
    """Tests for MidiDecoder."""

    def test_decode_onsets_in_ms(self, tmp_path):
        """Note onsets come back in file order, in whole milliseconds."""
        path = write_midi(tmp_path / "a.mid", [(0, 60), (0, 64), (500, 67), (1250, 72)])
        events = MidiDecoder().decode(path)
        assert events == [
            NoteEvent(0, 60),
            NoteEvent(0, 64),
            NoteEvent(500, 67),
            NoteEvent(1250, 72),
        ], f"Unexpected events: {events}"

    def test_tempo_map_resolved(self, tmp_path):
        """A tempo change halfway doubles the spacing of later beats."""
        track = mido.MidiTrack()
        track.append(mido.MetaMessage("set_tempo", tempo=500000, time=0))
        track.append(mido.Message("note_on", note=60, velocity=90, time=0))
        track.append(mido.Message("note_off", note=60, velocity=0, time=480))
        track.append(mido.MetaMessage("set_tempo", tempo=1000000, time=0))
        track.append(mido.Message("note_on", note=62, velocity=90, time=0))
        track.append(mido.Message("note_off", note=62, velocity=0, time=480))
        track.append(mido.Message("note_on", note=64, velocity=90, time=0))
        midi = mido.MidiFile(type=0, ticks_per_beat=480)
        midi.tracks.append(track)
        path = tmp_path / "tempo.mid"
        midi.save(str(path))

        times = [e.time_ms for e in MidiDecoder().decode(path)]
        assert times == [0, 500, 1500], f"Tempo change not applied: {times}"

    def test_zero_velocity_note_on_is_not_a_note(self, tmp_path):
        """A note-on with velocity 0 acts as a note-off."""
        track_data = (
            b"\x00\x90\x3c\x40"  # note on 60
            b"\x60\x90\x3c\x00"  # note on 60 velocity 0 (note off)
            + END_OF_TRACK
        )
        path = tmp_path / "z.mid"
        path.write_bytes(raw_midi(track_data))
        assert MidiDecoder().decode(path) == [NoteEvent(0, 60)]

    def test_multitrack_merged_in_time_order(self, tmp_path):
        """Notes from several tracks are interleaved by absolute time."""
        midi = mido.MidiFile(type=1, ticks_per_beat=500)
        first = mido.MidiTrack([
            mido.MetaMessage("set_tempo", tempo=500000, time=0),
            mido.Message("note_on", note=60, velocity=80, time=100),
        ])
        second = mido.MidiTrack([
            mido.Message("note_on", note=48, velocity=80, time=50),
            mido.Message("note_on", note=50, velocity=80, time=100),
        ])
        midi.tracks.extend([first, second])
        path = tmp_path / "multi.mid"
        midi.save(str(path))

        events = [(e.time_ms, e.pitch) for e in MidiDecoder().decode(path)]
        assert events == [(50, 48), (100, 60), (150, 50)], f"Tracks not merged: {events}"

    def test_out_of_range_data_clamped(self, tmp_path):
        """Data bytes above 127 are clamped rather than rejected."""
        track_data = b"\x00\x90\x3c\xc8" + END_OF_TRACK  # velocity byte 200
        path = tmp_path / "clip.mid"
        path.write_bytes(raw_midi(track_data))

        assert MidiDecoder().decode(path) == [NoteEvent(0, 60)]

    def test_out_of_range_data_rejected_without_clip(self, tmp_path):
        """With clamping off, the same file is a decode error."""
        track_data = b"\x00\x90\x3c\xc8" + END_OF_TRACK
        path = tmp_path / "clip.mid"
        path.write_bytes(raw_midi(track_data))

        with pytest.raises(DecodeError):
            MidiDecoder(clip=False).decode(path)

    def test_no_notes(self, tmp_path):
        """A valid file without notes decodes to an empty list."""
        path = write_midi(tmp_path / "empty.mid", [])
        assert MidiDecoder().decode(path) == []

    def test_missing_file(self, tmp_path):
        """A missing file raises DecodeError naming the file."""
        with pytest.raises(DecodeError) as excinfo:
            MidiDecoder().decode(tmp_path / "missing.mid")
        assert excinfo.value.file_name == "missing.mid"

    def test_garbage_file(self, tmp_path):
        """Bytes that are not MIDI raise DecodeError with a message."""
        path = tmp_path / "broken.mid"
        path.write_bytes(b"definitely not midi")
        with pytest.raises(DecodeError) as excinfo:
            MidiDecoder().decode(path)
        assert excinfo.value.message, "DecodeError should carry the reader's message"

    def test_format_check(self, tmp_path):
        """Extensions are only checked when asked for."""
        path = write_midi(tmp_path / "song.kar", [(0, 60)])
        assert MidiDecoder().decode(path) == [NoteEvent(0, 60)]
        with pytest.raises(DecodeError):
            MidiDecoder(check_format=True).decode(path)

    def test_events_from_messages(self):
        """Delta times in seconds accumulate and truncate to milliseconds."""
        messages = [
            mido.Message("note_on", note=60, velocity=10, time=0.0),
            mido.Message("control_change", control=7, value=100, time=0.0104),
            mido.Message("note_on", note=62, velocity=10, time=0.0201),
        ]
        events = MidiDecoder().events_from_messages(messages)
        assert events == [NoteEvent(0, 60), NoteEvent(30, 62)]


class TestNoteEvent:
    """Tests for NoteEvent validation."""

    def test_invalid_pitch(self):
        """Pitches above 127 are rejected."""
        with pytest.raises(ValueError):
            NoteEvent(0, 128)

    def test_negative_time(self):
        """Negative onsets are rejected."""
        with pytest.raises(ValueError):
            NoteEvent(-1, 60)

    def test_pitch_name(self):
        """MIDI 60 is middle C."""
        assert NoteEvent(0, 60).pitch_name == "C4"
        assert NoteEvent(0, 40).pitch_name == "E2"


class TestDiscover:
    """Tests for input file discovery."""

    @pytest.fixture
    def folder(self, tmp_path):
        for name in ("b.mid", "a.mid", "c.midi", "notes.txt"):
            (tmp_path / name).write_bytes(b"")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "d.mid").write_bytes(b"")
        return tmp_path

    def test_discovers_sorted_mid_files(self, folder):
        """Only top-level .mid files are found by default, sorted by name."""
        found = [p.name for p in discover_midi_files(folder)]
        assert found == ["a.mid", "b.mid"], f"Unexpected files: {found}"

    def test_extended_patterns_include_midi(self, folder):
        """The extended patterns also pick up .midi files."""
        found = [p.name for p in discover_midi_files(folder, EXTENDED_MIDI_PATTERNS)]
        assert found == ["a.mid", "b.mid", "c.midi"], f"Unexpected files: {found}"

    def test_overlapping_patterns_deduplicated(self, folder):
        """A file matched by two patterns is listed once."""
        found = discover_midi_files(folder, ("*.mid", "a.*"))
        assert [p.name for p in found] == ["a.mid", "b.mid"]

    def test_empty_directory(self, tmp_path):
        """An empty folder yields no files."""
        assert discover_midi_files(tmp_path) == []
