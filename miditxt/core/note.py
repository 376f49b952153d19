"""Note and sound event types - the units flowing through the pipeline."""

from dataclasses import dataclass, field
from typing import List

from .constants import MIDI_MAX, MIDI_MIN


@dataclass(frozen=True)
class NoteEvent:
    """A decoded note onset."""

    time_ms: int  # Absolute onset time in milliseconds
    pitch: int  # MIDI pitch (0-127)

    def __post_init__(self):
        if self.time_ms < 0:
            raise ValueError(f"time_ms must be >= 0, got {self.time_ms}")
        if not MIDI_MIN <= self.pitch <= MIDI_MAX:
            raise ValueError(f"pitch must be in 0-127, got {self.pitch}")

    @property
    def pitch_name(self) -> str:
        """Get note name (e.g., 'C4', 'A#3')."""
        names = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
        octave = (self.pitch // 12) - 1
        return f"{names[self.pitch % 12]}{octave}"


@dataclass
class SoundEvent:
    """A cluster of notes treated as simultaneous (a chord)."""

    timestamp_ms: int
    pitches: List[int] = field(default_factory=list)

    @property
    def size(self) -> int:
        """Number of pitches in the event."""
        return len(self.pitches)
