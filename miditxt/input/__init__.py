"""Input layer - MIDI decoding and file discovery."""

from .decoder import MidiDecoder, discover_midi_files

__all__ = [
    "MidiDecoder",
    "discover_midi_files",
]
