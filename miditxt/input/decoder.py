"""MIDI decoding - read a standard MIDI file into timestamped note onsets."""

from pathlib import Path
from typing import Iterable, List, Sequence, Union

import mido

from ..core import DecodeError, NoteEvent
from ..core.constants import MIDI_PATTERNS


class MidiDecoder:
    """Decode MIDI files into ordered ``NoteEvent`` lists.

    Tempo changes are resolved by mido's merged-track playback order, so
    every onset is an absolute time in milliseconds regardless of tempo map.
    """

    SUPPORTED_FORMATS = {".mid", ".midi"}

    def __init__(self, clip: bool = True, check_format: bool = False):
        """
        Initialize MidiDecoder.

        Args:
            clip: Clamp out-of-range data bytes to 127 instead of failing
            check_format: Reject files without a .mid/.midi suffix
        """
        self.clip = clip
        self.check_format = check_format

    def decode(self, path: Union[str, Path]) -> List[NoteEvent]:
        """
        Decode a MIDI file.

        Args:
            path: Path to MIDI file

        Returns:
            Note onsets ordered by time

        Raises:
            DecodeError: If the file is missing, unsupported, or malformed
        """
        path = Path(path)

        if not path.exists():
            raise DecodeError(f"MIDI file not found: {path}", file_name=path.name)

        if self.check_format and path.suffix.lower() not in self.SUPPORTED_FORMATS:
            raise DecodeError(
                f"Unsupported format: {path.suffix}. "
                f"Supported: {self.SUPPORTED_FORMATS}",
                file_name=path.name,
            )

        try:
            midi = mido.MidiFile(str(path), clip=self.clip)
            return self.events_from_messages(midi)
        except Exception as e:
            message = str(e) or type(e).__name__
            raise DecodeError(message, file_name=path.name) from e

    def events_from_messages(self, messages: Iterable[mido.Message]) -> List[NoteEvent]:
        """Collect note onsets from messages whose ``time`` is a delta in seconds.

        Iterating a ``mido.MidiFile`` yields exactly that shape.
        """
        events: List[NoteEvent] = []
        elapsed = 0.0

        for msg in messages:
            elapsed += msg.time
            if msg.type == "note_on" and msg.velocity > 0:
                events.append(NoteEvent(time_ms=self._to_ms(elapsed), pitch=msg.note))

        return events

    @staticmethod
    def _to_ms(seconds: float) -> int:
        """Truncate to whole milliseconds, rounding away float drift first."""
        micros = int(round(seconds * 1_000_000))
        return max(0, micros // 1000)


def discover_midi_files(
    directory: Union[str, Path],
    patterns: Sequence[str] = MIDI_PATTERNS,
) -> List[Path]:
    """
    List MIDI files directly inside a directory.

    Args:
        directory: Directory to scan (not recursive)
        patterns: Glob patterns to match

    Returns:
        Sorted, de-duplicated list of paths
    """
    directory = Path(directory)
    found = set()
    for pattern in patterns:
        found.update(p for p in directory.glob(pattern) if p.is_file())
    return sorted(found)
