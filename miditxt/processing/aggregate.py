"""Event aggregation - Merge near-simultaneous notes into sound events."""

from typing import List, Optional, Sequence

from ..core import NoteEvent, SoundEvent
from ..core.constants import DEFAULT_TOLERANCE_MS


class EventAggregator:
    """Cluster a time-ordered note stream into chords.

    A note joins the most recently opened event when its onset is within
    ``tolerance_ms`` of that event's opening timestamp. The window is anchored
    at the event start, so a cluster never drifts along a chain of notes.
    """

    def __init__(self, tolerance_ms: int = DEFAULT_TOLERANCE_MS):
        """
        Initialize EventAggregator.

        Args:
            tolerance_ms: Maximum distance in ms from the event's opening
                timestamp for a note to join it (inclusive)
        """
        if tolerance_ms < 0:
            raise ValueError(f"tolerance_ms must be >= 0, got {tolerance_ms}")
        self.tolerance_ms = tolerance_ms

    def aggregate(self, events: Sequence[NoteEvent]) -> List[SoundEvent]:
        """
        Merge notes into sound events.

        Args:
            events: Note onsets, already ordered by time

        Returns:
            Sound events in input order (empty for empty input)
        """
        sound_events: List[SoundEvent] = []
        current: Optional[SoundEvent] = None

        for event in events:
            if current is not None and event.time_ms <= current.timestamp_ms + self.tolerance_ms:
                current.pitches.append(event.pitch)
            else:
                current = SoundEvent(timestamp_ms=event.time_ms, pitches=[event.pitch])
                sound_events.append(current)

        return sound_events


def aggregate(
    events: Sequence[NoteEvent],
    tolerance_ms: int = DEFAULT_TOLERANCE_MS,
) -> List[SoundEvent]:
    """Merge a note stream into sound events. See ``EventAggregator``."""
    return EventAggregator(tolerance_ms=tolerance_ms).aggregate(events)


def flatten(sound_events: Sequence[SoundEvent]) -> List[int]:
    """All pitches of all events, in order."""
    return [pitch for event in sound_events for pitch in event.pitches]
