"""Text score rendering - shifted, filtered, re-timed chord lines."""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple, Union

from ..core import SoundEvent
from ..core.constants import PLAYABLE_MAX, PLAYABLE_MIN


@dataclass(frozen=True)
class RenderedLine:
    """One output line: time relative to the first sound event, then pitches."""

    relative_time_ms: int
    pitches: Tuple[int, ...]

    def to_text(self) -> str:
        return " ".join(str(value) for value in (self.relative_time_ms, *self.pitches))


class ScoreRenderer:
    """Render sound events into playable-range text lines."""

    def __init__(self, low: int = PLAYABLE_MIN, high: int = PLAYABLE_MAX):
        """
        Initialize ScoreRenderer.

        Args:
            low: Lowest playable pitch (inclusive)
            high: Highest playable pitch (inclusive)
        """
        self.low = low
        self.high = high

    def render(self, events: Sequence[SoundEvent], shift: int) -> List[RenderedLine]:
        """
        Apply a shift and drop everything outside the playable window.

        Times are rebased on the first sound event of the input, even when
        that event is filtered out entirely, so the first line may start
        after 0.

        Args:
            events: Sound events in time order
            shift: Semitones to add to every pitch

        Returns:
            One line per event that keeps at least one pitch
        """
        if not events:
            return []

        base_ms = events[0].timestamp_ms
        lines: List[RenderedLine] = []

        for event in events:
            shifted = tuple(
                pitch + shift
                for pitch in event.pitches
                if self.low <= pitch + shift <= self.high
            )
            if shifted:
                lines.append(
                    RenderedLine(relative_time_ms=event.timestamp_ms - base_ms, pitches=shifted)
                )

        return lines

    def write(self, lines: Sequence[RenderedLine], output_path: Union[str, Path]) -> Path:
        """
        Write lines to a text file.

        Args:
            lines: Rendered lines
            output_path: Destination file

        Returns:
            The path written
        """
        output_path = Path(output_path)

        # Ensure output directory exists
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8", newline="\n") as f:
            f.write(format_score(lines))

        return output_path


def render(events: Sequence[SoundEvent], shift: int) -> List[RenderedLine]:
    """Render events with the default playable window. See ``ScoreRenderer``."""
    return ScoreRenderer().render(events, shift)


def format_line(line: RenderedLine) -> str:
    return line.to_text()


def format_score(lines: Sequence[RenderedLine]) -> str:
    """Serialize lines, each newline-terminated."""
    return "".join(format_line(line) + "\n" for line in lines)
