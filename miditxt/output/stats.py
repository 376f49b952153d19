"""Conversion statistics - per-file metrics, tiers, and the shared log."""

import threading
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Set, TextIO, Union

from ..core.constants import (
    PLAYABLE_MAX,
    PLAYABLE_MIN,
    STATS_BLOCK_RULE,
    STATS_HEADER,
    STATS_HEADER_RULE,
)


class Tier(Enum):
    """Output classification."""

    FULL = "full"  # every note in range after shift
    PERFECT = "perfect"  # full, with no shift at all


@dataclass(frozen=True)
class Statistics:
    """Accuracy metrics for one converted file."""

    file_name: str
    shift: int
    total_notes: int
    omitted_notes: int

    @property
    def in_range_notes(self) -> int:
        return self.total_notes - self.omitted_notes

    @property
    def in_range_percentage(self) -> float:
        return 100.0 * self.in_range_notes / self.total_notes

    @property
    def omitted_percentage(self) -> float:
        return 100.0 * self.omitted_notes / self.total_notes

    @property
    def is_full(self) -> bool:
        return self.in_range_percentage == 100.0

    @property
    def is_perfect(self) -> bool:
        return self.is_full and self.shift == 0 and self.omitted_notes == 0

    @property
    def tiers(self) -> Set[Tier]:
        return classify(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        data = asdict(self)
        data.update(
            {
                "in_range_notes": self.in_range_notes,
                "in_range_percentage": self.in_range_percentage,
                "omitted_percentage": self.omitted_percentage,
                "tiers": sorted(tier.value for tier in self.tiers),
            }
        )
        return data


def report(all_pitches: Sequence[int], shift: int, file_name: str = "") -> Statistics:
    """
    Compute statistics for a pitch population under a shift.

    Args:
        all_pitches: Every pitch of the file (must be non-empty)
        shift: Chosen transposition
        file_name: Name recorded in the statistics

    Returns:
        Statistics

    Raises:
        ValueError: If all_pitches is empty
    """
    if len(all_pitches) == 0:
        raise ValueError("Cannot report statistics for an empty pitch population")

    omitted = sum(
        1 for pitch in all_pitches
        if pitch + shift < PLAYABLE_MIN or pitch + shift > PLAYABLE_MAX
    )
    return Statistics(
        file_name=file_name,
        shift=shift,
        total_notes=len(all_pitches),
        omitted_notes=omitted,
    )


def classify(stats: Statistics) -> Set[Tier]:
    """Tiers reached by a result. Perfect implies full."""
    tiers: Set[Tier] = set()
    if stats.is_full:
        tiers.add(Tier.FULL)
        if stats.is_perfect:
            tiers.add(Tier.PERFECT)
    return tiers


def format_success_block(stats: Statistics) -> str:
    return (
        f"File: {stats.file_name}\n"
        f"Optimal shift: {stats.shift}\n"
        f"Total notes: {stats.total_notes}\n"
        f"Omitted notes: {stats.omitted_notes} ({stats.omitted_percentage:.2f}%)\n"
        f"Notes in range after shift: {stats.in_range_notes} ({stats.in_range_percentage:.2f}%)\n"
        f"{STATS_BLOCK_RULE}\n"
    )


def format_error_block(file_name: str, message: str) -> str:
    return f"Error reading file {file_name}: {message}\n{STATS_BLOCK_RULE}\n"


def format_empty_block(file_name: str) -> str:
    return f"File: {file_name} - No valid notes found. Skipped.\n{STATS_BLOCK_RULE}\n"


class StatsLog:
    """Append-only statistics file shared by concurrent conversions.

    Every block is written inside one critical section so blocks from
    different files never interleave.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.lock = threading.Lock()
        self._file: Optional[TextIO] = None

    def create(self) -> "StatsLog":
        """Create or truncate the file, write the header, and keep the handle open."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.lock:
            if self._file is not None:
                self._file.close()
            self._file = open(self.path, "w", encoding="utf-8", newline="\n")
            self._file.write(f"{STATS_HEADER}\n{STATS_HEADER_RULE}\n")
            self._file.flush()
        return self

    @property
    def closed(self) -> bool:
        return self._file is None

    def append(self, block: str) -> None:
        """Write one block and flush it.

        Raises:
            RuntimeError: If the log was not created or is already closed
        """
        with self.lock:
            if self._file is None:
                raise RuntimeError(f"Statistics log is not open: {self.path}")
            self._file.write(block)
            self._file.flush()

    def close(self) -> None:
        with self.lock:
            if self._file is not None:
                self._file.close()
                self._file = None

    def __enter__(self) -> "StatsLog":
        if self._file is None:
            self.create()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def record_success(self, stats: Statistics) -> None:
        self.append(format_success_block(stats))

    def record_error(self, file_name: str, message: str) -> None:
        self.append(format_error_block(file_name, message))

    def record_empty(self, file_name: str) -> None:
        self.append(format_empty_block(file_name))

    def read(self) -> str:
        with self.lock:
            return self.path.read_text(encoding="utf-8")
