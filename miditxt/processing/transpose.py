"""Transpose optimization - Pick the semitone shift that best fits the playable window."""

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from ..core.constants import (
    MIDI_MAX,
    PLAYABLE_MAX,
    PLAYABLE_MIN,
    SHIFT_MAX,
    SHIFT_MIN,
)


@dataclass(frozen=True)
class ShiftConfig:
    """Scoring weights for the transpose search.

    Attributes:
        no_shift_bonus: Added when the shift is 0 (default: 0.11)
        octave_bonus: Added for nonzero multiples of 12 (default: 0.15)
        max_shift_penalty: Penalty reached at |shift| == 127 (default: 0.3)
        playable_weight: Weight of the playable fraction (default: 2.2)
        playable_range: Inclusive playable pitch window (fixed)
        shift_domain: Inclusive range of candidate shifts (fixed)
    """

    no_shift_bonus: float = 0.11
    octave_bonus: float = 0.15
    max_shift_penalty: float = 0.3
    playable_weight: float = 2.2
    playable_range: Tuple[int, int] = (PLAYABLE_MIN, PLAYABLE_MAX)
    shift_domain: Tuple[int, int] = (SHIFT_MIN, SHIFT_MAX)


@dataclass(frozen=True)
class ShiftResult:
    """Chosen transposition and its score."""

    shift: int
    score: float
    playable_notes: int = 0


class ShiftOptimizer:
    """Score every candidate shift and keep the best one.

    Candidates are scanned in ascending order. A candidate replaces the
    current best when its score is strictly higher, or equal with a strictly
    smaller magnitude, so between ``-s`` and ``+s`` the first seen (``-s``)
    is kept on an exact tie.
    """

    def __init__(self, config: ShiftConfig = ShiftConfig()):
        self.config = config

    def candidate_shifts(self) -> np.ndarray:
        low, high = self.config.shift_domain
        return np.arange(low, high + 1)

    def playable_counts(self, pitches: Sequence[int]) -> np.ndarray:
        """Number of pitches landing in the playable window for each candidate shift."""
        histogram = np.bincount(np.asarray(pitches, dtype=np.int64), minlength=MIDI_MAX + 1)
        cumulative = np.concatenate(([0], np.cumsum(histogram)))
        size = len(histogram)

        low, high = self.config.playable_range
        shifts = self.candidate_shifts()
        # p + s in [low, high]  <=>  p in [low - s, high - s]
        lo = np.clip(low - shifts, 0, size)
        hi = np.clip(high - shifts + 1, 0, size)
        return np.maximum(cumulative[hi] - cumulative[lo], 0)

    def scores(self, pitches: Sequence[int]) -> np.ndarray:
        """Weighted playability score for each candidate shift."""
        cfg = self.config
        shifts = self.candidate_shifts()
        counts = self.playable_counts(pitches)

        score = (counts / len(pitches)) * cfg.playable_weight
        score = score + np.where(shifts == 0, cfg.no_shift_bonus, 0.0)
        score = score + np.where((shifts != 0) & (shifts % 12 == 0), cfg.octave_bonus, 0.0)
        score = score - np.abs(shifts) * cfg.max_shift_penalty / 127.0
        return score

    def optimize(self, pitches: Sequence[int]) -> ShiftResult:
        """
        Find the optimal shift for a pitch population.

        Args:
            pitches: All pitches of a file (must be non-empty)

        Returns:
            ShiftResult for the best candidate

        Raises:
            ValueError: If pitches is empty
        """
        if len(pitches) == 0:
            raise ValueError("Cannot optimize shift for an empty pitch population")

        shifts = self.candidate_shifts()
        scores = self.scores(pitches)
        counts = self.playable_counts(pitches)

        best_shift = 0
        best_score = float("-inf")
        best_count = 0
        for shift, score, count in zip(shifts.tolist(), scores.tolist(), counts.tolist()):
            if score > best_score or (score == best_score and abs(shift) < abs(best_shift)):
                best_shift = shift
                best_score = score
                best_count = count

        return ShiftResult(shift=best_shift, score=best_score, playable_notes=best_count)


def optimize(pitches: Sequence[int], config: ShiftConfig = ShiftConfig()) -> ShiftResult:
    """Find the optimal shift. See ``ShiftOptimizer``."""
    return ShiftOptimizer(config).optimize(pitches)
