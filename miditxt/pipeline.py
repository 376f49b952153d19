"""Conversion pipeline - decode, aggregate, optimize, render, report.

Each file runs through:

    Decoded -> Aggregated -> {Empty | Optimized -> Rendered & Reported -> Classified}

Decode and empty-result failures end that file's run and are recorded in the
statistics log; sibling files are unaffected.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from .core import DecodeError, EmptyResultError
from .core.constants import (
    DEFAULT_FULL_DIR,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PERFECT_DIR,
    DEFAULT_TOLERANCE_MS,
)
from .input import MidiDecoder
from .output import RenderedLine, ScoreRenderer, Statistics, StatsLog, TierPlacer, report
from .processing import EventAggregator, ShiftConfig, ShiftOptimizer, ShiftResult, flatten


@dataclass
class ConversionConfig:
    """Configuration for a conversion run.

    Attributes:
        tolerance_ms: Chord aggregation window in ms (default: 30)
        shift: Transpose scoring weights
        output_dir: Directory for text scores (default: songs)
        full_dir: Copies of 100% in-range scores (default: full)
        perfect_dir: Copies of unshifted 100% scores (default: perfect)
        suffix: Extension appended to output file names (default: none)
        place_tiers: Copy scores into tier directories (default: True)
    """

    tolerance_ms: int = DEFAULT_TOLERANCE_MS
    shift: ShiftConfig = field(default_factory=ShiftConfig)
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    full_dir: Path = Path(DEFAULT_FULL_DIR)
    perfect_dir: Path = Path(DEFAULT_PERFECT_DIR)
    suffix: str = ""
    place_tiers: bool = True

    def output_path_for(self, midi_path: Union[str, Path]) -> Path:
        return Path(self.output_dir) / f"{Path(midi_path).stem}{self.suffix}"


class FileStatus(Enum):
    CONVERTED = "converted"
    EMPTY = "empty"
    ERROR = "error"


@dataclass
class FileResult:
    """Outcome of converting one file."""

    path: Path
    status: FileStatus
    message: str = ""
    stats: Optional[Statistics] = None
    shift: Optional[ShiftResult] = None
    output_path: Optional[Path] = None
    lines: List[RenderedLine] = field(default_factory=list)
    placed: List[Path] = field(default_factory=list)

    @property
    def file_name(self) -> str:
        return self.path.name

    @property
    def ok(self) -> bool:
        return self.status is FileStatus.CONVERTED


class Converter:
    """Run the per-file pipeline with one configuration."""

    def __init__(
        self,
        config: Optional[ConversionConfig] = None,
        decoder: Optional[MidiDecoder] = None,
    ):
        self.config = config or ConversionConfig()
        self.decoder = decoder or MidiDecoder()
        self.aggregator = EventAggregator(tolerance_ms=self.config.tolerance_ms)
        self.optimizer = ShiftOptimizer(self.config.shift)
        self.renderer = ScoreRenderer(*self.config.shift.playable_range)
        self.placer = TierPlacer(self.config.full_dir, self.config.perfect_dir)

    def analyze(self, midi_path: Union[str, Path]) -> FileResult:
        """
        Decode, aggregate, optimize, render, and report without writing files.

        Raises:
            DecodeError: If the file cannot be read
            EmptyResultError: If the file has no notes
        """
        midi_path = Path(midi_path)

        notes = self.decoder.decode(midi_path)
        sound_events = self.aggregator.aggregate(notes)
        if not sound_events:
            raise EmptyResultError("No valid notes found", file_name=midi_path.name)

        pitches = flatten(sound_events)
        shift = self.optimizer.optimize(pitches)
        lines = self.renderer.render(sound_events, shift.shift)
        stats = report(pitches, shift.shift, file_name=midi_path.name)

        return FileResult(
            path=midi_path,
            status=FileStatus.CONVERTED,
            stats=stats,
            shift=shift,
            lines=lines,
        )

    def convert(self, midi_path: Union[str, Path], stats_log: Optional[StatsLog] = None) -> FileResult:
        """
        Convert one file and record the outcome.

        Decode and empty-result errors are caught here and returned as a
        non-converted ``FileResult``. Output write errors propagate.
        """
        midi_path = Path(midi_path)

        try:
            result = self.analyze(midi_path)
        except DecodeError as e:
            if stats_log is not None:
                stats_log.record_error(midi_path.name, e.message)
            return FileResult(path=midi_path, status=FileStatus.ERROR, message=e.message)
        except EmptyResultError as e:
            if stats_log is not None:
                stats_log.record_empty(midi_path.name)
            return FileResult(path=midi_path, status=FileStatus.EMPTY, message=e.message)

        result.output_path = self.renderer.write(result.lines, self.config.output_path_for(midi_path))

        if stats_log is not None:
            stats_log.record_success(result.stats)

        if self.config.place_tiers:
            result.placed = self.placer.place(result.output_path, result.stats)

        return result


def convert_file(
    midi_path: Union[str, Path],
    config: Optional[ConversionConfig] = None,
    stats_log: Optional[StatsLog] = None,
) -> FileResult:
    """Convert a single MIDI file. See ``Converter.convert``."""
    return Converter(config).convert(midi_path, stats_log)


def convert_batch(
    paths: Sequence[Union[str, Path]],
    config: Optional[ConversionConfig] = None,
    stats_log: Optional[StatsLog] = None,
    workers: int = 1,
    on_result: Optional[Callable[[FileResult], None]] = None,
) -> List[FileResult]:
    """
    Convert many files, optionally in parallel.

    Args:
        paths: MIDI files to convert
        config: Conversion configuration shared by all files
        stats_log: Shared statistics log (already created)
        workers: Worker threads (1 = sequential)
        on_result: Called with each result as it completes

    Returns:
        Results in the same order as ``paths``
    """
    converter = Converter(config)
    paths = [Path(p) for p in paths]

    def run_one(path: Path) -> FileResult:
        try:
            return converter.convert(path, stats_log)
        except OSError as e:
            return FileResult(path=path, status=FileStatus.ERROR, message=str(e))

    results = {}

    # Two inputs with the same stem would write the same score; only the first is converted
    owners = {}
    pending = []
    for index, path in enumerate(paths):
        output_path = converter.config.output_path_for(path)
        owner = owners.setdefault(output_path, index)
        if owner == index:
            pending.append((index, path))
            continue
        message = f"Output path {output_path} is already used by {paths[owner].name}"
        if stats_log is not None:
            stats_log.record_error(path.name, message)
        result = FileResult(path=path, status=FileStatus.ERROR, message=message)
        results[index] = result
        if on_result is not None:
            on_result(result)

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(run_one, path): index for index, path in pending}
            for future in as_completed(futures):
                result = future.result()
                results[futures[future]] = result
                if on_result is not None:
                    on_result(result)
    else:
        for index, path in pending:
            result = run_one(path)
            results[index] = result
            if on_result is not None:
                on_result(result)

    return [results[index] for index in range(len(paths))]
