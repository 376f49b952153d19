"""miditxt - MIDI to playable-range text score conversion.

Architecture Layers:
    1. core/       - Note and sound event types, constants, errors
    2. input/      - MIDI decoding and file discovery
    3. processing/ - Chord aggregation and transpose optimization
    4. output/     - Text score rendering, statistics, tier placement
    5. pipeline    - Per-file conversion and batch fan-out
"""

__version__ = "0.1.0"

# Core types
from .core import NoteEvent, SoundEvent, ConversionError, DecodeError, EmptyResultError

# Input layer
from .input import MidiDecoder, discover_midi_files

# Processing layer
from .processing import (
    EventAggregator,
    ShiftConfig,
    ShiftOptimizer,
    ShiftResult,
    aggregate,
    optimize,
)

# Output layer
from .output import (
    RenderedLine,
    ScoreRenderer,
    Statistics,
    StatsLog,
    Tier,
    TierPlacer,
    render,
    report,
)

# Pipeline
from .pipeline import ConversionConfig, Converter, FileResult, FileStatus, convert_file, convert_batch

__all__ = [
    # Core
    "NoteEvent",
    "SoundEvent",
    "ConversionError",
    "DecodeError",
    "EmptyResultError",
    # Input
    "MidiDecoder",
    "discover_midi_files",
    # Processing
    "EventAggregator",
    "ShiftConfig",
    "ShiftOptimizer",
    "ShiftResult",
    "aggregate",
    "optimize",
    # Output
    "RenderedLine",
    "ScoreRenderer",
    "Statistics",
    "StatsLog",
    "Tier",
    "TierPlacer",
    "render",
    "report",
    # Pipeline
    "ConversionConfig",
    "Converter",
    "FileResult",
    "FileStatus",
    "convert_file",
    "convert_batch",
]
