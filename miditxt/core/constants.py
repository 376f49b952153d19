"""Global constants for miditxt."""

# Playable window of the target instrument (MIDI pitches, inclusive)
PLAYABLE_MIN = 40  # E2
PLAYABLE_MAX = 79  # G5

# Transposition search domain (semitones, inclusive)
SHIFT_MIN = -127
SHIFT_MAX = 127

# MIDI ranges
MIDI_MIN = 0
MIDI_MAX = 127

# Aggregation defaults
DEFAULT_TOLERANCE_MS = 30

# Statistics log layout
STATS_HEADER = "Conversion Statistics"
STATS_HEADER_RULE = "=" * 50
STATS_BLOCK_RULE = "-" * 50

# Batch defaults
DEFAULT_INPUT_DIR = "midi"
DEFAULT_OUTPUT_DIR = "songs"
DEFAULT_STATS_FILE = "conversion_stats.txt"
DEFAULT_FULL_DIR = "full"
DEFAULT_PERFECT_DIR = "perfect"
MIDI_PATTERNS = ("*.mid",)
EXTENDED_MIDI_PATTERNS = ("*.mid", "*.midi")
