"""Core types and constants for miditxt."""

from .note import NoteEvent, SoundEvent
from .errors import ConversionError, DecodeError, EmptyResultError
from .constants import (
    PLAYABLE_MIN,
    PLAYABLE_MAX,
    SHIFT_MIN,
    SHIFT_MAX,
    DEFAULT_TOLERANCE_MS,
)

__all__ = [
    "NoteEvent",
    "SoundEvent",
    "ConversionError",
    "DecodeError",
    "EmptyResultError",
    "PLAYABLE_MIN",
    "PLAYABLE_MAX",
    "SHIFT_MIN",
    "SHIFT_MAX",
    "DEFAULT_TOLERANCE_MS",
]
