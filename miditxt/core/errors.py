"""Error types raised at the per-file boundary."""

from typing import Optional


class ConversionError(Exception):
    """Base class for errors that stop the conversion of one file."""

    def __init__(self, message: str, file_name: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.file_name = file_name


class DecodeError(ConversionError):
    """The MIDI container could not be read."""


class EmptyResultError(ConversionError):
    """The file decoded cleanly but contained no notes."""
