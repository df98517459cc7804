"""Exceptions raised by the analysis pipeline."""


class PhotoCheckError(Exception):
    """Base class for all Photo Check errors."""


class DecodeError(PhotoCheckError, ValueError):
    """A source image could not be turned into a usable pixel buffer."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"Could not decode image {name}: {reason}")
        self.name = name
        self.reason = reason


class DegenerateInputError(PhotoCheckError, ValueError):
    """Input violates the analysis contract (empty buffer, mismatched fingerprints)."""
