"""Core photo processing modules."""

from .photo_processor import PhotoProcessor
from .config import Config
from .errors import DecodeError, DegenerateInputError, PhotoCheckError

__all__ = ["PhotoProcessor", "Config", "DecodeError", "DegenerateInputError", "PhotoCheckError"]
