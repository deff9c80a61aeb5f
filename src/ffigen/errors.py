"""
Error types raised by the generator
"""
from typing import Optional


class FFIGenError(Exception):
    """Base class for all generator errors"""


class InvalidArgumentError(FFIGenError, ValueError):
    """A required argument was missing (programming contract violation)"""

    def __init__(self, argument: str, message: Optional[str] = None):
        self.argument = argument
        super().__init__(message or f"Argument '{argument}' must not be None")


class DescriptionError(FFIGenError):
    """A library description file could not be loaded"""

    def __init__(self, source: str, message: str, key: Optional[str] = None):
        self.source = source
        self.key = key
        location = f"{source} [{key}]" if key else source
        super().__init__(f"{location}: {message}")
