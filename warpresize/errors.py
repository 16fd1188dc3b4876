from pathlib import Path
from typing import Optional

class ResizeError(Exception):
    """ Base class for every error that aborts a resize run. """

    stage: str = "resize"

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path is None:
            return f"{self.stage} failed: {self.message}"
        return f"{self.stage} failed for {self.path}: {self.message}"

class DirectoryError(ResizeError):
    """ The input directory could not be enumerated, or an entry could not be classified. """
    stage = "directory"

class DecodeError(ResizeError):
    """ The file is missing, unreadable, or not a recognized image. """
    stage = "decode"

class ResampleError(ResizeError):
    """ Pixel formats disagree, or a target dimension is zero. """
    stage = "resample"

class EncodeError(ResizeError):
    """ The PNG could not be written, or the buffer does not match its dimensions. """
    stage = "encode"
