from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple
import numpy as np

from warpresize.models.pixel_format import ColorModel, PixelFormat

class TargetDimensions(NamedTuple):
    width: int
    height: int

@dataclass
class PixelImage:
    """
    A decoded or resampled image.

    `pixels` has shape (height, width, channels) and the dtype of `format`.
    `color_model` is the tag the PNG encoder writes; it travels with the image
    from the decoder and is never derived again from the pixels.
    """

    pixels: np.ndarray
    format: PixelFormat
    color_model: ColorModel

    def __post_init__(self):
        if self.pixels.ndim != 3 or self.pixels.shape[2] != self.format.channels:
            raise ValueError(
                f"pixel array of shape {self.pixels.shape} does not hold {self.format.name} pixels"
            )
        if self.pixels.dtype != self.format.dtype:
            raise ValueError(f"pixel array dtype {self.pixels.dtype} does not match {self.format.name}")

    @classmethod
    def empty(cls, dims: TargetDimensions, format: PixelFormat) -> "PixelImage":
        width, height = dims
        pixels = np.zeros((height, width, format.channels), dtype=format.dtype)
        return cls(pixels, format, format.color_model)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def dims(self) -> TargetDimensions:
        return TargetDimensions(self.width, self.height)

    @property
    def buffer(self) -> bytes:
        # row-major, 16-bit samples little-endian
        dtype = self.format.dtype.newbyteorder("<")
        return np.ascontiguousarray(self.pixels, dtype=dtype).tobytes()

# decoded and resized images share one representation
SourceImage = PixelImage
ResizedImage = PixelImage

@dataclass(frozen=True)
class FileTask:
    input_path: Path
    output_path: Path

def create_file_task(input_path: Path, outdir: Path) -> FileTask:
    return FileTask(input_path, outdir / input_path.name)
