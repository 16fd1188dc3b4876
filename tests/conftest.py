from pathlib import Path
import cv2
import numpy as np
import pytest
from PIL import Image

from warpresize.models.pixel_format import PixelFormat

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

def random_pixels(format: PixelFormat, width: int, height: int, seed: int = 0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    shape = (height, width, format.channels)
    return rng.integers(0, format.max_value, size=shape, endpoint=True).astype(format.dtype)

def pil_image(pixels: np.ndarray, format: PixelFormat) -> Image.Image:
    height, width = pixels.shape[:2]
    data = np.ascontiguousarray(pixels, dtype=format.dtype.newbyteorder("<")).tobytes()
    return Image.frombytes(format.mode, (width, height), data)

DEEP_COLOR_FORMATS = (PixelFormat.RGB16, PixelFormat.RGBA16)

def write_deep_color_png(path: Path, pixels: np.ndarray, format: PixelFormat):
    """ Pillow cannot write 16-bit color, OpenCV can (channels in BGR order). """
    code = cv2.COLOR_RGB2BGR if format is PixelFormat.RGB16 else cv2.COLOR_RGBA2BGRA
    ok, encoded = cv2.imencode(".png", cv2.cvtColor(pixels, code))
    assert ok
    path.write_bytes(encoded.tobytes())

def read_png_header(path: Path) -> tuple[int, int, int, int]:
    """ (width, height, bit depth, color type) from the IHDR chunk. """
    data = path.read_bytes()
    assert data[:8] == PNG_SIGNATURE
    assert data[12:16] == b"IHDR"
    width = int.from_bytes(data[16:20], "big")
    height = int.from_bytes(data[20:24], "big")
    return width, height, data[24], data[25]

@pytest.fixture
def write_image():
    def _write(path: Path, width: int = 20, height: int = 10, format: PixelFormat = PixelFormat.RGB8,
               seed: int = 0, image_format: str = "PNG") -> Path:
        pixels = random_pixels(format, width, height, seed)
        if format in DEEP_COLOR_FORMATS:
            write_deep_color_png(path, pixels, format)
        else:
            pil_image(pixels, format).save(path, format=image_format)
        return path
    return _write

@pytest.fixture
def dirs(tmp_path: Path) -> tuple[Path, Path]:
    indir = tmp_path / "in"
    outdir = tmp_path / "out"
    indir.mkdir()
    outdir.mkdir()
    return indir, outdir
