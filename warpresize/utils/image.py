import logging
import cv2
import numpy as np

from pathlib import Path
from typing import Optional, Tuple
from PIL import Image

from warpresize.errors import DecodeError, EncodeError
from warpresize.models.image import PixelImage
from warpresize.models.pixel_format import ColorModel, PixelFormat

logger = logging.getLogger(__name__)

# storage-only modes that decode into one of the supported layouts
_DECODE_CONVERSIONS = {
    "1": "L",
    "La": "LA",
    "RGBa": "RGBA",
    "RGBX": "RGB",
    "CMYK": "RGB",
    "YCbCr": "RGB",
    "HSV": "RGB",
    "LAB": "RGB",
}

# Pillow keeps only 8 bits per sample for these modes
_DEEP_COLOR_MODES = ("RGB", "RGBA", "LA")

# modes whose tRNS color key becomes an alpha channel
_COLOR_KEY_MODES = ("L", "RGB", "I", "I;16", "I;16B", "I;16L")

_ADD_ALPHA_FORMATS = {
    PixelFormat.GRAY8: PixelFormat.GRAY_ALPHA8,
    PixelFormat.RGB8: PixelFormat.RGBA8,
    PixelFormat.GRAY16: PixelFormat.RGBA16,
    PixelFormat.RGB16: PixelFormat.RGBA16,
}

_ENCODE_MODES = {
    ColorModel.L8: "L",
    ColorModel.LA8: "LA",
    ColorModel.RGB8: "RGB",
    ColorModel.RGBA8: "RGBA",
    ColorModel.L16: "I;16",
}

# 16-bit color is written by OpenCV, which stores channels as BGR(A)
_OPENCV_ENCODE_CONVERSIONS = {
    ColorModel.RGB16: cv2.COLOR_RGB2BGR,
    ColorModel.RGBA16: cv2.COLOR_RGBA2BGRA,
}

def _has_16_bit_samples(img: Image.Image) -> bool:
    # only meaningful before load(), which clears the tile list
    for tile in img.tile:
        args = tile[3]
        rawmode = args[0] if isinstance(args, tuple) and args else args
        if isinstance(rawmode, str) and ";16" in rawmode:
            return True
    return False

def _decode_deep_color(path: Path) -> Tuple[np.ndarray, PixelFormat]:
    data = np.fromfile(path, dtype=np.uint8)
    pixels = cv2.imdecode(data, cv2.IMREAD_UNCHANGED)

    if pixels is None or pixels.dtype != np.uint16 or pixels.ndim != 3:
        raise DecodeError("could not read 16-bit color samples", path)

    channels = pixels.shape[2]
    if channels == 3:
        return cv2.cvtColor(pixels, cv2.COLOR_BGR2RGB), PixelFormat.RGB16
    if channels == 4:
        return cv2.cvtColor(pixels, cv2.COLOR_BGRA2RGBA), PixelFormat.RGBA16
    if channels == 2:
        # 16-bit gray + alpha has no layout of its own, expand losslessly
        gray, alpha = pixels[..., :1], pixels[..., 1:]
        return np.concatenate([gray, gray, gray, alpha], axis=2), PixelFormat.RGBA16

    raise DecodeError(f"unexpected {channels}-channel 16-bit image", path)

def _expand_mode(img: Image.Image) -> Image.Image:
    if img.mode in ("P", "PA"):
        if img.mode == "PA" or "transparency" in img.info:
            return img.convert("RGBA")
        return img.convert("RGB")

    if img.mode in _DECODE_CONVERSIONS:
        return img.convert(_DECODE_CONVERSIONS[img.mode])

    return img

def _decode_pillow_pixels(img: Image.Image, path: Path) -> Tuple[np.ndarray, PixelFormat]:
    img = _expand_mode(img)

    if img.mode.startswith("I;16"):
        return np.asarray(img).astype(np.uint16), PixelFormat.GRAY16

    if img.mode == "I":
        # 16-bit grayscale PNGs open as 32-bit "I" on some Pillow versions
        pixels = np.asarray(img)
        if pixels.size > 0 and (pixels.min() < 0 or pixels.max() > 0xFFFF):
            raise DecodeError("32-bit integer samples do not fit a 16-bit format", path)
        return pixels.astype(np.uint16), PixelFormat.GRAY16

    try:
        format = PixelFormat(img.mode)
    except ValueError:
        raise DecodeError(f"unsupported pixel mode {img.mode!r}", path) from None
    return np.array(img, dtype=format.dtype), format

def _apply_color_key(
    pixels: np.ndarray,
    format: PixelFormat,
    color_key,
) -> Tuple[np.ndarray, PixelFormat]:
    """ Turn a tRNS color key into an alpha channel: matching pixels become fully transparent. """
    key = np.asarray(color_key).reshape(-1)
    if key.size != format.channels:
        logger.debug(f"Ignoring transparency key {color_key!r} for {format.name} pixels")
        return pixels, format

    transparent = np.all(pixels == key, axis=2, keepdims=True)
    alpha = np.where(transparent, 0, format.max_value).astype(format.dtype)
    if format is PixelFormat.GRAY16:
        pixels = np.repeat(pixels, 3, axis=2)

    return np.concatenate([pixels, alpha], axis=2), _ADD_ALPHA_FORMATS[format]

def _to_pixel_image(img: Image.Image, path: Path, deep_color: bool) -> PixelImage:
    width, height = img.size
    color_key: Optional[object] = img.info.get("transparency") if img.mode in _COLOR_KEY_MODES else None

    if deep_color:
        pixels, format = _decode_deep_color(path)
    else:
        pixels, format = _decode_pillow_pixels(img, path)

    pixels = pixels.reshape((height, width, format.channels))
    if color_key is not None and format in _ADD_ALPHA_FORMATS:
        pixels, format = _apply_color_key(pixels, format, color_key)

    return PixelImage(pixels, format, format.color_model)

def decode_image(path: Path) -> PixelImage:
    """ Decode the image at `path`, detecting the format from the file contents. """
    try:
        with Image.open(path) as img:
            deep_color = img.mode in _DEEP_COLOR_MODES and _has_16_bit_samples(img)
            img.load()
            image = _to_pixel_image(img, path, deep_color)
    except Image.DecompressionBombError as exc:
        raise DecodeError(str(exc), path) from exc
    except (OSError, ValueError, cv2.error) as exc:
        raise DecodeError(str(exc) or type(exc).__name__, path) from exc

    logger.debug(f"Decoded {path}: {image.width}x{image.height} {image.format.name}")
    return image

def _encode_png_bytes(buffer: bytes, width: int, height: int, color_model: ColorModel, path: Path) -> bytes:
    samples = np.frombuffer(buffer, dtype="<u2").astype(np.uint16)
    pixels = cv2.cvtColor(
        samples.reshape((height, width, color_model.channels)),
        _OPENCV_ENCODE_CONVERSIONS[color_model],
    )

    ok, encoded = cv2.imencode(".png", pixels)
    if not ok:
        raise EncodeError(f"could not encode {color_model.name} pixels", path)
    return encoded.tobytes()

def encode_png(buffer: bytes, width: int, height: int, color_model: ColorModel, path: Path):
    """
    Write `buffer` as a PNG at `path`, creating or truncating the file.

    The buffer holds packed rows of `color_model` pixels, 16-bit samples
    little-endian. The PNG color type and bit depth come from `color_model`.
    """
    if width <= 0 or height <= 0:
        raise EncodeError(f"cannot encode a {width}x{height} image", path)

    expected_size = width * height * color_model.bytes_per_pixel
    if len(buffer) != expected_size:
        raise EncodeError(
            f"buffer holds {len(buffer)} bytes, {width}x{height} {color_model.name} needs {expected_size}",
            path,
        )

    if color_model in _OPENCV_ENCODE_CONVERSIONS:
        img = None
        try:
            data = _encode_png_bytes(buffer, width, height, color_model, path)
        except cv2.error as exc:
            raise EncodeError(str(exc), path) from exc
    else:
        img = Image.frombytes(_ENCODE_MODES[color_model], (width, height), bytes(buffer))
        data = None

    try:
        with open(path, "wb") as f:
            if img is not None:
                img.save(f, format="PNG")
            else:
                f.write(data)
    except OSError as exc:
        raise EncodeError(str(exc), path) from exc

    logger.debug(f"Encoded {path}: {width}x{height} {color_model.name}")
