import logging
import math
import numpy as np
import warp as wp

from warpresize.errors import ResampleError
from warpresize.models.image import PixelImage, TargetDimensions
from warpresize.rendering.lanczos import resample_columns_kernel, resample_rows_kernel

logger = logging.getLogger(__name__)

def compute_target_dimensions(width: int, height: int, factor: float) -> TargetDimensions:
    """ floor(dim * factor) on each axis; may legally yield 0. """
    if not math.isfinite(factor) or factor <= 0.0:
        raise ValueError(f"scale factor must be a positive finite number, got {factor}")

    return TargetDimensions(math.floor(width * factor), math.floor(height * factor))

def _premultiply(pixels: np.ndarray, max_value: int) -> np.ndarray:
    alpha = pixels[..., -1:] / max_value
    pixels[..., :-1] *= alpha
    return pixels

def _unpremultiply(pixels: np.ndarray, max_value: int) -> np.ndarray:
    alpha = np.clip(pixels[..., -1:], 0.0, max_value) / max_value
    with np.errstate(divide="ignore", invalid="ignore"):
        color = np.where(alpha > 0.0, pixels[..., :-1] / alpha, 0.0)
    pixels[..., :-1] = color
    return pixels

def _resample_pixels(pixels: np.ndarray, out_w: int, out_h: int, device: str) -> np.ndarray:
    in_h, in_w, channels = pixels.shape

    src = wp.from_numpy(pixels, dtype=wp.float32, device=device)
    tmp = wp.empty(shape=(in_h, out_w, channels), dtype=wp.float32, device=device)
    dst = wp.empty(shape=(out_h, out_w, channels), dtype=wp.float32, device=device)

    wp.launch(
        resample_rows_kernel,
        dim=(in_h, out_w),
        inputs=[src, in_w / out_w],
        outputs=[tmp],
        device=device,
    )
    wp.launch(
        resample_columns_kernel,
        dim=(out_h, out_w),
        inputs=[tmp, in_h / out_h],
        outputs=[dst],
        device=device,
    )

    return dst.numpy()

def resample_into(src: PixelImage, dst: PixelImage, device: str = "cpu"):
    """
    Fill `dst` with `src` resampled to `dst`'s dimensions.

    Separable Lanczos-3: a horizontal pass into an intermediate buffer, then a
    vertical pass. When shrinking, the filter is stretched by the scale ratio
    so every source pixel contributes. Alpha formats are filtered
    premultiplied so transparent pixels do not bleed their color.
    """
    if not src.format.is_compatible_with(dst.format):
        raise ResampleError(f"cannot resample {src.format.name} pixels into a {dst.format.name} image")

    if dst.width == 0 or dst.height == 0:
        raise ResampleError(f"target dimensions {dst.width}x{dst.height} are degenerate")

    if src.width == 0 or src.height == 0:
        raise ResampleError(f"source dimensions {src.width}x{src.height} are degenerate")

    max_value = src.format.max_value
    pixels = src.pixels.astype(np.float32)
    if src.format.has_alpha:
        pixels = _premultiply(pixels, max_value)

    out = _resample_pixels(pixels, dst.width, dst.height, device)

    if src.format.has_alpha:
        out = _unpremultiply(out, max_value)

    dst.pixels[...] = np.clip(np.rint(out), 0, max_value).astype(dst.format.dtype)
    logger.debug(f"Resampled {src.width}x{src.height} -> {dst.width}x{dst.height} {src.format.name}")

def resize_image(src: PixelImage, dims: TargetDimensions, device: str = "cpu") -> PixelImage:
    dst = PixelImage.empty(dims, src.format)
    dst.color_model = src.color_model
    resample_into(src, dst, device=device)
    return dst
