import numpy as np
import pytest

from warpresize.models.image import FileTask, PixelImage, TargetDimensions, create_file_task
from warpresize.models.pixel_format import ColorModel, PixelFormat

@pytest.mark.parametrize("format, color_model, color_type, bit_depth, bpp", [
    (PixelFormat.GRAY8, ColorModel.L8, 0, 8, 1),
    (PixelFormat.GRAY_ALPHA8, ColorModel.LA8, 4, 8, 2),
    (PixelFormat.RGB8, ColorModel.RGB8, 2, 8, 3),
    (PixelFormat.RGBA8, ColorModel.RGBA8, 6, 8, 4),
    (PixelFormat.GRAY16, ColorModel.L16, 0, 16, 2),
    (PixelFormat.RGB16, ColorModel.RGB16, 2, 16, 6),
    (PixelFormat.RGBA16, ColorModel.RGBA16, 6, 16, 8),
])
def test_format_color_models(format, color_model, color_type, bit_depth, bpp):
    assert format.color_model is color_model
    assert color_model.png_color_type == color_type
    assert color_model.bit_depth == bit_depth
    assert format.bytes_per_pixel == bpp

def test_formats_are_only_compatible_with_themselves():
    for a in PixelFormat:
        for b in PixelFormat:
            assert a.is_compatible_with(b) == (a is b)

def test_pillow_modes_map_to_formats():
    assert PixelFormat("RGBA") is PixelFormat.RGBA8
    assert PixelFormat("I;16") is PixelFormat.GRAY16
    with pytest.raises(ValueError):
        PixelFormat("CMYK")

def test_gray16_dtype_and_range():
    assert PixelFormat.GRAY16.dtype == np.uint16
    assert PixelFormat.GRAY16.max_value == 65535
    assert PixelFormat.RGB8.max_value == 255

def test_empty_image_has_requested_dims():
    image = PixelImage.empty(TargetDimensions(7, 3), PixelFormat.RGBA8)
    assert image.dims == (7, 3)
    assert image.pixels.shape == (3, 7, 4)
    assert image.color_model is ColorModel.RGBA8

def test_pixel_image_rejects_mismatched_array():
    with pytest.raises(ValueError):
        PixelImage(np.zeros((2, 2, 3), dtype=np.uint8), PixelFormat.RGBA8, ColorModel.RGBA8)
    with pytest.raises(ValueError):
        PixelImage(np.zeros((2, 2, 1), dtype=np.uint8), PixelFormat.GRAY16, ColorModel.L16)

def test_gray16_buffer_is_little_endian():
    pixels = np.array([[[0x0102]]], dtype=np.uint16)
    image = PixelImage(pixels, PixelFormat.GRAY16, ColorModel.L16)
    assert image.buffer == b"\x02\x01"

def test_file_task_keeps_input_file_name(tmp_path):
    task = create_file_task(tmp_path / "in" / "photo.jpg", tmp_path / "out")
    assert task == FileTask(tmp_path / "in" / "photo.jpg", tmp_path / "out" / "photo.jpg")

def test_16_bit_color_formats():
    assert PixelFormat.RGB16.dtype == np.uint16
    assert PixelFormat.RGBA16.has_alpha
    assert not PixelFormat.RGB16.has_alpha
    assert PixelFormat.RGBA16.max_value == 65535
