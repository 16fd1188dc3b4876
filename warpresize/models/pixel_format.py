from enum import Enum
import numpy as np

# PNG color types
PNG_GRAY = 0
PNG_RGB = 2
PNG_GRAY_ALPHA = 4
PNG_RGBA = 6

class ColorModel(Enum):
    L8 = "L8"
    LA8 = "LA8"
    RGB8 = "RGB8"
    RGBA8 = "RGBA8"
    L16 = "L16"
    RGB16 = "RGB16"
    RGBA16 = "RGBA16"

    @property
    def png_color_type(self) -> int:
        return _COLOR_MODEL_INFO[self][0]

    @property
    def bit_depth(self) -> int:
        return _COLOR_MODEL_INFO[self][1]

    @property
    def channels(self) -> int:
        return _COLOR_MODEL_INFO[self][2]

    @property
    def bytes_per_pixel(self) -> int:
        return self.channels * self.bit_depth // 8

# (png color type, bit depth, channels)
_COLOR_MODEL_INFO = {
    ColorModel.L8: (PNG_GRAY, 8, 1),
    ColorModel.LA8: (PNG_GRAY_ALPHA, 8, 2),
    ColorModel.RGB8: (PNG_RGB, 8, 3),
    ColorModel.RGBA8: (PNG_RGBA, 8, 4),
    ColorModel.L16: (PNG_GRAY, 16, 1),
    ColorModel.RGB16: (PNG_RGB, 16, 3),
    ColorModel.RGBA16: (PNG_RGBA, 16, 4),
}

class PixelFormat(Enum):
    """
    The closed set of in-memory pixel layouts an image can be resampled in.

    Values are the Pillow modes that hold each 8-bit layout, so a decoded
    image maps onto a format with `PixelFormat(image.mode)`. Pillow has no
    mode for 16-bit color, those values only name the layout.
    """

    GRAY8 = "L"
    GRAY_ALPHA8 = "LA"
    RGB8 = "RGB"
    RGBA8 = "RGBA"
    GRAY16 = "I;16"
    RGB16 = "RGB;16"
    RGBA16 = "RGBA;16"

    @property
    def mode(self) -> str:
        return self.value

    @property
    def color_model(self) -> ColorModel:
        return _FORMAT_COLOR_MODELS[self]

    @property
    def channels(self) -> int:
        return self.color_model.channels

    @property
    def bytes_per_channel(self) -> int:
        return self.color_model.bit_depth // 8

    @property
    def bytes_per_pixel(self) -> int:
        return self.color_model.bytes_per_pixel

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(np.uint16) if self.bytes_per_channel == 2 else np.dtype(np.uint8)

    @property
    def max_value(self) -> int:
        return (1 << self.color_model.bit_depth) - 1

    @property
    def has_alpha(self) -> bool:
        return self in (PixelFormat.GRAY_ALPHA8, PixelFormat.RGBA8, PixelFormat.RGBA16)

    def is_compatible_with(self, other: "PixelFormat") -> bool:
        # no conversions between layouts, only identity
        return self is other

_FORMAT_COLOR_MODELS = {
    PixelFormat.GRAY8: ColorModel.L8,
    PixelFormat.GRAY_ALPHA8: ColorModel.LA8,
    PixelFormat.RGB8: ColorModel.RGB8,
    PixelFormat.RGBA8: ColorModel.RGBA8,
    PixelFormat.GRAY16: ColorModel.L16,
    PixelFormat.RGB16: ColorModel.RGB16,
    PixelFormat.RGBA16: ColorModel.RGBA16,
}
