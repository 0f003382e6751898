"""Type aliases used across the glyphfit package."""

from typing import Literal, Tuple, Union

# Pixel values as stored by Pillow: a bare number for single-band modes,
# a tuple of channels otherwise.
Channel = Union[int, float]
PixelValue = Union[Channel, Tuple[Channel, ...]]

# Color types
RGBColor = Tuple[int, int, int]  # RGB color in 0-255 range
RGBAColor = Tuple[int, int, int, int]  # RGBA color in 0-255 range

# Canvas out-of-range access policy
BoundsPolicy = Literal["clip", "strict"]
