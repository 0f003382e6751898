#!/usr/bin/env python3
"""
Custom Canvas Example: Drawing Through Your Own Pixel Store

Any object with width, height, subpixel, get_pixel and draw_pixel can be
drawn into. This one keeps a grayscale grid in a dict and prints it as ASCII.

Usage:
    python examples/custom_canvas.py /path/to/font.ttf
"""

import sys

from glyphfit import PxScale, TrueTypeFont, draw_text_mut
from glyphfit.render.pixelops import U8


class DictCanvas:
    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.subpixel = U8
        self.pixels: dict[tuple[int, int], int] = {}

    def get_pixel(self, x: int, y: int) -> int:
        return self.pixels.get((x, y), 0)

    def draw_pixel(self, x: int, y: int, pixel: int) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            self.pixels[(x, y)] = pixel


canvas = DictCanvas(72, 16)
font = TrueTypeFont.from_path(sys.argv[1])
draw_text_mut(canvas, 255, 0, 0, PxScale.uniform(14.0), 72, font, "glyphfit")

shades = " .:-=+*#%@"
for y in range(canvas.height):
    print("".join(shades[canvas.get_pixel(x, y) * (len(shades) - 1) // 255] for x in range(canvas.width)))
