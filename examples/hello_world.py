#!/usr/bin/env python3
"""
Hello World Example: Stretched Text Fitted to a Small Canvas

Draws blue "Hello, world!" at a 2:1 stretched scale onto a 200x200 image,
compressing it horizontally if it doesn't fit, and saves it to the path
given on the command line.

Usage:
    python examples/hello_world.py /path/to/font.ttf hello.png
"""

import sys

from PIL import Image

from glyphfit import PxScale, TrueTypeFont, draw_text_mut

if len(sys.argv) != 3:
    print("Usage: hello_world.py FONT OUTPUT")
    raise SystemExit(1)

font_path, output_path = sys.argv[1], sys.argv[2]

image = Image.new("RGB", (200, 200))
font = TrueTypeFont.from_path(font_path)

height = 12.4
scale = PxScale(x=height * 2.0, y=height)

draw_text_mut(image, (0, 0, 255), 0, 0, scale, 200, font, "Hello, world!")

image.save(output_path)
print(f"✓ Saved to: {output_path}")
