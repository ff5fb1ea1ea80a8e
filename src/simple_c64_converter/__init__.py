"""Simple 40x25 image to C64 BASIC converter.

This module maps a 40x25 PNG/JPEG/GIF onto the fixed 16-color C64 palette,
writes a PNG preview and a BASIC listing whose DATA lines hold one palette
index per screen cell. It can be invoked through the CLI (``python -m
simple_c64_converter``) or imported.
"""

from .converter import (
    TARGET_HEIGHT,
    TARGET_WIDTH,
    ConversionError,
    ConvertOptions,
    DecodeError,
    DrawMode,
    FormatError,
    InputNotFoundError,
    QuantizedImage,
    SizeMismatchError,
    load_image,
    pixel_color_code,
    points_from_image,
    quantize_image,
    save_image,
)
from .palette import C64_PALETTE, PaletteContext, build_color_to_index, format_palette_text
from .program import HEADER, generate_basic_program, render_basic_program, split_into_rows

__all__ = [
    "C64_PALETTE",
    "HEADER",
    "TARGET_HEIGHT",
    "TARGET_WIDTH",
    "ConversionError",
    "ConvertOptions",
    "DecodeError",
    "DrawMode",
    "FormatError",
    "InputNotFoundError",
    "PaletteContext",
    "QuantizedImage",
    "SizeMismatchError",
    "build_color_to_index",
    "format_palette_text",
    "generate_basic_program",
    "load_image",
    "pixel_color_code",
    "points_from_image",
    "quantize_image",
    "render_basic_program",
    "save_image",
    "split_into_rows",
]
