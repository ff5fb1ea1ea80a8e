"""Core conversion logic: decode, validate, quantize and encode 40x25 images."""

# Reference: C64 text screen used as a 40x25 "pixel" canvas
# Usage        | Address Range | Notes
# -------------|---------------|------------------------------------------------
# Screen RAM   | 0400h-07E7h   | 1024 + offset, filled with 160 (reverse space)
# Color RAM    | D800h-DBE7h   | 55296 + offset, one palette index per cell

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple

import numpy as np
from PIL import Image, UnidentifiedImageError

from .palette import PaletteContext

TARGET_WIDTH = 40
TARGET_HEIGHT = 25
OUTPUT_IMAGE_STEM = "out"
DEFAULT_PROGRAM_PATH = "img.basic"
SUPPORTED_FORMATS = ("PNG", "JPEG", "GIF")

# (dx, dy, weight) relative to the pixel being quantized
FLOYD_STEINBERG_WEIGHTS: Tuple[Tuple[int, int, float], ...] = (
    (1, 0, 7 / 16),
    (-1, 1, 3 / 16),
    (0, 1, 5 / 16),
    (1, 1, 1 / 16),
)


class ConversionError(Exception):
    """Custom exception for conversion errors."""


class InputNotFoundError(ConversionError):
    """The input image path does not exist."""


class FormatError(ConversionError):
    """The input could not be identified or decoded as a supported image."""


DecodeError = FormatError


class SizeMismatchError(ConversionError):
    """``actual`` is None when Pillow refused the header as a decompression bomb."""

    def __init__(
        self,
        actual: Tuple[int, int] | None,
        expected: Tuple[int, int] = (TARGET_WIDTH, TARGET_HEIGHT),
        detail: str | None = None,
    ):
        self.actual = actual
        self.expected = expected
        got = "{}x{}".format(*actual) if actual is not None else detail
        super().__init__("Wrong image size. Expected {}x{}, got: {}".format(*expected, got))


class DrawMode(enum.Enum):
    SRC = "src"
    FLOYD_STEINBERG = "floyd-steinberg"

    @classmethod
    def from_flag(cls, dither: bool) -> "DrawMode":
        return cls.FLOYD_STEINBERG if dither else cls.SRC


def default_output_image(input_path: str | Path) -> Path:
    """``out`` plus the extension of the input, e.g. ``out.jpg``."""
    return Path(f"{OUTPUT_IMAGE_STEM}{Path(input_path).suffix}")


@dataclass
class ConvertOptions:
    """Paths and drawing mode for a single conversion run."""

    input_path: Path
    output_image: Path
    program_path: Path = Path(DEFAULT_PROGRAM_PATH)
    dither: bool = False

    @classmethod
    def from_input(
        cls,
        input_path: str | Path,
        output_image: str | Path | None = None,
        program_path: str | Path | None = None,
        dither: bool = False,
    ) -> "ConvertOptions":
        input_path = Path(input_path)
        return cls(
            input_path=input_path,
            output_image=Path(output_image) if output_image else default_output_image(input_path),
            program_path=Path(program_path) if program_path else Path(DEFAULT_PROGRAM_PATH),
            dither=dither,
        )

    @property
    def draw_mode(self) -> DrawMode:
        return DrawMode.from_flag(self.dither)


@dataclass
class QuantizedImage:
    """Palette indices (row-major) plus the paletted image built from them."""

    indices: List[int]
    image: Image.Image

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size


def check_size(size: Tuple[int, int]) -> None:
    if tuple(size) != (TARGET_WIDTH, TARGET_HEIGHT):
        raise SizeMismatchError(tuple(size))


def load_image(path: str | Path) -> Image.Image:
    """Open a PNG/JPEG/GIF file and return it as a 40x25 RGBA image.

    The size is checked from the file header before the pixel data is decoded,
    so a wrongly sized file fails fast.
    """
    path = Path(path)
    try:
        with Image.open(path, formats=SUPPORTED_FORMATS) as img:
            check_size(img.size)
            return img.convert("RGBA")
    except FileNotFoundError as exc:
        raise InputNotFoundError(f"Input file not found: {path}") from exc
    except (PermissionError, IsADirectoryError):
        raise
    except Image.DecompressionBombError as exc:
        raise SizeMismatchError(None, detail=str(exc)) from exc
    except UnidentifiedImageError as exc:
        raise FormatError(f"Unsupported image format (expected PNG, JPEG or GIF): {path}") from exc
    except OSError as exc:
        raise FormatError(f"Failed to decode image: {path}: {exc}") from exc


def pixel_color_code(color: Sequence[int], context: PaletteContext) -> int:
    """Exact palette lookup. Colors not in the palette map to index 0."""
    if len(color) == 3:
        color = (*color, 0xFF)
    return context.color_to_index.get(tuple(int(v) for v in color), 0)


def points_from_image(image: Image.Image, context: PaletteContext) -> List[int]:
    """Flatten ``image`` into palette indices, top-to-bottom, left-to-right."""
    rgba = image.convert("RGBA")
    pixels = rgba.load()
    width, height = rgba.size
    points: List[int] = []
    for y in range(height):
        for x in range(width):
            points.append(pixel_color_code(pixels[x, y], context))
    return points


def nearest_palette_index(pixel: np.ndarray, palette: np.ndarray) -> int:
    """Index of the closest palette entry by squared RGB distance.

    ``np.argmin`` returns the first minimum, so ties go to the lower index.
    """
    distances = np.sum((palette - pixel) ** 2, axis=1)
    return int(np.argmin(distances))


def _diffuse(data: np.ndarray, x: int, y: int, err: np.ndarray) -> None:
    h, w, _ = data.shape
    for dx, dy, weight in FLOYD_STEINBERG_WEIGHTS:
        nx, ny = x + dx, y + dy
        if 0 <= nx < w and 0 <= ny < h:
            data[ny, nx] += err * weight


def _quantize_src(image: Image.Image, context: PaletteContext) -> List[int]:
    return points_from_image(image, context)


def _premultiplied_rgb(image: Image.Image) -> Image.Image:
    """Composite onto opaque black, i.e. premultiply color by alpha."""
    rgba = image.convert("RGBA")
    backdrop = Image.new("RGBA", rgba.size, (0, 0, 0, 0xFF))
    return Image.alpha_composite(backdrop, rgba).convert("RGB")


def _quantize_floyd_steinberg(image: Image.Image, context: PaletteContext) -> List[int]:
    data = np.array(_premultiplied_rgb(image), dtype=np.float32)
    palette = np.array([context.rgb(i) for i in range(len(context))], dtype=np.float32)
    height, width, _ = data.shape

    indices: List[int] = []
    for y in range(height):
        for x in range(width):
            # neighbours may have been pushed out of range by earlier error
            old_pixel = np.clip(data[y, x], 0, 255)
            index = nearest_palette_index(old_pixel, palette)
            new_pixel = palette[index]
            data[y, x] = new_pixel
            _diffuse(data, x, y, old_pixel - new_pixel)
            indices.append(index)
    return indices


_DRAWERS = {
    DrawMode.SRC: _quantize_src,
    DrawMode.FLOYD_STEINBERG: _quantize_floyd_steinberg,
}


def build_paletted_image(indices: Sequence[int], size: Tuple[int, int], context: PaletteContext) -> Image.Image:
    width, height = size
    if len(indices) != width * height:
        raise ConversionError(
            f"Expected {width * height} palette indices for {width}x{height}, got {len(indices)}"
        )
    paletted = Image.new("P", size)
    paletted.putpalette(context.flat_rgb())
    paletted.putdata(list(indices))
    return paletted


def quantize_image(
    image: Image.Image,
    context: PaletteContext,
    mode: DrawMode = DrawMode.SRC,
) -> QuantizedImage:
    """Map every pixel of ``image`` onto the palette using ``mode``."""
    indices = _DRAWERS[mode](image, context)
    return QuantizedImage(indices=indices, image=build_paletted_image(indices, image.size, context))


def save_image(image: Image.Image, path: str | Path) -> Path:
    """Write ``image`` as PNG regardless of the extension of ``path``."""
    path = Path(path)
    with open(path, "wb") as fp:
        image.save(fp, format="PNG")
    return path
