"""Fixed Commodore 64 palette and the exact-match lookup built from it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

RGBA = Tuple[int, int, int, int]

# Palette index reference:
#  0: Black        8: Orange
#  1: White        9: Brown
#  2: Red         10: Light Red
#  3: Cyan        11: Dark Gray
#  4: Purple      12: Mid Gray
#  5: Green       13: Light Green
#  6: Blue        14: Light Blue
#  7: Yellow      15: Light Gray
C64_PALETTE: Tuple[RGBA, ...] = (
    (0x00, 0x00, 0x00, 0xFF),
    (0xFF, 0xFF, 0xFF, 0xFF),
    (0x9F, 0x4E, 0x44, 0xFF),
    (0x6A, 0xBF, 0xC6, 0xFF),
    (0xA0, 0x57, 0xA3, 0xFF),
    (0x5C, 0xAB, 0x5E, 0xFF),
    (0x50, 0x45, 0x9B, 0xFF),
    (0xC9, 0xD4, 0x87, 0xFF),
    (0xA1, 0x68, 0x3C, 0xFF),
    (0x6D, 0x54, 0x12, 0xFF),
    (0xCB, 0x7E, 0x75, 0xFF),
    (0x62, 0x62, 0x62, 0xFF),
    (0x89, 0x89, 0x89, 0xFF),
    (0x9A, 0xE2, 0x9B, 0xFF),
    (0x88, 0x7E, 0xCB, 0xFF),
    (0xAD, 0xAD, 0xAD, 0xFF),
)

C64_COLOR_NAMES: Tuple[str, ...] = (
    "Black",
    "White",
    "Red",
    "Cyan",
    "Purple",
    "Green",
    "Blue",
    "Yellow",
    "Orange",
    "Brown",
    "Light Red",
    "Dark Gray",
    "Mid Gray",
    "Light Green",
    "Light Blue",
    "Light Gray",
)


def build_color_to_index(palette: Sequence[RGBA]) -> Dict[RGBA, int]:
    """Map every palette color to its position.

    The first occurrence wins if a palette ever repeats a color.
    """
    lookup: Dict[RGBA, int] = {}
    for index, color in enumerate(palette):
        lookup.setdefault(tuple(color), index)
    return lookup


@dataclass(frozen=True)
class PaletteContext:
    """Read-only palette state shared by the quantizer and the CLI pipeline."""

    colors: Tuple[RGBA, ...] = C64_PALETTE
    names: Tuple[str, ...] = C64_COLOR_NAMES
    color_to_index: Dict[RGBA, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.color_to_index:
            # frozen dataclass: the lookup is derived once here
            object.__setattr__(self, "color_to_index", build_color_to_index(self.colors))

    @classmethod
    def default(cls) -> "PaletteContext":
        return cls()

    def __len__(self) -> int:
        return len(self.colors)

    def rgb(self, index: int) -> Tuple[int, int, int]:
        r, g, b, _a = self.colors[index]
        return (r, g, b)

    def flat_rgb(self) -> List[int]:
        """Palette as the flat ``[r, g, b, r, g, b, ...]`` list Pillow expects."""
        values: List[int] = []
        for index in range(len(self.colors)):
            values.extend(self.rgb(index))
        return values


def format_palette_text(context: PaletteContext) -> str:
    entries = [
        f"{idx}: {name} ({r},{g},{b})"
        for idx, (name, (r, g, b, _a)) in enumerate(zip(context.names, context.colors))
    ]
    return ", ".join(entries)
