"""BASIC listing that replays a 40x25 image through color RAM pokes."""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

import jinja2

DATA_ROW_SIZE = 20
FIRST_DATA_LINE = 1000
DATA_LINE_STEP = 10

HEADER = (
    "10 for y = 0 to 24\n"
    "20 for x = 0 to 39\n"
    "30 o = 40 * y + x\n"
    "40 poke 1024 + o, 160\n"
    "45 read c\n"
    "50 poke 55296 + o, c\n"
    "60 next x,y\n"
    "70 goto 70\n"
)

program_template = """{{ header }}{% for row in rows %}
{{ first_line + loop.index0 * line_step }} data {{ row|join(",") }}
{% endfor %}"""

_environment = jinja2.Environment(trim_blocks=True, autoescape=False)


def split_into_rows(points: Sequence[int], row_size: int = DATA_ROW_SIZE) -> List[List[int]]:
    """Chunk ``points`` into rows of ``row_size``; the last row keeps the remainder."""
    if row_size < 1:
        raise ValueError("row_size must be at least 1")
    return [list(points[i : i + row_size]) for i in range(0, len(points), row_size)]


def render_basic_program(points: Sequence[int]) -> str:
    template = _environment.from_string(program_template)
    return template.render(
        header=HEADER,
        rows=split_into_rows(points, DATA_ROW_SIZE),
        first_line=FIRST_DATA_LINE,
        line_step=DATA_LINE_STEP,
    )


def write_basic_program(listing: str, output_file: str | Path) -> Path:
    output_file = Path(output_file)
    with open(output_file, "w", newline="\n") as f:
        f.write(listing)
    return output_file


def generate_basic_program(points: Sequence[int], output_file: str | Path) -> Path:
    return write_basic_program(render_basic_program(points), output_file)
