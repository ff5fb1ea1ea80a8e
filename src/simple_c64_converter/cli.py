"""Command line interface for the simple C64 converter."""

from __future__ import annotations

import argparse
import sys

from .converter import (
    DEFAULT_PROGRAM_PATH,
    TARGET_HEIGHT,
    TARGET_WIDTH,
    ConversionError,
    ConvertOptions,
    QuantizedImage,
    load_image,
    quantize_image,
    save_image,
)
from .palette import PaletteContext, format_palette_text
from .program import render_basic_program, write_basic_program


def build_parser(context: PaletteContext | None = None) -> argparse.ArgumentParser:
    context = context or PaletteContext.default()
    palette_text = format_palette_text(context)

    parser = argparse.ArgumentParser(
        prog="simple-c64-converter",
        description=(
            f"Convert a {TARGET_WIDTH}x{TARGET_HEIGHT} image into a C64 palette preview PNG and a BASIC\n"
            "listing that pokes every cell's color index into color RAM.\n"
            "Without -dither only exact palette colors are kept; anything else becomes black (0).\n"
            f"Palette: {palette_text}"
        ),
        formatter_class=argparse.RawTextHelpFormatter,
        add_help=False,
    )
    parser.add_argument(
        "-h",
        "-help",
        "--help",
        action="help",
        help="show this help message and exit",
    )
    parser.add_argument(
        "-i",
        dest="input",
        required=True,
        help="path to the source image (required)",
    )
    parser.add_argument(
        "-o",
        dest="output",
        default=None,
        help="path to the output image (default out.<ext of input>); always PNG encoded",
    )
    parser.add_argument(
        "-f",
        dest="program",
        default=DEFAULT_PROGRAM_PATH,
        help="path to the export file with the BASIC program (will be generated)",
    )
    parser.add_argument(
        "-dither",
        dest="dither",
        action="store_true",
        help="use Floyd-Steinberg dithering",
    )
    return parser


def process_image(options: ConvertOptions, context: PaletteContext) -> QuantizedImage:
    """Run the whole pipeline. Nothing is written unless the input decodes at 40x25."""
    image = load_image(options.input_path)
    quantized = quantize_image(image, context, options.draw_mode)

    listing = render_basic_program(quantized.indices)

    target = save_image(quantized.image, options.output_image)
    try:
        program = write_basic_program(listing, options.program_path)
    except OSError:
        # a run that fails leaves neither artifact behind
        target.unlink(missing_ok=True)
        raise
    print(f"wrote {target}")
    print(f"wrote {program}")
    return quantized


def main(argv: list[str] | None = None) -> int:
    context = PaletteContext.default()
    parser = build_parser(context)
    args = parser.parse_args(argv)

    try:
        options = ConvertOptions.from_input(
            args.input,
            output_image=args.output,
            program_path=args.program,
            dither=args.dither,
        )
        process_image(options, context)
    except (ConversionError, OSError) as exc:
        print(exc, file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    print("finished")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
