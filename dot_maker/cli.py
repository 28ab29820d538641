"""Command-line interface for dot_maker.

Supports both interactive TUI mode and headless/JSON mode for scripting.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from dot_maker.core.palette import ColorMode
from dot_maker.core.processor import HalftoneMode
from dot_maker.core.reader import MAX_SIZE

logger = logging.getLogger("dot_maker")


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Send dot_maker log records to stderr through a Rich handler.

    Args:
        verbose: enable DEBUG logging.
        quiet: only show errors.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("input", help="Input image file path.")
    parser.add_argument("-o", "--output", help="Output file path.")
    parser.add_argument(
        "--black",
        type=float,
        default=0.05,
        help="Black threshold, 0 to 1 (default: 0.05).",
    )
    parser.add_argument(
        "--white",
        type=float,
        default=0.85,
        help="White threshold, 0 to 1 (default: 0.85).",
    )
    parser.add_argument(
        "--max-size",
        type=int,
        default=MAX_SIZE,
        help=f"Downscale so the longest side is at most this (default: {MAX_SIZE}).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output structured JSON (pipe-friendly, no TUI).",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug logging.",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only log errors.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show stack traces on error (with --json).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dot-maker",
        description="Turn images into halftone dot art (SVG or raster).",
    )
    subparsers = parser.add_subparsers(dest="command")

    # --- convert subcommand ---
    convert = subparsers.add_parser(
        "convert",
        help="Convert an image to halftone dots.",
    )
    _add_common_args(convert)
    convert.add_argument(
        "--mode",
        choices=[m.value for m in HalftoneMode],
        default="uniform",
        help="Halftone mode (default: uniform).",
    )
    convert.add_argument(
        "--dot-size",
        type=int,
        default=10,
        help="Grid cell size in pixels for uniform mode (default: 10).",
    )
    convert.add_argument(
        "--min-radius",
        type=float,
        default=2,
        help="Smallest circle radius for packing mode (default: 2).",
    )
    convert.add_argument(
        "--max-radius",
        type=float,
        default=20,
        help="Largest circle radius for packing mode (default: 20).",
    )
    convert.add_argument(
        "--brightness",
        type=int,
        default=0,
        help="Brightness adjustment, -100 to 100 (default: 0).",
    )
    convert.add_argument(
        "--contrast",
        type=int,
        default=0,
        help="Contrast adjustment, -100 to 100 (default: 0).",
    )
    convert.add_argument(
        "--gamma",
        type=float,
        default=1.0,
        help="Gamma, > 0 (default: 1.0).",
    )
    convert.add_argument(
        "--color",
        choices=[c.value for c in ColorMode],
        default="monochrome",
        help="Dot color mode (default: monochrome).",
    )
    convert.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible circle packing.",
    )
    convert.add_argument(
        "--no-tui",
        action="store_true",
        help="Run headless (no interactive TUI).",
    )

    # --- posterize subcommand ---
    posterize = subparsers.add_parser(
        "posterize",
        help="Reduce an image to a CMYK or RYBK palette.",
    )
    _add_common_args(posterize)
    posterize.add_argument(
        "--color",
        choices=[ColorMode.CMYK.value, ColorMode.RYBK.value],
        default="cmyk",
        help="Palette (default: cmyk).",
    )
    posterize.add_argument(
        "--no-dither",
        action="store_true",
        help="Disable Floyd-Steinberg error diffusion.",
    )

    return parser


def _auto_output_path(input_path: Path, tag: str, suffix: str) -> Path:
    """Generate default output path from input."""
    return input_path.parent / f"{input_path.stem}_{tag}{suffix}"


def _json_error(message: str, code: str) -> None:
    """Print JSON error to stderr and exit with code 1."""
    err = {"status": "error", "error": message, "code": code}
    print(json.dumps(err), file=sys.stderr)
    sys.exit(1)


def _fail(args: argparse.Namespace, message: str, code: str) -> None:
    if args.json:
        if args.debug:
            import traceback
            traceback.print_exc(file=sys.stderr)
        _json_error(message, code)
    logger.error(message)
    sys.exit(1)


def _load(args: argparse.Namespace):
    from dot_maker.core.reader import load_image

    input_path = Path(args.input).resolve()
    try:
        buffer = load_image(input_path, max_size=args.max_size)
    except FileNotFoundError as e:
        _fail(args, str(e), "FILE_NOT_FOUND")
    except ValueError as e:
        _fail(args, str(e), "INVALID_INPUT")
    logger.info("Loaded %s (%dx%d)", input_path.name, buffer.width, buffer.height)
    return input_path, buffer


def _run_convert(args: argparse.Namespace) -> None:
    """Run the headless convert pipeline."""
    from dot_maker.core.errors import InvalidParameter
    from dot_maker.core.processor import Settings, generate
    from dot_maker.core.writer import save_output

    input_path, buffer = _load(args)

    if args.output:
        output_path = Path(args.output).resolve()
    else:
        output_path = _auto_output_path(input_path, "dots", ".svg")

    settings = Settings(
        mode=HalftoneMode(args.mode),
        grid_size=args.dot_size,
        min_radius=args.min_radius,
        max_radius=args.max_radius,
        brightness=args.brightness,
        contrast=args.contrast,
        gamma=args.gamma,
        black_threshold=args.black,
        white_threshold=args.white,
        color_mode=ColorMode(args.color),
        seed=args.seed,
    )

    try:
        result = generate(buffer, settings)
    except InvalidParameter as e:
        _fail(args, str(e), "INVALID_PARAMETER")

    try:
        save_output(result, output_path)
    except (ValueError, OSError) as e:
        _fail(args, str(e), "PROCESSING_ERROR")

    logger.info("Saved to %s", output_path)
    if args.json:
        print(json.dumps({
            "status": "success",
            "input": str(input_path),
            "output": str(output_path),
            "settings": {
                "mode": settings.mode.value,
                "dot_size": settings.grid_size,
                "min_radius": settings.min_radius,
                "max_radius": settings.max_radius,
                "brightness": settings.brightness,
                "contrast": settings.contrast,
                "gamma": settings.gamma,
                "black": settings.black_threshold,
                "white": settings.white_threshold,
                "color": settings.color_mode.value,
                "seed": settings.seed,
            },
            "metadata": {
                "width": result.width,
                "height": result.height,
                "circles": len(result.circles),
                "elapsed_ms": round(result.elapsed_ms, 1),
                "output_format": output_path.suffix.lstrip("."),
            },
        }, indent=2))


def _run_posterize(args: argparse.Namespace) -> None:
    from dot_maker.core.dither import palette_dither
    from dot_maker.core.errors import InvalidParameter

    input_path, buffer = _load(args)

    if args.output:
        output_path = Path(args.output).resolve()
    else:
        output_path = _auto_output_path(input_path, "posterized", ".png")

    try:
        out = palette_dither(
            buffer,
            ColorMode(args.color),
            args.black,
            args.white,
            diffuse=not args.no_dither,
        )
    except InvalidParameter as e:
        _fail(args, str(e), "INVALID_PARAMETER")

    try:
        img = out.to_image()
        if output_path.suffix.lower() in (".jpg", ".jpeg"):
            img = img.convert("RGB")
        img.save(str(output_path))
    except (ValueError, OSError) as e:
        _fail(args, str(e), "PROCESSING_ERROR")

    logger.info("Saved to %s", output_path)
    if args.json:
        print(json.dumps({
            "status": "success",
            "input": str(input_path),
            "output": str(output_path),
            "settings": {
                "color": args.color,
                "dither": not args.no_dither,
                "black": args.black,
                "white": args.white,
            },
            "metadata": {"width": out.width, "height": out.height},
        }, indent=2))


def main(argv: list[str] | None = None) -> None:
    """Main entry point.

    Routing:
      dot-maker convert <file> [opts]    → convert subcommand
      dot-maker posterize <file> [opts]  → posterize subcommand
      dot-maker <file>                   → launch TUI with file
      dot-maker                          → launch TUI (open dialog)
    """
    raw_args = sys.argv[1:] if argv is None else argv
    if raw_args and raw_args[0] in ("convert", "posterize"):
        parser = _build_parser()
        args = parser.parse_args(raw_args)
        setup_logging(verbose=args.verbose, quiet=args.quiet or args.json)
        if args.command == "posterize":
            _run_posterize(args)
        elif args.json or args.no_tui:
            _run_convert(args)
        else:
            from dot_maker.app import run_app
            run_app(input_path=args.input)
    elif raw_args and raw_args[0] in ("-h", "--help"):
        parser = _build_parser()
        parser.parse_args(raw_args)
    elif raw_args and not raw_args[0].startswith("-"):
        # Positional arg = file path → TUI
        from dot_maker.app import run_app
        run_app(input_path=raw_args[0])
    else:
        from dot_maker.app import run_app
        run_app()
