"""
Command line entry point.

Usage: dom-to-pptx input.json [output.pptx] [--background COLOR]
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .converter import convert_json_to_pptx
from .errors import SlideInputError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dom-to-pptx",
        description="Convert rendered HTML slides to an editable PowerPoint file.",
    )
    parser.add_argument("input", help="JSON file: a list of {id, html, selector} slide objects")
    parser.add_argument("output", nargs="?", help="output .pptx (default: input name with .pptx)")
    parser.add_argument("--background", help="force a background color on every slide")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="log every skipped node")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="only log errors")
    return parser


def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    # Default output: same name as input but with .pptx extension
    output_file = args.output or str(Path(args.input).with_suffix(".pptx"))
    try:
        asyncio.run(convert_json_to_pptx(args.input, output_file, background_color=args.background))
    except SlideInputError as e:
        print(str(e), file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
