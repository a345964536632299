"""
HTML to PPTX from the command line.

Usage:
    slidewright deck.html -o deck.pptx
    slidewright deck.html --background "#0B1F3A" --no-autoscale -v
"""

import argparse
import logging
import sys
from pathlib import Path

from .html_layout import HtmlOptions, from_html_file

logger = logging.getLogger("slidewright.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slidewright",
        description="Convert an HTML slide outline to PPTX",
    )
    parser.add_argument("input", help="Input .html file")
    parser.add_argument("-o", "--output", default=None,
                        help="Output .pptx file (default: <input>.pptx)")
    parser.add_argument("--title", default="",
                        help="Presentation title stored in the document properties")
    parser.add_argument("--background", default="",
                        help="Slide background when the HTML declares none")
    parser.add_argument("--min-scale", type=float, default=0.6,
                        help="Smallest auto-scale factor before paginating (default: 0.6)")
    parser.add_argument("--no-autoscale", action="store_true",
                        help="Never shrink overflowing slides")
    parser.add_argument("--no-pagination", action="store_true",
                        help="Never continue overflowing content on a new slide")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable verbose logging")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s"
    )

    html_path = Path(args.input).resolve()
    if not html_path.exists():
        print(f"Error: {html_path} not found")
        sys.exit(1)

    output_path = Path(args.output) if args.output else html_path.with_suffix(".pptx")
    options = HtmlOptions(
        title=args.title or html_path.stem,
        slide_background=args.background,
        auto_scale=not args.no_autoscale,
        strict_pagination=not args.no_pagination,
        min_scale=args.min_scale,
    )

    logger.debug("options: %s", options)

    print(f"Parsing {html_path.name}...")
    pres = from_html_file(html_path, options)

    print("Writing PPTX...")
    pres.save(output_path)
    print(f"\nSaved: {output_path}")
    print(f"  {pres.slide_count()} slides, {len(pres.media_files)} media files")


if __name__ == "__main__":
    main()
