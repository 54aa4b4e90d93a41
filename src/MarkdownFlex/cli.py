from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

from .flex_style import DEFAULT_STYLE, load_style
from .message import BUBBLE_SIZES, ConvertOptions, MarkdownFlexMessage
from .utils import configure_logging, read_markdown, write_flex_json


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="markdown-flex",
        description="Convert Markdown into a LINE Flex message JSON.",
    )
    parser.add_argument("input", type=str, help="Path to Markdown file")
    parser.add_argument("-o", "--output", type=str, help="Output JSON path")
    parser.add_argument("--alt-text", type=str, help="Alternative text (defaults to the first 100 characters)")
    parser.add_argument("--size", choices=BUBBLE_SIZES, help="Bubble size (default: giga)")
    parser.add_argument("--style", type=str, help="YAML file with style overrides")
    parser.add_argument("--box", action="store_true", help="Write only the root box instead of a message")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)
    input_path = Path(args.input).expanduser()
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")

    style = DEFAULT_STYLE
    if args.style:
        logging.info("Loading style from %s", args.style)
        style = load_style(Path(args.style).expanduser())

    logging.info("Reading %s", input_path)
    markdown_text = read_markdown(input_path)
    logging.debug("Markdown length: %d chars", len(markdown_text))

    converter = MarkdownFlexMessage(style=style)
    if args.box:
        logging.info("Converting markdown to a flex box...")
        data, text_type = asyncio.run(converter.convert_to_flex_box(markdown_text))
    else:
        logging.info("Converting markdown to a flex message...")
        options = ConvertOptions(alt_text=args.alt_text, size=args.size)
        data, text_type = asyncio.run(converter.convert_to_flex_message(markdown_text, options))
    logging.debug("Text type: %s", text_type.value)

    output_path = write_flex_json(data, input_path, args.output)
    logging.info("Done. Saved to %s", output_path)


if __name__ == "__main__":
    main()
