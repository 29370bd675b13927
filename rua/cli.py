"""Command-line entry point: ``rua <file.rs>``."""

from __future__ import annotations

import argparse
import logging
import sys

from .api import dump_ast, translate_file
from .errors import RuaError
from .translate_types import TranslateConfig
from . import constants

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rua", description="Translate a subset of Rust into Lua"
    )
    parser.add_argument("file", nargs="?", help="Rust source file to translate")
    parser.add_argument(
        "--indent-width",
        "-w",
        type=int,
        default=constants.DEFAULT_INDENT_WIDTH,
        help=f"Spaces per nesting level (default: {constants.DEFAULT_INDENT_WIDTH})",
    )
    parser.add_argument(
        "--dump-ast",
        action="store_true",
        help="Only print the syntax tree (no Lua generation)",
    )
    parser.add_argument(
        "--no-banner",
        action="store_true",
        help="Do not print the banner on stderr before the generated program",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable progress logging on stderr",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if args.indent_width < 0:
        parser.error("--indent-width must be non-negative")

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    if not args.file:
        print(constants.USAGE, file=sys.stderr)
        return 0

    config = TranslateConfig(indent_width=args.indent_width)

    try:
        if args.dump_ast:
            with open(args.file, encoding="utf-8") as f:
                print(dump_ast(f.read(), config))
            return 0
        result = translate_file(args.file, config)
    except (OSError, UnicodeDecodeError, RuaError) as exc:
        print(f"rua: {args.file}: {exc}", file=sys.stderr)
        return 1

    if not result.ok:
        print(f"rua: {args.file}: {result.diagnostic}", file=sys.stderr)
        return 1

    if not args.no_banner:
        print(constants.GENERATED_BANNER, file=sys.stderr)
    print(result.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
