"""Composable API functions for the rua translation pipeline.

Each function corresponds to a CLI workflow (translate, --dump-ast) but is
callable programmatically without argparse.
"""

from __future__ import annotations

import dataclasses
import logging
import time
from enum import Enum
from pathlib import Path

from .ast import Block, Literal, Module, Path as AstPath, SourceLocation
from .errors import RuaError, RuaSyntaxError
from .frontend import RustFrontend
from .generator import LuaGenerator
from .parser import Parser, TreeSitterParserFactory
from .translate_types import (
    Diagnostic,
    TranslateConfig,
    TranslationResult,
    TranslationStats,
)

logger = logging.getLogger(__name__)


def _count_lines(text: str) -> int:
    return text.count("\n") + (1 if text and not text.endswith("\n") else 0)


def parse_source(source: str, config: TranslateConfig = TranslateConfig()) -> Module:
    """Parse Rust source text into a typed syntax tree.

    Raises:
        RuaSyntaxError: if the parser reports any error.
    """
    tree = Parser(TreeSitterParserFactory()).parse(source, config.language)
    return RustFrontend().lower(tree, source.encode("utf-8"))


def translate_module(
    module: Module, config: TranslateConfig = TranslateConfig()
) -> TranslationResult:
    """Translate an already parsed module.

    The generated text is only handed out when the whole module translated;
    a failed run carries a diagnostic and an empty ``output``.
    """
    t0 = time.perf_counter()
    stats = TranslationStats(item_count=len(module.items))
    generator = LuaGenerator(config)
    try:
        generator.module(module)
    except RuaError as exc:
        logger.info("Translation stopped: %s", exc)
        return TranslationResult(
            diagnostic=Diagnostic.from_error(exc), stats=stats, error=exc
        )
    output = generator.buf
    stats.generate_time = time.perf_counter() - t0
    stats.output_lines = _count_lines(output)
    logger.info(
        "Generated %d Lua lines from %d items in %.1fms",
        stats.output_lines,
        stats.item_count,
        stats.generate_time * 1000,
    )
    return TranslationResult(output=output, stats=stats)


def translate_source(
    source: str, config: TranslateConfig = TranslateConfig()
) -> TranslationResult:
    """End-to-end: parse → read syntax tree → generate Lua.

    Args:
        source: Rust source code text.
        config: Translation settings.

    Returns:
        A ``TranslationResult``; check ``ok`` before reading ``output``.
    """
    pipeline_start = time.perf_counter()
    stats = TranslationStats(
        source_bytes=len(source.encode("utf-8")),
        source_lines=_count_lines(source),
    )
    try:
        t0 = time.perf_counter()
        tree = Parser(TreeSitterParserFactory()).parse(source, config.language)
        t1 = time.perf_counter()
        stats.parse_time = t1 - t0
        module = RustFrontend().lower(tree, source.encode("utf-8"))
        stats.lower_time = time.perf_counter() - t1
    except RuaError as exc:
        logger.info("Parsing stopped: %s", exc)
        stats.total_time = time.perf_counter() - pipeline_start
        return TranslationResult(
            diagnostic=Diagnostic.from_error(exc), stats=stats, error=exc
        )

    result = translate_module(module, config)
    result.stats = dataclasses.replace(
        stats,
        generate_time=result.stats.generate_time,
        item_count=result.stats.item_count,
        output_lines=result.stats.output_lines,
        total_time=time.perf_counter() - pipeline_start,
    )
    return result


def translate_file(
    path: str | Path, config: TranslateConfig = TranslateConfig()
) -> TranslationResult:
    """Read *path* as UTF-8 and translate it."""
    logger.info("Translating %s", path)
    try:
        source = Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        error = RuaSyntaxError(
            f"source is not valid UTF-8: {exc.reason} at byte offset {exc.start}"
        )
        logger.info("Reading stopped: %s", error)
        return TranslationResult(diagnostic=Diagnostic.from_error(error), error=error)
    return translate_source(source, config)


def dump_ast(source: str, config: TranslateConfig = TranslateConfig()) -> str:
    """Parse *source* and return its syntax tree, one node per line.

    Each line holds the node class and its scalar fields, indented by depth.
    """
    module = parse_source(source, config)
    lines: list[str] = []
    _dump_node(module, 0, lines)
    return "\n".join(lines)


def _dump_node(node, depth: int, lines: list[str]) -> None:
    scalars: list[str] = []
    children: list = []
    for f in dataclasses.fields(node):
        value = getattr(node, f.name)
        if isinstance(value, SourceLocation) or value is None or value == ():
            continue
        if isinstance(value, (AstPath, Literal)):
            scalars.append(f"{f.name}={_scalar(value)}")
        elif isinstance(value, tuple) and dataclasses.is_dataclass(value[0]):
            children.extend(value)
        elif dataclasses.is_dataclass(value):
            children.append(value)
        else:
            scalars.append(f"{f.name}={_scalar(value)}")
    header = type(node).__name__
    if scalars:
        header = f"{header} {' '.join(scalars)}"
    if not isinstance(node, (Module, Block)) and not node.location.is_unknown():
        header = f"{header}  # {node.location}"
    lines.append("  " * depth + header)
    for child in children:
        _dump_node(child, depth + 1, lines)


def _scalar(value) -> str:
    if isinstance(value, AstPath):
        return "::".join(value.segments)
    if isinstance(value, Literal):
        return f"{value.kind.value}:{value.value!r}"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, tuple):
        return ",".join(str(v) for v in value)
    return repr(value) if isinstance(value, str) else str(value)
