"""Tree-Sitter Parsing Layer."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from .ast import SourceLocation
from .errors import RuaSyntaxError
from . import constants

logger = logging.getLogger(__name__)


class ParserFactory(ABC):
    """Abstract factory for obtaining a language parser."""

    @abstractmethod
    def get_parser(self, language: str): ...


class TreeSitterParserFactory(ParserFactory):
    """Concrete factory that delegates to tree-sitter-language-pack."""

    def get_parser(self, language: str):
        import tree_sitter_language_pack as tslp

        return tslp.get_parser(language)


def source_location(node) -> SourceLocation:
    s, e = node.start_point, node.end_point
    return SourceLocation(
        start_line=s[0] + 1,
        start_col=s[1],
        end_line=e[0] + 1,
        end_col=e[1],
    )


def find_error_node(node):
    """Return the first ``ERROR`` or missing node under *node*, or None."""
    if node.type == "ERROR" or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = find_error_node(child)
        if found is not None:
            return found
    return node


class Parser:
    """Thin wrapper around a parser factory.

    Trees with syntax errors are rejected: tree-sitter always recovers, but
    a recovered tree is not a program the translator may consume.
    """

    def __init__(self, parser_factory: ParserFactory):
        self._factory = parser_factory

    def parse(self, source: str, language: str = constants.SOURCE_LANGUAGE):
        parser = self._factory.get_parser(language)
        tree = parser.parse(source.encode("utf-8"))
        if tree.root_node.has_error:
            bad = find_error_node(tree.root_node)
            what = f"missing {bad.type}" if bad.is_missing else "syntax error"
            logger.info("Parse of %s source failed: %s", language, what)
            raise RuaSyntaxError(f"errors while parsing: {what}", source_location(bad))
        return tree
