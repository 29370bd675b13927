"""RustFrontend — tree-sitter Rust CST → typed ``rua.ast`` tree.

The frontend models every node it is given. Node kinds outside the
supported subset are not dropped: they become ``Unsupported*`` nodes that
carry the tree-sitter node type, and the generator rejects them.
"""

from __future__ import annotations

import logging
from typing import Callable

from .ast import (
    Assign,
    AssignOp,
    Binary,
    BinOp,
    Block,
    Break,
    Call,
    Expr,
    ExprStmt,
    FunctionDef,
    IdentPattern,
    If,
    Item,
    ItemStmt,
    Lit,
    LitKind,
    Literal,
    LocalStmt,
    Loop,
    Module,
    Param,
    Path,
    PathExpr,
    PathPattern,
    Pattern,
    Return,
    SemiStmt,
    Stmt,
    UnsupportedExpr,
    UnsupportedItem,
    UnsupportedPattern,
    UnsupportedStmt,
)
from .errors import RuaSyntaxError
from .parser import source_location
from . import constants

logger = logging.getLogger(__name__)


def parse_int_literal(text: str) -> int:
    """Value of a Rust integer literal (``1_000u32``, ``0xFF``, ``0b1010``)."""
    digits = text.replace("_", "")
    for suffix in constants.RUST_INTEGER_SUFFIXES:
        if digits.endswith(suffix):
            digits = digits[: -len(suffix)]
            break
    prefix = digits[:2].lower()
    if prefix == "0x":
        return int(digits[2:], 16)
    if prefix == "0o":
        return int(digits[2:], 8)
    if prefix == "0b":
        return int(digits[2:], 2)
    return int(digits, 10)


def decode_string_body(body: str) -> str:
    """Resolve the escape sequences of a (non-raw) Rust string body."""
    out: list[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue
        nxt = body[i + 1]
        if nxt in constants.RUST_SIMPLE_ESCAPES:
            out.append(constants.RUST_SIMPLE_ESCAPES[nxt])
            i += 2
        elif nxt == "x":
            out.append(chr(int(body[i + 2 : i + 4], 16)))
            i += 4
        elif nxt == "u":
            close = body.index("}", i)
            code = int(body[i + 3 : close].replace("_", ""), 16)
            if 0xD800 <= code <= 0xDFFF or code > 0x10FFFF:
                raise ValueError(f"invalid unicode character escape: {code:#x}")
            out.append(chr(code))
            i = close + 1
        elif nxt in "\r\n":
            # line continuation: drop the newline and leading whitespace
            i += 2
            while i < len(body) and body[i] in " \t\r\n":
                i += 1
        else:
            raise ValueError(f"unknown character escape: \\{nxt}")
    return "".join(out)


def raw_string_body(text: str) -> str:
    """Contents of a raw string literal such as ``r#"a "quoted" b"#``."""
    rest = text[1:]
    hashes = len(rest) - len(rest.lstrip("#"))
    return rest[hashes + 1 : len(rest) - hashes - 1]


class RustFrontend:
    """Reads a Rust tree-sitter tree into a ``Module``."""

    COMMENT_TYPES: frozenset[str] = frozenset(
        {"comment", "line_comment", "block_comment"}
    )
    SKIPPED_TYPES: frozenset[str] = frozenset(
        {"attribute_item", "inner_attribute_item", "empty_statement"}
    )
    ITEM_TYPES: frozenset[str] = frozenset(
        {
            "function_item",
            "function_signature_item",
            "const_item",
            "static_item",
            "struct_item",
            "enum_item",
            "union_item",
            "type_item",
            "impl_item",
            "trait_item",
            "mod_item",
            "foreign_mod_item",
            "use_declaration",
            "extern_crate_declaration",
            "macro_definition",
            "associated_type",
        }
    )
    LET_CONDITION_TYPES: frozenset[str] = frozenset({"let_condition", "let_chain"})

    def __init__(self):
        self._source: bytes = b""
        self._EXPR_DISPATCH: dict[str, Callable] = {
            "integer_literal": self._build_integer_literal,
            "string_literal": self._build_string_literal,
            "raw_string_literal": self._build_raw_string_literal,
            "float_literal": self._build_other_literal,
            "boolean_literal": self._build_other_literal,
            "char_literal": self._build_other_literal,
            "identifier": self._build_path_expr,
            "self": self._build_path_expr,
            "scoped_identifier": self._build_path_expr,
            "call_expression": self._build_call,
            "binary_expression": self._build_binary,
            "assignment_expression": self._build_assign,
            "compound_assignment_expr": self._build_assign_op,
            "return_expression": self._build_return,
            "loop_expression": self._build_loop,
            "if_expression": self._build_if,
            "break_expression": self._build_break,
        }
        self._STMT_DISPATCH: dict[str, Callable] = {
            "expression_statement": self._build_expression_statement,
            "let_declaration": self._build_let,
            "macro_invocation": self._build_unsupported_stmt,
        }
        self._PATTERN_DISPATCH: dict[str, Callable] = {
            "identifier": self._build_ident_pattern,
            "scoped_identifier": self._build_path_pattern,
            "mut_pattern": self._build_binding_mode_pattern,
            "ref_pattern": self._build_binding_mode_pattern,
        }

    # ── helpers ──────────────────────────────────────────────────

    def _node_text(self, node) -> str:
        return self._source[node.start_byte : node.end_byte].decode("utf-8")

    def _ident_text(self, node) -> str:
        text = self._node_text(node)
        # raw identifiers: r#type names `type`
        return text[2:] if text.startswith("r#") else text

    def _is_noise(self, node) -> bool:
        return node.type in self.COMMENT_TYPES or node.type in self.SKIPPED_TYPES

    def _named_children(self, node) -> list:
        return [c for c in node.children if c.is_named and not self._is_noise(c)]

    def _label(self, node) -> str | None:
        label = next((c for c in node.children if c.type == "label"), None)
        return self._node_text(label) if label is not None else None

    # ── entry point ──────────────────────────────────────────────

    def lower(self, tree, source: bytes) -> Module:
        self._source = source
        root = tree.root_node
        items = tuple(self._build_item(child) for child in self._named_children(root))
        logger.info("Read %d top-level items", len(items))
        return Module(items=items, location=source_location(root))

    # ── items ────────────────────────────────────────────────────

    def _build_item(self, node) -> Item:
        if node.type == "function_item":
            return self._build_function(node)
        return UnsupportedItem(kind=node.type, location=source_location(node))

    def _build_function(self, node) -> FunctionDef:
        name_node = node.child_by_field_name("name")
        params_node = node.child_by_field_name("parameters")
        body_node = node.child_by_field_name("body")
        generics_node = node.child_by_field_name("type_parameters")
        generics = (
            tuple(self._node_text(c) for c in self._named_children(generics_node))
            if generics_node is not None
            else ()
        )
        params = (
            tuple(self._build_param(c) for c in self._named_children(params_node))
            if params_node is not None
            else ()
        )
        return FunctionDef(
            name=self._ident_text(name_node),
            params=params,
            body=self._build_block(body_node),
            generics=generics,
            location=source_location(node),
        )

    def _build_param(self, node) -> Param:
        if node.type == "parameter":
            pattern = self._build_pattern(node.child_by_field_name("pattern"))
        else:
            pattern = UnsupportedPattern(kind=node.type, location=source_location(node))
        return Param(pattern=pattern, location=source_location(node))

    # ── blocks and statements ────────────────────────────────────

    def _build_block(self, node) -> Block:
        stmts = tuple(self._build_stmt(child) for child in self._named_children(node))
        return Block(stmts=stmts, location=source_location(node))

    def _build_stmt(self, node) -> Stmt:
        handler = self._STMT_DISPATCH.get(node.type)
        if handler:
            return handler(node)
        if node.type in self.ITEM_TYPES:
            return ItemStmt(item=self._build_item(node), location=source_location(node))
        # Block tail: an expression without a trailing semicolon
        return ExprStmt(expr=self._build_expr(node), location=source_location(node))

    def _build_expression_statement(self, node) -> Stmt:
        inner = self._named_children(node)[0]
        if inner.type == "macro_invocation":
            return self._build_unsupported_stmt(inner)
        expr = self._build_expr(inner)
        if node.children[-1].type == ";":
            return SemiStmt(expr=expr, location=source_location(node))
        return ExprStmt(expr=expr, location=source_location(node))

    def _build_let(self, node) -> Stmt:
        if node.child_by_field_name("alternative") is not None:
            return UnsupportedStmt(kind="let_else", location=source_location(node))
        value_node = node.child_by_field_name("value")
        return LocalStmt(
            pattern=self._build_pattern(node.child_by_field_name("pattern")),
            init=self._build_expr(value_node) if value_node is not None else None,
            location=source_location(node),
        )

    def _build_unsupported_stmt(self, node) -> Stmt:
        return UnsupportedStmt(kind=node.type, location=source_location(node))

    # ── expressions ──────────────────────────────────────────────

    def _build_expr(self, node) -> Expr:
        handler = self._EXPR_DISPATCH.get(node.type)
        if handler:
            return handler(node)
        return UnsupportedExpr(kind=node.type, location=source_location(node))

    def _lit(self, kind: LitKind, value: str | int, node) -> Lit:
        loc = source_location(node)
        return Lit(literal=Literal(kind=kind, value=value, location=loc), location=loc)

    def _build_integer_literal(self, node) -> Lit:
        return self._lit(LitKind.INT, parse_int_literal(self._node_text(node)), node)

    def _build_string_literal(self, node) -> Lit:
        text = self._node_text(node)
        if text.startswith("b"):
            return self._lit(LitKind.BYTE_STR, text, node)
        if text.startswith("c"):
            return self._lit(LitKind.C_STR, text, node)
        try:
            value = decode_string_body(text[1:-1])
        except ValueError as exc:
            raise RuaSyntaxError(str(exc), source_location(node)) from exc
        return self._lit(LitKind.STR, value, node)

    def _build_raw_string_literal(self, node) -> Lit:
        text = self._node_text(node)
        if not text.startswith("r"):
            return self._lit(LitKind.BYTE_STR, text, node)
        return self._lit(LitKind.STR, raw_string_body(text), node)

    def _build_other_literal(self, node) -> Lit:
        text = self._node_text(node)
        if node.type == "float_literal":
            kind = LitKind.FLOAT
        elif node.type == "boolean_literal":
            kind = LitKind.BOOL
        else:
            kind = LitKind.BYTE if text.startswith("b") else LitKind.CHAR
        return self._lit(kind, text, node)

    def _path(self, node) -> Path:
        return Path(segments=self._path_segments(node), location=source_location(node))

    def _path_segments(self, node) -> tuple[str, ...]:
        if node.type != "scoped_identifier":
            return (self._ident_text(node),)
        prefix_node = node.child_by_field_name("path")
        name_node = node.child_by_field_name("name")
        prefix = self._path_segments(prefix_node) if prefix_node is not None else ("",)
        return prefix + (self._ident_text(name_node),)

    def _build_path_expr(self, node) -> PathExpr:
        return PathExpr(path=self._path(node), location=source_location(node))

    def _build_call(self, node) -> Call:
        func_node = node.child_by_field_name("function")
        args_node = node.child_by_field_name("arguments")
        args = (
            tuple(self._build_expr(c) for c in self._named_children(args_node))
            if args_node is not None
            else ()
        )
        return Call(func=self._build_expr(func_node), args=args, location=source_location(node))

    def _build_binary(self, node) -> Expr:
        op_text = self._node_text(node.child_by_field_name("operator"))
        try:
            op = BinOp(op_text)
        except ValueError:
            return UnsupportedExpr(kind=f"binary operator {op_text}", location=source_location(node))
        return Binary(
            op=op,
            left=self._build_expr(node.child_by_field_name("left")),
            right=self._build_expr(node.child_by_field_name("right")),
            location=source_location(node),
        )

    def _build_assign(self, node) -> Assign:
        return Assign(
            target=self._build_expr(node.child_by_field_name("left")),
            value=self._build_expr(node.child_by_field_name("right")),
            location=source_location(node),
        )

    def _build_assign_op(self, node) -> Expr:
        op_text = self._node_text(node.child_by_field_name("operator")).rstrip("=")
        try:
            op = BinOp(op_text)
        except ValueError:
            return UnsupportedExpr(kind=f"compound operator {op_text}=", location=source_location(node))
        return AssignOp(
            op=op,
            target=self._build_expr(node.child_by_field_name("left")),
            value=self._build_expr(node.child_by_field_name("right")),
            location=source_location(node),
        )

    def _build_return(self, node) -> Return:
        children = self._named_children(node)
        value = self._build_expr(children[0]) if children else None
        return Return(value=value, location=source_location(node))

    def _build_loop(self, node) -> Loop:
        return Loop(
            body=self._build_block(node.child_by_field_name("body")),
            label=self._label(node),
            location=source_location(node),
        )

    def _build_if(self, node) -> If:
        cond_node = node.child_by_field_name("condition")
        if cond_node.type in self.LET_CONDITION_TYPES:
            cond: Expr = UnsupportedExpr(kind=cond_node.type, location=source_location(cond_node))
        else:
            cond = self._build_expr(cond_node)
        alt_node = node.child_by_field_name("alternative")
        return If(
            cond=cond,
            then=self._build_block(node.child_by_field_name("consequence")),
            else_branch=self._build_else(alt_node) if alt_node is not None else None,
            location=source_location(node),
        )

    def _build_else(self, node) -> Expr | Block:
        inner = self._named_children(node)[0]
        if inner.type == "block":
            return self._build_block(inner)
        return self._build_expr(inner)

    def _build_break(self, node) -> Break:
        values = [c for c in self._named_children(node) if c.type != "label"]
        return Break(
            value=self._build_expr(values[0]) if values else None,
            label=self._label(node),
            location=source_location(node),
        )

    # ── patterns ─────────────────────────────────────────────────

    def _build_pattern(self, node) -> Pattern:
        handler = self._PATTERN_DISPATCH.get(node.type)
        if handler:
            return handler(node)
        kind = node.type if node.is_named else "wildcard_pattern"
        return UnsupportedPattern(kind=kind, location=source_location(node))

    def _build_ident_pattern(self, node) -> IdentPattern:
        return IdentPattern(name=self._ident_text(node), location=source_location(node))

    def _build_path_pattern(self, node) -> PathPattern:
        return PathPattern(path=self._path(node), location=source_location(node))

    def _build_binding_mode_pattern(self, node) -> Pattern:
        """``mut x`` / ``ref x``: the binding mode has no Lua counterpart."""
        inner = [c for c in self._named_children(node) if c.type != "mutable_specifier"]
        if len(inner) != 1:
            return UnsupportedPattern(kind=node.type, location=source_location(node))
        return self._build_pattern(inner[0])
