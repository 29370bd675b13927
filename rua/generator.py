"""LuaGenerator — typed Rust syntax tree → Lua source text."""

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
)
from .emitter import Emitter
from .errors import (
    UnsupportedExpressionError,
    UnsupportedItemError,
    UnsupportedLiteralError,
    UnsupportedPathError,
    UnsupportedPatternError,
    UnsupportedStatementError,
)
from .translate_types import TranslateConfig
from . import constants

logger = logging.getLogger(__name__)


def _kind(node) -> str:
    """Diagnostic name of *node*: the recorded kind for unsupported nodes."""
    return getattr(node, "kind", None) or type(node).__name__


def lua_name(name: str) -> str:
    """Spell a Rust identifier so that it is not a Lua reserved word."""
    if name in constants.LUA_RESERVED_WORDS:
        return name + constants.RESERVED_WORD_SUFFIX
    return name


def lua_string(value: str) -> str:
    """Quote *value* as a single-quoted Lua short string."""
    parts = [constants.LUA_STRING_QUOTE]
    for ch in value:
        escaped = constants.LUA_STRING_ESCAPES.get(ch)
        if escaped is not None:
            parts.append(escaped)
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            # three digits so a following digit is never swallowed
            parts.append(f"\\{ord(ch):03d}")
        else:
            parts.append(ch)
    parts.append(constants.LUA_STRING_QUOTE)
    return "".join(parts)


class LuaGenerator:
    """Walks a ``Module`` depth-first and writes Lua into one ``Emitter``.

    Every translation function dispatches over a closed table of node
    classes; a node whose class is missing from the table raises the
    matching ``Unsupported*Error``. Translation stops at the first such
    error, so callers only ever read ``buf`` after ``module`` returned.
    """

    def __init__(self, config: TranslateConfig = TranslateConfig()):
        self._out = Emitter(config.indent_width)
        self._ITEM_DISPATCH: dict[type, Callable] = {
            FunctionDef: self._function_def,
        }
        self._STMT_DISPATCH: dict[type, Callable] = {
            ItemStmt: self._item_stmt,
            ExprStmt: self._expr_stmt,
            SemiStmt: self._expr_stmt,
            LocalStmt: self._local,
        }
        self._EXPR_DISPATCH: dict[type, Callable] = {
            Lit: self._lit,
            PathExpr: self._path_expr,
            Call: self._call,
            Binary: self._binary,
            Assign: self._assign,
            AssignOp: self._assign_op,
            Return: self._return,
            Loop: self._loop,
            If: self._if,
            Break: self._break,
        }
        self._PATTERN_DISPATCH: dict[type, Callable] = {
            IdentPattern: self._ident_pattern,
            PathPattern: self._path_pattern,
        }
        self._LITERAL_DISPATCH: dict[LitKind, Callable] = {
            LitKind.STR: self._str_literal,
            LitKind.INT: self._int_literal,
        }

    @property
    def buf(self) -> str:
        return self._out.getvalue()

    @property
    def depth(self) -> int:
        return self._out.depth

    # ── entry point ──────────────────────────────────────────────

    def module(self, module: Module) -> None:
        for item in module.items:
            self.item(item)

    # ── items ────────────────────────────────────────────────────

    def item(self, item: Item) -> None:
        handler = self._ITEM_DISPATCH.get(type(item))
        if handler is None:
            raise UnsupportedItemError(_kind(item), item.location)
        handler(item)

    def _function_def(self, fn: FunctionDef) -> None:
        if fn.generics:
            raise UnsupportedItemError(
                f"generic parameters <{', '.join(fn.generics)}> on fn {fn.name}",
                fn.location,
            )
        logger.debug("Emitting function %s/%d", fn.name, len(fn.params))
        self._out.write(f"{constants.LUA_FUNCTION} {lua_name(fn.name)}")
        self.params(fn.params)
        self._out.newline()
        self.block(fn.body)
        self._end()
        self._out.newline()
        self._out.newline()

    # ── blocks and statements ────────────────────────────────────

    def block(self, block: Block) -> None:
        with self._out.block():
            for stmt in block.stmts:
                self.stmt(stmt)

    def stmt(self, stmt: Stmt) -> None:
        handler = self._STMT_DISPATCH.get(type(stmt))
        if handler is None:
            raise UnsupportedStatementError(_kind(stmt), stmt.location)
        self._out.indent()
        handler(stmt)
        self._out.newline()

    def _item_stmt(self, stmt: ItemStmt) -> None:
        self.item(stmt.item)

    def _expr_stmt(self, stmt: ExprStmt | SemiStmt) -> None:
        self.expr(stmt.expr)

    def _local(self, stmt: LocalStmt) -> None:
        self._out.write(f"{constants.LUA_LOCAL} ")
        self.pat(stmt.pattern)
        if stmt.init is not None:
            self._out.write(constants.LUA_ASSIGN)
            self.expr(stmt.init)

    def _end(self) -> None:
        self._out.indent()
        self._out.write(constants.LUA_END)

    # ── expressions ──────────────────────────────────────────────

    def expr(self, expr: Expr) -> None:
        handler = self._EXPR_DISPATCH.get(type(expr))
        if handler is None:
            raise UnsupportedExpressionError(_kind(expr), expr.location)
        handler(expr)

    def _lit(self, expr: Lit) -> None:
        self.literal(expr.literal)

    def _path_expr(self, expr: PathExpr) -> None:
        self.path(expr.path)

    def _call(self, expr: Call) -> None:
        self.expr(expr.func)
        self.tuple(expr.args)

    def _binary(self, expr: Binary) -> None:
        self.op(expr.op, expr.left, expr.right)

    def _assign(self, expr: Assign) -> None:
        self.expr(expr.target)
        self._out.write(constants.LUA_ASSIGN)
        self.expr(expr.value)

    def _assign_op(self, expr: AssignOp) -> None:
        # x op= y  →  x = x op y
        self.expr(expr.target)
        self._out.write(constants.LUA_ASSIGN)
        self.op(expr.op, expr.target, expr.value, group_rhs=isinstance(expr.value, Binary))

    def _return(self, expr: Return) -> None:
        self._out.write(constants.LUA_RETURN)
        if expr.value is not None:
            self._out.write(" ")
            self.expr(expr.value)

    def _loop(self, expr: Loop) -> None:
        if expr.label is not None:
            raise UnsupportedExpressionError(f"labelled loop {expr.label}", expr.location)
        self._out.write(constants.LUA_LOOP_HEADER)
        self._out.newline()
        self.block(expr.body)
        self._end()

    def _if(self, expr: If) -> None:
        if expr.else_branch is not None:
            raise UnsupportedExpressionError("else branch", expr.else_branch.location)
        self._out.write(f"{constants.LUA_IF} ")
        self.expr(expr.cond)
        self._out.write(f" {constants.LUA_THEN}")
        self._out.newline()
        self.block(expr.then)
        self._end()

    def _break(self, expr: Break) -> None:
        if expr.label is not None:
            raise UnsupportedExpressionError(f"labelled break {expr.label}", expr.location)
        self._out.write(constants.LUA_BREAK)
        if expr.value is not None:
            self._out.write(" ")
            self.expr(expr.value)

    def op(self, op: BinOp, lhs: Expr, rhs: Expr, group_rhs: bool = False) -> None:
        self.expr(lhs)
        self._out.write(f" {op.symbol} ")
        if group_rhs:
            self._out.write("(")
            self.expr(rhs)
            self._out.write(")")
        else:
            self.expr(rhs)

    def tuple(self, args: tuple[Expr, ...]) -> None:
        self._out.write("(")
        for i, arg in enumerate(args):
            if i:
                self._out.write(constants.LUA_ARG_SEPARATOR)
            self.expr(arg)
        self._out.write(")")

    def params(self, params: tuple[Param, ...]) -> None:
        self._out.write("(")
        for i, param in enumerate(params):
            if i:
                self._out.write(constants.LUA_ARG_SEPARATOR)
            self.pat(param.pattern)
        self._out.write(")")

    # ── leaves ───────────────────────────────────────────────────

    def literal(self, lit: Literal) -> None:
        handler = self._LITERAL_DISPATCH.get(lit.kind)
        if handler is None:
            raise UnsupportedLiteralError(f"{lit.kind.value} {lit.value}", lit.location)
        handler(lit)

    def _str_literal(self, lit: Literal) -> None:
        self._out.write(lua_string(lit.value))

    def _int_literal(self, lit: Literal) -> None:
        self._out.write(str(lit.value))

    def ident(self, name: str) -> None:
        self._out.write(lua_name(name))

    def path(self, path: Path) -> None:
        if len(path.segments) != 1:
            raise UnsupportedPathError("::".join(path.segments), path.location)
        self.ident(path.segments[0])

    def pat(self, pattern: Pattern) -> None:
        handler = self._PATTERN_DISPATCH.get(type(pattern))
        if handler is None:
            raise UnsupportedPatternError(_kind(pattern), pattern.location)
        handler(pattern)

    def _ident_pattern(self, pattern: IdentPattern) -> None:
        self.ident(pattern.name)

    def _path_pattern(self, pattern: PathPattern) -> None:
        self.path(pattern.path)
