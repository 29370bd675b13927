"""Tests for LuaGenerator -- typed syntax tree to Lua text."""

from __future__ import annotations

import typing

import pytest

from rua.ast import (
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
    SourceLocation,
    Stmt,
    UnsupportedExpr,
    UnsupportedItem,
    UnsupportedPattern,
    UnsupportedStmt,
)
from rua.errors import (
    UnsupportedConstructError,
    UnsupportedExpressionError,
    UnsupportedItemError,
    UnsupportedLiteralError,
    UnsupportedPathError,
    UnsupportedPatternError,
    UnsupportedStatementError,
)
from rua.generator import LuaGenerator, lua_name, lua_string
from rua.translate_types import TranslateConfig


def _name(name: str) -> PathExpr:
    return PathExpr(path=Path(segments=(name,)))


def _int(n: int) -> Lit:
    return Lit(literal=Literal(kind=LitKind.INT, value=n))


def _str(s: str) -> Lit:
    return Lit(literal=Literal(kind=LitKind.STR, value=s))


def _fn(name: str, params: list[str], stmts: list[Stmt]) -> FunctionDef:
    return FunctionDef(
        name=name,
        params=tuple(Param(pattern=IdentPattern(name=p)) for p in params),
        body=Block(stmts=tuple(stmts)),
    )


def _generate(*items: Item, config: TranslateConfig = TranslateConfig()) -> str:
    generator = LuaGenerator(config)
    generator.module(Module(items=items))
    return generator.buf


def _generate_stmts(*stmts: Stmt) -> str:
    return _generate(_fn("main", [], list(stmts)))


class TestLuaFunctions:
    def test_function_with_arithmetic(self):
        add = _fn(
            "add",
            ["a", "b"],
            [SemiStmt(expr=Return(value=Binary(op=BinOp.ADD, left=_name("a"), right=_name("b"))))],
        )
        assert _generate(add) == "function add(a, b)\n  return a + b\nend\n\n"

    def test_empty_function(self):
        assert _generate(_fn("noop", [], [])) == "function noop()\nend\n\n"

    def test_items_emitted_in_declaration_order(self):
        lua = _generate(_fn("b", [], []), _fn("a", [], []), _fn("c", [], []))
        assert lua == "function b()\nend\n\nfunction a()\nend\n\nfunction c()\nend\n\n"

    def test_nested_function_is_indented(self):
        inner = _fn("inner", ["x"], [SemiStmt(expr=Return(value=_name("x")))])
        lua = _generate(_fn("outer", [], [ItemStmt(item=inner)]))
        assert lua.startswith("function outer()\n  function inner(x)\n    return x\n  end\n")
        assert lua.endswith("end\n\n")

    def test_single_segment_path_parameter(self):
        fn = FunctionDef(
            name="f",
            params=(Param(pattern=PathPattern(path=Path(segments=("x",)))),),
            body=Block(),
        )
        assert _generate(fn).startswith("function f(x)\n")

    def test_generic_function_rejected(self):
        fn = FunctionDef(name="id", params=(), body=Block(), generics=("T",))
        with pytest.raises(UnsupportedItemError, match="generic"):
            _generate(fn)

    def test_unsupported_item_rejected(self):
        with pytest.raises(UnsupportedItemError, match="struct_item"):
            _generate(UnsupportedItem(kind="struct_item"))


class TestLuaStatements:
    def test_local_binding_with_call_initializer(self):
        stmt = LocalStmt(
            pattern=IdentPattern(name="x"),
            init=Call(func=_name("f"), args=(_int(1), _str("a"))),
        )
        assert "  local x = f(1, 'a')\n" in _generate_stmts(stmt)

    def test_local_binding_without_initializer(self):
        assert "  local x\n" in _generate_stmts(LocalStmt(pattern=IdentPattern(name="x")))

    def test_expr_and_semi_statements_emit_identically(self):
        call = Call(func=_name("g"), args=())
        assert _generate_stmts(ExprStmt(expr=call)) == _generate_stmts(SemiStmt(expr=call))

    def test_one_statement_per_line(self):
        lua = _generate_stmts(
            SemiStmt(expr=Call(func=_name("a"))),
            SemiStmt(expr=Call(func=_name("b"))),
        )
        assert lua == "function main()\n  a()\n  b()\nend\n\n"

    def test_unsupported_statement_rejected(self):
        with pytest.raises(UnsupportedStatementError, match="macro_invocation"):
            _generate_stmts(UnsupportedStmt(kind="macro_invocation"))

    def test_destructuring_pattern_rejected(self):
        stmt = LocalStmt(pattern=UnsupportedPattern(kind="tuple_pattern"), init=_int(1))
        with pytest.raises(UnsupportedPatternError, match="tuple_pattern"):
            _generate_stmts(stmt)

    def test_multi_segment_path_pattern_rejected(self):
        stmt = LocalStmt(pattern=PathPattern(path=Path(segments=("a", "b"))))
        with pytest.raises(UnsupportedPathError, match="a::b"):
            _generate_stmts(stmt)


class TestLuaExpressions:
    def test_call_arguments_comma_separated(self):
        call = Call(func=_name("f"), args=(_name("a"), _int(2), _str("c")))
        assert "  f(a, 2, 'c')\n" in _generate_stmts(SemiStmt(expr=call))

    def test_call_without_arguments(self):
        assert "  f()\n" in _generate_stmts(SemiStmt(expr=Call(func=_name("f"))))

    def test_assignment(self):
        assign = Assign(target=_name("x"), value=_int(3))
        assert "  x = 3\n" in _generate_stmts(SemiStmt(expr=assign))

    def test_compound_assignment_desugars(self):
        assign = AssignOp(op=BinOp.ADD, target=_name("x"), value=_name("y"))
        assert "  x = x + y\n" in _generate_stmts(SemiStmt(expr=assign))

    def test_compound_assignment_keeps_grouping_of_binary_value(self):
        value = Binary(op=BinOp.SUB, left=_name("a"), right=_name("b"))
        assign = AssignOp(op=BinOp.SUB, target=_name("x"), value=value)
        assert "  x = x - (a - b)\n" in _generate_stmts(SemiStmt(expr=assign))

    def test_binary_operators_emitted_verbatim(self):
        expr = Binary(op=BinOp.NE, left=_name("a"), right=_name("b"))
        assert "  a != b\n" in _generate_stmts(ExprStmt(expr=expr))

    def test_left_nested_binary_keeps_order(self):
        inner = Binary(op=BinOp.SUB, left=_name("a"), right=_name("b"))
        expr = Binary(op=BinOp.SUB, left=inner, right=_name("c"))
        assert "  a - b - c\n" in _generate_stmts(ExprStmt(expr=expr))

    def test_bare_return(self):
        assert "  return\n" in _generate_stmts(SemiStmt(expr=Return()))

    def test_loop_with_conditional_break(self):
        cond = Binary(op=BinOp.GT, left=_name("x"), right=_int(0))
        body = Block(
            stmts=(
                ExprStmt(
                    expr=If(cond=cond, then=Block(stmts=(SemiStmt(expr=Break(value=_int(1))),)))
                ),
            )
        )
        lua = _generate_stmts(ExprStmt(expr=Loop(body=body)))
        assert lua == (
            "function main()\n"
            "  while true do\n"
            "    if x > 0 then\n"
            "      break 1\n"
            "    end\n"
            "  end\n"
            "end\n\n"
        )

    def test_bare_break(self):
        lua = _generate_stmts(ExprStmt(expr=Loop(body=Block(stmts=(SemiStmt(expr=Break()),)))))
        assert "    break\n" in lua

    def test_else_branch_rejected(self):
        expr = If(cond=_name("c"), then=Block(), else_branch=Block())
        with pytest.raises(UnsupportedExpressionError, match="else branch"):
            _generate_stmts(ExprStmt(expr=expr))

    def test_labelled_loop_rejected(self):
        with pytest.raises(UnsupportedExpressionError, match="labelled loop"):
            _generate_stmts(ExprStmt(expr=Loop(body=Block(), label="'outer")))

    def test_labelled_break_rejected(self):
        body = Block(stmts=(SemiStmt(expr=Break(label="'outer")),))
        with pytest.raises(UnsupportedExpressionError, match="labelled break"):
            _generate_stmts(ExprStmt(expr=Loop(body=body)))

    def test_unsupported_expression_rejected(self):
        with pytest.raises(UnsupportedExpressionError, match="while_expression"):
            _generate_stmts(ExprStmt(expr=UnsupportedExpr(kind="while_expression")))

    def test_multi_segment_path_rejected(self):
        call = Call(func=PathExpr(path=Path(segments=("std", "process", "exit"))), args=())
        with pytest.raises(UnsupportedPathError, match="std::process::exit"):
            _generate_stmts(SemiStmt(expr=call))

    @pytest.mark.parametrize(
        "kind", [LitKind.FLOAT, LitKind.BOOL, LitKind.CHAR, LitKind.BYTE, LitKind.BYTE_STR]
    )
    def test_other_literal_kinds_rejected(self, kind):
        lit = Lit(literal=Literal(kind=kind, value="?"))
        with pytest.raises(UnsupportedLiteralError, match=kind.value):
            _generate_stmts(LocalStmt(pattern=IdentPattern(name="x"), init=lit))


class TestLuaLeaves:
    def test_integer_emitted_as_decimal(self):
        assert "  local n = 255\n" in _generate_stmts(
            LocalStmt(pattern=IdentPattern(name="n"), init=_int(255))
        )

    def test_string_quote_escaped(self):
        assert lua_string("it's") == "'it\\'s'"

    def test_string_backslash_and_newline_escaped(self):
        assert lua_string("a\\b\nc") == "'a\\\\b\\nc'"

    def test_control_character_uses_three_digit_escape(self):
        assert lua_string("\x01" + "2") == "'\\0012'"

    def test_non_ascii_passes_through(self):
        assert lua_string("héllo") == "'héllo'"

    def test_reserved_word_renamed(self):
        assert lua_name("end") == "end_"
        assert lua_name("nil") == "nil_"
        assert lua_name("total") == "total"

    def test_suffixed_spelling_is_left_alone(self):
        assert lua_name("end_") == "end_"

    def test_reserved_word_renamed_consistently(self):
        fn = _fn("repeat", ["then"], [SemiStmt(expr=Return(value=_name("then")))])
        assert _generate(fn) == "function repeat_(then_)\n  return then_\nend\n\n"


class TestLuaGeneratorInvariants:
    def test_indent_width_from_config(self):
        lua = _generate(
            _fn("f", [], [SemiStmt(expr=Return())]), config=TranslateConfig(indent_width=4)
        )
        assert lua == "function f()\n    return\nend\n\n"

    def test_depth_restored_after_rejection_in_nested_block(self):
        generator = LuaGenerator()
        bad = Block(stmts=(ExprStmt(expr=UnsupportedExpr(kind="closure_expression")),))
        fn = _fn("f", [], [ExprStmt(expr=Loop(body=bad))])
        with pytest.raises(UnsupportedExpressionError):
            generator.module(Module(items=(fn,)))
        assert generator.depth == 0

    def test_deterministic_output(self):
        fn = _fn("f", ["a"], [SemiStmt(expr=AssignOp(op=BinOp.MUL, target=_name("a"), value=_int(2)))])
        assert _generate(fn) == _generate(fn)

    def test_error_carries_location(self):
        loc = SourceLocation(start_line=3, start_col=4, end_line=3, end_col=9)
        with pytest.raises(UnsupportedConstructError) as exc_info:
            _generate_stmts(ExprStmt(expr=UnsupportedExpr(kind="unary_expression", location=loc)))
        assert exc_info.value.location == loc
        assert "3:4-3:9" in str(exc_info.value)

    @pytest.mark.parametrize(
        "union, table",
        [
            (Expr, "_EXPR_DISPATCH"),
            (Stmt, "_STMT_DISPATCH"),
            (Item, "_ITEM_DISPATCH"),
            (Pattern, "_PATTERN_DISPATCH"),
        ],
    )
    def test_every_supported_case_has_a_handler(self, union, table):
        dispatch = getattr(LuaGenerator(), table)
        supported = {c for c in typing.get_args(union) if not c.__name__.startswith("Unsupported")}
        assert supported == set(dispatch)
