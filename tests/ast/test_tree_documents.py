from __future__ import annotations

import json
from pathlib import Path

import pytest

from strictbool.ast_dump import ast_to_debug_data, ast_to_debug_json
from strictbool.ast_load import TreeLoadError, ast_from_data, load_tree_document, tree_document_from_data
from strictbool.ast_nodes import (
    BinaryExpr,
    BlockStmt,
    EnumDecl,
    ExprStmt,
    IdentifierExpr,
    IfStmt,
    NumberLiteralExpr,
    ProgramAst,
    iter_child_nodes,
)
from strictbool.lexer import SourcePos, SourceSpan


def _sample_program() -> ProgramAst:
    condition = BinaryExpr(
        IdentifierExpr("name", type_text="string"),
        "&&",
        NumberLiteralExpr(0),
    )
    return ProgramAst(
        enums=[EnumDecl("Color", ["Red", "Green"])],
        statements=[IfStmt(condition, BlockStmt([]), None)],
    )


def test_dump_omits_spans_and_missing_type_text() -> None:
    data = ast_to_debug_data(_sample_program())
    condition = data["statements"][0]["condition"]

    assert condition == {
        "node": "BinaryExpr",
        "left": {"node": "IdentifierExpr", "name": "name", "type_text": "string"},
        "operator": "&&",
        "right": {"node": "NumberLiteralExpr", "value": 0},
    }
    assert "span" not in data


def test_dump_then_load_restores_the_tree() -> None:
    program = _sample_program()
    data = json.loads(ast_to_debug_json(program))
    assert ast_from_data(data) == program


def test_load_short_spans() -> None:
    expr = ast_from_data({"node": "IdentifierExpr", "name": "x", "span": "4:9-4:10"}, source_path="a.ts")
    assert expr.span == SourceSpan(
        start=SourcePos(path="a.ts", offset=0, line=4, column=9),
        end=SourcePos(path="a.ts", offset=0, line=4, column=10),
    )

    point = ast_from_data({"node": "IdentifierExpr", "name": "x", "span": "2:3"})
    assert point.span.start == point.span.end


def test_load_full_spans_from_dump() -> None:
    span = SourceSpan(
        start=SourcePos(path="b.ts", offset=3, line=1, column=4),
        end=SourcePos(path="b.ts", offset=7, line=1, column=8),
    )
    expr = IdentifierExpr("flag", span=span)
    assert ast_from_data(ast_to_debug_data(expr, include_spans=True)) == expr


@pytest.mark.parametrize(
    ("data", "message"),
    [
        ({"name": "x"}, r"\$: mapping without a 'node' key"),
        ({"node": "LambdaExpr"}, r"\$: unknown node 'LambdaExpr'"),
        ({"node": "IdentifierExpr", "name": "x", "kind": 1}, "unexpected field 'kind' for IdentifierExpr"),
        ({"node": "BinaryExpr", "operator": "&&"}, "BinaryExpr is missing field\\(s\\): left, right"),
        ({"node": "IdentifierExpr", "name": "x", "span": "line 3"}, r"\$\.span: invalid span 'line 3'"),
    ],
)
def test_load_errors(data: dict, message: str) -> None:
    with pytest.raises(TreeLoadError, match=message):
        ast_from_data(data)


def test_error_location_points_into_lists() -> None:
    data = {"statements": [{"node": "ExprStmt", "expression": {"node": "Nope"}}]}
    with pytest.raises(TreeLoadError, match=r"\$\.program\.statements\[0\]\.expression: unknown node 'Nope'"):
        tree_document_from_data({"program": data})


def test_tree_document_compiler_options() -> None:
    document = tree_document_from_data({"program": {}})
    assert document.strict_null_checks is True
    assert document.program == ProgramAst()

    loose = tree_document_from_data({"compilerOptions": {"strictNullChecks": False}, "program": {}})
    assert loose.strict_null_checks is False

    with pytest.raises(TreeLoadError, match="strictNullChecks: must be true or false"):
        tree_document_from_data({"compilerOptions": {"strictNullChecks": "yes"}, "program": {}})
    with pytest.raises(TreeLoadError, match="missing required mapping 'program'"):
        tree_document_from_data({})


def test_load_tree_document_from_yaml(tmp_path: Path) -> None:
    path = tmp_path / "tree.yaml"
    path.write_text(
        """
program:
  statements:
    - node: ExprStmt
      expression:
        node: UnaryExpr
        operator: "!"
        operand: {node: IdentifierExpr, name: label, type_text: "string", span: "1:2"}
""",
        encoding="utf-8",
    )
    document = load_tree_document(path)
    operand = document.program.statements[0].expression.operand
    assert operand.type_text == "string"
    assert operand.span.start.path == path.as_posix()
    assert document.source_path == path.as_posix()


def test_iter_child_nodes_follows_field_order() -> None:
    program = _sample_program()
    if_stmt = program.statements[0]
    children = list(iter_child_nodes(if_stmt))
    assert [type(child).__name__ for child in children] == ["BinaryExpr", "BlockStmt"]
    assert [type(child).__name__ for child in iter_child_nodes(ExprStmt(if_stmt.condition))] == ["BinaryExpr"]
