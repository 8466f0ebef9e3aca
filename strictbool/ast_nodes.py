from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, fields, is_dataclass

from strictbool.lexer import SourceSpan


@dataclass(frozen=True)
class TypeRef:
    text: str
    span: SourceSpan | None = None


@dataclass(frozen=True)
class ParamDecl:
    name: str
    type_ref: TypeRef
    span: SourceSpan | None = None


@dataclass(frozen=True)
class EnumDecl:
    name: str
    members: list[str]
    span: SourceSpan | None = None


@dataclass(frozen=True)
class FunctionDecl:
    name: str
    params: list[ParamDecl]
    return_type: TypeRef
    body: "BlockStmt"
    span: SourceSpan | None = None


@dataclass(frozen=True)
class IdentifierExpr:
    name: str
    type_text: str | None = None
    span: SourceSpan | None = None


@dataclass(frozen=True)
class StringLiteralExpr:
    value: str
    type_text: str | None = None
    span: SourceSpan | None = None


@dataclass(frozen=True)
class NumberLiteralExpr:
    value: int | float
    type_text: str | None = None
    span: SourceSpan | None = None


@dataclass(frozen=True)
class BooleanLiteralExpr:
    value: bool
    type_text: str | None = None
    span: SourceSpan | None = None


@dataclass(frozen=True)
class NullExpr:
    type_text: str | None = None
    span: SourceSpan | None = None


@dataclass(frozen=True)
class UnaryExpr:
    operator: str
    operand: "Expression"
    type_text: str | None = None
    span: SourceSpan | None = None


@dataclass(frozen=True)
class BinaryExpr:
    left: "Expression"
    operator: str
    right: "Expression"
    type_text: str | None = None
    span: SourceSpan | None = None


@dataclass(frozen=True)
class ConditionalExpr:
    condition: "Expression"
    when_true: "Expression"
    when_false: "Expression"
    type_text: str | None = None
    span: SourceSpan | None = None


@dataclass(frozen=True)
class CallExpr:
    callee: "Expression"
    arguments: list["Expression"]
    type_text: str | None = None
    span: SourceSpan | None = None


@dataclass(frozen=True)
class FieldAccessExpr:
    object_expr: "Expression"
    field_name: str
    type_text: str | None = None
    span: SourceSpan | None = None


@dataclass(frozen=True)
class AwaitExpr:
    operand: "Expression"
    type_text: str | None = None
    span: SourceSpan | None = None


Expression = (
    IdentifierExpr
    | StringLiteralExpr
    | NumberLiteralExpr
    | BooleanLiteralExpr
    | NullExpr
    | UnaryExpr
    | BinaryExpr
    | ConditionalExpr
    | CallExpr
    | FieldAccessExpr
    | AwaitExpr
)


@dataclass(frozen=True)
class BlockStmt:
    statements: list["Statement"]
    span: SourceSpan | None = None


@dataclass(frozen=True)
class VarDeclStmt:
    name: str
    type_ref: TypeRef | None
    initializer: Expression | None
    span: SourceSpan | None = None


@dataclass(frozen=True)
class IfStmt:
    condition: Expression
    then_branch: "Statement"
    else_branch: "Statement | None"
    span: SourceSpan | None = None


@dataclass(frozen=True)
class WhileStmt:
    condition: Expression
    body: "Statement"
    span: SourceSpan | None = None


@dataclass(frozen=True)
class DoWhileStmt:
    body: "Statement"
    condition: Expression
    span: SourceSpan | None = None


@dataclass(frozen=True)
class ForStmt:
    initializer: "VarDeclStmt | ExprStmt | None"
    condition: Expression | None
    update: Expression | None
    body: "Statement"
    span: SourceSpan | None = None


@dataclass(frozen=True)
class ReturnStmt:
    value: Expression | None
    span: SourceSpan | None = None


@dataclass(frozen=True)
class BreakStmt:
    span: SourceSpan | None = None


@dataclass(frozen=True)
class ContinueStmt:
    span: SourceSpan | None = None


@dataclass(frozen=True)
class AssignStmt:
    target: Expression
    value: Expression
    span: SourceSpan | None = None


@dataclass(frozen=True)
class ExprStmt:
    expression: Expression
    span: SourceSpan | None = None


Statement = (
    BlockStmt
    | VarDeclStmt
    | IfStmt
    | WhileStmt
    | DoWhileStmt
    | ForStmt
    | ReturnStmt
    | BreakStmt
    | ContinueStmt
    | AssignStmt
    | ExprStmt
)


@dataclass(frozen=True)
class ProgramAst:
    enums: list[EnumDecl] = field(default_factory=list)
    functions: list[FunctionDecl] = field(default_factory=list)
    statements: list[Statement] = field(default_factory=list)
    span: SourceSpan | None = None


NODE_TYPES: tuple[type, ...] = (
    TypeRef,
    ParamDecl,
    EnumDecl,
    FunctionDecl,
    IdentifierExpr,
    StringLiteralExpr,
    NumberLiteralExpr,
    BooleanLiteralExpr,
    NullExpr,
    UnaryExpr,
    BinaryExpr,
    ConditionalExpr,
    CallExpr,
    FieldAccessExpr,
    AwaitExpr,
    BlockStmt,
    VarDeclStmt,
    IfStmt,
    WhileStmt,
    DoWhileStmt,
    ForStmt,
    ReturnStmt,
    BreakStmt,
    ContinueStmt,
    AssignStmt,
    ExprStmt,
    ProgramAst,
)


def _is_node(value: object) -> bool:
    return is_dataclass(value) and not isinstance(value, (type, SourceSpan))


def iter_child_nodes(node: object) -> Iterator[object]:
    for node_field in fields(node):  # type: ignore[arg-type]
        if node_field.name == "span":
            continue
        value = getattr(node, node_field.name)
        if isinstance(value, list):
            for item in value:
                if _is_node(item):
                    yield item
        elif _is_node(value):
            yield value
