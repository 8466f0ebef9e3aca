from __future__ import annotations

import logging

from strictbool.ast_nodes import (
    AwaitExpr,
    BinaryExpr,
    BlockStmt,
    BooleanLiteralExpr,
    CallExpr,
    ConditionalExpr,
    Expression,
    FieldAccessExpr,
    ForStmt,
    FunctionDecl,
    IdentifierExpr,
    NullExpr,
    NumberLiteralExpr,
    ProgramAst,
    StringLiteralExpr,
    TypeRef,
    UnaryExpr,
    VarDeclStmt,
    iter_child_nodes,
)
from strictbool.lexer import SourceSpan, format_span
from strictbool.parser import parse_type
from strictbool.type_model import (
    BOOLEAN_TYPE,
    NULL_TYPE,
    NUMBER_TYPE,
    STRING_TYPE,
    UNDEFINED_TYPE,
    TypeDescription,
    boolean_literal,
    enum_member,
    format_type,
    named_type,
    number_literal,
    string_literal,
    union_of,
    widen,
)

logger = logging.getLogger(__name__)

COMPARISON_OPERATORS = {"==", "!=", "===", "!==", "<", "<=", ">", ">=", "instanceof", "in"}
ARITHMETIC_OPERATORS = {"+", "-", "*", "/", "%", "**", "&", "|", "^", "<<", ">>", ">>>"}
SHORT_CIRCUIT_OPERATORS = {"&&", "||", "??"}

FUNCTION_TYPE = named_type("Function")


class TypeOracleError(ValueError):
    def __init__(self, message: str, span: SourceSpan | None = None):
        location = f" at {format_span(span)}" if span is not None else ""
        super().__init__(f"{message}{location}")
        self.message = message
        self.span = span


class TypeOracle:
    def __init__(self, program: ProgramAst, *, strict_null_checks: bool = True):
        self.program = program
        self.strict_null_checks = strict_null_checks
        self.enums: dict[str, list[str]] = {}
        self.functions: dict[str, TypeDescription] = {}
        self.scope_stack: list[dict[str, TypeDescription]] = []
        self._identifier_types: dict[int, TypeDescription] = {}
        self._cache: dict[int, tuple[Expression, TypeDescription]] = {}

        self._collect_declarations()
        self._resolve_program()

    def type_of(self, expr: Expression) -> TypeDescription:
        cached = self._cache.get(id(expr))
        # The node is stored with its type so a reused id cannot alias it.
        if cached is not None and cached[0] is expr:
            return cached[1]
        ty = self._infer_expression_type(expr)
        self._cache[id(expr)] = (expr, ty)
        return ty

    def _collect_declarations(self) -> None:
        for enum_decl in self.program.enums:
            if enum_decl.name in self.enums:
                raise TypeOracleError(f"Duplicate enum '{enum_decl.name}'", enum_decl.span)
            self.enums[enum_decl.name] = list(enum_decl.members)

        for fn_decl in self.program.functions:
            if fn_decl.name in self.functions or fn_decl.name in self.enums:
                raise TypeOracleError(f"Duplicate declaration '{fn_decl.name}'", fn_decl.span)
            self.functions[fn_decl.name] = self._resolve_type_ref(fn_decl.return_type)

    def _resolve_program(self) -> None:
        self._push_scope()
        # Top-level variables must be in scope before function bodies read them.
        for stmt in self.program.statements:
            self._resolve_node(stmt)
        for fn_decl in self.program.functions:
            self._resolve_function(fn_decl)
        self._pop_scope()

    def _resolve_function(self, fn_decl: FunctionDecl) -> None:
        self._push_scope()
        for param in fn_decl.params:
            self._declare_variable(param.name, self._resolve_type_ref(param.type_ref), param.span)
        self._resolve_node(fn_decl.body)
        self._pop_scope()

    def _resolve_node(self, node: object) -> None:
        if isinstance(node, BlockStmt):
            self._push_scope()
            for stmt in node.statements:
                self._resolve_node(stmt)
            self._pop_scope()
            return

        if isinstance(node, VarDeclStmt):
            if node.initializer is not None:
                self._resolve_node(node.initializer)
            if node.type_ref is not None:
                var_type = self._resolve_type_ref(node.type_ref)
            elif node.initializer is not None:
                var_type = widen(self.type_of(node.initializer))
            else:
                raise TypeOracleError(f"Variable '{node.name}' needs a type or an initializer", node.span)
            self._declare_variable(node.name, var_type, node.span)
            return

        if isinstance(node, ForStmt):
            self._push_scope()
            for child in iter_child_nodes(node):
                self._resolve_node(child)
            self._pop_scope()
            return

        if isinstance(node, IdentifierExpr):
            var_type = self._lookup_variable(node.name)
            if var_type is not None:
                self._identifier_types[id(node)] = var_type
            return

        for child in iter_child_nodes(node):
            self._resolve_node(child)

    def _infer_expression_type(self, expr: Expression) -> TypeDescription:
        if expr.type_text is not None:
            return self._parse_type_text(expr.type_text, expr.span)

        if isinstance(expr, IdentifierExpr):
            var_type = self._identifier_types.get(id(expr))
            if var_type is not None:
                return var_type
            if expr.name == "undefined":
                return UNDEFINED_TYPE
            if expr.name in self.functions:
                return FUNCTION_TYPE
            raise TypeOracleError(f"Unknown identifier '{expr.name}'", expr.span)

        if isinstance(expr, StringLiteralExpr):
            return string_literal(expr.value)

        if isinstance(expr, NumberLiteralExpr):
            return number_literal(expr.value)

        if isinstance(expr, BooleanLiteralExpr):
            return boolean_literal(expr.value)

        if isinstance(expr, NullExpr):
            return NULL_TYPE

        if isinstance(expr, UnaryExpr):
            if expr.operator == "!":
                return BOOLEAN_TYPE
            if expr.operator == "typeof":
                return STRING_TYPE
            if expr.operator == "void":
                return UNDEFINED_TYPE
            return NUMBER_TYPE

        if isinstance(expr, BinaryExpr):
            return self._infer_binary_type(expr)

        if isinstance(expr, ConditionalExpr):
            return union_of(self.type_of(expr.when_true), self.type_of(expr.when_false))

        if isinstance(expr, CallExpr):
            callee = expr.callee
            if (
                isinstance(callee, IdentifierExpr)
                and callee.name in self.functions
                and id(callee) not in self._identifier_types
            ):
                return self.functions[callee.name]
            raise TypeOracleError("Call needs a 'type_text' unless it calls a declared function", expr.span)

        if isinstance(expr, FieldAccessExpr):
            target = expr.object_expr
            if (
                isinstance(target, IdentifierExpr)
                and target.name in self.enums
                and id(target) not in self._identifier_types
            ):
                if expr.field_name not in self.enums[target.name]:
                    raise TypeOracleError(f"Enum '{target.name}' has no member '{expr.field_name}'", expr.span)
                return enum_member(target.name, expr.field_name)
            raise TypeOracleError(f"Field access '.{expr.field_name}' needs a 'type_text'", expr.span)

        if isinstance(expr, AwaitExpr):
            operand_type = self.type_of(expr.operand)
            if operand_type.named_type_symbol() == "Promise" and operand_type.arguments:
                return operand_type.arguments[0]
            return operand_type

        raise TypeOracleError(f"Unsupported expression node '{type(expr).__name__}'")

    def _infer_binary_type(self, expr: BinaryExpr) -> TypeDescription:
        if expr.operator in COMPARISON_OPERATORS:
            return BOOLEAN_TYPE

        if expr.operator in SHORT_CIRCUIT_OPERATORS:
            return union_of(self.type_of(expr.left), self.type_of(expr.right))

        if expr.operator in ARITHMETIC_OPERATORS:
            if expr.operator == "+":
                left = self.type_of(expr.left)
                right = self.type_of(expr.right)
                if left.is_string_like() or right.is_string_like():
                    return STRING_TYPE
            return NUMBER_TYPE

        raise TypeOracleError(f"Unknown binary operator '{expr.operator}'", expr.span)

    def _parse_type_text(self, text: str, span: SourceSpan | None) -> TypeDescription:
        source_path = span.start.path if span is not None else "<type>"
        return parse_type(text, enums=self.enums, source_path=source_path)

    def _resolve_type_ref(self, type_ref: TypeRef) -> TypeDescription:
        return self._parse_type_text(type_ref.text, type_ref.span)

    def _declare_variable(self, name: str, var_type: TypeDescription, span: SourceSpan | None) -> None:
        scope = self.scope_stack[-1]
        if name in scope:
            raise TypeOracleError(f"Duplicate variable '{name}'", span)
        logger.debug("declared '%s': %s", name, format_type(var_type))
        scope[name] = var_type

    def _lookup_variable(self, name: str) -> TypeDescription | None:
        for scope in reversed(self.scope_stack):
            if name in scope:
                return scope[name]
        return None

    def _push_scope(self) -> None:
        self.scope_stack.append({})

    def _pop_scope(self) -> None:
        self.scope_stack.pop()

