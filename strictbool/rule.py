from __future__ import annotations

import logging
from typing import Any

from strictbool.ast_nodes import (
    BinaryExpr,
    ConditionalExpr,
    DoWhileStmt,
    Expression,
    ForStmt,
    IfStmt,
    ProgramAst,
    UnaryExpr,
    WhileStmt,
    iter_child_nodes,
)
from strictbool.classifier import get_type_failure
from strictbool.diagnostics import Diagnostic
from strictbool.messages import SyntaxContext, format_failure
from strictbool.options import DEFAULT_OPTIONS, OPTIONS_SCHEMA, ResolvedOptions, parse_options
from strictbool.oracle import TypeOracle
from strictbool.type_model import format_type

logger = logging.getLogger(__name__)

RULE_NAME = "strict-boolean-conditions"

RULE_META: dict[str, Any] = {
    "docs": {
        "description": (
            "Restricts the types allowed in boolean expressions. By default only booleans are allowed.\n"
            "The following nodes are checked:\n"
            "* Arguments to the `!`, `&&`, and `||` operators\n"
            "* The condition in a conditional expression (`cond ? x : y`)\n"
            "* Conditions for `if`, `for`, `while`, and `do-while` statements."
        ),
        "category": "Possible Errors",
        "recommended": True,
    },
    "schema": OPTIONS_SCHEMA,
    "type": "problem",
}

LOGICAL_CONTEXTS: dict[str, SyntaxContext] = {
    "&&": SyntaxContext.LOGICAL_AND,
    "||": SyntaxContext.LOGICAL_OR,
}


class BooleanConditionChecker:
    def __init__(self, oracle: TypeOracle, options: ResolvedOptions):
        self.oracle = oracle
        self.options = options
        self.diagnostics: list[Diagnostic] = []

    def check(self, program: ProgramAst) -> list[Diagnostic]:
        self.diagnostics = []
        self._walk(program)
        return self.diagnostics

    def _walk(self, node: object) -> None:
        if isinstance(node, UnaryExpr):
            if node.operator == "!":
                self._check_expression(node.operand, SyntaxContext.NOT)
        elif isinstance(node, IfStmt):
            self._check_expression(node.condition, SyntaxContext.IF)
        elif isinstance(node, WhileStmt):
            self._check_expression(node.condition, SyntaxContext.WHILE)
        elif isinstance(node, DoWhileStmt):
            self._check_expression(node.condition, SyntaxContext.DO_WHILE)
        elif isinstance(node, ConditionalExpr):
            self._check_expression(node.condition, SyntaxContext.CONDITIONAL)
        elif isinstance(node, ForStmt):
            if node.condition is not None:
                self._check_expression(node.condition, SyntaxContext.FOR)
        elif isinstance(node, BinaryExpr):
            context = LOGICAL_CONTEXTS.get(node.operator)
            if context is not None:
                self._check_expression(node.left, context)
                if not (self.options.allow_any_rhs and self.oracle.type_of(node.right).is_any()):
                    self._check_expression(node.right, context)

        for child in iter_child_nodes(node):
            self._walk(child)

    def _check_expression(self, expr: Expression, context: SyntaxContext) -> None:
        ty = self.oracle.type_of(expr)
        failure = get_type_failure(ty, self.options)
        logger.debug("%s site %s: %s", context.value, type(expr).__name__, format_type(ty))
        if failure is None:
            return

        message = format_failure(context, failure, ty.is_union(), self.options)
        logger.debug("reporting %s: %s", failure.value, message)
        self.diagnostics.append(
            Diagnostic(
                rule=RULE_NAME,
                message=message,
                failure=failure,
                context=context,
                node=expr,
                span=expr.span,
            )
        )


def check_program(
    program: ProgramAst,
    raw_options: list[str] | tuple[str, ...] | None = None,
    *,
    oracle: TypeOracle | None = None,
    strict_null_checks: bool = True,
) -> list[Diagnostic]:
    if oracle is None:
        oracle = TypeOracle(program, strict_null_checks=strict_null_checks)
    rule_arguments = DEFAULT_OPTIONS if raw_options is None else raw_options
    options = parse_options(rule_arguments, oracle.strict_null_checks)
    return BooleanConditionChecker(oracle, options).check(program)
