from __future__ import annotations

from enum import Enum

from strictbool.classifier import TypeFailure
from strictbool.options import OPTION_ALLOW_NULL_UNION, OPTION_ALLOW_UNDEFINED_UNION, ResolvedOptions


class SyntaxContext(Enum):
    NOT = "!"
    IF = "if"
    WHILE = "while"
    DO_WHILE = "do-while"
    FOR = "for"
    CONDITIONAL = "?:"
    LOGICAL_AND = "&&"
    LOGICAL_OR = "||"


LOCATION_PHRASES: dict[SyntaxContext, str] = {
    SyntaxContext.NOT: "operand for the '!' operator",
    SyntaxContext.CONDITIONAL: "condition",
    SyntaxContext.FOR: "'for' condition",
    SyntaxContext.IF: "'if' condition",
    SyntaxContext.WHILE: "'while' condition",
    SyntaxContext.DO_WHILE: "'do-while' condition",
    SyntaxContext.LOGICAL_AND: "operand for the '&&' operator",
    SyntaxContext.LOGICAL_OR: "operand for the '||' operator",
}


class RuleContractError(RuntimeError):
    pass


def describe_location(context: SyntaxContext) -> str:
    phrase = LOCATION_PHRASES.get(context)
    if phrase is None:
        raise RuleContractError(f"No location phrase for syntax context {context!r}")
    return phrase


def string_or(parts: list[str]) -> str:
    if len(parts) == 1:
        return parts[0]
    if len(parts) == 2:
        return f"{parts[0]} or {parts[1]}"
    return "".join(f"{part}, " for part in parts[:-1]) + f"or {parts[-1]}"


def expected_types(options: ResolvedOptions) -> list[str]:
    parts = ["boolean"]
    if options.allow_null_union:
        parts.append("null-union")
    if options.allow_undefined_union:
        parts.append("undefined-union")
    if options.allow_string:
        parts.append("string")
    if options.allow_enum:
        parts.append("enum")
    if options.allow_number:
        parts.append("number")
    if options.allow_boolean_or_undefined:
        parts.append("boolean-or-undefined")
    return parts


def describe_failure(failure: TypeFailure, is_union: bool, strict_null_checks: bool) -> str:
    is_ = "could be" if is_union else "is"

    if failure is TypeFailure.ALWAYS_TRUTHY:
        if strict_null_checks:
            return "is always truthy"
        return (
            "is always truthy. It may be null/undefined, but neither "
            f"'{OPTION_ALLOW_NULL_UNION}' nor '{OPTION_ALLOW_UNDEFINED_UNION}' is set"
        )
    if failure is TypeFailure.ALWAYS_FALSY:
        return "is always falsy"
    if failure is TypeFailure.STRING:
        return f"{is_} a string"
    if failure is TypeFailure.NUMBER:
        return f"{is_} a number"
    if failure is TypeFailure.NULL:
        return f"{is_} null"
    if failure is TypeFailure.UNDEFINED:
        return f"{is_} undefined"
    if failure is TypeFailure.ENUM:
        return f"{is_} an enum"
    if failure is TypeFailure.PROMISE:
        return "promise handled as boolean expression"
    if failure is TypeFailure.MIXES:
        return "unions more than one truthy/falsy type"
    raise RuleContractError(f"No description for failure {failure!r}")


def format_failure(
    context: SyntaxContext,
    failure: TypeFailure,
    is_union: bool,
    options: ResolvedOptions,
) -> str:
    allowed = expected_types(options)
    if len(allowed) == 1:
        expected = f"Only {allowed[0]}s are allowed"
    else:
        expected = f"Allowed types are {string_or(allowed)}"
    reason = describe_failure(failure, is_union, options.strict_null_checks)
    return f"This type is not allowed in the {describe_location(context)} because it {reason}. {expected}."
