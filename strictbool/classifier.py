from __future__ import annotations

from enum import Enum

from strictbool.options import ResolvedOptions
from strictbool.type_model import TypeDescription


class TypeKind(Enum):
    STRING = "String"
    FALSE_STRING_LITERAL = "FalseStringLiteral"
    NUMBER = "Number"
    FALSE_NUMBER_LITERAL = "FalseNumberLiteral"
    BOOLEAN = "Boolean"
    FALSE_BOOLEAN_LITERAL = "FalseBooleanLiteral"
    NULL = "Null"
    UNDEFINED = "Undefined"
    ENUM = "EnumLike"
    ALWAYS_TRUTHY = "AlwaysTruthy"
    PROMISE = "Promise"


class TypeFailure(Enum):
    ALWAYS_TRUTHY = "AlwaysTruthy"
    ALWAYS_FALSY = "AlwaysFalsy"
    STRING = "String"
    NUMBER = "Number"
    NULL = "Null"
    UNDEFINED = "Undefined"
    ENUM = "Enum"
    # Kept for message rendering; no aggregation path produces it.
    MIXES = "Mixes"
    PROMISE = "Promise"


def get_kind(ty: TypeDescription) -> TypeKind:
    if ty.is_string_like():
        return TypeKind.FALSE_STRING_LITERAL if ty.is_empty_string_literal() else TypeKind.STRING
    if ty.is_number_like():
        return TypeKind.FALSE_NUMBER_LITERAL if ty.is_zero_literal() else TypeKind.NUMBER
    if ty.is_plain_boolean():
        return TypeKind.BOOLEAN
    if ty.named_type_symbol() == "Promise":
        return TypeKind.PROMISE
    if ty.is_null():
        return TypeKind.NULL
    if ty.is_undefined_or_void():
        return TypeKind.UNDEFINED
    if ty.is_enum_like():
        return TypeKind.ENUM
    if ty.is_boolean_literal():
        return TypeKind.ALWAYS_TRUTHY if ty.is_literal_true() else TypeKind.FALSE_BOOLEAN_LITERAL
    return TypeKind.ALWAYS_TRUTHY


def failure_for_kind(kind: TypeKind, is_in_union: bool, options: ResolvedOptions) -> TypeFailure | None:
    """Fails if a kind of falsiness is not allowed."""
    if kind in (TypeKind.STRING, TypeKind.FALSE_STRING_LITERAL):
        return None if options.allow_string else TypeFailure.STRING
    if kind in (TypeKind.NUMBER, TypeKind.FALSE_NUMBER_LITERAL):
        return None if options.allow_number else TypeFailure.NUMBER
    if kind is TypeKind.ENUM:
        return None if options.allow_enum else TypeFailure.ENUM
    if kind is TypeKind.PROMISE:
        return TypeFailure.PROMISE
    if kind is TypeKind.NULL:
        return TypeFailure.NULL if is_in_union and not options.allow_null_union else None
    if kind is TypeKind.UNDEFINED:
        return TypeFailure.UNDEFINED if is_in_union and not options.allow_undefined_union else None
    return None


_AMBIGUOUS_KINDS = {TypeKind.STRING, TypeKind.NUMBER, TypeKind.BOOLEAN, TypeKind.ENUM}
_FALSY_KINDS = {
    TypeKind.NULL,
    TypeKind.UNDEFINED,
    TypeKind.FALSE_NUMBER_LITERAL,
    TypeKind.FALSE_STRING_LITERAL,
    TypeKind.FALSE_BOOLEAN_LITERAL,
}


def tri_state(kind: TypeKind) -> bool | None:
    """Divides a kind into always truthy (True), always falsy (False) or unknown (None)."""
    if kind in _AMBIGUOUS_KINDS:
        return None
    if kind in _FALSY_KINDS:
        return False
    return True


def is_boolean_or_undefined(ty: TypeDescription) -> bool | None:
    """Returns whether a ``boolean | undefined`` shaped union can be truthy.

    ``None`` means the union has some other member and the shape does not apply.
    """
    is_truthy = False
    for member in ty.union_members():
        if member.is_plain_boolean():
            is_truthy = True
        elif member.is_boolean_literal():
            is_truthy = is_truthy or member.is_literal_true()
        elif not member.is_undefined_or_void():
            return None
    return is_truthy


def get_union_failure(ty: TypeDescription, options: ResolvedOptions) -> TypeFailure | None:
    if options.allow_boolean_or_undefined:
        shape = is_boolean_or_undefined(ty)
        if shape is True:
            return None
        if shape is False:
            return TypeFailure.ALWAYS_FALSY

    # The first offending member in declaration order decides the failure.
    for member in ty.union_members():
        failure = failure_for_kind(get_kind(member), True, options)
        if failure is not None:
            return failure
    return None


def _get_single_type_failure(ty: TypeDescription, options: ResolvedOptions) -> TypeFailure | None:
    kind = get_kind(ty)
    failure = failure_for_kind(kind, False, options)
    if failure is not None:
        return failure

    state = tri_state(kind)
    if state is True:
        # 'any' and 'true' itself pass; every other always-truthy type fails.
        if ty.is_any() or ty.is_boolean_literal():
            return None
        return TypeFailure.ALWAYS_TRUTHY
    if state is False:
        # Only 'false' itself passes; '0' and '""' still fail.
        return None if ty.is_boolean_literal() else TypeFailure.ALWAYS_FALSY
    return None


def get_type_failure(ty: TypeDescription, options: ResolvedOptions) -> TypeFailure | None:
    if ty.is_union():
        failure = get_union_failure(ty, options)
    else:
        failure = _get_single_type_failure(ty, options)

    if (
        failure is TypeFailure.ALWAYS_TRUTHY
        and not options.strict_null_checks
        and (options.allow_null_union or options.allow_undefined_union)
    ):
        # Without strict null checks the value may still be null/undefined.
        return None
    return failure
