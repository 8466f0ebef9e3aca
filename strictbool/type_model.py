from __future__ import annotations

import json
from dataclasses import dataclass
from enum import IntFlag


class TypeFlag(IntFlag):
    ANY = 1 << 0
    UNKNOWN = 1 << 1
    STRING = 1 << 2
    NUMBER = 1 << 3
    BOOLEAN = 1 << 4
    STRING_LITERAL = 1 << 5
    NUMBER_LITERAL = 1 << 6
    BOOLEAN_LITERAL = 1 << 7
    ENUM = 1 << 8
    ENUM_LITERAL = 1 << 9
    UNDEFINED = 1 << 10
    VOID = 1 << 11
    NULL = 1 << 12
    OBJECT = 1 << 13
    UNION = 1 << 14

    STRING_LIKE = STRING | STRING_LITERAL
    NUMBER_LIKE = NUMBER | NUMBER_LITERAL
    ENUM_LIKE = ENUM | ENUM_LITERAL
    UNDEFINED_OR_VOID = UNDEFINED | VOID


LiteralValue = str | int | float | bool


@dataclass(frozen=True)
class TypeDescription:
    flags: TypeFlag
    literal: LiteralValue | None = None
    symbol: str | None = None
    arguments: tuple["TypeDescription", ...] = ()
    members: tuple["TypeDescription", ...] = ()

    def has_flag(self, flag: TypeFlag) -> bool:
        return (self.flags & flag) != 0

    def is_any(self) -> bool:
        return self.has_flag(TypeFlag.ANY)

    def is_string_like(self) -> bool:
        return self.has_flag(TypeFlag.STRING_LIKE)

    def is_empty_string_literal(self) -> bool:
        return self.has_flag(TypeFlag.STRING_LITERAL) and self.literal == ""

    def is_number_like(self) -> bool:
        return self.has_flag(TypeFlag.NUMBER_LIKE)

    def is_zero_literal(self) -> bool:
        return self.has_flag(TypeFlag.NUMBER_LITERAL) and self.literal == 0

    def is_plain_boolean(self) -> bool:
        return self.has_flag(TypeFlag.BOOLEAN)

    def is_boolean_literal(self) -> bool:
        return self.has_flag(TypeFlag.BOOLEAN_LITERAL)

    def is_literal_true(self) -> bool:
        return self.is_boolean_literal() and self.literal is True

    def is_literal_false(self) -> bool:
        return self.is_boolean_literal() and self.literal is False

    def is_null(self) -> bool:
        return self.has_flag(TypeFlag.NULL)

    def is_undefined_or_void(self) -> bool:
        return self.has_flag(TypeFlag.UNDEFINED_OR_VOID)

    def is_enum_like(self) -> bool:
        return self.has_flag(TypeFlag.ENUM_LIKE)

    def named_type_symbol(self) -> str | None:
        return self.symbol

    def is_union(self) -> bool:
        # Unions of members of a single enum count as that enum.
        return self.has_flag(TypeFlag.UNION) and not self.has_flag(TypeFlag.ENUM)

    def union_members(self) -> tuple["TypeDescription", ...]:
        return self.members


ANY_TYPE = TypeDescription(TypeFlag.ANY)
UNKNOWN_TYPE = TypeDescription(TypeFlag.UNKNOWN)
STRING_TYPE = TypeDescription(TypeFlag.STRING)
NUMBER_TYPE = TypeDescription(TypeFlag.NUMBER)
BOOLEAN_TYPE = TypeDescription(TypeFlag.BOOLEAN)
TRUE_TYPE = TypeDescription(TypeFlag.BOOLEAN_LITERAL, literal=True)
FALSE_TYPE = TypeDescription(TypeFlag.BOOLEAN_LITERAL, literal=False)
NULL_TYPE = TypeDescription(TypeFlag.NULL)
UNDEFINED_TYPE = TypeDescription(TypeFlag.UNDEFINED)
VOID_TYPE = TypeDescription(TypeFlag.VOID)
OBJECT_TYPE = TypeDescription(TypeFlag.OBJECT)

_KEYWORD_NAMES: dict[TypeFlag, str] = {
    TypeFlag.ANY: "any",
    TypeFlag.UNKNOWN: "unknown",
    TypeFlag.STRING: "string",
    TypeFlag.NUMBER: "number",
    TypeFlag.BOOLEAN: "boolean",
    TypeFlag.NULL: "null",
    TypeFlag.UNDEFINED: "undefined",
    TypeFlag.VOID: "void",
}


def string_literal(value: str) -> TypeDescription:
    return TypeDescription(TypeFlag.STRING_LITERAL, literal=value)


def number_literal(value: int | float) -> TypeDescription:
    return TypeDescription(TypeFlag.NUMBER_LITERAL, literal=value)


def boolean_literal(value: bool) -> TypeDescription:
    return TRUE_TYPE if value else FALSE_TYPE


def enum_member(enum_name: str, member: str) -> TypeDescription:
    return TypeDescription(TypeFlag.ENUM_LITERAL, literal=member, symbol=enum_name)


def enum_type(name: str, members: list[str] | tuple[str, ...]) -> TypeDescription:
    flags = TypeFlag.ENUM | TypeFlag.UNION if members else TypeFlag.ENUM
    return TypeDescription(
        flags,
        symbol=name,
        members=tuple(enum_member(name, member) for member in members),
    )


def named_type(name: str, *arguments: TypeDescription) -> TypeDescription:
    return TypeDescription(TypeFlag.OBJECT, symbol=name, arguments=tuple(arguments))


def promise_of(inner: TypeDescription) -> TypeDescription:
    return named_type("Promise", inner)


def array_of(element: TypeDescription) -> TypeDescription:
    return named_type("Array", element)


def union_of(*types: TypeDescription) -> TypeDescription:
    flat: list[TypeDescription] = []
    for ty in types:
        parts = ty.union_members() if ty.is_union() else (ty,)
        for part in parts:
            if part not in flat:
                flat.append(part)

    if not flat:
        raise ValueError("union_of requires at least one type")

    if any(part.is_any() for part in flat):
        return ANY_TYPE
    if any(part.has_flag(TypeFlag.UNKNOWN) for part in flat):
        return UNKNOWN_TYPE

    if TRUE_TYPE in flat and FALSE_TYPE in flat and BOOLEAN_TYPE not in flat:
        flat.insert(min(flat.index(TRUE_TYPE), flat.index(FALSE_TYPE)), BOOLEAN_TYPE)
    if BOOLEAN_TYPE in flat:
        flat = [part for part in flat if not part.is_boolean_literal()]

    if len(flat) == 1:
        return flat[0]

    enum_names = {part.symbol for part in flat if part.has_flag(TypeFlag.ENUM_LITERAL)}
    if len(enum_names) == 1 and all(part.has_flag(TypeFlag.ENUM_LITERAL) for part in flat):
        return TypeDescription(TypeFlag.UNION | TypeFlag.ENUM, members=tuple(flat))

    return TypeDescription(TypeFlag.UNION, members=tuple(flat))


def widen(ty: TypeDescription) -> TypeDescription:
    if ty.is_union():
        return union_of(*(widen(member) for member in ty.union_members()))
    if ty.has_flag(TypeFlag.STRING_LITERAL):
        return STRING_TYPE
    if ty.has_flag(TypeFlag.NUMBER_LITERAL):
        return NUMBER_TYPE
    if ty.is_boolean_literal():
        return BOOLEAN_TYPE
    return ty


def _format_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_type(ty: TypeDescription | None) -> str:
    if ty is None:
        return "<none>"

    if ty.has_flag(TypeFlag.ENUM) and ty.symbol is not None:
        return ty.symbol

    if ty.has_flag(TypeFlag.UNION):
        return " | ".join(format_type(member) for member in ty.union_members())

    if ty.has_flag(TypeFlag.ENUM_LITERAL):
        return f"{ty.symbol}.{ty.literal}"

    if ty.has_flag(TypeFlag.STRING_LITERAL):
        return json.dumps(ty.literal)

    if ty.has_flag(TypeFlag.NUMBER_LITERAL):
        return _format_number(ty.literal)  # type: ignore[arg-type]

    if ty.is_boolean_literal():
        return "true" if ty.literal else "false"

    if ty.has_flag(TypeFlag.OBJECT):
        if ty.symbol is None:
            return "object"
        if ty.symbol == "Array" and len(ty.arguments) == 1:
            element = ty.arguments[0]
            element_text = format_type(element)
            if element.is_union():
                element_text = f"({element_text})"
            return f"{element_text}[]"
        if ty.arguments:
            return f"{ty.symbol}<{', '.join(format_type(arg) for arg in ty.arguments)}>"
        return ty.symbol

    name = _KEYWORD_NAMES.get(ty.flags)
    if name is not None:
        return name

    return repr(ty)
