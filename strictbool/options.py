from __future__ import annotations

from dataclasses import dataclass
from typing import Any


OPTION_ALLOW_NULL_UNION = "allow-null-union"
OPTION_ALLOW_UNDEFINED_UNION = "allow-undefined-union"
OPTION_ALLOW_STRING = "allow-string"
OPTION_ALLOW_ENUM = "allow-enum"
OPTION_ALLOW_NUMBER = "allow-number"
OPTION_ALLOW_MIX = "allow-mix"
OPTION_ALLOW_BOOLEAN_OR_UNDEFINED = "allow-boolean-or-undefined"
OPTION_ALLOW_ANY_RHS = "allow-any-rhs"

# Names accepted by the configuration schema. "allow-mix" is understood by
# parse_options but is not part of the documented set.
RECOGNIZED_OPTIONS: tuple[str, ...] = (
    OPTION_ALLOW_NULL_UNION,
    OPTION_ALLOW_UNDEFINED_UNION,
    OPTION_ALLOW_STRING,
    OPTION_ALLOW_ENUM,
    OPTION_ALLOW_NUMBER,
    OPTION_ALLOW_BOOLEAN_OR_UNDEFINED,
    OPTION_ALLOW_ANY_RHS,
)

DEFAULT_OPTIONS: tuple[str, ...] = (
    OPTION_ALLOW_NULL_UNION,
    OPTION_ALLOW_UNDEFINED_UNION,
    OPTION_ALLOW_BOOLEAN_OR_UNDEFINED,
)

MAX_OPTIONS = 5

OPTIONS_SCHEMA: list[dict[str, Any]] = [
    {
        "type": "array",
        "items": {
            "type": "string",
            "enum": list(RECOGNIZED_OPTIONS),
        },
        "minLength": 0,
        "maxLength": MAX_OPTIONS,
    }
]


class OptionsError(ValueError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class ResolvedOptions:
    strict_null_checks: bool
    allow_null_union: bool = False
    allow_undefined_union: bool = False
    allow_string: bool = False
    allow_enum: bool = False
    allow_number: bool = False
    allow_mix: bool = False
    allow_boolean_or_undefined: bool = False
    allow_any_rhs: bool = False


def validate_options(raw: object) -> list[str]:
    if not isinstance(raw, list):
        raise OptionsError(f"Rule options must be a list of strings, got {type(raw).__name__}")

    if len(raw) > MAX_OPTIONS:
        raise OptionsError(f"Rule options accept at most {MAX_OPTIONS} entries, got {len(raw)}")

    names: list[str] = []
    for index, item in enumerate(raw):
        if not isinstance(item, str):
            raise OptionsError(f"Rule option [{index}] must be a string, got {type(item).__name__}")
        if item not in RECOGNIZED_OPTIONS:
            expected = ", ".join(RECOGNIZED_OPTIONS)
            raise OptionsError(f"Unknown rule option '{item}' (expected one of: {expected})")
        names.append(item)
    return names


def parse_options(rule_arguments: list[str] | tuple[str, ...], strict_null_checks: bool) -> ResolvedOptions:
    def has(name: str) -> bool:
        return name in rule_arguments

    return ResolvedOptions(
        strict_null_checks=strict_null_checks,
        allow_null_union=has(OPTION_ALLOW_NULL_UNION),
        allow_undefined_union=has(OPTION_ALLOW_UNDEFINED_UNION),
        allow_string=has(OPTION_ALLOW_STRING),
        allow_enum=has(OPTION_ALLOW_ENUM),
        allow_number=has(OPTION_ALLOW_NUMBER),
        allow_mix=has(OPTION_ALLOW_MIX),
        allow_boolean_or_undefined=has(OPTION_ALLOW_BOOLEAN_OR_UNDEFINED),
        allow_any_rhs=has(OPTION_ALLOW_ANY_RHS),
    )
