from __future__ import annotations

from enum import Enum


class TokenKind(str, Enum):
    EOF = "EOF"

    IDENT = "IDENT"
    NUMBER_LIT = "NUMBER_LIT"
    STRING_LIT = "STRING_LIT"

    STRING = "STRING"
    NUMBER = "NUMBER"
    BOOLEAN = "BOOLEAN"
    TRUE = "TRUE"
    FALSE = "FALSE"
    NULL = "NULL"
    UNDEFINED = "UNDEFINED"
    VOID = "VOID"
    ANY = "ANY"
    UNKNOWN = "UNKNOWN"
    OBJECT = "OBJECT"

    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    LBRACKET = "LBRACKET"
    RBRACKET = "RBRACKET"
    LT = "LT"
    GT = "GT"
    COMMA = "COMMA"
    DOT = "DOT"
    PIPE = "PIPE"
    MINUS = "MINUS"


KEYWORDS: dict[str, TokenKind] = {
    "string": TokenKind.STRING,
    "number": TokenKind.NUMBER,
    "boolean": TokenKind.BOOLEAN,
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
    "null": TokenKind.NULL,
    "undefined": TokenKind.UNDEFINED,
    "void": TokenKind.VOID,
    "any": TokenKind.ANY,
    "unknown": TokenKind.UNKNOWN,
    "object": TokenKind.OBJECT,
}


ONE_CHAR_TOKENS: dict[str, TokenKind] = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    "<": TokenKind.LT,
    ">": TokenKind.GT,
    ",": TokenKind.COMMA,
    ".": TokenKind.DOT,
    "|": TokenKind.PIPE,
    "-": TokenKind.MINUS,
}
