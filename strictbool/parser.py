from __future__ import annotations

from dataclasses import dataclass

from strictbool.lexer import SourceSpan, Token, format_span, lex
from strictbool.tokens import TokenKind
from strictbool.type_model import (
    ANY_TYPE,
    BOOLEAN_TYPE,
    FALSE_TYPE,
    NULL_TYPE,
    NUMBER_TYPE,
    OBJECT_TYPE,
    STRING_TYPE,
    TRUE_TYPE,
    UNDEFINED_TYPE,
    UNKNOWN_TYPE,
    VOID_TYPE,
    TypeDescription,
    array_of,
    enum_member,
    enum_type,
    named_type,
    number_literal,
    string_literal,
    union_of,
)


KEYWORD_TYPES: dict[TokenKind, TypeDescription] = {
    TokenKind.STRING: STRING_TYPE,
    TokenKind.NUMBER: NUMBER_TYPE,
    TokenKind.BOOLEAN: BOOLEAN_TYPE,
    TokenKind.TRUE: TRUE_TYPE,
    TokenKind.FALSE: FALSE_TYPE,
    TokenKind.NULL: NULL_TYPE,
    TokenKind.UNDEFINED: UNDEFINED_TYPE,
    TokenKind.VOID: VOID_TYPE,
    TokenKind.ANY: ANY_TYPE,
    TokenKind.UNKNOWN: UNKNOWN_TYPE,
    TokenKind.OBJECT: OBJECT_TYPE,
}

_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "0": "\0"}


class ParserError(ValueError):
    def __init__(self, message: str, span: SourceSpan):
        super().__init__(f"{message} at {format_span(span)}")
        self.message = message
        self.span = span


@dataclass
class TokenStream:
    tokens: list[Token]
    index: int = 0

    def __post_init__(self) -> None:
        if not self.tokens:
            raise ValueError("TokenStream requires at least one token (EOF)")

    def is_at_end(self) -> bool:
        return self.peek().kind == TokenKind.EOF

    def peek(self, offset: int = 0) -> Token:
        target = self.index + offset
        if target < 0:
            return self.tokens[0]
        if target >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[target]

    def advance(self) -> Token:
        current = self.peek()
        if not self.is_at_end():
            self.index += 1
        return current

    def check(self, kind: TokenKind) -> bool:
        return self.peek().kind == kind

    def match(self, *kinds: TokenKind) -> bool:
        if self.peek().kind in kinds:
            self.advance()
            return True
        return False

    def expect(self, kind: TokenKind, message: str) -> Token:
        if self.check(kind):
            return self.advance()
        raise ParserError(message, self.peek().span)


class TypeParser:
    def __init__(self, tokens: list[Token], *, enums: dict[str, list[str]] | None = None):
        self.stream = TokenStream(tokens)
        self.enums = enums or {}

    def parse(self) -> TypeDescription:
        if self.stream.is_at_end():
            raise ParserError("Expected type", self.stream.peek().span)
        ty = self._parse_union()
        self.stream.expect(TokenKind.EOF, "Unexpected token after type")
        return ty

    def _parse_union(self) -> TypeDescription:
        self.stream.match(TokenKind.PIPE)
        parts = [self._parse_postfix()]
        while self.stream.match(TokenKind.PIPE):
            parts.append(self._parse_postfix())
        return union_of(*parts)

    def _parse_postfix(self) -> TypeDescription:
        ty = self._parse_primary()
        while self.stream.match(TokenKind.LBRACKET):
            self.stream.expect(TokenKind.RBRACKET, "Expected ']' after '[' in array type")
            ty = array_of(ty)
        return ty

    def _parse_primary(self) -> TypeDescription:
        token = self.stream.peek()

        keyword_type = KEYWORD_TYPES.get(token.kind)
        if keyword_type is not None:
            self.stream.advance()
            return keyword_type

        if token.kind == TokenKind.STRING_LIT:
            self.stream.advance()
            return string_literal(_unquote(token.lexeme))

        if token.kind == TokenKind.MINUS:
            self.stream.advance()
            number = self.stream.expect(TokenKind.NUMBER_LIT, "Expected number after '-' in literal type")
            return number_literal(-_parse_number(number.lexeme))

        if token.kind == TokenKind.NUMBER_LIT:
            self.stream.advance()
            return number_literal(_parse_number(token.lexeme))

        if token.kind == TokenKind.LPAREN:
            self.stream.advance()
            inner = self._parse_union()
            self.stream.expect(TokenKind.RPAREN, "Expected ')' after parenthesized type")
            return inner

        if token.kind == TokenKind.IDENT:
            self.stream.advance()
            return self._parse_named(token)

        raise ParserError("Expected type", token.span)

    def _parse_named(self, name_token: Token) -> TypeDescription:
        name = name_token.lexeme

        members = self.enums.get(name)
        if members is not None:
            if not self.stream.match(TokenKind.DOT):
                return enum_type(name, members)
            member = self.stream.expect(TokenKind.IDENT, "Expected enum member name after '.'")
            if member.lexeme not in members:
                raise ParserError(f"Enum '{name}' has no member '{member.lexeme}'", member.span)
            return enum_member(name, member.lexeme)

        while self.stream.match(TokenKind.DOT):
            part = self.stream.expect(TokenKind.IDENT, "Expected identifier after '.' in type name")
            name = f"{name}.{part.lexeme}"

        arguments: list[TypeDescription] = []
        if self.stream.match(TokenKind.LT):
            arguments.append(self._parse_union())
            while self.stream.match(TokenKind.COMMA):
                arguments.append(self._parse_union())
            self.stream.expect(TokenKind.GT, "Expected '>' after type arguments")

        return named_type(name, *arguments)


def _parse_number(lexeme: str) -> int | float:
    return float(lexeme) if "." in lexeme else int(lexeme)


def _unquote(lexeme: str) -> str:
    body = lexeme[1:-1]
    chars: list[str] = []
    index = 0
    while index < len(body):
        ch = body[index]
        if ch == "\\" and index + 1 < len(body):
            index += 1
            ch = _ESCAPES.get(body[index], body[index])
        chars.append(ch)
        index += 1
    return "".join(chars)


def parse_type(
    text: str,
    *,
    enums: dict[str, list[str]] | None = None,
    source_path: str = "<type>",
) -> TypeDescription:
    return TypeParser(lex(text, source_path=source_path), enums=enums).parse()
