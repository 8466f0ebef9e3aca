import pytest

from strictbool.lexer import LexerError, format_span, lex
from strictbool.tokens import TokenKind


def test_lex_keyword_union() -> None:
    kinds = [token.kind for token in lex("boolean | undefined")]
    assert kinds == [TokenKind.BOOLEAN, TokenKind.PIPE, TokenKind.UNDEFINED, TokenKind.EOF]


def test_lex_generic_and_array_punctuation() -> None:
    kinds = [token.kind for token in lex("Promise<number>[]")]
    assert kinds == [
        TokenKind.IDENT,
        TokenKind.LT,
        TokenKind.NUMBER,
        TokenKind.GT,
        TokenKind.LBRACKET,
        TokenKind.RBRACKET,
        TokenKind.EOF,
    ]


def test_lex_literal_types() -> None:
    tokens = lex("'' | \"a\\\"b\" | -1.5 | 0")
    assert [(token.kind, token.lexeme) for token in tokens] == [
        (TokenKind.STRING_LIT, "''"),
        (TokenKind.PIPE, "|"),
        (TokenKind.STRING_LIT, '"a\\"b"'),
        (TokenKind.PIPE, "|"),
        (TokenKind.MINUS, "-"),
        (TokenKind.NUMBER_LIT, "1.5"),
        (TokenKind.PIPE, "|"),
        (TokenKind.NUMBER_LIT, "0"),
        (TokenKind.EOF, ""),
    ]


def test_lex_identifiers_allow_dollar_and_dots_split() -> None:
    tokens = lex("$Color.Red")
    assert [(token.kind, token.lexeme) for token in tokens] == [
        (TokenKind.IDENT, "$Color"),
        (TokenKind.DOT, "."),
        (TokenKind.IDENT, "Red"),
        (TokenKind.EOF, ""),
    ]


def test_lex_tracks_line_and_column() -> None:
    tokens = lex("string\n  | null", source_path="types.ts")
    null_token = tokens[2]
    assert null_token.kind == TokenKind.NULL
    assert null_token.span.start.line == 2
    assert null_token.span.start.column == 5
    assert format_span(null_token.span) == "types.ts:2:5"


def test_lex_rejects_unknown_character() -> None:
    with pytest.raises(LexerError, match=r"Unexpected character '&' in type at <type>:1:8"):
        lex("string & number")


def test_lex_rejects_unterminated_string() -> None:
    with pytest.raises(LexerError, match="Unterminated string literal type"):
        lex("'abc")
