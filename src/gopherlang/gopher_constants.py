"""
Token vocabulary for the gopherlang programming language.

Defines the closed set of token kinds produced by the lexer and consumed by the
parser, together with the lookup tables the lexer uses to classify punctuation
and to separate keywords from ordinary identifiers.

Exports:
    - TokenType: Enumeration of every token kind.
    - keywords: Mapping of reserved words to their token kinds.
    - single_char_tokens: Mapping of one-character punctuation to token kinds.
    - lookup_ident: Resolve identifier text to a keyword kind or IDENT.
"""

from enum import Enum


class TokenType(str, Enum):
    """Closed enumeration of gopherlang token kinds.

    Each member's value is its own name, which is the spelling used in parser
    diagnostics (e.g. ``expected next token to be ASSIGN, got INTEGER instead``).
    """

    ILLEGAL = "ILLEGAL"
    EOF = "EOF"

    # Identifiers and literals
    IDENT = "IDENT"
    INTEGER = "INTEGER"
    STRING = "STRING"

    # Operators
    ASSIGN = "ASSIGN"
    PLUS = "PLUS"
    MINUS = "MINUS"
    BANG = "BANG"
    ASTERISK = "ASTERISK"
    SLASH = "SLASH"
    EQ = "EQ"
    NOT_EQ = "NOT_EQ"
    LT = "LT"
    GT = "GT"

    # Delimiters
    COMMA = "COMMA"
    SEMICOLON = "SEMICOLON"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    LBRACE = "LBRACE"
    RBRACE = "RBRACE"

    # Keywords
    FUNCTION = "FUNCTION"
    LET = "LET"
    TRUE = "TRUE"
    FALSE = "FALSE"
    IF = "IF"
    ELSE = "ELSE"
    RETURN = "RETURN"

    def __str__(self) -> str:
        return self.value


keywords: dict[str, TokenType] = {
    "fn": TokenType.FUNCTION,
    "let": TokenType.LET,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "return": TokenType.RETURN,
}

# `=` and `!` are listed here as their one-character fallbacks; the lexer
# checks for `==` and `!=` before consulting this table.
single_char_tokens: dict[str, TokenType] = {
    "=": TokenType.ASSIGN,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "!": TokenType.BANG,
    "*": TokenType.ASTERISK,
    "/": TokenType.SLASH,
    "<": TokenType.LT,
    ">": TokenType.GT,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
}

two_char_tokens: dict[str, TokenType] = {
    "==": TokenType.EQ,
    "!=": TokenType.NOT_EQ,
}


def lookup_ident(ident: str) -> TokenType:
    """Returns the keyword kind for `ident`, or IDENT if it is not reserved."""
    return keywords.get(ident, TokenType.IDENT)


__all__ = [
    "TokenType",
    "keywords",
    "lookup_ident",
    "single_char_tokens",
    "two_char_tokens",
]
