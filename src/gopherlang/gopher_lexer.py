"""
Lexical analyzer for the gopherlang programming language.

This module provides core components for converting raw source code into token streams:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Represents a single token with type, literal, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens, one per call.

Features:
    - Skips whitespace (space, tab, newline, carriage return)
    - Recognizes `==` and `!=` ahead of their one-character prefixes
    - Recognizes:
        * Identifiers and keywords (`fn`, `let`, `true`, `false`, `if`, `else`, `return`)
        * Integers (decimal digit runs)
        * Strings (double-quoted, no escapes)
        * Operators and punctuation

The lexer never raises. Characters outside the language are returned as
`ILLEGAL` tokens and left for the parser to report. Once the source is
exhausted every call returns an `EOF` token.

Example:
    >>> lexer = Lexer.from_source("let x = 5;")
    >>> lexer.next_token()
    Token(LET, let)

Exports:
    - CharacterStream
    - Token
    - Lexer
    - tokenize
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from gopherlang.gopher_constants import (
    TokenType,
    lookup_ident,
    single_char_tokens,
    two_char_tokens,
)

logger = logging.getLogger(__name__)

WHITESPACE = " \t\n\r"


def is_letter(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ch == "_"


def is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    This stream is used by the gopherlang lexer to support character-by-character
    scanning with precise source location metadata for diagnostics.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        """
        Initializes the character stream.

        Args:
            source (str): The input source code.
            position (int, optional): Starting position index. Defaults to 0.
            line (int, optional): Starting line number. Defaults to 1.
            column (int, optional): Starting column number. Defaults to 1.
        """
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Returns:
            str: The next character, or an empty string once the source is exhausted.
                 Reading past the end leaves the position unchanged.
        """
        if self.position >= len(self.source):
            return ""
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """
        Returns the character at the given offset from the current position without advancing.

        Args:
            offset (int, optional): Number of characters to look ahead. Defaults to 0.

        Returns:
            str: The character at the offset, or an empty string if out of bounds.
        """
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        """Checks if the stream has reached the end of the source input."""
        return self.position >= len(self.source)


@dataclass(frozen=True)
class Token:
    """Represents a single lexical token in the gopherlang language.

    Tokens are immutable values: two tokens are equal when kind, literal and
    position all match.

    Attributes:
        type (TokenType): The token's kind (e.g. IDENT, INTEGER, EOF).
        literal (str): The source text of the token. Strings exclude their quotes;
            EOF carries an empty literal.
        line (int): The 1-based line number where the token starts (0 if unknown).
        col (int): The 1-based column number where the token starts (0 if unknown).
    """

    type: TokenType
    literal: str
    line: int = 0
    col: int = 0

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.literal})"


class Lexer:
    """Lexical analyzer for the gopherlang language.

    The Lexer takes a CharacterStream and converts it into Token objects on
    demand. Each call to `next_token` scans exactly one token and leaves the
    stream positioned on the first character after it.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    @classmethod
    def from_source(cls, source: str) -> "Lexer":
        """Builds a Lexer over a fresh CharacterStream for `source`."""
        return cls(CharacterStream(source))

    def peek(self, offset: int = 0) -> str:
        return self.stream.peek(offset)

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        while not self.stream.end_of_file() and self.peek() in WHITESPACE:
            self.advance()

    def read_identifier(self) -> str:
        ident = ""
        while not self.stream.end_of_file() and is_letter(self.peek()):
            ident += self.advance()
        return ident

    def read_number(self) -> str:
        num = ""
        while not self.stream.end_of_file() and is_digit(self.peek()):
            num += self.advance()
        return num

    def read_string(self) -> str:
        """Consumes a double-quoted string and returns its contents.

        The closing quote is consumed when present. An unterminated string runs
        to the end of the source.
        """
        self.advance()  # opening quote
        val = ""
        while not self.stream.end_of_file() and self.peek() != '"':
            val += self.advance()
        if self.peek() == '"':
            self.advance()
        return val

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Returns:
            Token: The next token. At end of input this is an EOF token, and it
                stays EOF on every later call.
        """
        self.skip_whitespace()

        line, col = self.stream.line, self.stream.column

        if self.stream.end_of_file():
            return Token(TokenType.EOF, "", line, col)

        ch = self.peek()

        # 1. String
        if ch == '"':
            return Token(TokenType.STRING, self.read_string(), line, col)

        # 2. Identifier or keyword
        if is_letter(ch):
            ident = self.read_identifier()
            return Token(lookup_ident(ident), ident, line, col)

        # 3. Integer
        if is_digit(ch):
            return Token(TokenType.INTEGER, self.read_number(), line, col)

        # 4. Two-character operators win over their one-character prefixes
        pair = ch + self.peek(1)
        if pair in two_char_tokens:
            self.advance()
            self.advance()
            return Token(two_char_tokens[pair], pair, line, col)

        # 5. Single-character punctuation
        self.advance()
        if ch in single_char_tokens:
            return Token(single_char_tokens[ch], ch, line, col)

        # 6. Unknown character
        logger.debug("illegal character %r at line %d, col %d", ch, line, col)
        return Token(TokenType.ILLEGAL, ch, line, col)

    def __iter__(self) -> Iterator[Token]:
        """Yields tokens up to and including the first EOF token."""
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == TokenType.EOF:
                return


def tokenize(source: str) -> list[Token]:
    """Scans `source` completely and returns its tokens, ending with EOF."""
    return list(Lexer.from_source(source))


__all__ = ["CharacterStream", "Lexer", "Token", "tokenize"]
