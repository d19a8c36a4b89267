import pytest
from hypothesis import given
from hypothesis import strategies as st

from gopherlang.gopher_constants import TokenType, keywords, lookup_ident
from gopherlang.gopher_lexer import CharacterStream, Lexer, Token, tokenize


def kinds(source: str) -> list[TokenType]:
    return [tok.type for tok in tokenize(source)]


@pytest.mark.parametrize(
    "source,expected",
    [
        ("=", TokenType.ASSIGN),
        ("+", TokenType.PLUS),
        ("-", TokenType.MINUS),
        ("!", TokenType.BANG),
        ("*", TokenType.ASTERISK),
        ("/", TokenType.SLASH),
        ("<", TokenType.LT),
        (">", TokenType.GT),
        (",", TokenType.COMMA),
        (";", TokenType.SEMICOLON),
        ("(", TokenType.LPAREN),
        (")", TokenType.RPAREN),
        ("{", TokenType.LBRACE),
        ("}", TokenType.RBRACE),
    ],
)
def test_single_char_tokens(source: str, expected: TokenType) -> None:
    tokens = tokenize(source)
    assert tokens == [
        Token(expected, source, 1, 1),
        Token(TokenType.EOF, "", 1, 2),
    ]


@pytest.mark.parametrize(
    "source,expected",
    [("==", TokenType.EQ), ("!=", TokenType.NOT_EQ)],
)
def test_two_char_operators(source: str, expected: TokenType) -> None:
    tokens = tokenize(source)
    assert len(tokens) == 2
    assert tokens[0].type == expected
    assert tokens[0].literal == source


def test_assign_and_bang_fall_back_to_single_char() -> None:
    assert kinds("= !") == [TokenType.ASSIGN, TokenType.BANG, TokenType.EOF]
    assert kinds("=!") == [TokenType.ASSIGN, TokenType.BANG, TokenType.EOF]
    assert kinds("!==") == [TokenType.NOT_EQ, TokenType.ASSIGN, TokenType.EOF]
    assert kinds("===") == [TokenType.EQ, TokenType.ASSIGN, TokenType.EOF]


@pytest.mark.parametrize("word", sorted(keywords))
def test_keywords(word: str) -> None:
    tok = Lexer.from_source(word).next_token()
    assert tok.type == keywords[word]
    assert tok.type != TokenType.IDENT
    assert tok.literal == word


def test_keyword_lookup_is_case_sensitive() -> None:
    assert lookup_ident("let") == TokenType.LET
    assert lookup_ident("Let") == TokenType.IDENT
    assert lookup_ident("letter") == TokenType.IDENT


def test_identifier_token() -> None:
    tok = Lexer.from_source("foo_bar").next_token()
    assert tok.type == TokenType.IDENT
    assert tok.literal == "foo_bar"


def test_identifier_stops_at_digit() -> None:
    tokens = tokenize("x1")
    assert [(t.type, t.literal) for t in tokens] == [
        (TokenType.IDENT, "x"),
        (TokenType.INTEGER, "1"),
        (TokenType.EOF, ""),
    ]


def test_integer_token() -> None:
    tokens = tokenize("5")
    assert [(t.type, t.literal) for t in tokens] == [
        (TokenType.INTEGER, "5"),
        (TokenType.EOF, ""),
    ]


def test_integer_followed_by_semicolon() -> None:
    tokens = tokenize("5;")
    assert [(t.type, t.literal) for t in tokens] == [
        (TokenType.INTEGER, "5"),
        (TokenType.SEMICOLON, ";"),
        (TokenType.EOF, ""),
    ]


def test_identifier_and_number_do_not_skip_following_char() -> None:
    assert kinds("abc+123-") == [
        TokenType.IDENT,
        TokenType.PLUS,
        TokenType.INTEGER,
        TokenType.MINUS,
        TokenType.EOF,
    ]


def test_string_token() -> None:
    tok = Lexer.from_source('"hello world"').next_token()
    assert tok.type == TokenType.STRING
    assert tok.literal == "hello world"


def test_empty_string_token() -> None:
    tokens = tokenize('"";')
    assert tokens[0] == Token(TokenType.STRING, "", 1, 1)
    assert tokens[1].type == TokenType.SEMICOLON


def test_unterminated_string_ends_at_eof() -> None:
    lexer = Lexer.from_source('"abc')
    tok = lexer.next_token()
    assert tok.type == TokenType.STRING
    assert tok.literal == "abc"
    assert lexer.next_token().type == TokenType.EOF


def test_escape_sequences_not_processed() -> None:
    tok = Lexer.from_source('"line\\nbreak"').next_token()
    assert tok.literal == "line\\nbreak"


def test_unrecognized_character_returns_illegal() -> None:
    lexer = Lexer.from_source("@")
    token = lexer.next_token()
    assert token.type == TokenType.ILLEGAL
    assert token.literal == "@"
    assert lexer.next_token().type == TokenType.EOF


def test_empty_input_returns_eof() -> None:
    token = Lexer.from_source("").next_token()
    assert token.type == TokenType.EOF
    assert token.literal == ""


def test_eof_is_idempotent() -> None:
    lexer = Lexer.from_source("x")
    assert lexer.next_token().type == TokenType.IDENT
    for _ in range(5):
        tok = lexer.next_token()
        assert tok.type == TokenType.EOF
        assert tok.literal == ""


def test_whitespace_is_skipped() -> None:
    assert kinds(" \t\r\n let \n") == [TokenType.LET, TokenType.EOF]


def test_token_positions() -> None:
    tokens = tokenize("let x\n  = 10;")
    assert [(t.literal, t.line, t.col) for t in tokens] == [
        ("let", 1, 1),
        ("x", 1, 5),
        ("=", 2, 3),
        ("10", 2, 5),
        (";", 2, 7),
        ("", 2, 8),
    ]


def test_token_is_immutable_and_hashable() -> None:
    tok = Token(TokenType.IDENT, "x", 1, 1)
    with pytest.raises(AttributeError):
        tok.literal = "y"  # type: ignore[misc]
    assert {tok, Token(TokenType.IDENT, "x", 1, 1)} == {tok}
    assert repr(tok) == "Token(IDENT, x)"


def test_full_program() -> None:
    source = """let five = 5;
let add = fn(x, y) {
  x + y;
};
let result = add(five, 10);
!-/*5;
5 < 10 > 5;
if (5 < 10) { return true; } else { return false; }
10 == 10; 10 != 9;
"foo bar"
"""
    expected = [
        (TokenType.LET, "let"),
        (TokenType.IDENT, "five"),
        (TokenType.ASSIGN, "="),
        (TokenType.INTEGER, "5"),
        (TokenType.SEMICOLON, ";"),
        (TokenType.LET, "let"),
        (TokenType.IDENT, "add"),
        (TokenType.ASSIGN, "="),
        (TokenType.FUNCTION, "fn"),
        (TokenType.LPAREN, "("),
        (TokenType.IDENT, "x"),
        (TokenType.COMMA, ","),
        (TokenType.IDENT, "y"),
        (TokenType.RPAREN, ")"),
        (TokenType.LBRACE, "{"),
        (TokenType.IDENT, "x"),
        (TokenType.PLUS, "+"),
        (TokenType.IDENT, "y"),
        (TokenType.SEMICOLON, ";"),
        (TokenType.RBRACE, "}"),
        (TokenType.SEMICOLON, ";"),
        (TokenType.LET, "let"),
        (TokenType.IDENT, "result"),
        (TokenType.ASSIGN, "="),
        (TokenType.IDENT, "add"),
        (TokenType.LPAREN, "("),
        (TokenType.IDENT, "five"),
        (TokenType.COMMA, ","),
        (TokenType.INTEGER, "10"),
        (TokenType.RPAREN, ")"),
        (TokenType.SEMICOLON, ";"),
        (TokenType.BANG, "!"),
        (TokenType.MINUS, "-"),
        (TokenType.SLASH, "/"),
        (TokenType.ASTERISK, "*"),
        (TokenType.INTEGER, "5"),
        (TokenType.SEMICOLON, ";"),
        (TokenType.INTEGER, "5"),
        (TokenType.LT, "<"),
        (TokenType.INTEGER, "10"),
        (TokenType.GT, ">"),
        (TokenType.INTEGER, "5"),
        (TokenType.SEMICOLON, ";"),
        (TokenType.IF, "if"),
        (TokenType.LPAREN, "("),
        (TokenType.INTEGER, "5"),
        (TokenType.LT, "<"),
        (TokenType.INTEGER, "10"),
        (TokenType.RPAREN, ")"),
        (TokenType.LBRACE, "{"),
        (TokenType.RETURN, "return"),
        (TokenType.TRUE, "true"),
        (TokenType.SEMICOLON, ";"),
        (TokenType.RBRACE, "}"),
        (TokenType.ELSE, "else"),
        (TokenType.LBRACE, "{"),
        (TokenType.RETURN, "return"),
        (TokenType.FALSE, "false"),
        (TokenType.SEMICOLON, ";"),
        (TokenType.RBRACE, "}"),
        (TokenType.INTEGER, "10"),
        (TokenType.EQ, "=="),
        (TokenType.INTEGER, "10"),
        (TokenType.SEMICOLON, ";"),
        (TokenType.INTEGER, "10"),
        (TokenType.NOT_EQ, "!="),
        (TokenType.INTEGER, "9"),
        (TokenType.SEMICOLON, ";"),
        (TokenType.STRING, "foo bar"),
        (TokenType.EOF, ""),
    ]
    assert [(t.type, t.literal) for t in tokenize(source)] == expected


def test_iteration_stops_after_eof() -> None:
    tokens = list(Lexer(CharacterStream("a b")))
    assert [t.type for t in tokens] == [
        TokenType.IDENT,
        TokenType.IDENT,
        TokenType.EOF,
    ]


def test_peek_beyond_end_returns_empty() -> None:
    stream = CharacterStream("abc")
    stream.next()
    stream.next()
    stream.next()  # At EOF
    assert stream.peek() == ""
    assert stream.peek(5) == ""
    assert stream.next() == ""
    assert stream.position == 3


@given(st.text(alphabet=st.characters(blacklist_categories=["Cs"])))  # type: ignore[misc]
def test_unicode_survival(text: str) -> None:
    tokens = tokenize(text)
    assert tokens[-1].type == TokenType.EOF
    assert all(t.type != TokenType.EOF for t in tokens[:-1])


@given(st.from_regex(r"[A-Za-z_]+", fullmatch=True))  # type: ignore[misc]
def test_letter_runs_are_keywords_or_identifiers(word: str) -> None:
    tokens = tokenize(word)
    assert len(tokens) == 2
    assert tokens[0].literal == word
    assert tokens[0].type == keywords.get(word, TokenType.IDENT)


@given(st.from_regex(r"[0-9]+", fullmatch=True))  # type: ignore[misc]
def test_digit_runs_are_single_integers(digits: str) -> None:
    tokens = tokenize(digits)
    assert tokens[0] == Token(TokenType.INTEGER, digits, 1, 1)
    assert tokens[1].type == TokenType.EOF
