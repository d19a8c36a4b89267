"""
gopherlang Parser

Parses gopherlang tokens into an abstract syntax tree (AST).

This module implements a Pratt (operator-precedence) recursive-descent parser. Tokens
are pulled from a `Lexer` one at a time; the parser only ever looks at two of them,
`cur_token` and `peek_token`. Expression parsing is driven by two dispatch tables
keyed by token kind: a prefix table for tokens that can start an expression and an
infix table for tokens that can continue one. Each infix token also carries a
binding strength from `precedences`, which is all the parser needs to resolve
precedence and associativity.

Supported Constructs
--------------------
- Statements:
    * `let <ident> = <expr>;`
    * `return <expr>;`
    * Bare expressions, with the trailing `;` optional
    * `{ ... }` blocks as the bodies of `if` and `fn`

- Expressions:
    * Identifiers, integers, strings, `true` / `false`
    * Prefix operators: `-x`, `!x`
    * Infix operators: `+ - * / == != < >` (left-associative)
    * Grouping with parentheses
    * `if (<cond>) { ... } else { ... }`
    * Function literals: `fn(a, b) { ... }`
    * Calls: `add(1, 2 * 3)`, `fn(x) { x }(5)`

Parser Behavior
---------------
- Never stops at the first problem. Every error is recorded in `Parser.errors`, the
  failing statement is dropped, and parsing resumes at the next statement boundary:
  after a `;` or `}` at the same brace depth, or before a `let` or `return`.
- A failed expression never yields a partial node. A failed statement inside a
  `{ ... }` block is dropped from that block only; the enclosing `if` or `fn`
  is still built from the statements that did parse.
- In strict mode the full pass still runs; afterwards `ParserError` is raised if
  any errors were collected.

Entry Points
------------
- `Parser.parse_program()`: Parse a full program into a `Program`.
- `parse()`: Parse a source string, returning the Program and its errors.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import IntEnum

from gopherlang.gopher_ast import (
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    IfExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
    StringLiteral,
)
from gopherlang.gopher_constants import TokenType
from gopherlang.gopher_lexer import Lexer, Token

logger = logging.getLogger(__name__)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class Precedence(IntEnum):
    """Binding strengths, lowest to highest."""

    LOWEST = 1
    EQUALS = 2  # ==
    LESSGREATER = 3  # > or <
    SUM = 4  # +
    PRODUCT = 5  # *
    PREFIX = 6  # -x or !x
    CALL = 7  # f(x)


precedences: dict[TokenType, Precedence] = {
    TokenType.EQ: Precedence.EQUALS,
    TokenType.NOT_EQ: Precedence.EQUALS,
    TokenType.LT: Precedence.LESSGREATER,
    TokenType.GT: Precedence.LESSGREATER,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
    TokenType.ASTERISK: Precedence.PRODUCT,
    TokenType.SLASH: Precedence.PRODUCT,
    TokenType.LPAREN: Precedence.CALL,
}

PrefixParseFn = Callable[[], "Expression | None"]
InfixParseFn = Callable[["Expression"], "Expression | None"]


class ParserError(SyntaxError):
    """Raised by a strict parser once a full pass has collected errors.

    Attributes:
        errors (list[str]): Every message recorded during the pass, in order.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(
            f"{len(self.errors)} parse error(s): " + "; ".join(self.errors)
        )


class Parser:
    """
    gopherlang Parser Class

    Turns the token stream of one `Lexer` into a `Program`. The parser owns the
    lexer exclusively and is good for a single pass.

    Attributes
    ----------
    lexer : Lexer
        Source of tokens.
    strict : bool
        Raise `ParserError` at the end of `parse_program` if errors were recorded.
    cur_token : Token
        The token under examination.
    peek_token : Token
        The token after `cur_token`.
    errors : list[str]
        Diagnostics recorded so far, in source order.
    brace_depth : int
        Number of `{` enclosing `cur_token`, used to resynchronize after errors.
    prefix_parse_fns : dict[TokenType, PrefixParseFn]
        Behaviors for tokens that start an expression.
    infix_parse_fns : dict[TokenType, InfixParseFn]
        Behaviors for tokens that continue an expression given its left side.
    """

    def __init__(self, lexer: Lexer, strict: bool = False) -> None:
        self.lexer = lexer
        self.strict = strict
        self.errors: list[str] = []

        self.cur_token: Token = Token(TokenType.EOF, "")
        self.peek_token: Token = Token(TokenType.EOF, "")
        # Number of `{` enclosing cur_token; a brace token counts at its outer level
        self.brace_depth = 0

        self.prefix_parse_fns: dict[TokenType, PrefixParseFn] = {}
        self.infix_parse_fns: dict[TokenType, InfixParseFn] = {}

        self.register_prefix(TokenType.IDENT, self.parse_identifier)
        self.register_prefix(TokenType.INTEGER, self.parse_integer_literal)
        self.register_prefix(TokenType.STRING, self.parse_string_literal)
        self.register_prefix(TokenType.TRUE, self.parse_boolean)
        self.register_prefix(TokenType.FALSE, self.parse_boolean)
        self.register_prefix(TokenType.BANG, self.parse_prefix_expression)
        self.register_prefix(TokenType.MINUS, self.parse_prefix_expression)
        self.register_prefix(TokenType.LPAREN, self.parse_grouped_expression)
        self.register_prefix(TokenType.IF, self.parse_if_expression)
        self.register_prefix(TokenType.FUNCTION, self.parse_function_literal)

        for op in (
            TokenType.PLUS,
            TokenType.MINUS,
            TokenType.ASTERISK,
            TokenType.SLASH,
            TokenType.EQ,
            TokenType.NOT_EQ,
            TokenType.LT,
            TokenType.GT,
        ):
            self.register_infix(op, self.parse_infix_expression)
        self.register_infix(TokenType.LPAREN, self.parse_call_expression)

        # Read two tokens so that both cur_token and peek_token are set
        self.next_token()
        self.next_token()

    # Token handling

    def register_prefix(self, token_type: TokenType, fn: PrefixParseFn) -> None:
        self.prefix_parse_fns[token_type] = fn

    def register_infix(self, token_type: TokenType, fn: InfixParseFn) -> None:
        self.infix_parse_fns[token_type] = fn

    def next_token(self) -> None:
        if self.cur_token.type == TokenType.LBRACE:
            self.brace_depth += 1
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()
        if self.cur_token.type == TokenType.RBRACE:
            self.brace_depth = max(0, self.brace_depth - 1)

    def cur_token_is(self, *types: TokenType) -> bool:
        return self.cur_token.type in types

    def peek_token_is(self, token_type: TokenType) -> bool:
        return self.peek_token.type == token_type

    def expect_peek(self, token_type: TokenType) -> bool:
        """Advances if `peek_token` has the expected kind, otherwise records an error."""
        if self.peek_token_is(token_type):
            self.next_token()
            return True
        self.peek_error(token_type)
        return False

    def peek_precedence(self) -> Precedence:
        return precedences.get(self.peek_token.type, Precedence.LOWEST)

    def cur_precedence(self) -> Precedence:
        return precedences.get(self.cur_token.type, Precedence.LOWEST)

    def skip_to_boundary(self, depth: int = 0) -> None:
        """Skips the rest of a failed statement whose tokens sit at brace `depth`.

        Stops on EOF, on a `;` or `}` at `depth`, on the `}` closing the enclosing
        block, or just before a `let` / `return` at `depth`. Braces opened inside
        the skipped tokens are matched first, so their `}` never ends the skip.
        """
        while not self.cur_token_is(TokenType.EOF):
            if self.brace_depth < depth:
                return
            if self.brace_depth == depth:
                if self.cur_token_is(TokenType.SEMICOLON, TokenType.RBRACE):
                    return
                if not self.cur_token_is(TokenType.LBRACE) and (
                    self.peek_token_is(TokenType.LET)
                    or self.peek_token_is(TokenType.RETURN)
                ):
                    return
            self.next_token()

    # Errors

    def record_error(self, msg: str) -> None:
        logger.debug(
            "parse error at line %d, col %d: %s",
            self.cur_token.line,
            self.cur_token.col,
            msg,
        )
        self.errors.append(msg)

    def peek_error(self, token_type: TokenType) -> None:
        self.record_error(
            f"expected next token to be {token_type}, got {self.peek_token.type} instead"
        )

    def no_prefix_parse_fn_error(self, token_type: TokenType) -> None:
        self.record_error(f"no prefix parse function for {token_type} found")

    def raise_for_errors(self) -> None:
        """Raises ParserError if any errors have been recorded."""
        if self.errors:
            raise ParserError(self.errors)

    # Statements

    def parse_program(self) -> Program:
        """Parse the whole token stream into a Program.

        Statements that fail to parse are left out and the parser skips ahead to
        the next statement boundary, so one pass reports every independent error.
        """
        program = Program()
        while not self.cur_token_is(TokenType.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                program.statements.append(stmt)
            else:
                self.skip_to_boundary()
            self.next_token()

        logger.debug(
            "parsed %d statement(s) with %d error(s)",
            len(program.statements),
            len(self.errors),
        )
        if self.strict:
            self.raise_for_errors()
        return program

    def parse_statement(self) -> Statement | None:
        if self.cur_token_is(TokenType.LET):
            return self.parse_let_statement()
        if self.cur_token_is(TokenType.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self) -> LetStatement | None:
        """Parse `let <ident> = <expr>` with an optional trailing `;`."""
        let_tok = self.cur_token

        if not self.expect_peek(TokenType.IDENT):
            return None
        name = Identifier(
            self.cur_token.literal, line=self.cur_token.line, col=self.cur_token.col
        )

        if not self.expect_peek(TokenType.ASSIGN):
            return None
        self.next_token()

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        if self.peek_token_is(TokenType.SEMICOLON):
            self.next_token()

        return LetStatement(name, value, line=let_tok.line, col=let_tok.col)

    def parse_return_statement(self) -> ReturnStatement | None:
        return_tok = self.cur_token
        self.next_token()

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        if self.peek_token_is(TokenType.SEMICOLON):
            self.next_token()

        return ReturnStatement(value, line=return_tok.line, col=return_tok.col)

    def parse_expression_statement(self) -> ExpressionStatement | None:
        start = self.cur_token
        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        # Optional so that single expressions like `5 + 5` parse on their own
        if self.peek_token_is(TokenType.SEMICOLON):
            self.next_token()

        return ExpressionStatement(value, line=start.line, col=start.col)

    def parse_block_statement(self) -> BlockStatement | None:
        """Parse `{ ... }` with `cur_token` on the `{`. Ends with `cur_token` on `}`."""
        brace_tok = self.cur_token
        depth = self.brace_depth + 1
        statements: list[Statement] = []
        self.next_token()

        while not self.cur_token_is(TokenType.RBRACE, TokenType.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
                self.next_token()
                continue
            self.skip_to_boundary(depth)
            # Leave this block's own `}` for the loop condition
            if not self.cur_token_is(TokenType.EOF) and self.brace_depth >= depth:
                self.next_token()

        if self.cur_token_is(TokenType.EOF):
            self.record_error(
                f"expected next token to be {TokenType.RBRACE}, got {TokenType.EOF} instead"
            )
            return None

        return BlockStatement(
            tuple(statements), line=brace_tok.line, col=brace_tok.col
        )

    # Expressions

    def parse_expression(self, precedence: Precedence) -> Expression | None:
        """Parse an expression whose operators all bind tighter than `precedence`.

        The right operand of an infix operator is parsed at the operator's own
        precedence, so operators of equal strength group to the left.
        """
        prefix = self.prefix_parse_fns.get(self.cur_token.type)
        if prefix is None:
            self.no_prefix_parse_fn_error(self.cur_token.type)
            return None

        left = prefix()

        while (
            left is not None
            and not self.peek_token_is(TokenType.SEMICOLON)
            and precedence < self.peek_precedence()
        ):
            infix = self.infix_parse_fns.get(self.peek_token.type)
            if infix is None:
                return left
            self.next_token()
            left = infix(left)

        return left

    def parse_identifier(self) -> Expression | None:
        tok = self.cur_token
        return Identifier(tok.literal, line=tok.line, col=tok.col)

    def parse_integer_literal(self) -> Expression | None:
        tok = self.cur_token
        try:
            value = int(tok.literal)
        except ValueError:
            value = None

        if value is None or not INT64_MIN <= value <= INT64_MAX:
            self.record_error(f"could not parse '{tok.literal}' as integer")
            return None

        return IntegerLiteral(value, line=tok.line, col=tok.col)

    def parse_string_literal(self) -> Expression | None:
        tok = self.cur_token
        return StringLiteral(tok.literal, line=tok.line, col=tok.col)

    def parse_boolean(self) -> Expression | None:
        tok = self.cur_token
        return BooleanLiteral(
            self.cur_token_is(TokenType.TRUE), line=tok.line, col=tok.col
        )

    def parse_prefix_expression(self) -> Expression | None:
        op_tok = self.cur_token
        self.next_token()

        operand = self.parse_expression(Precedence.PREFIX)
        if operand is None:
            return None

        return PrefixExpression(
            op_tok.literal, operand, line=op_tok.line, col=op_tok.col
        )

    def parse_infix_expression(self, left: Expression) -> Expression | None:
        op_tok = self.cur_token
        precedence = self.cur_precedence()
        self.next_token()

        right = self.parse_expression(precedence)
        if right is None:
            return None

        return InfixExpression(
            op_tok.literal, left, right, line=op_tok.line, col=op_tok.col
        )

    def parse_grouped_expression(self) -> Expression | None:
        self.next_token()

        expr = self.parse_expression(Precedence.LOWEST)
        if expr is None:
            return None

        if not self.expect_peek(TokenType.RPAREN):
            return None

        return expr

    def parse_if_expression(self) -> Expression | None:
        """Parse `if (<cond>) { ... }` with an optional `else { ... }`."""
        if_tok = self.cur_token

        if not self.expect_peek(TokenType.LPAREN):
            return None
        self.next_token()

        condition = self.parse_expression(Precedence.LOWEST)
        if condition is None:
            return None

        if not self.expect_peek(TokenType.RPAREN):
            return None
        if not self.expect_peek(TokenType.LBRACE):
            return None

        consequence = self.parse_block_statement()
        if consequence is None:
            return None

        alternative = None
        if self.peek_token_is(TokenType.ELSE):
            self.next_token()
            if not self.expect_peek(TokenType.LBRACE):
                return None
            alternative = self.parse_block_statement()
            if alternative is None:
                return None

        return IfExpression(
            condition, consequence, alternative, line=if_tok.line, col=if_tok.col
        )

    def parse_function_literal(self) -> Expression | None:
        fn_tok = self.cur_token

        if not self.expect_peek(TokenType.LPAREN):
            return None

        parameters = self.parse_function_parameters()
        if parameters is None:
            return None

        if not self.expect_peek(TokenType.LBRACE):
            return None

        body = self.parse_block_statement()
        if body is None:
            return None

        return FunctionLiteral(
            tuple(parameters), body, line=fn_tok.line, col=fn_tok.col
        )

    def parse_function_parameters(self) -> list[Identifier] | None:
        """Parse `(a, b, ...)` with `cur_token` on the `(`. Ends on the `)`."""
        identifiers: list[Identifier] = []

        if self.peek_token_is(TokenType.RPAREN):
            self.next_token()
            return identifiers

        if not self.expect_peek(TokenType.IDENT):
            return None
        identifiers.append(
            Identifier(
                self.cur_token.literal, line=self.cur_token.line, col=self.cur_token.col
            )
        )

        while self.peek_token_is(TokenType.COMMA):
            self.next_token()
            if not self.expect_peek(TokenType.IDENT):
                return None
            identifiers.append(
                Identifier(
                    self.cur_token.literal,
                    line=self.cur_token.line,
                    col=self.cur_token.col,
                )
            )

        if not self.expect_peek(TokenType.RPAREN):
            return None

        return identifiers

    def parse_call_expression(self, function: Expression) -> Expression | None:
        paren_tok = self.cur_token

        arguments = self.parse_call_arguments()
        if arguments is None:
            return None

        return CallExpression(
            function, tuple(arguments), line=paren_tok.line, col=paren_tok.col
        )

    def parse_call_arguments(self) -> list[Expression] | None:
        """Parse `(x, y + 1, ...)` with `cur_token` on the `(`. Ends on the `)`."""
        args: list[Expression] = []

        if self.peek_token_is(TokenType.RPAREN):
            self.next_token()
            return args

        self.next_token()
        arg = self.parse_expression(Precedence.LOWEST)
        if arg is None:
            return None
        args.append(arg)

        while self.peek_token_is(TokenType.COMMA):
            self.next_token()
            self.next_token()
            arg = self.parse_expression(Precedence.LOWEST)
            if arg is None:
                return None
            args.append(arg)

        if not self.expect_peek(TokenType.RPAREN):
            return None

        return args


def parse(source: str, strict: bool = False) -> tuple[Program, list[str]]:
    """Parse `source` and return the Program together with its error list."""
    parser = Parser(Lexer.from_source(source), strict=strict)
    program = parser.parse_program()
    return program, parser.errors


__all__ = ["Parser", "ParserError", "Precedence", "parse", "precedences"]
