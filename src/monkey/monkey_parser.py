"""
Monkey Language Parser

Parses Monkey source tokens into an abstract syntax tree (AST).

This module implements a top-down operator-precedence ("Pratt") parser. Every
token kind may have a *prefix* parse function (used when the token starts an
expression) and an *infix* parse function plus a binding precedence (used when
the token follows an already parsed left operand). Statements (`let`, `return`,
expression statements, blocks) are parsed by recursive descent and delegate to
`parse_expression()` for their embedded expressions.

Precedence (low → high)
-----------------------
LOWEST, EQUALS (`==`, `!=`), LESSGREATER (`<`, `>`), SUM (`+`, `-`),
PRODUCT (`*`, `/`), PREFIX (`-x`, `!x`), CALL (`f(x)`), INDEX (`a[i]`)

Parser Behavior
---------------
- Never raises on malformed input. Each unexpected token appends one message
  to `Parser.errors` and abandons the current statement.
- After a failed statement the parser skips ahead to the next `;` (or to the
  closing `}` of the enclosing block) and resumes there; the failed statement
  is left out of the resulting AST. Braces the failed statement opened are
  skipped along with it.
- A program with any errors must be treated as unusable by the caller.

Entry Points
------------
- `parse_program(tokens)`: Parse a full token stream, returning `(Program, errors)`.
- `Parser.parse_program()`: The same, with errors left on the parser instance.
- `Parser.parse_expression(precedence)`: Parse a single expression at the current token.

Error Messages
--------------
- ``expected next token to be <KIND>, got <KIND> instead``
- ``no prefix parse function for <KIND> found``
- ``could not parse <literal> as integer``
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import IntEnum

from monkey.monkey_ast import (
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
    StringLiteral,
)
from monkey.monkey_constants import (
    ASSIGN,
    ASTERISK,
    BANG,
    COLON,
    COMMA,
    ELSE,
    EOF,
    EQ,
    FALSE,
    FUNCTION,
    GT,
    IDENT,
    IF,
    INT,
    INT_MAX,
    LBRACE,
    LBRACKET,
    LET,
    LPAREN,
    LT,
    MINUS,
    NOT_EQ,
    PLUS,
    RBRACE,
    RBRACKET,
    RETURN,
    RPAREN,
    SEMICOLON,
    SLASH,
    STRING,
    TRUE,
)
from monkey.monkey_lexer import Token

logger = logging.getLogger(__name__)


class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2
    LESSGREATER = 3
    SUM = 4
    PRODUCT = 5
    PREFIX = 6
    CALL = 7
    INDEX = 8


precedences: dict[str, Precedence] = {
    EQ: Precedence.EQUALS,
    NOT_EQ: Precedence.EQUALS,
    LT: Precedence.LESSGREATER,
    GT: Precedence.LESSGREATER,
    PLUS: Precedence.SUM,
    MINUS: Precedence.SUM,
    SLASH: Precedence.PRODUCT,
    ASTERISK: Precedence.PRODUCT,
    LPAREN: Precedence.CALL,
    LBRACKET: Precedence.INDEX,
}


class ParseError(SyntaxError):
    """Raised internally to abandon the statement being parsed.

    The parser records the message in `Parser.errors` and recovers; it never
    escapes `Parser.parse_program()`.
    """


PrefixParseFn = Callable[[], Expression]
InfixParseFn = Callable[[Expression], Expression]


class Parser:
    """
    Monkey Parser Class

    Transforms a list of lexical tokens into a `Program` AST using
    precedence climbing for expressions and recursive descent for statements.

    Attributes
    ----------
    tokens : list[Token]
        The input token stream, always terminated by an EOF token.
    position : int
        Index of the current token.
    errors : list[str]
        Parse errors in the order they were found.
    block_depth : int
        Number of `{ ... }` blocks currently open.
    prefix_parse_fns : dict[str, PrefixParseFn]
        Token kind → handler used when the token begins an expression.
    infix_parse_fns : dict[str, InfixParseFn]
        Token kind → handler used when the token follows a left operand.
    """

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens: list[Token] = list(tokens)
        if not self.tokens or self.tokens[-1].type != EOF:
            self.tokens.append(Token(EOF, ""))
        self.position: int = 0
        self.errors: list[str] = []
        self.block_depth: int = 0

        self.prefix_parse_fns: dict[str, PrefixParseFn] = {
            IDENT: self.parse_identifier,
            INT: self.parse_integer_literal,
            STRING: self.parse_string_literal,
            TRUE: self.parse_boolean,
            FALSE: self.parse_boolean,
            BANG: self.parse_prefix_expression,
            MINUS: self.parse_prefix_expression,
            LPAREN: self.parse_grouped_expression,
            IF: self.parse_if_expression,
            FUNCTION: self.parse_function_literal,
            LBRACKET: self.parse_array_literal,
            LBRACE: self.parse_hash_literal,
        }

        self.infix_parse_fns: dict[str, InfixParseFn] = {
            PLUS: self.parse_infix_expression,
            MINUS: self.parse_infix_expression,
            ASTERISK: self.parse_infix_expression,
            SLASH: self.parse_infix_expression,
            EQ: self.parse_infix_expression,
            NOT_EQ: self.parse_infix_expression,
            LT: self.parse_infix_expression,
            GT: self.parse_infix_expression,
            LPAREN: self.parse_call_expression,
            LBRACKET: self.parse_index_expression,
        }

    # Token cursor

    def current(self) -> Token:
        return self.tokens[min(self.position, len(self.tokens) - 1)]

    def peek(self, offset: int = 1) -> Token:
        index = min(self.position + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def advance(self) -> Token:
        if self.position < len(self.tokens) - 1:
            self.position += 1
        return self.current()

    def cur_is(self, type_: str) -> bool:
        return self.current().type == type_

    def peek_is(self, type_: str) -> bool:
        return self.peek().type == type_

    def expect_peek(self, type_: str) -> Token:
        """Advance onto the next token if it has kind `type_`, else fail the statement."""
        if self.peek_is(type_):
            return self.advance()
        raise ParseError(
            f"expected next token to be {type_}, got {self.peek().type} instead"
        )

    def peek_precedence(self) -> Precedence:
        return precedences.get(self.peek().type, Precedence.LOWEST)

    def cur_precedence(self) -> Precedence:
        return precedences.get(self.current().type, Precedence.LOWEST)

    # Error recovery

    def record_error(self, error: ParseError) -> None:
        message = str(error)
        tok = self.current()
        logger.debug("parse error at line %d, col %d: %s", tok.line, tok.col, message)
        self.errors.append(message)

    def synchronize(self, start: int) -> bool:
        """Skip the rest of the failed statement that began at token `start`.

        Stops on the terminating `;` or EOF. Inside a block it also stops on
        the `}` closing that block and returns True so the block loop can end
        on it. Braces the failed statement opened itself (a hash literal or a
        nested body) are skipped together with their contents.
        """
        depth = 0
        for tok in self.tokens[start : self.position]:
            if tok.type == LBRACE:
                depth += 1
            elif tok.type == RBRACE and depth > 0:
                depth -= 1

        while True:
            tok = self.current()
            if tok.type == EOF:
                return False
            if depth == 0:
                if tok.type == SEMICOLON:
                    return False
                if self.block_depth > 0 and tok.type == RBRACE:
                    return True
            if tok.type == LBRACE:
                depth += 1
            elif tok.type == RBRACE and depth > 0:
                depth -= 1
            self.advance()

    # Statements

    def parse_program(self) -> Program:
        """Parse the whole token stream into a `Program`."""
        first = self.current()
        statements: list[Statement] = []
        while not self.cur_is(EOF):
            start = self.position
            try:
                statements.append(self.parse_statement())
            except ParseError as e:
                self.record_error(e)
                self.synchronize(start)
            self.advance()
        return Program(tuple(statements), line=first.line, col=first.col)

    def parse_statement(self) -> Statement:
        tok = self.current()
        if tok.type == LET:
            return self.parse_let_statement()
        if tok.type == RETURN:
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self) -> LetStatement:
        """Parse `let <ident> = <expression>;`."""
        let_tok = self.current()
        name_tok = self.expect_peek(IDENT)
        name = Identifier(name_tok.value, line=name_tok.line, col=name_tok.col)
        self.expect_peek(ASSIGN)
        self.advance()

        value = self.parse_expression(Precedence.LOWEST)
        if self.peek_is(SEMICOLON):
            self.advance()

        return LetStatement(name, value, line=let_tok.line, col=let_tok.col)

    def parse_return_statement(self) -> ReturnStatement:
        """Parse `return <expression>;`."""
        return_tok = self.current()
        self.advance()

        value = self.parse_expression(Precedence.LOWEST)
        if self.peek_is(SEMICOLON):
            self.advance()

        return ReturnStatement(value, line=return_tok.line, col=return_tok.col)

    def parse_expression_statement(self) -> ExpressionStatement:
        tok = self.current()
        expression = self.parse_expression(Precedence.LOWEST)
        if self.peek_is(SEMICOLON):
            self.advance()
        return ExpressionStatement(expression, line=tok.line, col=tok.col)

    def parse_block_statement(self) -> BlockStatement:
        """Parse a `{}`-enclosed block. The current token must be the `{`."""
        open_tok = self.current()
        self.advance()

        statements: list[Statement] = []
        self.block_depth += 1
        try:
            while not self.cur_is(RBRACE) and not self.cur_is(EOF):
                start = self.position
                try:
                    statements.append(self.parse_statement())
                except ParseError as e:
                    self.record_error(e)
                    if self.synchronize(start):
                        continue
                self.advance()
        finally:
            self.block_depth -= 1

        if self.cur_is(EOF):
            raise ParseError(f"expected next token to be {RBRACE}, got {EOF} instead")

        return BlockStatement(tuple(statements), line=open_tok.line, col=open_tok.col)

    # Expressions

    def parse_expression(self, precedence: Precedence) -> Expression:
        """Parse an expression whose operators all bind tighter than `precedence`."""
        tok = self.current()
        prefix = self.prefix_parse_fns.get(tok.type)
        if prefix is None:
            raise ParseError(f"no prefix parse function for {tok.type} found")
        left = prefix()

        while not self.peek_is(SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_parse_fns.get(self.peek().type)
            if infix is None:
                return left
            self.advance()
            left = infix(left)

        return left

    def parse_identifier(self) -> Expression:
        tok = self.current()
        return Identifier(tok.value, line=tok.line, col=tok.col)

    def parse_integer_literal(self) -> Expression:
        tok = self.current()
        try:
            value = int(tok.value)
        except ValueError:
            value = None
        if value is None or value > INT_MAX:
            raise ParseError(f"could not parse {tok.value} as integer")
        return IntegerLiteral(value, line=tok.line, col=tok.col)

    def parse_string_literal(self) -> Expression:
        tok = self.current()
        return StringLiteral(tok.value, line=tok.line, col=tok.col)

    def parse_boolean(self) -> Expression:
        tok = self.current()
        return BooleanLiteral(tok.type == TRUE, line=tok.line, col=tok.col)

    def parse_prefix_expression(self) -> Expression:
        """Parse `!x` or `-x`; the operand binds at PREFIX precedence."""
        op_tok = self.current()
        self.advance()
        operand = self.parse_expression(Precedence.PREFIX)
        return PrefixExpression(op_tok.value, operand, line=op_tok.line, col=op_tok.col)

    def parse_infix_expression(self, left: Expression) -> Expression:
        op_tok = self.current()
        precedence = self.cur_precedence()
        self.advance()
        right = self.parse_expression(precedence)
        return InfixExpression(
            op_tok.value, left, right, line=op_tok.line, col=op_tok.col
        )

    def parse_grouped_expression(self) -> Expression:
        self.advance()
        expression = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(RPAREN)
        return expression

    def parse_if_expression(self) -> Expression:
        """Parse `if (<condition>) { ... } else { ... }` with optional else."""
        if_tok = self.current()
        self.expect_peek(LPAREN)
        self.advance()
        condition = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(RPAREN)

        self.expect_peek(LBRACE)
        consequence = self.parse_block_statement()

        alternative = None
        if self.peek_is(ELSE):
            self.advance()
            self.expect_peek(LBRACE)
            alternative = self.parse_block_statement()

        return IfExpression(
            condition, consequence, alternative, line=if_tok.line, col=if_tok.col
        )

    def parse_function_literal(self) -> Expression:
        """Parse `fn(<params>) { ... }`."""
        fn_tok = self.current()
        self.expect_peek(LPAREN)
        parameters = self.parse_function_parameters()
        self.expect_peek(LBRACE)
        body = self.parse_block_statement()
        return FunctionLiteral(parameters, body, line=fn_tok.line, col=fn_tok.col)

    def parse_function_parameters(self) -> tuple[Identifier, ...]:
        if self.peek_is(RPAREN):
            self.advance()
            return ()

        params: list[Identifier] = []
        tok = self.expect_peek(IDENT)
        params.append(Identifier(tok.value, line=tok.line, col=tok.col))
        while self.peek_is(COMMA):
            self.advance()
            tok = self.expect_peek(IDENT)
            params.append(Identifier(tok.value, line=tok.line, col=tok.col))

        self.expect_peek(RPAREN)
        return tuple(params)

    def parse_call_expression(self, callee: Expression) -> Expression:
        paren_tok = self.current()
        arguments = self.parse_expression_list(RPAREN)
        return CallExpression(
            callee, arguments, line=paren_tok.line, col=paren_tok.col
        )

    def parse_expression_list(self, end: str) -> tuple[Expression, ...]:
        """Parse comma-separated expressions up to the closing token `end`."""
        if self.peek_is(end):
            self.advance()
            return ()

        items: list[Expression] = []
        self.advance()
        items.append(self.parse_expression(Precedence.LOWEST))
        while self.peek_is(COMMA):
            self.advance()
            self.advance()
            items.append(self.parse_expression(Precedence.LOWEST))

        self.expect_peek(end)
        return tuple(items)

    def parse_array_literal(self) -> Expression:
        tok = self.current()
        elements = self.parse_expression_list(RBRACKET)
        return ArrayLiteral(elements, line=tok.line, col=tok.col)

    def parse_index_expression(self, collection: Expression) -> Expression:
        tok = self.current()
        self.advance()
        index = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(RBRACKET)
        return IndexExpression(collection, index, line=tok.line, col=tok.col)

    def parse_hash_literal(self) -> Expression:
        """Parse `{<key>: <value>, ...}`; a repeated key replaces the earlier value."""
        tok = self.current()
        pairs: dict[Expression, Expression] = {}

        while not self.peek_is(RBRACE):
            self.advance()
            key = self.parse_expression(Precedence.LOWEST)
            self.expect_peek(COLON)
            self.advance()
            pairs[key] = self.parse_expression(Precedence.LOWEST)
            if not self.peek_is(RBRACE):
                self.expect_peek(COMMA)

        self.expect_peek(RBRACE)
        return HashLiteral(tuple(pairs.items()), line=tok.line, col=tok.col)


def parse_program(tokens: list[Token]) -> tuple[Program, list[str]]:
    """Parse `tokens` and return the program together with its parse errors.

    Callers must check that the error list is empty before using the program.
    """
    parser = Parser(tokens)
    program = parser.parse_program()
    return program, list(parser.errors)
