"""
Lexical analyzer for the Monkey programming language.

This module converts raw source text into the token stream consumed by the parser:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Represents a single token with type, literal value, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Features:
    - Skips whitespace (spaces, tabs, carriage returns, newlines)
    - Longest-match recognition of operators (`==` before `=`, `!=` before `!`)
    - Recognizes:
        * Identifiers and the keywords `fn let true false if else return`
        * Decimal integer literals
        * Double-quoted string literals (no escape sequences)
        * Operators and delimiters

The lexer never raises on bad input. Unknown characters come back as `ILLEGAL`
tokens, which the parser reports as ordinary parse errors. An unterminated
string is not an error: it becomes a `STRING` token holding the rest of the
input.

Example:
    >>> lexer = Lexer(CharacterStream("let x = 5;"))
    >>> lexer.next_token()
    Token(LET, let)

Exports:
    - CharacterStream
    - Token
    - Lexer
    - tokenize
"""

from typing import Any

from monkey.monkey_constants import EOF, IDENT, ILLEGAL, INT, STRING, token_hashmap

# Longest operator in token_hashmap ("==", "!=")
_MAX_OPERATOR_LEN = 2


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character `offset` places ahead, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """Represents a single lexical token.

    Attributes:
        type (str): The token kind (e.g. 'IDENT', 'INT', 'EOF').
        value (str): The literal text of the token.
        line (int): The 1-based line number where the token appears.
        col (int): The 1-based column number where the token starts.
    """

    def __init__(self, type_: str, value: str, line: int = 0, col: int = 0):
        self.type = type_
        self.value = value
        self.line = line
        self.col = col

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value, self.line, self.col))


class Lexer:
    """Lexical analyzer for Monkey source.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        while not self.stream.end_of_file() and self.peek() in " \t\r\n":
            self.advance()

    def match_operator(self) -> Token | None:
        """Attempts to match the longest operator or delimiter at the current position.

        Returns:
            Token | None: A Token if a match is found, otherwise None.
        """
        line, col = self.stream.line, self.stream.column
        max_token = None
        candidate = ""

        for i in range(_MAX_OPERATOR_LEN):
            ch = self.stream.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in token_hashmap:
                max_token = candidate

        if max_token:
            for _ in range(len(max_token)):
                self.advance()
            return Token(token_hashmap[max_token], max_token, line, col)

        return None

    def next_token(self) -> Token:
        """Consumes and returns the next Token; returns EOF forever once input is exhausted."""
        self.skip_whitespace()

        line, col = self.stream.line, self.stream.column
        if self.stream.end_of_file():
            return Token(EOF, "", line, col)

        ch = self.peek()

        # 1. Identifier or keyword
        if ch.isascii() and (ch.isalpha() or ch == "_"):
            ident = ""
            while not self.stream.end_of_file() and (
                self.peek().isascii() and (self.peek().isalpha() or self.peek() == "_")
            ):
                ident += self.advance()
            if ident in token_hashmap:
                return Token(token_hashmap[ident], ident, line, col)
            return Token(IDENT, ident, line, col)

        # 2. Integer
        if ch.isascii() and ch.isdigit():
            num = ""
            while not self.stream.end_of_file() and (
                self.peek().isascii() and self.peek().isdigit()
            ):
                num += self.advance()
            return Token(INT, num, line, col)

        # 3. String
        if ch == '"':
            self.advance()
            val = ""
            while not self.stream.end_of_file() and self.peek() != '"':
                val += self.advance()
            if not self.stream.end_of_file():
                self.advance()  # closing quote
            return Token(STRING, val, line, col)

        # 4. Operator or delimiter
        token = self.match_operator()
        if token:
            return token

        # 5. Unknown character
        return Token(ILLEGAL, self.advance(), line, col)


def tokenize(source: str) -> list[Token]:
    """Lexes `source` completely; the result always ends with exactly one EOF token."""
    lexer = Lexer(CharacterStream(source))
    tokens: list[Token] = []
    while True:
        tok = lexer.next_token()
        tokens.append(tok)
        if tok.type == EOF:
            break
    return tokens


__all__ = ["CharacterStream", "Lexer", "Token", "tokenize"]
