"""
Shared constants for the Monkey interpreter.

Token kinds are plain strings so they print directly in parser error messages
(e.g. ``expected next token to be ASSIGN, got INT instead``). Object type names
are the strings reported by ``type_name()`` and embedded in evaluation errors.

Exports:
    - token kind names (``ILLEGAL`` ... ``RETURN``)
    - token_hashmap: literal text → token kind for keywords, operators, delimiters
    - keywords: the keyword subset of ``token_hashmap``
    - object type names (``INTEGER_OBJ`` ... ``RETURN_VALUE_OBJ``)
    - INT_MIN / INT_MAX: bounds of the 64-bit signed integer range
    - DEFAULT_RECURSION_LIMIT / EVAL_STACK_SIZE: host limits for the evaluator thread
"""

# Sentinels
ILLEGAL = "ILLEGAL"
EOF = "EOF"

# Identifiers and literals
IDENT = "IDENT"
INT = "INT"
STRING = "STRING"

# Operators
ASSIGN = "ASSIGN"
PLUS = "PLUS"
MINUS = "MINUS"
BANG = "BANG"
ASTERISK = "ASTERISK"
SLASH = "SLASH"
LT = "LT"
GT = "GT"
EQ = "EQ"
NOT_EQ = "NOT_EQ"

# Delimiters
COMMA = "COMMA"
SEMICOLON = "SEMICOLON"
COLON = "COLON"
LPAREN = "LPAREN"
RPAREN = "RPAREN"
LBRACE = "LBRACE"
RBRACE = "RBRACE"
LBRACKET = "LBRACKET"
RBRACKET = "RBRACKET"

# Keywords
FUNCTION = "FUNCTION"
LET = "LET"
TRUE = "TRUE"
FALSE = "FALSE"
IF = "IF"
ELSE = "ELSE"
RETURN = "RETURN"

keywords: dict[str, str] = {
    "fn": FUNCTION,
    "let": LET,
    "true": TRUE,
    "false": FALSE,
    "if": IF,
    "else": ELSE,
    "return": RETURN,
}

token_hashmap: dict[str, str] = {
    **keywords,
    "=": ASSIGN,
    "+": PLUS,
    "-": MINUS,
    "!": BANG,
    "*": ASTERISK,
    "/": SLASH,
    "<": LT,
    ">": GT,
    "==": EQ,
    "!=": NOT_EQ,
    ",": COMMA,
    ";": SEMICOLON,
    ":": COLON,
    "(": LPAREN,
    ")": RPAREN,
    "{": LBRACE,
    "}": RBRACE,
    "[": LBRACKET,
    "]": RBRACKET,
}

# Runtime object type names
INTEGER_OBJ = "INTEGER"
BOOLEAN_OBJ = "BOOLEAN"
STRING_OBJ = "STRING"
NULL_OBJ = "NULL"
ARRAY_OBJ = "ARRAY"
HASH_OBJ = "HASH"
FUNCTION_OBJ = "FUNCTION"
BUILTIN_OBJ = "BUILTIN"
ERROR_OBJ = "ERROR"
RETURN_VALUE_OBJ = "RETURN_VALUE"

INT_MIN = -(2**63)
INT_MAX = 2**63 - 1

# One Monkey call costs about fifteen Python frames.
DEFAULT_RECURSION_LIMIT = 20_000
EVAL_STACK_SIZE = 256 * 1024 * 1024
