"""
Cog Token Definitions

Defines all token types, the Token class, and the TokenList cursor the
parser reads from.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Iterator, List, Optional


class TokenType(Enum):
    """All token types in Cog."""

    # Literals
    NUMBER = auto()
    STRING = auto()
    IDENTIFIER = auto()

    # Keywords
    FUNC = auto()
    TYPE = auto()          # string, i32, bool, void
    RETURN = auto()
    LET = auto()
    TRUE = auto()
    FALSE = auto()
    AND = auto()
    OR = auto()
    IF = auto()
    ELIF = auto()
    ELSE = auto()
    MATCH = auto()
    FOR = auto()
    IT = auto()
    IN = auto()
    BREAK = auto()
    SKIP = auto()
    DEFER = auto()

    # Operators
    PLUS = auto()          # +
    MINUS = auto()         # -
    STAR = auto()          # *
    SLASH = auto()         # /
    RANGE = auto()         # ..

    # Comparison
    EQ = auto()            # ==
    NE = auto()            # !=
    LT = auto()            # <
    LE = auto()            # <=
    GT = auto()            # >
    GE = auto()            # >=

    # Assignment
    ASSIGN = auto()        # =

    # Delimiters
    LPAREN = auto()        # (
    RPAREN = auto()        # )
    LBRACE = auto()        # {
    RBRACE = auto()        # }
    LBRACKET = auto()      # [
    RBRACKET = auto()      # ]
    COMMA = auto()         # ,
    COLON = auto()         # :

    # Special
    EOF = auto()


# Keyword mapping
KEYWORDS = {
    'func': TokenType.FUNC,
    'string': TokenType.TYPE,
    'i32': TokenType.TYPE,
    'bool': TokenType.TYPE,
    'void': TokenType.TYPE,
    'return': TokenType.RETURN,
    'let': TokenType.LET,
    'true': TokenType.TRUE,
    'false': TokenType.FALSE,
    'and': TokenType.AND,
    'or': TokenType.OR,
    'if': TokenType.IF,
    'elif': TokenType.ELIF,
    'else': TokenType.ELSE,
    'match': TokenType.MATCH,
    'for': TokenType.FOR,
    'it': TokenType.IT,
    'in': TokenType.IN,
    'break': TokenType.BREAK,
    'skip': TokenType.SKIP,
    'defer': TokenType.DEFER,
}


# Names used in diagnostics and token dumps
TOKEN_NAMES = {
    TokenType.NUMBER: 'number',
    TokenType.STRING: 'string',
    TokenType.IDENTIFIER: 'identifier',
    TokenType.FUNC: 'func',
    TokenType.TYPE: 'type',
    TokenType.RETURN: 'return',
    TokenType.LET: 'let',
    TokenType.TRUE: 'true',
    TokenType.FALSE: 'false',
    TokenType.AND: 'and',
    TokenType.OR: 'or',
    TokenType.IF: 'if',
    TokenType.ELIF: 'elif',
    TokenType.ELSE: 'else',
    TokenType.MATCH: 'match',
    TokenType.FOR: 'for',
    TokenType.IT: 'it',
    TokenType.IN: 'in',
    TokenType.BREAK: 'break',
    TokenType.SKIP: 'skip',
    TokenType.DEFER: 'defer',
    TokenType.PLUS: 'plus',
    TokenType.MINUS: 'minus',
    TokenType.STAR: 'asterisk',
    TokenType.SLASH: 'forward_slash',
    TokenType.RANGE: 'range',
    TokenType.EQ: 'equal',
    TokenType.NE: 'not_equal',
    TokenType.LT: 'less_than',
    TokenType.LE: 'less_than_or_equal',
    TokenType.GT: 'greater_than',
    TokenType.GE: 'greater_than_or_equal',
    TokenType.ASSIGN: 'assign',
    TokenType.LPAREN: 'lparen',
    TokenType.RPAREN: 'rparen',
    TokenType.LBRACE: 'lbrace',
    TokenType.RBRACE: 'rbrace',
    TokenType.LBRACKET: 'lbracket',
    TokenType.RBRACKET: 'rbracket',
    TokenType.COMMA: 'comma',
    TokenType.COLON: 'colon',
    TokenType.EOF: 'eof',
}


def token_name(token_type: TokenType) -> str:
    """Get the human-readable name of a token type."""
    return TOKEN_NAMES.get(token_type, 'unknown')


@dataclass
class Token:
    """Represents a single token from the source code."""

    type: TokenType
    value: Optional[str] = None
    line: int = 0
    column: int = 0

    def __repr__(self) -> str:
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r}, line={self.line})"
        return f"Token({self.type.name}, line={self.line})"


class TokenList:
    """
    Cursor over a finished token sequence.

    The position starts before the first token. The sequence must end in
    an EOF token; reads past the end are clamped to it.
    """

    def __init__(self, tokens: List[Token]):
        if not tokens:
            raise ValueError("TokenList requires at least one token")
        if tokens[-1].type != TokenType.EOF:
            raise ValueError("TokenList must end with an EOF token")
        self.tokens = tokens
        self.position = -1

    def advance(self) -> Token:
        """Consume and return the next token."""
        if self.position < len(self.tokens) - 1:
            self.position += 1
        return self.tokens[self.position]

    def lookahead(self, n: int = 1) -> Token:
        """Return the token n positions ahead without consuming it."""
        index = min(self.position + n, len(self.tokens) - 1)
        return self.tokens[max(index, 0)]

    def dump(self) -> str:
        """Render one line per token: kind name and payload."""
        lines = []
        for token in self.tokens:
            if token.value is not None:
                lines.append(f"{token_name(token.type)} {token.value}")
            else:
                lines.append(token_name(token.type))
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self.tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self.tokens)

    def __getitem__(self, index: int) -> Token:
        return self.tokens[index]
