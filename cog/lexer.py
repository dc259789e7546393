"""
Cog Lexer

Tokenizes Cog source code into a stream of tokens.
"""

import logging
from typing import List, Optional
from .tokens import Token, TokenType, TokenList, KEYWORDS

logger = logging.getLogger(__name__)


SINGLE_CHAR_TOKENS = {
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '{': TokenType.LBRACE,
    '}': TokenType.RBRACE,
    '[': TokenType.LBRACKET,
    ']': TokenType.RBRACKET,
    ',': TokenType.COMMA,
    ':': TokenType.COLON,
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.STAR,
    '/': TokenType.SLASH,
}


def is_digit(c: str) -> bool:
    return '0' <= c <= '9'


def is_identifier_char(c: str) -> bool:
    return ('a' <= c <= 'z') or ('A' <= c <= 'Z') or is_digit(c) or c == '_'


class Lexer:
    """Lexical analyzer for Cog source code."""

    def __init__(self, source: str):
        """
        Initialize the lexer.

        Args:
            source: Cog source code to tokenize
        """
        self.source = source
        self.tokens: List[Token] = []
        self.start = 0      # Start of current token
        self.current = 0    # Current position
        self.line = 1       # Current line number
        self.line_start = 0 # Position of current line start

    def tokenize(self) -> TokenList:
        """
        Tokenize the entire source code.

        The lexer never fails: characters it does not recognize are dropped.

        Returns:
            TokenList terminated by a single EOF token
        """
        self.tokens = []
        self.start = 0
        self.current = 0
        self.line = 1
        self.line_start = 0

        while not self.is_at_end():
            self.start = self.current
            self.scan_token()

        self.start = self.current
        self.add_token(TokenType.EOF)
        logger.debug("Scanned %d tokens", len(self.tokens))
        return TokenList(self.tokens)

    def scan_token(self) -> None:
        """Scan the next token."""
        c = self.advance()

        # Skip whitespace
        if c in ' \t\r':
            return

        # Newline
        if c == '\n':
            self.newline()
            return

        # Comments
        if c == '#':
            while self.peek() != '\n' and not self.is_at_end():
                self.advance()
            return

        if c in SINGLE_CHAR_TOKENS:
            self.add_token(SINGLE_CHAR_TOKENS[c])

        # Two-character operators
        elif c == '=':
            self.add_token(TokenType.EQ if self.match('=') else TokenType.ASSIGN)
        elif c == '<':
            self.add_token(TokenType.LE if self.match('=') else TokenType.LT)
        elif c == '>':
            self.add_token(TokenType.GE if self.match('=') else TokenType.GT)
        elif c == '!':
            if self.match('='):
                self.add_token(TokenType.NE)
            else:
                self.drop(c)
        elif c == '.':
            if self.match('.'):
                self.add_token(TokenType.RANGE)
            else:
                self.drop(c)

        # String literals
        elif c == "'":
            self.string()

        # Numbers
        elif is_digit(c):
            self.number()

        # Identifiers and keywords
        elif is_identifier_char(c):
            self.identifier()

        else:
            self.drop(c)

    def advance(self) -> str:
        """Consume and return the current character."""
        c = self.source[self.current]
        self.current += 1
        return c

    def peek(self) -> str:
        """Return the current character without consuming it."""
        if self.is_at_end():
            return '\0'
        return self.source[self.current]

    def match(self, expected: str) -> bool:
        """Consume the current character if it matches expected."""
        if self.is_at_end():
            return False
        if self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def is_at_end(self) -> bool:
        """Check if we've reached the end of the source."""
        return self.current >= len(self.source)

    def newline(self) -> None:
        self.line += 1
        self.line_start = self.current

    def add_token(self, type: TokenType, value: Optional[str] = None) -> None:
        """Add a token to the token list."""
        col = self.start - self.line_start + 1
        self.tokens.append(Token(type, value, self.line, col))

    def drop(self, c: str) -> None:
        """Discard a character that starts no token."""
        logger.debug("Dropped character %r at line %d, column %d",
                     c, self.line, self.start - self.line_start + 1)

    def string(self) -> None:
        """Scan a single-quoted string literal, verbatim."""
        line = self.line
        col = self.start - self.line_start + 1

        while self.peek() != "'" and not self.is_at_end():
            if self.advance() == '\n':
                self.newline()

        value = self.source[self.start + 1:self.current]

        # Consume closing quote, an unterminated string runs to end of input
        if not self.is_at_end():
            self.advance()

        self.tokens.append(Token(TokenType.STRING, value, line, col))

    def number(self) -> None:
        """Scan an integer literal."""
        while is_digit(self.peek()):
            self.advance()

        self.add_token(TokenType.NUMBER, self.source[self.start:self.current])

    def identifier(self) -> None:
        """Scan an identifier or keyword."""
        while is_identifier_char(self.peek()):
            self.advance()

        text = self.source[self.start:self.current]

        # Check if it's a keyword
        token_type = KEYWORDS.get(text, TokenType.IDENTIFIER)

        if token_type in (TokenType.IDENTIFIER, TokenType.TYPE):
            self.add_token(token_type, text)
        else:
            self.add_token(token_type)
