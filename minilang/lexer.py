"""
Lexical Analyzer (Lexer) for MiniLang

Converts source code into a stream of tokens for the parser.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, List, Optional


class TokenType(Enum):
    """Token types for the MiniLang lexer"""
    # Literals
    NUMBER = auto()

    # Identifiers and Keywords
    IDENTIFIER = auto()
    VAR = auto()
    IF = auto()
    ELSE = auto()
    WHILE = auto()

    # Operators
    PLUS = auto()                # +
    MINUS = auto()               # -
    STAR = auto()                # *
    SLASH = auto()               # /
    ASSIGN = auto()              # =
    EQ = auto()                  # ==
    NEQ = auto()                 # !=
    LT = auto()                  # <
    GT = auto()                  # >
    LTE = auto()                 # <=
    GTE = auto()                 # >=

    # Delimiters
    LPAREN = auto()              # (
    RPAREN = auto()              # )
    LBRACE = auto()              # {
    RBRACE = auto()              # }
    SEMICOLON = auto()           # ;

    # Special
    EOF = auto()


@dataclass
class Token:
    """Represents a lexical token"""
    type: TokenType
    value: str
    line: int
    column: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {repr(self.value)}, {self.line}:{self.column})"


class LexerError(Exception):
    """Unrecognized character, with line and column information"""
    def __init__(self, char: str, line: int, column: int):
        self.char = char
        self.line = line
        self.column = column
        self.message = f"Unexpected character '{char}'"
        super().__init__(f"{self.message} at {line}:{column}")


DIGITS = "0123456789"
WHITESPACE = " \t\r\n"


def _is_ident_start(char: str) -> bool:
    return char == "_" or ("a" <= char <= "z") or ("A" <= char <= "Z")


def _is_ident_char(char: str) -> bool:
    return _is_ident_start(char) or char in DIGITS


class Lexer:
    """Lexical analyzer for MiniLang source code"""

    KEYWORDS: Dict[str, TokenType] = {
        'var': TokenType.VAR,
        'if': TokenType.IF,
        'else': TokenType.ELSE,
        'while': TokenType.WHILE,
    }

    # Two-character operators, tried before their one-character prefixes.
    DOUBLE_CHAR: Dict[str, TokenType] = {
        '==': TokenType.EQ,
        '!=': TokenType.NEQ,
        '<=': TokenType.LTE,
        '>=': TokenType.GTE,
    }

    SINGLE_CHAR: Dict[str, TokenType] = {
        '+': TokenType.PLUS,
        '-': TokenType.MINUS,
        '*': TokenType.STAR,
        '/': TokenType.SLASH,
        '=': TokenType.ASSIGN,
        '<': TokenType.LT,
        '>': TokenType.GT,
        ';': TokenType.SEMICOLON,
        '(': TokenType.LPAREN,
        ')': TokenType.RPAREN,
        '{': TokenType.LBRACE,
        '}': TokenType.RBRACE,
    }

    def __init__(self, source: str):
        """Initialize lexer with source code"""
        self.source = source
        self.position = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []

    def current_char(self) -> Optional[str]:
        """Get current character without consuming"""
        if self.position >= len(self.source):
            return None
        return self.source[self.position]

    def peek_char(self, offset: int = 1) -> Optional[str]:
        """Peek ahead at character"""
        pos = self.position + offset
        if pos >= len(self.source):
            return None
        return self.source[pos]

    def advance(self) -> Optional[str]:
        """Consume and return current character"""
        if self.position >= len(self.source):
            return None

        char = self.source[self.position]
        self.position += 1

        if char == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1

        return char

    def skip_whitespace(self) -> None:
        """Skip whitespace characters, newlines included"""
        while self.current_char() is not None and self.current_char() in WHITESPACE:
            self.advance()

    def skip_line_comment(self) -> None:
        """Skip single-line comment (//...)"""
        self.advance()  # skip first /
        self.advance()  # skip second /

        while self.current_char() is not None and self.current_char() != '\n':
            self.advance()

    def read_number(self) -> str:
        """Read a maximal run of decimal digits"""
        num_str = ""
        while self.current_char() is not None and self.current_char() in DIGITS:
            num_str += self.advance()
        return num_str

    def read_identifier(self) -> str:
        """Read identifier or keyword"""
        ident = ""
        while self.current_char() is not None and _is_ident_char(self.current_char()):
            ident += self.advance()
        return ident

    def tokenize(self) -> List[Token]:
        """Tokenize entire source code.

        Raises LexerError on the first character that starts no token.
        """
        self.tokens = []

        while self.position < len(self.source):
            self.skip_whitespace()

            if self.position >= len(self.source):
                break

            # Save token start position
            token_line = self.line
            token_column = self.column

            char = self.current_char()

            if char == '/' and self.peek_char() == '/':
                self.skip_line_comment()
                continue

            if char in DIGITS:
                value = self.read_number()
                self.tokens.append(Token(TokenType.NUMBER, value, token_line, token_column))
                continue

            if _is_ident_start(char):
                ident = self.read_identifier()
                token_type = self.KEYWORDS.get(ident, TokenType.IDENTIFIER)
                self.tokens.append(Token(token_type, ident, token_line, token_column))
                continue

            pair = char + (self.peek_char() or '')
            if pair in self.DOUBLE_CHAR:
                self.advance()
                self.advance()
                self.tokens.append(Token(self.DOUBLE_CHAR[pair], pair, token_line, token_column))
                continue

            if char in self.SINGLE_CHAR:
                self.advance()
                self.tokens.append(Token(self.SINGLE_CHAR[char], char, token_line, token_column))
                continue

            raise LexerError(char, token_line, token_column)

        # Add EOF token
        self.tokens.append(Token(TokenType.EOF, '', self.line, self.column))

        return self.tokens


def tokenize(source: str) -> List[Token]:
    """Tokenize `source` with a fresh Lexer"""
    return Lexer(source).tokenize()
