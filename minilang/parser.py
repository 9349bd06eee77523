"""minilang.parser

Recursive-descent parser for MiniLang.

One procedure per grammar rule, one token of lookahead, no backtracking:

- statements: `var` declaration, assignment, if/else, while, block
- expressions: comparison < additive < multiplicative < primary, every
  binary level a left-associative fold

A statement body may be a single statement or a block; `else` binds to the
nearest `if`.
"""

from __future__ import annotations

from typing import List, Optional

from minilang.lexer import Token, TokenType
from minilang.ast_nodes import (
    Program,
    VarDecl,
    Assign,
    If,
    While,
    Block,
    BinaryExpr,
    NumberLit,
    Identifier,
    Expression,
    Statement,
)


class ParserError(Exception):
    """Syntax error: what the grammar expected versus the token found"""
    def __init__(self, expected: str, actual: Optional[Token]):
        self.expected = expected
        self.actual = actual
        self.line = actual.line if actual is not None else None
        found = _describe(actual)
        self.message = f"Expected {expected}, found {found}"
        if self.line is not None:
            super().__init__(f"{self.message} at line {self.line}")
        else:
            super().__init__(self.message)


def _describe(token: Optional[Token]) -> str:
    if token is None or token.type == TokenType.EOF:
        return "end of input"
    text = token.value
    if len(text) > 20:
        text = text[:20] + "..."
    return f"'{text}'"


COMPARISON_OPS = {
    TokenType.EQ,
    TokenType.NEQ,
    TokenType.LT,
    TokenType.GT,
    TokenType.LTE,
    TokenType.GTE,
}
ADDITIVE_OPS = {TokenType.PLUS, TokenType.MINUS}
MULTIPLICATIVE_OPS = {TokenType.STAR, TokenType.SLASH}


class Parser:
    """Parser for MiniLang"""

    def __init__(self, tokens: List[Token]):
        self.tokens: List[Token] = tokens
        self.position = 0
        self.current_token: Optional[Token] = self.tokens[0] if self.tokens else None

    def parse(self) -> Program:
        """Parse entire program"""
        statements: List[Statement] = []
        while self.current_token is not None and not self._at(TokenType.EOF):
            statements.append(self._parse_statement())

        if self.current_token is None:
            raise ParserError("end of input", None)

        # Use first token position for program location, default to 1:1
        if self.tokens:
            first = self.tokens[0]
            return Program(statements=statements, line=first.line, column=first.column)
        return Program(statements=statements, line=1, column=1)

    def advance(self) -> Token:
        """Move to next token"""
        if self.position < len(self.tokens) - 1:
            self.position += 1
            self.current_token = self.tokens[self.position]
        return self.current_token

    # -----------------
    # Helpers
    # -----------------

    def _at(self, t: TokenType) -> bool:
        return self.current_token is not None and self.current_token.type == t

    def _match(self, t: TokenType) -> bool:
        if self._at(t):
            self.advance()
            return True
        return False

    def _expect(self, t: TokenType, expected: str) -> Token:
        tok = self.current_token
        if tok is None or tok.type != t:
            raise ParserError(expected, tok)
        self.advance()
        return tok

    # -----------------
    # Statements
    # -----------------

    def _parse_statement(self) -> Statement:
        tok = self.current_token
        if self._at(TokenType.VAR):
            return self._parse_declaration()
        if self._at(TokenType.IDENTIFIER):
            return self._parse_assignment()
        if self._at(TokenType.IF):
            return self._parse_if()
        if self._at(TokenType.WHILE):
            return self._parse_while()
        if self._at(TokenType.LBRACE):
            return self._parse_block()
        raise ParserError("statement", tok)

    def _parse_declaration(self) -> VarDecl:
        tok = self._expect(TokenType.VAR, "'var'")
        name = self._expect(TokenType.IDENTIFIER, "identifier after 'var'")
        self._expect(TokenType.ASSIGN, "'=' in declaration")
        init = self._parse_expression()
        self._expect(TokenType.SEMICOLON, "';' after declaration")
        return VarDecl(name=name.value, initializer=init, line=name.line, column=tok.column)

    def _parse_assignment(self) -> Assign:
        name = self._expect(TokenType.IDENTIFIER, "identifier")
        self._expect(TokenType.ASSIGN, "'=' after identifier")
        value = self._parse_expression()
        self._expect(TokenType.SEMICOLON, "';' after assignment")
        return Assign(name=name.value, value=value, line=name.line, column=name.column)

    def _parse_if(self) -> If:
        tok = self._expect(TokenType.IF, "'if'")
        self._expect(TokenType.LPAREN, "'(' after if")
        cond = self._parse_expression()
        self._expect(TokenType.RPAREN, "')' after if condition")
        then_branch = self._parse_statement()
        else_branch = None
        if self._match(TokenType.ELSE):
            else_branch = self._parse_statement()
        return If(condition=cond, then_branch=then_branch, else_branch=else_branch,
                  line=tok.line, column=tok.column)

    def _parse_while(self) -> While:
        tok = self._expect(TokenType.WHILE, "'while'")
        self._expect(TokenType.LPAREN, "'(' after while")
        cond = self._parse_expression()
        self._expect(TokenType.RPAREN, "')' after while condition")
        body = self._parse_statement()
        return While(condition=cond, body=body, line=tok.line, column=tok.column)

    def _parse_block(self) -> Block:
        tok = self._expect(TokenType.LBRACE, "'{'")
        statements: List[Statement] = []
        while not self._at(TokenType.RBRACE) and not self._at(TokenType.EOF):
            statements.append(self._parse_statement())
        self._expect(TokenType.RBRACE, "'}' to close block")
        return Block(statements=statements, line=tok.line, column=tok.column)

    # -----------------
    # Expressions (precedence climbing)
    # -----------------

    def _parse_expression(self) -> Expression:
        return self._parse_comparison()

    def _parse_comparison(self) -> Expression:
        expr = self._parse_additive()
        while self.current_token and self.current_token.type in COMPARISON_OPS:
            op = self.current_token
            self.advance()
            rhs = self._parse_additive()
            expr = BinaryExpr(operator=op.value, left=expr, right=rhs, line=op.line, column=op.column)
        return expr

    def _parse_additive(self) -> Expression:
        expr = self._parse_multiplicative()
        while self.current_token and self.current_token.type in ADDITIVE_OPS:
            op = self.current_token
            self.advance()
            rhs = self._parse_multiplicative()
            expr = BinaryExpr(operator=op.value, left=expr, right=rhs, line=op.line, column=op.column)
        return expr

    def _parse_multiplicative(self) -> Expression:
        expr = self._parse_primary()
        while self.current_token and self.current_token.type in MULTIPLICATIVE_OPS:
            op = self.current_token
            self.advance()
            rhs = self._parse_primary()
            expr = BinaryExpr(operator=op.value, left=expr, right=rhs, line=op.line, column=op.column)
        return expr

    def _parse_primary(self) -> Expression:
        tok = self.current_token
        if self._match(TokenType.NUMBER):
            try:
                value = int(tok.value)
            except ValueError:
                # Python 3.11+ caps int/str conversion (sys.get_int_max_str_digits)
                raise ParserError("integer literal within the interpreter's digit limit", tok) from None
            return NumberLit(value=value, line=tok.line, column=tok.column)
        if self._match(TokenType.IDENTIFIER):
            return Identifier(name=tok.value, line=tok.line, column=tok.column)
        if self._match(TokenType.LPAREN):
            expr = self._parse_expression()
            self._expect(TokenType.RPAREN, "')' after expression")
            return expr
        raise ParserError("expression", tok)


def parse(tokens: List[Token]) -> Program:
    """Parse a token list with a fresh Parser"""
    return Parser(tokens).parse()
