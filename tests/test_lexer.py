"""
Unit tests for the Lexer module
"""

import pytest
from minilang.lexer import Lexer, Token, TokenType, LexerError


def _types(source):
    return [t.type for t in Lexer(source).tokenize()]


class TestLexerBasics:
    """Test basic lexer functionality"""

    def test_empty_input(self):
        """Test lexer with empty input"""
        tokens = Lexer("").tokenize()
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF

    def test_whitespace_only(self):
        """Whitespace and newlines produce no tokens"""
        tokens = Lexer("  \t\n\r\n   ").tokenize()
        assert [t.type for t in tokens] == [TokenType.EOF]

    def test_single_identifier(self):
        """Test lexing a single identifier"""
        tokens = Lexer("hello").tokenize()
        assert len(tokens) == 2
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[0].value == "hello"
        assert tokens[1].type == TokenType.EOF

    def test_identifier_with_digits_and_underscores(self):
        tokens = Lexer("_tmp1 x_2y").tokenize()
        assert [t.value for t in tokens[:2]] == ["_tmp1", "x_2y"]
        assert all(t.type == TokenType.IDENTIFIER for t in tokens[:2])

    def test_token_repr(self):
        tok = Token(TokenType.NUMBER, "42", 3, 7)
        assert repr(tok) == "Token(NUMBER, '42', 3:7)"


class TestKeywords:
    """Test keyword recognition"""

    def test_all_keywords(self):
        """Test recognition of all MiniLang keywords"""
        assert _types("var if else while") == [
            TokenType.VAR,
            TokenType.IF,
            TokenType.ELSE,
            TokenType.WHILE,
            TokenType.EOF,
        ]

    def test_keywords_are_case_sensitive(self):
        tokens = Lexer("Var IF While").tokenize()
        assert all(t.type == TokenType.IDENTIFIER for t in tokens[:3])

    def test_keyword_prefix_is_identifier(self):
        """Test keyword vs identifier distinction"""
        tokens = Lexer("var variable iffy").tokenize()
        assert tokens[0].type == TokenType.VAR
        assert tokens[1].type == TokenType.IDENTIFIER
        assert tokens[1].value == "variable"
        assert tokens[2].type == TokenType.IDENTIFIER


class TestNumbers:
    """Test number literal lexing"""

    def test_decimal_integer(self):
        tokens = Lexer("123").tokenize()
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[0].value == "123"

    def test_maximal_digit_run(self):
        tokens = Lexer("007 42").tokenize()
        assert [t.value for t in tokens[:2]] == ["007", "42"]

    def test_no_unary_minus(self):
        """Minus is always its own token"""
        assert _types("-5") == [TokenType.MINUS, TokenType.NUMBER, TokenType.EOF]

    def test_digits_then_letters_split(self):
        assert _types("12ab") == [TokenType.NUMBER, TokenType.IDENTIFIER, TokenType.EOF]


class TestOperators:
    """Test operator and delimiter lexing"""

    @pytest.mark.parametrize("text,expected", [
        ("==", TokenType.EQ),
        ("!=", TokenType.NEQ),
        ("<=", TokenType.LTE),
        (">=", TokenType.GTE),
        ("=", TokenType.ASSIGN),
        ("<", TokenType.LT),
        (">", TokenType.GT),
        ("+", TokenType.PLUS),
        ("-", TokenType.MINUS),
        ("*", TokenType.STAR),
        ("/", TokenType.SLASH),
        (";", TokenType.SEMICOLON),
        ("(", TokenType.LPAREN),
        (")", TokenType.RPAREN),
        ("{", TokenType.LBRACE),
        ("}", TokenType.RBRACE),
    ])
    def test_operator(self, text, expected):
        tokens = Lexer(text).tokenize()
        assert tokens[0].type == expected
        assert tokens[0].value == text

    def test_greedy_two_char_operators(self):
        assert _types("a<=b") == [
            TokenType.IDENTIFIER, TokenType.LTE, TokenType.IDENTIFIER, TokenType.EOF,
        ]

    def test_triple_equals_splits(self):
        assert _types("===") == [TokenType.EQ, TokenType.ASSIGN, TokenType.EOF]

    def test_spaced_comparison_is_two_tokens(self):
        assert _types("< =") == [TokenType.LT, TokenType.ASSIGN, TokenType.EOF]


class TestComments:
    """Test comment handling"""

    def test_line_comment_discarded(self):
        tokens = Lexer("var x = 1; // trailing comment\nx = 2;").tokenize()
        values = [t.value for t in tokens if t.type != TokenType.EOF]
        assert values == ["var", "x", "=", "1", ";", "x", "=", "2", ";"]

    def test_comment_at_end_of_input(self):
        assert _types("// nothing else") == [TokenType.EOF]

    def test_single_slash_is_division(self):
        assert _types("a / b") == [
            TokenType.IDENTIFIER, TokenType.SLASH, TokenType.IDENTIFIER, TokenType.EOF,
        ]


class TestPositions:
    """Test line and column tracking"""

    def test_line_and_column(self):
        tokens = Lexer("var x = 1;\n  x = 2;").tokenize()
        assert (tokens[0].line, tokens[0].column) == (1, 1)
        assert (tokens[1].line, tokens[1].column) == (1, 5)
        second_x = tokens[5]
        assert second_x.value == "x"
        assert (second_x.line, second_x.column) == (2, 3)

    def test_eof_position(self):
        tokens = Lexer("a\nb").tokenize()
        assert tokens[-1].type == TokenType.EOF
        assert tokens[-1].line == 2


class TestErrors:
    """Test unrecognized characters"""

    @pytest.mark.parametrize("char", ["@", "#", "$", "!", "%", "\"", "."])
    def test_unexpected_character(self, char):
        with pytest.raises(LexerError) as exc:
            Lexer(f"var x = 1 {char} 2;").tokenize()
        assert exc.value.char == char
        assert exc.value.line == 1
        assert exc.value.column == 11

    def test_error_reports_line(self):
        with pytest.raises(LexerError) as exc:
            Lexer("var a = 1;\nvar b = 2 & 3;").tokenize()
        assert exc.value.line == 2
        assert exc.value.column == 11
        assert "Unexpected character '&'" in str(exc.value)

    @pytest.mark.parametrize("char", ["\x0b", "\x0c", "\x85", "\u2028", "\xa0"])
    def test_only_ascii_blanks_are_whitespace(self, char):
        """Unicode line separators would otherwise desync line numbers"""
        with pytest.raises(LexerError) as exc:
            Lexer(f"var a = 1;{char}\nvar b = 2;").tokenize()
        assert exc.value.char == char
        assert (exc.value.line, exc.value.column) == (1, 11)

    def test_tabs_and_carriage_returns_are_skipped(self):
        tokens = Lexer("var\ta = 1;\r\nvar b = 2;").tokenize()
        assert tokens[5].value == "var"
        assert tokens[5].line == 2
