# =============================================================================
# test_lexer.py - Scanner Unit Tests
# =============================================================================
# Tests for the TacticLang scanner.
#
# Test coverage includes:
#   - Keywords, identifiers and the keyword table
#   - Integer and double literals (longest match on '.')
#   - String literals, including multi-line and unterminated strings
#   - Operators, delimiters and the lone '&' / '|' errors
#   - '#supply' directive, unknown directives and '#' comments
#   - Line/column tracking and scan determinism
# =============================================================================

import dataclasses

import pytest
from tacticlang.errors import LexicalError
from tacticlang.lexer import (
    KEYWORDS,
    Scanner,
    Token,
    TokenType,
    lexical_errors,
    scan,
    split_lines,
    token_type_name,
)


# =============================================================================
# Helper Functions
# =============================================================================

def tokenize(source: str) -> list:
    """Scan source and drop the trailing EOF token."""
    tokens = scan(source, "<test>")
    assert tokens[-1].type == TokenType.EOF
    return tokens[:-1]


def types(source: str) -> list:
    return [t.type for t in tokenize(source)]


def lexemes(source: str) -> list:
    return [t.lexeme for t in tokenize(source)]


# =============================================================================
# End of Input
# =============================================================================

class TestEndOfInput:
    """Every scan ends with exactly one EOF token."""

    def test_empty_source(self):
        """Empty source should produce only EOF."""
        tokens = scan("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF
        assert tokens[0].lexeme == ""
        assert (tokens[0].line, tokens[0].column) == (1, 1)

    def test_whitespace_only(self):
        """Whitespace-only source should produce only EOF."""
        tokens = scan("  \n\t ")
        assert [t.type for t in tokens] == [TokenType.EOF]
        assert tokens[0].line == 2
        assert tokens[0].column == 3

    @pytest.mark.parametrize("source", [
        "troop x = 1;",
        "\"unterminated",
        "@ & | #bogus",
        "# only a comment",
        "123.",
    ])
    def test_single_eof(self, source):
        """Exactly one EOF, and it is last, even with errors."""
        tokens = scan(source)
        eofs = [t for t in tokens if t.type == TokenType.EOF]
        assert len(eofs) == 1
        assert tokens[-1].type == TokenType.EOF


# =============================================================================
# Keywords and Identifiers
# =============================================================================

class TestKeywords:
    """Test keyword recognition through the keyword table."""

    @pytest.mark.parametrize("word,expected", [
        ("campaign", TokenType.CAMPAIGN),
        ("tactic", TokenType.TACTIC),
        ("troop", TokenType.TROOP),
        ("ammo", TokenType.AMMO),
        ("codename", TokenType.CODENAME),
        ("status", TokenType.STATUS),
        ("brief", TokenType.BRIEF),
        ("intel", TokenType.INTEL),
        ("evaluate", TokenType.EVALUATE),
        ("adjust", TokenType.ADJUST),
        ("maintain", TokenType.MAINTAIN),
        ("deploy", TokenType.DEPLOY),
        ("retreat", TokenType.RETREAT),
        ("abort", TokenType.ABORT),
        ("true", TokenType.TRUE),
        ("false", TokenType.FALSE),
    ])
    def test_keyword(self, word, expected):
        tokens = tokenize(word)
        assert len(tokens) == 1
        assert tokens[0].type == expected
        assert tokens[0].lexeme == word

    def test_keyword_prefix_is_identifier(self):
        """'troopship' is one identifier, not 'troop' + 'ship'."""
        tokens = tokenize("troopship")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[0].lexeme == "troopship"

    def test_keywords_are_case_sensitive(self):
        assert types("Troop TRUE") == [TokenType.IDENTIFIER, TokenType.IDENTIFIER]

    def test_identifier_with_underscore_and_digits(self):
        tokens = tokenize("_tmp1 alpha_2")
        assert [t.lexeme for t in tokens] == ["_tmp1", "alpha_2"]
        assert all(t.type == TokenType.IDENTIFIER for t in tokens)

    def test_digit_then_letters(self):
        """A number ends where the letters begin."""
        assert types("1abc") == [TokenType.INTEGER, TokenType.IDENTIFIER]
        assert lexemes("1abc") == ["1", "abc"]

    def test_keyword_table_is_read_only(self):
        with pytest.raises(TypeError):
            KEYWORDS["squad"] = TokenType.IDENTIFIER  # type: ignore[index]

    def test_keyword_table_includes_supply(self):
        assert KEYWORDS["#supply"] == TokenType.SUPPLY


# =============================================================================
# Number Literals
# =============================================================================

class TestNumbers:
    """Test integer and double literal recognition."""

    def test_integer(self):
        tokens = tokenize("42")
        assert tokens[0].type == TokenType.INTEGER
        assert tokens[0].lexeme == "42"

    def test_double(self):
        """'123.45' is one double, not integer + dot + integer."""
        tokens = tokenize("123.45")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.DOUBLE
        assert tokens[0].lexeme == "123.45"

    def test_trailing_dot_not_consumed(self):
        """'123.' is an integer followed by an error for the stray '.'."""
        tokens = tokenize("123.")
        assert [t.type for t in tokens] == [TokenType.INTEGER, TokenType.ERROR]
        assert tokens[0].lexeme == "123"
        assert tokens[1].lexeme == "Unexpected character: ."
        assert tokens[1].column == 4

    def test_dot_then_identifier(self):
        assert types("3.x") == [TokenType.INTEGER, TokenType.ERROR, TokenType.IDENTIFIER]

    def test_leading_zeros(self):
        assert lexemes("007 0.50") == ["007", "0.50"]

    def test_second_dot_stops_double(self):
        tokens = tokenize("1.2.3")
        assert [t.type for t in tokens] == [
            TokenType.DOUBLE,
            TokenType.ERROR,
            TokenType.INTEGER,
        ]
        assert tokens[0].lexeme == "1.2"


# =============================================================================
# String Literals
# =============================================================================

class TestStrings:
    """Test string literal recognition."""

    def test_simple_string(self):
        tokens = tokenize('"hello world"')
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].lexeme == '"hello world"'

    def test_empty_string(self):
        assert lexemes('""') == ['""']

    def test_no_escape_processing(self):
        """A backslash is an ordinary character; the next quote closes."""
        tokens = tokenize('"a\\" b')
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].lexeme == '"a\\"'
        assert tokens[1].type == TokenType.IDENTIFIER

    def test_multiline_string_tracks_lines(self):
        tokens = tokenize('"a\nb" x')
        assert tokens[0].type == TokenType.STRING
        assert (tokens[0].line, tokens[0].column) == (1, 1)
        assert tokens[1].lexeme == "x"
        assert (tokens[1].line, tokens[1].column) == (2, 4)

    def test_unterminated_string(self):
        tokens = scan('brief "abc')
        assert [t.type for t in tokens] == [
            TokenType.BRIEF,
            TokenType.ERROR,
            TokenType.EOF,
        ]
        assert tokens[1].lexeme == "Unterminated string"
        assert (tokens[1].line, tokens[1].column) == (1, 7)

    def test_comment_marker_inside_string(self):
        assert types('"# not a comment"') == [TokenType.STRING]


# =============================================================================
# Operators and Delimiters
# =============================================================================

class TestOperators:
    """Test operator and delimiter recognition."""

    def test_single_character_tokens(self):
        assert types("( ) { } ; , + - * / % < > ! =") == [
            TokenType.LPAREN,
            TokenType.RPAREN,
            TokenType.LBRACE,
            TokenType.RBRACE,
            TokenType.SEMICOLON,
            TokenType.COMMA,
            TokenType.PLUS,
            TokenType.MINUS,
            TokenType.MULTIPLY,
            TokenType.DIVIDE,
            TokenType.MODULO,
            TokenType.LESS,
            TokenType.GREATER,
            TokenType.NOT,
            TokenType.ASSIGN,
        ]

    def test_two_character_operators(self):
        assert types("== != <= >= && ||") == [
            TokenType.EQUAL,
            TokenType.NOT_EQUAL,
            TokenType.LESS_EQUAL,
            TokenType.GREATER_EQUAL,
            TokenType.AND,
            TokenType.OR,
        ]
        assert lexemes("== != <= >= && ||") == ["==", "!=", "<=", ">=", "&&", "||"]

    def test_longest_match_on_equals(self):
        """'===' is '==' followed by '='."""
        assert types("===") == [TokenType.EQUAL, TokenType.ASSIGN]

    def test_operators_without_spaces(self):
        assert types("a<=b&&!c") == [
            TokenType.IDENTIFIER,
            TokenType.LESS_EQUAL,
            TokenType.IDENTIFIER,
            TokenType.AND,
            TokenType.NOT,
            TokenType.IDENTIFIER,
        ]

    @pytest.mark.parametrize("char", ["&", "|"])
    def test_lone_logical_character_is_error(self, char):
        tokens = tokenize(f"a {char} b")
        assert [t.type for t in tokens] == [
            TokenType.IDENTIFIER,
            TokenType.ERROR,
            TokenType.IDENTIFIER,
        ]
        assert tokens[1].lexeme == f"Unexpected character: {char}"

    @pytest.mark.parametrize("char", ["@", "$", "[", "'", ".", "~"])
    def test_unexpected_character(self, char):
        tokens = tokenize(char)
        assert tokens[0].type == TokenType.ERROR
        assert tokens[0].lexeme == f"Unexpected character: {char}"

    def test_scanning_continues_after_error(self):
        assert types("@ troop") == [TokenType.ERROR, TokenType.TROOP]


# =============================================================================
# Directives and Comments
# =============================================================================

class TestDirectivesAndComments:
    """Test '#supply', unknown directives and '#' comments."""

    def test_supply_directive(self):
        tokens = tokenize("#supply math")
        assert [t.type for t in tokens] == [TokenType.SUPPLY, TokenType.IDENTIFIER]
        assert tokens[0].lexeme == "#supply"
        assert tokens[1].lexeme == "math"
        assert tokens[1].column == 9

    def test_unknown_directive(self):
        tokens = tokenize("#unknown")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.ERROR
        assert tokens[0].lexeme == "Unknown directive: #unknown"

    def test_directive_stops_at_non_letter(self):
        """Directive names are letters only."""
        tokens = tokenize("#supply_x")
        assert [t.type for t in tokens] == [TokenType.SUPPLY, TokenType.IDENTIFIER]
        assert tokens[1].lexeme == "_x"

    def test_comment_produces_no_token(self):
        assert tokenize("# this is a comment") == []

    def test_comment_runs_to_end_of_line(self):
        tokens = tokenize("troop x; # note\nbrief x;")
        assert [t.type for t in tokens] == [
            TokenType.TROOP,
            TokenType.IDENTIFIER,
            TokenType.SEMICOLON,
            TokenType.BRIEF,
            TokenType.IDENTIFIER,
            TokenType.SEMICOLON,
        ]
        assert tokens[3].line == 2

    def test_hash_followed_by_digit_is_comment(self):
        assert tokenize("#1 not a directive") == []

    def test_bare_hash_at_end(self):
        assert tokenize("troop #") == tokenize("troop")


# =============================================================================
# Positions
# =============================================================================

class TestPositions:
    """Test line and column tracking."""

    def test_token_location(self):
        tokens = tokenize("troop x\n  brief x;")
        positions = [(t.lexeme, t.line, t.column) for t in tokens]
        assert positions == [
            ("troop", 1, 1),
            ("x", 1, 7),
            ("brief", 2, 3),
            ("x", 2, 9),
            (";", 2, 10),
        ]

    def test_tabs_and_carriage_returns_advance_column(self):
        tokens = tokenize("\t\rx")
        assert tokens[0].column == 3

    def test_crlf_line_endings(self):
        tokens = tokenize("troop x;\r\nbrief x;")
        assert (tokens[3].lexeme, tokens[3].line, tokens[3].column) == ("brief", 2, 1)

    def test_positions_monotonic(self):
        source = (
            "#supply intel_kit\n"
            "tactic campaign() {\n"
            "    troop count = 0;  # counter\n"
            "    maintain (count < 10) { count = count + 1; }\n"
            "    brief \"done\";\n"
            "}\n"
        )
        tokens = scan(source)
        for before, after in zip(tokens, tokens[1:]):
            assert after.line >= before.line
            if after.line == before.line:
                assert after.column > before.column

    def test_location_property(self):
        token = tokenize("  x")[0]
        assert str(token.location) == "<test>:1:3"


# =============================================================================
# Scanner Behaviour
# =============================================================================

class TestScanner:
    """Test scanner-level guarantees."""

    def test_deterministic(self):
        source = 'tactic campaign() { codename s = "x"; brief s; }'
        assert scan(source) == scan(source)

    def test_rescanning_same_instance(self):
        """A scanner instance starts over on every call."""
        scanner = Scanner("troop a = 1;\nbrief a;")
        first = scanner.scan_tokens()
        second = scanner.scan_tokens()
        assert first == second

    def test_tokens_are_immutable(self):
        token = tokenize("x")[0]
        with pytest.raises(dataclasses.FrozenInstanceError):
            token.lexeme = "y"  # type: ignore[misc]

    def test_token_helpers(self):
        tokens = tokenize("troop ammo x @")
        assert tokens[0].is_type_keyword()
        assert tokens[1].is_type_keyword()
        assert not tokens[2].is_type_keyword()
        assert tokens[3].is_error()

    def test_token_repr(self):
        assert repr(Token(TokenType.INTEGER, "7", 2, 5)) == "Token(INTEGER, '7', 2:5)"

    def test_token_type_names(self):
        names = [token_type_name(t) for t in TokenType]
        assert len(names) == len(set(names))
        assert token_type_name(TokenType.LESS_EQUAL) == "LESS_EQUAL"
        assert token_type_name(TokenType.EOF) == "EOF"


# =============================================================================
# Lexical Error Collection
# =============================================================================

class TestLexicalErrors:
    """Test conversion of ERROR tokens into LexicalError diagnostics."""

    def test_no_errors(self):
        assert lexical_errors(scan("troop x;")) == []

    def test_errors_in_source_order(self):
        source = "troop x = @;\ncodename s = \"oops"
        errors = lexical_errors(scan(source, "bad.tac"), split_lines(source))

        assert len(errors) == 2
        assert all(isinstance(e, LexicalError) for e in errors)
        assert errors[0].message == "Unexpected character: @"
        assert str(errors[0].location) == "bad.tac:1:11"
        assert errors[0].source_line == "troop x = @;"
        assert errors[1].message == "Unterminated string"
        assert errors[1].location.line == 2

    def test_error_formatting(self):
        source = "troop x = @;"
        error = lexical_errors(scan(source, "bad.tac"), [source])[0]
        assert str(error) == (
            "bad.tac:1:11: error: Unexpected character: @\n"
            "    troop x = @;\n"
            "              ^"
        )


class TestSplitLines:
    """Source lines must be numbered the way the scanner counts lines."""

    def test_only_newline_ends_a_line(self):
        source = 'codename s = "a b\x0cc\x85d";\ntroop y;'
        assert split_lines(source) == ['codename s = "a b\x0cc\x85d";', "troop y;"]
        assert scan(source)[-2].line == 2

    def test_crlf(self):
        assert split_lines("troop x;\r\ntroop y;\r\n") == ["troop x;", "troop y;", ""]

    def test_lone_carriage_return_kept_inside_line(self):
        assert split_lines("a\rb\nc") == ["a\rb", "c"]
