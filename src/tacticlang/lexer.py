"""
TacticLang Scanner (Tokenizer)
==============================

This module implements the lexical scanner for TacticLang. It converts
source text into a list of tokens for the parser in a single forward
pass, always taking the longest lexeme that forms a token.

Token Categories
----------------
- Keywords: campaign, tactic, troop, ammo, codename, status, brief, intel,
  evaluate, adjust, maintain, deploy, retreat, abort
- Directive: #supply
- Literals: integers (42), doubles (3.14), strings ("..."), true, false
- Identifiers: variable and function names
- Operators: + - * / % == != < > <= >= && || ! =
- Delimiters: ( ) { } ; ,

Comments
--------
A '#' that is not followed by a letter starts a comment that runs to the
end of the line. '#' followed by letters is a directive.

Lexical Errors
--------------
The scanner never stops on bad input. Unexpected characters, unterminated
strings and unknown directives become ERROR tokens whose lexeme is the
message. Callers check for them with lexical_errors() before parsing.

Example Usage
-------------
>>> from tacticlang.lexer import Scanner
>>> for token in Scanner('troop x = 42;').scan_tokens():
...     print(token)
Token(TROOP, 'troop', 1:1)
Token(IDENTIFIER, 'x', 1:7)
Token(ASSIGN, '=', 1:9)
Token(INTEGER, '42', 1:11)
Token(SEMICOLON, ';', 1:13)
Token(EOF, '', 1:14)
"""

import logging
import string
from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from tacticlang.errors import LexicalError, SourceLocation

logger = logging.getLogger(__name__)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """
    Token types for TacticLang.

    The set is closed: keywords, literals, identifiers, operators,
    delimiters and the two sentinels (EOF and ERROR).
    """

    # === Keywords ===
    CAMPAIGN = auto()       # campaign (entry point name)
    TACTIC = auto()         # tactic (function definition)
    TROOP = auto()          # troop (integer type)
    AMMO = auto()           # ammo (double type)
    CODENAME = auto()       # codename (string type)
    STATUS = auto()         # status (boolean type)
    BRIEF = auto()          # brief (output)
    INTEL = auto()          # intel (input)
    EVALUATE = auto()       # evaluate (if)
    ADJUST = auto()         # adjust (else)
    MAINTAIN = auto()       # maintain (while)
    DEPLOY = auto()         # deploy (for)
    RETREAT = auto()        # retreat (return)
    ABORT = auto()          # abort (break)
    SUPPLY = auto()         # #supply (include directive)

    # === Literals ===
    INTEGER = auto()
    DOUBLE = auto()
    STRING = auto()
    TRUE = auto()
    FALSE = auto()

    # === Identifiers ===
    IDENTIFIER = auto()

    # === Operators ===
    PLUS = auto()           # +
    MINUS = auto()          # -
    MULTIPLY = auto()       # *
    DIVIDE = auto()         # /
    MODULO = auto()         # %
    EQUAL = auto()          # ==
    NOT_EQUAL = auto()      # !=
    LESS = auto()           # <
    GREATER = auto()        # >
    LESS_EQUAL = auto()     # <=
    GREATER_EQUAL = auto()  # >=
    AND = auto()            # &&
    OR = auto()             # ||
    NOT = auto()            # !
    ASSIGN = auto()         # =

    # === Delimiters ===
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    LBRACE = auto()         # {
    RBRACE = auto()         # }
    SEMICOLON = auto()      # ;
    COMMA = auto()          # ,

    # === Sentinels ===
    EOF = auto()            # End of input
    ERROR = auto()          # Lexical error (lexeme holds the message)


def token_type_name(token_type: TokenType) -> str:
    """Return the display name of a token type (e.g. 'LESS_EQUAL')."""
    return token_type.name


# =============================================================================
# Keyword Mapping
# =============================================================================

# Read-only: reserved words and the #supply directive
KEYWORDS: Mapping[str, TokenType] = MappingProxyType({
    "campaign": TokenType.CAMPAIGN,
    "tactic": TokenType.TACTIC,
    "troop": TokenType.TROOP,
    "ammo": TokenType.AMMO,
    "codename": TokenType.CODENAME,
    "status": TokenType.STATUS,
    "brief": TokenType.BRIEF,
    "intel": TokenType.INTEL,
    "evaluate": TokenType.EVALUATE,
    "adjust": TokenType.ADJUST,
    "maintain": TokenType.MAINTAIN,
    "deploy": TokenType.DEPLOY,
    "retreat": TokenType.RETREAT,
    "abort": TokenType.ABORT,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "#supply": TokenType.SUPPLY,
})

TYPE_KEYWORDS = frozenset({
    TokenType.TROOP,
    TokenType.AMMO,
    TokenType.CODENAME,
    TokenType.STATUS,
})


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    Represents a single token from TacticLang source.

    Attributes:
        type: The TokenType classification
        lexeme: The exact source text matched (the message for ERROR tokens,
            empty for EOF)
        line: Line number of the token's first character (1-indexed)
        column: Column number of the token's first character (1-indexed)
        filename: Name of the source file
    """
    type: TokenType
    lexeme: str
    line: int
    column: int
    filename: str = "<input>"

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.lexeme!r}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def is_type_keyword(self) -> bool:
        """Return True if this token names a variable type."""
        return self.type in TYPE_KEYWORDS

    def is_error(self) -> bool:
        """Return True if this is a lexical-error token."""
        return self.type == TokenType.ERROR


# =============================================================================
# Scanner Implementation
# =============================================================================

class Scanner:
    """
    Tokenizes TacticLang source code.

    Usage:
        scanner = Scanner(source_text, filename)
        tokens = scanner.scan_tokens()

    Each call to scan_tokens() starts from the beginning of the source with
    fresh position state, so repeated calls return equal token lists.

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for diagnostics)
    """

    DIGITS = frozenset(string.digits)
    LETTERS = frozenset(string.ascii_letters)

    # Characters that can start an identifier
    IDENT_START = frozenset(string.ascii_letters + "_")

    # Characters that can continue an identifier
    IDENT_CHARS = frozenset(string.ascii_letters + string.digits + "_")

    WHITESPACE = frozenset(" \t\r\n")

    SINGLE_TOKENS = {
        "(": TokenType.LPAREN,
        ")": TokenType.RPAREN,
        "{": TokenType.LBRACE,
        "}": TokenType.RBRACE,
        ";": TokenType.SEMICOLON,
        ",": TokenType.COMMA,
        "+": TokenType.PLUS,
        "-": TokenType.MINUS,
        "*": TokenType.MULTIPLY,
        "/": TokenType.DIVIDE,
        "%": TokenType.MODULO,
    }

    # First character -> (second character, two-char type, one-char type)
    PAIRED_TOKENS = {
        "=": ("=", TokenType.EQUAL, TokenType.ASSIGN),
        "!": ("=", TokenType.NOT_EQUAL, TokenType.NOT),
        "<": ("=", TokenType.LESS_EQUAL, TokenType.LESS),
        ">": ("=", TokenType.GREATER_EQUAL, TokenType.GREATER),
        "&": ("&", TokenType.AND, None),
        "|": ("|", TokenType.OR, None),
    }

    def __init__(self, source: str, filename: str = "<input>"):
        """
        Initialize the scanner with source code.

        Args:
            source: The TacticLang source code to tokenize
            filename: Name of the source file (for diagnostics)
        """
        self.source = source
        self.filename = filename
        self._reset()

    def _reset(self) -> None:
        # Index of the current lexeme's first character
        self._start = 0
        # Index of the next unconsumed character
        self._current = 0
        self._line = 1
        # Characters consumed on the current line
        self._column = 0
        self._start_line = 1
        self._start_column = 1

    def scan_tokens(self) -> list[Token]:
        """
        Scan the whole source and return its tokens.

        The list always ends with exactly one EOF token. Lexical errors
        appear as ERROR tokens in source order.
        """
        tokens = list(self.tokenize())
        error_count = sum(1 for token in tokens if token.is_error())
        logger.debug(
            f"Scanned {self.filename}: {len(tokens)} tokens, "
            f"{error_count} lexical errors"
        )
        return tokens

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source code.

        Yields:
            Token objects in source order, ending with EOF
        """
        self._reset()

        while not self._at_end():
            self._skip_whitespace()

            if self._at_end():
                break

            token = self._scan_token()
            if token is not None:
                yield token

        self._start = self._current
        self._mark_start()
        yield self._make_token(TokenType.EOF, "")

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if we've reached the end of source."""
        return self._current >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """
        Look at character at current position + offset without advancing.

        Returns empty string if past end of source.
        """
        pos = self._current + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """
        Consume and return the current character.

        A newline moves to the next line and resets the column counter.
        """
        if self._at_end():
            return ""

        char = self.source[self._current]
        self._current += 1

        if char == "\n":
            self._line += 1
            self._column = 0
        else:
            self._column += 1

        return char

    def _match(self, expected: str) -> bool:
        """Consume next character if it matches expected."""
        if self._peek() == expected:
            self._advance()
            return True
        return False

    # =========================================================================
    # Token Creation
    # =========================================================================

    def _mark_start(self) -> None:
        """Record the position of the lexeme about to be scanned."""
        self._start_line = self._line
        self._start_column = self._column + 1

    def _lexeme(self) -> str:
        return self.source[self._start:self._current]

    def _make_token(self, token_type: TokenType, lexeme: Optional[str] = None) -> Token:
        """Create a token positioned at the start of the current lexeme."""
        return Token(
            type=token_type,
            lexeme=self._lexeme() if lexeme is None else lexeme,
            line=self._start_line,
            column=self._start_column,
            filename=self.filename,
        )

    def _error_token(self, message: str) -> Token:
        """Create an ERROR token carrying a human-readable message."""
        logger.debug(
            f"{self.filename}:{self._start_line}:{self._start_column}: {message}"
        )
        return self._make_token(TokenType.ERROR, message)

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace(self) -> None:
        """Skip spaces, tabs, carriage returns and newlines."""
        while self._peek() in self.WHITESPACE:
            self._advance()

    def _skip_comment(self) -> None:
        """Skip a comment through the end of the line (newline not consumed)."""
        while not self._at_end() and self._peek() != "\n":
            self._advance()

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Optional[Token]:
        """
        Scan the next token from source.

        Returns:
            The next Token, or None if the lexeme was a comment
        """
        self._start = self._current
        self._mark_start()

        char = self._advance()

        if char in self.SINGLE_TOKENS:
            return self._make_token(self.SINGLE_TOKENS[char])

        if char in self.PAIRED_TOKENS:
            second, double_type, single_type = self.PAIRED_TOKENS[char]
            if self._match(second):
                return self._make_token(double_type)
            if single_type is None:
                return self._error_token(f"Unexpected character: {char}")
            return self._make_token(single_type)

        if char == "#":
            if self._peek() in self.LETTERS:
                return self._scan_directive()
            self._skip_comment()
            return None

        if char == '"':
            return self._scan_string()

        if char in self.DIGITS:
            return self._scan_number()

        if char in self.IDENT_START:
            return self._scan_identifier()

        return self._error_token(f"Unexpected character: {char}")

    def _scan_directive(self) -> Token:
        """Scan '#' followed by letters; only #supply is recognized."""
        while self._peek() in self.LETTERS:
            self._advance()

        text = self._lexeme()
        if text == "#supply":
            return self._make_token(TokenType.SUPPLY)
        return self._error_token(f"Unknown directive: {text}")

    def _scan_string(self) -> Token:
        """
        Scan a double-quoted string literal.

        The string runs to the next '"' and may span lines. There are no
        escape sequences. The lexeme includes both quotes.
        """
        while not self._at_end() and self._peek() != '"':
            self._advance()

        if self._at_end():
            return self._error_token("Unterminated string")

        self._advance()  # closing "
        return self._make_token(TokenType.STRING)

    def _scan_number(self) -> Token:
        """
        Scan an integer or double literal.

        A '.' belongs to the number only when a digit follows it, so
        '123.' scans as INTEGER '123' and leaves the '.' behind.
        """
        while self._peek() in self.DIGITS:
            self._advance()

        if self._peek() == "." and self._peek(1) in self.DIGITS:
            self._advance()  # consume '.'
            while self._peek() in self.DIGITS:
                self._advance()
            return self._make_token(TokenType.DOUBLE)

        return self._make_token(TokenType.INTEGER)

    def _scan_identifier(self) -> Token:
        """
        Scan an identifier or keyword.

        The whole word is read before the keyword lookup, so 'troopship'
        is one identifier.
        """
        while self._peek() in self.IDENT_CHARS:
            self._advance()

        text = self._lexeme()
        return self._make_token(KEYWORDS.get(text, TokenType.IDENTIFIER))


# =============================================================================
# Convenience Functions
# =============================================================================

def scan(source: str, filename: str = "<input>") -> list[Token]:
    """Tokenize source text and return the token list."""
    return Scanner(source, filename).scan_tokens()


def split_lines(source: str) -> list[str]:
    """
    Split source into lines numbered the way the scanner numbers them.

    Only '\\n' ends a line, unlike str.splitlines(), which also breaks on
    form feeds, '\\x85', U+2028 and others. A trailing '\\r' is dropped
    for display.
    """
    return [line[:-1] if line.endswith("\r") else line for line in source.split("\n")]


def lexical_errors(
    tokens: list[Token],
    source_lines: Optional[list[str]] = None,
) -> list[LexicalError]:
    """
    Collect the ERROR tokens of a scanned token list as LexicalErrors.

    Args:
        tokens: Tokens returned by the scanner
        source_lines: Original source lines for error context
    """
    source_lines = source_lines or []
    errors = []
    for token in tokens:
        if not token.is_error():
            continue
        source_line = None
        if 0 < token.line <= len(source_lines):
            source_line = source_lines[token.line - 1]
        errors.append(LexicalError(token.lexeme, token.location, source_line=source_line))
    return errors
