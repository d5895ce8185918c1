"""
TacticLang Recursive Descent Parser
===================================

This module implements a recursive descent parser that checks a token
list from the scanner against the TacticLang grammar. It validates syntax
only: no tree is built, and recognizing the grammar is the whole output.

Grammar (EBNF)
--------------
program         ::= declaration* EOF
declaration     ::= include_stmt | func_def | var_decl
include_stmt    ::= '#supply' IDENTIFIER
var_decl        ::= type IDENTIFIER ('=' expr)? ';'
type            ::= 'troop' | 'ammo' | 'codename' | 'status'
func_def        ::= 'tactic' (IDENTIFIER | 'campaign') '(' params? ')' block
params          ::= type IDENTIFIER (',' type IDENTIFIER)*

block           ::= '{' statement* '}'
statement       ::= block | var_decl | if_stmt | while_stmt | for_stmt
                  | output_stmt | input_stmt | return_stmt | break_stmt
                  | expr_stmt

if_stmt         ::= 'evaluate' '(' expr ')' block ('adjust' (if_stmt | block))?
while_stmt      ::= 'maintain' '(' expr ')' block
for_stmt        ::= 'deploy' '(' (var_decl | expr_stmt | ';') expr? ';' expr? ')' block
output_stmt     ::= 'brief' expr ';'
input_stmt      ::= 'intel' IDENTIFIER ';'
return_stmt     ::= 'retreat' expr? ';'
break_stmt      ::= 'abort' ';'
expr_stmt       ::= expr ';'

Expression Precedence (lowest to highest)
-----------------------------------------
1. logical_or      ||
2. logical_and     &&
3. equality        == !=
4. relational      < > <= >=
5. additive        + -
6. multiplicative  * / %
7. unary           ! -
8. primary         literal, call, assignment, IDENTIFIER, '(' expr ')'

Levels 1-6 come from the BINARY_PRECEDENCE table and are handled by a
single precedence-climbing loop, so each level of parentheses costs only
two Python frames.

An identifier in primary position is a call when the next token is '(',
an assignment when it is '=', and a plain reference otherwise.

Error Recovery
--------------
Grammar rules raise TacticSyntaxError. The declaration loop records the
error and synchronizes: it drops tokens until it has consumed a ';' or
the next token starts a declaration or statement. Parsing then resumes,
so one run reports every error it can find.

Nesting deep enough to exhaust the interpreter's recursion limit is
reported the same way, as "Expression nested too deeply.", at the token
where the parser gave up.

Example Usage
-------------
>>> from tacticlang.lexer import scan
>>> from tacticlang.parser import Parser
>>> result = Parser(scan('tactic campaign() { brief 1; }')).parse()
>>> result.valid
True
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from tacticlang.errors import ErrorCollector, TacticSyntaxError
from tacticlang.lexer import TYPE_KEYWORDS, Token, TokenType, lexical_errors, scan, split_lines

logger = logging.getLogger(__name__)


# Tokens that begin a declaration or statement; recovery resumes before them
SYNC_TOKENS = frozenset({
    TokenType.TACTIC,
    TokenType.TROOP,
    TokenType.AMMO,
    TokenType.CODENAME,
    TokenType.STATUS,
    TokenType.BRIEF,
    TokenType.INTEL,
    TokenType.EVALUATE,
    TokenType.DEPLOY,
    TokenType.MAINTAIN,
    TokenType.RETREAT,
})

LITERAL_TOKENS = frozenset({
    TokenType.INTEGER,
    TokenType.DOUBLE,
    TokenType.STRING,
    TokenType.TRUE,
    TokenType.FALSE,
})

# Binary operator binding strength; higher binds tighter
BINARY_PRECEDENCE = {
    TokenType.OR: 1,
    TokenType.AND: 2,
    TokenType.EQUAL: 3,
    TokenType.NOT_EQUAL: 3,
    TokenType.LESS: 4,
    TokenType.GREATER: 4,
    TokenType.LESS_EQUAL: 4,
    TokenType.GREATER_EQUAL: 4,
    TokenType.PLUS: 5,
    TokenType.MINUS: 5,
    TokenType.MULTIPLY: 6,
    TokenType.DIVIDE: 6,
    TokenType.MODULO: 6,
}


@dataclass
class ParseResult:
    """
    Outcome of a parse.

    Attributes:
        errors: Syntax errors in the order they were found
        declaration_count: Number of top-level declarations accepted
    """
    errors: list[TacticSyntaxError] = field(default_factory=list)
    declaration_count: int = 0

    @property
    def valid(self) -> bool:
        """True if the program had no syntax errors."""
        return not self.errors

    def __bool__(self) -> bool:
        return self.valid


class Parser:
    """
    Recursive descent parser for TacticLang.

    The parser reads the token list by index and never goes back to the
    source text. It keeps going after errors so a single run reports as
    many problems as possible.

    Attributes:
        tokens: List of tokens to parse, ending with EOF
        filename: Source filename for error reporting
    """

    def __init__(
        self,
        tokens: list[Token],
        filename: Optional[str] = None,
        source_lines: Optional[list[str]] = None,
        max_errors: int = 100,
    ):
        """
        Initialize the parser.

        Args:
            tokens: Token list from the scanner; must end with EOF and
                contain no ERROR tokens
            filename: Source filename (defaults to the tokens' filename)
            source_lines: Original source lines for error context
            max_errors: Stop after this many syntax errors

        Raises:
            ValueError: If the token list is empty, does not end with EOF,
                or contains a lexical-error token
        """
        if not tokens or tokens[-1].type != TokenType.EOF:
            raise ValueError("token list must end with an EOF token")
        bad = next((t for t in tokens if t.is_error()), None)
        if bad is not None:
            raise ValueError(
                f"token list contains a lexical error at "
                f"{bad.line}:{bad.column}: {bad.lexeme}"
            )

        self.tokens = tokens
        self.filename = filename or tokens[-1].filename
        self.source_lines = source_lines or []
        self.max_errors = max_errors

        self._pos = 0
        self._errors = ErrorCollector(max_errors)

    def parse(self) -> ParseResult:
        """
        Check the whole token list against the grammar.

        Returns:
            ParseResult with every syntax error found
        """
        self._pos = 0
        self._errors.clear()
        declarations = 0

        while not self._at_end():
            try:
                self._parse_declaration()
                declarations += 1
            except TacticSyntaxError as e:
                if self._record_error(e):
                    break
            except RecursionError:
                logger.debug(f"Recursion limit reached at {self._peek()!r}")
                error = self._error(self._peek(), "Expression nested too deeply.")
                if self._record_error(error):
                    break

        logger.debug(
            f"Parsed {self.filename}: {declarations} declarations, "
            f"{self._errors.error_count()} errors"
        )
        return ParseResult(
            errors=list(self._errors.errors),
            declaration_count=declarations,
        )

    def _record_error(self, error: TacticSyntaxError) -> bool:
        """
        Collect an error and synchronize.

        Returns:
            True if the error limit has been reached and parsing should stop
        """
        logger.debug(f"Syntax error, synchronizing: {error.describe()}")
        self._errors.add(error)
        if self._errors.should_stop():
            logger.debug(f"Stopping after {self._errors.error_count()} errors")
            return True
        self._synchronize()
        return False

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if we've reached the end of tokens."""
        return self._peek().type == TokenType.EOF

    def _peek(self, offset: int = 0) -> Token:
        """Look at token at current position + offset."""
        pos = self._pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[pos]

    def _previous(self) -> Token:
        """Return the most recently consumed token."""
        return self.tokens[max(self._pos - 1, 0)]

    def _advance(self) -> Token:
        """Consume and return the current token."""
        if not self._at_end():
            self._pos += 1
        return self._previous()

    def _check(self, *types: TokenType) -> bool:
        """Check if current token is one of the given types."""
        return self._peek().type in types

    def _check_type_keyword(self) -> bool:
        return self._peek().type in TYPE_KEYWORDS

    def _match(self, *types: TokenType) -> Optional[Token]:
        """
        Consume current token if it matches one of the types.

        Returns:
            The consumed token, or None if no match
        """
        if self._check(*types):
            return self._advance()
        return None

    def _expect(self, token_type: TokenType, message: str) -> Token:
        """
        Expect and consume a specific token type.

        Raises:
            TacticSyntaxError: If the expected token is not found
        """
        if self._check(token_type):
            return self._advance()
        raise self._error(self._peek(), message)

    def _error(
        self,
        token: Token,
        message: str,
        hint: Optional[str] = None,
    ) -> TacticSyntaxError:
        """Build a syntax error pointing at token."""
        found = None if token.type == TokenType.EOF else token.lexeme
        return TacticSyntaxError(
            message,
            found,
            location=token.location,
            source_line=self._get_source_line(token.line),
            hint=hint,
        )

    def _get_source_line(self, line: int) -> Optional[str]:
        """Get source line for error reporting."""
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    def _synchronize(self) -> None:
        """
        Skip tokens after an error until a safe place to resume.

        Always drops the offending token, then stops once a ';' has been
        consumed or the next token starts a declaration or statement.
        """
        self._advance()

        while not self._at_end():
            if self._previous().type == TokenType.SEMICOLON:
                break
            if self._peek().type in SYNC_TOKENS:
                break
            self._advance()

        logger.debug(f"Resuming at {self._peek()!r}")

    # =========================================================================
    # Declarations
    # =========================================================================

    def _parse_declaration(self) -> None:
        """Parse an include directive, function definition or variable."""
        if self._check(TokenType.SUPPLY):
            self._parse_include()
        elif self._check(TokenType.TACTIC):
            self._parse_function()
        elif self._check_type_keyword():
            self._parse_variable_declaration()
        else:
            hint = None
            if self._check(TokenType.SEMICOLON) and self._after_include():
                hint = "'#supply' takes no ';'"
            raise self._error(
                self._peek(),
                "Expected a declaration (#supply, tactic, or variable type).",
                hint=hint,
            )

    def _after_include(self) -> bool:
        """True if the last two tokens consumed were '#supply NAME'."""
        return (
            self._pos >= 2
            and self.tokens[self._pos - 2].type == TokenType.SUPPLY
            and self.tokens[self._pos - 1].type == TokenType.IDENTIFIER
        )

    def _parse_include(self) -> None:
        """Parse '#supply NAME'. The directive takes no ';'."""
        self._expect(TokenType.SUPPLY, "Expected '#supply'.")
        self._expect(TokenType.IDENTIFIER, "Expected identifier after '#supply'.")

    def _parse_variable_declaration(self) -> None:
        """Parse 'type NAME (= expr)? ;'."""
        if not self._check_type_keyword():
            raise self._error(self._peek(), "Expected variable type.")
        self._advance()

        self._expect(TokenType.IDENTIFIER, "Expected variable name.")

        if self._match(TokenType.ASSIGN):
            self._parse_expression()

        self._expect(TokenType.SEMICOLON, "Expected ';' after variable declaration.")

    def _parse_function(self) -> None:
        """Parse 'tactic NAME ( params? ) block'; NAME may be 'campaign'."""
        self._expect(TokenType.TACTIC, "Expected 'tactic'.")

        if not self._match(TokenType.IDENTIFIER, TokenType.CAMPAIGN):
            raise self._error(self._peek(), "Expected function name or 'campaign'.")

        self._expect(TokenType.LPAREN, "Expected '(' after function name.")

        if not self._check(TokenType.RPAREN):
            self._parse_parameter()
            while self._match(TokenType.COMMA):
                self._parse_parameter()

        self._expect(TokenType.RPAREN, "Expected ')' after parameters.")
        self._parse_block()

    def _parse_parameter(self) -> None:
        if not self._match(*TYPE_KEYWORDS):
            raise self._error(self._peek(), "Expected parameter type.")
        self._expect(TokenType.IDENTIFIER, "Expected parameter name.")

    # =========================================================================
    # Statements
    # =========================================================================

    def _parse_block(self) -> None:
        """Parse a block statement { ... }."""
        self._expect(TokenType.LBRACE, "Expected '{' to begin block.")

        while not self._check(TokenType.RBRACE) and not self._at_end():
            self._parse_statement()

        self._expect(TokenType.RBRACE, "Expected '}' to end block.")

    def _parse_statement(self) -> None:
        """Parse any statement."""
        token = self._peek()

        if token.type == TokenType.LBRACE:
            self._parse_block()
        elif token.is_type_keyword():
            self._parse_variable_declaration()
        elif token.type == TokenType.EVALUATE:
            self._parse_if_statement()
        elif token.type == TokenType.MAINTAIN:
            self._parse_while_statement()
        elif token.type == TokenType.DEPLOY:
            self._parse_for_statement()
        elif token.type == TokenType.BRIEF:
            self._parse_output_statement()
        elif token.type == TokenType.INTEL:
            self._parse_input_statement()
        elif token.type == TokenType.RETREAT:
            self._parse_return_statement()
        elif token.type == TokenType.ABORT:
            self._parse_break_statement()
        else:
            self._parse_expression_statement()

    def _parse_if_statement(self) -> None:
        """Parse 'evaluate (cond) block', with optional 'adjust' branch."""
        self._expect(TokenType.EVALUATE, "Expected 'evaluate'.")
        self._expect(TokenType.LPAREN, "Expected '(' after 'evaluate'.")
        self._parse_expression()
        self._expect(TokenType.RPAREN, "Expected ')' after condition.")
        self._parse_block()

        if self._match(TokenType.ADJUST):
            if self._check(TokenType.EVALUATE):
                self._parse_if_statement()
            else:
                self._parse_block()

    def _parse_while_statement(self) -> None:
        self._expect(TokenType.MAINTAIN, "Expected 'maintain'.")
        self._expect(TokenType.LPAREN, "Expected '(' after 'maintain'.")
        self._parse_expression()
        self._expect(TokenType.RPAREN, "Expected ')' after condition.")
        self._parse_block()

    def _parse_for_statement(self) -> None:
        """Parse 'deploy (init cond? ; update?) block'."""
        self._expect(TokenType.DEPLOY, "Expected 'deploy'.")
        self._expect(TokenType.LPAREN, "Expected '(' after 'deploy'.")

        # Initializer: declaration, expression statement, or bare ';'
        if self._match(TokenType.SEMICOLON):
            pass
        elif self._check_type_keyword():
            self._parse_variable_declaration()
        else:
            self._parse_expression_statement()

        if not self._check(TokenType.SEMICOLON):
            self._parse_expression()
        self._expect(TokenType.SEMICOLON, "Expected ';' after loop condition.")

        if not self._check(TokenType.RPAREN):
            self._parse_expression()
        self._expect(TokenType.RPAREN, "Expected ')' after for clauses.")

        self._parse_block()

    def _parse_output_statement(self) -> None:
        self._expect(TokenType.BRIEF, "Expected 'brief'.")
        self._parse_expression()
        self._expect(TokenType.SEMICOLON, "Expected ';' after 'brief' statement.")

    def _parse_input_statement(self) -> None:
        self._expect(TokenType.INTEL, "Expected 'intel'.")
        self._expect(TokenType.IDENTIFIER, "Expected identifier after 'intel'.")
        self._expect(TokenType.SEMICOLON, "Expected ';' after 'intel' statement.")

    def _parse_return_statement(self) -> None:
        self._expect(TokenType.RETREAT, "Expected 'retreat'.")
        if not self._check(TokenType.SEMICOLON):
            self._parse_expression()
        self._expect(TokenType.SEMICOLON, "Expected ';' after 'retreat' statement.")

    def _parse_break_statement(self) -> None:
        self._expect(TokenType.ABORT, "Expected 'abort'.")
        self._expect(TokenType.SEMICOLON, "Expected ';' after 'abort'.")

    def _parse_expression_statement(self) -> None:
        self._parse_expression()
        self._expect(TokenType.SEMICOLON, "Expected ';' after expression.")

    # =========================================================================
    # Expression Parsing (Operator Precedence)
    # =========================================================================

    def _parse_expression(self, min_precedence: int = 0) -> None:
        """
        Parse an expression whose binary operators bind at least as tightly
        as min_precedence.

        Operators are left-associative: the right operand of a level-n
        operator is parsed at level n + 1, and further level-n operators
        are picked up by this loop. Prefix operators (! -) are consumed in
        a loop before the primary.
        """
        while self._match(TokenType.NOT, TokenType.MINUS):
            pass
        self._parse_primary()

        while True:
            precedence = BINARY_PRECEDENCE.get(self._peek().type)
            if precedence is None or precedence < min_precedence:
                return
            self._advance()
            self._parse_expression(precedence + 1)

    def _parse_primary(self) -> None:
        """Parse literals, calls, assignments, variables and groupings."""
        if self._match(*LITERAL_TOKENS):
            return

        if self._check(TokenType.IDENTIFIER):
            following = self._peek(1).type

            if following == TokenType.LPAREN:
                self._advance()  # name
                self._advance()  # (
                self._parse_arguments()
                return

            if following == TokenType.ASSIGN:
                self._advance()  # name
                self._advance()  # =
                self._parse_expression()
                return

            self._advance()
            return

        if self._match(TokenType.LPAREN):
            self._parse_expression()
            self._expect(TokenType.RPAREN, "Expected ')' after expression.")
            return

        raise self._error(
            self._peek(),
            "Expected expression (literal, variable, grouping).",
        )

    def _parse_arguments(self) -> None:
        """Parse call arguments after '(' through the closing ')'."""
        if not self._check(TokenType.RPAREN):
            self._parse_expression()
            while self._match(TokenType.COMMA):
                self._parse_expression()

        self._expect(TokenType.RPAREN, "Expected ')' after function call arguments.")


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(source: str, filename: str = "<input>") -> ParseResult:
    """
    Scan and parse TacticLang source.

    Args:
        source: The TacticLang source code
        filename: Source filename for error messages

    Returns:
        ParseResult with any syntax errors

    Raises:
        CompilationFailed: If the scanner reported lexical errors
    """
    tokens = scan(source, filename)
    source_lines = split_lines(source)

    errors = lexical_errors(tokens, source_lines)
    if errors:
        collector = ErrorCollector()
        for error in errors:
            collector.add(error)
        collector.raise_if_errors()

    return Parser(tokens, filename, source_lines).parse()
