"""
TacticLang Front-End Driver
===========================

This module runs the complete front-end over one source unit:

    Source → Scanner → (lexical error check) → Parser → verdict

Usage
-----
Command line:
    $ tacc soldier.tac

Programmatic:
    >>> from tacticlang.frontend import check_source
    >>> result = check_source('tactic campaign() { brief "go"; }')
    >>> result.valid
    True

Error Handling
--------------
Diagnostics never raise: they are collected on the FrontendResult. Any
lexical error stops the run before parsing, since the parser is only
defined over error-free token lists. Syntax errors are all collected in
one pass thanks to the parser's recovery.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from tacticlang.errors import EmptySourceError, FrontendError, LexicalError, TacticSyntaxError
from tacticlang.lexer import Scanner, Token, lexical_errors, split_lines, token_type_name
from tacticlang.parser import Parser

logger = logging.getLogger(__name__)


@dataclass
class FrontendOptions:
    """
    Front-end configuration options.

    Attributes:
        max_errors: Stop parsing after this many syntax errors
        encoding: Text encoding used to read source files
    """
    max_errors: int = 100
    encoding: str = "utf-8"

    def __post_init__(self):
        if self.max_errors < 1:
            raise ValueError("max_errors must be at least 1")


@dataclass
class FrontendResult:
    """
    Result of running the front-end on one source unit.

    Attributes:
        filename: Source filename
        tokens: Tokens produced by the scanner (ending with EOF)
        lexical_errors: Errors reported by the scanner
        syntax_errors: Errors reported by the parser
        parsed: True if the parser ran
        declaration_count: Top-level declarations accepted by the parser
    """
    filename: str = ""
    tokens: list[Token] = field(default_factory=list)
    lexical_errors: list[LexicalError] = field(default_factory=list)
    syntax_errors: list[TacticSyntaxError] = field(default_factory=list)
    parsed: bool = False
    declaration_count: int = 0

    @property
    def token_count(self) -> int:
        return len(self.tokens)

    @property
    def scanned(self) -> bool:
        """True if scanning produced no lexical errors."""
        return not self.lexical_errors

    @property
    def errors(self) -> list[FrontendError]:
        """All diagnostics, lexical first."""
        return [*self.lexical_errors, *self.syntax_errors]

    @property
    def valid(self) -> bool:
        """True if the source scanned and parsed without errors."""
        return self.scanned and self.parsed and not self.syntax_errors


class TacticFrontend:
    """
    Scanner and parser pipeline for TacticLang.

    Example:
        frontend = TacticFrontend()
        result = frontend.check_file("soldier.tac")
        for error in result.errors:
            print(error)

    Attributes:
        options: Front-end configuration options
    """

    def __init__(self, options: Optional[FrontendOptions] = None):
        self.options = options or FrontendOptions()

    def check_source(self, source: str, filename: str = "<input>") -> FrontendResult:
        """
        Scan and parse source text.

        Args:
            source: TacticLang source code
            filename: Source filename for diagnostics

        Returns:
            FrontendResult with tokens and diagnostics
        """
        result = FrontendResult(filename=filename)
        source_lines = split_lines(source)

        logger.debug(f"Scanning {filename} ({len(source)} characters)")
        result.tokens = Scanner(source, filename).scan_tokens()
        result.lexical_errors = lexical_errors(result.tokens, source_lines)

        if result.lexical_errors:
            logger.info(
                f"{filename}: scanning failed with "
                f"{len(result.lexical_errors)} errors"
            )
            return result

        logger.debug(f"Parsing {filename} ({result.token_count} tokens)")
        parse_result = Parser(
            result.tokens,
            filename,
            source_lines,
            max_errors=self.options.max_errors,
        ).parse()

        result.parsed = True
        result.syntax_errors = parse_result.errors
        result.declaration_count = parse_result.declaration_count

        if parse_result.valid:
            logger.debug(f"{filename}: syntax is valid")
        else:
            logger.info(f"{filename}: {len(parse_result.errors)} syntax errors")

        return result

    def check_file(self, filepath: Union[str, Path]) -> FrontendResult:
        """
        Read a source file and run the front-end over it.

        Raises:
            FileNotFoundError: If the source file does not exist
            EmptySourceError: If the source file is empty
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        source = path.read_text(encoding=self.options.encoding)
        if not source:
            raise EmptySourceError(str(filepath))

        return self.check_source(source, str(filepath))


# =============================================================================
# Token Listing
# =============================================================================

def format_token_table(tokens: list[Token]) -> str:
    """
    Format tokens one per line as 'line:column  KIND  'lexeme''.

    Example:
        1:1     TROOP          'troop'
        1:7     IDENTIFIER     'x'
    """
    lines = []
    for token in tokens:
        position = f"{token.line}:{token.column}"
        lines.append(f"{position:<8}{token_type_name(token.type):<15}{token.lexeme!r}")
    return "\n".join(lines)


# =============================================================================
# Convenience Functions
# =============================================================================

def check_source(source: str, filename: str = "<input>") -> FrontendResult:
    """Run the front-end with default options over source text."""
    return TacticFrontend().check_source(source, filename)


def check_file(filepath: Union[str, Path]) -> FrontendResult:
    """Run the front-end with default options over a source file."""
    return TacticFrontend().check_file(filepath)


def validate(source: str) -> bool:
    """Return True if source is a lexically and syntactically valid program."""
    return check_source(source).valid
