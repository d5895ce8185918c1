"""
TacticLang Front-End
====================

This package implements the front-end for TacticLang, a small imperative
scripting language with a military vocabulary:

- A scanner (tokenizer) turning source text into tokens
- A recursive descent parser that checks the tokens against the grammar
- A driver that runs both stages and collects diagnostics
- The `tacc` command-line tool

The parser validates syntax only; it builds no tree and runs nothing.

Pipeline
--------
    Source → Scanner → Tokens → Parser → valid / invalid + diagnostics

Usage
-----
>>> from tacticlang import check_source
>>> result = check_source('''
... #supply tactics
... tactic campaign() {
...     troop x = 1;
...     brief x;
... }
... ''')
>>> result.valid
True

Language Summary
----------------
- Types: troop (integer), ammo (double), codename (string), status (boolean)
- Functions: tactic NAME(params) { ... }; the entry point is 'campaign'
- Control flow: evaluate/adjust (if/else), maintain (while), deploy (for),
  retreat (return), abort (break)
- I/O statements: brief (output), intel (input)
- Include directive: #supply NAME
- Comments: '#' not followed by a letter, to end of line
"""

# =============================================================================
# Version Information
# =============================================================================

__version__ = "1.0.0"

# =============================================================================
# Public API Imports
# =============================================================================

from tacticlang.errors import (
    TacticError,
    SourceLocation,
    FrontendError,
    LexicalError,
    TacticSyntaxError,
    EmptySourceError,
    CompilationFailed,
    ErrorCollector,
)
from tacticlang.lexer import Scanner, Token, TokenType, KEYWORDS, scan, lexical_errors, split_lines
from tacticlang.parser import Parser, ParseResult, parse_source
from tacticlang.frontend import (
    FrontendOptions,
    FrontendResult,
    TacticFrontend,
    check_source,
    check_file,
    validate,
    format_token_table,
)

__all__ = [
    "__version__",
    # Errors
    "TacticError",
    "SourceLocation",
    "FrontendError",
    "LexicalError",
    "TacticSyntaxError",
    "EmptySourceError",
    "CompilationFailed",
    "ErrorCollector",
    # Scanner
    "Scanner",
    "Token",
    "TokenType",
    "KEYWORDS",
    "scan",
    "lexical_errors",
    "split_lines",
    # Parser
    "Parser",
    "ParseResult",
    "parse_source",
    # Driver
    "FrontendOptions",
    "FrontendResult",
    "TacticFrontend",
    "check_source",
    "check_file",
    "validate",
    "format_token_table",
]
