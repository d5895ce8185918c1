"""
TacticLang Command-Line Interface
=================================

This package provides the command-line tool for the TacticLang front-end:

- **tacc**: scan and syntax-check a TacticLang source file

The tool is a Click-based CLI application with help text, a token
listing mode and consistent exit codes.
"""

__all__ = ["tacc"]
