"""
tacc - TacticLang Front-End Command-Line Interface
==================================================

This module implements the command-line interface for the TacticLang
scanner and parser. It reads one source file, scans it, reports any
lexical errors, and otherwise checks the program's syntax.

Usage Examples
--------------
Check a program:
    $ tacc soldier.tac

Show the token stream:
    $ tacc --tokens soldier.tac

Write the token stream to a file:
    $ tacc --tokens-out soldier.tokens soldier.tac

Quiet mode (diagnostics and exit code only):
    $ tacc -q soldier.tac
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from tacticlang import __version__
from tacticlang.cli.errors import ExitCode, handle_cli_exception
from tacticlang.frontend import FrontendOptions, TacticFrontend, format_token_table

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-t", "--tokens",
    is_flag=True,
    help="Print the token stream",
)
@click.option(
    "--tokens-out",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the token stream to a file",
)
@click.option(
    "--max-errors",
    type=click.IntRange(min=1),
    default=100,
    show_default=True,
    help="Stop after this many syntax errors",
)
@click.option(
    "-q", "--quiet",
    is_flag=True,
    help="Only print diagnostics",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging)",
)
@click.version_option(version=__version__, prog_name="tacc")
def main(
    input_file: Path,
    tokens: bool,
    tokens_out: Optional[Path],
    max_errors: int,
    quiet: bool,
    verbose: bool,
) -> None:
    """
    Scan and syntax-check a TacticLang program.

    INPUT_FILE is the TacticLang source file (.tac) to check.

    Lexical errors stop the run before parsing. Syntax errors are all
    reported in one pass; the exit status is 0 only for a valid program.

    \b
    Examples:
        tacc soldier.tac                     # Check syntax
        tacc -t soldier.tac                  # Also list tokens
        tacc --tokens-out out.txt soldier.tac
    """
    setup_logging(verbose)

    def say(message: str = "") -> None:
        if not quiet:
            click.echo(message)

    try:
        say("TacticLang Compiler")
        say("===================")
        say(f"Reading file: {input_file}")

        frontend = TacticFrontend(FrontendOptions(max_errors=max_errors))
        result = frontend.check_file(input_file)
        logger.debug(f"Checked {input_file}: valid={result.valid}")

        say("File read successfully. Scanning...")

        if tokens or tokens_out:
            table = format_token_table(result.tokens)
            if tokens:
                click.echo(table)
            if tokens_out:
                tokens_out.write_text(table + "\n", encoding="utf-8")
                say(f"Wrote {result.token_count} tokens to {tokens_out}")

        if not result.scanned:
            for error in result.lexical_errors:
                click.echo(
                    f"Scanner Error: {error.message} at line {error.location.line}",
                    err=True,
                )
            click.echo(
                f"Scanning failed with {len(result.lexical_errors)} errors.",
                err=True,
            )
            sys.exit(ExitCode.SOURCE_ERROR)

        say(f"Scanning complete. {result.token_count} tokens found.")
        say()
        say("Parsing...")

        for error in result.syntax_errors:
            click.echo(str(error), err=True)

        if result.valid:
            say("Parsing complete. Syntax is valid.")
        else:
            click.echo("Parsing failed.", err=True)

        say()
        say("Compiler run finished.")

        if not result.valid:
            sys.exit(ExitCode.SOURCE_ERROR)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()
