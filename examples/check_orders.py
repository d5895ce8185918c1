#!/usr/bin/env python3
"""
TacticLang Front-End Demo
=========================

This script demonstrates how to use the front-end from Python to:
1. Check a source file
2. List its tokens
3. Collect syntax errors from a broken program

Usage:
    python examples/check_orders.py
"""

from pathlib import Path

from tacticlang import TacticFrontend, FrontendOptions, format_token_table


def main():
    frontend = TacticFrontend(FrontendOptions(max_errors=10))

    # ==========================================================================
    # 1. Check a source file
    # ==========================================================================
    source_file = Path(__file__).parent / "soldier.tac"
    print(f"Checking {source_file.name}...")
    result = frontend.check_file(source_file)
    print(f"  Tokens: {result.token_count}")
    print(f"  Declarations: {result.declaration_count}")
    print(f"  Valid: {result.valid}")

    # ==========================================================================
    # 2. List the first few tokens
    # ==========================================================================
    print("\nFirst tokens:")
    for line in format_token_table(result.tokens[:8]).splitlines():
        print(f"  {line}")

    # ==========================================================================
    # 3. Check a broken program
    # ==========================================================================
    broken = (
        "troop x = ;\n"
        "tactic campaign() {\n"
        "    brief x\n"
        "}\n"
    )
    print("\nChecking a broken program...")
    result = frontend.check_source(broken, "broken.tac")
    for error in result.errors:
        print(f"  {error.describe()}")


if __name__ == "__main__":
    main()
