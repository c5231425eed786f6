#!/usr/bin/env python3
"""
toylang Parser Demo
===================

This script demonstrates how to use the toylang front end to:
1. Tokenize source text
2. Parse single constructs with a Parser session
3. Handle a failed parse
4. Run the top-level driver over a whole program

Usage:
    python examples/parse_demo.py
"""

import io
from pathlib import Path

from toylang import ASTPrinter, Driver, FrontendConfig, Lexer, Parser


def main():
    printer = ASTPrinter()

    # ==========================================================================
    # 1. Tokenize
    # ==========================================================================
    print("Tokens for 'foo123 + 3.14 # comment\\nbar':")
    for token in Lexer("foo123 + 3.14 # comment\nbar").tokenize():
        print(f"  {token!r}")

    # ==========================================================================
    # 2. Parse one definition
    # ==========================================================================
    parser = Parser(Lexer("def f(x y) x*(y+1)"))
    result = parser.parse_definition()
    print("\nParsed definition:")
    print(printer.print(result.node))

    # ==========================================================================
    # 3. A failed parse returns an error instead of a node
    # ==========================================================================
    diagnostics = io.StringIO()
    parser = Parser(Lexer("def f("), diagnostics=diagnostics)
    result = parser.parse_definition()
    print(f"\nFailed parse: ok={result.ok}, error={result.error}")
    print(f"Diagnostic line: {diagnostics.getvalue().strip()}")

    # ==========================================================================
    # 4. Run the driver over a file
    # ==========================================================================
    sample = Path(__file__).with_name("sample.toy")
    config = FrontendConfig(show_prompt=False)
    print(f"\nDriving {sample.name}:")
    with sample.open() as source:
        parser = config.create_parser(source, sample.name)
        stats = Driver(parser, config, on_parsed=lambda node: print(printer.print(node))).run()
    print(f"\n{stats.parsed} parsed, {stats.failures} failed")


if __name__ == "__main__":
    main()
