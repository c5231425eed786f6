"""
toylang Command-Line Interface
==============================

This package provides the command-line tool for the toylang front end:

- **toyparse**: tokenize and parse toy language source, one status line
  per top-level construct

The tool is implemented as a Click-based CLI application.
"""

__all__ = ["toyparse"]
