"""
NHA Assembler Command-Line Interface
====================================

This package provides the command-line tools:

- **nhasm**: assemble a .nha source file into a .bin listing
- **nhasm-selftest**: run the built-in regression cases

Each tool is implemented as a Click-based CLI application.
"""

__all__ = ["nhasm", "nhatest"]
