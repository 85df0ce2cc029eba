"""
inkasm Command-Line Interface
=============================

This package provides command-line tools for the script toolchain:

- **inkasm**: Script compiler
- **inkdis**: Bytecode disassembler

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["inkasm", "inkdis"]
