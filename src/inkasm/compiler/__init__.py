"""
Ink Script Compiler
===================

This package compiles line-oriented branching-dialogue scripts into the
linear bytecode stream consumed by the story player.

Main Components
---------------
- **Compiler**: Main class that orchestrates compilation and output
- **Lexer**: Splits source into classified lines
- **Emitter**: Two-pass serializer with label backpatching
- **SymbolTable / BranchTable / OutputStream**: Emitter state

Compilation Process
-------------------
1. **Lexing**: split the source into non-empty lines and classify each
   one by its leading characters
2. **Pass 1**: serialize every line, record label offsets and reserve a
   fixed-width field for every choice target
3. **Pass 2**: overwrite each reserved field with its label's offset

Example Usage
-------------
>>> from inkasm.compiler import Compiler
>>> Compiler().compile_string("Hello world\\nCiao mondo")
'P;Hello world|P;Ciao mondo'
"""

from inkasm.compiler.compiler import Compiler, compile_source, compile_file
from inkasm.compiler.lexer import Lexer, Line, LineKind, classify_line, split_source
from inkasm.compiler.parser import ChoiceRecord, parse_choice, parse_label
from inkasm.compiler.emitter import Emitter, ListingEntry
from inkasm.compiler.tables import BranchTable, OutputStream, SymbolTable

__all__ = [
    # Main class and functions
    "Compiler",
    "compile_source",
    "compile_file",
    # Lexer
    "Lexer",
    "Line",
    "LineKind",
    "classify_line",
    "split_source",
    # Parser
    "ChoiceRecord",
    "parse_choice",
    "parse_label",
    # Emitter
    "Emitter",
    "ListingEntry",
    # Tables
    "BranchTable",
    "OutputStream",
    "SymbolTable",
]
