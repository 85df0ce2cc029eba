"""
inkasm - Compiler for Branching-Dialogue Scripts
================================================

This package compiles small line-oriented narrative scripts (prose,
multiple-choice questions, named labels and an end marker) into a single
linear bytecode stream that a story player can execute.

Main Components
---------------
- **compiler**: Script compiler (inkasm)
    Converts scripts (.ink) into bytecode streams (.inkb)

- **disassembler**: Bytecode decoder (inkdis)
    Lists the tokens of a compiled stream and checks its jumps

Quick Start
-----------
Compile a script:
    >>> from inkasm import Compiler
    >>> compiler = Compiler()
    >>> compiler.compile_string("Hello world\\n-> END")
    'P;Hello world|E;'

Inspect a compiled stream:
    >>> from inkasm import BytecodeDisassembler
    >>> print(BytecodeDisassembler().disassemble_to_text("P;Hello world|E;"))
    00000: PROSE    Hello world
    00014: END

Or use the command-line tools:
    $ inkasm story.ink -o story.inkb
    $ inkdis story.inkb --check

Script Format
-------------
    Hello there              prose line
    + [Yes] -> like          choice, jumps to label "like"
    === like                 label
    -> END                   end of story
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from inkasm.compiler import (
    Compiler,
    compile_source,
    compile_file,
    Emitter,
    Lexer,
    Line,
    LineKind,
    classify_line,
    split_source,
)
from inkasm.config import CompilerConfig, PLACEHOLDER_WIDTH
from inkasm.disassembler import (
    BytecodeDisassembler,
    DisassembledToken,
    DisassembledChoice,
    TokenKind,
    disassemble,
)
from inkasm.errors import (
    InkError,
    CompilerError,
    ScriptSyntaxError,
    DuplicateLabelError,
    UnresolvedReferenceError,
    PlaceholderOverflowError,
    BytecodeFormatError,
    SourceLocation,
)

__all__ = [
    # Version info
    "__version__",
    # Compiler
    "Compiler",
    "compile_source",
    "compile_file",
    "Emitter",
    "Lexer",
    "Line",
    "LineKind",
    "classify_line",
    "split_source",
    # Configuration
    "CompilerConfig",
    "PLACEHOLDER_WIDTH",
    # Disassembler
    "BytecodeDisassembler",
    "DisassembledToken",
    "DisassembledChoice",
    "TokenKind",
    "disassemble",
    # Exception hierarchy
    "InkError",
    "CompilerError",
    "ScriptSyntaxError",
    "DuplicateLabelError",
    "UnresolvedReferenceError",
    "PlaceholderOverflowError",
    "BytecodeFormatError",
    "SourceLocation",
]
