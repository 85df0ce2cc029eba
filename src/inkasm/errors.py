"""
Ink Assembler Error Hierarchy
=============================

This module defines the exception hierarchy for the whole inkasm package.
All exceptions inherit from InkError, allowing callers to catch every
toolchain error with a single except clause if desired.

Exception Hierarchy
-------------------
InkError (base)
├── CompilerError (script compilation)
│   ├── ScriptSyntaxError - malformed choice, label or terminator line
│   ├── DuplicateLabelError - label defined twice (strict mode only)
│   ├── UnresolvedReferenceError - choice targets with no matching label
│   └── PlaceholderOverflowError - offset does not fit the 5-digit field
└── BytecodeFormatError - malformed compiled stream (disassembler)

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class InkError(Exception):
    """
    Base exception for all inkasm errors.

        try:
            compiler.compile_file("story.ink")
        except InkError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A location in a script for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int = 1

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Compiler Exceptions
# =============================================================================

class CompilerError(InkError):
    """
    Base exception for all compilation errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            story.ink:7:1: error: choice line has no '[prompt]'
                + Yes -> like
                ^
            hint: write choices as '+ [prompt] -> target'
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class ScriptSyntaxError(CompilerError):
    """
    Syntax error in a script line.

    Raised when:
        - A choice line lacks a bracketed prompt or a '->' target
        - A label line has no name
        - A line starts with '=' or '-' but is not '===' or '-> END'
        - An unclassifiable line is met under the "error" policy
    """
    pass


class DuplicateLabelError(CompilerError):
    """
    Label defined more than once.

    Only raised when the compiler runs with duplicate_labels="error";
    the default policy lets the later definition win.
    """

    def __init__(
        self,
        label: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.label = label
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{label}' was first defined at {original_location}"

        super().__init__(
            f"duplicate label '{label}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnresolvedReferenceError(CompilerError):
    """
    One or more choice targets name a label that is never defined.

    Raised after the whole branch table has been checked, so a single
    compilation reports every broken reference at once.

    Attributes:
        references: Unresolved label name -> placeholder offsets waiting on it
        locations: Unresolved label name -> source locations of the choices
    """

    def __init__(
        self,
        references: dict[str, list[int]],
        locations: Optional[dict[str, list[SourceLocation]]] = None,
        similar_labels: Optional[dict[str, list[str]]] = None,
    ):
        self.references = {name: list(offsets) for name, offsets in references.items()}
        self.locations = locations or {}
        self.similar_labels = similar_labels or {}

        names = ", ".join(f"'{name}'" for name in self.references)
        word = "label" if len(self.references) == 1 else "labels"

        details = []
        for name, offsets in self.references.items():
            where = ", ".join(str(loc) for loc in self.locations.get(name, []))
            line = f"  '{name}' referenced at offset(s) {', '.join(map(str, offsets))}"
            if where:
                line += f" ({where})"
            suggestions = self.similar_labels.get(name)
            if suggestions:
                line += f"; did you mean {', '.join(repr(s) for s in suggestions[:3])}?"
            details.append(line)

        super().__init__(f"undefined {word} {names}\n" + "\n".join(details))

    @property
    def names(self) -> list[str]:
        """Return the unresolved label names in reporting order."""
        return list(self.references)


class PlaceholderOverflowError(CompilerError):
    """
    A resolved label offset does not fit the fixed-width jump field.

    Jump fields are exactly five decimal digits, so the largest
    addressable offset is 99999.
    """

    def __init__(
        self,
        label: str,
        offset: int,
        width: int = 5,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.label = label
        self.offset = offset
        self.width = width

        super().__init__(
            f"offset {offset} of label '{label}' does not fit in {width} digits",
            location=location,
            hint=f"jump targets must be below {10 ** width}; split the script",
            source_line=source_line,
        )


# =============================================================================
# Bytecode Exceptions
# =============================================================================

class BytecodeFormatError(InkError):
    """
    Malformed compiled stream.

    Raised by the disassembler when a stream does not follow the
    token grammar (unknown tag, truncated jump field, bad separator).
    """

    def __init__(self, message: str, offset: int):
        self.offset = offset
        super().__init__(f"offset {offset}: {message}")


# =============================================================================
# Error Collection for Multiple Error Reporting
# =============================================================================

class ErrorCollector:
    """
    Collects multiple errors for batch reporting.

    The CLI uses this to compile several scripts in one run and report
    every failure together instead of stopping at the first one.

    Example:
        collector = ErrorCollector()
        for path in paths:
            try:
                compiler.compile_file(path)
            except CompilerError as e:
                collector.add(e)

        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self, max_errors: int = 100):
        self.errors: list[CompilerError] = []
        self.warnings: list[str] = []
        self.max_errors = max_errors

    def add(self, error: CompilerError) -> None:
        """
        Add an error to the collection.

        Raises:
            TooManyErrors: If max_errors has been reached
        """
        self.errors.append(error)
        if len(self.errors) >= self.max_errors:
            raise TooManyErrors(f"Too many errors ({self.max_errors}), stopping")

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def report(self) -> str:
        """Format all errors and warnings for display."""
        lines = []

        for error in self.errors:
            lines.append(str(error))
            lines.append("")

        if self.warnings:
            lines.append("Warnings:")
            for warning in self.warnings:
                lines.append(f"  {warning}")

        error_word = "error" if len(self.errors) == 1 else "errors"
        warning_word = "warning" if len(self.warnings) == 1 else "warnings"
        lines.append(
            f"\n{len(self.errors)} {error_word}, {len(self.warnings)} {warning_word}"
        )

        return "\n".join(lines)


class TooManyErrors(CompilerError):
    """Raised when the error collector reaches its limit."""

    def __init__(self, message: str = "Too many errors"):
        super().__init__(message)
