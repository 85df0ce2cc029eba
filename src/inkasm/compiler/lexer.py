"""
Ink Script Line Lexer
=====================

This module turns script text into a sequence of classified lines that
the emitter can process. Scripts are line oriented, so the lexer works a
whole line at a time rather than producing character-level tokens.

Line Kinds
----------
| Leading text             | Kind         |
|--------------------------|--------------|
| ASCII letter or digit    | TEXT         |
| `+`                      | CHOICE       |
| `===`                    | LABEL        |
| `-> END`                 | TERMINATOR   |
| anything else            | UNCLASSIFIED |

Labels and terminators are matched on their full prefix. A line such as
"- hello" or "= hi" is UNCLASSIFIED, and the emitter reports it as a
malformed structural line.

Blank lines are dropped before classification and never reach the
emitter.

Line Endings
------------
`\\n` and `\\r\\n` end a line, and so does a lone `\\r` (classic Mac
files). A reader that splits only on `\\n` and strips a final `\\r` would
keep "a\\rb" as one line; here it becomes two lines, "a" and "b".

Example
-------
>>> from inkasm.compiler.lexer import Lexer
>>> for line in Lexer("Hello\\n\\n+ [Hi] -> hi", "story.ink").tokenize():
...     print(line)
Line(TEXT, 'Hello', 1)
Line(CHOICE, '+ [Hi] -> hi', 3)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator
import re
import string

from inkasm.errors import SourceLocation


# =============================================================================
# Line Kind Enumeration
# =============================================================================

class LineKind(Enum):
    """Classification of a single script line."""

    TEXT = auto()          # Prose shown to the player
    CHOICE = auto()        # + [prompt] -> target
    LABEL = auto()         # === name
    TERMINATOR = auto()    # -> END
    UNCLASSIFIED = auto()  # Anything else


LABEL_PREFIX = "==="
TERMINATOR = "-> END"

TEXT_START = string.ascii_letters + string.digits

# Splits on \r\n, \n and \r without keeping the line endings
_LINE_BREAK = re.compile(r"\r\n|\n|\r")


# =============================================================================
# Line Data Class
# =============================================================================

@dataclass(frozen=True)
class Line:
    """
    A classified script line.

    Attributes:
        text: Line text without its line ending (never empty)
        kind: The LineKind classification
        line_number: Line number in the source (1-indexed)
        filename: Name of the source file
    """
    text: str
    kind: LineKind
    line_number: int = 0
    filename: str = "<input>"

    def __repr__(self) -> str:
        return f"Line({self.kind.name}, {self.text!r}, {self.line_number})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line_number, 1)


# =============================================================================
# Classification
# =============================================================================

def classify_line(text: str) -> LineKind:
    """
    Classify one non-empty line by its leading characters.

    Args:
        text: Line text without line ending

    Returns:
        The LineKind for the line
    """
    if not text:
        return LineKind.UNCLASSIFIED

    first = text[0]
    if first in TEXT_START:
        return LineKind.TEXT
    if first == "+":
        return LineKind.CHOICE
    if text.startswith(LABEL_PREFIX):
        return LineKind.LABEL
    if text.rstrip() == TERMINATOR:
        return LineKind.TERMINATOR
    return LineKind.UNCLASSIFIED


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Splits script source into classified lines.

    Usage:
        lexer = Lexer(source_text, filename)
        lines = list(lexer.tokenize())

    Attributes:
        source: The script text being split
        filename: Name of the source file (for error reporting)
    """

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename

    def tokenize(self) -> Iterator[Line]:
        """
        Generate classified lines in source order.

        Empty lines are skipped, but line numbers keep counting them so
        error messages point at the right place.

        Yields:
            Line objects
        """
        if not self.source:
            return

        raw_lines = _LINE_BREAK.split(self.source)

        for number, text in enumerate(raw_lines, start=1):
            if not text:
                continue
            yield Line(
                text=text,
                kind=classify_line(text),
                line_number=number,
                filename=self.filename,
            )


def split_source(source: str, filename: str = "<input>") -> list[Line]:
    """
    Split and classify a whole script.

    Args:
        source: Script text
        filename: Virtual filename for error messages

    Returns:
        Ordered list of classified lines (possibly empty)
    """
    return list(Lexer(source, filename).tokenize())
