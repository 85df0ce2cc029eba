"""
Ink Bytecode Emitter
====================

This module turns classified script lines into the linear bytecode
stream read by the player. It implements a two-pass process:

Pass 1 (Serialize + Collect)
----------------------------
- Walk the lines once, left to right
- Append each token to the output stream
- Record label offsets in the symbol table
- Emit a `00000` placeholder for each choice target and record its
  offset in the branch table

Pass 2 (Backpatch)
------------------
- For every label with waiting placeholders, overwrite each placeholder
  with the label's zero-padded offset
- Report every target that names an undefined label

Stream Format
-------------
```
P;<text>                          prose
Q;<prompt>;<NNNNN>[;<prompt>;<NNNNN>...]   choice run
E;                                end of story
```
Tokens are separated by `|`, choices inside one run by `;`. A separator
follows every token except the one produced by the script's last line,
so a script ending in a label (or stopped at an unrecognized line) ends
with `|`. `NNNNN` is the absolute byte offset of the jump target in the
same stream.

Offset Invariant
----------------
A label emits nothing. Its offset is the stream length at the moment
the label line is processed, which is where the next token will start
because the previous token's separator has already been written.
"""

from dataclasses import dataclass
from typing import Optional
import logging

from inkasm.compiler.lexer import Line, LineKind
from inkasm.compiler.parser import (
    is_malformed_structural,
    malformed_line_error,
    parse_choice,
    parse_label,
)
from inkasm.compiler.tables import BranchTable, OutputStream, SymbolTable
from inkasm.config import PLACEHOLDER_WIDTH, CompilerConfig
from inkasm.errors import (
    DuplicateLabelError,
    PlaceholderOverflowError,
    UnresolvedReferenceError,
)


logger = logging.getLogger(__name__)


# Token tags and separators
PROSE_TAG = "P;"
QUESTION_TAG = "Q;"
END_TAG = "E;"
FIELD_SEPARATOR = ";"
TOKEN_SEPARATOR = "|"

PLACEHOLDER = "0" * PLACEHOLDER_WIDTH

# Line kinds that put bytes into the stream
EMITTING_KINDS = frozenset({LineKind.TEXT, LineKind.CHOICE, LineKind.TERMINATOR})


# =============================================================================
# Listing Entry
# =============================================================================

@dataclass
class ListingEntry:
    """
    One line of the compilation listing.

    Attributes:
        offset: Stream offset where the line's output starts
        size: Number of bytes emitted for the line
        line_number: Source line number (1-based)
        source: Source line text
    """
    offset: int
    size: int
    line_number: int
    source: str


# =============================================================================
# Emitter
# =============================================================================

class Emitter:
    """
    Two-pass emitter for classified script lines.

    The emitter maintains:
    - The output stream (its cursor is the only source of offsets)
    - The symbol table of label offsets
    - The branch table of pending jump fields
    - A listing of what each line produced

    All state is reset at the start of every emit() call, so one instance
    compiles one script at a time and never shares tables between runs.

    Usage:
        emitter = Emitter()
        output = emitter.emit(lines)
        offsets = emitter.get_symbols()
    """

    def __init__(self, config: Optional[CompilerConfig] = None):
        self._config = config or CompilerConfig()
        self._stream = OutputStream()
        self._symbols = SymbolTable()
        self._branches = BranchTable()
        self._listing: list[ListingEntry] = []
        self._truncated_at: Optional[Line] = None

    # =========================================================================
    # Public Interface
    # =========================================================================

    @property
    def config(self) -> CompilerConfig:
        return self._config

    @property
    def stream(self) -> OutputStream:
        return self._stream

    @property
    def symbols(self) -> SymbolTable:
        return self._symbols

    @property
    def branches(self) -> BranchTable:
        return self._branches

    @property
    def truncated_at(self) -> Optional[Line]:
        """The unclassified line that stopped pass 1, if any."""
        return self._truncated_at

    def emit(self, lines: list[Line]) -> str:
        """
        Compile classified lines into the final bytecode stream.

        Args:
            lines: Lines from the lexer, in source order

        Returns:
            The backpatched bytecode stream

        Raises:
            ScriptSyntaxError: If a line is malformed
            DuplicateLabelError: If a label is redefined under the "error" policy
            UnresolvedReferenceError: If choices target undefined labels
            PlaceholderOverflowError: If a label offset needs more than 5 digits
        """
        self.reset()
        self.pass1(lines)
        self.backpatch()
        return self.get_output()

    def reset(self) -> None:
        """Clear the stream, both tables and the listing."""
        self._stream.clear()
        self._symbols.clear()
        self._branches.clear()
        self._listing.clear()
        self._truncated_at = None

    def get_output(self) -> str:
        return self._stream.getvalue()

    def get_symbols(self) -> dict[str, int]:
        """Return a dictionary of label names to offsets."""
        return self._symbols.to_dict()

    def get_branches(self) -> dict[str, list[int]]:
        """Return a dictionary of label names to placeholder offsets."""
        return self._branches.to_dict()

    def get_listing(self) -> list[ListingEntry]:
        return list(self._listing)

    # =========================================================================
    # Pass 1: Serialize + Collect
    # =========================================================================

    def pass1(self, lines: list[Line]) -> None:
        """
        First pass: serialize lines and collect label and jump offsets.

        Every emitting line except the last line of the script is
        followed by a separator, so a label always sees the cursor just
        past the previous token's separator. Labels emit nothing.

        Processing stops at the first unclassified line. Under the
        "truncate" policy the output produced so far is kept; under the
        "error" policy a ScriptSyntaxError is raised. Lines that start
        like a label or terminator but are malformed always raise.
        """
        previous_kind: Optional[LineKind] = None
        last_index = len(lines) - 1

        for index, line in enumerate(lines):
            if line.kind is LineKind.UNCLASSIFIED:
                self._handle_unclassified(line)
                break

            start = self._stream.cursor

            if line.kind is LineKind.TEXT:
                self._stream.append(PROSE_TAG + line.text)

            elif line.kind is LineKind.CHOICE:
                self._emit_choice(line, starts_run=previous_kind is not LineKind.CHOICE)

            elif line.kind is LineKind.LABEL:
                self._define_label(line)

            elif line.kind is LineKind.TERMINATOR:
                self._stream.append(END_TAG)

            if line.kind in EMITTING_KINDS:
                self._listing.append(ListingEntry(
                    offset=start,
                    size=self._stream.cursor - start,
                    line_number=line.line_number,
                    source=line.text,
                ))

                if index < last_index:
                    next_kind = lines[index + 1].kind
                    if line.kind is LineKind.CHOICE and next_kind is LineKind.CHOICE:
                        self._stream.append(FIELD_SEPARATOR)
                    else:
                        self._stream.append(TOKEN_SEPARATOR)

            previous_kind = line.kind

        logger.debug(
            f"Pass 1 complete: {self._stream.cursor} bytes, "
            f"{len(self._symbols)} labels, {len(self._branches)} targets"
        )

    def _handle_unclassified(self, line: Line) -> None:
        if is_malformed_structural(line):
            raise malformed_line_error(line)

        if not self._config.truncate_on_unclassified:
            raise malformed_line_error(line)

        self._truncated_at = line
        logger.warning(
            f"{line.location}: unrecognized line, ignoring the rest of the script: "
            f"{line.text!r}"
        )

    def _emit_choice(self, line: Line, starts_run: bool) -> None:
        """Emit one choice, opening a new run when needed."""
        record = parse_choice(line)

        if starts_run:
            self._stream.append(QUESTION_TAG)

        self._stream.append(record.prompt + FIELD_SEPARATOR)
        offset = self._stream.append(PLACEHOLDER)
        self._branches.add(record.target, offset, line.location)

        logger.debug(f"Choice {record.prompt!r} -> '{record.target}' (field at {offset})")

    def _define_label(self, line: Line) -> None:
        """Record a label at the current cursor."""
        name = parse_label(line)
        existing = self._symbols.get(name)

        if existing is not None and not self._config.overwrite_duplicate_labels:
            raise DuplicateLabelError(
                name,
                location=line.location,
                original_location=existing.location,
                source_line=line.text,
            )

        self._symbols.define(name, self._stream.cursor, line.location)
        logger.debug(f"Label '{name}' at {self._stream.cursor}")

        if existing is not None:
            count = self._symbols.get(name).redefinitions
            logger.warning(
                f"{line.location}: label '{name}' redefined "
                f"(was offset {existing.offset}, now {self._stream.cursor}; "
                f"{count} redefinition{'s' if count > 1 else ''})"
            )

    # =========================================================================
    # Pass 2: Backpatch
    # =========================================================================

    def backpatch(self) -> None:
        """
        Second pass: write resolved label offsets into their jump fields.

        Running it again rewrites the same digits, so the stream is
        unchanged.

        Raises:
            PlaceholderOverflowError: If an offset has more than 5 digits
            UnresolvedReferenceError: Listing every target with no label
        """
        limit = 10 ** PLACEHOLDER_WIDTH
        unresolved: dict[str, list[int]] = {}
        unresolved_locations = {}

        for branch in self._branches:
            target = self._symbols.resolve(branch.name)

            if target is None:
                unresolved[branch.name] = branch.offsets
                unresolved_locations[branch.name] = [
                    site.location for site in branch.sites if site.location is not None
                ]
                continue

            if target >= limit:
                first = branch.sites[0].location if branch.sites else None
                raise PlaceholderOverflowError(
                    branch.name, target, PLACEHOLDER_WIDTH, location=first
                )

            digits = f"{target:0{PLACEHOLDER_WIDTH}d}"
            for site in branch.sites:
                self._stream.patch(site.offset, digits)

            logger.debug(f"Patched {len(branch.sites)} field(s) for '{branch.name}' with {digits}")

        if unresolved:
            raise UnresolvedReferenceError(
                unresolved,
                locations=unresolved_locations,
                similar_labels={
                    name: self._find_similar_labels(name) for name in unresolved
                },
            )

    def _find_similar_labels(self, name: str) -> list[str]:
        """
        Find defined labels with similar names for error hints.

        Uses simple edit distance heuristic.
        """
        name_lower = name.lower()
        similar = []

        for label in self._symbols.names():
            label_lower = label.lower()
            if (
                label_lower == name_lower or
                abs(len(label) - len(name)) <= 1 and
                _edit_distance(name_lower, label_lower) <= 2
            ):
                similar.append(label)

        return similar[:3]


def _edit_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    distances = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        new_distances = [i + 1]
        for j, c2 in enumerate(s2):
            if c1 == c2:
                new_distances.append(distances[j])
            else:
                new_distances.append(1 + min(distances[j], distances[j + 1], new_distances[-1]))
        distances = new_distances
    return distances[-1]
