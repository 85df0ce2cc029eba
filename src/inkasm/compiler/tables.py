"""
Ink Compiler Tables
===================

State owned by one Emitter for the lifetime of one compilation:

- **OutputStream**: growable byte buffer with fixed-width overwrite
- **SymbolTable**: label name -> byte offset where the label points
- **BranchTable**: label name -> offsets of the jump fields waiting on it

Offsets are UTF-8 byte offsets into the compiled stream. The stream's
cursor is the only source of offsets: every offset recorded in either
table is read from OutputStream.cursor at the moment it is recorded.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional

from inkasm.errors import SourceLocation


# =============================================================================
# Output Stream
# =============================================================================

class OutputStream:
    """
    Append-only byte buffer that also supports same-width patches.

    Appends grow the stream and advance the cursor. Patches rewrite an
    existing byte range with new bytes of exactly the same length, so
    offsets recorded before a patch stay valid after it.
    """

    ENCODING = "utf-8"

    def __init__(self) -> None:
        self._buffer = bytearray()

    @property
    def cursor(self) -> int:
        """Current stream length in bytes (offset of the next append)."""
        return len(self._buffer)

    def append(self, text: str) -> int:
        """
        Append text to the stream.

        Returns:
            Offset at which the text starts
        """
        offset = len(self._buffer)
        self._buffer.extend(text.encode(self.ENCODING))
        return offset

    def patch(self, offset: int, text: str) -> None:
        """
        Overwrite bytes at offset with text of the same byte length.

        Raises:
            ValueError: If the range falls outside the stream
        """
        data = text.encode(self.ENCODING)
        end = offset + len(data)
        if offset < 0 or end > len(self._buffer):
            raise ValueError(
                f"patch range [{offset}, {end}) outside stream of {len(self._buffer)} bytes"
            )
        self._buffer[offset:end] = data

    def read(self, offset: int, size: int) -> str:
        """Return size bytes starting at offset, decoded."""
        return bytes(self._buffer[offset:offset + size]).decode(self.ENCODING)

    def clear(self) -> None:
        self._buffer.clear()

    def getvalue(self) -> str:
        """Return the whole stream as text."""
        return self._buffer.decode(self.ENCODING)

    def to_bytes(self) -> bytes:
        return bytes(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)


# =============================================================================
# Symbol Table
# =============================================================================

@dataclass
class Symbol:
    """
    Symbol table entry.

    Attributes:
        name: Label name
        offset: Byte offset the label resolves to
        location: Where the label was defined
        redefinitions: How many times an earlier definition was replaced
    """
    name: str
    offset: int
    location: Optional[SourceLocation] = None
    redefinitions: int = 0


class SymbolTable:
    """
    Maps label names to resolved byte offsets.

    Defining an existing name replaces the earlier offset; the caller
    decides whether that is allowed before calling define().
    """

    def __init__(self) -> None:
        self._symbols: dict[str, Symbol] = {}

    def define(self, name: str, offset: int,
               location: Optional[SourceLocation] = None) -> Optional[Symbol]:
        """
        Record a label offset.

        Returns:
            The replaced Symbol, or None if the name was new
        """
        previous = self._symbols.get(name)
        redefinitions = previous.redefinitions + 1 if previous else 0
        self._symbols[name] = Symbol(name, offset, location, redefinitions)
        return previous

    def get(self, name: str) -> Optional[Symbol]:
        return self._symbols.get(name)

    def resolve(self, name: str) -> Optional[int]:
        """Return the offset of name, or None if it is undefined."""
        symbol = self._symbols.get(name)
        return symbol.offset if symbol else None

    def names(self) -> list[str]:
        return list(self._symbols)

    def to_dict(self) -> dict[str, int]:
        """Return a plain name -> offset mapping."""
        return {name: sym.offset for name, sym in self._symbols.items()}

    def clear(self) -> None:
        self._symbols.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols.values())


# =============================================================================
# Branch Table
# =============================================================================

@dataclass
class BranchSite:
    """
    A jump field waiting for a label offset.

    Attributes:
        offset: Offset of the first digit of the placeholder field
        location: Source location of the choice that emitted it
    """
    offset: int
    location: Optional[SourceLocation] = None


@dataclass
class BranchList:
    """All jump fields that target one label, in emission order."""
    name: str
    sites: list[BranchSite] = field(default_factory=list)

    @property
    def offsets(self) -> list[int]:
        return [site.offset for site in self.sites]


class BranchTable:
    """
    Maps label names to the placeholder fields that reference them.

    Several choices may target the same label; every field is kept and
    every field is patched with the same offset.
    """

    def __init__(self) -> None:
        self._branches: dict[str, BranchList] = {}

    def add(self, name: str, offset: int,
            location: Optional[SourceLocation] = None) -> None:
        """Record a placeholder at offset that jumps to name."""
        branch = self._branches.get(name)
        if branch is None:
            branch = self._branches[name] = BranchList(name)
        branch.sites.append(BranchSite(offset, location))

    def get(self, name: str) -> Optional[BranchList]:
        return self._branches.get(name)

    def offsets(self, name: str) -> list[int]:
        """Return the placeholder offsets for name (empty if none)."""
        branch = self._branches.get(name)
        return branch.offsets if branch else []

    def names(self) -> list[str]:
        return list(self._branches)

    def to_dict(self) -> dict[str, list[int]]:
        """Return a plain name -> offsets mapping."""
        return {name: branch.offsets for name, branch in self._branches.items()}

    def clear(self) -> None:
        self._branches.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._branches

    def __len__(self) -> int:
        return len(self._branches)

    def __iter__(self) -> Iterator[BranchList]:
        return iter(self._branches.values())
