"""
Ink Bytecode Disassembler
=========================

Decodes a compiled stream back into tokens so it can be inspected or
checked. Useful for:
- Reading what the compiler produced for a script
- Checking that every jump lands on the start of a token
- Debugging a player against known-good streams

Token Grammar
-------------
```
stream   := token ( "|" token )* [ "|" ]
token    := "P;" text | "Q;" choice ( ";" choice )* | "E;"
choice   := prompt ";" DIGIT{5}
```

A stream ends with `|` when the script's last line is a label or when
compilation stopped at an unrecognized line.

Prose text runs to the next `|` and a prompt runs to the next `;`, so a
script whose prose contains `|` or whose prompts contain `;` cannot be
decoded unambiguously.

Usage:
    from inkasm.disassembler import BytecodeDisassembler

    disasm = BytecodeDisassembler()
    for token in disasm.disassemble(stream):
        print(token)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from inkasm.config import PLACEHOLDER_WIDTH
from inkasm.errors import BytecodeFormatError


# =============================================================================
# Data Structures
# =============================================================================

class TokenKind(Enum):
    """Token kinds in a compiled stream, valued by their tag."""
    PROSE = "P"
    QUESTION = "Q"
    END = "E"


@dataclass(frozen=True)
class DisassembledChoice:
    """
    One choice of a question token.

    Attributes:
        prompt: Text offered to the player
        target: Absolute offset the choice jumps to
        field_offset: Offset of the jump field itself
    """
    prompt: str
    target: int
    field_offset: int


@dataclass
class DisassembledToken:
    """
    Represents a single decoded token.

    Attributes:
        kind: Token kind
        offset: Offset of the tag's first byte
        size: Token size in bytes, without the trailing separator
        text: Prose text (empty for other kinds)
        choices: Choices of a question token
    """
    kind: TokenKind
    offset: int
    size: int
    text: str = ""
    choices: List[DisassembledChoice] = field(default_factory=list)

    def __str__(self) -> str:
        """Format as readable line(s)."""
        if self.kind is TokenKind.PROSE:
            return f"{self.offset:05d}: PROSE    {self.text}"
        if self.kind is TokenKind.END:
            return f"{self.offset:05d}: END"
        lines = [f"{self.offset:05d}: QUESTION"]
        for choice in self.choices:
            lines.append(f"           [{choice.prompt}] -> {choice.target:05d}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "kind": self.kind.name,
            "offset": self.offset,
            "size": self.size,
            "text": self.text,
            "choices": [
                {"prompt": c.prompt, "target": c.target, "field_offset": c.field_offset}
                for c in self.choices
            ],
        }


# =============================================================================
# Bytecode Disassembler
# =============================================================================

class BytecodeDisassembler:
    """
    Disassembler for compiled story streams.

    Offsets are byte offsets into the UTF-8 encoded stream, matching the
    offsets written into jump fields.
    """

    TOKEN_SEPARATOR = ord("|")
    FIELD_SEPARATOR = ord(";")

    def disassemble(self, stream: str | bytes,
                    count: Optional[int] = None) -> List[DisassembledToken]:
        """
        Decode a compiled stream.

        Args:
            stream: Compiled stream (text or UTF-8 bytes)
            count: Maximum number of tokens (None = all)

        Returns:
            List of DisassembledToken objects

        Raises:
            BytecodeFormatError: If the stream does not follow the grammar
        """
        data = stream.encode("utf-8") if isinstance(stream, str) else bytes(stream)
        result = []
        offset = 0

        while offset < len(data):
            if count is not None and len(result) >= count:
                break

            token = self.disassemble_one(data, offset)
            result.append(token)

            end = offset + token.size
            if end == len(data):
                break
            if data[end] != self.TOKEN_SEPARATOR:
                raise BytecodeFormatError(f"expected '|' after token, found {data[end:end + 1]!r}", end)
            offset = end + 1

        return result

    def disassemble_one(self, data: bytes, offset: int = 0) -> DisassembledToken:
        """
        Decode the token starting at offset.

        Raises:
            BytecodeFormatError: If no valid token starts there
        """
        if offset >= len(data):
            raise ValueError(f"Offset {offset} beyond data length {len(data)}")

        tag = data[offset:offset + 2]

        if tag == b"P;":
            end = data.find(b"|", offset + 2)
            if end < 0:
                end = len(data)
            return DisassembledToken(
                kind=TokenKind.PROSE,
                offset=offset,
                size=end - offset,
                text=data[offset + 2:end].decode("utf-8"),
            )

        if tag == b"E;":
            return DisassembledToken(kind=TokenKind.END, offset=offset, size=2)

        if tag == b"Q;":
            return self._decode_question(data, offset)

        raise BytecodeFormatError(f"unknown token tag {tag!r}", offset)

    def _decode_question(self, data: bytes, offset: int) -> DisassembledToken:
        choices = []
        position = offset + 2

        while True:
            prompt_end = data.find(b";", position)
            if prompt_end < 0:
                raise BytecodeFormatError("unterminated choice prompt", position)

            field_offset = prompt_end + 1
            digits = data[field_offset:field_offset + PLACEHOLDER_WIDTH]
            if len(digits) != PLACEHOLDER_WIDTH or not digits.isdigit():
                raise BytecodeFormatError(
                    f"jump field must be {PLACEHOLDER_WIDTH} digits, found {digits!r}",
                    field_offset,
                )

            choices.append(DisassembledChoice(
                prompt=data[position:prompt_end].decode("utf-8"),
                target=int(digits),
                field_offset=field_offset,
            ))

            position = field_offset + PLACEHOLDER_WIDTH
            if position < len(data) and data[position] == self.FIELD_SEPARATOR:
                position += 1
                continue
            break

        return DisassembledToken(
            kind=TokenKind.QUESTION,
            offset=offset,
            size=position - offset,
            choices=choices,
        )

    def disassemble_to_text(self, stream: str | bytes, count: Optional[int] = None) -> str:
        """
        Disassemble and return formatted text output.

        Returns:
            Multi-line string with one entry per token
        """
        tokens = self.disassemble(stream, count)
        return "\n".join(str(token) for token in tokens)

    def validate_jumps(self, stream: str | bytes) -> List[DisassembledChoice]:
        """
        Find choices whose target is not the start of a token.

        The end of the stream counts as a valid target (a label placed
        after the last token).

        Returns:
            Choices with bad targets (empty if all jumps are valid)
        """
        data = stream.encode("utf-8") if isinstance(stream, str) else bytes(stream)
        tokens = self.disassemble(data)
        starts = {token.offset for token in tokens}
        starts.add(len(data))

        return [
            choice
            for token in tokens
            for choice in token.choices
            if choice.target not in starts
        ]


def disassemble(stream: str | bytes) -> List[DisassembledToken]:
    """Convenience function to decode a compiled stream."""
    return BytecodeDisassembler().disassemble(stream)
