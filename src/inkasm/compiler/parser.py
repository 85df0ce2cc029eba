"""
Ink Script Line Parser
======================

Decomposes the structured line kinds into their parts:

Choice lines
    `+ [<prompt>] -> <target>`

    The prompt is the text between the first `[` and the first `]` after
    it. The target is the text after the first `->` that follows the
    closing bracket, with surrounding whitespace removed.

Label lines
    `=== <name>`

    The name is what remains after stripping the leading `=` run and the
    surrounding whitespace.

Both parts of a choice are required. A missing prompt or target is a
ScriptSyntaxError, never a silent default.
"""

from dataclasses import dataclass
import re

from inkasm.compiler.lexer import Line, LineKind
from inkasm.errors import ScriptSyntaxError, SourceLocation


_PROMPT = re.compile(r"\[(.*?)\]")
_TARGET = re.compile(r"->(.*)$")

CHOICE_HINT = "write choices as '+ [prompt] -> target'"


@dataclass(frozen=True)
class ChoiceRecord:
    """
    The parts of a choice line.

    Attributes:
        prompt: Text offered to the player
        target: Name of the label the choice jumps to
    """
    prompt: str
    target: str


def parse_choice(line: Line) -> ChoiceRecord:
    """
    Split a choice line into prompt and target.

    Args:
        line: A line classified as CHOICE

    Returns:
        ChoiceRecord with the prompt and target label name

    Raises:
        ScriptSyntaxError: If the prompt or the target is missing
    """
    prompt_match = _PROMPT.search(line.text)
    if prompt_match is None:
        raise ScriptSyntaxError(
            "choice line has no '[prompt]'",
            location=line.location,
            hint=CHOICE_HINT,
            source_line=line.text,
        )

    rest = line.text[prompt_match.end():]
    target_match = _TARGET.search(rest)
    if target_match is None:
        raise ScriptSyntaxError(
            "choice line has no '->' target",
            location=SourceLocation(line.filename, line.line_number, prompt_match.end() + 1),
            hint=CHOICE_HINT,
            source_line=line.text,
        )

    target = target_match.group(1).strip()
    if not target:
        column = prompt_match.end() + target_match.start() + 1
        raise ScriptSyntaxError(
            "choice target is empty",
            location=SourceLocation(line.filename, line.line_number, column),
            hint=CHOICE_HINT,
            source_line=line.text,
        )

    return ChoiceRecord(prompt=prompt_match.group(1), target=target)


def parse_label(line: Line) -> str:
    """
    Extract the name from a label line.

    Raises:
        ScriptSyntaxError: If nothing is left after stripping the '=' run
    """
    name = line.text.lstrip("=").strip()
    if not name:
        raise ScriptSyntaxError(
            "label has no name",
            location=line.location,
            hint="write labels as '=== name'",
            source_line=line.text,
        )
    return name


def malformed_line_error(line: Line) -> ScriptSyntaxError:
    """
    Build the error for a line that looks structural but is not.

    Lines starting with '=' or '-' are meant to be labels or terminators,
    so they are reported even when unknown lines would otherwise be
    tolerated.
    """
    if line.text.startswith("="):
        return ScriptSyntaxError(
            "malformed label",
            location=line.location,
            hint="labels start with '==='",
            source_line=line.text,
        )
    if line.text.startswith("-"):
        return ScriptSyntaxError(
            "malformed terminator",
            location=line.location,
            hint="the only line starting with '-' is '-> END'",
            source_line=line.text,
        )
    return ScriptSyntaxError(
        "unrecognized line",
        location=line.location,
        hint="text lines must start with a letter or digit",
        source_line=line.text,
    )


def is_malformed_structural(line: Line) -> bool:
    """Return True for an unclassified line that starts like a label or terminator."""
    return line.kind is LineKind.UNCLASSIFIED and line.text[:1] in ("=", "-")
