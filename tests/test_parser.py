# =============================================================================
# test_parser.py - Choice and Label Parser Unit Tests
# =============================================================================
# Tests for decomposing choice lines into prompt and target and for
# extracting label names.
# =============================================================================

import pytest
from inkasm.compiler.lexer import Line, LineKind, split_source
from inkasm.compiler.parser import (
    ChoiceRecord,
    is_malformed_structural,
    malformed_line_error,
    parse_choice,
    parse_label,
)
from inkasm.errors import ScriptSyntaxError


def choice(text: str) -> ChoiceRecord:
    """Helper to parse a single choice line."""
    return parse_choice(Line(text, LineKind.CHOICE, 1, "<test>"))


def label(text: str) -> str:
    """Helper to parse a single label line."""
    return parse_label(Line(text, LineKind.LABEL, 1, "<test>"))


# =============================================================================
# Choice Parsing Tests
# =============================================================================

class TestParseChoice:
    """Test choice line decomposition."""

    def test_basic_choice(self):
        assert choice("+ [Hello!] -> hello") == ChoiceRecord("Hello!", "hello")

    def test_prompt_with_spaces_and_punctuation(self):
        record = choice("+ [Yes, I like it!] -> like")
        assert record.prompt == "Yes, I like it!"
        assert record.target == "like"

    def test_target_is_trimmed(self):
        assert choice("+ [Go]   ->    north   ").target == "north"

    def test_arrow_without_space(self):
        assert choice("+ [Go]->north").target == "north"

    def test_target_with_inner_spaces(self):
        assert choice("+ [Go] -> far north").target == "far north"

    def test_prompt_is_non_greedy(self):
        """The prompt stops at the first closing bracket."""
        record = choice("+ [one] [two] -> x")
        assert record.prompt == "one"

    def test_arrow_inside_prompt(self):
        """The target is searched after the prompt's closing bracket."""
        record = choice("+ [left -> right] -> target")
        assert record.prompt == "left -> right"
        assert record.target == "target"

    def test_empty_prompt_allowed(self):
        assert choice("+ [] -> next") == ChoiceRecord("", "next")

    def test_missing_prompt(self):
        with pytest.raises(ScriptSyntaxError) as exc_info:
            choice("+ Hello -> hello")
        assert "no '[prompt]'" in str(exc_info.value)

    def test_unclosed_prompt(self):
        with pytest.raises(ScriptSyntaxError):
            choice("+ [Hello -> hello")

    def test_missing_target(self):
        with pytest.raises(ScriptSyntaxError) as exc_info:
            choice("+ [Hello]")
        assert "no '->' target" in str(exc_info.value)

    def test_empty_target(self):
        with pytest.raises(ScriptSyntaxError) as exc_info:
            choice("+ [Hello] ->   ")
        assert "target is empty" in str(exc_info.value)

    def test_error_location(self):
        line = split_source("Hello\n+ [Broken", "story.ink")[1]
        with pytest.raises(ScriptSyntaxError) as exc_info:
            parse_choice(line)
        error = exc_info.value
        assert error.location.filename == "story.ink"
        assert error.location.line == 2
        assert error.source_line == "+ [Broken"

    def test_error_has_hint(self):
        with pytest.raises(ScriptSyntaxError) as exc_info:
            choice("+ Hello")
        assert "hint: write choices as '+ [prompt] -> target'" in str(exc_info.value)


# =============================================================================
# Label Parsing Tests
# =============================================================================

class TestParseLabel:
    """Test label name extraction."""

    def test_basic_label(self):
        assert label("=== hello") == "hello"

    def test_no_space(self):
        assert label("===hello") == "hello"

    def test_extra_equals_and_whitespace(self):
        assert label("=====   hello world  ") == "hello world"

    def test_trailing_equals_are_kept(self):
        """Only the leading '=' run is stripped."""
        assert label("=== knot ===") == "knot ==="

    @pytest.mark.parametrize("text", ["===", "=== ", "=====  \t"])
    def test_empty_name(self, text):
        with pytest.raises(ScriptSyntaxError) as exc_info:
            label(text)
        assert "label has no name" in str(exc_info.value)


# =============================================================================
# Malformed Structural Line Tests
# =============================================================================

class TestMalformedLines:
    """Test detection of lines that look structural but are not."""

    @pytest.mark.parametrize("text", ["- oops", "->END", "== name", "=name"])
    def test_detected(self, text):
        line = split_source(text)[0]
        assert is_malformed_structural(line)

    @pytest.mark.parametrize("text", ["* note", "  Hello", "Hello", "-> END", "=== ok"])
    def test_not_detected(self, text):
        line = split_source(text)[0]
        assert not is_malformed_structural(line)

    def test_label_message(self):
        error = malformed_line_error(split_source("== name")[0])
        assert "malformed label" in str(error)

    def test_terminator_message(self):
        error = malformed_line_error(split_source("- oops")[0])
        assert "malformed terminator" in str(error)

    def test_unrecognized_message(self):
        error = malformed_line_error(split_source("* note")[0])
        assert "unrecognized line" in str(error)
