"""
Ink Compiler - Main Interface
=============================

This module provides the Compiler class, the primary interface for
compiling branching-dialogue scripts. It coordinates the lexer and the
emitter and writes the compiled stream and its companion files.

Example Usage
-------------
>>> from inkasm.compiler import Compiler
>>>
>>> compiler = Compiler()
>>> compiler.compile_string('''Do you like it?
... + [Yes] -> like
... + [No] -> hate
... === like
... Thank you!
... -> END
... === hate
... Oh, I see
... -> END''')
'P;Do you like it?|Q;Yes;00039;No;00055|P;Thank you!|E;|P;Oh, I see|E;'
>>> compiler.get_symbols()
{'like': 39, 'hate': 55}

Command-Line Usage
------------------
    $ inkasm story.ink -o story.inkb -s story.sym -l story.lst
"""

from pathlib import Path
from typing import Optional
import logging

from inkasm.compiler.emitter import Emitter, ListingEntry
from inkasm.compiler.lexer import Line, split_source
from inkasm.config import CompilerConfig


logger = logging.getLogger(__name__)


class Compiler:
    """
    Main script compiler class.

    Attributes:
        config: Policy settings (unclassified lines, duplicate labels)
        verbose: If True, log progress at INFO level
    """

    def __init__(self, config: Optional[CompilerConfig] = None, verbose: bool = False):
        self._config = config or CompilerConfig()
        self._verbose = verbose
        self._source_file: Optional[Path] = None
        self._lines: list[Line] = []
        self._output: Optional[str] = None
        self._emitter: Optional[Emitter] = None

    @property
    def config(self) -> CompilerConfig:
        return self._config

    # =========================================================================
    # Compilation Methods
    # =========================================================================

    def compile_string(self, source: str, filename: str = "<input>") -> str:
        """
        Compile a script from a string.

        The pipeline is:
        1. Split and classify lines (lexer)
        2. Serialize and collect offsets (emitter pass 1)
        3. Backpatch jump fields (emitter pass 2)

        Each call uses a fresh Emitter, so nothing carries over from an
        earlier compilation. On failure no output is kept.

        Args:
            source: Script text
            filename: Virtual filename for error messages

        Returns:
            The compiled bytecode stream

        Raises:
            CompilerError: If compilation fails
        """
        self._output = None
        self._emitter = None

        self._lines = split_source(source, filename)
        self._log(f"Read {len(self._lines)} lines from {filename}")

        emitter = Emitter(self._config)
        output = emitter.emit(self._lines)

        self._emitter = emitter
        self._output = output
        self._log(
            f"Compiled {filename}: {len(emitter.stream)} bytes, "
            f"{len(emitter.symbols)} labels"
        )
        return output

    def compile_file(self, filepath: str | Path) -> str:
        """
        Compile a script file.

        Raises:
            CompilerError: If compilation fails
            FileNotFoundError: If the script does not exist
        """
        filepath = Path(filepath)
        self._source_file = filepath
        self._log(f"Compiling {filepath}...")

        source = filepath.read_text(encoding="utf-8")
        return self.compile_string(source, str(filepath))

    # =========================================================================
    # Results
    # =========================================================================

    def _require_output(self) -> Emitter:
        if self._emitter is None or self._output is None:
            raise RuntimeError("no successful compilation yet")
        return self._emitter

    def get_output(self) -> str:
        """Return the compiled stream of the last successful compilation."""
        self._require_output()
        return self._output

    def get_bytes(self) -> bytes:
        return self._require_output().stream.to_bytes()

    def get_symbols(self) -> dict[str, int]:
        """Return label name -> offset."""
        return self._require_output().get_symbols()

    def get_branches(self) -> dict[str, list[int]]:
        """Return label name -> offsets of the jump fields targeting it."""
        return self._require_output().get_branches()

    def get_lines(self) -> list[Line]:
        """Return the classified lines of the last compilation."""
        return list(self._lines)

    def get_truncation(self) -> Optional[Line]:
        """Return the line at which compilation stopped early, if any."""
        return self._require_output().truncated_at

    def get_listing(self) -> str:
        """
        Get the compilation listing as a string.

        Returns:
            Listing with offsets, emitted tokens, source lines and labels
        """
        emitter = self._require_output()
        entries: list[ListingEntry] = emitter.get_listing()

        lines = []
        lines.append("Ink Compiler Listing")
        lines.append("=" * 60)
        lines.append("")
        lines.append("Offset  Line  Source")
        lines.append("-" * 60)
        for entry in entries:
            lines.append(f"{entry.offset:05d}   {entry.line_number:4d}  {entry.source}")
            lines.append(f"{'':14s}{emitter.stream.read(entry.offset, entry.size)}")
        lines.append("")
        lines.append("Label Table")
        lines.append("-" * 30)
        for name, offset in sorted(emitter.get_symbols().items()):
            lines.append(f"{name:20s} = {offset:05d}")
        return "\n".join(lines)

    # =========================================================================
    # Output Methods
    # =========================================================================

    def write_output(self, filepath: str | Path) -> None:
        """Write the compiled stream (UTF-8, no trailing newline)."""
        Path(filepath).write_bytes(self.get_bytes())
        self._log(f"Wrote {filepath}")

    def write_listing(self, filepath: str | Path) -> None:
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self.get_listing())
        self._log(f"Wrote listing to {filepath}")

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write the label table.

        Format: name offset (one per line, sorted by name)
        """
        symbols = self.get_symbols()
        with open(filepath, "w", encoding="utf-8") as f:
            f.write("# Label table\n")
            f.write("# Generated by inkasm\n")
            for name, offset in sorted(symbols.items()):
                f.write(f"{name} {offset:05d}\n")
        self._log(f"Wrote labels to {filepath}")

    def _log(self, message: str) -> None:
        if self._verbose:
            logger.info(message)
        else:
            logger.debug(message)


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_source(source: str, filename: str = "<input>",
                   config: Optional[CompilerConfig] = None) -> str:
    """
    Convenience function to compile a script.

    Raises:
        CompilerError: If compilation fails
    """
    return Compiler(config).compile_string(source, filename)


def compile_file(filepath: str | Path, config: Optional[CompilerConfig] = None) -> str:
    """
    Convenience function to compile a script file.

    Raises:
        CompilerError: If compilation fails
    """
    return Compiler(config).compile_file(filepath)
