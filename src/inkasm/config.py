"""
Ink Assembler - Configuration
=============================

Compiler policy settings. Configuration can come from:
- Default values (defined here)
- Environment variables (CompilerConfig.from_env)
- Command-line options (see inkasm.cli.inkasm)

Two policies are configurable because the script format leaves them open:

unclassified
    What happens when a line matches none of the known forms.
    "truncate" (default) stops compiling at that line and keeps the
    output produced so far; "error" raises ScriptSyntaxError.

duplicate_labels
    What happens when a label name is defined twice.
    "overwrite" (default) keeps the later offset; "error" raises
    DuplicateLabelError.
"""

from dataclasses import dataclass
import os


UNCLASSIFIED_POLICIES = ("truncate", "error")
DUPLICATE_LABEL_POLICIES = ("overwrite", "error")

# Width of a jump field in the compiled stream.
PLACEHOLDER_WIDTH = 5


@dataclass
class CompilerConfig:
    """
    Configuration for a compilation.

    Attributes:
        unclassified: Policy for unclassifiable lines ("truncate" or "error")
        duplicate_labels: Policy for redefined labels ("overwrite" or "error")
    """

    unclassified: str = "truncate"
    duplicate_labels: str = "overwrite"

    def __post_init__(self) -> None:
        self.unclassified = self.unclassified.lower()
        self.duplicate_labels = self.duplicate_labels.lower()

        if self.unclassified not in UNCLASSIFIED_POLICIES:
            raise ValueError(
                f"invalid unclassified policy '{self.unclassified}'. "
                f"Valid policies: {', '.join(UNCLASSIFIED_POLICIES)}"
            )
        if self.duplicate_labels not in DUPLICATE_LABEL_POLICIES:
            raise ValueError(
                f"invalid duplicate label policy '{self.duplicate_labels}'. "
                f"Valid policies: {', '.join(DUPLICATE_LABEL_POLICIES)}"
            )

    @property
    def truncate_on_unclassified(self) -> bool:
        return self.unclassified == "truncate"

    @property
    def overwrite_duplicate_labels(self) -> bool:
        return self.duplicate_labels == "overwrite"

    # ═══════════════════════════════════════════════════════════════════════════
    # FACTORY METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    @classmethod
    def strict(cls) -> "CompilerConfig":
        """Create a config that turns both open policies into hard errors."""
        return cls(unclassified="error", duplicate_labels="error")

    @classmethod
    def from_env(cls) -> "CompilerConfig":
        """
        Create CompilerConfig from environment variables.

        Environment variables (all optional):
            INKASM_UNCLASSIFIED: "truncate" or "error"
            INKASM_DUPLICATE_LABELS: "overwrite" or "error"

        Returns:
            CompilerConfig with values from environment variables

        Raises:
            ValueError: If a variable holds an unknown policy
        """
        config = {}

        if policy := os.environ.get("INKASM_UNCLASSIFIED"):
            config["unclassified"] = policy

        if policy := os.environ.get("INKASM_DUPLICATE_LABELS"):
            config["duplicate_labels"] = policy

        return cls(**config)
