"""
NHA Assembler - Configuration
=============================

Assembler configuration: file suffixes, text encoding and strictness.
Configuration can come from:
- Default values (defined here)
- Environment variables
- Command-line options (applied on top by the CLI)

Environment variables (all optional):
    NHASM_SOURCE_SUFFIX: Recognised source suffix (default ".nha")
    NHASM_OUTPUT_SUFFIX: Suffix of the generated listing (default ".bin")
    NHASM_ENCODING: Text encoding for source and output files
    NHASM_STRICT: "1"/"true"/"yes" raises on the first invalid instruction
"""

from dataclasses import dataclass
from pathlib import Path
import os


TRUTHY_VALUES = frozenset({"1", "true", "yes", "on"})


@dataclass
class AssemblerConfig:
    """
    Configuration for an assembly run.

    Attributes:
        source_suffix: Suffix a source file must carry (default: ".nha")
        output_suffix: Suffix of the sibling output file (default: ".bin")
        encoding: Text encoding used to read source and write output
        strict: Raise InvalidInstructionError instead of silently truncating
    """

    source_suffix: str = ".nha"
    output_suffix: str = ".bin"
    encoding: str = "utf-8"
    strict: bool = False

    # ═══════════════════════════════════════════════════════════════════════════
    # FACTORY METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """
        Create AssemblerConfig from environment variables.

        Returns:
            AssemblerConfig with values from environment variables
        """
        config = cls()

        if suffix := os.environ.get("NHASM_SOURCE_SUFFIX"):
            config.source_suffix = _normalize_suffix(suffix)

        if suffix := os.environ.get("NHASM_OUTPUT_SUFFIX"):
            config.output_suffix = _normalize_suffix(suffix)

        if encoding := os.environ.get("NHASM_ENCODING"):
            config.encoding = encoding

        if strict := os.environ.get("NHASM_STRICT"):
            config.strict = strict.strip().lower() in TRUTHY_VALUES

        return config

    # ═══════════════════════════════════════════════════════════════════════════
    # HELPER METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    def is_source_file(self, path: str | Path) -> bool:
        """Check whether a path carries the recognised source suffix."""
        return str(path).endswith(self.source_suffix)

    def output_path_for(self, input_path: str | Path) -> Path:
        """
        Derive the sibling output path for a source file.

        Only the last suffix is replaced: "prog.v2.nha" -> "prog.v2.bin".
        """
        return Path(input_path).with_suffix(self.output_suffix)


def _normalize_suffix(suffix: str) -> str:
    suffix = suffix.strip()
    return suffix if suffix.startswith(".") else f".{suffix}"
