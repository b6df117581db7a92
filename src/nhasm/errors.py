"""
NHA Assembler Error Hierarchy
=============================

This module defines the exception hierarchy for the NHA assembler.
All exceptions inherit from NhaError, allowing callers to catch every
assembler-related error with a single except clause.

Exception Hierarchy
-------------------
NhaError (base)
└── AssemblerError (assembler-related)
    ├── InvalidInstructionError - a source line has no valid encoding
    └── SourceFileError - input file is not a recognised source file

The instruction encoder itself never raises: each handler reports failure
by returning None, and the run simply stops at the first such line. These
exceptions exist for callers that want the halt surfaced as an error
(strict mode, the command-line tool).

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class NhaError(Exception):
    """
    Base exception for all NHA assembler errors.

        try:
            assemble_file("program.nha")
        except NhaError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A location in source code for error reporting.

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
# Assembler Exceptions
# =============================================================================

class AssemblerError(NhaError):
    """
    Base exception for all assembler-related errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location and source context.

        Example output:
            prog.nha:4:1: error: invalid instruction encountered
                mul D, D, A
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None:
            parts.append(f"    {self.source_line}")

        return "\n".join(parts)


class InvalidInstructionError(AssemblerError):
    """
    A non-blank source line could not be encoded.

    Covers every encoding failure alike: unknown mnemonic, wrong operand
    count, illegal operand, or an immediate that does not parse or does
    not fit in 15 bits. Which of these occurred is deliberately not
    reported.
    """

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "invalid instruction encountered",
            location=location,
            source_line=source_line,
        )


class SourceFileError(AssemblerError):
    """
    Input path does not carry a recognised source suffix.

    Example:
        nhasm program.txt  ; Error: expected a .nha file
    """

    def __init__(self, path: str, expected_suffix: str):
        self.path = path
        self.expected_suffix = expected_suffix
        super().__init__(
            f"Unrecognized command or file type: {path} "
            f"(expected a {expected_suffix} file)"
        )
