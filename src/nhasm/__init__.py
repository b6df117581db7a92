"""
NHA Assembler - Toolchain for the NHA Teaching CPU
==================================================

This package assembles NHA assembly language into the 16-bit binary
listing format of the NHA CPU, a two-register (A and D) machine with one
memory cell addressed through A.

Main Components
---------------
- **assembler**: Lexer, instruction encoder and the Assembler driver
    Converts assembly source files (.nha) to binary listings (.bin)

- **isa**: Instruction set definitions (mnemonics, bit fields)

- **selftest**: Built-in regression cases

Quick Start
-----------
Assemble a string:
    >>> from nhasm import Assembler
    >>> Assembler().assemble_string("ldr A, $21").lines
    ['0000000000010101']

Assemble a file:
    >>> from nhasm import assemble_file
    >>> result = assemble_file("add.nha")   # writes add.bin

Or use the command-line tools:
    $ nhasm add.nha
    $ nhasm-selftest
"""

__version__ = "1.0.0"
__author__ = "NHA Assembler Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from nhasm.assembler import (
    Assembler,
    AssemblyResult,
    EncodedLine,
    assemble,
    assemble_file,
    encode_line,
    encode_tokens,
    iter_encoded,
    split_lines,
    tokenize_line,
)
from nhasm.config import AssemblerConfig
from nhasm.errors import (
    NhaError,
    AssemblerError,
    InvalidInstructionError,
    SourceFileError,
    SourceLocation,
)
from nhasm.isa import InstructionKind, MNEMONICS

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Assembler
    "Assembler",
    "AssemblyResult",
    "EncodedLine",
    "assemble",
    "assemble_file",
    "iter_encoded",
    "encode_line",
    "encode_tokens",
    "split_lines",
    "tokenize_line",
    # Configuration
    "AssemblerConfig",
    # Instruction set
    "InstructionKind",
    "MNEMONICS",
    # Exception hierarchy
    "NhaError",
    "AssemblerError",
    "InvalidInstructionError",
    "SourceFileError",
    "SourceLocation",
]
