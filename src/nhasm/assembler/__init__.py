"""
NHA Assembler
=============

This package converts NHA assembly source into a binary listing for the
two-register NHA teaching CPU.

Main Components
---------------
- **Assembler**: Runs a whole source (string or file) through the encoder
- **Lexer**: split_lines() and tokenize_line()
- **Encoder**: encode_tokens() / encode_line() and the per-mnemonic handlers

Assembly Process
----------------
Assembly is a single pass with no symbol table:

1. Split the source into lines (any line-ending convention)
2. Tokenize each line on commas and whitespace; skip lines with no tokens
3. Encode the tokens into a 16-bit instruction
4. Stop at the first line that has no valid encoding

Example Usage
-------------
>>> from nhasm.assembler import Assembler
>>> Assembler().assemble_string("ldr A, $21").lines
['0000000000010101']
"""

from nhasm.assembler.assembler import (
    Assembler,
    AssemblyResult,
    EncodedLine,
    assemble,
    assemble_file,
    iter_encoded,
)
from nhasm.assembler.encoder import (
    encode_add,
    encode_jump,
    encode_ldr,
    encode_line,
    encode_str,
    encode_sub,
    encode_tokens,
)
from nhasm.assembler.lexer import split_lines, tokenize_line

__all__ = [
    # Main class and functions
    "Assembler",
    "AssemblyResult",
    "EncodedLine",
    "assemble",
    "assemble_file",
    "iter_encoded",
    # Lexer
    "split_lines",
    "tokenize_line",
    # Encoder
    "encode_tokens",
    "encode_line",
    "encode_ldr",
    "encode_str",
    "encode_add",
    "encode_sub",
    "encode_jump",
]
