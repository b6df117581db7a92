"""
NHA Instruction Encoder
=======================

This module turns one tokenized source line into its 16-bit encoding.

Each mnemonic family has a handler that validates the operands and builds
the bit string. Handlers never raise on bad input: a line that has no valid
encoding simply yields None, and it is up to the caller to decide what a
failed line means for the run (see ``nhasm.assembler.assembler``).

Operands are compared in upper case, so ``LDR a, $5`` and ``ldr A, $5``
encode identically.

Example
-------
>>> from nhasm.assembler.encoder import encode_line
>>> encode_line("ldr A, $21")
'0000000000010101'
>>> encode_line("sub D, D, (A)")
'1111010011010000'
>>> encode_line("mul D, D, A") is None
True
"""

import logging
from typing import Optional, Sequence

from nhasm.assembler.lexer import tokenize_line
from nhasm.isa import (
    A_TYPE_PREFIX,
    ADD_COMP_BITS,
    ALU_OPERANDS,
    C_TYPE_PREFIX,
    DEST_MEMORY,
    DEST_NONE,
    IMMEDIATE_BITS,
    IMMEDIATE_PREFIX,
    JMP_ENCODING,
    JUMP_NONE,
    MAX_IMMEDIATE,
    MEM_A,
    REG_A,
    REG_D,
    SOURCE_OPERANDS,
    SUB_COMP_BITS,
    TARGET_REGISTERS,
    InstructionKind,
    get_comp_bits,
    get_dest_bits,
    get_jump_bits,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Bit Assembly Helpers
# =============================================================================

def c_instruction(a_bit: int, comp: str, dest: str, jump: str) -> str:
    """
    Build a C-type instruction from its fields.

    Args:
        a_bit: 1 to read (A), 0 to read a register
        comp: 6-bit source selection
        dest: 3-bit destination
        jump: 3-bit jump condition

    Returns:
        16-character bit string starting with "111"
    """
    return f"{C_TYPE_PREFIX}{a_bit}{comp}{dest}{jump}"


def a_instruction(value: int) -> str:
    """Build an A-type instruction loading ``value`` (0..32767) into A."""
    return A_TYPE_PREFIX + format(value, f"0{IMMEDIATE_BITS}b")


def parse_immediate(operand: str) -> Optional[int]:
    """
    Parse a ``$<decimal>`` immediate.

    Args:
        operand: Operand token, including the leading "$"

    Returns:
        The value if it is a base-10 integer within 0..32767, else None
    """
    digits = operand[len(IMMEDIATE_PREFIX):]
    # int() would also accept digit-group underscores
    if "_" in digits:
        return None
    try:
        value = int(digits, 10)
    except ValueError:
        return None
    if value < 0 or value > MAX_IMMEDIATE:
        return None
    return value


def _a_bit(operand: str) -> int:
    return 1 if operand == MEM_A else 0


# =============================================================================
# Instruction Handlers
# =============================================================================

def encode_ldr(operands: Sequence[str]) -> Optional[str]:
    """
    Encode ``ldr target, source``.

    Two forms are accepted:
    - ``ldr A, $n``: load the immediate n into A (A-type)
    - ``ldr A|D, A|D|(A)``: copy a register or memory into a register
    """
    if len(operands) != 2:
        return None

    target = operands[0].upper()
    source = operands[1].upper()

    if target == REG_A and source.startswith(IMMEDIATE_PREFIX):
        value = parse_immediate(source)
        if value is None:
            return None
        return a_instruction(value)

    if target not in TARGET_REGISTERS or source not in SOURCE_OPERANDS:
        return None

    return c_instruction(
        _a_bit(source),
        get_comp_bits(source),
        get_dest_bits(target),
        JUMP_NONE,
    )


def encode_str(operands: Sequence[str]) -> Optional[str]:
    """
    Encode ``str (A), A|D``: store a register into memory at A.

    The a-bit is derived from the value operand, which can only be A or D,
    so it is always 0.
    """
    if len(operands) != 2:
        return None

    location = operands[0].upper()
    source = operands[1].upper()

    if location != MEM_A:
        return None
    if source not in TARGET_REGISTERS:
        return None

    return c_instruction(_a_bit(source), get_comp_bits(source), DEST_MEMORY, JUMP_NONE)


def _encode_alu(operands: Sequence[str], comp: str) -> Optional[str]:
    if len(operands) != 3:
        return None

    target, source1, source2 = (operand.upper() for operand in operands)

    if target not in TARGET_REGISTERS:
        return None
    if source1 != REG_D:
        return None
    if source2 not in ALU_OPERANDS:
        return None

    return c_instruction(_a_bit(source2), comp, get_dest_bits(target), JUMP_NONE)


def encode_add(operands: Sequence[str]) -> Optional[str]:
    """Encode ``add A|D, D, A|(A)``: target = D + operand."""
    return _encode_alu(operands, ADD_COMP_BITS)


def encode_sub(operands: Sequence[str]) -> Optional[str]:
    """Encode ``sub A|D, D, A|(A)``: target = D - operand."""
    return _encode_alu(operands, SUB_COMP_BITS)


def encode_jump(mnemonic: str, operands: Sequence[str]) -> Optional[str]:
    """
    Encode a jump.

    ``jmp`` always encodes to the fixed unconditional jump. The conditional
    jumps take one operand (A, D or (A)) that is compared against zero.

    Args:
        mnemonic: One of jmp, jgt, jeq, jge, jlt, jne, jle (any case)
        operands: Operand tokens
    """
    mnemonic = mnemonic.lower()

    if mnemonic == "jmp":
        return JMP_ENCODING

    if len(operands) != 1:
        return None

    operand = operands[0].upper()
    if operand not in SOURCE_OPERANDS:
        return None

    jump = get_jump_bits(mnemonic)
    if jump is None:
        return None

    return c_instruction(_a_bit(operand), get_comp_bits(operand), DEST_NONE, jump)


# =============================================================================
# Dispatch
# =============================================================================

def encode_tokens(tokens: Sequence[str]) -> Optional[str]:
    """
    Encode a tokenized line.

    Args:
        tokens: Non-empty token list; token 0 is the mnemonic

    Returns:
        The 16-character encoding, or None if the line is not a valid
        instruction
    """
    if not tokens:
        return None

    mnemonic = tokens[0].lower()
    operands = tokens[1:]
    kind = InstructionKind.from_mnemonic(mnemonic)

    if kind is InstructionKind.LDR:
        binary = encode_ldr(operands)
    elif kind is InstructionKind.STR:
        binary = encode_str(operands)
    elif kind is InstructionKind.ADD:
        binary = encode_add(operands)
    elif kind is InstructionKind.SUB:
        binary = encode_sub(operands)
    elif kind is InstructionKind.JUMP:
        binary = encode_jump(mnemonic, operands)
    else:
        logger.debug(f"Unknown mnemonic '{tokens[0]}'")
        return None

    if binary is None:
        logger.debug(f"Invalid operands for '{mnemonic}': {list(operands)}")
    return binary


def encode_line(line: str) -> Optional[str]:
    """
    Tokenize and encode one source line.

    Returns:
        The encoding, or None for a blank line or an invalid instruction.
        Callers that must tell the two apart should tokenize first.
    """
    return encode_tokens(tokenize_line(line))
