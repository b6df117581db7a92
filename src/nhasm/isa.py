"""
NHA Instruction Set Definition
==============================

This module defines the instruction set of the NHA teaching CPU: the
mnemonics the assembler accepts, the operands they take, and the bit
fields each one encodes to.

The CPU has two registers, A and D, plus the memory cell addressed by A,
written (A). Every instruction is 16 bits wide.

Instruction Formats
-------------------
1. **A-type** (load immediate): ``0vvvvvvvvvvvvvvv``
   - Leading bit 0, then the 15-bit unsigned immediate (0..32767)
   - Example: ldr A, $21 -> 0000000000010101

2. **C-type** (everything else): ``111a cccccc ddd jjj``
   - a: 1 when the operand is (A), 0 for a plain register
   - cccccc: ALU / source selection
   - ddd: destination register(s)
   - jjj: jump condition (000 = never jump)
   - Example: ldr D, (A) -> 1111110000010000

Mnemonics
---------
| Mnemonic | Operands             | Effect                      |
|----------|----------------------|-----------------------------|
| ldr      | A, $n                | A = n                       |
| ldr      | A/D, A/D/(A)         | target = source             |
| str      | (A), A/D             | memory[A] = source          |
| add      | A/D, D, A/(A)        | target = D + operand        |
| sub      | A/D, D, A/(A)        | target = D - operand        |
| jmp      |                      | jump unconditionally        |
| jXX      | A/D/(A)              | jump if operand meets XX    |
"""

from enum import Enum
from typing import Optional


# =============================================================================
# Instruction Constants
# =============================================================================

WORD_BITS = 16

# Immediate loads carry a 15-bit unsigned value after the leading 0 bit.
IMMEDIATE_BITS = 15
MAX_IMMEDIATE = (1 << IMMEDIATE_BITS) - 1  # 32767

A_TYPE_PREFIX = "0"
C_TYPE_PREFIX = "111"

IMMEDIATE_PREFIX = "$"

# Unconditional jump; operands are not consulted.
JMP_ENCODING = "1110101010000111"


# =============================================================================
# Operands
# =============================================================================

REG_A = "A"
REG_D = "D"
MEM_A = "(A)"

# Registers that may receive a computed value
TARGET_REGISTERS = frozenset({REG_A, REG_D})

# Operands that may be read as a value
SOURCE_OPERANDS = frozenset({REG_A, REG_D, MEM_A})

# Legal second source of add/sub
ALU_OPERANDS = frozenset({REG_A, MEM_A})

# A and (A) share the same selection code; the a-bit tells them apart.
COMP_BITS = {
    REG_A: "110000",
    MEM_A: "110000",
    REG_D: "001100",
}

# D + operand / D - operand
ADD_COMP_BITS = "000010"
SUB_COMP_BITS = "010011"

DEST_BITS = {
    REG_A: "100",
    REG_D: "010",
}
DEST_MEMORY = "001"
DEST_NONE = "000"

JUMP_NONE = "000"


# =============================================================================
# Instruction Kinds
# =============================================================================

class InstructionKind(Enum):
    """
    The encoding rule a mnemonic selects.

    All seven jump mnemonics share one rule, parameterised by the
    mnemonic itself.
    """
    LDR = "ldr"
    STR = "str"
    ADD = "add"
    SUB = "sub"
    JUMP = "jump"

    @classmethod
    def from_mnemonic(cls, mnemonic: str) -> Optional["InstructionKind"]:
        """
        Decode a mnemonic into its instruction kind.

        Args:
            mnemonic: Mnemonic token in any case

        Returns:
            The InstructionKind, or None for an unknown mnemonic
        """
        mnemonic = mnemonic.lower()
        if mnemonic in JUMP_MNEMONICS:
            return cls.JUMP
        if mnemonic == cls.JUMP.value:
            return None
        try:
            return cls(mnemonic)
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value


# Jump condition bits, keyed by lower-case mnemonic
JUMP_BITS = {
    "jgt": "001",
    "jeq": "010",
    "jge": "011",
    "jlt": "100",
    "jne": "101",
    "jle": "110",
}

JUMP_MNEMONICS = frozenset({"jmp"} | set(JUMP_BITS))

MNEMONICS = frozenset({"ldr", "str", "add", "sub"} | JUMP_MNEMONICS)


# =============================================================================
# Lookup Functions
# =============================================================================

def is_valid_mnemonic(mnemonic: str) -> bool:
    """Check whether a mnemonic (any case) is part of the instruction set."""
    return mnemonic.lower() in MNEMONICS


def get_comp_bits(operand: str) -> Optional[str]:
    """
    Return the 6-bit source selection for an operand.

    Args:
        operand: Upper-case operand (A, D or (A))

    Returns:
        Six '0'/'1' characters, or None if the operand cannot be read
    """
    return COMP_BITS.get(operand)


def get_dest_bits(target: str) -> Optional[str]:
    """Return the 3-bit destination for a target register, or None."""
    return DEST_BITS.get(target)


def get_jump_bits(mnemonic: str) -> Optional[str]:
    """Return the 3-bit condition for a conditional jump, or None."""
    return JUMP_BITS.get(mnemonic.lower())
