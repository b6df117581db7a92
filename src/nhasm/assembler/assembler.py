"""
NHA Assembler - Main Interface
==============================

This module provides the Assembler class, the primary interface for turning
NHA assembly source into a binary listing: one line of sixteen '0'/'1'
characters per instruction.

Assembly is a single pass over the source. Every line is encoded on its own;
blank lines are skipped. The first line that cannot be encoded ends the run:
nothing is produced for it or for any later line, and whatever was encoded
before it is kept.

Example Usage
-------------
>>> from nhasm.assembler import Assembler
>>> asm = Assembler()
>>> result = asm.assemble_string('''
... ldr A, $2
... ldr D, A
... ''')
>>> result.lines
['0000000000000010', '1110110000010000']
>>> result.ok
True

>>> result = asm.assemble_string("ldr A, $1\\nmul D, D, A\\njmp")
>>> result.lines, result.failed_line
(['0000000000000001'], 2)

Command-Line Usage
------------------
    $ nhasm program.nha            # writes program.bin
    $ nhasm program.nha -o out.bin
"""

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Generator, Iterable, Optional, TextIO

from nhasm.assembler.encoder import encode_tokens
from nhasm.assembler.lexer import split_lines, tokenize_line
from nhasm.config import AssemblerConfig
from nhasm.errors import InvalidInstructionError, SourceFileError, SourceLocation

logger = logging.getLogger(__name__)


# =============================================================================
# Result Types
# =============================================================================

@dataclass(frozen=True)
class EncodedLine:
    """
    One successfully encoded source line.

    Attributes:
        line_number: Source line number (1-indexed)
        source: The source line as written
        bits: The 16-character encoding
    """
    line_number: int
    source: str
    bits: str


@dataclass
class AssemblyResult:
    """
    Outcome of an assembly run.

    Attributes:
        lines: Encoded instructions in source order
        failed_line: Line number that halted the run, or None
        failed_source: Text of that line, or None
        filename: Source name used in error messages
    """
    lines: list[str] = field(default_factory=list)
    failed_line: Optional[int] = None
    failed_source: Optional[str] = None
    filename: str = "<input>"

    @property
    def ok(self) -> bool:
        """True if every non-blank line was encoded."""
        return self.failed_line is None

    def get_output(self) -> str:
        """Return the listing text, one line break after each instruction."""
        return "".join(f"{bits}\n" for bits in self.lines)

    def raise_for_status(self) -> None:
        """
        Raise if the run was halted by an invalid instruction.

        Raises:
            InvalidInstructionError: With the location of the failing line
        """
        if self.failed_line is not None:
            raise InvalidInstructionError(
                location=SourceLocation(self.filename, self.failed_line),
                source_line=self.failed_source,
            )


# =============================================================================
# Line Driver
# =============================================================================

def _encode_lines(lines: Iterable[str]) -> Generator[EncodedLine, None, Optional[tuple[int, str]]]:
    for line_number, line in enumerate(lines, start=1):
        tokens = tokenize_line(line)
        if not tokens:
            continue

        bits = encode_tokens(tokens)
        if bits is None:
            logger.info(f"Halting at line {line_number}: {line.strip()!r}")
            return line_number, line

        logger.debug(f"line {line_number:3d}: {line.strip():<20} {bits}")
        yield EncodedLine(line_number, line, bits)

    return None


def iter_encoded(lines: Iterable[str]) -> Generator[EncodedLine, None, Optional[int]]:
    """
    Lazily encode source lines in order.

    Lines with no tokens are skipped. The generator stops at the first line
    that has tokens but no valid encoding, without yielding anything for it
    and without reading any further lines.

    Args:
        lines: Source lines without terminators

    Yields:
        EncodedLine for each encoded instruction

    Returns:
        (as StopIteration.value) the failing line number, or None if
        the whole input was encoded
    """
    failure = yield from _encode_lines(lines)
    return failure[0] if failure else None


# =============================================================================
# Assembler
# =============================================================================

class Assembler:
    """
    NHA assembler.

    Attributes:
        config: AssemblerConfig controlling suffixes, encoding and strictness
    """

    def __init__(self, config: Optional[AssemblerConfig] = None,
                 strict: Optional[bool] = None):
        """
        Initialize the assembler.

        Args:
            config: Configuration (default: AssemblerConfig())
            strict: Overrides config.strict when given. In strict mode an
                    invalid instruction raises InvalidInstructionError after
                    the output written so far has been closed.
        """
        self.config = config or AssemblerConfig()
        if strict is not None:
            self.config = replace(self.config, strict=strict)

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def _run(self, lines: Iterable[str], filename: str,
             sink: Optional[TextIO] = None) -> AssemblyResult:
        result = AssemblyResult(filename=filename)
        encoded = _encode_lines(lines)

        while True:
            try:
                item = next(encoded)
            except StopIteration as stop:
                if stop.value is not None:
                    result.failed_line, result.failed_source = stop.value
                break
            if sink is not None:
                sink.write(f"{item.bits}\n")
            result.lines.append(item.bits)

        logger.info(f"Assembled {len(result.lines)} instruction(s) from {filename}")
        if self.config.strict:
            result.raise_for_status()
        return result

    def assemble_to(self, lines: Iterable[str], sink: TextIO,
                    filename: str = "<input>") -> AssemblyResult:
        """
        Encode lines and write each instruction to a text sink as it is made.

        The sink is written in source order and is not closed here.

        Args:
            lines: Source lines without terminators
            sink: Writable text stream
            filename: Source name for error messages

        Returns:
            AssemblyResult for the run

        Raises:
            InvalidInstructionError: In strict mode, if a line is invalid
        """
        return self._run(lines, filename, sink)

    def assemble_lines(self, lines: Iterable[str],
                       filename: str = "<input>") -> AssemblyResult:
        """
        Encode lines into memory.

        Raises:
            InvalidInstructionError: In strict mode, if a line is invalid
        """
        return self._run(lines, filename)

    def assemble_string(self, source: str, filename: str = "<input>") -> AssemblyResult:
        """
        Assemble source code from a string.

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            AssemblyResult with the encoded lines

        Raises:
            InvalidInstructionError: In strict mode, if a line is invalid
        """
        return self.assemble_lines(split_lines(source), filename)

    def assemble_file(self, input_path: str | Path,
                      output_path: str | Path | None = None) -> AssemblyResult:
        """
        Assemble a source file into a binary listing file.

        The output file is opened once, written in order and always closed,
        including when the run halts on an invalid instruction.

        Args:
            input_path: Path to the source file
            output_path: Listing path (default: sibling with the output suffix)

        Returns:
            AssemblyResult for the run

        Raises:
            SourceFileError: If no output path is given and the input does
                             not carry the source suffix
            InvalidInstructionError: In strict mode, if a line is invalid
            OSError: If the source cannot be read or the output written
            UnicodeDecodeError: If the source is not valid in config.encoding
            LookupError: If config.encoding names no known codec
        """
        input_path = Path(input_path)

        if output_path is None:
            if not self.config.is_source_file(input_path):
                raise SourceFileError(str(input_path), self.config.source_suffix)
            output_path = self.config.output_path_for(input_path)
        output_path = Path(output_path)

        logger.info(f"Assembling {input_path} -> {output_path}")
        lines = split_lines(input_path.read_text(encoding=self.config.encoding))

        with open(output_path, "w", encoding=self.config.encoding, newline="\n") as sink:
            return self.assemble_to(lines, sink, filename=str(input_path))


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>") -> list[str]:
    """
    Convenience function to assemble source code.

    Returns:
        Encoded lines up to (not including) the first invalid instruction
    """
    return Assembler().assemble_string(source, filename).lines


def assemble_file(input_path: str | Path,
                  output_path: str | Path | None = None) -> AssemblyResult:
    """
    Convenience function to assemble a file.

    Raises:
        SourceFileError: If the input suffix is not recognised
        OSError: On read/write failure
    """
    return Assembler().assemble_file(input_path, output_path)
