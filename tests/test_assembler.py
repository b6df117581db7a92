# =============================================================================
# test_assembler.py - Full Assembler Integration Tests
# =============================================================================
# End-to-end tests for the line driver and the Assembler class.
#
# Test coverage includes:
#   - Complete programs assembled from strings and files
#   - Blank-line skipping and line numbering
#   - Halt on the first invalid instruction, keeping earlier output
#   - Strict mode and error formatting
#   - Output file handling and line-ending independence
# =============================================================================

import io
import logging

import pytest

from nhasm.assembler import (
    Assembler,
    AssemblyResult,
    EncodedLine,
    assemble,
    assemble_file,
    iter_encoded,
)
from nhasm.config import AssemblerConfig
from nhasm.errors import (
    AssemblerError,
    InvalidInstructionError,
    NhaError,
    SourceFileError,
    SourceLocation,
)


CINST_SOURCE = """
ldr D, (A)
sub D, D, (A)
jgt D
ldr D, (A)
jmp
str (A), D
"""

CINST_BINARY = [
    "1111110000010000",
    "1111010011010000",
    "1110001100000001",
    "1111110000010000",
    "1110101010000111",
    "1110001100001000",
]

ADD_SOURCE = """
ldr A, $2
ldr D, A
ldr A, $3
add D, D, A
ldr A, $0
str (A), D
"""

ADD_BINARY = [
    "0000000000000010",
    "1110110000010000",
    "0000000000000011",
    "1110000010010000",
    "0000000000000000",
    "1110001100001000",
]


# =============================================================================
# Full Assembly Pipeline Tests
# =============================================================================

class TestFullPipeline:
    """Test the complete assembly pipeline from source to listing."""

    def test_single_instruction(self):
        result = Assembler().assemble_string("ldr A, $21")
        assert result.lines == ["0000000000010101"]
        assert result.ok

    def test_c_instruction_program(self):
        result = Assembler().assemble_string(CINST_SOURCE)
        assert result.lines == CINST_BINARY
        assert result.ok

    def test_add_program(self):
        assert assemble(ADD_SOURCE) == ADD_BINARY

    def test_output_text(self):
        """Every instruction is followed by a line break."""
        result = Assembler().assemble_string("ldr A, $21\njmp")
        assert result.get_output() == "0000000000010101\n1110101010000111\n"

    def test_empty_source(self):
        result = Assembler().assemble_string("")
        assert result.lines == []
        assert result.ok
        assert result.get_output() == ""

    def test_blank_and_separator_lines_skipped(self):
        source = "\n   \nldr A, $1\n , , \n\t\njmp\n"
        result = Assembler().assemble_string(source)
        assert result.lines == ["0000000000000001", "1110101010000111"]
        assert result.ok

    def test_assemble_lines(self):
        result = Assembler().assemble_lines(["ldr A, $21", "", "jmp"])
        assert result.lines == ["0000000000010101", "1110101010000111"]

    def test_assemble_lines_from_generator(self):
        lines = (line for line in ["ldr A, $1", "mul D, D, A"])
        result = Assembler().assemble_lines(lines)
        assert result.lines == ["0000000000000001"]
        assert result.failed_source == "mul D, D, A"


# =============================================================================
# Halt-on-First-Failure Tests
# =============================================================================

class TestHaltOnFailure:
    """An invalid line stops the run; earlier output is kept."""

    def test_unknown_mnemonic_halts(self):
        source = "ldr A, $1\nmul D, D, A\njmp"
        result = Assembler().assemble_string(source)
        assert result.lines == ["0000000000000001"]
        assert not result.ok
        assert result.failed_line == 2
        assert result.failed_source == "mul D, D, A"

    def test_generator_input_failed_source(self):
        """A one-shot iterable still reports the failing line's text."""
        lines = (line for line in ["jmp", "  nop  ", "jmp"])
        result = Assembler().assemble_lines(lines)
        assert result.lines == ["1110101010000111"]
        assert result.failed_line == 2
        assert result.failed_source == "  nop  "

    def test_later_valid_lines_not_emitted(self):
        source = "ldr A, $40000\nldr A, $1\nldr A, $2"
        result = Assembler().assemble_string(source)
        assert result.lines == []
        assert result.failed_line == 1

    def test_failed_line_counts_blank_lines(self):
        source = "\n\nldr A, $1\n\nstr A, D\njmp"
        result = Assembler().assemble_string(source)
        assert result.lines == ["0000000000000001"]
        assert result.failed_line == 5

    def test_failure_on_last_line(self):
        result = Assembler().assemble_string(CINST_SOURCE + "jgt\n")
        assert result.lines == CINST_BINARY
        assert not result.ok

    @pytest.mark.parametrize("bad_line", [
        "mul D, D, A",       # unknown mnemonic
        "add D, D",          # wrong operand count
        "str A, D",          # illegal operand
        "ldr A, $abc",       # immediate does not parse
        "ldr A, $32768",     # immediate out of range
    ])
    def test_every_failure_kind_halts(self, bad_line):
        result = Assembler().assemble_string(f"jmp\n{bad_line}\njmp")
        assert result.lines == ["1110101010000111"]
        assert result.failed_line == 2

    def test_convenience_function_truncates(self):
        assert assemble("ldr A, $1\nnop\nldr A, $2") == ["0000000000000001"]


class TestIterEncoded:
    """Test the lazy line driver."""

    def test_yields_encoded_lines(self):
        items = list(iter_encoded(["ldr A, $21", "", "jmp"]))
        assert items == [
            EncodedLine(1, "ldr A, $21", "0000000000010101"),
            EncodedLine(3, "jmp", "1110101010000111"),
        ]

    def test_return_value_is_failing_line(self):
        encoded = iter_encoded(["jmp", "bad", "jmp"])
        assert next(encoded).bits == "1110101010000111"
        with pytest.raises(StopIteration) as stop:
            next(encoded)
        assert stop.value.value == 2

    def test_return_value_none_on_success(self):
        encoded = iter_encoded(["jmp"])
        next(encoded)
        with pytest.raises(StopIteration) as stop:
            next(encoded)
        assert stop.value.value is None

    def test_stops_reading_after_failure(self):
        """Lines after the failing one are never read."""
        consumed = []

        def source():
            for line in ["ldr A, $1", "bad", "jmp", "jmp"]:
                consumed.append(line)
                yield line

        items = list(iter_encoded(source()))
        assert [item.bits for item in items] == ["0000000000000001"]
        assert consumed == ["ldr A, $1", "bad"]

    def test_halt_is_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="nhasm.assembler.assembler"):
            list(iter_encoded(["jmp", "mul D, D, A"]))
        assert "Halting at line 2" in caplog.text


# =============================================================================
# Strict Mode and Errors
# =============================================================================

class TestStrictMode:
    """Strict mode turns the halt into an exception."""

    def test_strict_raises(self):
        asm = Assembler(strict=True)
        with pytest.raises(InvalidInstructionError) as exc_info:
            asm.assemble_string("jmp\nmul D, D, A", filename="prog.nha")
        message = str(exc_info.value)
        assert "prog.nha:2:1: error: invalid instruction encountered" in message
        assert "mul D, D, A" in message

    def test_strict_valid_program(self):
        result = Assembler(strict=True).assemble_string(ADD_SOURCE)
        assert result.lines == ADD_BINARY

    def test_strict_from_config(self):
        asm = Assembler(AssemblerConfig(strict=True))
        with pytest.raises(InvalidInstructionError):
            asm.assemble_string("nop")

    def test_strict_argument_does_not_modify_config(self):
        config = AssemblerConfig()
        Assembler(config, strict=True)
        assert config.strict is False

    def test_raise_for_status(self):
        result = Assembler().assemble_string("jmp\nbad")
        with pytest.raises(InvalidInstructionError):
            result.raise_for_status()

    def test_raise_for_status_ok(self):
        AssemblyResult(lines=["1110101010000111"]).raise_for_status()

    def test_error_hierarchy(self):
        assert issubclass(InvalidInstructionError, AssemblerError)
        assert issubclass(SourceFileError, AssemblerError)
        assert issubclass(AssemblerError, NhaError)

    def test_error_without_location(self):
        error = InvalidInstructionError()
        assert str(error) == "error: invalid instruction encountered"

    def test_source_location_str(self):
        assert str(SourceLocation("a.nha", 3, 7)) == "a.nha:3:7"


# =============================================================================
# Sink and File Tests
# =============================================================================

class TestAssembleTo:
    """Test writing to a caller-provided sink."""

    def test_writes_in_order(self):
        sink = io.StringIO()
        result = Assembler().assemble_to(["ldr A, $21", "jmp"], sink)
        assert sink.getvalue() == "0000000000010101\n1110101010000111\n"
        assert result.ok

    def test_partial_output_on_failure(self):
        sink = io.StringIO()
        result = Assembler().assemble_to(["jmp", "bad", "jmp"], sink)
        assert sink.getvalue() == "1110101010000111\n"
        assert result.failed_line == 2

    def test_stops_reading_after_failure(self):
        """The run pulls no lines past the failing one."""
        consumed = []

        def source():
            for line in ["jmp", "bad", "jmp", "jmp"]:
                consumed.append(line)
                yield line

        result = Assembler().assemble_to(source(), io.StringIO())
        assert consumed == ["jmp", "bad"]
        assert result.failed_line == 2
        assert result.failed_source == "bad"

    def test_writes_before_reading_next_line(self):
        """Each instruction reaches the sink before the next line is read."""
        sink = io.StringIO()
        seen = []

        def source():
            for line in ["ldr A, $21", "jmp", "ldr A, $1"]:
                seen.append(sink.getvalue())
                yield line

        Assembler().assemble_to(source(), sink)
        assert seen == ["", "0000000000010101\n", "0000000000010101\n1110101010000111\n"]

    def test_unicode_space_halts_run(self):
        sink = io.StringIO()
        result = Assembler().assemble_to(["jmp", "ldr\xa0A,\xa0$1", "jmp"], sink)
        assert sink.getvalue() == "1110101010000111\n"
        assert result.failed_line == 2
        assert result.failed_source == "ldr\xa0A,\xa0$1"


class TestAssembleFile:
    """Test file-to-file assembly."""

    def test_default_output_path(self, tmp_path):
        source = tmp_path / "add.nha"
        source.write_text(ADD_SOURCE)

        result = assemble_file(source)

        output = tmp_path / "add.bin"
        assert output.exists()
        assert output.read_text() == "".join(f"{line}\n" for line in ADD_BINARY)
        assert result.ok

    def test_explicit_output_path(self, tmp_path):
        source = tmp_path / "prog.nha"
        source.write_text("ldr A, $21\n")
        output = tmp_path / "out" / "prog.listing"
        output.parent.mkdir()

        Assembler().assemble_file(source, output)

        assert output.read_text() == "0000000000010101\n"

    def test_explicit_output_allows_any_suffix(self, tmp_path):
        source = tmp_path / "prog.txt"
        source.write_text("jmp")
        output = tmp_path / "prog.bin"

        Assembler().assemble_file(source, output)

        assert output.read_text() == "1110101010000111\n"

    def test_windows_line_endings(self, tmp_path):
        source = tmp_path / "crlf.nha"
        source.write_bytes(CINST_SOURCE.replace("\n", "\r\n").encode())

        result = assemble_file(source)

        assert result.lines == CINST_BINARY

    def test_classic_mac_line_endings(self, tmp_path):
        source = tmp_path / "cr.nha"
        source.write_bytes(ADD_SOURCE.replace("\n", "\r").encode())

        result = assemble_file(source)

        assert result.lines == ADD_BINARY

    def test_output_uses_unix_line_endings(self, tmp_path):
        source = tmp_path / "prog.nha"
        source.write_text("jmp\njmp\n")

        assemble_file(source)

        assert (tmp_path / "prog.bin").read_bytes() == b"1110101010000111\n1110101010000111\n"

    def test_partial_output_kept_on_failure(self, tmp_path):
        source = tmp_path / "bad.nha"
        source.write_text("ldr A, $2\nldr D, A\nmul D, D, A\njmp\n")

        result = assemble_file(source)

        assert not result.ok
        assert result.failed_line == 3
        assert (tmp_path / "bad.bin").read_text() == "0000000000000010\n1110110000010000\n"

    def test_strict_still_writes_partial_output(self, tmp_path):
        source = tmp_path / "bad.nha"
        source.write_text("jmp\nnop\n")

        with pytest.raises(InvalidInstructionError) as exc_info:
            Assembler(strict=True).assemble_file(source)

        assert exc_info.value.location.line == 2
        assert (tmp_path / "bad.bin").read_text() == "1110101010000111\n"

    def test_unrecognised_suffix(self, tmp_path):
        source = tmp_path / "prog.asm"
        source.write_text("jmp")

        with pytest.raises(SourceFileError):
            assemble_file(source)

        assert not (tmp_path / "prog.bin").exists()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            assemble_file(tmp_path / "missing.nha")

    def test_missing_file_creates_no_output(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            assemble_file(tmp_path / "missing.nha")
        assert not (tmp_path / "missing.bin").exists()

    def test_undecodable_source_creates_no_output(self, tmp_path):
        source = tmp_path / "latin.nha"
        source.write_bytes(b"ldr A, $1\n\xe9\n")

        with pytest.raises(UnicodeDecodeError):
            assemble_file(source)

        assert not (tmp_path / "latin.bin").exists()

    def test_unknown_encoding(self, tmp_path):
        source = tmp_path / "prog.nha"
        source.write_text("jmp")

        with pytest.raises(LookupError):
            Assembler(AssemblerConfig(encoding="no-such-codec")).assemble_file(source)

        assert not (tmp_path / "prog.bin").exists()

    def test_custom_suffixes(self, tmp_path):
        config = AssemblerConfig(source_suffix=".asm", output_suffix=".hack")
        source = tmp_path / "prog.asm"
        source.write_text("ldr A, $21")

        Assembler(config).assemble_file(source)

        assert (tmp_path / "prog.hack").read_text() == "0000000000010101\n"
