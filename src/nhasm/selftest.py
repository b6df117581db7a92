"""
NHA Assembler - Self-Test Harness
=================================

Fixed regression cases that run literal source blocks through the
assembler and compare the listing against literal expected output.

The harness is exposed on the command line as ``nhasm-selftest``; a
failing case prints a line-by-line diff pairing each differing output
line with the instruction that produced it.

Example
-------
>>> from nhasm.selftest import run_self_tests
>>> all(result.passed for result in run_self_tests())
True
"""

from dataclasses import dataclass, field

from nhasm.assembler import Assembler, split_lines


# =============================================================================
# Test Cases
# =============================================================================

@dataclass(frozen=True)
class SelfTestCase:
    """
    A named source block and its expected listing.

    Attributes:
        name: Case name shown in reports
        source: Assembly source
        expected: Expected listing, one instruction per line
    """
    name: str
    source: str
    expected: str


SELF_TEST_CASES: tuple[SelfTestCase, ...] = (
    SelfTestCase(
        name="AInst21",
        source="ldr A, $21",
        expected="0000000000010101",
    ),
    SelfTestCase(
        name="CInst",
        source="""
ldr D, (A)
sub D, D, (A)
jgt D
ldr D, (A)
jmp
str (A), D
""",
        expected="""
1111110000010000
1111010011010000
1110001100000001
1111110000010000
1110101010000111
1110001100001000
""",
    ),
    SelfTestCase(
        name="Add",
        source="""
ldr A, $2
ldr D, A
ldr A, $3
add D, D, A
ldr A, $0
str (A), D
""",
        expected="""
0000000000000010
1110110000010000
0000000000000011
1110000010010000
0000000000000000
1110001100001000
""",
    ),
)


# =============================================================================
# Results
# =============================================================================

@dataclass
class SelfTestResult:
    """
    Outcome of one self-test case.

    Attributes:
        name: Case name
        passed: True if the listing matched exactly
        expected: Expected listing (stripped)
        actual: Produced listing (stripped)
        diff: Report lines describing each mismatch (empty when passed)
    """
    name: str
    passed: bool
    expected: str
    actual: str
    diff: list[str] = field(default_factory=list)


def _instruction_lines(source_lines: list[str]) -> list[str]:
    return [line for line in source_lines if line]


def format_diff(expected: str, actual: str, source_lines: list[str]) -> list[str]:
    """
    Describe where an actual listing departs from the expected one.

    Each output line is paired with the source instruction at the same
    position, skipping empty source lines. The instruction is shown as
    written; a line holding only whitespace still takes a position.

    Args:
        expected: Expected listing
        actual: Produced listing
        source_lines: Source lines the listing was produced from

    Returns:
        One report line per mismatch, e.g.
        ``line   2: jgt D\\t1110001100000001 != missing``
    """
    expected_lines = expected.split("\n") if expected else []
    actual_lines = actual.split("\n") if actual else []
    instructions = _instruction_lines(source_lines)

    def instruction_at(index: int) -> str:
        return instructions[index] if index < len(instructions) else ""

    report = []
    for index, want in enumerate(expected_lines):
        prefix = f"line {index + 1:3d}: {instruction_at(index)}\t"
        if index >= len(actual_lines):
            report.append(f"{prefix}{want} != missing")
        elif want != actual_lines[index]:
            report.append(f"{prefix}{want} != {actual_lines[index]}")

    for index in range(len(expected_lines), len(actual_lines)):
        prefix = f"line {index + 1:3d}: {instruction_at(index)}\t"
        report.append(f"{prefix} != {actual_lines[index]}")

    return report


# =============================================================================
# Runner
# =============================================================================

def run_self_test(case: SelfTestCase) -> SelfTestResult:
    """Assemble one case and compare it against its expected listing."""
    source = case.source.strip()
    expected = case.expected.strip()

    result = Assembler(strict=False).assemble_string(source, filename=case.name)
    actual = result.get_output().strip()

    diff = []
    if actual != expected:
        diff = format_diff(expected, actual, split_lines(source))

    return SelfTestResult(
        name=case.name,
        passed=actual == expected,
        expected=expected,
        actual=actual,
        diff=diff,
    )


def run_self_tests(cases: tuple[SelfTestCase, ...] = SELF_TEST_CASES) -> list[SelfTestResult]:
    """Run every case in order and return their results."""
    return [run_self_test(case) for case in cases]
