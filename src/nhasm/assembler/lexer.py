"""
NHA Assembly Language Lexer
===========================

This module splits NHA assembly source into lines and lines into tokens.

The language has no comments, strings or expressions, so tokenizing is a
plain split: first on commas, then on runs of whitespace inside each
comma-separated piece. Empty tokens are discarded, which means commas and
whitespace are interchangeable as separators.

Line Endings
------------
Source text may use any of the three common conventions; all are treated
alike so the result does not depend on the platform that wrote the file:

| Convention | Bytes  |
|------------|--------|
| Unix       | \\n     |
| Windows    | \\r\\n   |
| Classic Mac| \\r     |

Example
-------
>>> from nhasm.assembler.lexer import tokenize_line
>>> tokenize_line("  sub D, D,(A) ")
['sub', 'D', 'D', '(A)']
>>> tokenize_line(" , ,")
[]
"""

import re


# \r\n must be tried before the lone characters
LINE_BREAK = re.compile(r"\r\n|\n|\r")

TOKEN_SEPARATOR = ","

# ASCII whitespace only: space, \t, \n, \v, \f, \r
WHITESPACE_RUN = re.compile(r"[ \t\n\x0b\f\r]+")

# Space and the C0 control characters, trimmed from line and piece edges
EDGE_CHARS = "".join(chr(code) for code in range(0x21))


def split_lines(text: str) -> list[str]:
    """
    Split source text into lines, independent of line-ending convention.

    Args:
        text: Complete source text

    Returns:
        List of lines without their terminators. A trailing line break
        does not produce an extra empty line.
    """
    lines = LINE_BREAK.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def tokenize_line(line: str) -> list[str]:
    """
    Split one source line into its tokens.

    Only ASCII whitespace separates tokens; a non-breaking space or other
    Unicode separator stays inside the token (and so makes it invalid).
    Control characters at the edges of the line and of each comma piece
    are trimmed.

    Args:
        line: A single source line

    Returns:
        Ordered list of non-empty tokens; token 0 is the mnemonic. An empty
        list means there is nothing to encode on this line.
    """
    tokens = []
    for piece in line.strip(EDGE_CHARS).split(TOKEN_SEPARATOR):
        tokens.extend(
            token
            for token in WHITESPACE_RUN.split(piece.strip(EDGE_CHARS))
            if token
        )
    return tokens
