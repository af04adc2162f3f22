"""Code table model: range parsing, flattening and constant export."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass, field

__all__ = [
    "CodeRange",
    "CodeRangeParseError",
    "CodeTable",
    "parse_code_range",
]

# Meanings that carry no information and are stored as empty entries.
_OMITTED_MEANINGS = frozenset(
    {
        "Future versions",
        "Reserved",
        "Reserved for local use",
        "Reserved for other centres",
        "Missing",
        "Missing value",
        ")",
    }
)

_DIGITS = re.compile(r"[0-9]*")


class CodeRangeParseError(ValueError):
    """Raised when a code column entry is not a number or a number range."""


@dataclass(frozen=True)
class CodeRange:
    """An inclusive range of codes such as ``4-254`` or a single code."""

    start: int
    end: int

    def size(self) -> int:
        """Number of codes covered by the range."""
        return self.end - self.start + 1


def _read_number(text: str, pos: int) -> tuple[int, int]:
    match = _DIGITS.match(text, pos)
    digits = match.group() if match else ""
    if not digits:
        raise CodeRangeParseError(f"number not found in {text!r}")
    return int(digits), match.end()


def parse_code_range(s: str) -> CodeRange:
    """Parse ``"N"`` or ``"N-M"`` into a :class:`CodeRange`."""
    start, pos = _read_number(s, 0)
    if pos == len(s):
        return CodeRange(start, start)
    if s[pos] != "-":
        raise CodeRangeParseError(f"hyphen not found in {s!r}")
    end, _ = _read_number(s, pos + 1)
    return CodeRange(start, end)


_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}


def _quote(text: str) -> str:
    parts = []
    for ch in text:
        if ch in _ESCAPES:
            parts.append(_ESCAPES[ch])
        elif unicodedata.category(ch) in ("Cc", "Cf", "Zl", "Zp", "Cs", "Co", "Cn"):
            parts.append(f"\\u{{{ord(ch):x}}}")
        else:
            parts.append(ch)
    return '"' + "".join(parts) + '"'


def _format_list(items: list[str]) -> str:
    if not items:
        return "[]"
    body = "".join(f"    {_quote(item)},\n" for item in items)
    return f"[\n{body}]"


@dataclass
class CodeTable:
    """A titled list of ``(code, meaning)`` rows as read from a table file."""

    desc: str
    data: list[tuple[str, str]] = field(default_factory=list)

    def export(self, name: str) -> str:
        """Render the table as a documented static string array declaration."""
        return f"/// {self.desc}\nconst {name}: &[& str] = &{_format_list(self.to_list())};"

    def to_list(self) -> list[str]:
        """Flatten the rows into a dense list indexed by code.

        Reserved or missing entries become empty strings, but trailing ones
        are dropped. Tables with gaps that cannot be filled yield an empty list.
        """
        output: list[str] = []
        count = 0
        pending_empty = 0

        for code, meaning in self.data:
            try:
                code_range = parse_code_range(code)
            except CodeRangeParseError:
                continue

            if meaning in _OMITTED_MEANINGS:
                pending_empty += code_range.size()
                continue

            output.extend([""] * pending_empty)
            count += pending_empty
            pending_empty = 0

            if count != code_range.start:
                # Sparse code tables are not supported.
                return []
            output.extend([meaning] * code_range.size())
            count += code_range.size()

        return output