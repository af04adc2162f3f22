"""Loading of GRIB2 code and flag tables from CSV files."""

from __future__ import annotations

import csv
import functools
import itertools
import os
import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from .codegen import CodeTable

__all__ = [
    "CodeDB",
    "OptArg",
    "SubtitleParseError",
    "parse_file",
    "parse_opt_arg",
]

_COLUMNS = (
    "Title_en",
    "SubTitle_en",
    "CodeFlag",
    "Value",
    "MeaningParameterDescription_en",
    "Note_en",
    "UnitComments_en",
    "Status",
)

_U8 = re.compile(r"\+?[0-9]+")


class SubtitleParseError(ValueError):
    """Raised when a table subtitle does not name a discipline or category."""


def _parse_u8(text: str) -> int:
    if not _U8.fullmatch(text):
        raise ValueError(f"invalid number: {text!r}")
    value = int(text)
    if value > 255:
        raise ValueError(f"number out of range: {text!r}")
    return value


@functools.total_ordering
@dataclass(frozen=True)
class OptArg:
    """Optional qualifiers of a table: none, a discipline, or a discipline and category."""

    discipline: int | None = None
    category: int | None = None

    def __post_init__(self) -> None:
        if self.category is not None and self.discipline is None:
            raise ValueError("a category requires a discipline")

    @property
    def _key(self) -> tuple[int, int, int]:
        if self.discipline is None:
            return (0, 0, 0)
        if self.category is None:
            return (1, self.discipline, 0)
        return (2, self.discipline, self.category)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, OptArg):
            return NotImplemented
        return self._key < other._key


def _match_words(text: str, first: str, second: str) -> int:
    words = text.split(" ")[:3]
    if len(words) != 3 or words[0] != first or words[1] != second:
        raise SubtitleParseError(f"unexpected subtitle part: {text!r}")
    try:
        return _parse_u8(words[2])
    except ValueError as e:
        raise SubtitleParseError(str(e)) from None


def parse_opt_arg(s: str) -> OptArg:
    """Parse a table subtitle such as ``"Product discipline 0 - ..., parameter category 1: ..."``."""
    if s == "":
        return OptArg()
    parts = s.split(", ")
    discipline = _match_words(parts[0], "Product", "discipline")
    if len(parts) < 2:
        return OptArg(discipline)
    category_part = parts[1].split(":")[0]
    category = _match_words(category_part, "parameter", "category")
    return OptArg(discipline, category)


def _read_records(path: str | os.PathLike) -> Iterator[dict[str, str]]:
    with open(path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is not None:
            missing = [c for c in _COLUMNS if c not in reader.fieldnames]
            if missing:
                raise ValueError(f"{path}: missing columns: {', '.join(missing)}")
        for row in reader:
            if None in row or None in row.values():
                raise ValueError(
                    f"{path}: line {reader.line_num}: unexpected number of fields"
                )
            yield row


def parse_file(path: str | os.PathLike) -> list[tuple[OptArg, CodeTable]]:
    """Read a code/flag table file, splitting it into one table per subtitle run."""
    records = ((parse_opt_arg(row["SubTitle_en"]), row) for row in _read_records(path))
    tables: list[tuple[OptArg, CodeTable]] = []
    for category, group in itertools.groupby(records, key=lambda item: item[0]):
        rows = [row for _, row in group]
        table = CodeTable(rows[0]["Title_en"])
        table.data.extend(
            (row["CodeFlag"], row["MeaningParameterDescription_en"]) for row in rows
        )
        tables.append((category, table))
    return tables


TableId = tuple[int, int, OptArg]


def _variable_name(table_id: TableId) -> str:
    section, number, opt = table_id
    name = f"CODE_TABLE_{section}_{number}"
    if opt.discipline is not None:
        name += f"_{opt.discipline}"
    if opt.category is not None:
        name += f"_{opt.category}"
    return name


class CodeDB:
    """Collection of GRIB2 code tables keyed by ``(section, number, OptArg)``."""

    def __init__(self) -> None:
        self._tables: dict[TableId, CodeTable] = {}

    def load(self, path: str | os.PathLike) -> None:
        """Load a ``GRIB2_CodeFlag_<section>_<number>_...`` file; other names are ignored."""
        words = Path(path).stem.split("_")[:4]
        if len(words) != 4 or words[0] != "GRIB2" or words[1] != "CodeFlag":
            return
        section = _parse_u8(words[2])
        number = _parse_u8(words[3])
        for category, table in parse_file(path):
            self._tables[(section, number, category)] = table

    def export(self, table_id: TableId) -> str:
        """Render one table, or ``"[]"`` when it has not been loaded."""
        table = self.get(table_id)
        if table is None:
            return "[]"
        return table.export(_variable_name(table_id))

    def get(self, table_id: TableId) -> CodeTable | None:
        """Return the loaded table with the given key, if any."""
        return self._tables.get(table_id)

    def __str__(self) -> str:
        return "\n\n".join(
            table.export(_variable_name(table_id))
            for table_id, table in sorted(self._tables.items())
        )