"""Loading of Common Code Tables C-0 and C-11 from CSV files."""

from __future__ import annotations

import csv
import os
from collections.abc import Iterator
from pathlib import Path

from .codegen import CodeTable

__all__ = ["CodeDB", "parse_file_c00", "parse_file_c11"]

_C00_COLUMNS = (
    "GRIB version number",
    "BUFR version number",
    "CREX version number",
    "Effective date",
    "Status",
)

_C11_COLUMNS = (
    "CREX2",
    "GRIB2_BUFR4",
    "OriginatingGeneratingCentre_en",
    "Status",
)


def _read_records(path: str | os.PathLike, columns: tuple[str, ...]) -> Iterator[dict[str, str]]:
    with open(path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is not None:
            missing = [c for c in columns if c not in reader.fieldnames]
            if missing:
                raise ValueError(f"{path}: missing columns: {', '.join(missing)}")
        for row in reader:
            if None in row or None in row.values():
                raise ValueError(
                    f"{path}: line {reader.line_num}: unexpected number of fields"
                )
            yield row


def parse_file_c00(path: str | os.PathLike) -> CodeTable:
    """Read Common Code Table C-0 (GRIB version numbers)."""
    table = CodeTable("Common Code Table C-0")
    table.data.extend(
        (row["GRIB version number"], row["Effective date"])
        for row in _read_records(path, _C00_COLUMNS)
    )
    return table


def parse_file_c11(path: str | os.PathLike) -> CodeTable:
    """Read Common Code Table C-11 (originating/generating centres)."""
    table = CodeTable("Common Code Table C-11")
    table.data.extend(
        (row["GRIB2_BUFR4"], row["OriginatingGeneratingCentre_en"])
        for row in _read_records(path, _C11_COLUMNS)
    )
    return table


_PARSERS = {
    "C00": (0, parse_file_c00),
    "C11": (11, parse_file_c11),
}


def _variable_name(table_id: int) -> str:
    return f"COMMON_CODE_TABLE_{table_id:02}"


class CodeDB:
    """Collection of common code tables keyed by table number."""

    def __init__(self) -> None:
        self._tables: dict[int, CodeTable] = {}

    def load(self, path: str | os.PathLike) -> None:
        """Load a table file; files whose name is not recognised are ignored."""
        entry = _PARSERS.get(Path(path).stem)
        if entry is None:
            return
        table_id, parser = entry
        self._tables[table_id] = parser(path)

    def export(self, table_id: int) -> str:
        """Render one table, or ``"[]"`` when it has not been loaded."""
        table = self.get(table_id)
        if table is None:
            return "[]"
        return table.export(_variable_name(table_id))

    def get(self, table_id: int) -> CodeTable | None:
        """Return the loaded table with the given number, if any."""
        return self._tables.get(table_id)

    def __str__(self) -> str:
        return "\n\n".join(
            table.export(_variable_name(table_id))
            for table_id, table in sorted(self._tables.items())
        )