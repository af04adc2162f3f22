"""GRIB2 code tables: enumerated codes and lookups into loaded CSV tables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TypeVar

from . import cct_csv, grib2_codeflag_csv
from .grib2_codeflag_csv import OptArg

__all__ = [
    "SUPPORTED_PROD_DEF_TEMPLATE_NUMBERS",
    "CodeTableSet",
    "ConversionError",
    "LookupResult",
    "Table4_4",
    "load_code_tables",
    "to_code",
]


class Table4_4(Enum):
    """Code Table 4.4: indicator of unit of time range."""

    MINUTE = 0
    HOUR = 1
    DAY = 2
    MONTH = 3
    YEAR = 4
    DECADE = 5
    NORMAL = 6
    CENTURY = 7
    THREE_HOURS = 10
    SIX_HOURS = 11
    TWELVE_HOURS = 12
    SECOND = 13
    MISSING = 255

    def short_expr(self) -> str | None:
        """Short unit notation, or ``None`` for a missing unit."""
        return _SHORT_EXPR.get(self)

    @property
    def variant_name(self) -> str:
        """Name in camel case, e.g. ``ThreeHours``."""
        return "".join(word.capitalize() for word in self.name.split("_"))


_SHORT_EXPR = {
    Table4_4.MINUTE: "m",
    Table4_4.HOUR: "h",
    Table4_4.DAY: "D",
    Table4_4.MONTH: "M",
    Table4_4.YEAR: "Y",
    Table4_4.DECADE: "10Y",
    Table4_4.NORMAL: "30Y",
    Table4_4.CENTURY: "C",
    Table4_4.THREE_HOURS: "3h",
    Table4_4.SIX_HOURS: "6h",
    Table4_4.TWELVE_HOURS: "12h",
    Table4_4.SECOND: "s",
}

E = TypeVar("E", bound=Enum)


def to_code(enum_cls: type[E], value: int) -> E | int:
    """Return the enum member for ``value``, or ``value`` itself if it is not defined."""
    try:
        return enum_cls(value)
    except ValueError:
        return value


class ConversionError(LookupError):
    """A code has no entry in the code table."""

    def __init__(self, code: int) -> None:
        super().__init__(code)
        self.code = code

    def __str__(self) -> str:
        return f"code '{self.code}' is not implemented"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConversionError):
            return NotImplemented
        return self.code == other.code

    def __hash__(self) -> int:
        return hash(("ConversionError", self.code))


@dataclass(frozen=True)
class LookupResult:
    """Outcome of a code table lookup: a meaning or a conversion error."""

    value: str | None = None
    error: ConversionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __str__(self) -> str:
        if self.error is not None:
            return str(self.error)
        return self.value or ""


def _lookup(entries: tuple[str, ...], code: int) -> LookupResult:
    if 0 <= code < len(entries):
        return LookupResult(value=entries[code])
    return LookupResult(error=ConversionError(code))


class CodeTableSet:
    """Lookups into common and GRIB2 code tables loaded from CSV files."""

    def __init__(
        self,
        common_db: cct_csv.CodeDB | None = None,
        grib2_db: grib2_codeflag_csv.CodeDB | None = None,
    ) -> None:
        self._common_db = common_db if common_db is not None else cct_csv.CodeDB()
        self._grib2_db = grib2_db if grib2_db is not None else grib2_codeflag_csv.CodeDB()
        self._cache: dict[object, tuple[str, ...]] = {}

    def _entries(self, key: object, table) -> tuple[str, ...]:
        if key not in self._cache:
            self._cache[key] = tuple(table.to_list()) if table is not None else ()
        return self._cache[key]

    def common(self, number: int, code: int) -> LookupResult:
        """Look up ``code`` in Common Code Table C-``number``."""
        key = ("common", number)
        return _lookup(self._entries(key, self._common_db.get(number)), code)

    def grib2(self, section: int, number: int, code: int, *args: int) -> LookupResult:
        """Look up ``code`` in Code Table ``section.number``.

        Extra arguments are the product discipline and, for Code Table 4.2,
        the parameter category that select the sub-table.
        """
        if len(args) > 2:
            raise TypeError("at most a discipline and a category may be given")
        table_id = (section, number, OptArg(*args))
        return _lookup(self._entries(table_id, self._grib2_db.get(table_id)), code)


_COMMON_FILES = ("C00.csv", "C11.csv")

_GRIB2_FILES = tuple(
    f"GRIB2_CodeFlag_{section}_{number}_CodeTable_en.csv"
    for section, number in (
        (0, 0),
        (1, 1),
        (1, 2),
        (1, 3),
        (1, 4),
        (3, 1),
        (4, 0),
        (4, 1),
        (4, 2),
        (4, 3),
        (4, 4),
        (4, 5),
        (5, 0),
    )
)


def load_code_tables(def_dir: str | os.PathLike) -> CodeTableSet:
    """Load the code tables found under ``def_dir/CCT`` and ``def_dir/GRIB2``."""
    root = Path(def_dir)
    if not root.is_dir():
        raise FileNotFoundError(f"no such directory: {root}")

    common_db = cct_csv.CodeDB()
    for name in _COMMON_FILES:
        path = root / "CCT" / name
        if path.is_file():
            common_db.load(path)

    grib2_db = grib2_codeflag_csv.CodeDB()
    for name in _GRIB2_FILES:
        path = root / "GRIB2" / name
        if path.is_file():
            grib2_db.load(path)

    return CodeTableSet(common_db, grib2_db)


SUPPORTED_PROD_DEF_TEMPLATE_NUMBERS = frozenset(
    (
        0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15, 20, 30, 31, 32, 33, 34, 35,
        40, 41, 42, 43, 44, 45, 46, 47, 48, 49, 51, 53, 54, 55, 56, 57, 58, 59, 60, 61,
        62, 63, 67, 68, 70, 71, 72, 73, 76, 77, 78, 79, 80, 81, 82, 83, 84, 85, 86, 87,
        88, 91, 254, 1000, 1001, 1002, 1100, 1101,
    )
)