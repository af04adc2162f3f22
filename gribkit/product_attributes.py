"""Product attributes: forecast time and fixed surfaces."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .codetables import CodeTableSet, Table4_4, to_code

__all__ = ["FixedSurface", "ForecastTime"]

_MISSING_SCALE_FACTOR = -127  # all bits set in sign-magnitude i8
_MISSING_SCALED_VALUE = -2147483647  # all bits set in sign-magnitude i32


@dataclass(frozen=True)
class ForecastTime:
    """Forecast time: a unit (Code Table 4.4, or a raw code) and a value."""

    unit: Table4_4 | int
    value: int

    @classmethod
    def from_numbers(cls, unit: int, value: int) -> ForecastTime:
        """Build from the raw unit code and value."""
        return cls(to_code(Table4_4, unit), value)

    def describe(self) -> tuple[str, str]:
        """Return ``(unit, value)`` as text."""
        if isinstance(self.unit, Table4_4):
            unit = self.unit.variant_name
        else:
            unit = f"code {self.unit}"
        return unit, str(self.value)

    def __str__(self) -> str:
        text = str(self.value)
        if isinstance(self.unit, Table4_4):
            expr = self.unit.short_expr()
            if expr is not None:
                text += f" [{expr}]"
        else:
            text += f" [unit: {self.unit}]"
        return text


@dataclass(frozen=True)
class FixedSurface:
    """A fixed surface; the type is described by Code Table 4.5."""

    surface_type: int
    scale_factor: int
    scaled_value: int

    def value(self) -> float:
        """Physical value of the surface, NaN if the scaled value is missing."""
        if self.value_is_nan():
            return math.nan
        return float(self.scaled_value) * 10.0 ** (-self.scale_factor)

    def scale_factor_is_nan(self) -> bool:
        """Whether the scale factor is the missing value."""
        return self.scale_factor == _MISSING_SCALE_FACTOR

    def value_is_nan(self) -> bool:
        """Whether the scaled value is the missing value."""
        return self.scaled_value == _MISSING_SCALED_VALUE

    def describe(self, tables: CodeTableSet) -> tuple[str, str, str]:
        """Return ``(surface type, scale factor, scaled value)`` as text."""
        stype = str(tables.grib2(4, 5, self.surface_type))
        scale_factor = "Missing" if self.scale_factor_is_nan() else str(self.scale_factor)
        scaled_value = "Missing" if self.value_is_nan() else str(self.scaled_value)
        return stype, scale_factor, scaled_value