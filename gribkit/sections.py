"""GRIB2 section bodies and the index of sections making up a submessage."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime, timezone

from .codetables import SUPPORTED_PROD_DEF_TEMPLATE_NUMBERS
from .product_attributes import FixedSurface, ForecastTime

__all__ = [
    "BitMap",
    "BuildError",
    "GridDefinition",
    "Identification",
    "Indicator",
    "LocalUse",
    "ProdDefinition",
    "ReprDefinition",
    "SubmessageIndex",
    "as_grib_int",
]

START_OF_PROD_TEMPLATE = 4


class BuildError(ValueError):
    """A section body could not be built from its payload."""

    def __init__(self, size: int) -> None:
        super().__init__(f"section size is too small: {size}")
        self.size = size


def as_grib_int(value: int, size: int) -> int:
    """Interpret an unsigned ``size``-byte value as a GRIB sign-magnitude integer."""
    sign_bit = 1 << (size * 8 - 1)
    magnitude = value & (sign_bit - 1)
    return -magnitude if value & sign_bit else magnitude


def _read_uint(payload: bytes, offset: int, size: int) -> int:
    return int.from_bytes(payload[offset : offset + size], "big")


def _lookup_index(template: int, ranges: tuple[tuple[int, int, int], ...]) -> int | None:
    for low, high, index in ranges:
        if low <= template <= high:
            return index
    return None


@dataclass(frozen=True)
class Indicator:
    """Section 0."""

    discipline: int
    total_length: int


@dataclass(frozen=True)
class _PayloadSection:
    payload: bytes

    MIN_SIZE = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "payload", bytes(self.payload))
        if len(self.payload) < self.MIN_SIZE:
            raise BuildError(len(self.payload))

    def __iter__(self) -> Iterator[int]:
        return iter(self.payload)

    def __len__(self) -> int:
        return len(self.payload)


@dataclass(frozen=True)
class Identification(_PayloadSection):
    """Section 1."""

    MIN_SIZE = 16

    @classmethod
    def from_payload(cls, payload: bytes) -> Identification:
        """Build the section body; raises BuildError if the payload is too small."""
        return cls(bytes(payload))

    def centre_id(self) -> int:
        """Originating/generating centre (Common Code Table C-11)."""
        return _read_uint(self.payload, 0, 2)

    def subcentre_id(self) -> int:
        """Originating/generating sub-centre."""
        return _read_uint(self.payload, 2, 2)

    def master_table_version(self) -> int:
        """GRIB Master Tables Version Number."""
        return self.payload[4]

    def local_table_version(self) -> int:
        """GRIB Local Tables Version Number (Code Table 1.1)."""
        return self.payload[5]

    def ref_time_significance(self) -> int:
        """Significance of Reference Time (Code Table 1.2)."""
        return self.payload[6]

    def ref_time(self) -> datetime:
        """Reference time of data, in UTC."""
        p = self.payload
        return datetime(
            _read_uint(p, 7, 2), p[9], p[10], p[11], p[12], p[13], tzinfo=timezone.utc
        )

    def prod_status(self) -> int:
        """Production status of processed data (Code Table 1.3)."""
        return self.payload[14]

    def data_type(self) -> int:
        """Type of processed data (Code Table 1.4)."""
        return self.payload[15]


@dataclass(frozen=True)
class LocalUse(_PayloadSection):
    """Section 2."""

    @classmethod
    def from_payload(cls, payload: bytes) -> LocalUse:
        """Build the section body from any payload."""
        return cls(bytes(payload))


@dataclass(frozen=True)
class GridDefinition(_PayloadSection):
    """Section 3."""

    MIN_SIZE = 9

    @classmethod
    def from_payload(cls, payload: bytes) -> GridDefinition:
        """Build the section body; raises BuildError if the payload is too small."""
        return cls(bytes(payload))

    def num_points(self) -> int:
        """Number of data points."""
        return _read_uint(self.payload, 1, 4)

    def grid_tmpl_num(self) -> int:
        """Grid Definition Template Number."""
        return _read_uint(self.payload, 7, 2)


_GENERATING_PROCESS_INDEX = (
    (0, 39, 2),
    (40, 43, 4),
    (44, 46, 15),
    (47, 47, 2),
    (48, 49, 26),
    (51, 51, 2),
    (55, 56, 8),
    (59, 59, 8),
    (60, 61, 2),
    (62, 63, 8),
    (70, 73, 7),
    (76, 79, 5),
    (80, 81, 27),
    (82, 82, 16),
    (83, 83, 2),
    (84, 84, 16),
    (85, 85, 15),
    (86, 91, 2),
    (254, 254, 2),
    (1000, 1101, 2),
)

_FORECAST_TIME_INDEX = (
    (0, 15, 8),
    (32, 34, 8),
    (40, 43, 10),
    (44, 47, 21),
    (48, 49, 32),
    (51, 51, 8),
    (55, 56, 14),
    (59, 59, 14),
    (60, 61, 8),
    (62, 63, 14),
    (70, 73, 13),
    (76, 79, 11),
    (80, 81, 33),
    (82, 84, 22),
    (85, 85, 21),
    (86, 87, 8),
    (88, 88, 26),
    (91, 91, 8),
    (1000, 1101, 8),
)

_FIXED_SURFACES_INDEX = (
    (0, 15, 13),
    (40, 43, 15),
    (44, 44, 24),
    (45, 47, 26),
    (48, 49, 37),
    (51, 51, 13),
    (55, 56, 19),
    (59, 59, 19),
    (60, 61, 13),
    (62, 63, 19),
    (70, 73, 18),
    (76, 79, 16),
    (80, 81, 38),
    (82, 84, 27),
    (85, 85, 26),
    (86, 87, 13),
    (88, 88, 5),
    (91, 91, 13),
    (1100, 1101, 13),
)


@dataclass(frozen=True)
class ProdDefinition(_PayloadSection):
    """Section 4."""

    MIN_SIZE = START_OF_PROD_TEMPLATE

    @classmethod
    def from_payload(cls, payload: bytes) -> ProdDefinition:
        """Build the section body; raises BuildError if the payload is too small."""
        return cls(bytes(payload))

    def num_coordinates(self) -> int:
        """Number of coordinate values after the template."""
        return _read_uint(self.payload, 0, 2)

    def prod_tmpl_num(self) -> int:
        """Product Definition Template Number."""
        return _read_uint(self.payload, 2, 2)

    def template_supported(self) -> bool:
        """Whether the template's layout is known."""
        return self.prod_tmpl_num() in SUPPORTED_PROD_DEF_TEMPLATE_NUMBERS

    def _template_byte(self, index: int) -> int | None:
        pos = START_OF_PROD_TEMPLATE + index
        return self.payload[pos] if pos < len(self.payload) else None

    def parameter_category(self) -> int | None:
        """Parameter category (Code Table 4.1)."""
        return self._template_byte(0) if self.template_supported() else None

    def parameter_number(self) -> int | None:
        """Parameter number (Code Table 4.2)."""
        return self._template_byte(1) if self.template_supported() else None

    def generating_process(self) -> int | None:
        """Type of generating process (Code Table 4.3)."""
        if not self.template_supported():
            return None
        index = _lookup_index(self.prod_tmpl_num(), _GENERATING_PROCESS_INDEX)
        return None if index is None else self._template_byte(index)

    def forecast_time(self) -> ForecastTime | None:
        """Unit and value of the forecast time."""
        if not self.template_supported():
            return None
        index = _lookup_index(self.prod_tmpl_num(), _FORECAST_TIME_INDEX)
        if index is None:
            return None
        pos = START_OF_PROD_TEMPLATE + index
        if pos + 5 > len(self.payload):
            return None
        unit = self.payload[pos]
        value = _read_uint(self.payload, pos + 1, 4)
        return ForecastTime.from_numbers(unit, value)

    def fixed_surfaces(self) -> tuple[FixedSurface, FixedSurface] | None:
        """First and second fixed surfaces."""
        if not self.template_supported():
            return None
        index = _lookup_index(self.prod_tmpl_num(), _FIXED_SURFACES_INDEX)
        if index is None:
            return None
        first = self._read_surface_from(index)
        second = self._read_surface_from(index + 6)
        if first is None or second is None:
            return None
        return first, second

    def _read_surface_from(self, index: int) -> FixedSurface | None:
        pos = START_OF_PROD_TEMPLATE + index
        if pos + 6 > len(self.payload):
            return None
        surface_type = self.payload[pos]
        scale_factor = as_grib_int(self.payload[pos + 1], 1)
        scaled_value = as_grib_int(_read_uint(self.payload, pos + 2, 4), 4)
        return FixedSurface(surface_type, scale_factor, scaled_value)


@dataclass(frozen=True)
class ReprDefinition(_PayloadSection):
    """Section 5."""

    MIN_SIZE = 6

    @classmethod
    def from_payload(cls, payload: bytes) -> ReprDefinition:
        """Build the section body; raises BuildError if the payload is too small."""
        return cls(bytes(payload))

    def num_points(self) -> int:
        """Number of data points with values in Section 7."""
        return _read_uint(self.payload, 0, 4)

    def repr_tmpl_num(self) -> int:
        """Data Representation Template Number."""
        return _read_uint(self.payload, 4, 2)


@dataclass(frozen=True)
class BitMap:
    """Section 6."""

    bitmap_indicator: int


@dataclass(frozen=True)
class SubmessageIndex:
    """Positions of the sections 0 to 8 forming one submessage.

    ``sections[2]`` is ``None`` when there is no Local Use section.
    """

    message: int
    submessage: int
    sections: tuple[int, int, int | None, int, int, int, int, int, int]