"""A parsed GRIB2 message: its sections, submessages and templates."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from .codetables import CodeTableSet
from .sections import (
    GridDefinition,
    Identification,
    Indicator,
    ProdDefinition,
    ReprDefinition,
    SubmessageIndex,
)

__all__ = [
    "SECT8_ES_SIZE",
    "Grib2",
    "SectionInfo",
    "SubMessage",
    "SubMessageSection",
    "TemplateInfo",
    "get_templates",
]

SECT8_ES_SIZE = 4


@dataclass(frozen=True, order=True)
class TemplateInfo:
    """A template used in a section, identified by section and template number."""

    section: int
    number: int

    def describe(self, tables: CodeTableSet) -> str | None:
        """Name of the template, or ``None`` for sections without templates."""
        table_numbers = {3: (3, 1), 4: (4, 0), 5: (5, 0)}
        entry = table_numbers.get(self.section)
        if entry is None:
            return None
        return str(tables.grib2(*entry, self.number))

    def __str__(self) -> str:
        return f"{self.section}.{self.number}"


def _template_number(body: object) -> int | None:
    if isinstance(body, GridDefinition):
        return body.grid_tmpl_num()
    if isinstance(body, ProdDefinition):
        return body.prod_tmpl_num()
    if isinstance(body, ReprDefinition):
        return body.repr_tmpl_num()
    return None


@dataclass(frozen=True)
class SectionInfo:
    """Position and decoded body of one section in the data."""

    num: int
    offset: int
    size: int
    body: object | None = None

    def template_code(self) -> TemplateInfo | None:
        """Template used by this section, if the section has one."""
        if self.body is None:
            return None
        number = _template_number(self.body)
        if number is None:
            return None
        return TemplateInfo(self.num, number)

    @classmethod
    def end_of_message(cls, offset: int) -> SectionInfo:
        """The End Section (Section 8) starting at ``offset``."""
        return cls(8, offset, SECT8_ES_SIZE, None)


def get_templates(sections: Iterable[SectionInfo]) -> list[TemplateInfo]:
    """Distinct templates used by the sections, sorted."""
    return sorted({code for s in sections if (code := s.template_code()) is not None})


@dataclass(frozen=True)
class SubMessageSection:
    """A section of a submessage together with its position in the section list."""

    index: int
    body: SectionInfo

    def template_code(self) -> TemplateInfo | None:
        """Template used by this section, if any."""
        return self.body.template_code()

    def describe(self, tables: CodeTableSet) -> str | None:
        """Name of the template used by this section, if any."""
        code = self.template_code()
        return None if code is None else code.describe(tables)


_DESCRIBE_FORMAT = """\
Grid:                                   {}
Product:                                {}
  Parameter Category:                   {}
  Parameter:                            {}
  Generating Proceess:                  {}
  Forecast Time:                        {}
  Forecast Time Unit:                   {}
  1st Fixed Surface Type:               {}
  1st Scale Factor:                     {}
  1st Scaled Value:                     {}
  2nd Fixed Surface Type:               {}
  2nd Scale Factor:                     {}
  2nd Scaled Value:                     {}
Data Representation:                    {}
"""


@dataclass(frozen=True)
class SubMessage:
    """The sections 0 to 8 that together describe one surface."""

    section0: SubMessageSection
    section1: SubMessageSection
    section2: SubMessageSection | None
    section3: SubMessageSection
    section4: SubMessageSection
    section5: SubMessageSection
    section6: SubMessageSection
    section7: SubMessageSection
    section8: SubMessageSection

    def indicator(self) -> Indicator:
        """Body of the Indicator Section."""
        body = self.section0.body.body
        if not isinstance(body, Indicator):
            raise ValueError("section 0 does not hold an indicator")
        return body

    def prod_def(self) -> ProdDefinition:
        """Body of the Product Definition Section."""
        body = self.section4.body.body
        if not isinstance(body, ProdDefinition):
            raise ValueError("section 4 does not hold a product definition")
        return body

    def describe(self, tables: CodeTableSet) -> str:
        """Multi-line textual description of the submessage."""
        prod_def = self.prod_def()
        discipline = self.indicator().discipline
        category = prod_def.parameter_category()
        parameter = prod_def.parameter_number()
        process = prod_def.generating_process()

        forecast_time = prod_def.forecast_time()
        ft_unit, ft_value = forecast_time.describe() if forecast_time else ("", "")

        surfaces = prod_def.fixed_surfaces()
        if surfaces is None:
            surface_info = ("",) * 6
        else:
            first, second = surfaces
            surface_info = first.describe(tables) + second.describe(tables)

        category_text = (
            "" if category is None else str(tables.grib2(4, 1, category, discipline))
        )
        parameter_text = (
            ""
            if category is None or parameter is None
            else str(tables.grib2(4, 2, parameter, discipline, category))
        )
        process_text = "" if process is None else str(tables.grib2(4, 3, process))

        return _DESCRIBE_FORMAT.format(
            self.section3.describe(tables) or "",
            self.section4.describe(tables) or "",
            category_text,
            parameter_text,
            process_text,
            ft_value,
            ft_unit,
            *surface_info,
            self.section5.describe(tables) or "",
        )


class Grib2:
    """A GRIB2 message made of located sections and submessage indices.

    Only the submessages of the first message are kept.
    """

    def __init__(
        self, sections: Iterable[SectionInfo], submessages: Iterable[SubmessageIndex]
    ) -> None:
        self.sections: tuple[SectionInfo, ...] = tuple(sections)
        self._indices: list[SubmessageIndex] = [
            index for index in submessages if index.message == 0
        ]

    def info(self) -> tuple[Indicator, Identification]:
        """Bodies of the Indicator and Identification sections."""
        if len(self.sections) >= 2:
            indicator = self.sections[0].body
            identification = self.sections[1].body
            if isinstance(indicator, Indicator) and isinstance(
                identification, Identification
            ):
                return indicator, identification
        raise ValueError("internal data error: sections 0 and 1 are not available")

    def __iter__(self) -> Iterator[SubMessage]:
        return self.submessages()

    def __len__(self) -> int:
        return len(self._indices)

    def _section(self, index: int) -> SubMessageSection | None:
        if 0 <= index < len(self.sections):
            return SubMessageSection(index, self.sections[index])
        return None

    def submessages(self) -> Iterator[SubMessage]:
        """Iterate over submessages; stops at the first incomplete one."""
        for entry in self._indices:
            s = entry.sections
            parts = [
                self._section(0),
                self._section(1),
                self._section(s[3]),
                self._section(s[4]),
                self._section(s[5]),
                self._section(s[6]),
                self._section(s[7]),
                self._section(len(self.sections) - 1),
            ]
            if any(part is None for part in parts):
                return
            local_use = None if s[2] is None else self._section(s[2])
            yield SubMessage(parts[0], parts[1], local_use, *parts[2:])

    def list_templates(self) -> list[TemplateInfo]:
        """Distinct templates used in the message, sorted."""
        return get_templates(self.sections)