import csv

import pytest

from gribkit.codetables import load_code_tables
from gribkit.context import (
    Grib2,
    SectionInfo,
    SubMessageSection,
    TemplateInfo,
    get_templates,
)
from gribkit.sections import (
    BitMap,
    GridDefinition,
    Identification,
    Indicator,
    ProdDefinition,
    ReprDefinition,
    SubmessageIndex,
)

_COLUMNS = [
    "Title_en",
    "SubTitle_en",
    "CodeFlag",
    "Value",
    "MeaningParameterDescription_en",
    "Note_en",
    "UnitComments_en",
    "Status",
]

_TABLES = {
    (3, 1): [("0", "Latitude/longitude")],
    (4, 0): [
        ("0", "Analysis or forecast at a horizontal level or in a horizontal layer at a point in time")
    ],
    (5, 0): [("0-199", "Reserved"), ("200", "Run length packing with level values")],
    (4, 3): [("0", "Analysis"), ("1", "Initialization"), ("2", "Forecast")],
    (4, 5): [("0", "Reserved"), ("1", "Ground or water surface"), ("255", "Missing")],
}

PROD_PAYLOAD = bytes(
    [0, 0, 0, 0, 193, 0, 2, 153, 255, 0, 0, 0, 0, 0, 0, 0, 40, 1]
    + [255] * 11
)


@pytest.fixture
def tables(tmp_path):
    grib2_dir = tmp_path / "GRIB2"
    grib2_dir.mkdir()
    for (section, number), rows in _TABLES.items():
        path = grib2_dir / f"GRIB2_CodeFlag_{section}_{number}_CodeTable_en.csv"
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(_COLUMNS)
            for code, meaning in rows:
                writer.writerow([f"T{section}.{number}", "", code, "", meaning, "", "", ""])
    return load_code_tables(tmp_path)


def _sections():
    ident = bytes([0, 34, 0, 0, 5, 1, 0, 0x07, 0xE0, 8, 22, 2, 0, 0, 0, 1])
    return [
        SectionInfo(0, 0, 16, Indicator(0, 200)),
        SectionInfo(1, 16, 21, Identification.from_payload(ident)),
        SectionInfo(3, 37, 14, GridDefinition.from_payload(bytes(9))),
        SectionInfo(4, 51, 34, ProdDefinition.from_payload(PROD_PAYLOAD)),
        SectionInfo(
            5, 85, 11, ReprDefinition.from_payload(bytes([0, 1, 0x50, 0, 0, 0xC8]))
        ),
        SectionInfo(6, 96, 6, BitMap(255)),
        SectionInfo(7, 102, 10, None),
        SectionInfo.end_of_message(112),
    ]


def _grib(extra=()):
    index = SubmessageIndex(0, 0, (0, 1, None, 2, 3, 4, 5, 6, 7))
    return Grib2(_sections(), [index, *extra])


def test_get_tmpl_code_normal():
    sect = SectionInfo(
        5,
        8902,
        23,
        ReprDefinition.from_payload(bytes([0x00, 0x01, 0x50, 0x00, 0x00, 0xC8])),
    )
    assert sect.template_code() == TemplateInfo(5, 200)


def test_get_templates_normal():
    def placeholder(num):
        return SectionInfo(num, 0, 0, None)

    sects = [
        placeholder(0),
        placeholder(1),
        SectionInfo(3, 0, 0, GridDefinition.from_payload(bytes(9))),
        SectionInfo(4, 0, 0, ProdDefinition.from_payload(bytes(4))),
        SectionInfo(5, 0, 0, ReprDefinition.from_payload(bytes(6))),
        placeholder(6),
        placeholder(7),
        SectionInfo(
            3, 0, 0, GridDefinition.from_payload(bytes([0, 0, 0, 0, 0, 0, 0, 0, 1]))
        ),
        SectionInfo(4, 0, 0, ProdDefinition.from_payload(bytes(4))),
        SectionInfo(5, 0, 0, ReprDefinition.from_payload(bytes(6))),
        placeholder(6),
        placeholder(7),
        placeholder(8),
    ]
    assert get_templates(sects) == [
        TemplateInfo(3, 0),
        TemplateInfo(3, 1),
        TemplateInfo(4, 0),
        TemplateInfo(5, 0),
    ]


def test_template_info_str():
    assert str(TemplateInfo(5, 200)) == "5.200"


def test_template_info_describe(tables):
    assert TemplateInfo(3, 0).describe(tables) == "Latitude/longitude"
    assert TemplateInfo(5, 200).describe(tables) == "Run length packing with level values"
    assert TemplateInfo(5, 201).describe(tables) == "code '201' is not implemented"
    assert TemplateInfo(6, 0).describe(tables) is None


def test_end_of_message():
    assert SectionInfo.end_of_message(100) == SectionInfo(8, 100, 4, None)


def test_section_without_template():
    assert SectionInfo(6, 0, 6, BitMap(255)).template_code() is None
    assert SubMessageSection(5, SectionInfo(6, 0, 6, BitMap(255))).template_code() is None


def test_info():
    indicator, identification = _grib().info()
    assert indicator.total_length == 200
    assert identification.centre_id() == 34


def test_info_fails_without_bodies():
    grib = Grib2([SectionInfo(0, 0, 16), SectionInfo(1, 16, 21)], [])
    with pytest.raises(ValueError):
        grib.info()


def test_iteration_and_length():
    grib = _grib()
    submessages = list(grib)
    assert len(grib) == 1
    assert len(submessages) == 1
    sub = submessages[0]
    assert sub.section2 is None
    assert [s.index for s in (sub.section3, sub.section4, sub.section5)] == [2, 3, 4]
    assert sub.section8.body.num == 8
    assert sub.indicator().discipline == 0
    assert sub.prod_def().parameter_category() == 193


def test_only_first_message_is_kept():
    other = SubmessageIndex(1, 0, (0, 1, None, 2, 3, 4, 5, 6, 7))
    assert len(_grib([other])) == 1


def test_iteration_stops_at_missing_section():
    broken = SubmessageIndex(0, 1, (0, 1, None, 2, 30, 4, 5, 6, 7))
    assert len(list(_grib([broken]).submessages())) == 1


def test_list_templates():
    assert _grib().list_templates() == [
        TemplateInfo(3, 0),
        TemplateInfo(4, 0),
        TemplateInfo(5, 200),
    ]


def test_prod_def_wrong_body():
    sections = _sections()
    sections[3] = SectionInfo(4, 51, 34, None)
    index = SubmessageIndex(0, 0, (0, 1, None, 2, 3, 4, 5, 6, 7))
    sub = next(iter(Grib2(sections, [index])))
    with pytest.raises(ValueError):
        sub.prod_def()


def test_describe(tables):
    sub = next(iter(_grib()))
    expected = """\
Grid:                                   Latitude/longitude
Product:                                Analysis or forecast at a horizontal level or in a horizontal layer at a point in time
  Parameter Category:                   code '193' is not implemented
  Parameter:                            code '0' is not implemented
  Generating Proceess:                  Forecast
  Forecast Time:                        40
  Forecast Time Unit:                   Minute
  1st Fixed Surface Type:               Ground or water surface
  1st Scale Factor:                     Missing
  1st Scaled Value:                     Missing
  2nd Fixed Surface Type:               code '255' is not implemented
  2nd Scale Factor:                     Missing
  2nd Scaled Value:                     Missing
Data Representation:                    Run length packing with level values
"""
    assert sub.describe(tables) == expected