import csv

import pytest

from gribkit.cct_csv import CodeDB, parse_file_c00, parse_file_c11

C00_CODES = ["0", "", "", "1", "2", "3", "4-254", "255"]
C00_DATES = [
    "Experimental",
    "1 January 1998",
    "1 January 1999",
    "1 January 2000",
    "1 January 2001",
    "Pre-operational to be implemented by next amendment",
    "Future versions",
    "Missing",
]

C11_CODES = [
    "0", "", "1", "2", "3", "4", "5", "6", "7-9", "10-14", "15",
    "16-65534", "65535", "Not applicable",
]
C11_CENTRES = [
    "A", "Comment", "B", ")", "C", "Reserved", "D",
    "Reserved for other centres", "E", "Reserved", "F",
    "Reserved for other centres", "Missing value", "Not used",
]

EXPORT_C00 = """\
/// Common Code Table C-0
const COMMON_CODE_TABLE_00: &[& str] = &[
    "Experimental",
    "1 January 2000",
    "1 January 2001",
    "Pre-operational to be implemented by next amendment",
];"""

EXPORT_C11 = """\
/// Common Code Table C-11
const COMMON_CODE_TABLE_11: &[& str] = &[
    "A",
    "B",
    "",
    "C",
    "",
    "D",
    "",
    "E",
    "E",
    "E",
    "",
    "",
    "",
    "",
    "",
    "F",
];"""


@pytest.fixture
def c00_path(tmp_path):
    path = tmp_path / "C00.csv"
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(
            [
                "GRIB version number",
                "BUFR version number",
                "CREX version number",
                "Effective date",
                "Status",
            ]
        )
        for grib, date in zip(C00_CODES, C00_DATES):
            writer.writerow([grib, "", "", date, "Operational"])
    return path


@pytest.fixture
def c11_path(tmp_path):
    path = tmp_path / "C11.csv"
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(
            ["CREX2", "GRIB2_BUFR4", "OriginatingGeneratingCentre_en", "Status"]
        )
        for code, centre in zip(C11_CODES, C11_CENTRES):
            writer.writerow(["", code, centre, "Operational"])
    return path


def test_parse_file_c00(c00_path):
    table = parse_file_c00(c00_path)
    assert table.desc == "Common Code Table C-0"
    assert table.data == list(zip(C00_CODES, C00_DATES))


def test_parse_file_c11(c11_path):
    table = parse_file_c11(c11_path)
    assert table.desc == "Common Code Table C-11"
    assert table.data == list(zip(C11_CODES, C11_CENTRES))


def test_export_c00(c00_path):
    db = CodeDB()
    db.load(c00_path)
    assert db.export(0) == EXPORT_C00


def test_format(c00_path, c11_path):
    db = CodeDB()
    db.load(c00_path)
    db.load(c11_path)
    assert str(db) == EXPORT_C00 + "\n\n" + EXPORT_C11


def test_format_is_ordered_by_id(c00_path, c11_path):
    db = CodeDB()
    db.load(c11_path)
    db.load(c00_path)
    assert str(db) == EXPORT_C00 + "\n\n" + EXPORT_C11


def test_codetable_to_list(c00_path, c11_path):
    db = CodeDB()
    db.load(c00_path)
    db.load(c11_path)
    assert db.get(0).to_list() == [
        "Experimental",
        "1 January 2000",
        "1 January 2001",
        "Pre-operational to be implemented by next amendment",
    ]
    assert db.get(11).to_list() == (
        ["A", "B", "", "C", "", "D", ""] + ["E"] * 3 + [""] * 5 + ["F"]
    )


def test_export_missing_table():
    assert CodeDB().export(0) == "[]"


def test_get_missing_table():
    assert CodeDB().get(11) is None


def test_empty_db_formats_to_empty_string():
    assert str(CodeDB()) == ""


def test_load_ignores_unknown_file(tmp_path, c00_path):
    other = tmp_path / "C99.csv"
    other.write_bytes(c00_path.read_bytes())
    db = CodeDB()
    db.load(other)
    assert str(db) == ""


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        CodeDB().load(tmp_path / "C00.csv")


def test_missing_column_raises(tmp_path):
    path = tmp_path / "C11.csv"
    path.write_text("CREX2,Status\n0,Operational\n", encoding="utf-8")
    with pytest.raises(ValueError, match="GRIB2_BUFR4"):
        parse_file_c11(path)


def test_wrong_field_count_raises(tmp_path):
    path = tmp_path / "C11.csv"
    path.write_text(
        "CREX2,GRIB2_BUFR4,OriginatingGeneratingCentre_en,Status\n,0,A\n",
        encoding="utf-8",
    )
    with pytest.raises(ValueError, match="number of fields"):
        parse_file_c11(path)