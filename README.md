# gribkit

`gribkit` models the structure of GRIB2 data in Python: the bodies of the
sections a message is made of, the submessages (surfaces) those sections form,
the attributes of each product, and the WMO code tables that turn numeric
codes into readable text.

It depends on nothing outside the standard library.

## Modules

| Module | Contents |
| --- | --- |
| `gribkit.sections` | Section bodies `Indicator`, `Identification`, `LocalUse`, `GridDefinition`, `ProdDefinition`, `ReprDefinition`, `BitMap`; `SubmessageIndex`; `BuildError`; `as_grib_int`. |
| `gribkit.product_attributes` | `ForecastTime` and `FixedSurface`. |
| `gribkit.context` | `Grib2`, `SubMessage`, `SubMessageSection`, `SectionInfo`, `TemplateInfo`, `get_templates`. |
| `gribkit.codetables` | `Table4_4`, `to_code`, `LookupResult`, `ConversionError`, `CodeTableSet`, `load_code_tables`. |
| `gribkit.cct_csv` | `CodeDB`, `parse_file_c00`, `parse_file_c11`: Common Code Tables C-0 and C-11 from CSV. |
| `gribkit.grib2_codeflag_csv` | `CodeDB`, `parse_file`, `parse_opt_arg`, `OptArg`, `SubtitleParseError`: GRIB2 code/flag tables from CSV. |
| `gribkit.codegen` | `CodeRange`, `parse_code_range`, `CodeRangeParseError`, `CodeTable`. |

## Section bodies and product attributes

Section bodies are built from their payload, the bytes that follow the section
length and section number. A payload shorter than the section needs raises
`BuildError` (a `ValueError`).

```python
from gribkit.sections import ProdDefinition

payload = bytes([
    0, 0, 0, 0, 193, 0, 2, 153, 255, 0, 0, 0, 0, 0, 0, 0, 40, 1,
    255, 255, 255, 255, 255, 255, 255, 255, 255, 255, 255,
])
prod_def = ProdDefinition.from_payload(payload)

prod_def.prod_tmpl_num()        # 0
prod_def.parameter_category()   # 193
prod_def.parameter_number()     # 0

forecast_time = prod_def.forecast_time()
str(forecast_time)              # "40 [m]"
forecast_time.describe()        # ("Minute", "40")

first, second = prod_def.fixed_surfaces()
first.surface_type              # 1
first.scale_factor              # -127
first.value_is_nan()            # True: all bits of the scaled value are set
first.value()                   # nan
```

`parameter_category`, `parameter_number`, `generating_process`,
`forecast_time` and `fixed_surfaces` return `None` when the product definition
template is not supported, when the template does not carry the attribute, or
when the payload is too short to hold it.

`Identification` gives the centre and sub-centre, table versions, reference
time significance, production status, data type, and `ref_time()` as a
timezone-aware UTC `datetime`. `GridDefinition` and `ReprDefinition` give the
number of points and their template numbers.

## Code tables

Code tables are read from the WMO CSV files. `load_code_tables(def_dir)`
expects a `CCT` sub-directory holding `C00.csv` and `C11.csv`, and a `GRIB2`
sub-directory holding `GRIB2_CodeFlag_<section>_<number>_CodeTable_en.csv`
files for tables 0.0, 1.1–1.4, 3.1, 4.0–4.5 and 5.0. Files that are absent
are skipped; a missing `def_dir` raises `FileNotFoundError`.

```python
from gribkit.codetables import load_code_tables

tables = load_code_tables("def")
print(tables.common(11, 34))        # name of originating centre 34
print(tables.grib2(4, 4, 1))        # meaning of code 1 in Code Table 4.4
print(tables.grib2(4, 2, 0, 0, 0))  # Code Table 4.2, discipline 0, category 0, code 0
```

Lookups return a `LookupResult`. A code with no entry prints as
`code '255' is not implemented`; its `error` holds a `ConversionError`.

Reserved and missing entries in a table become empty strings, trailing ones
are dropped, and a table whose codes leave a gap that cannot be filled gives
no entries at all.

Units of forecast time are also available as the enum `Table4_4`:

```python
from gribkit.codetables import Table4_4, to_code

to_code(Table4_4, 1)            # Table4_4.HOUR
to_code(Table4_4, 254)          # 254, kept as a plain number
Table4_4.HOUR.short_expr()      # "h"
```

The CSV loaders can also be used on their own. `CodeDB.load(path)` picks the
table from the file name and ignores files it does not recognise;
`CodeDB.export(table_id)` and `str(db)` render tables as static string-array
declarations, one per table, in table order.

## Submessages

`Grib2(sections, submessages)` is built from a sequence of `SectionInfo`
(section number, offset, size and decoded body) and a sequence of
`SubmessageIndex`; only submessages of the first message are kept.

- Iterating over a `Grib2`, or calling `submessages()`, yields `SubMessage`
  objects; `len()` gives their number.
- `info()` returns the `Indicator` and `Identification` bodies.
- `list_templates()` returns the distinct templates in sorted order as
  `TemplateInfo`, printed as `3.0`, `4.0`, `5.200` and so on;
  `TemplateInfo.describe(tables)` gives the template's name.
- `SubMessage.describe(tables)` gives a multi-line summary of the grid,
  product, parameter, generating process, forecast time, fixed surfaces and
  data representation.

## What the package does not do

- It does not read GRIB2 files or byte streams: locating sections in raw data
  and building the `SectionInfo` and `SubmessageIndex` lists is left to the
  caller.
- It does not decode grid values from the data section.
- It has no command-line tool.
- It ships no code table data; the WMO CSV files must be supplied.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.