"""GRIB2 section bodies, product attributes, submessage structure and WMO code tables."""

__version__ = "0.1.0"