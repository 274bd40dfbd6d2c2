from .eth import is_valid_address, parse_units, format_units
from .file import load_lines, load_json, load_toml


__all__ = [
    "is_valid_address",
    "parse_units",
    "format_units",
    "load_lines",
    "load_json",
    "load_toml",
]
