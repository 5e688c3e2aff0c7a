"""A stack-based virtual machine and value operations for JSON-like data."""

__version__ = "0.1.0"

__all__ = [
    "aggregates",
    "arithmetic",
    "dates",
    "display",
    "errors",
    "machine",
    "opcodes",
    "sequences",
    "temporal",
    "text",
    "variable",
]