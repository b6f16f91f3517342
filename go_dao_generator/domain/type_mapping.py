"""
PostgreSQL to Go type mapping.

The tables below are the complete set of supported catalog types. Anything
else maps to an ``UNKNOWN : <sql type>`` marker, which is not a valid Go
identifier, so the generated code fails to compile until the type is handled.
"""

import logging
from typing import Dict

logger = logging.getLogger(__name__)

UNKNOWN_TYPE_PREFIX = "UNKNOWN : "

# format_type() spelling -> Go type
GO_TYPES: Dict[str, str] = {
    "text": "string",
    "integer": "int32",
    "bigint": "int64",
    "double precision": "float64",
}

# format_type() spelling -> fmt verb used by the entity's String() method
DISPLAY_FORMATS: Dict[str, str] = {
    "text": "%s",
    "integer": "%d",
    "bigint": "%d",
    "double precision": "%f",
}


def unknown_type(sql_type: str) -> str:
    return f"{UNKNOWN_TYPE_PREFIX}{sql_type}"


def is_unknown_type(mapped: str) -> bool:
    return mapped.startswith(UNKNOWN_TYPE_PREFIX)


def to_target_type(sql_type: str) -> str:
    """Map a catalog type name to the Go type used for fields and locals."""
    go_type = GO_TYPES.get(sql_type)
    if go_type is None:
        logger.debug(f"No Go type mapping for SQL type '{sql_type}'")
        return unknown_type(sql_type)
    return go_type


def to_display_format(sql_type: str) -> str:
    """Map a catalog type name to its fmt verb."""
    verb = DISPLAY_FORMATS.get(sql_type)
    if verb is None:
        return unknown_type(sql_type)
    return verb
