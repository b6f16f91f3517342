"""
Naming convention utilities for the Go DAO generator.

Catalog identifiers are snake_case; generated Go code uses PascalCase for
exported struct fields and type names, and camelCase for parameters,
locals and JSON tags.
"""

import re

from ..constants import GO_KEYWORDS, GO_GENERATED_LOCALS, POSTGRES_RESERVED_WORDS

SIMPLE_SQL_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*$")


def snake_to_upper_camel(name: str) -> str:
    """
    Convert a snake_case identifier to PascalCase.

    Each underscore-separated segment gets its first character upper-cased;
    the rest of the segment is kept as-is. Empty segments produced by
    leading, trailing or doubled underscores disappear.

    Example:
        >>> snake_to_upper_camel("user_id")
        'UserId'
        >>> snake_to_upper_camel("userID")
        'UserID'
        >>> snake_to_upper_camel("2fa_code")
        '2faCode'
    """
    if not isinstance(name, str):
        raise TypeError(f"Expected string, got {type(name).__name__}")

    return "".join(segment[:1].upper() + segment[1:] for segment in name.split("_"))


def to_lower_camel(name: str) -> str:
    """
    Convert a snake_case identifier to camelCase.

    Example:
        >>> to_lower_camel("user_id")
        'userId'
    """
    pascal = snake_to_upper_camel(name)
    return pascal[:1].lower() + pascal[1:]


def entity_name(table_name: str) -> str:
    """Go type name for a table's entity struct."""
    return snake_to_upper_camel(table_name)


def go_local_name(name: str) -> str:
    """
    camelCase name for a generated parameter or local variable.

    Go keywords and the names generated functions bind themselves get a
    trailing underscore.
    """
    local = to_lower_camel(name)
    if local in GO_KEYWORDS or local in GO_GENERATED_LOCALS:
        return local + "_"
    return local


def sql_identifier(name: str) -> str:
    """Catalog identifier as it must appear in generated SQL text."""
    if SIMPLE_SQL_IDENTIFIER.match(name) and name not in POSTGRES_RESERVED_WORDS:
        return name
    return '"' + name.replace('"', '""') + '"'
