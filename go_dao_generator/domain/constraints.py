"""
Constraint analysis for the Go DAO generator.

Key-column membership is only available as the text returned by
``pg_get_constraintdef()``, e.g. ``PRIMARY KEY (id)`` or
``FOREIGN KEY (author_id) REFERENCES author(id)``. The parser recovers
the local column name from that text with fixed patterns; resolution then
annotates the table's columns in one step.
"""

import logging
import re
from dataclasses import replace
from typing import List, Optional, Protocol

from ..exceptions import ConstraintParseError
from .models import ForeignKeyInfo, TableInfo

logger = logging.getLogger(__name__)


class ConstraintParserProtocol(Protocol):
    """Protocol for catalog-dialect constraint parsers."""

    def parse_primary_key(self, definition: Optional[str]) -> Optional[str]:
        """Return the single primary-key column, or None when there is none."""
        ...

    def is_composite_primary_key(self, definition: Optional[str]) -> bool:
        """True when the definition names more than one key column."""
        ...

    def parse_foreign_key(self, definition: str) -> str:
        """Return the local column of a foreign key or raise ConstraintParseError."""
        ...


class PostgresConstraintParser:
    """Parses PostgreSQL ``pg_get_constraintdef()`` output."""

    # Applied after every parenthesis has been turned into a single quote,
    # so "PRIMARY KEY (id)" becomes "PRIMARY KEY 'id'". A column list such as
    # "'a, b'" does not match: composite keys are not recognised.
    PRIMARY_KEY_PATTERN = re.compile(r"PRIMARY KEY '([a-zA-Z0-9_-]+)'")
    COMPOSITE_PRIMARY_KEY_PATTERN = re.compile(r"PRIMARY KEY \(([^)]*,[^)]*)\)")
    FOREIGN_KEY_PATTERN = re.compile(r"FOREIGN KEY \(([a-zA-Z0-9_-]+)\)")

    def parse_primary_key(self, definition: Optional[str]) -> Optional[str]:
        if not definition:
            return None
        quoted = definition.replace("(", "'").replace(")", "'")
        match = self.PRIMARY_KEY_PATTERN.search(quoted)
        if match is None:
            return None
        return match.group(1)

    def is_composite_primary_key(self, definition: Optional[str]) -> bool:
        return bool(definition) and self.COMPOSITE_PRIMARY_KEY_PATTERN.search(definition) is not None

    def parse_foreign_key(self, definition: str) -> str:
        match = self.FOREIGN_KEY_PATTERN.search(definition or "")
        if match is None:
            raise ConstraintParseError(
                "Foreign key definition does not match 'FOREIGN KEY (column)'",
                definition=definition,
            )
        return match.group(1)


def resolve_primary_key(
    table: TableInfo, parser: ConstraintParserProtocol
) -> Optional[str]:
    """
    Name of the column to flag primary, or None.

    A column name that does not exist on the table is treated as no match.
    """
    column_name = parser.parse_primary_key(table.primary_key_definition)
    if column_name is None:
        if parser.is_composite_primary_key(table.primary_key_definition):
            logger.warning(
                f"Table '{table.name}': composite primary key "
                f"'{table.primary_key_definition}' is not supported; no column flagged primary."
            )
        elif table.primary_key_definition:
            logger.debug(
                f"Table '{table.name}': constraint '{table.primary_key_definition}' "
                "does not name a single primary-key column."
            )
        return None
    if table.get_column_by_name(column_name) is None:
        logger.warning(
            f"Table '{table.name}': primary-key column '{column_name}' not found among columns."
        )
        return None
    return column_name


def resolve_foreign_keys(
    table: TableInfo,
    parser: ConstraintParserProtocol,
    sink: Optional[logging.Logger] = None,
) -> List[ForeignKeyInfo]:
    """
    Parse every foreign key of ``table``.

    Unparseable definitions are reported to ``logger`` and to the optional
    progress ``sink``, and come back with an empty column name.
    """
    resolved = []
    for foreign_key in table.foreign_keys:
        try:
            column_name = parser.parse_foreign_key(foreign_key.definition)
        except ConstraintParseError as e:
            e.context.setdefault("constraint", foreign_key.name)
            e.context.setdefault("table", table.name)
            logger.warning(
                f"Table '{table.name}': could not parse foreign key '{foreign_key.name}': {e.message}"
            )
            if sink is not None:
                sink.info(f"{table.name}::{foreign_key.name} {e.message}: {foreign_key.definition}")
            resolved.append(replace(foreign_key, column_name=None))
            continue
        resolved.append(replace(foreign_key, column_name=column_name))
    return resolved


def resolve_constraints(
    table: TableInfo,
    parser: Optional[ConstraintParserProtocol] = None,
    sink: Optional[logging.Logger] = None,
) -> TableInfo:
    """Return ``table`` with its primary and foreign key columns flagged."""
    parser = parser or PostgresConstraintParser()
    primary_key_column = resolve_primary_key(table, parser)
    foreign_keys = resolve_foreign_keys(table, parser, sink)
    resolved = table.with_resolved_keys(primary_key_column, foreign_keys)
    logger.debug(
        f"Table '{table.name}': primary key column={primary_key_column}, "
        f"foreign key columns={[col.name for col in resolved.foreign_key_columns]}"
    )
    return resolved
