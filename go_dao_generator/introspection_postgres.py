import logging
from typing import List, Optional, Iterable

import psycopg2

from go_dao_generator.domain.models import ColumnInfo, ForeignKeyInfo, TableInfo
from go_dao_generator.exceptions import (
    MissingPrimaryKeyError,
    SchemaIntrospectionError,
    TableNotFoundError,
)

logger = logging.getLogger(__name__)


# --- Catalog Queries ---
SQL_TABLE_LIST = (
    "SELECT c.relname AS name "
    "FROM pg_catalog.pg_class c "
    "LEFT JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace "
    "WHERE c.relkind IN ('r', '') "
    "AND n.nspname <> 'pg_catalog' "
    "AND n.nspname <> 'information_schema' "
    "AND n.nspname !~ '^pg_toast' "
    "AND pg_catalog.pg_table_is_visible(c.oid) "
    "ORDER BY 1"
)

SQL_TABLE_OID = (
    "SELECT c.oid, c.relname "
    "FROM pg_catalog.pg_class c "
    "LEFT JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace "
    "WHERE c.relname = %s "
    "AND pg_catalog.pg_table_is_visible(c.oid) "
    "ORDER BY 2"
)

SQL_COLUMNS = (
    "SELECT a.attname, pg_catalog.format_type(a.atttypid, a.atttypmod), a.attnotnull "
    "FROM pg_catalog.pg_attribute a "
    "WHERE a.attrelid = %s AND a.attnum > 0 AND NOT a.attisdropped "
    "ORDER BY a.attnum"
)

SQL_PRIMARY_KEY = (
    "SELECT c2.relname, pg_catalog.pg_get_constraintdef(con.oid, true) "
    "FROM pg_catalog.pg_class c, pg_catalog.pg_class c2, pg_catalog.pg_index i "
    "LEFT JOIN pg_catalog.pg_constraint con "
    "ON (conrelid = i.indrelid AND conindid = i.indexrelid AND contype IN ('p', 'u', 'x')) "
    "WHERE c.oid = %s AND c.oid = i.indrelid AND i.indexrelid = c2.oid "
    "ORDER BY i.indisprimary DESC, i.indisunique DESC, c2.relname"
)

SQL_FOREIGN_KEYS = (
    "SELECT conname, pg_catalog.pg_get_constraintdef(r.oid, true) AS condef "
    "FROM pg_catalog.pg_constraint r "
    "WHERE r.conrelid = %s AND r.contype = 'f' "
    "ORDER BY 1"
)


def select_tables(
    table_names: Iterable[str],
    include_tables: Optional[List[str]] = None,
    exclude_tables: Optional[List[str]] = None,
) -> List[str]:
    """Apply include/exclude filters, keeping the catalog's order."""
    include_set = set(include_tables) if include_tables else None
    exclude_set = set(exclude_tables) if exclude_tables else set()

    selected = []
    for table_name in table_names:
        if table_name in exclude_set:
            logger.info(f"Excluding table: {table_name}")
            continue
        if include_set is not None and table_name not in include_set:
            logger.debug(f"Skipping table '{table_name}' (not in include list).")
            continue
        selected.append(table_name)

    if include_set:
        missing = sorted(include_set.difference(selected))
        if missing:
            logger.warning(f"Included tables not found in catalog: {', '.join(missing)}")
    return selected


class CatalogIntrospector:
    """
    Reads table, column and constraint metadata from pg_catalog.

    ``connection`` is any DB-API 2 connection using the ``%s`` parameter
    style; ``progress`` receives one summary line per described table.
    """

    def __init__(self, connection, progress: Optional[logging.Logger] = None):
        self.connection = connection
        self.progress = progress or logger

    def _fetch(self, sql: str, params: tuple = ()) -> List[tuple]:
        with self.connection.cursor() as cursor:
            cursor.execute(sql, params)
            return cursor.fetchall()

    def list_tables(self) -> List[str]:
        """
        Names of the visible user tables, ordered by name.

        A failed query is logged and yields an empty list.
        """
        try:
            rows = self._fetch(SQL_TABLE_LIST)
        except psycopg2.Error as e:
            logger.error(f"Could not list tables: {e}")
            return []
        table_names = [row[0] for row in rows]
        logger.info(f"Found {len(table_names)} tables in the catalog.")
        return table_names

    def resolve_table(self, table_name: str) -> TableInfo:
        try:
            rows = self._fetch(SQL_TABLE_OID, (table_name,))
        except psycopg2.Error as e:
            raise SchemaIntrospectionError(
                f"Could not look up table '{table_name}': {e}", table=table_name
            ) from e
        if not rows:
            raise TableNotFoundError(f"No visible table named '{table_name}'", table=table_name)
        oid, name = rows[0]
        return TableInfo(oid=str(oid), name=name)

    def load_columns(self, table: TableInfo) -> TableInfo:
        try:
            rows = self._fetch(SQL_COLUMNS, (table.oid,))
        except psycopg2.Error as e:
            raise SchemaIntrospectionError(
                f"Could not load columns of table '{table.name}': {e}", table=table.name
            ) from e
        # attnotnull is true for NOT NULL columns
        table.columns = [
            ColumnInfo(name=name, db_type_string=type_name, nullable=not not_null)
            for name, type_name, not_null in rows
        ]
        return table

    def load_primary_key(self, table: TableInfo) -> TableInfo:
        try:
            rows = self._fetch(SQL_PRIMARY_KEY, (table.oid,))
        except psycopg2.Error as e:
            raise SchemaIntrospectionError(
                f"Could not load primary key of table '{table.name}': {e}", table=table.name
            ) from e
        # A plain index joins to no constraint and comes back with a NULL definition
        if not rows or rows[0][1] is None:
            raise MissingPrimaryKeyError(
                f"Table '{table.name}' has no primary, unique or exclusion constraint",
                table=table.name,
            )
        table.primary_key_name, table.primary_key_definition = rows[0]
        return table

    def load_foreign_keys(self, table: TableInfo) -> TableInfo:
        try:
            rows = self._fetch(SQL_FOREIGN_KEYS, (table.oid,))
        except psycopg2.Error as e:
            raise SchemaIntrospectionError(
                f"Could not load foreign keys of table '{table.name}': {e}", table=table.name
            ) from e
        table.foreign_keys = [
            ForeignKeyInfo(name=name, definition=definition) for name, definition in rows
        ]
        return table

    def describe_table(self, table_name: str) -> TableInfo:
        """
        Resolve a table and load its columns and constraints.

        Raises SchemaIntrospectionError when the table or its columns or
        foreign keys cannot be read. A missing primary key is only noted.
        """
        table = self.resolve_table(table_name)
        self.load_columns(table)
        try:
            self.load_primary_key(table)
        except MissingPrimaryKeyError as e:
            logger.info(e.message)
        self.load_foreign_keys(table)
        self.progress.info(table.summary())
        return table
