"""
Core domain models for the Go DAO generator.

These models hold what the catalog reports about a table. They are
independent of the database driver and of the Go templates, and serve as
the hand-off between introspection, constraint resolution and rendering.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional, Set

from .naming import entity_name


@dataclass(frozen=True)
class ColumnInfo:
    """
    A single table column.

    Instances are immutable: introspection creates them with both key flags
    unset and constraint resolution replaces the whole column list with
    annotated copies.
    """

    name: str
    db_type_string: str  # as rendered by pg_catalog.format_type()
    nullable: bool = True
    is_pk: bool = False
    is_foreign_key: bool = False

    def with_flags(self, is_pk: bool, is_foreign_key: bool) -> "ColumnInfo":
        return replace(self, is_pk=is_pk, is_foreign_key=is_foreign_key)


@dataclass
class ForeignKeyInfo:
    """A foreign-key constraint as reported by pg_get_constraintdef()."""

    name: str
    definition: str
    column_name: Optional[str] = None  # filled in by constraint resolution

    @property
    def is_resolved(self) -> bool:
        return bool(self.column_name)


@dataclass
class TableInfo:
    """
    A database table with its columns and raw constraint definitions.

    ``columns`` keeps the catalog's attribute-number order. Nothing
    downstream re-sorts it.
    """

    oid: str
    name: str
    columns: List[ColumnInfo] = field(default_factory=list)
    primary_key_name: Optional[str] = None
    primary_key_definition: Optional[str] = None
    foreign_keys: List[ForeignKeyInfo] = field(default_factory=list)

    @property
    def model_name(self) -> str:
        """PascalCase Go type name for this table."""
        return entity_name(self.name)

    @property
    def has_primary_key_constraint(self) -> bool:
        return self.primary_key_name is not None

    @property
    def primary_key_column(self) -> Optional[ColumnInfo]:
        """The column flagged primary, if constraint resolution found one."""
        return next((col for col in self.columns if col.is_pk), None)

    @property
    def foreign_key_columns(self) -> List[ColumnInfo]:
        return [col for col in self.columns if col.is_foreign_key]

    @property
    def insertable_columns(self) -> List[ColumnInfo]:
        """Columns supplied by the caller of the generated create function."""
        return [col for col in self.columns if not col.is_pk]

    def get_column_by_name(self, name: str) -> Optional[ColumnInfo]:
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def with_resolved_keys(
        self, primary_key_column: Optional[str], foreign_keys: List[ForeignKeyInfo]
    ) -> "TableInfo":
        """
        Return a copy whose columns carry their final key flags.

        ``foreign_keys`` replaces the table's records; only the resolved ones
        flag a column. The original table is left untouched.
        """
        foreign_key_columns: Set[str] = {
            fk.column_name for fk in foreign_keys if fk.is_resolved
        }
        columns = [
            col.with_flags(
                is_pk=primary_key_column is not None and col.name == primary_key_column,
                is_foreign_key=col.name in foreign_key_columns,
            )
            for col in self.columns
        ]
        return replace(self, columns=columns, foreign_keys=list(foreign_keys))

    def summary(self) -> str:
        """One-line progress description written to the progress log."""
        parts = [f"{self.oid}::{self.name}", f"columns::{len(self.columns)}"]
        if self.has_primary_key_constraint:
            parts.append(f"{self.primary_key_name}::{self.primary_key_definition}")
        else:
            parts.append("NoPrimaryKey")
        if self.foreign_keys:
            parts.append(f"foreignKeys::{len(self.foreign_keys)}")
        else:
            parts.append("NoForeignKeys")
        return " ".join(parts)


@dataclass
class GenerationResult:
    """Outcome of generating the three artifacts for one table."""

    table_name: str
    written_files: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    skipped: bool = False

    @property
    def succeeded(self) -> bool:
        return not self.skipped and not self.errors

    def add_error(self, error: str):
        self.errors.append(error)


@dataclass
class RunReport:
    """Aggregated outcome of one generator run."""

    results: List[GenerationResult] = field(default_factory=list)

    @property
    def tables_generated(self) -> int:
        return sum(1 for r in self.results if r.succeeded)

    @property
    def tables_skipped(self) -> int:
        return sum(1 for r in self.results if r.skipped)

    @property
    def artifact_failures(self) -> int:
        return sum(len(r.errors) for r in self.results if not r.skipped)

    @property
    def has_failures(self) -> bool:
        return any(not r.succeeded for r in self.results)
