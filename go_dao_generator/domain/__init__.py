"""
Domain module for the Go DAO generator.

This module contains the schema model and the pure transformations applied
to it (naming, type mapping, constraint resolution), separated from the
database driver and the template rendering.
"""

from .models import (
    ColumnInfo,
    ForeignKeyInfo,
    TableInfo,
    GenerationResult,
    RunReport,
)

from .naming import (
    snake_to_upper_camel,
    to_lower_camel,
    entity_name,
)

from .type_mapping import (
    to_target_type,
    to_display_format,
    is_unknown_type,
    UNKNOWN_TYPE_PREFIX,
)

from .constraints import (
    ConstraintParserProtocol,
    PostgresConstraintParser,
    resolve_constraints,
    resolve_primary_key,
    resolve_foreign_keys,
)

__all__ = [
    # Core models
    'ColumnInfo',
    'ForeignKeyInfo',
    'TableInfo',
    'GenerationResult',
    'RunReport',

    # Naming
    'snake_to_upper_camel',
    'to_lower_camel',
    'entity_name',

    # Type mapping
    'to_target_type',
    'to_display_format',
    'is_unknown_type',
    'UNKNOWN_TYPE_PREFIX',

    # Constraints
    'ConstraintParserProtocol',
    'PostgresConstraintParser',
    'resolve_constraints',
    'resolve_primary_key',
    'resolve_foreign_keys',
]
