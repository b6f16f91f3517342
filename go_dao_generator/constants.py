"""
Centralized constants for the Go DAO generator.

Defaults, generated file naming and the reserved-word sets used when turning
catalog identifiers into Go and SQL text.
"""

from typing import Set


# =============================================================================
# CORE CONFIGURATION
# =============================================================================

class DefaultConfig:
    """Default configuration values."""

    OUTPUT_DIR = "./outputs"
    LOG_FILE = "./postgres-to-go.log"
    PACKAGE_NAME = "main"
    SSLMODE = "disable"
    PORT = 5432


# =============================================================================
# GENERATED FILES
# =============================================================================

class ArtifactKind:
    """The three artifacts generated per table."""

    SHAPE = "shape"
    ENTITY = "entity"
    DAO = "dao"

    ALL = [SHAPE, ENTITY, DAO]


class ArtifactFiles:
    """Template and output file name per artifact; ``{name}`` is the entity name."""

    TEMPLATES = {
        ArtifactKind.SHAPE: "shape.go.j2",
        ArtifactKind.ENTITY: "entity.go.j2",
        ArtifactKind.DAO: "dao.go.j2",
    }

    OUTPUT_NAMES = {
        ArtifactKind.SHAPE: "{name}Json.go",
        ArtifactKind.ENTITY: "{name}.go",
        ArtifactKind.DAO: "{name}DAO.go",
    }


class Formatting:
    """Alignment of generated struct fields."""

    # Added to the longest field name when padding the name column
    NAME_PADDING = 10


class DaoNames:
    """Fixed identifiers used inside generated DAO functions."""

    LOAD_PARAMETER = "id"
    FALLBACK_KEY_COLUMN = "id"
    FALLBACK_KEY_TYPE = "int64"
    RESULT_VARIABLE = "result"


# =============================================================================
# RESERVED WORDS
# =============================================================================

GO_KEYWORDS: Set[str] = {
    "break", "case", "chan", "const", "continue", "default", "defer", "else",
    "fallthrough", "for", "func", "go", "goto", "if", "import", "interface",
    "map", "package", "range", "return", "select", "struct", "switch", "type",
    "var",
}

# Names the generated functions already bind; a column must not shadow them
GO_GENERATED_LOCALS: Set[str] = {"err", "row", "rows", "db", DaoNames.RESULT_VARIABLE}

# PostgreSQL keywords that are reserved and need quoting as identifiers
POSTGRES_RESERVED_WORDS: Set[str] = {
    "all", "analyse", "analyze", "and", "any", "array", "as", "asc",
    "asymmetric", "authorization", "binary", "both", "case", "cast", "check",
    "collate", "collation", "column", "concurrently", "constraint", "create",
    "cross", "current_catalog", "current_date", "current_role",
    "current_schema", "current_time", "current_timestamp", "current_user",
    "default", "deferrable", "desc", "distinct", "do", "else", "end", "except",
    "false", "fetch", "for", "foreign", "freeze", "from", "full", "grant",
    "group", "having", "ilike", "in", "initially", "inner", "intersect",
    "into", "is", "isnull", "join", "lateral", "leading", "left", "like",
    "limit", "localtime", "localtimestamp", "natural", "not", "notnull",
    "null", "offset", "on", "only", "or", "order", "outer", "overlaps",
    "placing", "primary", "references", "returning", "right", "select",
    "session_user", "similar", "some", "symmetric", "system_user", "table",
    "tablesample", "then", "to", "trailing", "true", "union", "unique",
    "user", "using", "variadic", "verbose", "when", "where", "window", "with",
}
