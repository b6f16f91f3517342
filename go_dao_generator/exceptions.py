"""
Custom exception hierarchy for the Go DAO generator.

Every error carries optional context and recovery suggestions so that the
CLI can print something actionable before deciding the run status.
"""

import re
from typing import Dict, Any, Optional, List


class GeneratorError(Exception):
    """
    Base exception for all Go DAO generator errors.

    Provides rich context and error recovery guidance.
    """

    default_suggestions: List[str] = []
    error_code: Optional[str] = None

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        error_code: Optional[str] = None,
    ):
        """
        Initialize the exception with context and recovery suggestions.

        Args:
            message: Human-readable error message
            context: Additional context about where/why the error occurred
            suggestions: List of potential solutions or next steps
            error_code: Unique error code for programmatic handling
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or list(self.default_suggestions)
        if error_code:
            self.error_code = error_code

    def __str__(self) -> str:
        """Return formatted error message with context."""
        lines = [self.message]

        if self.error_code:
            lines.append(f"Error Code: {self.error_code}")

        if self.context:
            lines.append("Context:")
            for key, value in self.context.items():
                lines.append(f"  {key}: {value}")

        if self.suggestions:
            lines.append("Suggestions:")
            for suggestion in self.suggestions:
                lines.append(f"  • {suggestion}")

        return "\n".join(lines)


class ConfigurationError(GeneratorError):
    """Raised when configuration is invalid, unreadable or missing."""

    error_code = "CONFIG_ERROR"
    default_suggestions = [
        "Check the configuration file syntax",
        "Verify the 'database' section has host, user and dbname",
        "Check the documentation for configuration examples",
    ]

    def __init__(self, message: str, config_file: Optional[str] = None, **kwargs):
        context = kwargs.pop("context", None) or {}
        if config_file:
            context["config_file"] = config_file
        super().__init__(message, context=context, **kwargs)


class DatabaseConnectionError(GeneratorError):
    """Raised when the catalog connection cannot be opened or pinged."""

    error_code = "DATABASE_CONNECTION_ERROR"
    default_suggestions = [
        "Check database server is running",
        "Verify connection credentials",
        "Check network connectivity",
    ]

    def __init__(self, message: str, dsn: Optional[str] = None, **kwargs):
        context = kwargs.pop("context", None) or {}
        if dsn:
            context["dsn"] = self._mask_credentials(dsn)
        super().__init__(message, context=context, **kwargs)

    @staticmethod
    def _mask_credentials(dsn: str) -> str:
        """Mask the password in a libpq keyword/value connection string."""
        # Values holding spaces or quotes are single-quoted with backslash escapes
        return re.sub(r"password=('(?:[^'\\]|\\.)*'|\S+)", "password=***", dsn)


class SchemaIntrospectionError(GeneratorError):
    """Raised when a catalog query for a table fails."""

    error_code = "INTROSPECTION_ERROR"
    default_suggestions = [
        "Check database user permissions on pg_catalog",
        "Verify the table still exists",
    ]

    def __init__(self, message: str, table: Optional[str] = None, **kwargs):
        context = kwargs.pop("context", None) or {}
        if table:
            context["table"] = table
        super().__init__(message, context=context, **kwargs)


class TableNotFoundError(SchemaIntrospectionError):
    """Raised when no visible table matches a requested name."""

    error_code = "TABLE_NOT_FOUND"
    default_suggestions = [
        "Check the table is in a schema on the search_path",
        "Review the include/exclude table filters",
    ]


class MissingPrimaryKeyError(GeneratorError):
    """Raised when a table has no primary, unique or exclusion constraint."""

    error_code = "NO_PRIMARY_KEY"

    def __init__(self, message: str, table: Optional[str] = None, **kwargs):
        context = kwargs.pop("context", None) or {}
        if table:
            context["table"] = table
        super().__init__(message, context=context, **kwargs)


class ConstraintParseError(GeneratorError):
    """Raised when a constraint definition does not match the expected grammar."""

    error_code = "CONSTRAINT_PARSE_ERROR"

    def __init__(
        self,
        message: str,
        constraint: Optional[str] = None,
        definition: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", None) or {}
        if constraint:
            context["constraint"] = constraint
        if definition is not None:
            context["definition"] = definition
        super().__init__(message, context=context, **kwargs)


class RenderError(GeneratorError):
    """Raised when an artifact cannot be rendered or written."""

    error_code = "RENDER_ERROR"
    default_suggestions = [
        "Check the output directory exists and is writable",
        "Check there is free disk space",
    ]

    def __init__(
        self,
        message: str,
        artifact: Optional[str] = None,
        table: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", None) or {}
        if artifact:
            context["artifact"] = artifact
        if table:
            context["table"] = table
        super().__init__(message, context=context, **kwargs)
