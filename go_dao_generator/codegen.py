import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Dict, Any, Optional

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
)

from go_dao_generator.constants import ArtifactFiles, ArtifactKind, DaoNames, Formatting
from go_dao_generator.domain.models import ColumnInfo, GenerationResult, TableInfo
from go_dao_generator.domain.naming import (
    go_local_name,
    snake_to_upper_camel,
    sql_identifier,
    to_lower_camel,
)
from go_dao_generator.domain.type_mapping import (
    is_unknown_type,
    to_display_format,
    to_target_type,
)
from go_dao_generator.exceptions import RenderError


logger = logging.getLogger(__name__)

# Define the path to the templates directory relative to this file
TEMPLATE_DIR = Path(__file__).parent / "templates"


def jinja2_ljust_filter(value: Any, width: int) -> str:
    """Left-justify ``value`` in a column of ``width`` characters."""
    return str(value).ljust(width)


def go_string_literal(value: str) -> str:
    """Render ``value`` as a double-quoted Go string literal."""
    # JSON string escapes are a subset of Go's interpreted string escapes
    return json.dumps(value)


def setup_jinja_env() -> Environment:
    """Sets up and returns the Jinja2 environment."""
    env = Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        autoescape=False,  # Go source, not markup
        trim_blocks=True,  # Remove first newline after a block tag
        lstrip_blocks=True,  # Strip leading whitespace from lines with block tags
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )
    env.filters["ljust"] = jinja2_ljust_filter
    env.filters["go_string"] = go_string_literal
    return env


@dataclass(frozen=True)
class ColumnContext:
    """Everything the templates need to know about one column."""

    field_name: str
    json_name: str
    local_name: str
    go_type: str
    display_format: str
    is_pk: bool

    @classmethod
    def from_column(cls, column: ColumnInfo) -> "ColumnContext":
        return cls(
            field_name=snake_to_upper_camel(column.name),
            json_name=to_lower_camel(column.name),
            local_name=go_local_name(column.name),
            go_type=to_target_type(column.db_type_string),
            display_format=to_display_format(column.db_type_string),
            is_pk=column.is_pk,
        )


@dataclass(frozen=True)
class InsertStatement:
    """
    The parameterized insert emitted by the generated create function.

    ``columns`` and ``parameters`` list the non-primary columns in table
    order; ``placeholders`` number them from $1; ``returning`` lists every
    column.
    """

    table_name: str
    columns: List[str]
    parameters: List[str]
    placeholders: List[str]
    returning: List[str]

    @classmethod
    def for_table(cls, table: TableInfo) -> "InsertStatement":
        insertable = table.insertable_columns
        return cls(
            table_name=table.name,
            columns=[col.name for col in insertable],
            parameters=[go_local_name(col.name) for col in insertable],
            placeholders=[f"${index}" for index in range(1, len(insertable) + 1)],
            returning=[col.name for col in table.columns],
        )

    def sql(self) -> str:
        table = sql_identifier(self.table_name)
        returning = ",".join(sql_identifier(name) for name in self.returning)
        if not self.columns:
            return f"insert into {table} default values returning {returning}"
        columns = ",".join(sql_identifier(name) for name in self.columns)
        values = ",".join(self.placeholders)
        return f"insert into {table}({columns}) values({values}) returning {returning}"


@dataclass(frozen=True)
class SelectByKeyStatement:
    """The query emitted by the generated load-by-identifier function."""

    table_name: str
    columns: List[str]
    key_column: str

    def sql(self) -> str:
        columns = ",".join(sql_identifier(name) for name in self.columns)
        return (
            f"select {columns} from {sql_identifier(self.table_name)} "
            f"where {sql_identifier(self.key_column)}=$1"
        )


class ArtifactRenderer:
    """
    Renders the shape, entity and DAO Go files for a resolved table.

    Rendering is a pure function of the table; writing is a separate step
    so that one failing artifact does not affect the others.
    """

    def __init__(self, env: Optional[Environment] = None, package_name: str = "main"):
        self.env = env or setup_jinja_env()
        self.package_name = package_name

    def build_context(self, table: TableInfo) -> Dict[str, Any]:
        columns = [ColumnContext.from_column(col) for col in table.columns]

        pk_column = table.primary_key_column
        if pk_column is not None:
            key_column = pk_column.name
            key_type = to_target_type(pk_column.db_type_string)
        else:
            key_column = DaoNames.FALLBACK_KEY_COLUMN
            key_type = DaoNames.FALLBACK_KEY_TYPE

        entity = table.model_name
        display_fields = " ".join(f"{c.field_name}({c.display_format})" for c in columns)
        return {
            "package_name": self.package_name,
            "table_name": table.name,
            "entity_name": entity,
            "shape_name": f"{entity}Json",
            "columns": columns,
            "insert_columns": [c for c in columns if not c.is_pk],
            "display_template": f"{entity}({display_fields})",
            "scan_targets": ", ".join(f"&{c.local_name}" for c in columns),
            "constructor_arguments": ", ".join(c.local_name for c in columns),
            "name_width": max((len(c.field_name) for c in columns), default=0)
            + Formatting.NAME_PADDING,
            "type_width": max((len(c.go_type) for c in columns), default=0),
            "insert": InsertStatement.for_table(table),
            "select": SelectByKeyStatement(
                table_name=table.name,
                columns=[col.name for col in table.columns],
                key_column=key_column,
            ),
            "key_type": key_type,
            "load_parameter": DaoNames.LOAD_PARAMETER,
            "result_variable": DaoNames.RESULT_VARIABLE,
        }

    def render(self, kind: str, table: TableInfo) -> str:
        """Render one artifact; raises RenderError on template failure."""
        template_name = ArtifactFiles.TEMPLATES[kind]
        try:
            template = self.env.get_template(template_name)
            return template.render(self.build_context(table))
        except TemplateError as e:
            raise RenderError(
                f"Could not render template '{template_name}': {e}",
                artifact=kind,
                table=table.name,
            ) from e

    def render_shape(self, table: TableInfo) -> str:
        return self.render(ArtifactKind.SHAPE, table)

    def render_entity(self, table: TableInfo) -> str:
        return self.render(ArtifactKind.ENTITY, table)

    def render_dao(self, table: TableInfo) -> str:
        return self.render(ArtifactKind.DAO, table)

    @staticmethod
    def artifact_path(kind: str, table: TableInfo, output_dir: Path) -> Path:
        return Path(output_dir) / ArtifactFiles.OUTPUT_NAMES[kind].format(name=table.model_name)

    @staticmethod
    def write_artifact(output_path: Path, content: str, kind: str, table_name: str) -> None:
        """Create or overwrite ``output_path``; raises RenderError on I/O failure."""
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)
        except OSError as e:
            raise RenderError(
                f"Could not write '{output_path}': {e}", artifact=kind, table=table_name
            ) from e
        logger.debug(f"Generated file: {output_path}")

    def generate(self, table: TableInfo, output_dir: Path) -> GenerationResult:
        """
        Render and write all three artifacts of ``table``.

        Each artifact is attempted independently; failures are recorded on
        the result rather than raised.
        """
        result = GenerationResult(table_name=table.name)
        unknown_types = sorted(
            {col.db_type_string for col in table.columns if is_unknown_type(to_target_type(col.db_type_string))}
        )
        if unknown_types:
            logger.warning(
                f"Table '{table.name}' has unmapped column types: {', '.join(unknown_types)}"
            )
        for kind in ArtifactKind.ALL:
            output_path = self.artifact_path(kind, table, output_dir)
            try:
                content = self.render(kind, table)
                self.write_artifact(output_path, content, kind, table.name)
            except RenderError as e:
                logger.error(f"Table '{table.name}': {kind} artifact failed: {e.message}")
                result.add_error(f"{kind}: {e.message}")
                continue
            result.written_files.append(str(output_path))
        return result
