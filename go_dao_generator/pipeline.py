"""
Generation pipeline: describe every selected table, resolve its key
columns and write its three Go artifacts.

Tables are handled one at a time in catalog order. A table that cannot be
introspected produces no artifacts; an artifact that cannot be written does
not stop the others.
"""

import logging
from pathlib import Path
from typing import List, Optional

from go_dao_generator.codegen import ArtifactRenderer
from go_dao_generator.colored_logging import log_highlight, log_progress, log_section
from go_dao_generator.domain.constraints import (
    ConstraintParserProtocol,
    PostgresConstraintParser,
    resolve_constraints,
)
from go_dao_generator.domain.models import GenerationResult, RunReport, TableInfo
from go_dao_generator.exceptions import SchemaIntrospectionError
from go_dao_generator.introspection_postgres import CatalogIntrospector, select_tables

logger = logging.getLogger(__name__)


class GenerationPipeline:
    def __init__(
        self,
        introspector: CatalogIntrospector,
        renderer: ArtifactRenderer,
        output_dir: Path,
        parser: Optional[ConstraintParserProtocol] = None,
        progress: Optional[logging.Logger] = None,
    ):
        self.introspector = introspector
        self.renderer = renderer
        self.output_dir = Path(output_dir)
        self.parser = parser or PostgresConstraintParser()
        self.progress = progress or logger

    def describe_tables(
        self, table_names: List[str], report: RunReport
    ) -> List[TableInfo]:
        """Introspect each table; failures are recorded as skipped tables."""
        log_section(self.progress, "Describe tables")
        tables = []
        for table_name in table_names:
            try:
                tables.append(self.introspector.describe_table(table_name))
            except SchemaIntrospectionError as e:
                logger.error(f"Skipping table '{table_name}': {e.message}")
                self.progress.info(f"{table_name} {e.message}")
                report.results.append(GenerationResult(table_name=table_name, skipped=True))
        return tables

    def resolve_tables(self, tables: List[TableInfo]) -> List[TableInfo]:
        log_section(self.progress, "Resolve key constraints")
        return [resolve_constraints(table, self.parser, self.progress) for table in tables]

    def generate_tables(self, tables: List[TableInfo], report: RunReport) -> None:
        log_section(self.progress, "Generate Go artifacts")
        for table in tables:
            log_progress(logger, f"Generating {table.name} --> {table.model_name}")
            result = self.renderer.generate(table, self.output_dir)
            report.results.append(result)
            if result.succeeded:
                log_highlight(logger, f"{table.model_name}: {len(result.written_files)} files written")
            else:
                self.progress.info(f"{table.name} {'; '.join(result.errors)}")

    def run(
        self,
        include_tables: Optional[List[str]] = None,
        exclude_tables: Optional[List[str]] = None,
    ) -> RunReport:
        report = RunReport()
        table_names = select_tables(
            self.introspector.list_tables(), include_tables, exclude_tables
        )
        if not table_names:
            logger.warning("No tables selected for generation.")
            return report

        tables = self.describe_tables(table_names, report)
        tables = self.resolve_tables(tables)
        self.generate_tables(tables, report)
        return report
