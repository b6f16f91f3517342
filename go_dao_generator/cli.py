import argparse
import logging
import sys
from enum import IntEnum
from typing import List, Optional

from go_dao_generator.codegen import ArtifactRenderer
from go_dao_generator.config_validation import load_config
from go_dao_generator.database import open_connection
from go_dao_generator.exceptions import ConfigurationError, DatabaseConnectionError
from go_dao_generator.introspection_postgres import CatalogIntrospector
from go_dao_generator.pipeline import GenerationPipeline
from go_dao_generator.domain.models import RunReport

from go_dao_generator.colored_logging import (
    attach_progress_log,
    detach_progress_log,
    setup_colored_logging,
    get_colored_logger,
    log_success,
    log_progress,
)

logger = get_colored_logger(__name__)


class RunStatus(IntEnum):
    """Process exit status, in the style of monitoring plugins."""

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="go-dao-generator",
        description="Generate Go JSON shapes, entities and DAOs from a PostgreSQL catalog.",
    )
    parser.add_argument(
        "-c",
        "--config",
        default="./postgres-to-go.config",
        help="Path to the YAML or JSON configuration file (default: %(default)s).",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        help="Directory the Go files are written to. Overrides config file setting.",
    )
    parser.add_argument(
        "--log-file",
        help="Progress log file. Overrides config file setting.",
    )
    parser.add_argument(
        "--package",
        dest="package_name",
        help="Go package name for the generated files. Overrides config file setting.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose DEBUG logging for the generator tool.",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output (useful for CI/CD environments).",
    )
    return parser


def summarize(report: RunReport) -> tuple:
    """Map a finished run to its status and summary message."""
    generated = report.tables_generated
    if not report.has_failures:
        return RunStatus.OK, f"OK - generated {generated} tables"
    return (
        RunStatus.WARNING,
        f"WARNING - generated {generated} tables, skipped {report.tables_skipped}, "
        f"{report.artifact_failures} artifacts failed",
    )


def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    setup_colored_logging(
        level=logging.DEBUG if args.verbose else logging.INFO, use_colors=not args.no_color
    )
    if args.verbose:
        logger.debug("Verbose mode enabled. DEBUG level logging activated.")

    status, message = RunStatus.UNKNOWN, "UNKNOWN - "
    progress = None
    try:
        log_progress(logger, "Loading configuration...")
        config = load_config(args.config, args)
        log_success(logger, "Configuration loaded and validated successfully.")

        try:
            progress = attach_progress_log(config.log_file)
        except OSError as e:
            raise ConfigurationError(
                f"Can not create log file {config.log_file}: {e}"
            ) from e

        with open_connection(config.database) as connection:
            progress.info(f"Connected to {config.database.dbname}")
            pipeline = GenerationPipeline(
                introspector=CatalogIntrospector(connection, progress=progress),
                renderer=ArtifactRenderer(package_name=config.package_name),
                output_dir=config.output_dir,
                progress=progress,
            )
            report = pipeline.run(config.include_tables, config.exclude_tables)
        status, message = summarize(report)

    except ConfigurationError as e:
        logger.error(f"Configuration Error: {e}", exc_info=args.verbose)
        status, message = RunStatus.CRITICAL, f"CRITICAL - {e.message}"
    except DatabaseConnectionError as e:
        logger.error(f"Connection Error: {e}", exc_info=args.verbose)
        status, message = RunStatus.CRITICAL, f"CRITICAL - {e.message}"
    except Exception as e:
        logger.error(f"An unexpected error occurred during generation: {e}", exc_info=True)
        status, message = RunStatus.UNKNOWN, f"UNKNOWN - {e}"

    if progress is not None:
        progress.info(message)
        detach_progress_log(progress)
    print(message)
    return int(status)


def main():
    sys.exit(run())


# --- Script Entry Point ---
if __name__ == "__main__":
    main()
