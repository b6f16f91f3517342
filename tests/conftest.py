# File: tests/conftest.py
# Contains pytest fixtures for the integration tests, which run the generator
# against a disposable PostgreSQL container.

import os
import subprocess
import sys
from pathlib import Path
from typing import Any, Dict, Generator

import pytest
# Database connector (needed here for schema loading)
import psycopg2
# Jinja for rendering test config
from jinja2 import Environment, FileSystemLoader


# --- Constants ---
# Assumes conftest.py is in tests/ subdirectory relative to project root
GENERATOR_PROJECT_ROOT = Path(__file__).parent.parent
TEST_SCHEMAS_DIR = GENERATOR_PROJECT_ROOT / "tests" / "schemas"
TEST_CONFIG_TEMPLATES_DIR = GENERATOR_PROJECT_ROOT / "tests" / "config_templates"
INTEGRATION_ENV_VAR = "GO_DAO_GENERATOR_INTEGRATION"


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless explicitly enabled; they need Docker."""
    if os.environ.get(INTEGRATION_ENV_VAR) == "1":
        return
    skip_integration = pytest.mark.skip(reason=f"set {INTEGRATION_ENV_VAR}=1 to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


# --- Fixture for Database Container (using Testcontainers) ---
@pytest.fixture(scope="session")
def pg_service() -> Generator[Dict[str, Any], Any, None]:
    """
    Starts/stops a PostgreSQL container for the test session using testcontainers.
    Yields a dictionary with database connection details.
    """
    from testcontainers.postgres import PostgresContainer

    try:
        pg_container = PostgresContainer(
            image="postgres:15-alpine",
            username="testuser",
            password="testpassword",
            dbname="testdb",
        )
        pg_container.with_exposed_ports(5432)

        print("\nStarting PostgreSQL container via testcontainers...")
        with pg_container as pg:
            # The mapped host port, not 5432
            port = pg.get_exposed_port(5432)
            yield {
                "host": pg.get_container_host_ip(),
                "port": int(port),
                "user": pg.username,
                "password": pg.password,
                "db_name": pg.dbname,
            }
            print("Stopping PostgreSQL container...")
    except Exception as e:
        pytest.fail(f"Failed to start or manage PostgreSQL testcontainer: {e}", pytrace=False)


# --- Fixture for Database Connection ---
@pytest.fixture(scope="session")
def db_connection(pg_service: Dict[str, Any]) -> Generator[Any, Any, None]:
    """Provides a psycopg2 connection to the test database container."""
    try:
        conn = psycopg2.connect(
            dbname=pg_service["db_name"],
            user=pg_service["user"],
            password=pg_service["password"],
            host=pg_service["host"],
            port=pg_service["port"],
            connect_timeout=5,
        )
    except psycopg2.OperationalError as e:
        pytest.fail(f"Failed to connect to the test PostgreSQL database: {e}")
    yield conn
    conn.close()


# --- Fixture to Load Database Schema ---
@pytest.fixture(scope="session")
def library_schema(db_connection):
    """Loads tests/schemas/library.sql into the test database."""
    schema_file = TEST_SCHEMAS_DIR / "library.sql"
    if not schema_file.is_file():
        pytest.fail(f"Test schema file not found: {schema_file}")

    try:
        with db_connection.cursor() as cursor:
            cursor.execute(schema_file.read_text(encoding="utf-8"))
        db_connection.commit()
    except psycopg2.Error as e:
        db_connection.rollback()
        pytest.fail(f"Database error loading schema/data: {e}")
    return schema_file


# --- Fixture for Temporary Output Directory ---
@pytest.fixture(scope="module")
def test_output_dir(tmp_path_factory) -> Path:
    """Module-scoped directory the generated Go files are written to."""
    base_temp_dir = tmp_path_factory.mktemp("generated_module_")
    output_path = base_temp_dir / "go"
    output_path.mkdir()
    return output_path


# --- Fixture to Create Test Configuration File ---
@pytest.fixture(scope="module")
def generator_config_file(pg_service: Dict[str, Any], test_output_dir: Path) -> Path:
    """
    Creates a temporary config.yaml file using a Jinja2 template,
    injecting database details and the temporary output directory path.
    """
    env = Environment(loader=FileSystemLoader(TEST_CONFIG_TEMPLATES_DIR), autoescape=False)
    template = env.get_template("test_config.yaml.j2")
    rendered_config = template.render(
        db_host=pg_service["host"],
        db_port=pg_service["port"],
        db_user=pg_service["user"],
        db_password=pg_service["password"],
        db_name=pg_service["db_name"],
        output_dir=str(test_output_dir),
        log_file=str(test_output_dir.parent / "progress.log"),
    )
    config_file = test_output_dir.parent / "test_run_config.yaml"
    config_file.write_text(rendered_config, encoding="utf-8")
    return config_file


# --- Fixture to Run the Code Generator ---
@pytest.fixture(scope="module")
def run_generator(library_schema, generator_config_file: Path) -> subprocess.CompletedProcess:
    """
    Executes the go-dao-generator CLI as a subprocess and returns the
    completed process; the exit status is left for the tests to check.
    """
    cmd = [
        sys.executable,
        "-m", "go_dao_generator.cli",
        "-c", str(generator_config_file),
        "-v",
        "--no-color",
    ]
    print(f"\nRunning generator command: {' '.join(cmd)}")
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            cwd=GENERATOR_PROJECT_ROOT,
            timeout=90,
        )
    except subprocess.TimeoutExpired:
        pytest.fail("go-dao-generator command timed out.")
    print("--- Generator STDOUT ---")
    print(result.stdout)
    print("--- Generator STDERR ---")
    print(result.stderr)
    return result
