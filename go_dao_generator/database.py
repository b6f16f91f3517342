import logging
from contextlib import contextmanager
from typing import Iterator

import psycopg2

from go_dao_generator.config_validation import DatabaseSettings
from go_dao_generator.exceptions import DatabaseConnectionError

logger = logging.getLogger(__name__)


def connect(settings: DatabaseSettings):
    """
    Open a read-only, autocommit psycopg2 connection and ping it.

    Autocommit keeps one failed catalog query from aborting the transaction
    for every table after it.
    """
    dsn = settings.dsn()
    try:
        connection = psycopg2.connect(dsn)
    except psycopg2.Error as e:
        raise DatabaseConnectionError(
            f"Can not connect to postgres database {settings.dbname}: {e}", dsn=dsn
        ) from e

    try:
        connection.set_session(readonly=True, autocommit=True)
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except psycopg2.Error as e:
        connection.close()
        raise DatabaseConnectionError(
            f"Can not ping postgres database {settings.dbname}: {e}", dsn=dsn
        ) from e

    logger.debug(f"Connected to {settings.host}:{settings.port}/{settings.dbname}")
    return connection


@contextmanager
def open_connection(settings: DatabaseSettings) -> Iterator:
    """Context manager around connect() that always closes the connection."""
    connection = connect(settings)
    try:
        yield connection
    finally:
        connection.close()
        logger.debug(f"Closed connection to {settings.dbname}")
