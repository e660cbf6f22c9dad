import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Sequence

import psycopg
from psycopg import sql

from discogs_load.config import DbConfig

logger = logging.getLogger(__name__)

SQL_DIR = Path(__file__).parent / 'sql'


def table_script(data_type: str) -> Path:
    return SQL_DIR / 'tables' / f'{data_type}.sql'


def index_script(data_type: str) -> Path:
    return SQL_DIR / 'indexes' / f'{data_type}.sql'


def connect(config: DbConfig) -> psycopg.Connection:
    """
    Open a connection in autocommit mode, so that every finished COPY commits on its own.
    """
    return psycopg.connect(
        host=config.host,
        port=config.port,
        user=config.user,
        password=config.password,
        dbname=config.name,
        autocommit=True,
    )


def execute_file(conn: psycopg.Connection, path: Path) -> None:
    """Run a static SQL script in one round trip."""
    script = Path(path).read_text(encoding='utf-8')
    conn.execute(script)


def init_tables(conn: psycopg.Connection, data_types: Iterable[str]) -> None:
    for data_type in data_types:
        logger.info(f"Creating the {data_type} tables.")
        execute_file(conn, table_script(data_type))


def create_indexes(conn: psycopg.Connection, data_types: Iterable[str]) -> None:
    for data_type in data_types:
        logger.info(f"Creating the {data_type} indexes.")
        execute_file(conn, index_script(data_type))


def copy_statement(table: str, columns: Sequence[str]) -> sql.Composed:
    return sql.SQL("COPY {} ({}) FROM STDIN (FORMAT BINARY)").format(
        sql.Identifier(table),
        sql.SQL(', ').join(sql.Identifier(column) for column in columns),
    )


class PostgresSink:
    """
    Bulk-copy channels over one psycopg connection.

    ``copy()`` opens ``COPY ... FROM STDIN (FORMAT BINARY)`` for a table and
    yields psycopg's Copy object; rows are encoded by psycopg according to
    the declared type names. Leaving the block sends the trailer and, with
    the connection in autocommit, commits the rows.
    """

    def __init__(self, conn: psycopg.Connection):
        self.conn = conn

    @contextmanager
    def copy(self, table: str, columns: Sequence[str], types: Sequence[str]) -> Iterator[psycopg.Copy]:
        with self.conn.cursor() as cursor:
            with cursor.copy(copy_statement(table, columns)) as copy:
                copy.set_types(list(types))
                yield copy
