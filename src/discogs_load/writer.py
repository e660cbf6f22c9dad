import logging
from typing import Dict, Iterable, List, Sequence

import psycopg

from discogs_load.batch import BatchSnapshot
from discogs_load.errors import ProgrammingFault, WriteError
from discogs_load.schema import INT4, TEXT, TEXT_ARRAY, TableSchema
from discogs_load.utils import INT4_MAX, INT4_MIN

logger = logging.getLogger(__name__)

# Failures of the bulk-copy channel itself, as opposed to bad rows.
SINK_ERRORS = (psycopg.Error, OSError)


def _is_int4(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and INT4_MIN <= value <= INT4_MAX


def _is_text(value) -> bool:
    return isinstance(value, str)


def _is_text_array(value) -> bool:
    return isinstance(value, (list, tuple)) and all(item is None or isinstance(item, str) for item in value)


TYPE_CHECKS = {
    INT4: _is_int4,
    TEXT: _is_text,
    TEXT_ARRAY: _is_text_array,
}


def encode_row(table_name: str, column_list: Sequence[str], column_types: Sequence[str], record) -> tuple:
    """
    Serialize a record and check it against the declared column types.

    Args:
        table_name (str): Target table, used in error messages.
        column_list (Sequence[str]): Column names in COPY order.
        column_types (Sequence[str]): PostgreSQL type names in the same order.
        record: Any object with a ``to_row()`` method.

    Returns:
        tuple: The row, ready for the bulk-copy channel.

    Raises:
        ProgrammingFault: If the row's arity or a value's type does not match.
    """
    row = tuple(record.to_row())
    if len(row) != len(column_types):
        raise ProgrammingFault(
            f"{table_name}: {type(record).__name__} produced {len(row)} values for {len(column_types)} columns"
        )
    for column, type_name, value in zip(column_list, column_types, row):
        check = TYPE_CHECKS.get(type_name)
        if check is None:
            raise ProgrammingFault(f"{table_name}.{column}: unsupported column type {type_name!r}")
        if value is not None and not check(value):
            raise ProgrammingFault(f"{table_name}.{column}: {value!r} is not a valid {type_name}")
    return row


class BulkWriter:
    """
    Writes drained batches through a sink that opens binary COPY channels.

    The sink must provide ``copy(table, columns, types)``, a context manager
    yielding an object with ``write_row(values)``; leaving the context
    finishes the channel and commits the table's rows.
    """

    def __init__(self, sink):
        self.sink = sink

    def write_table(self, table_name: str, column_list: Sequence[str], column_types: Sequence[str], records: Iterable) -> int:
        if len(column_list) != len(column_types):
            raise ProgrammingFault(f"{table_name}: {len(column_list)} columns but {len(column_types)} types")
        # All rows are checked before the channel opens.
        rows: List[tuple] = [encode_row(table_name, column_list, column_types, record) for record in records]
        try:
            with self.sink.copy(table_name, column_list, column_types) as channel:
                for row in rows:
                    channel.write_row(row)
        except SINK_ERRORS as e:
            raise WriteError(str(e), table=table_name) from e
        logger.debug(f"Copied {len(rows)} rows into {table_name}")
        return len(rows)

    def write_schema(self, table: TableSchema, records: Iterable) -> int:
        return self.write_table(table.name, table.columns, table.types, records)

    def write_batch(self, snapshot: BatchSnapshot, tables: Sequence[TableSchema]) -> Dict[str, int]:
        """
        Write the primary table and then every non-empty related table.

        Tables are committed one at a time; a failure leaves the tables
        already written in place.
        """
        primary, related = tables[0], tables[1:]
        counts = {primary.name: self.write_schema(primary, snapshot.primaries)}
        for table in related:
            records = snapshot.records(table.name)
            if records:
                counts[table.name] = self.write_schema(table, records)
        return counts
