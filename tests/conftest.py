from contextlib import contextmanager

import psycopg
import pytest

from discogs_load.etl import parse_stream
from discogs_load.writer import BulkWriter


class RecordingChannel:
    def __init__(self):
        self.rows = []

    def write_row(self, row):
        self.rows.append(row)


class RecordingSink:
    """In-memory stand-in for PostgresSink; a table counts as committed when its block exits cleanly."""

    def __init__(self, fail_on=None):
        self.fail_on = fail_on
        self.opened = []
        self.committed = []

    @contextmanager
    def copy(self, table, columns, types):
        self.opened.append(table)
        if table == self.fail_on:
            raise psycopg.OperationalError("server closed the connection unexpectedly")
        channel = RecordingChannel()
        yield channel
        self.committed.append((table, tuple(columns), tuple(types), list(channel.rows)))

    def rows(self, table):
        return [row for name, _, _, rows in self.committed if name == table for row in rows]

    def copies(self, table):
        return [rows for name, _, _, rows in self.committed if name == table]


def chunked(data: bytes, size: int):
    for start in range(0, len(data), size):
        yield data[start:start + size]


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def load(sink):
    """Parse an XML string of one entity kind into the recording sink."""
    def _load(xml, data_type, batch_size=10000, chunk_size=37):
        return parse_stream(chunked(xml.encode('utf-8'), chunk_size), data_type, BulkWriter(sink), batch_size=batch_size)
    return _load
