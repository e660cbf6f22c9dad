import gzip

import pytest

from conftest import RecordingSink
from discogs_load import db, etl
from discogs_load.config import DbConfig
from discogs_load.errors import WriteError


RELEASES = '''<releases>
<release id="1" status="Accepted"><title>One</title><tracklist><track><position>A</position></track></tracklist></release>
<release id="2" status="Accepted"><title>Two</title></release>
<release id="3" status="Accepted"><title>Three</title></release>
</releases>'''


class FakeConnection:
    def __init__(self):
        self.scripts = []
        self.closed = False

    def execute(self, script):
        self.scripts.append(script)

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


@pytest.fixture
def dump(tmp_path):
    path = tmp_path / 'discogs_20240101_releases.xml.gz'
    path.write_bytes(gzip.compress(RELEASES.encode('utf-8')))
    return str(path)


@pytest.fixture
def fake_db(monkeypatch):
    connections = []
    sink = RecordingSink()

    def connect(config):
        conn = FakeConnection()
        connections.append(conn)
        return conn

    monkeypatch.setattr(db, 'connect', connect)
    monkeypatch.setattr(db, 'PostgresSink', lambda conn: sink)
    return connections, sink


def test_load_dump_with_sink(dump):
    sink = RecordingSink()

    count = etl.load_dump(dump, DbConfig(batch_size=2), sink=sink, use_tqdm=False)

    assert count == 3
    assert [len(rows) for rows in sink.copies('release')] == [2, 1]
    assert sink.rows('track') == [(1, '', 'A', '')]


def test_load_dump_opens_and_closes_its_own_connection(dump, fake_db):
    connections, sink = fake_db

    etl.load_dump(dump, DbConfig(), use_tqdm=False)

    assert len(connections) == 1
    assert connections[0].closed
    assert [row[2] for row in sink.rows('release')] == ['One', 'Two', 'Three']


def test_load_dump_closes_connection_on_write_error(dump, fake_db, monkeypatch):
    connections, sink = fake_db
    sink.fail_on = 'release'

    with pytest.raises(WriteError):
        etl.load_dump(dump, DbConfig(), use_tqdm=False)

    assert connections[0].closed


def test_run_creates_tables_once_then_loads(dump, fake_db):
    connections, sink = fake_db

    counts = etl.run([dump, dump], DbConfig(batch_size=10), use_tqdm=False)

    assert counts == [3, 3]
    assert connections[0].scripts == [db.table_script('release').read_text(encoding='utf-8')]
    assert len(sink.copies('release')) == 2


def test_run_create_indexes_only(fake_db):
    connections, sink = fake_db

    assert etl.run([], DbConfig(create_indexes=True), use_tqdm=False) == []

    assert connections[0].scripts == [
        db.index_script(kind).read_text(encoding='utf-8') for kind in ['artist', 'release', 'master', 'label']
    ]
    assert sink.committed == []


def test_sql_scripts_exist_for_every_kind():
    for kind in ['artist', 'release', 'master', 'label']:
        assert 'CREATE TABLE' in db.table_script(kind).read_text(encoding='utf-8')
        assert 'CREATE INDEX' in db.index_script(kind).read_text(encoding='utf-8')

