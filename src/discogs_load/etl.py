import logging
from typing import Iterable, List, Optional, Sequence

from tqdm import tqdm

from discogs_load import db
from discogs_load.config import DISCOGS_CONFIGS, DbConfig
from discogs_load.entities import ENTITIES
from discogs_load.errors import DiscogsLoadError
from discogs_load.events import iter_events
from discogs_load.io import DEFAULT_CHUNK_SIZE, open_dump
from discogs_load.parser import EntityParser
from discogs_load.utils import detect_data_type
from discogs_load.writer import BulkWriter

# Configure logger
logger = logging.getLogger(__name__)


def parse_stream(
        chunks: Iterable[bytes],
        data_type: str,
        writer,
        batch_size: int,
        progress=None,
        recover: bool = False) -> EntityParser:
    """
    Feed a dump's bytes through the event source and the entity parser.

    Args:
        chunks (Iterable[bytes]): The XML document in arbitrary slices.
        data_type (str): One of 'release', 'artist', 'label', 'master'.
        writer: Receives every flushed batch, usually a BulkWriter.
        batch_size (int): Primary records per flush.
        progress: Optional progress counter with ``update(n)``.
        recover (bool): Let the XML parser continue past syntax errors.

    Returns:
        EntityParser: The parser, for its counters.
    """
    parser = EntityParser(ENTITIES[data_type], writer, batch_size=batch_size, progress=progress)
    try:
        for event in iter_events(chunks, recover=recover):
            parser.process(event)
    except DiscogsLoadError:
        logger.error(f"Aborting {data_type} ingestion near {data_type} {parser.current_id} after {parser.count} records")
        raise
    if parser.batch.size():
        # Only reachable when the collection element never closed, i.e. in recover mode.
        logger.warning(f"{data_type} stream ended without </{parser.spec.root_tag}>, flushing {parser.batch.size()} records")
        parser.flush_remaining()
    return parser


def load_dump(
        input_file: str,
        config: DbConfig,
        sink=None,
        data_type: Optional[str] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        recover: bool = False,
        use_tqdm: bool = True) -> int:
    """
    Load one Discogs dump into its tables.

    Args:
        input_file (str): The input XML file path or URL, plain or gzip-compressed.
        config (DbConfig): Connection parameters and batch size.
        sink: Bulk-copy sink; a PostgresSink over a new connection when omitted.
        data_type (Optional[str]): Entity kind; detected from the file name when omitted.
        chunk_size (int): Bytes read from the input at a time.
        recover (bool): Let the XML parser continue past syntax errors.
        use_tqdm (bool): Whether to use tqdm for progress tracking.

    Returns:
        int: The number of primary records parsed.

    Raises:
        DiscogsLoadError: On malformed records or failed writes.
    """
    data_type = data_type or detect_data_type(input_file)
    logger.info(f"Loading {data_type} dump {input_file} in batches of {config.batch_size}")

    conn = None
    if sink is None:
        conn = db.connect(config)
        sink = db.PostgresSink(conn)

    try:
        with tqdm(
                total=DISCOGS_CONFIGS[data_type]['expected_count'],
                unit=f" {DISCOGS_CONFIGS[data_type]['root_tag']}",
                disable=not use_tqdm) as progress:
            parser = parse_stream(
                open_dump(input_file, chunk_size=chunk_size),
                data_type,
                BulkWriter(sink),
                batch_size=config.batch_size,
                progress=progress,
                recover=recover,
            )
        logger.info(f"Finished {input_file}: {parser.count} {data_type} records in {parser.flushes} batches")
        return parser.count
    finally:
        if conn is not None:
            conn.close()


def run(
        input_files: Sequence[str],
        config: DbConfig,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        recover: bool = False,
        use_tqdm: bool = True) -> List[int]:
    """
    Create tables and load every dump, or only create indexes when
    ``config.create_indexes`` is set.

    Tables are (re)created once per entity kind before any file is loaded.
    """
    data_types = []
    for input_file in input_files:
        data_type = detect_data_type(input_file)
        if data_type not in data_types:
            data_types.append(data_type)

    if config.create_indexes:
        with db.connect(config) as conn:
            db.create_indexes(conn, data_types or list(DISCOGS_CONFIGS))
        return []

    with db.connect(config) as conn:
        db.init_tables(conn, data_types)
        sink = db.PostgresSink(conn)
        return [
            load_dump(input_file, config, sink=sink, chunk_size=chunk_size, recover=recover, use_tqdm=use_tqdm)
            for input_file in input_files
        ]
