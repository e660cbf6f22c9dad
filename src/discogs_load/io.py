import gzip
import logging
import zlib
from typing import Iterator

import requests

from discogs_load.utils import is_gzipped, is_url

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024 * 1024


class GzipStreamReader:
    """
    A streaming reader for gzip-compressed files that decompresses data on the fly.
    """
    def __init__(self, file_path: str, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self.file_path = file_path
        self.chunk_size = chunk_size
        self.raw_file = None
        self.gzip_file = None
        self._initialize_stream()

    def _initialize_stream(self):
        self.raw_file = open(self.file_path, 'rb')
        self.gzip_file = gzip.GzipFile(fileobj=self.raw_file)

    def __iter__(self) -> Iterator[bytes]:
        return self

    def __next__(self) -> bytes:
        if self.gzip_file is None:
            raise StopIteration
        try:
            chunk = self.gzip_file.read(self.chunk_size)
        except Exception:
            self.close()
            raise
        if not chunk:
            self.close()
            raise StopIteration
        return chunk

    def close(self):
        if self.gzip_file:
            try:
                self.gzip_file.close()
            finally:
                self.gzip_file = None

        if self.raw_file:
            try:
                self.raw_file.close()
            finally:
                self.raw_file = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def read_file_chunks(file_path: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
    """
    Yield the decompressed content of a local dump, plain or gzip-compressed.

    Args:
        file_path (str): Path of the dump.
        chunk_size (int): Size of chunks to yield at a time.

    Yields:
        bytes: Raw XML chunks.
    """
    with open(file_path, 'rb') as file:
        compressed = is_gzipped(file.read(2))
    if compressed:
        logger.info(f"Decompressing gzip content from {file_path}")
        with GzipStreamReader(file_path, chunk_size=chunk_size) as reader:
            yield from reader
        return
    with open(file_path, 'rb') as file:
        while True:
            chunk = file.read(chunk_size)
            if not chunk:
                break
            yield chunk


def read_url_chunks(url: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
    """
    Stream a remote dump, gunzipping it on the fly when needed.

    Raises:
        requests.HTTPError: If the server answers with an error status.
    """
    with requests.get(url, stream=True) as response:
        response.raise_for_status()
        decompressor = None
        first = True
        for chunk in response.iter_content(chunk_size=chunk_size):
            if not chunk:  # filter out keep-alive new chunks
                continue
            if first:
                first = False
                if is_gzipped(chunk):
                    logger.info(f"Decompressing gzip stream from {url}")
                    decompressor = zlib.decompressobj(16 + zlib.MAX_WBITS)
            if decompressor is None:
                yield chunk
            else:
                data = decompressor.decompress(chunk)
                if data:
                    yield data
        if decompressor is not None:
            tail = decompressor.flush()
            if tail:
                yield tail


def open_dump(path_or_url: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
    if is_url(path_or_url):
        return read_url_chunks(path_or_url, chunk_size=chunk_size)
    return read_file_chunks(path_or_url, chunk_size=chunk_size)
