import re
from pathlib import PurePosixPath
from urllib.parse import urlparse
from typing import Optional, Sequence, Tuple
from discogs_load.config import DISCOGS_CONFIGS
from discogs_load.errors import MalformedInput

INT4_MIN = -2 ** 31
INT4_MAX = 2 ** 31 - 1

_INT_RE = re.compile(r'[+-]?[0-9]+')
# Control characters that are never legal in XML 1.0. None of these bytes can
# occur inside a multi-byte UTF-8 sequence, so chunks can be cleaned in isolation.
_INVALID_XML_BYTES = re.compile(rb'[\x00-\x08\x0B\x0C\x0E-\x1F]')


def clean_xml_chunk(chunk: bytes) -> bytes:
    """
    Replace control characters that would make the XML parser fail with spaces.

    Args:
        chunk (bytes): A raw slice of the dump.

    Returns:
        bytes: The same slice with invalid characters replaced.
    """
    return _INVALID_XML_BYTES.sub(b' ', chunk)


def is_gzipped(content: bytes) -> bool:
    return content[:2] == b'\x1f\x8b'


def local_name(tag: str) -> str:
    """Strip a `{namespace}` or `prefix:` qualifier from an element or attribute name."""
    if tag.startswith('{'):
        tag = tag.rsplit('}', 1)[-1]
    return tag.rsplit(':', 1)[-1]


def get_attribute(attributes: Sequence[Tuple[str, str]], name: str) -> Optional[str]:
    for key, value in attributes:
        if key == name:
            return value
    return None


def parse_int(text: Optional[str], field: str, kind: Optional[str] = None, entity_id=None) -> int:
    """
    Convert text to a 32-bit integer, failing on anything else.

    Args:
        text (Optional[str]): The raw text or attribute value.
        field (str): Field name, used in the error message.
        kind (Optional[str]): Entity kind being parsed.
        entity_id: Identifier of the entity being parsed, when known.

    Returns:
        int: The converted value.

    Raises:
        MalformedInput: If the text is missing, not an integer, or out of int4 range.
    """
    if text is None or not _INT_RE.fullmatch(text):
        raise MalformedInput(f"invalid integer {text!r} for {field}", kind=kind, entity_id=entity_id, field=field)
    value = int(text)
    if not INT4_MIN <= value <= INT4_MAX:
        raise MalformedInput(f"integer {text} out of range for {field}", kind=kind, entity_id=entity_id, field=field)
    return value


def detect_data_type(url: str) -> str:
    """
    Guess the entity kind of a dump from its file name, e.g. discogs_20200101_releases.xml.gz.
    """
    name = PurePosixPath(urlparse(url).path).name if is_url(url) else PurePosixPath(url).name
    for data_type, config in DISCOGS_CONFIGS.items():
        if config['root_tag'] in name:
            return data_type
    for data_type in DISCOGS_CONFIGS.keys():
        if data_type in name:
            return data_type
    raise ValueError(f"Unable to detect data type from URL: {url}")


def is_url(path: str) -> bool:
    """
    Check if the given path is a valid URL.

    Args:
        path (str): The path to check.

    Returns:
        bool: True if the path is a valid URL, False otherwise.
    """
    try:
        result = urlparse(path)
        return all([result.scheme, result.netloc])
    except ValueError:
        return False
