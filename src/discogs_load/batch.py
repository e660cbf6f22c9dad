from types import MappingProxyType
from typing import Any, Dict, Mapping, NamedTuple, Tuple

from discogs_load.errors import ProgrammingFault


class BatchSnapshot(NamedTuple):
    """Read-only view of a drained batch, in insertion order."""
    primaries: Tuple[Any, ...]
    related: Mapping[str, Tuple[Any, ...]]

    def records(self, table_name: str) -> Tuple[Any, ...]:
        return self.related.get(table_name, ())


class Batch:
    """
    Records of the open batch.

    Primary records are keyed by their identifier with insert-if-absent
    semantics, so the first occurrence of an id wins until the next drain.
    Related records are keyed by batch-scoped counters handed out by
    :meth:`next_key`; the counters start from zero again after every drain.
    """

    def __init__(self):
        self._primaries: Dict[int, Any] = {}
        self._related: Dict[str, Dict[int, Any]] = {}
        self._counters: Dict[str, int] = {}

    def next_key(self, kind: str) -> int:
        key = self._counters.get(kind, 0)
        self._counters[kind] = key + 1
        return key

    def insert_if_absent(self, key: int, record) -> bool:
        if key in self._primaries:
            return False
        self._primaries[key] = record
        return True

    def insert_ordered(self, kind: str, key: int, record) -> None:
        records = self._related.setdefault(kind, {})
        if records and key <= next(reversed(records)):
            raise ProgrammingFault(f"{kind} key {key} inserted out of order")
        records[key] = record

    def size(self) -> int:
        return len(self._primaries)

    def __len__(self) -> int:
        return self.size()

    def drain(self) -> BatchSnapshot:
        snapshot = BatchSnapshot(
            primaries=tuple(self._primaries.values()),
            related=MappingProxyType({kind: tuple(records.values()) for kind, records in self._related.items()}),
        )
        self._primaries = {}
        self._related = {}
        self._counters = {}
        return snapshot
