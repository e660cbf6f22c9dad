import logging
from typing import Dict, List, Optional, Tuple

from discogs_load.batch import Batch
from discogs_load.config import DEFAULT_BATCH_SIZE
from discogs_load.entities import EntitySpec
from discogs_load.errors import MalformedInput
from discogs_load.machine import EndElement, Event, StartElement, Text, root_state, transition, validate_table
from discogs_load.utils import parse_int

logger = logging.getLogger(__name__)


class EntityParser(object):
    """
    Batch-and-flush driver for one entity stream.

    Events are fed one at a time through :meth:`process`. Records are built
    while the entity's state table is walked, collected in a :class:`Batch`,
    and handed to the writer whenever ``batch_size`` primary records have
    accumulated and once more when the collection element closes.

    Args:
        spec (EntitySpec): Document shape and tables of the entity kind.
        writer: Object with ``write_batch(snapshot, tables)``, usually a BulkWriter.
        batch_size (int): Primary records per flush.
        progress: Optional object with ``update(n)``, e.g. a tqdm bar.
    """

    def __init__(self, spec: EntitySpec, writer, batch_size: int = DEFAULT_BATCH_SIZE, progress=None):
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        validate_table(spec.states)
        self.spec = spec
        self.writer = writer
        self.batch_size = batch_size
        self.progress = progress
        self.batch = Batch()
        self.root = root_state(spec.states)
        self.state = self.root
        self.count = 0
        self.flushes = 0
        self._skip_depth = 0
        self._current = None
        self._pending: List[Tuple[str, int, object]] = []
        self._open_related: Dict[str, object] = {}

    @property
    def current_id(self) -> Optional[int]:
        return getattr(self._current, 'id', None)

    def process(self, event: Event) -> None:
        if self._skip_depth:
            if isinstance(event, StartElement):
                self._skip_depth += 1
            elif isinstance(event, EndElement):
                self._skip_depth -= 1
            return
        if isinstance(event, StartElement):
            self._start(event)
        elif isinstance(event, EndElement):
            self._end(event)
        elif isinstance(event, Text):
            self._text(event.text)

    def _start(self, event: StartElement) -> None:
        if self.state is self.root and self._current is None:
            if event.name == self.spec.item_tag:
                self._current = self.spec.record_type.from_attributes(event.attributes)
            elif event.name != self.spec.root_tag:
                self._skip_depth = 1
            return
        next_state = transition(self.spec.states, self.state, event)
        if next_state is self.state:
            self._skip_depth = 1
            return
        self.state = next_state
        node = self.spec.states[next_state]
        if node.opens:
            self._open_related_record(node.opens, event.attributes)

    def _end(self, event: EndElement) -> None:
        if self.state is not self.root:
            self.state = transition(self.spec.states, self.state, event)
        elif self._current is not None and event.name == self.spec.item_tag:
            self._finish_entity()
        elif self._current is None and event.name == self.spec.root_tag:
            self.flush_remaining()

    def _text(self, text: str) -> None:
        node = self.spec.states[self.state]
        if node.attr is None or self._current is None:
            return
        target = self._current if node.owner is None else self._open_related.get(node.owner)
        if target is None:
            return
        value = parse_int(text, node.attr, kind=self.spec.kind, entity_id=self.current_id) if node.numeric else text
        if node.append:
            getattr(target, node.attr).append(value)
        else:
            setattr(target, node.attr, value)

    def _open_related_record(self, table_name: str, attributes) -> None:
        record = self.spec.related[table_name].from_attributes(self.current_id, attributes)
        key = self.batch.next_key(table_name)
        self._pending.append((table_name, key, record))
        self._open_related[table_name] = record

    def _finish_entity(self) -> None:
        record = self._current
        if record.id is None:
            raise MalformedInput(f"<{self.spec.item_tag}> closed without an id", kind=self.spec.kind, field='id')
        if self.batch.insert_if_absent(record.id, record):
            for table_name, key, related in self._pending:
                self.batch.insert_ordered(table_name, key, related)
        else:
            logger.debug(f"Dropping duplicate {self.spec.kind} {record.id}, first occurrence kept")
        self._current = None
        self._pending = []
        self._open_related = {}
        if self.batch.size() >= self.batch_size:
            self.flush()
        self.count += 1
        if self.progress is not None:
            self.progress.update(1)

    def flush(self) -> None:
        snapshot = self.batch.drain()
        counts = self.writer.write_batch(snapshot, self.spec.tables)
        self.flushes += 1
        logger.info(f"Flushed {self.spec.kind} batch {self.flushes}: {counts}")

    def flush_remaining(self) -> None:
        if self.batch.size():
            self.flush()
