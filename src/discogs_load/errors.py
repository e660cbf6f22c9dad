from typing import Optional


class DiscogsLoadError(Exception):
    """Base class for every fatal ingestion error."""


class MalformedInput(DiscogsLoadError, ValueError):
    """A required attribute or a typed field could not be converted."""

    def __init__(self, message: str, kind: Optional[str] = None, entity_id=None, field: Optional[str] = None):
        self.kind = kind
        self.entity_id = entity_id
        self.field = field
        where = kind or 'record'
        if entity_id is not None:
            where = f"{where} {entity_id}"
        super().__init__(f"{where}: {message}")


class WriteError(DiscogsLoadError):
    """The bulk-copy channel failed to open, accept a row, or finish."""

    def __init__(self, message: str, table: Optional[str] = None):
        self.table = table
        super().__init__(f"{table}: {message}" if table else message)


class ProgrammingFault(DiscogsLoadError):
    """A record's serialized row does not match its table's declared columns."""
