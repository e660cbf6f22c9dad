from dataclasses import dataclass
from typing import Dict, Tuple

INT4 = 'int4'
TEXT = 'text'
TEXT_ARRAY = 'text[]'


@dataclass(frozen=True)
class TableSchema:
    """Column order and PostgreSQL types of one COPY target."""
    name: str
    fields: Tuple[Tuple[str, str], ...]

    @property
    def columns(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.fields)

    @property
    def types(self) -> Tuple[str, ...]:
        return tuple(type_ for _, type_ in self.fields)


release_schema = TableSchema('release', (
    ('id', INT4),
    ('status', TEXT),
    ('title', TEXT),
    ('country', TEXT),
    ('released', TEXT),
    ('notes', TEXT),
    ('genres', TEXT_ARRAY),
    ('styles', TEXT_ARRAY),
    ('master_id', INT4),
    ('data_quality', TEXT),
))

release_label_schema = TableSchema('release_label', (
    ('release_id', INT4),
    ('label', TEXT),
    ('catno', TEXT),
    ('label_id', INT4),
))

release_video_schema = TableSchema('release_video', (
    ('release_id', INT4),
    ('duration', INT4),
    ('src', TEXT),
    ('title', TEXT),
))

track_schema = TableSchema('track', (
    ('release_id', INT4),
    ('title', TEXT),
    ('position', TEXT),
    ('duration', TEXT),
))

format_schema = TableSchema('format', (
    ('release_id', INT4),
    ('name', TEXT),
    ('qty', TEXT),
    ('text', TEXT),
    ('descriptions', TEXT_ARRAY),
))

artist_schema = TableSchema('artist', (
    ('id', INT4),
    ('name', TEXT),
    ('real_name', TEXT),
    ('profile', TEXT),
    ('data_quality', TEXT),
    ('name_variations', TEXT_ARRAY),
    ('urls', TEXT_ARRAY),
    ('aliases', TEXT_ARRAY),
    ('members', TEXT_ARRAY),
))

label_schema = TableSchema('label', (
    ('id', INT4),
    ('name', TEXT),
    ('contactinfo', TEXT),
    ('profile', TEXT),
    ('parent_label', TEXT),
    ('sublabels', TEXT_ARRAY),
    ('urls', TEXT_ARRAY),
    ('data_quality', TEXT),
))

master_schema = TableSchema('master', (
    ('id', INT4),
    ('title', TEXT),
    ('release_id', INT4),
    ('year', INT4),
    ('notes', TEXT),
    ('genres', TEXT_ARRAY),
    ('styles', TEXT_ARRAY),
    ('data_quality', TEXT),
))

master_artist_schema = TableSchema('master_artist', (
    ('artist_id', INT4),
    ('master_id', INT4),
    ('name', TEXT),
    ('anv', TEXT),
    ('role', TEXT),
))

# Primary table first, related tables in the order they are written.
SCHEMAS: Dict[str, Tuple[TableSchema, ...]] = {
    "master": (master_schema, master_artist_schema),
    "label": (label_schema,),
    "release": (release_schema, release_label_schema, release_video_schema, track_schema, format_schema),
    "artist": (artist_schema,),
}
