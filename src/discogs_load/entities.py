"""
Document shapes of the four Discogs dump kinds.

Each kind is an :class:`EntitySpec`: its state table, the record type built on
the entity's opening tag, the related record types created inside it, and
the tables a flush writes. Elements not listed in a table (images, companies,
identifiers, extra artists, sub tracks, ...) are skipped by the parser.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Tuple

from discogs_load.config import DISCOGS_CONFIGS
from discogs_load.machine import Node, StateTable
from discogs_load.models import (
    Artist,
    Format,
    Label,
    Master,
    MasterArtist,
    Release,
    ReleaseLabel,
    ReleaseVideo,
    Track,
)
from discogs_load.schema import SCHEMAS, TableSchema


class ReleaseState(Enum):
    RELEASE = 'release'
    TITLE = 'title'
    COUNTRY = 'country'
    RELEASED = 'released'
    NOTES = 'notes'
    GENRES = 'genres'
    GENRE = 'genre'
    STYLES = 'styles'
    STYLE = 'style'
    MASTER_ID = 'master_id'
    DATA_QUALITY = 'data_quality'
    LABELS = 'labels'
    LABEL = 'label'
    VIDEOS = 'videos'
    VIDEO = 'video'
    VIDEO_TITLE = 'video_title'
    TRACKLIST = 'tracklist'
    TRACK = 'track'
    TRACK_POSITION = 'track_position'
    TRACK_TITLE = 'track_title'
    TRACK_DURATION = 'track_duration'
    FORMATS = 'formats'
    FORMAT = 'format'
    FORMAT_DESCRIPTIONS = 'format_descriptions'
    FORMAT_DESCRIPTION = 'format_description'


S = ReleaseState

RELEASE_STATES: StateTable = {
    S.RELEASE: Node('release', children={
        'title': S.TITLE,
        'country': S.COUNTRY,
        'released': S.RELEASED,
        'notes': S.NOTES,
        'genres': S.GENRES,
        'styles': S.STYLES,
        'master_id': S.MASTER_ID,
        'data_quality': S.DATA_QUALITY,
        'labels': S.LABELS,
        'videos': S.VIDEOS,
        'tracklist': S.TRACKLIST,
        'formats': S.FORMATS,
    }),
    S.TITLE: Node('title', S.RELEASE, attr='title'),
    S.COUNTRY: Node('country', S.RELEASE, attr='country'),
    S.RELEASED: Node('released', S.RELEASE, attr='released'),
    S.NOTES: Node('notes', S.RELEASE, attr='notes'),
    S.GENRES: Node('genres', S.RELEASE, children={'genre': S.GENRE}),
    S.GENRE: Node('genre', S.GENRES, attr='genres', append=True),
    S.STYLES: Node('styles', S.RELEASE, children={'style': S.STYLE}),
    S.STYLE: Node('style', S.STYLES, attr='styles', append=True),
    S.MASTER_ID: Node('master_id', S.RELEASE, attr='master_id', numeric=True),
    S.DATA_QUALITY: Node('data_quality', S.RELEASE, attr='data_quality'),
    # <label name=".." catno=".." id=".."/> is resolved from its attributes.
    S.LABELS: Node('labels', S.RELEASE, children={'label': S.LABEL}),
    S.LABEL: Node('label', S.LABELS, opens='release_label'),
    S.VIDEOS: Node('videos', S.RELEASE, children={'video': S.VIDEO}),
    S.VIDEO: Node('video', S.VIDEOS, children={'title': S.VIDEO_TITLE}, opens='release_video'),
    S.VIDEO_TITLE: Node('title', S.VIDEO, attr='title', owner='release_video'),
    S.TRACKLIST: Node('tracklist', S.RELEASE, children={'track': S.TRACK}),
    S.TRACK: Node('track', S.TRACKLIST, children={
        'position': S.TRACK_POSITION,
        'title': S.TRACK_TITLE,
        'duration': S.TRACK_DURATION,
    }, opens='track'),
    S.TRACK_POSITION: Node('position', S.TRACK, attr='position', owner='track'),
    S.TRACK_TITLE: Node('title', S.TRACK, attr='title', owner='track'),
    S.TRACK_DURATION: Node('duration', S.TRACK, attr='duration', owner='track'),
    S.FORMATS: Node('formats', S.RELEASE, children={'format': S.FORMAT}),
    S.FORMAT: Node('format', S.FORMATS, children={'descriptions': S.FORMAT_DESCRIPTIONS}, opens='format'),
    S.FORMAT_DESCRIPTIONS: Node('descriptions', S.FORMAT, children={'description': S.FORMAT_DESCRIPTION}),
    S.FORMAT_DESCRIPTION: Node('description', S.FORMAT_DESCRIPTIONS, attr='descriptions', owner='format', append=True),
}


class ArtistState(Enum):
    ARTIST = 'artist'
    ID = 'id'
    NAME = 'name'
    REAL_NAME = 'real_name'
    PROFILE = 'profile'
    DATA_QUALITY = 'data_quality'
    URLS = 'urls'
    URL = 'url'
    NAME_VARIATIONS = 'name_variations'
    NAME_VARIATION = 'name_variation'
    ALIASES = 'aliases'
    ALIAS = 'alias'
    MEMBERS = 'members'
    MEMBER = 'member'


A = ArtistState

ARTIST_STATES: StateTable = {
    A.ARTIST: Node('artist', children={
        'id': A.ID,
        'name': A.NAME,
        'realname': A.REAL_NAME,
        'profile': A.PROFILE,
        'data_quality': A.DATA_QUALITY,
        'urls': A.URLS,
        'namevariations': A.NAME_VARIATIONS,
        'aliases': A.ALIASES,
        'members': A.MEMBERS,
    }),
    A.ID: Node('id', A.ARTIST, attr='id', numeric=True),
    A.NAME: Node('name', A.ARTIST, attr='name'),
    A.REAL_NAME: Node('realname', A.ARTIST, attr='real_name'),
    A.PROFILE: Node('profile', A.ARTIST, attr='profile'),
    A.DATA_QUALITY: Node('data_quality', A.ARTIST, attr='data_quality'),
    A.URLS: Node('urls', A.ARTIST, children={'url': A.URL}),
    A.URL: Node('url', A.URLS, attr='urls', append=True),
    A.NAME_VARIATIONS: Node('namevariations', A.ARTIST, children={'name': A.NAME_VARIATION}),
    A.NAME_VARIATION: Node('name', A.NAME_VARIATIONS, attr='name_variations', append=True),
    A.ALIASES: Node('aliases', A.ARTIST, children={'name': A.ALIAS}),
    A.ALIAS: Node('name', A.ALIASES, attr='aliases', append=True),
    # <members> interleaves <id> and <name>; only the names are kept.
    A.MEMBERS: Node('members', A.ARTIST, children={'name': A.MEMBER}),
    A.MEMBER: Node('name', A.MEMBERS, attr='members', append=True),
}


class LabelState(Enum):
    LABEL = 'label'
    ID = 'id'
    NAME = 'name'
    CONTACT_INFO = 'contact_info'
    PROFILE = 'profile'
    DATA_QUALITY = 'data_quality'
    URLS = 'urls'
    URL = 'url'
    SUBLABELS = 'sublabels'
    SUBLABEL = 'sublabel'
    PARENT_LABEL = 'parent_label'


L = LabelState

LABEL_STATES: StateTable = {
    L.LABEL: Node('label', children={
        'id': L.ID,
        'name': L.NAME,
        'contactinfo': L.CONTACT_INFO,
        'profile': L.PROFILE,
        'data_quality': L.DATA_QUALITY,
        'urls': L.URLS,
        'sublabels': L.SUBLABELS,
        'parentLabel': L.PARENT_LABEL,
    }),
    L.ID: Node('id', L.LABEL, attr='id', numeric=True),
    L.NAME: Node('name', L.LABEL, attr='name'),
    L.CONTACT_INFO: Node('contactinfo', L.LABEL, attr='contactinfo'),
    L.PROFILE: Node('profile', L.LABEL, attr='profile'),
    L.DATA_QUALITY: Node('data_quality', L.LABEL, attr='data_quality'),
    L.URLS: Node('urls', L.LABEL, children={'url': L.URL}),
    L.URL: Node('url', L.URLS, attr='urls', append=True),
    L.SUBLABELS: Node('sublabels', L.LABEL, children={'label': L.SUBLABEL}),
    L.SUBLABEL: Node('label', L.SUBLABELS, attr='sublabels', append=True),
    L.PARENT_LABEL: Node('parentLabel', L.LABEL, attr='parent_label'),
}


class MasterState(Enum):
    MASTER = 'master'
    MAIN_RELEASE = 'main_release'
    TITLE = 'title'
    YEAR = 'year'
    NOTES = 'notes'
    GENRES = 'genres'
    GENRE = 'genre'
    STYLES = 'styles'
    STYLE = 'style'
    DATA_QUALITY = 'data_quality'
    ARTISTS = 'artists'
    ARTIST = 'artist'
    ARTIST_ID = 'artist_id'
    ARTIST_NAME = 'artist_name'
    ARTIST_ANV = 'artist_anv'
    ARTIST_ROLE = 'artist_role'


M = MasterState

MASTER_STATES: StateTable = {
    M.MASTER: Node('master', children={
        'main_release': M.MAIN_RELEASE,
        'title': M.TITLE,
        'year': M.YEAR,
        'notes': M.NOTES,
        'genres': M.GENRES,
        'styles': M.STYLES,
        'data_quality': M.DATA_QUALITY,
        'artists': M.ARTISTS,
    }),
    M.MAIN_RELEASE: Node('main_release', M.MASTER, attr='release_id', numeric=True),
    M.TITLE: Node('title', M.MASTER, attr='title'),
    M.YEAR: Node('year', M.MASTER, attr='year', numeric=True),
    M.NOTES: Node('notes', M.MASTER, attr='notes'),
    M.GENRES: Node('genres', M.MASTER, children={'genre': M.GENRE}),
    M.GENRE: Node('genre', M.GENRES, attr='genres', append=True),
    M.STYLES: Node('styles', M.MASTER, children={'style': M.STYLE}),
    M.STYLE: Node('style', M.STYLES, attr='styles', append=True),
    M.DATA_QUALITY: Node('data_quality', M.MASTER, attr='data_quality'),
    M.ARTISTS: Node('artists', M.MASTER, children={'artist': M.ARTIST}),
    M.ARTIST: Node('artist', M.ARTISTS, children={
        'id': M.ARTIST_ID,
        'name': M.ARTIST_NAME,
        'anv': M.ARTIST_ANV,
        'role': M.ARTIST_ROLE,
    }, opens='master_artist'),
    M.ARTIST_ID: Node('id', M.ARTIST, attr='artist_id', owner='master_artist', numeric=True),
    M.ARTIST_NAME: Node('name', M.ARTIST, attr='name', owner='master_artist'),
    M.ARTIST_ANV: Node('anv', M.ARTIST, attr='anv', owner='master_artist'),
    M.ARTIST_ROLE: Node('role', M.ARTIST, attr='role', owner='master_artist'),
}


@dataclass(frozen=True)
class EntitySpec:
    kind: str
    root_tag: str
    item_tag: str
    states: StateTable
    record_type: type
    related: Mapping[str, type]
    tables: Tuple[TableSchema, ...]


def _spec(kind: str, states: StateTable, record_type: type, related: Mapping[str, type]) -> EntitySpec:
    config = DISCOGS_CONFIGS[kind]
    return EntitySpec(
        kind=kind,
        root_tag=config['root_tag'],
        item_tag=config['item_tag'],
        states=states,
        record_type=record_type,
        related=related,
        tables=SCHEMAS[kind],
    )


ENTITIES: Dict[str, EntitySpec] = {
    'release': _spec('release', RELEASE_STATES, Release, {
        'release_label': ReleaseLabel,
        'release_video': ReleaseVideo,
        'track': Track,
        'format': Format,
    }),
    'artist': _spec('artist', ARTIST_STATES, Artist, {}),
    'label': _spec('label', LABEL_STATES, Label, {}),
    'master': _spec('master', MASTER_STATES, Master, {'master_artist': MasterArtist}),
}
