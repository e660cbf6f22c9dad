from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple
from discogs_load.errors import MalformedInput
from discogs_load.utils import get_attribute, parse_int

Attributes = Sequence[Tuple[str, str]]


def _optional_int(attributes: Attributes, name: str, kind: str, owner_id) -> Optional[int]:
    value = get_attribute(attributes, name)
    if value is None or value == '':
        return None
    return parse_int(value, name, kind=kind, entity_id=owner_id)


def _required(attributes: Attributes, name: str, kind: str) -> str:
    value = get_attribute(attributes, name)
    if value is None:
        raise MalformedInput(f"missing required attribute {name!r}", kind=kind, field=name)
    return value


@dataclass
class Release:
    id: int
    status: str = ''
    title: str = ''
    country: str = ''
    released: str = ''
    notes: str = ''
    genres: List[str] = field(default_factory=list)
    styles: List[str] = field(default_factory=list)
    master_id: Optional[int] = None
    data_quality: str = ''

    @classmethod
    def from_attributes(cls, attributes: Attributes) -> 'Release':
        release_id = parse_int(_required(attributes, 'id', 'release'), 'id', kind='release')
        status = get_attribute(attributes, 'status')
        if status is None:
            raise MalformedInput("missing required attribute 'status'", kind='release', entity_id=release_id, field='status')
        return cls(id=release_id, status=status)

    def to_row(self) -> tuple:
        return (
            self.id,
            self.status,
            self.title,
            self.country,
            self.released,
            self.notes,
            self.genres,
            self.styles,
            self.master_id,
            self.data_quality,
        )


@dataclass
class ReleaseLabel:
    release_id: int
    label: str = ''
    catno: str = ''
    label_id: Optional[int] = None

    @classmethod
    def from_attributes(cls, release_id: int, attributes: Attributes) -> 'ReleaseLabel':
        return cls(
            release_id=release_id,
            label=get_attribute(attributes, 'name') or '',
            catno=get_attribute(attributes, 'catno') or '',
            label_id=_optional_int(attributes, 'id', 'release', release_id),
        )

    def to_row(self) -> tuple:
        return (self.release_id, self.label, self.catno, self.label_id)


@dataclass
class ReleaseVideo:
    release_id: int
    duration: Optional[int] = None
    src: str = ''
    title: str = ''

    @classmethod
    def from_attributes(cls, release_id: int, attributes: Attributes) -> 'ReleaseVideo':
        return cls(
            release_id=release_id,
            duration=_optional_int(attributes, 'duration', 'release', release_id),
            src=get_attribute(attributes, 'src') or '',
        )

    def to_row(self) -> tuple:
        return (self.release_id, self.duration, self.src, self.title)


@dataclass
class Track:
    release_id: int
    title: str = ''
    position: str = ''
    duration: str = ''

    @classmethod
    def from_attributes(cls, release_id: int, attributes: Attributes) -> 'Track':
        return cls(release_id=release_id)

    def to_row(self) -> tuple:
        return (self.release_id, self.title, self.position, self.duration)


@dataclass
class Format:
    release_id: int
    name: str = ''
    qty: str = ''
    text: str = ''
    descriptions: List[str] = field(default_factory=list)

    @classmethod
    def from_attributes(cls, release_id: int, attributes: Attributes) -> 'Format':
        return cls(
            release_id=release_id,
            name=get_attribute(attributes, 'name') or '',
            qty=get_attribute(attributes, 'qty') or '',
            text=get_attribute(attributes, 'text') or '',
        )

    def to_row(self) -> tuple:
        return (self.release_id, self.name, self.qty, self.text, self.descriptions)


@dataclass
class Artist:
    # Artists carry their id in an <id> child, so it is unknown when the record opens.
    id: Optional[int] = None
    name: str = ''
    real_name: str = ''
    profile: str = ''
    data_quality: str = ''
    name_variations: List[str] = field(default_factory=list)
    urls: List[str] = field(default_factory=list)
    aliases: List[str] = field(default_factory=list)
    members: List[str] = field(default_factory=list)

    @classmethod
    def from_attributes(cls, attributes: Attributes) -> 'Artist':
        return cls()

    def to_row(self) -> tuple:
        return (
            self.id,
            self.name,
            self.real_name,
            self.profile,
            self.data_quality,
            self.name_variations,
            self.urls,
            self.aliases,
            self.members,
        )


@dataclass
class Label:
    id: Optional[int] = None
    name: str = ''
    contactinfo: str = ''
    profile: str = ''
    parent_label: str = ''
    sublabels: List[str] = field(default_factory=list)
    urls: List[str] = field(default_factory=list)
    data_quality: str = ''

    @classmethod
    def from_attributes(cls, attributes: Attributes) -> 'Label':
        return cls()

    def to_row(self) -> tuple:
        return (
            self.id,
            self.name,
            self.contactinfo,
            self.profile,
            self.parent_label,
            self.sublabels,
            self.urls,
            self.data_quality,
        )


@dataclass
class Master:
    id: int
    title: str = ''
    release_id: Optional[int] = None
    year: Optional[int] = None
    notes: str = ''
    genres: List[str] = field(default_factory=list)
    styles: List[str] = field(default_factory=list)
    data_quality: str = ''

    @classmethod
    def from_attributes(cls, attributes: Attributes) -> 'Master':
        return cls(id=parse_int(_required(attributes, 'id', 'master'), 'id', kind='master'))

    def to_row(self) -> tuple:
        return (
            self.id,
            self.title,
            self.release_id,
            self.year,
            self.notes,
            self.genres,
            self.styles,
            self.data_quality,
        )


@dataclass
class MasterArtist:
    master_id: int
    artist_id: Optional[int] = None
    name: str = ''
    anv: str = ''
    role: str = ''

    @classmethod
    def from_attributes(cls, master_id: int, attributes: Attributes) -> 'MasterArtist':
        return cls(master_id=master_id)

    def to_row(self) -> tuple:
        return (self.artist_id, self.master_id, self.name, self.anv, self.role)
