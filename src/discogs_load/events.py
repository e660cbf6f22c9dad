"""
Structural event source.

lxml's feed parser drives a target object that records element starts,
element ends and character data. Events are handed out after every fed
chunk, so only one chunk's worth of events is held in memory at a time.
"""
from typing import Iterable, Iterator, List

from lxml import etree

from discogs_load.machine import EndElement, Event, StartElement, Text
from discogs_load.utils import clean_xml_chunk, local_name


class EventCollector(object):
    """lxml parser target turning callbacks into events.

    Consecutive character data is joined into a single stripped Text event;
    whitespace between elements produces no event.
    """

    def __init__(self):
        self.events: List[Event] = []
        self._text: List[str] = []

    def start(self, tag, attrib):
        self._flush_text()
        attributes = tuple((local_name(key), value) for key, value in attrib.items())
        self.events.append(StartElement(local_name(tag), attributes))

    def end(self, tag):
        self._flush_text()
        self.events.append(EndElement(local_name(tag)))

    def data(self, data):
        self._text.append(data)

    def comment(self, text):
        pass

    def close(self):
        self._flush_text()

    def drain(self) -> List[Event]:
        events, self.events = self.events, []
        return events

    def _flush_text(self):
        if not self._text:
            return
        text = ''.join(self._text).strip()
        self._text = []
        if text:
            self.events.append(Text(text))


def iter_events(chunks: Iterable[bytes], recover: bool = False) -> Iterator[Event]:
    """
    Parse byte chunks incrementally and yield events in document order.

    Args:
        chunks (Iterable[bytes]): The dump, in arbitrary slices.
        recover (bool): Let libxml2 try to continue past syntax errors.

    Yields:
        Event: StartElement, EndElement and Text events.

    Raises:
        lxml.etree.XMLSyntaxError: On malformed XML when ``recover`` is False.
    """
    collector = EventCollector()
    parser = etree.XMLParser(target=collector, recover=recover, huge_tree=True, resolve_entities=False)
    for chunk in chunks:
        parser.feed(clean_xml_chunk(chunk))
        yield from collector.drain()
    parser.close()
    yield from collector.drain()
