"""
Release stream parsing, end to end from XML text to the rows handed to the sink.
"""
import math

import pytest

from discogs_load.errors import MalformedInput
from discogs_load.schema import SCHEMAS


SCENARIO = '''<?xml version="1.0" encoding="UTF-8"?>
<releases>
  <release id="123" status="Accepted">
    <title>Test Album</title>
    <genres>
      <genre>Rock</genre>
      <genre>Jazz</genre>
    </genres>
    <tracklist>
      <track>
        <position>A1</position>
        <title>Intro</title>
        <duration>1:30</duration>
      </track>
    </tracklist>
  </release>
</releases>'''


FULL_RELEASE = '''<releases>
<release id="1" status="Accepted">
  <images><image height="600" type="primary" uri="" uri150="" width="600"/></images>
  <artists><artist><id>1</id><name>The Persuader</name><anv/><join/><role/><tracks/></artist></artists>
  <title>Stockholm</title>
  <labels>
    <label name="Svek" catno="SK032" id="5"/>
    <label name="Svek" catno="SK 032"/>
  </labels>
  <extraartists><artist><id>239</id><name>Jesper Dahlback</name><role>Music By [All Tracks By]</role></artist></extraartists>
  <formats>
    <format name="Vinyl" qty="2" text="">
      <descriptions><description>12"</description><description>33 &#8531; RPM</description></descriptions>
    </format>
    <format name="CD"/>
  </formats>
  <genres><genre>Electronic</genre></genres>
  <styles><style>Deep House</style></styles>
  <country>Sweden</country>
  <released>1999-03-00</released>
  <notes>The song titles are the names of Stockholm's districts.</notes>
  <data_quality>Needs Vote</data_quality>
  <master_id is_main_release="true">5427</master_id>
  <tracklist>
    <track><position>A</position><title>Östermalm</title><duration>4:45</duration></track>
    <track><position>B1</position><title>Vasastaden</title><duration>6:11</duration></track>
    <track><position>B2</position><title>Kungsholmen</title><duration>2:49</duration></track>
  </tracklist>
  <identifiers><identifier type="Matrix / Runout" value="MPO SK 032 A1"/></identifiers>
  <videos>
    <video duration="290" embed="true" src="https://www.youtube.com/watch?v=MIgQNVhYILA">
      <title>The Persuader - Östermalm</title>
      <description>Östermalm</description>
    </video>
  </videos>
  <companies><company><id>271046</id><name>The Globe Studios</name></company></companies>
</release>
</releases>'''


def release_xml(*bodies):
    return '<releases>' + ''.join(bodies) + '</releases>'


def release(release_id, title='', extra=''):
    return f'<release id="{release_id}" status="Accepted"><title>{title}</title>{extra}</release>'


def test_single_release_scenario(load, sink):
    parser = load(SCENARIO, 'release', batch_size=1)

    assert parser.flushes == 1
    assert sink.rows('release') == [
        (123, 'Accepted', 'Test Album', '', '', '', ['Rock', 'Jazz'], [], None, ''),
    ]
    assert sink.rows('track') == [(123, 'Intro', 'A1', '1:30')]
    assert len(sink.copies('release')) == 1


def test_full_release_fields(load, sink):
    load(FULL_RELEASE, 'release')

    (row,) = sink.rows('release')
    assert row == (
        1,
        'Accepted',
        'Stockholm',
        'Sweden',
        '1999-03-00',
        "The song titles are the names of Stockholm's districts.",
        ['Electronic'],
        ['Deep House'],
        5427,
        'Needs Vote',
    )
    assert sink.rows('release_label') == [(1, 'Svek', 'SK032', 5), (1, 'Svek', 'SK 032', None)]
    assert sink.rows('format') == [
        (1, 'Vinyl', '2', '', ['12"', '33 ⅓ RPM']),
        (1, 'CD', '', '', []),
    ]
    assert sink.rows('release_video') == [
        (1, 290, 'https://www.youtube.com/watch?v=MIgQNVhYILA', 'The Persuader - Östermalm'),
    ]


def test_tracks_keep_document_order(load, sink):
    load(FULL_RELEASE, 'release')

    assert [row[2] for row in sink.rows('track')] == ['A', 'B1', 'B2']
    assert [row[1] for row in sink.rows('track')] == ['Östermalm', 'Vasastaden', 'Kungsholmen']


def test_columns_match_declared_schema(load, sink):
    load(FULL_RELEASE, 'release')

    declared = {table.name: (table.columns, table.types) for table in SCHEMAS['release']}
    for table, columns, types, _ in sink.committed:
        assert (columns, types) == declared[table]
    assert [entry[0] for entry in sink.committed] == ['release', 'release_label', 'release_video', 'track', 'format']


@pytest.mark.parametrize("count,batch_size", [
    (0, 3),
    (1, 1),
    (5, 1),
    (5, 2),
    (6, 3),
    (7, 10),
    (25, 4),
])
def test_flush_count_is_ceil_of_records_over_batch_size(load, sink, count, batch_size):
    xml = release_xml(*(release(i, f'Album {i}') for i in range(1, count + 1)))

    parser = load(xml, 'release', batch_size=batch_size)

    assert parser.count == count
    assert parser.flushes == math.ceil(count / batch_size)
    copies = sink.copies('release')
    assert len(copies) == math.ceil(count / batch_size)
    assert all(len(rows) <= batch_size for rows in copies)
    assert [row[0] for row in sink.rows('release')] == list(range(1, count + 1))


def test_duplicate_id_in_batch_keeps_first(load, sink):
    xml = release_xml(
        release(7, 'First', '<tracklist><track><position>1</position></track></tracklist>'),
        release(7, 'Second', '<country>UK</country><tracklist><track><position>2</position></track></tracklist>'),
    )

    parser = load(xml, 'release', batch_size=10)

    assert parser.count == 2
    assert sink.rows('release') == [(7, 'Accepted', 'First', '', '', '', [], [], None, '')]
    assert sink.rows('track') == [(7, '', '1', '')]


def test_duplicate_id_in_later_batch_is_written_again(load, sink):
    xml = release_xml(release(7, 'First'), release(7, 'Second'))

    load(xml, 'release', batch_size=1)

    assert [row[2] for row in sink.rows('release')] == ['First', 'Second']


def test_unknown_elements_are_skipped_with_their_subtree(load, sink):
    xml = release_xml(release(
        3,
        'Kept',
        '<bonus><title>Overwritten?</title><genres><genre>Noise</genre></genres></bonus>'
        '<genres><genre>Rock</genre><subgenre><genre>Drone</genre></subgenre></genres>'
        '<country>US</country>',
    ))

    load(xml, 'release')

    (row,) = sink.rows('release')
    assert row[2] == 'Kept'
    assert row[3] == 'US'
    assert row[6] == ['Rock']


def test_sub_tracks_are_not_separate_tracks(load, sink):
    xml = release_xml(release(4, 'Medley', (
        '<tracklist><track><position>1</position><title>Medley</title>'
        '<sub_tracks><track><position>1a</position><title>Part</title></track></sub_tracks>'
        '</track></tracklist>'
    )))

    load(xml, 'release')

    assert sink.rows('track') == [(4, 'Medley', '1', '')]


def test_namespaced_elements_use_local_names(load, sink):
    xml = (
        '<d:releases xmlns:d="urn:discogs">'
        '<d:release id="9" status="Draft"><d:title>Namespaced</d:title></d:release>'
        '</d:releases>'
    )

    load(xml, 'release')

    assert sink.rows('release')[0][:3] == (9, 'Draft', 'Namespaced')


def test_remaining_batch_flushed_on_collection_end(load, sink):
    xml = release_xml(release(1), release(2), release(3))

    parser = load(xml, 'release', batch_size=2)

    assert [len(rows) for rows in sink.copies('release')] == [2, 1]
    assert parser.batch.size() == 0


def test_malformed_master_id_aborts_before_flush(load, sink):
    xml = release_xml(release(1, 'Fine'), release(2, 'Bad', '<master_id>abc</master_id>'))

    with pytest.raises(MalformedInput) as excinfo:
        load(xml, 'release', batch_size=2)

    assert sink.committed == []
    assert excinfo.value.entity_id == 2
    assert excinfo.value.field == 'master_id'
    assert 'release 2' in str(excinfo.value)


def test_batches_flushed_before_a_failure_stay_written(load, sink):
    xml = release_xml(release(1, 'Fine'), release(2, 'Bad', '<master_id>12x</master_id>'))

    with pytest.raises(MalformedInput):
        load(xml, 'release', batch_size=1)

    assert [row[0] for row in sink.rows('release')] == [1]


@pytest.mark.parametrize("opening", [
    '<release status="Accepted">',
    '<release id="x1" status="Accepted">',
    '<release id="99999999999" status="Accepted">',
    '<release id="5">',
])
def test_required_release_attributes(load, opening):
    with pytest.raises(MalformedInput):
        load(f'<releases>{opening}<title>T</title></release></releases>', 'release')


def test_malformed_video_duration(load):
    xml = release_xml(release(6, 'V', '<videos><video src="x" duration="4m" embed="true"/></videos>'))

    with pytest.raises(MalformedInput) as excinfo:
        load(xml, 'release')

    assert excinfo.value.field == 'duration'
