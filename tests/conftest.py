"""Pytest fixtures for osm-tags-transform tests."""
import textwrap

import pytest


@pytest.fixture
def small_osm_file(tmp_path):
    """Create minimal valid OSM file with nodes, ways and a relation."""
    content = '''<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6" generator="test">
  <bounds minlat="0" minlon="0" maxlat="10" maxlon="10"/>
  <node id="1" lat="0" lon="0" version="2" changeset="11" timestamp="2022-01-01T00:00:00Z" uid="7" user="alice"/>
  <node id="2" lat="10" lon="10" version="1" changeset="12" timestamp="2022-01-02T00:00:00Z" uid="8" user="bob"/>
  <node id="3" lat="5" lon="5" version="1">
    <tag k="amenity" v="restaurant"/>
    <tag k="name" v="Test Cafe"/>
  </node>
  <way id="100" version="3" changeset="13" timestamp="2022-01-03T00:00:00Z" uid="7" user="alice">
    <nd ref="1"/>
    <nd ref="2"/>
    <tag k="highway" v="primary"/>
    <tag k="name" v="Main Street"/>
  </way>
  <relation id="1000" version="1">
    <member type="node" ref="3" role="stop"/>
    <member type="way" ref="100" role=""/>
    <tag k="type" v="route"/>
    <tag k="route" v="bus"/>
  </relation>
</osm>'''
    file = tmp_path / "small.osm"
    file.write_text(content)
    return file


@pytest.fixture
def empty_osm_file(tmp_path):
    """Create empty OSM file."""
    content = '''<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6">
</osm>'''
    file = tmp_path / "empty.osm"
    file.write_text(content)
    return file


@pytest.fixture
def write_script(tmp_path):
    """Return a helper writing a processing script into tmp_path."""
    def _write(source: str, name: str = "script.py"):
        file = tmp_path / name
        file.write_text(textwrap.dedent(source))
        return file
    return _write


@pytest.fixture
def keep_all_script(write_script):
    """Script keeping every object unchanged."""
    return write_script('''
        def keep(obj):
            return True

        ott.process_node = keep
        ott.process_way = keep
        ott.process_relation = keep
    ''', name="keep_all.py")


@pytest.fixture
def sample_node():
    """Create sample OSMNode."""
    from osm_transform.models.elements import OSMNode
    from osm_transform.models.geometry import Location
    return OSMNode(
        id=12345,
        location=Location(-0.1, 51.5),
        tags={"amenity": "restaurant", "name": "Test Restaurant"},
        version=3,
        changeset=99,
        timestamp="2022-05-01T12:00:00Z",
        uid=42,
        user="mapper",
    )


@pytest.fixture
def sample_way():
    """Create sample OSMWay."""
    from osm_transform.models.elements import OSMWay
    return OSMWay(
        id=67890,
        node_refs=[1, 2, 3, 1],
        tags={"building": "residential", "name": "Test Building"},
        version=1,
    )


@pytest.fixture
def sample_relation():
    """Create sample OSMRelation."""
    from osm_transform.models.elements import Member, OSMRelation
    return OSMRelation(
        id=555,
        members=[Member("way", 67890, "outer"), Member("node", 12345, "label")],
        tags={"type": "multipolygon"},
    )
