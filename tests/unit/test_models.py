"""Tests for data models."""
import dataclasses

import pytest
from osm_transform.models.elements import Member, OSMNode, OSMRelation, OSMWay
from osm_transform.models.geometry import BoundingBox, Location


class TestLocation:
    """Tests for Location class."""

    def test_valid(self):
        assert Location(10.0, 20.0).valid is True

    def test_missing_coordinate(self):
        assert Location().valid is False
        assert Location(10.0, None).valid is False

    def test_out_of_range(self):
        assert Location(181.0, 0.0).valid is False
        assert Location(0.0, -90.5).valid is False


class TestBoundingBox:
    """Tests for BoundingBox class."""

    def test_empty_is_invalid(self):
        assert BoundingBox().valid is False

    def test_extend(self):
        box = BoundingBox().extend(Location(0, 0)).extend(Location(10, 10))
        assert box.valid is True
        assert box.as_list() == [0, 0, 10, 10]

    def test_extend_ignores_invalid_location(self):
        box = BoundingBox.from_location(Location(1, 2))
        assert box.extend(Location()) == box

    def test_from_location_is_degenerate(self):
        box = BoundingBox.from_location(Location(3.5, 4.5))
        assert box.as_list() == [3.5, 4.5, 3.5, 4.5]

    def test_union(self):
        a = BoundingBox(0, 0, 5, 5)
        b = BoundingBox(-1, 2, 3, 8)
        assert a.union(b).as_list() == [-1, 0, 5, 8]

    def test_union_with_invalid_is_noop(self):
        a = BoundingBox(0, 0, 5, 5)
        assert a.union(BoundingBox()) == a
        assert BoundingBox().union(a) == a

    def test_immutable(self):
        box = BoundingBox(0, 0, 1, 1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            box.min_lon = 5


class TestOSMNode:
    """Tests for OSMNode class."""

    def test_creation(self, sample_node):
        """Test node creation with valid data."""
        assert sample_node.id == 12345
        assert sample_node.lat == 51.5
        assert sample_node.lon == -0.1
        assert sample_node.tags["amenity"] == "restaurant"
        assert sample_node.kind == "node"

    def test_with_tags_keeps_structure(self, sample_node):
        """Replacing tags keeps id, attribution and location."""
        rebuilt = sample_node.with_tags({"shop": "bakery"})

        assert rebuilt is not sample_node
        assert rebuilt.tags == {"shop": "bakery"}
        assert rebuilt.location == sample_node.location
        assert (rebuilt.id, rebuilt.version, rebuilt.changeset,
                rebuilt.timestamp, rebuilt.uid, rebuilt.user) == (
                12345, 3, 99, "2022-05-01T12:00:00Z", 42, "mapper")
        # Original untouched
        assert sample_node.tags["amenity"] == "restaurant"


class TestOSMWay:
    """Tests for OSMWay class."""

    def test_creation(self, sample_way):
        """Test way creation with valid data."""
        assert sample_way.id == 67890
        assert len(sample_way.node_refs) == 4
        assert sample_way.kind == "way"

    def test_is_closed(self, sample_way):
        """Test closed way detection."""
        assert sample_way.is_closed is True

    def test_is_closed_open_way(self):
        """Test open way detection."""
        way = OSMWay(id=1, node_refs=[1, 2, 3])
        assert way.is_closed is False

    def test_with_tags_keeps_node_refs(self, sample_way):
        rebuilt = sample_way.with_tags({})
        assert rebuilt.node_refs == [1, 2, 3, 1]
        assert rebuilt.tags == {}


class TestOSMRelation:
    """Tests for OSMRelation class."""

    def test_members(self, sample_relation):
        assert sample_relation.member_count == 2
        assert sample_relation.get_members_by_type("way") == [Member("way", 67890, "outer")]

    def test_with_tags_keeps_members(self, sample_relation):
        rebuilt = sample_relation.with_tags({"type": "boundary"})
        assert rebuilt.members == sample_relation.members
        assert isinstance(rebuilt, OSMRelation)
