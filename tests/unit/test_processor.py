"""Tests for ObjectProcessor."""
import io

import pytest
from osm_transform.config import ProcessingConfig
from osm_transform.exceptions import ScriptCallError, ScriptResultError, TagTypeError
from osm_transform.models.elements import Member, OSMNode, OSMRelation, OSMWay
from osm_transform.models.geometry import Location
from osm_transform.processing.buffer import OutputBuffer
from osm_transform.processing.processor import ObjectProcessor
from osm_transform.scripting.binding import ScriptBinding
from osm_transform.scripting.runtime import ScriptRuntime


@pytest.fixture
def make_processor(write_script):
    """Return a helper building a processor around a script source."""
    def _make(source, **config):
        runtime = ScriptRuntime()
        runtime.load_and_run(write_script(source))
        processor = ObjectProcessor(
            runtime,
            ScriptBinding.from_runtime(runtime),
            ProcessingConfig.from_names(**config),
            warning_stream=io.StringIO(),
        )
        buffer = OutputBuffer()
        processor.set_buffer(buffer)
        return processor, buffer
    return _make


def _node(node_id, lon, lat, **tags):
    return OSMNode(id=node_id, location=Location(lon, lat), tags=tags)


class TestCallbackResults:
    """Tests for interpreting callback return values."""

    def test_true_keeps_feature(self, make_processor, sample_node):
        processor, buffer = make_processor('ott.process_node = lambda obj: True\n')
        processor.apply(sample_node)

        assert buffer.committed == [sample_node]
        assert buffer.committed[0] is sample_node
        assert processor.stats()['node']['kept'] == 1

    def test_false_drops_feature(self, make_processor, sample_node):
        processor, buffer = make_processor('ott.process_node = lambda obj: False\n')
        processor.apply(sample_node)

        assert len(buffer) == 0
        assert processor.stats()['node']['dropped'] == 1

    def test_mapping_replaces_tags(self, make_processor, sample_way):
        processor, buffer = make_processor('''
            def retag(obj):
                tags = obj.tags
                tags['z'] = 'last'
                tags['a'] = 'first'
                del tags['name']
                return tags

            ott.process_way = retag
        ''')
        processor.apply(sample_way)

        output = buffer.committed[0]
        assert list(output.tags) == ['a', 'building', 'z']
        assert output.node_refs == sample_way.node_refs
        assert output.version == sample_way.version
        assert processor.stats()['way']['modified'] == 1

    def test_empty_mapping_strips_tags(self, make_processor, sample_node):
        processor, buffer = make_processor('ott.process_node = lambda obj: {}\n')
        processor.apply(sample_node)
        assert buffer.committed[0].tags == {}

    def test_invalid_result(self, make_processor, sample_node):
        processor, buffer = make_processor('ott.process_node = lambda obj: None\n')
        with pytest.raises(ScriptResultError, match="should return True, False"):
            processor.apply(sample_node)
        assert len(buffer) == 0

    def test_truthy_non_bool_rejected(self, make_processor, sample_node):
        processor, _ = make_processor('ott.process_node = lambda obj: 1\n')
        with pytest.raises(ScriptResultError):
            processor.apply(sample_node)

    def test_non_string_tag(self, make_processor, sample_node):
        processor, _ = make_processor("ott.process_node = lambda obj: {'a': 1}\n")
        with pytest.raises(TagTypeError):
            processor.apply(sample_node)

    def test_unencodable_tag(self, make_processor, sample_node):
        processor, buffer = make_processor("ott.process_node = lambda obj: {'name': '\\udc80'}\n")
        with pytest.raises(TagTypeError):
            processor.apply(sample_node)
        assert len(buffer) == 0

    def test_callback_error(self, make_processor, sample_node):
        processor, _ = make_processor("ott.process_node = lambda obj: obj.tags['missing']\n")
        with pytest.raises(ScriptCallError):
            processor.apply(sample_node)

    def test_long_tag_dropped(self, make_processor, sample_node):
        processor, buffer = make_processor('''
            def retag(obj):
                return {'name': 'x' * 2000, 'amenity': 'cafe'}

            ott.process_node = retag
        ''')
        processor.apply(sample_node)

        assert buffer.committed[0].tags == {'amenity': 'cafe'}
        assert "exceeded" in processor.warning_stream.getvalue()


class TestUntaggedPolicy:
    """Tests for features without tags."""

    SCRIPT = '''
        calls = []

        def record(obj):
            calls.append(obj.id)
            return False

        ott.process_node = record
    '''

    def test_copy_default(self, make_processor):
        processor, buffer = make_processor(self.SCRIPT)
        node = _node(1, 0, 0)
        processor.apply(node)

        assert buffer.committed == [node]
        assert processor.runtime.globals['calls'] == []
        assert processor.stats()['node']['copied'] == 1

    def test_drop(self, make_processor):
        processor, buffer = make_processor(self.SCRIPT, untagged='drop')
        processor.apply(_node(1, 0, 0))

        assert len(buffer) == 0
        assert processor.runtime.globals['calls'] == []

    def test_process(self, make_processor):
        processor, buffer = make_processor(self.SCRIPT, untagged='process')
        processor.apply(_node(1, 0, 0))

        assert len(buffer) == 0
        assert processor.runtime.globals['calls'] == [1]

    def test_tagged_always_processed(self, make_processor):
        processor, _ = make_processor(self.SCRIPT, untagged='drop')
        processor.apply(_node(2, 0, 0, amenity='bench'))
        assert processor.runtime.globals['calls'] == [2]


class TestUnboundCallbacks:
    """Features of a kind without callback follow the untagged policy."""

    def test_copied_unchanged(self, make_processor, sample_way):
        processor, buffer = make_processor('ott.process_node = lambda obj: False\n')
        processor.apply(sample_way)
        assert buffer.committed == [sample_way]

    def test_drop_policy(self, make_processor, sample_way):
        processor, buffer = make_processor('x = 1\n', untagged='drop')
        processor.apply(sample_way)
        assert len(buffer) == 0

    def test_process_policy_drops(self, make_processor):
        processor, buffer = make_processor('ott.process_node = lambda obj: True\n',
                                           untagged='process')
        processor.apply(OSMWay(id=1, node_refs=[1, 2], tags={'highway': 'x'}))

        assert len(buffer) == 0
        assert processor.stats()['way']['dropped'] == 1
        assert processor.stats()['way']['copied'] == 0


class TestGeometry:
    """Tests for bounding boxes seen by callbacks."""

    SCRIPT = '''
        boxes = {}

        def record(obj):
            boxes[obj.id] = obj.get('bbox')
            return True

        ott.process_node = record
        ott.process_way = record
        ott.process_relation = record
    '''

    def _run(self, processor):
        processor.apply(_node(1, 0, 0))
        processor.apply(_node(2, 10, 10))
        processor.apply(_node(3, 5, 5, amenity='bench'))
        processor.apply(OSMWay(id=100, node_refs=[1, 2], tags={'highway': 'primary'}))
        processor.apply(OSMRelation(id=1000, tags={'type': 'route'}, members=[
            Member('node', 3, 'stop'), Member('way', 100, '')]))
        return processor.runtime.globals['boxes']

    def test_bbox_mode(self, make_processor):
        processor, _ = make_processor(self.SCRIPT, geometry='bbox')
        boxes = self._run(processor)

        assert boxes[3] == [5, 5, 5, 5]
        assert boxes[100] == [0, 0, 10, 10]
        assert boxes[1000] == [0, 0, 10, 10]

    def test_untagged_nodes_still_indexed(self, make_processor):
        processor, _ = make_processor(self.SCRIPT, geometry='bbox', untagged='drop')
        boxes = self._run(processor)

        assert 1 not in boxes
        assert boxes[100] == [0, 0, 10, 10]

    def test_no_geometry(self, make_processor):
        processor, _ = make_processor(self.SCRIPT)
        boxes = self._run(processor)

        assert processor.index is None
        assert set(boxes.values()) == {None}

    def test_bbox_with_sparse_index(self, make_processor):
        processor, _ = make_processor(self.SCRIPT, geometry='bbox',
                                      index_type='sparse_mem_array')
        boxes = self._run(processor)
        assert boxes[1000] == [0, 0, 10, 10]
        processor.index.close()


class TestStats:
    """Tests for processing statistics."""

    def test_counts(self, make_processor, sample_node, sample_way, sample_relation):
        processor, buffer = make_processor('''
            ott.process_node = lambda obj: True
            ott.process_way = lambda obj: False
        ''')
        for feature in (sample_node, _node(9, 1, 1), sample_way, sample_relation):
            processor.apply(feature)

        stats = processor.stats()
        assert stats['node'] == {'input': 2, 'kept': 1, 'modified': 0,
                                 'dropped': 0, 'copied': 1}
        assert stats['way']['dropped'] == 1
        assert stats['relation']['copied'] == 1
        assert len(buffer) == 3

    def test_no_buffer(self, write_script, sample_node):
        runtime = ScriptRuntime()
        runtime.load_and_run(write_script('x = 1\n'))
        processor = ObjectProcessor(runtime, ScriptBinding.from_runtime(runtime))
        with pytest.raises(RuntimeError):
            processor.apply(sample_node)
