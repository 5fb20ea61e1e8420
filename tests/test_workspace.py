"""Tests for the blob workspace and the operator registry surface."""
import numpy as np
import pytest

import seqpad as sp
from seqpad import ConfigError, workspace


@pytest.fixture(autouse=True)
def _clean_default_workspace():
    workspace.reset_workspace()
    yield
    workspace.reset_workspace()


def test_has_blob_with_nonexisting_name():
    assert workspace.has_blob("non-existing") is False


def test_fetch_feed_blob():
    assert workspace.feed_blob("testblob", np.ones((1, 2, 3)))
    fetched = workspace.fetch_blob("testblob")
    assert fetched.shape == (1, 2, 3)
    np.testing.assert_array_equal(fetched, 1.0)
    fetched[:] = 2.0
    np.testing.assert_array_equal(workspace.fetch_blob("testblob"), 1.0)
    assert workspace.blobs() == ["testblob"]


def test_feed_blob_copies_the_array():
    arr = np.zeros(3)
    workspace.feed_blob("a", arr)
    arr[0] = 5.0
    np.testing.assert_array_equal(workspace.fetch_blob("a"), [0, 0, 0])


def test_run_operator_once_on_default_workspace():
    workspace.feed_blob("x", np.array([1, 2], dtype=np.int32))
    assert workspace.run_operator_once(
        sp.create_operator('AddPadding', 'x', 'y', padding_width=1))
    np.testing.assert_array_equal(workspace.fetch_blob("y"), [0, 1, 2, 0])


def test_reset_workspace():
    workspace.feed_blob("a", np.zeros(1))
    assert workspace.reset_workspace()
    assert not workspace.has_blob("a")


def test_missing_input_blob():
    with pytest.raises(KeyError, match="missing"):
        workspace.run_operator_once(
            sp.create_operator('RemovePadding', ['missing'], ['out']))


def test_unknown_operator_type():
    workspace.feed_blob("x", np.zeros(1))
    with pytest.raises(ConfigError, match="No operator registered"):
        workspace.run_operator_once(sp.create_operator('Conv', ['x'], ['y']))


def test_create_operator_formats():
    op = sp.create_operator('AddPadding', 'x', 'y', padding_width=2)
    assert op.inputs == ['x'] and op.outputs == ['y']
    assert op.args == {'padding_width': 2}
    op = sp.create_operator('AddPadding', ['x'], ['y'],
                            arg={'padding_width': 1}, end_padding_width=0)
    assert op.args == {'padding_width': 1, 'end_padding_width': 0}
    with pytest.raises(ConfigError, match="Unknown input format"):
        sp.create_operator('AddPadding', 3, ['y'])


def test_non_integer_width_argument():
    workspace.feed_blob("x", np.zeros(3))
    with pytest.raises(ConfigError, match="must be an int"):
        workspace.run_operator_once(
            sp.create_operator('AddPadding', ['x'], ['y'], padding_width=1.5))


def test_schemas_are_registered():
    assert {'AddPadding', 'RemovePadding', 'GatherPadding'} <= set(
        sp.registered_operators())
    schema = sp.get_schema('AddPadding')
    assert (schema.min_inputs, schema.max_inputs) == (1, 4)
    assert (schema.min_outputs, schema.max_outputs) == (1, 2)
    assert 'padding_width' in schema.args
    assert [name for name, _ in schema.input_docs] == [
        'data_in', 'lengths', 'start_padding', 'end_padding']
    gather = sp.get_schema('GatherPadding')
    assert (gather.min_inputs, gather.max_inputs) == (2, 2)
    with pytest.raises(ConfigError):
        sp.get_schema('Unknown')
