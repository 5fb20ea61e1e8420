"""Tests for the GatherPadding operator."""
import numpy as np
import pytest

import seqpad as sp
from seqpad import ConfigError, InvariantViolation, Workspace


def _pad_then_gather(data, lengths, start, end=None, sw=1, ew=-1,
                     gather_outputs=('start_sum', 'end_sum')):
    ws = Workspace()
    ws.feed_blob('data', data)
    ws.feed_blob('lengths', np.array(lengths))
    inputs = ['data', 'lengths', 'start']
    ws.feed_blob('start', start)
    if end is not None:
        ws.feed_blob('end', end)
        inputs.append('end')
    ws.run_operators_once([
        sp.create_operator('AddPadding', inputs, ['padded', 'padded_lengths'],
                           padding_width=sw, end_padding_width=ew),
        sp.create_operator('GatherPadding', ['padded', 'padded_lengths'],
                           list(gather_outputs),
                           padding_width=sw, end_padding_width=ew),
    ])
    return [ws.fetch_blob(name) for name in gather_outputs]


def test_zero_padding_gathers_to_zero():
    start_sum, end_sum = _pad_then_gather(
        np.ones((6, 2)), [2, 4], np.zeros(2), sw=2, ew=1)
    np.testing.assert_array_equal(start_sum, [0, 0])
    np.testing.assert_array_equal(end_sum, [0, 0])


def test_constant_padding_sums_to_segments_times_width():
    """start_sum == k * w * v for k segments padded w times with v."""
    v = np.array([[1.5, -2.0, 0.25]])
    lengths = [1, 0, 3, 2]
    start_sum, end_sum = _pad_then_gather(
        np.zeros((6, 1, 3)), lengths, v, v * 10, sw=3, ew=2)
    k = len(lengths)
    assert start_sum.shape == (1, 3)
    np.testing.assert_allclose(start_sum, k * 3 * v)
    np.testing.assert_allclose(end_sum, k * 2 * v * 10)


def test_single_output_combines_start_and_end_sums():
    """Start and end blocks accumulate into the one output."""
    start = np.array([1, 2], dtype=np.int64)
    end = np.array([10, 20], dtype=np.int64)
    (combined,) = _pad_then_gather(
        np.zeros((3, 2), dtype=np.int64), [1, 2], start, end,
        sw=1, ew=2, gather_outputs=('padding_sum',))
    np.testing.assert_array_equal(combined, 2 * start + 2 * 2 * end)


def test_payload_rows_are_not_gathered():
    data = np.arange(1, 8, dtype=np.float64)
    ws = Workspace()
    ws.feed_blob('data', data)
    ws.feed_blob('lengths', np.array([3, 4]))
    ws.run_operator_once(sp.create_operator(
        'GatherPadding', ['data', 'lengths'], ['s', 'e'], padding_width=1))
    # segments [1, 2, 3] and [4, 5, 6, 7]
    assert ws.fetch_blob('s').item() == 1 + 4
    assert ws.fetch_blob('e').item() == 3 + 7


def test_bool_accumulation_is_logical_or():
    data = np.array([True, False, False, True, False, False])
    ws = Workspace()
    ws.feed_blob('data', data)
    ws.feed_blob('lengths', np.array([3, 3]))
    ws.run_operator_once(sp.create_operator(
        'GatherPadding', ['data', 'lengths'], ['s', 'e'], padding_width=1))
    assert ws.fetch_blob('s').dtype == np.bool_
    assert ws.fetch_blob('s').item() is True
    assert ws.fetch_blob('e').item() is False


def test_zero_widths_produce_empty_outputs():
    ws = Workspace()
    ws.feed_blob('data', np.ones((4, 2), dtype=np.float32))
    ws.feed_blob('lengths', np.array([4]))
    ws.run_operator_once(sp.create_operator(
        'GatherPadding', ['data', 'lengths'], ['s', 'e'], padding_width=0))
    for name in ('s', 'e'):
        out = ws.fetch_blob(name)
        assert out.shape == (0,)
        assert out.dtype == np.float32


def test_segment_shorter_than_padding_fails():
    ws = Workspace()
    ws.feed_blob('data', np.ones(5))
    ws.feed_blob('lengths', np.array([4, 1]))
    with pytest.raises(InvariantViolation, match="segment 1"):
        ws.run_operator_once(sp.create_operator(
            'GatherPadding', ['data', 'lengths'], ['s'], padding_width=1))


def test_lengths_input_is_required():
    ws = Workspace()
    ws.feed_blob('data', np.ones(5))
    with pytest.raises(ConfigError):
        ws.run_operator_once(sp.create_operator('GatherPadding', ['data'], ['s']))


@pytest.mark.parametrize('dt', [np.float32, np.float64, np.int32, np.int64])
def test_sums_for_numeric_types(dt):
    v = np.array([3, 1], dtype=dt)
    start_sum, end_sum = _pad_then_gather(
        np.zeros((4, 2), dtype=dt), [2, 2], v, sw=2, ew=1)
    assert start_sum.dtype == np.dtype(dt)
    np.testing.assert_array_equal(start_sum, 2 * 2 * v)
    np.testing.assert_array_equal(end_sum, 2 * 1 * v)
