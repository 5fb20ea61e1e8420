"""Tests for the AddPadding operator."""
import numpy as np
import pytest

import seqpad as sp
from seqpad import ConfigError, ShapeMismatch, UnsupportedType, Workspace


def _run(inputs, outputs, **args):
    ws = Workspace()
    for name, arr in inputs.items():
        ws.feed_blob(name, arr)
    ws.run_operator_once(
        sp.create_operator('AddPadding', list(inputs), outputs, **args))
    return [ws.fetch_blob(name) for name in outputs]


def _rows():
    return np.array([[1, 1], [2, 2], [3, 3], [4, 4], [5, 5], [6, 6]],
                    dtype=np.float32)


def test_two_segments_zero_padding():
    """(6, 2) data, lengths [3, 3], width 1 -> (10, 2)."""
    out, lengths_out = _run(
        {'data': _rows(), 'lengths': np.array([3, 3])},
        ['data_out', 'lengths_out'], padding_width=1)
    expected = np.array([
        [0, 0], [1, 1], [2, 2], [3, 3], [0, 0],
        [0, 0], [4, 4], [5, 5], [6, 6], [0, 0],
    ], dtype=np.float32)
    assert out.shape == (10, 2), f"Expected (10,2), got {out.shape}"
    np.testing.assert_array_equal(out, expected)
    np.testing.assert_array_equal(lengths_out, [5, 5])
    assert lengths_out.dtype == np.int64


def test_asymmetric_widths_with_distinct_paddings():
    data = np.arange(1, 4, dtype=np.int64).reshape(3, 1)
    out, lengths_out = _run(
        {'data': data, 'lengths': np.array([1, 2]),
         'start': np.array([-1]), 'end': np.array([-2])},
        ['data_out', 'lengths_out'], padding_width=2, end_padding_width=1)
    np.testing.assert_array_equal(
        out.ravel(), [-1, -1, 1, -2, -1, -1, 2, 3, -2])
    np.testing.assert_array_equal(lengths_out, [4, 5])


def test_start_padding_reused_for_end():
    data = np.zeros((2, 2), dtype=np.float64)
    (out,) = _run(
        {'data': data, 'lengths': np.array([2]),
         'start': np.array([[7.0, 8.0]])},
        ['data_out'], padding_width=1)
    np.testing.assert_array_equal(
        out, [[7, 8], [0, 0], [0, 0], [7, 8]])


def test_without_lengths_pads_once_around_the_data():
    data = np.array([1.0, 2.0, 3.0])
    out, lengths_out = _run({'data': data}, ['data_out', 'lengths_out'],
                            padding_width=2)
    np.testing.assert_array_equal(out, [0, 0, 1, 2, 3, 0, 0])
    np.testing.assert_array_equal(lengths_out, [7])


def test_default_width_is_one():
    (out,) = _run({'data': np.array([5, 6])}, ['data_out'])
    np.testing.assert_array_equal(out, [0, 5, 6, 0])


def test_empty_segments_still_get_padding():
    data = np.array([[1, 2]], dtype=np.int32)
    out, lengths_out = _run(
        {'data': data, 'lengths': np.array([0, 1, 0])},
        ['data_out', 'lengths_out'], padding_width=1)
    assert out.shape == (7, 2)
    np.testing.assert_array_equal(
        out, [[0, 0], [0, 0], [0, 0], [1, 2], [0, 0], [0, 0], [0, 0]])
    np.testing.assert_array_equal(lengths_out, [2, 3, 2])


def test_rows_after_last_segment_are_carried_over():
    data = np.arange(5, dtype=np.float32)
    (out,) = _run({'data': data, 'lengths': np.array([2])}, ['data_out'],
                  padding_width=1)
    np.testing.assert_array_equal(out, [0, 0, 1, 0, 2, 3, 4])


def test_higher_rank_blocks():
    data = np.arange(12, dtype=np.float64).reshape(3, 2, 2)
    pad = np.full((2, 2), -1.0)
    (out,) = _run({'data': data, 'lengths': np.array([3]), 'pad': pad},
                  ['data_out'], padding_width=1)
    assert out.shape == (5, 2, 2)
    np.testing.assert_array_equal(out[0], pad)
    np.testing.assert_array_equal(out[1:4], data)
    np.testing.assert_array_equal(out[4], pad)


def test_zero_widths_copy_inputs_exactly():
    data = np.arange(6, dtype=np.int32).reshape(3, 2)
    lengths = np.array([1, 2], dtype=np.int32)
    out, lengths_out = _run(
        {'data': data, 'lengths': lengths, 'pad': np.ones(99)},
        ['data_out', 'lengths_out'], padding_width=0)
    np.testing.assert_array_equal(out, data)
    assert out.dtype == np.int32
    np.testing.assert_array_equal(lengths_out, lengths)
    assert lengths_out.dtype == np.int32


def test_padding_with_wrong_element_count():
    with pytest.raises(ShapeMismatch, match="block size 2"):
        _run({'data': np.zeros((2, 2)), 'lengths': np.array([2]),
              'pad': np.zeros(3)}, ['data_out'])


def test_padding_may_be_flat_with_block_size_elements():
    (out,) = _run({'data': np.zeros((1, 2, 2)), 'lengths': np.array([1]),
                   'pad': np.arange(4.0)}, ['data_out'])
    np.testing.assert_array_equal(out[0], [[0, 1], [2, 3]])


def test_padding_dtype_must_match_data():
    with pytest.raises(UnsupportedType):
        _run({'data': np.zeros((2, 2), dtype=np.float32),
              'lengths': np.array([2]), 'pad': np.zeros(2)}, ['data_out'])


def test_unsupported_element_type():
    with pytest.raises(UnsupportedType, match="float16"):
        _run({'data': np.zeros(3, dtype=np.float16)}, ['data_out'])


def test_scalar_input_rejected():
    with pytest.raises(ShapeMismatch):
        _run({'data': np.float32(1.0)}, ['data_out'])


def test_negative_padding_width_rejected_at_construction():
    with pytest.raises(ConfigError, match="padding_width"):
        _run({'data': np.zeros(3)}, ['data_out'], padding_width=-1)


def test_negative_end_width_means_same_as_start():
    op = sp.AddPaddingOp(
        sp.create_operator('AddPadding', ['x'], ['y'], padding_width=3,
                           end_padding_width=-5),
        [sp.zeros(1)], [sp.zeros(1)])
    assert (op.start_width, op.end_width) == (3, 3)


def test_arity_is_checked():
    with pytest.raises(ConfigError):
        _run({'a': np.zeros(1), 'b': np.zeros(1), 'c': np.zeros(1),
              'd': np.zeros(1), 'e': np.zeros(1)}, ['out'])
    with pytest.raises(ConfigError):
        _run({'a': np.zeros(1)}, ['o1', 'o2', 'o3'])


@pytest.mark.parametrize('dt', [np.float32, np.float64, np.int32, np.int64,
                                np.bool_])
def test_same_layout_for_every_supported_type(dt):
    data = (np.arange(8).reshape(4, 2) % 2).astype(dt)
    start = np.ones(2, dtype=dt)
    end = np.zeros(2, dtype=dt)
    out, lengths_out = _run(
        {'data': data, 'lengths': np.array([1, 3]),
         'start': start, 'end': end},
        ['data_out', 'lengths_out'], padding_width=1, end_padding_width=2)
    expected = np.concatenate([
        start[None], data[:1], end[None], end[None],
        start[None], data[1:], end[None], end[None],
    ])
    assert out.dtype == np.dtype(dt)
    assert out.shape == (10, 2)
    np.testing.assert_array_equal(out, expected)
    np.testing.assert_array_equal(lengths_out, [4, 6])
