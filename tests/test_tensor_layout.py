"""Tests for tensor layout resolution and axis-mapped reads."""

import numpy as np
import pytest

from pose_module.errors import ShapeUnrecognized
from pose_module.tensor_layout import RawTensor, TensorView, resolve_layout


def _tensor(shape):
    return RawTensor.from_array(np.zeros(shape, dtype=np.float32))


class TestResolveLayout:
    """Test suite for resolve_layout."""

    def test_channels_first_3d(self):
        """[1, 56, N] puts channels on axis 1."""
        layout = resolve_layout(_tensor((1, 56, 10)))
        assert (layout.channel_axis, layout.candidate_axis) == (1, 2)
        assert (layout.channel_count, layout.candidate_count) == (56, 10)

    def test_channels_last_3d(self):
        """[1, N, 56] puts channels on axis 2."""
        layout = resolve_layout(_tensor((1, 10, 56)))
        assert (layout.channel_axis, layout.candidate_axis) == (2, 1)
        assert (layout.channel_count, layout.candidate_count) == (56, 10)

    def test_both_axes_wide_picks_smaller_as_channels(self):
        """[1, N, 56] with N >= 56 must not treat the candidates as channels."""
        first = resolve_layout(_tensor((1, 56, 300)))
        last = resolve_layout(_tensor((1, 300, 56)))
        assert first.channel_axis == 1 and first.candidate_count == 300
        assert last.channel_axis == 2 and last.candidate_count == 300

    def test_wider_channel_counts_accepted(self):
        """More than 56 channels is accepted."""
        layout = resolve_layout(_tensor((1, 60, 20)))
        assert layout.channel_count == 60

    def test_batch_not_one_rejected(self):
        """A batch size other than 1 is rejected."""
        with pytest.raises(ShapeUnrecognized) as exc_info:
            resolve_layout(_tensor((2, 56, 10)))
        assert exc_info.value.shape == (2, 56, 10)

    def test_too_few_channels_rejected(self):
        """No axis with 56 channels is rejected."""
        with pytest.raises(ShapeUnrecognized):
            resolve_layout(_tensor((1, 10, 20)))

    @pytest.mark.parametrize("shape", [(56, 10), (1, 1, 56, 1000, 1)])
    def test_unsupported_rank_rejected(self, shape):
        """Only 3-D and 4-D tensors are supported."""
        with pytest.raises(ShapeUnrecognized):
            resolve_layout(_tensor(shape))

    def test_4d_layout(self):
        """4-D tensors resolve channel and candidate axes by scan order."""
        layout = resolve_layout(_tensor((1, 56, 1, 1200)))
        assert layout.rank == 4
        assert (layout.channel_axis, layout.candidate_axis) == (1, 3)
        assert layout.candidate_count == 1200

    def test_4d_without_candidate_axis_rejected(self):
        """4-D tensors need an axis with at least 1000 candidates."""
        with pytest.raises(ShapeUnrecognized):
            resolve_layout(_tensor((1, 56, 1, 500)))

    def test_4d_without_channel_axis_rejected(self):
        """4-D tensors need an axis with at least 56 channels."""
        with pytest.raises(ShapeUnrecognized):
            resolve_layout(_tensor((1, 8, 1, 1200)))

    @pytest.mark.parametrize("shape", [(1, 56, 0, 1000), (0, 56, 1, 1000)])
    def test_4d_empty_pinned_axis_rejected(self, shape):
        """An empty axis outside channels and candidates leaves nothing to read."""
        with pytest.raises(ShapeUnrecognized) as exc_info:
            resolve_layout(_tensor(shape))
        assert exc_info.value.shape == shape


class TestRawTensor:
    """Test suite for RawTensor construction."""

    def test_from_buffer_checks_element_count(self):
        """A buffer whose size does not match the shape is rejected."""
        with pytest.raises(ShapeUnrecognized):
            RawTensor.from_buffer([0.0] * 10, (1, 56, 1))

    def test_from_buffer_reshapes(self):
        """A flat buffer is reshaped to the given shape."""
        tensor = RawTensor.from_buffer(np.arange(56 * 3, dtype=np.float32), (1, 56, 3))
        assert tensor.shape == (1, 56, 3)
        assert tensor.rank == 3

    def test_data_is_read_only_copy(self):
        """The tensor holds its own read-only copy of the data."""
        source = np.zeros((1, 56, 4), dtype=np.float32)
        tensor = RawTensor.from_array(source)
        source[0, 0, 0] = 5.0
        assert tensor.data[0, 0, 0] == 0.0
        assert not tensor.data.flags.writeable


class TestTensorView:
    """Test suite for TensorView reads."""

    def test_reads_match_in_both_orientations(self):
        """Reads agree between channels-first and channels-last layouts."""
        matrix = np.arange(56 * 7, dtype=np.float32).reshape(56, 7)
        first = TensorView(RawTensor.from_array(matrix[None]))
        last = TensorView(RawTensor.from_array(matrix.T[None]))

        for channel, candidate in [(0, 0), (4, 3), (55, 6), (17, 2)]:
            assert first.read(channel, candidate) == matrix[channel, candidate]
            assert last.read(channel, candidate) == matrix[channel, candidate]
        np.testing.assert_array_equal(first.row(4), matrix[4])
        np.testing.assert_array_equal(last.row(4), matrix[4])

    def test_4d_reads_pin_unused_axis_to_zero(self):
        """4-D reads use index 0 on the unused axes."""
        data = np.zeros((1, 56, 2, 1000), dtype=np.float32)
        data[0, 4, 0, 10] = 0.7
        data[0, 4, 1, 10] = 0.1
        view = TensorView(RawTensor.from_array(data))

        assert view.read(4, 10) == pytest.approx(0.7)
        assert view.row(4).shape == (1000,)

    def test_keypoint_fields_offsets(self):
        """Keypoint fields start at channel 5, three per keypoint."""
        matrix = np.zeros((56, 2), dtype=np.float32)
        matrix[5 + 3 * 10 : 5 + 3 * 10 + 3, 1] = [12.0, 34.0, 0.5]
        view = TensorView(RawTensor.from_array(matrix[None]))

        assert view.keypoint_fields(1, 10) == pytest.approx((12.0, 34.0, 0.5))
