"""Tests for gifconform.reconcile module."""

import pytest

from gifconform.animation import AnimationMode
from gifconform.error_handling import ReconciliationError, ValidationError
from gifconform.reconcile import (
    check_frame_count,
    decoded_indices_for,
    expected_frame_count,
)


class TestExpectedFrameCount:
    """Tests for the decoded frame count per playback mode."""

    @pytest.mark.parametrize("count", [0, 1, 2, 10, 32])
    def test_normal_mode(self, count):
        """Test that normal playback keeps the source count."""
        assert expected_frame_count(count, AnimationMode.NORMAL) == count

    @pytest.mark.parametrize("count,expected", [(0, 0), (1, 1), (2, 2), (3, 4), (10, 18)])
    def test_ping_pong_mode(self, count, expected):
        """Test N + max(0, N - 2) for ping-pong playback."""
        assert expected_frame_count(count, AnimationMode.PING_PONG) == expected

    def test_negative_count_rejected(self):
        """Test that a negative source count is a precondition violation."""
        with pytest.raises(ValidationError):
            expected_frame_count(-1, AnimationMode.NORMAL)


class TestIndexMapping:
    """Tests for source-to-decoded index mapping."""

    def test_decoded_indices_for_normal(self):
        """Test that normal playback shows every source frame once."""
        assert [decoded_indices_for(k, 3, AnimationMode.NORMAL) for k in range(3)] == [[0], [1], [2]]

    def test_decoded_indices_for_ping_pong(self):
        """Test that inner frames appear twice and the ends once."""
        assert decoded_indices_for(0, 5, AnimationMode.PING_PONG) == [0]
        assert decoded_indices_for(1, 5, AnimationMode.PING_PONG) == [1, 7]
        assert decoded_indices_for(3, 5, AnimationMode.PING_PONG) == [3, 5]
        assert decoded_indices_for(4, 5, AnimationMode.PING_PONG) == [4]

    def test_decoded_indices_cover_every_frame_once(self):
        """Test that the inverse mapping is a partition of the decoded indices."""
        count = 7
        mode = AnimationMode.PING_PONG
        covered = sorted(i for k in range(count) for i in decoded_indices_for(k, count, mode))

        assert covered == list(range(expected_frame_count(count, mode)))


class TestCheckFrameCount:
    """Tests for the frame count contract."""

    def test_matching_count_returns_expected(self):
        """Test that a correct count passes."""
        assert check_frame_count(10, 18, AnimationMode.PING_PONG) == 18

    def test_mismatch_raises_with_both_counts(self):
        """Test that the error carries expected and actual counts."""
        with pytest.raises(ReconciliationError) as exc_info:
            check_frame_count(10, 9, AnimationMode.NORMAL)

        error = exc_info.value
        assert error.context["expected_count"] == 10
        assert error.context["decoded_count"] == 9
        assert "expected 10" in str(error)

    def test_ping_pong_count_under_normal_rejected(self):
        """Test that an unrequested ping-pong expansion is detected."""
        with pytest.raises(ReconciliationError):
            check_frame_count(10, 18, AnimationMode.NORMAL)
