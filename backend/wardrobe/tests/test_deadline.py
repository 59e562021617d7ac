"""
Unit tests for the per-request deadline.
"""
import time

import pytest

from wardrobe.core.deadline import Deadline
from wardrobe.core.exceptions import AnalysisError, StorageError


@pytest.mark.unit
class TestDeadline:

    def test_fresh_deadline(self):
        deadline = Deadline(30)

        assert not deadline.expired()
        assert 29 < deadline.remaining() <= 30

    def test_timeout_capped_by_remaining(self):
        deadline = Deadline(5)

        assert deadline.timeout_for(15) <= 5
        assert deadline.timeout_for(1) == 1

    def test_expired(self):
        deadline = Deadline(0.01)
        time.sleep(0.02)

        assert deadline.expired()
        assert deadline.remaining() == 0.0
        assert deadline.timeout_for(10) == 0.0

    def test_check_raises_step_category(self):
        deadline = Deadline(0)

        with pytest.raises(StorageError, match="exceeded before photo upload"):
            deadline.check("photo upload", StorageError)

        with pytest.raises(AnalysisError):
            deadline.check("object detection", AnalysisError)

    def test_check_passes_within_budget(self):
        Deadline(30).check("object detection", AnalysisError)
