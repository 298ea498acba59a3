#!/usr/bin/env python3
"""Tests for Status enum."""

from fleet import Status


class TestStatus:
    """Tests for Status enum ordering."""

    def test_urgency_ordering(self):
        """Lower value = more urgent."""
        assert Status.DUE.value < Status.APPROACHING.value
        assert Status.APPROACHING.value < Status.OK.value
        assert Status.OK.value < Status.UNKNOWN.value

    def test_most_urgent_by_value(self):
        """min() by value picks the most urgent status."""
        statuses = [Status.OK, Status.DUE, Status.APPROACHING]
        assert min(statuses, key=lambda s: s.value) == Status.DUE
