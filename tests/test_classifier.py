"""Tests for floodpeaks.extractor.classifier."""

from __future__ import annotations

import pytest

from floodpeaks.contracts.enums import Tier
from floodpeaks.extractor.classifier import classify


class TestClassify:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (-1.0, Tier.BELOW),
            (1.999, Tier.BELOW),
            (2.0, Tier.MINOR),
            (2.5, Tier.MINOR),
            (3.0, Tier.MODERATE),
            (3.899, Tier.MODERATE),
            (3.9, Tier.MAJOR),
            (10.0, Tier.MAJOR),
        ],
    )
    def test_tiers(self, thresholds, value, expected):
        assert classify(value, thresholds) is expected

    def test_lower_bound_inclusive_for_major(self, thresholds):
        """Exactly majorLow is Major, not Moderate."""
        assert classify(thresholds.major_low, thresholds) is Tier.MAJOR

    def test_lower_bound_inclusive_for_minor(self, thresholds):
        assert classify(thresholds.minor_low, thresholds) is Tier.MINOR

    def test_negative_thresholds(self):
        from floodpeaks.contracts.thresholds import ThresholdSet

        t = ThresholdSet(-3.0, -2.0, -1.0)
        assert classify(-2.5, t) is Tier.MINOR
        assert classify(-3.5, t) is Tier.BELOW
