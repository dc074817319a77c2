"""Unit tests for carrierfreq.analysis.submissions."""

import pytest

from carrierfreq.analysis.submissions import meets_threshold, pathogenic_percentage


class TestPathogenicPercentage:
    @pytest.mark.unit
    def test_empty_list_is_none(self):
        assert pathogenic_percentage([]) is None
        assert pathogenic_percentage(None) is None

    @pytest.mark.unit
    def test_all_excluded_is_none(self, make_submissions):
        assert pathogenic_percentage(make_submissions("not provided")) is None
        assert pathogenic_percentage(make_submissions("risk factor", "other")) is None

    @pytest.mark.unit
    def test_half_pathogenic(self, make_submissions):
        assert pathogenic_percentage(make_submissions("Pathogenic", "Benign")) == 50

    @pytest.mark.unit
    def test_excluded_not_in_denominator(self, make_submissions):
        subs = make_submissions("Pathogenic", "Likely pathogenic", "Benign", "drug response")
        assert pathogenic_percentage(subs) == pytest.approx(200 / 3)

    @pytest.mark.unit
    def test_uncertain_counts_as_valid_non_pathogenic(self, make_submissions):
        subs = make_submissions("Pathogenic", "Uncertain significance")
        assert pathogenic_percentage(subs) == 50

    @pytest.mark.unit
    def test_low_penetrance_counts(self, make_submissions):
        subs = make_submissions("Pathogenic, low penetrance", "Likely pathogenic, low penetrance")
        assert pathogenic_percentage(subs) == 100


class TestMeetsThreshold:
    @pytest.mark.unit
    def test_none_percentage_never_meets(self, make_submissions):
        assert meets_threshold([], 50) is False
        assert meets_threshold(make_submissions("not provided"), 50) is False

    @pytest.mark.unit
    def test_boundary_is_inclusive(self, make_submissions):
        subs = make_submissions("Pathogenic", "Pathogenic", "Pathogenic", "Pathogenic", "Benign")
        assert meets_threshold(subs, 80) is True
        assert meets_threshold(subs, 81) is False
