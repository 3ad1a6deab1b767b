"""Tests for period label vocabularies and ordering keys."""

import pytest

from scoremanager.core.periods import (
    IN_SCHOOL_TERMS,
    MOCK_EXAM_MONTHS,
    SENTINEL_KEY,
    in_school_labels,
    is_known_label,
    mock_exam_labels,
    order_key,
    period_labels,
)


class TestVocabularies:
    """Tests for the label enumerations."""

    def test_in_school_has_24_labels(self):
        """Two levels x three grades x four terms."""
        labels = in_school_labels()
        assert len(labels) == 24
        assert len(set(labels)) == 24

    def test_in_school_label_format(self):
        """Labels use '<level><grade> <term>'."""
        labels = in_school_labels()
        assert labels[0] == "middle1 1st-semester-midterm"
        assert "middle3 2nd-semester-final" in labels
        assert labels[-1] == "high3 2nd-semester-final"

    def test_mock_exam_is_high_school_only(self):
        """Mock exams exist only for high school."""
        labels = mock_exam_labels()
        assert len(labels) == 12
        assert all(label.startswith("high") for label in labels)
        assert labels[:4] == ["high1 March", "high1 June", "high1 September", "high1 October"]

    def test_period_labels_by_type(self):
        """period_labels picks the vocabulary for a score type."""
        assert period_labels("in-school") == in_school_labels()
        assert period_labels("mock-exam") == mock_exam_labels()
        assert period_labels("unknown") == []

    def test_is_known_label(self):
        assert is_known_label("high2 September")
        assert is_known_label("middle1 1st-semester-final")
        assert not is_known_label("middle1 June")
        assert not is_known_label("")


class TestOrderKey:
    """Tests for order_key."""

    def test_key_formula(self):
        """Key = level base + grade * 100 + period rank."""
        assert order_key("middle1 1st-semester-midterm") == 101
        assert order_key("middle3 2nd-semester-final") == 304
        assert order_key("high1 March") == 1105
        assert order_key("high3 October") == 1308

    @pytest.mark.parametrize("level", ["middle", "high"])
    @pytest.mark.parametrize("grade", [1, 2, 3])
    def test_terms_strictly_increase_within_grade(self, level, grade):
        """In-school terms sort in their fixed order."""
        keys = [order_key(f"{level}{grade} {term}") for term in IN_SCHOOL_TERMS]
        assert keys == sorted(keys)
        assert len(set(keys)) == 4

    def test_months_follow_terms_within_grade(self):
        """Mock-exam months rank after the four terms."""
        term_keys = [order_key(f"high2 {t}") for t in IN_SCHOOL_TERMS]
        month_keys = [order_key(f"high2 {m}") for m in MOCK_EXAM_MONTHS]
        assert max(term_keys) < min(month_keys)
        assert month_keys == sorted(month_keys)

    @pytest.mark.parametrize("level", ["middle", "high"])
    def test_lower_grade_always_first(self, level):
        """Every key of grade g1 is below every key of grade g2 > g1."""
        by_grade = {
            g: [order_key(f"{level}{g} {p}") for p in IN_SCHOOL_TERMS + MOCK_EXAM_MONTHS]
            for g in (1, 2, 3)
        }
        assert max(by_grade[1]) < min(by_grade[2])
        assert max(by_grade[2]) < min(by_grade[3])

    def test_high_school_after_middle_school(self):
        """Any high-school label sorts after any middle-school label."""
        middle = [order_key(label) for label in in_school_labels() if label.startswith("middle")]
        high = [order_key(label) for label in in_school_labels() + mock_exam_labels() if label.startswith("high")]
        assert max(middle) < min(high)

    def test_unknown_period_ranks_zero(self):
        """A matching label with an unknown period sorts first in its grade."""
        assert order_key("high2 December") == 1200
        assert order_key("high2 December") < order_key("high2 1st-semester-midterm")

    @pytest.mark.parametrize(
        "label",
        ["garbage", "", "middle4 1st-semester-midterm", "elementary1 March", "high1", "High1 March", "high1March"],
    )
    def test_non_matching_gets_sentinel(self, label):
        """Labels outside the grammar get the sentinel key."""
        assert order_key(label) == SENTINEL_KEY

    def test_garbage_is_9999(self):
        assert order_key("garbage") == 9999

    @pytest.mark.parametrize("value", [None, 42, ["high1 March"]])
    def test_non_string_never_raises(self, value):
        assert order_key(value) == SENTINEL_KEY

    def test_sentinel_sort_is_stable(self):
        """Unrecognized labels keep their relative order at the end."""
        labels = ["zzz", "high1 June", "aaa", "middle1 1st-semester-final"]
        assert sorted(labels, key=order_key) == [
            "middle1 1st-semester-final",
            "high1 June",
            "zzz",
            "aaa",
        ]
