"""Unit tests for the declarative keyword tables and text heuristics."""

import pytest

from packages.domain.categorization import keyword_rules


class TestKeywordScoring:

    @pytest.mark.unit
    def test_freelance_design_business_scores_business_highest(self):
        scores = keyword_rules.score_keywords(
            "I need help starting a freelance design business from home."
        )

        assert scores["Business"] == 2
        assert scores["Design"] == 1
        assert max(scores, key=scores.get) == "Business"

    @pytest.mark.unit
    def test_scores_include_every_family_in_table_order(self):
        scores = keyword_rules.score_keywords("nothing relevant here")

        assert list(scores) == list(keyword_rules.KEYWORD_TABLE)
        assert all(score == 0 for score in scores.values())

    @pytest.mark.unit
    def test_keywords_match_at_word_start_only(self):
        assert keyword_rules.score_keywords("Looking for a designer")["Design"] == 1
        assert keyword_rules.score_keywords("A full redesign")["Design"] == 0

    @pytest.mark.unit
    def test_scoring_is_case_insensitive(self):
        assert keyword_rules.score_keywords("UNIVERSITY Degree")["Academic"] == 2

    @pytest.mark.unit
    def test_tie_goes_to_family_declared_first(self):
        # Design is declared before Business
        assert keyword_rules.best_keyword_family("design business") == "Design"

    @pytest.mark.unit
    def test_allowed_families_restrict_competition(self):
        best = keyword_rules.best_keyword_family(
            "freelance design business", allowed_families=["Design", "Career"]
        )
        assert best == "Design"

    @pytest.mark.unit
    def test_no_keywords_returns_none(self):
        assert keyword_rules.best_keyword_family("the weather was lovely today") is None


class TestForcingSignals:

    @pytest.mark.unit
    def test_construction_and_budgeting_force_pair(self):
        pairs = keyword_rules.forced_category_pairs(
            "Starting a construction company and budgeting for the first year"
        )
        assert ("Construction", "Business") in pairs

    @pytest.mark.unit
    def test_freelance_business_forces_career(self):
        pairs = keyword_rules.forced_category_pairs("a freelance design business")
        assert pairs == [("Career", "Business")]

    @pytest.mark.unit
    def test_single_signal_forces_nothing(self):
        assert keyword_rules.forced_category_pairs("interior design inspiration") == []

    @pytest.mark.unit
    def test_signals_are_substring_checks(self):
        # "engineering" inside "re-engineering" still counts
        signals = keyword_rules.detect_signals("re-engineering the team")
        assert signals["construction"] is True


class TestIsMeaningful:

    @pytest.mark.unit
    @pytest.mark.parametrize("text", [
        "abc123 random text xyz hello",
        "short",
        "1234567890 !!! ???",
        "bcdfg hjklm npqrst",
        "a" * 30,
        "test test test real words",
    ])
    def test_gibberish_is_not_meaningful(self, text):
        assert keyword_rules.is_meaningful(text) is False

    @pytest.mark.unit
    @pytest.mark.parametrize("text", [
        "How do I price a kitchen renovation project?",
        "What do people think about the weather lately here?",
        "මම නව ව්‍යාපාරයක් ආරම්භ කිරීමට සැලසුම් කරමි.",
    ])
    def test_real_text_is_meaningful(self, text):
        assert keyword_rules.is_meaningful(text) is True
