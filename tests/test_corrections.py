"""
Tests for CorrectionRuleSet.

Tests sequential literal OCR corrections and override ordering.
"""

import pytest
from cardbox.corrections import BUILTIN_RULES, CorrectionRuleSet


class TestCorrectionRuleSet:
    """Test cases for CorrectionRuleSet."""

    @pytest.fixture
    def rules(self):
        """Create rule set with built-ins only."""
        return CorrectionRuleSet()

    def test_builtin_rules_loaded(self, rules):
        """Test built-in rules are present and first."""
        assert len(rules) == len(BUILTIN_RULES)
        assert rules.rules[: len(BUILTIN_RULES)] == list(BUILTIN_RULES)

    def test_digit_context_corrections(self, rules):
        """Test l / O after a digit become 1 / 0."""
        test_cases = [
            ("93323l545", "933231545"),
            ("5262l439", "52621439"),
            ("2ll", "211"),
            ("1O5", "105"),
            ("lO", "10"),
            ("l7樓", "17樓"),
        ]

        for text, expected in test_cases:
            assert rules.correct(text) == expected, f"Failed for: {text}"

    def test_latin_text_untouched(self, rules):
        """Test ordinary words keep their l and O."""
        for text in ["www.linetaxi.com.tw", "Heidie Lin", "Office", "hello@world.com"]:
            assert rules.correct(text) == text

    def test_fullwidth_normalisation(self, rules):
        """Test full-width punctuation and digits become half-width."""
        assert rules.correct("電話：０２－１２３４") == "電話:02-1234"
        assert rules.correct("heidie＠taxigo．com") == "heidie@taxigo.com"

    def test_vertical_bar_words(self, rules):
        assert rules.correct("L|NE TAX|") == "LINE TAXI"
        assert rules.correct("Finance ｜ 會計") == "Finance | 會計"

    def test_address_abbreviations(self, rules):
        assert rules.correct("5ec.l, Roosevelt Rd.") == "Sec. 1, Roosevelt Rd."

    def test_overrides_applied_after_builtins(self):
        """Test user overrides see the output of the built-in rules."""
        rules = CorrectionRuleSet(overrides={"LINE": "LINE GO"})
        assert rules.correct("L|NE") == "LINE GO"
        assert rules.rules[-1] == ("LINE", "LINE GO")

    def test_rules_are_sequential(self):
        """Test a later rule rewrites the output of an earlier one."""
        rules = CorrectionRuleSet(builtin_rules=[("a", "b"), ("b", "c")])
        assert rules.correct("a") == "c"

    def test_extra_rules_between_builtins_and_overrides(self):
        rules = CorrectionRuleSet(
            overrides={"y": "z"},
            extra_rules=[("x", "y")],
            builtin_rules=[],
        )
        assert rules.rules == [("x", "y"), ("y", "z")]
        assert rules.correct("x") == "z"

    def test_empty_wrong_ignored(self):
        rules = CorrectionRuleSet(overrides={"": "boom"}, builtin_rules=[])
        assert len(rules) == 0
        assert rules.correct("text") == "text"

    def test_correct_is_pure(self, rules):
        """Test the same input always gives the same output."""
        assert rules.correct("5262l439") == rules.correct("5262l439")
