"""Tests for question kind distribution."""

from decimal import Decimal

import pytest

from assessment_gen.distribution import (
    AUTO_DISTRIBUTION_WEIGHTS,
    calculate_question_distribution,
    distribution_total,
)
from assessment_gen.models import (
    MIXED,
    DifficultyLevel,
    DistributionMode,
    QuestionKind,
)


class TestAutoDistributionWeights:
    """Tests for the difficulty presets."""

    @pytest.mark.parametrize("difficulty", list(DifficultyLevel))
    def test_weights_sum_to_one(self, difficulty):
        """Test every preset's weights sum to exactly 1."""
        total = sum(Decimal(w) for _, w in AUTO_DISTRIBUTION_WEIGHTS[difficulty])
        assert total == Decimal("1")

    def test_hard_preset_includes_debugging(self):
        """Test the Hard preset asks for Debugging questions."""
        kinds = [kind for kind, _ in AUTO_DISTRIBUTION_WEIGHTS[DifficultyLevel.HARD]]
        assert QuestionKind.DEBUGGING in kinds


class TestSingleType:
    """Tests for a single concrete selection."""

    def test_single_type_gets_everything(self):
        """Test one selected type receives the whole total."""
        result = calculate_question_distribution(5, ["true-false"])
        assert result == {QuestionKind.TRUE_FALSE: 5}

    def test_single_type_wins_over_manual(self):
        """Test a single selection ignores manual counts."""
        result = calculate_question_distribution(
            4,
            ["coding"],
            DistributionMode.MANUAL,
            {"coding": 1, "essay": 9},
        )
        assert result == {QuestionKind.CODING: 4}

    def test_single_external_kind(self):
        """Test a kind without an application type can be selected."""
        result = calculate_question_distribution(3, ["Debugging"])
        assert result == {QuestionKind.DEBUGGING: 3}

    def test_single_unknown_type_defaults_to_mcq(self):
        """Test an unknown selection is requested as MCQ."""
        result = calculate_question_distribution(2, ["matching"])
        assert result == {QuestionKind.MCQ: 2}


class TestManualDistribution:
    """Tests for manual mode."""

    def test_positive_counts_copied(self):
        """Test manual counts are copied and zero counts dropped."""
        result = calculate_question_distribution(
            6,
            ["multiple-choice", "coding", "essay"],
            DistributionMode.MANUAL,
            {"multiple-choice": 4, "coding": 2, "essay": 0},
        )
        assert result == {QuestionKind.MCQ: 4, QuestionKind.CODING: 2}

    def test_counts_not_reconciled_with_total(self):
        """Test manual counts are used as given even when they disagree."""
        result = calculate_question_distribution(
            10,
            ["multiple-choice", "coding"],
            DistributionMode.MANUAL,
            {"multiple-choice": 3, "coding": 2},
        )
        assert distribution_total(result) == 5

    def test_manual_mode_without_counts_falls_through(self):
        """Test manual mode with no counts behaves like auto."""
        result = calculate_question_distribution(
            4, ["multiple-choice", "essay"], DistributionMode.MANUAL, None
        )
        assert result == {QuestionKind.MCQ: 2, QuestionKind.ESSAY: 2}


class TestMixedDistribution:
    """Tests for Mixed selections."""

    def test_hard_ten_questions(self):
        """Test the Hard preset rounds up then trims the first kind."""
        result = calculate_question_distribution(
            10, [MIXED], difficulty=DifficultyLevel.HARD
        )

        assert distribution_total(result) == 10
        assert result[QuestionKind.CODING] == 1
        assert result[QuestionKind.DEBUGGING] == 2
        assert result[QuestionKind.MCQ] == 2
        assert result[QuestionKind.TRUE_FALSE] == 1

    def test_medium_ten_questions_exact(self):
        """Test the Medium preset needs no reconciliation for 10."""
        result = calculate_question_distribution(10, [MIXED])

        assert result == {
            QuestionKind.MCQ: 4,
            QuestionKind.FILL_BLANKS: 2,
            QuestionKind.TRUE_FALSE: 1,
            QuestionKind.CODING: 1,
            QuestionKind.SHORT_ANSWER: 1,
            QuestionKind.ESSAY: 1,
        }

    def test_easy_ten_questions(self):
        """Test the Easy preset gives its surplus back from MCQ."""
        result = calculate_question_distribution(
            10, [MIXED], difficulty=DifficultyLevel.EASY
        )

        assert distribution_total(result) == 10
        assert result[QuestionKind.MCQ] == 4

    def test_mixed_among_other_types_uses_preset(self):
        """Test Mixed anywhere in the selection selects the preset."""
        result = calculate_question_distribution(10, ["coding", MIXED])
        assert result[QuestionKind.MCQ] == 4

    def test_small_total_never_negative(self):
        """Test a total smaller than the preset stays non-negative."""
        result = calculate_question_distribution(
            1, [MIXED], difficulty=DifficultyLevel.HARD
        )

        assert distribution_total(result) == 1
        assert all(count >= 0 for count in result.values())
        assert result == {QuestionKind.DEBUGGING: 1}

    @pytest.mark.parametrize("difficulty", list(DifficultyLevel))
    @pytest.mark.parametrize("total", [0, 1, 2, 3, 7, 10, 25, 100])
    def test_sum_matches_total(self, difficulty, total):
        """Test reconciled counts always sum to the total."""
        result = calculate_question_distribution(
            total, [MIXED], difficulty=difficulty
        )

        assert distribution_total(result) == total
        assert all(count >= 0 for count in result.values())


class TestEvenSplit:
    """Tests for several concrete selections."""

    def test_even_split(self):
        """Test an exact division."""
        result = calculate_question_distribution(
            6, ["multiple-choice", "true-false", "essay"]
        )
        assert result == {
            QuestionKind.MCQ: 2,
            QuestionKind.TRUE_FALSE: 2,
            QuestionKind.ESSAY: 2,
        }

    def test_remainder_goes_to_first_types(self):
        """Test the remainder is handed out in selection order."""
        result = calculate_question_distribution(
            7, ["multiple-choice", "true-false", "essay"]
        )
        assert result == {
            QuestionKind.MCQ: 3,
            QuestionKind.TRUE_FALSE: 2,
            QuestionKind.ESSAY: 2,
        }

    def test_fewer_questions_than_types(self):
        """Test later types get zero when there are too few questions."""
        result = calculate_question_distribution(
            2, ["multiple-choice", "true-false", "essay"]
        )
        assert distribution_total(result) == 2
        assert result[QuestionKind.ESSAY] == 0
