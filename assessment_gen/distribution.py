"""Question kind distribution for a generation request.

Decides how many questions of each kind to ask the LLM for. Counts are keyed
by :class:`QuestionKind` because they feed straight into the generation
prompt and because the difficulty presets include kinds (``Debugging``) that
have no application type of their own.
"""

import logging
import math
from decimal import Decimal
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .models import (
    MIXED,
    DifficultyLevel,
    DistributionMode,
    QuestionKind,
    QuestionTypeDistribution,
)
from .type_mapping import map_type_to_kind

logger = logging.getLogger(__name__)

# Difficulty presets for Mixed selections. Weights in each preset sum to 1.
# The first entry of each preset absorbs reconciliation, so it is the kind
# with the largest share.
AUTO_DISTRIBUTION_WEIGHTS: Dict[DifficultyLevel, List[Tuple[QuestionKind, str]]] = {
    DifficultyLevel.HARD: [
        (QuestionKind.CODING, "0.25"),
        (QuestionKind.DEBUGGING, "0.15"),
        (QuestionKind.MCQ, "0.20"),
        (QuestionKind.FILL_BLANKS, "0.15"),
        (QuestionKind.SHORT_ANSWER, "0.10"),
        (QuestionKind.ESSAY, "0.10"),
        (QuestionKind.TRUE_FALSE, "0.05"),
    ],
    DifficultyLevel.EASY: [
        (QuestionKind.MCQ, "0.50"),
        (QuestionKind.TRUE_FALSE, "0.20"),
        (QuestionKind.FILL_BLANKS, "0.15"),
        (QuestionKind.SHORT_ANSWER, "0.10"),
        (QuestionKind.CODING, "0.05"),
    ],
    DifficultyLevel.MEDIUM: [
        (QuestionKind.MCQ, "0.40"),
        (QuestionKind.FILL_BLANKS, "0.20"),
        (QuestionKind.TRUE_FALSE, "0.10"),
        (QuestionKind.CODING, "0.10"),
        (QuestionKind.SHORT_ANSWER, "0.10"),
        (QuestionKind.ESSAY, "0.10"),
    ],
}


def distribution_total(distribution: Mapping[QuestionKind, int]) -> int:
    """Return the number of questions a distribution asks for."""
    return sum(count or 0 for count in distribution.values())


def calculate_question_distribution(
    total_questions: int,
    selected_types: Sequence[str],
    distribution_mode: DistributionMode = DistributionMode.AUTO,
    manual_distribution: Optional[Mapping[str, int]] = None,
    difficulty: Optional[DifficultyLevel] = None,
) -> QuestionTypeDistribution:
    """Calculate how many questions of each kind to request.

    Decision order:

    1. One concrete type selected: it gets every question.
    2. Manual mode with counts supplied: positive counts are copied through
       as given. They are not checked against ``total_questions``.
    3. ``Mixed`` (or nothing) selected: the difficulty preset is applied with
       ``ceil(total * weight)`` per kind.
    4. Several concrete types selected: an even split, with the remainder
       going one each to the first types in selection order.

    Results of steps 3 and 4 are reconciled so the counts sum to exactly
    ``total_questions``.

    Args:
        total_questions: Number of questions requested
        selected_types: Application type ids, question kinds, or ``"Mixed"``
        distribution_mode: Auto or manual distribution
        manual_distribution: Per-type counts used in manual mode
        difficulty: Difficulty used to choose the Mixed preset (Medium if None)

    Returns:
        Mapping of question kind to count
    """
    distribution: QuestionTypeDistribution = {}

    if len(selected_types) == 1 and selected_types[0] != MIXED:
        distribution[map_type_to_kind(selected_types[0])] = total_questions
        return distribution

    if (
        distribution_mode == DistributionMode.MANUAL
        and manual_distribution is not None
    ):
        for type_id, count in manual_distribution.items():
            if count > 0:
                distribution[map_type_to_kind(type_id)] = count
        if distribution_total(distribution) != total_questions:
            logger.info(
                f"Manual distribution requests {distribution_total(distribution)} "
                f"questions, total is {total_questions}; using manual counts as given"
            )
        return distribution

    if MIXED in selected_types or not selected_types:
        preset = AUTO_DISTRIBUTION_WEIGHTS[difficulty or DifficultyLevel.MEDIUM]
        for kind, weight in preset:
            distribution[kind] = math.ceil(total_questions * Decimal(weight))
    else:
        count_per_type, remainder = divmod(total_questions, len(selected_types))
        for index, type_id in enumerate(selected_types):
            distribution[map_type_to_kind(type_id)] = count_per_type + (
                1 if index < remainder else 0
            )

    return _reconcile(distribution, total_questions)


def _reconcile(
    distribution: QuestionTypeDistribution, total_questions: int
) -> QuestionTypeDistribution:
    """Force the counts to sum to ``total_questions``.

    The difference is added to the first kind. If that would make its count
    negative (small totals on a preset, where every kind rounds up to 1), the
    first kind is zeroed and the rest of the surplus is taken from the other
    kinds starting at the last one; kinds emptied this way are dropped.
    """
    if not distribution:
        return distribution

    difference = total_questions - distribution_total(distribution)
    if difference == 0:
        return distribution

    first_kind = next(iter(distribution))
    adjusted = distribution[first_kind] + difference
    if adjusted >= 0:
        distribution[first_kind] = adjusted
        return distribution

    surplus = -adjusted
    emptied = [first_kind]
    distribution[first_kind] = 0
    for kind in reversed(list(distribution)):
        if surplus == 0:
            break
        if kind == first_kind:
            continue
        taken = min(distribution[kind], surplus)
        distribution[kind] -= taken
        surplus -= taken
        if distribution[kind] == 0:
            emptied.append(kind)

    logger.debug(
        f"Reconciled distribution to {total_questions} questions by removing "
        f"{[kind.value for kind in emptied]}"
    )
    return {
        kind: count for kind, count in distribution.items() if kind not in emptied
    }
