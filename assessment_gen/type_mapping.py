"""Mapping between LLM question kinds and application question types.

The LLM output format uses ten question kinds (``"MCQ"``, ``"Debugging"``,
...) while the rest of the application works with eight question types
(``"multiple-choice"``, ``"coding"``, ...). The mapping is lossy in the
kind-to-type direction: ``Debugging`` and ``Coding`` both become ``coding``,
``CodeReview`` and ``Essay`` both become ``essay``.
"""

from typing import Dict

from .models import QuestionKind, QuestionType

# Canonical value lists
QUESTION_KINDS = [qk.value for qk in QuestionKind]
QUESTION_TYPES = [qt.value for qt in QuestionType]

DEFAULT_KIND = QuestionKind.MCQ
DEFAULT_TYPE = QuestionType.MULTIPLE_CHOICE

KIND_TO_INTERNAL_TYPE: Dict[str, QuestionType] = {
    QuestionKind.MCQ.value: QuestionType.MULTIPLE_CHOICE,
    QuestionKind.MSQ.value: QuestionType.MULTIPLE_SELECT,
    QuestionKind.TRUE_FALSE.value: QuestionType.TRUE_FALSE,
    QuestionKind.SHORT_ANSWER.value: QuestionType.SHORT_ANSWER,
    QuestionKind.ESSAY.value: QuestionType.ESSAY,
    QuestionKind.CODING.value: QuestionType.CODING,
    QuestionKind.FILL_BLANKS.value: QuestionType.FILL_BLANKS,
    QuestionKind.FILE_UPLOAD.value: QuestionType.FILE_UPLOAD,
    # Code-centric kinds collapse onto the closest application type
    QuestionKind.DEBUGGING.value: QuestionType.CODING,
    QuestionKind.CODE_REVIEW.value: QuestionType.ESSAY,
}

INTERNAL_TYPE_TO_KIND: Dict[str, QuestionKind] = {
    QuestionType.MULTIPLE_CHOICE.value: QuestionKind.MCQ,
    QuestionType.MULTIPLE_SELECT.value: QuestionKind.MSQ,
    QuestionType.TRUE_FALSE.value: QuestionKind.TRUE_FALSE,
    QuestionType.SHORT_ANSWER.value: QuestionKind.SHORT_ANSWER,
    QuestionType.ESSAY.value: QuestionKind.ESSAY,
    QuestionType.CODING.value: QuestionKind.CODING,
    QuestionType.FILL_BLANKS.value: QuestionKind.FILL_BLANKS,
    QuestionType.FILE_UPLOAD.value: QuestionKind.FILE_UPLOAD,
}


def map_kind_to_internal(kind: str) -> QuestionType:
    """Map an LLM question kind to the application question type.

    Mapping examples::

        "MCQ"        -> "multiple-choice"
        "Debugging"  -> "coding"
        "CodeReview" -> "essay"
        "Riddle"     -> "multiple-choice"  (unknown kinds)

    Lookup is case-sensitive, matching the exact tags requested in the
    generation prompt.

    Args:
        kind: Question kind declared by the LLM

    Returns:
        Application question type, multiple-choice for unrecognised kinds
    """
    return KIND_TO_INTERNAL_TYPE.get(kind, DEFAULT_TYPE)


def map_type_to_kind(type_id: str) -> QuestionKind:
    """Map an application question type id to the LLM question kind.

    Kinds themselves are accepted and returned unchanged, so a caller can
    ask for ``Debugging`` or ``CodeReview`` questions directly even though no
    application type maps onto them.

    Args:
        type_id: Application type id (e.g. ``"true-false"``) or question kind

    Returns:
        Question kind, MCQ for unrecognised ids
    """
    kind = INTERNAL_TYPE_TO_KIND.get(type_id)
    if kind is not None:
        return kind
    if type_id in QUESTION_KINDS:
        return QuestionKind(type_id)
    return DEFAULT_KIND


def is_known_kind(kind: str) -> bool:
    """Return True if ``kind`` is one of the LLM question kinds."""
    return kind in KIND_TO_INTERNAL_TYPE
