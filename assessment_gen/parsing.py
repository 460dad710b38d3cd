"""Decoding of raw LLM output into question records.

Parsing is a cascade of independent strategies tried in order until one
yields questions:

1. :class:`JsonArrayStrategy` strips a markdown fence, parses a JSON array
   and decodes each item according to its declared question kind.
2. :class:`LineScanStrategy` recovers numbered questions and lettered options
   from free text.
3. :class:`PlaceholderStrategy` synthesizes ``total_questions`` placeholder
   multiple-choice questions so a call never comes back empty.

The last strategy always succeeds, so parse failures never reach the caller;
they show up as degraded (placeholder) content and a warning in the logs.
"""

import json
import logging
import re
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from .models import (
    MCQ_OPTION_COUNT,
    TRUE_FALSE_OPTIONS,
    DifficultyLevel,
    GeneratedQuestion,
    GenerationRequest,
    QuestionKind,
    QuestionType,
    TestCase,
)
from .text_utils import strip_markdown_code_blocks
from .type_mapping import is_known_kind, map_kind_to_internal

logger = logging.getLogger(__name__)

DEFAULT_CODE_LANGUAGE = "javascript"
DEFAULT_FILE_TYPES = ["pdf", "doc", "docx"]
OPTION_LETTERS = "ABCD"

_LETTER_ANSWER = re.compile(r"^[A-D]$")
_QUESTION_LINE = re.compile(r"^\d+[.)]")
_QUESTION_ENUMERATOR = re.compile(r"^\d+[.)]\s*")
_OPTION_LINE = re.compile(r"^[A-D][.)]")
_OPTION_MARKER = re.compile(r"^[A-D][.)]\s*")
# The letter must stand alone: "Answer: B", "Answer: (B)", "Answer: B. ..."
# but not "Answer: B-tree" or "Answer: A linked list"
_ANSWER_LETTER = re.compile(
    r"answer\s*:\s*\(?([A-D])(?:[.)]|\s*$)", re.IGNORECASE
)


class ParseError(ValueError):
    """Raised when LLM output cannot be decoded by a parsing strategy."""


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class ParseContext:
    """Request details the parser needs to build question records."""

    topic: str
    difficulty: DifficultyLevel = DifficultyLevel.MEDIUM
    total_questions: int = 0
    include_explanations: bool = True
    id_prefix: str = "ai"
    timestamp_ms: int = field(default_factory=_now_ms)

    @classmethod
    def from_request(
        cls, request: GenerationRequest, id_prefix: str = "ai"
    ) -> "ParseContext":
        """Build a context for parsing the response to ``request``."""
        return cls(
            topic=request.topic,
            difficulty=request.difficulty,
            total_questions=request.total_questions,
            include_explanations=request.include_explanations,
            id_prefix=id_prefix,
        )

    def question_id(self, index: int, fallback: bool = False) -> str:
        prefix = f"{self.id_prefix}_fallback" if fallback else self.id_prefix
        return f"{prefix}_{self.timestamp_ms}_{index}"

    def explanation(self, text: Any) -> str:
        """Return the explanation to store, empty when explanations are off."""
        if not self.include_explanations or text is None:
            return ""
        return text if isinstance(text, str) else str(text)


# ---------------------------------------------------------------------------
# Per-item decoding
# ---------------------------------------------------------------------------


def _first_present(item: Mapping[str, Any], *keys: str) -> Any:
    """Return the first value under ``keys`` that is not None."""
    for key in keys:
        value = item.get(key)
        if value is not None:
            return value
    return None


def _first_truthy(item: Mapping[str, Any], *keys: str) -> Any:
    """Return the first value under ``keys`` that is truthy."""
    for key in keys:
        value = item.get(key)
        if value:
            return value
    return None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _answer_text(value: Any) -> Union[str, List[str]]:
    """Pass an open answer through, keeping lists as lists of strings."""
    if isinstance(value, list):
        return [_as_text(v) for v in value]
    return _as_text(value)


def letter_to_index(answer: Any) -> str:
    """Convert an answer letter A-D to a zero-based index string.

    Anything else (digits, integers, free text) is passed through as text.
    """
    if isinstance(answer, str) and _LETTER_ANSWER.match(answer):
        return str(ord(answer) - ord("A"))
    return _as_text(answer)


def _pad_options(options: Any, count: int = MCQ_OPTION_COUNT) -> List[str]:
    """Pad with empty strings or truncate so exactly ``count`` options remain."""
    values = [_as_text(o) for o in options] if isinstance(options, list) else []
    values.extend([""] * (count - len(values)))
    return values[:count]


def _fenced_code(language: str, code: Any) -> str:
    return f"```{language}\n{_as_text(code)}\n```"


def _test_cases(raw: Any) -> List[TestCase]:
    if not isinstance(raw, list):
        return []
    cases = []
    for case in raw:
        if isinstance(case, Mapping):
            cases.append(TestCase(input=case.get("input"), output=case.get("output")))
        else:
            logger.debug(f"Skipping malformed test case: {case!r}")
    return cases


def parse_question_item(
    item: Any, index: int, context: ParseContext
) -> GeneratedQuestion:
    """Decode one JSON question object into a :class:`GeneratedQuestion`.

    The item's ``type`` selects the decoding rules; missing or unknown types
    are decoded as MCQ. An item that is not an object is decoded as an empty
    MCQ.

    Args:
        item: Question object from the LLM's JSON array
        index: Zero-based position of the question in the decoded list
        context: Request details for ids and explanations

    Returns:
        Decoded question with ``order_index`` of ``index + 1``

    Raises:
        pydantic.ValidationError: If the decoded fields are inconsistent
    """
    if not isinstance(item, Mapping):
        logger.debug(f"Question {index + 1} is not an object: {item!r}")
        item = {}

    declared = _as_text(item.get("type")) or QuestionKind.MCQ.value
    kind = QuestionKind(declared) if is_known_kind(declared) else QuestionKind.MCQ

    fields: Dict[str, Any] = {
        "id": context.question_id(index),
        "type": map_kind_to_internal(declared),
        "question_text": _as_text(_first_truthy(item, "question", "question_text")),
        "explanation": context.explanation(item.get("explanation")),
        "points": 1,
        "order_index": index + 1,
        "source_kind": kind if is_known_kind(declared) else None,
    }
    answer = _first_present(item, "correctAnswer", "correct_answer")
    code_language = _as_text(item.get("codeLanguage")) or DEFAULT_CODE_LANGUAGE

    if kind == QuestionKind.MCQ:
        fields["options"] = _pad_options(item.get("options"))
        fields["correct_answer"] = letter_to_index(answer if answer is not None else 0)

    elif kind == QuestionKind.MSQ:
        options = item.get("options")
        fields["options"] = (
            [_as_text(o) for o in options]
            if isinstance(options, list) and options
            else _pad_options([])
        )
        answers = answer if isinstance(answer, list) else [answer if answer is not None else 0]
        fields["correct_answer"] = [letter_to_index(a) for a in answers]

    elif kind == QuestionKind.TRUE_FALSE:
        fields["options"] = list(TRUE_FALSE_OPTIONS)
        is_true = answer is True or (
            isinstance(answer, str) and answer.strip().lower() == "true"
        )
        fields["correct_answer"] = "0" if is_true else "1"

    elif kind in (QuestionKind.SHORT_ANSWER, QuestionKind.ESSAY):
        fields["correct_answer"] = _answer_text(
            _first_truthy(item, "correctAnswer", "correct_answer")
        )

    elif kind == QuestionKind.CODING:
        fields["code_language"] = code_language
        fields["code_template"] = _as_text(
            _first_truthy(item, "starterCode", "codeTemplate")
        )
        fields["test_cases"] = _test_cases(item.get("testCases"))
        fields["correct_answer"] = _answer_text(
            _first_truthy(item, "expectedOutput", "correctAnswer")
        )

    elif kind == QuestionKind.FILL_BLANKS:
        if isinstance(answer, list):
            fields["correct_answer"] = [_as_text(a) for a in answer]
        else:
            fields["correct_answer"] = [_as_text(answer)]

    elif kind == QuestionKind.FILE_UPLOAD:
        fields["correct_answer"] = _answer_text(
            _first_truthy(item, "correctAnswer", "correct_answer")
        )
        file_types = _first_truthy(item, "allowedFileTypes", "fileTypes")
        fields["file_types"] = (
            [_as_text(t) for t in file_types]
            if isinstance(file_types, list)
            else list(DEFAULT_FILE_TYPES)
        )

    elif kind == QuestionKind.DEBUGGING:
        fields["question_text"] = (
            f"{fields['question_text']}\n\nBuggy Code:\n"
            f"{_fenced_code(code_language, item.get('buggyCode'))}"
        )
        fields["code_language"] = code_language
        fields["correct_answer"] = _answer_text(answer)

    elif kind == QuestionKind.CODE_REVIEW:
        fields["question_text"] = (
            f"{fields['question_text']}\n\nCode to Review:\n"
            f"{_fenced_code(code_language, item.get('codeToReview'))}"
        )
        fields["code_language"] = code_language
        if isinstance(answer, list):
            fields["correct_answer"] = "\n".join(_as_text(a) for a in answer)
        else:
            fields["correct_answer"] = _as_text(answer)

    return GeneratedQuestion(**fields)


def parse_json_response(content: str, context: ParseContext) -> List[GeneratedQuestion]:
    """Parse a JSON array response into questions.

    Args:
        content: Raw LLM output, optionally wrapped in a markdown fence
        context: Request details for ids and explanations

    Items that cannot be decoded are logged and skipped; ``order_index`` is
    numbered over the questions that remain.

    Returns:
        Decoded questions in array order

    Raises:
        ParseError: If the content is not a JSON array, or the array has items
            but none of them could be decoded
    """
    json_content = strip_markdown_code_blocks(content)
    try:
        parsed = json.loads(json_content)
    except json.JSONDecodeError as e:
        raise ParseError(f"Response is not valid JSON: {str(e)}") from e

    if not isinstance(parsed, list):
        raise ParseError(f"Response is not an array: {type(parsed).__name__}")

    questions: List[GeneratedQuestion] = []
    for i, item in enumerate(parsed):
        try:
            questions.append(parse_question_item(item, len(questions), context))
        except ValidationError as e:
            logger.warning(f"Failed to parse question {i + 1} in response: {e}")
            continue

    if parsed and not questions:
        raise ParseError(f"None of the {len(parsed)} questions could be decoded")
    return questions


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


class ParseStrategy(ABC):
    """One way of turning raw LLM output into questions."""

    name: str = "strategy"

    @abstractmethod
    def try_parse(
        self, raw: str, context: ParseContext
    ) -> Optional[List[GeneratedQuestion]]:
        """Return decoded questions, or None if this strategy cannot handle ``raw``."""


class JsonArrayStrategy(ParseStrategy):
    """Structured decoding of a JSON array of question objects."""

    name = "json"

    def try_parse(
        self, raw: str, context: ParseContext
    ) -> Optional[List[GeneratedQuestion]]:
        questions = parse_json_response(raw, context)
        return questions or None


@dataclass
class _PartialQuestion:
    text: str = ""
    options: List[str] = field(default_factory=list)
    explanation: Optional[str] = None
    answer_index: Optional[int] = None


class LineScanStrategy(ParseStrategy):
    """Heuristic recovery of numbered questions from free text.

    A line starting with ``1.``/``1)`` or containing ``?`` starts a new
    question; ``A.``-``D)`` lines are options; lines mentioning an
    explanation or ``answer:`` are kept as the explanation. Every recovered
    question becomes a multiple-choice record with placeholder options for
    any that are missing.
    """

    name = "line_scan"

    def try_parse(
        self, raw: str, context: ParseContext
    ) -> Optional[List[GeneratedQuestion]]:
        partials: List[_PartialQuestion] = []
        current: Optional[_PartialQuestion] = None

        for line in (raw or "").split("\n"):
            trimmed = line.strip()
            if not trimmed:
                continue

            if _QUESTION_LINE.match(trimmed) or "?" in trimmed:
                if current is not None and current.text:
                    partials.append(current)
                current = _PartialQuestion(text=_QUESTION_ENUMERATOR.sub("", trimmed))
            elif _OPTION_LINE.match(trimmed):
                if current is None:
                    current = _PartialQuestion()
                current.options.append(_OPTION_MARKER.sub("", trimmed))
            elif "explanation" in trimmed.lower() or "answer:" in trimmed.lower():
                if current is not None:
                    current.explanation = trimmed
                    answer = _ANSWER_LETTER.search(trimmed)
                    if answer:
                        current.answer_index = ord(answer.group(1).upper()) - ord("A")

        if current is not None and current.text:
            partials.append(current)

        if not partials:
            return None

        return [
            self._materialize(partial, index, context)
            for index, partial in enumerate(partials)
        ]

    @staticmethod
    def _materialize(
        partial: _PartialQuestion, index: int, context: ParseContext
    ) -> GeneratedQuestion:
        options = partial.options[:MCQ_OPTION_COUNT]
        options += [
            f"Option {OPTION_LETTERS[i]}" for i in range(len(options), MCQ_OPTION_COUNT)
        ]
        return GeneratedQuestion(
            id=context.question_id(index),
            type=QuestionType.MULTIPLE_CHOICE,
            question_text=partial.text,
            options=options,
            correct_answer=str(partial.answer_index or 0),
            explanation=context.explanation(partial.explanation),
            points=1,
            order_index=index + 1,
            source_kind=QuestionKind.MCQ,
        )


class PlaceholderStrategy(ParseStrategy):
    """Synthesizes placeholder questions about the topic. Always succeeds."""

    name = "placeholder"

    def try_parse(
        self, raw: str, context: ParseContext
    ) -> Optional[List[GeneratedQuestion]]:
        topic = context.topic
        difficulty = context.difficulty.value.lower()
        return [
            GeneratedQuestion(
                id=context.question_id(i, fallback=True),
                type=QuestionType.MULTIPLE_CHOICE,
                question_text=f"Question {i + 1}: What is a key concept related to {topic}?",
                options=[
                    f"Option {letter} related to {topic}" for letter in OPTION_LETTERS
                ],
                correct_answer="0",
                explanation=context.explanation(
                    f"This question tests understanding of {topic} at {difficulty} level."
                ),
                points=1,
                order_index=i + 1,
                source_kind=QuestionKind.MCQ,
            )
            for i in range(context.total_questions)
        ]


DEFAULT_STRATEGIES: Sequence[ParseStrategy] = (
    JsonArrayStrategy(),
    LineScanStrategy(),
    PlaceholderStrategy(),
)


class ResponseParser:
    """Runs parse strategies in order and returns the first non-empty result."""

    def __init__(self, strategies: Optional[Sequence[ParseStrategy]] = None):
        """
        Initialize the parser.

        Args:
            strategies: Strategies to try in order (default: JSON, line scan,
                placeholder)
        """
        self.strategies = list(strategies if strategies is not None else DEFAULT_STRATEGIES)

    def parse(self, raw: str, context: ParseContext) -> List[GeneratedQuestion]:
        """Decode ``raw`` into questions.

        Args:
            raw: Raw LLM output
            context: Request details for ids, explanations and placeholders

        Returns:
            Questions from the first strategy that produced any, or an empty
            list if none did
        """
        for strategy in self.strategies:
            try:
                questions = strategy.try_parse(raw, context)
            except (ValueError, TypeError, KeyError, AttributeError) as e:
                logger.warning(f"{strategy.name} parsing failed: {str(e)}")
                logger.debug(f"Response was: {(raw or '')[:500]}")
                continue

            if questions:
                if strategy is not self.strategies[0]:
                    logger.warning(
                        f"Recovered {len(questions)} questions with "
                        f"{strategy.name} fallback parsing"
                    )
                return questions

            logger.info(f"{strategy.name} parsing produced no questions")

        return []


def parse_llm_response(raw: str, context: ParseContext) -> List[GeneratedQuestion]:
    """Parse raw LLM output with the default strategy cascade."""
    return ResponseParser().parse(raw, context)
