"""Data models for assessment question generation."""

from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Selection sentinel that asks for a difficulty-weighted mix of question kinds
MIXED = "Mixed"


class DifficultyLevel(str, Enum):
    """Difficulty levels for generated questions."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class AssessmentType(str, Enum):
    """Kinds of assessment a question set is generated for."""

    QUIZ = "Quiz"
    TEST = "Test"
    PRACTICE = "Practice"


class DistributionMode(str, Enum):
    """How per-kind question counts are decided."""

    AUTO = "auto"
    MANUAL = "manual"


class QuestionKind(str, Enum):
    """Question kinds as named in the LLM output format."""

    MCQ = "MCQ"
    MSQ = "MSQ"
    TRUE_FALSE = "TrueFalse"
    SHORT_ANSWER = "ShortAnswer"
    ESSAY = "Essay"
    CODING = "Coding"
    FILL_BLANKS = "FillBlanks"
    FILE_UPLOAD = "FileUpload"
    DEBUGGING = "Debugging"
    CODE_REVIEW = "CodeReview"


class QuestionType(str, Enum):
    """Question types used by the rest of the application."""

    MULTIPLE_CHOICE = "multiple-choice"
    MULTIPLE_SELECT = "multiple-select"
    TRUE_FALSE = "true-false"
    SHORT_ANSWER = "short-answer"
    ESSAY = "essay"
    CODING = "coding"
    FILL_BLANKS = "fill-blanks"
    FILE_UPLOAD = "file-upload"


# Per-kind question counts, in the order the kinds were decided
QuestionTypeDistribution = Dict[QuestionKind, int]

MCQ_OPTION_COUNT = 4
TRUE_FALSE_OPTIONS = ["True", "False"]


class GenerationRequest(BaseModel):
    """A request to generate a set of assessment questions."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    topic: str = Field(..., min_length=1, description="Subject the questions cover")
    difficulty: DifficultyLevel = Field(
        default=DifficultyLevel.MEDIUM, description="Target difficulty"
    )
    total_questions: int = Field(
        ..., ge=0, description="Number of questions to generate"
    )
    assessment_type: AssessmentType = Field(default=AssessmentType.QUIZ)
    time_limit_minutes: int = Field(default=30, ge=0)
    include_explanations: bool = Field(default=True)
    focus_areas: List[str] = Field(default_factory=list)
    selected_types: List[str] = Field(
        default_factory=lambda: [MIXED],
        min_length=1,
        description="Internal type ids, external kinds, or the Mixed sentinel",
    )
    distribution_mode: DistributionMode = Field(default=DistributionMode.AUTO)
    manual_distribution: Optional[Dict[str, int]] = Field(
        default=None, description="Explicit per-type counts for manual mode"
    )
    model: Optional[str] = Field(
        default=None, description="Model to use instead of the provider default"
    )

    @field_validator("topic")
    @classmethod
    def validate_topic(cls, v: str) -> str:
        """Reject topics that are only whitespace."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Topic cannot be empty")
        return stripped

    @field_validator("manual_distribution")
    @classmethod
    def validate_manual_counts(
        cls, v: Optional[Dict[str, int]]
    ) -> Optional[Dict[str, int]]:
        """Manual counts must be non-negative."""
        if v is None:
            return v
        negative = [key for key, count in v.items() if count < 0]
        if negative:
            raise ValueError(f"Manual distribution counts must be >= 0: {negative}")
        return v


class TestCase(BaseModel):
    """Input/output pair attached to a coding question."""

    __test__ = False

    input: str = ""
    output: str = ""

    @field_validator("input", "output", mode="before")
    @classmethod
    def coerce_to_text(cls, v: object) -> str:
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)


class GeneratedQuestion(BaseModel):
    """A question decoded from LLM output, in the application's format.

    ``correct_answer`` holds a zero-based option index for choice questions
    (a list of indices for multiple-select), the expected answer text for open
    questions, and the list of blank answers for fill-in-the-blank questions.
    """

    id: str
    type: QuestionType
    question_text: str
    options: Optional[List[str]] = None
    correct_answer: Union[str, List[str]] = ""
    explanation: str = ""
    points: int = Field(default=1, ge=0)
    order_index: int = Field(..., ge=1)
    code_language: Optional[str] = None
    code_template: Optional[str] = None
    test_cases: Optional[List[TestCase]] = None
    file_types: Optional[List[str]] = None
    source_kind: Optional[QuestionKind] = Field(
        default=None,
        description="Kind the LLM declared; distinguishes Debugging from Coding",
    )

    @model_validator(mode="after")
    def validate_options_for_type(self) -> "GeneratedQuestion":
        """Check option cardinality for choice-based question types."""
        if self.type == QuestionType.MULTIPLE_CHOICE:
            if self.options is None or len(self.options) != MCQ_OPTION_COUNT:
                raise ValueError(
                    f"multiple-choice questions need exactly {MCQ_OPTION_COUNT} options"
                )
        elif self.type == QuestionType.TRUE_FALSE:
            if self.options != TRUE_FALSE_OPTIONS:
                raise ValueError("true-false options must be ['True', 'False']")
        elif self.type == QuestionType.MULTIPLE_SELECT:
            if not self.options:
                raise ValueError("multiple-select questions need at least one option")
        return self


class GenerationResult(BaseModel):
    """Outcome of one generation call."""

    model_config = ConfigDict(protected_namespaces=())

    success: bool
    questions: List[GeneratedQuestion] = Field(default_factory=list)
    error: Optional[str] = None
    provider: Optional[str] = None
    model: Optional[str] = None
