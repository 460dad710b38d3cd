"""Assessment Question Generation Service."""

from assessment_gen.config import ConfigurationError, ProviderConfig, Settings
from assessment_gen.distribution import calculate_question_distribution
from assessment_gen.generator import QuestionGenerator, create_generator
from assessment_gen.models import (
    MIXED,
    AssessmentType,
    DifficultyLevel,
    DistributionMode,
    GeneratedQuestion,
    GenerationRequest,
    GenerationResult,
    QuestionKind,
    QuestionType,
)
from assessment_gen.parsing import ParseContext, ParseError, ResponseParser
from assessment_gen.prompts import build_question_generation_prompt

__version__ = "0.1.0"

__all__ = [
    "MIXED",
    "AssessmentType",
    "ConfigurationError",
    "DifficultyLevel",
    "DistributionMode",
    "GeneratedQuestion",
    "GenerationRequest",
    "GenerationResult",
    "ParseContext",
    "ParseError",
    "ProviderConfig",
    "QuestionGenerator",
    "QuestionKind",
    "QuestionType",
    "ResponseParser",
    "Settings",
    "build_question_generation_prompt",
    "calculate_question_distribution",
    "create_generator",
]
