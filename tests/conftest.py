"""Pytest configuration and shared fixtures for question generation tests."""

import json

import pytest

from assessment_gen.models import DifficultyLevel, GenerationRequest
from assessment_gen.parsing import ParseContext


@pytest.fixture
def mock_api_key() -> str:
    """Fixture providing a mock API key for testing."""
    return "sk-test-mock-api-key-12345"


@pytest.fixture
def sample_prompt() -> str:
    """Fixture providing a sample prompt for testing."""
    return "Generate 2 easy assessment questions about recursion."


@pytest.fixture
def sample_request() -> GenerationRequest:
    """Fixture providing a small mixed-type generation request."""
    return GenerationRequest(
        topic="Recursion",
        difficulty=DifficultyLevel.MEDIUM,
        total_questions=3,
        selected_types=["multiple-choice", "true-false", "coding"],
    )


@pytest.fixture
def parse_context() -> ParseContext:
    """Fixture providing a parse context with a fixed timestamp."""
    return ParseContext(
        topic="Recursion",
        difficulty=DifficultyLevel.MEDIUM,
        total_questions=3,
        include_explanations=True,
        id_prefix="test",
        timestamp_ms=1700000000000,
    )


@pytest.fixture
def mock_question_items() -> list:
    """Fixture providing LLM question objects matching the prompt format."""
    return [
        {
            "type": "MCQ",
            "question": "What does a recursive function need to terminate?",
            "options": ["A loop", "A base case", "A global", "A class"],
            "correctAnswer": "B",
            "explanation": "Without a base case recursion never stops.",
        },
        {
            "type": "TrueFalse",
            "question": "Every recursive function can be written iteratively.",
            "correctAnswer": "True",
            "explanation": "An explicit stack can replace the call stack.",
        },
        {
            "type": "Coding",
            "question": "Write factorial(n) recursively.",
            "starterCode": "function factorial(n) {\n}",
            "expectedOutput": "120",
            "testCases": [{"input": "5", "output": "120"}],
            "codeLanguage": "javascript",
            "explanation": "factorial(n) = n * factorial(n - 1).",
        },
    ]


@pytest.fixture
def mock_json_response(mock_question_items) -> str:
    """Fixture providing a fenced JSON completion as LLMs usually return it."""
    return "```json\n" + json.dumps(mock_question_items, indent=2) + "\n```"
