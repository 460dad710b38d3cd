"""Prompt templates for assessment question generation.

The format catalog below is the contract between the generation prompt and
:mod:`assessment_gen.parsing`: field names and cardinalities requested here
are exactly the ones the JSON decoder reads back.
"""

from typing import Mapping, Optional, Sequence, Union

from .models import AssessmentType, DifficultyLevel, QuestionKind

# System message for chat-style backends
SYSTEM_PROMPT = (
    "You are an expert educational content creator specializing in creating "
    "high-quality assessment questions. Generate questions that are clear, "
    "accurate, and appropriate for the specified difficulty level."
)

PERSONA_PREAMBLE = (
    "You are an expert educational content creator specializing in creating "
    "high-quality assessment questions."
)

# Output shape for every question kind. Invariant text, independent of the request.
QUESTION_FORMAT_CATALOG = """REQUIREMENTS FOR EACH QUESTION TYPE:

1. MCQ (Multiple Choice):
   - Exactly 4 options (A, B, C, D)
   - One correct answer
   - Options should be plausible distractors
   - Format: { "type": "MCQ", "question": "...", "options": ["...", "...", "...", "..."], "correctAnswer": "A" or 0, "explanation": "..." }

2. MSQ (Multiple Select):
   - At least 4 options
   - Multiple correct answers (2-3)
   - Format: { "type": "MSQ", "question": "...", "options": ["...", "..."], "correctAnswer": ["A", "C"] or [0, 2], "explanation": "..." }

3. TrueFalse:
   - Only two options: "True" and "False"
   - Format: { "type": "TrueFalse", "question": "...", "correctAnswer": "True" or "False", "explanation": "..." }

4. ShortAnswer:
   - Brief answer expected (1-2 sentences)
   - Format: { "type": "ShortAnswer", "question": "...", "correctAnswer": "expected answer text", "explanation": "..." }

5. Essay:
   - Detailed response expected (5-10 lines)
   - Format: { "type": "Essay", "question": "...", "correctAnswer": "sample answer or rubric", "explanation": "..." }

6. Coding:
   - Programming problem with code solution
   - Include starter code template
   - Include test cases
   - Format: { "type": "Coding", "question": "...", "starterCode": "...", "expectedOutput": "...", "testCases": [{"input": "...", "output": "..."}], "codeLanguage": "javascript" or "python", "explanation": "..." }

7. FillBlanks:
   - Text with blanks to fill
   - Format: { "type": "FillBlanks", "question": "Text with ___ blanks", "correctAnswer": ["answer1", "answer2"], "explanation": "..." }

8. FileUpload:
   - Scenario-based file submission
   - Format: { "type": "FileUpload", "question": "...", "correctAnswer": "description of expected file", "explanation": "..." }

9. Debugging:
   - Code with errors to fix
   - Format: { "type": "Debugging", "question": "...", "buggyCode": "...", "correctAnswer": "fixed code", "explanation": "..." }

10. CodeReview:
    - Code to review and find issues
    - Format: { "type": "CodeReview", "question": "...", "codeToReview": "...", "correctAnswer": "list of issues found", "explanation": "..." }"""

CLOSING_INSTRUCTION = (
    "Return ONLY a JSON array of questions in the exact format specified above. "
    "No additional text or markdown formatting outside the JSON array."
)


def _enum_value(value: Union[str, DifficultyLevel, AssessmentType, QuestionKind]) -> str:
    return value.value if hasattr(value, "value") else str(value)


def format_distribution(question_distribution: Mapping[QuestionKind, int]) -> str:
    """Render a distribution as one ``- N <Kind> questions`` bullet per kind.

    Kinds with a zero or missing count are left out.
    """
    return "\n".join(
        f"- {count} {_enum_value(kind)} questions"
        for kind, count in question_distribution.items()
        if count and count > 0
    )


def build_question_generation_prompt(
    topic: str,
    difficulty: Union[DifficultyLevel, str],
    total_questions: int,
    assessment_type: Union[AssessmentType, str],
    question_distribution: Mapping[QuestionKind, int],
    include_explanations: bool,
    focus_areas: Optional[Sequence[str]],
    time_limit: int,
) -> str:
    """Build the generation prompt for one assessment.

    The output depends only on the arguments; identical inputs produce
    identical prompts.

    Args:
        topic: Subject of the questions
        difficulty: Difficulty level
        total_questions: Number of questions requested
        assessment_type: Quiz, Test or Practice
        question_distribution: Per-kind question counts
        include_explanations: Whether explanations are requested
        focus_areas: Optional sub-topics to emphasise
        time_limit: Time limit in minutes

    Returns:
        Complete prompt string for the LLM
    """
    difficulty_text = _enum_value(difficulty).lower()
    focus_areas_text = (
        f"\nFocus Areas: {', '.join(focus_areas)}" if focus_areas else ""
    )
    distribution_text = format_distribution(question_distribution)
    explanations_text = (
        "Include explanations for all questions."
        if include_explanations
        else "No explanations needed."
    )

    return f"""{PERSONA_PREAMBLE}

Generate {total_questions} {difficulty_text} difficulty assessment questions for the topic: "{topic}".

Assessment Type: {_enum_value(assessment_type)}
Time Limit: {time_limit} minutes
{focus_areas_text}

QUESTION DISTRIBUTION:
{distribution_text}

{QUESTION_FORMAT_CATALOG}

{explanations_text}

IMPORTANT:
- All questions must be relevant to the topic: {topic}
- Questions should be {difficulty_text} difficulty level
- No placeholders, no empty values
- Use real-world, practical, exam-level questions
- Keep questions clear and technically accurate

{CLOSING_INSTRUCTION}"""
