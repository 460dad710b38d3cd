"""Command line question generation.

Generates one assessment's questions with a single provider and prints the
result as JSON.

Exit Codes:
    0 - Success
    2 - Generation failure (provider or transport error)
    3 - Configuration error (bad arguments, missing API key)
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import ValidationError

from .config import DEFAULT_MODELS, Settings
from .generator import create_generator
from .logging_config import setup_logging
from .models import (
    MIXED,
    AssessmentType,
    DifficultyLevel,
    DistributionMode,
    GenerationRequest,
)

# Exit codes
EXIT_SUCCESS = 0
EXIT_GENERATION_FAILURE = 2
EXIT_CONFIG_ERROR = 3


def parse_manual_counts(values: Optional[List[str]]) -> Optional[Dict[str, int]]:
    """Parse ``TYPE=N`` pairs into a manual distribution.

    Raises:
        ValueError: If a pair is malformed or N is not an integer
    """
    if not values:
        return None
    counts: Dict[str, int] = {}
    for value in values:
        type_id, sep, count = value.partition("=")
        if not sep or not type_id:
            raise ValueError(f"Expected TYPE=N, got '{value}'")
        counts[type_id.strip()] = int(count)
    return counts


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Generate assessment questions with an LLM provider",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 20 medium questions about recursion, auto-distributed
  assessment-gen --topic recursion --count 20

  # 5 true/false questions with Gemini
  assessment-gen --topic "HTTP caching" --count 5 --types true-false --provider google

  # Manual distribution
  assessment-gen --topic SQL --count 6 --manual multiple-choice=4 coding=2
        """,
    )

    parser.add_argument("--topic", required=True, help="Topic of the questions")
    parser.add_argument(
        "--count", type=int, default=10, help="Number of questions (default: 10)"
    )
    parser.add_argument(
        "--difficulty",
        choices=[dl.value for dl in DifficultyLevel],
        default=DifficultyLevel.MEDIUM.value,
        help="Difficulty level (default: Medium)",
    )
    parser.add_argument(
        "--assessment-type",
        choices=[at.value for at in AssessmentType],
        default=AssessmentType.QUIZ.value,
    )
    parser.add_argument(
        "--time-limit", type=int, default=30, help="Time limit in minutes"
    )
    parser.add_argument(
        "--types",
        nargs="+",
        default=[MIXED],
        help="Question types (e.g. multiple-choice coding) or Mixed (default)",
    )
    parser.add_argument(
        "--manual",
        nargs="+",
        metavar="TYPE=N",
        default=None,
        help="Manual per-type counts; switches to manual distribution",
    )
    parser.add_argument("--focus", nargs="*", default=[], help="Focus areas")
    parser.add_argument(
        "--no-explanations",
        action="store_true",
        help="Do not request explanations",
    )
    parser.add_argument(
        "--provider",
        choices=list(DEFAULT_MODELS.keys()),
        default=None,
        help="LLM provider (default: DEFAULT_PROVIDER setting)",
    )
    parser.add_argument("--model", default=None, help="Model override")
    parser.add_argument(
        "--output", type=str, default=None, help="Write JSON result to this file"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    parser.add_argument(
        "--log-file", type=str, default=None, help="Also write logs to this file"
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    args = parse_arguments(argv)
    settings = Settings()

    setup_logging(
        log_level="DEBUG" if args.verbose else settings.log_level,
        log_file=args.log_file,
        enable_file_logging=args.log_file is not None,
    )
    logger = logging.getLogger(__name__)

    try:
        manual = parse_manual_counts(args.manual)
        request = GenerationRequest(
            topic=args.topic,
            difficulty=DifficultyLevel(args.difficulty),
            total_questions=args.count,
            assessment_type=AssessmentType(args.assessment_type),
            time_limit_minutes=args.time_limit,
            include_explanations=not args.no_explanations,
            focus_areas=args.focus,
            selected_types=args.types,
            distribution_mode=(
                DistributionMode.MANUAL if manual else DistributionMode.AUTO
            ),
            manual_distribution=manual,
            model=args.model,
        )
    except (ValidationError, ValueError) as e:
        logger.error(f"Invalid request: {str(e)}")
        return EXIT_CONFIG_ERROR

    try:
        generator = create_generator(args.provider, settings)
    except ValueError as e:
        logger.error(str(e))
        return EXIT_CONFIG_ERROR

    if not generator.is_configured():
        logger.error(f"{generator.provider_name} API key is not configured")
        return EXIT_CONFIG_ERROR

    result = generator.generate_questions(request)
    output = result.model_dump_json(indent=2, exclude_none=True)

    if args.output:
        Path(args.output).write_text(output + "\n", encoding="utf-8")
        logger.info(f"Wrote {len(result.questions)} questions to {args.output}")
    else:
        print(output)

    if not result.success:
        logger.error(f"Generation failed: {result.error}")
        return EXIT_GENERATION_FAILURE
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
