"""
Core Module - Shared domain models.

Components:
- question: Question model, option resolution, integrity check, localized text
- srs: Retrievability and the default domain scoring function
"""

from miaaula.core.question import (
    NO_ANSWER_TEXT,
    OPTION_KEYS,
    UNANSWERED,
    IntegrityCheck,
    Question,
    check_integrity,
    coerce_questions,
    get_text,
)
from miaaula.core.srs import (
    DomainFn,
    calculate_current_domain,
    calculate_retrievability,
)

__all__ = [
    # Question
    "Question",
    "IntegrityCheck",
    "OPTION_KEYS",
    "UNANSWERED",
    "NO_ANSWER_TEXT",
    "check_integrity",
    "coerce_questions",
    "get_text",
    # SRS
    "DomainFn",
    "calculate_current_domain",
    "calculate_retrievability",
]
