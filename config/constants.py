"""Constants for the Question Bank Curator.

Filter dimensions, enumerated attribute values and question form defaults.
The subject/topic/subtopic hierarchy itself lives in taxonomy.yaml and is
loaded through config_loader.

IMPORTANT: All filter defaults are EMPTY (match every question).
"""

from typing import Dict, List, Tuple


# =============================================================================
# Filter Dimensions
# =============================================================================

DIMENSION_SUBJECT = "subject"
DIMENSION_TOPIC = "topic"
DIMENSION_SUBTOPIC = "subtopic"
DIMENSION_SOURCE = "source"
DIMENSION_DIFFICULTY = "difficulty"
DIMENSION_QUESTION_TYPE = "question_type"
DIMENSION_FORMAT = "format"

# Canonical order, also the order of predicate keys
DIMENSIONS: Tuple[str, ...] = (
    DIMENSION_SUBJECT,
    DIMENSION_TOPIC,
    DIMENSION_SUBTOPIC,
    DIMENSION_SOURCE,
    DIMENSION_DIFFICULTY,
    DIMENSION_QUESTION_TYPE,
    DIMENSION_FORMAT,
)

HIERARCHY_DIMENSIONS: Tuple[str, ...] = (
    DIMENSION_SUBJECT,
    DIMENSION_TOPIC,
    DIMENSION_SUBTOPIC,
)

INDEPENDENT_DIMENSIONS: Tuple[str, ...] = (
    DIMENSION_SOURCE,
    DIMENSION_DIFFICULTY,
    DIMENSION_QUESTION_TYPE,
    DIMENSION_FORMAT,
)

# Human readable labels for summaries and CLI output
DIMENSION_LABELS: Dict[str, str] = {
    DIMENSION_SUBJECT: "Subject",
    DIMENSION_TOPIC: "Topic",
    DIMENSION_SUBTOPIC: "Subtopic",
    DIMENSION_SOURCE: "Source",
    DIMENSION_DIFFICULTY: "Difficulty",
    DIMENSION_QUESTION_TYPE: "Type",
    DIMENSION_FORMAT: "Format",
}


# =============================================================================
# Enumerated Attribute Values
# =============================================================================

DIFFICULTIES: List[str] = ["Easy", "Medium", "Hard"]

QUESTION_TYPES: List[str] = ["Factual", "Conceptual", "Analytical"]

FORMATS: List[str] = [
    "Single Liner",
    "Two Statement",
    "Three Statement",
    "More than Three Statements",
    "Pairing",
    "Assertion/Reason",
]

CORRECT_OPTIONS: List[str] = ["A", "B", "C", "D"]

# Suggestions only; source is free text
SOURCE_SUGGESTIONS: List[str] = ["PYQ", "Mock Test", "Current Affairs"]

ENUMERATED_VALUES: Dict[str, List[str]] = {
    DIMENSION_DIFFICULTY: DIFFICULTIES,
    DIMENSION_QUESTION_TYPE: QUESTION_TYPES,
    DIMENSION_FORMAT: FORMATS,
}


# =============================================================================
# Question Form Defaults
# =============================================================================

DEFAULT_CORRECT_OPTION = "A"
DEFAULT_DIFFICULTY = "Easy"
DEFAULT_QUESTION_TYPE = "Factual"
DEFAULT_FORMAT = "Single Liner"


# =============================================================================
# Backend
# =============================================================================

QUESTIONS_ENDPOINT = "/questions"
EXPORT_ENDPOINT = "/questions/export"
PDF_CONTENT_TYPE = "application/pdf"


def get_dimension_label(name: str) -> str:
    """Get display label for a filter dimension."""
    return DIMENSION_LABELS.get(name, name)
