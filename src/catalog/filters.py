"""Filter state for the question catalog.

Holds the seven filter dimensions and enforces the taxonomy cascade:
setting ``subject`` clears ``topic`` and ``subtopic``; setting ``topic``
clears ``subtopic``. The remaining dimensions are independent.

Values are not checked against the taxonomy here. Callers offer options
from ``available_options`` and may clean restored state with
``validate_against_taxonomy``.
"""

from dataclasses import dataclass, asdict, replace
from typing import Any, Dict, List, Optional, Tuple
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import config
from config.constants import (
    DIMENSIONS,
    DIMENSION_SUBJECT,
    DIMENSION_TOPIC,
    DIMENSION_SUBTOPIC,
    DIMENSION_SOURCE,
    ENUMERATED_VALUES,
    SOURCE_SUGGESTIONS,
    get_dimension_label,
)
from config.logging_config import get_logger
from src.catalog.taxonomy import TaxonomyStore

logger = get_logger("filters")

# Short keys used when encoding filters as URL parameters
URL_PARAM_KEYS: Dict[str, str] = {
    "subject": "s",
    "topic": "t",
    "subtopic": "st",
    "source": "src",
    "difficulty": "d",
    "question_type": "qt",
    "format": "f",
}


@dataclass(frozen=True)
class FilterSnapshot:
    """Immutable view of the filter dimensions at one point in time."""

    subject: str = ""
    topic: str = ""
    subtopic: str = ""
    source: str = ""
    difficulty: str = ""
    question_type: str = ""
    format: str = ""

    def get(self, name: str) -> str:
        """Get the value of a dimension by name."""
        if name not in DIMENSIONS:
            raise ValueError(f"Unknown filter dimension: {name}")
        return getattr(self, name)

    def as_dict(self) -> Dict[str, str]:
        """All seven dimensions, including empty ones."""
        return asdict(self)

    @property
    def is_empty(self) -> bool:
        """Check if all filters are empty (matching every question)."""
        return self.active_filter_count == 0

    @property
    def active_filter_count(self) -> int:
        """Count of dimensions with a non-blank value."""
        return sum(1 for name in DIMENSIONS if getattr(self, name).strip())

    def normalized(self) -> "FilterSnapshot":
        """Drop lower hierarchy levels whose parent level is unset."""
        snapshot = self
        if not snapshot.subject.strip():
            snapshot = replace(snapshot, topic="", subtopic="")
        elif not snapshot.topic.strip():
            snapshot = replace(snapshot, subtopic="")
        return snapshot

    def get_summary(self) -> str:
        """Get a human-readable summary of active filters."""
        parts = []
        path = [v for v in (self.subject, self.topic, self.subtopic) if v.strip()]
        if path:
            parts.append(" > ".join(path))

        for name in DIMENSIONS[3:]:
            value = getattr(self, name)
            if value.strip():
                parts.append(f"{get_dimension_label(name)}: {value}")

        return " | ".join(parts) if parts else "All questions (no filters)"

    def to_url_params(self) -> Dict[str, str]:
        """
        Convert filter state to URL-friendly parameters.

        Returns:
            Dict of short parameter name to value, empty dimensions omitted.
        """
        return {
            URL_PARAM_KEYS[name]: getattr(self, name)
            for name in DIMENSIONS
            if getattr(self, name)
        }

    @classmethod
    def from_url_params(cls, params: Dict[str, Any]) -> "FilterSnapshot":
        """
        Create filter state from URL parameters.

        Args:
            params: Dict of URL parameters; list values use the first item.

        Returns:
            FilterSnapshot with the hierarchy constraints applied.
        """
        values = {}
        for name, key in URL_PARAM_KEYS.items():
            if key not in params:
                continue
            value = params[key]
            if isinstance(value, list):
                value = value[0] if value else ""
            values[name] = "" if value is None else str(value)
        return cls(**values).normalized()


class FilterModel:
    """Owns the current filter dimensions for one browsing session."""

    def __init__(self, history_limit: Optional[int] = None):
        """
        Initialize with every dimension empty.

        Args:
            history_limit: Maximum number of previous states kept for
                ``restore_previous``. Defaults to config.
        """
        self._state = FilterSnapshot()
        self._history: List[FilterSnapshot] = []
        self.history_limit = history_limit or config.query.history_limit

    def set_dimension(self, name: str, value: Optional[str]) -> FilterSnapshot:
        """
        Set one dimension, applying the taxonomy cascade.

        Args:
            name: One of the seven dimension names.
            value: New value, stripped; None and blank strings mean unset.

        Returns:
            The resulting snapshot.

        Raises:
            ValueError: If name is not a filter dimension.
        """
        if name not in DIMENSIONS:
            raise ValueError(f"Unknown filter dimension: {name}")

        value = "" if value is None else str(value).strip()
        self._push_history(self._state)

        if name == DIMENSION_SUBJECT:
            self._state = replace(self._state, subject=value, topic="", subtopic="")
        elif name == DIMENSION_TOPIC:
            self._state = replace(self._state, topic=value, subtopic="")
        else:
            self._state = replace(self._state, **{name: value})

        logger.debug(f"Filter {name}={value!r} -> {self._state.get_summary()}")
        return self._state

    def reset(self) -> FilterSnapshot:
        """Reset all dimensions to empty."""
        self._push_history(self._state)
        self._state = FilterSnapshot()
        return self._state

    def snapshot(self) -> FilterSnapshot:
        """Get the current immutable filter values."""
        return self._state

    def load(self, snapshot: FilterSnapshot) -> FilterSnapshot:
        """Replace the whole state, e.g. when restoring from URL parameters."""
        self._push_history(self._state)
        self._state = snapshot.normalized()
        return self._state

    def restore_previous(self) -> bool:
        """
        Restore the previous filter state from history.

        Returns:
            True if filters were restored, False if no history.
        """
        if not self._history:
            return False
        self._state = self._history.pop()
        return True

    @property
    def history_count(self) -> int:
        """Number of filter states in history."""
        return len(self._history)

    def _push_history(self, state: FilterSnapshot) -> None:
        if state.is_empty:
            return  # Don't save empty states

        # Don't add duplicate consecutive entries
        if self._history and self._history[-1] == state:
            return

        self._history.append(state)
        if len(self._history) > self.history_limit:
            self._history = self._history[-self.history_limit:]


def available_options(
    taxonomy: TaxonomyStore,
    snapshot: FilterSnapshot,
    dimension: str,
) -> List[str]:
    """
    Get the option list a UI should offer for a dimension.

    Args:
        taxonomy: Taxonomy reference data.
        snapshot: Current filter state (drives the dependent lists).
        dimension: Dimension name.

    Returns:
        Ordered option values. Empty for unknown hierarchy paths; source
        returns suggestions only since it is free text.
    """
    if dimension == DIMENSION_SUBJECT:
        return list(taxonomy.subjects())
    if dimension == DIMENSION_TOPIC:
        return list(taxonomy.topics(snapshot.subject))
    if dimension == DIMENSION_SUBTOPIC:
        return list(taxonomy.subtopics(snapshot.subject, snapshot.topic))
    if dimension == DIMENSION_SOURCE:
        return list(SOURCE_SUGGESTIONS)
    if dimension in ENUMERATED_VALUES:
        return list(ENUMERATED_VALUES[dimension])
    raise ValueError(f"Unknown filter dimension: {dimension}")


def validate_against_taxonomy(
    snapshot: FilterSnapshot,
    taxonomy: TaxonomyStore,
) -> Tuple[FilterSnapshot, List[str]]:
    """
    Validate filter state against the taxonomy and enumerations.

    Removes any values that are not offered as options, cascading down
    the hierarchy when a parent level is removed.

    Args:
        snapshot: Filter state to check (e.g. restored from a bookmark).
        taxonomy: Taxonomy reference data.

    Returns:
        Tuple of (validated FilterSnapshot, list of removed values).
    """
    removed = []
    values = snapshot.normalized().as_dict()

    if values["subject"] and values["subject"] not in taxonomy:
        removed.append(f"Subject: {values['subject']}")
        values["subject"] = ""

    if values["topic"] and not taxonomy.has_topic(values["subject"], values["topic"]):
        removed.append(f"Topic: {values['topic']}")
        values["topic"] = ""

    if values["subtopic"] and not taxonomy.has_subtopic(
        values["subject"], values["topic"], values["subtopic"]
    ):
        removed.append(f"Subtopic: {values['subtopic']}")
        values["subtopic"] = ""

    for name, allowed in ENUMERATED_VALUES.items():
        if values[name] and values[name] not in allowed:
            removed.append(f"{get_dimension_label(name)}: {values[name]}")
            values[name] = ""

    if removed:
        logger.info(f"Removed filter values not in taxonomy: {', '.join(removed)}")

    return FilterSnapshot(**values).normalized(), removed
