"""Read-only subject -> topic -> subtopic taxonomy.

The tree is loaded once at startup from config/taxonomy.yaml and never
mutated. Lookups for unknown or unset keys return empty tuples instead of
raising, so option lists can be requested for any filter state.
"""

from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple
import sys

PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.config_loader import load_taxonomy_data, load_taxonomy_file
from config.logging_config import get_logger

logger = get_logger("taxonomy")


class TaxonomyStore:
    """Immutable three-level taxonomy with ordered lookups."""

    def __init__(self, tree: Mapping[str, Mapping[str, Iterable[str]]]):
        """
        Build the store from a nested mapping.

        Args:
            tree: subject -> topic -> ordered subtopics. Insertion order of
                the mappings is kept as display order.
        """
        frozen: Dict[str, Mapping[str, Tuple[str, ...]]] = {}
        for subject, topics in tree.items():
            frozen[subject] = MappingProxyType(
                {topic: tuple(subtopics) for topic, subtopics in topics.items()}
            )
        self._tree: Mapping[str, Mapping[str, Tuple[str, ...]]] = MappingProxyType(frozen)

    @classmethod
    def from_dict(cls, tree: Mapping[str, Mapping[str, Iterable[str]]]) -> "TaxonomyStore":
        """Create a store from an in-memory tree."""
        return cls(tree)

    @classmethod
    def from_yaml(cls, path: Path) -> "TaxonomyStore":
        """Create a store from a taxonomy YAML file (raises ConfigurationError)."""
        store = cls(load_taxonomy_file(path))
        logger.info(f"Loaded taxonomy from {path}: {len(store)} subjects")
        return store

    def subjects(self) -> Tuple[str, ...]:
        """All subjects in display order."""
        return tuple(self._tree.keys())

    def topics(self, subject: Optional[str]) -> Tuple[str, ...]:
        """Topics under a subject, empty if the subject is unset or unknown."""
        if not subject:
            return ()
        return tuple(self._tree.get(subject, {}).keys())

    def subtopics(self, subject: Optional[str], topic: Optional[str]) -> Tuple[str, ...]:
        """Subtopics under subject/topic, empty if either is unset or unknown."""
        if not subject or not topic:
            return ()
        return self._tree.get(subject, {}).get(topic, ())

    def has_topic(self, subject: str, topic: str) -> bool:
        """Check whether topic is a key under subject."""
        return topic in self.topics(subject)

    def has_subtopic(self, subject: str, topic: str, subtopic: str) -> bool:
        """Check whether subtopic belongs to subject/topic."""
        return subtopic in self.subtopics(subject, topic)

    def __contains__(self, subject: object) -> bool:
        return subject in self._tree

    def __len__(self) -> int:
        return len(self._tree)

    def __repr__(self) -> str:
        return f"TaxonomyStore(subjects={len(self)})"


@lru_cache(maxsize=1)
def load_taxonomy() -> TaxonomyStore:
    """
    Get the process-wide taxonomy loaded from config/taxonomy.yaml.

    Returns:
        Cached TaxonomyStore instance.
    """
    store = TaxonomyStore(load_taxonomy_data())
    logger.debug(f"Taxonomy ready: {len(store)} subjects")
    return store
