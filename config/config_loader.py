"""YAML Configuration Loader for the Question Bank Curator.

Loads and caches reference data from YAML files with fallback to defaults.
"""

from pathlib import Path
from typing import Any, Dict, List
from functools import lru_cache
import yaml

# Get config directory
CONFIG_DIR = Path(__file__).parent

TAXONOMY_FILE = "taxonomy.yaml"

# Used when taxonomy.yaml is missing: subjects without topics
FALLBACK_SUBJECTS: List[str] = [
    "Polity",
    "Economy",
    "Ancient History",
    "Medieval History",
    "Modern History",
    "Post Independence",
    "Geography",
    "Science and Technology",
    "Environment",
    "Sport & Awards",
    "Miscellaneous",
]


class ConfigurationError(Exception):
    """Raised when configuration loading or access fails."""

    pass


def _load_yaml_file(filepath: Path) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filepath: Path of the YAML file

    Returns:
        Parsed YAML content as dictionary

    Raises:
        ConfigurationError: If file cannot be loaded
    """
    if not filepath.exists():
        raise ConfigurationError(f"Configuration file not found: {filepath}")

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Error parsing {filepath.name}: {e}")
    except IOError as e:
        raise ConfigurationError(f"Error reading {filepath.name}: {e}")


def parse_taxonomy(data: Dict[str, Any]) -> Dict[str, Dict[str, List[str]]]:
    """
    Normalize raw taxonomy YAML into subject -> topic -> subtopics.

    Subjects may map to null (no topics) and topics may map to null
    (no subtopics).

    Raises:
        ConfigurationError: If the structure is not a three-level tree
    """
    subjects = data.get("subjects", data)
    if not isinstance(subjects, dict):
        raise ConfigurationError("Taxonomy must map subjects to topics")

    tree: Dict[str, Dict[str, List[str]]] = {}
    for subject, topics in subjects.items():
        topics = topics or {}
        if not isinstance(topics, dict):
            raise ConfigurationError(f"Topics of '{subject}' must be a mapping")
        tree[str(subject)] = {}
        for topic, subtopics in topics.items():
            subtopics = subtopics or []
            if not isinstance(subtopics, list):
                raise ConfigurationError(
                    f"Subtopics of '{subject}/{topic}' must be a list"
                )
            tree[str(subject)][str(topic)] = [str(s) for s in subtopics]
    return tree


def load_taxonomy_file(filepath: Path) -> Dict[str, Dict[str, List[str]]]:
    """Load and normalize a taxonomy file, raising ConfigurationError on failure."""
    return parse_taxonomy(_load_yaml_file(filepath))


@lru_cache(maxsize=1)
def load_taxonomy_data() -> Dict[str, Dict[str, List[str]]]:
    """Load taxonomy.yaml configuration."""
    try:
        return load_taxonomy_file(CONFIG_DIR / TAXONOMY_FILE)
    except ConfigurationError:
        # Return minimal fallback defaults
        return {subject: {} for subject in FALLBACK_SUBJECTS}


def clear_config_cache() -> None:
    """Clear all cached configuration data."""
    load_taxonomy_data.cache_clear()
