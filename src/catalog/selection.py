"""Selection of questions chosen for export.

Selections are scoped to one filter context: binding the tracker to a
result set clears it on every fresh query, while pagination appends keep
earlier picks.
"""

from typing import Dict, List
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.logging_config import get_logger
from src.catalog.results import ResultSet

logger = get_logger("selection")


class SelectionTracker:
    """Insertion-ordered set of selected question identifiers."""

    def __init__(self):
        # dict keeps selection order for the export request
        self._ids: Dict[int, None] = {}

    def bind(self, result_set: ResultSet) -> "SelectionTracker":
        """Clear this selection whenever the result set is replaced."""
        result_set.add_replace_listener(self.clear)
        return self

    def toggle(self, record_id: int) -> bool:
        """
        Flip membership of an identifier.

        Returns:
            True if the identifier is now selected.
        """
        if record_id in self._ids:
            del self._ids[record_id]
            return False
        self._ids[record_id] = None
        return True

    def select_all_visible(self, result_set: ResultSet) -> int:
        """
        Add every identifier currently in the result set.

        Returns:
            Number of identifiers newly added.
        """
        added = 0
        for record_id in result_set.ids():
            if record_id not in self._ids:
                self._ids[record_id] = None
                added += 1
        return added

    def discard(self, record_id: int) -> None:
        """Remove an identifier if present (e.g. after deletion)."""
        self._ids.pop(record_id, None)

    def clear(self) -> None:
        """Empty the selection."""
        if self._ids:
            logger.debug(f"Cleared selection of {len(self._ids)} questions")
        self._ids.clear()

    def is_selected(self, record_id: int) -> bool:
        return record_id in self._ids

    def size(self) -> int:
        return len(self._ids)

    def ids(self) -> List[int]:
        """Selected identifiers in the order they were picked."""
        return list(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._ids
