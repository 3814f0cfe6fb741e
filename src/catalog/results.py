"""Result set for the current question query.

A fresh query replaces the records wholesale (and notifies listeners, which
is how the selection gets cleared); a pagination continuation appends to
them and advances the page cursor.
"""

from dataclasses import fields
from typing import Callable, Dict, Iterable, List, Optional
from pathlib import Path
import sys

import pandas as pd

PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.constants import DIMENSIONS
from config.logging_config import get_logger
from src.catalog.errors import InvariantViolation
from src.catalog.filters import FilterSnapshot
from src.catalog.models import QuestionRecord
from src.catalog.query import RetrievalMode

logger = get_logger("results")

# Column order for tabular views
RECORD_COLUMNS = [f.name for f in fields(QuestionRecord)]


class ResultSet:
    """Ordered records of the most recent query plus pagination state."""

    def __init__(self):
        self._records: List[QuestionRecord] = []
        self._replace_listeners: List[Callable[[], None]] = []
        self.snapshot: Optional[FilterSnapshot] = None
        self.mode: RetrievalMode = RetrievalMode.FULL
        self.page: int = 0
        self.has_more: bool = False
        self.violations: List[InvariantViolation] = []

    def add_replace_listener(self, callback: Callable[[], None]) -> None:
        """Register a callback run after every ``replace``."""
        self._replace_listeners.append(callback)

    def replace(
        self,
        records: Iterable[QuestionRecord],
        snapshot: Optional[FilterSnapshot] = None,
        mode: RetrievalMode = RetrievalMode.FULL,
        limit: Optional[int] = None,
    ) -> None:
        """
        Install the result of a fresh query.

        Args:
            records: Records in backend order.
            snapshot: Filter state that produced them.
            mode: Retrieval mode of the query.
            limit: Requested page size (paginated mode).
        """
        self._records = list(records)
        self.snapshot = snapshot
        self.mode = mode
        self.page = 1
        self.has_more = self._page_was_full(len(self._records), limit)
        self.violations = []

        logger.info(
            f"Loaded {len(self._records)} questions "
            f"({'more available' if self.has_more else 'complete'})"
        )

        for callback in self._replace_listeners:
            callback()

    def append(
        self,
        records: Iterable[QuestionRecord],
        limit: Optional[int] = None,
    ) -> List[int]:
        """
        Add the next page to the end of the records.

        Identifiers already present indicate an inconsistent backend page
        cursor. They are logged as an invariant violation and the records
        are still appended as received.

        Args:
            records: Records of the next page in backend order.
            limit: Requested page size.

        Returns:
            Identifiers that were already present.
        """
        incoming = list(records)
        seen = set(self.ids())
        duplicates = []
        for record in incoming:
            if record.id in seen:
                duplicates.append(record.id)
            seen.add(record.id)

        if duplicates:
            violation = InvariantViolation(
                f"Page {self.page + 1} repeated question ids {duplicates}; "
                f"backend page cursor is inconsistent"
            )
            self.violations.append(violation)
            logger.warning(str(violation))

        self._records.extend(incoming)
        self.page += 1
        self.has_more = self._page_was_full(len(incoming), limit)

        logger.info(f"Appended {len(incoming)} questions (total {len(self._records)})")
        return duplicates

    def remove(self, record_id: int) -> bool:
        """
        Drop a record after the backend confirmed its deletion.

        Returns:
            True if a record was removed.
        """
        before = len(self._records)
        self._records = [r for r in self._records if r.id != record_id]
        return len(self._records) != before

    def current(self) -> List[QuestionRecord]:
        """Records in display order (a copy)."""
        return list(self._records)

    def ids(self) -> List[int]:
        """Identifiers in display order."""
        return [r.id for r in self._records]

    def get(self, record_id: int) -> Optional[QuestionRecord]:
        """Find a loaded record by identifier."""
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    @property
    def next_page(self) -> int:
        """Page number a continuation request should ask for."""
        return self.page + 1

    def to_dataframe(self, columns: Optional[List[str]] = None) -> pd.DataFrame:
        """
        Tabular view of the loaded records.

        Args:
            columns: Columns to include (all record fields if None).

        Returns:
            DataFrame with one row per record in display order.
        """
        columns = columns or RECORD_COLUMNS
        if not self._records:
            return pd.DataFrame(columns=columns)
        df = pd.DataFrame([r.to_dict() for r in self._records], columns=RECORD_COLUMNS)
        return df[[c for c in columns if c in df.columns]]

    def dimension_counts(self, dimension: str) -> Dict[str, int]:
        """
        Count loaded records per value of a filter dimension.

        Blank values are not counted.
        """
        if dimension not in DIMENSIONS:
            raise ValueError(f"Unknown filter dimension: {dimension}")
        df = self.to_dataframe([dimension])
        if df.empty:
            return {}
        values = df[dimension].str.strip()
        return values[values != ""].value_counts().to_dict()

    def _page_was_full(self, count: int, limit: Optional[int]) -> bool:
        if self.mode is not RetrievalMode.PAGINATED or not limit:
            return False
        return count >= limit

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(self._records)

    def __contains__(self, record_id: object) -> bool:
        return any(r.id == record_id for r in self._records)
