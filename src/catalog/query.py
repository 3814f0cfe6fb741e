"""Query composition for question lookups.

Turns a filter snapshot into the minimal predicate sent to the backend and
describes each outbound fetch as a ``RequestDescriptor``. Nothing here does
I/O; the session hands descriptors to the backend client.

Every descriptor gets a strictly increasing sequence number so that a
response can be checked against the most recently issued request
(last-request-wins).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Optional
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import config
from config.constants import DIMENSIONS, HIERARCHY_DIMENSIONS
from config.logging_config import get_logger
from src.catalog.filters import FilterSnapshot

logger = get_logger("query")

Predicate = Dict[str, str]


class RetrievalMode(Enum):
    """How much of the matching set one request retrieves."""

    FULL = "full"
    PAGINATED = "paginated"


class QueryDiscipline(Enum):
    """When filter changes are turned into queries."""

    LIVE = "live"          # refire on every dimension change
    EXPLICIT = "explicit"  # buffer changes until apply()


@dataclass(frozen=True)
class RequestDescriptor:
    """A single outbound record-list fetch."""

    sequence: int
    predicate: Predicate = field(default_factory=dict)
    mode: RetrievalMode = RetrievalMode.FULL
    page: Optional[int] = None
    limit: Optional[int] = None

    @property
    def is_paginated(self) -> bool:
        return self.mode is RetrievalMode.PAGINATED

    @property
    def is_continuation(self) -> bool:
        """A paginated request beyond the first page appends to the results."""
        return self.is_paginated and (self.page or 1) > 1

    def to_params(self) -> Dict[str, object]:
        """Query-string parameters for the backend."""
        params: Dict[str, object] = dict(self.predicate)
        if self.is_paginated:
            params["page"] = self.page
            params["limit"] = self.limit
        return params


def compose(snapshot: FilterSnapshot) -> Predicate:
    """
    Build the minimal predicate for a filter snapshot.

    Only dimensions with a non-blank value are included, stripped of
    surrounding whitespace. An empty predicate matches every question.

    Args:
        snapshot: Filter state to translate.

    Returns:
        Ordered mapping of dimension name to value.
    """
    predicate: Predicate = {}
    for name in DIMENSIONS:
        value = getattr(snapshot, name).strip()
        if value:
            predicate[name] = value
    return predicate


def discipline_for(surface: Iterable[str]) -> QueryDiscipline:
    """
    Choose the invocation discipline for a set of exposed filter dimensions.

    Hierarchical dimensions cascade through transient states (a subject
    change clears the topic before a new topic is picked), so any surface
    that includes them must wait for an explicit apply.
    """
    if any(name in HIERARCHY_DIMENSIONS for name in surface):
        return QueryDiscipline.EXPLICIT
    return QueryDiscipline.LIVE


class QueryComposer:
    """Issues sequence-tagged request descriptors."""

    def __init__(self, page_size: Optional[int] = None):
        """
        Initialize composer.

        Args:
            page_size: Limit used for paginated requests. Defaults to config.
        """
        self.page_size = page_size or config.query.page_size
        if self.page_size < 1:
            raise ValueError(f"Page size must be positive, got {self.page_size}")
        self._sequence = 0

    def compose(self, snapshot: FilterSnapshot) -> Predicate:
        """Build the minimal predicate for a snapshot (see module ``compose``)."""
        return compose(snapshot)

    def execute(
        self,
        predicate: Predicate,
        mode: RetrievalMode = RetrievalMode.FULL,
        cursor: Optional[int] = None,
    ) -> RequestDescriptor:
        """
        Describe a fetch for a predicate.

        Args:
            predicate: Output of ``compose``.
            mode: FULL (no pagination) or PAGINATED.
            cursor: 1-based page number for paginated mode (default 1).

        Returns:
            RequestDescriptor tagged with the next sequence number.
        """
        page = limit = None
        if mode is RetrievalMode.PAGINATED:
            page = 1 if cursor is None else cursor
            if page < 1:
                raise ValueError(f"Page numbers are 1-based, got {page}")
            limit = self.page_size

        # Rejected calls must not supersede the request in flight
        self._sequence += 1
        descriptor = RequestDescriptor(
            sequence=self._sequence,
            predicate=dict(predicate),
            mode=mode,
            page=page,
            limit=limit,
        )

        logger.debug(f"Issued request #{descriptor.sequence}: {descriptor.to_params()}")
        return descriptor

    @property
    def latest_sequence(self) -> int:
        """Sequence number of the most recently issued request (0 if none)."""
        return self._sequence

    def is_latest(self, descriptor: RequestDescriptor) -> bool:
        """Check whether a descriptor is still the most recently issued one."""
        return descriptor.sequence == self._sequence
