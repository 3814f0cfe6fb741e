"""Browsing session: filters, results, selection and export wired together.

The session owns one FilterModel, ResultSet and SelectionTracker. Every
query is tagged by the QueryComposer; when overlapping requests complete
out of order, only the response to the most recently issued request is
applied (last-request-wins). Stale responses are dropped without touching
the results or the selection.

All methods run on one event loop; awaiting a fetch only suspends the
caller, so filters and selection stay editable while it is in flight.
"""

from typing import Any, Dict, Iterable, List, Optional
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.constants import DIMENSIONS
from config.logging_config import get_logger
from src.catalog.editor import QuestionDraft
from src.catalog.errors import QueryFailed
from src.catalog.export import ExportArtifact, ExportCoordinator
from src.catalog.filters import (
    FilterModel,
    FilterSnapshot,
    available_options,
    validate_against_taxonomy,
)
from src.catalog.query import (
    QueryComposer,
    QueryDiscipline,
    RequestDescriptor,
    RetrievalMode,
    compose,
    discipline_for,
)
from src.catalog.results import ResultSet
from src.catalog.selection import SelectionTracker
from src.catalog.taxonomy import TaxonomyStore, load_taxonomy

logger = get_logger("session")


class QuestionBankSession:
    """One editor's view of the question catalog."""

    def __init__(
        self,
        backend,
        taxonomy: Optional[TaxonomyStore] = None,
        mode: RetrievalMode = RetrievalMode.PAGINATED,
        surface: Iterable[str] = DIMENSIONS,
        page_size: Optional[int] = None,
        export_dir: Optional[Path] = None,
    ):
        """
        Initialize session.

        Args:
            backend: Question backend (see src.backend.client.QuestionBankClient).
            taxonomy: Taxonomy reference data (process-wide default if None).
            mode: Retrieval mode for fresh queries.
            surface: Filter dimensions exposed to the user; decides whether
                changes refire immediately or wait for ``apply``.
            page_size: Page size for paginated retrieval.
            export_dir: Directory for saved exports.
        """
        self.backend = backend
        self.taxonomy = taxonomy or load_taxonomy()
        self.mode = mode
        self.discipline = discipline_for(surface)

        self.filters = FilterModel()
        self.composer = QueryComposer(page_size=page_size)
        self.results = ResultSet()
        self.selection = SelectionTracker().bind(self.results)
        self.exporter = ExportCoordinator(backend, output_dir=export_dir)

        self._pending_changes = False
        # sequence of the fresh query still awaiting a response
        self._refresh_in_flight: Optional[int] = None

    # -------------------------------------------------------------------------
    # Filters
    # -------------------------------------------------------------------------

    @property
    def has_pending_changes(self) -> bool:
        """Filter changes buffered under the explicit discipline."""
        return self._pending_changes

    async def set_filter(self, name: str, value: Optional[str]) -> bool:
        """
        Change one filter dimension.

        Under the live discipline the query refires immediately; under the
        explicit discipline the change is buffered until ``apply``.

        Returns:
            True if a fresh result set was applied.
        """
        self.filters.set_dimension(name, value)
        if self.discipline is QueryDiscipline.LIVE:
            return await self.refresh()
        self._pending_changes = True
        return False

    async def apply(self) -> bool:
        """Run the query for the buffered filter changes."""
        self._pending_changes = False
        return await self.refresh()

    async def clear_filters(self) -> bool:
        """Reset every dimension and reload (an all-empty state is always consistent)."""
        self.filters.reset()
        self._pending_changes = False
        return await self.refresh()

    async def restore_previous_filters(self) -> bool:
        """Return to the previous filter state and reload it."""
        if not self.filters.restore_previous():
            return False
        self._pending_changes = False
        return await self.refresh()

    def load_filters(self, params: Dict[str, Any]) -> List[str]:
        """
        Restore filters from URL parameters, dropping unknown values.

        The restored state is buffered; call ``apply`` to query it.

        Returns:
            Values that were removed during validation.
        """
        snapshot, removed = validate_against_taxonomy(
            FilterSnapshot.from_url_params(params), self.taxonomy
        )
        self.filters.load(snapshot)
        self._pending_changes = True
        return removed

    def options(self, dimension: str) -> List[str]:
        """Options to offer for a dimension given the current filters."""
        return available_options(self.taxonomy, self.filters.snapshot(), dimension)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def refresh(self) -> bool:
        """
        Issue a fresh query for the current filters and replace the results.

        Returns:
            True if the response was applied, False if a newer request
            superseded it.

        Raises:
            QueryFailed: If the latest request failed; results are unchanged.
        """
        snapshot = self.filters.snapshot()
        descriptor = self.composer.execute(compose(snapshot), self.mode, cursor=1)
        self._refresh_in_flight = descriptor.sequence
        try:
            records = await self._fetch(descriptor)
        finally:
            if self._refresh_in_flight == descriptor.sequence:
                self._refresh_in_flight = None
        if records is None:
            return False

        self.results.replace(records, snapshot=snapshot, mode=self.mode, limit=descriptor.limit)
        return True

    async def load_more(self) -> bool:
        """
        Fetch the next page for the current result set and append it.

        The page is requested with the filters that produced the result
        set, not with any buffered changes. While a fresh query is in
        flight the current result set is about to be replaced, so no page
        is requested.

        Returns:
            True if a page was appended.
        """
        if self.results.mode is not RetrievalMode.PAGINATED or not self.results.has_more:
            return False
        if self._refresh_in_flight is not None:
            logger.debug(
                f"Skipping next page: fresh query #{self._refresh_in_flight} is pending"
            )
            return False

        snapshot = self.results.snapshot or FilterSnapshot()
        descriptor = self.composer.execute(
            compose(snapshot),
            RetrievalMode.PAGINATED,
            cursor=self.results.next_page,
        )
        records = await self._fetch(descriptor)
        if records is None:
            return False

        self.results.append(records, limit=descriptor.limit)
        return True

    async def _fetch(self, descriptor: RequestDescriptor):
        """Run a request; None means the response is stale and was dropped."""
        try:
            records = await self.backend.list_questions(descriptor)
        except QueryFailed:
            if not self.composer.is_latest(descriptor):
                logger.debug(f"Ignoring failure of superseded request #{descriptor.sequence}")
                return None
            raise

        if not self.composer.is_latest(descriptor):
            logger.debug(
                f"Discarding stale response #{descriptor.sequence} "
                f"(latest is #{self.composer.latest_sequence})"
            )
            return None
        return records

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def toggle(self, record_id: int) -> bool:
        return self.selection.toggle(record_id)

    def select_all_visible(self) -> int:
        return self.selection.select_all_visible(self.results)

    def clear_selection(self) -> None:
        self.selection.clear()

    # -------------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------------

    async def save_draft(self, draft: QuestionDraft) -> int:
        """
        Create or update the question held by a draft, then reload.

        Returns:
            Identifier of the saved question.

        Raises:
            InvalidQuestion: If the draft is incomplete.
            BackendError: If the backend rejects the write.
        """
        record = draft.to_record()
        if draft.is_new:
            record_id = await self.backend.create_question(record)
        else:
            await self.backend.update_question(record)
            record_id = record.id

        draft.reset()
        await self.refresh()
        return record_id

    async def delete(self, record_id: int) -> None:
        """
        Delete a question. The row leaves the results and the selection
        only after the backend confirms.

        Raises:
            BackendError: If the deletion failed; nothing is changed locally.
        """
        await self.backend.delete_question(record_id)
        self.results.remove(record_id)
        self.selection.discard(record_id)

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    async def export_selected(self) -> ExportArtifact:
        """Export the selected questions (EmptySelection if none)."""
        return await self.exporter.export_selected(self.selection)

    async def export_all_visible(self) -> ExportArtifact:
        """Export every loaded question regardless of selection."""
        return await self.exporter.export_all_visible(self.results)
