"""Export of selected or visible questions to a rendered document.

The backend renders the document (PDF) from an ordered list of question
identifiers. This module validates the identifier list before anything
is sent, names the artifact deterministically and writes it to disk.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import config
from config.constants import PDF_CONTENT_TYPE
from config.logging_config import get_logger
from src.catalog.errors import EmptySelection, ExportFailed, InvalidSelection
from src.catalog.results import ResultSet
from src.catalog.selection import SelectionTracker

logger = get_logger("export")

# Columns of the CSV listing written next to an export
LISTING_COLUMNS = [
    "id",
    "subject",
    "topic",
    "subtopic",
    "question_type",
    "format",
    "difficulty",
    "source",
    "tags",
]


class ExportScope(Enum):
    """Which questions an export covers."""

    SELECTED = "selected"
    ALL_VISIBLE = "all_filtered"


@dataclass(frozen=True)
class ExportRequest:
    """Validated export request: a non-empty ordered list of unique ids."""

    ids: Tuple[int, ...]
    scope: ExportScope
    filename: str


@dataclass(frozen=True)
class ExportArtifact:
    """Rendered document returned by the backend, ready for delivery."""

    request: ExportRequest
    content: bytes
    content_type: str = PDF_CONTENT_TYPE

    @property
    def filename(self) -> str:
        return self.request.filename

    @property
    def size(self) -> int:
        return len(self.content)


class ExportCoordinator:
    """Builds export requests and resolves them through the backend."""

    def __init__(
        self,
        backend,
        output_dir: Optional[Path] = None,
        selected_filename: Optional[str] = None,
        all_filtered_filename: Optional[str] = None,
    ):
        """
        Initialize coordinator.

        Args:
            backend: Object with an async ``export_questions(ids)`` returning
                ``(content, content_type)``.
            output_dir: Directory for saved artifacts.
            selected_filename: File name for "export selected".
            all_filtered_filename: File name for "export all visible".
        """
        self.backend = backend
        self.output_dir = output_dir or config.export.exports_path
        self.filenames = {
            ExportScope.SELECTED: selected_filename or config.export.selected_filename,
            ExportScope.ALL_VISIBLE: all_filtered_filename or config.export.all_filtered_filename,
        }

    def build_export_request(
        self,
        ids: Iterable[int],
        scope: ExportScope = ExportScope.SELECTED,
    ) -> ExportRequest:
        """
        Validate identifiers and build an export request.

        Args:
            ids: Ordered question identifiers.
            scope: Selected or all-visible export (drives the file name).

        Returns:
            ExportRequest.

        Raises:
            EmptySelection: If no identifiers were given.
            InvalidSelection: If an identifier appears more than once.
        """
        ids = tuple(ids)
        if not ids:
            raise EmptySelection("Select at least one question to export")

        seen = set()
        repeated = []
        for record_id in ids:
            if record_id in seen and record_id not in repeated:
                repeated.append(record_id)
            seen.add(record_id)
        if repeated:
            raise InvalidSelection(f"Question ids repeated in export request: {repeated}")

        return ExportRequest(ids=ids, scope=scope, filename=self.filenames[scope])

    async def export_selected(self, tracker: SelectionTracker) -> ExportArtifact:
        """Export the questions currently selected."""
        request = self.build_export_request(tracker.ids(), ExportScope.SELECTED)
        return await self._render(request)

    async def export_all_visible(self, result_set: ResultSet) -> ExportArtifact:
        """Export every loaded question, regardless of selection."""
        request = self.build_export_request(result_set.ids(), ExportScope.ALL_VISIBLE)
        return await self._render(request)

    async def _render(self, request: ExportRequest) -> ExportArtifact:
        logger.info(f"Requesting {request.scope.value} export of {len(request.ids)} questions")
        content, content_type = await self.backend.export_questions(list(request.ids))
        if not content:
            raise ExportFailed("Backend returned an empty document")

        artifact = ExportArtifact(
            request=request,
            content=content,
            content_type=content_type or PDF_CONTENT_TYPE,
        )
        logger.info(f"Export ready: {artifact.filename} ({artifact.size:,} bytes)")
        return artifact

    def save(self, artifact: ExportArtifact, output_dir: Optional[Path] = None) -> Path:
        """
        Write an artifact to disk under its deterministic name.

        Args:
            artifact: Rendered export.
            output_dir: Target directory (coordinator default if None).

        Returns:
            Path to the written file.
        """
        target_dir = output_dir or self.output_dir
        target_dir.mkdir(parents=True, exist_ok=True)

        filepath = target_dir / artifact.filename
        filepath.write_bytes(artifact.content)

        logger.info(f"Saved export to {filepath}")
        return filepath

    def export_listing(
        self,
        result_set: ResultSet,
        filepath: Optional[Path] = None,
        columns: Optional[List[str]] = None,
    ) -> Path:
        """
        Write a CSV listing of the loaded questions.

        Args:
            result_set: Loaded questions.
            filepath: Output file (listing file in output_dir if None).
            columns: Columns to include.

        Returns:
            Path to exported file.
        """
        if filepath is None:
            filepath = self.output_dir / config.export.listing_filename
        filepath.parent.mkdir(parents=True, exist_ok=True)

        df = result_set.to_dataframe(columns or LISTING_COLUMNS)
        df.to_csv(filepath, index=False, encoding="utf-8")

        logger.info(f"Exported listing of {len(df)} questions to {filepath}")
        return filepath
