"""Tests for export request validation and artifacts."""

import asyncio

import pandas as pd
import pytest

from src.catalog.errors import EmptySelection, ExportFailed, InvalidSelection
from src.catalog.export import ExportCoordinator, ExportScope
from src.catalog.results import ResultSet
from src.catalog.selection import SelectionTracker


@pytest.fixture
def coordinator(backend, temp_export_dir):
    """Export coordinator writing to a temporary directory."""
    return ExportCoordinator(backend, output_dir=temp_export_dir)


class TestBuildExportRequest:
    """Tests for pre-flight validation."""

    def test_empty_ids(self, coordinator):
        """Test an empty list is rejected."""
        with pytest.raises(EmptySelection):
            coordinator.build_export_request([])

    def test_repeated_ids(self, coordinator):
        """Test repeated identifiers are rejected."""
        with pytest.raises(InvalidSelection) as exc_info:
            coordinator.build_export_request([7, 3, 3])
        assert "[3]" in str(exc_info.value)

    def test_order_preserved(self, coordinator):
        """Test identifiers keep their order."""
        request = coordinator.build_export_request([7, 3, 12])
        assert request.ids == (7, 3, 12)

    def test_deterministic_filenames(self, coordinator):
        """Test each scope has a fixed file name."""
        selected = coordinator.build_export_request([1], ExportScope.SELECTED)
        visible = coordinator.build_export_request([1], ExportScope.ALL_VISIBLE)

        assert selected.filename == "questions_selected.pdf"
        assert visible.filename == "questions_all_filtered.pdf"

    def test_custom_filenames(self, backend, temp_export_dir):
        """Test file names can be overridden."""
        coordinator = ExportCoordinator(
            backend,
            output_dir=temp_export_dir,
            selected_filename="picked.pdf",
        )
        assert coordinator.build_export_request([1]).filename == "picked.pdf"


class TestRender:
    """Tests for rendering through the backend."""

    def test_export_selected(self, coordinator, backend):
        """Test the selected ids are sent in selection order."""
        tracker = SelectionTracker()
        tracker.toggle(5)
        tracker.toggle(2)

        artifact = asyncio.run(coordinator.export_selected(tracker))

        assert backend.exported == [[5, 2]]
        assert artifact.filename == "questions_selected.pdf"
        assert artifact.content_type == "application/pdf"
        assert artifact.content.startswith(b"%PDF")

    def test_export_selected_empty_sends_nothing(self, coordinator, backend):
        """Test an empty selection fails before the backend is called."""
        with pytest.raises(EmptySelection):
            asyncio.run(coordinator.export_selected(SelectionTracker()))
        assert backend.exported == []

    def test_export_all_visible_ignores_selection(self, coordinator, backend, record_factory):
        """Test export-all uses every loaded id."""
        result_set = ResultSet()
        result_set.replace([record_factory(i) for i in (4, 8, 15)])

        artifact = asyncio.run(coordinator.export_all_visible(result_set))

        assert backend.exported == [[4, 8, 15]]
        assert artifact.filename == "questions_all_filtered.pdf"

    def test_export_failure_writes_no_file(self, coordinator, backend, temp_export_dir):
        """Test a backend failure surfaces ExportFailed and leaves no file."""
        backend.fail_export = True
        tracker = SelectionTracker()
        tracker.toggle(1)

        with pytest.raises(ExportFailed):
            asyncio.run(coordinator.export_selected(tracker))
        assert list(temp_export_dir.iterdir()) == []

    def test_empty_document_is_failure(self, temp_export_dir):
        """Test an empty response body is treated as a failed export."""

        class EmptyRenderer:
            async def export_questions(self, ids):
                return b"", "application/pdf"

        coordinator = ExportCoordinator(EmptyRenderer(), output_dir=temp_export_dir)
        with pytest.raises(ExportFailed):
            asyncio.run(coordinator._render(coordinator.build_export_request([1])))


class TestSave:
    """Tests for writing artifacts and listings."""

    def test_save_writes_bytes(self, coordinator, temp_export_dir):
        """Test the artifact is saved under its file name."""
        tracker = SelectionTracker()
        tracker.toggle(3)
        artifact = asyncio.run(coordinator.export_selected(tracker))

        path = coordinator.save(artifact)

        assert path == temp_export_dir / "questions_selected.pdf"
        assert path.read_bytes() == artifact.content

    def test_save_creates_directory(self, coordinator, tmp_path):
        """Test a missing output directory is created."""
        tracker = SelectionTracker()
        tracker.toggle(3)
        artifact = asyncio.run(coordinator.export_selected(tracker))

        path = coordinator.save(artifact, tmp_path / "nested" / "out")
        assert path.exists()

    def test_export_listing(self, coordinator, record_factory, temp_export_dir):
        """Test the CSV listing of loaded questions."""
        result_set = ResultSet()
        result_set.replace([record_factory(1), record_factory(2, subject="Economy")])

        path = coordinator.export_listing(result_set)

        assert path == temp_export_dir / "questions_listing.csv"
        df = pd.read_csv(path)
        assert df["id"].tolist() == [1, 2]
        assert df["subject"].tolist() == ["Polity", "Economy"]
        assert "question_text" not in df.columns
