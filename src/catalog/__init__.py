"""Question catalog engine: taxonomy, filters, queries, selection and export."""

from .errors import (
    QuestionBankError,
    QueryFailed,
    InvariantViolation,
    EmptySelection,
    InvalidSelection,
    ExportFailed,
    BackendError,
    InvalidQuestion,
)
from .models import QuestionRecord
from .taxonomy import TaxonomyStore, load_taxonomy
from .filters import (
    FilterModel,
    FilterSnapshot,
    available_options,
    validate_against_taxonomy,
)
from .query import (
    QueryComposer,
    QueryDiscipline,
    RequestDescriptor,
    RetrievalMode,
    compose,
    discipline_for,
)
from .results import ResultSet
from .selection import SelectionTracker
from .export import ExportArtifact, ExportCoordinator, ExportRequest, ExportScope
from .editor import HtmlBuffer, QuestionDraft, RichTextField
from .session import QuestionBankSession

__all__ = [
    # Errors
    "QuestionBankError",
    "QueryFailed",
    "InvariantViolation",
    "EmptySelection",
    "InvalidSelection",
    "ExportFailed",
    "BackendError",
    "InvalidQuestion",
    # Model
    "QuestionRecord",
    # Taxonomy
    "TaxonomyStore",
    "load_taxonomy",
    # Filters
    "FilterModel",
    "FilterSnapshot",
    "available_options",
    "validate_against_taxonomy",
    # Queries
    "QueryComposer",
    "QueryDiscipline",
    "RequestDescriptor",
    "RetrievalMode",
    "compose",
    "discipline_for",
    # Results and selection
    "ResultSet",
    "SelectionTracker",
    # Export
    "ExportArtifact",
    "ExportCoordinator",
    "ExportRequest",
    "ExportScope",
    # Editing
    "HtmlBuffer",
    "QuestionDraft",
    "RichTextField",
    # Session
    "QuestionBankSession",
]
