"""Pytest configuration and fixtures for Question Bank Curator tests."""

import asyncio
import sys
from pathlib import Path
from typing import Dict, List, Optional

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.catalog.errors import BackendError, ExportFailed, QueryFailed
from src.catalog.models import QuestionRecord
from src.catalog.taxonomy import TaxonomyStore


SAMPLE_TREE = {
    "Polity": {
        "JUDICIARY": ["Supreme Court", "High Courts", "Judicial Review"],
        "PARLIAMENT": ["Lok Sabha", "Rajya Sabha"],
    },
    "Economy": {
        "MONEY AND BANKING": ["RBI and Monetary Policy", "Inflation"],
        "FISCAL POLICY": ["Budget"],
    },
    "Geography": {},
}


def make_record(record_id: int, **overrides) -> QuestionRecord:
    """Build a question record with sensible defaults."""
    values = {
        "subject": "Polity",
        "topic": "JUDICIARY",
        "subtopic": "Supreme Court",
        "source": "PYQ",
        "difficulty": "Medium",
        "question_type": "Factual",
        "format": "Single Liner",
        "question_text": f"<p>Question {record_id}</p>",
        "option_a": "One",
        "option_b": "Two",
        "option_c": "Three",
        "option_d": "Four",
        "correct_option": "A",
        "explanation": "<p>Because.</p>",
        "tags": "upsc, prelims",
    }
    values.update(overrides)
    return QuestionRecord(id=record_id, **values)


class FakeBackend:
    """In-memory stand-in for the question backend API."""

    def __init__(self, records: List[QuestionRecord], delays: Optional[Dict[str, float]] = None):
        self.records = list(records)
        self.delays = delays or {}
        self.requests = []
        self.exported: List[List[int]] = []
        self.fail_queries = False
        self.fail_writes = False
        self.fail_export = False
        self.next_id = max((r.id for r in self.records), default=0) + 1

    async def list_questions(self, descriptor):
        self.requests.append(descriptor)
        delay = self.delays.get(descriptor.predicate.get("subject", ""), 0)
        if delay:
            await asyncio.sleep(delay)
        if self.fail_queries:
            raise QueryFailed("backend unavailable")

        matches = [
            r for r in self.records
            if all(getattr(r, key) == value for key, value in descriptor.predicate.items())
        ]
        if descriptor.is_paginated:
            start = (descriptor.page - 1) * descriptor.limit
            matches = matches[start:start + descriptor.limit]
        return matches

    async def create_question(self, record):
        if self.fail_writes:
            raise BackendError("create rejected")
        new_id = self.next_id
        self.next_id += 1
        self.records.append(QuestionRecord.from_dict({**record.to_payload(), "id": new_id}))
        return new_id

    async def update_question(self, record):
        if self.fail_writes:
            raise BackendError("update rejected")
        self.records = [record if r.id == record.id else r for r in self.records]
        return True

    async def delete_question(self, record_id):
        if self.fail_writes:
            raise BackendError("delete rejected")
        self.records = [r for r in self.records if r.id != record_id]

    async def export_questions(self, ids):
        if self.fail_export:
            raise ExportFailed("renderer unavailable")
        self.exported.append(list(ids))
        return b"%PDF-1.4 " + ",".join(str(i) for i in ids).encode(), "application/pdf"


@pytest.fixture
def taxonomy():
    """Small taxonomy used across tests."""
    return TaxonomyStore.from_dict(SAMPLE_TREE)


@pytest.fixture
def sample_records():
    """35 Polity/JUDICIARY questions followed by 5 Economy questions."""
    polity = [make_record(i) for i in range(1, 36)]
    economy = [
        make_record(
            100 + i,
            subject="Economy",
            topic="MONEY AND BANKING",
            subtopic="Inflation",
            difficulty="Hard",
            question_type="Conceptual",
        )
        for i in range(1, 6)
    ]
    return polity + economy


@pytest.fixture
def backend(sample_records):
    """Fake backend loaded with the sample records."""
    return FakeBackend(sample_records)


@pytest.fixture
def temp_export_dir(tmp_path):
    """Directory for export files."""
    export_dir = tmp_path / "exports"
    export_dir.mkdir()
    return export_dir


@pytest.fixture
def record_factory():
    """Factory for question records: record_factory(id, **fields)."""
    return make_record


@pytest.fixture
def backend_factory():
    """Factory for fake backends: backend_factory(records, delays=None)."""
    return FakeBackend
