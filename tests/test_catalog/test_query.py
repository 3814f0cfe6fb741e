"""Tests for predicate composition and request descriptors."""

import pytest

from src.catalog.filters import FilterModel, FilterSnapshot
from src.catalog.query import (
    QueryComposer,
    QueryDiscipline,
    RetrievalMode,
    compose,
    discipline_for,
)


class TestCompose:
    """Tests for compose()."""

    def test_empty_snapshot_matches_all(self):
        """Test an all-empty snapshot composes to an empty predicate."""
        assert compose(FilterSnapshot()) == {}

    def test_polity_judiciary_scenario(self):
        """Test empty subtopic is omitted from the predicate."""
        model = FilterModel()
        model.set_dimension("subject", "Polity")
        model.set_dimension("topic", "JUDICIARY")

        assert compose(model.snapshot()) == {"subject": "Polity", "topic": "JUDICIARY"}

    def test_never_includes_empty_values(self):
        """Test no composed value is empty."""
        snapshot = FilterSnapshot(source="PYQ", difficulty="", format="Pairing")
        predicate = compose(snapshot)

        assert predicate == {"source": "PYQ", "format": "Pairing"}
        assert all(predicate.values())

    def test_whitespace_only_is_empty(self):
        """Test blank free-text input is treated as unset and values are stripped."""
        snapshot = FilterSnapshot(source="   ", subject=" Polity ")
        assert compose(snapshot) == {"subject": "Polity"}

    def test_canonical_key_order(self):
        """Test predicate keys follow dimension order."""
        snapshot = FilterSnapshot(format="Pairing", subject="Economy", difficulty="Easy")
        assert list(compose(snapshot)) == ["subject", "difficulty", "format"]


class TestQueryComposer:
    """Tests for QueryComposer.execute()."""

    def test_full_mode_has_no_pagination(self):
        """Test full retrieval sends only the predicate."""
        composer = QueryComposer(page_size=20)
        descriptor = composer.execute({"subject": "Polity"}, RetrievalMode.FULL)

        assert descriptor.page is None
        assert descriptor.limit is None
        assert descriptor.to_params() == {"subject": "Polity"}

    def test_paginated_mode_defaults_to_first_page(self):
        """Test paginated retrieval is 1-based with the fixed page size."""
        composer = QueryComposer(page_size=20)
        descriptor = composer.execute({}, RetrievalMode.PAGINATED)

        assert descriptor.to_params() == {"page": 1, "limit": 20}
        assert not descriptor.is_continuation

    def test_paginated_cursor(self):
        """Test an explicit cursor."""
        composer = QueryComposer(page_size=25)
        descriptor = composer.execute({"topic": "JUDICIARY"}, RetrievalMode.PAGINATED, cursor=3)

        assert descriptor.page == 3
        assert descriptor.limit == 25
        assert descriptor.is_continuation

    def test_invalid_cursor(self):
        """Test page numbers below 1 are rejected."""
        composer = QueryComposer()
        with pytest.raises(ValueError):
            composer.execute({}, RetrievalMode.PAGINATED, cursor=-1)

    def test_rejected_cursor_keeps_latest_request(self):
        """Test an invalid call does not make the request in flight stale."""
        composer = QueryComposer()
        in_flight = composer.execute({"subject": "Polity"}, RetrievalMode.PAGINATED)

        with pytest.raises(ValueError):
            composer.execute({}, RetrievalMode.PAGINATED, cursor=0)

        assert composer.is_latest(in_flight)
        assert composer.latest_sequence == in_flight.sequence

    def test_default_page_size_from_config(self):
        """Test page size defaults to the configured value."""
        from config import config

        assert QueryComposer().page_size == config.query.page_size

    def test_sequence_numbers_increase(self):
        """Test every request gets a larger sequence number."""
        composer = QueryComposer()
        first = composer.execute({"subject": "Economy"})
        second = composer.execute({"subject": "Polity"})

        assert second.sequence > first.sequence
        assert composer.is_latest(second)
        assert not composer.is_latest(first)

    def test_descriptor_copies_predicate(self):
        """Test later changes to the predicate dict do not leak in."""
        composer = QueryComposer()
        predicate = {"subject": "Polity"}
        descriptor = composer.execute(predicate)
        predicate["topic"] = "JUDICIARY"

        assert descriptor.predicate == {"subject": "Polity"}


class TestDiscipline:
    """Tests for choosing the invocation discipline."""

    def test_hierarchy_requires_explicit_apply(self):
        """Test any hierarchy dimension forces the explicit discipline."""
        assert discipline_for(["subject", "difficulty"]) is QueryDiscipline.EXPLICIT
        assert discipline_for(["subtopic"]) is QueryDiscipline.EXPLICIT

    def test_independent_only_is_live(self):
        """Test independent dimensions alone refire live."""
        assert discipline_for(["source", "difficulty", "format"]) is QueryDiscipline.LIVE
