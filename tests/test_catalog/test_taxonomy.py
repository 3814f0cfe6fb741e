"""Tests for the taxonomy store and its YAML loading."""

import pytest


class TestTaxonomyStore:
    """Tests for TaxonomyStore lookups."""

    def test_subjects_in_declared_order(self, taxonomy):
        """Test subjects keep their declared order."""
        assert taxonomy.subjects() == ("Polity", "Economy", "Geography")

    def test_topics_for_subject(self, taxonomy):
        """Test topics of a known subject."""
        assert taxonomy.topics("Polity") == ("JUDICIARY", "PARLIAMENT")

    def test_topics_unknown_or_unset_subject(self, taxonomy):
        """Test unknown and unset subjects yield no topics."""
        assert taxonomy.topics("Astrology") == ()
        assert taxonomy.topics("") == ()
        assert taxonomy.topics(None) == ()

    def test_subject_without_topics(self, taxonomy):
        """Test a subject with an empty topic map."""
        assert "Geography" in taxonomy
        assert taxonomy.topics("Geography") == ()

    def test_subtopics(self, taxonomy):
        """Test subtopics of a subject/topic pair."""
        assert taxonomy.subtopics("Polity", "JUDICIARY") == (
            "Supreme Court",
            "High Courts",
            "Judicial Review",
        )

    def test_subtopics_mismatched_pair(self, taxonomy):
        """Test a topic under the wrong subject yields no subtopics."""
        assert taxonomy.subtopics("Economy", "JUDICIARY") == ()
        assert taxonomy.subtopics("Polity", "") == ()
        assert taxonomy.subtopics("", "JUDICIARY") == ()

    def test_membership_checks(self, taxonomy):
        """Test has_topic / has_subtopic."""
        assert taxonomy.has_topic("Polity", "PARLIAMENT")
        assert not taxonomy.has_topic("Economy", "PARLIAMENT")
        assert taxonomy.has_subtopic("Economy", "FISCAL POLICY", "Budget")
        assert not taxonomy.has_subtopic("Economy", "FISCAL POLICY", "Inflation")

    def test_store_is_read_only(self, taxonomy):
        """Test the underlying tree cannot be mutated."""
        with pytest.raises(TypeError):
            taxonomy._tree["History"] = {}
        with pytest.raises(TypeError):
            taxonomy._tree["Polity"]["NEW TOPIC"] = ()

    def test_source_mapping_changes_do_not_leak(self):
        """Test the store copies its input."""
        from src.catalog.taxonomy import TaxonomyStore

        tree = {"Polity": {"JUDICIARY": ["Supreme Court"]}}
        store = TaxonomyStore.from_dict(tree)
        tree["Polity"]["JUDICIARY"].append("High Courts")
        tree["Economy"] = {}

        assert store.subtopics("Polity", "JUDICIARY") == ("Supreme Court",)
        assert "Economy" not in store


class TestTaxonomyLoading:
    """Tests for loading taxonomy YAML."""

    def test_default_taxonomy_loads(self):
        """Test the bundled taxonomy file."""
        from src.catalog.taxonomy import load_taxonomy

        store = load_taxonomy()
        assert "Polity" in store
        assert "JUDICIARY" in store.topics("Polity")
        assert "Supreme Court" in store.subtopics("Polity", "JUDICIARY")

    def test_load_taxonomy_is_cached(self):
        """Test the process-wide store is created once."""
        from src.catalog.taxonomy import load_taxonomy

        assert load_taxonomy() is load_taxonomy()

    def test_from_yaml(self, tmp_path):
        """Test loading a custom taxonomy file."""
        from src.catalog.taxonomy import TaxonomyStore

        path = tmp_path / "taxonomy.yaml"
        path.write_text(
            "subjects:\n"
            "  Environment:\n"
            "    ECOLOGY:\n"
            "      - Ecosystems\n"
            "    POLLUTION:\n",
            encoding="utf-8",
        )

        store = TaxonomyStore.from_yaml(path)
        assert store.subjects() == ("Environment",)
        assert store.topics("Environment") == ("ECOLOGY", "POLLUTION")
        assert store.subtopics("Environment", "POLLUTION") == ()

    def test_from_yaml_missing_file(self, tmp_path):
        """Test a missing file raises ConfigurationError."""
        from config.config_loader import ConfigurationError
        from src.catalog.taxonomy import TaxonomyStore

        with pytest.raises(ConfigurationError):
            TaxonomyStore.from_yaml(tmp_path / "missing.yaml")

    def test_from_yaml_rejects_flat_list(self, tmp_path):
        """Test a malformed tree raises ConfigurationError."""
        from config.config_loader import ConfigurationError
        from src.catalog.taxonomy import TaxonomyStore

        path = tmp_path / "taxonomy.yaml"
        path.write_text("subjects:\n  Polity:\n    - JUDICIARY\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            TaxonomyStore.from_yaml(path)

    def test_fallback_when_file_missing(self, monkeypatch, tmp_path):
        """Test the loader falls back to subjects without topics."""
        from config import config_loader

        monkeypatch.setattr(config_loader, "CONFIG_DIR", tmp_path)
        config_loader.clear_config_cache()
        try:
            data = config_loader.load_taxonomy_data()
            assert list(data) == config_loader.FALLBACK_SUBJECTS
            assert all(topics == {} for topics in data.values())
        finally:
            config_loader.clear_config_cache()
