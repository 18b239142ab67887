"""Tests for configuration loading."""

import json

import pytest
from pydantic import ValidationError

from regulatory_monitor.agent.monitor_agent import build_classifier
from regulatory_monitor.config.loader import Config, load_config, load_term_dictionaries
from regulatory_monitor.models import DocumentType

YAML_CONFIG = """
start_urls:
  - https://example.gov/licensees-and-businesses
crawl_limits:
  max_pages: 20
  batch_size: 5
classifier:
  include_gambling_keywords: true
  custom_keywords:
    Consultation:
      - call for evidence
store:
  backend: file
  max_versions: 3
"""


class TestLoadConfig:
    def test_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(YAML_CONFIG)

        config = load_config(path)

        assert config.start_urls == ["https://example.gov/licensees-and-businesses"]
        assert config.crawl_limits.max_pages == 20
        assert config.crawl_limits.batch_size == 5
        assert config.crawl_limits.max_concurrent_requests == 5
        assert config.classifier.custom_keywords == {DocumentType.CONSULTATION: ["call for evidence"]}
        assert config.store.backend == "file"
        assert config.store.max_versions == 3

    def test_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"start_urls": ["https://example.gov/"], "store": {"backend": "sqlite"}}))

        config = load_config(path)

        assert config.store.backend == "sqlite"
        assert config.retry_policy.max_attempts == 3

    def test_empty_yaml_uses_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        config = load_config(path)

        assert config == Config()
        assert "/licensees-and-businesses/lccp" in config.prioritizer.priority_sections

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    @pytest.mark.parametrize(
        "data",
        [
            {"store": {"backend": "redis"}},
            {"store": {"max_versions": 0}},
            {"crawl_limits": {"batch_size": 0}},
            {"classifier": {"custom_keywords": {"Memo": ["x"]}}},
        ],
    )
    def test_invalid_values_are_rejected(self, data):
        with pytest.raises(ValidationError):
            Config.from_dict(data)


class TestTermDictionaries:
    def test_loads_one_file_per_type(self, tmp_path):
        (tmp_path / "Regulation.txt").write_text("# AML terms\nKYC\n\n  source of funds  \n")
        (tmp_path / "Statistics.txt").write_text("# nothing yet\n")

        dictionaries = load_term_dictionaries(tmp_path)

        assert dictionaries == {DocumentType.REGULATION: ["KYC", "source of funds"]}

    def test_build_classifier_registers_all_sources(self, tmp_path):
        (tmp_path / "Guidance.txt").write_text("affordability checks\n")
        config = Config.from_dict(
            {
                "classifier": {
                    "include_gambling_keywords": True,
                    "term_dictionaries_path": str(tmp_path),
                    "custom_keywords": {"Consultation": ["call for evidence"]},
                }
            }
        )

        keyword_map = build_classifier(config).keyword_map

        assert "affordability checks" in keyword_map[DocumentType.GUIDANCE]
        assert "self-exclusion" in keyword_map[DocumentType.GUIDANCE]
        assert "LCCP" in keyword_map[DocumentType.REGULATION]
        assert "call for evidence" in keyword_map[DocumentType.CONSULTATION]
