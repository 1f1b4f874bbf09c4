"""Tests for shared common modules: config, logging."""

import logging
from pathlib import Path

import pytest
import yaml

from src.common.config import PROJECT_ROOT, Settings
from src.common.logging import resolve_level, setup_logging


class TestSettings:
    def test_defaults_without_file(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("POST_COLLECTION_SEED_PATH", raising=False)
        monkeypatch.delenv("POST_COLLECTION_VERIFY_ON_WRITE", raising=False)
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        s = Settings.load(tmp_path / "missing.yaml")
        assert s.collection.verify_on_write is False
        assert s.query.default_page_size == 10
        assert s.query.max_page_size == 100
        assert s.logging.level == "INFO"

    def test_load_from_yaml(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("POST_COLLECTION_SEED_PATH", raising=False)
        path = tmp_path / "settings.yaml"
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump({
                "collection": {"seed_path": "content/blog.yaml"},
                "query": {"default_page_size": 5},
            }, f)
        s = Settings.load(path)
        assert s.collection.seed_path == "content/blog.yaml"
        assert s.seed_abs_path == PROJECT_ROOT / "content" / "blog.yaml"
        assert s.query.default_page_size == 5

    def test_env_overrides(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("POST_COLLECTION_SEED_PATH", "/srv/posts.json")
        monkeypatch.setenv("POST_COLLECTION_VERIFY_ON_WRITE", "yes")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        s = Settings.load(tmp_path / "missing.yaml")
        assert s.seed_abs_path == Path("/srv/posts.json")
        assert s.collection.verify_on_write is True
        assert s.logging.level == "DEBUG"

    def test_invalid_page_size(self, tmp_path: Path):
        path = tmp_path / "settings.yaml"
        path.write_text("query:\n  default_page_size: 0\n", encoding="utf-8")
        with pytest.raises(Exception):
            Settings.load(path)

    def test_bundled_settings_file(self):
        s = Settings.load(PROJECT_ROOT / "config" / "settings.yaml")
        assert s.query.default_page_size == 10


class TestLogging:
    def test_setup_logging(self):
        logger = setup_logging(level="DEBUG", module_name="test_post_collection")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_setup_logging_is_idempotent(self):
        setup_logging(module_name="test_post_collection_twice")
        logger = setup_logging(level=logging.WARNING, module_name="test_post_collection_twice")
        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING
        assert logger.handlers[0].level == logging.WARNING

    def test_setup_logging_lowers_handler_level(self):
        setup_logging(level="INFO", module_name="test_post_collection_lowered")
        logger = setup_logging(level="DEBUG", module_name="test_post_collection_lowered")
        assert logger.handlers[0].level == logging.DEBUG

    def test_resolve_level(self):
        assert resolve_level("warning") == logging.WARNING
        assert resolve_level(logging.ERROR) == logging.ERROR
        with pytest.raises(ValueError):
            resolve_level("loud")
