"""Unit tests for coursetune/config/service.py.

Tests the ConfigService singleton and configuration access.
"""

from __future__ import annotations

import pytest

from coursetune.config.service import (
    ConfigService,
    get_config_service,
    get_model_config,
    get_pipeline_config,
    get_pipeline_settings,
)


class TestConfigServiceSingleton:
    """Tests for ConfigService singleton behavior."""

    @pytest.fixture(autouse=True)
    def _reset(self, reset_config_service):
        yield

    @pytest.mark.unit
    def test_singleton_returns_same_instance(self):
        assert ConfigService() is ConfigService()

    @pytest.mark.unit
    def test_reset_creates_new_instance(self):
        first = ConfigService()
        ConfigService.reset()
        second = ConfigService()
        assert first is not second
        assert second._initialized

    @pytest.mark.unit
    def test_get_config_service_returns_singleton(self):
        assert get_config_service() is get_config_service()


class TestConfigServiceMethods:
    """Tests for ConfigService accessors."""

    @pytest.fixture(autouse=True)
    def _reset(self, reset_config_service):
        yield

    @pytest.mark.unit
    def test_load_from_directory(self, config_dir, mock_model_config):
        service = get_config_service()
        service.load(config_dir)
        assert service.get_model_config() == mock_model_config
        assert get_model_config() == mock_model_config
        assert get_pipeline_config()["pipeline"]["max_attempts"] == 2

    @pytest.mark.unit
    def test_settings_cached(self, config_dir):
        service = get_config_service()
        service.load(config_dir)
        assert service.get_pipeline_settings() is get_pipeline_settings()
        assert get_pipeline_settings().block_size == 5000

    @pytest.mark.unit
    def test_reload_picks_up_changes(self, config_dir):
        service = get_config_service()
        service.load(config_dir)
        assert service.get_pipeline_settings().block_size == 5000

        text = (config_dir / "pipeline_config.yaml").read_text(encoding="utf-8")
        (config_dir / "pipeline_config.yaml").write_text(
            text.replace("block_size: 5000", "block_size: 7000"), encoding="utf-8"
        )
        service.reload(config_dir)
        assert service.get_pipeline_settings().block_size == 7000

    @pytest.mark.unit
    def test_returns_copies(self, config_dir):
        service = get_config_service()
        service.load(config_dir)
        service.get_pipeline_config()["pipeline"] = None
        assert service.get_pipeline_config()["pipeline"] is not None

    @pytest.mark.unit
    def test_lazy_default_load(self):
        # Uses the project's config directory
        assert get_pipeline_settings().min_batch_lines == 10
