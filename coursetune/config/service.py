"""Centralized configuration service with caching and singleton pattern.

Provides a single point of access to all configuration dictionaries, eliminating
redundant ConfigLoader instantiations and ensuring consistent configuration state
across the application.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Dict, Optional

from coursetune.config.config_loader import ConfigLoader, PipelineSettings


class ConfigService:
    """Thread-safe singleton configuration service with lazy loading and caching."""

    _instance: Optional[ConfigService] = None
    _lock = threading.Lock()

    def __new__(cls) -> ConfigService:
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        # Prevent re-initialization
        if self._initialized:
            return

        self._loader: Optional[ConfigLoader] = None
        self._model_config: Optional[Dict[str, Any]] = None
        self._pipeline_config: Optional[Dict[str, Any]] = None
        self._settings: Optional[PipelineSettings] = None
        self._initialized = True

    def load(self, config_dir: Optional[Path] = None) -> None:
        """Load all configurations.

        Args:
            config_dir: Optional directory holding the YAML files. If None, uses default.
        """
        with self._lock:
            self._loader = ConfigLoader(config_dir)
            self._loader.load_configs()
            # Clear cached configs to force reload
            self._model_config = None
            self._pipeline_config = None
            self._settings = None

    def _ensure_loaded(self) -> None:
        """Ensure configuration is loaded, loading with defaults if necessary."""
        if self._loader is None:
            self.load()

    def get_model_config(self) -> Dict[str, Any]:
        """Get model configuration (cached)."""
        self._ensure_loaded()
        if self._model_config is None:
            with self._lock:
                if self._model_config is None:
                    self._model_config = self._loader.get_model_config()
        return self._model_config.copy()

    def get_pipeline_config(self) -> Dict[str, Any]:
        """Get pipeline configuration (cached).

        Returns:
            Pipeline configuration dictionary with normalized paths.
        """
        self._ensure_loaded()
        if self._pipeline_config is None:
            with self._lock:
                if self._pipeline_config is None:
                    self._pipeline_config = self._loader.get_pipeline_config()
        return self._pipeline_config.copy()

    def get_pipeline_settings(self) -> PipelineSettings:
        """Get typed pipeline settings (cached; the dataclass is frozen)."""
        self._ensure_loaded()
        if self._settings is None:
            with self._lock:
                if self._settings is None:
                    self._settings = self._loader.get_pipeline_settings()
        return self._settings

    def reload(self, config_dir: Optional[Path] = None) -> None:
        """Force reload of all configurations."""
        self.load(config_dir)

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (primarily for testing)."""
        with cls._lock:
            cls._instance = None


# Convenience functions for direct access
def get_config_service() -> ConfigService:
    """Get the singleton ConfigService instance."""
    return ConfigService()


def get_model_config() -> Dict[str, Any]:
    """Get model configuration."""
    return get_config_service().get_model_config()


def get_pipeline_config() -> Dict[str, Any]:
    """Get pipeline configuration."""
    return get_config_service().get_pipeline_config()


def get_pipeline_settings() -> PipelineSettings:
    """Get typed pipeline settings."""
    return get_config_service().get_pipeline_settings()
