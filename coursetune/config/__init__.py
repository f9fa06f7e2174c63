"""Configuration management package.

Provides configuration loading, constants and the centralized configuration
service.

Submodules:
- config_loader: YAML configuration loading (ConfigLoader, PipelineSettings, PROJECT_ROOT, CONFIG_DIR)
- constants: Application constants (SUPPORTED_DOCUMENT_FORMATS, DOCUMENT_MIME_TYPES, FINE_TUNE_PURPOSE)
- service: Configuration service singleton (ConfigService, get_config_service, etc.)

Note: Use direct imports from submodules:
    from coursetune.config.config_loader import ConfigLoader, PROJECT_ROOT
    from coursetune.config.constants import SUPPORTED_DOCUMENT_FORMATS
    from coursetune.config.service import get_config_service
"""
