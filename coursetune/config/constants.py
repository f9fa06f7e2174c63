"""Centralized constants used across the application.

Defines supported document formats, pipeline defaults and training service
constants.
"""

from __future__ import annotations

# Supported document extensions and the document type each one maps to.
# This is the single source of truth for document format support.
SUPPORTED_DOCUMENT_FORMATS = {
    ".txt": "text",
    ".md": "markdown",
    ".markdown": "markdown",
    ".doc": "word",
    ".docx": "word",
    ".pdf": "pdf",
    ".ppt": "presentation",
    ".pptx": "presentation",
}

# Declared MIME types recognised from the upload layer
DOCUMENT_MIME_TYPES = {
    "text/plain": "text",
    "text/markdown": "markdown",
    "text/x-markdown": "markdown",
    "application/msword": "word",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "word",
    "application/pdf": "pdf",
    "application/vnd.ms-powerpoint": "presentation",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": "presentation",
}

# Pipeline defaults (overridable in pipeline_config.yaml)
DEFAULT_BLOCK_SIZE = 10_000
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_MIN_BATCH_LINES = 10
DEFAULT_CONCURRENCY_LIMIT = 4

# Synthesis defaults (overridable in model_config.yaml)
DEFAULT_SYNTHESIS_MAX_TOKENS = 10_000
DEFAULT_COMPLETION_TIMEOUT_SECONDS = 120.0

# Training service
FINE_TUNE_PURPOSE = "fine-tune"
DATASET_FILE_SUFFIX = ".jsonl"
DEFAULT_TRAINING_TIMEOUT_SECONDS = 300.0
