# coursetune/config/config_loader.py

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from coursetune.config.constants import (
    DEFAULT_BLOCK_SIZE,
    DEFAULT_COMPLETION_TIMEOUT_SECONDS,
    DEFAULT_CONCURRENCY_LIMIT,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MIN_BATCH_LINES,
    DEFAULT_SYNTHESIS_MAX_TOKENS,
    DEFAULT_TRAINING_TIMEOUT_SECONDS,
    FINE_TUNE_PURPOSE,
)


PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _expand_path_str(p: str) -> Path:
    """
    Expand ~ and environment variables in a path string and return a Path.
    """
    return Path(os.path.expandvars(os.path.expanduser(p)))


def _compute_config_dir() -> Path:
    """
    Resolve COURSETUNE_CONFIG_DIR robustly:
    - If absolute: use it.
    - If relative: resolve against PROJECT_ROOT.
    - If unset: default to PROJECT_ROOT/config.
    """
    raw = os.environ.get("COURSETUNE_CONFIG_DIR")
    if raw:
        expanded = _expand_path_str(raw)
        return (expanded if expanded.is_absolute()
                else (PROJECT_ROOT / expanded)).resolve()
    return (PROJECT_ROOT / "config").resolve()


CONFIG_DIR = _compute_config_dir()
MODEL_CONFIG_NAME = "model_config.yaml"
PIPELINE_CONFIG_NAME = "pipeline_config.yaml"


@dataclass(frozen=True, slots=True)
class PipelineSettings:
    """Normalized, typed view over model_config.yaml and pipeline_config.yaml."""

    block_size: int = DEFAULT_BLOCK_SIZE
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_wait_seconds: float = 0.0
    min_batch_lines: int = DEFAULT_MIN_BATCH_LINES
    concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT
    provider: str = "openai"
    max_tokens: int = DEFAULT_SYNTHESIS_MAX_TOKENS
    temperature: Optional[float] = None
    completion_timeout: float = DEFAULT_COMPLETION_TIMEOUT_SECONDS
    training_purpose: str = FINE_TUNE_PURPOSE
    training_timeout: float = DEFAULT_TRAINING_TIMEOUT_SECONDS


def _positive_int(value: Any, default: int, key: str) -> int:
    if value is None:
        return default
    try:
        parsed = int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"'{key}' must be an integer (got {value!r})") from e
    if parsed < 1:
        raise ValueError(f"'{key}' must be >= 1 (got {parsed})")
    return parsed


def _non_negative_float(value: Any, default: float, key: str) -> float:
    if value is None:
        return default
    try:
        parsed = float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"'{key}' must be a number (got {value!r})") from e
    if parsed < 0:
        raise ValueError(f"'{key}' must be >= 0 (got {parsed})")
    return parsed


class ConfigLoader:
    """
    Loads configuration files and exposes normalized dictionaries to callers.
    """

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        self.config_dir = Path(config_dir) if config_dir else CONFIG_DIR
        self._model: Optional[Dict[str, Any]] = None
        self._pipeline: Optional[Dict[str, Any]] = None

    @property
    def model_config_path(self) -> Path:
        return self.config_dir / MODEL_CONFIG_NAME

    @property
    def pipeline_config_path(self) -> Path:
        return self.config_dir / PIPELINE_CONFIG_NAME

    @staticmethod
    def _load_yaml_file(path: Path) -> Dict[str, Any]:
        if not path.exists():
            raise FileNotFoundError(f"Missing configuration file: {path}")
        try:
            with path.open("r", encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
        except yaml.scanner.ScannerError as e:
            raise ValueError(
                f"YAML parsing error in {path}.\n"
                f"Tip: Windows paths in double quotes require escaped backslashes "
                f'(e.g., "C:\\\\Users\\\\name"), or use single quotes '
                f"(e.g., 'C:\\Users\\name'), or forward slashes "
                f"(e.g., C:/Users/name).\nOriginal error: {e}"
            ) from e

    def load_configs(self) -> None:
        """
        Load YAML configuration into memory.
        """
        self._model = self._load_yaml_file(self.model_config_path)
        self._pipeline = self._normalize_pipeline_config(
            self._load_yaml_file(self.pipeline_config_path)
        )

    def get_model_config(self) -> Dict[str, Any]:
        """Return the model configuration dictionary (loaded on first use)."""
        if self._model is None:
            self._model = self._load_yaml_file(self.model_config_path)
        return self._model.copy()

    def get_pipeline_config(self) -> Dict[str, Any]:
        """
        Load, normalize, and return the pipeline configuration (cached).
        The logs directory is expanded and resolved against PROJECT_ROOT.
        """
        if self._pipeline is None:
            self._pipeline = self._normalize_pipeline_config(
                self._load_yaml_file(self.pipeline_config_path)
            )
        return self._pipeline.copy()

    def get_pipeline_settings(self) -> PipelineSettings:
        """Build validated PipelineSettings, falling back to defaults for absent keys."""
        model_cfg = self.get_model_config()
        pipeline_cfg = self.get_pipeline_config()

        synth = dict(model_cfg.get("synthesis_model", {}) or {})
        pipe = dict(pipeline_cfg.get("pipeline", {}) or {})
        training = dict(pipeline_cfg.get("training", {}) or {})

        temperature = synth.get("temperature")
        return PipelineSettings(
            block_size=_positive_int(pipe.get("block_size"), DEFAULT_BLOCK_SIZE, "block_size"),
            max_attempts=_positive_int(pipe.get("max_attempts"), DEFAULT_MAX_ATTEMPTS, "max_attempts"),
            retry_wait_seconds=_non_negative_float(
                pipe.get("retry_wait_seconds"), 0.0, "retry_wait_seconds"
            ),
            min_batch_lines=_positive_int(
                pipe.get("min_batch_lines"), DEFAULT_MIN_BATCH_LINES, "min_batch_lines"
            ),
            concurrency_limit=_positive_int(
                pipe.get("concurrency_limit"), DEFAULT_CONCURRENCY_LIMIT, "concurrency_limit"
            ),
            provider=str(synth.get("provider") or "openai").lower().strip(),
            max_tokens=_positive_int(synth.get("max_tokens"), DEFAULT_SYNTHESIS_MAX_TOKENS, "max_tokens"),
            temperature=float(temperature) if temperature is not None else None,
            completion_timeout=_non_negative_float(
                synth.get("request_timeout_seconds"),
                DEFAULT_COMPLETION_TIMEOUT_SECONDS,
                "request_timeout_seconds",
            ),
            training_purpose=str(training.get("purpose") or FINE_TUNE_PURPOSE),
            training_timeout=_non_negative_float(
                training.get("request_timeout_seconds"),
                DEFAULT_TRAINING_TIMEOUT_SECONDS,
                "request_timeout_seconds",
            ),
        )

    # -------- Internal helpers for path normalization --------

    @staticmethod
    def _normalize_pipeline_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
        out = dict(cfg or {})
        general = dict(out.get("general", {}) or {})
        logs_dir_raw = general.get("logs_dir")
        if logs_dir_raw:
            pth = _expand_path_str(str(logs_dir_raw))
            general["logs_dir"] = str(
                pth.resolve() if pth.is_absolute() else (PROJECT_ROOT / pth).resolve()
            )
        out["general"] = general
        return out
