"""Pytest configuration and shared fixtures for CourseTune tests.

This module provides reusable fixtures for:
- Configuration management
- Temporary file/directory creation
- Sample documents (generated with the same libraries that read them)
- Stub LLM providers and training backends
"""

from __future__ import annotations

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional, Sequence, Union
from unittest.mock import patch

import pytest
import yaml

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
import sys
sys.path.insert(0, str(PROJECT_ROOT))

from coursetune.llm.providers.base import BaseProvider, CompletionResult, ProviderCapabilities
from coursetune.llm.training.base import FineTuningJob, TrainingBackend


# =============================================================================
# Sample Dataset Helpers
# =============================================================================

VALID_RECORD = {
    "messages": [
        {"role": "user", "content": "x"},
        {"role": "assistant", "content": "y"},
    ]
}


def make_batch(lines: int = 10, record: Optional[Dict[str, Any]] = None) -> str:
    """Build a JSON-Lines batch of ``lines`` identical minified records."""
    line = json.dumps(record or VALID_RECORD, separators=(",", ":"))
    return "\n".join([line] * lines)


@pytest.fixture
def valid_batch() -> str:
    """A batch of exactly ten valid chat records."""
    return make_batch(10)


# =============================================================================
# Stub Collaborators
# =============================================================================

class StubProvider(BaseProvider):
    """Provider returning scripted responses in order.

    Each scripted item is either a string (returned as the completion text)
    or an exception instance (raised). The last item repeats once the script
    runs out.
    """

    def __init__(self, responses: Sequence[Union[str, BaseException]] = ()):
        super().__init__(api_key="stub-key")
        self.responses: List[Union[str, BaseException]] = list(responses)
        self.calls: List[Dict[str, str]] = []
        self.closed = False

    @property
    def provider_name(self) -> str:
        return "stub"

    def get_capabilities(self, model: str) -> ProviderCapabilities:
        return ProviderCapabilities(provider_name="stub", model_name=model)

    async def complete(self, *, model: str, system_prompt: str, user_content: str) -> CompletionResult:
        self.calls.append(
            {"model": model, "system_prompt": system_prompt, "user_content": user_content}
        )
        index = min(len(self.calls) - 1, len(self.responses) - 1)
        item = self.responses[index] if self.responses else ""
        if isinstance(item, BaseException):
            raise item
        return CompletionResult(content=item, total_tokens=len(item))

    async def close(self) -> None:
        self.closed = True


class StubTrainingBackend(TrainingBackend):
    """Training backend that records uploads instead of calling a service."""

    def __init__(
        self,
        job_id: str = "job-1",
        upload_error: Optional[BaseException] = None,
        job_error: Optional[BaseException] = None,
    ):
        self.job_id = job_id
        self.upload_error = upload_error
        self.job_error = job_error
        self.uploads: List[Dict[str, Any]] = []
        self.jobs: List[Dict[str, str]] = []

    @property
    def provider_name(self) -> str:
        return "stub"

    def upload_training_file(self, path: Path, *, purpose: Optional[str] = None) -> str:
        path = Path(path)
        self.uploads.append(
            {
                "path": path,
                "purpose": purpose,
                "content": path.read_text(encoding="utf-8"),
            }
        )
        if self.upload_error is not None:
            raise self.upload_error
        return f"file-{len(self.uploads)}"

    def create_fine_tuning_job(self, training_file_id: str, model: str) -> FineTuningJob:
        self.jobs.append({"training_file": training_file_id, "model": model})
        if self.job_error is not None:
            raise self.job_error
        return FineTuningJob(
            id=self.job_id,
            status="validating_files",
            model=model,
            training_file=training_file_id,
        )


@pytest.fixture
def batch_factory():
    """Return the make_batch helper."""
    return make_batch


@pytest.fixture
def provider_factory():
    """Return a callable building a StubProvider from a response script."""
    return StubProvider


@pytest.fixture
def backend_factory():
    """Return a callable building a StubTrainingBackend."""
    return StubTrainingBackend


@pytest.fixture
def stub_provider() -> StubProvider:
    """Provider that always returns a valid ten-line batch."""
    return StubProvider([make_batch(10)])


@pytest.fixture
def stub_backend() -> StubTrainingBackend:
    """Training backend returning job id 'job-1'."""
    return StubTrainingBackend()


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture
def mock_model_config() -> Dict[str, Any]:
    """Provide a mock model configuration dictionary."""
    return {
        "synthesis_model": {
            "provider": "openai",
            "max_tokens": 10000,
            "temperature": 0.7,
            "request_timeout_seconds": 60,
        },
    }


@pytest.fixture
def mock_pipeline_config() -> Dict[str, Any]:
    """Provide a mock pipeline configuration dictionary."""
    return {
        "general": {
            "logs_dir": "logs",
        },
        "pipeline": {
            "block_size": 5000,
            "max_attempts": 2,
            "retry_wait_seconds": 0,
            "min_batch_lines": 10,
            "concurrency_limit": 2,
        },
        "training": {
            "purpose": "fine-tune",
            "request_timeout_seconds": 120,
        },
    }


@pytest.fixture
def config_dir(temp_dir: Path, mock_model_config, mock_pipeline_config) -> Path:
    """Write the mock configuration to YAML files in a temporary directory."""
    cfg_dir = temp_dir / "config"
    cfg_dir.mkdir(parents=True, exist_ok=True)
    with (cfg_dir / "model_config.yaml").open("w", encoding="utf-8") as f:
        yaml.safe_dump(mock_model_config, f)
    with (cfg_dir / "pipeline_config.yaml").open("w", encoding="utf-8") as f:
        yaml.safe_dump(mock_pipeline_config, f)
    return cfg_dir


@pytest.fixture
def reset_config_service():
    """Reset the ConfigService singleton around a test."""
    from coursetune.config.service import ConfigService
    ConfigService.reset()
    yield
    ConfigService.reset()


# =============================================================================
# Temporary Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory that is cleaned up after test."""
    temp_path = Path(tempfile.mkdtemp(prefix="coursetunetest_"))
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def temp_input_dir(temp_dir: Path) -> Path:
    """Create a temporary input directory structure."""
    input_dir = temp_dir / "input"
    input_dir.mkdir(parents=True, exist_ok=True)
    return input_dir


# =============================================================================
# Sample Document Fixtures
# =============================================================================

@pytest.fixture
def sample_text_file(temp_input_dir: Path) -> Path:
    """Create a sample plain text file with messy whitespace."""
    txt_path = temp_input_dir / "notes.txt"
    txt_path.write_text(
        "  Lecture   1\r\n\r\n\r\nPhotosynthesis\tconverts light.  \n\n\n\nEnd.  ",
        encoding="utf-8",
    )
    return txt_path


@pytest.fixture
def sample_markdown_file(temp_input_dir: Path) -> Path:
    """Create a sample markdown file."""
    md_path = temp_input_dir / "readme.md"
    md_path.write_text("# Title\n\nSome *markdown* text.\n", encoding="utf-8")
    return md_path


@pytest.fixture
def sample_docx_file(temp_input_dir: Path) -> Path:
    """Create a Word document with two paragraphs and a table."""
    import docx

    document = docx.Document()
    document.add_paragraph("First paragraph.")
    document.add_paragraph("Second   paragraph.")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Term"
    table.rows[0].cells[1].text = "Definition"
    path = temp_input_dir / "lesson.docx"
    document.save(str(path))
    return path


@pytest.fixture
def sample_pdf_file(temp_input_dir: Path) -> Path:
    """Create a two-page PDF with a text layer."""
    import fitz

    path = temp_input_dir / "chapter.pdf"
    doc = fitz.open()
    for text in ("Page one text", "Page two text"):
        page = doc.new_page()
        page.insert_text((72, 72), text)
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture
def sample_pptx_file(temp_input_dir: Path) -> Path:
    """Create a presentation with a titled slide and speaker notes."""
    from pptx import Presentation

    prs = Presentation()
    slide = prs.slides.add_slide(prs.slide_layouts[1])
    slide.shapes.title.text = "Cell Biology"
    slide.placeholders[1].text = "Mitochondria"
    slide.notes_slide.notes_text_frame.text = "Speaker notes here"
    path = temp_input_dir / "slides.pptx"
    prs.save(str(path))
    return path


@pytest.fixture
def blank_pptx_file(temp_input_dir: Path) -> Path:
    """Create a presentation with one slide that carries no text."""
    from pptx import Presentation

    prs = Presentation()
    prs.slides.add_slide(prs.slide_layouts[6])
    path = temp_input_dir / "slides.pptx"
    prs.save(str(path))
    return path


# =============================================================================
# Environment Fixtures
# =============================================================================

@pytest.fixture
def mock_env_no_api_keys():
    """Mock environment with no API keys set."""
    env_copy = os.environ.copy()
    for key in ["OPENAI_API_KEY", "OPENROUTER_API_KEY"]:
        env_copy.pop(key, None)
    with patch.dict(os.environ, env_copy, clear=True):
        yield


@pytest.fixture
def mock_env_with_openai_key():
    """Mock environment with OpenAI API key set."""
    with patch.dict(os.environ, {"OPENAI_API_KEY": "sk-test-key-12345"}):
        yield
