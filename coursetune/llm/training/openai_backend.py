"""OpenAI fine-tuning backend.

Uploads the dataset through the Files API (purpose ``fine-tune``) and creates
a job through the Fine-tuning API.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import httpx
import openai

from coursetune.config.constants import FINE_TUNE_PURPOSE
from coursetune.core.errors import JobCreationError, UploadError
from coursetune.llm.openai_sdk_utils import coerce_file_id, sdk_to_dict
from coursetune.llm.training.base import FineTuningJob, TrainingBackend

logger = logging.getLogger(__name__)


class OpenAITrainingBackend(TrainingBackend):
    """OpenAI Files + Fine-tuning API backend."""

    def __init__(
        self,
        client: Any = None,
        *,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        purpose: str = FINE_TUNE_PURPOSE,
    ) -> None:
        self._client = client
        self._api_key = api_key
        self._timeout = timeout
        self.purpose = purpose

    def _get_client(self) -> Any:
        """Lazy initialization of OpenAI client."""
        if self._client is None:
            client_kwargs: Dict[str, Any] = {"api_key": self._api_key}
            # Without a configured timeout the SDK default applies
            if self._timeout:
                client_kwargs["timeout"] = self._timeout
            self._client = openai.OpenAI(**client_kwargs)
        return self._client

    @property
    def provider_name(self) -> str:
        return "openai"

    def upload_training_file(self, path: Path, *, purpose: Optional[str] = None) -> str:
        """Upload a staged dataset to OpenAI and return its file id."""
        client = self._get_client()
        logger.info("Uploading training file to OpenAI...")
        try:
            with Path(path).open("rb") as f:
                file_response = client.files.create(file=f, purpose=purpose or self.purpose)
        except (openai.OpenAIError, httpx.HTTPError, OSError) as e:
            raise UploadError(f"Failed to upload training file: {e}") from e

        file_id = coerce_file_id(file_response)
        if not file_id:
            raise UploadError("Upload response did not contain a file id")
        logger.info("Uploaded training file; file id: %s", file_id)
        return file_id

    def create_fine_tuning_job(self, training_file_id: str, model: str) -> FineTuningJob:
        """Create a fine-tuning job for ``model`` over the uploaded file."""
        client = self._get_client()
        try:
            response = client.fine_tuning.jobs.create(
                training_file=training_file_id,
                model=model,
            )
        except (openai.OpenAIError, httpx.HTTPError) as e:
            raise JobCreationError(f"Failed to create fine-tuning job: {e}") from e

        data = sdk_to_dict(response)
        if not data.get("id"):
            raise JobCreationError("Fine-tuning response did not contain a job id")
        data.setdefault("training_file", training_file_id)
        data.setdefault("model", model)
        job = FineTuningJob.from_dict(data)
        logger.info("Fine-tuning job created; job id: %s (status: %s)", job.id, job.status)
        return job
