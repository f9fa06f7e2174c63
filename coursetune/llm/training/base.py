"""Base interface for fine-tuning (training service) backends.

Defines the abstract interface that all training backends must implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class FineTuningJob:
    """Descriptor of a fine-tuning job as returned by the training service.

    Attributes:
        id: Provider-assigned job identifier
        status: Provider status string (e.g. 'validating_files', 'queued')
        model: Base model being fine-tuned
        training_file: Identifier of the uploaded training file
        raw: The full provider response, for callers that need more fields
    """
    id: str
    status: str
    model: str
    training_file: str
    raw: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary for persistence."""
        return {
            "id": self.id,
            "status": self.status,
            "model": self.model,
            "training_file": self.training_file,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FineTuningJob":
        """Build from a provider response dictionary."""
        return cls(
            id=str(data.get("id", "")),
            status=str(data.get("status", "")),
            model=str(data.get("model", "")),
            training_file=str(data.get("training_file", "")),
            raw=dict(data),
        )


class TrainingBackend(ABC):
    """Abstract base class for training services.

    Implementations wrap their own failures in UploadError or
    JobCreationError.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name (e.g., 'openai')."""
        pass

    @abstractmethod
    def upload_training_file(self, path: Path, *, purpose: Optional[str] = None) -> str:
        """Upload a staged JSON-Lines dataset.

        Args:
            path: Path to the staged dataset file
            purpose: Upload purpose; the backend default when None

        Returns:
            The provider's file identifier

        Raises:
            UploadError: If the upload fails
        """
        pass

    @abstractmethod
    def create_fine_tuning_job(self, training_file_id: str, model: str) -> FineTuningJob:
        """Create a fine-tuning job over an uploaded file.

        Raises:
            JobCreationError: If the service rejects or fails the request
        """
        pass
