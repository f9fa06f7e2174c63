"""Training service backends.

Provides the upload-file / create-fine-tuning-job capability behind a
provider-neutral interface.
"""

from coursetune.llm.training.base import FineTuningJob, TrainingBackend
from coursetune.llm.training.factory import get_training_backend

__all__ = [
    "FineTuningJob",
    "TrainingBackend",
    "get_training_backend",
]
