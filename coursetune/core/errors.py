"""Exception hierarchy for the training pipeline.

File- and block-level errors are recovered locally (the file is skipped or
the attempt is counted); NoValidDatasetError, UploadError and
JobCreationError end the run.
"""

from __future__ import annotations


class CourseTuneError(Exception):
    """Base class for all pipeline errors."""


class UnsupportedFileTypeError(CourseTuneError):
    """The declared type or extension is outside the supported set."""


class ExtractionError(CourseTuneError):
    """A supported document could not be read or parsed."""


class GenerationError(CourseTuneError):
    """A completion request failed, timed out or returned nothing."""


class DatasetValidationError(CourseTuneError):
    """A generated batch is not a well-formed chat fine-tuning batch."""


class NoValidDatasetError(CourseTuneError):
    """Every block was dropped, so there is nothing to upload."""


class UploadError(CourseTuneError):
    """The dataset could not be staged or uploaded to the training service."""


class JobCreationError(CourseTuneError):
    """The training service refused or failed to create the fine-tuning job."""
