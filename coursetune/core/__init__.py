"""Core pipeline package.

Provides the data model, error taxonomy, per-block retry control and the
run orchestration that ties the stages together.

Submodules:
- models: Immutable pipeline records (UploadedFile, TrainingRequest, TextBlock, BlockOutcome, ...)
- errors: Exception taxonomy (CourseTuneError and its subclasses)
- retry: Bounded synthesize-then-validate retry (RetryController)
- pipeline: End-to-end run and state machine (TrainingPipeline, train_content)

Note: To avoid circular imports, use direct imports from submodules:
    from coursetune.core.pipeline import TrainingPipeline
    from coursetune.core.errors import NoValidDatasetError
"""
