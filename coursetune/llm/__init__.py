"""Language model integration package.

Provides LangChain-based chat completion providers, the dataset
synthesizer, and the fine-tuning (training service) backends.

Note: Imports are lazy to avoid circular import issues with the core models.
"""


def __getattr__(name: str):
    """Lazy import to avoid circular dependencies."""
    if name == "DatasetSynthesizer":
        from coursetune.llm.synthesizer import DatasetSynthesizer
        return DatasetSynthesizer

    if name in ("BaseProvider", "CompletionResult", "ProviderCapabilities",
                "get_provider", "ProviderType"):
        from coursetune.llm import providers
        return getattr(providers, name)

    if name in ("TrainingBackend", "FineTuningJob", "get_training_backend"):
        from coursetune.llm import training
        return getattr(training, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "DatasetSynthesizer",
    "BaseProvider",
    "CompletionResult",
    "ProviderCapabilities",
    "get_provider",
    "ProviderType",
    "TrainingBackend",
    "FineTuningJob",
    "get_training_backend",
]
