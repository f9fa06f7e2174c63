"""Infrastructure utilities package.

Provides logging and concurrency management utilities.
"""

# Avoid circular imports - use direct imports instead of re-exporting
__all__ = [
    "setup_logger",
    "run_concurrent_tasks",
]
