"""coursetune package.

Turns uploaded course material plus a free-text training guide into a
validated chat fine-tuning dataset and submits it to a training service:
- Configuration management
- Document text extraction (text, markdown, Word, PDF, slides)
- Chunking and LLM-driven dataset synthesis
- Fine-tuning job submission
- Infrastructure utilities
"""

__version__ = "1.0.0"
