"""RAG Admin - operator console for the RAG backend."""

__version__ = "0.1.0"
