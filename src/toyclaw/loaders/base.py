# src/toyclaw/loaders/base.py
"""Loader abstract base class."""

from abc import ABC, abstractmethod


class Loader(ABC):
    """Abstract base class for extracting plain text from a document file."""

    @abstractmethod
    def extract_text(self, path: str) -> str:
        """Extract the full text of a document.

        Args:
            path: Path to the file to read

        Returns:
            The document's text. May be empty for image-only documents.
        """
        ...

    @abstractmethod
    def supports(self, path: str) -> bool:
        """Check if this loader supports the given path."""
        ...
