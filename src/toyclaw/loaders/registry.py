# src/toyclaw/loaders/registry.py
"""Picks a text extractor for each compliance document by file type."""

from typing import Literal

from toyclaw.loaders.base import Loader
from toyclaw.loaders.pdfplumber_loader import PDFPlumberLoader
from toyclaw.loaders.pypdf_loader import PyPDFLoader
from toyclaw.loaders.text import TextLoader

PDFBackend = Literal["pypdf", "pdfplumber"]


class LoaderRegistry:
    """Ordered collection of loaders; the first one that claims a path wins."""

    def __init__(self) -> None:
        self._loaders: list[Loader] = []

    def register(self, loader: Loader) -> None:
        self._loaders.append(loader)

    def find_loader(self, path: str) -> Loader | None:
        return next((loader for loader in self._loaders if loader.supports(path)), None)

    def supports(self, path: str) -> bool:
        return self.find_loader(path) is not None

    def extract_text(self, path: str) -> str:
        """Return the raw text of a document.

        Raises:
            ValueError: If no registered loader handles the file type
        """
        loader = self.find_loader(path)
        if loader is None:
            raise ValueError(f"No loader found for: {path}")
        return loader.extract_text(path)

    @classmethod
    def default(cls, pdf_backend: PDFBackend = "pypdf") -> "LoaderRegistry":
        """Plain text and Markdown, plus PDFs through the chosen backend.

        Args:
            pdf_backend: "pypdf" (default) or "pdfplumber".
        """
        pdf_loaders = {"pypdf": PyPDFLoader, "pdfplumber": PDFPlumberLoader}
        if pdf_backend not in pdf_loaders:
            raise ValueError(f"Unknown pdf_backend '{pdf_backend}'. Use 'pypdf' or 'pdfplumber'.")
        registry = cls()
        registry.register(TextLoader())
        registry.register(pdf_loaders[pdf_backend]())
        return registry
