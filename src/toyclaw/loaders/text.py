# src/toyclaw/loaders/text.py
"""Plain-text loader for .txt and .md regulation excerpts."""

from pathlib import Path

from toyclaw.loaders.base import Loader


class TextLoader(Loader):
    """Load text and markdown files as-is."""

    SUPPORTED_EXTENSIONS = {".txt", ".md", ".markdown"}

    def supports(self, path: str) -> bool:
        return Path(path).suffix.lower() in self.SUPPORTED_EXTENSIONS

    def extract_text(self, path: str) -> str:
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        return file_path.read_text(encoding="utf-8", errors="replace")
