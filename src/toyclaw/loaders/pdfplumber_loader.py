# src/toyclaw/loaders/pdfplumber_loader.py
"""PDF loader using pdfplumber - better at tables and multi-column layouts."""

from pathlib import Path

import pdfplumber

from toyclaw.loaders.base import Loader


class PDFPlumberLoader(Loader):
    """Extract PDF text using pdfplumber.

    Slower than pypdf, but keeps table rows together, which matters for
    limit tables such as migratable-element thresholds.
    """

    SUPPORTED_EXTENSIONS = {".pdf"}

    def supports(self, path: str) -> bool:
        """Check if this loader supports the given file."""
        return Path(path).suffix.lower() in self.SUPPORTED_EXTENSIONS

    def extract_text(self, path: str) -> str:
        """Extract the text of every page, pages separated by a blank line.

        Raises:
            FileNotFoundError: If file does not exist
        """
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        pages = []
        with pdfplumber.open(path) as pdf:
            for page in pdf.pages:
                text = page.extract_text() or ""
                if text.strip():
                    pages.append(text.strip())
        return "\n\n".join(pages)
