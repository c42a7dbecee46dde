# src/toyclaw/loaders/pypdf_loader.py
"""PDF loader using pypdf - lightweight, pure Python."""

from pathlib import Path

from pypdf import PdfReader

from toyclaw.loaders.base import Loader


class PyPDFLoader(Loader):
    """Extract PDF text using pypdf.

    The default PDF backend. For documents with tables or complex layouts,
    consider PDFPlumberLoader.
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

        reader = PdfReader(path)
        pages = []
        for page in reader.pages:
            text = page.extract_text() or ""
            if text.strip():
                pages.append(text.strip())
        return "\n\n".join(pages)
