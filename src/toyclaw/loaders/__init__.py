"""Document text extraction for the index builder."""

from toyclaw.loaders.base import Loader
from toyclaw.loaders.pdfplumber_loader import PDFPlumberLoader
from toyclaw.loaders.pypdf_loader import PyPDFLoader
from toyclaw.loaders.registry import LoaderRegistry, PDFBackend
from toyclaw.loaders.text import TextLoader

__all__ = [
    "Loader",
    "LoaderRegistry",
    "PDFBackend",
    "PDFPlumberLoader",
    "PyPDFLoader",
    "TextLoader",
]
