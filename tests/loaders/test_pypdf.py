# tests/loaders/test_pypdf.py
"""Tests for PyPDFLoader."""

import os

import pytest

from toyclaw.loaders.base import Loader
from toyclaw.loaders.pypdf_loader import PyPDFLoader


@pytest.fixture
def blank_pdf(temp_dir):
    """Create a PDF with one blank page."""
    from pypdf import PdfWriter

    pdf_path = os.path.join(temp_dir, "blank.pdf")
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    with open(pdf_path, "wb") as f:
        writer.write(f)
    return pdf_path


class TestPyPDFLoader:
    def test_is_loader(self):
        assert isinstance(PyPDFLoader(), Loader)

    def test_supports_pdf(self):
        loader = PyPDFLoader()
        assert loader.supports("file.pdf") is True
        assert loader.supports("FILE.PDF") is True
        assert loader.supports("file.txt") is False

    def test_blank_page_has_no_text(self, blank_pdf):
        assert PyPDFLoader().extract_text(blank_pdf) == ""

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            PyPDFLoader().extract_text("/nonexistent/file.pdf")
