# src/toyclaw/chunker.py
"""Section-aware text chunking for regulatory documents.

Text is first split into logical sections on heading-like lines (numbered
headings, CHAPTER/SECTION/ARTICLE/ANNEX/PART/APPENDIX keywords, long
all-caps lines). Each section is then cut into overlapping windows that
prefer to end on a paragraph or sentence boundary.
"""

import re
from dataclasses import dataclass

from toyclaw.models import Chunk

HEADING_PATTERN = re.compile(
    r"\n(?=(?:\d+\.[\d.]*\s+[A-Z])"
    r"|(?:(?:CHAPTER|SECTION|ARTICLE|ANNEX|PART|APPENDIX)\s+[\dIVXLCDM]+)"
    r"|(?:[A-Z][A-Z\s]{10,}))"
)

FULL_DOCUMENT_HEADING = "full-document"
MAX_HEADING_CHARS = 120


@dataclass(frozen=True)
class Section:
    heading: str
    text: str


def split_into_sections(text: str) -> list[Section]:
    """Split text on heading-like lines.

    A document without any detected heading is returned as a single
    "full-document" section.
    """
    parts = HEADING_PATTERN.split(text)
    if len(parts) <= 1:
        return [Section(heading=FULL_DOCUMENT_HEADING, text=text)]

    sections = []
    for part in parts:
        stripped = part.strip()
        if not stripped:
            continue
        first_line = stripped.split("\n", 1)[0]
        sections.append(Section(heading=first_line[:MAX_HEADING_CHARS].strip(), text=stripped))
    return sections


def _last_index(text: str, needle: str, position: int) -> int:
    """Index of the last occurrence of needle starting at or before position, or -1."""
    return text.rfind(needle, 0, position + len(needle))


def split_into_chunks(text: str, max_chars: int, overlap: int) -> list[str]:
    """Cut text into windows of at most max_chars, overlapping by overlap chars.

    A window ends at the last paragraph break, else the last sentence end,
    found in the second half of the window; otherwise it is cut at max_chars.

    Raises:
        ValueError: If overlap is not smaller than half of max_chars.
    """
    if max_chars <= 0:
        raise ValueError("max_chars must be positive")
    if overlap < 0 or overlap * 2 >= max_chars:
        raise ValueError("overlap must be non-negative and less than half of max_chars")

    if len(text) <= max_chars:
        return [text]

    chunks = []
    start = 0
    half = max_chars * 0.5
    while start < len(text):
        end = start + max_chars
        if end < len(text):
            paragraph_break = _last_index(text, "\n\n", end)
            if paragraph_break > start + half:
                end = paragraph_break
            else:
                sentence_break = _last_index(text, ". ", end)
                if sentence_break > start + half:
                    end = sentence_break + 1
        else:
            end = len(text)

        chunks.append(text[start:end])
        if end >= len(text):
            break
        start = max(end - overlap, start + 1)

    return chunks


class Chunker:
    """Turns one document's text into market-tagged Chunks.

    Example:
        chunker = Chunker(max_chars=2000, overlap_chars=200)
        chunks = chunker.chunk(text, market="EUROPE", filename="EN71-3.pdf")
    """

    def __init__(
        self,
        max_chars: int = 2000,
        overlap_chars: int = 200,
        min_chars: int = 50,
    ) -> None:
        """Initialize the chunker.

        Args:
            max_chars: Maximum characters per chunk.
            overlap_chars: Characters shared with the previous chunk.
            min_chars: Chunks shorter than this (after stripping) are dropped.
        """
        if overlap_chars * 2 >= max_chars:
            raise ValueError("overlap_chars must be less than half of max_chars")
        self.max_chars = max_chars
        self.overlap_chars = overlap_chars
        self.min_chars = min_chars

    def chunk(self, text: str, market: str, filename: str) -> list[Chunk]:
        """Split a document into chunks with ids of the form market/filename#n.

        Sequence numbers are contiguous over the accepted chunks of the
        document. Returns an empty list for blank text.
        """
        if not text or not text.strip():
            return []

        chunks: list[Chunk] = []
        for section in split_into_sections(text):
            for piece in split_into_chunks(section.text, self.max_chars, self.overlap_chars):
                piece = piece.strip()
                if not piece or len(piece) < self.min_chars:
                    continue
                index = len(chunks)
                chunks.append(
                    Chunk(
                        id=f"{market}/{filename}#{index}",
                        text=piece,
                        market=market,
                        source=filename,
                        section=section.heading or f"section-{index}",
                    )
                )
        return chunks
