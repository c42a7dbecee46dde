# tests/test_chunker.py
"""Tests for section detection and chunk splitting."""

import pytest

from toyclaw.chunker import (
    FULL_DOCUMENT_HEADING,
    Chunker,
    split_into_chunks,
    split_into_sections,
)

BODY = "Toys shall not release more than 13.5 mg/kg of lead from scraped-off material. "


class TestSplitIntoSections:
    def test_no_headings(self):
        sections = split_into_sections("Plain text without any heading lines at all.")
        assert len(sections) == 1
        assert sections[0].heading == FULL_DOCUMENT_HEADING

    def test_numbered_headings(self):
        text = "Foreword text\n1. Scope of this standard\nbody one\n2. Requirements\nbody two"
        sections = split_into_sections(text)
        assert [s.heading for s in sections] == [
            "Foreword text",
            "1. Scope of this standard",
            "2. Requirements",
        ]
        assert sections[2].text == "2. Requirements\nbody two"

    def test_keyword_headings(self):
        text = "Intro\nARTICLE 5\nbody\nANNEX II\nmore body"
        headings = [s.heading for s in split_into_sections(text)]
        assert headings == ["Intro", "ARTICLE 5", "ANNEX II"]

    def test_all_caps_heading(self):
        text = "Intro\nGENERAL REQUIREMENTS\nThe toy shall be safe."
        headings = [s.heading for s in split_into_sections(text)]
        assert "GENERAL REQUIREMENTS" in headings

    def test_heading_truncated(self):
        long_heading = "1. " + "A" * 200
        sections = split_into_sections(f"Intro\n{long_heading}\nbody")
        assert len(sections[1].heading) == 120


class TestSplitIntoChunks:
    def test_short_text_single_chunk(self):
        assert split_into_chunks("short", 100, 10) == ["short"]

    def test_hard_cut_with_overlap(self):
        text = "x" * 5000
        chunks = split_into_chunks(text, 2000, 200)
        assert [len(c) for c in chunks] == [2000, 2000, 1400]

    def test_windows_overlap(self):
        text = "".join(chr(ord("a") + i % 26) for i in range(5000))
        chunks = split_into_chunks(text, 2000, 200)
        assert chunks[0][-200:] == chunks[1][:200]
        assert chunks[-1].endswith(text[-50:])

    def test_prefers_paragraph_break(self):
        text = "a" * 1500 + "\n\n" + "b" * 1000
        chunks = split_into_chunks(text, 2000, 200)
        assert chunks[0] == "a" * 1500

    def test_falls_back_to_sentence_break(self):
        text = "x" * 1200 + ". " + "y" * 1500
        chunks = split_into_chunks(text, 2000, 200)
        assert chunks[0] == "x" * 1200 + "."

    def test_ignores_break_in_first_half(self):
        text = "a" * 500 + "\n\n" + "b" * 2000
        chunks = split_into_chunks(text, 2000, 200)
        assert len(chunks[0]) == 2000

    def test_every_chunk_within_limit(self):
        text = (BODY * 200) + "\n\n" + (BODY * 50)
        assert all(len(c) <= 2000 for c in split_into_chunks(text, 2000, 200))

    def test_rejects_large_overlap(self):
        with pytest.raises(ValueError):
            split_into_chunks("text", 100, 50)


class TestChunker:
    def test_chunk_ids_and_metadata(self):
        chunks = Chunker().chunk(BODY * 3, market="EUROPE", filename="EN71-3.pdf")
        assert len(chunks) == 1
        assert chunks[0].id == "EUROPE/EN71-3.pdf#0"
        assert chunks[0].market == "EUROPE"
        assert chunks[0].source == "EN71-3.pdf"
        assert chunks[0].section == FULL_DOCUMENT_HEADING

    def test_blank_text(self):
        assert Chunker().chunk("   \n ", market="US", filename="a.pdf") == []

    def test_drops_short_pieces(self):
        assert Chunker().chunk("Too short.", market="US", filename="a.pdf") == []

    def test_sequence_contiguous_after_drops(self):
        text = "1. Short\nx\n2. Lead content\n" + BODY * 2
        chunks = Chunker().chunk(text, market="US", filename="astm.pdf")
        assert [c.id for c in chunks] == ["US/astm.pdf#0"]
        assert chunks[0].section == "2. Lead content"

    def test_ids_unique_across_sections(self):
        text = "\n".join(f"{n}. Section {n}\n{BODY * 30}" for n in range(1, 4))
        chunks = Chunker(max_chars=1000, overlap_chars=100).chunk(
            text, market="Global", filename="iso8124.pdf"
        )
        ids = [c.id for c in chunks]
        assert len(ids) == len(set(ids))
        assert ids == [f"Global/iso8124.pdf#{n}" for n in range(len(ids))]
        assert all(len(c.text) <= 1000 for c in chunks)

    def test_chunk_text_is_stripped(self):
        chunks = Chunker().chunk("\n\n   " + BODY + "   \n", market="US", filename="a.txt")
        assert chunks[0].text == BODY.strip()

    def test_rejects_large_overlap(self):
        with pytest.raises(ValueError):
            Chunker(max_chars=100, overlap_chars=60)
