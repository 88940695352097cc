"""Tests for splitting building code documents into sections."""

from __future__ import annotations

from buildright.catalog.parser import chunk_text, extract_text, parse_sections

EGRESS_TEXT = """
Preface text that comes before any heading.

CHAPTER 10 MEANS OF EGRESS
SECTION 1001 ADMINISTRATION
1001.1 General. Buildings shall be provided with a means of egress system.
1001.2 Minimum requirements
It shall be unlawful to alter a building in a manner
that reduces the number of exits.
1001.3. Maintenance
"""


class TestParseSections:
    def test_headings_and_content(self):
        sections = parse_sections(EGRESS_TEXT)

        assert [s.number for s in sections] == [
            "CHAPTER 10",
            "SECTION 1001",
            "1001.1",
            "1001.2",
            "1001.3",
        ]
        assert sections[0].title == "MEANS OF EGRESS"
        assert sections[2].title == "General. Buildings shall be provided with a means of egress system."
        assert sections[3].content == (
            "It shall be unlawful to alter a building in a manner\n"
            "that reduces the number of exits."
        )
        assert sections[4].title == "Maintenance"
        assert sections[4].content == ""

    def test_hierarchy_from_numeric_part(self):
        sections = parse_sections(EGRESS_TEXT)
        by_number = {s.number: s for s in sections}

        assert by_number["CHAPTER 10"].hierarchy == ["10"]
        assert by_number["SECTION 1001"].chapter == "1001"
        assert by_number["1001.2"].hierarchy == ["1001", "2"]
        assert by_number["1001.2"].chapter == "1001"

    def test_text_without_headings(self):
        assert parse_sections("Just a paragraph.\nAnd another line.") == []
        assert parse_sections("") == []


class TestChunkText:
    def test_short_chunks_dropped(self):
        assert chunk_text("too short to keep") == []

    def test_paragraphs_grouped_with_overlap(self):
        paragraph = " ".join(f"w{i}" for i in range(40))
        text = "\n\n".join([paragraph] * 3)

        chunks = chunk_text(text, chunk_size=100, overlap=10)

        assert len(chunks) == 2
        first, second = (c.split() for c in chunks)
        assert len(first) == 80
        # second chunk starts with the last 10 words of the first
        assert second[:10] == first[-10:]
        assert len(second) == 50

    def test_oversized_paragraph_split_on_sentences(self):
        sentence = " ".join(["word"] * 39) + " end."
        paragraph = " ".join([sentence] * 5)

        chunks = chunk_text(paragraph, chunk_size=100, overlap=0)

        assert [len(c.split()) for c in chunks] == [80, 80, 40]


def test_extract_text_reads_plain_text(tmp_path):
    path = tmp_path / "ibc.txt"
    path.write_text("101.1 Title\nThis code shall be known as the Building Code.\n", encoding="utf-8")

    assert extract_text(path).startswith("101.1 Title")


def test_extract_text_tolerates_bad_bytes(tmp_path):
    path = tmp_path / "legacy.doc"
    path.write_bytes(b"101.1 Scope\n\xff\xfe broken")

    text = extract_text(path)

    assert text.startswith("101.1 Scope")
