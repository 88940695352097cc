"""Split uploaded building code documents into numbered sections.

Headings are recognised line by line ("101.2 Scope", "SECTION 1004 ...",
"CHAPTER 3 ..."); the lines that follow a heading become its content.
Documents without any recognisable heading are chunked by paragraph instead.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

import pdfplumber

# Tried in order; the first match wins
HEADING_PATTERNS = [
    re.compile(r"^(\d+(?:\.\d+)*)\s+(.*)$"),
    re.compile(r"^(SECTION\s+\d+(?:\.\d+)*)\s+(.*)$", re.IGNORECASE),
    re.compile(r"^(CHAPTER\s+\d+)\s+(.*)$", re.IGNORECASE),
    re.compile(r"^(\d+(?:\.\d+)*)\.\s+(.*)$"),
]

_NUMERIC = re.compile(r"\d+(?:\.\d+)*")


@dataclass(slots=True)
class ParsedSection:
    number: str
    title: str
    content: str = ""
    chapter: str | None = None
    hierarchy: list[str] = field(default_factory=list)


def parse_sections(raw: str) -> list[ParsedSection]:
    """Return the sections found in ``raw``, in document order.

    Text before the first heading is dropped.
    """
    sections: list[ParsedSection] = []
    current: ParsedSection | None = None

    for line in raw.splitlines():
        stripped = line.strip()
        if not stripped:
            continue

        match = None
        for pattern in HEADING_PATTERNS:
            match = pattern.match(stripped)
            if match:
                break

        if match:
            if current is not None:
                sections.append(current)
            number, title = match.group(1), match.group(2)
            numeric = _NUMERIC.search(number)
            hierarchy = (numeric.group(0) if numeric else number).split(".")
            current = ParsedSection(
                number=number,
                title=title,
                chapter=hierarchy[0],
                hierarchy=hierarchy,
            )
        elif current is not None:
            current.content = f"{current.content}\n{stripped}" if current.content else stripped

    if current is not None:
        sections.append(current)
    return sections


def chunk_text(
    text: str,
    chunk_size: int = 1000,
    overlap: int = 200,
    min_words: int = 30,
) -> list[str]:
    """Split unstructured text into word chunks of at most ``chunk_size`` words.

    Paragraphs are kept whole when they fit; oversized paragraphs are split
    on sentence boundaries. Consecutive chunks share ``overlap`` words and
    chunks of ``min_words`` words or fewer are discarded.
    """
    chunks: list[str] = []
    current: list[str] = []

    def flush() -> None:
        nonlocal current
        chunks.append(" ".join(current))
        current = current[max(0, len(current) - overlap):]

    for paragraph in re.split(r"\n\s*\n", text):
        words = paragraph.split()
        if not words:
            continue

        if len(words) > chunk_size:
            if current:
                flush()
            pieces = [s.split() for s in re.split(r"(?<=[.!?])\s+", paragraph)]
        else:
            pieces = [words]

        for piece in pieces:
            if current and len(current) + len(piece) > chunk_size:
                flush()
            current.extend(piece)

    if current:
        chunks.append(" ".join(current))

    return [chunk for chunk in chunks if len(chunk.split()) > min_words]


def extract_text(path: Path) -> str:
    """Read the text of an uploaded document.

    PDFs go through pdfplumber page by page; anything else is read as UTF-8.
    """
    if path.suffix.lower() == ".pdf":
        with pdfplumber.open(path) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
        return "\n\n".join(pages)

    return path.read_text(encoding="utf-8", errors="replace")
