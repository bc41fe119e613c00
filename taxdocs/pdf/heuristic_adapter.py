"""Best-effort PDF text recovery without a PDF parser.

This is a lossy heuristic, not a PDF implementation. It works on the raw
bytes decoded one byte per character (latin-1) and, in order:

1. collects literal strings ``( ... )`` shown inside ``BT ... ET`` text
   objects, dropping one-character runs and runs with no alphanumerics;
2. scans the whole byte string with a fixed battery of patterns (years,
   dollar amounts, SSN and EIN shapes, capitalized two-word names, company
   names ending in Inc/LLC/Corp/Company) and appends every distinct match.

Known limitations:

- Compressed (FlateDecode) content streams are opaque, so step 1 recovers
  nothing from most producer-generated PDFs; only step 2 contributes.
- Hex strings ``<...>`` and font-encoded glyph ids (CID fonts) are ignored.
- Step 2 runs over binary data too, so names and years can be false
  positives picked out of metadata or compressed bytes.
- Reading order and layout are lost; amounts are not tied to their boxes.

A transcript of ``min_chars`` characters or fewer raises
InsufficientTextError so the caller can fall back to sending the document
itself to a vision-capable backend.
"""

import re

from taxdocs.pdf.base import BasePdfExtractor
from taxdocs.pdf.exceptions import InsufficientTextError

_TEXT_OBJECT_RE = re.compile(r"\bBT\b(.*?)\bET\b", re.DOTALL)
_LITERAL_STRING_RE = re.compile(r"\(((?:\\.|[^\\)])*)\)", re.DOTALL)
_OCTAL_ESCAPE_RE = re.compile(r"\\([0-7]{1,3})")
_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "(": "(",
    ")": ")",
    "\\": "\\",
}

PATTERN_BATTERY: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("year", re.compile(r"\b(?:19|20)\d{2}\b")),
    ("amount", re.compile(r"\$\s?\d{1,3}(?:,\d{3})*(?:\.\d{2})?|\b\d{1,3}(?:,\d{3})+\.\d{2}\b")),
    ("ssn", re.compile(r"\b\d{3}-\d{2}-\d{4}\b")),
    ("ein", re.compile(r"\b\d{2}-\d{7}\b")),
    ("name", re.compile(r"\b[A-Z][a-z]+ [A-Z][a-z]+\b")),
    (
        "company",
        re.compile(r"\b[A-Z][\w&'-]*(?: [A-Z][\w&'-]*)*,? (?:Inc|LLC|Corp|Company)\b\.?"),
    ),
)


def _unescape_literal(raw: str) -> str:
    text = raw.replace("\\\r\n", "").replace("\\\n", "")
    text = _OCTAL_ESCAPE_RE.sub(lambda m: chr(int(m.group(1), 8) & 0xFF), text)
    return re.sub(
        r"\\(.)",
        lambda m: _SIMPLE_ESCAPES.get(m.group(1), m.group(1)),
        text,
        flags=re.DOTALL,
    )


def extract_text_object_strings(data: str) -> list[str]:
    """Literal strings shown inside BT/ET text objects."""
    fragments: list[str] = []
    for region in _TEXT_OBJECT_RE.findall(data):
        for raw in _LITERAL_STRING_RE.findall(region):
            text = _unescape_literal(raw).strip()
            if len(text) <= 1 or not any(ch.isalnum() for ch in text):
                continue
            fragments.append(text)
    return fragments


def scan_patterns(data: str) -> list[str]:
    """Pattern-battery matches in order of first appearance.

    A value found more than once, or by more than one pattern, is kept once.
    """
    seen: set[str] = set()
    matches: list[str] = []
    for _label, pattern in PATTERN_BATTERY:
        for match in pattern.findall(data):
            if match not in seen:
                seen.add(match)
                matches.append(match)
    return matches


def heuristic_transcript(pdf_bytes: bytes) -> str:
    """Concatenate recovered fragments into a whitespace-normalized transcript."""
    data = pdf_bytes.decode("latin-1")
    fragments = extract_text_object_strings(data) + scan_patterns(data)
    return " ".join(" ".join(fragments).split())


class HeuristicPdfAdapter(BasePdfExtractor):
    """Recovers visible text from raw PDF bytes with regular expressions."""

    def __init__(self, min_chars: int = 50) -> None:
        self._min_chars = min_chars

    def extract(self, pdf_bytes: bytes) -> str:
        text = heuristic_transcript(pdf_bytes)
        if len(text) <= self._min_chars:
            raise InsufficientTextError(
                f"Heuristic scan recovered only {len(text)} chars"
            )
        return text
