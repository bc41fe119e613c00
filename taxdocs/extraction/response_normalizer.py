"""Turns raw backend output into an ExtractedTaxRecord without ever raising.

Well-formed JSON objects become WellFormedRecord with every leaf validated:
placeholder or template text is replaced by None. Anything that is not a
JSON object becomes a DegradedRecord carrying the raw text for review.
"""

import json
import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any

from taxdocs.extraction.models import (
    DegradedRecord,
    DocumentCategory,
    EmployeeInfo,
    ExtractedTaxRecord,
    TaxAmounts,
    WellFormedRecord,
)

DEFAULT_CONFIDENCE = 0.3
LAST_RESORT_CONFIDENCE = 0.1

_OPENING_FENCE_RE = re.compile(r"^```[\w+-]*[ \t]*\n?")
_CLOSING_FENCE_RE = re.compile(r"\n?[ \t]*```$")

_PLACEHOLDER_RE = re.compile(
    r"^(?:string|number|integer|float|decimal|boolean|null|none|nil|n/a|unknown|"
    r"not available|not provided|not found|tbd|-+|\?+)$",
    re.IGNORECASE,
)
_TEMPLATE_PHRASE_RE = re.compile(
    r"^(?:.+\bas printed(?:,? or null)?|.+,? or null|number between \S+ and \S+|"
    r"one of the allowed .+|which text on the document .+|<.*>|\[.*\]|\{.*\})$",
    re.IGNORECASE,
)
_MASK_ONLY_RE = re.compile(r"^[Xx*#\-\s]+$")
_SSN_RE = re.compile(r"^[\dXx*]{3}-?[\dXx*]{2}-?\d{4}$")
_YEAR_RANGE = range(1900, 2101)


def strip_code_fence(raw: str) -> str:
    """Remove one outer ``` fence (optionally language-tagged) around the payload."""
    cleaned = raw.strip()
    if not cleaned.startswith("```"):
        return cleaned
    cleaned = _OPENING_FENCE_RE.sub("", cleaned, count=1)
    cleaned = _CLOSING_FENCE_RE.sub("", cleaned, count=1)
    return cleaned.strip()


def normalize_response(
    raw: str,
    category: DocumentCategory,
    *,
    ocr_text: str | None = None,
    degraded_confidence: float = DEFAULT_CONFIDENCE,
) -> ExtractedTaxRecord:
    """Parse backend output into a record; unparseable output is degraded, not an error."""
    cleaned = strip_code_fence(raw)
    try:
        parsed = json.loads(cleaned)
    except (json.JSONDecodeError, RecursionError) as exc:
        return _degraded(
            raw, category, ocr_text, degraded_confidence,
            f"Response could not be parsed as JSON: {exc}",
        )

    if not isinstance(parsed, dict):
        return _degraded(
            raw, category, ocr_text, degraded_confidence,
            "JSON response must be an object",
        )
    return build_record(parsed, category, ocr_text=ocr_text)


def build_record(
    data: dict[str, Any],
    category: DocumentCategory,
    *,
    ocr_text: str | None = None,
) -> WellFormedRecord:
    """Build a WellFormedRecord, defaulting missing top-level fields."""
    employee = data.get("employeeInfo")
    amounts = data.get("taxAmounts")
    return WellFormedRecord(
        document_type=clean_text(data.get("documentType")) or category.label,
        confidence=parse_confidence(data.get("confidence")),
        tax_year=parse_tax_year(data.get("taxYear")),
        employer_name=clean_text(data.get("employerName")),
        employee_info=_build_employee_info(employee if isinstance(employee, dict) else {}),
        tax_amounts=_build_tax_amounts(amounts if isinstance(amounts, dict) else {}),
        ocr_text=ocr_text,
        debug_info=clean_text(data.get("debugInfo")),
    )


def clean_text(value: Any) -> str | None:
    """A trimmed string, or None for non-strings, blanks and placeholder text."""
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text or is_placeholder(text):
        return None
    return text


def is_placeholder(text: str) -> bool:
    return bool(
        _PLACEHOLDER_RE.match(text)
        or _TEMPLATE_PHRASE_RE.search(text)
        or _MASK_ONLY_RE.match(text)
    )


def parse_amount(value: Any) -> Decimal | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return Decimal(str(value))
    text = clean_text(value)
    if text is None:
        return None
    cleaned = text.replace("$", "").replace(",", "").replace(" ", "")
    if cleaned.startswith("(") and cleaned.endswith(")"):
        cleaned = f"-{cleaned[1:-1]}"
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None


def parse_tax_year(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if isinstance(value, int) and value in _YEAR_RANGE:
        return value
    return None


def parse_confidence(value: Any) -> float:
    if isinstance(value, bool):
        return DEFAULT_CONFIDENCE
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return DEFAULT_CONFIDENCE
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return DEFAULT_CONFIDENCE
    return min(1.0, max(0.0, float(value)))


def parse_ssn(value: Any) -> str | None:
    text = clean_text(value)
    if text is None or not _SSN_RE.match(text):
        return None
    return text


def _build_employee_info(raw: dict[str, Any]) -> EmployeeInfo:
    return EmployeeInfo(
        name=clean_text(raw.get("name")),
        ssn=parse_ssn(raw.get("ssn")),
        address=clean_text(raw.get("address")),
    )


def _build_tax_amounts(raw: dict[str, Any]) -> TaxAmounts:
    return TaxAmounts(
        federal_withheld=parse_amount(raw.get("federalWithheld")),
        state_withheld=parse_amount(raw.get("stateWithheld")),
        total_income=parse_amount(raw.get("totalIncome")),
        social_security_wages=parse_amount(raw.get("socialSecurityWages")),
        medicare_wages=parse_amount(raw.get("medicareWages")),
    )


def _degraded(
    raw: str,
    category: DocumentCategory,
    ocr_text: str | None,
    confidence: float,
    reason: str,
) -> DegradedRecord:
    return DegradedRecord(
        document_type=category.label,
        raw_text=raw,
        reason=reason,
        confidence=min(DEFAULT_CONFIDENCE, max(0.0, confidence)),
        ocr_text=ocr_text,
    )
