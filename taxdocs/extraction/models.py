from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class DocumentCategory(str, Enum):
    """Declared category of an uploaded tax document."""

    W2 = "W2"
    FORM_1099_INT = "FORM_1099_INT"
    FORM_1099_NEC = "FORM_1099_NEC"
    FORM_1099_MISC = "FORM_1099_MISC"
    FORM_1099_DIV = "FORM_1099_DIV"
    FORM_1098 = "FORM_1098"
    OTHER_TAX_DOCUMENT = "OTHER_TAX_DOCUMENT"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]

    @classmethod
    def from_label(cls, value: str | None) -> "DocumentCategory":
        """Parse a stored category, accepting enum names and form labels.

        Unknown or empty values map to OTHER_TAX_DOCUMENT.
        """
        if not value:
            return cls.OTHER_TAX_DOCUMENT
        key = "".join(ch for ch in value.upper() if ch.isalnum())
        return _CATEGORY_ALIASES.get(key, cls.OTHER_TAX_DOCUMENT)


_CATEGORY_LABELS: dict[DocumentCategory, str] = {
    DocumentCategory.W2: "W-2",
    DocumentCategory.FORM_1099_INT: "1099-INT",
    DocumentCategory.FORM_1099_NEC: "1099-NEC",
    DocumentCategory.FORM_1099_MISC: "1099-MISC",
    DocumentCategory.FORM_1099_DIV: "1099-DIV",
    DocumentCategory.FORM_1098: "1098",
    DocumentCategory.OTHER_TAX_DOCUMENT: "Other Tax Document",
}

_CATEGORY_ALIASES: dict[str, DocumentCategory] = {
    "W2": DocumentCategory.W2,
    "FORMW2": DocumentCategory.W2,
    "1099INT": DocumentCategory.FORM_1099_INT,
    "FORM1099INT": DocumentCategory.FORM_1099_INT,
    "1099NEC": DocumentCategory.FORM_1099_NEC,
    "FORM1099NEC": DocumentCategory.FORM_1099_NEC,
    "1099MISC": DocumentCategory.FORM_1099_MISC,
    "FORM1099MISC": DocumentCategory.FORM_1099_MISC,
    "1099DIV": DocumentCategory.FORM_1099_DIV,
    "FORM1099DIV": DocumentCategory.FORM_1099_DIV,
    "1098": DocumentCategory.FORM_1098,
    "FORM1098": DocumentCategory.FORM_1098,
}


class FileKind(str, Enum):
    PDF = "pdf"
    IMAGE = "image"


class ImageEncoding(str, Enum):
    PNG = "png"
    JPEG = "jpeg"

    @property
    def mime_type(self) -> str:
        return f"image/{self.value}"


@dataclass(frozen=True)
class Classification:
    """Handling strategy for a document: PDF, or image with its encoding."""

    kind: FileKind
    encoding: ImageEncoding | None = None

    @property
    def is_pdf(self) -> bool:
        return self.kind is FileKind.PDF

    @property
    def mime_type(self) -> str:
        if self.encoding is not None:
            return self.encoding.mime_type
        return "application/pdf"


@dataclass(frozen=True)
class ExtractionRequest:
    """Everything a backend needs for one extraction call."""

    content: bytes
    classification: Classification
    category: DocumentCategory
    file_name: str | None = None
    transcript: str | None = None


@dataclass(frozen=True)
class EmployeeInfo:
    name: str | None = None
    ssn: str | None = None
    address: str | None = None


@dataclass(frozen=True)
class TaxAmounts:
    """Dollar amounts read off the form. Absent values are None, never 0."""

    federal_withheld: Decimal | None = None
    state_withheld: Decimal | None = None
    total_income: Decimal | None = None
    social_security_wages: Decimal | None = None
    medicare_wages: Decimal | None = None


@dataclass(frozen=True)
class WellFormedRecord:
    """Structured extraction result."""

    document_type: str
    confidence: float
    tax_year: int | None = None
    employer_name: str | None = None
    employee_info: EmployeeInfo = field(default_factory=EmployeeInfo)
    tax_amounts: TaxAmounts = field(default_factory=TaxAmounts)
    ocr_text: str | None = None
    debug_info: str | None = None

    def to_payload(self) -> dict[str, object]:
        """JSON-ready representation stored as extracted_data."""
        payload: dict[str, object] = {
            "documentType": self.document_type,
            "taxYear": self.tax_year,
            "employerName": self.employer_name,
            "employeeInfo": {
                "name": self.employee_info.name,
                "ssn": self.employee_info.ssn,
                "address": self.employee_info.address,
            },
            "taxAmounts": {
                "federalWithheld": _number(self.tax_amounts.federal_withheld),
                "stateWithheld": _number(self.tax_amounts.state_withheld),
                "totalIncome": _number(self.tax_amounts.total_income),
                "socialSecurityWages": _number(self.tax_amounts.social_security_wages),
                "medicareWages": _number(self.tax_amounts.medicare_wages),
            },
            "confidence": self.confidence,
        }
        if self.debug_info is not None:
            payload["debugInfo"] = self.debug_info
        return payload


@dataclass(frozen=True)
class DegradedRecord:
    """Raw backend output kept for human review when structural parsing failed."""

    document_type: str
    raw_text: str
    reason: str
    confidence: float = 0.3
    ocr_text: str | None = None

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "documentType": self.document_type,
            "content": self.raw_text,
            "confidence": self.confidence,
            "debugInfo": self.reason,
        }
        if self.ocr_text:
            payload["rawText"] = self.ocr_text[:1000]
        return payload


ExtractedTaxRecord = WellFormedRecord | DegradedRecord


def _number(value: Decimal | None) -> float | None:
    return float(value) if value is not None else None
