import json
from decimal import Decimal

import pytest

from taxdocs.extraction.models import DegradedRecord, DocumentCategory, WellFormedRecord
from taxdocs.extraction.response_normalizer import (
    build_record,
    clean_text,
    is_placeholder,
    normalize_response,
    parse_amount,
    parse_confidence,
    parse_ssn,
    parse_tax_year,
    strip_code_fence,
)

_W2_JSON = {
    "documentType": "W-2",
    "taxYear": 2023,
    "employerName": "Acme Inc",
    "employeeInfo": {"name": "Jane Doe", "ssn": "123-45-6789", "address": "1 Main St"},
    "taxAmounts": {
        "federalWithheld": 500,
        "stateWithheld": 120.5,
        "totalIncome": 40000,
        "socialSecurityWages": 40000,
        "medicareWages": 40000,
    },
    "confidence": 0.92,
}


class TestStripCodeFence:
    @pytest.mark.parametrize(
        "raw",
        [
            '{"a": 1}',
            '```json\n{"a": 1}\n```',
            '```\n{"a": 1}\n```',
            '```JSON {"a": 1}```',
            '  \n```json\n{"a": 1}\n```  \n',
        ],
    )
    def test_removes_outer_fence(self, raw: str) -> None:
        assert strip_code_fence(raw) == '{"a": 1}'

    def test_leaves_inner_backticks(self) -> None:
        raw = '```json\n{"debugInfo": "box `c`"}\n```'
        assert strip_code_fence(raw) == '{"debugInfo": "box `c`"}'


class TestNormalizeResponse:
    def test_well_formed_w2(self) -> None:
        record = normalize_response(json.dumps(_W2_JSON), DocumentCategory.W2)
        assert isinstance(record, WellFormedRecord)
        assert record.document_type == "W-2"
        assert record.tax_year == 2023
        assert record.employer_name == "Acme Inc"
        assert record.employee_info.name == "Jane Doe"
        assert record.employee_info.ssn == "123-45-6789"
        assert record.tax_amounts.federal_withheld == Decimal("500")
        assert record.tax_amounts.state_withheld == Decimal("120.5")
        assert record.confidence == pytest.approx(0.92)

    def test_fenced_json_is_parsed(self) -> None:
        raw = f"```json\n{json.dumps(_W2_JSON)}\n```"
        record = normalize_response(raw, DocumentCategory.W2)
        assert isinstance(record, WellFormedRecord)
        assert record.employer_name == "Acme Inc"

    def test_ocr_text_is_attached(self) -> None:
        record = normalize_response(json.dumps(_W2_JSON), DocumentCategory.W2, ocr_text="W-2 text")
        assert record.ocr_text == "W-2 text"

    def test_invalid_json_is_degraded(self) -> None:
        raw = "Sorry, I cannot read this document."
        record = normalize_response(raw, DocumentCategory.FORM_1099_INT)
        assert isinstance(record, DegradedRecord)
        assert record.document_type == "1099-INT"
        assert record.raw_text == raw
        assert record.confidence == 0.3
        assert record.reason.startswith("Response could not be parsed as JSON")

    def test_non_object_json_is_degraded(self) -> None:
        record = normalize_response("[1, 2, 3]", DocumentCategory.W2)
        assert isinstance(record, DegradedRecord)
        assert record.reason == "JSON response must be an object"

    def test_degraded_confidence_never_exceeds_default(self) -> None:
        record = normalize_response("nope", DocumentCategory.W2, degraded_confidence=0.9)
        assert record.confidence == 0.3

    def test_degraded_confidence_can_be_lower(self) -> None:
        record = normalize_response("nope", DocumentCategory.W2, degraded_confidence=0.1)
        assert record.confidence == 0.1

    def test_degraded_keeps_ocr_text(self) -> None:
        record = normalize_response("nope", DocumentCategory.W2, ocr_text="transcript")
        assert isinstance(record, DegradedRecord)
        assert record.ocr_text == "transcript"

    def test_deeply_nested_json_does_not_raise(self) -> None:
        raw = "[" * 100000 + "]" * 100000
        record = normalize_response(raw, DocumentCategory.W2)
        assert isinstance(record, DegradedRecord)


class TestBuildRecord:
    def test_empty_object_uses_defaults(self) -> None:
        record = build_record({}, DocumentCategory.FORM_1098)
        assert record.document_type == "1098"
        assert record.confidence == 0.3
        assert record.tax_year is None
        assert record.employer_name is None
        assert record.employee_info.name is None
        assert record.tax_amounts.total_income is None

    def test_wrong_section_types_are_ignored(self) -> None:
        record = build_record(
            {"employeeInfo": "Jane", "taxAmounts": [1, 2]}, DocumentCategory.W2
        )
        assert record.employee_info.name is None
        assert record.tax_amounts.federal_withheld is None

    def test_echoed_output_shape_becomes_nulls(self) -> None:
        shape = {
            "documentType": "one of the allowed document type labels",
            "taxYear": "number or null",
            "employerName": "employer or payer name as printed, or null",
            "employeeInfo": {
                "name": "employee or recipient name as printed, or null",
                "ssn": "SSN as printed, or null",
                "address": "address as printed, or null",
            },
            "taxAmounts": {"federalWithheld": "number or null"},
            "confidence": "number between 0 and 1",
        }
        record = build_record(shape, DocumentCategory.W2)
        assert record.tax_year is None
        assert record.employer_name is None
        assert record.employee_info.name is None
        assert record.employee_info.ssn is None
        assert record.employee_info.address is None
        assert record.tax_amounts.federal_withheld is None
        assert record.confidence == 0.3

    def test_real_values_are_kept(self) -> None:
        record = build_record(
            {"employeeInfo": {"name": "John Smith", "ssn": "XXX-XX-1234"}},
            DocumentCategory.W2,
        )
        assert record.employee_info.name == "John Smith"
        assert record.employee_info.ssn == "XXX-XX-1234"

    def test_names_resembling_placeholder_words_are_kept(self) -> None:
        record = build_record(
            {"employerName": "Placeholder Inc", "employeeInfo": {"name": "Na"}},
            DocumentCategory.W2,
        )
        assert record.employer_name == "Placeholder Inc"
        assert record.employee_info.name == "Na"

    def test_debug_info_is_carried(self) -> None:
        record = build_record({"debugInfo": "box 1"}, DocumentCategory.W2)
        assert record.debug_info == "box 1"


class TestLeafParsers:
    @pytest.mark.parametrize(
        "text",
        [
            "string",
            "N/A",
            "unknown",
            "null",
            "XXX-XX-XXXX",
            "<name>",
            "[employer]",
            "---",
            "number or null",
            "employer or payer name as printed, or null",
            "number between 0 and 1",
        ],
    )
    def test_placeholders(self, text: str) -> None:
        assert is_placeholder(text)

    @pytest.mark.parametrize(
        "text",
        [
            "Acme Inc",
            "Jane Doe",
            "123 Main St, Springfield",
            "Na",
            "Placeholder Inc",
            "Copied From Text LLC",
            "As Printed Press",
        ],
    )
    def test_not_placeholders(self, text: str) -> None:
        assert not is_placeholder(text)

    def test_clean_text_strips_and_rejects_non_strings(self) -> None:
        assert clean_text("  Acme Inc ") == "Acme Inc"
        assert clean_text("   ") is None
        assert clean_text(42) is None
        assert clean_text(None) is None

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (40000, Decimal("40000")),
            (120.5, Decimal("120.5")),
            ("$40,000.00", Decimal("40000.00")),
            ("(1,234.50)", Decimal("-1234.50")),
            ("0", Decimal("0")),
        ],
    )
    def test_parse_amount(self, value: object, expected: Decimal) -> None:
        assert parse_amount(value) == expected

    @pytest.mark.parametrize("value", [None, True, "abc", "N/A", float("nan"), float("inf"), {}])
    def test_parse_amount_rejects(self, value: object) -> None:
        assert parse_amount(value) is None

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(2023, 2023), ("2023", 2023), (2023.0, 2023), (1800, None), ("twenty", None), (True, None)],
    )
    def test_parse_tax_year(self, value: object, expected: int | None) -> None:
        assert parse_tax_year(value) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0.9, 0.9), ("0.8", 0.8), (1.5, 1.0), (-1, 0.0), (None, 0.3), ("high", 0.3), (False, 0.3)],
    )
    def test_parse_confidence(self, value: object, expected: float) -> None:
        assert parse_confidence(value) == pytest.approx(expected)

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("123-45-6789", "123-45-6789"),
            ("123456789", "123456789"),
            ("***-**-6789", "***-**-6789"),
            ("12-3456789", None),
            ("SSN as printed, or null", None),
        ],
    )
    def test_parse_ssn(self, value: str, expected: str | None) -> None:
        assert parse_ssn(value) == expected
