"""Managed-service extraction backed by Google Cloud Document AI."""

import re
from statistics import fmean
from typing import Any, Protocol

from google.api_core import exceptions as gexc
from google.api_core.client_options import ClientOptions
from google.auth import exceptions as auth_exceptions
from google.cloud import documentai_v1 as documentai

from taxdocs.extraction.base import BaseExtractionBackend
from taxdocs.extraction.exceptions import (
    BackendUnavailableError,
    EmptyResponseError,
    ExtractionNetworkError,
)
from taxdocs.extraction.models import ExtractedTaxRecord, ExtractionRequest
from taxdocs.extraction.response_normalizer import build_record
from taxdocs.logging.logger import Log

# Normalized entity type -> (section, field) in the record JSON shape.
ENTITY_FIELDS: dict[str, tuple[str | None, str]] = {
    "employername": (None, "employerName"),
    "payername": (None, "employerName"),
    "lendername": (None, "employerName"),
    "taxyear": (None, "taxYear"),
    "formyear": (None, "taxYear"),
    "employeename": ("employeeInfo", "name"),
    "recipientname": ("employeeInfo", "name"),
    "borrowername": ("employeeInfo", "name"),
    "ssn": ("employeeInfo", "ssn"),
    "employeessn": ("employeeInfo", "ssn"),
    "recipienttin": ("employeeInfo", "ssn"),
    "employeeaddress": ("employeeInfo", "address"),
    "recipientaddress": ("employeeInfo", "address"),
    "federalincometaxwithheld": ("taxAmounts", "federalWithheld"),
    "stateincometax": ("taxAmounts", "stateWithheld"),
    "stateincometaxwithheld": ("taxAmounts", "stateWithheld"),
    "wagestipsothercompensation": ("taxAmounts", "totalIncome"),
    "interestincome": ("taxAmounts", "totalIncome"),
    "nonemployeecompensation": ("taxAmounts", "totalIncome"),
    "totalordinarydividends": ("taxAmounts", "totalIncome"),
    "mortgageinterestreceived": ("taxAmounts", "totalIncome"),
    "socialsecuritywages": ("taxAmounts", "socialSecurityWages"),
    "medicarewagesandtips": ("taxAmounts", "medicareWages"),
}

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


class _DocumentAIClient(Protocol):
    def processor_path(self, project: str, location: str, processor: str) -> str: ...

    def process_document(self, request: Any) -> Any: ...


class DocumentAIExtractionBackend(BaseExtractionBackend):
    """Sends document bytes to a Document AI processor and maps its entities."""

    def __init__(
        self,
        *,
        project_id: str,
        location: str,
        processor_id: str,
        credentials_path: str,
        client: _DocumentAIClient | None = None,
    ) -> None:
        self._project_id = project_id
        self._location = location
        self._processor_id = processor_id
        self._credentials_path = credentials_path
        self._client = client

    def extract(self, request: ExtractionRequest) -> ExtractedTaxRecord:
        client = self._get_client()
        name = client.processor_path(self._project_id, self._location, self._processor_id)
        process_request = documentai.ProcessRequest(
            name=name,
            raw_document=documentai.RawDocument(
                content=request.content,
                mime_type=request.classification.mime_type,
            ),
        )
        try:
            result = client.process_document(request=process_request)
        except (gexc.GoogleAPICallError, gexc.RetryError) as exc:
            raise ExtractionNetworkError(f"Document AI error: {exc}") from exc

        document = result.document
        data, confidences = entities_to_fields(document.entities)
        if not confidences:
            raise EmptyResponseError("Document AI returned no recognizable tax fields")

        data["documentType"] = request.category.label
        data["confidence"] = fmean(confidences)
        record = build_record(data, request.category, ocr_text=document.text or None)
        Log.info(
            f"Document AI extraction finished: {len(confidences)} fields "
            f"confidence={record.confidence:.2f}"
        )
        return record

    def _get_client(self) -> _DocumentAIClient:
        if self._client is None:
            options = ClientOptions(
                api_endpoint=f"{self._location}-documentai.googleapis.com"
            )
            try:
                self._client = documentai.DocumentProcessorServiceClient.from_service_account_file(
                    self._credentials_path, client_options=options
                )
            except (OSError, ValueError, auth_exceptions.GoogleAuthError) as exc:
                raise BackendUnavailableError(
                    f"Document AI credentials could not be loaded: {exc}"
                ) from exc
        return self._client


def entities_to_fields(entities: Any) -> tuple[dict[str, Any], list[float]]:
    """Map Document AI entities onto the record JSON shape.

    When a field is reported more than once the most confident entity wins.
    Returns the shaped data and the confidences of the mapped entities.
    """
    best: dict[tuple[str | None, str], tuple[float, str]] = {}
    for entity in entities:
        target = ENTITY_FIELDS.get(_NON_ALNUM_RE.sub("", entity.type_.lower()))
        if target is None:
            continue
        value = entity.normalized_value.text or entity.mention_text
        confidence = float(entity.confidence)
        if target not in best or confidence > best[target][0]:
            best[target] = (confidence, value)

    data: dict[str, Any] = {"employeeInfo": {}, "taxAmounts": {}}
    for (section, key), (_confidence, value) in best.items():
        if section is None:
            data[key] = value
        else:
            data[section][key] = value
    return data, [confidence for confidence, _value in best.values()]
