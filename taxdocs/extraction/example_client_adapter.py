"""Example completion client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseCompletionClient and register the provider in
ExtractionBackendFactory.
"""

import json
from typing import ClassVar

from taxdocs.extraction.client_base import BaseCompletionClient, MessageContent


class ExampleClientAdapter(BaseCompletionClient):
    """Example adapter that returns a fixed, all-null extraction JSON.

    No network calls. Useful for local development and tests where no
    provider key is available.
    """

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "documentType": "Other Tax Document",
        "taxYear": None,
        "employerName": None,
        "employeeInfo": {"name": None, "ssn": None, "address": None},
        "taxAmounts": {
            "federalWithheld": None,
            "stateWithheld": None,
            "totalIncome": None,
            "socialSecurityWages": None,
            "medicareWages": None,
        },
        "confidence": 0.0,
    }

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        system_prompt: str,
        user_content: MessageContent,
    ) -> str:
        _ = model, temperature, max_tokens, system_prompt, user_content
        return json.dumps(self.DEFAULT_RESPONSE)
