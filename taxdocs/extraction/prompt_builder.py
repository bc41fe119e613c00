from functools import lru_cache
from pathlib import Path

from taxdocs.extraction.exceptions import ExtractionError
from taxdocs.extraction.models import DocumentCategory

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"

DOCUMENT_TYPE_LABELS: tuple[str, ...] = (
    "W-2",
    "1099-INT",
    "1099-NEC",
    "1099-MISC",
    "1099-DIV",
    "1098",
    "Tax Return",
    "Other Tax Document",
)

_CATEGORY_HINTS: dict[DocumentCategory, str] = {
    DocumentCategory.W2: (
        "This is expected to be a W-2: employerName is box c, federalWithheld is box 2, "
        "totalIncome is box 1, socialSecurityWages is box 3, medicareWages is box 5, "
        "stateWithheld is box 17."
    ),
    DocumentCategory.FORM_1099_INT: (
        "This is expected to be a 1099-INT: employerName is the payer, totalIncome is "
        "box 1 interest income, federalWithheld is box 4. Wage fields are null."
    ),
    DocumentCategory.FORM_1099_NEC: (
        "This is expected to be a 1099-NEC: employerName is the payer, totalIncome is "
        "box 1 nonemployee compensation, federalWithheld is box 4. Wage fields are null."
    ),
    DocumentCategory.FORM_1099_MISC: (
        "This is expected to be a 1099-MISC: employerName is the payer, totalIncome is "
        "the sum of the income boxes that are filled in, federalWithheld is box 4."
    ),
    DocumentCategory.FORM_1099_DIV: (
        "This is expected to be a 1099-DIV: employerName is the payer, totalIncome is "
        "box 1a total ordinary dividends, federalWithheld is box 4."
    ),
    DocumentCategory.FORM_1098: (
        "This is expected to be a 1098: employerName is the lender, employeeInfo is the "
        "borrower, totalIncome is box 1 mortgage interest received."
    ),
    DocumentCategory.OTHER_TAX_DOCUMENT: (
        "The document type is not known in advance; identify it from its title."
    ),
}


@lru_cache(maxsize=None)
def load_prompt_template(path: Path | None = None) -> str:
    """Load the extraction prompt template from a file.

    Args:
        path: Path to the prompt template file.
              Defaults to the bundled extraction_prompt.txt.

    Returns:
        The raw template string with placeholders.

    Raises:
        ExtractionError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "extraction_prompt.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ExtractionError(f"Failed to load prompt template: {exc}") from exc


@lru_cache(maxsize=None)
def load_output_shape(path: Path | None = None) -> str:
    """Load the JSON output shape embedded in every prompt.

    Raises:
        ExtractionError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "extraction_shape.json"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ExtractionError(f"Failed to load output shape: {exc}") from exc


def build_instructions(
    category: DocumentCategory,
    *,
    template: str | None = None,
    output_shape: str | None = None,
) -> str:
    """Render the system instructions for one document category."""
    if template is None:
        template = load_prompt_template()
    if output_shape is None:
        output_shape = load_output_shape()
    return template.format(
        document_label=category.label,
        document_type_labels=", ".join(f'"{label}"' for label in DOCUMENT_TYPE_LABELS),
        category_hint=_CATEGORY_HINTS[category],
        output_shape=output_shape.strip(),
    )
