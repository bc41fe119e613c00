from pathlib import Path

import pytest

from taxdocs.extraction.exceptions import ExtractionError
from taxdocs.extraction.models import DocumentCategory
from taxdocs.extraction.prompt_builder import (
    DOCUMENT_TYPE_LABELS,
    build_instructions,
    load_output_shape,
    load_prompt_template,
)


class TestLoadPromptTemplate:
    def test_loads_default_template(self) -> None:
        template = load_prompt_template()
        assert "{document_label}" in template
        assert "{output_shape}" in template

    def test_loads_custom_path(self, tmp_path: Path) -> None:
        path = tmp_path / "prompt.txt"
        path.write_text("Extract {document_label}", encoding="utf-8")
        assert load_prompt_template(path) == "Extract {document_label}"

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ExtractionError, match="Failed to load prompt template"):
            load_prompt_template(tmp_path / "missing.txt")


class TestLoadOutputShape:
    def test_default_shape_lists_every_field(self) -> None:
        shape = load_output_shape()
        for key in ("documentType", "taxYear", "employerName", "employeeInfo", "taxAmounts"):
            assert key in shape

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ExtractionError, match="Failed to load output shape"):
            load_output_shape(tmp_path / "missing.json")


class TestBuildInstructions:
    def test_names_the_declared_category(self) -> None:
        instructions = build_instructions(DocumentCategory.FORM_1099_NEC)
        assert "1099-NEC" in instructions
        assert "nonemployee compensation" in instructions

    def test_lists_every_document_type_label(self) -> None:
        instructions = build_instructions(DocumentCategory.W2)
        for label in DOCUMENT_TYPE_LABELS:
            assert f'"{label}"' in instructions

    def test_requires_null_instead_of_placeholders(self) -> None:
        instructions = build_instructions(DocumentCategory.W2)
        assert "return null when unknown" in instructions

    def test_embeds_output_shape(self) -> None:
        instructions = build_instructions(DocumentCategory.W2)
        assert '"socialSecurityWages"' in instructions
        assert "{output_shape}" not in instructions

    def test_custom_template_and_shape(self) -> None:
        result = build_instructions(
            DocumentCategory.FORM_1098,
            template="{document_label}|{category_hint}|{output_shape}|{document_type_labels}",
            output_shape="  {}  ",
        )
        label, hint, shape, labels = result.split("|")
        assert label == "1098"
        assert "lender" in hint
        assert shape == "{}"
        assert '"W-2"' in labels

    @pytest.mark.parametrize("category", list(DocumentCategory))
    def test_every_category_renders(self, category: DocumentCategory) -> None:
        assert category.label in build_instructions(category)
