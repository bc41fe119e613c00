from taxdocs.extraction.models import Classification, FileKind, ImageEncoding

_PDF_MIME_TYPE = "application/pdf"


def classify(
    file_name: str | None,
    file_path: str | None,
    mime_type: str | None,
) -> Classification:
    """Decide PDF vs image handling for a stored document.

    Precedence: file name extension, then a ``.pdf`` anywhere in the storage
    path, then the declared MIME type. Anything else is treated as an image;
    the encoding is PNG only for ``.png`` file names and JPEG otherwise.
    """
    name = (file_name or "").lower()
    path = (file_path or "").lower()
    mime = (mime_type or "").split(";")[0].strip().lower()

    if name.endswith(".pdf") or ".pdf" in path or mime == _PDF_MIME_TYPE:
        return Classification(kind=FileKind.PDF)

    encoding = ImageEncoding.PNG if name.endswith(".png") else ImageEncoding.JPEG
    return Classification(kind=FileKind.IMAGE, encoding=encoding)
