import io

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


def _canvas(buf: io.BytesIO) -> canvas.Canvas:
    # Uncompressed content streams keep BT/ET text objects readable.
    return canvas.Canvas(buf, pagesize=letter, pageCompression=0)


@pytest.fixture()
def w2_pdf_bytes() -> bytes:
    """Generate a single-page W-2 style PDF with known text content."""
    buf = io.BytesIO()
    c = _canvas(buf)
    c.drawString(72, 720, "Form W-2 Wage and Tax Statement 2023")
    c.drawString(72, 700, "Employer: Acme Inc")
    c.drawString(72, 680, "Employee: Jane Doe SSN 123-45-6789")
    c.drawString(72, 660, "Wages $40,000.00 Federal withheld $500.00")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = _canvas(buf)
    c.drawString(72, 720, "Page one content for the employer copy of the form")
    c.showPage()
    c.drawString(72, 720, "Page two content for the employee copy of the form")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = _canvas(buf)
    c.showPage()
    c.save()
    return buf.getvalue()
