import io

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """An uncompressed single-page PDF comfortably above the 1 KiB minimum."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter, pageCompression=0)
    for line in range(40):
        c.drawString(72, 740 - line * 16, f"Joist hanger load table row {line}")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter, pageCompression=0)
    for page in range(3):
        for line in range(20):
            c.drawString(72, 740 - line * 16, f"Page {page} installation step {line}")
        c.showPage()
    c.save()
    return buf.getvalue()
