import io

from reportlab.pdfgen import canvas

from .layout import MARGIN, PAGE_HEIGHT, PAGE_WIDTH, DocumentLayout

PDF_MEDIA_TYPE = "application/pdf"


def render_pdf(layout: DocumentLayout) -> bytes:
    """Draw a layout onto A4 pages in a single pass and return the PDF bytes."""
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=(PAGE_WIDTH, PAGE_HEIGHT))
    pdf.setTitle(layout.title)

    for page in range(layout.page_count):
        for element in layout.on_page(page):
            pdf.setFont(element.font, element.size)
            # layout y is the top of the line, measured from the top of the page
            baseline = PAGE_HEIGHT - element.y - element.size
            if element.align == "center":
                pdf.drawCentredString(PAGE_WIDTH / 2, baseline, element.text)
            elif element.align == "right":
                pdf.drawRightString(PAGE_WIDTH - MARGIN, baseline, element.text)
            else:
                pdf.drawString(element.x, baseline, element.text)
        pdf.showPage()

    pdf.save()
    return buffer.getvalue()
