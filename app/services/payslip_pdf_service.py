"""
PayDesk - Payslip PDF Service

Exports the payslip text artifact to PDF. The text is drawn verbatim in a
fixed-width font, word-wrapped to the configured page width, so the PDF
always matches the on-screen preview.

Uses ReportLab.
"""

import io
import logging
from typing import List, Optional

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from app.config import settings
from app.services.payroll_aggregator import PayslipInput

logger = logging.getLogger(__name__)


FONT_NAME = "Courier"
MARGIN = 10 * mm
LINE_HEIGHT_FACTOR = 1.15


def payslip_filename(payslip: PayslipInput) -> str:
    """``Payslip_EMP001_October_2026.pdf``"""
    period = payslip.pay_period.replace(" ", "_")
    return f"Payslip_{payslip.employee_id}_{period}.pdf"


class PayslipPDFService:
    """Render payslip text into a PDF document."""

    def __init__(
        self,
        font_size: Optional[int] = None,
        width_mm: Optional[int] = None,
    ):
        self.font_size = font_size or settings.payslip_pdf_font_size
        self.max_width = (width_mm or settings.payslip_pdf_width_mm) * mm
        self.leading = self.font_size * LINE_HEIGHT_FACTOR

    def wrap_lines(self, text: str) -> List[str]:
        """Split the text into printable lines, keeping blank lines."""
        lines: List[str] = []
        for raw_line in text.split("\n"):
            wrapped = simpleSplit(raw_line, FONT_NAME, self.font_size, self.max_width)
            lines.extend(wrapped or [""])
        return lines

    def generate_pdf(self, text: str, title: str = "Payslip") -> bytes:
        """
        Generate the PDF bytes for a payslip text.

        Starts a new A4 page whenever the bottom margin is reached.
        """
        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=A4)
        pdf.setTitle(title)

        _, page_height = A4
        top = page_height - MARGIN - self.font_size
        y = top

        pdf.setFont(FONT_NAME, self.font_size)
        for line in self.wrap_lines(text):
            if y < MARGIN:
                pdf.showPage()
                pdf.setFont(FONT_NAME, self.font_size)
                y = top
            pdf.drawString(MARGIN, y, line)
            y -= self.leading

        pdf.showPage()
        pdf.save()

        pdf_bytes = buffer.getvalue()
        buffer.close()

        logger.debug(f"Rendered payslip PDF '{title}' ({len(pdf_bytes)} bytes)")
        return pdf_bytes


def get_payslip_pdf_service() -> PayslipPDFService:
    return PayslipPDFService()
