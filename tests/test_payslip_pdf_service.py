"""
PayDesk - Payslip PDF Service Tests
"""

from decimal import Decimal

from app.config import settings
from app.services.payroll_aggregator import PayslipInput
from app.services.payslip_pdf_service import PayslipPDFService, payslip_filename


def make_payslip() -> PayslipInput:
    return PayslipInput(
        company_name="Acme Corp",
        company_tagline="",
        company_contact="",
        employee_name="Jane Doe",
        employee_id="EMP001",
        job_title="Accountant",
        pay_period="October 2026",
        gross_pay=Decimal("1000"),
        allowances={},
        deductions={},
        taxes=Decimal("200"),
        net_pay=Decimal("800"),
        bank_name="Bank of Kigali",
        account_number="000123456789",
        recurring_contributions={},
        currency="USD",
        currency_symbol="$",
    )


class TestPayslipPDF:
    """Test PDF export."""

    def test_filename(self):
        assert payslip_filename(make_payslip()) == "Payslip_EMP001_October_2026.pdf"

    def test_generates_pdf_bytes(self):
        pdf = PayslipPDFService().generate_pdf("Net Pay: $800.00", title="Payslip EMP001")

        assert pdf.startswith(b"%PDF")
        assert len(pdf) > 500

    def test_blank_lines_are_kept(self):
        lines = PayslipPDFService().wrap_lines("a\n\nb")
        assert lines == ["a", "", "b"]

    def test_long_lines_wrap(self):
        service = PayslipPDFService(font_size=10, width_mm=50)
        lines = service.wrap_lines("word " * 40)

        assert len(lines) > 1

    def test_long_document_spans_pages(self):
        text = "\n".join(f"- Line {i}: $1.00" for i in range(200))
        pdf = PayslipPDFService().generate_pdf(text)

        # at least two page objects plus the page tree
        assert pdf.count(b"/Type /Page") >= 3

    def test_layout_defaults_come_from_settings(self):
        service = PayslipPDFService()

        assert service.font_size == settings.payslip_pdf_font_size
