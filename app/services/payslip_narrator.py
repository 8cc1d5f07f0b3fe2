"""
PayDesk - AI Payslip Narrator

Optionally asks OpenAI to phrase a payslip from its structured input. The
deterministic formatter stays the document of record: whenever narration is
disabled, unconfigured or fails, the formatter text is returned instead.
"""

import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional

import openai

from app.config import settings
from app.services.payroll_aggregator import PayslipInput
from app.services.payslip_formatter import format_payslip_text
from app.utils.error_handling import OpenAIAPIException

logger = logging.getLogger(__name__)


SOURCE_AI = "ai"
SOURCE_TEMPLATE = "template"

SYSTEM_PROMPT = (
    "You are an expert HR assistant responsible for generating branded "
    "payslips for employees. Respond with the payslip text only."
)


@dataclass
class PayslipNarrative:
    """Narrated payslip text and where it came from."""
    text: str
    source: str

    @property
    def is_ai(self) -> bool:
        return self.source == SOURCE_AI


def payslip_structured_input(payslip: PayslipInput) -> Dict[str, Any]:
    """JSON-safe view of a payslip, amounts as 2-decimal strings."""

    def money(value: Decimal) -> str:
        return f"{Decimal(value).quantize(Decimal('0.01')):f}"

    return {
        "companyName": payslip.company_name,
        "companyTagline": payslip.company_tagline,
        "companyContact": payslip.company_contact,
        "employeeName": payslip.employee_name,
        "employeeId": payslip.employee_id,
        "jobTitle": payslip.job_title,
        "payPeriod": payslip.pay_period,
        "grossPay": money(payslip.gross_pay),
        "allowances": {k: money(v) for k, v in payslip.allowances.items()},
        "deductions": {k: money(v) for k, v in payslip.deductions.items()},
        "taxes": money(payslip.taxes),
        "netPay": money(payslip.net_pay),
        "bankName": payslip.bank_name,
        "accountNumber": payslip.account_number,
        "recurringContributions": {
            k: money(v) for k, v in payslip.recurring_contributions.items()
        },
        "currency": payslip.currency,
        "currencySymbol": payslip.currency_symbol,
    }


class PayslipNarrator:
    """Phrase payslips through OpenAI with a deterministic fallback."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        enabled: Optional[bool] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.openai_api_key
        self.model = model or settings.openai_model
        self.enabled = enabled if enabled is not None else settings.ai_payslip_enabled
        self.timeout = timeout or settings.ai_timeout_seconds

    @property
    def available(self) -> bool:
        return self.enabled and bool(self.api_key)

    async def narrate(self, payslip: PayslipInput) -> PayslipNarrative:
        """Return AI text when possible, else the formatter text."""
        template_text = format_payslip_text(payslip)

        if not self.available:
            return PayslipNarrative(text=template_text, source=SOURCE_TEMPLATE)

        try:
            text = await self._narrate_with_openai(payslip, template_text)
        except OpenAIAPIException as e:
            logger.warning(
                f"AI narration failed for employee {payslip.employee_id}, "
                f"using template: {e.message}"
            )
            return PayslipNarrative(text=template_text, source=SOURCE_TEMPLATE)

        return PayslipNarrative(text=text, source=SOURCE_AI)

    def _build_prompt(self, payslip: PayslipInput, template_text: str) -> str:
        structured = payslip_structured_input(payslip)
        return f"""Generate a professional, personalized payslip for the employee with the following information.
The payslip should be easy to read and understand. All monetary values should be prefixed with the currency symbol '{payslip.currency_symbol}'.
Keep every amount exactly as given.

Payslip data:
{json.dumps(structured, indent=2)}

Follow this layout:
{template_text}
"""

    async def _narrate_with_openai(self, payslip: PayslipInput, template_text: str) -> str:
        """Call the chat completions API. Raises OpenAIAPIException on any failure."""
        try:
            client = openai.AsyncOpenAI(api_key=self.api_key, timeout=self.timeout)

            response = await client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": self._build_prompt(payslip, template_text)},
                ],
                temperature=0.3,
                max_tokens=1200,
            )
            result_text = response.choices[0].message.content
        except Exception as e:
            raise OpenAIAPIException(str(e), original_error=e) from e

        if not result_text or not result_text.strip():
            raise OpenAIAPIException("empty completion")

        # Strip markdown code fences
        if "```" in result_text:
            result_text = result_text.split("```")[1]
            # Drop the opening fence line and any language tag on it
            if "\n" in result_text:
                result_text = result_text.split("\n", 1)[1]

        return result_text.strip("\n")


def get_payslip_narrator() -> PayslipNarrator:
    return PayslipNarrator()
