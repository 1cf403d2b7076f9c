"""
Contract Report Generation

Plain-text downloads for a single contract:
- the contract summary sheet
- research / analysis reports, produced either from a fixed template
  ("stub") or by the Claude Messages API ("anthropic")
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, Optional

import anthropic

from federaltalks.config import settings
from federaltalks.services.errors import ReportGenerationError

logger = logging.getLogger(__name__)

REPORT_KINDS = {
    "ai_research": "AI_Research_Report",
    "analysis": "analysis",
}

NOT_SPECIFIED = "Not specified"


# =============================================================================
# Formatting Helpers
# =============================================================================

def format_money(value: Optional[float]) -> Optional[str]:
    if value is None:
        return None
    return f"${value:,.0f}"


def format_budget(contract: Dict[str, Any]) -> Optional[str]:
    low, high = contract.get("budget_min"), contract.get("budget_max")
    if low is None or high is None:
        return None
    return f"{format_money(low)} - {format_money(high)}"


def _year(value: Any) -> Optional[int]:
    if isinstance(value, (date, datetime)):
        return value.year
    if isinstance(value, str) and len(value) >= 4 and value[:4].isdigit():
        return int(value[:4])
    return None


def _text(value: Any, default: str = NOT_SPECIFIED) -> str:
    if value is None or value == "":
        return default
    if isinstance(value, (date, datetime)):
        return value.isoformat()[:10]
    return str(value)


def report_filename(contract: Dict[str, Any], kind: str) -> str:
    if kind == "summary":
        return f"{contract['federal_id']}_summary.txt"
    return f"{contract['federal_id']}_{REPORT_KINDS[kind]}.txt"


def render_contract_summary(contract: Dict[str, Any]) -> str:
    """The one-page summary sheet offered next to every contract card."""
    lines = [
        "Contract Summary",
        "================",
        "",
        f"Contract Name: {contract.get('contract_name') or contract.get('title')}",
        f"Federal ID: {contract.get('federal_id')}",
        f"Agency: {contract.get('buying_organization') or contract.get('agency')}",
        f"State: {contract.get('state') or 'Federal'}",
        f"Budget: {format_budget(contract) or NOT_SPECIFIED}",
        f"Expiry Date: {_text(contract.get('current_expiration_date'))}",
        f"Procurement Officer: {_text(contract.get('contact_first_name'))}",
        f"Incumbent: {_text(contract.get('contractors'))}",
        "",
        f"Summary: {contract.get('description') or 'No summary available'}",
        "",
    ]
    return "\n".join(lines)


# =============================================================================
# Generators
# =============================================================================

class ReportGenerator:
    """Produces the text body of a research or analysis report."""

    name = "base"

    def generate(self, contract: Dict[str, Any], kind: str) -> str:
        raise NotImplementedError


class StubReportGenerator(ReportGenerator):
    """
    Template-filled reports built only from the contract's own fields.

    Output is a pure function of the contract; no scoring or market data
    is invented.
    """

    name = "stub"

    def generate(self, contract: Dict[str, Any], kind: str) -> str:
        if kind not in REPORT_KINDS:
            raise ReportGenerationError(f"Unknown report kind: {kind}")
        if kind == "analysis":
            return self._analysis(contract)
        return self._research(contract)

    def _header(self, title: str, contract: Dict[str, Any]) -> list:
        return [
            title,
            "=" * len(title),
            "[Template report generated from stored contract fields]",
            "",
            f"Contract: {contract.get('contract_name') or contract.get('title')}",
            f"Federal ID: {contract.get('federal_id')}",
            "",
        ]

    def _contacts(self, contract: Dict[str, Any]) -> list:
        return [
            "CONTACT INFORMATION",
            f"- Primary Contact: {_text(contract.get('contact_first_name'), 'Contracting Officer')}",
            f"- Phone: {_text(contract.get('contact_phone'), 'Available upon request')}",
            f"- Email: {_text(contract.get('contact_email'), 'Available in solicitation documents')}",
            f"- Agency: {contract.get('buying_organization') or contract.get('agency')}",
            "",
        ]

    def _research(self, contract: Dict[str, Any]) -> str:
        money = format_money(contract.get("award_value"))
        value = f"a {money}" if money else "an unpriced"
        start, end = _year(contract.get("start_date")), _year(contract.get("current_expiration_date"))
        duration = f"{start} - {end}" if start and end else NOT_SPECIFIED
        keywords = ", ".join(contract.get("keywords") or []) or "None listed"
        phase = "Active procurement" if contract.get("contract_status") == "open" else "Contract execution"

        lines = self._header("AI Research & Intelligence Report", contract)
        lines += [
            "EXECUTIVE SUMMARY",
            f"This {contract.get('contract_type') or 'federal'} contract is {value} opportunity with {contract.get('agency')}.",
            "",
            "PROJECT DETAILS",
            f"- Primary Requirement: {_text(contract.get('primary_requirement'))}",
            f"- Products/Services: {_text(contract.get('products_services'))}",
            f"- Performance Location: {contract.get('place_of_performance_location') or contract.get('state') or NOT_SPECIFIED}",
            f"- Contract Duration: {duration}",
            f"- Keywords: {keywords}",
            "",
            "COMPETITIVE LANDSCAPE",
            f"- Incumbent: {_text(contract.get('contractors'), 'No incumbent identified')}",
            f"- Set-aside: {_text(contract.get('set_aside_code'), 'Open competition')}",
            f"- NAICS: {_text(contract.get('naics_code'))}",
            "",
            "TIMELINE",
            f"- Award Date: {_text(contract.get('award_date'))}",
            f"- Current Phase: {phase}",
            f"- Response Deadline: {_text(contract.get('response_deadline'))}",
            f"- Historical Value: {format_budget(contract) or NOT_SPECIFIED}",
            "",
        ]
        lines += self._contacts(contract)
        return "\n".join(lines)

    def _analysis(self, contract: Dict[str, Any]) -> str:
        compliance = (
            "Federal regulations (FAR/DFARS)"
            if contract.get("contract_type") != "state"
            else "State procurement guidelines"
        )
        partnering = "Small business partnerships" if contract.get("set_aside_code") else "Prime contractor relationships"
        timeline = "Deadline set" if contract.get("response_deadline") else "No deadline published"

        lines = self._header("Contract Intelligence Analysis", contract)
        lines += [
            "OVERVIEW",
            f"- Value: {format_money(contract.get('award_value')) or NOT_SPECIFIED}",
            f"- Agency: {contract.get('agency')}",
            f"- Primary Focus: {_text(contract.get('primary_requirement'))}",
            f"- Compliance: {compliance}",
            f"- Partnering: {partnering}",
            f"- Timeline: {timeline}",
            "",
            "NEXT STEPS",
            "1. Review the solicitation and attend any pre-proposal conference",
            f"2. Submit a capability statement to {contract.get('contact_first_name') or 'the contracting officer'}",
            "3. Begin market research and competitive analysis",
            "4. Develop preliminary technical and cost proposals",
            "",
        ]
        lines += self._contacts(contract)
        return "\n".join(lines)


REPORT_SYSTEM_PROMPT = """You are a federal and state procurement analyst. Write a concise plain-text \
report about the contract described by the user. Use only the facts provided; when a fact is \
missing, say it is not specified instead of guessing. Do not use markdown."""

REPORT_INSTRUCTIONS = {
    "ai_research": (
        "Write a research report with sections: EXECUTIVE SUMMARY, PROJECT DETAILS, "
        "COMPETITIVE LANDSCAPE, TIMELINE, RECOMMENDATIONS."
    ),
    "analysis": "Write a short bid/no-bid analysis with sections: OVERVIEW, RISKS, NEXT STEPS.",
}

_PROMPT_FIELDS = (
    "federal_id",
    "title",
    "contract_name",
    "agency",
    "buying_organization",
    "contract_type",
    "state",
    "description",
    "products_services",
    "primary_requirement",
    "contractors",
    "naics_code",
    "set_aside_code",
    "budget_min",
    "budget_max",
    "award_value",
    "award_date",
    "start_date",
    "current_expiration_date",
    "response_deadline",
    "contract_status",
)


class AnthropicReportGenerator(ReportGenerator):
    """Reports written by Claude from the contract's fields."""

    name = "anthropic"

    def __init__(self, api_key: str, model: str, client: Optional[Any] = None):
        self.model = model
        self.client = client or (anthropic.Anthropic(api_key=api_key) if api_key else None)

    def build_prompt(self, contract: Dict[str, Any], kind: str) -> str:
        facts = "\n".join(
            f"{name}: {_text(contract.get(name))}" for name in _PROMPT_FIELDS
        )
        return f"{REPORT_INSTRUCTIONS[kind]}\n\n<contract>\n{facts}\n</contract>"

    def generate(self, contract: Dict[str, Any], kind: str) -> str:
        if kind not in REPORT_KINDS:
            raise ReportGenerationError(f"Unknown report kind: {kind}")
        if self.client is None:
            raise ReportGenerationError("Anthropic API key not configured")

        try:
            logger.info(f"Calling Claude API for {kind} report on {contract.get('federal_id')}")
            message = self.client.messages.create(
                model=self.model,
                max_tokens=2048,
                system=REPORT_SYSTEM_PROMPT,
                messages=[{"role": "user", "content": self.build_prompt(contract, kind)}],
            )
        except anthropic.APIError as e:
            logger.error(f"Anthropic API error: {e}")
            raise ReportGenerationError(f"Report generation failed: {e}") from e

        text = "".join(getattr(block, "text", "") for block in (message.content or []))
        if not text.strip():
            raise ReportGenerationError("No text response from Claude")
        return text


def get_report_generator() -> ReportGenerator:
    """Generator selected by settings.report_generator."""
    if settings.report_generator == "anthropic":
        return AnthropicReportGenerator(settings.anthropic_api_key, settings.anthropic_model)
    return StubReportGenerator()
