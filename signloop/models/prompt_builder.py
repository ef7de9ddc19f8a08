"""
Prompt construction for the contract analysis model.
"""

from typing import Any, Mapping, Optional

from signloop.utils.helpers import truncate_text

MAX_EXCERPT_CHARS = 15000
TRUNCATION_MARKER = "\n... (truncated)"

OUTPUT_SCHEMA = """{
    "risk_badge": "LOW" | "MEDIUM" | "HIGH",
    "key_points": ["string"],
    "summary": {
        "what_it_is": "string",
        "payments": { "amount": "string|null", "frequency": "string|null", "fees": ["string"] },
        "term": { "start": "string|null", "end": "string|null", "minimum_term": "string|null" },
        "renewal": { "auto_renew": boolean, "renewal_period": "string|null" },
        "cancellation": { "how": "string", "notice_period_days": number, "penalties": ["string"] }
    },
    "red_flags": [{ "type": "string", "severity": number (1-10), "explanation": "string", "where": "string|null", "confidence": number (0-100) }],
    "normal_in_region": [{ "topic": "string", "typical_range": "string", "yours": "string|null", "label": "typical" | "unusual" }],
    "next_actions": {
        "questions_to_ask": ["string"],
        "email_templates": [{ "subject": "string", "body": "string" }]
    },
    "key_dates": [{ "type": "RENEWAL" | "NOTICE_CUTOFF" | "PRICE_REVIEW" | "OTHER", "date": "string (ISO)", "derived_from": "string|null" }],
    "obligations": ["string"],
    "parties": ["string"],
    "disclaimer": "This is an AI analysis, not legal advice."
}"""

PROMPT_TEMPLATE = """You are an expert legal contract analyst. Analyze the following contract text and provide a risk assessment and summary.

Contract Metadata:
Type: {contract_type}
Region: {region}

Output must be strict JSON matching this structure:
{schema}

Analysis should be detailed but concise. Identify high risk clauses specifically for the region/type.

Contract Text:
{text}
"""


def build_analysis_prompt(text: str, metadata: Optional[Mapping[str, Any]] = None,
                          max_chars: int = MAX_EXCERPT_CHARS) -> str:
    """
    Render the analysis instruction around a length-capped contract excerpt.

    Args:
        text: Extracted contract text
        metadata: Optional mapping with ``contractType`` and ``region``
        max_chars: Maximum number of contract characters sent to the model

    Returns:
        The rendered prompt
    """
    metadata = metadata or {}
    excerpt, _ = truncate_text(text, max_chars, marker=TRUNCATION_MARKER)

    return PROMPT_TEMPLATE.format(
        contract_type=metadata.get("contractType") or "Unknown",
        region=metadata.get("region") or "Unknown",
        schema=OUTPUT_SCHEMA,
        text=excerpt,
    )
