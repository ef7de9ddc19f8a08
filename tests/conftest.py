"""
Fixtures for contract analysis tests.
"""

import copy
import json
import fitz
import httpx
import pytest
from typing import Any, Callable, Dict, List

from signloop.config import Config
from signloop.contract_analyzer import ContractAnalyzer
from signloop.models.llm_client import OpenRouterClient
from signloop.preprocessor.document_parser import DocumentParser

# Sample contract text for testing
SAMPLE_CONTRACT = """
SERVICES AGREEMENT

This Services Agreement (the "Agreement") is made and entered into as of January 1, 2023 (the "Effective Date"),
by and between ABC Company, Inc., a Delaware corporation ("Company"), and XYZ Services LLC, a California limited
liability company ("Provider").

1. TERM AND TERMINATION

This Agreement shall automatically renew for successive one-year terms unless either party provides written
notice of non-renewal at least thirty (30) days prior to the end of the then-current term.

2. FEES AND PAYMENT

Company shall pay Provider $500 per month. Provider reserves the right to increase fees at any time upon
30 days' notice.
"""

VALID_ANALYSIS: Dict[str, Any] = {
    "risk_badge": "HIGH",
    "key_points": ["Auto-renews yearly", "Fees can rise on 30 days' notice"],
    "summary": {
        "what_it_is": "A services agreement between ABC Company and XYZ Services",
        "payments": {"amount": "$500", "frequency": "monthly", "fees": ["Late fee"]},
        "term": {"start": "2023-01-01", "end": None, "minimum_term": "1 year"},
        "renewal": {"auto_renew": True, "renewal_period": "1 year"},
        "cancellation": {"how": "Written notice", "notice_period_days": 30, "penalties": []},
    },
    "red_flags": [
        {
            "type": "Unilateral price increase",
            "severity": 7,
            "explanation": "Provider may raise fees at any time.",
            "where": "Section 2",
            "confidence": 85,
        }
    ],
    "normal_in_region": [
        {"topic": "Notice period", "typical_range": "30-60 days", "yours": "30 days", "label": "typical"}
    ],
    "next_actions": {
        "questions_to_ask": ["Can the price increase be capped?"],
        "email_templates": [{"subject": "Fee increase clause", "body": "Could we cap increases at 5%?"}],
    },
    "key_dates": [
        {"type": "RENEWAL", "date": "2024-01-01", "derived_from": "Section 1"}
    ],
    "obligations": ["Pay monthly fees"],
    "parties": ["ABC Company, Inc.", "XYZ Services LLC"],
    "disclaimer": "This is an AI analysis, not legal advice.",
}


def completion_body(content: Any) -> Dict[str, Any]:
    """Chat completion response body with a single choice."""
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def config():
    """Fixture for Config with a test API key."""
    test_config = Config()
    test_config.OPENROUTER_API_KEY = "test-key"
    test_config.OPENROUTER_BASE_URL = "https://openrouter.test/api/v1"
    test_config.OPENROUTER_MODEL = "xiaomi/mimo-v2-flash:free"
    test_config.APP_URL = "http://localhost:3000"
    test_config.LLM_TIMEOUT_SECONDS = None
    return test_config


@pytest.fixture
def sample_contract():
    """Fixture for sample contract text."""
    return SAMPLE_CONTRACT


@pytest.fixture
def valid_analysis():
    """Fixture for a fully well-formed analysis payload."""
    return copy.deepcopy(VALID_ANALYSIS)


@pytest.fixture
def document_parser(config):
    """Fixture for DocumentParser."""
    return DocumentParser(config)


@pytest.fixture
def make_pdf() -> Callable[[List[str]], bytes]:
    """Fixture building an in-memory PDF with one text block per page."""
    def _make_pdf(pages: List[str]) -> bytes:
        document = fitz.open()
        for page_text in pages:
            page = document.new_page()
            if page_text:
                page.insert_text((72, 72), page_text, fontsize=10)
        data = document.tobytes()
        document.close()
        return data
    return _make_pdf


@pytest.fixture
def provider_requests():
    """Requests captured by the mock provider transport."""
    return []


@pytest.fixture
def make_llm_client(config, provider_requests):
    """Fixture building an OpenRouterClient backed by a mock transport."""
    def _make_client(response: Any = None, status_code: int = 200, handler=None) -> OpenRouterClient:
        def _handler(request: httpx.Request) -> httpx.Response:
            provider_requests.append(request)
            if isinstance(response, (dict, list)):
                return httpx.Response(status_code, json=response)
            return httpx.Response(status_code, text=response or "")

        transport = httpx.MockTransport(handler or _handler)
        return OpenRouterClient.from_config(config, transport=transport)
    return _make_client


@pytest.fixture
def make_analyzer(config, make_llm_client):
    """Fixture building a ContractAnalyzer whose provider returns the given content."""
    def _make_analyzer(content: Any) -> ContractAnalyzer:
        if not isinstance(content, str):
            content = json.dumps(content)
        client = make_llm_client(completion_body(content))
        return ContractAnalyzer(config, llm_client=client)
    return _make_analyzer
