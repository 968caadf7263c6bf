"""Shared fixtures: fake reasoning client, settings and sample replies."""
import json

import pytest

from contractshield.config import Settings
from contractshield.errors import ReasoningServiceFailed
from contractshield.services.analysis_store import AnalysisStore
from contractshield.services.orchestrator import ContractAnalyzer


EMPLOYMENT_CONTRACT = """EMPLOYMENT AGREEMENT

This agreement is entered into between Acme Holdings (Pty) Ltd ("the Employer")
and Jane Doe ("the Employee").

1. Remuneration. The Employee will be paid R25 000 per month, within 7 days of month-end.
2. Termination. The Employer may terminate this agreement at any time without notice.
3. Restraint of trade. The Employee may not work for a competitor for 6 months after leaving.
4. Governing law. This agreement is governed by the laws of the Republic of South Africa.
"""

VALID_REPLY = {
    "score": 62,
    "overview": "The contract pays fairly but the termination clause is one-sided.",
    "analysis": [
        {
            "icon": "alert-triangle",
            "title": "Termination Without Notice",
            "description": "Clause 2 allows dismissal without notice",
            "severity": "high",
            "details": "The BCEA requires a notice period; this clause is likely unenforceable.",
        },
        {
            "icon": "check-circle",
            "title": "Fair Salary Payment",
            "description": "Payment terms comply with labour law",
            "severity": "low",
            "details": "Monthly salary paid within 7 days of month-end.",
        },
    ],
    "contract_metadata": {
        "contract_type": "Employment contract",
        "parties": "Acme Holdings (Pty) Ltd and Jane Doe",
        "governing_law": "South Africa",
    },
    "category_assessments": {
        "termination": {"score": 20, "summary": "No notice period."},
        "compensation": {"score": 85, "summary": "Clear monthly salary."},
    },
    "red_flags": ["Termination without notice"],
    "loopholes": [
        {"title": "Undefined competitor", "description": "Competitor is not defined in clause 3."}
    ],
    "negotiation_advice": {
        "priorities": ["Add a one-month notice period"],
        "suggested_wording": "Either party may terminate on one calendar month's written notice.",
    },
}


class FakeReasoningClient:
    """Stands in for ReasoningClient; returns a fixed reply or raises."""

    def __init__(self, reply=None, error=None, settings=None):
        self.reply = json.dumps(VALID_REPLY) if reply is None else reply
        self.error = error
        self.settings = settings or Settings()
        self.provider = "groq"
        self.is_configured = True
        self.prompts = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def settings(tmp_path):
    return Settings(
        uploads_directory=str(tmp_path / "uploads"),
        groq_api_key="",
        openai_api_key="",
        reasoning_timeout_seconds=5,
        extraction_timeout_seconds=5,
    )


@pytest.fixture
def store():
    return AnalysisStore(capacity=20)


@pytest.fixture
def fake_client(settings):
    return FakeReasoningClient(settings=settings)


@pytest.fixture
def failing_client(settings):
    return FakeReasoningClient(error=ReasoningServiceFailed("connection refused"), settings=settings)


@pytest.fixture
def analyzer(store, fake_client, settings):
    return ContractAnalyzer(store, fake_client, settings)
