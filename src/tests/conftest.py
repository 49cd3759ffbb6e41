"""
Shared fixtures for unit and integration tests.
"""

import os
import sys
import pytest
from unittest.mock import MagicMock
from io import BytesIO

# ── Ensure backend modules are importable ──
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, os.path.join(ROOT, "backend", "analyzer"))

# ── Fake .env values used by every test ──
ENV_DEFAULTS = {
    "OLLAMA_MODEL": "deepseek-r1",
    "OLLAMA_BASE_URL": "http://127.0.0.1:11434",
    "OLLAMA_TIMEOUT": "600",
    "OLLAMA_TEMPERATURE": "0.0",
    "OLLAMA_TOP_P": "1.0",
    "OLLAMA_NUM_PREDICT": "4096",
    "OLLAMA_SEED": "42",
    "API_PORT": "8000",
    "CORS_ORIGINS": "*",
    "LOG_LEVEL": "WARNING",
    "RECOMMENDATION_LIMIT": "5",
    "SUMMARY_TEXT_CHARS": "2000",
}


@pytest.fixture(autouse=True)
def mock_env(monkeypatch):
    """Inject all env vars so modules read predictable values on import."""
    for k, v in ENV_DEFAULTS.items():
        monkeypatch.setenv(k, v)


@pytest.fixture
def gdpr_policy_text():
    """A policy that triggers every GDPR rule in the catalogue."""
    return (
        "Data Protection Policy\n\n"
        "We process personal data of customers in the European Union only where a lawful basis exists. "
        "Data subjects may exercise the right of access and the right to erasure at any time. "
        "Personal data breaches are reported to the supervisory authority within 72 hours. "
        "Marketing relies on consent, which can be withdrawn at any time.\n\n"
        "Our Data Protection Officer can be reached at dpo@example.com. "
        "A DPIA is completed before any high-risk processing starts. "
        "Each data category has a documented retention period. "
        "Transfers outside the EEA rely on standard contractual clauses.\n"
        "Effective date: 2024-01-01."
    )


@pytest.fixture
def sample_policy_text():
    """A realistic, partially compliant multi-topic policy."""
    return (
        "Information Security and Privacy Policy\n\n"
        "This policy applies to Acme Health, a healthcare provider in the United States. "
        "Protected health information (PHI) must be encrypted at rest and in transit. "
        "The Security Officer shall perform a risk assessment annually.\n\n"
        "Workforce members must report incidents immediately to the security team. "
        "Breach notification to affected patients occurs within 60 days. "
        "Questions can be sent to privacy@acme-health.com or https://acme-health.com/privacy.\n"
    )


@pytest.fixture
def sample_pdf_bytes():
    """Build a small PDF in memory with reportlab."""
    pytest.importorskip("reportlab")
    from reportlab.lib.pagesizes import letter
    from reportlab.pdfgen import canvas

    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(100, 700, "Data Protection Policy")
    c.drawString(100, 680, "Personal data is processed only with a lawful basis.")
    c.drawString(100, 660, "Breaches are notified within 72 hours.")
    c.drawString(100, 640, "Our Data Protection Officer oversees compliance.")
    c.save()
    return buf.getvalue()


@pytest.fixture
def mock_ollama_client():
    """Return a MagicMock that behaves like OllamaClient."""
    client = MagicMock()
    client.model = "deepseek-r1"
    client.base_url = "http://127.0.0.1:11434"
    client.timeout = 600
    return client


@pytest.fixture
def sample_llm_summary_response():
    """A realistic raw LLM summary with <think> wrapper and code fence."""
    return (
        "<think>\nThe GDPR score is high, HIPAA has no coverage.\n</think>\n"
        "```json\n"
        "{\n"
        '  "summary": "The policy covers GDPR well but lacks HIPAA safeguards.",\n'
        '  "gaps": [\n'
        '    {"issue": "No PHI safeguards", "severity": "Critical", "framework": "HIPAA",\n'
        '     "business_impact": "Regulatory fines", "timeframe": "0-30 days",\n'
        '     "effort": "High", "remediation": "Document PHI safeguards."}\n'
        "  ]\n"
        "}\n"
        "```"
    )
