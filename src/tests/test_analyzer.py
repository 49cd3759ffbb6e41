"""
Unit tests for backend/analyzer/analyzer.py

Covers:
  - _strip_wrappers()
  - _parse_llm_json()
  - summarize_analysis() / fallback_summary()  (mocked LLM)
  - analyze_document()                          (parallel benchmark + enrichment)
  - analyze_pdf_bytes()                         (mocked PDF)
"""

import pytest
import requests
from unittest.mock import patch
from tenacity import RetryError


# ── Helpers to import with env already set (autouse fixture in conftest) ──
def _import_analyzer():
    from analyzer import (
        _strip_wrappers, _parse_llm_json, summarize_analysis,
        analyze_document, analyze_pdf_bytes, fallback_summary,
    )
    return (
        _strip_wrappers, _parse_llm_json, summarize_analysis,
        analyze_document, analyze_pdf_bytes, fallback_summary,
    )


def _benchmark(text, frameworks=("GDPR",), industry="Technology"):
    from benchmarking import RulesBenchmarkingEngine
    return RulesBenchmarkingEngine().perform_comprehensive_benchmarking(text, list(frameworks), industry)


# ═══════════════════════════════════════════
#  _strip_wrappers
# ═══════════════════════════════════════════
class TestStripWrappers:
    def test_removes_think_tags(self):
        fn = _import_analyzer()[0]
        raw = "<think>scores look fine</think>\n{\"summary\": \"ok\"}"
        assert fn(raw) == '{"summary": "ok"}'

    def test_removes_code_fences(self):
        fn = _import_analyzer()[0]
        assert fn('```json\n{"gaps": []}\n```') == '{"gaps": []}'

    def test_empty_and_none(self):
        fn = _import_analyzer()[0]
        assert fn("") == ""
        assert fn(None) is None


# ═══════════════════════════════════════════
#  _parse_llm_json
# ═══════════════════════════════════════════
class TestParseLlmJson:
    def test_valid_json(self, sample_llm_summary_response):
        fn = _import_analyzer()[1]
        data = fn(sample_llm_summary_response)
        assert data["gaps"][0]["framework"] == "HIPAA"

    def test_repairs_trailing_comma(self):
        fn = _import_analyzer()[1]
        assert fn('{"summary": "Good coverage", "gaps": [],}') == {"summary": "Good coverage", "gaps": []}

    def test_json_with_surrounding_text(self):
        fn = _import_analyzer()[1]
        assert fn('Here you go: {"summary": "x"} hope that helps')["summary"] == "x"

    def test_no_json_raises(self):
        fn = _import_analyzer()[1]
        with pytest.raises(RetryError):
            fn("I cannot summarize this document.")


# ═══════════════════════════════════════════
#  summarize_analysis
# ═══════════════════════════════════════════
class TestSummarizeAnalysis:
    def test_model_summary(self, gdpr_policy_text, mock_ollama_client, sample_llm_summary_response):
        summarize = _import_analyzer()[2]
        mock_ollama_client.complete_json.return_value = sample_llm_summary_response
        bench = _benchmark(gdpr_policy_text, ("GDPR", "HIPAA"))

        summary, warnings = summarize(bench, gdpr_policy_text, mock_ollama_client)
        assert warnings == []
        assert summary.source == "model"
        assert summary.summary.startswith("The policy covers GDPR well")
        assert summary.gaps[0].severity == "critical"
        assert summary.gaps[0].effort == "High"

    def test_prompt_carries_final_scores(self, gdpr_policy_text, mock_ollama_client, sample_llm_summary_response):
        summarize = _import_analyzer()[2]
        mock_ollama_client.complete_json.return_value = sample_llm_summary_response
        bench = _benchmark(gdpr_policy_text, ("GDPR", "HIPAA"))
        summarize(bench, gdpr_policy_text, mock_ollama_client)

        user = mock_ollama_client.complete_json.call_args.kwargs["user"]
        assert "Overall Compliance Score: 50%" in user
        assert "- GDPR (General Data Protection Regulation): 100% - Advanced maturity" in user
        assert "Priority 1:" in user

    def test_missing_gaps_use_recommendations(self, gdpr_policy_text, mock_ollama_client):
        summarize = _import_analyzer()[2]
        mock_ollama_client.complete_json.return_value = '{"summary": "HIPAA is not addressed."}'
        bench = _benchmark(gdpr_policy_text, ("GDPR", "HIPAA"))

        summary, _ = summarize(bench, gdpr_policy_text, mock_ollama_client)
        assert summary.source == "model"
        assert [g.framework for g in summary.gaps] == ["HIPAA"] * 5
        assert summary.gaps[0].severity == "critical"

    def test_connection_error_falls_back(self, gdpr_policy_text, mock_ollama_client):
        summarize = _import_analyzer()[2]
        mock_ollama_client.complete_json.side_effect = requests.ConnectionError("refused")
        bench = _benchmark(gdpr_policy_text, ("GDPR", "HIPAA"))

        summary, warnings = summarize(bench, gdpr_policy_text, mock_ollama_client)
        assert summary.source == "fallback"
        assert summary.summary.startswith(
            "Automated compliance assessment completed. Your organization scores 50% "
            "against Technology industry standards (average: 78%)."
        )
        assert "8 open regulatory checkpoints" in summary.summary
        assert [w.code for w in warnings] == ["summary_unavailable"]

    def test_empty_summary_falls_back(self, gdpr_policy_text, mock_ollama_client):
        summarize = _import_analyzer()[2]
        mock_ollama_client.complete_json.return_value = '{"summary": "", "gaps": []}'
        summary, warnings = summarize(_benchmark(gdpr_policy_text), gdpr_policy_text, mock_ollama_client)
        assert summary.source == "fallback"
        assert warnings[0].code == "summary_unavailable"

    def test_invalid_severity_falls_back(self, gdpr_policy_text, mock_ollama_client):
        summarize = _import_analyzer()[2]
        mock_ollama_client.complete_json.return_value = (
            '{"summary": "ok", "gaps": [{"issue": "x", "severity": "apocalyptic"}]}'
        )
        summary, warnings = summarize(_benchmark(gdpr_policy_text), gdpr_policy_text, mock_ollama_client)
        assert summary.source == "fallback"
        assert len(warnings) == 1

    def test_fallback_has_no_gaps_when_fully_compliant(self, gdpr_policy_text):
        fallback = _import_analyzer()[5]
        summary = fallback(_benchmark(gdpr_policy_text))
        assert summary.gaps == []
        assert "scores 100%" in summary.summary


# ═══════════════════════════════════════════
#  analyze_document
# ═══════════════════════════════════════════
class TestAnalyzeDocument:
    def test_default_frameworks(self, gdpr_policy_text):
        analyze = _import_analyzer()[3]
        result = analyze(gdpr_policy_text)
        assert result.benchmark.evaluated_frameworks == ["GDPR", "HIPAA", "SOX"]
        assert result.summary is None
        assert result.warnings == []

    def test_enrichment_attached(self, gdpr_policy_text):
        analyze = _import_analyzer()[3]
        result = analyze(gdpr_policy_text, ["GDPR"])
        assert result.entities.dates[0].text == "2024-01-01"
        assert result.suggestions.suggested_frameworks[0] == "gdpr"
        assert "gdpr" in result.validation.valid_frameworks

    def test_summary_does_not_change_scores(self, gdpr_policy_text, mock_ollama_client, sample_llm_summary_response):
        analyze = _import_analyzer()[3]
        mock_ollama_client.complete_json.return_value = sample_llm_summary_response
        plain = analyze(gdpr_policy_text, ["GDPR", "HIPAA"])
        summarized = analyze(gdpr_policy_text, ["GDPR", "HIPAA"], summarize=True, client=mock_ollama_client)
        assert summarized.benchmark == plain.benchmark
        assert summarized.summary.source == "model"
        mock_ollama_client.complete_json.assert_called_once()

    def test_summary_failure_adds_warning(self, gdpr_policy_text, mock_ollama_client):
        analyze = _import_analyzer()[3]
        mock_ollama_client.complete_json.side_effect = requests.Timeout("slow")
        result = analyze(gdpr_policy_text, ["GDPR"], summarize=True, client=mock_ollama_client)
        assert result.summary.source == "fallback"
        assert [w.code for w in result.warnings] == ["summary_unavailable"]

    def test_empty_text_warned_once(self):
        analyze = _import_analyzer()[3]
        result = analyze("   ", ["GDPR"])
        assert [w.code for w in result.warnings] == ["empty_text"]
        assert result.benchmark.average_score == 0

    def test_warnings_merged(self, gdpr_policy_text):
        analyze = _import_analyzer()[3]
        result = analyze(gdpr_policy_text, ["GDPR", "MADE_UP"], "Mining")
        assert [w.code for w in result.warnings] == ["unknown_framework", "unknown_industry"]

    def test_frameworks_must_be_list(self, gdpr_policy_text):
        analyze = _import_analyzer()[3]
        with pytest.raises(TypeError):
            analyze(gdpr_policy_text, "GDPR")

    def test_text_must_be_str(self):
        analyze = _import_analyzer()[3]
        with pytest.raises(TypeError):
            analyze(None)


# ═══════════════════════════════════════════
#  analyze_pdf_bytes
# ═══════════════════════════════════════════
class TestAnalyzePdfBytes:
    @patch("analyzer.extract_text_from_pdf_bytes")
    def test_runs_pipeline_on_pdf_text(self, mock_extract, gdpr_policy_text):
        analyze_pdf = _import_analyzer()[4]
        mock_extract.return_value = gdpr_policy_text
        result = analyze_pdf(b"%PDF-fake", ["GDPR"], "Healthcare")
        mock_extract.assert_called_once_with(b"%PDF-fake")
        assert result.benchmark.average_score == 100
        assert result.benchmark.industry == "Healthcare"
