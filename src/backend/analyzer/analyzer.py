# analyzer.py
import logging
import os
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

import orjson
import requests
from json_repair import repair_json
from tenacity import RetryError, retry, stop_after_attempt, wait_fixed
from pydantic import ValidationError
from dotenv import load_dotenv

from models import AggregateResult, AnalysisSummary, AnalysisWarning, DocumentAnalysis, SummaryGap
from prompts import (
    DEFAULT_FRAMEWORKS, DEFAULT_INDUSTRY, FALLBACK_GAPS, FALLBACK_SUMMARY, FRAMEWORK_SCORE_LINE,
    PROMPT_RECOMMENDATIONS, RECOMMENDATION_LINE, SUMMARY_SYSTEM, SUMMARY_USER,
)
from benchmarking import RulesBenchmarkingEngine
from framework_suggester import FrameworkSuggester
from insights import assess_completeness, document_insights
from patterns import suggestion_key
from utils_pdf import extract_text_from_pdf_bytes
from ollama_client import OllamaClient

load_dotenv()

logger = logging.getLogger(__name__)

# ── Pipeline config (from .env) ──
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "deepseek-r1")
RECOMMENDATION_LIMIT = int(os.getenv("RECOMMENDATION_LIMIT", "5"))
SUMMARY_TEXT_CHARS = int(os.getenv("SUMMARY_TEXT_CHARS", "2000"))

DEFAULT_ENGINE = RulesBenchmarkingEngine()
DEFAULT_SUGGESTER = FrameworkSuggester()

_SUMMARY_GAP_FIELDS = set(SummaryGap.model_fields)


# ---------- JSON parsing (robust) ----------
def _strip_wrappers(raw: str) -> str:
    """
    Remove <think>...</think> and stray code fences, then trim.
    """
    if not raw:
        return raw
    raw = re.sub(r"<think>.*?</think>", "", raw, flags=re.DOTALL)
    raw = re.sub(r"```(?:json)?", "", raw)
    return raw.strip()


@retry(stop=stop_after_attempt(3), wait=wait_fixed(0.2))
def _parse_llm_json(raw: str) -> dict:
    """
    1) Strip wrappers
    2) Extract first {...} block
    3) Repair with json-repair
    4) Parse with orjson
    Retried via tenacity; gives up with RetryError.
    """
    cleaned = _strip_wrappers(raw)
    m = re.search(r"\{.*\}", cleaned or "", flags=re.DOTALL)
    if not m:
        raise ValueError("No JSON object found in LLM response.")
    data = orjson.loads(repair_json(m.group(0)))
    if not isinstance(data, dict):
        raise ValueError("LLM response is not a JSON object.")
    return data


# ---------- Summary ----------
def build_summary_prompt(benchmark: AggregateResult, text: str) -> str:
    scores = "\n".join(
        FRAMEWORK_SCORE_LINE.format(
            framework_id=r.framework_id, framework_name=r.framework_name,
            score=r.score, maturity_level=r.maturity_level,
        )
        for r in benchmark.framework_results.values()
    ) or "- none"
    recs = "\n".join(
        RECOMMENDATION_LINE.format(
            priority=rec.priority, title=rec.title, framework=rec.framework, criticality=rec.criticality,
        )
        for rec in benchmark.prioritized_recommendations[:PROMPT_RECOMMENDATIONS]
    ) or "- none"
    return SUMMARY_USER.format(
        average_score=benchmark.average_score,
        industry=benchmark.industry,
        industry_average=benchmark.industry_benchmark.average,
        comparison=benchmark.benchmark_comparison,
        critical_gaps=benchmark.critical_gaps,
        high_gaps=benchmark.high_gaps,
        total_strengths=benchmark.total_strengths,
        framework_scores=scores,
        recommendations=recs,
        excerpt=text[:SUMMARY_TEXT_CHARS],
    )


def _gaps_from_recommendations(benchmark: AggregateResult) -> list[SummaryGap]:
    return [
        SummaryGap(
            issue=f"{rec.framework}: {rec.title}",
            severity=rec.criticality.lower(),
            framework=rec.framework,
            business_impact=rec.business_impact,
            timeframe=rec.timeframe,
            effort=rec.estimated_effort,
            remediation="; ".join(rec.recommendations) or "Review compliance requirements",
        )
        for rec in benchmark.prioritized_recommendations[:FALLBACK_GAPS]
    ]


def fallback_summary(benchmark: AggregateResult) -> AnalysisSummary:
    """Deterministic summary built only from benchmark figures."""
    return AnalysisSummary(
        source="fallback",
        summary=FALLBACK_SUMMARY.format(
            average_score=benchmark.average_score,
            industry=benchmark.industry,
            industry_average=benchmark.industry_benchmark.average,
            total_recommendations=benchmark.total_recommendations,
        ),
        gaps=_gaps_from_recommendations(benchmark),
    )


def _summary_from_model(data: dict, benchmark: AggregateResult) -> AnalysisSummary:
    summary = data.get("summary") or ""
    if isinstance(summary, list):
        summary = " ".join(str(s) for s in summary)
    summary = re.sub(r"<think>.*?</think>\s*", "", str(summary), flags=re.DOTALL).strip()
    if not summary:
        raise ValueError("LLM response has no summary.")

    raw_gaps = data.get("gaps") or []
    if isinstance(raw_gaps, dict):
        raw_gaps = [raw_gaps]
    gaps: list[SummaryGap] = []
    for g in raw_gaps:
        if not isinstance(g, dict) or not g.get("issue"):
            continue
        fields = {k: v for k, v in g.items() if k in _SUMMARY_GAP_FIELDS and v not in (None, "")}
        if isinstance(fields.get("severity"), str):
            fields["severity"] = fields["severity"].strip().lower()
        gaps.append(SummaryGap(**fields))
    # No usable gaps from the model: fall back to the benchmark's own ranking
    if not gaps:
        gaps = _gaps_from_recommendations(benchmark)
    return AnalysisSummary(source="model", summary=summary, gaps=gaps)


def summarize_analysis(benchmark: AggregateResult, text: str,
                       client: OllamaClient) -> tuple[AnalysisSummary, list[AnalysisWarning]]:
    """Ask the model for prose around the final scores; never fails the analysis."""
    try:
        raw = client.complete_json(system=SUMMARY_SYSTEM, user=build_summary_prompt(benchmark, text)).strip()
        return _summary_from_model(_parse_llm_json(raw), benchmark), []
    except (requests.RequestException, RetryError, ValidationError, ValueError) as e:
        logger.warning("Summary unavailable, using fallback: %s", e)
        warning = AnalysisWarning(
            code="summary_unavailable",
            message=f"Model summary unavailable: {str(e)[:200]}",
        )
        return fallback_summary(benchmark), [warning]


# ---------- Enrichment ----------
def _enrich(suggester: FrameworkSuggester, text: str, selected: list[str]) -> dict:
    entities = suggester.extractor.extract_entities(text)
    suggestions = suggester.suggest_frameworks(text)
    required = list(dict.fromkeys(suggestion_key(f) for f in selected))
    candidates = list(dict.fromkeys(required + suggestions.suggested_frameworks))
    validation = suggester.validate_frameworks(candidates, text)
    completeness = assess_completeness(entities, suggester.validate_frameworks(required, text), required)
    return {
        "entities": entities,
        "suggestions": suggestions,
        "validation": validation,
        "insights": document_insights(entities),
        "completeness": completeness,
    }


# ---------- Public entrypoints ----------
def analyze_document(
    text: str,
    frameworks: Sequence[str] | None = None,
    industry: str = DEFAULT_INDUSTRY,
    *,
    summarize: bool = False,
    top_n: int = RECOMMENDATION_LIMIT,
    engine: RulesBenchmarkingEngine | None = None,
    suggester: FrameworkSuggester | None = None,
    client: OllamaClient | None = None,
) -> DocumentAnalysis:
    """
    Benchmark the text and, in parallel, extract entities, suggest/validate
    frameworks and assess insights and completeness. Every quantitative field
    is final before the optional summary runs.
    """
    if not isinstance(text, str):
        raise TypeError("text must be a string")
    selected = list(DEFAULT_FRAMEWORKS) if frameworks is None else frameworks
    if isinstance(selected, (str, bytes)) or not isinstance(selected, (list, tuple)):
        raise TypeError("frameworks must be a list or tuple of strings")
    if not all(isinstance(f, str) for f in selected):
        raise TypeError("framework ids must be strings")
    selected = list(selected)
    engine = engine or DEFAULT_ENGINE
    suggester = suggester or DEFAULT_SUGGESTER

    with ThreadPoolExecutor(max_workers=2) as pool:
        bench_future = pool.submit(engine.perform_comprehensive_benchmarking, text, selected, industry, top_n)
        enrich_future = pool.submit(_enrich, suggester, text, selected)
        benchmark = bench_future.result()
        enrichment = enrich_future.result()

    warnings = list(dict.fromkeys(benchmark.warnings + enrichment["entities"].warnings))
    summary = None
    if summarize:
        summary, summary_warnings = summarize_analysis(benchmark, text, client or OllamaClient(model=OLLAMA_MODEL))
        warnings.extend(summary_warnings)

    return DocumentAnalysis(
        benchmark=benchmark,
        summary=summary,
        warnings=warnings,
        **enrichment,
    )


def analyze_pdf_bytes(pdf_bytes: bytes, frameworks: Sequence[str] | None = None,
                      industry: str = DEFAULT_INDUSTRY, summarize: bool = False) -> DocumentAnalysis:
    """Extract text + table rows from a PDF and run the full analysis on it."""
    text = extract_text_from_pdf_bytes(pdf_bytes)
    return analyze_document(text, frameworks, industry, summarize=summarize)
