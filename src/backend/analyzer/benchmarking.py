# benchmarking.py
import logging
import math
from fractions import Fraction
from typing import Sequence

from models import (
    AggregateResult, AnalysisWarning, FrameworkRuleSet, Gap, IndustryBenchmark,
    Recommendation, ScoreResult, Strength,
)
from rules_catalog import (
    DEFAULT_CATALOG, SEVERITY_RANK, CatalogError, RulesCatalog, normalize_framework_id,
)

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 5
TARGET_SCORE = 100


def round_half_up(value: Fraction) -> int:
    """Round to the nearest integer, .5 always going up (no banker's rounding)."""
    return math.floor(value + Fraction(1, 2))


def _clamp(value: int, low: int = 0, high: int = 100) -> int:
    return max(low, min(high, value))


def _check_framework_ids(framework_ids) -> list[str]:
    if isinstance(framework_ids, (str, bytes)) or not isinstance(framework_ids, (list, tuple)):
        raise TypeError("framework_ids must be a list or tuple of strings")
    for fid in framework_ids:
        if not isinstance(fid, str):
            raise TypeError(f"framework id must be a string, got {type(fid).__name__}")
    return list(framework_ids)


class RulesBenchmarkingEngine:
    """
    Deterministic, offline scoring of document text against the rule catalogue.

    Every rule is a presence check: if any of its triggers is found the rule
    counts as a strength with its full weight, otherwise it becomes a gap.
    Framework scores are percentages of matched weight, aggregated into an
    arithmetic mean and compared against the industry benchmark row.
    """

    def __init__(self, catalog: RulesCatalog = DEFAULT_CATALOG):
        self.catalog = catalog

    # ---------- Rules ----------
    def find_evidence(self, text: str, framework_id: str, rule_id: str) -> list[str]:
        """Trigger labels of one rule found in text, in catalogue order."""
        return [
            label
            for label, pattern in self.catalog.triggers[(framework_id, rule_id)]
            if pattern.search(text)
        ]

    def maturity_for(self, score: int) -> str:
        for level, minimum in self.catalog.maturity_thresholds:
            if score >= minimum:
                return level
        return "Basic"

    def compare_to_benchmark(self, score: float, industry_average: float) -> str:
        """Bucket a score by its distance from the industry average."""
        difference = score - industry_average
        for label, lower, inclusive in self.catalog.benchmark_bands:
            if difference > lower or (inclusive and difference == lower):
                return label
        return "critical"

    # ---------- Per framework ----------
    def score_framework(self, text: str, rule_set: FrameworkRuleSet) -> ScoreResult:
        total = rule_set.total_weight
        if total <= 0:
            raise CatalogError(f"{rule_set.framework_id} has a non-positive total weight")

        strengths: list[Strength] = []
        gaps: list[Gap] = []
        matched = 0
        for rule in rule_set.rules:
            evidence = self.find_evidence(text, rule_set.framework_id, rule.rule_id)
            if evidence:
                matched += rule.weight
                strengths.append(Strength(
                    rule_id=rule.rule_id,
                    requirement=rule.requirement,
                    category=rule.category,
                    weight=rule.weight,
                    evidence=evidence,
                ))
                continue
            severity = self.catalog.severity_for(rule.weight)
            gaps.append(Gap(
                rule_id=rule.rule_id,
                requirement=rule.requirement,
                category=rule.category,
                weight=rule.weight,
                severity=severity,
                business_impact=self.catalog.impact_for(rule.category),
                timeframe=self.catalog.timeframes[severity],
                effort=rule.effort,
                remediation=rule.remediation,
            ))

        score = _clamp(round_half_up(Fraction(matched * 100, total)))
        return ScoreResult(
            framework_id=rule_set.framework_id,
            framework_name=rule_set.name,
            score=score,
            maturity_level=self.maturity_for(score),
            matched_weight=matched,
            total_weight=total,
            strengths=strengths,
            gaps=gaps,
        )

    # ---------- Aggregate ----------
    def _resolve_frameworks(self, framework_ids: list[str]) -> tuple[list[FrameworkRuleSet], list[str], list[AnalysisWarning]]:
        selected: list[FrameworkRuleSet] = []
        ignored: list[str] = []
        warnings: list[AnalysisWarning] = []
        seen: set[str] = set()
        for raw in framework_ids:
            fid = normalize_framework_id(raw)
            if fid in seen:
                warnings.append(AnalysisWarning(
                    code="duplicate_framework", message=f"Framework {raw!r} was requested more than once"
                ))
                continue
            seen.add(fid)
            rule_set = self.catalog.get(fid)
            if rule_set is None:
                logger.warning("Ignoring unknown framework id %r", raw)
                ignored.append(raw)
                warnings.append(AnalysisWarning(
                    code="unknown_framework", message=f"Unknown framework {raw!r} was ignored"
                ))
                continue
            selected.append(rule_set)
        return selected, ignored, warnings

    def _resolve_industry(self, industry: str) -> tuple[IndustryBenchmark, list[AnalysisWarning]]:
        benchmark = self.catalog.benchmark_for(industry)
        if benchmark is not None:
            return benchmark, []
        logger.warning("Unknown industry %r, using default benchmark", industry)
        return self.catalog.default_benchmark, [AnalysisWarning(
            code="unknown_industry",
            message=f"Industry {industry!r} has no benchmark row; default values were used",
        )]

    @staticmethod
    def estimate_percentile(score: int, benchmark: IndustryBenchmark) -> int:
        """Piecewise-linear through (0,0), (bottom_25,25), (average,50), (top_25,75), (100,100)."""
        points = [(0, 0), (benchmark.bottom_25, 25), (benchmark.average, 50), (benchmark.top_25, 75), (100, 100)]
        for (x0, y0), (x1, y1) in zip(points, points[1:]):
            if score <= x1:
                if x1 == x0:
                    return y1
                return _clamp(round_half_up(y0 + Fraction((score - x0) * (y1 - y0), x1 - x0)))
        return 100

    def _industry_weighted(self, results: list[ScoreResult], rule_sets: list[FrameworkRuleSet], industry: str) -> int:
        weights = [Fraction(str(rs.relevance_for(industry))) for rs in rule_sets]
        total = sum(weights)
        if not total:
            return 0
        weighted = sum(w * r.score for w, r in zip(weights, results))
        return _clamp(round_half_up(weighted / total))

    def _benchmark_message(self, difference: int, industry: str, known_industry: bool) -> str:
        label = f"{industry} average" if known_industry else "cross-industry average"
        if difference > 0:
            return f"You're {difference} points ahead of the {label}"
        if difference < 0:
            return f"You're {-difference} points behind the {label}"
        return f"You're level with the {label}"

    def prioritize(self, results: list[ScoreResult], top_n: int = DEFAULT_TOP_N) -> list[Recommendation]:
        """Pool gaps from every framework and rank by severity, weight, then framework id."""
        pooled = [(result, gap) for result in results for gap in result.gaps]
        pooled.sort(key=lambda item: (-SEVERITY_RANK[item[1].severity], -item[1].weight, item[0].framework_id))
        ranked: list[Recommendation] = []
        for priority, (result, gap) in enumerate(pooled[:top_n], start=1):
            ranked.append(Recommendation(
                priority=priority,
                framework=result.framework_id,
                framework_name=result.framework_name,
                rule_id=gap.rule_id,
                title=gap.requirement,
                criticality=gap.severity,
                weight=gap.weight,
                current_score=result.score,
                target_score=TARGET_SCORE,
                business_impact=gap.business_impact,
                timeframe=gap.timeframe,
                estimated_effort=gap.effort,
                recommendations=[
                    gap.remediation,
                    f"State how the policy covers {gap.category} for {result.framework_name}.",
                ],
            ))
        return ranked

    def perform_comprehensive_benchmarking(
        self,
        document_text: str,
        framework_ids: Sequence[str],
        industry: str = "Technology",
        top_n: int = DEFAULT_TOP_N,
    ) -> AggregateResult:
        if not isinstance(document_text, str):
            raise TypeError("document_text must be a string")
        if not isinstance(industry, str):
            raise TypeError("industry must be a string")
        if isinstance(top_n, bool) or not isinstance(top_n, int):
            raise TypeError("top_n must be an integer")
        if top_n < 1:
            raise ValueError("top_n must be at least 1")
        requested = _check_framework_ids(framework_ids)

        warnings: list[AnalysisWarning] = []
        if not document_text.strip():
            warnings.append(AnalysisWarning(code="empty_text", message="Document text is empty"))

        rule_sets, ignored, resolve_warnings = self._resolve_frameworks(requested)
        warnings.extend(resolve_warnings)
        benchmark, industry_warnings = self._resolve_industry(industry)
        warnings.extend(industry_warnings)

        results = [self.score_framework(document_text, rs) for rs in rule_sets]

        if results:
            status = "ok"
            average = _clamp(round_half_up(Fraction(sum(r.score for r in results), len(results))))
            weighted = self._industry_weighted(results, rule_sets, industry)
        else:
            status = "no_frameworks"
            average = weighted = 0
            warnings.append(AnalysisWarning(
                code="no_frameworks", message="None of the requested frameworks could be evaluated"
            ))

        difference = average - benchmark.average
        gaps = [gap for r in results for gap in r.gaps]
        recommendations = self.prioritize(results, top_n)
        return AggregateResult(
            status=status,
            industry=industry,
            average_score=average,
            industry_weighted_score=weighted,
            industry_benchmark=benchmark,
            benchmark_comparison=self.compare_to_benchmark(average, benchmark.average),
            difference=difference,
            estimated_percentile=self.estimate_percentile(average, benchmark),
            benchmark_message=self._benchmark_message(difference, industry, not industry_warnings),
            critical_gaps=sum(1 for g in gaps if g.severity == "Critical"),
            high_gaps=sum(1 for g in gaps if g.severity == "High"),
            medium_gaps=sum(1 for g in gaps if g.severity == "Medium"),
            low_gaps=sum(1 for g in gaps if g.severity == "Low"),
            total_strengths=sum(len(r.strengths) for r in results),
            evaluated_frameworks=[r.framework_id for r in results],
            ignored_frameworks=ignored,
            framework_results={r.framework_id: r for r in results},
            prioritized_recommendations=recommendations,
            total_recommendations=len(gaps),
            warnings=warnings,
        )
