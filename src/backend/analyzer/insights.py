# insights.py
import logging
from fractions import Fraction
from typing import Sequence

from models import (
    ComplianceAction, CompletenessReport, DocumentInsights, EnhancementSuggestion, EntityBundle,
    ValidationBundle,
)
from benchmarking import round_half_up

logger = logging.getLogger(__name__)

KEY_DATE_LIMIT = 3
KEY_RESPONSIBILITY_LIMIT = 5
PRIMARY_JURISDICTION_CONFIDENCE = 0.7
HIGH_COMPLEXITY = 70
CRITICAL_TIMELINE_MARKERS = ("72 hours", "24 hours", "immediate")

# points out of 100; framework coverage earns its share of the rest
COMPLETENESS_WEIGHTS = {
    "has_effective_dates": 20,
    "has_jurisdictions": 15,
    "has_responsibilities": 15,
    "has_timelines": 10,
    "has_contact_info": 5,
}
FRAMEWORK_COVERAGE_WEIGHT = 35


def has_contact_info(entities: EntityBundle) -> bool:
    """An email address or phone number; a website alone does not count."""
    return any(c.type in ("email", "phone") for c in entities.contacts)


def _is_critical(text: str) -> bool:
    lower = " ".join(text.lower().split())
    return any(marker in lower for marker in CRITICAL_TIMELINE_MARKERS)


# ---------- Insights ----------
def enhancement_suggestions(insights: DocumentInsights) -> list[EnhancementSuggestion]:
    suggestions: list[EnhancementSuggestion] = []
    if not insights.key_dates:
        suggestions.append(EnhancementSuggestion(
            type="warning", priority="medium",
            message="No effective dates found. Consider adding implementation timelines.",
        ))
    if not insights.primary_jurisdictions:
        suggestions.append(EnhancementSuggestion(
            type="warning", priority="high",
            message="No clear jurisdictional scope identified. Specify applicable regions.",
        ))
    if not insights.has_contact_info:
        suggestions.append(EnhancementSuggestion(
            type="info", priority="low",
            message="Consider adding contact information for compliance inquiries.",
        ))
    if insights.complexity > HIGH_COMPLEXITY:
        suggestions.append(EnhancementSuggestion(
            type="warning", priority="medium",
            message="Document complexity is high. Consider simplifying language for better understanding.",
        ))
    if insights.urgency_level == "high":
        suggestions.append(EnhancementSuggestion(
            type="alert", priority="high",
            message="High urgency indicators detected. Review implementation timelines.",
        ))
    return suggestions


def document_insights(entities: EntityBundle) -> DocumentInsights:
    """Headline facts about a document plus suggestions for what it lacks."""
    metadata = entities.metadata
    insights = DocumentInsights(
        document_type=metadata.document_type,
        urgency_level=metadata.urgency_level,
        complexity=metadata.complexity_score,
        readability=metadata.readability_score,
        word_count=metadata.word_count,
        key_dates=entities.dates[:KEY_DATE_LIMIT],
        primary_jurisdictions=[j for j in entities.jurisdictions if j.confidence > PRIMARY_JURISDICTION_CONFIDENCE],
        detected_frameworks=list(entities.frameworks),
        key_responsibilities=entities.responsibilities[:KEY_RESPONSIBILITY_LIMIT],
        critical_timelines=[t for t in entities.timelines if _is_critical(t.text)],
        has_contact_info=has_contact_info(entities),
        contact_details=list(entities.contacts),
    )
    return insights.model_copy(update={"enhancement_suggestions": enhancement_suggestions(insights)})


# ---------- Completeness ----------
def framework_coverage(validation: ValidationBundle, required: Sequence[str]) -> Fraction:
    """Share of required frameworks that validated; nothing required counts as full coverage."""
    if not required:
        return Fraction(1)
    valid = set(validation.valid_frameworks)
    return Fraction(sum(1 for f in required if f in valid), len(required))


def completeness_score(checks: dict[str, bool], coverage: Fraction) -> int:
    points = sum(weight for name, weight in COMPLETENESS_WEIGHTS.items() if checks[name])
    return round_half_up(points + coverage * FRAMEWORK_COVERAGE_WEIGHT)


def compliance_recommendations(checks: dict[str, bool], coverage: Fraction) -> list[ComplianceAction]:
    actions: list[ComplianceAction] = []
    if not checks["has_effective_dates"]:
        actions.append(ComplianceAction(
            priority="high", category="dates",
            message="Add clear effective dates and implementation timelines",
            action="Include specific dates when the policy takes effect",
        ))
    if not checks["has_jurisdictions"]:
        actions.append(ComplianceAction(
            priority="high", category="scope",
            message="Specify jurisdictional scope and applicable regions",
            action="Clearly state which countries, states, or regions this policy applies to",
        ))
    if not checks["has_responsibilities"]:
        actions.append(ComplianceAction(
            priority="medium", category="governance",
            message="Define roles and responsibilities",
            action="Specify who is responsible for implementing and maintaining compliance",
        ))
    if not checks["has_timelines"]:
        actions.append(ComplianceAction(
            priority="medium", category="timelines",
            message="Include compliance timelines and deadlines",
            action="Add specific timeframes for various compliance activities",
        ))
    if not checks["has_contact_info"]:
        actions.append(ComplianceAction(
            priority="low", category="contact",
            message="Provide contact information for compliance questions",
            action="Include email addresses or phone numbers for compliance inquiries",
        ))
    if coverage < 1:
        actions.append(ComplianceAction(
            priority="high", category="frameworks",
            message="Address missing framework requirements",
            action="Review and include requirements for all applicable compliance frameworks",
        ))
    return actions


def assess_completeness(entities: EntityBundle, validation: ValidationBundle,
                        required: Sequence[str]) -> CompletenessReport:
    """
    Score how complete a policy is: structural elements found by the
    extractor plus the share of required frameworks that validated.
    ``validation`` must come from validating exactly ``required``.
    """
    if isinstance(required, (str, bytes)) or not isinstance(required, (list, tuple)):
        raise TypeError("required frameworks must be a list or tuple of strings")
    checks = {
        "has_effective_dates": bool(entities.dates),
        "has_jurisdictions": bool(entities.jurisdictions),
        "has_responsibilities": bool(entities.responsibilities),
        "has_timelines": bool(entities.timelines),
        "has_contact_info": has_contact_info(entities),
    }
    coverage = framework_coverage(validation, required)
    score = completeness_score(checks, coverage)
    logger.debug("Completeness %d with framework coverage %s", score, coverage)
    return CompletenessReport(
        **checks,
        required_frameworks=list(required),
        framework_coverage=round(float(coverage), 4),
        missing_elements=validation.missing_elements,
        warnings=validation.warnings,
        completeness_score=score,
        recommendations=compliance_recommendations(checks, coverage),
    )
