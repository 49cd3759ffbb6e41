"""
Unit tests for backend/analyzer/insights.py

Covers:
  - document_insights()        (key facts + enhancement suggestions)
  - assess_completeness()      (element checks, framework coverage, score, recommendations)
  - analyze_document() wiring
"""

import pytest


def _import_insights():
    from insights import assess_completeness, document_insights
    return assess_completeness, document_insights


def _date(text="2024-01-01", position=0):
    from models import DateEntity
    return DateEntity(text=text, context=text, confidence=0.8, position=position, type="general_date")


def _jurisdiction(confidence, name="european_union"):
    from models import JurisdictionEntity
    return JurisdictionEntity(text="EU", context="EU", confidence=confidence, position=0, jurisdiction=name)


def _responsibility(position=0):
    from models import ResponsibilityEntity
    return ResponsibilityEntity(text="DPO", context="DPO", confidence=0.8, position=position, role="dpo")


def _timeline(text):
    from models import TimelineEntity
    return TimelineEntity(text=text, context=text, confidence=0.8, position=0, type="general_timeline")


def _contact(kind, text):
    from models import ContactEntity
    return ContactEntity(text=text, context=text, confidence=0.9, position=0, type=kind)


def _bundle(**fields):
    from models import DocumentMetadata, EntityBundle
    metadata = fields.pop("metadata", {})
    return EntityBundle(metadata=DocumentMetadata(**metadata), **fields)


def _complete_bundle():
    return _bundle(
        dates=[_date()],
        jurisdictions=[_jurisdiction(0.9)],
        responsibilities=[_responsibility()],
        timelines=[_timeline("within 30 days")],
        contacts=[_contact("email", "dpo@example.com")],
    )


def _validation(valid=(), invalid=(), missing=None, warnings=()):
    from models import ValidationBundle
    return ValidationBundle(valid_frameworks=list(valid), invalid_frameworks=list(invalid),
                            missing_elements=missing or {}, warnings=list(warnings))


# ═══════════════════════════════════════════
#  document_insights
# ═══════════════════════════════════════════
class TestDocumentInsights:
    def test_headline_fields_from_metadata(self):
        document_insights = _import_insights()[1]
        insights = document_insights(_bundle(metadata={
            "word_count": 120, "complexity_score": 31.5, "readability_score": 55.2,
            "document_type": "security", "urgency_level": "medium",
        }))
        assert insights.word_count == 120
        assert insights.complexity == 31.5
        assert insights.readability == 55.2
        assert insights.document_type == "security"
        assert insights.urgency_level == "medium"

    def test_limits_dates_and_responsibilities(self):
        document_insights = _import_insights()[1]
        bundle = _bundle(
            dates=[_date(position=i) for i in range(5)],
            responsibilities=[_responsibility(position=i) for i in range(7)],
        )
        insights = document_insights(bundle)
        assert [d.position for d in insights.key_dates] == [0, 1, 2]
        assert [r.position for r in insights.key_responsibilities] == [0, 1, 2, 3, 4]

    def test_primary_jurisdictions_need_confidence_above_threshold(self):
        document_insights = _import_insights()[1]
        bundle = _bundle(jurisdictions=[_jurisdiction(0.7, "united_states"), _jurisdiction(0.85)])
        insights = document_insights(bundle)
        assert [j.jurisdiction for j in insights.primary_jurisdictions] == ["european_union"]

    def test_critical_timelines(self):
        document_insights = _import_insights()[1]
        bundle = _bundle(timelines=[
            _timeline("within 72 hours"), _timeline("annually"),
            _timeline("immediately"), _timeline("within 24  hours"), _timeline("within 30 days"),
        ])
        insights = document_insights(bundle)
        assert [t.text for t in insights.critical_timelines] == ["within 72 hours", "immediately", "within 24  hours"]

    def test_website_alone_is_not_contact_info(self):
        document_insights = _import_insights()[1]
        insights = document_insights(_bundle(contacts=[_contact("website", "https://example.com")]))
        assert insights.has_contact_info is False
        assert len(insights.contact_details) == 1
        assert document_insights(_bundle(contacts=[_contact("phone", "555-123-4567")])).has_contact_info

    def test_suggestions_for_bare_document(self):
        document_insights = _import_insights()[1]
        insights = document_insights(_bundle(metadata={"complexity_score": 75.0, "urgency_level": "high"}))
        assert [(s.type, s.priority) for s in insights.enhancement_suggestions] == [
            ("warning", "medium"), ("warning", "high"), ("info", "low"), ("warning", "medium"), ("alert", "high"),
        ]
        assert insights.enhancement_suggestions[0].message.startswith("No effective dates found")
        assert insights.enhancement_suggestions[-1].message.startswith("High urgency indicators")

    def test_no_suggestions_for_complete_document(self):
        document_insights = _import_insights()[1]
        insights = document_insights(_complete_bundle())
        assert insights.enhancement_suggestions == []

    def test_complexity_threshold_is_exclusive(self):
        document_insights = _import_insights()[1]
        bundle = _complete_bundle().model_copy(update={
            "metadata": _bundle(metadata={"complexity_score": 70.0}).metadata,
        })
        assert document_insights(bundle).enhancement_suggestions == []


# ═══════════════════════════════════════════
#  assess_completeness
# ═══════════════════════════════════════════
class TestAssessCompleteness:
    def test_complete_document_scores_100(self):
        assess = _import_insights()[0]
        report = assess(_complete_bundle(), _validation(valid=["gdpr"]), ["gdpr"])
        assert report.completeness_score == 100
        assert report.framework_coverage == 1.0
        assert report.recommendations == []

    def test_empty_document_without_required_frameworks(self):
        assess = _import_insights()[0]
        report = assess(_bundle(), _validation(), [])
        assert report.completeness_score == 35
        assert report.framework_coverage == 1.0
        assert [r.category for r in report.recommendations] == [
            "dates", "scope", "governance", "timelines", "contact",
        ]
        assert [r.priority for r in report.recommendations] == ["high", "high", "medium", "medium", "low"]

    def test_partial_coverage(self):
        assess = _import_insights()[0]
        validation = _validation(valid=["gdpr"], invalid=["hipaa", "pci_dss"],
                                 missing={"hipaa": ["healthcare context"], "pci_dss": ["payment processing context"]})
        report = assess(_complete_bundle(), validation, ["gdpr", "hipaa", "pci_dss"])
        assert report.framework_coverage == pytest.approx(0.3333)
        # 65 + 35/3
        assert report.completeness_score == 77
        assert report.missing_elements == {"hipaa": ["healthcare context"], "pci_dss": ["payment processing context"]}
        assert [r.category for r in report.recommendations] == ["frameworks"]

    def test_score_rounds_half_up(self):
        assess = _import_insights()[0]
        bundle = _bundle(jurisdictions=[_jurisdiction(0.9)])
        report = assess(bundle, _validation(valid=["gdpr"], invalid=["hipaa"]), ["gdpr", "hipaa"])
        # 15 + 17.5
        assert report.completeness_score == 33

    def test_element_weights(self):
        assess = _import_insights()[0]
        none_required = _validation(valid=["gdpr"])
        for fields, expected in (
            ({"dates": [_date()]}, 55),
            ({"jurisdictions": [_jurisdiction(0.5)]}, 50),
            ({"responsibilities": [_responsibility()]}, 50),
            ({"timelines": [_timeline("annually")]}, 45),
            ({"contacts": [_contact("email", "a@b.co")]}, 40),
            ({"contacts": [_contact("website", "https://b.co")]}, 35),
        ):
            report = assess(_bundle(**fields), none_required, ["gdpr"])
            assert report.completeness_score == expected, fields

    def test_warnings_passed_through(self):
        assess = _import_insights()[0]
        report = assess(_complete_bundle(), _validation(valid=["gdpr"], warnings=["GDPR typically applies to EU jurisdiction"]),
                        ["gdpr"])
        assert report.warnings == ["GDPR typically applies to EU jurisdiction"]
        assert report.required_frameworks == ["gdpr"]

    def test_required_must_be_list(self):
        assess = _import_insights()[0]
        with pytest.raises(TypeError):
            assess(_bundle(), _validation(), "gdpr")


# ═══════════════════════════════════════════
#  analyze_document wiring
# ═══════════════════════════════════════════
class TestAnalysisCarriesInsights:
    def test_gdpr_policy_is_complete(self, gdpr_policy_text):
        from analyzer import analyze_document
        result = analyze_document(gdpr_policy_text, ["GDPR"])
        assert result.completeness.required_frameworks == ["gdpr"]
        assert result.completeness.completeness_score == 100
        assert result.insights.has_contact_info
        critical = {t.text for t in result.insights.critical_timelines}
        assert {"within 72 hours", "72 hours"} <= critical
        assert all("72 hours" in text for text in critical)

    def test_unfit_framework_lowers_coverage(self, gdpr_policy_text):
        from analyzer import analyze_document
        result = analyze_document(gdpr_policy_text, ["GDPR", "PCI DSS"])
        assert result.completeness.required_frameworks == ["gdpr", "pci_dss"]
        assert result.completeness.framework_coverage == 0.5
        assert result.completeness.missing_elements == {"pci_dss": ["payment processing context"]}
        assert result.completeness.completeness_score == 83
