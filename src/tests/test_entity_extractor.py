"""
Unit tests for backend/analyzer/entity_extractor.py

Covers:
  - Each entity category (dates, jurisdictions, frameworks, responsibilities,
    timelines, contacts, requirements)
  - Confidence heuristics, classification and de-duplication
  - extract_metadata()
  - ExtractionOptions, caching and caller misuse
"""

import re
import pytest


def _import_extractor():
    from entity_extractor import EntityExtractor, PatternCategory, extract_metadata
    return EntityExtractor, PatternCategory, extract_metadata


def _extract(text, options=None):
    from extraction_cache import NullCache
    Extractor = _import_extractor()[0]
    return Extractor(cache=NullCache()).extract_entities(text, options)


# ═══════════════════════════════════════════
#  Dates
# ═══════════════════════════════════════════
class TestDates:
    def test_iso_date_deduplicated_across_patterns(self):
        bundle = _extract("Effective date: 2024-01-01.")
        assert len(bundle.dates) == 1
        date = bundle.dates[0]
        assert date.text == "2024-01-01"
        assert date.type == "effective_date"
        assert date.confidence == 0.95
        assert date.position == 16

    def test_us_numeric_date(self):
        bundle = _extract("The audit is scheduled for 03/15/2024 at headquarters.")
        date = bundle.dates[0]
        assert date.text == "03/15/2024"
        assert date.type == "review_date"
        assert date.confidence == 0.75

    def test_month_name_date(self):
        bundle = _extract("The deadline is March 15, 2024.")
        assert [d.text for d in bundle.dates] == ["March 15, 2024"]
        assert bundle.dates[0].type == "deadline"
        assert bundle.dates[0].confidence == 0.6

    def test_anchored_date_deduplicated(self):
        bundle = _extract("Complete training by March 15, 2024.")
        assert [d.text for d in bundle.dates] == ["March 15, 2024"]
        assert bundle.dates[0].type == "training_date"

    def test_relative_date(self):
        bundle = _extract("Requests are answered within 30 days.")
        assert [d.text for d in bundle.dates] == ["30 days"]

    def test_sorted_by_confidence(self):
        bundle = _extract("On 01/02/2023 we met. Effective date: 2024-01-01.")
        confidences = [d.confidence for d in bundle.dates]
        assert confidences == sorted(confidences, reverse=True)
        assert bundle.dates[0].text == "2024-01-01"


# ═══════════════════════════════════════════
#  Jurisdictions
# ═══════════════════════════════════════════
class TestJurisdictions:
    def test_canonical_and_abbreviation(self):
        bundle = _extract("We operate in the European Union and the US.")
        found = {(j.jurisdiction, j.text): j.confidence for j in bundle.jurisdictions}
        assert found[("european_union", "European Union")] == 0.9
        assert found[("united_states", "US")] == 0.85

    def test_lowercase_us_is_not_a_jurisdiction(self):
        bundle = _extract("Please contact us for details.")
        assert bundle.jurisdictions == []

    def test_same_text_reported_once(self):
        bundle = _extract("European Union rules. european union guidance.")
        eu = [j for j in bundle.jurisdictions if j.jurisdiction == "european_union"]
        assert len(eu) == 1
        assert eu[0].position == 0
        assert eu[0].text == "European Union"

    def test_context_window(self):
        text = "x" * 300 + " California " + "y" * 300
        j = _extract(text).jurisdictions[0]
        assert j.jurisdiction == "california"
        assert len(j.context) <= 300


# ═══════════════════════════════════════════
#  Frameworks
# ═══════════════════════════════════════════
class TestFrameworks:
    def test_explicit_mentions(self):
        bundle = _extract("We comply with GDPR and protect PHI and cardholder data.")
        found = {f.framework: f for f in bundle.frameworks}
        assert found["gdpr"].confidence == 0.95
        assert found["hipaa"].text == "PHI"
        assert found["hipaa"].confidence == 0.9
        assert found["pci_dss"].confidence == 0.8

    def test_canonical_multiword(self):
        bundle = _extract("Controls follow PCI DSS.")
        assert bundle.frameworks[0].framework == "pci_dss"
        assert bundle.frameworks[0].confidence == 0.95

    def test_repeated_mention_once(self):
        bundle = _extract("GDPR applies. GDPR again. gdpr once more.")
        gdpr = [f for f in bundle.frameworks if f.framework == "gdpr"]
        assert len(gdpr) == 1
        assert gdpr[0].position == 0


# ═══════════════════════════════════════════
#  Responsibilities
# ═══════════════════════════════════════════
class TestResponsibilities:
    def test_roles(self):
        bundle = _extract("The Data Protection Officer works with the security team.")
        roles = [r.role for r in bundle.responsibilities]
        assert roles == ["Data Protection Officer", "security team"]
        assert all(r.confidence == 0.8 for r in bundle.responsibilities)


# ═══════════════════════════════════════════
#  Timelines
# ═══════════════════════════════════════════
class TestTimelines:
    def test_fixed_window(self):
        bundle = _extract("Breaches must be reported within 72 hours.")
        found = {t.text: t for t in bundle.timelines}
        assert found["within 72 hours"].confidence == 0.85
        assert found["within 72 hours"].type == "notification_timeline"
        assert "72 hours" in found

    def test_numeric_period(self):
        bundle = _extract("Access is revoked within 30 days.")
        found = {t.text: t.confidence for t in bundle.timelines}
        assert found["within 30 days"] == 0.8

    def test_immediate(self):
        bundle = _extract("Staff act immediately.")
        assert bundle.timelines[0].type == "immediate"
        assert bundle.timelines[0].confidence == 0.6

    def test_training_timeline(self):
        bundle = _extract("Security training is completed annually.")
        assert bundle.timelines[0].text == "annually"
        assert bundle.timelines[0].type == "training_timeline"


# ═══════════════════════════════════════════
#  Contacts
# ═══════════════════════════════════════════
class TestContacts:
    def test_all_contact_types(self):
        text = "Email privacy@example.com, call 555-123-4567 or visit https://example.com/privacy."
        bundle = _extract(text)
        found = {c.type: c for c in bundle.contacts}
        assert found["email"].text == "privacy@example.com"
        assert found["email"].confidence == 0.9
        assert found["phone"].text == "555-123-4567"
        assert found["phone"].confidence == 0.7
        assert found["website"].text == "https://example.com/privacy"
        assert found["website"].confidence == 0.85
        assert [c.type for c in bundle.contacts] == ["email", "website", "phone"]


# ═══════════════════════════════════════════
#  Requirements
# ═══════════════════════════════════════════
class TestRequirements:
    @pytest.mark.parametrize("text,expected", [
        ("Employees must encrypt all portable devices.", "mandatory"),
        ("Staff are prohibited from sharing passwords with anyone.", "prohibition"),
        ("Managers ensure that access reviews are completed.", "verification"),
        ("Vendors are not permitted to store card numbers locally.", "general_requirement"),
    ])
    def test_classification(self, text, expected):
        bundle = _extract(text)
        assert bundle.requirements[0].type == expected
        assert bundle.requirements[0].confidence == 0.75


# ═══════════════════════════════════════════
#  Metadata
# ═══════════════════════════════════════════
class TestMetadata:
    def test_counts(self):
        fn = _import_extractor()[2]
        meta = fn("One two three. Four five six.\n\nSeven eight nine ten.")
        assert meta.word_count == 10
        assert meta.sentence_count == 3
        assert meta.paragraph_count == 2
        assert meta.average_words_per_sentence == 3.33
        assert meta.readability_score == 93.33
        assert meta.complexity_score == 0.0

    def test_complexity(self):
        fn = _import_extractor()[2]
        assert fn("Organization requirements apply.").complexity_score == 66.67

    @pytest.mark.parametrize("text,expected", [
        ("Our privacy notice explains processing.", "data_protection"),
        ("Security controls are reviewed.", "security"),
        ("Quarterly financial statements.", "financial"),
        ("Patient health records.", "healthcare"),
        ("Office opening hours.", "general_compliance"),
    ])
    def test_document_type(self, text, expected):
        fn = _import_extractor()[2]
        assert fn(text).document_type == expected

    @pytest.mark.parametrize("text,expected", [
        ("This is urgent.", "high"),
        ("Respond in a timely way.", "medium"),
        ("Nothing special.", "normal"),
    ])
    def test_urgency(self, text, expected):
        fn = _import_extractor()[2]
        assert fn(text).urgency_level == expected


# ═══════════════════════════════════════════
#  Edge cases
# ═══════════════════════════════════════════
class TestEdgeCases:
    def test_empty_text(self):
        bundle = _extract("")
        assert bundle.dates == [] and bundle.frameworks == [] and bundle.requirements == []
        assert bundle.metadata.word_count == 0
        assert bundle.metadata.readability_score == 0
        assert bundle.metadata.document_type == "general_compliance"
        assert [w.code for w in bundle.warnings] == ["empty_text"]

    def test_binary_garbage(self):
        bundle = _extract("\x00\x01\xff�퟿" * 50)
        assert bundle.dates == []
        assert bundle.contacts == []

    def test_non_string_text(self):
        with pytest.raises(TypeError):
            _extract(b"bytes are not text")

    def test_bad_options_type(self):
        with pytest.raises(TypeError):
            _extract("text", {"min_confidence": 0.5})

    def test_unknown_category(self):
        from models import ExtractionOptions
        with pytest.raises(ValueError):
            _extract("text", ExtractionOptions(categories=("moods",)))


# ═══════════════════════════════════════════
#  Options
# ═══════════════════════════════════════════
class TestOptions:
    def test_category_subset(self, gdpr_policy_text):
        from models import ExtractionOptions
        bundle = _extract(gdpr_policy_text, ExtractionOptions(categories=("dates",)))
        assert len(bundle.dates) == 1
        assert bundle.jurisdictions == []
        assert bundle.metadata.word_count > 0

    def test_min_confidence(self, gdpr_policy_text):
        from models import ExtractionOptions
        bundle = _extract(gdpr_policy_text, ExtractionOptions(min_confidence=0.9))
        for name in ("dates", "jurisdictions", "frameworks", "responsibilities", "timelines", "contacts"):
            assert all(e.confidence >= 0.9 for e in getattr(bundle, name))
        assert bundle.requirements == []

    def test_max_per_category(self, sample_policy_text):
        from models import ExtractionOptions
        bundle = _extract(sample_policy_text, ExtractionOptions(max_per_category=1))
        assert len(bundle.timelines) == 1
        assert len(bundle.contacts) == 1


# ═══════════════════════════════════════════
#  Caching and injected categories
# ═══════════════════════════════════════════
class TestCachingAndInjection:
    def test_cache_hit_equals_miss(self, sample_policy_text):
        from extraction_cache import InMemoryCache
        Extractor = _import_extractor()[0]
        cache = InMemoryCache()
        extractor = Extractor(cache=cache)
        first = extractor.extract_entities(sample_policy_text)
        second = extractor.extract_entities(sample_policy_text)
        fresh = _extract(sample_policy_text)
        assert second == first
        assert second is not first
        assert first.model_dump_json() == fresh.model_dump_json()
        assert len(cache) == 1

    def test_mutating_result_does_not_touch_cache(self, sample_policy_text):
        from extraction_cache import InMemoryCache
        Extractor = _import_extractor()[0]
        extractor = Extractor(cache=InMemoryCache())
        first = extractor.extract_entities(sample_policy_text)
        assert first.dates and first.contacts
        first.dates.clear()
        first.contacts.append(first.contacts[0])

        second = extractor.extract_entities(sample_policy_text)
        assert second.model_dump_json() == _extract(sample_policy_text).model_dump_json()

        second.jurisdictions.clear()
        third = extractor.extract_entities(sample_policy_text)
        assert third.jurisdictions

    def test_options_are_part_of_key(self, sample_policy_text):
        from extraction_cache import InMemoryCache
        from models import ExtractionOptions
        Extractor = _import_extractor()[0]
        cache = InMemoryCache()
        extractor = Extractor(cache=cache)
        extractor.extract_entities(sample_policy_text)
        extractor.extract_entities(sample_policy_text, ExtractionOptions(min_confidence=0.5))
        assert len(cache) == 2

    def test_custom_category(self):
        from models import FrameworkMention
        from extraction_cache import NullCache
        Extractor, PatternCategory, _ = _import_extractor()
        custom = PatternCategory(
            name="frameworks",
            patterns=(("acme_std", re.compile(r"\bACME-STD\b")),),
            entity=FrameworkMention,
            fields=lambda label, value, ctx: {"framework": label},
            confidence=lambda label, value, ctx: 0.5,
            window=10,
            keyed=True,
        )
        bundle = Extractor(categories=(custom,), cache=NullCache()).extract_entities("We follow ACME-STD.")
        assert [(f.framework, f.text, f.confidence) for f in bundle.frameworks] == [("acme_std", "ACME-STD", 0.5)]
        assert bundle.dates == []
