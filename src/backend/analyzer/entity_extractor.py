# entity_extractor.py
import logging
import re
from dataclasses import dataclass
from typing import Callable

from models import (
    AnalysisWarning, ContactEntity, DateEntity, DocumentMetadata, EntityBase, EntityBundle,
    ExtractionOptions, FrameworkMention, JurisdictionEntity, RequirementEntity,
    ResponsibilityEntity, TimelineEntity,
)
from patterns import (
    CONTACT_CONFIDENCE, CONTACT_PATTERNS, CONTEXT_WINDOWS, DATE_PATTERNS, FRAMEWORK_PATTERNS,
    JURISDICTION_PATTERNS, REQUIREMENT_CONFIDENCE, REQUIREMENT_PATTERNS, RESPONSIBILITY_CONFIDENCE,
    RESPONSIBILITY_PATTERNS, TIMELINE_PATTERNS, assess_urgency, classify_date, classify_document,
    classify_requirement, classify_timeline, date_confidence, framework_confidence, get_context,
    jurisdiction_confidence, timeline_confidence,
)
from extraction_cache import ExtractionCache, InMemoryCache, make_cache_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatternCategory:
    """
    One entity category: its patterns plus how a match becomes an entity.

    ``fields`` returns the category-specific entity fields from
    ``(label, matched_text, context)``; ``confidence`` scores the same triple.
    With ``keyed`` set, the label is part of the dedup key so the same text
    can be reported once per label (e.g. per jurisdiction).
    """

    name: str
    patterns: tuple[tuple[str, re.Pattern], ...]
    entity: type[EntityBase]
    fields: Callable[[str, str, str], dict]
    confidence: Callable[[str, str, str], float]
    window: int
    keyed: bool = False

    def run(self, text: str) -> list[EntityBase]:
        found: list[EntityBase] = []
        seen: set[tuple[str, str]] = set()
        for label, pattern in self.patterns:
            use_group = "value" in pattern.groupindex
            for match in pattern.finditer(text):
                group = "value" if use_group and match.group("value") is not None else 0
                value = match.group(group).strip()
                if not value:
                    continue
                key = (label if self.keyed else "", value.lower())
                if key in seen:
                    continue
                seen.add(key)
                position = match.start(group)
                context = get_context(text, position, self.window)
                found.append(self.entity(
                    text=value,
                    context=context,
                    confidence=self.confidence(label, value, context),
                    position=position,
                    **self.fields(label, value, context),
                ))
        # stable: equal confidences keep discovery order
        found.sort(key=lambda e: -e.confidence)
        return found


def _labelled(table: dict) -> tuple[tuple[str, re.Pattern], ...]:
    return tuple((label, p) for label, patterns in table.items() for p in patterns)


DEFAULT_CATEGORIES = (
    PatternCategory(
        name="dates",
        patterns=DATE_PATTERNS,
        entity=DateEntity,
        fields=lambda label, value, ctx: {"type": classify_date(ctx)},
        confidence=lambda label, value, ctx: date_confidence(value, ctx),
        window=CONTEXT_WINDOWS["dates"],
    ),
    PatternCategory(
        name="jurisdictions",
        patterns=_labelled(JURISDICTION_PATTERNS),
        entity=JurisdictionEntity,
        fields=lambda label, value, ctx: {"jurisdiction": label},
        confidence=lambda label, value, ctx: jurisdiction_confidence(value, label),
        window=CONTEXT_WINDOWS["jurisdictions"],
        keyed=True,
    ),
    PatternCategory(
        name="frameworks",
        patterns=_labelled(FRAMEWORK_PATTERNS),
        entity=FrameworkMention,
        fields=lambda label, value, ctx: {"framework": label},
        confidence=lambda label, value, ctx: framework_confidence(value, label),
        window=CONTEXT_WINDOWS["frameworks"],
        keyed=True,
    ),
    PatternCategory(
        name="responsibilities",
        patterns=tuple(("role", p) for p in RESPONSIBILITY_PATTERNS),
        entity=ResponsibilityEntity,
        fields=lambda label, value, ctx: {"role": value},
        confidence=lambda label, value, ctx: RESPONSIBILITY_CONFIDENCE,
        window=CONTEXT_WINDOWS["responsibilities"],
    ),
    PatternCategory(
        name="timelines",
        patterns=TIMELINE_PATTERNS,
        entity=TimelineEntity,
        fields=lambda label, value, ctx: {"type": classify_timeline(value, ctx)},
        confidence=lambda label, value, ctx: timeline_confidence(value),
        window=CONTEXT_WINDOWS["timelines"],
    ),
    PatternCategory(
        name="contacts",
        patterns=CONTACT_PATTERNS,
        entity=ContactEntity,
        fields=lambda label, value, ctx: {"type": label},
        confidence=lambda label, value, ctx: CONTACT_CONFIDENCE[label],
        window=CONTEXT_WINDOWS["contacts"],
        keyed=True,
    ),
    PatternCategory(
        name="requirements",
        patterns=REQUIREMENT_PATTERNS,
        entity=RequirementEntity,
        fields=lambda label, value, ctx: {"type": classify_requirement(value)},
        confidence=lambda label, value, ctx: REQUIREMENT_CONFIDENCE,
        window=CONTEXT_WINDOWS["requirements"],
    ),
)

CATEGORY_NAMES = tuple(c.name for c in DEFAULT_CATEGORIES)


def extract_metadata(text: str) -> DocumentMetadata:
    """Word/sentence/paragraph statistics plus keyword-based type and urgency."""
    words = text.split()
    sentences = [s for s in re.split(r"[.!?]+", text) if s.strip()]
    paragraphs = [p for p in re.split(r"\n\s*\n", text) if p.strip()]

    average = len(words) / len(sentences) if sentences else 0.0
    readability = max(0.0, min(100.0, 100 - average * 2)) if sentences else 0.0
    complex_words = [w for w in words if len(w) > 6 and re.fullmatch(r"[A-Za-z]+", w)]
    complexity = len(complex_words) / len(words) * 100 if words else 0.0

    return DocumentMetadata(
        word_count=len(words),
        sentence_count=len(sentences),
        paragraph_count=len(paragraphs),
        average_words_per_sentence=round(average, 2),
        readability_score=round(readability, 2),
        complexity_score=round(complexity, 2),
        document_type=classify_document(text),
        urgency_level=assess_urgency(text),
    )


class EntityExtractor:
    def __init__(self, categories: tuple[PatternCategory, ...] = DEFAULT_CATEGORIES,
                 cache: ExtractionCache | None = None):
        self.categories = categories
        self.cache = cache if cache is not None else InMemoryCache()

    def extract_entities(self, text: str, options: ExtractionOptions | None = None) -> EntityBundle:
        if not isinstance(text, str):
            raise TypeError("text must be a string")
        if options is None:
            options = ExtractionOptions()
        elif not isinstance(options, ExtractionOptions):
            raise TypeError("options must be an ExtractionOptions instance")
        known = {c.name for c in self.categories}
        unknown = [name for name in options.categories or () if name not in known]
        if unknown:
            raise ValueError(f"Unknown entity categories: {', '.join(unknown)}")

        key = make_cache_key(text, options)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Entity cache hit for %s", key[:12])
            return cached.model_copy(deep=True)

        bundle = self._extract(text, options)
        # callers get their own copy; the cached bundle is never handed out
        self.cache.put(key, bundle.model_copy(deep=True))
        return bundle

    def _extract(self, text: str, options: ExtractionOptions) -> EntityBundle:
        selected = set(options.categories) if options.categories is not None else None
        results: dict[str, list] = {}
        for category in self.categories:
            if selected is not None and category.name not in selected:
                continue
            entities = [e for e in category.run(text) if e.confidence >= options.min_confidence]
            if options.max_per_category is not None:
                entities = entities[:options.max_per_category]
            results[category.name] = entities

        warnings = []
        if not text.strip():
            warnings.append(AnalysisWarning(code="empty_text", message="Document text is empty"))
        return EntityBundle(**results, metadata=extract_metadata(text), warnings=warnings)
