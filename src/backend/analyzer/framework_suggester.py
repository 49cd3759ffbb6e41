# framework_suggester.py
import logging
from typing import Mapping, Sequence

from models import (
    FrameworkSuggestion, SuggestionBundle, SuggestionOptions, ValidationBundle,
)
from patterns import (
    CONTENT_HEURISTICS, FRAMEWORK_VALIDATORS, JURISDICTION_FRAMEWORKS, JURISDICTION_WEIGHT,
    ContentHeuristic, Validator, suggestion_key,
)
from entity_extractor import EntityExtractor

logger = logging.getLogger(__name__)


class FrameworkSuggester:
    """
    Suggests frameworks from three sources, in priority order: explicit
    mentions, jurisdiction mapping, content keywords. A framework seen more
    than once keeps its highest confidence and its first reasoning string.
    """

    def __init__(
        self,
        extractor: EntityExtractor | None = None,
        jurisdiction_map: Mapping[str, Sequence[str]] = JURISDICTION_FRAMEWORKS,
        heuristics: Sequence[ContentHeuristic] = CONTENT_HEURISTICS,
        validators: Mapping[str, Validator] = FRAMEWORK_VALIDATORS,
    ):
        self.extractor = extractor or EntityExtractor()
        self.jurisdiction_map = jurisdiction_map
        self.heuristics = heuristics
        self.validators = validators

    def _candidates(self, text: str, frameworks, jurisdictions) -> list[FrameworkSuggestion]:
        found: list[FrameworkSuggestion] = []
        for mention in frameworks:
            found.append(FrameworkSuggestion(
                framework=mention.framework,
                confidence=mention.confidence,
                reasoning=f'Detected explicit mention: "{mention.text}"',
                source="explicit",
            ))
        for jurisdiction in jurisdictions:
            for fw in self.jurisdiction_map.get(jurisdiction.jurisdiction, ()):
                found.append(FrameworkSuggestion(
                    framework=fw,
                    confidence=round(jurisdiction.confidence * JURISDICTION_WEIGHT, 2),
                    reasoning=f'Jurisdiction "{jurisdiction.text}" suggests {fw}',
                    source="jurisdiction",
                ))
        for heuristic in self.heuristics:
            if heuristic.matches(text):
                found.append(FrameworkSuggestion(
                    framework=heuristic.framework,
                    confidence=heuristic.confidence,
                    reasoning=heuristic.reason,
                    source="content",
                ))
        return found

    @staticmethod
    def _merge(candidates: list[FrameworkSuggestion]) -> list[FrameworkSuggestion]:
        merged: dict[str, FrameworkSuggestion] = {}
        for c in candidates:
            first = merged.get(c.framework)
            if first is None:
                merged[c.framework] = c
            elif c.confidence > first.confidence:
                merged[c.framework] = first.model_copy(update={"confidence": c.confidence})
        # stable: ties keep first-discovered order
        return sorted(merged.values(), key=lambda s: -s.confidence)

    def suggest_frameworks(self, text: str, options: SuggestionOptions | None = None) -> SuggestionBundle:
        if not isinstance(text, str):
            raise TypeError("text must be a string")
        if options is None:
            options = SuggestionOptions()
        elif not isinstance(options, SuggestionOptions):
            raise TypeError("options must be a SuggestionOptions instance")

        entities = self.extractor.extract_entities(text)
        ranked = self._merge(self._candidates(text, entities.frameworks, entities.jurisdictions))
        ranked = [s for s in ranked if s.confidence >= options.min_confidence]
        if options.limit is not None:
            ranked = ranked[:options.limit]

        return SuggestionBundle(
            detected_frameworks=entities.frameworks,
            detected_jurisdictions=entities.jurisdictions,
            suggestions=ranked,
            suggested_frameworks=[s.framework for s in ranked],
            confidence_scores={s.framework: s.confidence for s in ranked},
            reasoning=[s.reasoning for s in ranked],
        )

    def validate_frameworks(self, framework_ids: Sequence[str], text: str) -> ValidationBundle:
        """
        Check each framework against the document. Frameworks without a
        validator are always valid; ids are reported exactly as given.
        """
        if isinstance(framework_ids, (str, bytes)) or not isinstance(framework_ids, (list, tuple)):
            raise TypeError("framework_ids must be a list or tuple of strings")
        if not all(isinstance(f, str) for f in framework_ids):
            raise TypeError("framework ids must be strings")
        if not isinstance(text, str):
            raise TypeError("text must be a string")

        entities = self.extractor.extract_entities(text)
        jurisdictions = {j.jurisdiction for j in entities.jurisdictions}

        valid: list[str] = []
        invalid: list[str] = []
        missing: dict[str, list[str]] = {}
        warnings: list[str] = []
        for framework in framework_ids:
            validator = self.validators.get(suggestion_key(framework))
            if validator is None:
                valid.append(framework)
                continue
            outcome = validator(text, jurisdictions)
            warnings.extend(outcome.warnings)
            if outcome.valid:
                valid.append(framework)
            else:
                logger.info("Framework %s does not fit document: missing %s", framework, outcome.missing_elements)
                invalid.append(framework)
                missing[framework] = outcome.missing_elements
        return ValidationBundle(
            valid_frameworks=valid,
            invalid_frameworks=invalid,
            missing_elements=missing,
            warnings=warnings,
        )
