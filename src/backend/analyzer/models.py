from pydantic import BaseModel, ConfigDict, Field
from typing import Literal


Severity = Literal["Critical", "High", "Medium", "Low"]
Effort = Literal["Low", "Medium", "High"]
MaturityLevel = Literal["Basic", "Intermediate", "Advanced"]
BenchmarkStatus = Literal["excellent", "good", "average", "below-average", "poor", "critical"]
DocumentType = Literal["data_protection", "security", "financial", "healthcare", "general_compliance"]
UrgencyLevel = Literal["high", "medium", "normal"]
Priority = Literal["high", "medium", "low"]


class _Value(BaseModel):
    model_config = ConfigDict(frozen=True)


class AnalysisWarning(_Value):
    code: Literal[
        "empty_text", "unknown_framework", "duplicate_framework",
        "unknown_industry", "no_frameworks", "summary_unavailable",
    ]
    message: str


# ---------- Rule catalogue ----------
class ComplianceRule(_Value):
    rule_id: str
    requirement: str
    category: str
    weight: int = Field(gt=0)
    triggers: tuple[str, ...]
    patterns: tuple[str, ...] = ()
    remediation: str
    effort: Effort = "Medium"


class FrameworkRuleSet(_Value):
    framework_id: str
    name: str
    region: str = "Global"
    industry_relevance: dict[str, float] = {}
    rules: tuple[ComplianceRule, ...]

    @property
    def total_weight(self) -> int:
        return sum(r.weight for r in self.rules)

    def relevance_for(self, industry: str) -> float:
        return self.industry_relevance.get(industry, 1.0)


class IndustryBenchmark(_Value):
    name: str
    average: int = Field(ge=0, le=100)
    bottom_25: int = Field(ge=0, le=100)
    top_25: int = Field(ge=0, le=100)
    description: str = ""


# ---------- Benchmark results ----------
class Strength(_Value):
    rule_id: str
    requirement: str
    category: str
    weight: int
    evidence: list[str] = []


class Gap(_Value):
    rule_id: str
    requirement: str
    category: str
    weight: int
    severity: Severity
    business_impact: str
    timeframe: str
    effort: Effort
    remediation: str


class ScoreResult(_Value):
    framework_id: str
    framework_name: str
    score: int = Field(ge=0, le=100)
    maturity_level: MaturityLevel
    matched_weight: int
    total_weight: int
    strengths: list[Strength] = []
    gaps: list[Gap] = []


class Recommendation(_Value):
    priority: int = Field(ge=1)
    framework: str
    framework_name: str
    rule_id: str
    title: str
    criticality: Severity
    weight: int
    current_score: int
    target_score: int = 100
    business_impact: str
    timeframe: str
    estimated_effort: Effort
    recommendations: list[str] = []


class AggregateResult(_Value):
    status: Literal["ok", "no_frameworks"]
    industry: str
    average_score: int = Field(ge=0, le=100)
    industry_weighted_score: int = Field(ge=0, le=100)
    industry_benchmark: IndustryBenchmark
    benchmark_comparison: BenchmarkStatus
    difference: int
    estimated_percentile: int = Field(ge=0, le=100)
    benchmark_message: str
    critical_gaps: int = 0
    high_gaps: int = 0
    medium_gaps: int = 0
    low_gaps: int = 0
    total_strengths: int = 0
    evaluated_frameworks: list[str] = []
    ignored_frameworks: list[str] = []
    framework_results: dict[str, ScoreResult] = {}
    prioritized_recommendations: list[Recommendation] = []
    total_recommendations: int = 0
    warnings: list[AnalysisWarning] = []


# ---------- Extracted entities ----------
class EntityBase(_Value):
    text: str
    context: str
    confidence: float = Field(ge=0, le=1)
    position: int = Field(ge=0)


class DateEntity(EntityBase):
    kind: Literal["date"] = "date"
    type: Literal["effective_date", "deadline", "review_date", "training_date", "general_date"]


class JurisdictionEntity(EntityBase):
    kind: Literal["jurisdiction"] = "jurisdiction"
    jurisdiction: str


class FrameworkMention(EntityBase):
    kind: Literal["framework"] = "framework"
    framework: str


class ResponsibilityEntity(EntityBase):
    kind: Literal["responsibility"] = "responsibility"
    role: str


class TimelineEntity(EntityBase):
    kind: Literal["timeline"] = "timeline"
    type: Literal["immediate", "notification_timeline", "review_timeline", "training_timeline", "general_timeline"]


class ContactEntity(EntityBase):
    kind: Literal["contact"] = "contact"
    type: Literal["email", "phone", "website"]


class RequirementEntity(EntityBase):
    kind: Literal["requirement"] = "requirement"
    type: Literal["mandatory", "prohibition", "verification", "general_requirement"]


class DocumentMetadata(_Value):
    word_count: int = 0
    sentence_count: int = 0
    paragraph_count: int = 0
    average_words_per_sentence: float = 0.0
    readability_score: float = 0.0
    complexity_score: float = 0.0
    document_type: DocumentType = "general_compliance"
    urgency_level: UrgencyLevel = "normal"


class ExtractionOptions(_Value):
    categories: tuple[str, ...] | None = None
    min_confidence: float = Field(0.0, ge=0, le=1)
    max_per_category: int | None = Field(None, ge=1)


class EntityBundle(_Value):
    dates: list[DateEntity] = []
    jurisdictions: list[JurisdictionEntity] = []
    frameworks: list[FrameworkMention] = []
    responsibilities: list[ResponsibilityEntity] = []
    timelines: list[TimelineEntity] = []
    contacts: list[ContactEntity] = []
    requirements: list[RequirementEntity] = []
    metadata: DocumentMetadata = DocumentMetadata()
    warnings: list[AnalysisWarning] = []


# ---------- Framework suggestions ----------
class SuggestionOptions(_Value):
    min_confidence: float = Field(0.0, ge=0, le=1)
    limit: int | None = Field(None, ge=1)


class FrameworkSuggestion(_Value):
    framework: str
    confidence: float = Field(ge=0, le=1)
    reasoning: str
    source: Literal["explicit", "jurisdiction", "content"]


class SuggestionBundle(_Value):
    detected_frameworks: list[FrameworkMention] = []
    detected_jurisdictions: list[JurisdictionEntity] = []
    suggestions: list[FrameworkSuggestion] = []
    suggested_frameworks: list[str] = []
    confidence_scores: dict[str, float] = {}
    reasoning: list[str] = []


class ValidationBundle(_Value):
    valid_frameworks: list[str] = []
    invalid_frameworks: list[str] = []
    missing_elements: dict[str, list[str]] = {}
    warnings: list[str] = []


# ---------- Insights and completeness ----------
class EnhancementSuggestion(_Value):
    type: Literal["warning", "info", "alert"]
    message: str
    priority: Priority


class DocumentInsights(_Value):
    document_type: DocumentType = "general_compliance"
    urgency_level: UrgencyLevel = "normal"
    complexity: float = 0.0
    readability: float = 0.0
    word_count: int = 0
    key_dates: list[DateEntity] = []
    primary_jurisdictions: list[JurisdictionEntity] = []
    detected_frameworks: list[FrameworkMention] = []
    key_responsibilities: list[ResponsibilityEntity] = []
    critical_timelines: list[TimelineEntity] = []
    has_contact_info: bool = False
    contact_details: list[ContactEntity] = []
    enhancement_suggestions: list[EnhancementSuggestion] = []


class ComplianceAction(_Value):
    priority: Priority
    category: Literal["dates", "scope", "governance", "timelines", "contact", "frameworks"]
    message: str
    action: str


class CompletenessReport(_Value):
    has_effective_dates: bool = False
    has_jurisdictions: bool = False
    has_responsibilities: bool = False
    has_timelines: bool = False
    has_contact_info: bool = False
    required_frameworks: list[str] = []
    framework_coverage: float = Field(1.0, ge=0, le=1)
    missing_elements: dict[str, list[str]] = {}
    warnings: list[str] = []
    completeness_score: int = Field(0, ge=0, le=100)
    recommendations: list[ComplianceAction] = []


# ---------- Optional model summary ----------
class SummaryGap(BaseModel):
    issue: str
    severity: Literal["critical", "high", "medium", "low"] = "medium"
    framework: str = "General"
    business_impact: str = "Moderate impact"
    timeframe: str = "3-6 months"
    effort: str = "Medium"
    remediation: str = "Review and update policies"


class AnalysisSummary(BaseModel):
    source: Literal["model", "fallback"]
    summary: str
    gaps: list[SummaryGap] = []


class DocumentAnalysis(BaseModel):
    benchmark: AggregateResult
    entities: EntityBundle
    suggestions: SuggestionBundle
    validation: ValidationBundle
    insights: DocumentInsights
    completeness: CompletenessReport
    summary: AnalysisSummary | None = None
    warnings: list[AnalysisWarning] = []


# ---------- HTTP request bodies ----------
class BenchmarkRequest(BaseModel):
    text: str
    frameworks: list[str]
    industry: str = "Technology"
    top_n: int = Field(5, ge=1, le=50)


class EntitiesRequest(BaseModel):
    text: str
    options: ExtractionOptions | None = None


class SuggestRequest(BaseModel):
    text: str
    options: SuggestionOptions | None = None


class ValidateRequest(BaseModel):
    frameworks: list[str]
    text: str


class InsightsRequest(BaseModel):
    text: str


class CompletenessRequest(BaseModel):
    text: str
    frameworks: list[str] = []


class AnalyzeRequest(BaseModel):
    text: str
    frameworks: list[str] | None = None
    industry: str = "Technology"
    summarize: bool = False
