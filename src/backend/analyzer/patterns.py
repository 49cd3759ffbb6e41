"""
Regex catalogues and keyword tables used by the entity extractor and the
framework suggester.

Patterns that report only part of their match put that part in a named
group ``value``; everything else reports the whole match. Keyword
categories are case-insensitive, except the short jurisdiction acronyms
which must be written in capitals.
"""

import re
from dataclasses import dataclass, field
from typing import Callable

from rules_catalog import compile_trigger

IC = re.IGNORECASE

_MONTHS = r"(?:January|February|March|April|May|June|July|August|September|October|November|December)"
_NUMERIC_DATE = r"\d{1,2}[/\-.]\d{1,2}[/\-.]\d{4}"
_ISO_DATE = r"\d{4}[/\-.]\d{1,2}[/\-.]\d{1,2}"
_MONTH_DAY = _MONTHS + r"\s+\d{1,2}(?:st|nd|rd|th)?,?\s+\d{4}"
_DAY_MONTH = r"\d{1,2}(?:st|nd|rd|th)?\s+" + _MONTHS + r"\s+\d{4}"
_ANY_DATE = f"(?:{_ISO_DATE}|{_NUMERIC_DATE}|{_MONTH_DAY}|{_DAY_MONTH})"

# ---------- Dates ----------
DATE_PATTERNS = (
    ("numeric", re.compile(rf"\b{_NUMERIC_DATE}\b")),
    ("iso", re.compile(rf"\b{_ISO_DATE}\b")),
    ("month_day", re.compile(rf"\b{_MONTH_DAY}\b", IC)),
    ("day_month", re.compile(rf"\b{_DAY_MONTH}\b", IC)),
    ("contextual", re.compile(rf"\b(?:effective|implementation|compliance)\s+date:\s*(?P<value>{_ANY_DATE})\b", IC)),
    ("anchored", re.compile(r"\b(?:by|before|after|on|from)\s+(?P<value>[A-Za-z]+\s+\d{1,2},?\s+\d{4})\b", IC)),
    ("relative", re.compile(r"\b(?:within|in)\s+(?P<value>\d+\s+(?:days?|weeks?|months?|years?))\b", IC)),
)

# ---------- Jurisdictions ----------
JURISDICTION_PATTERNS = {
    "european_union": (
        re.compile(r"\b(?:european\s+union|european\s+economic\s+area|gdpr)\b", IC),
        re.compile(r"\bregulation\s+\(eu\)\s+2016/679\b", IC),
        re.compile(r"\b(?:EU|EEA)\b"),
    ),
    "united_states": (
        re.compile(r"\b(?:united\s+states|america|federal)\b", IC),
        re.compile(r"\b(?:hipaa|sox|sarbanes[\-\s]?oxley|cfr)\b", IC),
        re.compile(r"\b(?:USA|US)\b"),
    ),
    "california": (
        re.compile(r"\b(?:california\s+consumer\s+privacy\s+act|california|ccpa|cpra|calif)\b", IC),
        re.compile(r"\bCA\b"),
    ),
    "new_york": (
        re.compile(r"\b(?:new\s+york(?:\s+state)?|nydfs|nycrr)\b", IC),
        re.compile(r"\bNY\b"),
    ),
    "united_kingdom": (
        re.compile(r"\b(?:united\s+kingdom|britain|british|ico|data\s+protection\s+act)\b", IC),
        re.compile(r"\b(?:UK|DPA)\b"),
    ),
    "canada": (
        re.compile(r"\b(?:canada|canadian|pipeda|provincial|personal\s+information\s+protection)\b", IC),
    ),
    "australia": (
        re.compile(r"\b(?:australia|australian|privacy\s+act|oaic)\b", IC),
    ),
    "singapore": (
        re.compile(r"\b(?:personal\s+data\s+protection\s+act|singapore|singaporean|pdpa)\b", IC),
    ),
    "international": (
        re.compile(r"\b(?:international|global|worldwide|cross[\-\s]?border)\b", IC),
        re.compile(r"\biso\s+\d+\b", IC),
    ),
}

JURISDICTION_ABBREVIATIONS = {
    "european_union": {"eu", "eea"},
    "united_states": {"us", "usa"},
    "united_kingdom": {"uk"},
    "new_york": {"ny"},
    "california": {"ca"},
}

# ---------- Frameworks ----------
FRAMEWORK_PATTERNS = {
    "gdpr": (
        re.compile(r"\b(?:gdpr|general\s+data\s+protection\s+regulation|data\s+protection\s+directive)\b", IC),
        re.compile(r"\bregulation\s+\(eu\)\s+2016/679\b", IC),
    ),
    "hipaa": (
        re.compile(r"\b(?:hipaa|health\s+insurance\s+portability(?:\s+and\s+accountability\s+act)?)\b", IC),
        re.compile(r"\b(?:covered\s+entities|protected\s+health\s+information|phi)\b", IC),
    ),
    "sox": (
        re.compile(r"\b(?:sox|sarbanes[\-\s]?oxley)\b", IC),
        re.compile(r"\b(?:public\s+company\s+accounting\s+reform|section\s+404|internal\s+controls)\b", IC),
    ),
    "pci_dss": (
        re.compile(r"\b(?:pci[\-\s]dss|payment\s+card\s+industry)\b", IC),
        re.compile(r"\b(?:data\s+security\s+standard|cardholder\s+data)\b", IC),
    ),
    "iso_27001": (
        re.compile(r"\b(?:iso(?:/iec)?\s*27001)\b", IC),
        re.compile(r"\b(?:information\s+security\s+management\s+system|isms)\b", IC),
    ),
    "nist": (
        re.compile(r"\b(?:nist|national\s+institute\s+of\s+standards)\b", IC),
        re.compile(r"\b(?:cybersecurity\s+framework|csf)\b", IC),
        re.compile(r"\bsp\s+800[\-\s]?\d+\b", IC),
    ),
    "ccpa": (
        re.compile(r"\b(?:ccpa|california\s+consumer\s+privacy\s+act)\b", IC),
        re.compile(r"\b(?:cpra|california\s+privacy\s+rights\s+act)\b", IC),
    ),
    "coppa": (
        re.compile(r"\b(?:coppa|children['’]?s\s+online\s+privacy(?:\s+protection\s+act)?)\b", IC),
        re.compile(r"\bunder\s+13\b", IC),
    ),
    "ferpa": (
        re.compile(r"\b(?:ferpa|family\s+educational\s+rights(?:\s+and\s+privacy\s+act)?)\b", IC),
        re.compile(r"\beducational\s+records\b", IC),
    ),
    "glba": (
        re.compile(r"\b(?:glba|gramm[\-\s]?leach[\-\s]?bliley)\b", IC),
        re.compile(r"\bfinancial\s+services\s+modernization\b", IC),
    ),
    "can_spam": (
        re.compile(r"\b(?:can[\-\s]spam|controlling\s+the\s+assault\s+of\s+non-solicited)\b", IC),
    ),
    "fisma": (
        re.compile(r"\b(?:fisma|federal\s+information\s+security\s+(?:management|modernization)\s+act)\b", IC),
    ),
}

_ACRONYM = re.compile(r"[A-Z][A-Z0-9/]{1,9}")

# ---------- Responsibilities ----------
RESPONSIBILITY_PATTERNS = (
    re.compile(r"\b(?:data\s+protection\s+officer|dpo)\b", IC),
    re.compile(r"\b(?:chief\s+information\s+security\s+officer|ciso)\b", IC),
    re.compile(r"\b(?:chief\s+privacy\s+officer|cpo)\b", IC),
    re.compile(r"\b(?:compliance\s+officer|compliance\s+team)\b", IC),
    re.compile(r"\b(?:data\s+controller|controller)\b", IC),
    re.compile(r"\b(?:data\s+processor|processor)\b", IC),
    re.compile(r"\b(?:information\s+security\s+team|security\s+team)\b", IC),
    re.compile(r"\b(?:legal\s+department|legal\s+team)\b", IC),
    re.compile(r"\b(?:hr\s+department|human\s+resources)\b", IC),
    re.compile(r"\b(?:it\s+department|information\s+technology)\b", IC),
)

# ---------- Timelines ----------
TIMELINE_PATTERNS = (
    ("period", re.compile(r"\b(?:within|in)\s+\d+\s+(?:hours?|days?|weeks?|months?|years?)\b", IC)),
    ("deadline", re.compile(r"\b(?:no\s+later\s+than|by|before)\s+[^.\n]{1,50}\b", IC)),
    ("immediate", re.compile(r"\b(?:immediately|promptly|without\s+delay|forthwith)\b", IC)),
    ("recurring", re.compile(r"\b(?:annually|quarterly|monthly|weekly|daily)\b", IC)),
    ("fixed_window", re.compile(r"\b(?:72\s+hours?|24\s+hours?|30\s+days?)\b", IC)),
)

# ---------- Contacts ----------
CONTACT_PATTERNS = (
    ("email", re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")),
    ("phone", re.compile(r"(?<!\w)(?:\+?1[-.\s]?)?\(?[0-9]{3}\)?[-.\s]?[0-9]{3}[-.\s]?[0-9]{4}\b")),
    ("website", re.compile(r"\bhttps?://[^\s]+\b")),
)

CONTACT_CONFIDENCE = {"email": 0.9, "website": 0.85, "phone": 0.7}

# ---------- Requirements ----------
REQUIREMENT_PATTERNS = (
    ("obligation", re.compile(r"\b(?:must|shall|required\s+to|obligated\s+to|mandated)\s+[\w\s]{10,100}\b", IC)),
    ("prohibition", re.compile(r"\b(?:prohibited\s+from|forbidden\s+to|not\s+permitted)\s+[\w\s]{10,100}\b", IC)),
    ("verification", re.compile(r"\b(?:ensure\s+that|verify\s+that|confirm\s+that)\s+[\w\s]{10,100}\b", IC)),
)

RESPONSIBILITY_CONFIDENCE = 0.8
REQUIREMENT_CONFIDENCE = 0.75

# Context window (characters either side of the match) per category
CONTEXT_WINDOWS = {
    "dates": 100,
    "jurisdictions": 150,
    "frameworks": 150,
    "responsibilities": 120,
    "timelines": 120,
    "contacts": 80,
    "requirements": 200,
}


def get_context(text: str, position: int, window: int) -> str:
    start = max(0, position - window)
    return text[start:position + window].strip()


def _contains_any(haystack: str, needles) -> bool:
    return any(n in haystack for n in needles)


# ---------- Classification ----------
def classify_date(context: str) -> str:
    lower = context.lower()
    if _contains_any(lower, ("effective", "implementation")):
        return "effective_date"
    if _contains_any(lower, ("deadline", "due", "expire")):
        return "deadline"
    if _contains_any(lower, ("review", "audit")):
        return "review_date"
    if _contains_any(lower, ("training", "certification")):
        return "training_date"
    return "general_date"


def classify_timeline(text: str, context: str) -> str:
    if _contains_any(text.lower(), ("immediate", "prompt")):
        return "immediate"
    lower = context.lower()
    if _contains_any(lower, ("report", "notify")):
        return "notification_timeline"
    if _contains_any(lower, ("review", "audit")):
        return "review_timeline"
    if _contains_any(lower, ("training", "education")):
        return "training_timeline"
    return "general_timeline"


def classify_requirement(text: str) -> str:
    lower = text.lower()
    if _contains_any(lower, ("must", "shall")):
        return "mandatory"
    if _contains_any(lower, ("prohibited", "forbidden")):
        return "prohibition"
    if _contains_any(lower, ("ensure", "verify")):
        return "verification"
    return "general_requirement"


def classify_document(text: str) -> str:
    lower = text.lower()
    if _contains_any(lower, ("data protection", "privacy", "gdpr")):
        return "data_protection"
    if _contains_any(lower, ("security", "cybersecurity")):
        return "security"
    if _contains_any(lower, ("financial", "sox", "accounting")):
        return "financial"
    if _contains_any(lower, ("health", "hipaa", "medical")):
        return "healthcare"
    return "general_compliance"


def assess_urgency(text: str) -> str:
    lower = text.lower()
    if _contains_any(lower, ("immediate", "urgent", "critical")):
        return "high"
    if _contains_any(lower, ("soon", "prompt", "timely")):
        return "medium"
    return "normal"


# ---------- Confidence ----------
def date_confidence(text: str, context: str) -> float:
    confidence = 0.6
    if re.search(r"\d{4}-\d{2}-\d{2}", text):
        confidence += 0.2
    if re.search(r"\d{1,2}/\d{1,2}/\d{4}", text):
        confidence += 0.15
    lower = context.lower()
    if "effective" in lower:
        confidence += 0.15
    if "implementation" in lower:
        confidence += 0.1
    return round(min(0.95, confidence), 2)


def jurisdiction_confidence(text: str, jurisdiction: str) -> float:
    confidence = 0.7
    lower = " ".join(text.lower().split())
    if lower == jurisdiction.replace("_", " "):
        confidence += 0.2
    if lower in JURISDICTION_ABBREVIATIONS.get(jurisdiction, ()):
        confidence += 0.15
    return round(min(0.95, confidence), 2)


def framework_confidence(text: str, framework: str) -> float:
    confidence = 0.8
    if " ".join(text.lower().split()) == framework.replace("_", " "):
        confidence += 0.15
    if _ACRONYM.fullmatch(text):
        confidence += 0.1
    return round(min(0.95, confidence), 2)


def timeline_confidence(text: str) -> float:
    confidence = 0.6
    if re.search(r"\d+\s+(?:days?|weeks?|months?|years?)", text, IC):
        confidence += 0.2
    lower = " ".join(text.lower().split())
    if "72 hours" in lower or "24 hours" in lower:
        confidence += 0.25
    return round(min(0.9, confidence), 2)


# ---------- Framework suggestion ----------
JURISDICTION_FRAMEWORKS = {
    "european_union": ("gdpr",),
    "united_states": ("hipaa", "sox", "glba"),
    "california": ("ccpa",),
    "international": ("iso_27001", "nist"),
}

JURISDICTION_WEIGHT = 0.8


@dataclass(frozen=True)
class ContentHeuristic:
    """Suggest a framework when any of its keywords appears in the document."""

    framework: str
    keywords: tuple[str, ...]
    confidence: float
    reason: str

    def matches(self, text: str) -> bool:
        return _contains_any(text.lower(), self.keywords)


CONTENT_HEURISTICS = (
    ContentHeuristic("hipaa", ("health", "medical", "patient", "healthcare"), 0.7,
                     "Healthcare-related content detected"),
    ContentHeuristic("sox", ("financial", "accounting", "audit", "investor"), 0.6,
                     "Financial/accounting content detected"),
    ContentHeuristic("pci_dss", ("payment", "credit card", "cardholder", "transaction"), 0.8,
                     "Payment processing content detected"),
    ContentHeuristic("gdpr", ("personal data", "privacy", "data subject", "consent"), 0.7,
                     "Data protection/privacy content detected"),
    ContentHeuristic("iso_27001", ("information security", "cybersecurity", "security controls", "risk management"), 0.6,
                     "Information security content detected"),
    ContentHeuristic("coppa", ("children", "minor", "under 13", "parental consent"), 0.8,
                     "Children's data protection content detected"),
    ContentHeuristic("ferpa", ("student", "education records", "educational institution", "school"), 0.7,
                     "Student education records content detected"),
    ContentHeuristic("glba", ("financial institution", "nonpublic personal information", "bank"), 0.6,
                     "Financial institution customer data content detected"),
    ContentHeuristic("can_spam", ("commercial email", "email marketing", "unsubscribe"), 0.7,
                     "Commercial email marketing content detected"),
    ContentHeuristic("ccpa", ("california resident", "consumer privacy", "do not sell"), 0.7,
                     "California consumer privacy content detected"),
    ContentHeuristic("nist", ("critical infrastructure", "federal information system", "cyber risk"), 0.6,
                     "Cybersecurity risk management content detected"),
)


# ---------- Framework validation ----------
@dataclass
class ValidationOutcome:
    valid: bool = True
    missing_elements: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


Validator = Callable[[str, set[str]], ValidationOutcome]


def require_any(keywords: tuple[str, ...], missing_element: str) -> Validator:
    """Validator that invalidates the framework when none of the keywords occur as whole words."""
    triggers = [compile_trigger(k) for k in keywords]

    def check(text: str, jurisdictions: set[str]) -> ValidationOutcome:
        if any(t.search(text) for t in triggers):
            return ValidationOutcome()
        return ValidationOutcome(valid=False, missing_elements=[missing_element])
    return check


_PERSONAL_DATA = compile_trigger("personal data")


def validate_gdpr(text: str, jurisdictions: set[str]) -> ValidationOutcome:
    outcome = ValidationOutcome()
    if "european_union" not in jurisdictions:
        outcome.warnings.append("GDPR typically applies to EU jurisdiction")
    if not _PERSONAL_DATA.search(text):
        outcome.warnings.append("GDPR: no personal data definition found")
    return outcome


def validate_ccpa(text: str, jurisdictions: set[str]) -> ValidationOutcome:
    outcome = ValidationOutcome()
    if "california" not in jurisdictions:
        outcome.warnings.append("CCPA typically applies to California jurisdiction")
    return outcome


FRAMEWORK_VALIDATORS: dict[str, Validator] = {
    "gdpr": validate_gdpr,
    "ccpa": validate_ccpa,
    "hipaa": require_any(("health", "healthcare", "medical"), "healthcare context"),
    "pci_dss": require_any(("payment", "payments", "card", "cards", "cardholder"), "payment processing context"),
    "sox": require_any(("financial", "audit", "audits", "audited", "auditor", "auditors"), "financial/audit context"),
    "coppa": require_any(("children", "child", "minor", "minors", "under 13"), "children's data context"),
    "ferpa": require_any(("student", "students", "education", "educational"), "education records context"),
    "glba": require_any(("financial institution", "financial institutions", "bank", "banks", "banking",
                         "customer financial", "nonpublic personal information"),
                        "financial institution context"),
    "can_spam": require_any(("email", "emails", "e-mail", "e-mails"), "commercial email context"),
}


def suggestion_key(framework_id: str) -> str:
    """Lower-case key used by the suggester (``"PCI DSS"`` -> ``"pci_dss"``, ``"NIST_CSF"`` -> ``"nist"``)."""
    key = re.sub(r"[\s\-/]+", "_", framework_id.strip().lower())
    return {"nist_csf": "nist", "pci": "pci_dss", "iso27001": "iso_27001", "canspam": "can_spam"}.get(key, key)
