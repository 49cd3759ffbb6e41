"""
Static rule catalogue for the benchmarking engine.

Everything in this module is data: framework rule sets, industry benchmark
rows and the label tables used to turn weights and scores into severities,
maturity levels and benchmark bands. ``build_catalog()`` validates the raw
tables and returns a read-only ``RulesCatalog``; a broken table raises
``CatalogError`` when the catalogue is built, never while scoring.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from pydantic import ValidationError

from models import ComplianceRule, FrameworkRuleSet, IndustryBenchmark

EXPECTED_TOTAL_WEIGHT = 100


class CatalogError(RuntimeError):
    """A rule or benchmark table is malformed."""


# ---------- Label tables ----------
# (minimum weight, severity), highest first
SEVERITY_TIERS = ((20, "Critical"), (14, "High"), (8, "Medium"), (0, "Low"))

SEVERITY_RANK = {"Critical": 4, "High": 3, "Medium": 2, "Low": 1}

TIMEFRAMES = {
    "Critical": "0-30 days",
    "High": "1-3 months",
    "Medium": "3-6 months",
    "Low": "6-12 months",
}

# (minimum score, maturity), highest first; anything below is Basic
MATURITY_THRESHOLDS = (("Advanced", 80), ("Intermediate", 50))

# (label, lower bound, lower bound inclusive), checked top-down on
# score - industry average; anything below the last band is "critical"
BENCHMARK_BANDS = (
    ("excellent", 15, False),
    ("good", 5, False),
    ("average", -5, True),
    ("below-average", -15, True),
    ("poor", -25, True),
)

DEFAULT_IMPACT = "Weakens the overall compliance posture and increases regulatory exposure."

CATEGORY_IMPACTS = {
    "governance": "Processing without a documented basis exposes the organisation to the highest tier of regulatory fines.",
    "data subject rights": "Unanswered individual requests lead to complaints, regulator investigations and statutory penalties.",
    "breach notification": "Late or missing breach disclosure multiplies fines and reputational damage.",
    "consent": "Invalid consent makes dependent processing unlawful and may require deleting collected data.",
    "accountability": "Missing accountability roles leave compliance obligations unowned and unevidenced.",
    "risk assessment": "Unassessed risks go untreated and are treated by auditors as a control failure.",
    "data retention": "Over-retention enlarges breach impact and breaches storage-limitation duties.",
    "international transfers": "Unsupported transfers can be suspended by regulators, disrupting operations.",
    "security safeguards": "Weak safeguards increase breach likelihood and the cost of any incident.",
    "access control": "Excessive access enables insider misuse and unauthorised disclosure.",
    "vendor management": "Third-party failures become your liability when contracts and oversight are missing.",
    "training": "Untrained staff are the leading cause of preventable incidents.",
    "audit and monitoring": "Without logs and monitoring, incidents go undetected and controls cannot be evidenced.",
    "financial controls": "Control deficiencies must be disclosed and can trigger restatements and executive liability.",
    "records management": "Missing records prevent demonstrating compliance during audits or litigation.",
    "transparency": "Incomplete notices mislead individuals and are a frequent enforcement target.",
    "payment security": "Cardholder data compromise leads to fines, higher fees or loss of card processing ability.",
    "incident response": "Unprepared response lengthens outages and increases breach costs.",
    "business continuity": "Disruptions last longer and critical services may be unrecoverable.",
    "marketing communications": "Each non-compliant message can carry a separate statutory penalty.",
    "children's privacy": "Collecting children's data without safeguards carries per-violation civil penalties.",
}


# ---------- Framework rule tables ----------
FRAMEWORK_DEFINITIONS = {
    "GDPR": {
        "name": "General Data Protection Regulation",
        "region": "European Union",
        "industry_relevance": {"Technology": 1.2, "Retail": 1.1, "Healthcare": 1.1},
        "rules": [
            {
                "rule_id": "GDPR-01",
                "requirement": "Document a lawful basis for every processing activity",
                "category": "governance",
                "weight": 20,
                "triggers": ["lawful basis", "legal basis", "legitimate interest", "lawfulness of processing"],
                "remediation": "Build a record of processing activities and map each activity to an Article 6 lawful basis.",
                "effort": "High",
            },
            {
                "rule_id": "GDPR-02",
                "requirement": "Support data subject rights (access, rectification, erasure, portability)",
                "category": "data subject rights",
                "weight": 18,
                "triggers": [
                    "right of access", "right to erasure", "right to be forgotten",
                    "data portability", "right to rectification", "data subject request",
                ],
                "remediation": "Publish a data subject request procedure with a one-month response deadline and an intake channel.",
                "effort": "Medium",
            },
            {
                "rule_id": "GDPR-03",
                "requirement": "Notify the supervisory authority of personal data breaches within 72 hours",
                "category": "breach notification",
                "weight": 15,
                "triggers": ["72 hours", "breach notification", "notify the supervisory authority"],
                "remediation": "Add a breach response runbook that assesses and reports qualifying breaches within 72 hours.",
                "effort": "Medium",
            },
            {
                "rule_id": "GDPR-04",
                "requirement": "Collect, record and allow withdrawal of consent",
                "category": "consent",
                "weight": 14,
                "triggers": ["consent", "withdraw consent", "opt-in"],
                "remediation": "Capture granular opt-in consent, keep consent records and offer withdrawal as easily as it was given.",
                "effort": "Medium",
            },
            {
                "rule_id": "GDPR-05",
                "requirement": "Appoint a Data Protection Officer where required",
                "category": "accountability",
                "weight": 12,
                "triggers": ["data protection officer", "DPO"],
                "remediation": "Designate a DPO, publish their contact details and register them with the lead authority.",
                "effort": "Low",
            },
            {
                "rule_id": "GDPR-06",
                "requirement": "Carry out Data Protection Impact Assessments for high-risk processing",
                "category": "risk assessment",
                "weight": 8,
                "triggers": ["data protection impact assessment", "DPIA", "impact assessment"],
                "remediation": "Define DPIA screening criteria and run assessments before launching high-risk processing.",
                "effort": "Medium",
            },
            {
                "rule_id": "GDPR-07",
                "requirement": "Define retention periods and storage limitation",
                "category": "data retention",
                "weight": 8,
                "triggers": ["retention period", "data retention", "storage limitation"],
                "remediation": "Publish a retention schedule per data category and automate deletion at end of life.",
                "effort": "Medium",
            },
            {
                "rule_id": "GDPR-08",
                "requirement": "Safeguard international transfers of personal data",
                "category": "international transfers",
                "weight": 5,
                "triggers": [
                    "standard contractual clauses", "international transfer",
                    "adequacy decision", "cross-border transfer",
                ],
                "remediation": "Use standard contractual clauses and transfer impact assessments for transfers outside the EEA.",
                "effort": "Medium",
            },
        ],
    },
    "HIPAA": {
        "name": "Health Insurance Portability and Accountability Act",
        "region": "United States",
        "industry_relevance": {"Healthcare": 1.5, "Insurance": 1.2},
        "rules": [
            {
                "rule_id": "HIPAA-01",
                "requirement": "Apply administrative, physical and technical safeguards to protected health information",
                "category": "security safeguards",
                "weight": 20,
                "triggers": ["protected health information", "PHI", "ePHI"],
                "remediation": "Inventory systems holding PHI and document the safeguards applied to each.",
                "effort": "High",
            },
            {
                "rule_id": "HIPAA-02",
                "requirement": "Perform a periodic security risk analysis",
                "category": "risk assessment",
                "weight": 18,
                "triggers": ["risk analysis", "risk assessment"],
                "remediation": "Run an enterprise-wide security risk analysis at least annually and track remediation.",
                "effort": "Medium",
            },
            {
                "rule_id": "HIPAA-03",
                "requirement": "Enforce access controls and audit controls on systems containing ePHI",
                "category": "access control",
                "weight": 15,
                "triggers": ["access control", "audit controls", "audit log", "unique user identification"],
                "remediation": "Assign unique user IDs, enforce role-based access and review access logs regularly.",
                "effort": "Medium",
            },
            {
                "rule_id": "HIPAA-04",
                "requirement": "Notify affected individuals of breaches within 60 days",
                "category": "breach notification",
                "weight": 14,
                "triggers": ["breach notification", "60 days"],
                "remediation": "Document breach notification procedures covering individuals, HHS and media where required.",
                "effort": "Low",
            },
            {
                "rule_id": "HIPAA-05",
                "requirement": "Execute business associate agreements with vendors handling PHI",
                "category": "vendor management",
                "weight": 12,
                "triggers": ["business associate agreement", "business associate", "BAA"],
                "remediation": "Identify all business associates and execute compliant BAAs before sharing PHI.",
                "effort": "Low",
            },
            {
                "rule_id": "HIPAA-06",
                "requirement": "Train the workforce on privacy and security policies",
                "category": "training",
                "weight": 8,
                "triggers": ["security awareness training", "workforce training", "HIPAA training"],
                "remediation": "Deliver HIPAA training at onboarding and annually, and keep attendance records.",
                "effort": "Low",
            },
            {
                "rule_id": "HIPAA-07",
                "requirement": "Limit uses and disclosures to the minimum necessary",
                "category": "governance",
                "weight": 8,
                "triggers": ["minimum necessary"],
                "remediation": "Define minimum necessary standards per role and apply them to routine disclosures.",
                "effort": "Medium",
            },
            {
                "rule_id": "HIPAA-08",
                "requirement": "Designate privacy and security officials",
                "category": "accountability",
                "weight": 5,
                "triggers": ["privacy officer", "security officer"],
                "remediation": "Name a privacy officer and a security officer with documented responsibilities.",
                "effort": "Low",
            },
        ],
    },
    "SOX": {
        "name": "Sarbanes-Oxley Act",
        "region": "United States",
        "industry_relevance": {"Financial Services": 1.5, "Insurance": 1.3, "Energy": 1.1},
        "rules": [
            {
                "rule_id": "SOX-01",
                "requirement": "Maintain internal control over financial reporting",
                "category": "financial controls",
                "weight": 20,
                "triggers": ["internal control over financial reporting", "ICFR", "internal controls"],
                "remediation": "Document key financial controls, owners and test procedures in a controls matrix.",
                "effort": "High",
            },
            {
                "rule_id": "SOX-02",
                "requirement": "Require management certification of financial reports",
                "category": "accountability",
                "weight": 18,
                "triggers": ["management certification", "section 302", "CEO and CFO", "certify"],
                "remediation": "Establish a sub-certification process feeding the CEO and CFO quarterly certifications.",
                "effort": "Medium",
            },
            {
                "rule_id": "SOX-03",
                "requirement": "Keep tamper-evident audit trails for financial systems",
                "category": "audit and monitoring",
                "weight": 15,
                "triggers": ["audit trail", "audit log"],
                "remediation": "Enable immutable audit logging on financial applications and review exceptions monthly.",
                "effort": "Medium",
            },
            {
                "rule_id": "SOX-04",
                "requirement": "Control changes to financial systems",
                "category": "financial controls",
                "weight": 14,
                "triggers": ["change management", "change control"],
                "remediation": "Require approved, tested and documented changes for systems in SOX scope.",
                "effort": "Medium",
            },
            {
                "rule_id": "SOX-05",
                "requirement": "Enforce segregation of duties",
                "category": "access control",
                "weight": 12,
                "triggers": ["segregation of duties", "separation of duties"],
                "remediation": "Build a conflict matrix and remove incompatible role combinations.",
                "effort": "Medium",
            },
            {
                "rule_id": "SOX-06",
                "requirement": "Retain audit work papers and financial records for seven years",
                "category": "records management",
                "weight": 8,
                "triggers": ["seven years", "7 years", "record retention"],
                "remediation": "Set a seven-year retention rule for audit evidence and financial records.",
                "effort": "Low",
            },
            {
                "rule_id": "SOX-07",
                "requirement": "Provide a confidential whistleblower channel",
                "category": "governance",
                "weight": 8,
                "triggers": ["whistleblower", "anonymous reporting", "ethics hotline"],
                "remediation": "Offer an anonymous reporting hotline overseen by the audit committee.",
                "effort": "Low",
            },
            {
                "rule_id": "SOX-08",
                "requirement": "Maintain an independent audit committee and external auditor",
                "category": "governance",
                "weight": 5,
                "triggers": ["audit committee", "external auditor", "independent auditor"],
                "remediation": "Charter an independent audit committee responsible for the external auditor relationship.",
                "effort": "Medium",
            },
        ],
    },
    "CCPA": {
        "name": "California Consumer Privacy Act",
        "region": "California",
        "industry_relevance": {"Retail": 1.3, "Technology": 1.2},
        "rules": [
            {
                "rule_id": "CCPA-01",
                "requirement": "Honour the consumer right to know what personal information is collected",
                "category": "data subject rights",
                "weight": 20,
                "triggers": ["right to know", "categories of personal information"],
                "remediation": "Disclose collected categories, sources and purposes and answer right-to-know requests within 45 days.",
                "effort": "Medium",
            },
            {
                "rule_id": "CCPA-02",
                "requirement": "Honour consumer deletion requests",
                "category": "data subject rights",
                "weight": 18,
                "triggers": ["right to delete", "deletion request", "request deletion"],
                "remediation": "Implement a deletion workflow that propagates to service providers.",
                "effort": "Medium",
            },
            {
                "rule_id": "CCPA-03",
                "requirement": "Offer an opt-out of the sale or sharing of personal information",
                "category": "consent",
                "weight": 20,
                "triggers": ["do not sell", "opt-out", "opt out", "sale of personal information"],
                "remediation": "Add a 'Do Not Sell or Share My Personal Information' link and honour Global Privacy Control signals.",
                "effort": "Medium",
            },
            {
                "rule_id": "CCPA-04",
                "requirement": "Do not discriminate against consumers exercising their rights",
                "category": "data subject rights",
                "weight": 14,
                "triggers": ["non-discrimination", "not discriminate"],
                "remediation": "State a non-discrimination commitment and review loyalty programs for financial incentive notices.",
                "effort": "Low",
            },
            {
                "rule_id": "CCPA-05",
                "requirement": "Provide a notice at collection and a privacy policy",
                "category": "transparency",
                "weight": 12,
                "triggers": ["notice at collection", "privacy notice", "privacy policy"],
                "remediation": "Publish a notice at collection and update the privacy policy at least every 12 months.",
                "effort": "Low",
            },
            {
                "rule_id": "CCPA-06",
                "requirement": "Verify the identity of consumers making requests",
                "category": "data subject rights",
                "weight": 8,
                "triggers": ["verifiable consumer request", "verify the identity", "identity verification"],
                "remediation": "Define identity verification steps proportionate to the sensitivity of the request.",
                "effort": "Low",
            },
            {
                "rule_id": "CCPA-07",
                "requirement": "Bind service providers by contract",
                "category": "vendor management",
                "weight": 8,
                "triggers": ["service provider", "contractor agreement"],
                "remediation": "Add CCPA service provider terms restricting use of personal information to the business purpose.",
                "effort": "Low",
            },
        ],
    },
    "PCI_DSS": {
        "name": "Payment Card Industry Data Security Standard",
        "region": "Global",
        "industry_relevance": {"Retail": 1.5, "Financial Services": 1.3, "Technology": 1.1},
        "rules": [
            {
                "rule_id": "PCI-01",
                "requirement": "Protect stored cardholder data",
                "category": "payment security",
                "weight": 20,
                "triggers": ["cardholder data", "primary account number", "PAN", "tokenization"],
                "remediation": "Minimise stored cardholder data and render PAN unreadable with tokenization or strong encryption.",
                "effort": "High",
            },
            {
                "rule_id": "PCI-02",
                "requirement": "Encrypt cardholder data in transit over open networks",
                "category": "security safeguards",
                "weight": 18,
                "triggers": ["encryption", "encrypt", "TLS"],
                "remediation": "Enforce TLS 1.2+ for every channel carrying cardholder data.",
                "effort": "Medium",
            },
            {
                "rule_id": "PCI-03",
                "requirement": "Install and maintain network security controls",
                "category": "security safeguards",
                "weight": 15,
                "triggers": ["firewall", "network segmentation", "network security controls"],
                "remediation": "Segment the cardholder data environment and review firewall rules every six months.",
                "effort": "Medium",
            },
            {
                "rule_id": "PCI-04",
                "requirement": "Run vulnerability scans and penetration tests",
                "category": "risk assessment",
                "weight": 14,
                "triggers": ["vulnerability scan", "penetration test", "penetration testing", "patch management"],
                "remediation": "Schedule quarterly ASV scans and annual penetration tests, and patch critical findings within 30 days.",
                "effort": "Medium",
            },
            {
                "rule_id": "PCI-05",
                "requirement": "Restrict access by need to know and require multi-factor authentication",
                "category": "access control",
                "weight": 12,
                "triggers": ["multi-factor authentication", "MFA", "need to know", "need-to-know"],
                "remediation": "Require MFA for all access into the cardholder data environment.",
                "effort": "Medium",
            },
            {
                "rule_id": "PCI-06",
                "requirement": "Log and monitor all access to cardholder data",
                "category": "audit and monitoring",
                "weight": 8,
                "triggers": ["logging", "log monitoring", "audit log"],
                "remediation": "Centralise logs, review them daily and keep them for at least 12 months.",
                "effort": "Medium",
            },
            {
                "rule_id": "PCI-07",
                "requirement": "Maintain an information security policy and awareness program",
                "category": "training",
                "weight": 8,
                "triggers": ["information security policy", "security awareness"],
                "remediation": "Publish the security policy and run annual security awareness training.",
                "effort": "Low",
            },
            {
                "rule_id": "PCI-08",
                "requirement": "Maintain an incident response plan",
                "category": "incident response",
                "weight": 5,
                "triggers": ["incident response plan", "incident response"],
                "remediation": "Write and test an incident response plan that includes card brand notification.",
                "effort": "Low",
            },
        ],
    },
    "ISO_27001": {
        "name": "ISO/IEC 27001 Information Security Management",
        "region": "International",
        "industry_relevance": {"Technology": 1.3, "Telecommunications": 1.2, "Manufacturing": 1.1},
        "rules": [
            {
                "rule_id": "ISO-01",
                "requirement": "Define the ISMS scope and information security policy",
                "category": "governance",
                "weight": 20,
                "triggers": ["information security management system", "ISMS", "information security policy"],
                "remediation": "Document the ISMS scope, context and a top-level information security policy.",
                "effort": "Medium",
            },
            {
                "rule_id": "ISO-02",
                "requirement": "Perform risk assessment and risk treatment",
                "category": "risk assessment",
                "weight": 18,
                "triggers": ["risk assessment", "risk treatment", "statement of applicability"],
                "remediation": "Adopt a risk methodology, maintain a risk register and a Statement of Applicability.",
                "effort": "High",
            },
            {
                "rule_id": "ISO-03",
                "requirement": "Demonstrate leadership commitment and assign roles",
                "category": "accountability",
                "weight": 15,
                "triggers": ["top management", "management commitment", "roles and responsibilities"],
                "remediation": "Record top management commitment and assign ISMS roles and responsibilities.",
                "effort": "Low",
            },
            {
                "rule_id": "ISO-04",
                "requirement": "Inventory and classify information assets",
                "category": "security safeguards",
                "weight": 14,
                "triggers": ["asset inventory", "asset management", "information classification"],
                "remediation": "Maintain an asset inventory with owners and a classification scheme.",
                "effort": "Medium",
            },
            {
                "rule_id": "ISO-05",
                "requirement": "Conduct internal audits and management reviews",
                "category": "audit and monitoring",
                "weight": 12,
                "triggers": ["internal audit", "management review"],
                "remediation": "Plan an internal audit programme and hold management reviews at least annually.",
                "effort": "Medium",
            },
            {
                "rule_id": "ISO-06",
                "requirement": "Drive continual improvement and corrective action",
                "category": "governance",
                "weight": 8,
                "triggers": ["continual improvement", "corrective action", "nonconformity"],
                "remediation": "Track nonconformities to closure with root-cause analysis.",
                "effort": "Low",
            },
            {
                "rule_id": "ISO-07",
                "requirement": "Manage information security in supplier relationships",
                "category": "vendor management",
                "weight": 8,
                "triggers": ["supplier", "third-party risk", "vendor management"],
                "remediation": "Assess suppliers before onboarding and include security clauses in agreements.",
                "effort": "Medium",
            },
            {
                "rule_id": "ISO-08",
                "requirement": "Plan for business continuity",
                "category": "business continuity",
                "weight": 5,
                "triggers": ["business continuity", "disaster recovery"],
                "remediation": "Maintain and exercise business continuity and disaster recovery plans.",
                "effort": "Medium",
            },
        ],
    },
    "FERPA": {
        "name": "Family Educational Rights and Privacy Act",
        "region": "United States",
        "industry_relevance": {"Education": 1.5},
        "rules": [
            {
                "rule_id": "FERPA-01",
                "requirement": "Obtain written consent before disclosing education records",
                "category": "consent",
                "weight": 20,
                "triggers": ["written consent", "prior written consent", "signed consent"],
                "remediation": "Require signed, dated consent specifying records, purpose and recipient before disclosure.",
                "effort": "Low",
            },
            {
                "rule_id": "FERPA-02",
                "requirement": "Allow parents and eligible students to inspect and review records",
                "category": "data subject rights",
                "weight": 18,
                "triggers": ["inspect and review", "right to inspect", "access to education records"],
                "remediation": "Provide record access within 45 days of a request.",
                "effort": "Low",
            },
            {
                "rule_id": "FERPA-03",
                "requirement": "Provide a process to request amendment of records",
                "category": "data subject rights",
                "weight": 15,
                "triggers": ["request amendment", "amendment of records", "hearing"],
                "remediation": "Document the amendment request and hearing procedure.",
                "effort": "Low",
            },
            {
                "rule_id": "FERPA-04",
                "requirement": "Define directory information and the opt-out process",
                "category": "transparency",
                "weight": 14,
                "triggers": ["directory information"],
                "remediation": "Publish directory information categories and how to opt out of their disclosure.",
                "effort": "Low",
            },
            {
                "rule_id": "FERPA-05",
                "requirement": "Send an annual notification of FERPA rights",
                "category": "transparency",
                "weight": 12,
                "triggers": ["annual notification", "annual notice", "notify students annually"],
                "remediation": "Issue an annual rights notice to parents and eligible students.",
                "effort": "Low",
            },
            {
                "rule_id": "FERPA-06",
                "requirement": "Limit access to school officials with legitimate educational interest",
                "category": "access control",
                "weight": 8,
                "triggers": ["legitimate educational interest", "school official"],
                "remediation": "Define who counts as a school official and what constitutes a legitimate educational interest.",
                "effort": "Low",
            },
            {
                "rule_id": "FERPA-07",
                "requirement": "Keep a record of disclosures",
                "category": "records management",
                "weight": 8,
                "triggers": ["record of disclosures", "disclosure log", "record of each request"],
                "remediation": "Log every request for and disclosure of education records.",
                "effort": "Low",
            },
            {
                "rule_id": "FERPA-08",
                "requirement": "Protect student data held in systems and by vendors",
                "category": "security safeguards",
                "weight": 5,
                "triggers": ["student data", "safeguard student records"],
                "remediation": "Apply access controls and vendor terms to systems holding student data.",
                "effort": "Medium",
            },
        ],
    },
    "GLBA": {
        "name": "Gramm-Leach-Bliley Act",
        "region": "United States",
        "industry_relevance": {"Financial Services": 1.5, "Insurance": 1.3},
        "rules": [
            {
                "rule_id": "GLBA-01",
                "requirement": "Deliver initial and annual privacy notices to customers",
                "category": "transparency",
                "weight": 20,
                "triggers": ["privacy notice", "initial privacy notice", "annual privacy notice"],
                "remediation": "Deliver a privacy notice at account opening and annually where required.",
                "effort": "Low",
            },
            {
                "rule_id": "GLBA-02",
                "requirement": "Maintain a written information security program",
                "category": "security safeguards",
                "weight": 18,
                "triggers": ["information security program", "written information security", "safeguards rule"],
                "remediation": "Document a written information security program meeting the Safeguards Rule elements.",
                "effort": "High",
            },
            {
                "rule_id": "GLBA-03",
                "requirement": "Offer an opt-out before sharing with nonaffiliated third parties",
                "category": "consent",
                "weight": 15,
                "triggers": ["nonaffiliated third parties", "opt out", "opt-out"],
                "remediation": "Provide a reasonable opt-out method before sharing nonpublic personal information.",
                "effort": "Low",
            },
            {
                "rule_id": "GLBA-04",
                "requirement": "Designate a qualified individual to oversee the program",
                "category": "accountability",
                "weight": 14,
                "triggers": ["qualified individual", "program coordinator", "designated coordinator"],
                "remediation": "Appoint a qualified individual who reports to the board at least annually.",
                "effort": "Low",
            },
            {
                "rule_id": "GLBA-05",
                "requirement": "Base safeguards on a written risk assessment",
                "category": "risk assessment",
                "weight": 12,
                "triggers": ["risk assessment"],
                "remediation": "Perform and document a written risk assessment of customer information.",
                "effort": "Medium",
            },
            {
                "rule_id": "GLBA-06",
                "requirement": "Oversee service providers handling customer information",
                "category": "vendor management",
                "weight": 8,
                "triggers": ["service provider", "vendor oversight"],
                "remediation": "Select capable service providers, require safeguards by contract and assess them periodically.",
                "effort": "Medium",
            },
            {
                "rule_id": "GLBA-07",
                "requirement": "Encrypt customer information at rest and in transit",
                "category": "security safeguards",
                "weight": 8,
                "triggers": ["encryption", "encrypt customer information"],
                "remediation": "Encrypt customer information in transit and at rest.",
                "effort": "Medium",
            },
            {
                "rule_id": "GLBA-08",
                "requirement": "Protect against pretexting",
                "category": "training",
                "weight": 5,
                "triggers": ["pretexting", "social engineering"],
                "remediation": "Train staff to detect pretexting and verify callers before disclosing information.",
                "effort": "Low",
            },
        ],
    },
    "COPPA": {
        "name": "Children's Online Privacy Protection Act",
        "region": "United States",
        "industry_relevance": {"Education": 1.3, "Technology": 1.1},
        "rules": [
            {
                "rule_id": "COPPA-01",
                "requirement": "Obtain verifiable parental consent before collecting children's data",
                "category": "children's privacy",
                "weight": 20,
                "triggers": ["verifiable parental consent", "parental consent"],
                "remediation": "Implement an approved verifiable parental consent method before any collection from children under 13.",
                "effort": "High",
            },
            {
                "rule_id": "COPPA-02",
                "requirement": "Provide direct notice to parents and an online privacy policy",
                "category": "transparency",
                "weight": 18,
                "triggers": ["notice to parents", "direct notice", "privacy policy"],
                "remediation": "Send direct notice to parents and publish a children's privacy policy.",
                "effort": "Low",
            },
            {
                "rule_id": "COPPA-03",
                "requirement": "Let parents review and delete their child's information",
                "category": "children's privacy",
                "weight": 15,
                "triggers": ["parental review", "parental access", "parent may review"],
                "remediation": "Offer parents a way to review, delete and refuse further collection of their child's data.",
                "effort": "Medium",
            },
            {
                "rule_id": "COPPA-04",
                "requirement": "Collect only what is reasonably necessary",
                "category": "children's privacy",
                "weight": 14,
                "triggers": ["data minimization", "reasonably necessary", "collect only"],
                "remediation": "Do not condition participation on collecting more data than reasonably necessary.",
                "effort": "Low",
            },
            {
                "rule_id": "COPPA-05",
                "requirement": "Screen users by age",
                "category": "children's privacy",
                "weight": 12,
                "triggers": ["age verification", "age screening", "age gate", "under 13"],
                "remediation": "Add a neutral age screen and route users under 13 into the consent flow.",
                "effort": "Medium",
            },
            {
                "rule_id": "COPPA-06",
                "requirement": "Keep children's information confidential and secure",
                "category": "security safeguards",
                "weight": 8,
                "triggers": ["reasonable security", "protect the confidentiality"],
                "remediation": "Apply a written security program to children's personal information.",
                "effort": "Medium",
            },
            {
                "rule_id": "COPPA-07",
                "requirement": "Retain children's information only as long as necessary",
                "category": "data retention",
                "weight": 8,
                "triggers": ["retention", "deletion"],
                "remediation": "Publish a written retention policy for children's data and delete it once the purpose ends.",
                "effort": "Low",
            },
            {
                "rule_id": "COPPA-08",
                "requirement": "Control disclosures to third parties",
                "category": "vendor management",
                "weight": 5,
                "triggers": ["third-party disclosure", "third parties"],
                "remediation": "Disclose children's data to third parties only with consent and contractual safeguards.",
                "effort": "Low",
            },
        ],
    },
    "NIST_CSF": {
        "name": "NIST Cybersecurity Framework",
        "region": "United States",
        "industry_relevance": {"Government": 1.3, "Energy": 1.3, "Technology": 1.1},
        "rules": [
            {
                "rule_id": "NIST-01",
                "requirement": "Identify assets and the risk management strategy",
                "category": "risk assessment",
                "weight": 20,
                "triggers": ["asset inventory", "risk management strategy", "identify"],
                "remediation": "Maintain an asset inventory and a documented cybersecurity risk management strategy.",
                "effort": "Medium",
            },
            {
                "rule_id": "NIST-02",
                "requirement": "Protect systems with access control and data security",
                "category": "security safeguards",
                "weight": 18,
                "triggers": ["access control", "data security", "protective technology", "protect"],
                "remediation": "Apply least-privilege access, data protection and secure configuration baselines.",
                "effort": "Medium",
            },
            {
                "rule_id": "NIST-03",
                "requirement": "Detect anomalies and events through continuous monitoring",
                "category": "audit and monitoring",
                "weight": 15,
                "triggers": ["continuous monitoring", "anomalies and events", "detect", "detection"],
                "remediation": "Deploy continuous monitoring with defined alert triage.",
                "effort": "Medium",
            },
            {
                "rule_id": "NIST-04",
                "requirement": "Respond to incidents with a response plan",
                "category": "incident response",
                "weight": 14,
                "triggers": ["incident response", "response planning", "respond"],
                "remediation": "Maintain an incident response plan with roles, communications and analysis steps.",
                "effort": "Medium",
            },
            {
                "rule_id": "NIST-05",
                "requirement": "Recover operations after an incident",
                "category": "business continuity",
                "weight": 12,
                "triggers": ["recovery planning", "restoration", "recover"],
                "remediation": "Document recovery plans and test restoration from backups.",
                "effort": "Medium",
            },
            {
                "rule_id": "NIST-06",
                "requirement": "Govern cybersecurity roles, policy and oversight",
                "category": "governance",
                "weight": 8,
                "triggers": ["cybersecurity governance", "governance", "govern"],
                "remediation": "Assign cybersecurity oversight to leadership and review policy annually.",
                "effort": "Low",
            },
            {
                "rule_id": "NIST-07",
                "requirement": "Manage supply chain risk",
                "category": "vendor management",
                "weight": 8,
                "triggers": ["supply chain", "supplier risk"],
                "remediation": "Assess critical suppliers and include cybersecurity requirements in contracts.",
                "effort": "Medium",
            },
            {
                "rule_id": "NIST-08",
                "requirement": "Provide awareness and training",
                "category": "training",
                "weight": 5,
                "triggers": ["awareness training", "security training"],
                "remediation": "Run role-based security awareness training.",
                "effort": "Low",
            },
        ],
    },
    "CAN_SPAM": {
        "name": "CAN-SPAM Act",
        "region": "United States",
        "industry_relevance": {"Retail": 1.3, "Non-Profit": 1.1},
        "rules": [
            {
                "rule_id": "CANSPAM-01",
                "requirement": "Give recipients a working unsubscribe mechanism",
                "category": "marketing communications",
                "weight": 20,
                "triggers": ["unsubscribe", "opt-out mechanism", "opt out of future emails"],
                "remediation": "Include a clear unsubscribe link in every commercial email.",
                "effort": "Low",
            },
            {
                "rule_id": "CANSPAM-02",
                "requirement": "Honour opt-out requests within 10 business days",
                "category": "marketing communications",
                "weight": 18,
                "triggers": ["10 business days", "ten business days", "honor opt-out", "honour opt-out"],
                "remediation": "Process opt-outs automatically within 10 business days.",
                "effort": "Low",
            },
            {
                "rule_id": "CANSPAM-03",
                "requirement": "Use accurate header and sender information",
                "category": "transparency",
                "weight": 15,
                "triggers": ["header information", "from line", "sender identification"],
                "remediation": "Ensure From, To and routing information identify the sender accurately.",
                "effort": "Low",
            },
            {
                "rule_id": "CANSPAM-04",
                "requirement": "Avoid deceptive subject lines",
                "category": "marketing communications",
                "weight": 14,
                "triggers": ["subject line", "deceptive subject"],
                "remediation": "Review subject lines so they reflect message content.",
                "effort": "Low",
            },
            {
                "rule_id": "CANSPAM-05",
                "requirement": "Include a valid physical postal address",
                "category": "transparency",
                "weight": 12,
                "triggers": ["postal address", "physical address"],
                "remediation": "Add a valid physical postal address to every commercial email template.",
                "effort": "Low",
            },
            {
                "rule_id": "CANSPAM-06",
                "requirement": "Identify the message as an advertisement",
                "category": "marketing communications",
                "weight": 8,
                "triggers": ["advertisement", "commercial message", "promotional"],
                "remediation": "Label commercial messages clearly as advertisements.",
                "effort": "Low",
            },
            {
                "rule_id": "CANSPAM-07",
                "requirement": "Monitor third parties sending email on your behalf",
                "category": "vendor management",
                "weight": 8,
                "triggers": ["email service provider", "marketing vendor", "third-party senders"],
                "remediation": "Contractually require and audit CAN-SPAM compliance of marketing vendors.",
                "effort": "Low",
            },
            {
                "rule_id": "CANSPAM-08",
                "requirement": "Maintain a suppression list",
                "category": "records management",
                "weight": 5,
                "triggers": ["suppression list"],
                "remediation": "Keep a suppression list and never sell or transfer opted-out addresses.",
                "effort": "Low",
            },
        ],
    },
    "FISMA": {
        "name": "Federal Information Security Modernization Act",
        "region": "United States",
        "industry_relevance": {"Government": 1.5},
        "rules": [
            {
                "rule_id": "FISMA-01",
                "requirement": "Categorize information systems by impact level",
                "category": "risk assessment",
                "weight": 20,
                "triggers": ["FIPS 199", "security categorization", "system categorization"],
                "remediation": "Categorize each system under FIPS 199 and record the impact level.",
                "effort": "Medium",
            },
            {
                "rule_id": "FISMA-02",
                "requirement": "Implement a security control baseline",
                "category": "security safeguards",
                "weight": 18,
                "triggers": ["SP 800-53", "security controls baseline", "security controls"],
                "remediation": "Select and tailor the NIST SP 800-53 baseline matching the system category.",
                "effort": "High",
            },
            {
                "rule_id": "FISMA-03",
                "requirement": "Maintain a system security plan",
                "category": "governance",
                "weight": 15,
                "triggers": ["system security plan", "SSP"],
                "remediation": "Write and maintain a system security plan for each system.",
                "effort": "Medium",
            },
            {
                "rule_id": "FISMA-04",
                "requirement": "Obtain an authorization to operate",
                "category": "accountability",
                "weight": 14,
                "triggers": ["authorization to operate", "ATO", "risk management framework"],
                "remediation": "Complete security assessment and obtain an ATO from the authorizing official.",
                "effort": "High",
            },
            {
                "rule_id": "FISMA-05",
                "requirement": "Continuously monitor security controls",
                "category": "audit and monitoring",
                "weight": 12,
                "triggers": ["continuous monitoring", "ISCM"],
                "remediation": "Implement an information security continuous monitoring strategy.",
                "effort": "Medium",
            },
            {
                "rule_id": "FISMA-06",
                "requirement": "Report incidents to the federal incident center",
                "category": "incident response",
                "weight": 8,
                "triggers": ["US-CERT", "CISA", "incident reporting"],
                "remediation": "Report incidents to CISA within mandated timeframes.",
                "effort": "Low",
            },
            {
                "rule_id": "FISMA-07",
                "requirement": "Assess security controls annually",
                "category": "audit and monitoring",
                "weight": 8,
                "triggers": ["annual assessment", "annual security assessment", "annual review"],
                "remediation": "Assess a subset of controls every year and report results.",
                "effort": "Medium",
            },
            {
                "rule_id": "FISMA-08",
                "requirement": "Maintain contingency plans",
                "category": "business continuity",
                "weight": 5,
                "triggers": ["contingency plan", "contingency planning"],
                "remediation": "Develop and test a contingency plan for each system.",
                "effort": "Medium",
            },
        ],
    },
}

# ---------- Industry benchmarks (matched case-sensitively) ----------
INDUSTRY_BENCHMARKS = {
    "Technology": {"average": 78, "bottom_25": 65, "top_25": 90,
                   "description": "Fast-moving, data-heavy businesses with mature security tooling."},
    "Healthcare": {"average": 82, "bottom_25": 70, "top_25": 92,
                   "description": "Heavily regulated handling of patient data under HIPAA."},
    "Financial Services": {"average": 85, "bottom_25": 74, "top_25": 94,
                           "description": "Highly examined sector with SOX, GLBA and PCI obligations."},
    "Retail": {"average": 72, "bottom_25": 58, "top_25": 85,
               "description": "Card-present and e-commerce payment exposure."},
    "Manufacturing": {"average": 68, "bottom_25": 55, "top_25": 82,
                      "description": "Operational technology and supply chain focus."},
    "Education": {"average": 70, "bottom_25": 56, "top_25": 83,
                  "description": "Student records under FERPA and COPPA."},
    "Government": {"average": 80, "bottom_25": 68, "top_25": 91,
                   "description": "Federal systems under FISMA and NIST guidance."},
    "Energy": {"average": 74, "bottom_25": 61, "top_25": 87,
               "description": "Critical infrastructure with NIST CSF alignment."},
    "Telecommunications": {"average": 76, "bottom_25": 63, "top_25": 88,
                           "description": "Large subscriber data volumes and network security duties."},
    "Insurance": {"average": 81, "bottom_25": 69, "top_25": 92,
                  "description": "Financial and health data across GLBA and HIPAA."},
    "Non-Profit": {"average": 62, "bottom_25": 48, "top_25": 76,
                   "description": "Donor data and marketing communications with limited resources."},
}

DEFAULT_AVERAGE = 75
DEFAULT_LOW = 60
DEFAULT_BENCHMARK = {"average": DEFAULT_AVERAGE, "bottom_25": DEFAULT_LOW, "top_25": 88,
                     "description": "Cross-industry reference values."}

FRAMEWORK_ALIASES = {
    "NIST": "NIST_CSF",
    "ISO27001": "ISO_27001",
    "ISO": "ISO_27001",
    "PCI": "PCI_DSS",
    "PCIDSS": "PCI_DSS",
    "CANSPAM": "CAN_SPAM",
}


def compile_trigger(keyword: str) -> re.Pattern:
    """Whole-word, case-insensitive pattern for a keyword; any run of whitespace matches a space."""
    body = r"\s+".join(re.escape(part) for part in keyword.split())
    return re.compile(rf"(?<!\w){body}(?!\w)", re.IGNORECASE)


def normalize_framework_id(framework_id: str) -> str:
    key = re.sub(r"[\s\-/]+", "_", framework_id.strip().upper())
    return FRAMEWORK_ALIASES.get(key, key)


@dataclass(frozen=True)
class RulesCatalog:
    frameworks: Mapping[str, FrameworkRuleSet]
    benchmarks: Mapping[str, IndustryBenchmark]
    default_benchmark: IndustryBenchmark
    triggers: Mapping[tuple[str, str], tuple[tuple[str, re.Pattern], ...]]
    severity_tiers: tuple = SEVERITY_TIERS
    maturity_thresholds: tuple = MATURITY_THRESHOLDS
    benchmark_bands: tuple = BENCHMARK_BANDS
    timeframes: Mapping[str, str] = field(default_factory=lambda: MappingProxyType(dict(TIMEFRAMES)))
    category_impacts: Mapping[str, str] = field(default_factory=lambda: MappingProxyType(dict(CATEGORY_IMPACTS)))

    def get(self, framework_id: str) -> FrameworkRuleSet | None:
        return self.frameworks.get(framework_id)

    def benchmark_for(self, industry: str) -> IndustryBenchmark | None:
        return self.benchmarks.get(industry)

    def severity_for(self, weight: int) -> str:
        for minimum, severity in self.severity_tiers:
            if weight >= minimum:
                return severity
        return "Low"

    def impact_for(self, category: str) -> str:
        return self.category_impacts.get(category, DEFAULT_IMPACT)


def _build_framework(framework_id: str, definition: dict) -> FrameworkRuleSet:
    try:
        rule_set = FrameworkRuleSet(framework_id=framework_id, **definition)
    except (TypeError, ValidationError) as e:
        raise CatalogError(f"Malformed rule set for {framework_id}: {e}") from e

    if not rule_set.rules:
        raise CatalogError(f"{framework_id} has no rules")
    if rule_set.total_weight != EXPECTED_TOTAL_WEIGHT:
        raise CatalogError(
            f"{framework_id} rule weights sum to {rule_set.total_weight}, expected {EXPECTED_TOTAL_WEIGHT}"
        )
    seen: set[str] = set()
    for rule in rule_set.rules:
        if rule.rule_id in seen:
            raise CatalogError(f"{framework_id} has duplicate rule id {rule.rule_id}")
        seen.add(rule.rule_id)
        if not rule.triggers and not rule.patterns:
            raise CatalogError(f"{framework_id}/{rule.rule_id} has no triggers")
    for multiplier in rule_set.industry_relevance.values():
        if multiplier <= 0:
            raise CatalogError(f"{framework_id} has a non-positive industry multiplier")
    return rule_set


def _compile_rule(framework_id: str, rule: ComplianceRule) -> tuple[tuple[str, re.Pattern], ...]:
    compiled = []
    for keyword in rule.triggers:
        if not keyword.strip():
            raise CatalogError(f"{framework_id}/{rule.rule_id} has a blank trigger")
        compiled.append((keyword, compile_trigger(keyword)))
    for raw in rule.patterns:
        try:
            compiled.append((raw, re.compile(raw, re.IGNORECASE)))
        except re.error as e:
            raise CatalogError(f"{framework_id}/{rule.rule_id} pattern {raw!r} does not compile: {e}") from e
    return tuple(compiled)


def _build_benchmark(name: str, row: dict) -> IndustryBenchmark:
    try:
        benchmark = IndustryBenchmark(name=name, **row)
    except (TypeError, ValidationError) as e:
        raise CatalogError(f"Malformed benchmark row for {name}: {e}") from e
    if not benchmark.bottom_25 <= benchmark.average <= benchmark.top_25:
        raise CatalogError(f"Benchmark row for {name} is not ordered bottom_25 <= average <= top_25")
    return benchmark


def build_catalog(
    definitions: dict = FRAMEWORK_DEFINITIONS,
    benchmarks: dict = INDUSTRY_BENCHMARKS,
    default_benchmark: dict = DEFAULT_BENCHMARK,
) -> RulesCatalog:
    """Validate raw tables into a read-only catalogue. Raises CatalogError on any defect."""
    frameworks: dict[str, FrameworkRuleSet] = {}
    triggers: dict[tuple[str, str], tuple] = {}
    for raw_id, definition in definitions.items():
        framework_id = normalize_framework_id(raw_id)
        if framework_id != raw_id:
            raise CatalogError(f"Framework key {raw_id!r} is not in normalized form {framework_id!r}")
        rule_set = _build_framework(framework_id, definition)
        frameworks[framework_id] = rule_set
        for rule in rule_set.rules:
            triggers[(framework_id, rule.rule_id)] = _compile_rule(framework_id, rule)

    rows = {name: _build_benchmark(name, row) for name, row in benchmarks.items()}
    return RulesCatalog(
        frameworks=MappingProxyType(frameworks),
        benchmarks=MappingProxyType(rows),
        default_benchmark=_build_benchmark("Default", default_benchmark),
        triggers=MappingProxyType(triggers),
    )


DEFAULT_CATALOG = build_catalog()
