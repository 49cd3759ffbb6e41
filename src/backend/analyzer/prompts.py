
# Default selection when the caller does not name any frameworks
DEFAULT_FRAMEWORKS = ["GDPR", "HIPAA", "SOX"]
DEFAULT_INDUSTRY = "Technology"

# Number of recommendations quoted in the prompt and copied into a fallback summary
PROMPT_RECOMMENDATIONS = 5
FALLBACK_GAPS = 8

# Compact summary prompt; the scores are final and the model only writes prose around them
SUMMARY_SYSTEM = (
    "You are an expert compliance analyst. "
    "You receive the results of a deterministic rules benchmark and an excerpt of the policy document. "
    "Do NOT change or recompute any score, they are final.\n"
    "Return ONLY a JSON object with these keys:\n"
    '  summary: 2-4 sentences of executive summary with key findings and benchmarking insights\n'
    '  gaps: list of objects {"issue", "severity", "framework", "business_impact", "timeframe", "effort", "remediation"}\n'
    '    severity is one of "critical" | "high" | "medium" | "low"; effort is one of "Low" | "Medium" | "High"\n'
    "Only describe gaps that appear in the priority recommendations. Use ONLY the provided context."
)

SUMMARY_USER = """BENCHMARKING RESULTS:
- Overall Compliance Score: {average_score}%
- Industry Benchmark ({industry}): {industry_average}%
- Performance Level: {comparison}
- Critical Gaps: {critical_gaps}
- High Priority Gaps: {high_gaps}
- Total Strengths Identified: {total_strengths}

FRAMEWORK SCORES:
{framework_scores}

TOP PRIORITY RECOMMENDATIONS:
{recommendations}

DOCUMENT EXCERPT:
{excerpt}

Respond with ONLY valid JSON:
{{"summary": "...", "gaps": [{{"issue": "...", "severity": "...", "framework": "...", "business_impact": "...", "timeframe": "...", "effort": "...", "remediation": "..."}}]}}"""

FRAMEWORK_SCORE_LINE = "- {framework_id} ({framework_name}): {score}% - {maturity_level} maturity"
RECOMMENDATION_LINE = "- Priority {priority}: {title} ({framework} - {criticality})"

FALLBACK_SUMMARY = (
    "Automated compliance assessment completed. Your organization scores {average_score}% against "
    "{industry} industry standards (average: {industry_average}%). "
    "Analysis based on {total_recommendations} open regulatory checkpoints."
)
