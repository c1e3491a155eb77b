"""Deterministic compliance scoring engine. Pure code, no image inspection."""

from collections.abc import Iterable

from compliance.models import AuditResult, AuditStats, Issue, Severity
from compliance.scoring.rules import BASE_ISSUES, role_specific_issues

MAX_SCORE = 100

# Points deducted per issue; one row per severity.
SEVERITY_PENALTIES: dict[Severity, int] = {
    Severity.ERROR: 15,
    Severity.WARNING: 5,
    Severity.INFO: 0,
}


def compute_stats(issues: Iterable[Issue]) -> AuditStats:
    """Count issues per severity. errors + warnings + info == len(issues)."""
    counts = {s: 0 for s in Severity}
    for issue in issues:
        counts[issue.severity] += 1
    return AuditStats(
        errors=counts[Severity.ERROR],
        warnings=counts[Severity.WARNING],
        info=counts[Severity.INFO],
    )


def score_issues(issues: Iterable[Issue]) -> int:
    """
    Score = 100 - 15 * errors - 5 * warnings, floored at 0.
    Info issues never affect the score.
    """
    penalty = sum(SEVERITY_PENALTIES[i.severity] for i in issues)
    return max(0, MAX_SCORE - penalty)


def evaluate(
    role=None,
    *,
    base_issues: Iterable[Issue] = BASE_ISSUES,
    role_rules: dict | None = None,
) -> AuditResult:
    """
    Produce the audit result for a caller role.
    Base issues come first, then the role's issues. Same role in, same result out.
    """
    issues = tuple(base_issues) + role_specific_issues(role, role_rules)
    return AuditResult(issues=issues)
