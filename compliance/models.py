"""Audit data model: severities, roles, issues and results."""

from dataclasses import dataclass, field
from enum import Enum


class Severity(str, Enum):
    """Issue severity, ordered from most to least severe."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Role(str, Enum):
    """Caller roles that unlock role-specific issues."""

    DEVELOPER = "developer"
    DESIGNER = "designer"
    PRODUCT_MANAGER = "product-manager"
    PROJECT_OWNER = "project-owner"


ROLE_TOKENS = tuple(r.value for r in Role)


@dataclass(frozen=True)
class Issue:
    severity: Severity
    message: str
    suggestion: str

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.value,
            "message": self.message,
            "suggestion": self.suggestion,
        }


@dataclass(frozen=True)
class AuditStats:
    errors: int
    warnings: int
    info: int

    @property
    def total(self) -> int:
        return self.errors + self.warnings + self.info

    def to_dict(self) -> dict:
        return {"errors": self.errors, "warnings": self.warnings, "info": self.info}


@dataclass(frozen=True)
class AuditResult:
    """
    Outcome of one evaluation.
    The score is always derived from the issues; it cannot be passed in.
    """

    issues: tuple[Issue, ...]
    score: int = field(init=False)

    def __post_init__(self):
        # Local import: the engine imports this module.
        from compliance.scoring.engine import score_issues

        object.__setattr__(self, "issues", tuple(self.issues))
        object.__setattr__(self, "score", score_issues(self.issues))

    @property
    def stats(self) -> AuditStats:
        from compliance.scoring.engine import compute_stats

        return compute_stats(self.issues)

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "issues": [i.to_dict() for i in self.issues],
            "stats": self.stats.to_dict(),
        }
