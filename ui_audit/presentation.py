"""Display tables for audit results: severity styling and score color bands."""

from dataclasses import dataclass

from compliance.models import AuditResult, Severity

STEPS = ("Upload", "Analyze", "Results")


@dataclass(frozen=True)
class SeverityStyle:
    label: str
    color: str
    background: str
    icon: str


# One row per severity. A new Severity without a row fails presentation_test.
SEVERITY_PRESENTATION: dict[Severity, SeverityStyle] = {
    Severity.ERROR: SeverityStyle("Error", "#da1e28", "rgba(218,30,40,0.1)", "x-circle"),
    Severity.WARNING: SeverityStyle("Warning", "#f1c21b", "rgba(241,194,27,0.1)", "alert-circle"),
    Severity.INFO: SeverityStyle("Info", "#0f62fe", "rgba(15,98,254,0.1)", "check-circle"),
}

# (minimum score, color), checked in order.
SCORE_BANDS: tuple[tuple[int, str], ...] = (
    (90, "#24a148"),
    (70, "#f1c21b"),
    (0, "#da1e28"),
)


def score_color(score: int) -> str:
    for min_score, color in SCORE_BANDS:
        if score >= min_score:
            return color
    return SCORE_BANDS[-1][1]


def present_result(result: AuditResult) -> dict:
    """Serialized result plus everything the page needs to style it."""
    data = result.to_dict()
    data["score_color"] = score_color(result.score)
    data["issue_count"] = len(result.issues)
    for item, issue in zip(data["issues"], result.issues):
        style = SEVERITY_PRESENTATION[issue.severity]
        item["label"] = style.label
        item["color"] = style.color
        item["background"] = style.background
        item["icon"] = style.icon
    return data
