"""Fixed Carbon design-system rule tables: base issues and role-specific issues."""

from compliance.models import Issue, Role, Severity

BASE_ISSUES: tuple[Issue, ...] = (
    Issue(
        Severity.ERROR,
        "Border radius detected: 8px",
        "Carbon uses square corners (0px border-radius). Update to match design system standards.",
    ),
    Issue(
        Severity.WARNING,
        "Non-standard spacing: 18px",
        "Use Carbon spacing tokens ($spacing-05 = 16px or $spacing-06 = 24px) for consistency.",
    ),
    Issue(
        Severity.INFO,
        "Color contrast: 4.8:1",
        "Meets WCAG AA standards. Consider increasing to 7:1 for AAA compliance.",
    ),
)

ROLE_SPECIFIC_ISSUES: dict[Role, tuple[Issue, ...]] = {
    Role.DEVELOPER: (
        Issue(
            Severity.WARNING,
            "Custom button styling detected",
            "Use @carbon/react Button component for consistency and built-in accessibility.",
        ),
    ),
    Role.DESIGNER: (
        Issue(
            Severity.WARNING,
            "Font weight 600 detected",
            "Carbon uses specific weights: 400 (Regular), 600 (Semi-Bold). Ensure Figma styles match.",
        ),
    ),
    Role.PRODUCT_MANAGER: (
        Issue(
            Severity.INFO,
            "Component compliance: 75%",
            "Consider migrating custom components to Carbon equivalents for better maintainability.",
        ),
    ),
    Role.PROJECT_OWNER: (
        Issue(
            Severity.INFO,
            "Brand alignment: Good",
            "UI follows most IBM brand guidelines. Address critical issues to reach 95% compliance.",
        ),
    ),
}


def role_specific_issues(role, role_rules: dict | None = None) -> tuple[Issue, ...]:
    """
    Issues layered on top of the base set for a role.
    Absent, unknown or non-string roles get none.
    """
    if role_rules is None:
        role_rules = ROLE_SPECIFIC_ISSUES
    if not isinstance(role, str):
        return ()
    # Role is a str enum, so plain tokens hash and compare equal to its members.
    return tuple(role_rules.get(role, ()))
