"""Deterministic compliance scoring engine."""

from compliance.scoring.engine import compute_stats, evaluate, score_issues

__all__ = ["evaluate", "score_issues", "compute_stats"]
