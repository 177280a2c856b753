"""Deduction-based page and project scoring."""

import math
from typing import Iterable, Sequence

from seo_audit.constants import MAX_SCORE, MIN_SCORE, SEVERITY_DEDUCTIONS


def _clamp(value: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, value))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def score_issues(issues: Iterable) -> int:
    """100 minus the severity deductions of ``issues``, clamped to [0, 100].

    Args:
        issues: Issues or project issues

    Returns:
        Integer score
    """
    score = MAX_SCORE
    for issue in issues:
        score -= SEVERITY_DEDUCTIONS.get(issue.severity.value, 0)
    return _clamp(score)


def score_project(page_scores: Sequence[int], project_issues: Iterable) -> int:
    """Mean page score minus the loss project issues would cost a single page.

    With no pages the mean is taken as 100.

    Args:
        page_scores: Final score of every page in the run
        project_issues: Project-level issues

    Returns:
        Integer score in [0, 100]
    """
    mean = sum(page_scores) / len(page_scores) if page_scores else MAX_SCORE
    project_loss = MAX_SCORE - score_issues(project_issues)
    return _clamp(_round_half_up(mean) - project_loss)
