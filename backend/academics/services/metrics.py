"""Pure academic metric calculations.

Nothing here touches the database; storage-backed aggregates live in
``academics.services.academic_records`` and call into these functions so the
write path and every read path derive numbers the same way.
"""
from dataclasses import dataclass
from typing import Iterable, Tuple

from portal.exceptions import ValidationError

ATTENDED_STATUSES = frozenset({'present', 'late'})


@dataclass(frozen=True)
class Grade:
    letter: str
    points: int


# (lower bound inclusive, letter, points), highest first
GRADE_SCALE = (
    (90.0, 'A+', 10),
    (80.0, 'A', 9),
    (70.0, 'B+', 8),
    (60.0, 'B', 7),
    (50.0, 'C', 6),
    (40.0, 'D', 5),
)
FAIL = Grade('F', 0)


def percentage(raw_score, max_score) -> float:
    """Return ``raw / max * 100`` without rounding."""
    if max_score is None or max_score <= 0:
        raise ValidationError('max_score', 'Maximum score must be greater than zero.')
    if raw_score is None or raw_score < 0:
        raise ValidationError('raw_score', 'Score cannot be negative.')
    if raw_score > max_score:
        raise ValidationError('raw_score', 'Score cannot exceed maximum score.')
    return float(raw_score) / float(max_score) * 100.0


def grade_for(pct: float) -> Grade:
    for lower, letter, points in GRADE_SCALE:
        if pct >= lower:
            return Grade(letter, points)
    return FAIL


def weighted_gpa(pairs: Iterable[Tuple[int, int]]) -> float:
    """GPA from ``(credits, grade_points)`` pairs; 0.0 when there are none."""
    total_credits = 0
    total_points = 0
    for credits, points in pairs:
        total_credits += credits
        total_points += credits * points
    if total_credits <= 0:
        return 0.0
    return total_points / total_credits


def attendance_percentage(statuses: Iterable[str]) -> float:
    total = 0
    attended = 0
    for status in statuses:
        total += 1
        if status in ATTENDED_STATUSES:
            attended += 1
    if total == 0:
        return 0.0
    return attended / total * 100.0
