"""
Enrollment lifecycle and completion grading.

The enrollment status is a small state machine: the only automatic
transition is active -> completed when progress reaches 100. Dropping is a
manual event and completed enrollments never revert.
"""

from enum import Enum


class EnrollmentStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    DROPPED = "dropped"


class EnrollmentEvent(str, Enum):
    PROGRESS_COMPLETE = "progress_complete"
    DROP = "drop"


_TRANSITIONS = {
    (EnrollmentStatus.ACTIVE, EnrollmentEvent.PROGRESS_COMPLETE): EnrollmentStatus.COMPLETED,
    (EnrollmentStatus.ACTIVE, EnrollmentEvent.DROP): EnrollmentStatus.DROPPED,
}


def advance(current, event: EnrollmentEvent) -> EnrollmentStatus:
    """Return the status after ``event``; unknown pairs leave it unchanged."""
    current = EnrollmentStatus(current)
    return _TRANSITIONS.get((current, EnrollmentEvent(event)), current)


# ==================== GRADES ====================

GRADE_THRESHOLDS = [
    (95, "A+"),
    (90, "A"),
    (85, "A-"),
    (80, "B+"),
    (75, "B"),
    (70, "B-"),
    (65, "C+"),
    (60, "C"),
    (55, "C-"),
    (50, "D+"),
    (45, "D"),
]


def calculate_grade(progress: int) -> str:
    """Letter grade for a final progress percentage"""
    for threshold, grade in GRADE_THRESHOLDS:
        if progress >= threshold:
            return grade
    return "F"
