"""
Progress helpers over plain course/enrollment documents.
"""

from datetime import datetime
from typing import List, Tuple


def count_completed(completed_sections: List[dict], sections: List[dict]) -> int:
    """Distinct completed ids that are still sections of the course"""
    section_ids = {s["section_id"] for s in sections or []}
    return len({c["section_id"] for c in completed_sections or [] if c["section_id"] in section_ids})


def calculate_progress(completed_sections: List[dict], sections: List[dict]) -> int:
    """
    Percentage of the course's current sections marked complete.

    Completed ids that are no longer in the course are not counted.
    Rounds half up (12.5 -> 13).
    """
    total = len(sections or [])
    if total == 0:
        return 0

    done = count_completed(completed_sections, sections)
    return (200 * done + total) // (2 * total)


def mark_section_complete(completed_sections: List[dict], section_id: str, now: datetime) -> Tuple[List[dict], bool]:
    """Return the completed list with ``section_id`` present, and whether it was added."""
    completed_sections = list(completed_sections or [])
    if any(c["section_id"] == section_id for c in completed_sections):
        return completed_sections, False

    completed_sections.append({"section_id": section_id, "completed_at": now})
    return completed_sections, True


def sections_with_status(sections: List[dict], completed_sections: List[dict]) -> List[dict]:
    """Course sections annotated with is_completed / completed_at, in course order"""
    completed_at = {c["section_id"]: c.get("completed_at") for c in completed_sections or []}

    result = []
    for section in sorted(sections or [], key=lambda s: s.get("order", 0)):
        sid = section["section_id"]
        result.append({
            **section,
            "is_completed": sid in completed_at,
            "completed_at": completed_at.get(sid)
        })
    return result


def total_duration(sections: List[dict]) -> int:
    """Sum of section durations in minutes"""
    return sum(s.get("duration") or 0 for s in sections or [])
