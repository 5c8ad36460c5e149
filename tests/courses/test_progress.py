from datetime import datetime

import pytest

from learnhub.courses.progress import (
    calculate_progress, count_completed, mark_section_complete, sections_with_status, total_duration
)


def _sections(n):
    return [{"section_id": f"SEC_{i}", "order": i + 1, "duration": 5} for i in range(n)]


def _done(*ids):
    return [{"section_id": sid, "completed_at": datetime(2024, 1, 1)} for sid in ids]


class TestCalculateProgress:

    def test_no_sections_is_zero(self):
        assert calculate_progress(_done("SEC_0"), []) == 0

    @pytest.mark.parametrize("done, total, expected", [
        (0, 4, 0),
        (1, 2, 50),
        (1, 3, 33),
        (2, 3, 67),
        (1, 8, 13),
        (3, 3, 100),
    ])
    def test_rounded_percentage(self, done, total, expected):
        sections = _sections(total)
        completed = _done(*[s["section_id"] for s in sections[:done]])
        assert calculate_progress(completed, sections) == expected

    def test_removed_sections_are_not_counted(self):
        assert calculate_progress(_done("SEC_0", "SEC_GONE"), _sections(2)) == 50

    def test_duplicates_count_once(self):
        assert calculate_progress(_done("SEC_0", "SEC_0"), _sections(2)) == 50


def test_count_completed_ignores_removed_sections():
    assert count_completed(_done("SEC_0", "SEC_GONE", "SEC_0"), _sections(2)) == 1


class TestMarkSectionComplete:

    def test_adds_new_section(self):
        now = datetime(2024, 5, 1)
        completed, added = mark_section_complete([], "SEC_0", now)
        assert added is True
        assert completed == [{"section_id": "SEC_0", "completed_at": now}]

    def test_existing_section_is_kept_once(self):
        original = _done("SEC_0")
        completed, added = mark_section_complete(original, "SEC_0", datetime(2024, 6, 1))
        assert added is False
        assert completed == original

    def test_does_not_mutate_input(self):
        original = _done("SEC_0")
        mark_section_complete(original, "SEC_1", datetime(2024, 6, 1))
        assert len(original) == 1


def test_sections_with_status_orders_and_flags():
    sections = list(reversed(_sections(3)))
    result = sections_with_status(sections, _done("SEC_1"))

    assert [s["section_id"] for s in result] == ["SEC_0", "SEC_1", "SEC_2"]
    assert [s["is_completed"] for s in result] == [False, True, False]
    assert result[1]["completed_at"] == datetime(2024, 1, 1)
    assert result[0]["completed_at"] is None


def test_total_duration():
    assert total_duration(_sections(3)) == 15
    assert total_duration([]) == 0
