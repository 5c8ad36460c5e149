"""
Course catalog: public browsing and teacher-side course management.
"""

import logging
from typing import Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase

from learnhub.courses import database as store
from learnhub.courses.errors import ForbiddenError, InvalidStateError, NotFoundError
from learnhub.courses.progress import calculate_progress, total_duration

logger = logging.getLogger(__name__)


def _person(profile: Optional[dict], with_bio: bool = False) -> Optional[dict]:
    if not profile:
        return None
    person = {
        "user_id": profile["user_id"],
        "name": profile.get("username"),
        "email": profile.get("email_id")
    }
    if with_bio:
        person["bio"] = profile.get("bio", "")
    return person


async def verify_course_owner(db: AsyncIOMotorDatabase, course_id: str, user_id: str) -> dict:
    course = await store.get_course(db, course_id)
    if not course:
        raise NotFoundError("Course not found")

    if course.get("owner_id") != user_id:
        raise ForbiddenError("Not authorized to modify this course")

    return course


# ==================== PUBLIC ====================

async def list_public_courses(
    db: AsyncIOMotorDatabase,
    skip: int,
    limit: int,
    category: str = None,
    level: str = None,
    search: str = None
) -> Tuple[list, int]:
    """Published courses, newest first, each with an owner summary"""
    query = store.build_public_course_query(category, level, search)
    courses, total = await store.list_courses(db, query, skip, limit)

    owners = await store.get_user_profiles(db, [c["owner_id"] for c in courses])
    for course in courses:
        course["owner"] = _person(owners.get(course["owner_id"]))
        course["total_duration"] = total_duration(course.get("sections", []))
    return courses, total


async def list_admin_courses(db: AsyncIOMotorDatabase, query: dict, skip: int, limit: int) -> Tuple[list, int]:
    """Courses in any status, newest first, each with an owner summary"""
    courses, total = await store.list_courses(db, query, skip, limit)

    owners = await store.get_user_profiles(db, [c["owner_id"] for c in courses])
    for course in courses:
        course["owner"] = _person(owners.get(course["owner_id"]))
    return courses, total


async def get_course_details(db: AsyncIOMotorDatabase, course_id: str) -> dict:
    """Course with owner (name, email, bio) and enrolled students expanded"""
    course = await store.get_course(db, course_id)
    if not course:
        raise NotFoundError("Course not found")

    owner = await store.get_user_profile(db, course["owner_id"])
    enrolled = await store.get_user_profiles(db, course.get("enrolled", []))

    course["owner"] = _person(owner, with_bio=True)
    course["enrolled"] = [
        _person(enrolled[sid]) for sid in course.get("enrolled", []) if sid in enrolled
    ]
    course["total_duration"] = total_duration(course.get("sections", []))
    return course


# ==================== TEACHER ====================

async def list_teacher_courses(db: AsyncIOMotorDatabase, teacher_id: str) -> list:
    courses = await store.list_owner_courses(db, teacher_id)
    for course in courses:
        sections = course.get("sections", [])
        course["total_sections"] = len(sections)
        course["total_duration"] = total_duration(sections)
    return courses


async def create_course(db: AsyncIOMotorDatabase, course_data: dict, owner: dict) -> dict:
    course = await store.create_course(db, course_data, owner)
    logger.info("Course %s created by %s", course["course_id"], owner["user_id"])
    return course


async def update_course(db: AsyncIOMotorDatabase, course_id: str, teacher_id: str, updates: dict) -> dict:
    """Owner-only update of the provided fields"""
    course = await verify_course_owner(db, course_id, teacher_id)

    updates = {k: store.enum_value(v) for k, v in updates.items() if v is not None}
    if not updates:
        return course

    updated = await store.update_course(db, course_id, updates)
    if not updated:
        raise NotFoundError("Course not found")
    return updated


async def delete_course(db: AsyncIOMotorDatabase, course_id: str, teacher_id: str = None):
    """
    Delete a course that nobody is enrolled in.

    With ``teacher_id`` the caller must own the course; admins pass None.
    """
    if teacher_id is not None:
        await verify_course_owner(db, course_id, teacher_id)
    elif not await store.get_course(db, course_id):
        raise NotFoundError("Course not found")

    if await store.count_course_enrollments(db, course_id) > 0:
        raise InvalidStateError("Cannot delete course with active enrollments")

    await store.delete_course(db, course_id)
    logger.info("Course %s deleted", course_id)


async def add_section(db: AsyncIOMotorDatabase, course_id: str, teacher_id: str, section_data: dict) -> dict:
    course = await verify_course_owner(db, course_id, teacher_id)
    updated = await store.add_section(db, course, section_data)
    if not updated:
        raise NotFoundError("Course not found")
    return updated


async def list_course_students(db: AsyncIOMotorDatabase, course_id: str, teacher_id: str) -> list:
    """Enrolled students with their progress, for the course owner"""
    course = await verify_course_owner(db, course_id, teacher_id)

    enrollments = await store.list_course_enrollments(db, course_id)
    profiles = await store.get_user_profiles(db, [e["student_id"] for e in enrollments])

    students = []
    for enrollment in enrollments:
        profile = profiles.get(enrollment["student_id"])
        students.append({
            **(_person(profile) or {"user_id": enrollment["student_id"], "name": None, "email": None}),
            "enrollment_id": enrollment["enrollment_id"],
            "progress": calculate_progress(enrollment.get("completed_sections", []), course.get("sections", [])),
            "status": enrollment["status"],
            "enrolled_at": enrollment["enrolled_at"],
            "last_accessed": enrollment["last_accessed"]
        })
    return students
