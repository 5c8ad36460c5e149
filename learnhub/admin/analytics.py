"""
Analytics & Dashboard Stats for Admin Panel
Read-only counts and paginated enrollment records
"""

from typing import Dict, List, Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase

from learnhub.courses import database as store
from learnhub.courses.lifecycle import EnrollmentStatus
from learnhub.courses.models import UserRole

RECENT_LIMIT = 5


async def get_dashboard_stats(db: AsyncIOMotorDatabase) -> Dict:
    """
    Get overview stats for admin dashboard
    """
    stats = {
        "total_users": await db.users_profile.count_documents({}),
        "total_students": await db.users_profile.count_documents({"role": UserRole.STUDENT.value}),
        "total_teachers": await db.users_profile.count_documents({"role": UserRole.TEACHER.value}),
        "total_courses": await db.courses.count_documents({}),
        "total_enrollments": await db.enrollments.count_documents({}),
        "active_enrollments": await db.enrollments.count_documents({"status": EnrollmentStatus.ACTIVE.value}),
        "completed_enrollments": await db.enrollments.count_documents({"status": EnrollmentStatus.COMPLETED.value}),
        "certificates_issued": await db.certificates.count_documents({})
    }

    recent_users = await db.users_profile.find(
        {}, {"_id": 0}, sort=[("created_at", -1)], limit=RECENT_LIMIT
    ).to_list(length=RECENT_LIMIT)

    recent_courses = await db.courses.find(
        {}, {"_id": 0, "course_id": 1, "title": 1, "educator": 1, "status": 1, "created_at": 1},
        sort=[("created_at", -1)], limit=RECENT_LIMIT
    ).to_list(length=RECENT_LIMIT)

    return {
        "stats": stats,
        "recent_users": recent_users,
        "recent_courses": recent_courses
    }


def build_enrollment_query(status: Optional[str] = None, course_id: Optional[str] = None,
                           student_id: Optional[str] = None) -> dict:
    query = {}
    if status:
        query["status"] = status
    if course_id:
        query["course_id"] = course_id
    if student_id:
        query["student_id"] = student_id
    return query


async def get_enrollment_records(db: AsyncIOMotorDatabase, query: dict, skip: int, limit: int) -> Tuple[List[dict], int]:
    """Enrollments, newest first, with student and course summaries"""
    enrollments = await db.enrollments.find(
        query, {"_id": 0}, sort=[("enrolled_at", -1)], skip=skip, limit=limit
    ).to_list(length=limit)
    total = await db.enrollments.count_documents(query)

    students = await store.get_user_profiles(db, [e["student_id"] for e in enrollments])
    courses = {}
    for enrollment in enrollments:
        course_id = enrollment["course_id"]
        if course_id not in courses:
            courses[course_id] = await store.get_course(db, course_id)

    for enrollment in enrollments:
        student = students.get(enrollment["student_id"])
        course = courses.get(enrollment["course_id"])
        enrollment["student"] = {
            "name": student.get("username"),
            "email": student.get("email_id")
        } if student else None
        enrollment["course"] = {
            "title": course.get("title"),
            "educator": course.get("educator")
        } if course else None

    return enrollments, total
