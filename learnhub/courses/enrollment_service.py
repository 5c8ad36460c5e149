"""
Enrollment service: enroll, unenroll, progress tracking and completion.

Each operation is a short sequence of awaited document-store calls. There
is no cross-document transaction: unenroll writes the course and then the
enrollment, and two concurrent completions can both issue a certificate.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import BackgroundTasks
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from learnhub.courses import certificate_service
from learnhub.courses import database as store
from learnhub.courses.errors import ConflictError, InvalidStateError, NotFoundError, UnexpectedError
from learnhub.courses.lifecycle import EnrollmentEvent, EnrollmentStatus, advance
from learnhub.courses.models import CourseStatus, PaymentStatus, UserRole
from learnhub.courses.progress import (
    calculate_progress, count_completed, mark_section_complete, sections_with_status, total_duration
)

logger = logging.getLogger(__name__)


async def _require_course(db: AsyncIOMotorDatabase, course_id: str) -> dict:
    course = await store.get_course(db, course_id)
    if not course:
        raise NotFoundError("Course not found")
    return course


async def _require_enrollment(db: AsyncIOMotorDatabase, student_id: str, course_id: str) -> dict:
    enrollment = await store.get_enrollment(db, student_id, course_id)
    if not enrollment:
        raise NotFoundError("Enrollment not found")
    return enrollment


# ==================== ENROLL / UNENROLL ====================

async def enroll(db: AsyncIOMotorDatabase, student_id: str, course_id: str) -> dict:
    """Enroll a student in a published course"""
    course = await _require_course(db, course_id)

    if course.get("status") != CourseStatus.PUBLISHED.value:
        raise InvalidStateError("Course is not available for enrollment")

    if await store.get_enrollment(db, student_id, course_id):
        raise ConflictError("Already enrolled in this course")

    payment_status = PaymentStatus.PENDING if course.get("price", 0) > 0 else PaymentStatus.COMPLETED

    try:
        enrollment = await store.create_enrollment(db, student_id, course_id, payment_status.value)
    except DuplicateKeyError:
        raise ConflictError("Already enrolled in this course")

    await store.add_student_to_course(db, course, student_id)
    logger.info("Student %s enrolled in %s", student_id, course_id)

    enrollment["course"] = {
        "course_id": course_id,
        "title": course["title"],
        "educator": course.get("educator"),
        "thumbnail_url": course.get("thumbnail_url", "")
    }
    return enrollment


async def unenroll(db: AsyncIOMotorDatabase, student_id: str, course_id: str):
    """Remove the enrollment and the student's place in the course"""
    enrollment = await _require_enrollment(db, student_id, course_id)

    course = await store.get_course(db, course_id)
    if course:
        await store.remove_student_from_course(db, course, student_id)

    await store.delete_enrollment(db, enrollment["enrollment_id"])
    logger.info("Student %s unenrolled from %s", student_id, course_id)


# ==================== PROGRESS ====================

async def get_progress(db: AsyncIOMotorDatabase, student_id: str, course_id: str) -> dict:
    """Course summary, enrollment summary and per-section completion"""
    enrollment = await _require_enrollment(db, student_id, course_id)
    course = await _require_course(db, course_id)

    sections = course.get("sections", [])
    completed = enrollment.get("completed_sections", [])

    return {
        "course": {
            "course_id": course["course_id"],
            "title": course["title"],
            "total_sections": len(sections)
        },
        "enrollment": {
            "enrollment_id": enrollment["enrollment_id"],
            "progress": calculate_progress(completed, sections),
            "status": enrollment["status"],
            "enrolled_at": enrollment["enrolled_at"],
            "last_accessed": enrollment["last_accessed"]
        },
        "sections": sections_with_status(sections, completed)
    }


async def complete_section(
    db: AsyncIOMotorDatabase,
    student_id: str,
    course_id: str,
    section_id: str,
    background_tasks: Optional[BackgroundTasks] = None
) -> dict:
    """
    Mark a section complete and recompute progress.

    The call that first takes an active enrollment to 100% completes it,
    issues the certificate and schedules PDF rendering on
    ``background_tasks``. A failed issuance is logged; the completion itself
    is still saved.
    """
    enrollment = await _require_enrollment(db, student_id, course_id)
    course = await _require_course(db, course_id)

    sections = course.get("sections", [])
    if not any(s["section_id"] == section_id for s in sections):
        raise NotFoundError("Section not found")

    now = datetime.utcnow()
    completed, _ = mark_section_complete(enrollment.get("completed_sections", []), section_id, now)
    progress = calculate_progress(completed, sections)

    updates = {
        "completed_sections": completed,
        "last_accessed": now,
        "progress": progress
    }

    current = EnrollmentStatus(enrollment["status"])
    status = advance(current, EnrollmentEvent.PROGRESS_COMPLETE) if progress == 100 else current
    course_completed = current == EnrollmentStatus.ACTIVE and status == EnrollmentStatus.COMPLETED

    certificate = None
    if course_completed:
        updates["status"] = status.value
        try:
            certificate = await certificate_service.issue_certificate(db, enrollment, progress)
            updates["certificate_issued"] = True
            updates["certificate_id"] = certificate["certificate_id"]
        except Exception:
            logger.exception("Certificate creation failed for enrollment %s", enrollment["enrollment_id"])

    updated = await store.update_enrollment(db, enrollment["enrollment_id"], updates)
    if not updated:
        raise UnexpectedError("Failed to save progress")

    if certificate and background_tasks is not None:
        background_tasks.add_task(
            certificate_service.render_and_store_certificate, db, certificate["certificate_id"]
        )

    if course_completed:
        logger.info("Student %s completed course %s", student_id, course_id)

    return {
        "enrollment_id": updated["enrollment_id"],
        "progress": updated["progress"],
        "status": updated["status"],
        "completed_sections": updated["completed_sections"],
        "last_accessed": updated["last_accessed"],
        "certificate_issued": updated.get("certificate_issued", False),
        "certificate_id": updated.get("certificate_id"),
        "course_completed": course_completed
    }


# ==================== CERTIFICATE ====================

async def get_certificate(db: AsyncIOMotorDatabase, student_id: str, course_id: str) -> dict:
    """The student's certificate for a completed course"""
    enrollment = await _require_enrollment(db, student_id, course_id)

    if not enrollment.get("certificate_issued"):
        raise InvalidStateError("Course not completed yet")

    return await certificate_service.get_certificate_details(db, enrollment["certificate_id"])


# ==================== MY COURSES ====================

async def get_student_courses(db: AsyncIOMotorDatabase, student_id: str) -> list:
    enrollments = await store.list_student_enrollments(db, student_id)

    result = []
    for enrollment in enrollments:
        course = await store.get_course(db, enrollment["course_id"])
        if not course:
            continue

        sections = course.get("sections", [])
        completed = enrollment.get("completed_sections", [])
        result.append({
            "course_id": course["course_id"],
            "title": course["title"],
            "educator": course.get("educator"),
            "thumbnail_url": course.get("thumbnail_url", ""),
            "description": course.get("description"),
            "categories": course.get("categories", []),
            "level": course.get("level"),
            "price": course.get("price", 0),
            "sections": sections,
            "total_enrollments": course.get("total_enrollments", 0),
            "enrollment_id": enrollment["enrollment_id"],
            "progress": calculate_progress(completed, sections),
            "status": enrollment["status"],
            "enrolled_at": enrollment["enrolled_at"],
            "last_accessed": enrollment["last_accessed"],
            "completed_sections": completed,
            "total_sections": len(sections),
            "completed_sections_count": count_completed(completed, sections)
        })
    return result


async def get_teacher_courses(db: AsyncIOMotorDatabase, teacher_id: str) -> list:
    """Teacher's own courses with section totals and enrolled students"""
    courses = await store.list_owner_courses(db, teacher_id)
    profiles = await store.get_user_profiles(
        db, [sid for c in courses for sid in c.get("enrolled", [])]
    )

    result = []
    for course in courses:
        sections = course.get("sections", [])
        result.append({
            **course,
            "enrolled": [
                {"user_id": sid, "name": profiles[sid].get("username"), "email": profiles[sid].get("email_id")}
                for sid in course.get("enrolled", []) if sid in profiles
            ],
            "total_sections": len(sections),
            "total_duration": total_duration(sections)
        })
    return result


async def get_my_courses(db: AsyncIOMotorDatabase, user) -> list:
    if user.role == UserRole.STUDENT.value:
        return await get_student_courses(db, user.user_id)
    if user.role == UserRole.TEACHER.value:
        return await get_teacher_courses(db, user.user_id)
    return []
