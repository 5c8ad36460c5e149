"""
Enrollment endpoints: enroll/unenroll, progress, section completion and the
per-course certificate.
"""

from fastapi import APIRouter, BackgroundTasks, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from learnhub.auth.permissions import UserContext, get_current_student, get_current_user
from learnhub.courses import enrollment_service
from learnhub.courses.responses import success
from learnhub.database import get_db

router = APIRouter(tags=["Enrollments"])

@router.get("/mycourses")
async def my_courses(
    user: UserContext = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    courses = await enrollment_service.get_my_courses(db, user)
    return success(courses)

@router.get("/progress/{course_id}")
async def get_progress(
    course_id: str,
    student: UserContext = Depends(get_current_student),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    progress = await enrollment_service.get_progress(db, student.user_id, course_id)
    return success(progress)

@router.post("/progress/{course_id}/section/{section_id}/complete")
async def complete_section(
    course_id: str,
    section_id: str,
    background_tasks: BackgroundTasks,
    student: UserContext = Depends(get_current_student),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    Mark a section complete. Reaching 100% completes the course and issues a
    certificate; the PDF is rendered after the response is sent.
    """
    result = await enrollment_service.complete_section(
        db, student.user_id, course_id, section_id, background_tasks
    )
    message = "Congratulations! Course completed!" if result["course_completed"] else "Section marked as complete"
    return success(result, message=message)

@router.get("/certificate/{course_id}")
async def get_certificate(
    course_id: str,
    student: UserContext = Depends(get_current_student),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    certificate = await enrollment_service.get_certificate(db, student.user_id, course_id)
    return success(certificate)

@router.post("/{course_id}", status_code=201)
async def enroll(
    course_id: str,
    student: UserContext = Depends(get_current_student),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    enrollment = await enrollment_service.enroll(db, student.user_id, course_id)
    return success(enrollment, message="Successfully enrolled in course")

@router.delete("/{course_id}")
async def unenroll(
    course_id: str,
    student: UserContext = Depends(get_current_student),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    await enrollment_service.unenroll(db, student.user_id, course_id)
    return success(message="Successfully unenrolled from course")
