from fastapi import APIRouter, Depends, Query
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import Optional

from learnhub import config
from learnhub.auth.permissions import UserContext, get_current_teacher
from learnhub.courses import course_service
from learnhub.courses.models import CourseCreate, CourseLevel, CourseUpdate, SectionCreate
from learnhub.courses.responses import paginate, page_skip, success
from learnhub.database import get_db

router = APIRouter(tags=["Courses"])

# ==================== PUBLIC CATALOG ====================

@router.get("")
async def list_courses(
    page: int = Query(1, ge=1),
    limit: int = Query(config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
    category: Optional[str] = None,
    level: Optional[CourseLevel] = None,
    search: Optional[str] = None,
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """Published courses with optional category, level and text filters"""
    courses, total = await course_service.list_public_courses(
        db, page_skip(page, limit), limit,
        category=category,
        level=level.value if level else None,
        search=search
    )
    return success(courses, pagination=paginate(page, limit, total))

# ==================== TEACHER ====================

@router.get("/teacher/courses")
async def my_courses(
    teacher: UserContext = Depends(get_current_teacher),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    courses = await course_service.list_teacher_courses(db, teacher.user_id)
    return success(courses)

@router.post("/teacher/course", status_code=201)
async def create_course(
    course: CourseCreate,
    teacher: UserContext = Depends(get_current_teacher),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    created = await course_service.create_course(db, course.dict(), teacher.profile)
    return success(created, message="Course created successfully")

@router.put("/teacher/course/{course_id}")
async def update_course(
    course_id: str,
    updates: CourseUpdate,
    teacher: UserContext = Depends(get_current_teacher),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    updated = await course_service.update_course(
        db, course_id, teacher.user_id, updates.dict(exclude_unset=True)
    )
    return success(updated, message="Course updated successfully")

@router.delete("/teacher/course/{course_id}")
async def delete_course(
    course_id: str,
    teacher: UserContext = Depends(get_current_teacher),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    await course_service.delete_course(db, course_id, teacher.user_id)
    return success(message="Course deleted successfully")

@router.post("/teacher/course/{course_id}/section", status_code=201)
async def add_section(
    course_id: str,
    section: SectionCreate,
    teacher: UserContext = Depends(get_current_teacher),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    updated = await course_service.add_section(db, course_id, teacher.user_id, section.dict())
    return success(updated, message="Section added successfully")

@router.get("/teacher/course/{course_id}/students")
async def course_students(
    course_id: str,
    teacher: UserContext = Depends(get_current_teacher),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    students = await course_service.list_course_students(db, course_id, teacher.user_id)
    return success(students)

# ==================== PUBLIC DETAIL ====================

@router.get("/{course_id}")
async def get_course(course_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    course = await course_service.get_course_details(db, course_id)
    return success(course)
