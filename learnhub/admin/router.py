"""
Admin API Router
Dashboard, enrollment records, course and user administration
"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, validator
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from learnhub import config
from learnhub.admin import users as user_admin
from learnhub.admin.analytics import build_enrollment_query, get_dashboard_stats, get_enrollment_records
from learnhub.auth.permissions import UserContext, get_current_admin
from learnhub.courses import course_service
from learnhub.courses import database as store
from learnhub.courses.lifecycle import EnrollmentStatus
from learnhub.courses.models import CourseStatus, UserRole
from learnhub.courses.responses import paginate, page_skip, success
from learnhub.database import get_db

router = APIRouter(tags=["Admin"])


# ============================================================================
# PYDANTIC MODELS
# ============================================================================

class UserUpdateRequest(BaseModel):
    username: Optional[str] = None
    email_id: Optional[str] = None
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    bio: Optional[str] = None

    @validator('username')
    def validate_username(cls, v):
        if v is not None and not v.strip():
            raise ValueError('Username cannot be empty')
        return v.strip() if v else v


# ============================================================================
# DASHBOARD
# ============================================================================

@router.get("/dashboard")
async def dashboard(
    admin: UserContext = Depends(get_current_admin),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    return success(await get_dashboard_stats(db))


@router.get("/enrollments")
async def list_enrollments(
    page: int = Query(1, ge=1),
    limit: int = Query(config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
    status: Optional[EnrollmentStatus] = None,
    course: Optional[str] = None,
    student: Optional[str] = None,
    admin: UserContext = Depends(get_current_admin),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    Enrollment records with pagination and filters

    Filters:
    - status: active, completed, dropped
    - course: course_id
    - student: student user_id
    """
    query = build_enrollment_query(status.value if status else None, course, student)
    enrollments, total = await get_enrollment_records(db, query, page_skip(page, limit), limit)
    return success(enrollments, pagination=paginate(page, limit, total))


# ============================================================================
# COURSES
# ============================================================================

@router.get("/courses")
async def list_courses(
    page: int = Query(1, ge=1),
    limit: int = Query(config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
    status: Optional[CourseStatus] = None,
    teacher: Optional[str] = None,
    search: Optional[str] = None,
    admin: UserContext = Depends(get_current_admin),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    query = store.build_admin_course_query(status.value if status else None, teacher, search)
    courses, total = await course_service.list_admin_courses(db, query, page_skip(page, limit), limit)
    return success(courses, pagination=paginate(page, limit, total))


@router.delete("/courses/{course_id}")
async def delete_course(
    course_id: str,
    admin: UserContext = Depends(get_current_admin),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    await course_service.delete_course(db, course_id)
    return success(message="Course deleted successfully")


# ============================================================================
# USERS
# ============================================================================

@router.get("/users")
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
    role: Optional[UserRole] = None,
    status: Optional[str] = Query(None, pattern="^(active|inactive)$"),
    search: Optional[str] = None,
    admin: UserContext = Depends(get_current_admin),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    List all users with pagination and filters

    Filters:
    - role: student, teacher, admin
    - status: active, inactive
    - search: Search by username or email
    """
    query = user_admin.build_user_query(role.value if role else None, status, search)
    users, total = await user_admin.list_users(db, query, page_skip(page, limit), limit)
    return success(users, pagination=paginate(page, limit, total))


@router.get("/users/{user_id}")
async def get_user(
    user_id: str,
    admin: UserContext = Depends(get_current_admin),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    return success(await user_admin.get_user(db, user_id))


@router.put("/users/{user_id}")
async def update_user(
    user_id: str,
    updates: UserUpdateRequest,
    admin: UserContext = Depends(get_current_admin),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    user = await user_admin.update_user(db, user_id, updates.dict(exclude_unset=True))
    return success(user, message="User updated successfully")


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: str,
    admin: UserContext = Depends(get_current_admin),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    await user_admin.delete_user(db, user_id, admin.user_id)
    return success(message="User deleted successfully")
