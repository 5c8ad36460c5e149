from fastapi import HTTPException, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from learnhub.auth.auth_utils import verify_token
from learnhub.courses import database as store
from learnhub.courses.models import UserRole
from learnhub.database import get_db


class UserContext:
    """
    Contains the validated caller profile
    """
    def __init__(self, user_id: str, profile: dict):
        self.user_id = user_id
        self.username = profile.get("username")
        self.email = profile.get("email_id")
        self.role = profile.get("role", UserRole.STUDENT.value)
        self.is_active = profile.get("is_active", True)
        self.profile = profile


async def get_current_user(
    payload: dict = Depends(verify_token),
    db: AsyncIOMotorDatabase = Depends(get_db)
) -> UserContext:
    """
    Dependency: resolves the token subject to a profile

    Raises:
        401: Missing subject or unknown user
        403: Deactivated account
    """
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token: missing user_id")

    profile = await store.get_user_profile(db, user_id)
    if not profile:
        raise HTTPException(status_code=401, detail="Not authorized, user not found")

    if not profile.get("is_active", True):
        raise HTTPException(status_code=403, detail="Account is deactivated")

    return UserContext(user_id, profile)


def _require_role(user: UserContext, role: UserRole, label: str) -> UserContext:
    if user.role != role.value:
        raise HTTPException(
            status_code=403,
            detail=f"Access denied. {label} privileges required."
        )
    return user


async def get_current_student(user: UserContext = Depends(get_current_user)) -> UserContext:
    return _require_role(user, UserRole.STUDENT, "Student")


async def get_current_teacher(user: UserContext = Depends(get_current_user)) -> UserContext:
    return _require_role(user, UserRole.TEACHER, "Teacher")


async def get_current_admin(user: UserContext = Depends(get_current_user)) -> UserContext:
    return _require_role(user, UserRole.ADMIN, "Admin")
