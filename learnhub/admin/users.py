"""
Admin user management over the users_profile collection.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from learnhub.courses.database import search_regex
from learnhub.courses.errors import InvalidStateError, NotFoundError
from learnhub.courses.lifecycle import EnrollmentStatus

logger = logging.getLogger(__name__)


def build_user_query(role: Optional[str] = None, status: Optional[str] = None,
                     search: Optional[str] = None) -> dict:
    """Filters: role, status (active/inactive), search over name and email"""
    query = {}
    if role:
        query["role"] = role
    if status == "active":
        query["is_active"] = {"$ne": False}
    elif status == "inactive":
        query["is_active"] = False
    if search:
        query["$or"] = [
            {"username": search_regex(search)},
            {"email_id": search_regex(search)}
        ]
    return query


async def list_users(db: AsyncIOMotorDatabase, query: dict, skip: int, limit: int) -> Tuple[List[dict], int]:
    users = await db.users_profile.find(
        query, {"_id": 0}, sort=[("created_at", -1)], skip=skip, limit=limit
    ).to_list(length=limit)
    total = await db.users_profile.count_documents(query)
    return users, total


async def get_user(db: AsyncIOMotorDatabase, user_id: str) -> dict:
    user = await db.users_profile.find_one({"user_id": user_id}, {"_id": 0})
    if not user:
        raise NotFoundError("User not found")
    return user


async def update_user(db: AsyncIOMotorDatabase, user_id: str, updates: dict) -> dict:
    updates = {k: getattr(v, "value", v) for k, v in updates.items() if v is not None}
    if not updates:
        return await get_user(db, user_id)

    updates["updated_at"] = datetime.utcnow()
    user = await db.users_profile.find_one_and_update(
        {"user_id": user_id},
        {"$set": updates},
        projection={"_id": 0},
        return_document=ReturnDocument.AFTER
    )
    if not user:
        raise NotFoundError("User not found")

    logger.info("User %s updated: %s", user_id, sorted(k for k in updates if k != "updated_at"))
    return user


async def delete_user(db: AsyncIOMotorDatabase, user_id: str, admin_id: str):
    """
    Delete a user profile.

    Refused for the calling admin, for users holding active or completed
    enrollments and for teachers who still own courses.
    """
    if user_id == admin_id:
        raise InvalidStateError("Cannot delete your own account")

    await get_user(db, user_id)

    enrollments = await db.enrollments.count_documents({
        "student_id": user_id,
        "status": {"$in": [EnrollmentStatus.ACTIVE.value, EnrollmentStatus.COMPLETED.value]}
    })
    if enrollments > 0:
        raise InvalidStateError("Cannot delete user with active enrollments")

    if await db.courses.count_documents({"owner_id": user_id}) > 0:
        raise InvalidStateError("Cannot delete user who owns courses")

    await db.users_profile.delete_one({"user_id": user_id})
    logger.info("User %s deleted by %s", user_id, admin_id)
