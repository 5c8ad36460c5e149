from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from datetime import datetime
from typing import List, Optional, Dict, Tuple
import re
import uuid

from learnhub import config
from learnhub.courses.models import CourseStatus

# ==================== HELPERS ====================

def generate_id(prefix: str) -> str:
    """Generate unique ID with prefix"""
    return f"{prefix}_{uuid.uuid4().hex[:12].upper()}"

def enum_value(value):
    """Plain value for enum members, passthrough otherwise"""
    return getattr(value, "value", value)

def serialize_mongo(doc: Optional[dict]) -> Optional[dict]:
    """Drop the internal Mongo _id before a document leaves the service"""
    if doc is None:
        return None
    doc = dict(doc)
    doc.pop("_id", None)
    return doc

def serialize_many(docs: List[dict]) -> List[dict]:
    return [serialize_mongo(doc) for doc in docs]

def search_regex(text: str) -> dict:
    """Case-insensitive literal substring match"""
    return {"$regex": re.escape(text), "$options": "i"}

# ==================== USER PROFILES ====================

async def get_user_profile(db: AsyncIOMotorDatabase, user_id: str) -> Optional[dict]:
    return await db.users_profile.find_one({"user_id": user_id}, {"_id": 0})

async def get_user_profiles(db: AsyncIOMotorDatabase, user_ids: List[str]) -> Dict[str, dict]:
    """Profiles keyed by user_id for the given ids"""
    if not user_ids:
        return {}
    profiles = await db.users_profile.find(
        {"user_id": {"$in": list(set(user_ids))}}, {"_id": 0}
    ).to_list(length=None)
    return {p["user_id"]: p for p in profiles}

# ==================== COURSE CRUD ====================

async def create_course(db: AsyncIOMotorDatabase, course_data: dict, owner: dict) -> dict:
    """Create new course owned by a teacher"""
    now = datetime.utcnow()
    course = {
        "course_id": generate_id("COURSE"),
        "owner_id": owner["user_id"],
        "educator": owner.get("username") or owner["user_id"],
        "title": course_data["title"],
        "description": course_data["description"],
        "categories": course_data["categories"],
        "price": float(course_data.get("price") or 0),
        "level": enum_value(course_data.get("level") or "beginner"),
        "language": course_data.get("language") or "English",
        "thumbnail_url": course_data.get("thumbnail_url") or "",
        "status": enum_value(course_data.get("status") or CourseStatus.DRAFT),
        "is_featured": False,
        "sections": [],
        "enrolled": [],
        "total_enrollments": 0,
        "rating": 0.0,
        "total_ratings": 0,
        "created_at": now,
        "updated_at": now
    }

    await db.courses.insert_one(course)
    return serialize_mongo(course)

async def get_course(db: AsyncIOMotorDatabase, course_id: str) -> Optional[dict]:
    """Get course by ID"""
    return await db.courses.find_one({"course_id": course_id}, {"_id": 0})

def build_public_course_query(category: str = None, level: str = None, search: str = None) -> dict:
    """Catalog filters for public callers (published courses only)"""
    query = {"status": CourseStatus.PUBLISHED.value}
    if category:
        query["categories"] = {"$in": [category]}
    if level:
        query["level"] = level
    if search:
        query["$or"] = [
            {"title": search_regex(search)},
            {"description": search_regex(search)}
        ]
    return query

def build_admin_course_query(status: str = None, teacher_id: str = None, search: str = None) -> dict:
    """Catalog filters for admin callers (any status)"""
    query = {}
    if status:
        query["status"] = status
    if teacher_id:
        query["owner_id"] = teacher_id
    if search:
        query["title"] = search_regex(search)
    return query

async def list_courses(db: AsyncIOMotorDatabase, query: dict, skip: int = 0, limit: int = 10) -> Tuple[List[dict], int]:
    """Page of courses (newest first) and the total match count"""
    courses = await db.courses.find(
        query, {"_id": 0}, sort=[("created_at", -1)], skip=skip, limit=limit
    ).to_list(length=limit)
    total = await db.courses.count_documents(query)
    return courses, total

async def list_owner_courses(db: AsyncIOMotorDatabase, owner_id: str) -> List[dict]:
    return await db.courses.find(
        {"owner_id": owner_id}, {"_id": 0}, sort=[("created_at", -1)]
    ).to_list(length=None)

async def update_course(db: AsyncIOMotorDatabase, course_id: str, updates: dict) -> Optional[dict]:
    """Apply field updates and return the updated course"""
    updates["updated_at"] = datetime.utcnow()
    return await db.courses.find_one_and_update(
        {"course_id": course_id},
        {"$set": updates},
        projection={"_id": 0},
        return_document=ReturnDocument.AFTER
    )

async def delete_course(db: AsyncIOMotorDatabase, course_id: str) -> bool:
    result = await db.courses.delete_one({"course_id": course_id})
    return result.deleted_count > 0

async def add_section(db: AsyncIOMotorDatabase, course: dict, section_data: dict) -> dict:
    """Append a section; order defaults to the end of the list"""
    section = {
        "section_id": generate_id("SEC"),
        "title": section_data["title"],
        "description": section_data["description"],
        "content": section_data["content"],
        "video_url": section_data.get("video_url") or "",
        "duration": section_data.get("duration") or 0,
        "order": section_data.get("order") or len(course.get("sections", [])) + 1,
        "is_published": section_data.get("is_published", False),
        "created_at": datetime.utcnow()
    }

    return await db.courses.find_one_and_update(
        {"course_id": course["course_id"]},
        {"$push": {"sections": section}, "$set": {"updated_at": datetime.utcnow()}},
        projection={"_id": 0},
        return_document=ReturnDocument.AFTER
    )

# ==================== COURSE ENROLLED LIST ====================

async def add_student_to_course(db: AsyncIOMotorDatabase, course: dict, student_id: str):
    """Append student to the enrolled list and bump the counter"""
    if config.ATOMIC_COURSE_COUNTERS:
        await db.courses.update_one(
            {"course_id": course["course_id"]},
            {"$addToSet": {"enrolled": student_id}, "$inc": {"total_enrollments": 1}}
        )
        return

    # Read-modify-write of the values loaded with the course
    await db.courses.update_one(
        {"course_id": course["course_id"]},
        {"$set": {
            "enrolled": list(course.get("enrolled", [])) + [student_id],
            "total_enrollments": course.get("total_enrollments", 0) + 1
        }}
    )

async def remove_student_from_course(db: AsyncIOMotorDatabase, course: dict, student_id: str):
    """Drop student from the enrolled list; the counter never goes below 0"""
    if config.ATOMIC_COURSE_COUNTERS:
        await db.courses.update_one(
            {"course_id": course["course_id"]},
            {"$pull": {"enrolled": student_id}}
        )
        await db.courses.update_one(
            {"course_id": course["course_id"], "total_enrollments": {"$gt": 0}},
            {"$inc": {"total_enrollments": -1}}
        )
        return

    await db.courses.update_one(
        {"course_id": course["course_id"]},
        {"$set": {
            "enrolled": [sid for sid in course.get("enrolled", []) if sid != student_id],
            "total_enrollments": max(0, course.get("total_enrollments", 0) - 1)
        }}
    )

# ==================== ENROLLMENT CRUD ====================

async def create_enrollment(db: AsyncIOMotorDatabase, student_id: str, course_id: str, payment_status: str) -> dict:
    """Insert a fresh active enrollment"""
    now = datetime.utcnow()
    enrollment = {
        "enrollment_id": generate_id("ENR"),
        "student_id": student_id,
        "course_id": course_id,
        "progress": 0,
        "completed_sections": [],
        "status": "active",
        "payment_status": payment_status,
        "certificate_issued": False,
        "certificate_id": None,
        "enrolled_at": now,
        "last_accessed": now,
        "created_at": now,
        "updated_at": now
    }

    await db.enrollments.insert_one(enrollment)
    return serialize_mongo(enrollment)

async def get_enrollment(db: AsyncIOMotorDatabase, student_id: str, course_id: str) -> Optional[dict]:
    """Get student enrollment"""
    return await db.enrollments.find_one(
        {"student_id": student_id, "course_id": course_id}, {"_id": 0}
    )

async def update_enrollment(db: AsyncIOMotorDatabase, enrollment_id: str, updates: dict) -> Optional[dict]:
    updates["updated_at"] = datetime.utcnow()
    return await db.enrollments.find_one_and_update(
        {"enrollment_id": enrollment_id},
        {"$set": updates},
        projection={"_id": 0},
        return_document=ReturnDocument.AFTER
    )

async def delete_enrollment(db: AsyncIOMotorDatabase, enrollment_id: str) -> bool:
    result = await db.enrollments.delete_one({"enrollment_id": enrollment_id})
    return result.deleted_count > 0

async def list_student_enrollments(db: AsyncIOMotorDatabase, student_id: str) -> List[dict]:
    """All enrollments for a student, newest first"""
    return await db.enrollments.find(
        {"student_id": student_id}, {"_id": 0}, sort=[("enrolled_at", -1)]
    ).to_list(length=None)

async def list_course_enrollments(db: AsyncIOMotorDatabase, course_id: str) -> List[dict]:
    return await db.enrollments.find(
        {"course_id": course_id}, {"_id": 0}, sort=[("enrolled_at", -1)]
    ).to_list(length=None)

async def count_course_enrollments(db: AsyncIOMotorDatabase, course_id: str) -> int:
    return await db.enrollments.count_documents({"course_id": course_id})

# ==================== CERTIFICATE CRUD ====================

async def insert_certificate(db: AsyncIOMotorDatabase, certificate: dict) -> dict:
    await db.certificates.insert_one(certificate)
    return serialize_mongo(certificate)

async def get_certificate(db: AsyncIOMotorDatabase, certificate_id: str) -> Optional[dict]:
    return await db.certificates.find_one({"certificate_id": certificate_id}, {"_id": 0})

async def get_certificate_by_code(db: AsyncIOMotorDatabase, verification_code: str) -> Optional[dict]:
    return await db.certificates.find_one({"verification_code": verification_code}, {"_id": 0})

async def list_student_certificates(db: AsyncIOMotorDatabase, student_id: str) -> List[dict]:
    return await db.certificates.find(
        {"student_id": student_id}, {"_id": 0}, sort=[("completion_date", -1)]
    ).to_list(length=None)

async def set_certificate_url(db: AsyncIOMotorDatabase, certificate_id: str, url: str) -> bool:
    """Store the rendered file URL"""
    result = await db.certificates.update_one(
        {"certificate_id": certificate_id},
        {"$set": {"certificate_url": url, "updated_at": datetime.utcnow()}}
    )
    return result.modified_count > 0
