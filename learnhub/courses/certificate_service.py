"""
Certificate issuance, lookup and background rendering.
"""

import asyncio
import logging
import os
import secrets
import string
import time
from datetime import datetime

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from learnhub import config
from learnhub.courses import database as store
from learnhub.courses.certificate_renderer import CertificateRenderData, render_certificate_pdf
from learnhub.courses.errors import ConflictError, ForbiddenError, NotFoundError
from learnhub.courses.lifecycle import calculate_grade
from learnhub.courses.models import UserRole

logger = logging.getLogger(__name__)

BASE36 = string.digits + string.ascii_uppercase


def _random_base36(length: int) -> str:
    return "".join(secrets.choice(BASE36) for _ in range(length))


def generate_certificate_number() -> str:
    """CERT-<unix millis>-<5 base36 chars>"""
    return f"CERT-{int(time.time() * 1000)}-{_random_base36(5)}"


def generate_verification_code() -> str:
    return _random_base36(8)


def download_url(certificate_id: str) -> str:
    return f"/api/certificates/{certificate_id}/download"


def with_download_url(certificate: dict) -> dict:
    return {**certificate, "download_url": download_url(certificate["certificate_id"])}


async def issue_certificate(db: AsyncIOMotorDatabase, enrollment: dict, progress: int) -> dict:
    """Create the certificate record for a completed enrollment"""
    now = datetime.utcnow()
    certificate = {
        "certificate_id": store.generate_id("CRT"),
        "student_id": enrollment["student_id"],
        "course_id": enrollment["course_id"],
        "enrollment_id": enrollment["enrollment_id"],
        "certificate_number": generate_certificate_number(),
        "verification_code": generate_verification_code(),
        "grade": calculate_grade(progress),
        "completion_date": now,
        "date_issued": now,
        "is_verified": False,
        "certificate_url": "",
        "created_at": now,
        "updated_at": now
    }

    try:
        created = await store.insert_certificate(db, certificate)
    except DuplicateKeyError:
        raise ConflictError("Certificate number or verification code already exists")

    logger.info(
        "Issued certificate %s for enrollment %s",
        created["certificate_number"], enrollment["enrollment_id"]
    )
    return created


async def _with_course_details(db: AsyncIOMotorDatabase, certificate: dict) -> dict:
    course = await store.get_course(db, certificate["course_id"])
    result = with_download_url(certificate)
    result["course"] = {
        "course_id": certificate["course_id"],
        "title": course.get("title") if course else None,
        "educator": course.get("educator") if course else None
    }
    return result


async def get_certificate_details(db: AsyncIOMotorDatabase, certificate_id: str) -> dict:
    certificate = await store.get_certificate(db, certificate_id)
    if not certificate:
        raise NotFoundError("Certificate not found")
    return await _with_course_details(db, certificate)


async def list_student_certificates(db: AsyncIOMotorDatabase, student_id: str) -> list:
    """Student's certificates, most recent completion first"""
    certificates = await store.list_student_certificates(db, student_id)
    return [await _with_course_details(db, c) for c in certificates]


async def verify_certificate(db: AsyncIOMotorDatabase, verification_code: str) -> dict:
    """Public view of a certificate looked up by verification code"""
    certificate = await store.get_certificate_by_code(db, verification_code)
    if not certificate:
        raise NotFoundError("Certificate not found or invalid verification code")

    student = await store.get_user_profile(db, certificate["student_id"])
    course = await store.get_course(db, certificate["course_id"])

    return {
        "certificate_number": certificate["certificate_number"],
        "student_name": student.get("username") if student else None,
        "course_title": course.get("title") if course else None,
        "instructor": course.get("educator") if course else None,
        "completion_date": certificate["completion_date"],
        "grade": certificate.get("grade"),
        "is_verified": certificate.get("is_verified", False)
    }


def certificate_file_path(certificate_url: str) -> str:
    """Local path of a rendered certificate from its URL path"""
    return os.path.join(config.CERTIFICATES_DIR, os.path.basename(certificate_url))


async def get_certificate_file(db: AsyncIOMotorDatabase, certificate_id: str, user) -> tuple:
    """
    Resolve a rendered certificate for download.

    Returns ``(file_path, download_name)``. Only the holder or an admin may
    download.
    """
    certificate = await store.get_certificate(db, certificate_id)
    if not certificate:
        raise NotFoundError("Certificate not found")

    if certificate["student_id"] != user.user_id and user.role != UserRole.ADMIN.value:
        raise ForbiddenError("Not authorized to download this certificate")

    if not certificate.get("certificate_url"):
        raise NotFoundError("Certificate file not found")

    path = certificate_file_path(certificate["certificate_url"])
    if not os.path.exists(path):
        raise NotFoundError("Certificate file not found on server")

    return path, f"certificate_{certificate['certificate_number']}.pdf"


async def build_render_data(db: AsyncIOMotorDatabase, certificate_id: str) -> CertificateRenderData:
    certificate = await store.get_certificate(db, certificate_id)
    if not certificate:
        raise NotFoundError("Certificate not found")

    student = await store.get_user_profile(db, certificate["student_id"])
    if not student:
        raise NotFoundError("Certificate holder not found")

    course = await store.get_course(db, certificate["course_id"])
    if not course:
        raise NotFoundError("Course not found")

    return CertificateRenderData(
        certificate_number=certificate["certificate_number"],
        verification_code=certificate["verification_code"],
        student_name=student.get("username") or student["user_id"],
        course_title=course["title"],
        instructor_name=course.get("educator", ""),
        completion_date=certificate["completion_date"],
        grade=certificate.get("grade")
    )


async def render_and_store_certificate(db: AsyncIOMotorDatabase, certificate_id: str):
    """
    Background step after issuance: render the PDF and save its URL.

    Best effort. Failures are logged and the certificate keeps an empty URL.
    """
    try:
        data = await build_render_data(db, certificate_id)
        url = await asyncio.to_thread(render_certificate_pdf, data)
        await store.set_certificate_url(db, certificate_id, url)
        logger.info("Rendered certificate %s to %s", data.certificate_number, url)
    except Exception:
        logger.exception("Certificate rendering failed for %s", certificate_id)
