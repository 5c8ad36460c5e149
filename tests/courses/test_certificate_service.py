import os
import re
from datetime import datetime
from unittest.mock import patch

import pytest

from learnhub.auth.permissions import UserContext
from learnhub.courses import certificate_service
from learnhub.courses import database as store
from learnhub.courses.errors import ConflictError, ForbiddenError, NotFoundError


@pytest.fixture
async def enrollment(db, make_course):
    course = await make_course(sections=1)
    return await store.create_enrollment(db, "USR_STUDENT", course["course_id"], "completed")


def test_identifier_formats():
    assert re.fullmatch(r"CERT-\d{13}-[0-9A-Z]{5}", certificate_service.generate_certificate_number())
    assert re.fullmatch(r"[0-9A-Z]{8}", certificate_service.generate_verification_code())


async def test_issue_certificate(db, enrollment):
    certificate = await certificate_service.issue_certificate(db, enrollment, 100)

    assert certificate["certificate_id"].startswith("CRT_")
    assert certificate["enrollment_id"] == enrollment["enrollment_id"]
    assert certificate["grade"] == "A+"
    assert certificate["is_verified"] is False
    assert "_id" not in certificate


async def test_duplicate_verification_code_conflicts(db, enrollment):
    with patch.object(certificate_service, "generate_verification_code", return_value="SAMECODE"):
        await certificate_service.issue_certificate(db, enrollment, 100)
        with pytest.raises(ConflictError):
            await certificate_service.issue_certificate(db, enrollment, 100)


async def test_verify_returns_public_fields_only(db, enrollment):
    issued = await certificate_service.issue_certificate(db, enrollment, 100)

    verified = await certificate_service.verify_certificate(db, issued["verification_code"])

    assert set(verified) == {
        "certificate_number", "student_name", "course_title", "instructor",
        "completion_date", "grade", "is_verified"
    }
    assert verified["student_name"] == "Alice Learner"
    assert verified["course_title"] == "Python Basics"
    assert verified["instructor"] == "Prof. Ada"


async def test_verify_unknown_code(db):
    with pytest.raises(NotFoundError):
        await certificate_service.verify_certificate(db, "NOPE0000")


async def test_list_student_certificates_newest_first(db, make_course):
    for day in (1, 3, 2):
        course = await make_course(title=f"Course {day}")
        enrollment = await store.create_enrollment(db, "USR_STUDENT", course["course_id"], "completed")
        issued = await certificate_service.issue_certificate(db, enrollment, 100)
        await db.certificates.update_one(
            {"certificate_id": issued["certificate_id"]},
            {"$set": {"completion_date": datetime(2024, 1, day)}}
        )

    certificates = await certificate_service.list_student_certificates(db, "USR_STUDENT")

    assert [c["course"]["title"] for c in certificates] == ["Course 3", "Course 2", "Course 1"]
    assert all(c["download_url"].endswith("/download") for c in certificates)


class TestRenderAndDownload:

    async def test_render_stores_url_and_file(self, db, enrollment, users):
        issued = await certificate_service.issue_certificate(db, enrollment, 100)

        await certificate_service.render_and_store_certificate(db, issued["certificate_id"])

        stored = await store.get_certificate(db, issued["certificate_id"])
        assert stored["certificate_url"] == f"/uploads/certificates/certificate_{issued['certificate_number']}.pdf"

        path, filename = await certificate_service.get_certificate_file(
            db, issued["certificate_id"], UserContext("USR_STUDENT", users["student"])
        )
        assert os.path.exists(path)
        assert filename == f"certificate_{issued['certificate_number']}.pdf"

    async def test_render_failure_is_swallowed(self, db, enrollment):
        issued = await certificate_service.issue_certificate(db, enrollment, 100)
        await db.users_profile.delete_one({"user_id": "USR_STUDENT"})

        await certificate_service.render_and_store_certificate(db, issued["certificate_id"])

        stored = await store.get_certificate(db, issued["certificate_id"])
        assert stored["certificate_url"] == ""

    async def test_admin_can_download(self, db, enrollment, users):
        issued = await certificate_service.issue_certificate(db, enrollment, 100)
        await certificate_service.render_and_store_certificate(db, issued["certificate_id"])

        path, _ = await certificate_service.get_certificate_file(
            db, issued["certificate_id"], UserContext("USR_ADMIN", users["admin"])
        )
        assert os.path.exists(path)

    async def test_other_student_forbidden(self, db, enrollment, users):
        issued = await certificate_service.issue_certificate(db, enrollment, 100)

        with pytest.raises(ForbiddenError):
            await certificate_service.get_certificate_file(
                db, issued["certificate_id"], UserContext("USR_OTHER", users["other_student"])
            )

    async def test_not_rendered_yet(self, db, enrollment, users):
        issued = await certificate_service.issue_certificate(db, enrollment, 100)

        with pytest.raises(NotFoundError):
            await certificate_service.get_certificate_file(
                db, issued["certificate_id"], UserContext("USR_STUDENT", users["student"])
            )

    async def test_file_missing_on_disk(self, db, enrollment, users):
        issued = await certificate_service.issue_certificate(db, enrollment, 100)
        await store.set_certificate_url(db, issued["certificate_id"], "/uploads/certificates/certificate_gone.pdf")

        with pytest.raises(NotFoundError):
            await certificate_service.get_certificate_file(
                db, issued["certificate_id"], UserContext("USR_STUDENT", users["student"])
            )
