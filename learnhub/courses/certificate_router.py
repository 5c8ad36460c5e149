from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from motor.motor_asyncio import AsyncIOMotorDatabase

from learnhub.auth.permissions import UserContext, get_current_student, get_current_user
from learnhub.courses import certificate_service
from learnhub.courses.responses import success
from learnhub.database import get_db

router = APIRouter(tags=["Certificates"])

@router.get("/student")
async def student_certificates(
    student: UserContext = Depends(get_current_student),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    certificates = await certificate_service.list_student_certificates(db, student.user_id)
    return success(certificates)

@router.get("/verify/{verification_code}")
async def verify_certificate(verification_code: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    """Public certificate check by verification code"""
    certificate = await certificate_service.verify_certificate(db, verification_code)
    return success(certificate, message="Certificate verified successfully")

@router.get("/{certificate_id}/download")
async def download_certificate(
    certificate_id: str,
    user: UserContext = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    path, filename = await certificate_service.get_certificate_file(db, certificate_id, user)
    return FileResponse(path, media_type="application/pdf", filename=filename)
