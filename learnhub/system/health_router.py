import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorDatabase

from learnhub.courses.responses import error, success
from learnhub.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["System"])

COLLECTIONS = ("users_profile", "courses", "enrollments", "certificates")


@router.get("/health")
async def health(db: AsyncIOMotorDatabase = Depends(get_db)):
    """Database reachability and document counts"""
    checked_at = datetime.utcnow().isoformat()

    try:
        await db.command("ping")
        counts = {name: await db[name].count_documents({}) for name in COLLECTIONS}
    except Exception:
        logger.exception("Health check failed")
        body = error("Database unavailable")
        body["data"] = {"database": "DOWN", "timestamp": checked_at}
        return JSONResponse(status_code=503, content=body)

    return success({"database": "UP", "timestamp": checked_at, "collections": counts})
