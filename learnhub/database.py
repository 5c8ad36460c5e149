"""
Database Session Management
MongoDB connection lifecycle and index setup
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from learnhub import config

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Manages MongoDB connection lifecycle"""

    def __init__(self):
        self.client: Optional[AsyncIOMotorClient] = None
        self.db: Optional[AsyncIOMotorDatabase] = None

    def connect(self, mongo_url: str = None, db_name: str = None):
        """Initialize MongoDB connection"""
        mongo_url = mongo_url or config.MONGO_URL
        if not mongo_url:
            raise RuntimeError("MONGO_URL environment variable required")

        self.client = AsyncIOMotorClient(mongo_url)
        self.db = self.client[db_name or config.MONGO_DB_NAME]
        logger.info("MongoDB connected (database=%s)", self.db.name)

    def disconnect(self):
        """Close MongoDB connection"""
        if self.client:
            self.client.close()
            self.client = None
            self.db = None
            logger.info("MongoDB disconnected")

    def get_database(self) -> AsyncIOMotorDatabase:
        """Get database instance for dependency injection"""
        if self.db is None:
            raise RuntimeError("Database not initialized. Call connect() first.")
        return self.db


# Global database manager
db_manager = DatabaseManager()


async def get_db() -> AsyncIOMotorDatabase:
    """FastAPI dependency for database access"""
    return db_manager.get_database()


async def create_indexes(db: AsyncIOMotorDatabase):
    """Create MongoDB indexes (unique constraints included)"""
    # Users
    await db.users_profile.create_index("user_id", unique=True)
    await db.users_profile.create_index("role")

    # Courses
    await db.courses.create_index("course_id", unique=True)
    await db.courses.create_index([("status", 1), ("created_at", -1)])
    await db.courses.create_index("owner_id")

    # Enrollments: one per student per course
    await db.enrollments.create_index("enrollment_id", unique=True)
    await db.enrollments.create_index([("student_id", 1), ("course_id", 1)], unique=True)
    await db.enrollments.create_index("status")

    # Certificates
    await db.certificates.create_index("certificate_id", unique=True)
    await db.certificates.create_index("certificate_number", unique=True)
    await db.certificates.create_index("verification_code", unique=True)
    await db.certificates.create_index([("student_id", 1), ("completion_date", -1)])

    logger.info("Indexes created")
