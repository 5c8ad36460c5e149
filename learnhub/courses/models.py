from pydantic import BaseModel, Field, validator
from typing import List, Optional
from enum import Enum

# ==================== ENUMS ====================

class UserRole(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"

class CourseLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

class CourseStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"

class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"

# ==================== COURSE MODELS ====================

class CourseCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)
    categories: List[str]
    price: float = Field(0, ge=0)
    level: CourseLevel = CourseLevel.BEGINNER
    language: str = "English"
    thumbnail_url: Optional[str] = ""
    status: CourseStatus = CourseStatus.DRAFT

    @validator('title')
    def strip_title(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Course title is required')
        return v

    @validator('categories')
    def validate_categories(cls, v):
        cleaned = [c.strip() for c in v if c and c.strip()]
        if not cleaned:
            raise ValueError('At least one category is required')
        return cleaned

class CourseUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=1000)
    categories: Optional[List[str]] = None
    price: Optional[float] = Field(None, ge=0)
    level: Optional[CourseLevel] = None
    language: Optional[str] = None
    thumbnail_url: Optional[str] = None
    status: Optional[CourseStatus] = None
    is_featured: Optional[bool] = None

    @validator('title')
    def strip_title(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError('Course title is required')
        return v

    @validator('categories')
    def validate_categories(cls, v):
        if v is None:
            return v
        cleaned = [c.strip() for c in v if c and c.strip()]
        if not cleaned:
            raise ValueError('At least one category is required')
        return cleaned

# ==================== SECTION MODELS ====================

class SectionCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str
    content: str
    video_url: Optional[str] = ""
    duration: int = Field(0, ge=0)  # minutes
    order: Optional[int] = Field(None, ge=1)
    is_published: bool = False
