import math
from datetime import date, datetime
from enum import Enum
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field, computed_field

T = TypeVar("T")


class CourseLevel(str, Enum):
    all_levels = "ALL_LEVELS"
    beginner = "BEGINNER"
    intermediate = "INTERMEDIATE"
    advanced = "ADVANCED"


class UserPublic(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    profile_image_url: Optional[str] = None


class Category(BaseModel):
    id: int
    name: str
    description: str = ""
    image_url: Optional[str] = None


class CourseSummary(BaseModel):
    id: int
    title: str
    description: str = ""
    short_description: str = ""
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    price: float
    discount_price: Optional[float] = None
    duration: int
    level: str
    language: str
    is_featured: bool = False
    rating: float = 0
    review_count: int = 0
    enrollment_count: int = 0
    created_at: datetime
    category: Category
    instructor: Optional[UserPublic] = None


class CourseResource(BaseModel):
    id: int
    title: str
    description: str = ""
    file_url: str
    file_type: str
    file_size: int = 0
    is_free: bool = False


class CourseLesson(BaseModel):
    id: int
    title: str
    description: str = ""
    video_url: Optional[str] = None
    content: Optional[str] = None
    duration: int = 0
    order: int
    is_free: bool = False
    resources: List[CourseResource] = Field(default_factory=list)


class CourseSection(BaseModel):
    id: int
    title: str
    description: str = ""
    order: int
    lessons: List[CourseLesson] = Field(default_factory=list)


class CourseReview(BaseModel):
    id: int
    rating: int
    comment: str = ""
    created_at: datetime
    user: UserPublic


class CourseDetail(CourseSummary):
    sections: List[CourseSection] = Field(default_factory=list)
    reviews: List[CourseReview] = Field(default_factory=list)


class CourseListRequest(BaseModel):
    """Loosely-typed listing request. List filters keep their raw strings."""

    page: int = 0
    page_size: int = Field(default=10, ge=1)
    search: Optional[str] = None
    category_id: Optional[int] = None
    level: Optional[str] = None
    language: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    sort_by: Optional[str] = None
    sort_direction: Optional[str] = "desc"
    category: Optional[List[str]] = None
    ratings: Optional[List[str]] = None
    duration: Optional[List[str]] = None
    level_filter: Optional[List[str]] = None


class PagedResponse(BaseModel, Generic[T]):
    data: List[T]
    page: int
    page_size: int
    total_count: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages - 1

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_previous_page(self) -> bool:
        return self.page > 0


class FilterBucket(BaseModel):
    label: str
    value: str
    is_selected: bool = False
    count: Optional[int] = None


class FilterOption(BaseModel):
    label: str
    key: str
    options: List[FilterBucket]


class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterRequest(BaseModel):
    first_name: str
    last_name: str
    email: str
    password: str
    confirm_password: str


class AuthResponse(BaseModel):
    token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserPublic


class Profile(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    profile_image_url: Optional[str] = None
    date_of_birth: Optional[date] = None
    bio: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class ProfileUpdateRequest(BaseModel):
    first_name: str = ""
    last_name: str = ""
    profile_image_url: Optional[str] = Field(default=None, max_length=500)
    date_of_birth: Optional[date] = None
    bio: Optional[str] = Field(default=None, max_length=1000)
