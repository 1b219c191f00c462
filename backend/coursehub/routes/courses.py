from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from .. import schemas
from ..config import settings
from ..errors import ServiceError
from ..services import courses_service

router = APIRouter(prefix="/api/v1/courses", tags=["courses"])


@router.get("", response_model=schemas.PagedResponse[schemas.CourseSummary])
async def list_courses(
    page: int = 0,
    page_size: int = Query(
        default=settings.default_page_size,
        alias="pageSize",
        ge=1,
        le=settings.max_page_size,
    ),
    search: Optional[str] = None,
    category_id: Optional[int] = Query(default=None, alias="categoryId"),
    level: Optional[str] = None,
    language: Optional[str] = None,
    min_price: Optional[float] = Query(default=None, alias="minPrice"),
    max_price: Optional[float] = Query(default=None, alias="maxPrice"),
    sort_by: Optional[str] = Query(default=None, alias="sortBy"),
    sort_direction: Optional[str] = Query(default="desc", alias="sortDirection"),
    category: Optional[List[str]] = Query(default=None),
    ratings: Optional[List[str]] = Query(default=None),
    duration: Optional[List[str]] = Query(default=None),
    level_filter: Optional[List[str]] = Query(default=None, alias="levelFilter"),
):
    request = schemas.CourseListRequest(
        page=page,
        page_size=page_size,
        search=search,
        category_id=category_id,
        level=level,
        language=language,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
        sort_direction=sort_direction,
        category=category,
        ratings=ratings,
        duration=duration,
        level_filter=level_filter,
    )
    return await courses_service.list_courses(request)


router.add_api_route(
    "/",
    list_courses,
    methods=["GET"],
    response_model=schemas.PagedResponse[schemas.CourseSummary],
    include_in_schema=False,
)


@router.get("/featured", response_model=list[schemas.CourseSummary])
async def featured_courses():
    return await courses_service.list_featured_courses()


@router.get("/categories", response_model=list[schemas.Category])
async def course_categories():
    return await courses_service.list_categories()


@router.get("/filters", response_model=list[schemas.FilterOption])
async def course_filters():
    return await courses_service.list_filters()


@router.get("/{course_id}", response_model=schemas.CourseDetail)
async def course_detail(course_id: int):
    try:
        return await courses_service.get_course(course_id)
    except ServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
