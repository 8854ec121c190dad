"""Analytics API (admin): records created per month over the last twelve months."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from lms.api.v1.dependencies import AdminUser, get_analytics_service
from lms.application.use_cases import AnalyticsService
from lms.schemas.common import ApiResponse, envelope

router = APIRouter()

Analytics = Annotated[AnalyticsService, Depends(get_analytics_service)]
Series = ApiResponse[dict[str, Any]]


@router.get("/user-analytics", response_model=Series)
async def user_analytics(admin: AdminUser, analytics: Analytics):
    return envelope("User analytics", await analytics.user_analytics(admin.id))


@router.get("/course-analytics", response_model=Series)
async def course_analytics(admin: AdminUser, analytics: Analytics):
    return envelope("Course analytics", await analytics.course_analytics(admin.id))


@router.get("/order-analytics", response_model=Series)
async def order_analytics(admin: AdminUser, analytics: Analytics):
    return envelope("Order analytics", await analytics.order_analytics(admin.id))
