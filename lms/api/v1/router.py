"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from lms.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from lms.api.v1.endpoints import (
    analytics,
    course,
    health,
    layout,
    notification,
    order,
    user,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(user.router, prefix="/user", tags=["user"])
api_router.include_router(course.router, prefix="/course", tags=["course"])
api_router.include_router(order.router, prefix="/order", tags=["order"])
api_router.include_router(
    notification.router, prefix="/notification", tags=["notification"]
)
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
api_router.include_router(layout.router, prefix="/layout", tags=["layout"])
