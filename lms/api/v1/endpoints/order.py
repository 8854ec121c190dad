"""Order API: course purchase and admin order listing."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from lms.api.v1.dependencies import AdminUser, CurrentUser, get_order_service
from lms.application.use_cases import OrderService
from lms.core.limiter import limit_writes
from lms.schemas.common import ApiResponse, envelope
from lms.schemas.order import OrderCreateRequest, OrderResponse

router = APIRouter()

Orders = Annotated[OrderService, Depends(get_order_service)]


@router.post("/create-order", response_model=ApiResponse[OrderResponse], status_code=201)
@limit_writes
async def create_order(
    request: Request, body: OrderCreateRequest, current_user: CurrentUser, orders: Orders
):
    """Enrol the caller in a course; a confirmation mail follows."""
    order = await orders.create(current_user.id, body.course_id, body.payment_info)
    return envelope("Successfully purchased the course", order)


@router.get("/get-all-orders/admin", response_model=ApiResponse[list[OrderResponse]])
async def get_all_orders(admin: AdminUser, orders: Orders):
    return envelope("Orders retrieved successfully", await orders.list_admin(admin.id))
