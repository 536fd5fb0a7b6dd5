"""HTTP routes for course orders."""

from fastapi import APIRouter, Depends

from api.base import success_response
from auth.dependencies import SessionGuard
from auth.types import Role, User
from core.models import OrderCreate
from core.services.order_service import OrderService


def create_order_router(order_service: OrderService, guard: SessionGuard) -> APIRouter:
    router = APIRouter(tags=["order"])
    buyers = guard.require_roles(Role.ADMIN, Role.USER)

    @router.post("/create", status_code=201)
    def create(body: OrderCreate, user: User = Depends(buyers)):
        order = order_service.create_order(user, body)
        return success_response(order, message="Course purchased successfully.")

    return router
