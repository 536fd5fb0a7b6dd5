"""HTTP routes for course categories."""

from fastapi import APIRouter, Body, Depends

from api.base import success_response
from auth.dependencies import SessionGuard
from auth.types import Role, User
from core.models import CategoryCreate, CategoryUpdate
from core.services.category_service import CategoryService
from core.services.resource_service import ADMIN_VISIBILITY, USER_VISIBILITY


def create_category_router(category_service: CategoryService, guard: SessionGuard) -> APIRouter:
    router = APIRouter(tags=["category"])
    admin_only = guard.require_roles(Role.ADMIN)

    @router.post("/create", status_code=201)
    def create(items: list[CategoryCreate], admin: User = Depends(admin_only)):
        created = category_service.create(items)
        return success_response(created, length=len(created))

    @router.get("/get-all")
    def get_all():
        """Active categories, without the active flag."""
        categories = category_service.get_all(USER_VISIBILITY)
        return success_response(
            [c.model_dump(mode="json", exclude={"is_active"}) for c in categories],
            length=len(categories),
        )

    @router.get("/get-all-admin")
    def get_all_admin(admin: User = Depends(admin_only)):
        categories = category_service.get_all(ADMIN_VISIBILITY)
        return success_response(categories, length=len(categories))

    @router.get("/get-one/{category_id}")
    def get_one(category_id: str):
        return success_response(category_service.get_single(category_id))

    @router.patch("/update/{category_id}")
    def update(category_id: str, body: CategoryUpdate, admin: User = Depends(admin_only)):
        return success_response(category_service.update(category_id, body))

    @router.delete("/delete")
    def delete(ids: list[str] = Body(...), admin: User = Depends(admin_only)):
        deleted = category_service.delete_many(ids)
        return success_response({"deleted": deleted}, message=f"{deleted} Category document(s) deleted.")

    return router
