"""HTTP routes for course reviews."""

from fastapi import APIRouter, Depends

from api.base import success_response
from auth.dependencies import SessionGuard
from auth.types import Role, User
from core.models import ReviewCreate
from core.services.review_service import ReviewService


def create_review_router(review_service: ReviewService, guard: SessionGuard) -> APIRouter:
    router = APIRouter(tags=["review"])
    reviewers = guard.require_roles(Role.ADMIN, Role.USER)

    @router.post("/create", status_code=201)
    def create(body: ReviewCreate, user: User = Depends(reviewers)):
        review = review_service.create_review(user, body)
        return success_response(review, message="Review added successfully.")

    @router.get("/get-review/{review_id}")
    def get_review(review_id: str):
        return success_response(review_service.get_single_review(review_id))

    return router
