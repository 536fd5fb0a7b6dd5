"""HTTP routes for courses and lecture Q&A."""

from fastapi import APIRouter, Depends

from api.base import success_response
from auth.dependencies import SessionGuard
from auth.types import Role, User
from core.models import AnswerCreate, CourseCreate, CourseUpdate, QuestionCreate
from core.services.course_service import CourseService


def create_course_router(course_service: CourseService, guard: SessionGuard) -> APIRouter:
    router = APIRouter(tags=["course"])
    authors = guard.require_roles(Role.ADMIN, Role.INSTRUCTOR)
    learners = guard.require_roles(Role.USER, Role.ADMIN, refresh=False)

    @router.post("/create", status_code=201)
    def create(body: CourseCreate, user: User = Depends(authors)):
        course = course_service.create_course(body, instructor=user)
        return success_response(course, message="Course created successfully.")

    @router.patch("/update/{course_id}")
    def update(course_id: str, body: CourseUpdate, user: User = Depends(authors)):
        course = course_service.update_course(course_id, body)
        return success_response(course, message="Course updated successfully.")

    @router.get("/get-one/{course_id}")
    def get_one(course_id: str):
        return success_response(course_service.get_single_course(course_id))

    @router.get("/get-all")
    def get_all():
        courses = course_service.get_all_courses()
        return success_response(courses, length=len(courses))

    @router.get("/user-courses/{course_id}")
    def user_courses(course_id: str, user: User = Depends(learners)):
        """Lecture content for a purchased course."""
        lectures = course_service.get_user_course_content(user, course_id)
        return success_response(lectures, length=len(lectures))

    @router.patch("/add-question")
    def add_question(body: QuestionCreate, user: User = Depends(learners)):
        course = course_service.add_question(user, body)
        return success_response(course, message="Question added successfully.")

    @router.patch("/add-answer")
    def add_answer(body: AnswerCreate, user: User = Depends(learners)):
        course = course_service.add_answer(user, body)
        return success_response(course, message="Answer added successfully.")

    return router
