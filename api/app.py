"""
FastAPI application factory.

Clients are built once in build_services and closed on shutdown.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import timedelta

from authlib.integrations.starlette_client import OAuth
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from api.base import success_response
from api.categories import create_category_router
from api.courses import create_course_router
from api.errors import register_error_handlers
from api.middleware import RequestIDMiddleware
from api.orders import create_order_router
from api.reviews import create_review_router
from auth.api import create_auth_router
from auth.cipher import PasswordCipher
from auth.config import AuthConfig
from auth.database import AuthDatabase
from auth.dependencies import SessionGuard
from auth.oauth import create_oauth
from auth.otp import OtpIssuer
from auth.security_logger import SecurityLogger
from auth.service import Authenticator
from auth.session import SessionCache
from auth.tokens import TokenCodec
from clients.email_client import EmailGatewayClient
from clients.media_client import MediaStorageClient
from clients.mongo_client import MongoDBClient
from clients.redis_client import RedisClient
from core.services.category_service import CategoryService
from core.services.course_service import CourseService
from core.services.order_service import OrderService
from core.services.review_service import ReviewService
from core.settings import Settings, load_settings

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


@dataclass
class Services:
    """Everything the routers need, wired once per process."""

    mongo: MongoDBClient
    redis: RedisClient
    config: AuthConfig
    authenticator: Authenticator
    guard: SessionGuard
    categories: CategoryService
    courses: CourseService
    orders: OrderService
    reviews: ReviewService
    oauth: OAuth | None = None


def build_services(settings: Settings) -> Services:
    """
    Construct clients and services from settings.

    Raises:
        ValueError / PyMongoError / redis.RedisError: A backing store is unreachable
    """
    mongo = MongoDBClient(settings.mongo_url, settings.mongo_database)
    redis = RedisClient(settings.redis_url)
    email = EmailGatewayClient(
        gateway_url=settings.email_gateway_url,
        api_key=settings.email_api_key,
        hmac_secret=settings.email_hmac_secret,
    )
    media = None
    if settings.media_configured:
        media = MediaStorageClient(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
        )
    else:
        logger.warning("Cloudinary not configured; thumbnail uploads will fail")

    config = settings.auth_config()
    secrets = settings.token_secrets()
    codec = TokenCodec()
    auth_db = AuthDatabase(mongo, password_rounds=config.password_hash_rounds)
    session_cache = SessionCache(redis)

    authenticator = Authenticator(
        config=config,
        secrets=secrets,
        auth_db=auth_db,
        session_cache=session_cache,
        codec=codec,
        otp_issuer=OtpIssuer(
            codec,
            length=config.otp_length,
            expires_in=timedelta(seconds=config.activation_expire_seconds),
        ),
        cipher=PasswordCipher(secrets.crypto),
        email_client=email,
        security_logger=SecurityLogger(mongo),
    )

    courses = CourseService(mongo, redis, media=media, cache_ttl_seconds=config.session_cache_ttl_seconds)

    return Services(
        mongo=mongo,
        redis=redis,
        config=config,
        authenticator=authenticator,
        guard=SessionGuard(authenticator, config),
        categories=CategoryService(mongo, media=media),
        courses=courses,
        orders=OrderService(
            mongo,
            auth_db,
            session_cache,
            courses,
            session_ttl_seconds=config.session_cache_ttl_seconds,
        ),
        reviews=ReviewService(mongo, courses),
        oauth=create_oauth(
            settings.google_client_id,
            settings.google_client_secret,
            settings.github_client_id,
            settings.github_client_secret,
        ),
    )


def create_app(settings: Settings | None = None, services: Services | None = None) -> FastAPI:
    """Build the application. Loads settings and services when not given."""
    settings = settings or load_settings()
    services = services or build_services(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        services.redis.close()
        services.mongo.close()
        logger.info("Clients closed")

    app = FastAPI(title="Course Platform API", lifespan=lifespan)

    # Required by the authlib starlette client for OAuth state
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        https_only=settings.is_production,
        same_site="lax",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    register_error_handlers(app, environment=settings.environment)

    app.include_router(
        create_auth_router(
            services.authenticator,
            services.guard,
            services.config,
            oauth=services.oauth,
            oauth_callbacks=settings.oauth_callbacks(),
        ),
        prefix=f"{API_PREFIX}/user",
    )
    app.include_router(create_category_router(services.categories, services.guard), prefix=f"{API_PREFIX}/category")
    app.include_router(create_course_router(services.courses, services.guard), prefix=f"{API_PREFIX}/course")
    app.include_router(create_order_router(services.orders, services.guard), prefix=f"{API_PREFIX}/order")
    app.include_router(create_review_router(services.reviews, services.guard), prefix=f"{API_PREFIX}/review")

    @app.get("/testing")
    async def testing():
        return success_response(message="Api working well!")

    return app
