"""HTTP routes for authentication and account management."""

import logging

from authlib.integrations.starlette_client import OAuth, OAuthError
from fastapi import APIRouter, Depends, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import RedirectResponse

from api.base import success_response
from auth.config import AuthConfig
from auth.dependencies import SessionGuard, clear_session_cookies, set_session_cookies
from auth.oauth import PROVIDERS, profile_from_github, profile_from_google
from auth.service import Authenticator
from auth.types import (
    ActivationRequest,
    Role,
    SessionContext,
    SigninRequest,
    SignupRequest,
    UpdatePasswordRequest,
    UpdateRoleRequest,
    UpdateUserRequest,
    User,
)
from core.exceptions import AuthenticationRequiredError, NotFoundError

logger = logging.getLogger(__name__)


def session_response(
    session: SessionContext,
    response: Response,
    config: AuthConfig,
    message: str,
    redirect_url: str | None = None,
):
    """Set session cookies, then redirect or answer with the user and access token."""
    if redirect_url:
        redirect = RedirectResponse(url=redirect_url, status_code=302)
        set_session_cookies(redirect, session, config)
        return redirect

    set_session_cookies(response, session, config)
    return success_response(
        {"user": session.user, "access_token": session.access_token},
        message=message,
    )


def create_auth_router(
    authenticator: Authenticator,
    guard: SessionGuard,
    config: AuthConfig,
    oauth: OAuth | None = None,
    oauth_callbacks: dict[str, str] | None = None,
) -> APIRouter:
    """Create auth router with injected service."""
    router = APIRouter(tags=["auth"])
    callbacks = oauth_callbacks or {}
    admin_only = guard.require_roles(Role.ADMIN)

    @router.post("/signup")
    def signup(body: SignupRequest):
        """Email an activation code; returns the activation token."""
        result = authenticator.signup(
            fname=body.fname,
            lname=body.lname,
            email=body.email,
            password=body.password,
        )
        return success_response({"activation_token": result.activation_token}, message=result.message)

    @router.post("/activation", status_code=201)
    def activation(body: ActivationRequest):
        user = authenticator.activate(body.activation_token, body.otp)
        return success_response(
            {"user": user},
            message=f"Congratulations, {user.fname}! Your account has been successfully activated.",
        )

    @router.post("/signin")
    def signin(body: SigninRequest, response: Response):
        session = authenticator.signin(body.email, body.password)
        return session_response(session, response, config, f"Welcome back {session.user.fname}.")

    @router.get("/logout")
    def logout(response: Response, user: User = Depends(guard.session_user)):
        """Delete the session and expire both cookies."""
        authenticator.logout(user)
        clear_session_cookies(response, config)
        return success_response(message="Logged out successfully.")

    @router.get("/update-token")
    def update_token(session: SessionContext = Depends(guard.refreshed_session)):
        return success_response({"access_token": session.access_token}, message="Session refreshed.")

    @router.get("/me")
    def me(user: User = Depends(guard.current_user)):
        return success_response({"user": authenticator.get_user_info(user.id)})

    @router.patch("/update-user-info")
    def update_user_info(body: UpdateUserRequest, user: User = Depends(guard.session_user)):
        updated = authenticator.update_user_info(user, body.model_dump(exclude_none=True))
        return success_response({"user": updated}, message=f"{updated.fname}'s data updated successfully.")

    @router.patch("/update-user-password", status_code=201)
    def update_user_password(body: UpdatePasswordRequest, user: User = Depends(guard.session_user)):
        authenticator.update_password(user, body.old_password, body.new_password)
        return success_response(message=f"{user.fname}, your password has been changed successfully.")

    @router.patch("/update-user-role/{user_id}", status_code=201)
    def update_user_role(user_id: str, body: UpdateRoleRequest, admin: User = Depends(admin_only)):
        updated = authenticator.update_role(user_id, body.role)
        return success_response({"user": updated}, message=f"{updated.fname} is now {updated.role.value}!")

    @router.get("/get-users")
    def get_users(admin: User = Depends(admin_only)):
        users = authenticator.list_users()
        return success_response(users, length=len(users))

    @router.patch("/deactivate/{user_id}")
    def deactivate(user_id: str, admin: User = Depends(admin_only)):
        authenticator.deactivate(user_id)
        return success_response(message="User deactivated successfully.")

    @router.delete("/delete/{user_id}")
    def delete_user(user_id: str, admin: User = Depends(admin_only)):
        authenticator.delete_user(user_id)
        return success_response(message="User deleted successfully.")

    # -------------------------------------------------------------------------
    # OAuth
    # -------------------------------------------------------------------------

    def _client(provider: str):
        if oauth is None or provider not in PROVIDERS:
            raise NotFoundError(f"Can't find OAuth provider '{provider}' on this server!")
        client = oauth.create_client(provider)
        if client is None:
            raise NotFoundError(f"Can't find OAuth provider '{provider}' on this server!")
        return client

    @router.get("/auth/{provider}")
    async def oauth_login(provider: str, request: Request):
        """Redirect to the provider's consent screen."""
        client = _client(provider)
        redirect_uri = callbacks.get(provider) or str(request.url_for("oauth_callback", provider=provider))
        return await client.authorize_redirect(request, redirect_uri)

    @router.get("/auth/{provider}/callback", name="oauth_callback")
    async def oauth_callback(provider: str, request: Request):
        """Exchange the code, find or create the account, redirect to the client."""
        client = _client(provider)
        try:
            token = await client.authorize_access_token(request)
            if provider == "google":
                info = token.get("userinfo") or await client.userinfo(token=token)
                profile = profile_from_google(dict(info))
            else:
                resp = await client.get("user", token=token)
                resp.raise_for_status()
                profile = profile_from_github(resp.json())
        except OAuthError as e:
            logger.warning(f"{provider} OAuth callback failed: {e.error}")
            raise AuthenticationRequiredError(f"{provider.capitalize()} sign-in failed. Please try again.")

        session = await run_in_threadpool(authenticator.oauth_signin, provider, profile)
        return session_response(
            session,
            Response(),
            config,
            f"Welcome back {session.user.fname}.",
            redirect_url=config.client_url or "/",
        )

    return router
