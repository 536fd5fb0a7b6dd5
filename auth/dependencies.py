"""FastAPI dependencies for session handling.

Each dependency returns an explicit value (SessionContext or User) that
the route receives as a parameter. Nothing is stashed on request.state.
"""

from fastapi import Depends, Request, Response

from auth.config import AuthConfig
from auth.service import Authenticator
from auth.types import Role, SessionContext, User

ACCESS_COOKIE = "access_token"
REFRESH_COOKIE = "refresh_token"


def set_session_cookies(response: Response, session: SessionContext, config: AuthConfig) -> None:
    """Set http-only access/refresh cookies from a freshly issued session."""
    response.set_cookie(
        key=ACCESS_COOKIE,
        value=session.access_token,
        httponly=True,
        secure=config.cookie_secure,
        samesite="lax",
        max_age=config.access_token_max_age,
    )
    response.set_cookie(
        key=REFRESH_COOKIE,
        value=session.refresh_token,
        httponly=True,
        secure=config.cookie_secure,
        samesite="lax",
        max_age=config.refresh_token_max_age,
    )


def clear_session_cookies(response: Response, config: AuthConfig) -> None:
    """Expire both session cookies immediately."""
    for key in (ACCESS_COOKIE, REFRESH_COOKIE):
        response.delete_cookie(
            key=key,
            httponly=True,
            secure=config.cookie_secure,
            samesite="lax",
        )


class SessionGuard:
    """Builds the session dependencies routes declare with Depends()."""

    def __init__(self, authenticator: Authenticator, config: AuthConfig):
        self._authenticator = authenticator
        self._config = config

    def refreshed_session(self, request: Request, response: Response) -> SessionContext:
        """Refresh tokens from the refresh cookie and set new cookies."""
        session = self._authenticator.refresh(request.cookies.get(REFRESH_COOKIE))
        set_session_cookies(response, session, self._config)
        return session

    def current_user(self, request: Request) -> User:
        """User behind the access cookie."""
        return self._authenticator.authenticate(request.cookies.get(ACCESS_COOKIE))

    def session_user(self, request: Request, response: Response) -> User:
        """Refresh first, then authenticate with the newly issued access token."""
        session = self.refreshed_session(request, response)
        return self._authenticator.authenticate(session.access_token)

    def require_roles(self, *roles: Role | str, refresh: bool = True):
        """Dependency that passes the user through only for allowed roles."""
        source = self.session_user if refresh else self.current_user
        allowed = tuple(Role(r) for r in roles)

        def dependency(user: User = Depends(source)) -> User:
            return self._authenticator.restrict_to(user, allowed)

        return dependency
