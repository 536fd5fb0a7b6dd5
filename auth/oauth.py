"""OAuth provider registry and profile extraction.

Identity fields fail closed (no email for Google, no login for GitHub).
Name and avatar fields degrade to empty values.
"""

from typing import Any

from authlib.integrations.starlette_client import OAuth

from auth.types import OAuthProfile
from core.exceptions import AuthenticationRequiredError

GOOGLE_METADATA_URL = "https://accounts.google.com/.well-known/openid-configuration"
PROVIDERS = ("google", "github")


def create_oauth(
    google_client_id: str | None = None,
    google_client_secret: str | None = None,
    github_client_id: str | None = None,
    github_client_secret: str | None = None,
) -> OAuth:
    """Register Google (OpenID discovery) and GitHub clients.

    A provider without both client id and secret is left unregistered.
    """
    oauth = OAuth()
    if google_client_id and google_client_secret:
        oauth.register(
            name="google",
            client_id=google_client_id,
            client_secret=google_client_secret,
            server_metadata_url=GOOGLE_METADATA_URL,
            client_kwargs={"scope": "openid email profile"},
        )
    if github_client_id and github_client_secret:
        oauth.register(
            name="github",
            client_id=github_client_id,
            client_secret=github_client_secret,
            access_token_url="https://github.com/login/oauth/access_token",
            authorize_url="https://github.com/login/oauth/authorize",
            api_base_url="https://api.github.com/",
            client_kwargs={"scope": "read:user user:email"},
        )
    return oauth


def profile_from_google(info: dict[str, Any]) -> OAuthProfile:
    """Map a Google userinfo payload.

    Raises AuthenticationRequiredError when the email is missing or
    Google reports it unverified.
    """
    email = (info.get("email") or "").strip()
    if not email:
        raise AuthenticationRequiredError("Google account did not provide an email address")
    if info.get("email_verified") is False:
        raise AuthenticationRequiredError("Your Google email address is not verified")

    return OAuthProfile(
        fname=info.get("given_name") or "",
        lname=info.get("family_name") or "",
        email=email,
        avatar_url=info.get("picture"),
    )


def profile_from_github(info: dict[str, Any]) -> OAuthProfile:
    """Map a GitHub /user payload.

    `name` splits on the first space into first/last; `login` is used
    as the account email.
    """
    login = (info.get("login") or "").strip()
    if not login:
        raise AuthenticationRequiredError("GitHub account did not provide a login")

    name = (info.get("name") or "").strip()
    fname, _, lname = name.partition(" ")

    return OAuthProfile(
        fname=fname or login,
        lname=lname.strip(),
        email=login,
        avatar_url=info.get("avatar_url"),
    )
