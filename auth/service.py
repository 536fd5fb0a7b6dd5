"""Authentication service - orchestrates signup, sign-in and session flows."""

import logging
from dataclasses import dataclass
from datetime import timedelta

from auth.cipher import PasswordCipher
from auth.config import AuthConfig, TokenSecrets
from auth.database import AuthDatabase, normalize_email
from auth.exceptions import (
    DuplicateEmailError,
    EmailDeliveryError,
    ExpiredTokenError,
    InvalidCredentialsError,
    InvalidTokenError,
    OtpMismatchError,
    SessionNotFoundError,
)
from auth.otp import OtpIssuer, otp_matches
from auth.passwords import verify_password
from auth.security_logger import SecurityEvent, SecurityLogger
from auth.session import SessionCache
from auth.tokens import TokenCodec
from auth.types import OAuthProfile, Role, SessionContext, User
from clients.email_client import EmailGatewayClient, EmailGatewayError
from core.exceptions import (
    AuthenticationRequiredError,
    ConfigurationError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from utils.object_id import is_valid_object_id
from utils.text import capitalize

logger = logging.getLogger(__name__)

INVALID_USER_ID = "Oops! It seems like the user ID provided is invalid"
USER_NOT_FOUND = "Oops! It seems like the user with the provided ID was not found."


@dataclass
class SignupResult:
    """Result of a signup request."""

    activation_token: str
    message: str


class Authenticator:
    """Orchestrates account and session flows.

    Handles:
    - Signup with emailed activation code, and activation
    - Password and OAuth sign-in
    - Token refresh against the session cache
    - Logout and role checks
    - Profile, password and role management
    """

    def __init__(
        self,
        config: AuthConfig,
        secrets: TokenSecrets,
        auth_db: AuthDatabase,
        session_cache: SessionCache,
        codec: TokenCodec,
        otp_issuer: OtpIssuer,
        cipher: PasswordCipher,
        email_client: EmailGatewayClient,
        security_logger: SecurityLogger,
    ):
        self._config = config
        self._secrets = secrets
        self._auth_db = auth_db
        self._session_cache = session_cache
        self._codec = codec
        self._otp_issuer = otp_issuer
        self._cipher = cipher
        self._email_client = email_client
        self._security_logger = security_logger

    def _require_secret(self, name: str) -> str:
        value = getattr(self._secrets, name)
        if not value:
            raise ConfigurationError(f"Missing required configuration: {name} token secret")
        return value

    def _cache_user(self, user: User) -> None:
        self._session_cache.set(
            user.id,
            user.model_dump(mode="json"),
            ttl_seconds=self._config.session_cache_ttl_seconds,
        )

    # -------------------------------------------------------------------------
    # Signup and activation
    # -------------------------------------------------------------------------

    def signup(self, fname: str, lname: str, email: str, password: str) -> SignupResult:
        """Start signup: email an activation code, return the activation token.

        Nothing is written to the credential store until activation.

        Raises:
            ValidationError: Missing field
            DuplicateEmailError: Email already registered
            ConfigurationError: Activation secret not configured
            EmailDeliveryError: Verification email could not be sent
        """
        if not fname or not lname or not email or not password:
            raise ValidationError("Please provide all required fields: fname, lname, email and password.")

        activation_secret = self._require_secret("activation")
        email = normalize_email(email)

        if self._auth_db.get_user_by_email(email) is not None:
            raise DuplicateEmailError()

        pending = {
            "fname": fname,
            "lname": lname,
            "email": email,
            "password": self._cipher.encrypt(password),
        }
        ticket = self._otp_issuer.issue(pending, activation_secret)

        try:
            self._email_client.send_verification_code(
                email=email,
                name=capitalize(fname),
                otp=str(ticket.otp),
            )
        except EmailGatewayError as e:
            logger.error(f"Verification email to {email} failed: {e}")
            raise EmailDeliveryError("We couldn't send the verification email. Please try again later.") from e

        self._security_logger.log(SecurityEvent.SIGNUP_REQUESTED, email=email)

        return SignupResult(
            activation_token=ticket.token,
            message="Verification code sent successfully to your email.",
        )

    def activate(self, activation_token: str | None, otp: str | int | None) -> User:
        """Finish signup: check the code and create a verified user.

        Raises:
            ValidationError: Token or code missing
            InvalidTokenError / ExpiredTokenError: Token failed verification
            OtpMismatchError: Code does not match
            DuplicateEmailError: Email registered since signup
        """
        if not activation_token or otp is None or otp == "":
            raise ValidationError("Please provide both the verification code and the activation token.")

        decoded = self._codec.verify(activation_token, self._require_secret("activation"))
        if not isinstance(decoded, dict) or not isinstance(decoded.get("user"), dict):
            raise InvalidTokenError("Invalid activation token")

        pending = decoded["user"]
        if not otp_matches(otp, decoded.get("otp")):
            self._security_logger.log(
                SecurityEvent.ACTIVATION_FAILED,
                email=pending.get("email"),
                details={"reason": "otp_mismatch"},
            )
            raise OtpMismatchError()

        try:
            password = self._cipher.decrypt(pending["password"])
            email = pending["email"]
        except (KeyError, TypeError, ValueError):
            raise InvalidTokenError("Invalid activation token")

        if self._auth_db.get_user_by_email(email) is not None:
            raise DuplicateEmailError("Email is already registered. Please use a different email address.")

        user = self._auth_db.create_user(
            {
                "fname": capitalize(pending.get("fname")),
                "lname": capitalize(pending.get("lname")),
                "email": email,
                "password": password,
                "is_verified": True,
            }
        )

        self._security_logger.log(SecurityEvent.ACCOUNT_ACTIVATED, email=user.email, user_id=user.id)
        return user

    # -------------------------------------------------------------------------
    # Sign-in and sessions
    # -------------------------------------------------------------------------

    def signin(self, email: str, password: str) -> SessionContext:
        """Password sign-in.

        Unknown email, wrong password, password-less social account and
        deactivated account all raise the same InvalidCredentialsError.
        """
        if not email or not password:
            raise ValidationError("Please provide both email and password.")

        found = self._auth_db.get_user_with_password(email)
        user, password_hash = found if found is not None else (None, None)

        if user is None or not user.is_active or not verify_password(password, password_hash):
            self._security_logger.log(
                SecurityEvent.SIGNIN_FAILED,
                email=normalize_email(email),
                user_id=user.id if user else None,
            )
            raise InvalidCredentialsError()

        self._security_logger.log(SecurityEvent.SIGNIN_SUCCEEDED, email=user.email, user_id=user.id)
        return self.issue_session(user)

    def oauth_signin(self, provider: str, profile: OAuthProfile) -> SessionContext:
        """Find or create a social account for the provider identity."""
        if not profile.email:
            raise AuthenticationRequiredError(f"{provider} did not return an account identifier")

        user = self._auth_db.get_user_by_email(profile.email)
        created = False
        if user is None:
            data = {
                "fname": profile.fname,
                "lname": profile.lname,
                "email": profile.email,
                "is_social": True,
                "is_verified": True,
            }
            if profile.avatar_url:
                data["avatar"] = {"public_id": None, "url": profile.avatar_url}
            try:
                user = self._auth_db.create_user(data)
                created = True
            except DuplicateEmailError:
                # Concurrent first sign-in for the same identity
                user = self._auth_db.get_user_by_email(profile.email)
                if user is None:
                    raise

        if not user.is_active:
            raise ForbiddenError("Your account has been deactivated.")

        self._security_logger.log(
            SecurityEvent.OAUTH_SIGNIN,
            email=user.email,
            user_id=user.id,
            details={"provider": provider, "created": created},
        )
        return self.issue_session(user)

    def issue_session(self, user: User) -> SessionContext:
        """Sign an access/refresh pair for user and write the cache entry."""
        access_token = self._codec.sign(
            {"id": user.id},
            self._require_secret("access"),
            expires_in=timedelta(seconds=self._config.access_token_expire_seconds),
        )
        refresh_token = self._codec.sign(
            {"id": user.id},
            self._require_secret("refresh"),
            expires_in=timedelta(seconds=self._config.refresh_token_expire_seconds),
        )
        self._cache_user(user)
        return SessionContext(user=user, access_token=access_token, refresh_token=refresh_token)

    def refresh(self, refresh_token: str | None) -> SessionContext:
        """Reissue tokens for a live session.

        Raises:
            AuthenticationRequiredError: No refresh token, or account deactivated
            InvalidTokenError / ExpiredTokenError: Token failed verification
            SessionNotFoundError: Session cache entry gone (logged out)
        """
        if not refresh_token:
            raise AuthenticationRequiredError()

        self._require_secret("access")
        try:
            decoded = self._codec.verify(refresh_token, self._require_secret("refresh"))
        except (InvalidTokenError, ExpiredTokenError) as e:
            self._security_logger.log(
                SecurityEvent.SESSION_REFRESH_FAILED,
                details={"reason": e.code},
            )
            raise type(e)("Invalid or expired refresh token. Please log in again.")

        user_id = decoded.get("id") if isinstance(decoded, dict) else None
        if not user_id:
            raise InvalidTokenError("Invalid or expired refresh token. Please log in again.")

        cached = self._session_cache.get(user_id)
        if cached is None:
            self._security_logger.log(
                SecurityEvent.SESSION_REFRESH_FAILED,
                user_id=user_id,
                details={"reason": "session_not_found"},
            )
            raise SessionNotFoundError()

        user = User.model_validate(cached)
        if not user.is_active:
            self._security_logger.log(
                SecurityEvent.SESSION_REFRESH_FAILED,
                email=user.email,
                user_id=user.id,
                details={"reason": "deactivated"},
            )
            raise AuthenticationRequiredError("This account has been deactivated.")

        self._security_logger.log(SecurityEvent.SESSION_REFRESHED, email=user.email, user_id=user.id)
        return self.issue_session(user)

    def authenticate(self, access_token: str | None) -> User:
        """Resolve the user behind an access token.

        Raises:
            AuthenticationRequiredError: No token, or user gone/deactivated
            InvalidTokenError / ExpiredTokenError: Token failed verification
        """
        if not access_token:
            raise AuthenticationRequiredError()

        decoded = self._codec.verify(access_token, self._require_secret("access"))
        user_id = decoded.get("id") if isinstance(decoded, dict) else None
        if not user_id:
            raise InvalidTokenError()

        user = self._auth_db.get_user_by_id(user_id)
        if user is None or not user.is_active:
            raise AuthenticationRequiredError("The user belonging to this token no longer exists.")
        return user

    def logout(self, user: User | None) -> None:
        """Delete the session cache entry. Cookies are cleared by the caller."""
        if user is None:
            raise AuthenticationRequiredError()
        self._session_cache.delete(user.id)
        self._security_logger.log(SecurityEvent.SESSION_REVOKED, email=user.email, user_id=user.id)

    def restrict_to(self, user: User | None, roles: set[Role] | list[Role] | tuple[Role, ...]) -> User:
        """Pass user through if their role is allowed, else ForbiddenError."""
        if user is None:
            raise AuthenticationRequiredError()
        allowed = {Role(r) for r in roles}
        if user.role not in allowed:
            raise ForbiddenError()
        return user

    # -------------------------------------------------------------------------
    # Profile management
    # -------------------------------------------------------------------------

    def get_user_info(self, user_id: str) -> User:
        """Cached user, falling back to the store (and filling the cache)."""
        cached = self._session_cache.get(user_id)
        if cached is not None:
            return User.model_validate(cached)

        user = self._auth_db.get_user_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found. Please log in again.")
        self._cache_user(user)
        return user

    def update_user_info(self, user: User, changes: dict) -> User:
        """Update profile fields and rewrite the cache entry."""
        changes = {k: v for k, v in changes.items() if v is not None}
        if not changes:
            raise ValidationError("Please provide at least one field to update.")

        for name in ("fname", "lname"):
            if name in changes:
                changes[name] = capitalize(changes[name])

        if "email" in changes:
            owner = self._auth_db.get_user_by_email(changes["email"])
            if owner is not None and owner.id != user.id:
                raise DuplicateEmailError()

        updated = self._auth_db.update_user(user.id, changes)
        if updated is None:
            raise NotFoundError("User not found. Please log in and try again.")
        self._cache_user(updated)
        return updated

    def update_password(self, user: User, old_password: str, new_password: str) -> None:
        """Change password after checking the old one."""
        if not old_password or not new_password:
            raise ValidationError("Both old and new passwords are required for the password update.")

        password_hash = self._auth_db.get_password_hash(user.id)
        if password_hash is None:
            raise ValidationError("This account has no password set. Please sign in with your social account.")
        if not verify_password(old_password, password_hash):
            raise ValidationError("Incorrect old password. Please try again.")

        updated = self._auth_db.update_user(user.id, {"password": new_password})
        if updated is None:
            raise NotFoundError("User not found. Please log in and try again.")
        self._cache_user(updated)
        self._security_logger.log(SecurityEvent.PASSWORD_CHANGED, email=updated.email, user_id=updated.id)

    def update_role(self, user_id: str, role: Role) -> User:
        if not is_valid_object_id(user_id):
            raise ValidationError(INVALID_USER_ID)
        if not role:
            raise ValidationError("Oops! The role property must not be empty. Please provide a valid role.")

        updated = self._auth_db.update_user(user_id, {"role": Role(role)})
        if updated is None:
            raise NotFoundError(USER_NOT_FOUND)
        self._cache_user(updated)
        self._security_logger.log(
            SecurityEvent.USER_ROLE_CHANGED,
            email=updated.email,
            user_id=updated.id,
            details={"role": updated.role.value},
        )
        return updated

    def list_users(self) -> list[User]:
        users = self._auth_db.list_users()
        if not users:
            raise NotFoundError(
                "Oops! It seems like there are no users available at the moment. "
                "Please check back later or contact support for assistance."
            )
        return users

    def deactivate(self, user_id: str) -> User:
        """Freeze an account; its session entry reflects the change."""
        if not is_valid_object_id(user_id):
            raise ValidationError(INVALID_USER_ID)

        updated = self._auth_db.update_user(user_id, {"is_active": False})
        if updated is None:
            raise NotFoundError(USER_NOT_FOUND)
        self._cache_user(updated)
        self._security_logger.log(SecurityEvent.USER_DEACTIVATED, email=updated.email, user_id=updated.id)
        return updated

    def delete_user(self, user_id: str) -> None:
        if not is_valid_object_id(user_id):
            raise ValidationError(INVALID_USER_ID)
        if not self._auth_db.delete_user(user_id):
            raise NotFoundError(USER_NOT_FOUND)
        self._session_cache.delete(user_id)
        self._security_logger.log(SecurityEvent.USER_DELETED, user_id=user_id)
