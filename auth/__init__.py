"""Authentication and authorization modules."""

from auth.exceptions import (
    AuthError,
    DuplicateEmailError,
    EmailDeliveryError,
    EncodingError,
    ExpiredTokenError,
    InvalidCredentialsError,
    InvalidKeyError,
    InvalidTokenError,
    OtpMismatchError,
    SessionNotFoundError,
)
from auth.types import (
    User,
    Role,
    Avatar,
    SessionContext,
    OAuthProfile,
)
from auth.config import AuthConfig, TokenSecrets
from auth.tokens import TokenCodec
from auth.otp import OtpIssuer, ActivationTicket, otp_matches
from auth.cipher import PasswordCipher
from auth.database import AuthDatabase
from auth.security_logger import SecurityLogger, SecurityEvent
from auth.session import SessionCache
from auth.service import Authenticator, SignupResult
from auth.dependencies import SessionGuard
from auth.api import create_auth_router
