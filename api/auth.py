"""
Authentication for the FastAPI API: demo user directory, password
hashing and signed bearer tokens.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import bcrypt
import jwt
import structlog
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from api.config import config

logger = structlog.get_logger(__name__)

# Security scheme; a missing header is handled by get_current_user_id
security = HTTPBearer(auto_error=False)

# (id, username, email, display name, password)
DEMO_USERS = [
    ("user123", "testuser", "test@example.com", "Test User", "testpass"),
    ("demo123", "demo", "demo@example.com", "Demo User", "demo123"),
    ("admin123", "admin", "admin@example.com", "Admin User", "admin123"),
]


class User(BaseModel):
    """A user that can log in."""
    id: str
    username: str
    email: str
    display_name: str
    password_hash: str
    avatar: Optional[str] = None


def hash_password(password: str, rounds: int = 12) -> str:
    """
    Hash a password with bcrypt.

    Args:
        password: Plain-text password
        rounds: bcrypt cost factor

    Returns:
        The encoded hash
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Malformed password hash")
        return False


class UserDirectory:
    """In-memory set of users, keyed by id."""

    def __init__(self, users: Optional[List[User]] = None):
        self._users: Dict[str, User] = {user.id: user for user in users or []}

    @classmethod
    def with_demo_users(cls, rounds: int = 12) -> "UserDirectory":
        """Build a directory holding the demo accounts."""
        users = [
            User(
                id=user_id,
                username=username,
                email=email,
                display_name=display_name,
                password_hash=hash_password(password, rounds),
            )
            for user_id, username, email, display_name, password in DEMO_USERS
        ]
        logger.info("Demo users loaded", count=len(users))
        return cls(users)

    def get(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def find_by_username(self, username: str) -> Optional[User]:
        for user in self._users.values():
            if user.username == username:
                return user
        return None

    def list_users(self) -> List[User]:
        return list(self._users.values())

    def authenticate(self, username: str, password: str) -> Optional[User]:
        """
        Check credentials.

        Returns:
            The user if the password matches, None otherwise
        """
        user = self.find_by_username(username)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Login failed", username=username)
            return None

        logger.info("Login succeeded", user_id=user.id)
        return user


class TokenManager:
    """Issues and verifies HS256 bearer tokens."""

    def __init__(
        self,
        secret_key: str = config.secret_key,
        algorithm: str = config.algorithm,
        issuer: str = config.token_issuer,
        audience: str = config.token_audience,
        expire_minutes: int = config.access_token_expire_minutes,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer
        self.audience = audience
        self.expire_minutes = expire_minutes

    def create_token(self, user: User, now: Optional[datetime] = None) -> str:
        """
        Create a signed token for a user.

        Args:
            user: Authenticated user
            now: Issue time, defaults to the current time

        Returns:
            Encoded token
        """
        now = now or datetime.now(timezone.utc)
        payload = {
            "sub": user.id,
            "name": user.username,
            "email": user.email,
            "displayName": user.display_name,
            "iss": self.issuer,
            "aud": self.audience,
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> dict:
        """
        Verify a token and return its claims.

        Raises:
            jwt.InvalidTokenError: If the signature, issuer, audience or
                expiry check fails
        """
        return jwt.decode(
            token,
            self.secret_key,
            algorithms=[self.algorithm],
            issuer=self.issuer,
            audience=self.audience,
        )


def get_user_directory(request: Request) -> UserDirectory:
    return request.app.state.users


def get_token_manager(request: Request) -> TokenManager:
    return request.app.state.tokens


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    tokens: TokenManager = Depends(get_token_manager),
) -> str:
    """
    Resolve the caller's user id from the bearer token.

    A valid token without a subject resolves to the fallback user. So does
    a request without a token when anonymous access is allowed.

    Raises:
        HTTPException: If the token is missing or invalid
    """
    if credentials is None:
        if config.allow_anonymous:
            return config.fallback_user_id
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = tokens.decode_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        logger.info("Expired token presented")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except jwt.InvalidTokenError as e:
        logger.warning("Invalid token presented", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return claims.get("sub") or config.fallback_user_id
