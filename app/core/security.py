"""
Credential primitives.

- :class:`PasswordHasher` wraps bcrypt for storing and checking passwords.
- :class:`TokenIssuer` issues signed JWT access tokens, opaque refresh
  tokens, and the digest under which refresh tokens are stored.
"""

import base64
import datetime
import hashlib
import secrets
import uuid
from dataclasses import dataclass
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from app.core.errors import InternalError, UnauthorizedError

ACCESS_TOKEN_TYPE = "access"


class PasswordHasher:
    """bcrypt password hashing.

    The password is reduced to a fixed-length SHA-256 digest before it
    reaches bcrypt, so every character of a long password counts (bcrypt
    itself only reads the first 72 bytes).
    """

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        # Same cost as real hashes, so verify_dummy takes as long as verify
        self._dummy_hash = self.hash(secrets.token_urlsafe(16))

    @staticmethod
    def _prehash(password: str) -> bytes:
        return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())

    def hash(self, password: str) -> str:
        """Return a salted bcrypt hash for ``password``."""
        try:
            hashed = bcrypt.hashpw(self._prehash(password), bcrypt.gensalt(rounds=self.rounds))
        except (ValueError, TypeError) as e:
            raise InternalError("Password hashing failed") from e
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Check ``password`` against a stored hash.

        Returns False on mismatch. Raises InternalError when the stored
        hash is not a bcrypt hash.
        """
        try:
            return bcrypt.checkpw(self._prehash(password), password_hash.encode("utf-8"))
        except (ValueError, TypeError) as e:
            raise InternalError("Stored password hash is malformed") from e

    def verify_dummy(self, password: str) -> None:
        """Run one full verification against a throwaway hash.

        Used when there is no stored hash to check, so the caller spends
        the same time as a real :meth:`verify`.
        """
        self.verify(password, self._dummy_hash)


@dataclass(frozen=True)
class AccessTokenClaims:
    """Identity asserted by a verified access token."""

    user_id: str
    email: str
    session_id: Optional[str]
    expires_at: datetime.datetime


class TokenIssuer:
    """Issues and verifies access tokens; issues and digests refresh tokens."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        access_token_ttl: datetime.timedelta = datetime.timedelta(hours=1),
        issuer: Optional[str] = None,
    ):
        if not secret_key:
            raise ValueError("TokenIssuer requires a non-empty secret key")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.access_token_ttl = access_token_ttl
        self.issuer = issuer

    def issue_access_token(self, user_id: str, email: str, session_id: Optional[str] = None) -> str:
        """Create a signed, expiring access token for the given subject."""
        now = datetime.datetime.now(datetime.timezone.utc)
        claims = {
            "sub": user_id,
            "email": email,
            "type": ACCESS_TOKEN_TYPE,
            "iat": int(now.timestamp()),
            "exp": int((now + self.access_token_ttl).timestamp()),
            "jti": uuid.uuid4().hex,
        }
        if session_id:
            claims["sid"] = session_id
        if self.issuer:
            claims["iss"] = self.issuer
        return jwt.encode(claims, self._secret_key, algorithm=self.algorithm)

    @staticmethod
    def issue_refresh_token() -> str:
        """Create a high-entropy opaque refresh token."""
        return secrets.token_urlsafe(32)

    @staticmethod
    def hash_for_storage(raw_token: str) -> str:
        """Deterministic digest used to store and look up refresh tokens."""
        return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()

    def verify_access_token(self, token: str) -> AccessTokenClaims:
        """Decode and validate an access token.

        Raises:
            UnauthorizedError: bad signature, malformed token, wrong type,
                missing claims, wrong issuer or expired token
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"require_exp": True, "require_sub": True},
            )
        except JWTError as e:
            raise UnauthorizedError("Invalid or expired token") from e

        if payload.get("type") != ACCESS_TOKEN_TYPE:
            raise UnauthorizedError("Invalid or expired token")
        email = payload.get("email")
        if not isinstance(email, str) or not email:
            raise UnauthorizedError("Invalid or expired token")

        return AccessTokenClaims(
            user_id=payload["sub"],
            email=email,
            session_id=payload.get("sid"),
            expires_at=datetime.datetime.fromtimestamp(payload["exp"], datetime.timezone.utc).replace(tzinfo=None),
        )
