"""
Access-token handling.

Tokens are minted by the platform's auth service with a shared secret.
This service only verifies them and reads the acting user from `sub`;
`TokenManager.create_token` produces the same claim layout and is used
by tooling and tests.
"""

import uuid
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from enum import Enum

from jose import jwt, JWTError
from jose.exceptions import ExpiredSignatureError
from pydantic import BaseModel, ValidationError as PydanticValidationError

from app.core.config import settings
from app.core.exceptions import (
    TokenExpired,
    TokenTypeInvalid,
    InvalidToken,
)

logger = logging.getLogger(__name__)

MIN_SECRET_LENGTH = 32


class TokenType(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


class TokenClaims(BaseModel):
    """The claims this service relies on."""

    sub: uuid.UUID
    type: TokenType
    jti: Optional[str] = None


class TokenManager:
    """Creates and verifies JWTs for one issuer/audience pair."""

    def __init__(
        self,
        *,
        secret: str,
        algorithm: str,
        issuer: str,
        audience: str,
        access_ttl: timedelta,
    ):
        if not secret or len(secret) < MIN_SECRET_LENGTH:
            raise ValueError(
                f"JWT_SECRET must be configured and be at least {MIN_SECRET_LENGTH} characters long."
            )
        self.secret = secret
        self.algorithm = algorithm
        self.issuer = issuer
        self.audience = audience
        self.access_ttl = access_ttl

    def create_token(
        self,
        subject: str,
        token_type: TokenType = TokenType.ACCESS,
        expires_delta: Optional[timedelta] = None,
        additional_claims: Optional[Dict[str, Any]] = None,
    ) -> str:
        issued_at = datetime.now(timezone.utc)
        claims = {
            "sub": str(subject),
            "type": token_type.value,
            "iss": self.issuer,
            "aud": self.audience,
            "iat": issued_at,
            "exp": issued_at + (expires_delta or self.access_ttl),
            "jti": uuid.uuid4().hex,
        }
        claims.update(additional_claims or {})
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Dict[str, Any]:
        """Check signature, expiry, issuer and audience; return the raw payload."""
        if not token:
            raise InvalidToken("Token cannot be empty.")
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
            )
        except ExpiredSignatureError:
            raise TokenExpired() from None
        except JWTError as e:
            logger.info("Rejected token", extra={"reason": str(e)})
            raise InvalidToken(f"Token is invalid: {e}") from e

    def verify_access_token(self, token: str) -> TokenClaims:
        payload = self.decode(token)

        token_type = payload.get("type")
        if token_type != TokenType.ACCESS.value:
            raise TokenTypeInvalid(
                f"Expected '{TokenType.ACCESS.value}' token, but got '{token_type}'."
            )
        try:
            return TokenClaims.model_validate(payload)
        except PydanticValidationError:
            raise InvalidToken("Token subject is not a valid user id.") from None


token_manager = TokenManager(
    secret=settings.JWT_SECRET,
    algorithm=settings.JWT_ALGORITHM,
    issuer=settings.TOKEN_ISSUER,
    audience=settings.TOKEN_AUDIENCE,
    access_ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
)
