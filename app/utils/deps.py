# app/utils/deps.py
"""
FastAPI dependencies for the acting user and listing parameters.
This module focuses purely on dependency injection, delegating business logic to services.
"""

import logging
import uuid
from typing import Optional

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import settings
from app.core.exceptions import InvalidToken
from app.core.security import token_manager

# Setup logging
logger = logging.getLogger(__name__)

# Tokens are issued by the platform auth service; we only verify them
bearer_scheme = HTTPBearer(auto_error=False, description="JWT Access Token")


# ================== AUTHENTICATION DEPENDENCIES ==================
async def get_current_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> uuid.UUID:
    """
    Resolve the acting user's id from the access token's `sub` claim.
    Whether that user exists and is active is checked by the services.
    """
    if credentials is None:
        raise InvalidToken("Authentication credentials were not provided.")

    claims = token_manager.verify_access_token(credentials.credentials)
    request.state.user_id = claims.sub
    return claims.sub


# ================== PAGINATION DEPENDENCIES ==================
class PaginationParams:
    """Pagination parameters for list endpoints."""

    def __init__(self, page: int, limit: int):
        self.page = page
        self.limit = limit


async def get_pagination_params(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(
        settings.DEFAULT_PAGE_SIZE,
        ge=1,
        le=settings.MAX_PAGE_SIZE,
        description="Items per page",
    ),
) -> PaginationParams:
    """Get pagination parameters as a dependency."""
    return PaginationParams(page=page, limit=limit)
