# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get database sessions
- Authorize scheduler calls to the cron endpoints

Example:
    @router.get("/fees")
    async def list_fees(db: AsyncSession = Depends(get_db)):
        ...
"""

import logging
import secrets
from typing import AsyncGenerator

from fastapi import HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import get_settings
from src.infrastructure.database import close_database, get_session, init_database

logger = logging.getLogger(__name__)


async def init_db() -> None:
    """Initialize the database connection pool."""
    await init_database(get_settings())


async def close_db() -> None:
    """Close the database connection pool."""
    await close_database()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session.

    Yields:
        AsyncSession for the school database.
    """
    async with get_session() as session:
        yield session


def require_cron_secret(request: Request) -> None:
    """Require the scheduler's bearer token.

    Args:
        request: HTTP request.

    Raises:
        HTTPException: If the Authorization header does not carry
            ``Bearer <BILLING_CRON_SECRET>``.
    """
    expected = get_settings().billing.cron_secret.get_secret_value()
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")

    if scheme.lower() != "bearer" or not secrets.compare_digest(
        token.strip().encode(), expected.encode()
    ):
        logger.warning("Rejected cron call to %s", request.url.path)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
