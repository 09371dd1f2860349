# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    fees: Student fee endpoints (list, create, update, toggle, summary).
    salaries: Teacher salary endpoints (list, create, update, toggle).
    cron: Scheduled job endpoints (expiration sweeps, monthly billing).
"""

from fastapi import APIRouter

from src.api.v1 import cron, fees, salaries

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(fees.router, prefix="/fees", tags=["Fees"])
router.include_router(salaries.router, prefix="/salaries", tags=["Salaries"])
router.include_router(cron.router, prefix="/cron", tags=["Cron"])

__all__ = ["router"]
