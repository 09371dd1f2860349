# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the database reachability check."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from src.infrastructure.database.connection import check_database_connection


def make_engine(connect_error: Exception | None = None) -> MagicMock:
    """Build a mock engine whose connect() context yields a connection."""
    conn = AsyncMock()
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=conn)
    context.__aexit__ = AsyncMock(return_value=False)
    if connect_error is not None:
        context.__aenter__.side_effect = connect_error

    engine = MagicMock()
    engine.connect.return_value = context
    engine.conn = conn
    return engine


class TestCheckDatabaseConnection:
    """Tests for check_database_connection."""

    @pytest.mark.asyncio
    async def test_not_initialized(self):
        """Test an uninitialized engine is reported unreachable."""
        with patch("src.infrastructure.database.connection._engine", None):
            assert await check_database_connection() is False

    @pytest.mark.asyncio
    async def test_reachable(self):
        """Test a successful SELECT 1 reports reachable."""
        engine = make_engine()
        with patch("src.infrastructure.database.connection._engine", engine):
            assert await check_database_connection() is True

        engine.conn.execute.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            OperationalError("SELECT 1", {}, Exception("server closed the connection")),
            ConnectionRefusedError("connection refused"),
        ],
    )
    async def test_unreachable(self, error):
        """Test driver and socket errors report unreachable."""
        engine = make_engine(connect_error=error)
        with patch("src.infrastructure.database.connection._engine", engine):
            assert await check_database_connection() is False
