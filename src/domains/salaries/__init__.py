# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Teacher salary domain."""

from src.domains.salaries.service import TeacherSalaryService

__all__ = [
    "TeacherSalaryService",
]
