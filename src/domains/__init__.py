# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for SchoolDesk.

This package contains domain services that encapsulate business logic.

Domains:
    billing: Period parsing, paid status expiration and scheduled jobs.
    fees: Student fees and the fee summary.
    salaries: Teacher salaries and salary notifications.
"""
