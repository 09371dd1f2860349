"""SchoolDesk Billing Backend.

Student fee and teacher salary tracking for school administrations,
with expiring payments and scheduled monthly billing.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
