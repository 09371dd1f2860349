# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Run the SchoolDesk API server.

Usage:
    python -m src

Host, port, workers and reload come from the ``API_*`` variables.
"""

import uvicorn

from src.core.config import get_settings


def main() -> None:
    """Start uvicorn with the application factory."""
    api = get_settings().api
    uvicorn.run(
        "src.api.app:create_app",
        factory=True,
        host=api.host,
        port=api.port,
        # uvicorn ignores workers when reload is on
        workers=1 if api.reload else api.workers,
        reload=api.reload,
    )


if __name__ == "__main__":
    main()
