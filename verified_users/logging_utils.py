from __future__ import annotations

import logging
import os


def configure_logging(verbose_int: int = 0) -> None:
    """Configure root logging. Idempotent-ish for Lambda."""
    level = logging.DEBUG if (verbose_int or 0) >= 1 else logging.INFO

    # If LOG_LEVEL is set (Lambda, local .env), let it override.
    env_level = os.environ.get("LOG_LEVEL")
    if env_level:
        resolved = logging.getLevelName(env_level.upper())
        if isinstance(resolved, int):
            level = resolved

    root = logging.getLogger()
    if root.handlers:
        # Lambda already configured; just adjust level.
        root.setLevel(level)
        for h in root.handlers:
            h.setLevel(level)
        return

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
