"""Configuration helpers — read from environment variables."""

from __future__ import annotations

import os


def get_env(name: str, default: str | None = None) -> str:
    """Get an environment variable, raising if missing and no default."""
    value = os.environ.get(name, default)
    if value is None:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


# Deployment settings (set by the pipeline that runs configure_handler)
AUTHORIZER_ROLE_ARN = lambda: get_env("AUTHORIZER_ROLE_ARN", "")
AWS_REGION = lambda: get_env("AWS_REGION", "") or None
DEFAULT_RUNTIME = "python3.12"
