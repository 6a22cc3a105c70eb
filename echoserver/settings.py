from __future__ import annotations

import os

from pydantic import BaseModel, Field, ValidationError

__all__ = [
    "HOST",
    "PORT",
    "Settings",
    "get_settings",
]

# The listen address is part of the contract with test clients; not configurable.
HOST = "127.0.0.1"
PORT = 18888


class Settings(BaseModel):
    """Process-level knobs read from the environment."""

    model_config = {"frozen": True}

    app_version: str = "0.1.0"
    # None means drain without a deadline.
    shutdown_grace_s: float | None = Field(default=None, gt=0)


def get_settings() -> Settings:
    """Build Settings from APP_VERSION and ECHO_SHUTDOWN_GRACE_S.

    Raises:
        ValueError: if ECHO_SHUTDOWN_GRACE_S is not a positive number.
    """
    raw: dict[str, object] = {}
    if (val := os.getenv("APP_VERSION")) is not None:
        raw["app_version"] = val
    if (val := os.getenv("ECHO_SHUTDOWN_GRACE_S")) not in (None, ""):
        raw["shutdown_grace_s"] = val
    try:
        return Settings(**raw)
    except ValidationError as e:
        raise ValueError(f"invalid settings: {e}") from e
