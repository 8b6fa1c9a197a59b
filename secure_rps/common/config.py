"""Connection settings from the environment (and an optional .env file)."""

import os
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

DEFAULT_TIMEOUT = 20.0


class ConnectionConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = Field(9000, ge=0, le=65535)
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0)
    log_file: Optional[str] = None
    log_level: str = "INFO"


def load_env_config(**overrides) -> ConnectionConfig:
    """
    Build a ConnectionConfig from RPS_* environment variables.

    A .env file is looked up from the working directory upwards; real
    environment variables take precedence over it.

    Keyword overrides (e.g. parsed CLI flags) win over the environment;
    None values are ignored.
    """
    load_dotenv(find_dotenv(usecwd=True))

    values = {
        "host": os.getenv("RPS_HOST", "127.0.0.1"),
        "port": os.getenv("RPS_PORT", "9000"),
        "timeout": os.getenv("RPS_TIMEOUT", str(DEFAULT_TIMEOUT)),
        "log_file": os.getenv("RPS_LOG_FILE") or None,
        "log_level": os.getenv("RPS_LOG_LEVEL", "INFO"),
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return ConnectionConfig(**values)
