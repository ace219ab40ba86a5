"""Runtime configuration read from the environment (and a local .env file)."""

import logging
import os
from enum import Enum
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

ENV_ERROR_POLICY = "DISPATCH_ERROR_POLICY"
ENV_LOG_LEVEL = "DISPATCH_LOG_LEVEL"
ENV_ADMIN_API_KEY = "DISPATCH_ADMIN_API_KEY"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ErrorPolicy(str, Enum):
    """What a delivery pass does when a subscriber or observer raises."""

    PROPAGATE = "propagate"
    ISOLATE = "isolate"


class DispatchSettings(BaseModel):
    """Settings shared by routers, subjects and the inspection API."""

    error_policy: ErrorPolicy = ErrorPolicy.PROPAGATE
    log_level: str = "INFO"
    admin_api_key: Optional[str] = None

    @field_validator("error_policy", mode="before")
    @classmethod
    def _normalize_policy(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, value):
        level = str(value).strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return level

    @field_validator("admin_api_key", mode="before")
    @classmethod
    def _blank_key_is_none(cls, value):
        if value is None:
            return None
        return str(value).strip() or None

    @property
    def log_level_number(self) -> int:
        return getattr(logging, self.log_level)


def load_settings(env: Optional[Mapping[str, str]] = None) -> DispatchSettings:
    """Build settings from ``env``; when omitted, load .env and read os.environ."""
    if env is None:
        load_dotenv()
        env = os.environ
    return DispatchSettings(
        error_policy=env.get(ENV_ERROR_POLICY, ErrorPolicy.PROPAGATE.value),
        log_level=env.get(ENV_LOG_LEVEL, "INFO"),
        admin_api_key=env.get(ENV_ADMIN_API_KEY),
    )
