"""
Vesting Lock Configuration

Runtime settings read from environment variables. None of these settings
affect a verdict of the lock script; they control logging and how the group
runner recognizes vesting lock scripts inside a transaction.
"""

from __future__ import annotations

import logging
import os

from vesting_lock.core.constants import DEFAULT_VESTING_CODE_HASH, HASH_SIZE, HASH_TYPES

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


def _get_bool(env_var: str, default: str = "0") -> bool:
    value = os.getenv(env_var, default).strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off", ""):
        return False
    raise ConfigurationError(f"{env_var} must be a boolean flag, got {value!r}")


def _get_code_hash(env_var: str) -> str:
    value = os.getenv(env_var, "").strip().lower()
    if not value:
        return DEFAULT_VESTING_CODE_HASH
    text = value[2:] if value.startswith("0x") else value
    try:
        raw = bytes.fromhex(text)
    except ValueError as exc:
        raise ConfigurationError(f"{env_var} is not valid hex") from exc
    if len(raw) != HASH_SIZE:
        raise ConfigurationError(f"{env_var} must be {HASH_SIZE} bytes, got {len(raw)}")
    return "0x" + raw.hex()


def _get_hash_type(env_var: str) -> str:
    value = os.getenv(env_var, "data1").strip().lower()
    if value not in HASH_TYPES:
        raise ConfigurationError(
            f"{env_var} must be one of {sorted(HASH_TYPES)}, got {value!r}"
        )
    return value


class Config:
    """Settings snapshot.

    Values are read when the class is instantiated so tests can change the
    environment and build a fresh instance.
    """

    def __init__(self) -> None:
        self.ENVIRONMENT = os.getenv("VESTING_LOCK_ENVIRONMENT", "production")
        self.LOG_LEVEL = os.getenv("VESTING_LOCK_LOG_LEVEL", "INFO").upper()
        if not isinstance(logging.getLevelName(self.LOG_LEVEL), int):
            raise ConfigurationError(f"VESTING_LOCK_LOG_LEVEL is not a logging level: {self.LOG_LEVEL}")
        self.LOG_FILE = os.getenv("VESTING_LOCK_LOG_FILE", "").strip() or None
        self.LOG_JSON = _get_bool("VESTING_LOCK_LOG_JSON", "1")
        self.VESTING_CODE_HASH = _get_code_hash("VESTING_LOCK_CODE_HASH")
        self.VESTING_HASH_TYPE = _get_hash_type("VESTING_LOCK_HASH_TYPE")

    def as_dict(self) -> dict:
        return {
            "environment": self.ENVIRONMENT,
            "log_level": self.LOG_LEVEL,
            "log_file": self.LOG_FILE,
            "log_json": self.LOG_JSON,
            "vesting_code_hash": self.VESTING_CODE_HASH,
            "vesting_hash_type": self.VESTING_HASH_TYPE,
        }


def load_config() -> Config:
    config = Config()
    logger.debug(
        "Configuration loaded",
        extra={"event": "config.loaded", "environment": config.ENVIRONMENT},
    )
    return config
