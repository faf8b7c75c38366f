from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable

from dotenv import load_dotenv


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    base_url: str
    api_key: str
    debug: bool = False
    env_name: str = "dev"
    connect_timeout_seconds: float = 5.0
    read_timeout_seconds: float = 15.0
    verify_ssl: bool = True

    @property
    def normalized_env(self) -> str:
        return self.env_name.lower().strip()

    @property
    def timeout(self) -> tuple[float, float]:
        return (self.connect_timeout_seconds, self.read_timeout_seconds)


def _require(values: dict[str, str | None], required: Iterable[str]) -> None:
    missing = [key for key in required if not values.get(key)]
    if missing:
        raise ConfigError(f"Missing required config values: {', '.join(missing)}")


def _coerce_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _read_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from exc


def _validate(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigError(message)


def _read_timeout(name: str, default: float) -> float:
    seconds = _read_float(name, str(default))
    _validate(seconds > 0, f"Invalid {name}: expected > 0, got {seconds}")
    return seconds


def load_config(env_file: str | None = None) -> ClientConfig:
    """Load config from environment with optional .env override."""
    load_dotenv(env_file)

    env_name = (os.getenv("PRESTASHOP_ENV") or "dev").strip()
    env_key = env_name.upper()

    base_url = (
        (os.getenv(f"PRESTASHOP_BASE_URL_{env_key}") or "").strip()
        or (os.getenv("PRESTASHOP_BASE_URL") or "").strip()
    )
    api_key = (os.getenv("PRESTASHOP_API_KEY") or "").strip()

    timeout = _read_timeout("PRESTASHOP_TIMEOUT_SECONDS", 10.0)
    connect_timeout = _read_timeout("PRESTASHOP_CONNECT_TIMEOUT_SECONDS", min(timeout, 5.0))
    read_timeout = _read_timeout("PRESTASHOP_READ_TIMEOUT_SECONDS", max(timeout, connect_timeout))

    debug = _coerce_bool(os.getenv("PRESTASHOP_DEBUG"), False)
    verify_ssl = _coerce_bool(os.getenv("PRESTASHOP_VERIFY_SSL"), True)

    values = {"PRESTASHOP_BASE_URL": base_url, "PRESTASHOP_API_KEY": api_key}
    _require(values, ["PRESTASHOP_BASE_URL", "PRESTASHOP_API_KEY"])

    return ClientConfig(
        base_url=base_url.rstrip("/"),
        api_key=api_key,
        debug=debug,
        env_name=env_name,
        connect_timeout_seconds=connect_timeout,
        read_timeout_seconds=read_timeout,
        verify_ssl=verify_ssl,
    )
