"""the beautiful world start from here."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from dotenv import load_dotenv
from pydantic import ValidationError

from app.models import Route

load_dotenv()

DEFAULT_CONFIG_FILE = "config.toml"
DEFAULT_LISTEN = "127.0.0.1:5800"
DEFAULT_TIMEOUT_SECONDS = 15.0

_TRUTHY = {"1", "true", "yes", "on"}


class ConfigError(ValueError):
    """Raised when the configuration file or environment is unusable."""


@dataclass(frozen=True)
class Settings:
    """App Settings"""

    api_http: str
    listen: str = DEFAULT_LISTEN
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    debug: bool = False
    verbose: bool = False
    webhooks: Mapping[str, Route] = field(default_factory=dict)

    @property
    def listen_host(self) -> str:
        return self.listen.rsplit(":", 1)[0]

    @property
    def listen_port(self) -> int:
        return int(self.listen.rsplit(":", 1)[1])


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


def _parse_routes(raw: Any) -> dict[str, Route]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ConfigError("[webhook] must be a table of routes")
    routes: dict[str, Route] = {}
    for identifier, entry in raw.items():
        try:
            routes[identifier] = Route.model_validate(entry)
        except ValidationError as exc:
            raise ConfigError(f"invalid webhook {identifier!r}: {exc}") from exc
    return routes


def build_settings(
    data: Mapping[str, Any], env: Mapping[str, str] | None = None
) -> Settings:
    """
    Build ``Settings`` from parsed TOML data, applying ``BOT_*`` overrides.

    Recognised overrides: ``BOT_API_HTTP``, ``BOT_API_TIMEOUT``,
    ``BOT_COMMON_LISTEN``, ``BOT_DEBUG`` and ``BOT_VERBOSE``.
    """
    env = os.environ if env is None else env
    api = data.get("api") or {}
    common = data.get("common") or {}

    api_http = env.get("BOT_API_HTTP") or api.get("http")
    if not api_http:
        raise ConfigError("api.http is required")

    raw_timeout = env.get("BOT_API_TIMEOUT") or api.get("timeout") or DEFAULT_TIMEOUT_SECONDS
    try:
        timeout = float(raw_timeout)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"api.timeout is not a number: {raw_timeout!r}") from exc

    listen = env.get("BOT_COMMON_LISTEN") or common.get("listen") or DEFAULT_LISTEN
    if ":" not in listen or not listen.rsplit(":", 1)[1].isdigit():
        raise ConfigError(f"common.listen must be host:port, got {listen!r}")

    return Settings(
        api_http=str(api_http).rstrip("/"),
        listen=listen,
        timeout=timeout,
        debug=_as_bool(env.get("BOT_DEBUG", data.get("debug", False))),
        verbose=_as_bool(env.get("BOT_VERBOSE", data.get("verbose", False))),
        webhooks=MappingProxyType(_parse_routes(data.get("webhook"))),
    )


def load_settings(path: str | os.PathLike[str] | None = None) -> Settings:
    """Read the TOML config file (``BOT_CONFIG_FILE`` by default)."""
    config_path = Path(path or os.getenv("BOT_CONFIG_FILE", DEFAULT_CONFIG_FILE))
    try:
        with config_path.open("rb") as fh:
            data = tomllib.load(fh)
    except FileNotFoundError as exc:
        raise ConfigError(f"config file not found: {config_path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"config file {config_path} is not valid TOML: {exc}") from exc
    return build_settings(data)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, loaded on first use."""
    return load_settings()
