"""
Configuration objects and helpers for the showcase client.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .environment import build_environment
from .errors import ConfigError

__all__ = [
    "ClientConfig",
    "ClientParameters",
    "load_client_config",
]

DEFAULT_API_URL = "https://yoomoney.ru/api"
DEFAULT_USER_AGENT = "money-showcase"
SUPPORTED_LANGUAGES = ("ru", "en")

_PARAMETER_TO_ENV_KEY = {
    "api_url": "SHOWCASE_API_URL",
    "access_token": "SHOWCASE_ACCESS_TOKEN",
    "timeout_seconds": "SHOWCASE_TIMEOUT_SECONDS",
    "language": "SHOWCASE_LANGUAGE",
    "user_agent": "SHOWCASE_USER_AGENT",
}


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class ClientParameters:
    """
    Explicit parameter bundle for constructing :class:`ClientConfig`.

    Callers can either instantiate this helper or pass the individual keyword
    arguments directly to :func:`load_client_config`.
    """

    api_url: Optional[str] = None
    access_token: Optional[str] = None
    timeout_seconds: Optional[int | str] = None
    language: Optional[str] = None
    user_agent: Optional[str] = None

    def as_overrides(self) -> Dict[str, str]:
        overrides: Dict[str, str] = {}
        for field_name, env_key in _PARAMETER_TO_ENV_KEY.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            overrides[env_key] = _stringify(value)
        return overrides


def _collect_parameter_overrides(
    parameters: Optional[ClientParameters],
    explicit: Mapping[str, Any],
) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    if parameters is not None:
        overrides.update(parameters.as_overrides())

    for key, value in explicit.items():
        if value is None:
            continue
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:
            raise TypeError(f"Unknown client parameter '{key}'") from exc
        overrides[env_key] = _stringify(value)
    return overrides


def _normalize_api_url(raw_url: str) -> str:
    url = raw_url.strip().rstrip("/")
    if not url.startswith(("http://", "https://")):
        raise ConfigError(
            f"SHOWCASE_API_URL must be an http(s) URL, got '{raw_url}'", "SHOWCASE_API_URL"
        )
    return url


def _parse_timeout(raw_timeout: str) -> int:
    try:
        timeout = int(raw_timeout)
    except ValueError as exc:
        raise ConfigError(
            f"SHOWCASE_TIMEOUT_SECONDS must be an integer, got '{raw_timeout}'",
            "SHOWCASE_TIMEOUT_SECONDS",
        ) from exc
    if timeout <= 0:
        raise ConfigError(
            "SHOWCASE_TIMEOUT_SECONDS must be greater than zero", "SHOWCASE_TIMEOUT_SECONDS"
        )
    return timeout


@dataclass(frozen=True)
class ClientConfig:
    api_url: str = DEFAULT_API_URL
    access_token: Optional[str] = None
    timeout_seconds: int = 30
    language: str = "ru"
    user_agent: str = DEFAULT_USER_AGENT

    def showcase_url(self, scid: int) -> str:
        return f"{self.api_url}/showcase/{scid}"

    def search_url(self) -> str:
        return f"{self.api_url}/showcase-search"

    def headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Accept-Language": self.language,
            "User-Agent": self.user_agent,
        }
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "ClientConfig":
        api_url = _normalize_api_url(values.get("SHOWCASE_API_URL", DEFAULT_API_URL))

        access_token = values.get("SHOWCASE_ACCESS_TOKEN") or None
        if access_token is not None:
            access_token = access_token.strip() or None

        timeout_seconds = _parse_timeout(values.get("SHOWCASE_TIMEOUT_SECONDS", "30"))

        language = values.get("SHOWCASE_LANGUAGE", "ru").strip().lower()
        if language not in SUPPORTED_LANGUAGES:
            raise ConfigError(
                f"SHOWCASE_LANGUAGE must be one of {', '.join(SUPPORTED_LANGUAGES)}, got '{language}'",
                "SHOWCASE_LANGUAGE",
            )

        user_agent = values.get("SHOWCASE_USER_AGENT", DEFAULT_USER_AGENT).strip()
        if not user_agent:
            raise ConfigError("SHOWCASE_USER_AGENT must not be empty", "SHOWCASE_USER_AGENT")

        return cls(
            api_url=api_url,
            access_token=access_token,
            timeout_seconds=timeout_seconds,
            language=language,
            user_agent=user_agent,
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        parameters: Optional[ClientParameters] = None,
        api_url: Optional[str] = None,
        access_token: Optional[str] = None,
        timeout_seconds: Optional[int | str] = None,
        language: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> "ClientConfig":
        parameter_overrides = _collect_parameter_overrides(
            parameters,
            {
                "api_url": api_url,
                "access_token": access_token,
                "timeout_seconds": timeout_seconds,
                "language": language,
                "user_agent": user_agent,
            },
        )
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        try:
            return cls.from_mapping(environment.variables)
        except ConfigError as exc:
            if exc.key is None or environment.source_of(exc.key) is None:
                raise
            raise ConfigError(
                f"{exc} [{environment.describe(exc.key)}]", exc.key
            ) from exc


def load_client_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ClientParameters] = None,
    api_url: Optional[str] = None,
    access_token: Optional[str] = None,
    timeout_seconds: Optional[int | str] = None,
    language: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> ClientConfig:
    """
    Convenience wrapper that mirrors :meth:`ClientConfig.from_env`.

    The configuration can be provided through environment variables, a
    ``.env`` file, direct keyword arguments, or any combination of the three.
    """
    return ClientConfig.from_env(
        env_file=env_file,
        overrides=overrides,
        base=base,
        parameters=parameters,
        api_url=api_url,
        access_token=access_token,
        timeout_seconds=timeout_seconds,
        language=language,
        user_agent=user_agent,
    )
