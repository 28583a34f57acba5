"""
Public, high-level helpers for working with showcases.
"""

from __future__ import annotations

from typing import Mapping, Optional

import requests

from .core.client import ShowcaseClient, fetch_showcase as _fetch_showcase
from .core.codec import decode_showcase, encode_showcase
from .core.config import ClientConfig, ClientParameters, load_client_config
from .core.errors import ConfigError
from .core.extraction import extract_payment_parameters
from .core.showcase import Showcase

__all__ = [
    "ConfigError",
    "ShowcaseClient",
    "create_showcase_client",
    "decode_showcase",
    "encode_showcase",
    "extract_payment_parameters",
    "fetch_showcase",
]


def _resolve_config(
    config: Optional[ClientConfig],
    *,
    env_file: Optional[str],
    overrides: Optional[Mapping[str, str]],
    base: Optional[Mapping[str, str]],
    parameters: Optional[ClientParameters],
    api_url: Optional[str],
    access_token: Optional[str],
    timeout_seconds: Optional[int | str],
    language: Optional[str],
    user_agent: Optional[str],
) -> ClientConfig:
    if config is not None:
        extras = (
            overrides,
            base,
            parameters,
            api_url,
            access_token,
            timeout_seconds,
            language,
            user_agent,
        )
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built ClientConfig or individual parameters, not both."
            )
        return config
    return load_client_config(
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


def create_showcase_client(
    *,
    config: Optional[ClientConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ClientParameters] = None,
    api_url: Optional[str] = None,
    access_token: Optional[str] = None,
    timeout_seconds: Optional[int | str] = None,
    language: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> ShowcaseClient:
    """
    Construct a :class:`ShowcaseClient`.

    Callers can either supply a ready-made :class:`ClientConfig` or let the
    helper assemble one from environment data.
    """
    cfg = _resolve_config(
        config,
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
    return ShowcaseClient(cfg, session=session)


def fetch_showcase(
    scid: int,
    *,
    config: Optional[ClientConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ClientParameters] = None,
    api_url: Optional[str] = None,
    access_token: Optional[str] = None,
    timeout_seconds: Optional[int | str] = None,
    language: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> Showcase:
    """Fetch the first step of showcase ``scid``."""
    cfg = _resolve_config(
        config,
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
    return _fetch_showcase(scid, cfg, session=session)
