"""
HTTP client for the showcase endpoints.
"""

from __future__ import annotations

import logging
from typing import List, Mapping, Optional

import requests

from .codec import ComponentRegistry, decode_showcase, decode_showcase_search
from .config import ClientConfig
from .errors import DecodeError, TransportError
from .extraction import extract_payment_parameters, find_invalid_components
from .showcase import Showcase, ShowcaseReference

__all__ = [
    "ShowcaseClient",
    "fetch_showcase",
]


def _read_showcase(
    response: requests.Response,
    url: str,
    registry: Optional[ComponentRegistry],
) -> Showcase:
    status = response.status_code
    if status > 400:
        raise TransportError(
            f"Showcase endpoint responded with {status}: {response.text}",
            status_code=status,
        )
    try:
        showcase = decode_showcase(response.content, registry=registry)
    except DecodeError as exc:
        raise TransportError(
            f"Failed to decode showcase from {url} ({status}): {exc}",
            status_code=status,
        ) from exc
    if showcase.errors:
        logging.info(
            "Showcase %r returned %d field error(s)", showcase.title, len(showcase.errors)
        )
    return showcase


class ShowcaseClient:
    """
    Thin wrapper around the showcase endpoints.

    A 400 response that still carries a showcase is the server rejecting the
    submitted step; it is returned like any other step with ``errors`` set.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        session: Optional[requests.Session] = None,
        registry: Optional[ComponentRegistry] = None,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()
        self.registry = registry

    def _get(self, url: str, params: Optional[Mapping[str, str]] = None) -> requests.Response:
        try:
            return self.session.get(
                url,
                params=params,
                headers=self.config.headers(),
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise TransportError(f"GET {url} failed: {exc}") from exc

    def _post(self, url: str, data: Mapping[str, str]) -> requests.Response:
        try:
            return self.session.post(
                url,
                data=dict(data),
                headers=self.config.headers(),
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise TransportError(f"POST {url} failed: {exc}") from exc

    def fetch(self, scid: int) -> Showcase:
        """Request the first step of showcase ``scid``."""
        url = self.config.showcase_url(scid)
        logging.info("Fetching showcase from %s", url)
        return _read_showcase(self._get(url), url, self.registry)

    def submit(self, url: str, parameters: Mapping[str, str]) -> Showcase:
        """Post ``parameters`` to ``url`` and return the next step."""
        logging.info("Submitting %d payment parameter(s) to %s", len(parameters), url)
        return _read_showcase(self._post(url, parameters), url, self.registry)

    def proceed(self, showcase: Showcase, url: str) -> Showcase:
        """
        Validate ``showcase`` and submit its payment parameters to ``url``.

        Raises :class:`ValueError` listing the offending fields when the form
        is not valid.
        """
        if not showcase.is_valid():
            invalid = find_invalid_components(showcase.form)
            names = ", ".join(getattr(item, "name", item.kind) for item in invalid)
            raise ValueError(f"Showcase {showcase.title!r} is not valid: {names}")
        return self.submit(url, extract_payment_parameters(showcase))

    def search(self, query: str, records: int = 10) -> List[ShowcaseReference]:
        url = self.config.search_url()
        logging.info("Searching showcases for %r", query)
        response = self._get(url, params={"query": query, "records": str(records)})
        if response.status_code >= 400:
            raise TransportError(
                f"Showcase search responded with {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        try:
            return decode_showcase_search(response.content)
        except DecodeError as exc:
            raise TransportError(f"Failed to decode search results from {url}: {exc}") from exc


def fetch_showcase(
    scid: int,
    config: ClientConfig,
    *,
    session: Optional[requests.Session] = None,
) -> Showcase:
    """High-level helper that fetches a single showcase."""
    return ShowcaseClient(config, session=session).fetch(scid)
