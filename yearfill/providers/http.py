"""Blocking JSON-over-HTTP helper shared by the lookup clients."""

from __future__ import annotations

import http.client
import json
import logging
from typing import Any, Optional
import urllib.error
import urllib.request

from yearfill.core.report import DiagnosticTrace

logger = logging.getLogger(__name__)


class ProviderRequestError(Exception):
    """A lookup request failed at the network, HTTP or decoding level."""


def fetch_json(
    url: str,
    *,
    useragent: str,
    timeout: float,
    trace: Optional[DiagnosticTrace] = None,
) -> Any:
    """GET `url` and decode the JSON body.

    The request URL and raw response body are recorded on the trace.

    Raises:
        ProviderRequestError: On HTTP errors, network errors, truncated bodies
            or invalid JSON
    """
    if trace is not None:
        trace.request(url)
    request = urllib.request.Request(
        url,
        headers={"User-Agent": useragent, "Accept": "application/json"},
    )
    try:
        with urllib.request.urlopen(request, timeout=timeout) as resp:
            raw = resp.read()
    except urllib.error.HTTPError as exc:
        logger.debug("HTTP error %s for %s: %s", exc.code, url, exc)
        if trace is not None:
            trace.error(f"HTTP {exc.code} for {url}: {exc.reason}")
        raise ProviderRequestError(f"HTTP {exc.code}: {exc.reason}") from exc
    except (OSError, http.client.HTTPException) as exc:
        logger.warning("Request failed for %s: %s", url, exc)
        if trace is not None:
            trace.error(f"request failed for {url}: {exc}")
        raise ProviderRequestError(str(exc)) from exc

    body = raw.decode("utf-8", errors="replace")
    if trace is not None:
        trace.response(url, body)
    try:
        return json.loads(body)
    except json.JSONDecodeError as exc:
        if trace is not None:
            trace.error(f"invalid JSON from {url}: {exc}")
        raise ProviderRequestError(f"invalid JSON: {exc}") from exc


def json_list(payload: dict, key: str) -> list:
    """Return a list field of a decoded object; missing or null reads as empty.

    Raises:
        ValueError: If the field holds anything other than a list
    """
    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{key!r} is {type(value).__name__}, expected a list")
    return value
