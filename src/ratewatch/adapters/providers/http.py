# src/ratewatch/adapters/providers/http.py
"""
HTTP Helpers for Provider Clients

This module builds the requests Session shared by HTTP-backed providers
(retry with backoff on transient server errors) and translates requests
failures into ProviderError so callers see one failure type per provider.

Files that USE this module:
- ratewatch.adapters.providers.unionpay (get_json for the daily rate file)
- ratewatch.adapters.providers.ecb (get_json for reference rates)

Files that this module USES:
- ratewatch.domain.errors (ProviderError, RateUnavailableError)
"""
import logging
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ratewatch.domain.errors import ProviderError, RateUnavailableError

log = logging.getLogger(__name__)


def build_session(retries: int = 3, backoff_factor: float = 0.5) -> requests.Session:
    """
    Create a Session that retries GETs on connection errors and 5xx responses.

    Args:
        retries: Maximum retry attempts per request
        backoff_factor: Exponential backoff base in seconds

    Returns:
        Configured requests.Session
    """
    retry = Retry(
        total=retries,
        backoff_factor=backoff_factor,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def get_json(
    session: requests.Session,
    url: str,
    provider_name: str,
    timeout: int,
    params: Optional[Dict[str, str]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Any:
    """
    GET a URL and decode its JSON body.

    A 404 is reported as RateUnavailableError: the provider publishes
    nothing for that resource (too old, not yet published, weekend).

    Raises:
        RateUnavailableError: On HTTP 404
        ProviderError: On timeout, connection/HTTP error or invalid JSON
    """
    try:
        resp = session.get(url, params=params, headers=headers, timeout=timeout)
    except requests.exceptions.Timeout as e:
        log.warning("%s API timeout after %d seconds: %s", provider_name, timeout, url)
        raise ProviderError(provider_name, f"timeout after {timeout}s", e) from e
    except requests.exceptions.RequestException as e:
        log.warning("%s API request failed: %s", provider_name, e)
        raise ProviderError(provider_name, "failed to fetch data", e) from e

    if resp.status_code == 404:
        log.warning("%s API returned 404 - data may not be available: %s", provider_name, url)
        raise RateUnavailableError(provider_name, f"data not available at {url} (404)")

    try:
        resp.raise_for_status()
    except requests.exceptions.HTTPError as e:
        log.error("%s API HTTP error: %s", provider_name, e)
        raise ProviderError(provider_name, f"HTTP {resp.status_code}", e) from e

    try:
        return resp.json()
    except ValueError as e:
        log.error("%s API returned invalid JSON: %s", provider_name, e)
        raise ProviderError(provider_name, "failed to parse response", e) from e
