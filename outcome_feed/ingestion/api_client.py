"""Paced HTTP GET against the BitMEX public REST API. Fails fast, never retries."""

import logging
import time
from typing import Optional

import requests

from ..exceptions import DecodeError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.bitmex.com/api/v1"
DEFAULT_TIMEOUT = 30
DEFAULT_MIN_INTERVAL = 1.1

# Track last request time globally; unauthenticated BitMEX allows ~1 QPS
_last_request_time = 0.0


def _wait_for_slot(min_interval: float):
    global _last_request_time

    elapsed = time.time() - _last_request_time
    if elapsed < min_interval:
        time.sleep(min_interval - elapsed)
    _last_request_time = time.time()


def api_get(
    endpoint: str,
    params: Optional[dict] = None,
    base_url: str = DEFAULT_BASE_URL,
    timeout: float = DEFAULT_TIMEOUT,
    min_interval: float = DEFAULT_MIN_INTERVAL,
    session: Optional[requests.Session] = None,
):
    """GET `base_url + endpoint` and return the decoded JSON body.

    Raises:
        TransportError: connection problem, timeout or non-2xx status.
        DecodeError: body is not valid JSON.
    """
    url = f"{base_url.rstrip('/')}{endpoint}"
    http = session or requests

    _wait_for_slot(min_interval)
    logger.debug(f"GET {url} params={params}")

    try:
        resp = http.get(url, params=params, timeout=timeout)
        resp.raise_for_status()
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        raise TransportError(f"HTTP {status} from {endpoint}: {e}", status_code=status) from e
    except requests.exceptions.RequestException as e:
        raise TransportError(f"Request to {endpoint} failed: {e}") from e

    try:
        return resp.json()
    except ValueError as e:
        raise DecodeError(f"Response from {endpoint} is not valid JSON: {e}") from e
