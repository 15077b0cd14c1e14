"""One-shot fetch of the demo user list.

Used only when no snapshot exists yet. The body is returned as plain dicts;
mapping onto ``User`` happens in the store.
"""

from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.request
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://jsonplaceholder.typicode.com/users"


class RemoteFetchError(Exception):
    """The remote user list could not be retrieved."""


def fetch_users(url: str = DEFAULT_API_URL, timeout_s: Optional[float] = None) -> list[dict]:
    """GET ``url`` and return its JSON array body.

    Args:
        url: Endpoint returning an array of user objects.
        timeout_s: Socket timeout; None waits indefinitely.

    Raises:
        RemoteFetchError: on network failure, a non-JSON body, or a body
            that is not an array.
    """
    logger.info("Fetching users from %s", url)
    req = urllib.request.Request(url, headers={"Accept": "application/json"})
    try:
        with urllib.request.urlopen(req, timeout=timeout_s) as resp:
            body = resp.read()
    except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
        raise RemoteFetchError(f"GET {url} failed: {e}") from e

    try:
        data = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise RemoteFetchError(f"GET {url} returned invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise RemoteFetchError(f"GET {url} did not return an array")
    logger.info("Fetched %d users", len(data))
    return data
