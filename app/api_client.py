"""
Upstream client for the Novu workflows API.
Raw JSON in, raw JSON out; caching and normalization live elsewhere.
"""
import logging
from typing import Any, Dict
from urllib.parse import quote

import requests
from dotenv import load_dotenv

from app.errors import ConfigurationError, UpstreamError
from config.settings import settings

load_dotenv()

logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger("api_client")


def require_api_key() -> str:
    """Return the configured secret key or raise a configuration error."""
    if not settings.novu_secret_key:
        raise ConfigurationError("NOVU_SECRET_KEY environment variable is not set")
    return settings.novu_secret_key


def _get_headers() -> dict:
    """Get API authentication headers."""
    return {
        "Authorization": f"ApiKey {require_api_key()}",
        "Content-Type": "application/json",
    }


def _make_request(path: str, params: Dict[str, Any], error_message: str) -> Any:
    """
    Perform a GET against the upstream API.

    Args:
        path: Path relative to the base URL
        params: Query parameters
        error_message: Message for the UpstreamError on non-2xx

    Returns:
        Decoded JSON body

    Raises:
        ConfigurationError: If the API key is missing
        UpstreamError: On non-2xx status, transport failure or bad JSON
    """
    headers = _get_headers()
    url = f"{settings.novu_base_url.rstrip('/')}/{path}"

    try:
        response = requests.get(
            url,
            headers=headers,
            params=params or None,
            timeout=settings.upstream_timeout_seconds,
        )
    except requests.RequestException as e:
        logger.error(f"Upstream request to {path} failed: {e}")
        raise UpstreamError(502, error_message, str(e)) from e

    if not 200 <= response.status_code < 300:
        logger.error(f"Upstream {path} returned {response.status_code}")
        raise UpstreamError(response.status_code, error_message, response.text)

    try:
        return response.json()
    except ValueError as e:
        raise UpstreamError(502, error_message, f"Invalid JSON from upstream: {e}") from e


def fetch_workflows_page(page: int, page_size: int) -> Any:
    """GET /workflows?page=&pageSize= and return the raw body."""
    logger.debug(f"Fetching workflows page={page} pageSize={page_size}")
    return _make_request(
        "workflows",
        {"page": page, "pageSize": page_size},
        "API request failed",
    )


def fetch_workflow(workflow_id: str) -> Any:
    """
    GET /workflows/{id}, unwrapping the ``data`` envelope when present.

    Returns:
        The ``data`` member of an object body if non-null, else the raw body
    """
    body = _make_request(
        f"workflows/{quote(workflow_id, safe='')}",
        {},
        f"Failed to fetch workflow {workflow_id}",
    )
    if isinstance(body, dict) and body.get("data") is not None:
        return body["data"]
    return body
