"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts, headers, auth and error mapping for the three APIs.
- Eases testing: a `transport` (e.g. `httpx.MockTransport`) can be injected.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from core.config import AppSettings
from core.errors import ProvisioningFailure

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def build_async_client(
    settings: AppSettings | None = None,
    *,
    base_url: str = "",
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    follow_redirects: bool = True,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with the project defaults."""

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=follow_redirects,
        headers=headers,
        transport=transport,
    )


async def request_json(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    json: Any = None,
) -> Any:
    """Send a request and return the decoded body.

    Transport errors and non-2xx responses raise `ProvisioningFailure`, carrying the
    remote `message` when the body has one.
    """

    logger.debug("%s %s%s", method, client.base_url, url)
    try:
        response = await client.request(method, url, json=json)
    except httpx.HTTPError as exc:
        raise ProvisioningFailure(f"{method} {url} failed: {exc}") from exc

    if response.is_error:
        logger.debug("%s %s -> HTTP %s", method, url, response.status_code)
        raise ProvisioningFailure.from_response(response)

    if not response.content:
        return None
    try:
        return response.json()
    except ValueError as exc:
        raise ProvisioningFailure(f"{method} {url} returned a non-JSON body") from exc


def parse_model(model: type[ModelT], data: Any) -> ModelT:
    """Validate a 2xx body; a malformed body is a failed call, not a crash."""

    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        logger.debug("Malformed %s response: %s", model.__name__, exc)
        raise ProvisioningFailure(f"Unexpected {model.__name__.lower()} response from the API") from exc
