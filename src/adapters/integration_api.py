"""GitHub integration API client.

Every call authenticates with the platform identity token; the integration service
holds the delegated GitHub credential and the links between pipelines/apps and repos.
"""

from __future__ import annotations

from typing import Any

import httpx

from adapters.http_client import build_async_client, parse_model, request_json
from core.config import AppSettings
from core.domain.models import CISettings, LinkedAccount
from core.interfaces.clients import IntegrationAPI


class IntegrationClient(IntegrationAPI):
    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    def _client(self, token: str) -> httpx.AsyncClient:
        return build_async_client(
            self._settings,
            base_url=self._settings.integration_api_url,
            extra_headers={"Authorization": f"Bearer {token}"},
            transport=self._transport,
        )

    async def get_account(self, token: str) -> LinkedAccount:
        async with self._client(token) as client:
            data = await request_json(client, "GET", "/account/github/token")
        return parse_model(LinkedAccount, data or {})

    async def create_pipeline_repository(self, token: str, pipeline_id: str, repo_id: int) -> None:
        async with self._client(token) as client:
            await request_json(
                client,
                "POST",
                f"/pipelines/{pipeline_id}/repository",
                json={"repository": repo_id},
            )

    async def update_app_link(self, token: str, app_id: str, settings: dict[str, Any]) -> dict[str, Any]:
        async with self._client(token) as client:
            data = await request_json(client, "PATCH", f"/apps/{app_id}/github", json=settings)
        return data if isinstance(data, dict) else {}

    async def update_pipeline_repository(self, token: str, pipeline_id: str, settings: CISettings) -> None:
        async with self._client(token) as client:
            await request_json(
                client,
                "PATCH",
                f"/pipelines/{pipeline_id}/repository",
                json=settings.payload(),
            )
