"""Platform API client: pipelines, app setups, couplings and account features."""

from __future__ import annotations

import httpx

from adapters.http_client import build_async_client, parse_model, request_json
from core.config import AppSettings
from core.domain.models import AppSetup, AppSetupRequest, FeatureFlag, Pipeline, Stage
from core.errors import FeatureFlagUnavailable, ProvisioningFailure
from core.interfaces.clients import PlatformAPI


class PlatformClient(PlatformAPI):
    _accept = "application/vnd.heroku+json; version=3"

    def __init__(
        self,
        token: str,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = token
        self._settings = settings or AppSettings()
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return build_async_client(
            self._settings,
            base_url=self._settings.platform_api_url,
            extra_headers={
                "Accept": self._accept,
                "Authorization": f"Bearer {self._token}",
            },
            transport=self._transport,
        )

    async def create_pipeline(self, name: str) -> Pipeline:
        async with self._client() as client:
            data = await request_json(client, "POST", "/pipelines", json={"name": name})
        return parse_model(Pipeline, data)

    async def create_app_setup(self, request: AppSetupRequest) -> AppSetup:
        async with self._client() as client:
            data = await request_json(client, "POST", "/app-setups", json=request.payload())
        return parse_model(AppSetup, data)

    async def post_coupling(self, pipeline_id: str, app_id: str, stage: Stage) -> None:
        body = {"app": app_id, "pipeline": pipeline_id, "stage": stage}
        async with self._client() as client:
            await request_json(client, "POST", "/pipeline-couplings", json=body)

    async def get_account_feature(self, name: str) -> FeatureFlag:
        try:
            async with self._client() as client:
                data = await request_json(client, "GET", f"/account/features/{name}")
        except ProvisioningFailure as exc:
            raise FeatureFlagUnavailable(exc.message) from exc
        return parse_model(FeatureFlag, data or {})
