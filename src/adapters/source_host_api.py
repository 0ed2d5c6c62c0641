"""Source-host client (GitHub REST API).

- Repository metadata comes from `GET /repos/{owner}/{repo}`.
- The archive URL is the `Location` of the tarball redirect; the redirect is not
  followed so the signed URL can be handed to the platform as-is.
"""

from __future__ import annotations

import httpx

from adapters.http_client import build_async_client, parse_model, request_json
from core.config import AppSettings
from core.domain.models import Repository
from core.errors import ProvisioningFailure
from core.interfaces.clients import SourceHostAPI


class GitHubClient(SourceHostAPI):
    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    def _client(self, token: str, *, follow_redirects: bool = True) -> httpx.AsyncClient:
        return build_async_client(
            self._settings,
            base_url=self._settings.github_api_url,
            extra_headers={
                # GitHub requires a UA. Accept the stable JSON version.
                "Accept": "application/vnd.github+json",
                "Authorization": f"token {token}",
            },
            transport=self._transport,
            follow_redirects=follow_redirects,
        )

    async def get_repo(self, token: str, name: str) -> Repository:
        async with self._client(token) as client:
            data = await request_json(client, "GET", f"/repos/{name}")
        return parse_model(Repository, data)

    async def get_archive_url(self, token: str, name: str, ref: str) -> str:
        url = f"/repos/{name}/tarball/{ref}"
        async with self._client(token, follow_redirects=False) as client:
            try:
                response = await client.get(url)
            except httpx.HTTPError as exc:
                raise ProvisioningFailure(f"GET {url} failed: {exc}") from exc

        location = response.headers.get("location")
        if not response.is_redirect or not location:
            if response.is_error:
                raise ProvisioningFailure.from_response(response)
            raise ProvisioningFailure(f"No archive available for {name}@{ref}")
        return location
