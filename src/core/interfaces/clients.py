"""Contracts of the three remote services.

Why Protocol:
- Structural typing (duck typing) without a rigid base class.
- The httpx adapters and the test fakes are interchangeable.

Every method is async because every implementation does HTTP I/O.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from core.domain.models import AppSetup, AppSetupRequest, CISettings, FeatureFlag, LinkedAccount, Pipeline, Repository, Stage


@runtime_checkable
class PlatformAPI(Protocol):
    """Pipelines, apps, couplings and account features."""

    async def create_pipeline(self, name: str) -> Pipeline: ...

    async def create_app_setup(self, request: AppSetupRequest) -> AppSetup: ...

    async def post_coupling(self, pipeline_id: str, app_id: str, stage: Stage) -> None: ...

    async def get_account_feature(self, name: str) -> FeatureFlag: ...


@runtime_checkable
class SourceHostAPI(Protocol):
    """Repository metadata and source archives (GitHub)."""

    async def get_repo(self, token: str, name: str) -> Repository: ...

    async def get_archive_url(self, token: str, name: str, ref: str) -> str: ...


@runtime_checkable
class IntegrationAPI(Protocol):
    """Links between platform resources and GitHub."""

    async def get_account(self, token: str) -> LinkedAccount: ...

    async def create_pipeline_repository(self, token: str, pipeline_id: str, repo_id: int) -> None: ...

    async def update_app_link(self, token: str, app_id: str, settings: dict[str, Any]) -> dict[str, Any]: ...

    async def update_pipeline_repository(self, token: str, pipeline_id: str, settings: CISettings) -> None: ...
