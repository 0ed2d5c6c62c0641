"""Shared fakes: scripted prompter and recording API clients."""

from __future__ import annotations

from typing import Any

import pytest

from core.config import AppSettings
from core.domain.models import App, AppSetup, AppSetupRequest, CISettings, FeatureFlag, LinkedAccount, Pipeline, Repository
from core.errors import ProvisioningFailure


class ScriptedPrompter:
    """Answers questions from a queue and records what was asked."""

    def __init__(self, confirms: list[bool] | None = None, texts: list[str] | None = None) -> None:
        self.confirms = list(confirms or [])
        self.texts = list(texts or [])
        self.asked: list[str] = []
        self.errors: list[str] = []

    def confirm(self, message: str) -> bool:
        self.asked.append(message)
        return self.confirms.pop(0)

    def text(self, message: str) -> str:
        self.asked.append(message)
        return self.texts.pop(0)

    def error(self, message: str) -> None:
        self.errors.append(message)


class FakeAPIs:
    """One object playing all three services, logging calls in order."""

    def __init__(
        self,
        *,
        github_token: str | None = "gh-token",
        account_error: bool = False,
        repo_error: bool = False,
        ci_enabled: bool = False,
        ci_error: bool = False,
        app_link_error: str | None = None,
        default_branch: str = "main",
        app_setup_error_at: int | None = None,
    ) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.github_token = github_token
        self.account_error = account_error
        self.repo_error = repo_error
        self.ci_enabled = ci_enabled
        self.ci_error = ci_error
        self.app_link_error = app_link_error
        self.default_branch = default_branch
        self.app_setup_error_at = app_setup_error_at
        self._app_count = 0

    @property
    def platform_calls(self) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0].startswith("platform.")]

    # Integration API
    async def get_account(self, token: str) -> LinkedAccount:
        self.calls.append(("integration.get_account", token))
        if self.account_error:
            raise ProvisioningFailure("Not found", status_code=404)
        return LinkedAccount(github={"token": self.github_token})

    async def create_pipeline_repository(self, token: str, pipeline_id: str, repo_id: int) -> None:
        self.calls.append(("integration.create_pipeline_repository", token, pipeline_id, repo_id))

    async def update_app_link(self, token: str, app_id: str, settings: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("integration.update_app_link", token, app_id, settings))
        if self.app_link_error is not None:
            raise ProvisioningFailure(self.app_link_error or None, status_code=422)
        return {"app": {"id": app_id}, **settings}

    async def update_pipeline_repository(self, token: str, pipeline_id: str, settings: CISettings) -> None:
        self.calls.append(("integration.update_pipeline_repository", token, pipeline_id, settings.payload()))

    # Source host
    async def get_repo(self, token: str, name: str) -> Repository:
        self.calls.append(("github.get_repo", token, name))
        if self.repo_error:
            raise ProvisioningFailure("Not Found", status_code=404)
        return Repository(id=42, full_name=name, default_branch=self.default_branch)

    async def get_archive_url(self, token: str, name: str, ref: str) -> str:
        self.calls.append(("github.get_archive_url", token, name, ref))
        return f"https://codeload.example.com/{name}/tar.gz/{ref}"

    # Platform
    async def create_pipeline(self, name: str) -> Pipeline:
        self.calls.append(("platform.create_pipeline", name))
        return Pipeline(id="pipe-1", name=name)

    async def create_app_setup(self, request: AppSetupRequest) -> AppSetup:
        self._app_count += 1
        self.calls.append(("platform.create_app_setup", request.payload()))
        if self._app_count == self.app_setup_error_at:
            raise ProvisioningFailure("Name is already taken", status_code=422)
        return AppSetup(id=f"setup-{self._app_count}", app=App(id=f"app-{self._app_count}", name=request.app.name))

    async def post_coupling(self, pipeline_id: str, app_id: str, stage: str) -> None:
        self.calls.append(("platform.post_coupling", pipeline_id, app_id, stage))

    async def get_account_feature(self, name: str) -> FeatureFlag:
        self.calls.append(("platform.get_account_feature", name))
        if self.ci_error:
            raise RuntimeError("connection reset")
        return FeatureFlag(name=name, enabled=self.ci_enabled)


@pytest.fixture
def settings(monkeypatch, tmp_path):
    """Settings isolated from the developer's environment and .env files."""

    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    return AppSettings(
        _env_file=None,
        api_key="identity-token",
        platform_api_url="https://platform.test",
        integration_api_url="https://integration.test",
        github_api_url="https://github.test",
        dashboard_url="https://dashboard.test",
    )
