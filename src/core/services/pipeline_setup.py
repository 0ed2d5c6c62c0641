"""Pipeline bootstrap orchestration.

The whole `pipelines:setup` flow lives here so the CLI only wires settings, clients
and UI callbacks. Side effects on the terminal (progress lines, browser) go through
`SetupHooks`; prompting goes through a `Prompter`.

Order matters: every provisioning step starts only after the previous response has
returned. Steps up to the staging app abort the run on the first failure and leave
already-created resources in place. Only the final configuration step runs two calls
concurrently, and its failure is reported without aborting.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, TypeVar

from core.domain.models import App, AppSetupRequest, AppSpec, CISettings, Pipeline, Repository, SourceBlob, Stage
from core.errors import AccountNotLinked, PipelineSetupError, ProvisioningFailure, RepositoryUnreachable
from core.interfaces.clients import IntegrationAPI, PlatformAPI, SourceHostAPI
from core.interfaces.prompter import Prompter
from core.services.prompting import Answers, Question, ask, lookup, validate_repo_name

logger = logging.getLogger(__name__)

T = TypeVar("T")

REVIEW_APP_IDLE_DAYS = 5


async def _run_plain(label: str, awaitable: Awaitable[T]) -> T:
    del label
    return await awaitable


@dataclass
class SetupHooks:
    """Callbacks for UI layers (progress, errors, browser)."""

    action: Callable[[str, Awaitable[Any]], Awaitable[Any]] = _run_plain
    error: Callable[[str], None] | None = None
    open_url: Callable[[str], None] | None = None


@dataclass
class SetupRequest:
    """Parameters from the command line; missing name/repo are prompted for."""

    identity_token: str
    name: str | None = None
    repo: str | None = None
    organization: str | None = None
    team: str | None = None

    @property
    def owner(self) -> str | None:
        return self.organization or self.team


@dataclass
class SetupResult:
    pipeline: Pipeline
    repository: Repository
    production_app: App
    staging_app: App
    settings: Answers
    ci_settings: CISettings | None = None
    dashboard_url: str = ""
    warnings: list[str] = field(default_factory=list)


@dataclass
class SetupClients:
    platform: PlatformAPI
    source_host: SourceHostAPI
    integration: IntegrationAPI


async def get_github_token(integration: IntegrationAPI, identity_token: str) -> str:
    try:
        account = await integration.get_account(identity_token)
    except Exception as exc:
        logger.debug("Linked account lookup failed: %s", exc)
        raise AccountNotLinked() from exc
    token = account.github_token
    if not token:
        raise AccountNotLinked()
    return token


async def get_repository(source_host: SourceHostAPI, token: str, name: str) -> Repository:
    try:
        return await source_host.get_repo(token, name)
    except Exception as exc:
        logger.debug("Repository lookup for %s failed: %s", name, exc)
        raise RepositoryUnreachable(name) from exc


def get_name_and_repo(prompter: Prompter, name: str | None, repo: str | None) -> tuple[str, str]:
    answers = ask(
        prompter,
        [
            Question(
                name="name",
                message="Pipeline name",
                kind="input",
                when=lambda _: not name,
            ),
            Question(
                name="repo",
                message="GitHub repository to connect to (e.g. rails/rails)",
                kind="input",
                when=lambda _: not repo,
                validate=validate_repo_name,
            ),
        ],
    )
    return name or answers["name"], repo or answers["repo"]


def get_settings(prompter: Prompter, branch: str) -> Answers:
    return ask(
        prompter,
        [
            Question(
                name="auto_deploy",
                message=f"Automatically deploy the {branch} branch to staging?",
            ),
            Question(
                name="wait_for_ci",
                message=f"Wait for CI to pass before deploying the {branch} branch to staging?",
                when=lambda answers: bool(answers.get("auto_deploy")),
            ),
            Question(name="pull_requests.enabled", message="Enable review apps?"),
            Question(
                name="pull_requests.auto_deploy",
                message="Automatically create review apps for every PR?",
                when=lambda answers: bool(lookup(answers, "pull_requests.enabled")),
            ),
            Question(
                name="pull_requests.auto_destroy",
                message=f"Automatically destroy idle review apps after {REVIEW_APP_IDLE_DAYS} days?",
                when=lambda answers: bool(lookup(answers, "pull_requests.enabled")),
            ),
        ],
    )


async def has_ci_flag(platform: PlatformAPI) -> bool:
    """CI availability; any lookup failure counts as disabled."""

    try:
        return (await platform.get_account_feature("ci")).enabled
    except Exception as exc:
        logger.debug("CI feature flag lookup failed: %s", exc)
        return False


def get_ci_settings(prompter: Prompter, organization: str | None) -> CISettings:
    answers = ask(prompter, [Question(name="ci", message="Enable automatic CI test runs?")])
    settings = CISettings(ci=bool(answers["ci"]))
    if settings.ci and organization:
        settings.organization = organization
    return settings


async def create_app(
    platform: PlatformAPI,
    *,
    archive_url: str,
    name: str,
    organization: str | None,
    pipeline: Pipeline,
    stage: Stage,
) -> App:
    request = AppSetupRequest(
        source_blob=SourceBlob(url=archive_url),
        app=AppSpec.owned_by(name, organization),
    )
    setup = await platform.create_app_setup(request)
    await platform.post_coupling(pipeline.id, setup.app.id, stage)
    return setup.app


async def configure_pipeline(
    integration: IntegrationAPI,
    token: str,
    app_id: str,
    settings: Answers,
    pipeline_id: str,
    ci_settings: CISettings | None = None,
) -> dict[str, Any]:
    """Apply app-link settings and CI settings together; both are awaited."""

    calls: list[Awaitable[Any]] = [integration.update_app_link(token, app_id, settings)]
    if ci_settings is not None and ci_settings.ci:
        calls.append(integration.update_pipeline_repository(token, pipeline_id, ci_settings))

    results = await asyncio.gather(*calls)
    return results[0]


def dashboard_url(base_url: str, pipeline_id: str) -> str:
    return f"{base_url.rstrip('/')}/pipelines/{pipeline_id}"


async def setup_pipeline(
    *,
    clients: SetupClients,
    prompter: Prompter,
    request: SetupRequest,
    dashboard_base_url: str,
    hooks: SetupHooks | None = None,
) -> SetupResult:
    hooks = hooks or SetupHooks()
    warnings: list[str] = []
    identity_token = request.identity_token
    organization = request.owner

    github_token = await get_github_token(clients.integration, identity_token)

    pipeline_name, repo_name = get_name_and_repo(prompter, request.name, request.repo)
    repository = await get_repository(clients.source_host, github_token, repo_name)
    settings = get_settings(prompter, repository.default_branch)

    ci_settings: CISettings | None = None
    if await has_ci_flag(clients.platform):
        ci_settings = get_ci_settings(prompter, organization)

    pipeline: Pipeline = await hooks.action(
        "Creating pipeline",
        clients.platform.create_pipeline(pipeline_name),
    )
    logger.info("Created pipeline %s (%s)", pipeline.name, pipeline.id)

    await hooks.action(
        "Linking to repo",
        clients.integration.create_pipeline_repository(identity_token, pipeline.id, repository.id),
    )

    archive_url = await clients.source_host.get_archive_url(github_token, repo_name, repository.default_branch)

    production_app: App = await hooks.action(
        f"Creating {pipeline_name} (production app)",
        create_app(
            clients.platform,
            archive_url=archive_url,
            name=pipeline_name,
            organization=organization,
            pipeline=pipeline,
            stage="production",
        ),
    )

    staging_name = f"{pipeline_name}-staging"
    staging_app: App = await hooks.action(
        f"Creating {staging_name} (staging app)",
        create_app(
            clients.platform,
            archive_url=archive_url,
            name=staging_name,
            organization=organization,
            pipeline=pipeline,
            stage="staging",
        ),
    )

    try:
        await hooks.action(
            "Configuring pipeline",
            configure_pipeline(
                clients.integration,
                identity_token,
                staging_app.id,
                settings,
                pipeline.id,
                ci_settings,
            ),
        )
    except PipelineSetupError as exc:
        warnings.append(exc.message)
        if hooks.error:
            hooks.error(exc.message)
    except Exception as exc:
        logger.debug("Pipeline configuration failed: %s", exc)
        message = ProvisioningFailure.default_message
        warnings.append(message)
        if hooks.error:
            hooks.error(message)

    url = dashboard_url(dashboard_base_url, pipeline.id)
    if hooks.open_url:
        hooks.open_url(url)

    return SetupResult(
        pipeline=pipeline,
        repository=repository,
        production_app=production_app,
        staging_app=staging_app,
        settings=settings,
        ci_settings=ci_settings,
        dashboard_url=url,
        warnings=warnings,
    )
