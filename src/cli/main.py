"""CLI entry point (typer).

Commands follow the platform CLI's `topic:command` naming:
- `pipelines:setup`: bootstrap a pipeline with a production and a staging app.
- `pipelines:open`: open a pipeline in the dashboard.
- `doctor`: configuration and connectivity checks.
"""

from __future__ import annotations

import asyncio
import webbrowser

import typer
from rich.console import Console

from adapters.integration_api import IntegrationClient
from adapters.platform_api import PlatformClient
from adapters.source_host_api import GitHubClient
from cli import doctor
from cli.log_setup import configure_logging
from cli.prompter import TyperPrompter
from cli.ui_components import build_summary_panel, print_error, run_action
from core.config import AppSettings, resolve_identity_token
from core.errors import NotAuthenticated, PipelineSetupError
from core.services.pipeline_setup import (
    SetupClients,
    SetupHooks,
    SetupRequest,
    dashboard_url,
    setup_pipeline,
)

app = typer.Typer(no_args_is_help=True, help="Bootstrap deployment pipelines.")
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)

SETUP_HELP = """bootstrap a new pipeline with common settings and create a production and staging app (requires a fully formed app.json in the repo)

Example:

  pipeline-setup pipelines:setup example githuborg/reponame -o example-org
  ? Automatically deploy the master branch to staging? Yes
  ? Wait for CI to pass before deploying the master branch to staging? Yes
  ? Enable review apps? Yes
  ? Automatically create review apps for every PR? Yes
  ? Automatically destroy idle review apps after 5 days? Yes
  Creating pipeline... done
  Linking to repo... done
  Creating example (production app)... done
  Creating example-staging (staging app)... done
  Configuring pipeline... done
"""


def build_clients(settings: AppSettings, identity_token: str) -> SetupClients:
    return SetupClients(
        platform=PlatformClient(identity_token, settings),
        source_host=GitHubClient(settings),
        integration=IntegrationClient(settings),
    )


def open_browser(url: str) -> None:
    _console.print(f"Opening {url}...", highlight=False)
    webbrowser.open(url)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)


@app.command(name="pipelines:setup", help=SETUP_HELP)
def pipelines_setup(
    name: str | None = typer.Argument(None, help="name of pipeline"),
    repo: str | None = typer.Argument(None, help="a GitHub repository to connect the pipeline to"),
    organization: str | None = typer.Option(
        None,
        "--organization",
        "-o",
        help="the organization which will own the apps (can also use --team)",
    ),
    team: str | None = typer.Option(
        None,
        "--team",
        "-t",
        help="the team which will own the apps (can also use --organization)",
    ),
) -> None:
    settings = AppSettings()

    try:
        identity_token = resolve_identity_token(settings)
        if not identity_token:
            raise NotAuthenticated()

        hooks = SetupHooks(
            action=lambda label, awaitable: run_action(_console, label, awaitable),
            error=lambda message: print_error(_err_console, message),
            open_url=open_browser,
        )
        result = asyncio.run(
            setup_pipeline(
                clients=build_clients(settings, identity_token),
                prompter=TyperPrompter(_err_console),
                request=SetupRequest(
                    identity_token=identity_token,
                    name=name,
                    repo=repo,
                    organization=organization,
                    team=team,
                ),
                dashboard_base_url=settings.dashboard_url,
                hooks=hooks,
            )
        )
    except PipelineSetupError as exc:
        print_error(_err_console, exc.message)
        raise typer.Exit(code=1) from exc

    _console.print(build_summary_panel(result))
    _console.print(
        f"View your new pipeline by running `pipelines:open {result.pipeline.id}`",
        highlight=False,
    )


@app.command(name="pipelines:open")
def pipelines_open(
    pipeline_id: str = typer.Argument(..., help="id of the pipeline to open"),
) -> None:
    """Open a pipeline in the dashboard."""

    settings = AppSettings()
    open_browser(dashboard_url(settings.dashboard_url, pipeline_id))


def run() -> None:
    app()
