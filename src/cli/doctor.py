"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from adapters.integration_api import IntegrationClient
from adapters.platform_api import PlatformClient
from core.config import AppSettings, resolve_identity_token, set_user_env_var
from core.errors import AccountNotLinked
from core.services.pipeline_setup import get_github_token, has_ci_flag

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(settings: AppSettings, url: str) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


async def _check_account(settings: AppSettings, token: str) -> tuple[bool, str, bool]:
    """Linked GitHub account and CI availability for the current token."""

    try:
        await get_github_token(IntegrationClient(settings), token)
        linked, detail = True, "GitHub account linked"
    except AccountNotLinked as exc:
        linked, detail = False, exc.message
    ci = await has_ci_flag(PlatformClient(token, settings))
    return linked, detail, ci


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    token = resolve_identity_token(settings)

    table = Table(title="pipeline-setup Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    if token:
        source = "PIPELINE_SETUP_API_KEY" if settings.api_key else "~/.netrc"
        table.add_row("API token", "OK", f"from {source}")
    else:
        table.add_row("API token", "MISSING", "Run `doctor set-token` or add the API host to ~/.netrc")
    table.add_row("Platform API", "OK", settings.platform_api_url)
    table.add_row("Integration API", "OK", settings.integration_api_url)
    table.add_row("GitHub API", "OK", settings.github_api_url)

    # Connectivity (best-effort)
    for label, url in (
        ("Platform reachable", settings.platform_api_url),
        ("GitHub reachable", settings.github_api_url),
    ):
        ok, detail = asyncio.run(_check_http(settings, url))
        table.add_row(label, "OK" if ok else "FAIL", detail)

    if token:
        linked, detail, ci = asyncio.run(_check_account(settings, token))
        table.add_row("GitHub link", "OK" if linked else "FAIL", detail)
        table.add_row("CI feature", "ON" if ci else "OFF", "CI prompt shown during setup" if ci else "CI prompt skipped")

    _console.print(table)

    if not token:
        _console.print("\n[yellow]Note:[/yellow] `pipelines:setup` needs an API token.")


@app.command(name="set-token")
def set_token() -> None:
    """Store the platform API token in the user config .env."""

    api_key = typer.prompt("API token", hide_input=True, confirmation_prompt=False).strip()
    if not api_key:
        raise typer.BadParameter("token is required")

    env_path = set_user_env_var("PIPELINE_SETUP_API_KEY", api_key)
    _console.print(f"[green]Saved API token to:[/green] {env_path}")
