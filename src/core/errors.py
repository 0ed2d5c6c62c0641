"""Error taxonomy for the setup workflow.

Fatal errors derive from `PipelineSetupError`: the CLI prints `message` on a single
line to stderr and exits non-zero. `ValidationError` and `FeatureFlagUnavailable`
are recovered where they are raised and never reach the user as failures.
"""

from __future__ import annotations

from typing import Any

import httpx


class PipelineSetupError(Exception):
    """Base class for every error that terminates a run."""

    default_message = "Unexpected error."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotAuthenticated(PipelineSetupError):
    default_message = "Not logged in. Set PIPELINE_SETUP_API_KEY or add the platform API host to ~/.netrc."


class AccountNotLinked(PipelineSetupError):
    default_message = "Account not connected to GitHub."


class RepositoryUnreachable(PipelineSetupError):
    def __init__(self, repo_name: str) -> None:
        self.repo_name = repo_name
        super().__init__(f"Could not access the {repo_name} repo")


class ProvisioningFailure(PipelineSetupError):
    """A remote call in the main sequence was rejected.

    `message` carries the remote `message` field when the response body has one.
    """

    default_message = "An error occurred while talking to the API."

    def __init__(self, message: str | None = None, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ProvisioningFailure":
        return cls(_remote_message(response), status_code=response.status_code)


class FeatureFlagUnavailable(Exception):
    """Feature flag lookup failed; callers treat the flag as disabled."""


class ValidationError(Exception):
    """An interactive answer was rejected; the prompt loop asks again."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def _remote_message(response: httpx.Response) -> str | None:
    try:
        body: Any = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("message"), str) and body["message"].strip():
        return body["message"].strip()
    return None
