"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation of what the three APIs send back, right at the edge.
- Request payloads (`AppSetupRequest`, settings) serialize with `model_dump`.

Note:
- These models describe *what* the records are, not *how* they are fetched.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

Stage = Literal["production", "staging"]


class Pipeline(BaseModel):
    """A named grouping of apps, one per deployment stage."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1, description="Platform pipeline id (UUID).")
    name: str = Field(..., min_length=1, description="Pipeline name.")


class Repository(BaseModel):
    """Source repository metadata, resolved once from `<owner>/<repo>`."""

    model_config = ConfigDict(extra="ignore")

    id: int = Field(..., description="Remote id on the source host.")
    full_name: str | None = Field(default=None, description="`owner/name` as reported by the host.")
    default_branch: str = Field(..., min_length=1, description="Branch deployed to staging.")


class App(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)


class AppSetup(BaseModel):
    """Response of the platform's app-setup endpoint."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    app: App


class SourceBlob(BaseModel):
    url: str = Field(..., min_length=1, description="Signed archive URL of the source snapshot.")


class AppSpec(BaseModel):
    """Name and ownership of an app to create.

    `organization` and `personal` are mutually exclusive.
    """

    name: str = Field(..., min_length=1)
    organization: str | None = None
    personal: bool | None = None

    @model_validator(mode="after")
    def _check_ownership(self) -> "AppSpec":
        if self.organization and self.personal:
            raise ValueError("an app is owned by an organization or personally, not both")
        if not self.organization and not self.personal:
            raise ValueError("app ownership is required")
        return self

    @classmethod
    def owned_by(cls, name: str, organization: str | None) -> "AppSpec":
        if organization:
            return cls(name=name, organization=organization)
        return cls(name=name, personal=True)


class AppSetupRequest(BaseModel):
    source_blob: SourceBlob
    app: AppSpec

    def payload(self) -> dict[str, object]:
        return self.model_dump(mode="json", exclude_none=True)


class FeatureFlag(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    enabled: bool = False


class LinkedAccount(BaseModel):
    """Integration account; `github.token` is the delegated source-host credential."""

    model_config = ConfigDict(extra="ignore")

    github: dict[str, str | None] = Field(default_factory=dict)

    @property
    def github_token(self) -> str | None:
        token = self.github.get("token")
        return token or None


class CISettings(BaseModel):
    """CI opt-in applied to the pipeline's repository link."""

    ci: bool = False
    organization: str | None = None

    def payload(self) -> dict[str, object]:
        return self.model_dump(mode="json", exclude_none=True)
