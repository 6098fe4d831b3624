"""Auxiliary registries: container registries and AWS SSO profiles."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class EcrRegistry(BaseModel):
    """An AWS ECR registry images can be pushed to."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    name: str
    account_id: str = Field(..., min_length=1)
    region: str = Field(..., min_length=1)
    images: list[str] = Field(default_factory=list)

    @property
    def url(self) -> str:
        return f"{self.account_id}.dkr.ecr.{self.region}.amazonaws.com"

    def label(self) -> str:
        return f"{self.name} ({self.url})"


class SsoProfile(BaseModel):
    """An AWS IAM Identity Center (SSO) profile for the shared AWS config file."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    name: str = Field(..., min_length=1)
    start_url: str
    sso_region: str
    account_id: str
    role_name: str
    region: str
    output: str = "json"

    def label(self) -> str:
        return f"{self.name} ({self.role_name}@{self.account_id})"

    def config_items(self) -> list[tuple[str, str]]:
        """Key/value pairs written under ``[profile <name>]``."""
        return [
            ("sso_start_url", self.start_url),
            ("sso_region", self.sso_region),
            ("sso_account_id", self.account_id),
            ("sso_role_name", self.role_name),
            ("region", self.region),
            ("output", self.output),
        ]
