from __future__ import annotations

import logging

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SecretStr, field_validator

from stool.models import Credential, EcrRegistry, SsoProfile, Target

logger = logging.getLogger(__name__)


class ServerConfig(BaseModel):
    """A server entry as written in the configuration file."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    name: str
    ip: str = Field(..., min_length=1, validation_alias=AliasChoices("ip", "host"))
    user: str = Field(..., min_length=1)
    password: SecretStr | None = None
    key_path: str | None = None

    @field_validator("key_path", mode="before")
    @classmethod
    def _blank_key_path_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("password", mode="before")
    @classmethod
    def _password_as_text(cls, value: object) -> object:
        # YAML reads unquoted digits as numbers
        if isinstance(value, int | float):
            return str(value)
        return value

    @property
    def has_ambiguous_credentials(self) -> bool:
        return bool(self.key_path) and bool(
            self.password is not None and self.password.get_secret_value()
        )

    def to_target(self) -> Target:
        """Build a :class:`Target`; when both a key and a password are set the key wins."""
        return Target(
            name=self.name,
            host=self.ip,
            user=self.user,
            credential=Credential.from_fields(self.key_path, self.password),
        )


class StoolConfig(BaseModel):
    """Everything loaded from the configuration document."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    servers: list[ServerConfig] = Field(default_factory=list)
    ecr_registries: list[EcrRegistry] = Field(default_factory=list)
    sso_profiles: list[SsoProfile] = Field(default_factory=list)

    def targets(self) -> list[Target]:
        """Servers as targets, in configuration order."""
        return [server.to_target() for server in self.servers]

    def warn_ambiguous_credentials(self) -> list[str]:
        """Log a warning for every server that sets both a key path and a password."""
        ambiguous = [server.name for server in self.servers if server.has_ambiguous_credentials]
        for name in ambiguous:
            logger.warning(
                "Server '%s' sets both key_path and password; the key file will be used",
                name,
            )
        return ambiguous
