"""Remote targets and the credential used to reach them."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from pydantic import SecretStr


class CredentialKind(str, Enum):
    none = "none"
    key = "key"
    password = "password"


@dataclass(frozen=True)
class Credential:
    """Exactly one way of authenticating against a target.

    Use the constructors rather than instantiating directly; they guarantee
    that at most one of ``key_path``/``password`` is populated.
    """

    kind: CredentialKind = CredentialKind.none
    key_path: str | None = None
    password: SecretStr | None = None

    def __post_init__(self) -> None:
        if self.kind == CredentialKind.none and (self.key_path or self.password):
            raise ValueError("a 'none' credential cannot carry a key path or password")
        if self.kind == CredentialKind.key and (not self.key_path or self.password):
            raise ValueError("a key credential needs a key path and no password")
        if self.kind == CredentialKind.password and (self.password is None or self.key_path):
            raise ValueError("a password credential needs a password and no key path")

    @classmethod
    def none(cls) -> Credential:
        return cls()

    @classmethod
    def key(cls, key_path: str) -> Credential:
        return cls(kind=CredentialKind.key, key_path=key_path)

    @classmethod
    def with_password(cls, password: str | SecretStr) -> Credential:
        secret = password if isinstance(password, SecretStr) else SecretStr(password)
        return cls(kind=CredentialKind.password, password=secret)

    @classmethod
    def from_fields(
        cls, key_path: str | None = None, password: str | SecretStr | None = None
    ) -> Credential:
        """Pick a credential using the precedence key path > password > none."""
        if key_path:
            return cls.key(key_path)
        if password is not None:
            raw = password.get_secret_value() if isinstance(password, SecretStr) else password
            if raw:
                return cls.with_password(password)
        return cls.none()

    @property
    def is_none(self) -> bool:
        return self.kind == CredentialKind.none


@dataclass(frozen=True)
class Target:
    """One remote endpoint a feature command can act on."""

    name: str
    host: str
    user: str
    credential: Credential = field(default_factory=Credential.none)

    @property
    def destination(self) -> str:
        return f"{self.user}@{self.host}"

    def with_credential(self, credential: Credential) -> Target:
        return replace(self, credential=credential)

    def label(self) -> str:
        return f"{self.name} ({self.destination})"
