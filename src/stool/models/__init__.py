from stool.models.command import CommandOutcome
from stool.models.registries import EcrRegistry, SsoProfile
from stool.models.targets import Credential, CredentialKind, Target

__all__ = [
    "CommandOutcome",
    "Credential",
    "CredentialKind",
    "EcrRegistry",
    "SsoProfile",
    "Target",
]
