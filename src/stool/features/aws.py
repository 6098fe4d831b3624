"""AWS CLI helpers: configure, ECR docker login and SSO login."""

from __future__ import annotations

import configparser
import logging
import os
from pathlib import Path

from stool import interactive
from stool.cli.ui import print_info, print_success
from stool.command import runner
from stool.command.secrets import SecretBuffer
from stool.errors import ErrorKind, StoolError
from stool.features import docker
from stool.models import EcrRegistry, SsoProfile

logger = logging.getLogger(__name__)

AWS_CONFIG_ENV_VAR = "AWS_CONFIG_FILE"


def require_aws() -> None:
    runner.require_program(
        "aws", ErrorKind.aws_cli_not_installed, "Install it via: brew install awscli"
    )


def configure() -> None:
    """Run ``aws configure``; pressing Enter keeps existing values."""
    require_aws()
    runner.execute_checked(
        ["aws", "configure"], ErrorKind.aws_command_failed, "aws configure failed"
    )


def ecr_login(registries: list[EcrRegistry]) -> None:
    """Log docker in to an ECR registry with a short-lived token."""
    require_aws()
    docker.require_docker()

    registry = docker.select_registry(registries)
    if registry is None:
        return

    result = runner.capture(
        ["aws", "ecr", "get-login-password", "--region", registry.region],
        ErrorKind.aws_command_failed,
    )
    token = SecretBuffer(result.stdout.strip())
    if result.returncode != 0:
        token.wipe()
        raise StoolError(
            ErrorKind.aws_command_failed,
            f"Failed to get ECR login password: {result.stderr.strip()}",
        )

    runner.execute_with_input(
        ["docker", "login", "--username", "AWS", "--password-stdin", registry.url],
        token,
        ErrorKind.docker_command_failed,
        f"Docker login to {registry.url} failed",
    )
    print_success(f"Successfully logged in to ECR registry: {registry.url}")


def aws_config_path() -> Path:
    """The shared AWS config file, honouring ``AWS_CONFIG_FILE``."""
    env_path = os.environ.get(AWS_CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / ".aws" / "config"


def _section_name(profile: SsoProfile) -> str:
    if profile.name == "default":
        return "default"
    return f"profile {profile.name}"


def render_profile(profile: SsoProfile) -> str:
    lines = [f"[{_section_name(profile)}]"]
    lines.extend(f"{key} = {value}" for key, value in profile.config_items())
    return "\n".join(lines) + "\n"


def ensure_sso_profile(path: Path, profile: SsoProfile) -> bool:
    """Append ``profile`` to the AWS config file unless a section already exists.

    Existing content is never rewritten. Returns ``True`` when a block was added.
    """
    existing = ""
    if path.exists():
        try:
            existing = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StoolError(ErrorKind.io_error, f"Failed to read {path}") from exc

    parser = configparser.ConfigParser(interpolation=None, strict=False)
    try:
        parser.read_string(existing, source=str(path))
    except configparser.Error as exc:
        raise StoolError(ErrorKind.config_parse_error, f"Failed to parse {path}: {exc}") from exc

    section = _section_name(profile)
    if parser.has_section(section):
        logger.debug("Profile %s already present in %s", profile.name, path)
        return False

    # One blank line between the existing content and the new block.
    separator = ""
    if existing:
        separator = "\n" if existing.endswith("\n") else "\n\n"
    block = separator + render_profile(profile)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as handle:
            handle.write(block)
    except OSError as exc:
        raise StoolError(ErrorKind.io_error, f"Failed to write {path}") from exc

    print_info(f"Added profile '{profile.name}' to {path}")
    return True


def _manual_profile() -> SsoProfile:
    return SsoProfile(
        name=interactive.input_text("Profile name"),
        start_url=interactive.input_text("SSO start URL"),
        sso_region=interactive.input_text("SSO region", default="us-east-1"),
        account_id=interactive.input_text("AWS Account ID"),
        role_name=interactive.input_text("Role name"),
        region=interactive.input_text("Default region", default="us-east-1"),
    )


def select_profile(profiles: list[SsoProfile]) -> SsoProfile | None:
    return interactive.select_entry(
        "Select SSO profile:", profiles, SsoProfile.label, _manual_profile
    )


def sso_login(profiles: list[SsoProfile]) -> None:
    """Make sure the profile is in the AWS config file, then ``aws sso login``."""
    require_aws()

    profile = select_profile(profiles)
    if profile is None:
        return

    ensure_sso_profile(aws_config_path(), profile)
    runner.execute_checked(
        ["aws", "sso", "login", "--profile", profile.name],
        ErrorKind.aws_command_failed,
        f"aws sso login failed for profile {profile.name}",
    )
    print_success(f"Logged in with SSO profile: {profile.name}")
