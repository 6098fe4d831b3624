"""Docker image build and ECR push with version management."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum

from stool import interactive
from stool.cli.ui import print_info, print_success
from stool.command import runner
from stool.errors import ErrorKind
from stool.models import EcrRegistry

logger = logging.getLogger(__name__)

# Standard build options: single arm64 platform, no attestation manifests.
DEFAULT_BUILD_OPTIONS = ("--platform", "linux/arm64", "--provenance=false", "--sbom=false")

DEFAULT_TAG = "latest"


class VersionBump(str, Enum):
    latest = "latest"
    major = "major"
    middle = "middle"
    minor = "minor"


@dataclass(frozen=True)
class Version:
    major: int
    middle: int
    minor: int

    def __str__(self) -> str:
        return f"{self.major}.{self.middle}.{self.minor}"

    def bump(self, kind: VersionBump) -> str:
        if kind == VersionBump.latest:
            return DEFAULT_TAG
        if kind == VersionBump.major:
            return str(Version(self.major + 1, 0, 0))
        if kind == VersionBump.middle:
            return str(Version(self.major, self.middle + 1, 0))
        return str(Version(self.major, self.middle, self.minor + 1))


# Baseline when nothing has been published yet.
BASELINE_VERSION = Version(0, 0, 0)


def parse_version(text: str | None) -> Version | None:
    """Parse ``x.y.z`` made of exactly three non-negative integers."""
    if not text:
        return None
    parts = text.strip().split(".")
    if len(parts) != 3 or not all(part.isascii() and part.isdigit() for part in parts):
        return None
    return Version(int(parts[0]), int(parts[1]), int(parts[2]))


def increment_version(current: str | None, kind: VersionBump) -> str:
    """Compute the next tag; an unparseable ``current`` counts as no version."""
    version = parse_version(current) or BASELINE_VERSION
    return version.bump(kind)


def require_docker() -> None:
    runner.require_program(
        "docker", ErrorKind.docker_not_installed, "Install it via: brew install docker"
    )


def docker(*args: str) -> None:
    """Run one ``docker`` subcommand, raising on failure."""
    runner.execute_checked(
        ["docker", *args],
        ErrorKind.docker_command_failed,
        f"Docker command failed: docker {' '.join(args)}",
    )


def _manual_registry() -> EcrRegistry:
    account_id = interactive.input_text("AWS Account ID")
    region = interactive.input_text("AWS Region (e.g., ap-northeast-2)")
    return EcrRegistry(name="manual", account_id=account_id, region=region)


def select_registry(registries: list[EcrRegistry]) -> EcrRegistry | None:
    return interactive.select_entry(
        "Select ECR registry:", registries, EcrRegistry.label, _manual_registry
    )


def select_image_name(registry: EcrRegistry) -> str:
    if not registry.images:
        return interactive.input_text("Image name")

    items = [*registry.images, interactive.MENU_MANUAL_INPUT]
    index = interactive.select_from_list("Select image:", items)
    if index < len(registry.images):
        return registry.images[index]
    return interactive.input_text("Image name")


def build_image(image_name: str) -> None:
    image_tag = f"{image_name}:{DEFAULT_TAG}"
    print_info(f"Building Docker image: {image_tag}")
    docker("build", *DEFAULT_BUILD_OPTIONS, "-t", image_tag, ".")
    print_success("Build completed successfully")


def latest_published_version(registry: EcrRegistry, image_name: str) -> str | None:
    """Highest ``x.y.z`` tag in the ECR repository, or ``None``.

    A missing or empty repository is not an error: it simply has no version yet.
    """
    result = runner.capture(
        [
            "aws",
            "ecr",
            "describe-images",
            "--repository-name",
            image_name,
            "--region",
            registry.region,
            "--query",
            "imageDetails[].imageTags[]",
            "--output",
            "json",
        ],
        ErrorKind.aws_command_failed,
    )
    if result.returncode != 0:
        logger.debug("describe-images failed for %s: %s", image_name, result.stderr.strip())
        return None

    try:
        tags = json.loads(result.stdout or "null")
    except json.JSONDecodeError:
        logger.debug("Unexpected describe-images output: %r", result.stdout)
        return None

    if not isinstance(tags, list):
        return None
    versions = [
        v for v in (parse_version(tag) for tag in tags if isinstance(tag, str)) if v is not None
    ]
    if not versions:
        return None
    latest = max(versions, key=lambda v: (v.major, v.middle, v.minor))
    return str(latest)


def _select_bump(current: str | None) -> str:
    options = [
        (VersionBump.latest, DEFAULT_TAG),
        (VersionBump.major, f"major ({increment_version(current, VersionBump.major)})"),
        (VersionBump.middle, f"middle ({increment_version(current, VersionBump.middle)})"),
        (VersionBump.minor, f"minor ({increment_version(current, VersionBump.minor)})"),
    ]
    prompt = f"Select version type (current: {current}):" if current else "Select version type:"
    index = interactive.select_from_list(prompt, [label for _, label in options])
    return increment_version(current, options[index][0])


def build_only(registries: list[EcrRegistry]) -> None:
    """Pick a registry and image, then build ``<image>:latest`` locally."""
    require_docker()

    registry = select_registry(registries)
    if registry is None:
        return

    build_image(select_image_name(registry))


def push_to_ecr(registries: list[EcrRegistry]) -> None:
    """Build, tag and push an image to ECR as ``latest`` plus an optional version."""
    require_docker()
    runner.require_program(
        "aws", ErrorKind.aws_cli_not_installed, "Install it via: brew install awscli"
    )

    registry = select_registry(registries)
    if registry is None:
        return

    image_name = select_image_name(registry)
    build_image(image_name)

    new_version = _select_bump(latest_published_version(registry, image_name))

    local = f"{image_name}:{DEFAULT_TAG}"
    remote = f"{registry.url}/{image_name}"

    print_info(f"Tagging image: {image_name}:{DEFAULT_TAG}")
    docker("tag", local, f"{remote}:{DEFAULT_TAG}")
    if new_version != DEFAULT_TAG:
        print_info(f"Tagging image: {image_name}:{new_version}")
        docker("tag", local, f"{remote}:{new_version}")

    print_info(f"Pushing {remote}:{DEFAULT_TAG}")
    docker("push", f"{remote}:{DEFAULT_TAG}")
    if new_version != DEFAULT_TAG:
        print_info(f"Pushing {remote}:{new_version}")
        docker("push", f"{remote}:{new_version}")

    print_success("Push completed successfully")
