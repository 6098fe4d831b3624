from __future__ import annotations

import argparse
from pathlib import Path

from stool.config import load_config
from stool.features import docker


def configure_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("docker", aliases=["d"], help="Build and push Docker images")
    parser.set_defaults(func=_run_docker, docker_parser=parser)
    docker_subparsers = parser.add_subparsers(dest="docker_command")

    build_parser = docker_subparsers.add_parser("build", help="Build <image>:latest locally")
    build_parser.add_argument("-c", "--config", type=Path, help="Path to the stool config file")
    build_parser.set_defaults(func=run_build)

    push_parser = docker_subparsers.add_parser("push", help="Build, tag and push to ECR")
    push_parser.add_argument("-c", "--config", type=Path, help="Path to the stool config file")
    push_parser.set_defaults(func=run_push)


def _run_docker(args: argparse.Namespace) -> int:
    args.docker_parser.print_help()
    return 2


def run_build(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    docker.build_only(config.ecr_registries)
    return 0


def run_push(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    docker.push_to_ecr(config.ecr_registries)
    return 0
