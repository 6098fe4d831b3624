from __future__ import annotations

import argparse
from pathlib import Path

from stool.config import load_config
from stool.features import aws


def configure_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("aws", aliases=["a"], help="AWS CLI helpers")
    parser.set_defaults(func=_run_aws, aws_parser=parser)
    aws_subparsers = parser.add_subparsers(dest="aws_command")

    configure = aws_subparsers.add_parser(
        "configure", aliases=["conf"], help="Run aws configure interactively"
    )
    configure.set_defaults(func=run_configure)

    ecr = aws_subparsers.add_parser("ecr", help="Log docker in to an ECR registry")
    ecr.add_argument("-c", "--config", type=Path, help="Path to the stool config file")
    ecr.set_defaults(func=run_ecr_login)

    sso = aws_subparsers.add_parser("sso", help="Log in with an AWS SSO profile")
    sso.add_argument("-c", "--config", type=Path, help="Path to the stool config file")
    sso.set_defaults(func=run_sso_login)


def _run_aws(args: argparse.Namespace) -> int:
    args.aws_parser.print_help()
    return 2


def run_configure(args: argparse.Namespace) -> int:
    aws.configure()
    return 0


def run_ecr_login(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    aws.ecr_login(config.ecr_registries)
    return 0


def run_sso_login(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    aws.sso_login(config.sso_profiles)
    return 0
