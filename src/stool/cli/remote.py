from __future__ import annotations

import argparse
from pathlib import Path

from stool.config import load_config
from stool.features import ssh, transfer


def _add_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-c", "--config", type=Path, help="Path to the stool config file")


def configure_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    ssh_parser = subparsers.add_parser("ssh", aliases=["s"], help="Connect to a server via SSH")
    _add_config_argument(ssh_parser)
    ssh_parser.set_defaults(func=run_ssh)

    transfer_parser = subparsers.add_parser(
        "transfer", aliases=["t"], help="Upload or download a file with scp"
    )
    _add_config_argument(transfer_parser)
    transfer_parser.set_defaults(func=run_transfer)


def run_ssh(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    ssh.connect(config.targets())
    return 0


def run_transfer(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    transfer.transfer(config.targets())
    return 0
