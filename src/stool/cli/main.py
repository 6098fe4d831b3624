from __future__ import annotations

import argparse
import logging
import os

from stool.cli.aws import configure_parser as configure_aws
from stool.cli.docker import configure_parser as configure_docker
from stool.cli.remote import configure_parser as configure_remote
from stool.cli.system import configure_parser as configure_system
from stool.errors import ErrorKind, StoolError

TRACE_ENV_VAR = "STOOL_TRACE"

_TIPS: dict[ErrorKind, str] = {
    ErrorKind.ssh_connection_failed: "Check that the host is reachable and the login is correct.",
    ErrorKind.ssh_authentication_failed: "Check the key file path or the password for this server.",
    ErrorKind.expect_command_failed: "Password logins need expect: brew install expect",
    ErrorKind.file_transfer_failed: "Check both paths and your permissions on the remote host.",
    ErrorKind.config_load_failed: "Check that your config file path is correct.",
    ErrorKind.config_parse_error: "Check the YAML syntax and field names of your config file.",
    ErrorKind.aws_command_failed: "Check your AWS credentials (stool aws configure or sso).",
}


def build_parser() -> argparse.ArgumentParser:
    from stool import __version__

    parser = argparse.ArgumentParser(
        prog="stool",
        description="Personal helper for SSH, file transfer, Docker/ECR, AWS and updates",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Print version and exit",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help=f"Print full traceback on errors (or set {TRACE_ENV_VAR}=1)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command")

    configure_remote(subparsers)
    configure_system(subparsers)
    configure_docker(subparsers)
    configure_aws(subparsers)

    return parser


def configure_logging(verbose: bool) -> None:
    from rich.logging import RichHandler

    from stool.cli.ui import error_console

    handler = RichHandler(console=error_console, rich_tracebacks=False, show_path=False)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )


def _want_trace(args: argparse.Namespace) -> bool:
    return bool(getattr(args, "trace", False)) or os.environ.get(TRACE_ENV_VAR) in {
        "1",
        "true",
        "TRUE",
        "yes",
        "YES",
    }


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 2

    configure_logging(args.verbose)
    want_trace = _want_trace(args)

    try:
        return int(args.func(args))
    except KeyboardInterrupt:
        # Keep Ctrl-C quiet by default.
        return 130
    except StoolError as exc:
        from stool.cli.ui import error_console, print_error

        if want_trace:
            error_console.print_exception()
        print_error(exc.kind.label, exc.message or exc.kind.label, tip=_TIPS.get(exc.kind))
        return 1
    except Exception as exc:
        from stool.cli.ui import error_console, print_error

        if want_trace:
            error_console.print_exception()
        else:
            print_error(
                type(exc).__name__,
                str(exc),
                tip="re-run with --trace to see the full traceback.",
            )
        return 1
