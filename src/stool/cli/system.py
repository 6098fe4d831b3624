from __future__ import annotations

import argparse

from stool.features import filesystem, update


def configure_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    update_parser = subparsers.add_parser(
        "update", aliases=["u"], help="Update Homebrew and the Rust toolchain"
    )
    update_parser.add_argument("--brew", action="store_true", help="Update Homebrew only")
    update_parser.add_argument("--rustup", action="store_true", help="Update rustup only")
    update_parser.set_defaults(func=run_update)

    fs_parser = subparsers.add_parser("filesystem", aliases=["f"], help="Find and count files")
    fs_parser.set_defaults(func=_run_filesystem, fs_parser=fs_parser)
    fs_subparsers = fs_parser.add_subparsers(dest="fs_command")

    find_parser = fs_subparsers.add_parser("find", help="Search for files by name")
    find_parser.add_argument("pattern", help="Exact name, glob (*.rs) or partial name")
    find_parser.add_argument("-p", "--path", help="Directory to search (default: .)")
    find_parser.set_defaults(func=run_find)

    count_parser = fs_subparsers.add_parser("count", help="Count entries in a directory")
    count_parser.add_argument("path", nargs="?", help="Directory to count (default: .)")
    count_parser.set_defaults(func=run_count)


def _run_filesystem(args: argparse.Namespace) -> int:
    args.fs_parser.print_help()
    return 2


def run_update(args: argparse.Namespace) -> int:
    if args.brew and not args.rustup:
        update.update_brew()
    elif args.rustup and not args.brew:
        update.update_rustup()
    else:
        update.update_all()
    return 0


def run_find(args: argparse.Namespace) -> int:
    filesystem.find(args.pattern, args.path)
    return 0


def run_count(args: argparse.Namespace) -> int:
    filesystem.count(args.path)
    return 0
