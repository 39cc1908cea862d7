#!/usr/bin/env python3
"""Command-line entry point: ``zap [cluster]`` opens the TUI, plus quick subcommands."""

import argparse
import sys
from importlib.metadata import PackageNotFoundError, version as pkg_version
from typing import List, Optional, Sequence

from application.task_store import TaskStore
from config import get_data_dir, get_keybindings_path, get_log_file, get_log_level
from infrastructure.file_blob_store import FileBlobStore
from interface.i18n import translate
from interface.keybindings import load_keybindings
from interface.session import Mode, ModalSession, SessionContext
from util.logging_setup import setup_logging

COMMAND_NAMES = ("tui", "ls", "add")
VALUE_OPTIONS = ("--data-dir", "--log-file")


def cmd_ls(args: argparse.Namespace) -> int:
    store = TaskStore(FileBlobStore(args.data_dir), "")
    clusters = store.list_clusters()
    if not clusters:
        print(translate("CLUSTERS_NONE"))
        return 0
    for name in clusters:
        print(name)
    return 0


def cmd_add(args: argparse.Namespace) -> int:
    line = " ".join(args.text).strip()
    if not line:
        print("Error: nothing to add", file=sys.stderr)
        return 1
    try:
        storage = FileBlobStore(args.data_dir)
        storage.read(args.cluster)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    session = ModalSession(TaskStore.load(storage, args.cluster), load_keybindings(get_keybindings_path()))
    before = len(session.store.todos)
    session.commit(SessionContext(mode=Mode.INSERT), line)
    if len(session.store.todos) == before:
        print("Error: entry has no text", file=sys.stderr)
        return 1
    added = session.store.todos[-1]
    print(f"{args.cluster}: {added.text}")
    return 0


def cmd_tui(args: argparse.Namespace) -> int:
    from interface.tui_app import cmd_tui as _cmd_tui

    return _cmd_tui(args)


def _add_common_args(sp: argparse.ArgumentParser) -> argparse.ArgumentParser:
    sp.add_argument("--data-dir", dest="data_dir", help="directory holding one YAML file per cluster")
    sp.add_argument("--log-file", dest="log_file", help="log file path")
    return sp


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zap",
        description="zap: hierarchical task manager organised into clusters",
        epilog="`zap CLUSTER` is shorthand for `zap tui CLUSTER`.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    sub = parser.add_subparsers(dest="command", help="Commands")

    tui_p = _add_common_args(sub.add_parser("tui", help="Open the TUI"))
    tui_p.add_argument("cluster", nargs="?", help="cluster to open (default from config)")
    tui_p.set_defaults(func=cmd_tui)

    ls_p = _add_common_args(sub.add_parser("ls", help="List clusters"))
    ls_p.set_defaults(func=cmd_ls)

    add_p = _add_common_args(sub.add_parser("add", help="Add a task without opening the TUI"))
    add_p.add_argument("cluster")
    add_p.add_argument("text", nargs=argparse.REMAINDER, help="task text, directives allowed")
    add_p.set_defaults(func=cmd_add)
    return parser


def normalize_argv(argv: Sequence[str]) -> List[str]:
    """Move the subcommand to the front, defaulting to ``tui``."""
    args = list(argv)
    if args and args[0] in ("-h", "--help", "--version"):
        return args
    idx = 0
    while idx < len(args):
        arg = args[idx]
        if arg in VALUE_OPTIONS:
            idx += 2
            continue
        if arg.startswith("-"):
            idx += 1
            continue
        if arg in COMMAND_NAMES:
            return [arg] + args[:idx] + args[idx + 1:]
        break
    return ["tui"] + args


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(normalize_argv(sys.argv[1:] if argv is None else argv))
    if getattr(args, "version", False):
        try:
            print(pkg_version("zap"))
        except PackageNotFoundError:
            print("0.0.0")
        return 0
    if not getattr(args, "command", None):
        parser.print_help()
        return 1
    args.data_dir = args.data_dir or str(get_data_dir())
    setup_logging(args.log_file or get_log_file(), get_log_level())
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
