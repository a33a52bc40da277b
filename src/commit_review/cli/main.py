"""Command-line entry point.

Usage:
  commit-review hook <msg-file> [source]   run the review (called by git)
  commit-review install                    install the prepare-commit-msg hook
  commit-review check                      test the API connection
  commit-review help                       show help
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from commit_review import __version__
from commit_review.cli.check import check_connection
from commit_review.cli.install import install
from commit_review.config.presets import list_providers
from commit_review.config.resolver import load_environment, resolve_config
from commit_review.errors import GitCommandError
from commit_review.git.repo import find_repo_root
from commit_review.hook.orchestrator import run_review

logger = logging.getLogger(__name__)

_EPILOG = """\
after install:
  1. copy .env.example to .env and set your API key
  2. git add && git commit as usual

skip the check:
  git commit --no-verify -m "your message"
"""


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    providers = ", ".join(p["id"] for p in list_providers())
    parser = argparse.ArgumentParser(
        prog="commit-review",
        description=f"AI code review gate for git commits (providers: {providers})",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    hook = sub.add_parser("hook", help="Run the review (invoked by prepare-commit-msg)")
    hook.add_argument("msg_file", help="Path to the commit message file")
    hook.add_argument("source", nargs="?", default="", help="Commit source passed by git")

    sub.add_parser("install", help="Install the prepare-commit-msg hook")
    sub.add_parser("check", help="Test the connection to the configured provider")
    sub.add_parser("help", help="Show this help")
    return parser


async def _install() -> int:
    cwd = Path.cwd()
    try:
        repo_root = await find_repo_root(cwd)
        hook_path = await install(repo_root)
    except GitCommandError as e:
        logger.error("Not a git repository (run `git init` first): %s", e)
        return 1
    logger.info("Done. Copy .env.example to .env and add your API key.")
    logger.debug("Hook installed at %s", hook_path)
    return 0


async def _check() -> int:
    cwd = Path.cwd()
    repo_root = await find_repo_root(cwd)
    config = resolve_config(load_environment(repo_root, cwd))
    return 0 if await check_connection(config) else 1


def run(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.command == "hook":
        outcome = asyncio.run(run_review(args.msg_file, args.source))
        return outcome.exit_code
    if args.command == "install":
        return asyncio.run(_install())
    if args.command == "check":
        return asyncio.run(_check())

    parser.print_help()
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
