#!/usr/bin/env python3
"""CLI entry point for mdai, an AI assistant for markdown files."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from openai import OpenAIError

from mdai.append import answer_content, append_answer
from mdai.config import MdaiConfig, load_config, write_default_config
from mdai.document import load_content
from mdai.errors import MdaiError
from mdai.transform import transform_file
from mdai.watcher import DEFAULT_DEBOUNCE_MS, DEFAULT_MAX_CYCLES, watch_and_append

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger("mdai")


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


async def init_command(config_path: Path | None, force: bool) -> None:
    """Write the default configuration file."""
    if write_default_config(config_path, force=force):
        print("Configuration initialized. Edit the file to customize mdai.")
    else:
        print("Configuration already exists. Use --force to overwrite it.")


async def answer_command(
    config: MdaiConfig,
    path: Path,
    watch: bool,
    debounce_ms: int,
    max_cycles: int,
    no_stream: bool,
) -> None:
    """Answer the last quote in a markdown file, once or on every change."""
    if watch:
        await watch_and_append(config, path, debounce_ms=debounce_ms, max_cycles=max_cycles)
        return
    await append_answer(config, path, stream=False if no_stream else None)


async def ask_command(config: MdaiConfig, path: Path | None) -> None:
    """Answer from a file, or from stdin and print the answer."""
    if path is not None:
        await append_answer(config, path)
        return

    answer = await answer_content(config, load_content())
    if answer is not None:
        print(answer)


async def transform_command(config: MdaiConfig, operation: str, path: Path, args: list[str]) -> None:
    output = await transform_file(config, operation, path, args)
    print(f"Written: {output}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdai",
        description="Answer, summarize and translate markdown files with AI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Configuration file (default: ~/.mdai/config.yml)",
    )

    subparsers = parser.add_subparsers(
        dest="command", help="Command to execute"
    )

    init_parser = subparsers.add_parser("init", help="Write the default configuration")
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing configuration file",
    )

    answer_parser = subparsers.add_parser(
        "answer", help="Append an answer to the last quote of a markdown file"
    )
    answer_parser.add_argument("path", type=Path, help="Markdown file")
    answer_parser.add_argument(
        "--watch",
        action="store_true",
        help="Keep watching the file and answer on every change",
    )
    answer_parser.add_argument(
        "--debounce-ms",
        type=int,
        default=DEFAULT_DEBOUNCE_MS,
        help=f"Wait after a change before answering (default: {DEFAULT_DEBOUNCE_MS})",
    )
    answer_parser.add_argument(
        "--max-cycles",
        type=int,
        default=DEFAULT_MAX_CYCLES,
        help=f"Stop watching after this many answers (default: {DEFAULT_MAX_CYCLES})",
    )
    answer_parser.add_argument(
        "--no-stream",
        action="store_true",
        help="Write the answer in one piece instead of streaming it",
    )

    ask_parser = subparsers.add_parser(
        "ask", help="Answer the last quote of a file, or of stdin"
    )
    ask_parser.add_argument("path", type=Path, nargs="?", default=None, help="Markdown file")

    summarize_parser = subparsers.add_parser("summarize", help="Write <name>_sum.md")
    summarize_parser.add_argument("path", type=Path, help="Markdown file")

    translate_parser = subparsers.add_parser("translate", help="Write <name>_<language>.md")
    translate_parser.add_argument("path", type=Path, help="Markdown file")
    translate_parser.add_argument("language", type=str, help="Language code, e.g. en, ja, zh")

    return parser


async def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point. Returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if args.command == "init":
        configure_logging()
        await init_command(args.config, args.force)
        return 0

    try:
        config = load_config(args.config)
    except MdaiError as e:
        configure_logging()
        logger.error("fail in loading config: %s", e)
        return 1
    configure_logging(config.default.logging_level)

    try:
        if args.command == "answer":
            await answer_command(
                config, args.path, args.watch, args.debounce_ms, args.max_cycles, args.no_stream
            )
        elif args.command == "ask":
            await ask_command(config, args.path)
        elif args.command == "summarize":
            await transform_command(config, "summarize", args.path, [])
        elif args.command == "translate":
            await transform_command(config, "translate", args.path, [args.language])
    except (MdaiError, OpenAIError, OSError, ValueError) as e:
        logger.error("fail in calling %s: %s", args.command, e)
        return 1

    return 0


def run() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("exiting...")
        sys.exit(130)


if __name__ == "__main__":
    run()
