#!/usr/bin/env python
"""Interactive command shell: reads lines from stdin and dispatches them.

Usage:
    python scripts/shell.py [options]

Options:
    --log-level LEVEL   Root log level (default: from CMDROUTER_LOG_LEVEL or INFO)
    --plain-logs        Plain-text log lines instead of JSON
    --prompt TEXT       Prompt shown before each line (default: "> ")

Type "help" to list commands, "exit" or EOF to quit.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

# Ensure project root is on sys.path when running from scripts/
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from cmdrouter import CommandRouter, Settings
from cmdrouter.commands import CommandException, command, executor
from cmdrouter.logging_config import configure_logging


@command("sum", aliases=["add"], description="Adds two integers.")
class SumCommand:
    @executor()
    def total(self, a: int, b: int) -> None:
        print(a + b)


@command("echo", description="Prints its argument back, later.")
class EchoCommand:
    @executor(str, run_async=True)
    async def echo(self, text):
        await asyncio.sleep(0.1)
        print(text)


async def _read_line(prompt: str) -> str | None:
    try:
        return await asyncio.to_thread(input, prompt)
    except EOFError:
        return None


async def run(args: argparse.Namespace) -> int:
    settings = Settings()
    configure_logging(
        level=args.log_level or settings.log_level,
        json_format=settings.log_json and not args.plain_logs,
        log_file=settings.log_file,
    )

    async with CommandRouter(settings) as router:
        router.register_command(SumCommand())
        router.register_command(EchoCommand())

        while True:
            line = await _read_line(args.prompt)
            if line is None or line.strip() in ("exit", "quit"):
                break
            if not line.strip():
                continue
            try:
                await router.dispatch(line)
            except CommandException as e:
                print(f"error: {e}", file=sys.stderr)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Interactive cmdrouter shell")
    parser.add_argument("--log-level", default=None)
    parser.add_argument("--plain-logs", action="store_true")
    parser.add_argument("--prompt", default="> ")
    sys.exit(asyncio.run(run(parser.parse_args())))


if __name__ == "__main__":
    main()
