from __future__ import annotations

import functools
from collections.abc import Callable

from cmdrouter.commands.registry import CommandRegistry, CommandSpec, EntryPoint

HELP_NAME = "help"
HELP_ALIASES = ("?",)
HELP_DESCRIPTION = "Prints a list of all registered commands."


def cmd_help(registry: CommandRegistry, output: Callable[[str], object] = print) -> str:
    """List every registered name and alias with the description of its command."""
    commands = registry.snapshot()
    blocks = [
        f"Command: {key}\nDescription: {spec.description}\n"
        for key, spec in sorted(commands.items())
    ]
    text = "\n".join(blocks)
    output(text)
    return text


def help_spec(registry: CommandRegistry, output: Callable[[str], object] = print) -> CommandSpec:
    return CommandSpec(
        name=HELP_NAME,
        aliases=HELP_ALIASES,
        description=HELP_DESCRIPTION,
        entry_points=(EntryPoint(handler=functools.partial(cmd_help, registry, output)),),
    )


def register_builtins(registry: CommandRegistry, output: Callable[[str], object] = print) -> None:
    registry.register(help_spec(registry, output))
