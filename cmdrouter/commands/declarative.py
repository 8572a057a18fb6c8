"""
Decorator-based declarations for command classes.

A class marked with :func:`command` and methods marked with
:func:`executor` can be turned into a :class:`CommandSpec`::

    @command("sum", aliases=["add"], description="Adds two numbers.")
    class Sum:
        @executor()
        def total(self, a: int, b: int) -> None:
            print(a + b)

    router.register_command(Sum())

Parameter type tags come from the method's annotations unless they are
passed to :func:`executor` explicitly.
"""

from __future__ import annotations

import inspect
import typing
from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass
from typing import Any

from cmdrouter.commands.exceptions import InvalidCommandSpecException
from cmdrouter.commands.registry import DEFAULT_DESCRIPTION, CommandSpec, EntryPoint

_COMMAND_ATTR = "__cmdrouter_command__"
_EXECUTOR_ATTR = "__cmdrouter_executor__"


@dataclass(frozen=True)
class CommandMeta:
    name: str
    aliases: tuple[str, ...] = ()
    description: str = DEFAULT_DESCRIPTION


@dataclass(frozen=True)
class ExecutorMeta:
    params: tuple[Hashable, ...] | None = None
    run_async: bool = False


def command(name: str, aliases: Iterable[str] = (), description: str = DEFAULT_DESCRIPTION):
    """Class decorator declaring the command name, aliases and description."""

    def _register(cls: type) -> type:
        if not isinstance(cls, type):
            raise TypeError("command expects a class")
        setattr(cls, _COMMAND_ATTR, CommandMeta(name=name, aliases=tuple(aliases), description=description))
        return cls

    return _register


def executor(*params: Hashable, run_async: bool = False):
    """Method decorator marking a command entry point."""

    def _mark(func: Callable) -> Callable:
        setattr(func, _EXECUTOR_ATTR, ExecutorMeta(params=params or None, run_async=run_async))
        return func

    return _mark


def build_spec(instance: Any) -> CommandSpec:
    """Build a :class:`CommandSpec` from an instance of a :func:`command` class.

    Entry points are bound to ``instance`` and listed in method definition
    order, base classes first.
    """
    cls = type(instance)
    meta: CommandMeta | None = getattr(cls, _COMMAND_ATTR, None)
    if meta is None:
        raise InvalidCommandSpecException(f"{cls.__name__} is not declared with @command")

    entry_points = []
    for attr, func in _executor_functions(cls):
        marker: ExecutorMeta = getattr(func, _EXECUTOR_ATTR)
        params = marker.params if marker.params is not None else _annotated_params(func)
        if marker.params is not None and len(marker.params) != _positional_count(func):
            raise InvalidCommandSpecException(
                f"{cls.__name__}.{attr} declares {len(marker.params)} type(s) "
                f"but takes {_positional_count(func)} argument(s)"
            )
        entry_points.append(
            EntryPoint(handler=getattr(instance, attr), params=params, run_async=marker.run_async)
        )

    if not entry_points:
        raise InvalidCommandSpecException(f"{cls.__name__} has no @executor methods")
    return CommandSpec(
        name=meta.name,
        aliases=meta.aliases,
        description=meta.description,
        entry_points=tuple(entry_points),
    )


def _executor_functions(cls: type) -> list[tuple[str, Callable]]:
    found: dict[str, Callable] = {}
    for klass in reversed(cls.__mro__):
        for attr, value in vars(klass).items():
            if isinstance(value, (staticmethod, classmethod)):
                value = value.__func__
            if hasattr(value, _EXECUTOR_ATTR):
                found[attr] = value
            elif attr in found:
                # Overridden without the decorator
                del found[attr]
    return list(found.items())


def _handler_parameters(func: Callable) -> list[inspect.Parameter]:
    params = list(inspect.signature(func).parameters.values())
    if params and params[0].name in ("self", "cls"):
        params = params[1:]
    for p in params:
        if p.kind not in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD):
            raise InvalidCommandSpecException(
                f"{func.__qualname__}: parameter {p.name} must be positional"
            )
    return params


def _positional_count(func: Callable) -> int:
    return len(_handler_parameters(func))


def _annotated_params(func: Callable) -> tuple[Hashable, ...]:
    try:
        hints = typing.get_type_hints(func)
    except NameError as e:
        raise InvalidCommandSpecException(f"{func.__qualname__}: cannot resolve annotations ({e})") from e
    tags = []
    for p in _handler_parameters(func):
        if p.name not in hints:
            raise InvalidCommandSpecException(
                f"{func.__qualname__}: parameter {p.name} has no type annotation"
            )
        tags.append(hints[p.name])
    return tuple(tags)
