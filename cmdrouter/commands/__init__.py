"""
Command system: registration, parsing and dispatch of text commands.
"""

from cmdrouter.commands.adapters import AdapterRegistry, Char, ParameterAdapter, SimpleAdapter, Single
from cmdrouter.commands.declarative import build_spec, command, executor
from cmdrouter.commands.dispatcher import CommandDispatcher, DispatchResult
from cmdrouter.commands.exceptions import (
    AdapterNotFoundException,
    CommandException,
    InvalidCommandSpecException,
    InvocationFailureException,
    NoMatchingExecutorException,
    ParameterConversionFailedException,
    UnknownCommandException,
    UnspecifiedCommandException,
)
from cmdrouter.commands.parser import resolve_command, tokenize
from cmdrouter.commands.registry import CommandRegistry, CommandSpec, EntryPoint

__all__ = [
    "AdapterNotFoundException",
    "AdapterRegistry",
    "Char",
    "CommandDispatcher",
    "CommandException",
    "CommandRegistry",
    "CommandSpec",
    "DispatchResult",
    "EntryPoint",
    "InvalidCommandSpecException",
    "InvocationFailureException",
    "NoMatchingExecutorException",
    "ParameterAdapter",
    "ParameterConversionFailedException",
    "SimpleAdapter",
    "Single",
    "UnknownCommandException",
    "UnspecifiedCommandException",
    "build_spec",
    "command",
    "executor",
    "resolve_command",
    "tokenize",
]
