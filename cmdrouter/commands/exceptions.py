from __future__ import annotations

from typing import Any


class CommandException(Exception):
    """Base exception for command resolution, registration and dispatch errors."""

    pass


class InvalidCommandSpecException(CommandException):
    """Raised at registration time when a command declaration is incomplete or inconsistent."""

    pass


class UnspecifiedCommandException(CommandException):
    """Raised when the input line is empty or blank."""

    def __init__(self, message: str = "No command specified."):
        super().__init__(message)


class UnknownCommandException(CommandException):
    def __init__(self, command_line: str):
        self.command_line = command_line
        super().__init__(f"Unknown command: {command_line}")


class NoMatchingExecutorException(CommandException):
    def __init__(self, command_name: str, arity: int):
        self.command_name = command_name
        self.arity = arity
        super().__init__(f"Command {command_name} has no executor taking {arity} argument(s)")


class AdapterNotFoundException(CommandException):
    def __init__(self, type_tag: Any):
        self.type_tag = type_tag
        name = getattr(type_tag, "__name__", repr(type_tag))
        super().__init__(f"No adapter found for parameter type: {name}")


class ParameterConversionFailedException(CommandException):
    """Raised when an adapter yields no usable value, even after its fallback."""

    def __init__(self, type_tag: Any, token: str):
        self.type_tag = type_tag
        self.token = token
        name = getattr(type_tag, "__name__", repr(type_tag))
        super().__init__(f"Failed to convert parameter {token!r} to {name}")


class InvocationFailureException(CommandException):
    """Wraps an error raised by a handler on the synchronous path.

    The original error is available as ``__cause__`` and ``error``.
    """

    def __init__(self, command_name: str, error: BaseException):
        self.command_name = command_name
        self.error = error
        super().__init__(f"Command {command_name} failed: {error}")
