"""Register named text commands, parse typed arguments and dispatch to handlers."""

from cmdrouter.config import Settings
from cmdrouter.router import CommandRouter

__all__ = ["CommandRouter", "Settings"]
