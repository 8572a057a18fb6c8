from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Mapping
from typing import Any

from cmdrouter.commands.adapters import AdapterRegistry, ParameterAdapter
from cmdrouter.commands.builtins import register_builtins
from cmdrouter.commands.declarative import build_spec
from cmdrouter.commands.dispatcher import BackgroundErrorCallback, CommandDispatcher, DispatchResult
from cmdrouter.commands.registry import CommandRegistry, CommandSpec
from cmdrouter.config import Settings

logger = logging.getLogger(__name__)


class CommandRouter:
    """Registry, adapters and dispatcher owned by one host.

    Registration is expected to finish before commands are dispatched
    concurrently; the maps are not locked.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        on_background_error: BackgroundErrorCallback | None = None,
        output: Callable[[str], object] = print,
    ) -> None:
        self.settings = settings or Settings()
        self.adapters = AdapterRegistry()
        self.registry = CommandRegistry(allow_duplicate_arity=self.settings.allow_duplicate_arity)
        self.dispatcher = CommandDispatcher(
            self.registry,
            self.adapters,
            resolve_policy=self.settings.resolve_policy,
            max_workers=self.settings.worker_threads,
            on_background_error=on_background_error,
        )
        if self.settings.register_help:
            register_builtins(self.registry, output)

    def register_command(self, command: CommandSpec | Any) -> CommandSpec:
        """Register a :class:`CommandSpec` or an instance of an ``@command`` class."""
        spec = command if isinstance(command, CommandSpec) else build_spec(command)
        self.registry.register(spec)
        logger.info("Registered command: %s", spec.name)
        return spec

    def register_adapter(self, type_tag: Hashable, adapter: ParameterAdapter) -> bool:
        return self.adapters.register(type_tag, adapter)

    async def dispatch(self, text: str | None) -> DispatchResult:
        return await self.dispatcher.dispatch(text)

    def command_map(self) -> Mapping[str, CommandSpec]:
        return self.registry.snapshot()

    def adapter_map(self) -> Mapping[Hashable, ParameterAdapter]:
        return self.adapters.snapshot()

    async def wait_for_background(self, timeout: float | None = None) -> bool:
        if timeout is None:
            timeout = self.settings.background_timeout
        return await self.dispatcher.wait_for_background(timeout)

    async def aclose(self) -> None:
        drained = await self.wait_for_background()
        # Jobs that outlived the timeout are abandoned, not joined on the loop thread.
        self.dispatcher.shutdown(wait=drained, cancel_futures=not drained)

    async def __aenter__(self) -> CommandRouter:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
