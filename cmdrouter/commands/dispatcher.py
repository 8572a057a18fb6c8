"""Turns an input line into a handler call.

Pipeline: resolve the command name, tokenize the residual text, pick the
entry points whose arity equals the token count, convert every token with
its adapter, then invoke. Synchronous entry points run inline and their
errors propagate; asynchronous ones are scheduled in the background and
their errors only reach the log and the optional error callback.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

from cmdrouter.commands.adapters import AdapterRegistry
from cmdrouter.commands.exceptions import (
    InvocationFailureException,
    NoMatchingExecutorException,
    ParameterConversionFailedException,
    UnknownCommandException,
)
from cmdrouter.commands.parser import ResolvePolicy, resolve_command, tokenize
from cmdrouter.commands.registry import CommandRegistry, CommandSpec, EntryPoint

logger = logging.getLogger(__name__)

BackgroundErrorCallback = Callable[[str, BaseException], None]


@dataclass
class DispatchResult:
    command: str
    args: list[str]
    results: list[Any] = field(default_factory=list)  # return values of synchronous entry points
    scheduled: list[asyncio.Future] = field(default_factory=list)


class CommandDispatcher:
    def __init__(
        self,
        registry: CommandRegistry,
        adapters: AdapterRegistry,
        *,
        resolve_policy: ResolvePolicy = "longest_prefix",
        max_workers: int | None = None,
        on_background_error: BackgroundErrorCallback | None = None,
    ) -> None:
        self._registry = registry
        self._adapters = adapters
        self._resolve_policy = resolve_policy
        self._max_workers = max_workers
        self._on_background_error = on_background_error
        self._executor: ThreadPoolExecutor | None = None
        # Keep references to background work so tasks are not GC'd mid-execution
        self._in_flight: set[asyncio.Future] = set()

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    def resolve(self, text: str | None) -> tuple[CommandSpec, str]:
        """Return the command addressed by ``text`` and the residual argument text."""
        name, residual = resolve_command(text, self._registry.names(), self._resolve_policy)
        spec = self._registry.get(name)
        if spec is None:
            raise UnknownCommandException(name)
        return spec, residual

    def build_arguments(self, entry: EntryPoint, args: list[str]) -> list[Any]:
        # Every adapter must exist before any token is converted.
        for tag in entry.params:
            self._adapters.require(tag)

        values = []
        for tag, token in zip(entry.params, args):
            value = self._adapters.convert(tag, token)
            if value is None:
                raise ParameterConversionFailedException(tag, token)
            values.append(value)
        return values

    async def dispatch(self, text: str | None) -> DispatchResult:
        spec, residual = self.resolve(text)
        args = tokenize(residual)

        entry_points = spec.executors_for(len(args))
        if not entry_points:
            raise NoMatchingExecutorException(spec.name, len(args))

        result = DispatchResult(command=spec.name, args=args)
        for entry in entry_points:
            values = self.build_arguments(entry, args)
            if entry.run_async:
                result.scheduled.append(self._schedule(spec.name, entry, values))
            else:
                result.results.append(await self._invoke(spec.name, entry, values))
        return result

    async def _invoke(self, command_name: str, entry: EntryPoint, values: list[Any]) -> Any:
        logger.debug("Invoking %s for command %s", entry.name, command_name)
        try:
            outcome = entry.handler(*values)
            if inspect.isawaitable(outcome):
                outcome = await outcome
        except Exception as e:
            raise InvocationFailureException(command_name, e) from e
        return outcome

    def _schedule(self, command_name: str, entry: EntryPoint, values: list[Any]) -> asyncio.Future:
        loop = asyncio.get_running_loop()
        if _is_async_callable(entry.handler):
            future = loop.create_task(entry.handler(*values))
        else:
            future = loop.run_in_executor(
                self._get_executor(), functools.partial(_run_blocking, loop, entry.handler, values)
            )
        self._in_flight.add(future)
        future.add_done_callback(functools.partial(self._on_background_done, command_name))
        logger.debug("Scheduled %s for command %s in background", entry.name, command_name)
        return future

    def _on_background_done(self, command_name: str, future: asyncio.Future) -> None:
        self._in_flight.discard(future)
        if future.cancelled():
            return
        error = future.exception()
        if error is None:
            return
        logger.error("Background command %s failed: %s", command_name, error, exc_info=error)
        if self._on_background_error is not None:
            try:
                self._on_background_error(command_name, error)
            except Exception:
                logger.exception("Background error callback failed for %s", command_name)

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self._max_workers, thread_name_prefix="cmdrouter"
            )
        return self._executor

    async def wait_for_background(self, timeout: float | None = 30.0) -> bool:
        """Wait for scheduled background commands. Returns False if some are still running."""
        if not self._in_flight:
            return True
        logger.info("Waiting for %d background command(s) (timeout=%s)", len(self._in_flight), timeout)
        _, pending = await asyncio.wait(list(self._in_flight), timeout=timeout)
        if pending:
            logger.warning("%d background command(s) still running after timeout", len(pending))
        return not pending

    def shutdown(self, wait: bool = True, cancel_futures: bool = False) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait, cancel_futures=cancel_futures)
            self._executor = None


def _is_async_callable(handler: Callable) -> bool:
    return inspect.iscoroutinefunction(handler) or inspect.iscoroutinefunction(
        getattr(handler, "__call__", None)
    )


def _run_blocking(loop: asyncio.AbstractEventLoop, handler: Callable, values: list[Any]) -> Any:
    outcome = handler(*values)
    if inspect.isawaitable(outcome):
        # Wrappers returning a coroutine still need the event loop to run it.
        outcome = asyncio.run_coroutine_threadsafe(_await(outcome), loop).result()
    return outcome


async def _await(awaitable: Any) -> Any:
    return await awaitable
