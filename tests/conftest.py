import pytest

from cmdrouter.commands.adapters import AdapterRegistry
from cmdrouter.commands.dispatcher import CommandDispatcher
from cmdrouter.commands.registry import CommandRegistry, CommandSpec, EntryPoint
from cmdrouter.config import Settings
from cmdrouter.router import CommandRouter

TEST_SETTINGS = Settings(
    log_level="DEBUG",
    log_json=False,
    background_timeout=5.0,
)


@pytest.fixture
def settings() -> Settings:
    return TEST_SETTINGS


@pytest.fixture
def adapters() -> AdapterRegistry:
    return AdapterRegistry()


@pytest.fixture
def command_registry() -> CommandRegistry:
    return CommandRegistry()


@pytest.fixture
def dispatcher(command_registry, adapters):
    d = CommandDispatcher(command_registry, adapters)
    yield d
    d.shutdown()


@pytest.fixture
async def router(settings):
    async with CommandRouter(settings) as r:
        yield r


def make_spec(name: str, *entry_points: EntryPoint, aliases=(), description="test command") -> CommandSpec:
    return CommandSpec(
        name=name,
        aliases=tuple(aliases),
        description=description,
        entry_points=entry_points or (EntryPoint(handler=lambda: None),),
    )
