import logging

import pytest

from cmdrouter.commands.exceptions import InvalidCommandSpecException
from cmdrouter.commands.registry import DEFAULT_DESCRIPTION, CommandRegistry, CommandSpec, EntryPoint
from tests.conftest import make_spec


def noop(*args):
    return None


def test_register_name_and_aliases(command_registry):
    spec = make_spec("sum", aliases=["add", "plus"])
    command_registry.register(spec)
    assert command_registry.get("sum") is spec
    assert command_registry.get("add") is spec
    assert command_registry.get("plus") is spec
    assert command_registry.names() == ["sum", "add", "plus"]


def test_lookup_missing(command_registry):
    assert command_registry.get("nothing") is None


def test_primary_name_registration_overwrites(command_registry):
    first = make_spec("sum")
    second = make_spec("sum")
    command_registry.register(first)
    command_registry.register(second)
    assert command_registry.get("sum") is second


def test_alias_first_writer_wins(command_registry, caplog):
    first = make_spec("sum", aliases=["add"])
    second = make_spec("append", aliases=["add"])
    command_registry.register(first)
    with caplog.at_level(logging.WARNING):
        command_registry.register(second)
    assert command_registry.get("add") is first
    assert command_registry.get("append") is second
    assert "already taken" in caplog.text


def test_primary_name_replaces_alias_key(command_registry):
    aliased = make_spec("sum", aliases=["add"])
    named = make_spec("add")
    command_registry.register(aliased)
    command_registry.register(named)
    assert command_registry.get("add") is named
    assert command_registry.get("sum") is aliased


def test_reregistering_same_spec_is_quiet(command_registry, caplog):
    spec = make_spec("sum", aliases=["add"])
    command_registry.register(spec)
    with caplog.at_level(logging.INFO):
        command_registry.register(spec)
    assert "already taken" not in caplog.text
    assert "re-registered" not in caplog.text


def test_snapshot_is_immutable_copy(command_registry):
    command_registry.register(make_spec("a"))
    snapshot = command_registry.snapshot()
    with pytest.raises(TypeError):
        snapshot["b"] = make_spec("b")
    command_registry.register(make_spec("c"))
    assert "c" not in snapshot
    assert "c" in command_registry


def test_case_sensitive_keys(command_registry):
    command_registry.register(make_spec("Sum"))
    assert command_registry.get("sum") is None


def test_spec_defaults():
    spec = CommandSpec(name="x", entry_points=[EntryPoint(noop)])
    assert spec.description == DEFAULT_DESCRIPTION
    assert spec.aliases == ()
    assert isinstance(spec.entry_points, tuple)


def test_spec_deduplicates_aliases():
    spec = make_spec("x", aliases=["a", "a", "b"])
    assert spec.aliases == ("a", "b")


@pytest.mark.parametrize("name", ["", "   "])
def test_spec_rejects_empty_name(name):
    with pytest.raises(InvalidCommandSpecException):
        make_spec(name)


def test_spec_rejects_empty_alias():
    with pytest.raises(InvalidCommandSpecException):
        make_spec("x", aliases=["ok", ""])


@pytest.mark.parametrize("name", ["sum ", " sum", "\tsum"])
def test_spec_rejects_padded_name(name):
    with pytest.raises(InvalidCommandSpecException):
        make_spec(name)


def test_spec_rejects_padded_alias():
    with pytest.raises(InvalidCommandSpecException):
        make_spec("sum", aliases=[" add"])


def test_spec_requires_entry_points():
    with pytest.raises(InvalidCommandSpecException):
        CommandSpec(name="x", entry_points=())


def test_entry_point_requires_callable():
    with pytest.raises(InvalidCommandSpecException):
        EntryPoint(handler="not callable")


def test_entry_point_arity():
    assert EntryPoint(noop, (int, int)).arity == 2
    assert EntryPoint(noop).arity == 0


def test_duplicate_arity_rejected_and_registry_unchanged(command_registry):
    spec = make_spec("dup", EntryPoint(noop, (int,)), EntryPoint(noop, (str,)))
    with pytest.raises(InvalidCommandSpecException):
        command_registry.register(spec)
    assert "dup" not in command_registry
    assert len(command_registry) == 0


def test_duplicate_arity_allowed_when_configured():
    registry = CommandRegistry(allow_duplicate_arity=True)
    first = EntryPoint(noop, (int,))
    second = EntryPoint(noop, (str,))
    spec = make_spec("dup", first, second)
    registry.register(spec)
    assert registry.get("dup").executors_for(1) == [first, second]
