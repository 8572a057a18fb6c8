import json
import logging

import pytest

from cmdrouter.logging_config import configure_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_logging(capsys):
    configure_logging(level="INFO", json_format=True)
    logger = logging.getLogger("test.json")
    logger.info("hello json")

    captured = capsys.readouterr()
    record = json.loads(captured.err.strip())
    assert record["message"] == "hello json"
    assert record["level"] == "INFO"
    assert record["logger"] == "test.json"
    assert "timestamp" in record


def test_plain_logging(capsys):
    configure_logging(level="INFO", json_format=False)
    logger = logging.getLogger("test.plain")
    logger.info("hello plain")

    captured = capsys.readouterr()
    line = captured.err.strip()
    assert "hello plain" in line
    assert "test.plain" in line
    # Should NOT be JSON
    with pytest.raises(json.JSONDecodeError):
        json.loads(line)


def test_log_level_filtering(capsys):
    configure_logging(level="WARNING", json_format=True)
    logger = logging.getLogger("test.level")
    logger.info("should not appear")
    logger.warning("should appear")

    captured = capsys.readouterr()
    lines = [l for l in captured.err.strip().splitlines() if l]
    assert len(lines) == 1
    record = json.loads(lines[0])
    assert record["message"] == "should appear"


def test_log_file(tmp_path, capsys):
    log_file = tmp_path / "logs" / "cmdrouter.log"
    configure_logging(level="INFO", json_format=True, log_file=str(log_file))
    logging.getLogger("test.file").info("to disk")
    for handler in logging.getLogger().handlers:
        handler.flush()

    record = json.loads(log_file.read_text(encoding="utf-8").strip())
    assert record["message"] == "to disk"
    assert "to disk" in capsys.readouterr().err


async def test_dispatch_logs_are_structured(capsys):
    from cmdrouter import CommandRouter, Settings

    configure_logging(level="INFO", json_format=True)
    async with CommandRouter(Settings(register_help=False)) as router:
        router.register_command(_spec())

    records = [json.loads(l) for l in capsys.readouterr().err.splitlines() if l.strip()]
    assert any(
        r["logger"] == "cmdrouter.router" and r["message"] == "Registered command: ping" for r in records
    )


def _spec():
    from cmdrouter.commands.registry import CommandSpec, EntryPoint

    return CommandSpec(name="ping", entry_points=(EntryPoint(lambda: "pong"),))
