from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Literal

from cmdrouter.commands.exceptions import UnknownCommandException, UnspecifiedCommandException

ResolvePolicy = Literal["longest_prefix", "first_word"]

_TOKEN_RE = re.compile(r'"([^"]*)"|\S+')


def tokenize(text: str) -> list[str]:
    """Split ``text`` on whitespace, keeping double-quoted spans as single tokens.

    Quotes are stripped and the quoted content is kept verbatim; there is no
    escape processing.

        'a "b c" d' -> ['a', 'b c', 'd']
    """
    tokens = []
    for match in _TOKEN_RE.finditer(text):
        quoted = match.group(1)
        tokens.append(quoted if quoted is not None else match.group(0))
    return tokens


def resolve_command(
    text: str | None,
    names: Iterable[str],
    policy: ResolvePolicy = "longest_prefix",
) -> tuple[str, str]:
    """Split an input line into ``(command_name, residual_text)``.

    ``names`` are every registered command name and alias. The longest key
    that equals the trimmed line, or is followed by a space in it, wins; keys
    of equal length are ordered lexicographically. The residual is the
    trimmed line with the matched key removed from its front.
    """
    if text is None or not text.strip():
        raise UnspecifiedCommandException()
    line = text.strip()
    keys = list(names)

    if policy == "first_word" and not any(_has_space(k) for k in keys):
        parts = line.split(None, 1)
        if parts[0] not in keys:
            raise UnknownCommandException(line)
        return parts[0], parts[1] if len(parts) > 1 else ""

    padded = line + " "
    matches = [k for k in keys if k and (line == k or padded.startswith(k + " "))]
    if not matches:
        raise UnknownCommandException(line)
    name = min(matches, key=lambda k: (-len(k), k))
    return name, line[len(name):].strip()


def _has_space(key: str) -> bool:
    return any(c.isspace() for c in key)
