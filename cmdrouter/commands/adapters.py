"""String-to-type converters used to build handler arguments.

Every adapter turns one raw token into a typed value. When conversion
raises, the adapter's fallback supplies the value instead, so a bad token
degrades to a default rather than aborting the dispatch.
"""

from __future__ import annotations

import logging
import math
import struct
from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, NewType, Protocol, TypeVar

from cmdrouter.commands.exceptions import AdapterNotFoundException

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Tags for the two value kinds Python has no builtin type for.
Char = NewType("Char", str)
Single = NewType("Single", float)


class ParameterAdapter(Protocol[T]):
    def convert(self, token: str) -> T: ...

    def fallback(self, token: str, error: Exception) -> T: ...


@dataclass(frozen=True)
class SimpleAdapter:
    """Adapter built from a conversion function and a fixed fallback value."""

    converter: Callable[[str], Any]
    default: Any = None

    def convert(self, token: str) -> Any:
        return self.converter(token)

    def fallback(self, token: str, error: Exception) -> Any:
        return self.default


class StringAdapter:
    """Identity conversion; the fallback hands back the raw token."""

    def convert(self, token: str) -> str:
        return token

    def fallback(self, token: str, error: Exception) -> str:
        return token


def _to_bool(token: str) -> bool:
    return token.lower() == "true"


def _to_char(token: str) -> str:
    return token[0]


def _to_single(token: str) -> float:
    value = float(token)
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        # Beyond the binary32 range: saturate like IEEE rounding does.
        return math.copysign(math.inf, value)


def builtin_adapters() -> dict[Hashable, ParameterAdapter]:
    return {
        bool: SimpleAdapter(_to_bool, False),
        Char: SimpleAdapter(_to_char, " "),
        float: SimpleAdapter(float, 0.0),
        Single: SimpleAdapter(_to_single, 0.0),
        int: SimpleAdapter(int, 0),
        str: StringAdapter(),
    }


class AdapterRegistry:
    def __init__(self, include_builtins: bool = True) -> None:
        self._adapters: dict[Hashable, ParameterAdapter] = {}
        if include_builtins:
            for tag, adapter in builtin_adapters().items():
                self.register(tag, adapter)

    def register(self, type_tag: Hashable, adapter: ParameterAdapter) -> bool:
        """Insert ``adapter`` for ``type_tag`` unless one is already present.

        The first registration for a tag wins. Returns whether the adapter
        was stored.
        """
        if type_tag in self._adapters:
            logger.warning("Adapter for %s already registered; ignoring", _tag_name(type_tag))
            return False
        self._adapters[type_tag] = adapter
        logger.debug("Registered adapter: %s", _tag_name(type_tag))
        return True

    def get(self, type_tag: Hashable) -> ParameterAdapter | None:
        return self._adapters.get(type_tag)

    def require(self, type_tag: Hashable) -> ParameterAdapter:
        adapter = self._adapters.get(type_tag)
        if adapter is None:
            raise AdapterNotFoundException(type_tag)
        return adapter

    def convert(self, type_tag: Hashable, token: str) -> Any:
        """Convert ``token`` with the adapter for ``type_tag``, applying its fallback on failure."""
        adapter = self.require(type_tag)
        try:
            return adapter.convert(token)
        except Exception as e:
            logger.debug("Converting %r to %s failed (%s); using fallback", token, _tag_name(type_tag), e)
            return adapter.fallback(token, e)

    def snapshot(self) -> Mapping[Hashable, ParameterAdapter]:
        return MappingProxyType(dict(self._adapters))

    def __contains__(self, type_tag: object) -> bool:
        return type_tag in self._adapters

    def __len__(self) -> int:
        return len(self._adapters)


def _tag_name(type_tag: Any) -> str:
    return getattr(type_tag, "__name__", repr(type_tag))
